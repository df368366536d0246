# predmarket

Building blocks for a binary (YES/NO) prediction market.

- **Order books** (`predmarket.outcome_book`, `predmarket.market_book`,
  `predmarket.global_book`). `OutcomeBook` matches orders by price first and by
  arrival second. An order never matches another order from the same user. `MarketBook`
  holds one book for each outcome, along with the current YES and NO prices.
  `GlobalMarketBook` holds one `MarketBook` for each market id and creates it the first
  time an order for that market arrives.
- **Pricing** (`predmarket.pricing.market_prices`). When a market's liquidity parameter
  `b` is greater than zero, the prices follow the funds on the buy side of each book:
  price times unfilled quantity. `b` damps how far they move. When `b` is zero or less,
  the prices come from the midpoints of the two books. An outcome that has a book on only
  one side is capped at 0.95. When no funds or no orders exist, both prices are 0.5.
- **WebSocket fan-out server** (`predmarket.server`, `predmarket.handler`). Clients
  subscribe to the `price_update` channel. Data that a client posts to `price_poster` is
  forwarded to every `price_update` subscriber except the client that posted it.
- **Helpers**:
  - AES-256-GCM `encrypt` and `decrypt` in `predmarket.symmetric`.
  - Environment configuration with `EnvVarConfig` in `predmarket.config`.
  - JSON helpers and `PricePosterData` in `predmarket.wsjson`.
  - Client message parsing with `parse_client_message` in `predmarket.messages`.

## Installation

```
pip install .
```

## Matching orders

```python
import uuid
from decimal import Decimal

from predmarket.global_book import GlobalMarketBook
from predmarket.models import Order, OrderSide, Outcome

book = GlobalMarketBook()
market_id = uuid.uuid4()

def order(side):
    return Order(
        market_id=market_id, user_id=uuid.uuid4(), outcome=Outcome.YES,
        side=side, price=Decimal("0.5"), quantity=Decimal("10"),
    )

book.process_order(order(OrderSide.BUY), Decimal("100"))
matches = book.process_order(order(OrderSide.SELL), Decimal("100"))
print(matches[0].matched_quantity)                         # 10
print(book.get_market_price(market_id, Outcome.YES))
```

`process_order` updates the incoming order in place. It sets `filled_quantity`, and it
sets `status` to `FILLED` once the order is completely filled. Any part of the order
that is still open rests in the book. `get_market_price` returns `None` for a market it
does not know.

## Running the WebSocket server

```
predmarket-ws [--host HOST] [--port PORT]
```

By default the server listens on host `::` and port 4010.

- `GET /` answers with a greeting.
- `/ws` accepts WebSocket connections.
- Any other path returns 404.

Clients send JSON text messages of this form:

```json
{"id": null, "payload": {"type": "Subscribe", "data": {"channel": "price_update", "params": {}}}}
{"id": null, "payload": {"type": "Post", "data": {"channel": "price_poster", "data": {"yes_price": "0.6"}}}}
{"id": null, "payload": {"type": "Unsubscribe", "data": {"channel": "price_update"}}}
```

The server replies to each message as follows:

- `Subscribe` gets `{"channel":...,"params":...,"type":"subscribed"}`.
- `Unsubscribe` gets `{"channel":...,"type":"unsubscribed"}`.
- `Post` gets `Data posted to channel <channel>. Served <n> clients.`
- A message that cannot be parsed gets `Invalid message format`, and the session goes on.
- A message that names an unknown channel gets `Invalid channel`, and the session ends.

The server pings each client as soon as it connects and again every 30 seconds after
that. When any client disconnects, all subscriptions are cleared.

To start the server from code, call `predmarket.server.serve(host, port, state)` and use
the result with `async with`.

## Configuration

`EnvVarConfig.from_env()` reads the following variables. It first loads a `.env` file if
one is present. You can also pass a mapping to read from instead.

- `JWT_SECRET`
- `SECRET_KEY`
- `REDIS_URL`
- `DATABASE_URL`
- `GOOGLE_CLIENT_ID`
- `NC_URL`
- `INFLUXDB_URL`
- `KAFKA_URL`
- `WS_SERVER_URL`

If a variable is missing, it raises `ValueError` for the first one that is missing.

`predmarket.symmetric.encrypt(data, key=None)` and `decrypt(data, key=None)` take a key of
exactly 32 bytes. When no key is given, they use `SECRET_KEY`. The output is the
ciphertext with a 12-byte nonce appended. `decrypt` raises `ValueError` on any failure.

## What this package does not do

- Order books and prices live only in memory. Nothing is saved to a database.
- There is no HTTP API for creating markets or orders, and no user login or accounts.
- There are no balances or holdings.
- It does not connect to a message queue.
- The WebSocket server does not compute prices. It only forwards what clients post.

## Tests

```
pip install .[test]
pytest
```