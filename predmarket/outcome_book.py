"""Price-time priority order book for one outcome of a market."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sortedcontainers import SortedDict

from .models import Order, OrderSide, OrderStatus

_ZERO = Decimal(0)


@dataclass
class OrderBookEntry:
    """An order resting at one price level."""

    user_id: UUID
    order_id: UUID
    price: Decimal
    total_quantity: Decimal
    filled_quantity: Decimal
    timestamp: datetime


def _remaining(entry: OrderBookEntry) -> Decimal:
    return entry.total_quantity - entry.filled_quantity


@dataclass
class PriceLevel:
    """All orders at one price, in arrival order, with their unfilled total."""

    orders: list[OrderBookEntry] = field(default_factory=list)
    total_quantity: Decimal = _ZERO


@dataclass(frozen=True)
class OrderBookMatchedOutput:
    """One fill between an incoming order and a resting one."""

    order_id: UUID
    opposite_order_id: UUID
    matched_quantity: Decimal
    price: Decimal
    opposite_order_total_quantity: Decimal
    opposite_order_filled_quantity: Decimal


class OutcomeBook:
    """Bids and asks keyed by price, kept in ascending price order."""

    def __init__(self) -> None:
        self.bids: SortedDict = SortedDict()
        self.asks: SortedDict = SortedDict()

    def __repr__(self) -> str:
        return f"OutcomeBook(bids={dict(self.bids)!r}, asks={dict(self.asks)!r})"

    def _levels(self, side: OrderSide) -> SortedDict:
        return self.bids if side is OrderSide.BUY else self.asks

    def add_order(self, order: Order) -> None:
        """Rest an order on its side of the book without matching it."""
        levels = self._levels(order.side)
        level = levels.get(order.price)
        if level is None:
            level = levels[order.price] = PriceLevel()
        level.orders.append(
            OrderBookEntry(
                user_id=order.user_id,
                order_id=order.id,
                price=order.price,
                total_quantity=order.quantity,
                filled_quantity=order.filled_quantity,
                timestamp=order.created_at,
            )
        )
        level.total_quantity += order.quantity - order.filled_quantity

    def best_bid(self) -> Decimal | None:
        """Highest price a buyer offers, if any."""
        return self.bids.peekitem(-1)[0] if self.bids else None

    def best_ask(self) -> Decimal | None:
        """Lowest price a seller asks, if any."""
        return self.asks.peekitem(0)[0] if self.asks else None

    def _find(
        self, order_id: UUID, side: OrderSide, price: Decimal
    ) -> tuple[SortedDict, PriceLevel, int] | None:
        levels = self._levels(side)
        level = levels.get(price)
        if level is None:
            return None
        for index, entry in enumerate(level.orders):
            if entry.order_id == order_id:
                return levels, level, index
        return None

    def remove_order(self, order_id: UUID, side: OrderSide, price: Decimal) -> bool:
        """Take an order out of the book; False when it is not there."""
        found = self._find(order_id, side, price)
        if found is None:
            return False
        levels, level, index = found
        removed = level.orders.pop(index)
        level.total_quantity -= _remaining(removed)
        if not level.orders:
            del levels[price]
        return True

    def update_order(
        self,
        order_id: UUID,
        side: OrderSide,
        current_price: Decimal,
        new_filled_quantity: Decimal,
    ) -> bool:
        """Set the filled quantity of a resting order; False when it is not there."""
        found = self._find(order_id, side, current_price)
        if found is None:
            return False
        levels, level, index = found
        entry = level.orders[index]
        previous = _remaining(entry)
        entry.filled_quantity = new_filled_quantity
        level.total_quantity += _remaining(entry) - previous
        if level.total_quantity <= _ZERO:
            del levels[current_price]
        return True

    def match_order(self, order: Order) -> list[OrderBookMatchedOutput]:
        """Fill an open order against the opposite side, best price first.

        The order's filled quantity and status are updated in place; filled
        resting orders leave the book.
        """
        matches: list[OrderBookMatchedOutput] = []
        if order.status is not OrderStatus.OPEN:
            return matches

        is_buy = order.side is OrderSide.BUY
        book = self.asks if is_buy else self.bids
        prices = list(book.keys()) if is_buy else list(reversed(book.keys()))

        remaining = order.remaining()
        if remaining <= _ZERO:
            return matches

        for price in prices:
            if (is_buy and price > order.price) or (not is_buy and price < order.price):
                break
            level = book[price]
            filled: set[int] = set()
            for entry in level.orders:
                if entry.order_id == order.id or entry.user_id == order.user_id:
                    continue
                available = _remaining(entry)
                if available <= _ZERO:
                    continue
                quantity = min(remaining, available)
                entry.filled_quantity += quantity
                order.filled_quantity += quantity
                remaining -= quantity
                matches.append(
                    OrderBookMatchedOutput(
                        order_id=order.id,
                        opposite_order_id=entry.order_id,
                        matched_quantity=quantity,
                        price=price,
                        opposite_order_total_quantity=entry.total_quantity,
                        opposite_order_filled_quantity=entry.filled_quantity,
                    )
                )
                if entry.filled_quantity == entry.total_quantity:
                    filled.add(id(entry))
                if remaining == _ZERO:
                    break

            level.orders = [entry for entry in level.orders if id(entry) not in filled]
            level.total_quantity = sum((_remaining(e) for e in level.orders), _ZERO)
            if not level.orders:
                del book[price]
            if remaining == _ZERO:
                break

        if order.filled_quantity == order.quantity:
            order.status = OrderStatus.FILLED
        return matches