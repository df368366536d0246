"""All market books, keyed by market id."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from .market_book import MarketBook
from .models import Order, Outcome
from .outcome_book import OrderBookMatchedOutput


class GlobalMarketBook:
    """Holds one MarketBook per market, created on first use."""

    def __init__(self) -> None:
        self.markets: dict[UUID, MarketBook] = {}

    def __repr__(self) -> str:
        return f"GlobalMarketBook(markets={len(self.markets)})"

    def _market(self, market_id: UUID, liquidity_b: Decimal) -> MarketBook:
        market = self.markets.get(market_id)
        if market is None:
            market = self.markets[market_id] = MarketBook(liquidity_b)
        return market

    def process_order(
        self, order: Order, liquidity_b: Decimal | int | str
    ) -> list[OrderBookMatchedOutput]:
        """Match an order in its market's book, creating the market if needed.

        ``liquidity_b`` is used only when the market is created.
        """
        b = liquidity_b if isinstance(liquidity_b, Decimal) else Decimal(liquidity_b)
        return self._market(order.market_id, b).process_order(order)

    def get_market_price(self, market_id: UUID, outcome: Outcome) -> Decimal | None:
        """Current price of an outcome, or None when the market is unknown."""
        market = self.markets.get(market_id)
        if market is None:
            return None
        if outcome is Outcome.YES:
            return market.current_yes_price
        if outcome is Outcome.NO:
            return market.current_no_price
        return Decimal(0)