"""Order books and current prices of one binary market."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from .models import Order, OrderSide, OrderStatus, Outcome
from .outcome_book import OrderBookMatchedOutput, OutcomeBook
from .pricing import market_prices

_EVEN = Decimal("0.5")


class MarketBook:
    """The YES and NO books of a market and the prices they imply.

    ``liquidity_b`` is the liquidity parameter: the higher it is, the more
    slowly prices move as funds arrive.
    """

    def __init__(self, liquidity_b: Decimal | int | str) -> None:
        self.liquidity_b = (
            liquidity_b if isinstance(liquidity_b, Decimal) else Decimal(liquidity_b)
        )
        self.yes_order_book = OutcomeBook()
        self.no_order_book = OutcomeBook()
        self.current_yes_price = _EVEN
        self.current_no_price = _EVEN

    def __repr__(self) -> str:
        return (
            f"MarketBook(liquidity_b={self.liquidity_b}, "
            f"yes={self.current_yes_price}, no={self.current_no_price})"
        )

    def get_order_book(self, outcome: Outcome) -> OutcomeBook | None:
        """The book for an outcome, or None for an unspecified outcome."""
        if outcome is Outcome.YES:
            return self.yes_order_book
        if outcome is Outcome.NO:
            return self.no_order_book
        return None

    def _refresh_prices(self) -> None:
        self.current_yes_price, self.current_no_price = market_prices(
            self.liquidity_b, self.yes_order_book, self.no_order_book
        )

    def add_order(self, order: Order) -> None:
        """Rest an order in its outcome's book without matching it."""
        book = self.get_order_book(order.outcome)
        if book is not None:
            book.add_order(order)
        self._refresh_prices()

    def process_order(self, order: Order) -> list[OrderBookMatchedOutput]:
        """Match an order, rest what is left if it stays open, and reprice."""
        book = self.get_order_book(order.outcome)
        matches = book.match_order(order) if book is not None else []
        if order.status is OrderStatus.OPEN:
            self.add_order(order)
        self._refresh_prices()
        return matches

    def update_order(
        self,
        order_id: UUID,
        side: OrderSide,
        outcome: Outcome,
        price: Decimal,
        new_filled_quantity: Decimal,
    ) -> bool:
        """Set a resting order's filled quantity; False when it is not found."""
        book = self.get_order_book(outcome)
        if book is None:
            return False
        updated = book.update_order(order_id, side, price, new_filled_quantity)
        if updated:
            self._refresh_prices()
        return updated

    def remove_order(
        self, order_id: UUID, side: OrderSide, outcome: Outcome, price: Decimal
    ) -> bool:
        """Take a resting order out; False when it is not found."""
        book = self.get_order_book(outcome)
        if book is None:
            return False
        removed = book.remove_order(order_id, side, price)
        if removed:
            self._refresh_prices()
        return removed