"""Outcome prices of a binary market derived from its two order books."""

from __future__ import annotations

from decimal import Decimal

from .outcome_book import OutcomeBook

_ZERO = Decimal(0)
_ONE = Decimal(1)
_TWO = Decimal(2)
_EVEN = Decimal("0.5")
_CAP = Decimal("0.95")


def total_funds(book: OutcomeBook) -> Decimal:
    """Money committed by buyers: price times unfilled quantity over all bids.

    Sellers offer shares rather than money, so asks do not count.
    """
    return sum(
        (price * level.total_quantity for price, level in book.bids.items()),
        _ZERO,
    )


def midpoint_price(book: OutcomeBook) -> Decimal | None:
    """Midpoint of best bid and best ask, or whichever one exists, or None."""
    bid = book.best_bid()
    ask = book.best_ask()
    if bid is not None and ask is not None:
        return (bid + ask) / _TWO
    if bid is not None:
        return bid
    return ask


def _liquidity_prices(
    liquidity_b: Decimal, yes_book: OutcomeBook, no_book: OutcomeBook
) -> tuple[Decimal, Decimal]:
    funds_yes = total_funds(yes_book)
    funds_no = total_funds(no_book)
    funds = funds_yes + funds_no
    if funds <= _ZERO:
        return _EVEN, _EVEN
    denominator = liquidity_b * _TWO + funds
    yes_weight = (liquidity_b + funds_yes) / denominator
    no_weight = (liquidity_b + funds_no) / denominator
    total_weight = yes_weight + no_weight
    return yes_weight / total_weight, no_weight / total_weight


def _midpoint_prices(
    yes_book: OutcomeBook, no_book: OutcomeBook
) -> tuple[Decimal, Decimal]:
    yes_mid = midpoint_price(yes_book)
    no_mid = midpoint_price(no_book)
    if yes_mid is not None and no_mid is not None:
        total = yes_mid + no_mid
        if total > _ZERO:
            return yes_mid / total, no_mid / total
        return _EVEN, _EVEN
    if yes_mid is not None:
        yes_price = min(yes_mid, _CAP)
        return yes_price, _ONE - yes_price
    if no_mid is not None:
        no_price = min(no_mid, _CAP)
        return _ONE - no_price, no_price
    return _EVEN, _EVEN


def market_prices(
    liquidity_b: Decimal | int | str,
    yes_book: OutcomeBook,
    no_book: OutcomeBook,
) -> tuple[Decimal, Decimal]:
    """Return the (yes, no) prices of a market.

    With positive liquidity the prices follow the funds bid on each outcome,
    damped by the liquidity parameter; otherwise they come from the books'
    midpoints, a lone outcome being capped at 0.95.
    """
    b = liquidity_b if isinstance(liquidity_b, Decimal) else Decimal(liquidity_b)
    if b > _ZERO:
        return _liquidity_prices(b, yes_book, no_book)
    return _midpoint_prices(yes_book, no_book)