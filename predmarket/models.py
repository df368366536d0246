"""Core order types shared by the order books."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4


class OrderSide(str, enum.Enum):
    """Which side of the book an order rests on."""

    BUY = "buy"
    SELL = "sell"


class OrderStatus(str, enum.Enum):
    """Lifecycle state of an order."""

    OPEN = "open"
    FILLED = "filled"
    CANCELLED = "cancelled"
    UNSPECIFIED = "unspecified"


class Outcome(str, enum.Enum):
    """The outcome of a binary market an order trades."""

    YES = "yes"
    NO = "no"
    UNSPECIFIED = "unspecified"


def _as_decimal(value: object) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)  # type: ignore[arg-type]


def _now() -> datetime:
    return datetime.now()


@dataclass
class Order:
    """A limit order on one outcome of a market."""

    market_id: UUID
    user_id: UUID
    outcome: Outcome
    side: OrderSide
    price: Decimal
    quantity: Decimal
    filled_quantity: Decimal = Decimal(0)
    status: OrderStatus = OrderStatus.OPEN
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        self.price = _as_decimal(self.price)
        self.quantity = _as_decimal(self.quantity)
        self.filled_quantity = _as_decimal(self.filled_quantity)

    def remaining(self) -> Decimal:
        """Quantity still waiting to be filled."""
        return self.quantity - self.filled_quantity