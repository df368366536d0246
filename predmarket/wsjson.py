"""JSON helpers and payload types exchanged over the websocket service."""

from __future__ import annotations

import enum
import json
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Generic, TypeVar
from uuid import UUID

from .config import ChannelType

T = TypeVar("T")


def _default(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, enum.Enum):
        return value.value
    raise TypeError(f"cannot serialize {type(value).__name__}")


def to_json_string(value: Any) -> str:
    """Serialize to compact JSON."""
    return json.dumps(value, separators=(",", ":"), default=_default)


def from_json_str(s: str | bytes) -> Any:
    """Parse JSON text, raising ValueError when it is malformed."""
    return json.loads(s)


@dataclass
class GenericWrapper(Generic[T]):
    """A payload tagged with the channel it belongs to."""

    channel: ChannelType
    data: T


@dataclass(frozen=True)
class PricePosterData:
    """Current prices of both outcomes of one market."""

    market_id: UUID
    yes_price: Decimal
    no_price: Decimal

    def to_dict(self) -> dict[str, str]:
        return {
            "market_id": str(self.market_id),
            "yes_price": str(self.yes_price),
            "no_price": str(self.no_price),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PricePosterData:
        try:
            market_id = UUID(str(data["market_id"]))
            yes_price = Decimal(str(data["yes_price"]))
            no_price = Decimal(str(data["no_price"]))
        except KeyError as exc:
            raise ValueError(f"missing field {exc.args[0]}") from None
        except InvalidOperation:
            raise ValueError("invalid decimal value") from None
        return cls(market_id=market_id, yes_price=yes_price, no_price=no_price)