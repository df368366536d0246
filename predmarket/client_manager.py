"""Channel subscriptions of connected websocket clients."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from .config import ChannelType

SendFunc = Callable[[str], Awaitable[None]]
ClientData = tuple[SendFunc, Any]


class SubscriptionAndClientManager:
    """Maps each channel to its subscribed clients and their parameters."""

    def __init__(self) -> None:
        self.subscription: dict[ChannelType, dict[UUID, ClientData]] = {}

    def __repr__(self) -> str:
        counts = {channel.value: len(clients) for channel, clients in self.subscription.items()}
        return f"SubscriptionAndClientManager({counts!r})"

    def add_client(
        self, channel: ChannelType, client_id: UUID, send: SendFunc, params: Any
    ) -> None:
        """Subscribe a client, replacing an earlier subscription to the same channel."""
        self.subscription.setdefault(channel, {})[client_id] = (send, params)

    def remove_client(self, channel: ChannelType, client_id: UUID) -> None:
        """Unsubscribe a client; a channel left with no clients is dropped."""
        clients = self.subscription.get(channel)
        if clients is None:
            return
        clients.pop(client_id, None)
        if not clients:
            del self.subscription[channel]

    def get_clients(self, channel: ChannelType) -> dict[UUID, ClientData] | None:
        """The clients of a channel, or None when it has none."""
        return self.subscription.get(channel)

    def cleanup(self) -> None:
        """Drop every subscription."""
        self.subscription.clear()


@dataclass
class WebSocketAppState:
    """Shared state of the websocket service; hold ``lock`` while changing it."""

    client_manager: SubscriptionAndClientManager = field(
        default_factory=SubscriptionAndClientManager
    )
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)