"""Per-connection message handling of the websocket service."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterable, Awaitable, Callable
from typing import Any
from uuid import UUID, uuid4

from websockets.exceptions import ConnectionClosed

from .client_manager import SendFunc, WebSocketAppState
from .config import ChannelType
from .messages import MessageFormatError, Post, Subscribe, Unsubscribe, parse_client_message

logger = logging.getLogger(__name__)

HEARTBEAT_INTERVAL = 30.0


def _dump(value: Any) -> str:
    """Compact JSON with object keys in sorted order."""
    return json.dumps(value, separators=(",", ":"), sort_keys=True)


async def _reply(send: SendFunc, text: str, client_id: UUID, what: str) -> None:
    try:
        await send(text)
    except Exception as exc:  # noqa: BLE001 - a failed send must not end the session
        logger.error("Failed to send %s to client %s: %s", what, client_id, exc)


async def process_channel_request(
    channel: ChannelType, client_id: UUID, params: Any, state: WebSocketAppState
) -> int:
    """Act on data posted to a channel and return how many clients were served.

    Data posted on the price poster channel goes to every price update
    subscriber except the poster.
    """
    if channel is not ChannelType.PRICE_POSTER:
        logger.error("Unsupported channel type: %s", channel)
        return 0

    served = 0
    text = _dump(params)
    async with state.lock:
        clients = state.client_manager.get_clients(ChannelType.PRICE_UPDATE)
        if clients is None:
            logger.error("No subscribers found for PriceUpdate channel")
            return 0
        for subscriber_id, (send, _) in list(clients.items()):
            if subscriber_id == client_id:
                continue
            try:
                await send(text)
            except Exception as exc:  # noqa: BLE001
                logger.error("Failed to send price update to client %s: %s", subscriber_id, exc)
                continue
            served += 1
    return served


async def handle_message(
    messages: AsyncIterable[str | bytes],
    send: SendFunc,
    client_id: UUID,
    state: WebSocketAppState,
) -> None:
    """Serve one client's messages until the stream ends.

    A message naming an unknown channel ends the session.
    """
    async for raw in messages:
        if not isinstance(raw, str):
            logger.info("Received unsupported message type from client %s: %r", client_id, raw)
            continue
        try:
            message = parse_client_message(raw)
        except MessageFormatError as exc:
            logger.error("Failed to parse ClientMessage from client %s: %s", client_id, exc)
            await _reply(send, "Invalid message format", client_id, "error response")
            continue

        payload = message.payload
        try:
            channel = ChannelType.from_str(payload.channel)
        except ValueError:
            logger.error("Invalid channel type from client %s: %s", client_id, payload.channel)
            await _reply(send, "Invalid channel", client_id, "error response")
            return

        if isinstance(payload, Subscribe):
            logger.info(
                "Client %s subscribed to channel: %s, params: %r",
                client_id,
                payload.channel,
                payload.params,
            )
            async with state.lock:
                state.client_manager.add_client(channel, client_id, send, payload.params)
            confirmation = _dump(
                {"type": "subscribed", "channel": payload.channel, "params": payload.params}
            )
            await _reply(send, confirmation, client_id, "subscription confirmation")
        elif isinstance(payload, Post):
            logger.info(
                "Client %s posted data to channel: %s, data: %r",
                client_id,
                payload.channel,
                payload.data,
            )
            served = await process_channel_request(channel, client_id, payload.data, state)
            logger.info(
                "Processed post request from client %s on channel: %s", client_id, payload.channel
            )
            await _reply(
                send,
                f"Data posted to channel {payload.channel}. Served {served} clients.",
                client_id,
                "post confirmation",
            )
        elif isinstance(payload, Unsubscribe):
            logger.info("Client %s unsubscribed from channel: %s", client_id, payload.channel)
            async with state.lock:
                state.client_manager.remove_client(channel, client_id)
            confirmation = _dump({"type": "unsubscribed", "channel": payload.channel})
            await _reply(send, confirmation, client_id, "unsubscription confirmation")


async def heartbeat(
    ping: Callable[[], Awaitable[Any]],
    client_id: UUID,
    interval: float = HEARTBEAT_INTERVAL,
) -> None:
    """Ping the client at once and then every interval until a ping fails."""
    while True:
        try:
            await ping()
        except Exception as exc:  # noqa: BLE001
            logger.error("Heartbeat failed for client %s: %s", client_id, exc)
            return
        await asyncio.sleep(interval)


async def handle_connection(websocket: Any, state: WebSocketAppState) -> UUID:
    """Run a client session over a websocket and return the client's id.

    When the session ends every subscription is dropped.
    """
    client_id = uuid4()
    logger.info("New client connected: %s", client_id)
    beat = asyncio.create_task(heartbeat(websocket.ping, client_id))
    try:
        await handle_message(websocket, websocket.send, client_id, state)
    except ConnectionClosed as exc:
        logger.error("Error receiving message from client %s: %s", client_id, exc)
    finally:
        logger.info("Client %s disconnected, cleaning up resources", client_id)
        async with state.lock:
            state.client_manager.cleanup()
        beat.cancel()
        try:
            await beat
        except asyncio.CancelledError:
            pass
    return client_id