"""Messages clients send to the websocket service."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union


class MessageFormatError(ValueError):
    """Raised when a client message is not valid."""


@dataclass(frozen=True)
class Subscribe:
    """Ask to receive messages published on a channel."""

    channel: str
    params: Any


@dataclass(frozen=True)
class Unsubscribe:
    """Stop receiving messages from a channel."""

    channel: str


@dataclass(frozen=True)
class Post:
    """Publish data on a channel."""

    channel: str
    data: Any


MessagePayload = Union[Subscribe, Unsubscribe, Post]


@dataclass(frozen=True)
class ClientMessage:
    """A message from a client: an optional id and a payload."""

    payload: MessagePayload
    id: str | None = None


def _require(data: dict, key: str, context: str) -> Any:
    if key not in data:
        raise MessageFormatError(f"missing field `{key}` in {context}")
    return data[key]


def _channel(data: dict, kind: str) -> str:
    channel = _require(data, "channel", kind)
    if not isinstance(channel, str):
        raise MessageFormatError(f"`channel` of {kind} must be a string")
    return channel


def _parse_payload(raw: Any) -> MessagePayload:
    if not isinstance(raw, dict):
        raise MessageFormatError("`payload` must be an object")
    kind = _require(raw, "type", "payload")
    if not isinstance(kind, str):
        raise MessageFormatError("`type` must be a string")
    data = _require(raw, "data", "payload")
    if not isinstance(data, dict):
        raise MessageFormatError("`data` must be an object")
    if kind == "Subscribe":
        return Subscribe(channel=_channel(data, kind), params=_require(data, "params", kind))
    if kind == "Unsubscribe":
        return Unsubscribe(channel=_channel(data, kind))
    if kind == "Post":
        return Post(channel=_channel(data, kind), data=_require(data, "data", kind))
    raise MessageFormatError(f"unknown message type `{kind}`")


def parse_client_message(text: str | bytes) -> ClientMessage:
    """Parse a client message from JSON text.

    The payload is tagged by ``type`` with its fields under ``data``.
    """
    try:
        raw = json.loads(text)
    except ValueError as exc:
        raise MessageFormatError(f"invalid JSON: {exc}") from None
    if not isinstance(raw, dict):
        raise MessageFormatError("message must be an object")
    message_id = raw.get("id")
    if message_id is not None and not isinstance(message_id, str):
        raise MessageFormatError("`id` must be a string or null")
    payload = _parse_payload(_require(raw, "payload", "message"))
    return ClientMessage(payload=payload, id=message_id)