"""Websocket server entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
from http import HTTPStatus
from typing import Any

from websockets.asyncio.server import serve as _ws_serve

from .client_manager import WebSocketAppState
from .handler import handle_connection

logger = logging.getLogger(__name__)

DEFAULT_HOST = "::"
DEFAULT_PORT = 4010
GREETING = "Hello from WebSocket server!"
WEBSOCKET_PATH = "/ws"


def _route(connection: Any, request: Any) -> Any:
    path = request.path.split("?", 1)[0]
    if path == "/":
        return connection.respond(HTTPStatus.OK, GREETING)
    if path == WEBSOCKET_PATH:
        return None
    return connection.respond(HTTPStatus.NOT_FOUND, "Not Found")


def serve(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    state: WebSocketAppState | None = None,
) -> Any:
    """Create the server; use it with ``async with`` or await it.

    ``/`` answers with a greeting and ``/ws`` accepts websocket clients.
    """
    app_state = state if state is not None else WebSocketAppState()

    async def _handler(connection: Any) -> None:
        await handle_connection(connection, app_state)

    return _ws_serve(_handler, host, port, process_request=_route)


async def _run(host: str, port: int) -> None:
    async with serve(host, port) as server:
        logger.info("Starting WebSocket server on port %s", port)
        await server.serve_forever()


def main(argv: list[str] | None = None) -> int:
    """Run the websocket server until interrupted."""
    parser = argparse.ArgumentParser(description="Price update websocket server.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    try:
        asyncio.run(_run(args.host, args.port))
    except KeyboardInterrupt:
        pass
    return 0