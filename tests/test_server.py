import asyncio
import json

import pytest
from websockets.asyncio.client import connect
from websockets.exceptions import InvalidStatus

from predmarket.client_manager import WebSocketAppState
from predmarket.config import ChannelType
from predmarket.server import GREETING, main, serve


def _port(server):
    return server.sockets[0].getsockname()[1]


@pytest.mark.asyncio
async def test_root_answers_with_greeting():
    async with serve("127.0.0.1", 0, WebSocketAppState()) as server:
        reader, writer = await asyncio.open_connection("127.0.0.1", _port(server))
        writer.write(b"GET / HTTP/1.1\r\nHost: localhost\r\n\r\n")
        await writer.drain()
        response = await reader.read()
        writer.close()
    status_line = response.split(b"\r\n", 1)[0]
    assert b" 200 " in status_line
    assert response.endswith(GREETING.encode())


@pytest.mark.asyncio
async def test_websocket_subscription_round_trip():
    state = WebSocketAppState()
    async with serve("127.0.0.1", 0, state) as server:
        uri = f"ws://127.0.0.1:{_port(server)}/ws"
        async with connect(uri) as ws:
            message = {
                "payload": {
                    "type": "Subscribe",
                    "data": {"channel": "price_update", "params": {"m": "1"}},
                }
            }
            await ws.send(json.dumps(message))
            reply = json.loads(await ws.recv())
            clients = state.client_manager.get_clients(ChannelType.PRICE_UPDATE)
            assert reply == {"type": "subscribed", "channel": "price_update", "params": {"m": "1"}}
            assert len(clients) == 1


@pytest.mark.asyncio
async def test_unknown_path_is_rejected():
    state = WebSocketAppState()
    async with serve("127.0.0.1", 0, state) as server:
        uri = f"ws://127.0.0.1:{_port(server)}/elsewhere"
        with pytest.raises(InvalidStatus) as info:
            async with connect(uri):
                pass
        status = info.value.response.status_code
    assert status == 404
    assert state.client_manager.subscription == {}


def test_main_rejects_bad_port_argument():
    with pytest.raises(SystemExit) as info:
        main(["--port", "not-a-number"])
    assert info.value.code == 2