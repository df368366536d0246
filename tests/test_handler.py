import asyncio
import json
from uuid import uuid4

import pytest

from predmarket.client_manager import WebSocketAppState
from predmarket.config import ChannelType
from predmarket.handler import (
    handle_connection,
    handle_message,
    heartbeat,
    process_channel_request,
)


class Recorder:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    async def __call__(self, text):
        if self.fail:
            raise ConnectionError("gone")
        self.sent.append(text)


async def _stream(items):
    for item in items:
        yield item


def _subscribe(channel, params):
    return json.dumps(
        {"id": None, "payload": {"type": "Subscribe", "data": {"channel": channel, "params": params}}}
    )


def _unsubscribe(channel):
    return json.dumps({"payload": {"type": "Unsubscribe", "data": {"channel": channel}}})


def _post(channel, data):
    return json.dumps({"payload": {"type": "Post", "data": {"channel": channel, "data": data}}})


@pytest.mark.asyncio
async def test_subscribe_registers_client_and_confirms():
    state = WebSocketAppState()
    send = Recorder()
    client_id = uuid4()
    params = {"market_id": "m1"}
    await handle_message(_stream([_subscribe("price_update", params)]), send, client_id, state)

    clients = state.client_manager.get_clients(ChannelType.PRICE_UPDATE)
    assert list(clients) == [client_id]
    assert clients[client_id][1] == params
    assert json.loads(send.sent[0]) == {
        "type": "subscribed",
        "channel": "price_update",
        "params": params,
    }


@pytest.mark.asyncio
async def test_invalid_channel_ends_session():
    state = WebSocketAppState()
    send = Recorder()
    messages = [_subscribe("nope", {}), _subscribe("price_update", {})]
    await handle_message(_stream(messages), send, uuid4(), state)
    assert send.sent == ["Invalid channel"]
    assert state.client_manager.subscription == {}


@pytest.mark.asyncio
async def test_invalid_format_is_reported_and_session_continues():
    state = WebSocketAppState()
    send = Recorder()
    messages = ["not json", _subscribe("price_update", {"a": 1})]
    await handle_message(_stream(messages), send, uuid4(), state)
    assert send.sent[0] == "Invalid message format"
    assert json.loads(send.sent[1])["type"] == "subscribed"


@pytest.mark.asyncio
async def test_unsubscribe_removes_client():
    state = WebSocketAppState()
    send = Recorder()
    messages = [_subscribe("price_update", {}), _unsubscribe("price_update")]
    await handle_message(_stream(messages), send, uuid4(), state)
    assert state.client_manager.get_clients(ChannelType.PRICE_UPDATE) is None
    assert json.loads(send.sent[1]) == {"type": "unsubscribed", "channel": "price_update"}


@pytest.mark.asyncio
async def test_post_reaches_other_subscribers():
    state = WebSocketAppState()
    subscriber = Recorder()
    state.client_manager.add_client(ChannelType.PRICE_UPDATE, uuid4(), subscriber, {})
    poster = Recorder()
    data = {"market_id": "m1", "yes_price": "0.4", "no_price": "0.6"}
    await handle_message(_stream([_post("price_poster", data)]), poster, uuid4(), state)

    assert [json.loads(text) for text in subscriber.sent] == [data]
    assert poster.sent == ["Data posted to channel price_poster. Served 1 clients."]


@pytest.mark.asyncio
async def test_binary_messages_are_ignored():
    state = WebSocketAppState()
    send = Recorder()
    await handle_message(_stream([b"\x00\x01"]), send, uuid4(), state)
    assert send.sent == []
    assert state.client_manager.subscription == {}


@pytest.mark.asyncio
async def test_process_request_skips_poster_and_failed_clients():
    state = WebSocketAppState()
    poster_id = uuid4()
    poster = Recorder()
    good = Recorder()
    state.client_manager.add_client(ChannelType.PRICE_UPDATE, poster_id, poster, {})
    state.client_manager.add_client(ChannelType.PRICE_UPDATE, uuid4(), Recorder(fail=True), {})
    state.client_manager.add_client(ChannelType.PRICE_UPDATE, uuid4(), good, {})

    served = await process_channel_request(ChannelType.PRICE_POSTER, poster_id, {"x": 1}, state)
    assert served == len(good.sent)
    assert poster.sent == []
    assert json.loads(good.sent[0]) == {"x": 1}


@pytest.mark.asyncio
async def test_process_request_without_subscribers_serves_nobody():
    state = WebSocketAppState()
    served = await process_channel_request(ChannelType.PRICE_POSTER, uuid4(), {}, state)
    assert served == 0


@pytest.mark.asyncio
async def test_process_request_on_unsupported_channel_sends_nothing():
    state = WebSocketAppState()
    listener = Recorder()
    state.client_manager.add_client(ChannelType.PRICE_UPDATE, uuid4(), listener, {})
    served = await process_channel_request(ChannelType.PRICE_UPDATE, uuid4(), {"x": 1}, state)
    assert served == 0
    assert listener.sent == []


@pytest.mark.asyncio
async def test_heartbeat_stops_when_ping_fails():
    calls = []

    async def ping():
        calls.append(len(calls) + 1)
        if len(calls) == 3:
            raise ConnectionError("closed")

    result = await asyncio.wait_for(heartbeat(ping, uuid4(), interval=0), timeout=5)
    assert result is None
    assert calls == [1, 2, 3]


class FakeSocket:
    def __init__(self, messages):
        self._messages = messages
        self.sent = []
        self.pings = 0

    def __aiter__(self):
        return _stream(self._messages)

    async def send(self, text):
        self.sent.append(text)

    async def ping(self):
        self.pings += 1


@pytest.mark.asyncio
async def test_handle_connection_cleans_up_subscriptions():
    state = WebSocketAppState()
    other = Recorder()
    state.client_manager.add_client(ChannelType.PRICE_UPDATE, uuid4(), other, {})
    socket = FakeSocket([_subscribe("price_update", {"k": "v"})])

    client_id = await handle_connection(socket, state)

    assert json.loads(socket.sent[0])["params"] == {"k": "v"}
    assert state.client_manager.subscription == {}
    assert client_id.version == 4