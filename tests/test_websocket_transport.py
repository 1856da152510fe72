"""Tests for the WebSocket device transport."""

import asyncio
import json
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from nmbs_departures.adapters.transport import WebSocketDeviceTransport
from nmbs_departures.domain.models import (
    DeliveryReceipt,
    DepartureCount,
    MessageType,
    RequestAck,
)


class FakeWebSocket:
    """Bridge side of the socket; acknowledges frames when told to."""

    def __init__(self, transport: WebSocketDeviceTransport, auto_ack: bool | None = True) -> None:
        self.transport = transport
        self.auto_ack = auto_ack
        self.closed = False
        self.frames: list[dict[str, Any]] = []
        self._incoming: asyncio.Queue[Any] = asyncio.Queue()

    async def send_json(self, frame: dict[str, Any]) -> None:
        self.frames.append(frame)
        if self.auto_ack is not None:
            reply: dict[str, Any] = {"txn": frame["txn"], "ack": self.auto_ack}
            if not self.auto_ack:
                reply["error"] = "APP_MSG_BUSY"
            asyncio.get_running_loop().call_soon(self.reply, reply)

    def reply(self, frame: dict[str, Any]) -> None:
        self.transport._handle_frame(json.dumps(frame))

    def push(self, data: str | None) -> None:
        self._incoming.put_nowait(data)

    def __aiter__(self) -> "FakeWebSocket":
        return self

    async def __anext__(self) -> SimpleNamespace:
        data = await self._incoming.get()
        if data is None:
            raise StopAsyncIteration
        return SimpleNamespace(type=aiohttp.WSMsgType.TEXT, data=data)


def _connected(auto_ack: bool | None = True) -> tuple[WebSocketDeviceTransport, FakeWebSocket]:
    transport = WebSocketDeviceTransport(MagicMock(), "ws://bridge.test/device")
    ws = FakeWebSocket(transport, auto_ack)
    transport._ws = ws  # type: ignore[assignment]
    return transport, ws


@pytest.mark.asyncio
async def test_acknowledged_send_is_delivered() -> None:
    """Given the bridge acknowledges, when sending, then the receipt reports delivery."""
    transport, ws = _connected()

    receipt = await transport.send(RequestAck(4))

    assert receipt.delivered is True
    assert ws.frames == [
        {"txn": 1, "payload": {"MESSAGE_TYPE": MessageType.REQUEST_ACK, "REQUEST_ID": 4}}
    ]


@pytest.mark.asyncio
async def test_rejected_send_reports_reason() -> None:
    """Given the bridge rejects a message, when sending, then the reason is reported."""
    transport, _ = _connected(auto_ack=False)

    receipt = await transport.send(DepartureCount(3, 1))

    assert receipt.delivered is False
    assert receipt.reason == "APP_MSG_BUSY"


@pytest.mark.asyncio
async def test_send_without_connection_fails() -> None:
    """Given no connection, when sending, then the receipt reports failure."""
    transport = WebSocketDeviceTransport(MagicMock(), "ws://bridge.test/device")

    receipt = await transport.send(RequestAck(1))

    assert receipt == DeliveryReceipt(False, "Not connected")


@pytest.mark.asyncio
async def test_only_one_message_is_in_flight() -> None:
    """Given two concurrent sends, when the first is unacknowledged, then the second waits."""
    transport, ws = _connected(auto_ack=None)

    first = asyncio.create_task(transport.send(RequestAck(1)))
    second = asyncio.create_task(transport.send(RequestAck(2)))
    await asyncio.sleep(0.01)

    assert [f["txn"] for f in ws.frames] == [1]

    ws.reply({"txn": 1, "ack": True})
    await asyncio.sleep(0.01)

    assert [f["txn"] for f in ws.frames] == [1, 2]
    ws.reply({"txn": 2, "ack": True})
    assert (await first).delivered and (await second).delivered


@pytest.mark.asyncio
async def test_closed_connection_fails_outstanding_send() -> None:
    """Given a send awaiting its ack, when the connection closes, then the send fails."""
    transport, ws = _connected(auto_ack=None)
    receive = asyncio.create_task(transport._receive_loop(ws))  # type: ignore[arg-type]

    pending = asyncio.create_task(transport.send(RequestAck(1)))
    await asyncio.sleep(0.01)
    ws.push(None)
    await receive

    receipt = await pending
    assert receipt.delivered is False
    assert receipt.reason == "Connection closed"


@pytest.mark.asyncio
async def test_inbound_payload_is_dispatched() -> None:
    """Given a watch message frame, when received, then the handler gets its payload."""
    handler = AsyncMock()
    transport, ws = _connected()
    transport.set_handler(handler)
    receive = asyncio.create_task(transport._receive_loop(ws))  # type: ignore[arg-type]

    ws.push(json.dumps({"payload": {"MESSAGE_TYPE": 1, "REQUEST_ID": 7}}))
    ws.push("garbage")
    ws.push(None)
    await receive
    await asyncio.sleep(0.01)

    handler.assert_awaited_once_with({"MESSAGE_TYPE": 1, "REQUEST_ID": 7})


@pytest.mark.asyncio
async def test_send_on_closed_socket_fails() -> None:
    """Given the socket has closed, when sending, then nothing is written and the send fails."""
    transport, ws = _connected()
    ws.closed = True

    receipt = await transport.send(RequestAck(1))

    assert not transport.connected
    assert receipt == DeliveryReceipt(False, "Not connected")
    assert ws.frames == []
