"""WebSocket device transport - adapter implementing the DeviceTransport port.

Frames are JSON objects. Outbound messages are sent as
``{"txn": n, "payload": {...}}`` and the bridge answers each one with
``{"txn": n, "ack": true}`` or ``{"txn": n, "ack": false, "error": "..."}``.
Messages originating on the watch arrive as ``{"payload": {...}}``.
"""

import asyncio
import itertools
import json
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

import aiohttp

from nmbs_departures.domain.models.transmission import DeliveryReceipt
from nmbs_departures.domain.ports import DeviceTransport

if TYPE_CHECKING:
    from aiohttp import ClientSession, ClientWebSocketResponse

    from nmbs_departures.domain.models.device_messages import OutboundMessage

logger = logging.getLogger(__name__)

InboundHandler = Callable[[dict[str, Any]], Awaitable[None]]


class WebSocketDeviceTransport(DeviceTransport):
    """Single-outstanding-message channel to the watch bridge.

    Sends are serialized by a lock; each one waits for the bridge's
    acknowledgement of its transaction number. There is no acknowledgement
    timeout. Losing the connection fails the outstanding send.
    """

    def __init__(
        self,
        session: "ClientSession",
        url: str,
        on_message: InboundHandler | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            session: Shared aiohttp session.
            url: WebSocket URL of the bridge.
            on_message: Called with each payload sent by the watch.
        """
        self._session = session
        self._url = url
        self._on_message = on_message
        self._ws: ClientWebSocketResponse | None = None
        self._lock = asyncio.Lock()
        self._txn = itertools.count(1)
        self._pending: dict[int, asyncio.Future[DeliveryReceipt]] = {}
        self._receive_task: asyncio.Task[None] | None = None
        self._handler_tasks: set[asyncio.Task[None]] = set()

    def set_handler(self, on_message: InboundHandler) -> None:
        self._on_message = on_message

    @property
    def connected(self) -> bool:
        return self._ws is not None and not self._ws.closed

    async def connect(self) -> None:
        """Open the WebSocket and start receiving frames."""
        self._ws = await self._session.ws_connect(self._url, heartbeat=30)
        self._receive_task = asyncio.create_task(self._receive_loop(self._ws))
        logger.info(f"Connected to device bridge at {self._url}")

    async def close(self) -> None:
        """Close the WebSocket and wait for the receive loop to finish."""
        if self._ws is not None:
            await self._ws.close()
        if self._receive_task is not None:
            await self._receive_task
            self._receive_task = None
        if self._handler_tasks:
            await asyncio.gather(*self._handler_tasks, return_exceptions=True)

    async def wait_closed(self) -> None:
        """Wait until the bridge closes the connection."""
        if self._receive_task is not None:
            await asyncio.shield(self._receive_task)

    async def send(self, message: "OutboundMessage") -> DeliveryReceipt:
        async with self._lock:
            ws = self._ws
            if ws is None or not self.connected:
                return DeliveryReceipt(False, "Not connected")

            txn = next(self._txn)
            ack: asyncio.Future[DeliveryReceipt] = asyncio.get_running_loop().create_future()
            self._pending[txn] = ack
            try:
                await ws.send_json({"txn": txn, "payload": message.to_payload()})
                return await ack
            except (aiohttp.ClientError, ConnectionResetError) as e:
                return DeliveryReceipt(False, f"Send failed: {e}")
            finally:
                self._pending.pop(txn, None)

    async def _receive_loop(self, ws: "ClientWebSocketResponse") -> None:
        try:
            async for msg in ws:
                if msg.type == aiohttp.WSMsgType.TEXT:
                    self._handle_frame(msg.data)
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    logger.error(f"Device bridge connection error: {ws.exception()}")
                    break
        finally:
            self._fail_pending("Connection closed")
            logger.info("Device bridge connection closed")

    def _handle_frame(self, data: str) -> None:
        try:
            frame = json.loads(data)
        except ValueError:
            logger.warning(f"Ignoring non-JSON frame: {data[:100]}")
            return
        if not isinstance(frame, dict):
            logger.warning("Ignoring frame that is not an object")
            return

        if "txn" in frame:
            self._resolve(frame)
        elif isinstance(frame.get("payload"), dict):
            self._dispatch(frame["payload"])
        else:
            logger.warning(f"Ignoring unrecognized frame: {data[:100]}")

    def _resolve(self, frame: dict[str, Any]) -> None:
        ack = self._pending.get(frame["txn"])
        if ack is None or ack.done():
            logger.debug(f"Ignoring acknowledgement for unknown transaction {frame['txn']}")
            return
        if frame.get("ack"):
            ack.set_result(DeliveryReceipt(True))
        else:
            ack.set_result(DeliveryReceipt(False, str(frame.get("error") or "Rejected by device")))

    def _dispatch(self, payload: dict[str, Any]) -> None:
        if self._on_message is None:
            logger.debug("No handler for inbound message, dropping it")
            return
        task = asyncio.create_task(self._run_handler(self._on_message, payload))
        self._handler_tasks.add(task)
        task.add_done_callback(self._handler_tasks.discard)

    async def _run_handler(self, handler: InboundHandler, payload: dict[str, Any]) -> None:
        try:
            await handler(payload)
        except Exception:
            logger.exception("Inbound message handler failed")

    def _fail_pending(self, reason: str) -> None:
        for ack in self._pending.values():
            if not ack.done():
                ack.set_result(DeliveryReceipt(False, reason))
