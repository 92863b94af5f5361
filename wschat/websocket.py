"""Connection service: queues outgoing text and publishes incoming text."""

from __future__ import annotations

import asyncio
import contextlib
import logging

import websockets
from websockets.exceptions import ConnectionClosed

from wschat.event_bus import EventBus

log = logging.getLogger(__name__)

DEFAULT_URL = "ws://127.0.0.1:8080"
DEFAULT_QUEUE_SIZE = 1000


class WebsocketService:
    """Bridges a websocket connection with an outgoing queue and an event bus."""

    def __init__(
        self,
        event_bus: EventBus,
        url: str = DEFAULT_URL,
        queue_size: int = DEFAULT_QUEUE_SIZE,
    ) -> None:
        self.event_bus = event_bus
        self.url = url
        self.outgoing: asyncio.Queue[str] = asyncio.Queue(maxsize=queue_size)

    def send(self, text: str) -> None:
        """Queue ``text`` for sending; raise asyncio.QueueFull if the queue is full."""
        self.outgoing.put_nowait(text)

    def dispatch_incoming(self, payload: str | bytes) -> None:
        """Publish a received frame; binary frames that are not UTF-8 are dropped."""
        if isinstance(payload, (bytes, bytearray, memoryview)):
            try:
                payload = bytes(payload).decode("utf-8")
            except UnicodeDecodeError:
                return
        log.debug("from websocket: %s", payload)
        self.event_bus.publish(payload)

    async def _forward_outgoing(self, connection) -> None:
        while True:
            text = await self.outgoing.get()
            log.debug("got event from channel! %s", text)
            await connection.send(text)

    async def run(self, connection) -> None:
        """Pump both directions over ``connection`` until it stops yielding frames."""
        writer = asyncio.create_task(self._forward_outgoing(connection))
        try:
            async for payload in connection:
                self.dispatch_incoming(payload)
        except ConnectionClosed as exc:
            log.error("ws: %r", exc)
        finally:
            writer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await writer
        log.debug("WebSocket Closed")

    async def connect_and_run(self) -> None:
        """Open a connection to ``self.url`` and run until it closes."""
        async with websockets.connect(self.url) as connection:
            await self.run(connection)