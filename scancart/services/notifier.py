"""
Fan-out of the "cart changed" signal to connected displays.

Channels are FastAPI WebSockets (anything with ``send_text`` and the
starlette state attributes works). Delivery is best effort: a channel that is
not open is skipped, a channel whose send fails is dropped, nothing is queued
or replayed.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Set

from fastapi.websockets import WebSocket, WebSocketState

from scancart.constants import CART_CHANGED_SIGNAL

logger = logging.getLogger(__name__)


def _is_open(channel: Any) -> bool:
    return (
        getattr(channel, "client_state", None) == WebSocketState.CONNECTED
        and getattr(channel, "application_state", None) == WebSocketState.CONNECTED
    )


class ChangeNotifier:
    def __init__(self, signal: str = CART_CHANGED_SIGNAL, send_timeout: float = 5.0) -> None:
        self.signal = signal
        self.send_timeout = send_timeout
        self._channels: Set[WebSocket] = set()
        self._tasks: Set[asyncio.Task] = set()

    @property
    def channel_count(self) -> int:
        return len(self._channels)

    async def connect(self, websocket: WebSocket) -> None:
        # registered before accept so a client that saw the handshake never misses a signal
        self._channels.add(websocket)
        try:
            await websocket.accept()
        except Exception:
            self._channels.discard(websocket)
            raise
        logger.debug("observer connected, total=%d", len(self._channels))

    def disconnect(self, websocket: WebSocket) -> None:
        self._channels.discard(websocket)
        logger.debug("observer disconnected, total=%d", len(self._channels))

    async def _send(self, channel: WebSocket) -> None:
        try:
            await asyncio.wait_for(channel.send_text(self.signal), timeout=self.send_timeout)
        except asyncio.TimeoutError:
            logger.debug("dropping observer that stalled for %.1fs", self.send_timeout)
            self._channels.discard(channel)
        except Exception as e:
            logger.debug("dropping observer after failed send: %s", e)
            self._channels.discard(channel)

    async def broadcast(self) -> int:
        """Send the signal to every open channel. Returns how many were tried."""
        targets = [ch for ch in list(self._channels) if _is_open(ch)]
        if targets:
            await asyncio.gather(*(self._send(ch) for ch in targets))
        return len(targets)

    def notify(self) -> None:
        """Schedule a broadcast and return immediately."""
        if not self._channels:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("no running event loop, change signal not sent")
            return
        task = loop.create_task(self.broadcast())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for broadcasts already scheduled by notify()."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
