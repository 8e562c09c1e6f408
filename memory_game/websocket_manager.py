"""Browser connections attached to a game session."""

import asyncio
import logging
from typing import Iterable

from fastapi import WebSocket
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class WebSocketManager:
    """
    Tracks the browser tabs watching one game session.

    A tab whose send fails is assumed gone and dropped from the group, so the
    round never waits on a dead socket.
    """

    def __init__(self):
        self.active_connections: list[WebSocket] = []
        self._lock = asyncio.Lock()

    @property
    def connection_count(self) -> int:
        return len(self.active_connections)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self.active_connections.append(websocket)

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            if websocket in self.active_connections:
                self.active_connections.remove(websocket)

    async def send_event(self, websocket: WebSocket, event: BaseModel) -> bool:
        """Send to one tab. Returns False if the tab was dropped."""
        return await self.send_events(websocket, [event])

    async def send_events(self, websocket: WebSocket, events: Iterable[BaseModel]) -> bool:
        """Send several events to one tab in order, stopping at the first failure."""
        for event in events:
            if not await self._deliver(websocket, event.model_dump_json()):
                await self.disconnect(websocket)
                return False
        return True

    async def broadcast(self, event: BaseModel) -> int:
        """Send to every tab. Returns how many received it."""
        payload = event.model_dump_json()
        async with self._lock:
            targets = list(self.active_connections)

        results = await asyncio.gather(*(self._deliver(ws, payload) for ws in targets))

        dropped = [ws for ws, ok in zip(targets, results) if not ok]
        for websocket in dropped:
            await self.disconnect(websocket)
        if dropped:
            logger.info(
                "Dropped %d of %d tab(s) while sending %s",
                len(dropped),
                len(targets),
                getattr(event, "type", type(event).__name__),
            )
        return len(targets) - len(dropped)

    async def close_all(self) -> None:
        async with self._lock:
            connections = list(self.active_connections)
            self.active_connections.clear()

        for websocket in connections:
            try:
                await websocket.close()
            except Exception as e:
                logger.debug("Ignoring error while closing tab: %s", e)

    @staticmethod
    async def _deliver(websocket: WebSocket, payload: str) -> bool:
        try:
            await websocket.send_text(payload)
        except Exception as e:
            logger.debug("Send failed: %s", e)
            return False
        return True
