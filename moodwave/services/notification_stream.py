"""Registry of live WebSocket connections used to push change events."""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Iterable

from fastapi import Request, WebSocket

logger = logging.getLogger(__name__)


def build_event(event_type: str, **data: Any) -> dict[str, Any]:
    return {"type": event_type, "data": data}


class NotificationHub:
    """Tracks authenticated connections per user id and fans events out to them.

    Notify-only: nothing here is read back by the request handlers.
    """

    def __init__(self) -> None:
        self._channels: dict[int, set[WebSocket]] = {}
        self._connections: dict[WebSocket, int] = {}
        self._lock = asyncio.Lock()

    async def register(self, user_id: int, websocket: WebSocket) -> None:
        """Attach an already accepted socket to ``user_id``; re-auth moves it."""

        async with self._lock:
            previous = self._connections.get(websocket)
            if previous is not None and previous != user_id:
                self._discard(websocket, previous)
            self._channels.setdefault(user_id, set()).add(websocket)
            self._connections[websocket] = user_id

    async def deregister(self, websocket: WebSocket) -> None:
        async with self._lock:
            user_id = self._connections.pop(websocket, None)
            if user_id is not None:
                self._discard(websocket, user_id)

    def _discard(self, websocket: WebSocket, user_id: int) -> None:
        group = self._channels.get(user_id)
        if group is None:
            return
        group.discard(websocket)
        if not group:
            self._channels.pop(user_id, None)

    def connected_users(self) -> set[int]:
        return set(self._channels)

    async def push(self, user_ids: int | Iterable[int], event: dict[str, Any]) -> int:
        """Send ``event`` to every socket of the given users; returns deliveries.

        A failing socket is dropped from the registry without affecting others.
        """

        target_ids = [user_ids] if isinstance(user_ids, int) else list(user_ids)
        if not target_ids:
            return 0
        serialized = json.dumps(event, default=str)
        async with self._lock:
            targets: list[WebSocket] = []
            for user_id in target_ids:
                targets.extend(self._channels.get(user_id, ()))

        delivered = 0
        for ws in targets:
            try:
                await ws.send_text(serialized)
            except Exception:
                logger.warning("Dropping live connection after failed %s push", event.get("type"), exc_info=True)
                await self.deregister(ws)
            else:
                delivered += 1
        return delivered


def get_notification_hub(request: Request) -> NotificationHub:
    return request.app.state.notification_hub


__all__ = ["NotificationHub", "build_event", "get_notification_hub"]
