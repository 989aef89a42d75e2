"""WebSocket endpoint for live change notifications."""
from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..database import Database
from ..errors import UnauthenticatedError
from ..services import NotificationHub, resolve_session

router = APIRouter()
logger = logging.getLogger(__name__)


@router.websocket("/api/ws")
async def live_updates(websocket: WebSocket) -> None:
    """Accept anonymously, then register the socket once it sends a valid session token."""

    hub: NotificationHub = websocket.app.state.notification_hub
    database: Database = websocket.app.state.database

    await websocket.accept()
    await websocket.send_text(json.dumps({"type": "connection_established"}))
    logger.info("Live socket connected from %s", websocket.client)
    try:
        while True:
            try:
                raw = await websocket.receive_text()
            except WebSocketDisconnect:
                break

            try:
                payload = json.loads(raw)
            except json.JSONDecodeError:
                payload = {"type": raw}
            if not isinstance(payload, dict):
                continue

            message_type = str(payload.get("type") or "").lower()
            if message_type == "ping":
                await websocket.send_text(json.dumps({"type": "pong"}))
            elif message_type == "auth":
                token = payload.get("token")
                if not isinstance(token, str):
                    await websocket.send_text(json.dumps({"type": "auth_error", "message": "Not authenticated"}))
                    continue
                db = database.create_session()
                try:
                    caller = resolve_session(db, token)
                except UnauthenticatedError:
                    await websocket.send_text(json.dumps({"type": "auth_error", "message": "Not authenticated"}))
                    continue
                finally:
                    db.close()
                await hub.register(caller.user_id, websocket)
                logger.info("Live socket authenticated for user %s", caller.user_id)
                await websocket.send_text(json.dumps({"type": "auth_success", "user_id": caller.user_id}))
            # Anything else is ignored; receiving it keeps the connection alive.
    finally:
        await hub.deregister(websocket)
        logger.info("Live socket disconnected from %s", websocket.client)


__all__ = ["router"]
