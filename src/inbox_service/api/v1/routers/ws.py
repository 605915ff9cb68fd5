from __future__ import annotations

import asyncio
import logging
import uuid

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from inbox_service.config import settings
from inbox_service.infrastructure.ws.manager import ConnectionManager
from inbox_service.infrastructure.ws.protocol import WsInbound, WsOutbound

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])


@router.websocket("/ws")
async def ws_inbox(websocket: WebSocket) -> None:
    manager: ConnectionManager = websocket.app.state.manager
    key = uuid.uuid4().hex
    await websocket.accept()
    manager.connect(key, websocket)

    heartbeat_task = asyncio.create_task(
        _heartbeat(websocket), name=f"ws-heartbeat-{key}",
    )
    try:
        await _read_loop(websocket, manager, key)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS error for %s", key)
    finally:
        heartbeat_task.cancel()
        manager.disconnect(key)


async def _heartbeat(ws: WebSocket) -> None:
    interval = settings.WS_HEARTBEAT_SECONDS
    try:
        while True:
            await asyncio.sleep(interval)
            await ws.send_text(WsOutbound(type="pong", data={}).model_dump_json())
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.debug("WS heartbeat stopped", exc_info=True)


async def _send_error(ws: WebSocket, code: str, **extra: str) -> None:
    await ws.send_text(WsOutbound(type="error", data={"code": code, **extra}).model_dump_json())


async def _read_loop(ws: WebSocket, manager: ConnectionManager, key: str) -> None:
    while True:
        raw = await ws.receive_text()
        try:
            msg = WsInbound.model_validate_json(raw)
        except Exception:
            await _send_error(ws, "invalid_payload")
            continue

        if msg.type == "ping":
            await ws.send_text(WsOutbound(type="pong", data={}).model_dump_json())

        elif msg.type in ("join_chat", "leave_chat"):
            conversation_id = msg.data.get("conversation_id")
            if not isinstance(conversation_id, str) or not conversation_id:
                await _send_error(ws, "invalid_data", type=msg.type)
                continue
            if msg.type == "join_chat":
                manager.join(key, conversation_id)
            else:
                manager.leave(key, conversation_id)

        else:
            await _send_error(ws, "unknown_type", type=msg.type)
