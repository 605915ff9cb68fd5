"""In-process registry of real-time listeners and their conversation groups."""
from __future__ import annotations

import logging
from typing import Any, Protocol

from inbox_service.infrastructure.ws.protocol import WsOutbound

logger = logging.getLogger(__name__)


class Listener(Protocol):
    async def send_text(self, data: str) -> None: ...


class ConnectionManager:
    """Tracks listeners by key and which conversation groups each has joined.

    Only events raised after a join reach the listener; nothing is replayed.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, Listener] = {}
        self._groups: dict[str, set[str]] = {}

    def connect(self, listener_key: str, listener: Listener) -> None:
        self._listeners[listener_key] = listener
        logger.debug("Listener connected: %s (total=%d)", listener_key, len(self._listeners))

    def disconnect(self, listener_key: str) -> None:
        self._listeners.pop(listener_key, None)
        for members in self._groups.values():
            members.discard(listener_key)
        self._groups = {cid: members for cid, members in self._groups.items() if members}
        logger.debug("Listener disconnected: %s", listener_key)

    def join(self, listener_key: str, conversation_id: str) -> None:
        self._groups.setdefault(conversation_id, set()).add(listener_key)

    def leave(self, listener_key: str, conversation_id: str) -> None:
        members = self._groups.get(conversation_id)
        if members:
            members.discard(listener_key)
            if not members:
                del self._groups[conversation_id]

    def groups_of(self, listener_key: str) -> set[str]:
        return {cid for cid, members in self._groups.items() if listener_key in members}

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def broadcast_to_conversation(
        self,
        conversation_id: str,
        event_type: str,
        data: dict[str, Any],
    ) -> None:
        """Send to every listener that joined the conversation group."""
        keys = list(self._groups.get(conversation_id, ()))
        await self._send(keys, event_type, data)

    async def broadcast_all(self, event_type: str, data: dict[str, Any]) -> None:
        """Send to every connected listener, joined or not."""
        await self._send(list(self._listeners), event_type, data)

    async def _send(self, keys: list[str], event_type: str, data: dict[str, Any]) -> None:
        raw = WsOutbound(type=event_type, data=data).model_dump_json()
        dead: list[str] = []
        for key in keys:
            listener = self._listeners.get(key)
            if listener is None:
                continue
            try:
                await listener.send_text(raw)
            except Exception:
                logger.debug("Dropping listener %s after failed send", key, exc_info=True)
                dead.append(key)
        for key in dead:
            self.disconnect(key)
