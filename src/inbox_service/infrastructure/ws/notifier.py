from __future__ import annotations

from typing import Any

from inbox_service.domain.events.base import DomainEvent
from inbox_service.domain.events.conversation_updated import ConversationUpdated
from inbox_service.infrastructure.bus.serializer import event_to_wire
from inbox_service.infrastructure.ws.manager import ConnectionManager


async def dispatch(manager: ConnectionManager, event_type: str, data: dict[str, Any]) -> None:
    """Route one wire event: conversation_updated goes to everyone, the rest to its group."""
    if event_type == ConversationUpdated.event_type:
        await manager.broadcast_all(event_type, data)
        return
    conversation_id = data.get("conversation_id")
    if not conversation_id:
        return
    await manager.broadcast_to_conversation(conversation_id, event_type, data)


class LocalNotifier:
    """Implements application.ports.notifier.Notifier for a single process."""

    def __init__(self, manager: ConnectionManager) -> None:
        self._manager = manager

    async def notify(self, event: DomainEvent) -> None:
        event_type, data = event_to_wire(event)
        await dispatch(self._manager, event_type, data)
