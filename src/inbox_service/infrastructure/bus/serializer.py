from __future__ import annotations

import dataclasses
import json
from datetime import datetime
from enum import Enum
from typing import Any

from inbox_service.domain.entities.message import Message
from inbox_service.domain.events.base import DomainEvent
from inbox_service.domain.events.conversation_updated import ConversationUpdated
from inbox_service.domain.events.message_created import MessageCreated


class _Encoder(json.JSONEncoder):
    def default(self, o: object) -> Any:
        if isinstance(o, datetime):
            return o.isoformat()
        if isinstance(o, Enum):
            return o.value
        return super().default(o)


def message_to_dict(message: Message) -> dict[str, Any]:
    data = dataclasses.asdict(message)
    data["timestamp"] = message.timestamp.isoformat()
    for key in ("kind", "delivery_status", "direction"):
        data[key] = data[key].value
    return data


def event_to_wire(event: DomainEvent) -> tuple[str, dict[str, Any]]:
    """Flatten a domain event into (event_type, JSON-safe data)."""
    if isinstance(event, MessageCreated):
        data = {
            "conversation_id": event.conversation_id,
            "message": message_to_dict(event.message),
        }
    elif isinstance(event, ConversationUpdated):
        data = {"conversation_id": event.conversation_id}
    else:
        data = {
            "id": event.message_id,
            "status": event.status.value,
            "conversation_id": event.conversation_id,
        }
    return event.event_type, data


def serialize_event(event_type: str, payload: dict[str, Any]) -> str:
    envelope = {"event": event_type, "data": payload}
    return json.dumps(envelope, cls=_Encoder)


def deserialize_event(raw: str | bytes) -> tuple[str, dict[str, Any]]:
    data = json.loads(raw)
    return data["event"], data["data"]
