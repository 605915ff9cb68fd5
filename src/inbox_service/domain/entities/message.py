from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from inbox_service.domain.value_objects.enums import DeliveryStatus, Direction, MessageKind

UNKNOWN_AUTHOR = "Unknown User"


@dataclass(frozen=True, slots=True)
class Message:
    id: str
    meta_msg_id: str
    conversation_id: str
    author_display_name: str
    body: str
    timestamp: datetime
    kind: MessageKind = MessageKind.TEXT
    delivery_status: DeliveryStatus = DeliveryStatus.SENT
    direction: Direction = Direction.INCOMING
    media_url: str | None = None
    media_mime_type: str | None = None
    media_sha256: str | None = None
    caption: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("message id must not be empty")
        if not self.conversation_id:
            raise ValueError(f"message {self.id} has no conversation id")
        # Enum constructors raise ValueError on unknown values.
        object.__setattr__(self, "kind", MessageKind(self.kind))
        object.__setattr__(self, "delivery_status", DeliveryStatus(self.delivery_status))
        object.__setattr__(self, "direction", Direction(self.direction))
