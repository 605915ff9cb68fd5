from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from inbox_service.domain.value_objects.enums import DeliveryStatus


@dataclass(frozen=True, slots=True)
class MessageStatusUpdated:
    event_type: ClassVar[str] = "message_status_update"

    # The identifier the update was addressed to; may be a meta_msg_id.
    message_id: str
    status: DeliveryStatus
    conversation_id: str
