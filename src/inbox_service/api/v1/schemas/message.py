from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from inbox_service.domain.value_objects.enums import DeliveryStatus, Direction, MessageKind


class SendMessageRequest(BaseModel):
    conversation_id: str = Field(min_length=1)
    body: str
    display_name: str | None = None
    kind: MessageKind = MessageKind.TEXT


class UpdateStatusRequest(BaseModel):
    status: DeliveryStatus


class MessageResponse(BaseModel):
    id: str
    meta_msg_id: str
    conversation_id: str
    author_display_name: str
    body: str
    timestamp: datetime
    kind: MessageKind
    delivery_status: DeliveryStatus
    direction: Direction
    media_url: str | None = None
    media_mime_type: str | None = None
    media_sha256: str | None = None
    caption: str | None = None

    model_config = {"from_attributes": True}
