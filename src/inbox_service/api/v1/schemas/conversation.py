from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from inbox_service.api.v1.schemas.message import MessageResponse


class ConversationSummaryResponse(BaseModel):
    conversation_id: str
    last_message_body: str
    last_message_timestamp: datetime
    display_name: str
    unread_count: int
    message_count: int

    model_config = {"from_attributes": True}


class ConversationGroupResponse(BaseModel):
    conversation_id: str
    count: int
    last_message_body: str
    display_name: str

    model_config = {"from_attributes": True}


class StoreOverviewResponse(BaseModel):
    total_messages: int
    recent_messages: list[MessageResponse]
    conversations: list[ConversationGroupResponse]

    model_config = {"from_attributes": True}
