from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from inbox_service.domain.entities.message import Message


@dataclass(frozen=True, slots=True)
class ConversationSummary:
    conversation_id: str
    last_message_body: str
    last_message_timestamp: datetime
    display_name: str
    unread_count: int
    message_count: int


@dataclass(frozen=True, slots=True)
class ConversationGroup:
    conversation_id: str
    count: int
    last_message_body: str
    display_name: str


@dataclass(frozen=True, slots=True)
class StoreOverview:
    total_messages: int
    recent_messages: list[Message]
    conversations: list[ConversationGroup]
