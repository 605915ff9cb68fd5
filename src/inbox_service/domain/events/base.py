from __future__ import annotations

from typing import TypeAlias

from inbox_service.domain.events.conversation_updated import ConversationUpdated
from inbox_service.domain.events.message_created import MessageCreated
from inbox_service.domain.events.message_status_updated import MessageStatusUpdated

DomainEvent: TypeAlias = MessageCreated | ConversationUpdated | MessageStatusUpdated
