from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from inbox_service.domain.entities.message import Message


@dataclass(frozen=True, slots=True)
class MessageCreated:
    event_type: ClassVar[str] = "new_message"

    message: Message

    @property
    def conversation_id(self) -> str:
        return self.message.conversation_id
