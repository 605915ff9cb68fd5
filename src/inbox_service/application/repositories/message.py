from __future__ import annotations

from typing import Protocol

from inbox_service.domain.entities.message import Message
from inbox_service.domain.value_objects.enums import DeliveryStatus


class MessageReader(Protocol):
    async def get_by_id(self, message_id: str) -> Message | None: ...

    async def list_page(
        self,
        conversation_id: str,
        *,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Message]:
        """Messages of one conversation, newest first."""
        ...

    async def list_all(self) -> list[Message]:
        """Every message in insertion order."""
        ...

    async def list_recent(self, limit: int) -> list[Message]: ...

    async def count(self) -> int: ...


class MessageWriter(Protocol):
    async def create_if_not_exists(self, message: Message) -> tuple[Message, bool]:
        """Insert message. Return (message, created). If id already stored → return existing."""
        ...

    async def set_status(self, target_id: str, status: DeliveryStatus) -> Message | None:
        """Update the first message whose id or meta_msg_id equals target_id."""
        ...
