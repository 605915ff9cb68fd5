from __future__ import annotations

from typing import Protocol

from inbox_service.domain.entities.contact import Contact


class ContactReader(Protocol):
    async def get(self, conversation_id: str) -> Contact | None: ...


class ContactWriter(Protocol):
    async def upsert(self, contact: Contact) -> None:
        """Insert or overwrite display_name/last_seen_at for contact.conversation_id."""
        ...
