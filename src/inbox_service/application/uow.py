from __future__ import annotations

from typing import Protocol

from inbox_service.application.repositories.contact import ContactReader, ContactWriter
from inbox_service.application.repositories.message import MessageReader, MessageWriter


class Store(Protocol):
    messages: MessageReader
    messages_w: MessageWriter
    contacts: ContactReader
    contacts_w: ContactWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
