from __future__ import annotations

from types import TracebackType
from typing import Self

from sqlalchemy.ext.asyncio import AsyncSession

from inbox_service.infrastructure.db.errors import translate_store_errors
from inbox_service.infrastructure.db.repositories.contact import (
    ContactReaderRepo,
    ContactWriterRepo,
)
from inbox_service.infrastructure.db.repositories.message import (
    MessageReaderRepo,
    MessageWriterRepo,
)


class SqlAlchemyStore:
    """Concrete Store backed by a single AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.messages = MessageReaderRepo(session)
        self.messages_w = MessageWriterRepo(session)
        self.contacts = ContactReaderRepo(session)
        self.contacts_w = ContactWriterRepo(session)

    @translate_store_errors
    async def commit(self) -> None:
        await self._session.commit()

    @translate_store_errors
    async def rollback(self) -> None:
        await self._session.rollback()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self._session.rollback()
        await self._session.close()
