from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from inbox_service.domain.entities.contact import Contact
from inbox_service.infrastructure.db.errors import translate_store_errors
from inbox_service.infrastructure.db.mappers import contact as mapper
from inbox_service.infrastructure.db.models.contact import ContactModel


class ContactReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @translate_store_errors
    async def get(self, conversation_id: str) -> Contact | None:
        model = await self._session.get(ContactModel, conversation_id)
        return mapper.model_to_entity(model) if model else None


class ContactWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @translate_store_errors
    async def upsert(self, contact: Contact) -> None:
        stmt = pg_insert(ContactModel).values(
            conversation_id=contact.conversation_id,
            display_name=contact.display_name,
            last_seen_at=contact.last_seen_at,
            avatar_url=contact.avatar_url,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[ContactModel.conversation_id],
            set_={
                "display_name": stmt.excluded.display_name,
                "last_seen_at": stmt.excluded.last_seen_at,
                "updated_at": func.now(),
            },
        )
        await self._session.execute(stmt)
