from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from inbox_service.domain.entities.message import Message
from inbox_service.domain.value_objects.enums import DeliveryStatus
from inbox_service.infrastructure.db.errors import translate_store_errors
from inbox_service.infrastructure.db.mappers import message as mapper
from inbox_service.infrastructure.db.models.message import MessageModel


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @translate_store_errors
    async def get_by_id(self, message_id: str) -> Message | None:
        model = await self._session.get(MessageModel, message_id)
        return mapper.model_to_entity(model) if model else None

    @translate_store_errors
    async def list_page(
        self,
        conversation_id: str,
        *,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(MessageModel.conversation_id == conversation_id)
            .order_by(MessageModel.timestamp.desc(), MessageModel.seq.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    @translate_store_errors
    async def list_all(self) -> list[Message]:
        result = await self._session.execute(select(MessageModel).order_by(MessageModel.seq.asc()))
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    @translate_store_errors
    async def list_recent(self, limit: int) -> list[Message]:
        stmt = (
            select(MessageModel)
            .order_by(MessageModel.timestamp.desc(), MessageModel.seq.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    @translate_store_errors
    async def count(self) -> int:
        result = await self._session.execute(select(func.count()).select_from(MessageModel))
        return result.scalar_one()


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @translate_store_errors
    async def create_if_not_exists(self, message: Message) -> tuple[Message, bool]:
        """Insert message idempotently. Returns (message, created_flag)."""
        stmt = (
            pg_insert(MessageModel)
            .values(**mapper.entity_to_values(message))
            .on_conflict_do_nothing(index_elements=[MessageModel.id])
            .returning(MessageModel)
        )
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()

        if row is not None:
            return mapper.model_to_entity(row), True

        # Conflict: another writer stored this id first.
        existing = await self._session.get(MessageModel, message.id)
        assert existing is not None
        return mapper.model_to_entity(existing), False

    @translate_store_errors
    async def set_status(self, target_id: str, status: DeliveryStatus) -> Message | None:
        stmt = (
            select(MessageModel)
            .where(or_(MessageModel.id == target_id, MessageModel.meta_msg_id == target_id))
            .order_by(MessageModel.seq.asc())
            .limit(1)
            .with_for_update()
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None
        model.delivery_status = status.value
        await self._session.flush()
        return mapper.model_to_entity(model)
