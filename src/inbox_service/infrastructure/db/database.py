"""Database handle: one engine per process, opened at startup and disposed at shutdown."""
from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

from inbox_service.config import Settings
from inbox_service.infrastructure.db import models  # noqa: F401
from inbox_service.infrastructure.db.base import Base
from inbox_service.infrastructure.db.errors import translate_store_errors
from inbox_service.infrastructure.db.store import SqlAlchemyStore

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._sessionmaker = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> Database:
        engine = create_async_engine(
            settings.database_url,
            poolclass=AsyncAdaptedQueuePool,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_pre_ping=True,
            pool_recycle=settings.DB_POOL_RECYCLE,
            echo=False,
        )
        return cls(engine)

    @asynccontextmanager
    async def store(self) -> AsyncIterator[SqlAlchemyStore]:
        async with SqlAlchemyStore(self._sessionmaker()) as store:
            yield store

    @translate_store_errors
    async def ping(self) -> None:
        async with self._engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    @translate_store_errors
    async def create_schema(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured")

    async def dispose(self) -> None:
        await self._engine.dispose()
        logger.info("Database engine disposed")
