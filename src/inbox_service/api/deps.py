"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, Request

from inbox_service.application.ports.clock import Clock, SystemClock
from inbox_service.application.ports.notifier import Notifier
from inbox_service.application.uow import Store
from inbox_service.infrastructure.db.database import Database


async def get_store(request: Request) -> AsyncIterator[Store]:
    database: Database = request.app.state.database
    async with database.store() as store:
        yield store


StoreDep = Annotated[Store, Depends(get_store)]


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


NotifierDep = Annotated[Notifier, Depends(get_notifier)]


def get_clock() -> Clock:
    return SystemClock()


ClockDep = Annotated[Clock, Depends(get_clock)]
