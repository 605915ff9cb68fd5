from __future__ import annotations

from typing import Protocol

from inbox_service.domain.events.base import DomainEvent


class Notifier(Protocol):
    async def notify(self, event: DomainEvent) -> None: ...
