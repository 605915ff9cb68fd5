from __future__ import annotations

import logging

from inbox_service.application.ports.notifier import Notifier
from inbox_service.domain.events.base import DomainEvent

logger = logging.getLogger(__name__)


async def publish(notifier: Notifier, *events: DomainEvent) -> None:
    """Deliver events in order. A delivery failure never undoes a committed write."""
    for event in events:
        try:
            await notifier.notify(event)
        except Exception:
            logger.exception("Failed to publish %s event", event.event_type)
