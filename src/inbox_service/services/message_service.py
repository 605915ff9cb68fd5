from __future__ import annotations

import logging
import uuid
from datetime import datetime

from inbox_service.application.exceptions import ValidationError
from inbox_service.application.ports.clock import Clock, SystemClock
from inbox_service.application.ports.notifier import Notifier
from inbox_service.application.uow import Store
from inbox_service.domain.entities.contact import Contact
from inbox_service.domain.entities.message import UNKNOWN_AUTHOR, Message
from inbox_service.domain.events.conversation_updated import ConversationUpdated
from inbox_service.domain.events.message_created import MessageCreated
from inbox_service.domain.events.message_status_updated import MessageStatusUpdated
from inbox_service.domain.value_objects.enums import DeliveryStatus, Direction, MessageKind
from inbox_service.services.notifications import publish

logger = logging.getLogger(__name__)

LOCAL_AUTHOR = "You"


def new_message_id(now: datetime) -> str:
    return f"msg_{int(now.timestamp() * 1000)}_{uuid.uuid4().hex[:9]}"


async def list_messages(
    conversation_id: str,
    page: int,
    page_size: int,
    store: Store,
) -> list[Message]:
    """Page 1 holds the newest ``page_size`` messages, returned oldest first."""
    if page < 1:
        raise ValidationError("page must be >= 1")
    if page_size < 1:
        raise ValidationError("page_size must be >= 1")

    messages = await store.messages.list_page(
        conversation_id, skip=(page - 1) * page_size, limit=page_size,
    )
    messages.reverse()
    return messages


async def send_message(
    conversation_id: str,
    body: str,
    store: Store,
    notifier: Notifier,
    *,
    display_name: str | None = None,
    kind: MessageKind | str = MessageKind.TEXT,
    clock: Clock | None = None,
) -> Message:
    now = (clock or SystemClock()).now()
    message_id = new_message_id(now)
    try:
        message = Message(
            id=message_id,
            meta_msg_id=message_id,
            conversation_id=conversation_id,
            author_display_name=display_name or LOCAL_AUTHOR,
            body=body,
            timestamp=now,
            kind=kind,
            delivery_status=DeliveryStatus.SENT,
            direction=Direction.OUTGOING,
        )
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc

    message, created = await store.messages_w.create_if_not_exists(message)
    if not created:
        logger.warning("Generated message id %s already exists", message_id)
        return message

    await store.contacts_w.upsert(
        Contact(
            conversation_id=conversation_id,
            display_name=display_name or UNKNOWN_AUTHOR,
            last_seen_at=now,
        )
    )
    await store.commit()

    await publish(
        notifier,
        MessageCreated(message=message),
        ConversationUpdated(conversation_id=conversation_id),
    )
    return message


async def set_message_status(
    target_id: str,
    status: DeliveryStatus | str,
    store: Store,
    notifier: Notifier,
) -> Message | None:
    """Match ``target_id`` against both id and meta_msg_id. None if nothing matches."""
    try:
        status = DeliveryStatus(status)
    except ValueError as exc:
        raise ValidationError(f"Unknown delivery status: {status!r}") from exc

    message = await store.messages_w.set_status(target_id, status)
    if message is None:
        return None
    await store.commit()

    await publish(
        notifier,
        MessageStatusUpdated(
            message_id=target_id,
            status=status,
            conversation_id=message.conversation_id,
        ),
    )
    return message
