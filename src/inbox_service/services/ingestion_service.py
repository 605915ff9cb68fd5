"""Apply normalized webhook events to the store.

Every event is committed on its own: a failing record is rolled back, logged
and counted, and the batch moves on. Only ``StoreUnavailableError`` stops a
batch, leaving the records already committed in place.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from inbox_service.application.dto.ingestion import (
    DirectoryIngestResult,
    EnvelopeKind,
    IngestEvent,
    IngestResult,
    MessageReceived,
    StatusChanged,
)
from inbox_service.application.dto.webhook import WebhookMessage
from inbox_service.application.exceptions import NotFoundError, StoreUnavailableError
from inbox_service.application.ports.clock import Clock, SystemClock
from inbox_service.application.ports.notifier import Notifier
from inbox_service.application.uow import Store
from inbox_service.domain.entities.contact import Contact
from inbox_service.domain.entities.message import UNKNOWN_AUTHOR, Message
from inbox_service.domain.events.conversation_updated import ConversationUpdated
from inbox_service.domain.events.message_created import MessageCreated
from inbox_service.domain.events.message_status_updated import MessageStatusUpdated
from inbox_service.domain.value_objects.enums import DeliveryStatus, Direction
from inbox_service.services import payload_normalizer
from inbox_service.services.notifications import publish

logger = logging.getLogger(__name__)

UNKNOWN_CONVERSATION = "unknown"
MEDIA_PLACEHOLDER = "Media message"


def derive_body(record: WebhookMessage) -> str:
    return (
        (record.text.body if record.text else None)
        or (record.image.caption if record.image else None)
        or (record.document.filename if record.document else None)
        or MEDIA_PLACEHOLDER
    )


def parse_timestamp(raw: str | int | float | None, default: datetime) -> datetime:
    """Unix seconds, fractional part dropped. Missing → ``default``."""
    if raw is None or raw == "":
        return default
    return datetime.fromtimestamp(int(float(raw)), tz=timezone.utc)


def build_message(record: WebhookMessage, event: MessageReceived, received_at: datetime) -> Message:
    outgoing = record.sender == event.business_phone
    if outgoing:
        # Replies from the business line belong in the customer's thread.
        conversation_id = event.first_contact_id or UNKNOWN_CONVERSATION
    else:
        conversation_id = record.sender

    media = record.media
    return Message(
        id=record.id,
        meta_msg_id=record.id,
        conversation_id=conversation_id,
        author_display_name=(event.contact.display_name if event.contact else None) or UNKNOWN_AUTHOR,
        body=derive_body(record),
        timestamp=parse_timestamp(record.timestamp, received_at),
        kind=record.type,
        direction=Direction.OUTGOING if outgoing else Direction.INCOMING,
        media_url=media.link if media else None,
        media_mime_type=media.mime_type if media else None,
        media_sha256=media.sha256 if media else None,
        caption=(record.image.caption if record.image else None)
        or (record.video.caption if record.video else None),
    )


async def apply_events(
    events: Iterable[IngestEvent],
    store: Store,
    notifier: Notifier,
    *,
    clock: Clock | None = None,
) -> IngestResult:
    clock = clock or SystemClock()
    result = IngestResult()
    for event in events:
        try:
            if isinstance(event, MessageReceived):
                if await _apply_message(event, store, notifier, clock):
                    result.created += 1
            elif await _apply_status(event, store, notifier):
                result.status_updates += 1
        except StoreUnavailableError:
            raise
        except Exception:
            result.failed += 1
            logger.exception("Failed to ingest %s", _describe(event))
            await store.rollback()
    return result


async def _apply_message(
    event: MessageReceived,
    store: Store,
    notifier: Notifier,
    clock: Clock,
) -> bool:
    record = WebhookMessage.model_validate(event.record)
    existing = await store.messages.get_by_id(record.id)
    if existing is not None:
        logger.debug("Message %s already exists, skipping", record.id)
        return False

    now = clock.now()
    message, created = await store.messages_w.create_if_not_exists(build_message(record, event, now))
    if not created:
        logger.debug("Message %s was stored concurrently, skipping", record.id)
        return False

    if event.contact is not None:
        # Keyed by the raw sender, which for outgoing messages is the business line itself.
        await store.contacts_w.upsert(
            Contact(
                conversation_id=record.sender,
                display_name=event.contact.display_name,
                last_seen_at=now,
            )
        )
    await store.commit()

    await publish(
        notifier,
        MessageCreated(message=message),
        ConversationUpdated(conversation_id=message.conversation_id),
    )
    return True


async def _apply_status(event: StatusChanged, store: Store, notifier: Notifier) -> bool:
    if not event.target_id:
        raise ValueError("status entry has no message id")
    status = DeliveryStatus(event.new_status)

    message = await store.messages_w.set_status(event.target_id, status)
    if message is None:
        logger.debug("Message %s not found for status update", event.target_id)
        return False
    await store.commit()

    await publish(
        notifier,
        MessageStatusUpdated(
            message_id=event.target_id,
            status=status,
            conversation_id=message.conversation_id,
        ),
    )
    return True


def _describe(event: IngestEvent) -> str:
    if isinstance(event, StatusChanged):
        return f"status update for {event.target_id!r}"
    record_id = event.record.get("id") if isinstance(event.record, Mapping) else None
    return f"message {record_id!r}"


async def ingest_payload(
    payload: Any,
    store: Store,
    notifier: Notifier,
    *,
    clock: Clock | None = None,
) -> IngestResult:
    normalized = payload_normalizer.normalize(payload)
    if normalized.envelope is EnvelopeKind.UNRECOGNIZED:
        logger.info("Payload has no entry[0].changes[0].value, nothing to ingest")
        return IngestResult()

    result = await apply_events(normalized.events, store, notifier, clock=clock)
    logger.info(
        "Ingested %s payload: created=%d status_updates=%d failed=%d",
        normalized.envelope,
        result.created,
        result.status_updates,
        result.failed,
    )
    return result


async def ingest_directory(
    directory: str | Path,
    store: Store,
    notifier: Notifier,
    *,
    clock: Clock | None = None,
) -> DirectoryIngestResult:
    """Ingest every ``*.json`` file in ``directory``, in name order."""
    path = Path(directory)
    if not path.is_dir():
        raise NotFoundError("Sample data directory not found")

    totals = DirectoryIngestResult()
    for file in sorted(p for p in path.glob("*.json") if p.is_file()):
        totals.processed_files += 1
        totals.files.append(file.name)
        logger.info("Processing %s", file.name)
        try:
            payload = json.loads(file.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            totals.failed_files += 1
            logger.warning("Skipping unreadable payload file %s", file.name, exc_info=True)
            continue

        result = await ingest_payload(payload, store, notifier, clock=clock)
        totals.created += result.created
        totals.status_updates += result.status_updates

    logger.info(
        "Directory %s done: files=%d created=%d status_updates=%d failed_files=%d",
        path,
        totals.processed_files,
        totals.created,
        totals.status_updates,
        totals.failed_files,
    )
    return totals
