from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, TypeAlias

from inbox_service.application.dto.webhook import WebhookContact


class EnvelopeKind(StrEnum):
    DIRECT = "direct"
    WRAPPED = "wrapped"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True, slots=True)
class ChangeValue:
    """The ``entry[0].changes[0].value`` object of a webhook payload."""

    messages: tuple[Any, ...] = ()
    statuses: tuple[Any, ...] = ()
    contacts: tuple[WebhookContact, ...] = ()
    business_phone: str | None = None
    first_contact_id: str | None = None


@dataclass(frozen=True, slots=True)
class ParsedEnvelope:
    kind: EnvelopeKind
    value: ChangeValue | None = None


@dataclass(frozen=True, slots=True)
class MessageReceived:
    record: Any
    contact: WebhookContact | None
    business_phone: str | None
    first_contact_id: str | None = None


@dataclass(frozen=True, slots=True)
class StatusChanged:
    target_id: str | None
    new_status: str | None


IngestEvent: TypeAlias = MessageReceived | StatusChanged


@dataclass(frozen=True, slots=True)
class NormalizedPayload:
    envelope: EnvelopeKind
    events: tuple[IngestEvent, ...] = ()
    contacts: tuple[WebhookContact, ...] = ()
    business_phone: str | None = None


@dataclass(slots=True)
class IngestResult:
    created: int = 0
    status_updates: int = 0
    failed: int = 0


@dataclass(slots=True)
class DirectoryIngestResult:
    processed_files: int = 0
    created: int = 0
    status_updates: int = 0
    failed_files: int = 0
    files: list[str] = field(default_factory=list)
