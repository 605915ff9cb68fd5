"""Turn a raw webhook payload into typed ingestion events.

Two envelope shapes are accepted: the webhook body itself, which carries an
``entry[0].changes[0].value`` object, or the same body wrapped one level
deeper under ``metaData``. Any other shape normalizes to an empty batch so
that a bulk load can move on to the next payload.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from inbox_service.application.dto.ingestion import (
    ChangeValue,
    EnvelopeKind,
    IngestEvent,
    MessageReceived,
    NormalizedPayload,
    ParsedEnvelope,
    StatusChanged,
)
from inbox_service.application.dto.webhook import WebhookContact

logger = logging.getLogger(__name__)

WRAPPER_KEY = "metaData"


class _Change(BaseModel):
    model_config = ConfigDict(extra="ignore")

    value: dict[str, Any]


class _Entry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    changes: list[Any] = Field(min_length=1)


class _Envelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    entry: list[Any] = Field(min_length=1)


def parse_envelope(payload: Any) -> ParsedEnvelope:
    if not isinstance(payload, Mapping):
        return ParsedEnvelope(kind=EnvelopeKind.UNRECOGNIZED)

    kind = EnvelopeKind.DIRECT
    body: Any = payload
    if payload.get(WRAPPER_KEY):
        kind = EnvelopeKind.WRAPPED
        body = payload[WRAPPER_KEY]

    try:
        envelope = _Envelope.model_validate(body)
        entry = _Entry.model_validate(envelope.entry[0])
        change = _Change.model_validate(entry.changes[0])
    except PydanticValidationError:
        return ParsedEnvelope(kind=EnvelopeKind.UNRECOGNIZED)

    value = change.value
    return ParsedEnvelope(kind=kind, value=_parse_change_value(value))


def _parse_change_value(value: Mapping[str, Any]) -> ChangeValue:
    raw_contacts = _as_list(value.get("contacts"))
    contacts: list[WebhookContact] = []
    for raw in raw_contacts:
        try:
            contacts.append(WebhookContact.model_validate(raw))
        except PydanticValidationError:
            logger.warning("Ignoring malformed contact entry: %r", raw)

    metadata = value.get("metadata")
    business_phone = None
    if isinstance(metadata, Mapping):
        business_phone = _as_id(metadata.get("display_phone_number"))

    first_contact_id = None
    if raw_contacts and isinstance(raw_contacts[0], Mapping):
        first_contact_id = _as_id(raw_contacts[0].get("wa_id"))

    return ChangeValue(
        messages=tuple(_as_list(value.get("messages"))),
        statuses=tuple(_as_list(value.get("statuses"))),
        contacts=tuple(contacts),
        business_phone=business_phone,
        first_contact_id=first_contact_id,
    )


def _as_list(raw: Any) -> list[Any]:
    return raw if isinstance(raw, list) else []


def _as_id(raw: Any) -> str | None:
    """Ids arrive as strings but numeric ones are accepted and stringified."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        raw = str(raw)
    return raw if isinstance(raw, str) and raw else None


def normalize(payload: Any) -> NormalizedPayload:
    """Messages first, then statuses, each in payload array order."""
    parsed = parse_envelope(payload)
    if parsed.value is None:
        return NormalizedPayload(envelope=parsed.kind)

    value = parsed.value
    events: list[IngestEvent] = []
    for record in value.messages:
        sender = _as_id(record.get("from")) if isinstance(record, Mapping) else None
        contact = next((c for c in value.contacts if c.wa_id == sender), None)
        events.append(
            MessageReceived(
                record=record,
                contact=contact,
                business_phone=value.business_phone,
                first_contact_id=value.first_contact_id,
            )
        )
    for record in value.statuses:
        if isinstance(record, Mapping):
            events.append(StatusChanged(target_id=record.get("id"), new_status=record.get("status")))
        else:
            events.append(StatusChanged(target_id=None, new_status=None))

    return NormalizedPayload(
        envelope=parsed.kind,
        events=tuple(events),
        contacts=value.contacts,
        business_phone=value.business_phone,
    )
