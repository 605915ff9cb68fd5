"""Shared test fixtures and in-memory fakes of the store and notifier ports."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from inbox_service.domain.entities.contact import Contact
from inbox_service.domain.entities.message import Message
from inbox_service.domain.events.base import DomainEvent
from inbox_service.domain.value_objects.enums import DeliveryStatus, Direction, MessageKind

BUSINESS_PHONE = "918329446654"
T0 = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_message(
    *,
    message_id: str = "wamid.1",
    conversation_id: str = "+1555",
    body: str = "hello",
    timestamp: datetime = T0,
    status: DeliveryStatus = DeliveryStatus.SENT,
    direction: Direction = Direction.INCOMING,
    author: str = "Ravi",
    meta_msg_id: str | None = None,
) -> Message:
    return Message(
        id=message_id,
        meta_msg_id=meta_msg_id or message_id,
        conversation_id=conversation_id,
        author_display_name=author,
        body=body,
        timestamp=timestamp,
        kind=MessageKind.TEXT,
        delivery_status=status,
        direction=direction,
    )


def make_payload(
    *,
    messages: list[dict[str, Any]] | None = None,
    statuses: list[dict[str, Any]] | None = None,
    contacts: list[dict[str, Any]] | None = None,
    business_phone: str = BUSINESS_PHONE,
    wrapped: bool = False,
) -> dict[str, Any]:
    value: dict[str, Any] = {
        "messaging_product": "whatsapp",
        "metadata": {"display_phone_number": business_phone, "phone_number_id": "629305560276479"},
    }
    if contacts is not None:
        value["contacts"] = contacts
    if messages is not None:
        value["messages"] = messages
    if statuses is not None:
        value["statuses"] = statuses
    body = {
        "object": "whatsapp_business_account",
        "entry": [{"id": "30164062719905277", "changes": [{"field": "messages", "value": value}]}],
    }
    if wrapped:
        return {"payload_type": "whatsapp_webhook", "_id": "conv1-msg1-user", "metaData": body}
    return body


def text_message(message_id: str, sender: str, body: str, ts: int = 1754400000) -> dict[str, Any]:
    return {"from": sender, "id": message_id, "timestamp": str(ts), "text": {"body": body}, "type": "text"}


def contact(wa_id: str, name: str) -> dict[str, Any]:
    return {"profile": {"name": name}, "wa_id": wa_id}


@dataclass
class FixedClock:
    current: datetime = T0

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)

    async def get_by_id(self, message_id: str) -> Message | None:
        return next((m for m in self._messages if m.id == message_id), None)

    async def list_page(self, conversation_id: str, *, skip: int = 0, limit: int = 50) -> list[Message]:
        indexed = [(i, m) for i, m in enumerate(self._messages) if m.conversation_id == conversation_id]
        indexed.sort(key=lambda pair: (pair[1].timestamp, pair[0]), reverse=True)
        return [m for _, m in indexed][skip:skip + limit]

    async def list_all(self) -> list[Message]:
        return list(self._messages)

    async def list_recent(self, limit: int) -> list[Message]:
        indexed = sorted(enumerate(self._messages), key=lambda pair: (pair[1].timestamp, pair[0]), reverse=True)
        return [m for _, m in indexed][:limit]

    async def count(self) -> int:
        return len(self._messages)


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader

    async def create_if_not_exists(self, message: Message) -> tuple[Message, bool]:
        existing = await self._reader.get_by_id(message.id)
        if existing is not None:
            return existing, False
        self._reader._messages.append(message)
        return message, True

    async def set_status(self, target_id: str, status: DeliveryStatus) -> Message | None:
        for i, m in enumerate(self._reader._messages):
            if m.id == target_id or m.meta_msg_id == target_id:
                updated = dataclasses.replace(m, delivery_status=status)
                self._reader._messages[i] = updated
                return updated
        return None


@dataclass
class FakeContactStore:
    _contacts: dict[str, Contact] = field(default_factory=dict)

    async def get(self, conversation_id: str) -> Contact | None:
        return self._contacts.get(conversation_id)

    async def upsert(self, contact: Contact) -> None:
        self._contacts[contact.conversation_id] = contact


@dataclass
class FakeStore:
    """In-memory Store for unit tests."""
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    contacts: FakeContactStore = field(default_factory=FakeContactStore)
    contacts_w: FakeContactStore | None = None
    commits: int = 0
    rollbacks: int = 0
    _committed: tuple[list[Message], dict[str, Contact]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)
        if self.contacts_w is None:
            self.contacts_w = self.contacts
        self._snapshot()

    def seed(self, *messages: Message) -> None:
        """Store messages as already committed."""
        self.messages._messages.extend(messages)
        self._snapshot()

    def _snapshot(self) -> None:
        self._committed = (list(self.messages._messages), dict(self.contacts._contacts))

    async def commit(self) -> None:
        self.commits += 1
        self._snapshot()

    async def rollback(self) -> None:
        self.rollbacks += 1
        messages, contacts = self._committed
        self.messages._messages[:] = messages
        self.contacts._contacts.clear()
        self.contacts._contacts.update(contacts)


@dataclass
class RecordingNotifier:
    events: list[DomainEvent] = field(default_factory=list)

    async def notify(self, event: DomainEvent) -> None:
        self.events.append(event)

    def types(self) -> list[str]:
        return [e.event_type for e in self.events]


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()
