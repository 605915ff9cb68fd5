from __future__ import annotations

from datetime import timedelta

import pytest

from inbox_service.application.exceptions import ValidationError
from inbox_service.domain.value_objects.enums import DeliveryStatus, Direction, MessageKind
from inbox_service.services import conversation_service, message_service
from tests.conftest import T0, make_message


@pytest.fixture
def thread(store):
    # Stored out of chronological order on purpose.
    for i in (3, 0, 4, 1, 2):
        store.seed(
            make_message(message_id=f"m{i}", timestamp=T0 + timedelta(minutes=i), body=f"#{i}")
        )
    return store


@pytest.mark.asyncio
async def test_first_page_is_most_recent_oldest_first(thread):
    page = await message_service.list_messages("+1555", 1, 3, thread)

    assert [m.id for m in page] == ["m2", "m3", "m4"]
    assert all(a.timestamp <= b.timestamp for a, b in zip(page, page[1:]))


@pytest.mark.asyncio
async def test_second_page_holds_older_messages(thread):
    page = await message_service.list_messages("+1555", 2, 3, thread)

    assert [m.id for m in page] == ["m0", "m1"]


@pytest.mark.asyncio
async def test_unknown_conversation_is_empty(thread):
    assert await message_service.list_messages("+1000", 1, 50, thread) == []


@pytest.mark.asyncio
async def test_invalid_paging_rejected(store):
    with pytest.raises(ValidationError):
        await message_service.list_messages("+1555", 0, 10, store)
    with pytest.raises(ValidationError):
        await message_service.list_messages("+1555", 1, 0, store)


@pytest.mark.asyncio
async def test_send_message(store, notifier, clock):
    msg = await message_service.send_message("+1555", "Hello", store, notifier, clock=clock)

    assert msg.id.startswith("msg_")
    assert msg.meta_msg_id == msg.id
    assert msg.direction is Direction.OUTGOING
    assert msg.delivery_status is DeliveryStatus.SENT
    assert msg.kind is MessageKind.TEXT
    assert msg.author_display_name == "You"
    assert msg.timestamp == T0
    assert store.commits == 1

    saved = await store.contacts.get("+1555")
    assert saved.display_name == "Unknown User"
    assert notifier.types() == ["new_message", "conversation_updated"]


@pytest.mark.asyncio
async def test_send_message_uses_display_name(store, notifier, clock):
    msg = await message_service.send_message(
        "+1555", "Hello", store, notifier, display_name="Support", kind="text", clock=clock,
    )

    assert msg.author_display_name == "Support"
    assert (await store.contacts.get("+1555")).display_name == "Support"


@pytest.mark.asyncio
async def test_send_message_ids_are_unique(store, notifier, clock):
    first = await message_service.send_message("+1555", "a", store, notifier, clock=clock)
    second = await message_service.send_message("+1555", "b", store, notifier, clock=clock)

    assert first.id != second.id
    assert await store.messages.count() == 2


@pytest.mark.asyncio
async def test_send_message_rejects_bad_input(store, notifier):
    with pytest.raises(ValidationError):
        await message_service.send_message("", "Hello", store, notifier)
    with pytest.raises(ValidationError):
        await message_service.send_message("+1555", "Hello", store, notifier, kind="sticker")
    assert notifier.events == []


@pytest.mark.asyncio
async def test_set_status_by_meta_msg_id(store, notifier):
    store.seed(make_message(message_id="wamid.1", meta_msg_id="meta.1"))

    updated = await message_service.set_message_status("meta.1", "read", store, notifier)

    assert updated is not None
    assert updated.delivery_status is DeliveryStatus.READ
    assert notifier.types() == ["message_status_update"]
    assert notifier.events[0].conversation_id == "+1555"


@pytest.mark.asyncio
async def test_set_status_not_found_returns_none(store, notifier):
    assert await message_service.set_message_status("missing", "read", store, notifier) is None
    assert notifier.events == []
    assert store.commits == 0


@pytest.mark.asyncio
async def test_set_status_rejects_unknown_status(store, notifier):
    with pytest.raises(ValidationError):
        await message_service.set_message_status("wamid.1", "seen", store, notifier)


@pytest.mark.asyncio
async def test_sent_then_delivered_counts_as_unread(store, notifier, clock):
    msg = await message_service.send_message("+1555", "Hello", store, notifier, clock=clock)
    await message_service.set_message_status(msg.id, "delivered", store, notifier)

    (summary,) = await conversation_service.list_conversations(store)

    assert summary.conversation_id == "+1555"
    assert summary.unread_count == 1


@pytest.mark.asyncio
async def test_send_message_id_collision_is_not_announced(store, notifier, clock):
    async def lost_race(message):
        return make_message(message_id=message.id, conversation_id="+1555"), False

    store.messages_w.create_if_not_exists = lost_race

    await message_service.send_message("+1555", "Hello", store, notifier, clock=clock)

    assert notifier.events == []
    assert store.commits == 0
    assert await store.contacts.get("+1555") is None
