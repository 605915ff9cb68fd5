from __future__ import annotations

import json
from dataclasses import dataclass, field

import pytest

from inbox_service.domain.events.conversation_updated import ConversationUpdated
from inbox_service.domain.events.message_created import MessageCreated
from inbox_service.domain.events.message_status_updated import MessageStatusUpdated
from inbox_service.domain.value_objects.enums import DeliveryStatus
from inbox_service.infrastructure.ws.manager import ConnectionManager
from inbox_service.infrastructure.ws.notifier import LocalNotifier, dispatch
from tests.conftest import make_message


@dataclass
class FakeListener:
    frames: list[dict] = field(default_factory=list)
    broken: bool = False

    async def send_text(self, data: str) -> None:
        if self.broken:
            raise RuntimeError("socket closed")
        self.frames.append(json.loads(data))

    def types(self) -> list[str]:
        return [f["type"] for f in self.frames]


@pytest.fixture
def manager():
    return ConnectionManager()


@pytest.mark.asyncio
async def test_group_broadcast_reaches_members_only(manager):
    alice, bob = FakeListener(), FakeListener()
    manager.connect("alice", alice)
    manager.connect("bob", bob)
    manager.join("alice", "+1555")

    await manager.broadcast_to_conversation("+1555", "new_message", {"conversation_id": "+1555"})

    assert alice.types() == ["new_message"]
    assert bob.frames == []


@pytest.mark.asyncio
async def test_join_is_idempotent_and_multi_group(manager):
    alice = FakeListener()
    manager.connect("alice", alice)
    manager.join("alice", "+1555")
    manager.join("alice", "+1555")
    manager.join("alice", "+1666")

    await manager.broadcast_to_conversation("+1555", "new_message", {})
    await manager.broadcast_to_conversation("+1666", "new_message", {})

    assert len(alice.frames) == 2
    assert manager.groups_of("alice") == {"+1555", "+1666"}


@pytest.mark.asyncio
async def test_broadcast_all_ignores_groups(manager):
    alice, bob = FakeListener(), FakeListener()
    manager.connect("alice", alice)
    manager.connect("bob", bob)
    manager.join("alice", "+1555")

    await manager.broadcast_all("conversation_updated", {"conversation_id": "+1555"})

    assert alice.types() == bob.types() == ["conversation_updated"]


@pytest.mark.asyncio
async def test_no_replay_after_join(manager):
    alice = FakeListener()
    manager.connect("alice", alice)
    await manager.broadcast_to_conversation("+1555", "new_message", {})

    manager.join("alice", "+1555")

    assert alice.frames == []


@pytest.mark.asyncio
async def test_leave_and_dead_listener_cleanup(manager):
    alice, dead = FakeListener(), FakeListener(broken=True)
    manager.connect("alice", alice)
    manager.connect("dead", dead)
    manager.join("alice", "+1555")
    manager.join("dead", "+1555")

    await manager.broadcast_to_conversation("+1555", "new_message", {})
    manager.leave("alice", "+1555")
    await manager.broadcast_to_conversation("+1555", "new_message", {})

    assert len(alice.frames) == 1
    assert manager.listener_count == 1
    assert manager.groups_of("dead") == set()


@pytest.mark.asyncio
async def test_local_notifier_routes_events(manager):
    member, idle = FakeListener(), FakeListener()
    manager.connect("member", member)
    manager.connect("idle", idle)
    manager.join("member", "+1555")
    notifier = LocalNotifier(manager)
    message = make_message(message_id="wamid.1")

    await notifier.notify(MessageCreated(message=message))
    await notifier.notify(ConversationUpdated(conversation_id="+1555"))
    await notifier.notify(
        MessageStatusUpdated(message_id="wamid.1", status=DeliveryStatus.READ, conversation_id="+1555")
    )

    assert member.types() == ["new_message", "conversation_updated", "message_status_update"]
    assert idle.types() == ["conversation_updated"]
    new_message = member.frames[0]["data"]
    assert new_message["conversation_id"] == "+1555"
    assert new_message["message"]["id"] == "wamid.1"
    assert new_message["message"]["delivery_status"] == "sent"
    assert member.frames[2]["data"] == {"id": "wamid.1", "status": "read", "conversation_id": "+1555"}


@pytest.mark.asyncio
async def test_dispatch_drops_events_without_conversation(manager):
    alice = FakeListener()
    manager.connect("alice", alice)
    manager.join("alice", "+1555")

    await dispatch(manager, "new_message", {"message": {}})

    assert alice.frames == []
