"""Per-contact conversation summaries, recomputed from the message store."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from inbox_service.application.dto.conversation import ConversationSummary
from inbox_service.application.uow import Store
from inbox_service.domain.entities.message import Message
from inbox_service.domain.value_objects.enums import DeliveryStatus


@dataclass(slots=True)
class _Group:
    last: Message
    count: int = 0
    unread: int = 0


def summarize(messages: Iterable[Message]) -> list[ConversationSummary]:
    """Group messages by conversation.

    ``messages`` must be in insertion order: the last message of a group is the
    last one stored, not the one with the latest timestamp. Only messages in
    the ``delivered`` state count as unread.
    """
    groups: dict[str, _Group] = {}
    for message in messages:
        group = groups.get(message.conversation_id)
        if group is None:
            group = groups[message.conversation_id] = _Group(last=message)
        group.last = message
        group.count += 1
        if message.delivery_status == DeliveryStatus.DELIVERED:
            group.unread += 1

    summaries = [
        ConversationSummary(
            conversation_id=conversation_id,
            last_message_body=group.last.body,
            last_message_timestamp=group.last.timestamp,
            display_name=group.last.author_display_name,
            unread_count=group.unread,
            message_count=group.count,
        )
        for conversation_id, group in groups.items()
    ]
    summaries.sort(key=lambda s: s.last_message_timestamp, reverse=True)
    return summaries


async def list_conversations(store: Store) -> list[ConversationSummary]:
    return summarize(await store.messages.list_all())
