from __future__ import annotations

from inbox_service.application.dto.conversation import ConversationGroup, StoreOverview
from inbox_service.application.uow import Store
from inbox_service.services.conversation_service import summarize

RECENT_LIMIT = 10


async def get_store_overview(store: Store, *, recent_limit: int = RECENT_LIMIT) -> StoreOverview:
    total = await store.messages.count()
    recent = await store.messages.list_recent(recent_limit)
    groups = [
        ConversationGroup(
            conversation_id=s.conversation_id,
            count=s.message_count,
            last_message_body=s.last_message_body,
            display_name=s.display_name,
        )
        for s in summarize(await store.messages.list_all())
    ]
    return StoreOverview(total_messages=total, recent_messages=recent, conversations=groups)
