from __future__ import annotations

from fastapi import APIRouter

from inbox_service.api.deps import StoreDep
from inbox_service.api.v1.schemas.conversation import ConversationSummaryResponse
from inbox_service.services import conversation_service

router = APIRouter(prefix="/api/conversations", tags=["conversations"])


@router.get("", response_model=list[ConversationSummaryResponse])
async def list_conversations(store: StoreDep) -> list[ConversationSummaryResponse]:
    summaries = await conversation_service.list_conversations(store)
    return [ConversationSummaryResponse.model_validate(s) for s in summaries]
