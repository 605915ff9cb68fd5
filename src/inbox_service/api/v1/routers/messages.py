from __future__ import annotations

from fastapi import APIRouter, Query

from inbox_service.api.deps import ClockDep, NotifierDep, StoreDep
from inbox_service.api.v1.schemas.message import (
    MessageResponse,
    SendMessageRequest,
    UpdateStatusRequest,
)
from inbox_service.services import message_service

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.get("/{conversation_id}", response_model=list[MessageResponse])
async def list_messages(
    conversation_id: str,
    store: StoreDep,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
) -> list[MessageResponse]:
    messages = await message_service.list_messages(conversation_id, page, limit, store)
    return [MessageResponse.model_validate(m) for m in messages]


@router.post("", response_model=MessageResponse, status_code=201)
async def send_message(
    body: SendMessageRequest,
    store: StoreDep,
    notifier: NotifierDep,
    clock: ClockDep,
) -> MessageResponse:
    msg = await message_service.send_message(
        body.conversation_id,
        body.body,
        store,
        notifier,
        display_name=body.display_name,
        kind=body.kind,
        clock=clock,
    )
    return MessageResponse.model_validate(msg)


@router.put("/{message_id}/status", response_model=MessageResponse | None)
async def update_status(
    message_id: str,
    body: UpdateStatusRequest,
    store: StoreDep,
    notifier: NotifierDep,
) -> MessageResponse | None:
    msg = await message_service.set_message_status(message_id, body.status, store, notifier)
    return MessageResponse.model_validate(msg) if msg else None
