from __future__ import annotations

from fastapi import APIRouter

from inbox_service.api.deps import StoreDep
from inbox_service.api.v1.schemas.conversation import StoreOverviewResponse
from inbox_service.services import diagnostics_service

router = APIRouter(prefix="/api/debug", tags=["debug"])


@router.get("/messages", response_model=StoreOverviewResponse)
async def store_overview(store: StoreDep) -> StoreOverviewResponse:
    overview = await diagnostics_service.get_store_overview(store)
    return StoreOverviewResponse.model_validate(overview)
