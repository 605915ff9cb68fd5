from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body

from inbox_service.api.deps import ClockDep, NotifierDep, StoreDep
from inbox_service.api.v1.schemas.ingestion import DirectoryIngestResponse, IngestResponse
from inbox_service.config import settings
from inbox_service.services import ingestion_service

router = APIRouter(prefix="/api", tags=["ingestion"])


@router.post("/webhook/process-payload", response_model=IngestResponse)
async def process_payload(
    payload: Annotated[Any, Body()],
    store: StoreDep,
    notifier: NotifierDep,
    clock: ClockDep,
) -> IngestResponse:
    result = await ingestion_service.ingest_payload(payload, store, notifier, clock=clock)
    return IngestResponse.model_validate(result)


@router.post("/load-sample-data", response_model=DirectoryIngestResponse)
async def load_sample_data(
    store: StoreDep,
    notifier: NotifierDep,
    clock: ClockDep,
) -> DirectoryIngestResponse:
    result = await ingestion_service.ingest_directory(
        settings.SAMPLE_DATA_DIR, store, notifier, clock=clock,
    )
    return DirectoryIngestResponse.model_validate(result)
