from __future__ import annotations

from pydantic import BaseModel


class IngestResponse(BaseModel):
    created: int
    status_updates: int
    failed: int

    model_config = {"from_attributes": True}


class DirectoryIngestResponse(BaseModel):
    processed_files: int
    created: int
    status_updates: int
    failed_files: int
    files: list[str]

    model_config = {"from_attributes": True}
