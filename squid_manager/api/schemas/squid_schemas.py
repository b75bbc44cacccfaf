# This file defines response schemas for the squid fleet endpoints.
# Field names mirror the wire format the management UI already consumes, including the processor metric keys.

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class SquidMetricV1(BaseModel):
    sqd_processor_sync_eta_seconds: float | None = None
    sqd_processor_mapping_blocks_per_second: float | None = None
    sqd_processor_last_block: float | None = None
    sqd_processor_chain_height: float | None = None


class SquidV1(BaseModel):
    name: str
    service_name: str
    schema_name: str | None = None
    project_active_schema: str | None = None
    version: int
    created_at: datetime | None = None
    health_status: str | None = None
    service_status: str | None = None
    metrics: dict[str, SquidMetricV1]


class OperationResponse(BaseModel):
    ok: bool
    message: str | None = None
    request_id: str | None = None
