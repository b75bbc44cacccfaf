# This file defines liveness and readiness endpoints for the fleet manager.
# It exists so the load balancer and deploy tooling can verify the process and its database quickly.
# Readiness reports the monitor job state alongside database connectivity.

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from squid_manager.api.api_config import ApiConfig
from squid_manager.api.dependencies import get_config, get_database_client, get_squid_monitor_job
from squid_manager.api.schemas.health_schemas import HealthResponse, ReadinessResponse
from squid_manager.common.db import DatabaseClient
from squid_manager.monitoring.job import PeriodicJob

router = APIRouter(tags=["health"])
ConfigDep = Annotated[ApiConfig, Depends(get_config)]
DBDep = Annotated[DatabaseClient, Depends(get_database_client)]
JobDep = Annotated[PeriodicJob, Depends(get_squid_monitor_job)]


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@router.get("/ping", response_class=PlainTextResponse)
def ping(request: Request) -> str:
    return request.url.path


@router.get("/health", response_model=HealthResponse)
def health(
    request: Request,
    config: ConfigDep,
) -> dict[str, object]:
    return {
        "request_id": request.state.request_id,
        "status": "ok",
        "environment": config.environment,
        "service_name": config.api_name,
        "version": config.app_version,
        "timestamp": _utc_now(),
    }


@router.get("/ready", response_model=ReadinessResponse)
def ready(
    request: Request,
    db: DBDep,
    job: JobDep,
) -> dict[str, object]:
    db_connected = db.can_connect()
    return {
        "request_id": request.state.request_id,
        "db_connected": db_connected,
        "monitor_running": job.is_started,
        "ready": db_connected,
        "database": "reachable" if db_connected else "unreachable",
        "timestamp": _utc_now(),
    }
