# This file defines the squid fleet endpoints used by the management UI.
# It exists so operators can list indexers, promote a new schema, and stop an old service over HTTP.
# Mutating routes require the bearer token; operation failures surface as `{ok: false, message}` with status 500.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from squid_manager.api.auth import require_auth_token
from squid_manager.api.dependencies import get_squid_service
from squid_manager.api.schemas.squid_schemas import OperationResponse, SquidV1
from squid_manager.squids.service import SquidService

router = APIRouter(tags=["squids"])
SquidServiceDep = Annotated[SquidService, Depends(get_squid_service)]


@router.get("/list", response_model=list[SquidV1])
def list_squids(service: SquidServiceDep) -> list[dict[str, object]]:
    return [squid.to_dict() for squid in service.list()]


@router.put(
    "/squids/{service_name}/promote",
    response_model=OperationResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_auth_token)],
)
def promote_squid(service_name: str, service: SquidServiceDep) -> dict[str, object]:
    result = service.promote(service_name)
    return {
        "ok": True,
        "message": f"Promoted {result.promoted_schema} to {result.canonical_schema}",
    }


@router.put(
    "/squids/{service_name}/stop",
    response_model=OperationResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_auth_token)],
)
def stop_squid(service_name: str, service: SquidServiceDep) -> dict[str, object]:
    service.downgrade(service_name)
    return {"ok": True}
