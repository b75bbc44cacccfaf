# This file tests the squid service facade used by the HTTP layer.
# It exists to confirm downgrade scales a service to zero and that write failures surface as operation errors.

from __future__ import annotations

import boto3
import pytest
from botocore.stub import Stubber

from squid_manager.squids.errors import DowngradeError, PromotionError, SquidOperationError
from squid_manager.squids.orchestrator import EcsOrchestrator
from squid_manager.squids.service import SquidService


class StubPromotion:
    def __init__(self, error: PromotionError | None = None) -> None:
        self.error = error
        self.calls: list[str] = []

    def promote(self, service_name: str) -> str:
        self.calls.append(service_name)
        if self.error is not None:
            raise self.error
        return "promoted"


class StubInspector:
    def list(self) -> list[str]:
        return ["squid"]


def _service(orchestrator: EcsOrchestrator, promotion: StubPromotion | None = None) -> SquidService:
    return SquidService(
        inspector=StubInspector(),  # type: ignore[arg-type]
        promotion=promotion or StubPromotion(),  # type: ignore[arg-type]
        orchestrator=orchestrator,
    )


def test_downgrade_sets_desired_count_to_zero() -> None:
    client = boto3.client("ecs", region_name="us-east-1")
    with Stubber(client) as stubber:
        stubber.add_response(
            "update_service",
            {"service": {"serviceName": "svc-x", "desiredCount": 0, "status": "ACTIVE"}},
            expected_params={"cluster": "test-cluster", "service": "svc-x", "desiredCount": 0},
        )

        _service(EcsOrchestrator(cluster="test-cluster", client=client)).downgrade("svc-x")

        stubber.assert_no_pending_responses()


def test_downgrade_failure_raises_downgrade_error() -> None:
    client = boto3.client("ecs", region_name="us-east-1")
    with Stubber(client) as stubber:
        stubber.add_client_error("update_service", service_error_code="ServiceNotFoundException")

        with pytest.raises(DowngradeError) as exc_info:
            _service(EcsOrchestrator(cluster="test-cluster", client=client)).downgrade("svc-x")

    assert isinstance(exc_info.value, SquidOperationError)
    assert exc_info.value.service_name == "svc-x"
    assert "svc-x" in exc_info.value.message


def test_promote_delegates_and_reraises_errors() -> None:
    orchestrator = EcsOrchestrator(cluster="test-cluster", client=object())
    promotion = StubPromotion(PromotionError("Schema is already active", service_name="svc-x"))

    with pytest.raises(PromotionError, match="already active"):
        _service(orchestrator, promotion).promote("svc-x")

    assert promotion.calls == ["svc-x"]


def test_list_delegates_to_inspector() -> None:
    orchestrator = EcsOrchestrator(cluster="test-cluster", client=object())

    assert _service(orchestrator).list() == ["squid"]
