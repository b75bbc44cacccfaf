# This file tests the squid fleet endpoints for listing, promotion, and downgrade.
# It exists to confirm the wire format the management UI consumes and the `{ok, message}` operation contract.
# Authorization on mutating routes is covered here as well.

from __future__ import annotations

from datetime import UTC, datetime

from squid_manager.squids.errors import DowngradeError, PromotionError
from squid_manager.squids.networks import Network
from squid_manager.squids.promotion import PromotionResult
from squid_manager.squids.types import Squid, SquidMetric
from tests.api.support import api_test_client, auth_headers, build_test_config

SERVICE = "marketplace-squid-server-a-blue-92e812a"


class FakeSquidService:
    def __init__(self, *, promote_error: Exception | None = None, downgrade_error: Exception | None = None) -> None:
        self.promote_error = promote_error
        self.downgrade_error = downgrade_error
        self.promoted: list[str] = []
        self.downgraded: list[str] = []

    def list(self) -> list[Squid]:
        return [
            Squid(
                name=SERVICE,
                service_name=SERVICE,
                schema_name="squid_marketplace_a_blue",
                project_active_schema="squid_marketplace_a_blue",
                version=4,
                created_at=datetime(2026, 3, 1, 12, 0, tzinfo=UTC),
                health_status="HEALTHY",
                service_status="RUNNING",
                metrics={
                    Network.ETHEREUM: SquidMetric(
                        sync_eta_seconds=0.0,
                        mapping_blocks_per_second=12.5,
                        last_block=18500000,
                        chain_height=18500000,
                    ),
                    Network.MATIC: SquidMetric(
                        sync_eta_seconds=None,
                        mapping_blocks_per_second=None,
                        last_block=None,
                        chain_height=None,
                    ),
                },
            )
        ]

    def promote(self, service_name: str) -> PromotionResult:
        self.promoted.append(service_name)
        if self.promote_error is not None:
            raise self.promote_error
        return PromotionResult(
            service_name=service_name,
            project_name="marketplace",
            canonical_schema="squid_marketplace",
            promoted_schema="squid_marketplace_a_blue",
            previous_schema="squid_marketplace_b_green",
        )

    def downgrade(self, service_name: str) -> None:
        self.downgraded.append(service_name)
        if self.downgrade_error is not None:
            raise self.downgrade_error


def test_list_returns_squids_in_wire_format() -> None:
    with api_test_client(squid_service=FakeSquidService()) as client:
        response = client.get("/list")

    assert response.status_code == 200
    squid = response.json()[0]
    assert squid["service_name"] == SERVICE
    assert squid["version"] == 4
    assert squid["created_at"].startswith("2026-03-01T12:00:00")
    assert squid["metrics"]["ETHEREUM"] == {
        "sqd_processor_sync_eta_seconds": 0.0,
        "sqd_processor_mapping_blocks_per_second": 12.5,
        "sqd_processor_last_block": 18500000,
        "sqd_processor_chain_height": 18500000,
    }
    assert squid["metrics"]["MATIC"]["sqd_processor_sync_eta_seconds"] is None


def test_promote_returns_ok() -> None:
    service = FakeSquidService()
    with api_test_client(squid_service=service) as client:
        response = client.put(f"/squids/{SERVICE}/promote", headers=auth_headers())

    assert response.status_code == 200
    assert response.json() == {"ok": True, "message": "Promoted squid_marketplace_a_blue to squid_marketplace"}
    assert service.promoted == [SERVICE]


def test_promote_failure_returns_500_with_message() -> None:
    service = FakeSquidService(promote_error=PromotionError("Schema is already active", service_name=SERVICE))
    with api_test_client(squid_service=service) as client:
        response = client.put(f"/squids/{SERVICE}/promote", headers=auth_headers())

    assert response.status_code == 500
    payload = response.json()
    assert payload["ok"] is False
    assert payload["message"] == "Schema is already active"


def test_stop_downgrades_service() -> None:
    service = FakeSquidService()
    with api_test_client(squid_service=service) as client:
        response = client.put(f"/squids/{SERVICE}/stop", headers=auth_headers())

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert service.downgraded == [SERVICE]


def test_stop_failure_returns_500_with_message() -> None:
    service = FakeSquidService(downgrade_error=DowngradeError("Could not downgrade", service_name=SERVICE))
    with api_test_client(squid_service=service) as client:
        response = client.put(f"/squids/{SERVICE}/stop", headers=auth_headers())

    assert response.status_code == 500
    assert response.json()["message"] == "Could not downgrade"


def test_mutating_routes_require_bearer_token() -> None:
    service = FakeSquidService()
    with api_test_client(squid_service=service) as client:
        missing = client.put(f"/squids/{SERVICE}/promote")
        wrong = client.put(f"/squids/{SERVICE}/stop", headers=auth_headers("nope"))
        malformed = client.put(f"/squids/{SERVICE}/stop", headers={"Authorization": "Token test-token"})

    assert missing.status_code == 401
    assert missing.json()["message"] == "Missing or invalid Authorization header"
    assert wrong.status_code == 401
    assert wrong.json()["ok"] is False
    assert wrong.json()["message"] == "Invalid authorization token"
    assert malformed.status_code == 401
    assert service.promoted == []
    assert service.downgraded == []


def test_unconfigured_token_rejects_all_mutations() -> None:
    service = FakeSquidService()
    with api_test_client(config=build_test_config(auth_token=None), squid_service=service) as client:
        response = client.put(f"/squids/{SERVICE}/stop", headers=auth_headers())

    assert response.status_code == 401
    assert service.downgraded == []


def test_list_does_not_require_token() -> None:
    with api_test_client(squid_service=FakeSquidService()) as client:
        assert client.get("/list").status_code == 200
