"""Deterministic squid fixtures used when the monitor runs with `USE_MOCK_SQUIDS`."""

from __future__ import annotations

from datetime import UTC, datetime

from squid_manager.squids.networks import Network
from squid_manager.squids.types import Squid, SquidMetric


def mock_squids(*, force_eta_unavailable: bool = False, now: datetime | None = None) -> list[Squid]:
    """Return a fresh fixture fleet; callers may mutate it freely."""

    matic_eta = None if force_eta_unavailable else 0.0
    return [
        Squid(
            name="mock-marketplace-squid",
            service_name="mock-marketplace-squid-server",
            schema_name="squid_marketplace",
            project_active_schema="squid_marketplace",
            version=1,
            created_at=now or datetime.now(tz=UTC),
            health_status="HEALTHY",
            service_status="RUNNING",
            metrics={
                Network.ETHEREUM: SquidMetric(
                    sync_eta_seconds=30.0,
                    mapping_blocks_per_second=5.2,
                    last_block=18500000,
                    chain_height=18500100,
                ),
                Network.MATIC: SquidMetric(
                    sync_eta_seconds=matic_eta,
                    mapping_blocks_per_second=10.5,
                    last_block=45600000,
                    chain_height=45600200,
                ),
            },
        )
    ]
