"""
Shared fleet record types.
Records are rebuilt from scratch on every inspection; only `service_name` is a stable key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from squid_manager.squids.networks import Network


@dataclass(frozen=True)
class SquidMetric:
    # None means the exposition did not carry the metric; it is never coerced to 0.
    sync_eta_seconds: float | None
    mapping_blocks_per_second: float | None
    last_block: float | None
    chain_height: float | None

    def to_dict(self) -> dict[str, float | None]:
        return {
            "sqd_processor_sync_eta_seconds": self.sync_eta_seconds,
            "sqd_processor_mapping_blocks_per_second": self.mapping_blocks_per_second,
            "sqd_processor_last_block": self.last_block,
            "sqd_processor_chain_height": self.chain_height,
        }


@dataclass
class Squid:
    name: str
    service_name: str
    schema_name: str | None
    project_active_schema: str | None
    version: int = 0
    created_at: datetime | None = None
    health_status: str | None = None
    service_status: str | None = None
    metrics: dict[Network, SquidMetric] = field(default_factory=dict)

    @property
    def is_active(self) -> bool:
        return self.schema_name is not None and self.schema_name == self.project_active_schema

    @property
    def is_complete(self) -> bool:
        return bool(self.created_at and self.health_status and self.service_status)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "service_name": self.service_name,
            "schema_name": self.schema_name,
            "project_active_schema": self.project_active_schema,
            "version": self.version,
            "created_at": self.created_at,
            "health_status": self.health_status,
            "service_status": self.service_status,
            "metrics": {network.value: metric.to_dict() for network, metric in self.metrics.items()},
        }
