"""
Facade over the fleet operations exposed to the HTTP layer and the monitor.
Read failures degrade to empty results inside the fleet inspector; write failures are logged here and
re-raised as `SquidOperationError` so callers can report them. Nothing is retried.
"""

from __future__ import annotations

import logging

from botocore.exceptions import BotoCoreError, ClientError

from squid_manager.squids.errors import DowngradeError, PromotionError
from squid_manager.squids.fleet import FleetInspector
from squid_manager.squids.orchestrator import EcsOrchestrator
from squid_manager.squids.promotion import PromotionEngine, PromotionResult
from squid_manager.squids.types import Squid

LOGGER = logging.getLogger("squids")


class SquidService:
    def __init__(
        self,
        *,
        inspector: FleetInspector,
        promotion: PromotionEngine,
        orchestrator: EcsOrchestrator,
    ) -> None:
        self.inspector = inspector
        self.promotion = promotion
        self.orchestrator = orchestrator

    def list(self) -> list[Squid]:
        return self.inspector.list()

    def promote(self, service_name: str) -> PromotionResult:
        try:
            return self.promotion.promote(service_name)
        except PromotionError as exc:
            LOGGER.error("promotion failed service=%s: %s", service_name, exc.message)
            raise

    def downgrade(self, service_name: str) -> None:
        try:
            response = self.orchestrator.set_desired_count(service_name, 0)
        except (BotoCoreError, ClientError) as exc:
            LOGGER.error("downgrade failed service=%s: %s", service_name, exc)
            raise DowngradeError(f"Could not downgrade {service_name}: {exc}", service_name=service_name) from exc

        deployment = response.get("service", {})
        LOGGER.info(
            "downgraded service=%s desired_count=%s status=%s",
            service_name,
            deployment.get("desiredCount"),
            deployment.get("status"),
        )
