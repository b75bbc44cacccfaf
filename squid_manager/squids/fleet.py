# This module assembles the fleet view: one record per squid service with schema metadata and sync metrics.
# It exists so the HTTP list route and the monitor read the same data through one code path.
# Service inspection and metric scraping fan out over thread pools and every branch is waited for;
# a failed scrape only blanks that network, a failed service only drops that record.

from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any

import requests
from prometheus_client import Counter

from squid_manager.squids.metric_parser import parse_squid_metric
from squid_manager.squids.networks import (
    Network,
    NetworkPort,
    networks_for_project,
    project_name_from_service,
)
from squid_manager.squids.orchestrator import EcsOrchestrator, private_ipv4_address
from squid_manager.squids.registry import SchemaRegistry
from squid_manager.squids.types import Squid, SquidMetric

LOGGER = logging.getLogger("squids.fleet")

SQUID_METRICS_SCRAPE_FAILURES_TOTAL = Counter(
    "squid_metrics_scrape_failures_total",
    "Number of squid metrics scrapes that failed, by network.",
    ["network"],
)


class FleetInspector:
    """Discovers running squid services and collects their state."""

    def __init__(
        self,
        *,
        orchestrator: EcsOrchestrator,
        registry: SchemaRegistry,
        session: requests.Session | None = None,
        scrape_timeout_seconds: float = 5.0,
        max_workers: int = 16,
    ) -> None:
        self.orchestrator = orchestrator
        self.registry = registry
        self.session = session or requests.Session()
        self.scrape_timeout_seconds = scrape_timeout_seconds
        self.max_workers = max_workers

    def list(self) -> list[Squid]:
        try:
            service_arns = self.orchestrator.list_squid_service_arns()
            if not service_arns:
                return []
            services = self.orchestrator.describe_services(service_arns)

            with (
                ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="fleet-service") as service_pool,
                ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="fleet-scrape") as scrape_pool,
            ):
                futures = [
                    service_pool.submit(self._inspect_service_safely, service, scrape_pool) for service in services
                ]
                records = [future.result() for future in futures]
        except Exception:
            LOGGER.exception("error listing squid services")
            return []

        squids: list[Squid] = []
        for squid in records:
            if squid is None:
                continue
            if not squid.is_complete:
                LOGGER.warning("skipping incomplete squid: %s", squid.service_name)
                continue
            squids.append(squid)
        return squids

    def _inspect_service_safely(self, service: dict[str, Any], scrape_pool: Executor) -> Squid | None:
        service_name = str(service.get("serviceName") or "")
        try:
            return self.inspect_service(service_name, scrape_pool)
        except Exception:
            LOGGER.exception("error inspecting squid service %s", service_name)
            return None

    def inspect_service(self, service_name: str, scrape_pool: Executor) -> Squid:
        project_name = project_name_from_service(service_name)
        squid = Squid(
            name=service_name,
            service_name=service_name,
            schema_name=self.registry.schema_for_service(service_name, project_name),
            project_active_schema=self.registry.active_schema_for_project(project_name),
        )

        task_arns = self.orchestrator.list_task_arns(service_name)
        if not task_arns:
            return squid

        networks = networks_for_project(project_name)
        # There should be a single task per service; a later task overrides an earlier one.
        for task in self.orchestrator.describe_tasks(task_arns):
            squid.version = int(task.get("version") or 0)
            squid.created_at = task.get("createdAt")
            squid.health_status = task.get("healthStatus")
            squid.service_status = task.get("lastStatus")

            address = private_ipv4_address(task)
            if not address:
                continue
            squid.metrics.update(self._scrape_networks(address, networks, scrape_pool))
        return squid

    def _scrape_networks(
        self, address: str, networks: tuple[NetworkPort, ...], scrape_pool: Executor
    ) -> dict[Network, SquidMetric]:
        futures = {entry.network: scrape_pool.submit(self.scrape, address, entry) for entry in networks}
        metrics: dict[Network, SquidMetric] = {}
        for network, future in futures.items():
            metric = future.result()
            if metric is not None:
                metrics[network] = metric
        return metrics

    def scrape(self, address: str, entry: NetworkPort) -> SquidMetric | None:
        url = f"http://{address}:{entry.port}/metrics"
        try:
            response = self.session.get(url, timeout=self.scrape_timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as exc:
            SQUID_METRICS_SCRAPE_FAILURES_TOTAL.labels(network=entry.network.value).inc()
            LOGGER.error("failed to fetch metrics for %s network=%s: %s", address, entry.network.value, exc)
            return None
        return parse_squid_metric(response.text)
