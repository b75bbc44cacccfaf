# This module is the per-cycle logic of the squid monitor.
# Each cycle reads the fleet, keeps only squids whose schema is the project's active schema, and checks
# every network the project indexes: missing metrics (throttled), unreadable ETA, and ETA above the sync threshold.
# Errors escaping a cycle are logged and reported once; the next scheduled cycle runs regardless.

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Final, Protocol

from prometheus_client import Counter

from squid_manager.monitoring.alerts import (
    eta_unavailable_alert,
    monitor_error_alert,
    no_metrics_alert,
    out_of_sync_alert,
)
from squid_manager.monitoring.fixtures import mock_squids
from squid_manager.monitoring.throttle import AlertThrottle, ThrottleKey
from squid_manager.notifications.slack import Notifier, SlackMessage
from squid_manager.squids.networks import networks_for_service
from squid_manager.squids.types import Squid

LOGGER = logging.getLogger("monitoring")

ETA_CONSIDERED_OUT_OF_SYNC: Final[float] = 100
NO_METRICS_ALERT_WINDOW: Final[timedelta] = timedelta(minutes=5)
NO_METRICS_REASON: Final[str] = "no-metrics"

SQUID_MONITOR_CYCLES_TOTAL = Counter(
    "squid_monitor_cycles_total",
    "Number of squid monitor cycles, by outcome.",
    ["status"],
)
SQUID_MONITOR_ALERTS_TOTAL = Counter(
    "squid_monitor_alerts_total",
    "Number of alerts dispatched by the squid monitor, by reason.",
    ["reason"],
)


class SquidSource(Protocol):
    def list(self) -> list[Squid]: ...


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def _error_message(error: BaseException) -> str:
    return str(error) or error.__class__.__name__


class SquidMonitor:
    """Stateful alerting over the active fleet; owns its throttle store."""

    def __init__(
        self,
        *,
        squids: SquidSource,
        notifier: Notifier,
        ui_base_url: str,
        env_prefix: str = "[DEV]",
        active: bool = True,
        use_mock_squids: bool = False,
        force_eta_unavailable: bool = False,
        throttle: AlertThrottle | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.squids = squids
        self.notifier = notifier
        self.ui_base_url = ui_base_url
        self.env_prefix = env_prefix
        self.active = active
        self.use_mock_squids = use_mock_squids
        self.force_eta_unavailable = force_eta_unavailable
        self.throttle = throttle if throttle is not None else AlertThrottle(window=NO_METRICS_ALERT_WINDOW)
        self.clock = clock

    def tick(self) -> None:
        """Scheduled entrypoint; only production-like environments run real cycles."""

        if not self.active:
            LOGGER.debug("squid monitor inactive for this environment; skipping cycle")
            SQUID_MONITOR_CYCLES_TOTAL.labels(status="skipped").inc()
            return
        self.run_cycle()

    def run_cycle(self) -> None:
        try:
            LOGGER.info("🦑 Monitoring squids...")
            fleet = self._load_fleet()
            active_squids = [squid for squid in fleet if squid.is_active]
            LOGGER.info("🔍 Found %s active squids", len(active_squids))

            now = self.clock()
            evaluated: set[ThrottleKey] = set()
            for squid in active_squids:
                evaluated.update(self.check_squid(squid, now=now))
            # Squids that left the active fleet must start from a fresh detection if they return.
            pruned = self.throttle.retain(evaluated)
            if pruned:
                LOGGER.debug("pruned %s throttle entries for squids no longer monitored", pruned)
        except Exception as exc:
            LOGGER.exception("❌ Error monitoring squids")
            SQUID_MONITOR_CYCLES_TOTAL.labels(status="error").inc()
            self._notify(
                monitor_error_alert(error_message=_error_message(exc), env_prefix=self.env_prefix, now=self.clock()),
                reason="error",
            )
            return
        SQUID_MONITOR_CYCLES_TOTAL.labels(status="ok").inc()

    def check_squid(self, squid: Squid, *, now: datetime) -> set[ThrottleKey]:
        """Check every network of an active squid; return the throttle keys it covered."""

        keys: set[ThrottleKey] = set()
        if not squid.is_active:
            return keys

        for entry in networks_for_service(squid.service_name):
            network = entry.network.value
            key = ThrottleKey(squid.service_name, network, NO_METRICS_REASON)
            keys.add(key)
            metric = squid.metrics.get(entry.network)

            if metric is None:
                if self.throttle.should_alert(key, now):
                    self._notify(
                        no_metrics_alert(
                            squid=squid,
                            network=network,
                            env_prefix=self.env_prefix,
                            base_url=self.ui_base_url,
                            now=now,
                        ),
                        reason=NO_METRICS_REASON,
                    )
                continue

            self.throttle.clear(key)

            if metric.sync_eta_seconds is None:
                self._notify(
                    eta_unavailable_alert(
                        squid=squid,
                        network=network,
                        env_prefix=self.env_prefix,
                        base_url=self.ui_base_url,
                        now=now,
                    ),
                    reason="eta-unavailable",
                )
                continue

            if metric.sync_eta_seconds > ETA_CONSIDERED_OUT_OF_SYNC:
                self._notify(
                    out_of_sync_alert(
                        squid=squid,
                        network=network,
                        metric=metric,
                        env_prefix=self.env_prefix,
                        base_url=self.ui_base_url,
                        now=now,
                    ),
                    reason="out-of-sync",
                )
        return keys

    def reset(self) -> None:
        self.throttle.reset()

    def _load_fleet(self) -> list[Squid]:
        if self.use_mock_squids:
            return mock_squids(force_eta_unavailable=self.force_eta_unavailable)
        return self.squids.list()

    def _notify(self, message: SlackMessage, *, reason: str) -> None:
        SQUID_MONITOR_ALERTS_TOTAL.labels(reason=reason).inc()
        try:
            self.notifier.send_formatted_message(message)
        except Exception:
            LOGGER.exception("failed to dispatch %s notification", reason)
