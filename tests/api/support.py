# This file provides shared helpers for API endpoint tests.
# It exists so tests can override service dependencies without touching ECS, Postgres, or Slack.
# The helpers build consistent config objects and scoped TestClient contexts.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastapi.testclient import TestClient

from squid_manager.api.api_config import ApiConfig
from squid_manager.api.app import app
from squid_manager.api.dependencies import (
    get_config,
    get_database_client,
    get_squid_monitor_job,
    get_squid_service,
)
from squid_manager.monitoring.job import PeriodicJob

TEST_TOKEN = "test-token"


def build_test_config(*, auth_token: str | None = TEST_TOKEN) -> ApiConfig:
    """Create deterministic API config for tests."""

    return ApiConfig(
        api_name="Test Squid Management Server",
        host="0.0.0.0",
        port=5000,
        environment="test",
        allowed_origins=[],
        auth_token=auth_token,
        app_version="0.1.0",
    )


def auth_headers(token: str = TEST_TOKEN) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class FakeDBClient:
    """Simple fake DB dependency for health/readiness endpoint tests."""

    def __init__(self, *, connected: bool = True) -> None:
        self._connected = connected

    def can_connect(self) -> bool:
        return self._connected


@contextmanager
def api_test_client(
    *,
    config: ApiConfig | None = None,
    db_client: Any | None = None,
    squid_service: Any | None = None,
) -> Iterator[TestClient]:
    """Yield a TestClient with scoped dependency overrides."""

    resolved_config = config or build_test_config()
    idle_job = PeriodicJob(name="test-monitor", func=lambda: None, interval_seconds=60)

    app.dependency_overrides[get_config] = lambda: resolved_config
    app.dependency_overrides[get_squid_monitor_job] = lambda: idle_job
    app.dependency_overrides[get_database_client] = lambda: db_client or FakeDBClient()
    if squid_service is not None:
        app.dependency_overrides[get_squid_service] = lambda: squid_service

    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
