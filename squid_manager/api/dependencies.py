# This file provides dependency factories for FastAPI routes and the monitor job.
# It exists so clients and services are created once and shared through dependency injection.
# The setup keeps routers thin and makes endpoint tests easy to override.

from __future__ import annotations

from functools import lru_cache

import requests

from squid_manager.api.api_config import ApiConfig, get_api_config
from squid_manager.common.db import DatabaseClient
from squid_manager.common.settings import get_settings
from squid_manager.monitoring.job import PeriodicJob
from squid_manager.monitoring.squid_monitor import SquidMonitor
from squid_manager.notifications.slack import SlackNotifier
from squid_manager.squids.fleet import FleetInspector
from squid_manager.squids.orchestrator import EcsOrchestrator
from squid_manager.squids.promotion import PromotionEngine
from squid_manager.squids.registry import SchemaRegistry
from squid_manager.squids.service import SquidService


@lru_cache(maxsize=1)
def get_database_client() -> DatabaseClient:
    settings = get_settings()
    return DatabaseClient(database_url=settings.DATABASE_URL)


@lru_cache(maxsize=1)
def get_schema_registry() -> SchemaRegistry:
    settings = get_settings()
    credits_db = (
        DatabaseClient(database_url=settings.CREDITS_DATABASE_URL) if settings.CREDITS_DATABASE_URL else None
    )
    return SchemaRegistry(dapps_db=get_database_client(), credits_db=credits_db)


@lru_cache(maxsize=1)
def get_orchestrator() -> EcsOrchestrator:
    settings = get_settings()
    return EcsOrchestrator(cluster=settings.AWS_CLUSTER_NAME, region=settings.AWS_REGION)


@lru_cache(maxsize=1)
def get_squid_service() -> SquidService:
    settings = get_settings()
    registry = get_schema_registry()
    orchestrator = get_orchestrator()
    session = requests.Session()
    inspector = FleetInspector(
        orchestrator=orchestrator,
        registry=registry,
        session=session,
        scrape_timeout_seconds=settings.METRICS_SCRAPE_TIMEOUT_SECONDS,
        max_workers=settings.FLEET_MAX_WORKERS,
    )
    promotion = PromotionEngine(
        registry=registry,
        refresh_url=settings.PROMOTION_REFRESH_URL,
        refresh_token=settings.PROMOTION_REFRESH_TOKEN,
        session=session,
    )
    return SquidService(inspector=inspector, promotion=promotion, orchestrator=orchestrator)


@lru_cache(maxsize=1)
def get_slack_notifier() -> SlackNotifier:
    settings = get_settings()
    return SlackNotifier(token=settings.SLACK_BOT_TOKEN, default_channel=settings.SLACK_CHANNEL)


@lru_cache(maxsize=1)
def get_squid_monitor() -> SquidMonitor:
    settings = get_settings()
    return SquidMonitor(
        squids=get_squid_service(),
        notifier=get_slack_notifier(),
        ui_base_url=settings.ui_base_url,
        env_prefix=settings.env_prefix,
        active=settings.is_production,
        use_mock_squids=settings.USE_MOCK_SQUIDS,
        force_eta_unavailable=settings.FORCE_ETA_UNAVAILABLE,
    )


@lru_cache(maxsize=1)
def get_squid_monitor_job() -> PeriodicJob:
    settings = get_settings()
    return PeriodicJob(
        name="squid-monitor",
        func=get_squid_monitor().tick,
        interval_seconds=settings.MONITOR_INTERVAL_SECONDS,
        startup_delay_seconds=0.0,
    )


def get_config() -> ApiConfig:
    return get_api_config()
