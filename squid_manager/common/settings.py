"""
Application settings loaded from environment variables.
It centralizes cross-cutting concerns like settings, logging, and database access used by the fleet services.
Keeping these helpers isolated reduces duplication and keeps domain modules focused on business logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Final

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

REQUIRED_ENV_VARS: Final[tuple[str, ...]] = (
    "ENV",
    "LOG_LEVEL",
    "DATABASE_URL",
    "AWS_CLUSTER_NAME",
    "SLACK_BOT_TOKEN",
)

PRODUCTION_ENVIRONMENTS: Final[frozenset[str]] = frozenset({"prd", "production"})

_UI_BASE_URLS: Final[dict[bool, str]] = {
    True: "https://decentraland.org/squid-management-ui",
    False: "https://decentraland.zone/squid-management-ui",
}


class Settings(BaseModel):
    """Typed runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    ENV: str
    LOG_LEVEL: str
    DATABASE_URL: str
    AWS_CLUSTER_NAME: str
    SLACK_BOT_TOKEN: str
    AWS_REGION: str = "us-east-1"
    CREDITS_DATABASE_URL: str | None = None
    SLACK_CHANNEL: str = "general"
    USE_MOCK_SQUIDS: bool = False
    FORCE_ETA_UNAVAILABLE: bool = False
    MONITOR_ENABLED: bool = True
    MONITOR_INTERVAL_SECONDS: float = 60.0
    SQUID_UI_BASE_URL: str | None = None
    PROMOTION_REFRESH_URL: str | None = None
    PROMOTION_REFRESH_TOKEN: str | None = None
    METRICS_SCRAPE_TIMEOUT_SECONDS: float = 5.0
    FLEET_MAX_WORKERS: int = 16

    @field_validator(
        "CREDITS_DATABASE_URL",
        "SQUID_UI_BASE_URL",
        "PROMOTION_REFRESH_URL",
        "PROMOTION_REFRESH_TOKEN",
        mode="before",
    )
    @classmethod
    def blank_as_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("MONITOR_INTERVAL_SECONDS", "METRICS_SCRAPE_TIMEOUT_SECONDS", "FLEET_MAX_WORKERS")
    @classmethod
    def validate_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Value must be greater than 0.")
        return value

    @property
    def is_production(self) -> bool:
        return self.ENV.strip().lower() in PRODUCTION_ENVIRONMENTS

    @property
    def env_prefix(self) -> str:
        return "[PRD]" if self.is_production else "[DEV]"

    @property
    def ui_base_url(self) -> str:
        if self.SQUID_UI_BASE_URL:
            return self.SQUID_UI_BASE_URL.rstrip("/")
        return _UI_BASE_URLS[self.is_production]


def load_settings(*, load_env: bool = True) -> Settings:
    """Load and validate environment settings from `.env` and process environment."""

    if load_env:
        load_dotenv()

    missing = [key for key in REQUIRED_ENV_VARS if not os.getenv(key)]
    if missing:
        missing_values = ", ".join(sorted(missing))
        raise RuntimeError(
            f"Missing required environment variables: {missing_values}. "
            "Populate these values in `.env` before starting the application."
        )

    try:
        return Settings.model_validate(dict(os.environ))
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached accessor for application settings."""

    return load_settings()
