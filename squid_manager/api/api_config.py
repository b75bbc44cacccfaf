# This file defines runtime settings for the API layer in one place.
# It exists so host, CORS, and the bearer token guarding mutating routes can be configured without code edits.
# The config loader reads environment variables and applies safe defaults for local development.

from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ApiConfig(BaseModel):
    """Typed API runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    api_name: str = "Squid Management Server"
    host: str = "0.0.0.0"
    port: int = 5000
    environment: str = "local"
    allowed_origins: list[str] = Field(default_factory=list)
    auth_token: str | None = None
    app_version: str = "0.1.0"

    @field_validator("port")
    @classmethod
    def validate_port(cls, value: int) -> int:
        if not 0 < value < 65536:
            raise ValueError("port must be between 1 and 65535.")
        return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _env_list(name: str, default: list[str] | None = None) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default or [])
    return [item.strip() for item in raw.split(";") if item.strip()]


def load_api_config(*, load_env: bool = True) -> ApiConfig:
    """Load API configuration from `.env` and process environment."""

    if load_env:
        load_dotenv()

    return ApiConfig.model_validate(
        {
            "api_name": os.getenv("API_NAME", "Squid Management Server"),
            "host": os.getenv("API_HOST", "0.0.0.0"),
            "port": _env_int("API_PORT", 5000),
            "environment": os.getenv("ENV", "local"),
            "allowed_origins": _env_list("API_ALLOWED_ORIGINS", []),
            "auth_token": os.getenv("AUTH_TOKEN") or None,
            "app_version": os.getenv("APP_VERSION", "0.1.0"),
        }
    )


@lru_cache(maxsize=1)
def get_api_config() -> ApiConfig:
    """Cached accessor for API config."""

    return load_api_config()
