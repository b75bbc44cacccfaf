"""
Logging configuration helpers.
It centralizes cross-cutting concerns like settings, logging, and database access used by the fleet services.
Keeping these helpers isolated reduces duplication and keeps domain modules focused on business logic.
"""

from __future__ import annotations

import logging

from squid_manager.common.settings import get_settings

_LOGGING_CONFIGURED = False

# boto and urllib3 are chatty at DEBUG; keep them at WARNING unless asked otherwise.
_NOISY_LOGGERS = ("botocore", "boto3", "urllib3", "slack_sdk")


def configure_logging() -> None:
    """Configure process-wide logging from environment settings."""

    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    settings = get_settings()
    level_name = settings.LOG_LEVEL.upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    _LOGGING_CONFIGURED = True
