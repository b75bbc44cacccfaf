"""Error types raised by fleet operations."""

from __future__ import annotations


class SquidOperationError(RuntimeError):
    """Raised when a caller-initiated fleet operation fails."""

    def __init__(self, message: str, *, service_name: str | None = None) -> None:
        self.message = message
        self.service_name = service_name
        super().__init__(message)


class PromotionError(SquidOperationError):
    """Raised when a schema promotion is rejected or rolled back."""


class DowngradeError(SquidOperationError):
    """Raised when a service cannot be scaled down."""
