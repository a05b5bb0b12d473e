"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    hint: str
    http_status: int
    body: str
    retry_after: float
    provider: str
    model: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when request input validation fails."""


class ConfigurationAppError(AppError):
    """Raised when the service is missing required configuration."""


@dataclass
class LLMAppError(AppError):
    """Raised when the upstream model call fails or returns garbage.

    Attributes:
        payload: Extra top-level keys for the response body, such as the
            upstream "status" and raw "details" text.
    """

    payload: dict[str, Any] = field(default_factory=dict)


@dataclass
class RateLimitAppError(AppError):
    """Raised when a client exceeds its request budget."""

    headers: dict[str, str] = field(default_factory=dict)
