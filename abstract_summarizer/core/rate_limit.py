"""Rate limiting dependency for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

- The limiter instance is owned by the application (``app.state``), built by
  the app factory and reached through ``get_rate_limiter``. Tests swap it via
  ``app.dependency_overrides`` or by passing their own instance to
  ``create_app``.
- Clients are keyed by the first ``X-Forwarded-For`` address, then
  ``X-Real-IP``, then a shared ``"unknown"`` bucket.
- The check runs exactly once per request, before the body is read.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Request

from abstract_summarizer.adapters.rate_limit.base import (
    UNKNOWN_CLIENT_KEY,
    AbstractRateLimiter,
    RateLimitResult,
)
from abstract_summarizer.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from abstract_summarizer.core.config import AppSettings, settings
from abstract_summarizer.core.errors import RateLimitAppError
from abstract_summarizer.core.logging import hash_for_log

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests. Please try again later."


def build_rate_limiter(app_settings: AppSettings | None = None) -> InMemoryFixedWindowRateLimiter:
    """Construct a limiter from application settings.

    Args:
        app_settings: Settings to read limits from; defaults to global settings.

    Returns:
        A fresh limiter with its sweeper not yet started.
    """
    cfg = app_settings or settings.app
    return InMemoryFixedWindowRateLimiter(
        limit=cfg.rate_limit_requests,
        window_seconds=cfg.rate_limit_window_seconds,
        cleanup_interval_seconds=cfg.rate_limit_cleanup_interval_seconds,
    )


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    """Return the limiter owned by the running application."""
    return request.app.state.rate_limiter


def get_client_key(request: Request) -> str:
    """Derive the rate limit key from trusted forwarding headers.

    Args:
        request: FastAPI request.

    Returns:
        The first forwarded-for address, the real-ip header, or ``"unknown"``.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip", "").strip()
    if real_ip:
        return real_ip

    return UNKNOWN_CLIENT_KEY


def _throttle_headers(result: RateLimitResult) -> dict[str, str]:
    return {
        "Retry-After": str(result.retry_after_seconds or 0),
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(result.reset_at),
    }


def enforce_rate_limit(
    request: Request,
    limiter: Annotated[AbstractRateLimiter, Depends(get_rate_limiter)],
) -> None:
    """FastAPI dependency enforcing the per-client request budget.

    Raises:
        RateLimitAppError: When the client has exceeded its budget (HTTP 429).
    """

    if not settings.app.rate_limit_enabled:
        return

    key = get_client_key(request)
    result = limiter.consume(key)

    if not result.limited:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "key_hash": hash_for_log(key),
                "count": result.count,
                "remaining": result.remaining,
            },
        )
        return

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": hash_for_log(key),
            "count": result.count,
            "limit": result.limit,
            "retry_after_s": result.retry_after_seconds,
        },
    )

    headers = _throttle_headers(result) if settings.app.rate_limit_include_headers else {}
    raise RateLimitAppError(
        code="rate_limited",
        message=RATE_LIMIT_MESSAGE,
        headers=headers,
    )
