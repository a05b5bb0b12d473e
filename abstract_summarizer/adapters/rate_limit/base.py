"""Rate limiter interfaces.

The API depends on this abstraction rather than the concrete implementation,
so the in-memory table can be replaced by a shared store later without
touching the HTTP layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

# Shared key for clients whose address cannot be resolved.
UNKNOWN_CLIENT_KEY = "unknown"


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a single check-and-record call.

    Attributes:
        limited: Whether the request must be rejected.
        count: Requests recorded for the key in the current window,
            including this one.
        limit: Max admitted requests per window.
        remaining: Requests left in the current window (0 when limited).
        reset_at: UNIX epoch seconds when the current window ends.
        retry_after_seconds: Suggested wait in seconds when limited.
    """

    limited: bool
    count: int
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def consume(self, key: str) -> RateLimitResult:
        """Record one request for ``key`` and decide whether it is limited.

        Args:
            key: Client identifier (typically a network address).

        Returns:
            RateLimitResult describing the admission decision.
        """
        raise NotImplementedError

    @abstractmethod
    def sweep_expired(self) -> int:
        """Drop entries whose window has ended.

        Returns:
            Number of entries removed.
        """
        raise NotImplementedError

    def check_and_record(self, key: str) -> bool:
        """Record one request for ``key``; return True when it is limited."""
        return self.consume(key).limited

    def start_sweeper(self) -> None:
        """Start background eviction of expired entries.

        No-op by default, for limiters whose store expires entries itself.
        """

    def stop_sweeper(self, timeout: float | None = None) -> None:
        """Stop background eviction, waiting up to ``timeout`` seconds."""
