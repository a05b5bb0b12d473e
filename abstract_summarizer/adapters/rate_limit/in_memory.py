"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: request checks and the background sweep share one lock.
- Requests made while already over the limit still increment the counter
  until the window ends.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from abstract_summarizer.adapters.rate_limit.base import (
    UNKNOWN_CLIENT_KEY,
    AbstractRateLimiter,
    RateLimitResult,
)

logger = logging.getLogger(__name__)


@dataclass
class _WindowState:
    count: int
    window_end: float


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter counting requests per key inside a fixed window.

    A key's window starts on its first request and lasts ``window_seconds``.
    Once the window has ended, the next request opens a fresh window with a
    count of 1. Expired entries are also removed eagerly by a background
    sweeper thread so abandoned keys do not accumulate.

    Important:
        This limiter is per-process only. If the API runs with multiple
        workers, each worker enforces its own independent limits.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        cleanup_interval_seconds: float = 300,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of admitted requests per window.
            window_seconds: Length of the counting window in seconds.
            cleanup_interval_seconds: Period between background sweeps.
            clock: Time source returning UNIX time in seconds.

        Raises:
            ValueError: If any of the numeric parameters is out of range.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        if cleanup_interval_seconds <= 0:
            raise ValueError("cleanup_interval_seconds must be > 0")

        self._limit = limit
        self._window_seconds = window_seconds
        self._cleanup_interval = cleanup_interval_seconds
        self._clock = clock
        self._lock = threading.RLock()
        self._state_by_key: dict[str, _WindowState] = {}

        self._stop_event = threading.Event()
        self._sweeper: threading.Thread | None = None

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    @property
    def cleanup_interval_seconds(self) -> float:
        return self._cleanup_interval

    def __len__(self) -> int:
        with self._lock:
            return len(self._state_by_key)

    def get_entry(self, key: str) -> tuple[int, float] | None:
        """Return a ``(count, window_end)`` snapshot for key, if tracked."""
        with self._lock:
            state = self._state_by_key.get(key)
            if state is None:
                return None
            return state.count, state.window_end

    def _build_result(self, *, now: float, state: _WindowState) -> RateLimitResult:
        limited = state.count > self._limit
        retry_after = None
        if limited:
            retry_after = max(0, int(math.ceil(state.window_end - now)))
        return RateLimitResult(
            limited=limited,
            count=state.count,
            limit=self._limit,
            remaining=max(0, self._limit - state.count),
            reset_at=int(math.ceil(state.window_end)),
            retry_after_seconds=retry_after,
        )

    def consume(self, key: str) -> RateLimitResult:
        """Record one request for ``key`` and decide whether it is limited.

        Never raises: an empty key is counted under the shared
        ``UNKNOWN_CLIENT_KEY`` bucket.

        Args:
            key: Client identifier.

        Returns:
            RateLimitResult with the admission decision and window metadata.
        """
        key = key or UNKNOWN_CLIENT_KEY

        with self._lock:
            now = self._clock()
            state = self._state_by_key.get(key)

            if state is None or now >= state.window_end:
                state = _WindowState(count=1, window_end=now + self._window_seconds)
                self._state_by_key[key] = state
            else:
                state.count += 1

            return self._build_result(now=now, state=state)

    def sweep_expired(self) -> int:
        """Remove every entry whose window ended at or before now.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            now = self._clock()
            expired_keys = [
                key for key, state in self._state_by_key.items() if state.window_end <= now
            ]
            for key in expired_keys:
                del self._state_by_key[key]
            remaining = len(self._state_by_key)

        logger.debug(
            "rate_limit.sweep",
            extra={"removed": len(expired_keys), "entries": remaining},
        )
        return len(expired_keys)

    def _run_sweeper(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self._cleanup_interval):
            try:
                self.sweep_expired()
            except Exception:
                # A failed sweep must never stop future sweeps.
                logger.exception("rate_limit.sweep_failed")

    @property
    def sweeper_running(self) -> bool:
        """True while a sweeper thread is alive and has not been asked to stop."""
        return (
            self._sweeper is not None
            and self._sweeper.is_alive()
            and not self._stop_event.is_set()
        )

    def start_sweeper(self) -> None:
        """Start the background sweep thread (no-op if already running).

        A previous sweeper that was asked to stop but has not exited yet is
        joined first, so at most one sweeper thread exists per limiter.
        """
        if self.sweeper_running:
            return

        previous = self._sweeper
        if previous is not None and previous.is_alive():
            previous.join()

        # Each thread gets its own event; clearing a shared one would revive
        # a sweeper that is still shutting down.
        self._stop_event = threading.Event()
        self._sweeper = threading.Thread(
            target=self._run_sweeper,
            args=(self._stop_event,),
            name="rate-limit-sweeper",
            daemon=True,
        )
        self._sweeper.start()
        logger.info(
            "rate_limit.sweeper_started",
            extra={"interval_s": self._cleanup_interval},
        )

    def stop_sweeper(self, timeout: float | None = None) -> None:
        """Signal the sweep thread to exit and wait up to ``timeout`` for it.

        If the thread is still busy when the timeout expires, its handle is
        kept so a later ``stop_sweeper`` or ``start_sweeper`` can join it.
        """
        sweeper = self._sweeper
        if sweeper is None:
            return

        self._stop_event.set()
        sweeper.join(timeout)
        if sweeper.is_alive():
            logger.warning("rate_limit.sweeper_stop_timeout", extra={"timeout_s": timeout})
            return

        self._sweeper = None
        logger.info("rate_limit.sweeper_stopped")
