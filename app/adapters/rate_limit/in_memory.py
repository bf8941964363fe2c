"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: the read-check-increment-write sequence runs under a lock.
- Windows are anchored at each key's first request, not at clock boundaries.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


@dataclass
class RateLimitEntry:
    count: int
    window_reset_at: float


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Per-key fixed-window request counter backed by a dict.

    An entry whose window has ended is reset on its next access, so a stale
    count never carries over into a new window. Dead entries are also
    removed in bulk by :meth:`sweep`, which runs automatically once the table
    reaches ``sweep_threshold`` keys and again each time it doubles after that.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.time,
        sweep_threshold: int = 10_000,
    ) -> None:
        """Initialize the limiter.

        Args:
            clock: Time source returning UNIX time in seconds.
            sweep_threshold: Table size that triggers removal of expired entries.

        Raises:
            ValueError: If sweep_threshold is invalid.
        """
        if sweep_threshold < 1:
            raise ValueError("sweep_threshold must be >= 1")

        self._clock = clock
        self._sweep_threshold = sweep_threshold
        self._next_sweep_at = sweep_threshold
        self._lock = threading.Lock()
        self._entries: dict[str, RateLimitEntry] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def now(self) -> float:
        return self._clock()

    def check(self, key: str, *, limit: int, window_ms: int) -> RateLimitResult:
        """Count one request for ``key`` within a ``window_ms`` window.

        Args:
            key: Client identifier.
            limit: Maximum requests allowed per window.
            window_ms: Window length in milliseconds.

        Returns:
            RateLimitResult; the request that pushes the count past ``limit``
            is the first one rejected for that window.

        Raises:
            ValueError: If limit or window_ms are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_ms < 1:
            raise ValueError("window_ms must be >= 1")

        now = self._clock()

        with self._lock:
            if len(self._entries) >= self._next_sweep_at:
                self._sweep_locked(now)

            entry = self._entries.get(key)
            if entry is None or now >= entry.window_reset_at:
                entry = RateLimitEntry(count=1, window_reset_at=now + window_ms / 1000)
                self._entries[key] = entry
                return RateLimitResult(
                    allowed=True,
                    limit=limit,
                    remaining=limit - 1,
                    reset_at=entry.window_reset_at,
                )

            # Stored count stops one past the limit; the decision is the same.
            entry.count = min(entry.count + 1, limit + 1)
            if entry.count <= limit:
                return RateLimitResult(
                    allowed=True,
                    limit=limit,
                    remaining=limit - entry.count,
                    reset_at=entry.window_reset_at,
                )

            return RateLimitResult(
                allowed=False,
                limit=limit,
                remaining=0,
                reset_at=entry.window_reset_at,
            )

    def sweep(self) -> int:
        """Remove expired entries.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            return self._sweep_locked(self._clock())

    def _sweep_locked(self, now: float) -> int:
        expired = [k for k, e in self._entries.items() if now >= e.window_reset_at]
        for key in expired:
            del self._entries[key]
        # Live keys survive a sweep; wait for the table to double before the next one
        self._next_sweep_at = max(self._sweep_threshold, 2 * len(self._entries))
        return len(expired)
