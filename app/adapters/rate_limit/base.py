"""Rate limiter interfaces.

The HTTP layer depends on this abstraction so the per-process table can be
swapped for a shared store later without touching the routes.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a single rate limit check.

    Attributes:
        allowed: Whether the request may proceed.
        limit: Max requests per window.
        remaining: Requests left in the current window (0 when blocked).
        reset_at: UNIX epoch seconds at which the key's window ends.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: float

    def retry_after_seconds(self, now: float) -> int:
        """Whole seconds until the window resets (never negative)."""
        return max(0, int(math.ceil(self.reset_at - now)))

    @property
    def reset_at_iso(self) -> str:
        return (
            datetime.fromtimestamp(self.reset_at, tz=timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def check(self, key: str, *, limit: int, window_ms: int) -> RateLimitResult:
        """Count one request for ``key`` and decide whether it is allowed.

        Args:
            key: Client identifier (e.g. client IP).
            limit: Maximum requests per window.
            window_ms: Window length in milliseconds.

        Returns:
            RateLimitResult describing the decision and remaining quota.
        """
        raise NotImplementedError

    @abstractmethod
    def now(self) -> float:
        """Current time, in UNIX epoch seconds, as seen by the limiter."""
        raise NotImplementedError
