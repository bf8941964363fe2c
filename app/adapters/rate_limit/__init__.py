"""Rate limiting adapters.

A small abstraction layer so the in-memory limiter can later be replaced by
Redis or another shared store without changing the API layer.
"""

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter, RateLimitEntry

__all__ = [
    "AbstractRateLimiter",
    "InMemoryFixedWindowRateLimiter",
    "RateLimitEntry",
    "RateLimitResult",
]
