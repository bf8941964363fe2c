"""Rate limiting dependency for public read routes.

The limiter itself is created once per application (``app.state.rate_limiter``,
see ``app_factory.create_app``) and reached through ``get_rate_limiter`` so
tests can override it with ``app.dependency_overrides``.

Strategy: fixed window per client IP, thresholds from settings. Limiting is
advisory: if the limiter itself breaks, the request goes through.
"""

from __future__ import annotations

import logging
from typing import Mapping

from fastapi import Depends, HTTPException, Request, Response, status

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from app.core.config import settings
from app.core.logging import hash_for_log

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"


def get_client_ip(headers: Mapping[str, str]) -> str:
    """Derive the rate limit key from forwarding headers.

    Uses the first address in ``X-Forwarded-For``, then ``X-Real-IP``, then
    the shared ``"unknown"`` bucket.
    """

    forwarded_for = headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    real_ip = (headers.get("x-real-ip") or "").strip()
    if real_ip:
        return real_ip

    return UNKNOWN_CLIENT


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    return request.app.state.rate_limiter


def rate_limit_headers(
    result: RateLimitResult | None,
    *,
    now: float | None = None,
) -> dict[str, str]:
    """Client-visible quota headers for a limiter decision.

    ``Retry-After`` is only added to rejected results, which is why ``now``
    is needed for those.
    """

    if result is None or not settings.app.rate_limit_include_headers:
        return {}

    headers = {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": result.reset_at_iso,
    }
    if not result.allowed and now is not None:
        headers["Retry-After"] = str(result.retry_after_seconds(now))
    return headers


async def enforce_rate_limit(
    request: Request,
    response: Response,
    limiter: AbstractRateLimiter = Depends(get_rate_limiter),
) -> RateLimitResult | None:
    """FastAPI dependency counting the request against the caller's quota.

    Routes returning models get the quota headers through ``response``;
    routes building their own Response use the returned result with
    :func:`rate_limit_headers`.

    Raises:
        HTTPException: 429 Too Many Requests when the quota is exhausted.
    """

    if not settings.app.rate_limit_enabled:
        return None

    client_ip = get_client_ip(request.headers)
    try:
        result = limiter.check(
            client_ip,
            limit=settings.app.rate_limit_requests,
            window_ms=settings.app.rate_limit_window_ms,
        )
    except Exception:
        logger.exception(
            "rate_limit.check_failed",
            extra={"client_hash": hash_for_log(client_ip)},
        )
        return None

    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "client_hash": hash_for_log(client_ip),
                "limit": result.limit,
                "remaining": result.remaining,
            },
        )
        response.headers.update(rate_limit_headers(result))
        return result

    now = limiter.now()
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "client_hash": hash_for_log(client_ip),
            "limit": result.limit,
            "window_ms": settings.app.rate_limit_window_ms,
            "retry_after_s": result.retry_after_seconds(now),
        },
    )

    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Too many requests. Please try again later.",
        headers=rate_limit_headers(result, now=now) or None,
    )
