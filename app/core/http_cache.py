"""Conditional-request helpers (ETag / If-None-Match) for public JSON routes.

The fingerprint is a 32-bit rolling hash over the compact JSON encoding of
the response body. It only has to change when the body changes; it is not
a security control.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from fastapi import Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.core.config import settings

logger = logging.getLogger(__name__)

_HASH_MASK = 0xFFFFFFFF


def serialize_body(body: Any) -> str:
    """Compact JSON text used both for hashing and for the response body."""

    return json.dumps(
        jsonable_encoder(body),
        separators=(",", ":"),
        ensure_ascii=False,
    )


def fingerprint(body: Any) -> str:
    """Fingerprint a response body as 8 lowercase hex characters.

    Examples:
        >>> fingerprint([]) == fingerprint([])
        True
        >>> fingerprint({"a": 1}) != fingerprint({"a": 2})
        True
    """

    value = 0
    for byte in serialize_body(body).encode("utf-8"):
        value = (value * 31 + byte) & _HASH_MASK
    return f"{value:08x}"


def quote_etag(value: str) -> str:
    return f'"{value}"'


def matches(supplied: str | None, current: str) -> bool:
    """Exact validator comparison; a missing validator never matches."""

    if not supplied:
        return False
    return supplied == current


def cache_control(
    max_age: int | None = None,
    stale_while_revalidate: int | None = None,
) -> str:
    if max_age is None:
        max_age = settings.app.cache_max_age_seconds
    if stale_while_revalidate is None:
        stale_while_revalidate = settings.app.cache_stale_while_revalidate_seconds
    return (
        f"public, s-maxage={max_age}, "
        f"stale-while-revalidate={stale_while_revalidate}, max-age={max_age}"
    )


def cached_json_response(
    data: Any,
    request: Request,
    *,
    max_age: int | None = None,
    headers: Mapping[str, str] | None = None,
) -> Response:
    """Build a 200 JSON response with ETag, or 304 when the client is current.

    A failure while fingerprinting is treated as a cache miss: the body is
    still returned, just without a validator.

    Args:
        data: JSON-serialisable body (models are encoded with jsonable_encoder).
        request: Incoming request, read for ``If-None-Match``.
        max_age: Overrides ``APP_CACHE_MAX_AGE_SECONDS``.
        headers: Extra headers (e.g. rate limit quota) for either outcome.
    """

    response_headers = {"Cache-Control": cache_control(max_age)}
    if headers:
        response_headers.update(headers)

    try:
        etag = quote_etag(fingerprint(data))
    except (TypeError, ValueError) as exc:
        logger.warning(
            "http_cache.fingerprint_failed",
            extra={"error_type": type(exc).__name__, "request_path": request.url.path},
        )
        return JSONResponse(content=jsonable_encoder(data), headers=response_headers)

    response_headers["ETag"] = etag

    if matches(request.headers.get("if-none-match"), etag):
        logger.debug("http_cache.not_modified", extra={"etag": etag})
        return Response(status_code=304, headers=response_headers)

    return JSONResponse(content=jsonable_encoder(data), headers=response_headers)


def uncached_json_response(
    data: Any,
    *,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """Fallback body for degraded reads: never cached by clients or CDNs."""

    response_headers = {"Cache-Control": "no-cache"}
    if headers:
        response_headers.update(headers)
    return JSONResponse(content=jsonable_encoder(data), headers=response_headers)
