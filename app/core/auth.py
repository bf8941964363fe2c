"""Admin authentication.

Admin routes (seeding, post authoring) are protected by a single shared
secret, ``APP_ADMIN_SECRET``. Callers send it as ``Authorization: Bearer
<secret>``; the admin pages also pass it as a ``secret`` query parameter,
which is accepted as a fallback.
"""

from __future__ import annotations

import hmac
import logging
from typing import Annotated

from fastapi import Header, Query

from app.core.config import settings
from app.core.errors import AuthenticationAppError

logger = logging.getLogger(__name__)


def parse_bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer`` header value.

    Examples:
        >>> parse_bearer_token("Bearer abc")
        'abc'
        >>> parse_bearer_token("Basic abc") is None
        True
        >>> parse_bearer_token(None) is None
        True
    """
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


def validate_admin_secret(provided: str | None) -> None:
    """Check a provided secret against the configured admin secret.

    Raises:
        AuthenticationAppError: If no secret is configured or it does not match.
    """
    expected = settings.app.admin_secret
    if not expected:
        logger.error(
            "admin_auth_failed",
            extra={"reason": "admin_secret_not_configured"},
        )
        raise AuthenticationAppError(
            code="admin_secret_not_configured",
            message="Admin access is not configured on this server",
            details={"hint": "Set APP_ADMIN_SECRET"},
        )

    if not provided or not hmac.compare_digest(provided.encode(), expected.encode()):
        logger.warning(
            "admin_auth_failed",
            extra={"reason": "invalid_secret", "secret_present": bool(provided)},
        )
        raise AuthenticationAppError(
            code="unauthorized",
            message="Unauthorized. Please provide a valid secret key.",
        )


async def require_admin(
    authorization: Annotated[str | None, Header()] = None,
    secret: Annotated[str | None, Query(include_in_schema=False)] = None,
) -> None:
    """FastAPI dependency guarding admin routes.

    Usage:
        @router.post("/admin/seed", dependencies=[Depends(require_admin)])
    """
    provided = parse_bearer_token(authorization) or secret
    validate_admin_secret(provided)
    logger.info("admin_auth.success", extra={"via": "header" if authorization else "query"})
