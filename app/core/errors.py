"""Application-level exception types.

Services and store adapters raise these; the exception handlers translate
them into the JSON error envelope and an HTTP status.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    code: str
    message: str
    hint: str
    field: str
    slug: str
    slugs: list[str]
    max_tools: int
    http_status: int
    backend: str
    request_id: str
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

    status_code = 400

    def __post_init__(self) -> None:
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class AuthenticationAppError(AppError):
    """Raised when the admin secret is missing or wrong."""

    status_code = 401


class NotFoundAppError(AppError):
    """Raised when a tool, post or category does not exist."""

    status_code = 404


class StoreAppError(AppError):
    """Raised when the backing catalog store fails."""

    status_code = 502
