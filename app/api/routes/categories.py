from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response

from app.adapters.rate_limit.base import RateLimitResult
from app.api.deps import get_tool_service
from app.core.errors import AppError
from app.core.http_cache import cached_json_response, uncached_json_response
from app.core.rate_limit import enforce_rate_limit, rate_limit_headers
from app.schemas.tool import Category
from app.services.tool_service import ToolService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Categories"])


@router.get("/categories", response_model=list[Category])
async def list_categories(
    request: Request,
    rate_limit: RateLimitResult | None = Depends(enforce_rate_limit),
    service: ToolService = Depends(get_tool_service),
) -> Response:
    """All categories ordered by name.

    Store failures degrade to an empty, uncacheable list so pages keep
    rendering.
    """
    headers = rate_limit_headers(rate_limit)
    try:
        categories = await service.list_categories()
    except AppError as exc:
        logger.error("categories.fetch_failed", extra={"error_code": exc.code})
        return uncached_json_response([], headers=headers)

    return cached_json_response(categories, request, headers=headers)
