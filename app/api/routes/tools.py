from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response

from app.adapters.rate_limit.base import RateLimitResult
from app.api.deps import get_tool_service
from app.core.http_cache import cached_json_response
from app.core.rate_limit import enforce_rate_limit, rate_limit_headers
from app.schemas.tool import CompareResponse, ToolDetailResponse, ToolListResponse
from app.services.tool_service import ToolService, parse_slug_list

router = APIRouter(tags=["Tools"])


@router.get("/tools", response_model=ToolListResponse)
async def list_tools(
    request: Request,
    search: str | None = Query(None, description="Matches name, description or an exact tag."),
    category: str | None = Query(None, description="Category name, e.g. 'Text AI'."),
    pricing: str | None = Query(None, description="free, paid or freemium; other values are ignored."),
    sort: str | None = Query(None, description="popularity (default), name, newest or oldest."),
    page: int = Query(1, description="1-based page number; values below 1 are treated as 1."),
    rate_limit: RateLimitResult | None = Depends(enforce_rate_limit),
    service: ToolService = Depends(get_tool_service),
) -> Response:
    """Browse the directory: search or category, then pricing filter, sort and page."""
    result = await service.list_tools(
        search=search or None,
        category=category or None,
        pricing=pricing,
        sort=sort,
        page=page,
    )
    return cached_json_response(result, request, headers=rate_limit_headers(rate_limit))


@router.get("/tools/{slug}", response_model=ToolDetailResponse)
async def get_tool(
    slug: str,
    request: Request,
    rate_limit: RateLimitResult | None = Depends(enforce_rate_limit),
    service: ToolService = Depends(get_tool_service),
) -> Response:
    """A single tool with pricing label, related tools and page metadata."""
    detail = await service.get_tool(slug)
    return cached_json_response(detail, request, headers=rate_limit_headers(rate_limit))


@router.get("/compare", response_model=CompareResponse)
async def compare_tools(
    request: Request,
    tools: str = Query(..., description="Comma separated tool slugs (up to 4)."),
    rate_limit: RateLimitResult | None = Depends(enforce_rate_limit),
    service: ToolService = Depends(get_tool_service),
) -> Response:
    comparison = await service.compare(parse_slug_list(tools))
    return cached_json_response(comparison, request, headers=rate_limit_headers(rate_limit))
