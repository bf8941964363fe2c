from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Request, Response

from app.adapters.rate_limit.base import RateLimitResult
from app.api.deps import get_blog_service
from app.core.errors import AppError
from app.core.http_cache import cached_json_response, uncached_json_response
from app.core.rate_limit import enforce_rate_limit, rate_limit_headers
from app.schemas.post import Post, PostDetailResponse
from app.services.blog_service import BlogService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Blog"])


@router.get("/posts", response_model=list[Post])
async def list_posts(
    request: Request,
    tag: str | None = Query(None, description="Only posts carrying this tag."),
    rate_limit: RateLimitResult | None = Depends(enforce_rate_limit),
    service: BlogService = Depends(get_blog_service),
) -> Response:
    """Published posts, newest first, with ETag support.

    Store failures degrade to an empty, uncacheable list.
    """
    headers = rate_limit_headers(rate_limit)
    try:
        posts = await service.list_published(tag)
    except AppError as exc:
        logger.error("posts.fetch_failed", extra={"error_code": exc.code, "tag": tag})
        return uncached_json_response([], headers=headers)

    return cached_json_response(posts, request, headers=headers)


@router.get("/posts/{slug}", response_model=PostDetailResponse)
async def get_post(
    slug: str,
    request: Request,
    rate_limit: RateLimitResult | None = Depends(enforce_rate_limit),
    service: BlogService = Depends(get_blog_service),
) -> Response:
    detail = await service.get_published_post(slug)
    return cached_json_response(detail, request, headers=rate_limit_headers(rate_limit))
