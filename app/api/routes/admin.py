from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.adapters.store.base import AbstractCatalogStore
from app.api.deps import get_blog_service, get_catalog_store
from app.core.auth import require_admin
from app.schemas.post import (
    AutofillRequest,
    AutofillResponse,
    CreatePostRequest,
    CreatePostResponse,
)
from app.schemas.tool import SeedResponse, ToolsNeedingPostsResponse
from app.services.autofill import autofill_post_data
from app.services.blog_service import BlogService
from app.services.seed_service import seed_catalog

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.post("/posts", response_model=CreatePostResponse)
async def create_post(
    payload: CreatePostRequest,
    service: BlogService = Depends(get_blog_service),
) -> CreatePostResponse:
    """Create a blog post.

    ``published_at``: omitted/null auto-schedules on the next free day,
    ``"now"`` publishes immediately, an ISO date schedules it, ``""`` saves
    a draft.
    """
    return await service.create_post(payload)


@router.post("/posts/autofill", response_model=AutofillResponse)
async def autofill_post(payload: AutofillRequest) -> AutofillResponse:
    """Suggest title, excerpt and tags from pasted article content."""
    return autofill_post_data(
        payload.content,
        payload.tool_name,
        payload.category,
        payload.tool_tags,
    )


@router.get("/tools-needing-posts", response_model=ToolsNeedingPostsResponse)
async def tools_needing_posts(
    service: BlogService = Depends(get_blog_service),
) -> ToolsNeedingPostsResponse:
    return await service.tools_needing_posts()


@router.post("/seed", response_model=SeedResponse)
async def seed(
    enrich: bool = Query(False, description="Scrape tool websites to improve descriptions and logos."),
    store: AbstractCatalogStore = Depends(get_catalog_store),
) -> SeedResponse:
    """Upsert the bundled starter categories and tools."""
    return await seed_catalog(store, enrich=enrich)
