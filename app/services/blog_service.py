"""Blog: published listings, post detail and admin post creation.

Publishing rules:
- a post is visible once ``published_at`` is in the past
- posts created without a date are auto-scheduled on the next calendar day
  (UTC) that still has a free slot, ``APP_BLOG_POSTS_PER_DAY`` slots per day
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date, datetime, time, timedelta, timezone

from app.adapters.store.base import AbstractCatalogStore
from app.core.config import settings
from app.core.errors import NotFoundAppError, ValidationAppError
from app.schemas.post import (
    CreatedPost,
    CreatePostRequest,
    CreatePostResponse,
    Post,
    PostDetailResponse,
)
from app.schemas.tool import ToolsNeedingPostsResponse
from app.services.tool_service import slugify

logger = logging.getLogger(__name__)

MAX_SLUG_LENGTH = 100
PUBLISH_NOW = "now"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def generate_post_slug(title: str) -> str:
    slug = slugify(title)[:MAX_SLUG_LENGTH].strip("-")
    return slug or "post"


def is_post_published(published_at: datetime | None, now: datetime | None = None) -> bool:
    if published_at is None:
        return False
    return _as_utc(published_at) <= (now or utcnow())


def format_display_date(value: datetime) -> str:
    """``November 3, 2026`` style date used in admin messages."""
    return f"{value:%B} {value.day}, {value.year}"


def parse_publish_date(value: str) -> datetime:
    """Parse an ISO date or datetime; naive values are taken as UTC.

    Raises:
        ValidationAppError: If the value is not an ISO date/datetime.
    """
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValidationAppError(
            code="invalid_published_at",
            message=f"published_at '{value}' is not a valid ISO date",
            details={"field": "published_at"},
        ) from exc
    return _as_utc(parsed)


def next_free_day(
    scheduled: list[datetime],
    *,
    today: date,
    per_day: int,
) -> date:
    """First day after ``today`` with fewer than ``per_day`` scheduled posts."""
    taken = Counter(_as_utc(d).date() for d in scheduled)
    candidate = today + timedelta(days=1)
    while taken[candidate] >= per_day:
        candidate += timedelta(days=1)
    return candidate


class BlogService:
    def __init__(self, store: AbstractCatalogStore) -> None:
        self._store = store

    async def list_published(self, tag: str | None = None) -> list[Post]:
        return await self._store.list_posts(published_before=utcnow(), tag=tag or None)

    async def get_published_post(self, slug: str) -> PostDetailResponse:
        post = await self._store.get_post_by_slug(slug)
        if post is None or not is_post_published(post.published_at):
            raise NotFoundAppError(
                code="post_not_found",
                message=f"Post '{slug}' not found",
                details={"slug": slug},
            )

        related = []
        if post.related_tools:
            related = await self._store.get_tools_by_names(post.related_tools)
        return PostDetailResponse(post=post, related_tools=related)

    async def get_next_available_publish_date(self, now: datetime | None = None) -> datetime:
        now = now or utcnow()
        tomorrow_start = datetime.combine(
            now.date() + timedelta(days=1), time.min, tzinfo=timezone.utc
        )
        scheduled = await self._store.list_publish_dates(tomorrow_start)
        day = next_free_day(
            scheduled,
            today=now.date(),
            per_day=settings.app.blog_posts_per_day,
        )
        return datetime.combine(
            day, time(hour=settings.app.blog_publish_hour_utc), tzinfo=timezone.utc
        )

    async def resolve_published_at(
        self,
        value: str | None,
        now: datetime | None = None,
    ) -> datetime | None:
        """Turn the request's ``published_at`` into a timestamp (None = draft)."""
        now = now or utcnow()
        if value is None:
            return await self.get_next_available_publish_date(now)
        if value == PUBLISH_NOW:
            return now
        if not value.strip():
            return None
        return parse_publish_date(value)

    async def unique_slug(self, base: str) -> str:
        candidate = base
        suffix = 1
        while await self._store.post_slug_exists(candidate):
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    async def create_post(self, payload: CreatePostRequest) -> CreatePostResponse:
        """Validate, slug, schedule and store a new post.

        Raises:
            ValidationAppError: Missing title/content or bad publish date.
        """
        if not payload.title.strip() or not payload.content_html.strip():
            raise ValidationAppError(
                code="post_missing_fields",
                message="Title and content_html are required",
            )

        now = utcnow()
        slug = await self.unique_slug(generate_post_slug(payload.title))
        published_at = await self.resolve_published_at(payload.published_at, now)

        post = await self._store.insert_post(
            {
                "title": payload.title,
                "slug": slug,
                "excerpt": payload.excerpt or None,
                "content_html": payload.content_html,
                "tags": payload.tags,
                "hero_image_url": payload.hero_image_url or None,
                "related_tools": payload.related_tools or None,
                "published_at": published_at,
            }
        )

        scheduled_for = None
        if post.published_at is None:
            message = "Post created successfully! Saved as draft."
        elif is_post_published(post.published_at, now):
            message = "Post published successfully!"
        else:
            scheduled_for = format_display_date(_as_utc(post.published_at))
            message = f"Post created successfully! Scheduled for {scheduled_for}"

        logger.info(
            "blog.post_created",
            extra={
                "slug": post.slug,
                "status": "draft" if post.published_at is None else "scheduled" if scheduled_for else "published",
            },
        )

        return CreatePostResponse(
            post=CreatedPost(
                id=post.id,
                slug=post.slug,
                title=post.title,
                published_at=post.published_at,
            ),
            message=message,
            scheduled_for=scheduled_for,
        )

    async def tools_needing_posts(self) -> ToolsNeedingPostsResponse:
        """Tools not yet referenced by any post's ``related_tools``."""
        tools = await self._store.list_tools()
        posts = await self._store.list_all_posts()

        covered = {name.lower() for p in posts for name in p.related_tools or []}
        needing = [
            t for t in tools if t.name.lower() not in covered and t.slug.lower() not in covered
        ]
        return ToolsNeedingPostsResponse(
            tools=needing,
            count=len(needing),
            total_tools=len(tools),
            total_posts=len(posts),
        )
