"""Process-local catalog store.

Used for development and tests. Data lives only as long as the process.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from app.adapters.store.base import AbstractCatalogStore, popularity_key
from app.schemas.post import Post
from app.schemas.tool import Category, Tool


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class InMemoryCatalogStore(AbstractCatalogStore):
    """Dict-backed store keyed by slug."""

    def __init__(
        self,
        *,
        tools: list[Tool] | None = None,
        categories: list[Category] | None = None,
        posts: list[Post] | None = None,
    ) -> None:
        self._tools: dict[str, Tool] = {t.slug: t for t in tools or []}
        self._categories: dict[str, Category] = {c.slug: c for c in categories or []}
        self._posts: dict[str, Post] = {p.slug: p for p in posts or []}

    async def list_tools(self) -> list[Tool]:
        return sorted(self._tools.values(), key=popularity_key, reverse=True)

    async def get_tool_by_slug(self, slug: str) -> Tool | None:
        return self._tools.get(slug)

    async def get_tools_by_names(self, names: list[str]) -> list[Tool]:
        wanted = set(names)
        return [t for t in self._tools.values() if t.name in wanted]

    async def search_tools(self, query: str) -> list[Tool]:
        needle = query.lower()
        found = [
            t
            for t in self._tools.values()
            if needle in t.name.lower()
            or needle in (t.description or "").lower()
            or query in t.tags
        ]
        return sorted(found, key=lambda t: t.popularity_score or 0, reverse=True)

    async def list_tools_by_category(self, category: str) -> list[Tool]:
        found = [t for t in self._tools.values() if t.category == category]
        return sorted(found, key=lambda t: t.popularity_score or 0, reverse=True)

    async def list_categories(self) -> list[Category]:
        return sorted(self._categories.values(), key=lambda c: c.name)

    async def upsert_categories(self, categories: list[Category]) -> int:
        for category in categories:
            self._categories[category.slug] = category
        return len(categories)

    async def upsert_tools(self, tools: list[Tool]) -> int:
        for tool in tools:
            self._tools[tool.slug] = tool
        return len(tools)

    async def list_posts(
        self,
        *,
        published_before: datetime,
        tag: str | None = None,
    ) -> list[Post]:
        cutoff = _aware(published_before)
        posts = [
            p
            for p in self._posts.values()
            if p.published_at is not None and _aware(p.published_at) <= cutoff
        ]
        if tag:
            posts = [p for p in posts if tag in p.tags]
        return sorted(posts, key=lambda p: _aware(p.published_at), reverse=True)

    async def list_all_posts(self) -> list[Post]:
        return list(self._posts.values())

    async def get_post_by_slug(self, slug: str) -> Post | None:
        return self._posts.get(slug)

    async def post_slug_exists(self, slug: str) -> bool:
        return slug in self._posts

    async def list_publish_dates(self, since: datetime) -> list[datetime]:
        cutoff = _aware(since)
        return [
            _aware(p.published_at)
            for p in self._posts.values()
            if p.published_at is not None and _aware(p.published_at) >= cutoff
        ]

    async def insert_post(self, values: dict[str, Any]) -> Post:
        post = Post(
            id=str(uuid.uuid4()),
            created_at=datetime.now(timezone.utc),
            **values,
        )
        self._posts[post.slug] = post
        return post
