"""Catalog store interface.

The hosted database holding tools, categories and posts is an external
collaborator. Services depend on this interface only; the concrete backend
is chosen by ``create_catalog_store``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from app.schemas.post import Post
from app.schemas.tool import Category, Tool


def popularity_key(tool: Tool) -> tuple[int, float]:
    """Sort key: most popular first, newest first among equals (use with reverse=True)."""
    created = tool.created_at.timestamp() if tool.created_at else 0.0
    return (tool.popularity_score or 0, created)


class AbstractCatalogStore(ABC):
    """Async access to the tools directory and blog tables."""

    @abstractmethod
    async def list_tools(self) -> list[Tool]:
        """All tools, by popularity desc then creation date desc."""

    @abstractmethod
    async def get_tool_by_slug(self, slug: str) -> Tool | None: ...

    @abstractmethod
    async def get_tools_by_names(self, names: list[str]) -> list[Tool]: ...

    @abstractmethod
    async def search_tools(self, query: str) -> list[Tool]:
        """Case-insensitive match on name or description, or exact tag match.

        Results are ordered by popularity desc.
        """

    @abstractmethod
    async def list_tools_by_category(self, category: str) -> list[Tool]: ...

    @abstractmethod
    async def list_categories(self) -> list[Category]:
        """All categories ordered by name."""

    @abstractmethod
    async def upsert_categories(self, categories: list[Category]) -> int: ...

    @abstractmethod
    async def upsert_tools(self, tools: list[Tool]) -> int: ...

    @abstractmethod
    async def list_posts(
        self,
        *,
        published_before: datetime,
        tag: str | None = None,
    ) -> list[Post]:
        """Posts published at or before ``published_before``, newest first."""

    @abstractmethod
    async def list_all_posts(self) -> list[Post]:
        """Every post including drafts and scheduled ones."""

    @abstractmethod
    async def get_post_by_slug(self, slug: str) -> Post | None: ...

    @abstractmethod
    async def post_slug_exists(self, slug: str) -> bool: ...

    @abstractmethod
    async def list_publish_dates(self, since: datetime) -> list[datetime]:
        """``published_at`` values at or after ``since``."""

    @abstractmethod
    async def insert_post(self, values: dict[str, Any]) -> Post: ...

    async def aclose(self) -> None:
        """Release any network resources held by the store."""
        return None
