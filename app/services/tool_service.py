"""Tools directory: listing, search, filters, pagination, detail and compare."""

from __future__ import annotations

import asyncio
import logging
import math
import re

from app.adapters.store.base import AbstractCatalogStore
from app.core.config import settings
from app.core.errors import AppError, NotFoundAppError, ValidationAppError
from app.schemas.tool import (
    Category,
    ComparedTool,
    CompareResponse,
    FeatureRow,
    PageMetadata,
    PricingDetails,
    Tool,
    ToolDetailResponse,
    ToolListResponse,
)

logger = logging.getLogger(__name__)

SITE_NAME = "aItoolfinder"

_NON_WORD = re.compile(r"[^\w\s-]", re.ASCII)
_SEPARATORS = re.compile(r"[\s_-]+", re.ASCII)


def slugify(text: str) -> str:
    """URL slug from free text.

    Examples:
        >>> slugify("  ChatGPT Plus! ")
        'chatgpt-plus'
        >>> slugify("Text_to--Speech")
        'text-to-speech'
    """
    slug = _NON_WORD.sub("", text.lower().strip())
    slug = _SEPARATORS.sub("-", slug)
    return slug.strip("-")


def format_pricing(details: PricingDetails | None) -> str:
    if details is None:
        return "Contact for pricing"
    if details.monthly:
        return f"${details.monthly}/month"
    if details.annual:
        return f"${details.annual}/year"
    if details.free_tier:
        return "Free tier available"
    return "Contact for pricing"


def get_related_tools(current: Tool, all_tools: list[Tool], limit: int = 4) -> list[Tool]:
    """Tools sharing the category or at least one tag, excluding ``current``."""
    current_tags = set(current.tags)
    related = [
        t
        for t in all_tools
        if t.id != current.id
        and (t.category == current.category or current_tags.intersection(t.tags))
    ]
    return related[:limit]


def apply_pricing_filter(tools: list[Tool], pricing: str | None) -> list[Tool]:
    if pricing == "free":
        return [t for t in tools if t.pricing_free]
    if pricing in ("paid", "freemium"):
        return [t for t in tools if t.pricing_tier == pricing]
    return tools


def sort_tools(tools: list[Tool], sort: str | None) -> list[Tool]:
    def created(tool: Tool) -> float:
        return tool.created_at.timestamp() if tool.created_at else 0.0

    if sort == "name":
        return sorted(tools, key=lambda t: t.name.casefold())
    if sort == "newest":
        return sorted(tools, key=created, reverse=True)
    if sort == "oldest":
        return sorted(tools, key=created)
    return sorted(tools, key=lambda t: t.popularity_score or 0, reverse=True)


def build_tool_metadata(tool: Tool) -> PageMetadata:
    if tool.description:
        description = tool.description
    else:
        description = f"Discover {tool.name}, a {tool.category or 'AI'} tool."
    return PageMetadata(title=f"{tool.name} - {SITE_NAME}", description=description)


def parse_slug_list(raw: str | None) -> list[str]:
    """Split a comma separated slug list, dropping blanks and duplicates (order kept)."""
    if not raw:
        return []
    seen: dict[str, None] = {}
    for part in raw.split(","):
        slug = part.strip()
        if slug:
            seen.setdefault(slug, None)
    return list(seen)


class ToolService:
    """Read side of the tools directory."""

    def __init__(self, store: AbstractCatalogStore) -> None:
        self._store = store

    async def list_categories(self) -> list[Category]:
        return await self._store.list_categories()

    async def fetch_tools_with_fallback(
        self,
    ) -> tuple[list[Tool], list[Category], str | None]:
        """Load every tool, falling back to per-category queries.

        The fallback runs when the full listing fails, or when it comes back
        empty although categories exist.

        Returns:
            Tuple of (tools, categories, error_message); error_message carries
            the first failure seen, if any.
        """
        error_message: str | None = None

        try:
            categories = await self._store.list_categories()
        except AppError as exc:
            logger.warning("tools.categories_failed", extra={"error_code": exc.code})
            categories = []
            error_message = exc.message

        try:
            tools = await self._store.list_tools()
        except AppError as exc:
            logger.warning(
                "tools.list_failed",
                extra={"error_code": exc.code, "fallback": bool(categories)},
            )
            error_message = error_message or exc.message
            tools = await self._fetch_by_categories(categories) if categories else []
            return tools, categories, error_message

        if not tools and categories:
            logger.info("tools.list_empty_using_fallback", extra={"categories": len(categories)})
            tools = await self._fetch_by_categories(categories)

        return tools, categories, error_message

    async def _fetch_by_categories(self, categories: list[Category]) -> list[Tool]:
        async def _one(category: Category) -> list[Tool]:
            try:
                return await self._store.list_tools_by_category(category.name)
            except AppError as exc:
                logger.warning(
                    "tools.category_fallback_failed",
                    extra={"category": category.name, "error_code": exc.code},
                )
                return []

        batches = await asyncio.gather(*(_one(c) for c in categories))
        tools = [tool for batch in batches for tool in batch]
        logger.info("tools.category_fallback", extra={"count": len(tools)})
        return tools

    async def list_tools(
        self,
        *,
        search: str | None = None,
        category: str | None = None,
        pricing: str | None = None,
        sort: str | None = None,
        page: int = 1,
    ) -> ToolListResponse:
        """One page of the directory after search, category, pricing and sort."""
        page_size = settings.app.tools_page_size
        page = max(1, page)

        all_tools, categories, error_message = await self.fetch_tools_with_fallback()

        try:
            if search:
                tools = await self._store.search_tools(search)
            elif category:
                tools = await self._store.list_tools_by_category(category)
            else:
                tools = list(all_tools)
        except AppError as exc:
            logger.warning(
                "tools.query_failed",
                extra={"error_code": exc.code, "has_search": bool(search), "category": category},
            )
            tools = []
            error_message = error_message or exc.message

        tools = sort_tools(apply_pricing_filter(tools, pricing), sort)

        total = len(tools)
        start = (page - 1) * page_size
        return ToolListResponse(
            tools=tools[start : start + page_size],
            page=page,
            page_size=page_size,
            total=total,
            total_pages=math.ceil(total / page_size),
            total_all=len(all_tools),
            category_count=len(categories),
            error_message=error_message,
        )

    async def get_tool(self, slug: str) -> ToolDetailResponse:
        tool = await self._store.get_tool_by_slug(slug)
        if tool is None:
            raise NotFoundAppError(
                code="tool_not_found",
                message=f"Tool '{slug}' not found",
                details={"slug": slug},
            )

        try:
            all_tools = await self._store.list_tools()
        except AppError as exc:
            logger.warning("tools.related_failed", extra={"error_code": exc.code, "slug": slug})
            all_tools = []

        return ToolDetailResponse(
            tool=tool,
            pricing_label=format_pricing(tool.pricing_details),
            related=get_related_tools(tool, all_tools, settings.app.related_tools_limit),
            metadata=build_tool_metadata(tool),
        )

    async def compare(self, slugs: list[str]) -> CompareResponse:
        """Side-by-side view of up to ``APP_COMPARE_MAX_TOOLS`` tools.

        Raises:
            ValidationAppError: No slugs, or more than the maximum.
            NotFoundAppError: Any slug is unknown.
        """
        max_tools = settings.app.compare_max_tools
        if not slugs:
            raise ValidationAppError(
                code="compare_no_tools",
                message="Select at least one tool to compare",
            )
        if len(slugs) > max_tools:
            raise ValidationAppError(
                code="compare_too_many_tools",
                message=f"You can compare up to {max_tools} tools",
                details={"max_tools": max_tools, "slugs": slugs},
            )

        found = await asyncio.gather(*(self._store.get_tool_by_slug(s) for s in slugs))
        missing = [slug for slug, tool in zip(slugs, found) if tool is None]
        if missing:
            raise NotFoundAppError(
                code="tool_not_found",
                message=f"Unknown tools: {', '.join(missing)}",
                details={"slugs": missing},
            )

        tools: list[Tool] = list(found)
        features: dict[str, None] = {}
        for tool in tools:
            for feature in tool.features:
                features.setdefault(feature, None)

        return CompareResponse(
            tools=[
                ComparedTool(tool=t, pricing_label=format_pricing(t.pricing_details))
                for t in tools
            ],
            features=[
                FeatureRow(feature=f, support={t.slug: f in t.features for t in tools})
                for f in features
            ],
            max_tools=max_tools,
        )
