"""Bundled starter data for the directory and the admin seed operation."""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from app.adapters.store.base import AbstractCatalogStore
from app.schemas.tool import Category, PricingDetails, SeedResponse, Tool
from app.services.tool_service import slugify
from app.services.website_scraper import (
    generate_enhanced_description,
    monthly_amount,
    scrape_website_info,
)

logger = logging.getLogger(__name__)

_SEED_NAMESPACE = uuid.UUID("6f1c2a4e-9a7b-4c3d-8e2f-1b5d7a9c0e34")

DEFAULT_CATEGORIES: list[dict[str, str]] = [
    {"name": "Text AI", "description": "Writing, chat and language assistants."},
    {"name": "Image AI", "description": "Image generation and editing."},
    {"name": "Video AI", "description": "Video generation, editing and avatars."},
    {"name": "Code AI", "description": "Coding assistants and developer tools."},
    {"name": "Audio AI", "description": "Speech, voice and music generation."},
    {"name": "Productivity AI", "description": "Notes, meetings and workflow automation."},
]

DEFAULT_TOOLS: list[dict[str, Any]] = [
    {
        "name": "ChatGPT",
        "description": "Conversational assistant for writing, research, analysis and coding.",
        "category": "Text AI",
        "website_url": "https://chat.openai.com",
        "pricing_free": True,
        "pricing_tier": "freemium",
        "pricing_details": {"monthly": "20", "free_tier": "GPT-4o mini"},
        "features": ["Chat", "File uploads", "Image generation", "Custom GPTs"],
        "use_cases": ["Writing", "Research", "Coding help"],
        "tags": ["chatbot", "writing", "assistant"],
        "popularity_score": 100,
    },
    {
        "name": "Claude",
        "description": "AI assistant for long documents, writing and careful reasoning.",
        "category": "Text AI",
        "website_url": "https://claude.ai",
        "pricing_free": True,
        "pricing_tier": "freemium",
        "pricing_details": {"monthly": "20", "free_tier": "Daily message limit"},
        "features": ["Chat", "File uploads", "Projects", "Artifacts"],
        "use_cases": ["Writing", "Document analysis", "Coding help"],
        "tags": ["chatbot", "writing", "assistant"],
        "popularity_score": 95,
    },
    {
        "name": "Midjourney",
        "description": "High quality image generation from text prompts.",
        "category": "Image AI",
        "website_url": "https://www.midjourney.com",
        "pricing_free": False,
        "pricing_tier": "paid",
        "pricing_details": {"monthly": "10"},
        "features": ["Text to image", "Upscaling", "Style references"],
        "use_cases": ["Illustration", "Concept art", "Marketing visuals"],
        "tags": ["image-generation", "art"],
        "popularity_score": 90,
    },
    {
        "name": "GitHub Copilot",
        "description": "AI pair programmer that suggests code in your editor.",
        "category": "Code AI",
        "website_url": "https://github.com/features/copilot",
        "pricing_free": False,
        "pricing_tier": "paid",
        "pricing_details": {"monthly": "10", "annual": "100"},
        "features": ["Code completion", "Chat", "Pull request summaries"],
        "use_cases": ["Software development", "Code review"],
        "tags": ["coding", "assistant"],
        "popularity_score": 88,
    },
    {
        "name": "Runway",
        "description": "Generate and edit video with AI.",
        "category": "Video AI",
        "website_url": "https://runwayml.com",
        "pricing_free": True,
        "pricing_tier": "freemium",
        "pricing_details": {"monthly": "15", "free_tier": "125 credits"},
        "features": ["Text to video", "Image to video", "Green screen"],
        "use_cases": ["Video editing", "Short films", "Ads"],
        "tags": ["video-generation", "editing"],
        "popularity_score": 80,
    },
    {
        "name": "ElevenLabs",
        "description": "Realistic text to speech and voice cloning.",
        "category": "Audio AI",
        "website_url": "https://elevenlabs.io",
        "pricing_free": True,
        "pricing_tier": "freemium",
        "pricing_details": {"monthly": "5", "free_tier": "10k characters"},
        "features": ["Text to speech", "Voice cloning", "Dubbing"],
        "use_cases": ["Audiobooks", "Voiceovers", "Podcasts"],
        "tags": ["voice", "text-to-speech"],
        "popularity_score": 78,
    },
    {
        "name": "Notion AI",
        "description": "Writing, summarizing and Q&A inside your Notion workspace.",
        "category": "Productivity AI",
        "website_url": "https://www.notion.so/product/ai",
        "pricing_free": False,
        "pricing_tier": "paid",
        "pricing_details": {"monthly": "10"},
        "features": ["Summaries", "Q&A", "Writing"],
        "use_cases": ["Notes", "Knowledge base", "Meeting notes"],
        "tags": ["productivity", "writing"],
        "popularity_score": 70,
    },
]


def build_seed_categories() -> list[Category]:
    return [
        Category(
            id=str(uuid.uuid5(_SEED_NAMESPACE, f"category:{slugify(item['name'])}")),
            name=item["name"],
            slug=slugify(item["name"]),
            description=item["description"],
        )
        for item in DEFAULT_CATEGORIES
    ]


def build_seed_tools(now: datetime | None = None) -> list[Tool]:
    now = now or datetime.now(timezone.utc)
    tools = []
    for item in DEFAULT_TOOLS:
        slug = slugify(item["name"])
        values = dict(item)
        details = values.pop("pricing_details", None)
        tools.append(
            Tool(
                id=str(uuid.uuid5(_SEED_NAMESPACE, f"tool:{slug}")),
                slug=slug,
                pricing_details=PricingDetails(**details) if details else None,
                last_updated=now,
                created_at=now,
                **values,
            )
        )
    return tools


async def enrich_tool(tool: Tool) -> tuple[Tool, bool]:
    """Fill description, logo and a missing monthly price from the tool's website."""
    if not tool.website_url:
        return tool, False

    info = await scrape_website_info(tool.website_url)
    if info is None:
        return tool, False

    updates: dict[str, Any] = {}
    description = generate_enhanced_description(tool.description or "", info)
    if description != (tool.description or ""):
        updates["description"] = description
    if not tool.logo_url and info.og_image:
        updates["logo_url"] = info.og_image

    monthly = monthly_amount(info.pricing)
    if monthly and not (tool.pricing_details and tool.pricing_details.monthly):
        details = tool.pricing_details or PricingDetails()
        updates["pricing_details"] = details.model_copy(update={"monthly": monthly})

    if not updates:
        return tool, False
    return tool.model_copy(update=updates), True


async def seed_catalog(store: AbstractCatalogStore, *, enrich: bool = False) -> SeedResponse:
    """Upsert the bundled categories and tools, optionally enriching tools first."""
    categories = build_seed_categories()
    tools = build_seed_tools()

    enriched = 0
    if enrich:
        results = await asyncio.gather(*(enrich_tool(t) for t in tools))
        tools = [tool for tool, _ in results]
        enriched = sum(1 for _, changed in results if changed)

    category_count = await store.upsert_categories(categories)
    tool_count = await store.upsert_tools(tools)

    logger.info(
        "seed.completed",
        extra={"categories": category_count, "tools": tool_count, "enriched": enriched},
    )
    return SeedResponse(categories=category_count, tools=tool_count, enriched=enriched)
