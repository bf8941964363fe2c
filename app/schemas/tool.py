"""Pydantic schemas for tools, categories and directory listings."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class PricingDetails(BaseModel):
    monthly: str | None = None
    annual: str | None = None
    free_tier: str | None = None


class Tool(BaseModel):
    """An AI tool listed in the directory."""

    id: str
    name: str
    slug: str
    description: str | None = None
    category: str | None = None
    website_url: str | None = None
    logo_url: str | None = None
    pricing_free: bool = False
    pricing_tier: str | None = Field(
        default=None,
        description="Pricing model: free, freemium or paid.",
    )
    pricing_details: PricingDetails | None = None
    features: list[str] = Field(default_factory=list)
    use_cases: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    popularity_score: int = 0
    last_updated: datetime | None = None
    created_at: datetime | None = None


class Category(BaseModel):
    id: str
    name: str
    slug: str
    description: str | None = None


class ToolListResponse(BaseModel):
    """One page of the tools directory."""

    tools: list[Tool]
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    total: int = Field(..., description="Tools matching the current search/filters.")
    total_pages: int
    total_all: int = Field(..., description="All tools in the directory, unfiltered.")
    category_count: int
    error_message: str | None = Field(
        default=None,
        description="Set when the full listing failed and a fallback was used.",
    )


class PageMetadata(BaseModel):
    title: str
    description: str


class ToolDetailResponse(BaseModel):
    tool: Tool
    pricing_label: str
    related: list[Tool] = Field(default_factory=list)
    metadata: PageMetadata


class ComparedTool(BaseModel):
    tool: Tool
    pricing_label: str


class FeatureRow(BaseModel):
    feature: str
    support: dict[str, bool] = Field(
        ...,
        description="Tool slug -> whether the tool lists this feature.",
    )


class CompareResponse(BaseModel):
    tools: list[ComparedTool]
    features: list[FeatureRow]
    max_tools: int


class SeedResponse(BaseModel):
    success: bool = True
    categories: int
    tools: int
    enriched: int = 0


class ToolsNeedingPostsResponse(BaseModel):
    success: bool = True
    tools: list[Tool]
    count: int
    total_tools: int
    total_posts: int
