"""Pydantic schemas for blog posts and the admin authoring flow."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.tool import Tool


class Post(BaseModel):
    id: str
    title: str
    slug: str
    excerpt: str | None = None
    content_html: str
    tags: list[str] = Field(default_factory=list)
    hero_image_url: str | None = None
    related_tools: list[str] | None = None
    published_at: datetime | None = None
    created_at: datetime | None = None


class PostDetailResponse(BaseModel):
    post: Post
    related_tools: list[Tool] = Field(default_factory=list)


class CreatePostRequest(BaseModel):
    """Admin payload for a new post.

    ``published_at`` semantics: absent or null schedules the post on the next
    free day, ``"now"`` publishes immediately, an ISO date/datetime schedules
    it for that moment and an empty string saves a draft.
    """

    title: str = ""
    excerpt: str | None = None
    content_html: str = ""
    tags: list[str] = Field(default_factory=list)
    hero_image_url: str | None = None
    related_tools: list[str] | None = None
    published_at: str | None = None
    tool_slug: str | None = Field(
        default=None,
        description=(
            "Accepted for compatibility with the admin form and ignored; "
            "link tools through related_tools."
        ),
    )


class CreatedPost(BaseModel):
    id: str
    slug: str
    title: str
    published_at: datetime | None = None


class CreatePostResponse(BaseModel):
    success: bool = True
    post: CreatedPost
    message: str
    scheduled_for: str | None = None


class AutofillRequest(BaseModel):
    content: str = Field(..., min_length=1, description="Pasted article HTML or markdown.")
    tool_name: str = Field(..., min_length=1)
    category: str | None = None
    tool_tags: list[str] = Field(default_factory=list)


class AutofillResponse(BaseModel):
    title: str
    excerpt: str
    tags: list[str]
    hero_image_prompt: str
    related_tools: list[str]
    cleaned_content: str
