"""Pre-fill blog post fields from pasted article text.

Admins paste an article (HTML, sometimes markdown, often wrapped in a code
fence by the model that wrote it). This module pulls out a title, an
excerpt and tags so the authoring form only needs a review.
"""

from __future__ import annotations

import re

from app.schemas.post import AutofillResponse
from app.utils.text_normalizer import normalize_text, strip_html, truncate_at_word

EXCERPT_MAX_CHARS = 160
MAX_TAGS = 8

_FENCE = re.compile(r"^\s*```[\w-]*\s*\n(?P<body>.*?)\n?\s*```\s*$", re.DOTALL)
_H1 = re.compile(r"<h1\b[^>]*>(?P<text>.*?)</h1>", re.IGNORECASE | re.DOTALL)
_PARAGRAPH = re.compile(r"<p\b[^>]*>(?P<text>.*?)</p>", re.IGNORECASE | re.DOTALL)
_MD_HEADING = re.compile(r"^\s*#\s+(?P<text>.+?)\s*#*\s*$", re.MULTILINE)


def clean_content(raw: str) -> str:
    """Drop a surrounding markdown code fence and normalize whitespace."""
    text = raw.strip()
    match = _FENCE.match(text)
    if match:
        text = match.group("body")
    return normalize_text(text)


def extract_title(content: str, tool_name: str) -> str:
    match = _H1.search(content)
    if match:
        title = strip_html(match.group("text"))
        if title:
            return title

    match = _MD_HEADING.search(content)
    if match:
        title = strip_html(match.group("text"))
        if title:
            return title

    return f"{tool_name}: Complete Guide"


def extract_excerpt(content: str) -> str:
    match = _PARAGRAPH.search(content)
    if match:
        text = strip_html(match.group("text"))
    else:
        # Markdown / plain text: first block that is not a heading
        text = ""
        for block in re.split(r"\n\s*\n", content):
            block = block.strip()
            if block and not block.startswith("#") and not _H1.match(block):
                text = strip_html(block)
                break
    return truncate_at_word(text, EXCERPT_MAX_CHARS)


def build_tags(tool_name: str, category: str | None, tool_tags: list[str]) -> list[str]:
    """Category, tool name, then tool tags; lower-cased, unique, capped."""
    tags: dict[str, None] = {}
    for raw in [category or "", tool_name, *tool_tags]:
        tag = raw.strip().lower()
        if tag:
            tags.setdefault(tag, None)
    return list(tags)[:MAX_TAGS]


def build_hero_image_prompt(tool_name: str, category: str | None) -> str:
    subject = f"{category} tool" if category else "AI tool"
    return (
        f"Modern, clean hero illustration for a blog article about {tool_name} "
        f"({subject}). Abstract tech shapes, soft gradients, no text."
    )


def autofill_post_data(
    content: str,
    tool_name: str,
    category: str | None = None,
    tool_tags: list[str] | None = None,
) -> AutofillResponse:
    cleaned = clean_content(content)
    return AutofillResponse(
        title=extract_title(cleaned, tool_name),
        excerpt=extract_excerpt(cleaned),
        tags=build_tags(tool_name, category, tool_tags or []),
        hero_image_prompt=build_hero_image_prompt(tool_name, category),
        related_tools=[tool_name],
        cleaned_content=cleaned,
    )
