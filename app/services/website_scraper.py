"""Website metadata scraper used to enrich seeded tool records.

Only reads what a page advertises about itself: ``<title>``, the meta
description and keywords, the Open Graph image and any monthly price in the
page text. Many sites block bots; any failure yields ``None`` and the tool
keeps its original data.
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass, field

import httpx

from app.core.config import settings
from app.utils.text_normalizer import strip_html

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; aItoolfinder/1.0)"
MAX_DESCRIPTION_CHARS = 500
MIN_USEFUL_DESCRIPTION_CHARS = 50

_TITLE = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)
_META_DESCRIPTION = re.compile(
    r"<meta[^>]*name=[\"']description[\"'][^>]*content=[\"']([^\"']+)[\"']", re.IGNORECASE
)
_META_KEYWORDS = re.compile(
    r"<meta[^>]*name=[\"']keywords[\"'][^>]*content=[\"']([^\"']+)[\"']", re.IGNORECASE
)
_OG_IMAGE = re.compile(
    r"<meta[^>]*property=[\"']og:image[\"'][^>]*content=[\"']([^\"']+)[\"']", re.IGNORECASE
)

_PRICE_PATTERNS = [
    re.compile(r"\$(\d+)/month", re.IGNORECASE),
    re.compile(r"\$(\d+)/mo", re.IGNORECASE),
    re.compile(r"\$(\d+)\s*per\s*month", re.IGNORECASE),
    re.compile(r"(\d+)\s*USD\s*/\s*month", re.IGNORECASE),
]
_FREE = re.compile(r"free", re.IGNORECASE)
_MONTHLY = re.compile(r"^\$(\d+)/month$")


@dataclass
class WebsiteInfo:
    title: str | None = None
    description: str | None = None
    keywords: list[str] = field(default_factory=list)
    og_image: str | None = None
    pricing: str | None = None


def _first(pattern: re.Pattern[str], text: str) -> str | None:
    match = pattern.search(text)
    if not match:
        return None
    value = html.unescape(match.group(1)).strip()
    return value or None


def parse_website_info(page: str) -> WebsiteInfo:
    keywords_raw = _first(_META_KEYWORDS, page)
    return WebsiteInfo(
        title=_first(_TITLE, page),
        description=_first(_META_DESCRIPTION, page),
        keywords=[k.strip() for k in (keywords_raw or "").split(",") if k.strip()],
        og_image=_first(_OG_IMAGE, page),
        pricing=extract_pricing_from_text(strip_html(page)),
    )


async def scrape_website_info(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
) -> WebsiteInfo | None:
    """Fetch ``url`` and parse its metadata; ``None`` on any HTTP failure."""
    headers = {
        "User-Agent": USER_AGENT,
        "Accept": "text/html,application/xhtml+xml",
    }
    owns_client = client is None
    client = client or httpx.AsyncClient(
        timeout=settings.app.scraper_timeout_seconds,
        follow_redirects=True,
    )
    try:
        resp = await client.get(url, headers=headers)
        if resp.status_code >= 400:
            logger.info(
                "scraper.bad_status",
                extra={"url": url, "status_code": resp.status_code},
            )
            return None
        return parse_website_info(resp.text)
    except httpx.HTTPError as exc:
        logger.warning(
            "scraper.failed",
            extra={"url": url, "error_type": type(exc).__name__},
        )
        return None
    finally:
        if owns_client:
            await client.aclose()


def extract_pricing_from_text(text: str) -> str | None:
    """Monthly price (``$N/month``) or ``Free`` found in marketing text.

    Examples:
        >>> extract_pricing_from_text("Pro plan: $20/month")
        '$20/month'
        >>> extract_pricing_from_text("Start for free")
        'Free'
        >>> extract_pricing_from_text("Contact sales") is None
        True
    """
    for pattern in _PRICE_PATTERNS:
        match = pattern.search(text)
        if match:
            return f"${match.group(1)}/month"
    if _FREE.search(text):
        return "Free"
    return None


def generate_enhanced_description(original: str, info: WebsiteInfo | None) -> str:
    """Prefer the site's own description when it says more than ours."""
    if info is None or not info.description:
        return original
    if len(info.description) > MIN_USEFUL_DESCRIPTION_CHARS and len(info.description) > len(
        original
    ):
        return info.description[:MAX_DESCRIPTION_CHARS]
    return original


def monthly_amount(pricing: str | None) -> str | None:
    """Bare amount of a ``$N/month`` label, as stored in ``pricing_details.monthly``."""
    if not pricing:
        return None
    match = _MONTHLY.match(pricing)
    return match.group(1) if match else None
