"""Tests for seed data and website enrichment."""

import pytest

from app.schemas.tool import PricingDetails, Tool
from app.services import seed_service
from app.services.seed_service import enrich_tool
from app.services.website_scraper import WebsiteInfo


def _tool(**overrides) -> Tool:
    values = {
        "id": "1",
        "name": "Runway",
        "slug": "runway",
        "description": "Video tool.",
        "website_url": "https://runwayml.com",
    }
    values.update(overrides)
    return Tool(**values)


def _scraped(monkeypatch: pytest.MonkeyPatch, info: WebsiteInfo | None) -> None:
    async def fake_scrape(url: str) -> WebsiteInfo | None:
        return info

    monkeypatch.setattr(seed_service, "scrape_website_info", fake_scrape)


@pytest.mark.asyncio
async def test_enrich_fills_missing_monthly_price(monkeypatch: pytest.MonkeyPatch) -> None:
    _scraped(monkeypatch, WebsiteInfo(pricing="$15/month"))

    tool, changed = await enrich_tool(_tool(pricing_details=PricingDetails(annual="144")))

    assert changed is True
    assert tool.pricing_details == PricingDetails(monthly="15", annual="144")


@pytest.mark.asyncio
async def test_enrich_keeps_existing_monthly_price(monkeypatch: pytest.MonkeyPatch) -> None:
    _scraped(monkeypatch, WebsiteInfo(pricing="$99/month"))

    tool, changed = await enrich_tool(_tool(pricing_details=PricingDetails(monthly="12")))

    assert changed is False
    assert tool.pricing_details.monthly == "12"


@pytest.mark.asyncio
async def test_enrich_ignores_free_label(monkeypatch: pytest.MonkeyPatch) -> None:
    _scraped(monkeypatch, WebsiteInfo(pricing="Free"))

    tool, changed = await enrich_tool(_tool())

    assert changed is False
    assert tool.pricing_details is None


@pytest.mark.asyncio
async def test_enrich_uses_site_description_and_logo(monkeypatch: pytest.MonkeyPatch) -> None:
    description = "Runway builds AI tools for generating and editing video, images and 3D."
    _scraped(monkeypatch, WebsiteInfo(description=description, og_image="https://runwayml.com/og.png"))

    tool, changed = await enrich_tool(_tool())

    assert changed is True
    assert tool.description == description
    assert tool.logo_url == "https://runwayml.com/og.png"


@pytest.mark.asyncio
async def test_enrich_leaves_tool_when_scrape_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    _scraped(monkeypatch, None)
    original = _tool()

    tool, changed = await enrich_tool(original)

    assert changed is False
    assert tool is original
