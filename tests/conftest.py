"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any ``app`` import so settings never
pick up a developer's .env file.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["TESTING"] = "true"
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("APP_ADMIN_SECRET", "test-admin-secret")
os.environ.setdefault("APP_RATE_LIMIT_ENABLED", "true")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from app.adapters.store.in_memory import InMemoryCatalogStore
from app.core.app_factory import create_app
from app.schemas.post import Post
from app.services.seed_service import build_seed_categories, build_seed_tools

ADMIN_SECRET = os.environ["APP_ADMIN_SECRET"]


@pytest.fixture
def clock() -> Mock:
    """Deterministic limiter clock (UNIX seconds); tests move it by setting return_value."""
    return Mock(return_value=1_000_000.0)


@pytest.fixture
def rate_limiter(clock: Mock) -> InMemoryFixedWindowRateLimiter:
    return InMemoryFixedWindowRateLimiter(clock=clock)


@pytest.fixture
def sample_posts() -> list[Post]:
    now = datetime.now(timezone.utc)
    return [
        Post(
            id="post-1",
            title="ChatGPT review",
            slug="chatgpt-review",
            excerpt="Everything about ChatGPT.",
            content_html="<p>ChatGPT</p>",
            tags=["chatbot", "review"],
            related_tools=["ChatGPT"],
            published_at=now - timedelta(days=2),
        ),
        Post(
            id="post-2",
            title="Midjourney tips",
            slug="midjourney-tips",
            content_html="<p>Midjourney</p>",
            tags=["art"],
            related_tools=["Midjourney"],
            published_at=now - timedelta(days=1),
        ),
        Post(
            id="post-3",
            title="Upcoming Runway guide",
            slug="runway-guide",
            content_html="<p>Runway</p>",
            tags=["video"],
            related_tools=["Runway"],
            published_at=now + timedelta(days=3),
        ),
    ]


@pytest.fixture
def store(sample_posts: list[Post]) -> InMemoryCatalogStore:
    return InMemoryCatalogStore(
        tools=build_seed_tools(),
        categories=build_seed_categories(),
        posts=sample_posts,
    )


@pytest.fixture
def client(store: InMemoryCatalogStore, rate_limiter: InMemoryFixedWindowRateLimiter) -> TestClient:
    """Test client over an app wired to the seeded in-memory store."""
    app = create_app(catalog_store=store, rate_limiter=rate_limiter)
    return TestClient(app)


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {ADMIN_SECRET}"}
