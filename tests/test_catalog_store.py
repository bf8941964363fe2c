"""Tests for catalog store adapters and the store factory."""

import json
from datetime import datetime, timezone

import httpx
import pytest

from app.adapters.store.factory import create_catalog_store
from app.adapters.store.in_memory import InMemoryCatalogStore
from app.adapters.store.supabase import SupabaseCatalogStore
from app.core.config import StoreSettings
from app.core.errors import StoreAppError, ValidationAppError
from app.schemas.tool import Category

TOOL_ROW = {
    "id": "1",
    "name": "ChatGPT",
    "slug": "chatgpt",
    "category": "Text AI",
    "popularity_score": 100,
    "pricing_details": {"monthly": "20"},
}


def _store(handler, *, service_role_key: str | None = "service-key") -> SupabaseCatalogStore:
    return SupabaseCatalogStore(
        url="https://project.supabase.co/",
        anon_key="anon-key",
        service_role_key=service_role_key,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class TestSupabaseStore:
    @pytest.mark.asyncio
    async def test_reads_use_anon_key(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[TOOL_ROW])

        store = _store(handler)
        tool = await store.get_tool_by_slug("chatgpt")

        assert tool is not None
        assert tool.pricing_details.monthly == "20"
        request = seen[0]
        assert request.url.path == "/rest/v1/tools"
        assert request.url.params["slug"] == "eq.chatgpt"
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["Authorization"] == "Bearer anon-key"

    @pytest.mark.asyncio
    async def test_missing_row_returns_none(self) -> None:
        store = _store(lambda request: httpx.Response(200, json=[]))

        assert await store.get_post_by_slug("nope") is None

    @pytest.mark.asyncio
    async def test_search_sanitizes_filter_syntax(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        await _store(handler).search_tools("chat,(bot)")

        or_filter = seen[0].url.params["or"]
        assert "chat  bot" in or_filter
        assert or_filter.startswith("(name.ilike.*")

    @pytest.mark.asyncio
    async def test_http_error_maps_to_store_error(self) -> None:
        store = _store(lambda request: httpx.Response(500, json={"message": "boom"}))

        with pytest.raises(StoreAppError) as exc_info:
            await store.list_categories()

        assert exc_info.value.code == "store_query_failed"
        assert exc_info.value.details["http_status"] == 500

    @pytest.mark.asyncio
    async def test_transport_error_maps_to_unreachable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(StoreAppError) as exc_info:
            await _store(handler).list_tools()

        assert exc_info.value.code == "store_unreachable"

    @pytest.mark.asyncio
    async def test_writes_require_service_role_key(self) -> None:
        store = _store(lambda request: httpx.Response(201, json=[]), service_role_key=None)

        with pytest.raises(ValidationAppError):
            await store.upsert_categories([Category(id="1", name="Text AI", slug="text-ai")])

    @pytest.mark.asyncio
    async def test_insert_post_serializes_dates(self) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            body = json.loads(request.content)
            bodies.append(body)
            assert request.headers["Authorization"] == "Bearer service-key"
            assert request.headers["Prefer"] == "return=representation"
            return httpx.Response(201, json=[{"id": "p1", **body}])

        published = datetime(2026, 5, 1, 9, tzinfo=timezone.utc)
        post = await _store(handler).insert_post(
            {"title": "T", "slug": "t", "content_html": "<p>x</p>", "published_at": published}
        )

        assert bodies[0]["published_at"] == "2026-05-01T09:00:00+00:00"
        assert post.id == "p1"
        assert post.published_at == published


class TestInMemoryStore:
    @pytest.mark.asyncio
    async def test_list_tools_ordered_by_popularity(self, store: InMemoryCatalogStore) -> None:
        tools = await store.list_tools()

        scores = [t.popularity_score for t in tools]
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.asyncio
    async def test_publish_dates_since(self, store: InMemoryCatalogStore) -> None:
        dates = await store.list_publish_dates(datetime.now(timezone.utc))

        assert len(dates) == 1


class TestFactory:
    def test_memory_backend(self) -> None:
        assert isinstance(create_catalog_store(StoreSettings(backend="memory")), InMemoryCatalogStore)

    def test_supabase_backend_requires_credentials(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            create_catalog_store(StoreSettings(backend="supabase", supabase_url="https://x.supabase.co"))

        assert exc_info.value.code == "store_missing_supabase_config"

    @pytest.mark.asyncio
    async def test_supabase_backend(self) -> None:
        store = create_catalog_store(
            StoreSettings(
                backend="Supabase",
                supabase_url="https://x.supabase.co",
                supabase_anon_key="anon",
            )
        )

        assert isinstance(store, SupabaseCatalogStore)
        await store.aclose()

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            create_catalog_store(StoreSettings(backend="mongo"))

        assert exc_info.value.code == "store_unknown_backend"
