"""Supabase (PostgREST) catalog store.

Talks to the project's REST endpoint with ``httpx``. Reads use the public
anon key; writes use the service role key and are rejected locally when it
is not configured.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any

import httpx
from pydantic import TypeAdapter

from app.adapters.store.base import AbstractCatalogStore, popularity_key
from app.core.errors import StoreAppError, ValidationAppError
from app.schemas.post import Post
from app.schemas.tool import Category, Tool

logger = logging.getLogger(__name__)

_tools_adapter = TypeAdapter(list[Tool])
_categories_adapter = TypeAdapter(list[Category])
_posts_adapter = TypeAdapter(list[Post])

# Characters with meaning inside a PostgREST or=(...) filter
_FILTER_RESERVED = re.compile(r'[,(){}*"\\:]')


def _sanitize_filter_value(value: str) -> str:
    return _FILTER_RESERVED.sub(" ", value).strip()


class SupabaseCatalogStore(AbstractCatalogStore):
    """Catalog store backed by Supabase's PostgREST API."""

    def __init__(
        self,
        *,
        url: str,
        anon_key: str,
        service_role_key: str | None = None,
        timeout_seconds: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._rest_url = url.rstrip("/") + "/rest/v1"
        self._anon_key = anon_key
        self._service_role_key = service_role_key
        self._client = http_client or httpx.AsyncClient(timeout=timeout_seconds)

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self, *, admin: bool = False) -> dict[str, str]:
        key = self._anon_key
        if admin:
            if not self._service_role_key:
                raise ValidationAppError(
                    code="store_missing_service_role_key",
                    message="Admin writes require STORE_SUPABASE_SERVICE_ROLE_KEY",
                )
            key = self._service_role_key
        return {"apikey": key, "Authorization": f"Bearer {key}"}

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        admin: bool = False,
        prefer: str | None = None,
    ) -> Any:
        headers = self._headers(admin=admin)
        if prefer:
            headers["Prefer"] = prefer

        try:
            resp = await self._client.request(
                method,
                f"{self._rest_url}/{table}",
                params=params,
                json=json,
                headers=headers,
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "store.query_failed",
                extra={
                    "table": table,
                    "method": method,
                    "status_code": exc.response.status_code,
                },
            )
            raise StoreAppError(
                code="store_query_failed",
                message=f"Catalog store returned HTTP {exc.response.status_code} for '{table}'",
                details={"http_status": exc.response.status_code, "backend": "supabase"},
            ) from exc
        except httpx.HTTPError as exc:
            logger.error(
                "store.unreachable",
                extra={"table": table, "method": method, "error_type": type(exc).__name__},
            )
            raise StoreAppError(
                code="store_unreachable",
                message="Catalog store is unreachable",
                details={"backend": "supabase"},
            ) from exc

        if not resp.content:
            return []
        return resp.json()

    async def _select(self, table: str, **params: str) -> Any:
        return await self._request("GET", table, params={"select": "*", **params})

    async def list_tools(self) -> list[Tool]:
        tools = _tools_adapter.validate_python(await self._select("tools"))
        tools.sort(key=popularity_key, reverse=True)
        logger.debug("store.list_tools", extra={"count": len(tools)})
        return tools

    async def get_tool_by_slug(self, slug: str) -> Tool | None:
        rows = await self._select("tools", slug=f"eq.{slug}", limit="1")
        tools = _tools_adapter.validate_python(rows)
        return tools[0] if tools else None

    async def get_tools_by_names(self, names: list[str]) -> list[Tool]:
        if not names:
            return []
        quoted = ",".join(f'"{n.replace(chr(34), "")}"' for n in names)
        rows = await self._select("tools", name=f"in.({quoted})")
        return _tools_adapter.validate_python(rows)

    async def search_tools(self, query: str) -> list[Tool]:
        term = _sanitize_filter_value(query)
        if not term:
            return await self.list_tools()
        rows = await self._select(
            "tools",
            **{
                "or": f"(name.ilike.*{term}*,description.ilike.*{term}*,tags.cs.{{{term}}})",
                "order": "popularity_score.desc",
            },
        )
        return _tools_adapter.validate_python(rows)

    async def list_tools_by_category(self, category: str) -> list[Tool]:
        rows = await self._select(
            "tools", category=f"eq.{category}", order="popularity_score.desc"
        )
        return _tools_adapter.validate_python(rows)

    async def list_categories(self) -> list[Category]:
        rows = await self._select("categories", order="name")
        return _categories_adapter.validate_python(rows)

    async def upsert_categories(self, categories: list[Category]) -> int:
        rows = await self._request(
            "POST",
            "categories",
            params={"on_conflict": "slug"},
            json=[c.model_dump(mode="json") for c in categories],
            admin=True,
            prefer="resolution=merge-duplicates,return=representation",
        )
        return len(rows)

    async def upsert_tools(self, tools: list[Tool]) -> int:
        rows = await self._request(
            "POST",
            "tools",
            params={"on_conflict": "slug"},
            json=[t.model_dump(mode="json", exclude_none=True) for t in tools],
            admin=True,
            prefer="resolution=merge-duplicates,return=representation",
        )
        return len(rows)

    async def list_posts(
        self,
        *,
        published_before: datetime,
        tag: str | None = None,
    ) -> list[Post]:
        params = {
            "select": "*",
            "published_at": f"lte.{published_before.isoformat()}",
            "order": "published_at.desc",
        }
        if tag:
            params["tags"] = f"cs.{{{_sanitize_filter_value(tag)}}}"
        rows = await self._request("GET", "posts", params=params)
        return _posts_adapter.validate_python(rows)

    async def list_all_posts(self) -> list[Post]:
        rows = await self._request("GET", "posts", params={"select": "*"}, admin=True)
        return _posts_adapter.validate_python(rows)

    async def get_post_by_slug(self, slug: str) -> Post | None:
        posts = _posts_adapter.validate_python(
            await self._select("posts", slug=f"eq.{slug}", limit="1")
        )
        return posts[0] if posts else None

    async def post_slug_exists(self, slug: str) -> bool:
        rows = await self._request(
            "GET",
            "posts",
            params={"select": "id", "slug": f"eq.{slug}", "limit": "1"},
            admin=True,
        )
        return bool(rows)

    async def list_publish_dates(self, since: datetime) -> list[datetime]:
        rows = await self._request(
            "GET",
            "posts",
            params={"select": "published_at", "published_at": f"gte.{since.isoformat()}"},
            admin=True,
        )
        return [datetime.fromisoformat(r["published_at"]) for r in rows if r.get("published_at")]

    async def insert_post(self, values: dict[str, Any]) -> Post:
        payload = {
            k: v.isoformat() if isinstance(v, datetime) else v for k, v in values.items()
        }
        rows = await self._request(
            "POST",
            "posts",
            json=payload,
            admin=True,
            prefer="return=representation",
        )
        return _posts_adapter.validate_python(rows)[0]
