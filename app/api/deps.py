"""Request-scoped dependencies resolving process-wide objects from app.state."""

from __future__ import annotations

from fastapi import Depends, Request

from app.adapters.store.base import AbstractCatalogStore
from app.services.blog_service import BlogService
from app.services.tool_service import ToolService


def get_catalog_store(request: Request) -> AbstractCatalogStore:
    return request.app.state.catalog_store


def get_tool_service(store: AbstractCatalogStore = Depends(get_catalog_store)) -> ToolService:
    return ToolService(store)


def get_blog_service(store: AbstractCatalogStore = Depends(get_catalog_store)) -> BlogService:
    return BlogService(store)
