"""Catalog store adapters - abstracts over the hosted database."""

from app.adapters.store.base import AbstractCatalogStore
from app.adapters.store.factory import create_catalog_store
from app.adapters.store.in_memory import InMemoryCatalogStore
from app.adapters.store.supabase import SupabaseCatalogStore

__all__ = [
    "AbstractCatalogStore",
    "InMemoryCatalogStore",
    "SupabaseCatalogStore",
    "create_catalog_store",
]
