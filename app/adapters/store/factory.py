"""Factory for catalog store instances."""

from app.adapters.store.base import AbstractCatalogStore
from app.adapters.store.in_memory import InMemoryCatalogStore
from app.adapters.store.supabase import SupabaseCatalogStore
from app.core.config import StoreSettings, settings
from app.core.errors import ValidationAppError


def create_catalog_store(store_settings: StoreSettings | None = None) -> AbstractCatalogStore:
    """Instantiate the catalog store selected by ``STORE_BACKEND``.

    Returns:
        AbstractCatalogStore: Configured store.

    Raises:
        ValidationAppError: If backend-specific requirements are not met.
    """
    cfg = store_settings or settings.store
    backend = cfg.backend.lower()

    if backend == "memory":
        return InMemoryCatalogStore()

    if backend == "supabase":
        if not cfg.supabase_url or not cfg.supabase_anon_key:
            raise ValidationAppError(
                code="store_missing_supabase_config",
                message=(
                    "Supabase backend requires STORE_SUPABASE_URL and "
                    "STORE_SUPABASE_ANON_KEY"
                ),
                details={"backend": backend},
            )
        return SupabaseCatalogStore(
            url=cfg.supabase_url,
            anon_key=cfg.supabase_anon_key,
            service_role_key=cfg.supabase_service_role_key,
            timeout_seconds=cfg.timeout_seconds,
        )

    raise ValidationAppError(
        code="store_unknown_backend",
        message=f"Unknown catalog backend: '{backend}'. Supported backends: memory, supabase",
        details={"backend": backend},
    )
