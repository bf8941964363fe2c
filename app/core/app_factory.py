"""Application factory for the FastAPI app.

Centralizes app construction (metadata, shared state, middleware, handlers,
routers) so tests can build isolated instances.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from app.adapters.store.base import AbstractCatalogStore
from app.adapters.store.factory import create_catalog_store
from app.api.routes import (
    admin_router,
    categories_router,
    health_router,
    posts_router,
    tools_router,
)
from app.core.config import settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware
from app.core.openapi import apply_openapi_customizations

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "app.startup",
        extra={"store_backend": settings.store.backend, "app_env": settings.app_env},
    )
    yield
    await app.state.catalog_store.aclose()
    logger.info("app.shutdown")


def create_app(
    *,
    catalog_store: AbstractCatalogStore | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    The rate limiter table and the catalog store are created here, once per
    application, and kept on ``app.state`` for the request dependencies.

    Args:
        catalog_store: Store to use instead of the configured backend.
        rate_limiter: Limiter to use instead of a fresh in-memory one.

    Returns:
        Configured app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="AI Tool Finder API",
        description=(
            "Directory of AI tools with search, filters, pagination and "
            "side-by-side comparison, plus the blog that accompanies it. Public "
            "reads are rate limited per client IP and support ETag revalidation; "
            "admin routes require a bearer secret."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    if catalog_store is None:
        catalog_store = create_catalog_store()
    if rate_limiter is None:
        rate_limiter = InMemoryFixedWindowRateLimiter(
            sweep_threshold=settings.app.rate_limit_sweep_threshold,
        )
    # An empty limiter has len() == 0, so never test these for truthiness
    app.state.catalog_store = catalog_store
    app.state.rate_limiter = rate_limiter

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(tools_router, prefix="/v1")
    app.include_router(categories_router, prefix="/v1")
    app.include_router(posts_router, prefix="/v1")
    app.include_router(admin_router, prefix="/v1")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
