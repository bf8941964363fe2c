from __future__ import annotations

from app.api.routes.admin import router as admin_router
from app.api.routes.categories import router as categories_router
from app.api.routes.health import router as health_router
from app.api.routes.posts import router as posts_router
from app.api.routes.tools import router as tools_router

__all__ = [
    "admin_router",
    "categories_router",
    "health_router",
    "posts_router",
    "tools_router",
]
