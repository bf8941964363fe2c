"""OpenAPI customization.

Adds the admin bearer security scheme, applies it to ``/admin`` operations
only, and fills in tag descriptions.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

TAGS_METADATA = [
    {"name": "Tools", "description": "Browse, search, filter and compare AI tools."},
    {"name": "Categories", "description": "Tool categories."},
    {"name": "Blog", "description": "Published blog posts."},
    {"name": "Admin", "description": "Seeding and post authoring (bearer secret required)."},
    {"name": "Health", "description": "Liveness checks."},
]


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add tags and admin security."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        schema = original_openapi()

        components = schema.setdefault("components", {})
        security_schemes = components.setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "AdminBearer",
            {
                "type": "http",
                "scheme": "bearer",
                "description": "Admin secret (APP_ADMIN_SECRET) sent as a bearer token.",
            },
        )

        tags = schema.setdefault("tags", [])
        existing = {t.get("name") for t in tags}
        tags.extend(t for t in TAGS_METADATA if t["name"] not in existing)

        for path, methods in schema.get("paths", {}).items():
            if "/admin/" not in path:
                continue
            for method_obj in methods.values():
                if isinstance(method_obj, dict):
                    method_obj["security"] = [{"AdminBearer": []}]

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
