"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() and not os.getenv("TESTING") else None


# Nested BaseSettings don't inherit env_file, so populate os.environ up front
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_log_settings() -> "LogSettings":
    return LogSettings()


def _build_app_settings() -> "AppSettings":
    return AppSettings()


def _build_store_settings() -> "StoreSettings":
    """Build store settings from environment.

    Static type checkers treat fields as constructor arguments, which is not
    how BaseSettings is populated; the factory keeps that noise in one place.
    """

    return StoreSettings()  # type: ignore[call-arg]


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log output: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
    )
    backup_count: int = Field(5, description="Number of rotated log files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read and propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    admin_secret: str | None = Field(
        None,
        description="Bearer secret required by admin endpoints (seed, post authoring)",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-client-IP rate limiting on public read endpoints",
    )
    rate_limit_requests: int = Field(
        100,
        description="Maximum number of requests allowed per window (per client IP)",
        ge=1,
    )
    rate_limit_window_ms: int = Field(
        60_000,
        description="Rate limit window size in milliseconds",
        ge=1,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers on responses",
    )
    rate_limit_sweep_threshold: int = Field(
        10_000,
        description="Sweep expired limiter entries once the table holds this many keys",
        ge=1,
    )

    cache_max_age_seconds: int = Field(
        3600,
        description="max-age / s-maxage applied to cacheable public responses",
        ge=0,
    )
    cache_stale_while_revalidate_seconds: int = Field(
        86400,
        description="stale-while-revalidate applied to cacheable public responses",
        ge=0,
    )

    tools_page_size: int = Field(24, description="Tools per listing page", ge=1)
    compare_max_tools: int = Field(4, description="Maximum tools in one comparison", ge=1)
    related_tools_limit: int = Field(4, description="Related tools shown per tool", ge=0)
    blog_posts_per_day: int = Field(
        1,
        description="Posts auto-scheduled per calendar day",
        ge=1,
    )
    blog_publish_hour_utc: int = Field(
        9,
        description="Hour of day (UTC) used for auto-scheduled posts",
        ge=0,
        le=23,
    )
    scraper_timeout_seconds: float = Field(
        10.0,
        description="Timeout for website metadata scraping",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class StoreSettings(BaseSettings):
    """Catalog store (hosted database) configuration.

    Validation of backend-specific requirements happens in the factory.
    """

    backend: str = Field(
        "memory",
        description="Catalog backend: memory or supabase",
    )
    supabase_url: str | None = Field(None, description="Supabase project URL")
    supabase_anon_key: str | None = Field(
        None,
        description="Public anon key used for read queries",
    )
    supabase_service_role_key: str | None = Field(
        None,
        description="Service role key used for admin writes",
    )
    timeout_seconds: float = Field(10.0, description="Store request timeout in seconds")

    model_config = SettingsConfigDict(
        env_prefix="STORE_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are invalid.
    """

    app_env: str = APP_ENV
    log: LogSettings = Field(default_factory=_build_log_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)
    store: StoreSettings = Field(default_factory=_build_store_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()
