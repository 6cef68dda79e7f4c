"""Application configuration using Pydantic Settings."""

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Annotated
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./afclean.db"
    """Async SQLAlchemy URL (aiosqlite locally, asyncpg in production)."""

    # Redis
    redis_url: str = "redis://localhost:6379/0"
    """Redis connection URL for reminder deduplication markers."""

    # Error Tracking
    sentry_dsn: str | None = None
    """Sentry DSN for error tracking. Optional."""

    # Environment
    environment: str = "development"
    """Current environment (development, staging, production)."""

    debug: bool = False
    """Enable debug mode."""

    log_format: str | None = None
    """Logging format override (json or console). Defaults by environment."""

    # NoDecode keeps pydantic-settings from forcing JSON parsing so CSV works too.
    cors_origins: Annotated[list[str], NoDecode] = DEFAULT_CORS_ORIGINS
    """Origins allowed to call the API from a browser."""

    # Business rules
    business_timezone: str = "America/Sao_Paulo"
    """Timezone used for calendar-day and calendar-month comparisons."""

    reminder_interval_months: int = 6
    """Months between a completed cleaning and the client's return reminder."""

    income_category: str = "Limpeza"
    """Ledger category for income posted when a service completes."""

    whatsapp_country_code: str = "55"
    """Country prefix for wa.me links."""

    # Reminders
    reminder_poll_seconds: int = 3600
    """Interval for the background reminder check. 0 disables the loop."""

    reminder_marker_ttl_seconds: int = 7 * 24 * 60 * 60
    """Lifetime of the "already notified" marker per service."""

    @field_validator("business_timezone")
    @classmethod
    def validate_business_timezone(cls, value: str) -> str:
        """Reject timezone names zoneinfo cannot resolve."""
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(
                f"BUSINESS_TIMEZONE must be an IANA timezone name, got {value!r}."
            ) from exc
        return value

    @field_validator("reminder_interval_months")
    @classmethod
    def validate_reminder_interval(cls, value: int) -> int:
        """Reminder interval must move the date forward."""
        if value < 1:
            raise ValueError("REMINDER_INTERVAL_MONTHS must be at least 1.")
        return value

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, value: object) -> list[str]:
        """Parse CORS origins from JSON array, CSV, or list."""
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return DEFAULT_CORS_ORIGINS.copy()

            try:
                decoded = json.loads(text)
            except json.JSONDecodeError:
                decoded = None

            if isinstance(decoded, list):
                return _normalize_origins(decoded)
            if isinstance(decoded, str):
                text = decoded
            elif decoded is not None:
                raise ValueError(
                    "CORS_ORIGINS must be a JSON array or comma-separated string."
                )

            parsed = [item.strip() for item in text.split(",")]
            return _normalize_origins(parsed)

        if isinstance(value, (list, tuple, set)):
            return _normalize_origins(value)

        raise ValueError("CORS_ORIGINS must be a string, list, tuple, or set.")

    @property
    def tzinfo(self) -> ZoneInfo:
        """Business timezone as a tzinfo object."""
        return ZoneInfo(self.business_timezone)


def _normalize_origins(values: Iterable[object]) -> list[str]:
    """Normalize and dedupe origins while preserving declaration order."""
    normalized: list[str] = []
    seen: set[str] = set()
    for raw_item in values:
        item = str(raw_item).strip().strip("'").strip('"').rstrip("/")
        if not item or item in seen:
            continue
        normalized.append(item)
        seen.add(item)

    if not normalized:
        return DEFAULT_CORS_ORIGINS.copy()
    return normalized


try:
    settings = Settings()
except Exception as exc:
    env_file = Path(".env")
    root_error = str(exc)
    suggestions = [
        "Check DATABASE_URL uses an async driver (sqlite+aiosqlite or postgresql+asyncpg).",
        "BUSINESS_TIMEZONE must be an IANA name such as America/Sao_Paulo.",
        "Allowed values for CORS_ORIGINS are:",
        '  1) ["http://localhost:5173","http://127.0.0.1:5173"]',
        "  2) http://localhost:5173,http://127.0.0.1:5173",
    ]

    raise RuntimeError(
        "Failed to initialize application settings. "
        f"Check environment variables in {env_file.resolve() if env_file.exists() else '.env'}.\n"
        + f"Error: {root_error}\n"
        + "\n".join(suggestions)
    ) from exc
