"""
Configuration for the Innothon admin API.

Values come from the environment (or a local .env file) and are validated
once by pydantic-settings; get_settings() hands out the cached instance.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

WEAK_PASSWORDS = frozenset({"", "admin", "password", "123456"})


class Settings(BaseSettings):
    """Environment-driven settings. Defaults target a local PocketBase."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # --- Backend ---
    pocketbase_url: str = Field(
        default="http://127.0.0.1:8090",
        description="Base URL of the PocketBase instance holding registrations",
    )
    pocketbase_admin_email: str = Field(
        default="admin@innothon.local",
        description="Superuser email the API signs in with",
    )
    pocketbase_admin_password: str = Field(
        default="",
        description="Superuser password (no usable default)",
    )
    skip_pb_auth: bool = Field(
        default=False,
        description="Do not sign in on startup (tests and offline development)",
    )

    # --- Dashboard origin ---
    # Kept as a raw string; pydantic-settings would otherwise expect JSON for a list
    allowed_origins_str: str = Field(
        default="http://localhost:3000",
        alias="ALLOWED_ORIGINS",
        description="Comma-separated origins allowed to call the API",
    )

    # --- Reporting ---
    display_timezone: str = Field(
        default="Asia/Kolkata",
        description="Timezone for dates written to exports",
    )
    trend_window_days: int = Field(
        default=7,
        ge=1,
        description="Days shown on trend charts when the request does not say",
    )

    # --- Export cache ---
    export_cache_capacity: int = Field(
        default=32,
        ge=0,
        description="Workbooks kept in memory; 0 turns the cache off",
    )
    export_cache_ttl_seconds: int = Field(
        default=300,
        ge=0,
        description="How long a generated workbook may be served again",
    )

    @field_validator("pocketbase_admin_password", mode="after")
    @classmethod
    def warn_on_weak_password(cls, v: str) -> str:
        if v in WEAK_PASSWORDS:
            logger.warning(
                "POCKETBASE_ADMIN_PASSWORD is empty or a common default; "
                "set a real superuser password before deploying."
            )
        return v

    @field_validator("display_timezone", mode="after")
    @classmethod
    def validate_display_timezone(cls, v: str) -> str:
        """Reject timezone names the tz database does not know."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Invalid DISPLAY_TIMEZONE: {v}") from e
        return v

    @property
    def allowed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first use."""
    return Settings()
