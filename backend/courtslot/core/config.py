"""Application configuration via pydantic settings."""

from functools import lru_cache
from pathlib import Path

from typing import Any

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed application configuration."""

    app_env: str = Field("local", alias="APP_ENV")
    app_name: str = "Court Booking Engine API"
    api_v1_prefix: str = "/api/v1"

    database_url: str = Field(..., alias="DATABASE_URL")
    sync_database_url: str | None = Field(default=None, alias="SYNC_DATABASE_URL")

    redis_url: str | None = Field(default=None, alias="REDIS_URL")

    slot_minutes: int = Field(60, alias="SLOT_MINUTES", ge=5, le=240)
    hold_minutes: int = Field(15, alias="HOLD_MINUTES", ge=1)
    default_open_time: str = Field("08:00", alias="DEFAULT_OPEN_TIME")
    default_close_time: str = Field("22:00", alias="DEFAULT_CLOSE_TIME")

    reservation_retry_attempts: int = Field(
        3, alias="RESERVATION_RETRY_ATTEMPTS", ge=1
    )
    reservation_retry_backoff_ms: int = Field(
        50, alias="RESERVATION_RETRY_BACKOFF_MS", ge=0
    )

    lifecycle_trigger_secret: str | None = Field(
        default=None, alias="LIFECYCLE_TRIGGER_SECRET"
    )

    cors_allow_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://localhost:3000",
        ],
        alias="CORS_ALLOW_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")
    cors_allowlist: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"], alias="CORS_ALLOWLIST"
    )

    rate_limit_default: str = Field("100/minute", alias="RATE_LIMIT_DEFAULT")
    rate_limit_booking: str = Field("20/minute", alias="RATE_LIMIT_BOOKING")

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[3] / ".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("cors_allow_origins", "cors_allowlist", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()  # type: ignore[call-arg]
