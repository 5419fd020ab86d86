"""Application configuration via pydantic settings."""

from functools import lru_cache
from pathlib import Path

from typing import Annotated, Any

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Typed application configuration."""

    app_env: str = Field("local", alias="APP_ENV")
    app_name: str = "Staybook Availability API"
    api_v1_prefix: str = Field("/api/v1", alias="API_V1_PREFIX")

    database_url: str = Field(..., alias="DATABASE_URL")
    sync_database_url: str | None = Field(default=None, alias="SYNC_DATABASE_URL")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    default_timezone: str = Field("UTC", alias="DEFAULT_TIMEZONE")

    redis_url: str | None = Field(default=None, alias="REDIS_URL")
    rate_limit_default: str = Field("100/minute", alias="RATE_LIMIT_DEFAULT")

    cors_allowlist: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:5173"], alias="CORS_ALLOWLIST"
    )
    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")

    calendar_default_months: int = Field(12, alias="CALENDAR_DEFAULT_MONTHS")
    suggestion_search_radius: int = Field(14, alias="SUGGESTION_SEARCH_RADIUS")
    suggestion_limit: int = Field(5, alias="SUGGESTION_LIMIT")
    suggestion_price_band: int = Field(50, alias="SUGGESTION_PRICE_BAND")
    booking_excluded_statuses: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["cancelled", "refunded"],
        alias="BOOKING_EXCLUDED_STATUSES",
    )

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[3] / ".env",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("cors_allowlist", "booking_excluded_statuses", mode="before")
    @classmethod
    def _split_csv(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()  # type: ignore[call-arg]
