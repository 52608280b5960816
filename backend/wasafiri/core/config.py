from __future__ import annotations

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    debug: bool = Field(False, alias="WASAFIRI_DEBUG")

    google_maps_api_key: str | None = Field(
        None, alias="WASAFIRI_GOOGLE_MAPS_API_KEY"
    )

    routes_endpoint: str = Field(
        "https://routes.googleapis.com/directions/v2:computeRoutes",
        alias="WASAFIRI_ROUTES_ENDPOINT",
    )
    routes_timeout: float = Field(10.0, alias="WASAFIRI_ROUTES_TIMEOUT")

    timezone_endpoint: str = Field(
        "https://maps.googleapis.com/maps/api/timezone/json",
        alias="WASAFIRI_TIMEZONE_ENDPOINT",
    )
    timezone_timeout: float = Field(5.0, alias="WASAFIRI_TIMEZONE_TIMEOUT")

    # Calendar export
    calendar_endpoint: str = Field(
        "https://www.googleapis.com/calendar/v3/calendars/{calendar_id}/events",
        alias="WASAFIRI_CALENDAR_ENDPOINT",
    )
    calendar_id: str = Field("primary", alias="WASAFIRI_CALENDAR_ID")
    calendar_timeout: float = Field(10.0, alias="WASAFIRI_CALENDAR_TIMEOUT")

    default_time_zone: str | None = Field(None, alias="WASAFIRI_DEFAULT_TIME_ZONE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @field_validator("google_maps_api_key", "default_time_zone", mode="before")
    def _blank_to_none(cls, value: str | None) -> str | None:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("default_time_zone")
    def _validate_time_zone(cls, value: str | None) -> str | None:
        """Reject zone names the tz database does not know."""

        if value is None:
            return None
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown time zone '{value}'") from exc
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()  # type: ignore[call-arg]
