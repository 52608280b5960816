from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from wasafiri.services.route_display import RouteDisplay


class LocationInput(BaseModel):
    """A form endpoint; coordinates stay unset until a suggestion is picked."""

    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)
    address: str | None = None

    @field_validator("address", mode="before")
    def _normalize_address(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = str(value).strip()
        return cleaned or None


class RoutePlanRequest(BaseModel):
    origin: LocationInput | None = None
    destination: LocationInput | None = None
    departure_time: str | None = None
    time_zone: str | None = None


class PathPoint(BaseModel):
    latitude: float
    longitude: float


class RouteDisplayResponse(BaseModel):
    sequence: int
    distance_text: str
    duration_text: str
    map_link: str
    distance_meters: int
    duration_seconds: int
    path: list[PathPoint] = Field(default_factory=list)

    @classmethod
    def from_display(
        cls, sequence: int, display: RouteDisplay
    ) -> "RouteDisplayResponse":
        return cls(
            sequence=sequence,
            distance_text=display.distance_text,
            duration_text=display.duration_text,
            map_link=display.map_link,
            distance_meters=display.distance_meters,
            duration_seconds=display.duration_seconds,
            path=[
                PathPoint(latitude=point.latitude, longitude=point.longitude)
                for point in display.path
            ],
        )


class LatestRouteResponse(BaseModel):
    busy: bool
    latest_sequence: int
    route: RouteDisplayResponse | None = None
    error: str | None = None


class PlaceSelectRequest(BaseModel):
    place: dict[str, Any]
    country: str | None = Field(default=None, min_length=2, max_length=2)


class PlaceSelectResponse(BaseModel):
    latitude: float
    longitude: float
    address: str | None = None
    autocomplete_options: dict[str, Any] = Field(default_factory=dict)


class CalendarEventResponse(BaseModel):
    event_id: str | None = None
    html_link: str | None = None
    time_zone: str | None = None
