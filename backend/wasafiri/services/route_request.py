from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from wasafiri.domain.errors import InvalidInput
from wasafiri.domain.geometry import GeoPoint, coordinate_pair


ROUTES_FIELD_MASK = (
    "routes.duration,routes.distanceMeters,routes.polyline.encodedPolyline"
)
TRAVEL_MODE = "DRIVE"
ROUTING_PREFERENCE = "TRAFFIC_AWARE_OPTIMAL"
LANGUAGE_CODE = "en-US"
UNITS = "IMPERIAL"


@dataclass(frozen=True, slots=True)
class RouteRequest:
    origin: GeoPoint
    destination: GeoPoint
    departure_time: datetime | None = None
    travel_mode: str = TRAVEL_MODE
    routing_preference: str = ROUTING_PREFERENCE
    compute_alternative_routes: bool = False
    avoid_tolls: bool = False
    avoid_highways: bool = False
    avoid_ferries: bool = False
    language_code: str = LANGUAGE_CODE
    units: str = UNITS

    @property
    def departure_time_utc(self) -> str | None:
        if self.departure_time is None:
            return None
        return (
            self.departure_time.astimezone(timezone.utc)
            .replace(microsecond=0)
            .isoformat()
            .replace("+00:00", "Z")
        )

    def to_payload(self) -> dict[str, Any]:
        """Build the ``computeRoutes`` JSON body."""

        payload: dict[str, Any] = {
            "origin": _waypoint(self.origin),
            "destination": _waypoint(self.destination),
            "travelMode": self.travel_mode,
            "routingPreference": self.routing_preference,
            "computeAlternativeRoutes": self.compute_alternative_routes,
            "routeModifiers": {
                "avoidTolls": self.avoid_tolls,
                "avoidHighways": self.avoid_highways,
                "avoidFerries": self.avoid_ferries,
            },
            "languageCode": self.language_code,
            "units": self.units,
        }
        # Without departureTime the service plans for "now".
        departure = self.departure_time_utc
        if departure is not None:
            payload["departureTime"] = departure
        return payload


def route_headers(api_key: str) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "X-Goog-Api-Key": api_key,
        "X-Goog-FieldMask": ROUTES_FIELD_MASK,
    }


def build_route_request(
    origin: Any,
    destination: Any,
    departure_time: str | datetime | None = None,
    *,
    time_zone: str | None = None,
) -> RouteRequest:
    """
    Validate the form values and produce a :class:`RouteRequest`.

    ``origin`` and ``destination`` may be unresolved (``None`` or with unset
    coordinates), in which case :class:`InvalidInput` is raised and nothing
    should be sent upstream. ``departure_time`` is local wall-clock time; a
    naive value is placed in ``time_zone`` (or the server zone) before being
    converted to an absolute instant.
    """
    origin_pair = coordinate_pair(origin)
    destination_pair = coordinate_pair(destination)
    missing = [
        name
        for name, pair in (("origin", origin_pair), ("destination", destination_pair))
        if pair is None
    ]
    if missing:
        raise InvalidInput(
            "Select an address from the suggestions for: " + ", ".join(missing)
        )

    return RouteRequest(
        origin=GeoPoint(*origin_pair, address=getattr(origin, "address", None)),
        destination=GeoPoint(
            *destination_pair, address=getattr(destination, "address", None)
        ),
        departure_time=parse_departure_time(departure_time, time_zone=time_zone),
    )


def parse_departure_time(
    value: str | datetime | None,
    *,
    time_zone: str | None = None,
) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError as exc:
            raise InvalidInput(f"Invalid departure time '{value}'") from exc
    else:
        parsed = value

    if parsed.tzinfo is not None:
        return parsed
    if time_zone:
        return parsed.replace(tzinfo=_zone(time_zone))
    # Naive and no zone supplied: the server's local zone.
    return parsed.astimezone()


def _zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidInput(f"Unknown time zone '{name}'") from exc


def _waypoint(point: GeoPoint) -> dict[str, Any]:
    return {
        "location": {
            "latLng": {"latitude": point.latitude, "longitude": point.longitude}
        }
    }
