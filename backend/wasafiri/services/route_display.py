from __future__ import annotations

from dataclasses import dataclass, field

from wasafiri.domain import polyline
from wasafiri.domain.errors import RequestFailed
from wasafiri.domain.formatting import build_maps_link, format_distance, format_duration
from wasafiri.domain.geometry import GeoPoint
from wasafiri.services.routes_client import RouteResult


@dataclass(frozen=True, slots=True)
class RouteDisplay:
    distance_text: str
    duration_text: str
    map_link: str
    distance_meters: int
    duration_seconds: int
    path: list[GeoPoint] = field(default_factory=list)


def interpret_route(
    result: RouteResult,
    origin: GeoPoint,
    destination: GeoPoint,
) -> RouteDisplay:
    """Derive everything the page shows from a route and the submitted points."""

    try:
        path = polyline.decode(result.encoded_polyline)
    except ValueError as exc:
        raise RequestFailed(200, f"invalid polyline: {exc}") from exc

    return RouteDisplay(
        distance_text=format_distance(result.distance_meters),
        duration_text=format_duration(result.duration_seconds),
        # The link uses the submitted coordinates, not the snapped path ends.
        map_link=build_maps_link(origin, destination),
        distance_meters=result.distance_meters,
        duration_seconds=result.duration_seconds,
        path=path,
    )
