from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class GeoPoint:
    latitude: float
    longitude: float
    address: str | None = None

    def as_dict(self) -> dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}


def coordinate_pair(point: Any) -> tuple[float, float] | None:
    """
    Return ``(latitude, longitude)`` for a resolved point.

    Accepts anything exposing ``latitude``/``longitude`` attributes. Points
    that are missing, or have either coordinate unset, are unresolved.
    """
    if point is None:
        return None
    latitude = getattr(point, "latitude", None)
    longitude = getattr(point, "longitude", None)
    if latitude is None or longitude is None:
        return None
    return float(latitude), float(longitude)
