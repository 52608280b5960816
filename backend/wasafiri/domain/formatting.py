from __future__ import annotations

import re
from decimal import Decimal

from wasafiri.domain.geometry import GeoPoint


MAPS_DIRECTIONS_URL = "https://www.google.com/maps/dir/"
_DURATION_RE = re.compile(r"^(\d+)(?:\.\d+)?s?$")


def format_distance(distance_meters: int | float) -> str:
    """Render meters as kilometres with two decimals, e.g. ``12.35 km``."""

    return f"{distance_meters / 1000:.2f} km"


def parse_duration_seconds(value: int | str) -> int:
    """
    Parse a duration given as whole seconds or as the ``"5400s"`` form used
    by protobuf ``Duration`` JSON. Fractional seconds are truncated.
    """
    if isinstance(value, bool):
        raise ValueError("Duration must be a number of seconds")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Duration cannot be negative: {value}")
        return value
    if isinstance(value, str):
        match = _DURATION_RE.match(value.strip())
        if match:
            return int(match.group(1))
    raise ValueError(f"Unrecognized duration value {value!r}")


def format_duration(value: int | str) -> str:
    seconds = parse_duration_seconds(value)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    return f"{hours} hrs {minutes} mins"


def build_maps_link(origin: GeoPoint, destination: GeoPoint) -> str:
    """Deep link that opens driving directions between the two points."""

    origin_str = f"{_coordinate(origin.latitude)},{_coordinate(origin.longitude)}"
    destination_str = (
        f"{_coordinate(destination.latitude)},{_coordinate(destination.longitude)}"
    )
    return (
        f"{MAPS_DIRECTIONS_URL}?api=1&origin={origin_str}"
        f"&destination={destination_str}&travelmode=driving"
    )


def _coordinate(value: float) -> str:
    # Whole degrees render without a trailing ".0", as browsers print them.
    if float(value).is_integer():
        return str(int(value))
    # Shortest round-trip digits, never in exponent form.
    return format(Decimal(repr(float(value))), "f")
