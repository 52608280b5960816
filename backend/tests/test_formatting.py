import pytest

from wasafiri.domain.formatting import (
    build_maps_link,
    format_distance,
    format_duration,
    parse_duration_seconds,
)
from wasafiri.domain.geometry import GeoPoint


@pytest.mark.parametrize(
    ("meters", "expected"),
    [(0, "0.00 km"), (1000, "1.00 km"), (1500, "1.50 km"), (12345, "12.35 km")],
)
def test_format_distance(meters, expected):
    assert format_distance(meters) == expected


def test_format_duration_truncates_seconds():
    assert format_duration(3661) == "1 hrs 1 mins"
    assert format_duration(5400) == "1 hrs 30 mins"
    assert format_duration(59) == "0 hrs 0 mins"


@pytest.mark.parametrize("seconds", [0, 1, 59, 60, 3599, 3600, 5400, 86_399, 90_061])
def test_format_duration_accepts_unit_suffix(seconds):
    assert format_duration(seconds) == format_duration(f"{seconds}s")


def test_parse_duration_truncates_fractional_seconds():
    assert parse_duration_seconds("125.9s") == 125


@pytest.mark.parametrize("value", ["", "s", "-5s", "abc", "12m", True, -1])
def test_parse_duration_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_duration_seconds(value)


def test_maps_link_uses_submitted_coordinates():
    link = build_maps_link(GeoPoint(-1.2921, 36.8219), GeoPoint(-1.3, 36.8))

    assert link == (
        "https://www.google.com/maps/dir/?api=1"
        "&origin=-1.2921,36.8219&destination=-1.3,36.8&travelmode=driving"
    )


def test_maps_link_renders_whole_degrees_without_decimal():
    link = build_maps_link(GeoPoint(0.0, 36.0), GeoPoint(-1.5, 37.0))

    assert "origin=0,36&destination=-1.5,37&" in link


def test_maps_link_never_uses_exponent_notation():
    link = build_maps_link(GeoPoint(0.00001, 36.8), GeoPoint(-0.000025, 1e-06))

    assert "origin=0.00001,36.8&destination=-0.000025,0.000001&" in link
