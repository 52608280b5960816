from datetime import datetime, timedelta, timezone

import pytest

from wasafiri.domain.errors import InvalidInput
from wasafiri.domain.geometry import GeoPoint
from wasafiri.schemas.routes import LocationInput
from wasafiri.services.route_request import (
    ROUTES_FIELD_MASK,
    build_route_request,
    route_headers,
)


NAIROBI = GeoPoint(-1.2921, 36.8219, address="Nairobi, Kenya")
WESTLANDS = GeoPoint(-1.2676, 36.8108)


def test_payload_mirrors_inputs_and_fixed_policy():
    request = build_route_request(NAIROBI, WESTLANDS)

    payload = request.to_payload()

    assert payload["origin"] == {
        "location": {"latLng": {"latitude": -1.2921, "longitude": 36.8219}}
    }
    assert payload["destination"] == {
        "location": {"latLng": {"latitude": -1.2676, "longitude": 36.8108}}
    }
    assert payload["travelMode"] == "DRIVE"
    assert payload["routingPreference"] == "TRAFFIC_AWARE_OPTIMAL"
    assert payload["computeAlternativeRoutes"] is False
    assert payload["routeModifiers"] == {
        "avoidTolls": False,
        "avoidHighways": False,
        "avoidFerries": False,
    }
    assert payload["languageCode"] == "en-US"
    assert payload["units"] == "IMPERIAL"
    assert request.origin.address == "Nairobi, Kenya"


@pytest.mark.parametrize("departure", [None, "", "   "])
def test_departure_time_omitted_when_absent(departure):
    payload = build_route_request(NAIROBI, WESTLANDS, departure).to_payload()

    assert "departureTime" not in payload


def test_local_departure_time_serialized_as_utc():
    request = build_route_request(
        NAIROBI, WESTLANDS, "2024-07-01T08:30", time_zone="Africa/Nairobi"
    )

    assert request.to_payload()["departureTime"] == "2024-07-01T05:30:00Z"


def test_aware_departure_time_keeps_offset():
    departure = datetime(2024, 7, 1, 8, 30, tzinfo=timezone(timedelta(hours=-4)))

    request = build_route_request(NAIROBI, WESTLANDS, departure)

    assert request.departure_time_utc == "2024-07-01T12:30:00Z"


def test_naive_departure_without_zone_uses_server_local_time():
    request = build_route_request(NAIROBI, WESTLANDS, "2024-07-01T08:30")

    expected = datetime(2024, 7, 1, 8, 30).astimezone().astimezone(timezone.utc)
    assert request.departure_time == expected


def test_accepts_location_input_models():
    origin = LocationInput(latitude=-1.2921, longitude=36.8219, address="CBD")

    request = build_route_request(origin, LocationInput(latitude=-1.3, longitude=36.8))

    assert request.origin == GeoPoint(-1.2921, 36.8219, address="CBD")
    assert request.destination == GeoPoint(-1.3, 36.8)


@pytest.mark.parametrize(
    ("origin", "destination"),
    [
        (None, WESTLANDS),
        (NAIROBI, None),
        (LocationInput(latitude=None, longitude=36.8), WESTLANDS),
        (NAIROBI, LocationInput(latitude=-1.3, longitude=None)),
        (LocationInput(), LocationInput()),
    ],
)
def test_rejects_unresolved_points(origin, destination):
    with pytest.raises(InvalidInput):
        build_route_request(origin, destination)


def test_rejects_unparseable_departure_time():
    with pytest.raises(InvalidInput):
        build_route_request(NAIROBI, WESTLANDS, "tomorrow morning")


def test_rejects_unknown_time_zone():
    with pytest.raises(InvalidInput):
        build_route_request(
            NAIROBI, WESTLANDS, "2024-07-01T08:30", time_zone="Mars/Olympus"
        )


def test_headers_carry_key_and_field_mask():
    headers = route_headers("secret")

    assert headers["X-Goog-Api-Key"] == "secret"
    assert headers["X-Goog-FieldMask"] == ROUTES_FIELD_MASK
    assert headers["Content-Type"] == "application/json"
