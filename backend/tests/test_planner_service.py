from __future__ import annotations

import asyncio
import threading
import time
from datetime import datetime, timezone

import pytest

from wasafiri.domain import polyline
from wasafiri.domain.errors import RequestFailed, TransportError
from wasafiri.domain.geometry import GeoPoint
from wasafiri.services.planner import PlannerService, RouteForm
from wasafiri.services.routes_client import RouteResult, parse_route_response


ORIGIN = GeoPoint(-1.2921, 36.8219)
DESTINATION = GeoPoint(-1.3, 36.8)
ENCODED = polyline.encode([(-1.2921, 36.8219), (-1.295, 36.81), (-1.3, 36.8)])


def _form(**overrides) -> RouteForm:
    values = {"origin": ORIGIN, "destination": DESTINATION}
    values.update(overrides)
    return RouteForm(**values)


def _mocked_service_fetcher(_request):
    return parse_route_response(
        {
            "routes": [
                {
                    "duration": "5400s",
                    "distanceMeters": 12345,
                    "polyline": {"encodedPolyline": ENCODED},
                }
            ]
        }
    )


class _RecordingRenderer:
    def __init__(self) -> None:
        self.calls = []

    def render(self, origin, destination, path):
        self.calls.append((origin, destination, list(path)))


@pytest.mark.asyncio
async def test_submission_produces_display_artifacts():
    renderer = _RecordingRenderer()
    service = PlannerService(_mocked_service_fetcher, renderer=renderer)

    outcome = await service.submit(_form(departure_time="2024-07-01T08:30"))

    assert outcome.applied
    assert outcome.error is None
    display = outcome.display
    assert display.distance_text == "12.35 km"
    assert display.duration_text == "1 hrs 30 mins"
    assert display.path[0] == GeoPoint(-1.2921, 36.8219)
    assert len(display.path) == 3
    assert display.map_link == (
        "https://www.google.com/maps/dir/?api=1"
        "&origin=-1.2921,36.8219&destination=-1.3,36.8&travelmode=driving"
    )

    state = service.state
    assert state.busy is False
    assert state.result == display
    assert state.submission.sequence == outcome.sequence
    assert state.error is None
    assert len(renderer.calls) == 1
    assert renderer.calls[0][2] == display.path


@pytest.mark.asyncio
async def test_invalid_input_never_reaches_the_routing_service():
    calls = []

    def fetcher(request):
        calls.append(request)
        return RouteResult(1, 1, "")

    service = PlannerService(fetcher)

    outcome = await service.submit(_form(destination=None))

    assert outcome.error is not None
    assert calls == []
    assert service.state.error == outcome.error.user_message
    assert service.state.busy is False


@pytest.mark.asyncio
async def test_failed_request_keeps_previous_result():
    responses = iter([None, RequestFailed(500)])

    def fetcher(request):
        failure = next(responses)
        if failure is not None:
            raise failure
        return _mocked_service_fetcher(request)

    renderer = _RecordingRenderer()
    service = PlannerService(fetcher, renderer=renderer)

    first = await service.submit(_form())
    second = await service.submit(_form())

    assert isinstance(second.error, RequestFailed)
    assert second.error.status_code == 500
    state = service.state
    assert state.result == first.display
    assert state.submission.sequence == first.sequence
    assert state.error == "Request failed with status code 500"
    assert len(renderer.calls) == 1


@pytest.mark.asyncio
async def test_new_submission_clears_previous_error():
    failures = iter([TransportError("timed out"), None])

    def fetcher(request):
        failure = next(failures)
        if failure is not None:
            raise failure
        return _mocked_service_fetcher(request)

    service = PlannerService(fetcher)

    await service.submit(_form())
    assert service.state.error == "Request failed: timed out"

    await service.submit(_form())
    assert service.state.error is None
    assert service.state.result is not None


@pytest.mark.asyncio
async def test_stale_response_does_not_overwrite_newer_result():
    started = threading.Event()
    release = threading.Event()
    slow = RouteResult(99_000, 7200, ENCODED)
    fast = RouteResult(1000, 600, ENCODED)

    def fetcher(request):
        if request.origin.latitude == ORIGIN.latitude:
            started.set()
            release.wait(timeout=5)
            return slow
        return fast

    service = PlannerService(fetcher)

    stale_task = asyncio.create_task(service.submit(_form()))
    assert await asyncio.to_thread(started.wait, 5)
    assert service.busy

    fresh = await service.submit(_form(origin=GeoPoint(-1.28, 36.82)))
    assert service.busy, "the first request is still outstanding"

    release.set()
    stale = await stale_task

    assert fresh.applied
    assert not stale.applied
    state = service.state
    assert state.busy is False
    assert state.latest_sequence == fresh.sequence
    assert state.result.distance_text == "1.00 km"
    assert state.submission.sequence == fresh.sequence


@pytest.mark.asyncio
async def test_submission_time_is_recorded_before_the_fetch():
    fetch_started: list[datetime] = []

    def slow_fetcher(request):
        fetch_started.append(datetime.now(timezone.utc))
        time.sleep(0.3)
        return _mocked_service_fetcher(request)

    service = PlannerService(slow_fetcher)
    before = datetime.now(timezone.utc)

    outcome = await service.submit(_form())

    submitted_at = service.state.submission.submitted_at
    assert outcome.applied
    assert before <= submitted_at <= fetch_started[0]
