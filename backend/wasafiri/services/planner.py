from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Callable

from wasafiri.core.config import get_settings
from wasafiri.core.logging import get_logger
from wasafiri.domain.capabilities import MapRenderer
from wasafiri.domain.errors import RoutePlanningError
from wasafiri.services.route_display import RouteDisplay, interpret_route
from wasafiri.services.route_request import RouteRequest, build_route_request
from wasafiri.services.routes_client import RouteResult, RoutesClient


RouteFetcher = Callable[[RouteRequest], RouteResult]

_logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RouteForm:
    origin: Any
    destination: Any
    departure_time: str | None = None
    time_zone: str | None = None


@dataclass(frozen=True, slots=True)
class Submission:
    sequence: int
    request: RouteRequest
    submitted_at: datetime


@dataclass(slots=True)
class PlannerState:
    busy: bool = False
    latest_sequence: int = 0
    result: RouteDisplay | None = None
    submission: Submission | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class SubmissionOutcome:
    sequence: int
    applied: bool
    display: RouteDisplay | None = None
    error: RoutePlanningError | None = None


class PlannerService:
    """
    Runs one form submission through build, fetch and interpret.

    The service owns a single result slot. Each submission gets a sequence
    number and its outcome is only applied while that number is still the
    latest issued, so a slow response can never overwrite a newer one.
    """

    def __init__(
        self,
        route_fetcher: RouteFetcher,
        *,
        renderer: MapRenderer | None = None,
        default_time_zone: str | None = None,
    ) -> None:
        self._route_fetcher = route_fetcher
        self._renderer = renderer
        self._default_time_zone = default_time_zone
        self._state = PlannerState()
        self._in_flight = 0
        self._lock = asyncio.Lock()

    @property
    def state(self) -> PlannerState:
        return replace(self._state)

    @property
    def busy(self) -> bool:
        return self._state.busy

    async def submit(self, form: RouteForm) -> SubmissionOutcome:
        async with self._lock:
            self._state.latest_sequence += 1
            sequence = self._state.latest_sequence
            submitted_at = datetime.now(timezone.utc)
            self._in_flight += 1
            self._state.busy = True
            self._state.error = None

        log = _logger.bind(sequence=sequence)
        log.info("Route submission started")

        request: RouteRequest | None = None
        display: RouteDisplay | None = None
        error: RoutePlanningError | None = None
        try:
            request = build_route_request(
                form.origin,
                form.destination,
                form.departure_time,
                time_zone=form.time_zone or self._default_time_zone,
            )
            result = await asyncio.to_thread(self._route_fetcher, request)
            display = interpret_route(result, request.origin, request.destination)
        except RoutePlanningError as exc:
            error = exc
        finally:
            async with self._lock:
                self._in_flight -= 1
                self._state.busy = self._in_flight > 0
                applied = sequence == self._state.latest_sequence
                if applied and error is not None:
                    self._state.error = error.user_message
                elif applied and display is not None and request is not None:
                    self._state.result = display
                    self._state.submission = Submission(
                        sequence=sequence,
                        request=request,
                        submitted_at=submitted_at,
                    )
                    self._state.error = None

        if not applied:
            log.info(
                "Stale route response discarded",
                latest_sequence=self._state.latest_sequence,
                failed=error is not None,
            )
            return SubmissionOutcome(sequence, False, display=display, error=error)

        if error is not None:
            log.warning(
                "Route submission failed",
                error=error.user_message,
                error_type=type(error).__name__,
            )
            return SubmissionOutcome(sequence, True, error=error)

        assert request is not None and display is not None
        log.info(
            "Route submission completed",
            distance_meters=display.distance_meters,
            duration_seconds=display.duration_seconds,
            points=len(display.path),
        )
        if self._renderer is not None:
            self._renderer.render(request.origin, request.destination, display.path)
        return SubmissionOutcome(sequence, True, display=display)


_planner_service: PlannerService | None = None


def get_planner_service() -> PlannerService:
    global _planner_service
    if _planner_service is None:
        settings = get_settings()
        client = RoutesClient.from_settings(settings)
        _planner_service = PlannerService(
            client.compute_route,
            default_time_zone=settings.default_time_zone,
        )
    return _planner_service
