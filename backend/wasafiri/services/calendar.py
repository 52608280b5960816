from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import httpx

from wasafiri.core.config import Settings, get_settings
from wasafiri.core.logging import get_logger
from wasafiri.domain.capabilities import AuthProvider
from wasafiri.domain.errors import (
    NoRouteFound,
    NotSignedIn,
    RequestFailed,
    TransportError,
)
from wasafiri.domain.geometry import GeoPoint
from wasafiri.services.planner import PlannerState
from wasafiri.services.timezone import TimezoneClient


TimezoneLookup = Callable[[float, float, int], str]

EVENT_SUMMARY = "Driving Route"
EVENT_DESCRIPTION = "Your planned driving route"

_logger = get_logger(__name__)


def build_calendar_event(
    departure: datetime,
    duration_seconds: int,
    time_zone: str,
) -> dict[str, Any]:
    """Calendar API event body spanning the drive, with reminders."""

    start = departure.astimezone(timezone.utc)
    end = start + timedelta(seconds=duration_seconds)
    return {
        "summary": EVENT_SUMMARY,
        "description": EVENT_DESCRIPTION,
        "start": {"dateTime": _iso_utc(start), "timeZone": time_zone},
        "end": {"dateTime": _iso_utc(end), "timeZone": time_zone},
        "reminders": {
            "useDefault": False,
            "overrides": [
                {"method": "email", "minutes": 24 * 60},
                {"method": "popup", "minutes": 10},
            ],
        },
    }


class CalendarService:
    """Inserts a planned drive into the signed-in user's calendar."""

    def __init__(
        self,
        timezone_lookup: TimezoneLookup,
        *,
        endpoint: str,
        calendar_id: str = "primary",
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._timezone_lookup = timezone_lookup
        self._url = endpoint.format(calendar_id=calendar_id)
        self._timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "CalendarService":
        settings = settings or get_settings()
        timezones = TimezoneClient.from_settings(settings)
        return cls(
            timezones.lookup,
            endpoint=settings.calendar_endpoint,
            calendar_id=settings.calendar_id,
            timeout=settings.calendar_timeout,
        )

    def export_planned_route(
        self, state: PlannerState, auth: AuthProvider
    ) -> dict[str, Any]:
        if state.result is None or state.submission is None:
            raise NoRouteFound("Plan a route before saving it to the calendar")
        request = state.submission.request
        departure = request.departure_time or state.submission.submitted_at
        return self.export(
            departure, state.result.duration_seconds, request.origin, auth
        )

    def export(
        self,
        departure: datetime,
        duration_seconds: int,
        origin: GeoPoint,
        auth: AuthProvider,
    ) -> dict[str, Any]:
        token = auth.access_token()
        if not auth.session.signed_in or not token:
            raise NotSignedIn()

        time_zone = self._timezone_lookup(
            origin.latitude, origin.longitude, int(departure.timestamp())
        )
        event = build_calendar_event(departure, duration_seconds, time_zone)
        headers = {"Authorization": f"Bearer {token}"}

        try:
            if self._client is not None:
                response = self._client.post(
                    self._url, json=event, headers=headers, timeout=self._timeout
                )
            else:
                response = httpx.post(
                    self._url, json=event, headers=headers, timeout=self._timeout
                )
        except httpx.RequestError as exc:
            message = str(exc) or type(exc).__name__
            _logger.warning("Calendar insert transport failure", error=message)
            raise TransportError(message) from exc

        if not response.is_success:
            _logger.warning(
                "Calendar insert failed",
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise RequestFailed(response.status_code)

        try:
            created = response.json()
        except ValueError as exc:
            _logger.warning("Calendar response parse error", error=str(exc))
            raise RequestFailed(
                response.status_code, "response body is not JSON"
            ) from exc
        if not isinstance(created, dict):
            raise RequestFailed(response.status_code, "event is not an object")

        _logger.info(
            "Calendar event created",
            event_id=created.get("id"),
            time_zone=time_zone,
        )
        return created


def _iso_utc(value: datetime) -> str:
    return value.replace(microsecond=0).isoformat().replace("+00:00", "Z")
