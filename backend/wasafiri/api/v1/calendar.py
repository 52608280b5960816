from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, Header, status

from wasafiri.api.errors import to_http_exception
from wasafiri.api.v1.routes import get_service
from wasafiri.domain.errors import RoutePlanningError
from wasafiri.schemas.routes import CalendarEventResponse
from wasafiri.services.calendar import CalendarService
from wasafiri.services.planner import PlannerService
from wasafiri.services.session import BearerTokenAuthProvider


router = APIRouter()

_calendar_service: CalendarService | None = None


def get_calendar_service() -> CalendarService:
    global _calendar_service
    if _calendar_service is None:
        _calendar_service = CalendarService.from_settings()
    return _calendar_service


def get_auth(authorization: str | None = Header(default=None)) -> BearerTokenAuthProvider:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return BearerTokenAuthProvider()
    return BearerTokenAuthProvider(token)


@router.post(
    "/events",
    response_model=CalendarEventResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_event(
    planner: PlannerService = Depends(get_service),
    calendar: CalendarService = Depends(get_calendar_service),
    auth: BearerTokenAuthProvider = Depends(get_auth),
) -> CalendarEventResponse:
    try:
        created = await asyncio.to_thread(
            calendar.export_planned_route, planner.state, auth
        )
    except RoutePlanningError as exc:
        raise to_http_exception(exc) from exc

    start = created.get("start") or {}
    return CalendarEventResponse(
        event_id=created.get("id"),
        html_link=created.get("htmlLink"),
        time_zone=start.get("timeZone"),
    )
