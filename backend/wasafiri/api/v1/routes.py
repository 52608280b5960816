from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from wasafiri.api.errors import to_http_exception
from wasafiri.schemas.routes import (
    LatestRouteResponse,
    RouteDisplayResponse,
    RoutePlanRequest,
)
from wasafiri.services.planner import PlannerService, RouteForm, get_planner_service
from wasafiri.services.routes_client import RoutesConfigurationError


router = APIRouter()


def get_service() -> PlannerService:
    try:
        return get_planner_service()
    except RoutesConfigurationError as exc:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc)) from exc


@router.post(
    "/",
    response_model=RouteDisplayResponse,
    status_code=status.HTTP_200_OK,
)
async def plan_route(
    payload: RoutePlanRequest,
    service: PlannerService = Depends(get_service),
) -> RouteDisplayResponse:
    if service.busy:
        raise HTTPException(
            status.HTTP_409_CONFLICT, "A route request is already in progress"
        )

    outcome = await service.submit(
        RouteForm(
            origin=payload.origin,
            destination=payload.destination,
            departure_time=payload.departure_time,
            time_zone=payload.time_zone,
        )
    )
    if outcome.error is not None:
        raise to_http_exception(outcome.error)
    if not outcome.applied or outcome.display is None:
        raise HTTPException(
            status.HTTP_409_CONFLICT, "Superseded by a newer route request"
        )
    return RouteDisplayResponse.from_display(outcome.sequence, outcome.display)


@router.get("/latest", response_model=LatestRouteResponse)
async def latest_route(
    service: PlannerService = Depends(get_service),
) -> LatestRouteResponse:
    state = service.state
    route = None
    if state.result is not None and state.submission is not None:
        route = RouteDisplayResponse.from_display(
            state.submission.sequence, state.result
        )
    return LatestRouteResponse(
        busy=state.busy,
        latest_sequence=state.latest_sequence,
        route=route,
        error=state.error,
    )
