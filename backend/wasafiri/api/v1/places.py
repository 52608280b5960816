from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from wasafiri.domain.capabilities import GeoResolver
from wasafiri.schemas.routes import PlaceSelectRequest, PlaceSelectResponse
from wasafiri.services.places import PlaceSelectionResolver, autocomplete_options


router = APIRouter()


def get_resolver() -> GeoResolver:
    return PlaceSelectionResolver()


@router.post("/select", response_model=PlaceSelectResponse)
async def select_place(
    payload: PlaceSelectRequest,
    resolver: GeoResolver = Depends(get_resolver),
) -> PlaceSelectResponse:
    point = resolver.resolve(payload.place)
    if point is None:
        raise HTTPException(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Selected place has no location; pick a suggestion from the list",
        )
    return PlaceSelectResponse(
        latitude=point.latitude,
        longitude=point.longitude,
        address=point.address,
        autocomplete_options=autocomplete_options(payload.country),
    )
