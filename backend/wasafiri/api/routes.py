from __future__ import annotations

from fastapi import APIRouter

from wasafiri.api.v1 import calendar, places, routes

router = APIRouter()
router.include_router(routes.router, prefix="/v1/routes", tags=["routes"])
router.include_router(places.router, prefix="/v1/places", tags=["places"])
router.include_router(calendar.router, prefix="/v1/calendar", tags=["calendar"])
