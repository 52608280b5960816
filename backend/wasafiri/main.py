from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wasafiri.api.routes import router
from wasafiri.core.config import get_settings
from wasafiri.core.logging import configure_logging


settings = get_settings()
configure_logging(settings.debug)

app = FastAPI(
    title="Wasafiri Traffic Planner API", version="0.1.0", debug=settings.debug
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Return basic service health."""

    return {"status": "ok"}
