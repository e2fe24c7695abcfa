"""FastAPI service for the Event Planner."""
from __future__ import annotations

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from api.dependencies import ALLOWED_ORIGINS, get_settings  # noqa: E402
from api.routers import events_router  # noqa: E402
from event_planner import __version__  # noqa: E402

app = FastAPI(
    title="Event Planner API",
    version=__version__,
    description="REST interface for the travel planner's personal event calendar.",
)

origins = [origin for origin in ALLOWED_ORIGINS if origin]

if origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(events_router, prefix="/events", tags=["events"])


@app.get("/health")
def health_check() -> dict:
    """Health check endpoint with storage configuration status."""
    import os
    settings = get_settings()

    storage = "file" if os.getenv("EP_EVENTS_FORCE_FILE") == "1" else "firestore"
    return {
        "status": "ok",
        "environment": settings.environment,
        "timezone": str(settings.timezone),
        "storage": storage,
        "version": __version__,
    }
