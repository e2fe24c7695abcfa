"""API Routers Package.

Routers:
- events.py: Planner events CRUD and the upcoming feed

Usage in main.py:
    from api.routers import events_router

    app.include_router(events_router, prefix="/events", tags=["events"])
"""

from .events import router as events_router

__all__ = [
    "events_router",
]
