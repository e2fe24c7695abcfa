"""Shared dependencies and helper functions for API routers.

Usage in routers:
    from api.dependencies import get_current_user, get_event_repository, get_clock
"""
from __future__ import annotations

import os
from functools import lru_cache

from event_planner.api.auth import get_current_user  # noqa: F401 - re-export
from event_planner.config import Settings, load_settings
from event_planner.events import Clock, EventRepository, SessionOutcome, SystemClock
from event_planner.logs import log_planner_event


# =============================================================================
# Configuration Constants
# =============================================================================

ALLOWED_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    os.getenv("EP_ALLOWED_FRONTEND", "").strip(),
]


# =============================================================================
# Cached Functions
# =============================================================================

@lru_cache
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return load_settings()


@lru_cache
def get_event_repository() -> EventRepository:
    """Get the process-wide event repository (cached).

    One instance keeps timestamp ids monotonic across requests.
    """
    return EventRepository()


def get_clock() -> Clock:
    return SystemClock()


# =============================================================================
# Activity
# =============================================================================

def record_activity(owner: str, outcome: SessionOutcome) -> None:
    """Write a committed change to the activity log."""
    log_planner_event(
        owner=owner,
        outcome=outcome,
        environment=get_settings().environment,
        source="api",
    )
