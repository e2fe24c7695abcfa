"""Events Router - the signed-in user's planner events.

Handles:
- Listing events for the calendar grid
- The upcoming events feed
- Create, update and delete through an editing session

The owner is always the authenticated user.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import (
    get_clock,
    get_current_user,
    get_event_repository,
    get_settings,
    record_activity,
)
from event_planner.config import Settings
from event_planner.events import (
    DEFAULT_EVENT_COLOR,
    Clock,
    Event,
    EventEditingSession,
    EventNotFound,
    EventRepository,
    OwnerMissing,
    SessionOutcome,
    find_event,
    upcoming,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Pydantic Models
# =============================================================================

class CreateEventRequest(BaseModel):
    """Request body for creating a planner event."""
    title: str = Field("", description="Event title")
    start: str = Field("", description="Start time (ISO format)")
    end: str = Field("", description="End time (ISO format)")
    description: str = Field("", description="Event description")
    color: str = Field(DEFAULT_EVENT_COLOR, description="Display color (hex)")


class UpdateEventRequest(BaseModel):
    """Request body for updating a planner event. Omitted fields are kept."""
    title: Optional[str] = Field(None, description="New event title")
    start: Optional[str] = Field(None, description="New start time (ISO format)")
    end: Optional[str] = Field(None, description="New end time (ISO format)")
    description: Optional[str] = Field(None, description="New event description")
    color: Optional[str] = Field(None, description="New display color (hex)")

    model_config = ConfigDict(extra="ignore")


# =============================================================================
# Serialization Helpers
# =============================================================================

def _serialize_event(event: Event) -> dict:
    """Serialize an Event to the record layout plus its single color."""
    data = event.to_dict()
    data["color"] = event.color
    return data


def _commit(session: EventEditingSession, owner: str) -> SessionOutcome:
    try:
        outcome = session.commit()
    except OwnerMissing as e:
        raise HTTPException(status_code=401, detail=str(e))
    except EventNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    record_activity(owner, outcome)
    return outcome


# =============================================================================
# Event Endpoints
# =============================================================================

@router.get("")
def list_events_endpoint(
    user: str = Depends(get_current_user),
    repository: EventRepository = Depends(get_event_repository),
) -> dict:
    """List all events for the calendar grid."""
    events = repository.load(user)
    return {
        "events": [_serialize_event(e) for e in events],
        "count": len(events),
    }


@router.get("/upcoming")
def upcoming_events_endpoint(
    limit: Optional[int] = Query(None, ge=1, le=500),
    user: str = Depends(get_current_user),
    repository: EventRepository = Depends(get_event_repository),
    clock: Clock = Depends(get_clock),
    settings: Settings = Depends(get_settings),
) -> dict:
    """Future events, earliest first."""
    events = upcoming(
        repository.load(user),
        clock.now(),
        default_tz=settings.timezone,
        limit=limit,
    )
    return {
        "events": [_serialize_event(e) for e in events],
        "count": len(events),
    }


@router.post("")
def create_event_endpoint(
    request: CreateEventRequest,
    user: str = Depends(get_current_user),
    repository: EventRepository = Depends(get_event_repository),
) -> dict:
    """Create a new event."""
    session = EventEditingSession(repository, user)
    session.open_for_create(request.start, request.end)
    session.edit_draft(
        title=request.title,
        description=request.description,
        color=request.color or DEFAULT_EVENT_COLOR,
    )
    outcome = _commit(session, user)
    return {"event": _serialize_event(outcome.event), "created": True}


@router.put("/{event_id}")
def update_event_endpoint(
    event_id: str,
    request: UpdateEventRequest,
    user: str = Depends(get_current_user),
    repository: EventRepository = Depends(get_event_repository),
) -> dict:
    """Update an existing event."""
    event = find_event(repository.load(user), event_id)
    if event is None:
        raise HTTPException(status_code=404, detail=f"Event not found: {event_id}")

    session = EventEditingSession(repository, user)
    session.open_for_edit(event)
    changes = request.model_dump(exclude_none=True)
    if changes:
        session.edit_draft(**changes)
    outcome = _commit(session, user)
    return {"event": _serialize_event(outcome.event), "updated": True}


@router.delete("/{event_id}")
def delete_event_endpoint(
    event_id: str,
    user: str = Depends(get_current_user),
    repository: EventRepository = Depends(get_event_repository),
) -> dict:
    """Delete an event. Unknown ids succeed with deleted=false."""
    event = find_event(repository.load(user), event_id)
    if event is None:
        logger.info(f"Delete requested for unknown event {event_id}")
        return {"deleted": False}

    session = EventEditingSession(repository, user)
    session.open_for_edit(event)
    outcome = session.delete()
    record_activity(user, outcome)
    return {"deleted": True}
