"""Personal event planner module.

This module provides the planner's client-side state, including:
- Event data model and persisted record layout
- Per-owner event repository (Firestore with file fallback)
- Editing sessions for create/edit/delete
- Upcoming events projection

Storage is keyed by OWNER (the signed-in user's id); the whole collection
is the unit of persistence.
"""
from __future__ import annotations

from .types import (
    DEFAULT_EVENT_COLOR,
    Event,
    EventCollection,
    find_event,
    normalize_owner,
    parse_event_time,
    to_input_value,
)

from .errors import (
    EventPlannerError,
    OwnerMissing,
    EventNotFound,
    StorageUnreadable,
    SessionStateError,
)

from .ids import (
    Clock,
    IdGenerator,
    SystemClock,
    FixedClock,
    TimestampIdGenerator,
    SequentialIdGenerator,
)

from .storage import (
    EventStorage,
    MemoryEventStorage,
    FileEventStorage,
    FirestoreEventStorage,
    get_event_storage,
)

from .repository import EventRepository

from .session import (
    Draft,
    Closed,
    OpenForCreate,
    OpenForEdit,
    SessionState,
    SessionOutcome,
    EventEditingSession,
)

from .upcoming import (
    UpcomingCard,
    upcoming,
    to_card,
)

from .planner import (
    AddEventRequested,
    CalendarIntent,
    DateRangeSelected,
    EventClicked,
    EventPlanner,
    LogNotifier,
    Notifier,
)


__all__ = [
    # Types
    "DEFAULT_EVENT_COLOR",
    "Event",
    "EventCollection",
    "find_event",
    "normalize_owner",
    "parse_event_time",
    "to_input_value",
    # Errors
    "EventPlannerError",
    "OwnerMissing",
    "EventNotFound",
    "StorageUnreadable",
    "SessionStateError",
    # Capabilities
    "Clock",
    "IdGenerator",
    "SystemClock",
    "FixedClock",
    "TimestampIdGenerator",
    "SequentialIdGenerator",
    # Storage
    "EventStorage",
    "MemoryEventStorage",
    "FileEventStorage",
    "FirestoreEventStorage",
    "get_event_storage",
    "EventRepository",
    # Sessions
    "Draft",
    "Closed",
    "OpenForCreate",
    "OpenForEdit",
    "SessionState",
    "SessionOutcome",
    "EventEditingSession",
    # Projection
    "UpcomingCard",
    "upcoming",
    "to_card",
    # Planner
    "AddEventRequested",
    "CalendarIntent",
    "DateRangeSelected",
    "EventClicked",
    "EventPlanner",
    "LogNotifier",
    "Notifier",
]
