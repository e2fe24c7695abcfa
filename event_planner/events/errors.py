"""Errors raised by the event planner."""
from __future__ import annotations


class EventPlannerError(RuntimeError):
    """Base class for event planner failures."""


class OwnerMissing(EventPlannerError):
    """Raised when a mutation is attempted without an authenticated owner."""

    def __init__(self, message: str = "User ID not found. Please log in.") -> None:
        super().__init__(message)


class EventNotFound(EventPlannerError):
    """Raised when an update references an id absent from the collection."""

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event not found: {event_id}")
        self.event_id = event_id


class StorageUnreadable(EventPlannerError):
    """Raised by storage backends when a persisted record cannot be parsed.

    The repository absorbs this and substitutes an empty collection.
    """

    def __init__(self, owner: str, reason: str) -> None:
        super().__init__(f"Stored events for {owner!r} are unreadable: {reason}")
        self.owner = owner


class SessionStateError(EventPlannerError):
    """Raised when an editing session operation is invoked in the wrong state."""
