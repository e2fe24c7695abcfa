"""Event planner - ties the calendar view, editing sessions and the feed together.

The calendar grid itself is external. It is fed ``calendar_payload()`` and
reports user actions back as intents:

    DateRangeSelected(start, end) -> open a create session pre-filled with the range
    EventClicked(id)              -> open an edit session on that event
    AddEventRequested()           -> open a blank create session

Failures that the user must see (no owner, vanished event) are reported
through the notifier and leave any open session untouched.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timezone, tzinfo
from typing import Any, Callable, Dict, List, Optional, Protocol, Union

from .errors import EventNotFound, OwnerMissing
from .ids import Clock, SystemClock
from .repository import EventRepository
from .session import Draft, EventEditingSession, SessionOutcome
from .types import Event, EventCollection, find_event, normalize_owner
from .upcoming import UpcomingCard, to_card, upcoming

logger = logging.getLogger(__name__)

_SUCCESS_MESSAGES = {
    "created": "Event added successfully",
    "updated": "Event updated successfully",
    "deleted": "Event deleted successfully",
}


@dataclass(frozen=True, slots=True)
class DateRangeSelected:
    start: str
    end: str


@dataclass(frozen=True, slots=True)
class EventClicked:
    id: str


@dataclass(frozen=True, slots=True)
class AddEventRequested:
    pass


CalendarIntent = Union[DateRangeSelected, EventClicked, AddEventRequested]


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LogNotifier:
    """Notifier that writes user-facing messages to the log."""

    def success(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.error(message)


ChangeListener = Callable[[str, SessionOutcome], None]


class EventPlanner:
    """One owner's planner page: a snapshot, at most one session and a feed."""

    def __init__(
        self,
        repository: EventRepository,
        owner: Optional[str],
        *,
        clock: Optional[Clock] = None,
        notifier: Optional[Notifier] = None,
        default_tz: tzinfo = timezone.utc,
        on_change: Optional[ChangeListener] = None,
    ) -> None:
        self._repository = repository
        self._owner = normalize_owner(owner)
        self._clock = clock or SystemClock()
        self._notifier = notifier or LogNotifier()
        self._tz = default_tz
        self._on_change = on_change
        self._session = EventEditingSession(repository, self._owner)
        self._events: EventCollection = []

    @property
    def owner(self) -> Optional[str]:
        return self._owner

    @property
    def session(self) -> EventEditingSession:
        return self._session

    @property
    def events(self) -> EventCollection:
        return list(self._events)

    def start(self) -> bool:
        """Load the owner's events. Returns False when there is no owner."""
        if not self._owner:
            self._notifier.error("User ID not found. Please log in.")
            self._events = []
            return False
        self._events = self._repository.load(self._owner)
        return True

    # -- calendar view boundary ----------------------------------------

    def calendar_payload(self) -> Dict[str, List[Dict[str, Any]]]:
        """Events in the form the calendar grid paints."""
        return {"events": [event.to_dict() for event in self._events]}

    def handle(self, intent: CalendarIntent) -> Optional[Draft]:
        """Open a session for a calendar intent and return its draft."""
        if isinstance(intent, DateRangeSelected):
            return self._session.open_for_create(intent.start, intent.end)
        if isinstance(intent, AddEventRequested):
            return self._session.open_for_create()
        if isinstance(intent, EventClicked):
            event = find_event(self._events, intent.id)
            if event is None:
                self._notifier.error(f"Event not found: {intent.id}")
                return None
            return self._session.open_for_edit(event)
        raise TypeError(f"Unsupported calendar intent: {intent!r}")

    # -- session actions -----------------------------------------------

    def edit_draft(self, **changes: Any) -> Draft:
        return self._session.edit_draft(**changes)

    def save(self) -> Optional[SessionOutcome]:
        """Commit the open session. Returns None if it failed and stays open."""
        try:
            outcome = self._session.commit()
        except (OwnerMissing, EventNotFound) as exc:
            self._notifier.error(str(exc))
            return None
        self._applied(outcome)
        return outcome

    def cancel(self) -> None:
        self._session.cancel()

    def delete(self) -> Optional[SessionOutcome]:
        """Delete the event of the open edit session."""
        try:
            outcome = self._session.delete()
        except OwnerMissing as exc:
            self._notifier.error(str(exc))
            return None
        self._applied(outcome)
        return outcome

    def delete_listed(self, event_id: str) -> Optional[SessionOutcome]:
        """Delete an event straight from the upcoming list, without a session."""
        if not self._owner:
            self._notifier.error("User ID not found. Please log in to delete events.")
            return None
        event = find_event(self._events, event_id)
        if event is None:
            return None
        before = self._repository.load(self._owner)
        collection = self._repository.delete(self._owner, event_id)
        if len(collection) == len(before):
            # already gone from storage; refresh the stale snapshot only
            self._events = list(collection)
            return None
        outcome = SessionOutcome("deleted", event, collection)
        self._applied(outcome)
        return outcome

    # -- upcoming feed ---------------------------------------------------

    def upcoming(self, limit: Optional[int] = None) -> List[Event]:
        return upcoming(self._events, self._clock.now(), default_tz=self._tz, limit=limit)

    def upcoming_cards(self, limit: Optional[int] = None) -> List[UpcomingCard]:
        return [to_card(event, self._tz) for event in self.upcoming(limit)]

    def _applied(self, outcome: SessionOutcome) -> None:
        self._events = list(outcome.collection)
        self._notifier.success(_SUCCESS_MESSAGES[outcome.action])
        if self._on_change is not None and self._owner:
            self._on_change(self._owner, outcome)
