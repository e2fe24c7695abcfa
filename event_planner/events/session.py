"""Editing session - one create, edit or delete interaction.

The session is always in exactly one of three states:

    Closed --open_for_create--> OpenForCreate --commit/cancel--> Closed
    Closed --open_for_edit----> OpenForEdit   --commit/cancel/delete--> Closed

Only ``OpenForEdit`` carries a target id, so delete is only possible there.
A failed commit or delete leaves the session open with its draft intact.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Literal, Optional, Union

from .errors import OwnerMissing, SessionStateError
from .repository import EventRepository
from .types import DEFAULT_EVENT_COLOR, Event, EventCollection, normalize_owner

_DRAFT_FIELDS = ("title", "start", "end", "description", "color")


@dataclass(frozen=True, slots=True)
class Draft:
    """In-progress event fields."""

    title: str = ""
    start: str = ""
    end: str = ""
    description: str = ""
    color: str = DEFAULT_EVENT_COLOR

    @classmethod
    def from_event(cls, event: Event) -> "Draft":
        return cls(
            title=event.title,
            start=event.start,
            end=event.end,
            description=event.description or "",
            color=event.color or DEFAULT_EVENT_COLOR,
        )

    def to_event(self, event_id: str = "") -> Event:
        return Event(
            id=event_id,
            title=self.title,
            start=self.start,
            end=self.end,
            description=self.description,
            color=self.color or DEFAULT_EVENT_COLOR,
        )


@dataclass(frozen=True, slots=True)
class Closed:
    pass


@dataclass(frozen=True, slots=True)
class OpenForCreate:
    draft: Draft


@dataclass(frozen=True, slots=True)
class OpenForEdit:
    draft: Draft
    target_id: str


SessionState = Union[Closed, OpenForCreate, OpenForEdit]


@dataclass(frozen=True, slots=True)
class SessionOutcome:
    """What a finished session did to the owner's collection."""

    action: Literal["created", "updated", "deleted"]
    event: Event
    collection: EventCollection


class EventEditingSession:
    """Coordinates a single draft against the repository for one owner.

    Opening a session while another is open is rejected; callers are
    expected to prevent it.
    """

    def __init__(self, repository: EventRepository, owner: Optional[str]) -> None:
        self._repository = repository
        self._owner = normalize_owner(owner)
        self._state: SessionState = Closed()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_open(self) -> bool:
        return not isinstance(self._state, Closed)

    @property
    def target_id(self) -> Optional[str]:
        if isinstance(self._state, OpenForEdit):
            return self._state.target_id
        return None

    @property
    def draft(self) -> Optional[Draft]:
        if isinstance(self._state, Closed):
            return None
        return self._state.draft

    # -- transitions out of Closed -------------------------------------

    def open_for_create(self, start: str = "", end: str = "") -> Draft:
        """Start a new event, optionally pre-filled from a date-range selection."""
        self._require_closed()
        draft = Draft(start=start or "", end=end or "")
        self._state = OpenForCreate(draft=draft)
        return draft

    def open_for_edit(self, event: Event) -> Draft:
        """Start editing ``event``; the draft is a copy of its fields."""
        self._require_closed()
        draft = Draft.from_event(event)
        self._state = OpenForEdit(draft=draft, target_id=event.id)
        return draft

    # -- draft changes ---------------------------------------------------

    def edit_draft(self, **changes: Any) -> Draft:
        """Change draft fields (title, start, end, description, color)."""
        state = self._require_open("edit the draft")
        unknown = set(changes) - set(_DRAFT_FIELDS)
        if unknown:
            raise TypeError(f"Unknown draft fields: {', '.join(sorted(unknown))}")
        draft = replace(state.draft, **{k: ("" if v is None else str(v)) for k, v in changes.items()})
        self._state = replace(state, draft=draft)
        return draft

    # -- transitions back to Closed -------------------------------------

    def commit(self) -> SessionOutcome:
        """Create or update from the draft, then close.

        Raises:
            OwnerMissing: no owner; the session stays open.
            EventNotFound: the edited event is gone; the session stays open.
        """
        state = self._require_open("save")
        if not self._owner:
            raise OwnerMissing("User ID not found. Please log in to save events.")

        if isinstance(state, OpenForEdit):
            event = state.draft.to_event(state.target_id)
            collection = self._repository.update(self._owner, event)
            outcome = SessionOutcome("updated", event, collection)
        else:
            collection = self._repository.create(self._owner, state.draft.to_event())
            outcome = SessionOutcome("created", collection[-1], collection)

        self._state = Closed()
        return outcome

    def cancel(self) -> None:
        """Discard the draft. Has no effect on stored events."""
        self._state = Closed()

    def delete(self) -> SessionOutcome:
        """Delete the event being edited, then close.

        Raises:
            SessionStateError: the session is not editing an existing event.
            OwnerMissing: no owner; the session stays open.
        """
        state = self._state
        if not isinstance(state, OpenForEdit):
            raise SessionStateError("Delete is only available while editing an existing event")
        if not self._owner:
            raise OwnerMissing("User ID not found. Please log in to delete events.")

        collection = self._repository.delete(self._owner, state.target_id)
        self._state = Closed()
        return SessionOutcome("deleted", state.draft.to_event(state.target_id), collection)

    def _require_closed(self) -> None:
        if not isinstance(self._state, Closed):
            raise SessionStateError("An editing session is already open")

    def _require_open(self, action: str) -> Union[OpenForCreate, OpenForEdit]:
        state = self._state
        if isinstance(state, Closed):
            raise SessionStateError(f"Cannot {action}: no editing session is open")
        return state
