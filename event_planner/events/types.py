"""Data model for planner events.

An event is stored as a flat record:

    {id, title, start, end, description, backgroundColor, borderColor}

Both colors are written from the single ``color`` field; there is no
independent border color.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, tzinfo
from typing import Any, Dict, List, Optional

DEFAULT_EVENT_COLOR = "#3788d8"


@dataclass(frozen=True, slots=True)
class Event:
    """A scheduled item owned by exactly one user.

    ``start`` and ``end`` are kept as the textual ISO values the calendar
    emitted; they are only parsed when a projection needs to compare them.
    """

    id: str
    title: str = ""
    start: str = ""
    end: str = ""
    description: str = ""
    color: str = DEFAULT_EVENT_COLOR

    def with_id(self, event_id: str) -> "Event":
        return replace(self, id=event_id)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted record layout."""
        color = self.color or DEFAULT_EVENT_COLOR
        return {
            "id": self.id,
            "title": self.title,
            "start": self.start,
            "end": self.end,
            "description": self.description,
            "backgroundColor": color,
            "borderColor": color,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        """Create from a persisted record.

        Raises:
            KeyError: if the record has no ``id``.
            TypeError: if the record is not a mapping.
        """
        color = data.get("backgroundColor") or data.get("borderColor") or data.get("color")
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            start=str(data.get("start") or ""),
            end=str(data.get("end") or ""),
            description=str(data.get("description") or ""),
            color=str(color or DEFAULT_EVENT_COLOR),
        )


# An owner's collection. Order is incidental; lookups always go by id.
EventCollection = List[Event]


def find_event(collection: EventCollection, event_id: str) -> Optional[Event]:
    """Return the event with ``event_id`` or None."""
    for event in collection:
        if event.id == event_id:
            return event
    return None


def parse_event_time(value: str, default_tz: tzinfo) -> Optional[datetime]:
    """Parse an event start/end string into an aware datetime.

    Accepts full ISO timestamps, minute-precision values from a
    ``datetime-local`` input and bare dates from all-day selections. A
    trailing ``Z`` is treated as UTC; naive values are placed in
    ``default_tz``. Returns None when the value cannot be parsed.
    """
    text = (value or "").strip()
    if not text:
        return None
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=default_tz)
    return parsed


def to_input_value(value: str) -> str:
    """Trim a stored time to what a ``datetime-local`` field shows."""
    return (value or "")[:16]


def normalize_owner(owner: Optional[str]) -> Optional[str]:
    """Strip an owner id; blank or missing owners become None."""
    if owner is None:
        return None
    return str(owner).strip() or None
