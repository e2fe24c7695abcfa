"""Upcoming events projection.

``upcoming`` is a pure function of a collection snapshot and an instant. It
holds no cache: callers recompute it after every mutation and whenever they
read the feed, so the result is never stale with respect to ``now``.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Iterable, List, Optional

from .types import Event, parse_event_time


def upcoming(
    collection: Iterable[Event],
    now: datetime,
    *,
    default_tz: tzinfo = timezone.utc,
    limit: Optional[int] = None,
) -> List[Event]:
    """Return events starting strictly after ``now``, earliest first.

    Ties keep their collection order. Events whose start cannot be parsed are
    never upcoming.

    Args:
        collection: Snapshot of an owner's events.
        now: Current instant; a naive value is read in ``default_tz``.
        default_tz: Zone for naive start values.
        limit: Optional maximum number of events to return.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=default_tz)

    dated = []
    for event in collection:
        start = parse_event_time(event.start, default_tz)
        if start is not None and start > now:
            dated.append((start, event))

    # list.sort is stable, so equal starts keep input order
    dated.sort(key=lambda pair: pair[0])
    result = [event for _, event in dated]
    if limit is not None:
        result = result[: max(limit, 0)]
    return result


@dataclass(frozen=True, slots=True)
class UpcomingCard:
    """Display form of an upcoming event."""

    id: str
    title: str
    date: str
    time: str
    color: str


def to_card(event: Event, default_tz: tzinfo = timezone.utc) -> UpcomingCard:
    """Format an event for the upcoming list: start date and ``HH:MM`` time."""
    start = parse_event_time(event.start, default_tz)
    if start is None:
        return UpcomingCard(event.id, event.title, "", "", event.color)
    start = start.astimezone(default_tz)
    return UpcomingCard(
        id=event.id,
        title=event.title,
        date=start.date().isoformat(),
        time=start.strftime("%H:%M"),
        color=event.color,
    )
