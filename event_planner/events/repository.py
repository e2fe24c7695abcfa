"""Event repository - per-owner event collections with whole-collection writes.

Every mutation computes the complete new collection and hands it to
``replace_all``; there is no per-event write path. Concurrent writers for the
same owner are not coordinated: the last ``replace_all`` wins.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from .errors import EventNotFound, OwnerMissing, StorageUnreadable
from .ids import IdGenerator, TimestampIdGenerator
from .storage import EventStorage, get_event_storage
from .types import Event, EventCollection, normalize_owner

logger = logging.getLogger(__name__)


def _require_owner(owner: Optional[str]) -> str:
    owner = normalize_owner(owner)
    if owner is None:
        raise OwnerMissing()
    return owner


class EventRepository:
    """Load, create, update and delete events for one owner at a time."""

    def __init__(
        self,
        storage: Optional[EventStorage] = None,
        id_generator: Optional[IdGenerator] = None,
    ) -> None:
        self._storage = storage if storage is not None else get_event_storage()
        self._ids = id_generator if id_generator is not None else TimestampIdGenerator()

    def load(self, owner: Optional[str]) -> EventCollection:
        """Return the owner's collection.

        Missing or unreadable records yield an empty collection.

        Raises:
            OwnerMissing: if ``owner`` is absent.
        """
        owner = _require_owner(owner)
        try:
            records = self._storage.read(owner)
        except StorageUnreadable as exc:
            logger.warning(f"{exc}; treating as empty")
            return []
        if records is None:
            return []

        events: EventCollection = []
        seen = set()
        try:
            for record in records:
                event = Event.from_dict(record)
                if event.id in seen:
                    continue
                seen.add(event.id)
                events.append(event)
        except (KeyError, TypeError, AttributeError) as exc:
            logger.warning(
                f"Stored events for {owner!r} are unreadable: malformed record ({exc!r}); "
                "treating as empty"
            )
            return []
        return events

    def replace_all(self, owner: Optional[str], collection: Iterable[Event]) -> None:
        """Overwrite the owner's stored collection.

        Raises:
            OwnerMissing: if ``owner`` is absent.
            ValueError: if two events share an id.
        """
        owner = _require_owner(owner)
        events = list(collection)
        ids = [event.id for event in events]
        if len(set(ids)) != len(ids):
            raise ValueError("Event ids must be unique within a collection")
        self._storage.write(owner, [event.to_dict() for event in events])

    def create(self, owner: Optional[str], event: Event) -> EventCollection:
        """Assign a fresh id to ``event``, append it and persist.

        Returns:
            The new collection; the created event is its last entry.
        """
        owner = _require_owner(owner)
        events = self.load(owner)
        existing = {e.id for e in events}
        new_id = self._ids.new_id()
        while new_id in existing:
            new_id = self._ids.new_id()

        updated = [*events, event.with_id(new_id)]
        self.replace_all(owner, updated)
        logger.info(f"Created event {new_id} for {owner}")
        return updated

    def update(self, owner: Optional[str], event: Event) -> EventCollection:
        """Replace the entry whose id matches ``event.id``, keeping its position.

        Raises:
            OwnerMissing: if ``owner`` is absent.
            EventNotFound: if no entry has that id.
        """
        owner = _require_owner(owner)
        events = self.load(owner)
        if not any(e.id == event.id for e in events):
            raise EventNotFound(event.id)

        updated = [event if e.id == event.id else e for e in events]
        self.replace_all(owner, updated)
        logger.info(f"Updated event {event.id} for {owner}")
        return updated

    def delete(self, owner: Optional[str], event_id: str) -> EventCollection:
        """Remove the entry with ``event_id``; absent ids are a no-op."""
        owner = _require_owner(owner)
        events = self.load(owner)
        updated = [e for e in events if e.id != event_id]
        if len(updated) == len(events):
            logger.debug(f"Delete of unknown event {event_id} for {owner} ignored")
            return events

        self.replace_all(owner, updated)
        logger.info(f"Deleted event {event_id} for {owner}")
        return updated
