"""Durable per-owner event records - Firestore with file fallback.

Each owner has exactly one record holding the full serialized collection.
Backends only move raw records; parsing into ``Event`` objects happens in
the repository.

Firestore Structure:
    {EP_EVENTS_COLLECTION}/{owner} -> {"events": [...], "updated_at": iso}

File Storage Structure:
    {EP_EVENTS_DIR}/events_{owner}.json -> [...]

Environment Variables:
    EP_EVENTS_FORCE_FILE: Set to "1" to use local file storage (dev mode)
    EP_EVENTS_DIR: Directory for file-based storage (default: event_store/)
    EP_EVENTS_COLLECTION: Firestore collection (default: user_events)
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Set
from urllib.parse import quote

from ..firestore import get_firestore_client
from .errors import StorageUnreadable

logger = logging.getLogger(__name__)

Record = List[Dict[str, Any]]


class EventStorage(Protocol):
    def read(self, owner: str) -> Optional[Record]:
        """Return the owner's raw records, or None if nothing is stored.

        Raises:
            StorageUnreadable: if a record exists but cannot be parsed.
        """
        ...

    def write(self, owner: str, records: Record) -> None:
        """Overwrite the owner's stored records."""
        ...


# ============================================================================
# Configuration Helpers
# ============================================================================


def _force_file_fallback() -> bool:
    """Check if file-based storage should be used (dev mode)."""
    return os.getenv("EP_EVENTS_FORCE_FILE", "0") == "1"


def _events_dir() -> Path:
    return Path(
        os.getenv(
            "EP_EVENTS_DIR",
            Path(__file__).resolve().parents[2] / "event_store",
        )
    )


def _events_collection() -> str:
    return os.getenv("EP_EVENTS_COLLECTION", "user_events")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _owner_key(owner: str) -> str:
    """Encode an owner id for use as a file name or document id.

    Percent-encoding is one-to-one, so distinct owners never share a record.
    """
    return quote(owner, safe="@.+-")


def _decode(owner: str, text: str) -> Record:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise StorageUnreadable(owner, f"invalid JSON ({exc.msg})") from exc
    if not isinstance(data, list):
        raise StorageUnreadable(owner, f"expected a list, got {type(data).__name__}")
    return data


# ============================================================================
# Backends
# ============================================================================


class MemoryEventStorage:
    """In-process storage holding serialized text, like browser local storage."""

    def __init__(self) -> None:
        self._records: Dict[str, str] = {}

    def read(self, owner: str) -> Optional[Record]:
        text = self._records.get(owner)
        if text is None:
            return None
        return _decode(owner, text)

    def write(self, owner: str, records: Record) -> None:
        self._records[owner] = json.dumps(records)

    def put_raw(self, owner: str, text: str) -> None:
        """Store arbitrary text for an owner (used to simulate corruption)."""
        self._records[owner] = text


class FileEventStorage:
    """One JSON file per owner."""

    def __init__(self, directory: Optional[Path] = None) -> None:
        self._directory = Path(directory) if directory is not None else None

    @property
    def directory(self) -> Path:
        return self._directory if self._directory is not None else _events_dir()

    def path_for(self, owner: str) -> Path:
        """Get the file path for an owner's events."""
        return self.directory / f"events_{_owner_key(owner)}.json"

    def read(self, owner: str) -> Optional[Record]:
        filepath = self.path_for(owner)
        if not filepath.exists():
            return None
        try:
            text = filepath.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageUnreadable(owner, str(exc)) from exc
        return _decode(owner, text)

    def write(self, owner: str, records: Record) -> None:
        filepath = self.path_for(owner)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        # Write then rename so readers never see a half-written collection.
        fd, tmp_name = tempfile.mkstemp(
            prefix=filepath.name, suffix=".tmp", dir=filepath.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2)
            os.replace(tmp_name, filepath)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class FirestoreEventStorage:
    """One Firestore document per owner, falling back to files on failure.

    Once a write has fallen back to the file, reads for that owner are served
    from the file until a later Firestore write succeeds, so a fallen-back
    write is never hidden behind an older document.
    """

    def __init__(
        self,
        fallback: Optional[FileEventStorage] = None,
        client_factory: Callable[[], Any] = get_firestore_client,
    ) -> None:
        self._fallback = fallback or FileEventStorage()
        self._client_factory = client_factory
        self._local_owners: Set[str] = set()

    def _document(self, owner: str):
        db = self._client_factory()
        if db is None:
            return None
        return db.collection(_events_collection()).document(_owner_key(owner))

    def read(self, owner: str) -> Optional[Record]:
        if owner in self._local_owners:
            return self._fallback.read(owner)
        try:
            doc_ref = self._document(owner)
            if doc_ref is None:
                return self._fallback.read(owner)
            doc = doc_ref.get()
        except StorageUnreadable:
            raise
        except Exception as e:
            logger.warning(f"[Events] Firestore read failed, falling back to local: {e}")
            return self._fallback.read(owner)

        if not doc.exists:
            return None
        data = doc.to_dict() or {}
        events = data.get("events")
        if not isinstance(events, list):
            raise StorageUnreadable(owner, "document has no events list")
        return events

    def write(self, owner: str, records: Record) -> None:
        try:
            doc_ref = self._document(owner)
            if doc_ref is None:
                self._fallback.write(owner, records)
                return
            doc_ref.set({"events": records, "updated_at": _now()})
        except Exception as e:
            logger.warning(f"[Events] Firestore write failed, falling back to local: {e}")
            self._fallback.write(owner, records)
            self._local_owners.add(owner)
            return
        self._local_owners.discard(owner)


def get_event_storage() -> EventStorage:
    """Return the storage backend selected by the environment."""
    if _force_file_fallback():
        return FileEventStorage()
    return FirestoreEventStorage()
