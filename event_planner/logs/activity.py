"""Activity logging to Firestore with file fallback."""
from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from ..events.session import SessionOutcome
from ..firestore import get_firestore_client

logger = logging.getLogger(__name__)

DEFAULT_LOG_PATH = Path(__file__).resolve().parents[2] / "activity_log.jsonl"


def _activity_collection() -> str:
    return os.getenv("EP_ACTIVITY_COLLECTION", "planner_activity")


def _force_file_fallback() -> bool:
    return os.getenv("EP_ACTIVITY_FORCE_FILE", "0") == "1"


def log_planner_event(
    *,
    owner: str,
    outcome: SessionOutcome,
    environment: str,
    source: str,
) -> None:
    """Record a committed create/update/delete."""
    entry: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "owner": owner,
        "action": outcome.action,
        "event_id": outcome.event.id,
        "event_title": outcome.event.title,
        "event_start": outcome.event.start,
        "collection_size": len(outcome.collection),
        "environment": environment,
        "source": source,
    }

    if _force_file_fallback():
        _write_file(entry)
        return

    try:
        client = get_firestore_client()
        client.collection(_activity_collection()).add(entry)
    except Exception as exc:  # pragma: no cover - network/auth path
        _write_file(entry)
        logger.warning(f"[ActivityLog] Firestore write failed, wrote to local log instead: {exc}")


def fetch_activity_entries(limit: int = 50) -> list[Dict[str, Any]]:
    """Return recent activity entries (Firestore with file fallback)."""

    if _force_file_fallback():
        return _read_file_entries(limit)

    try:
        client = get_firestore_client()
        from firebase_admin import firestore as fb_firestore  # type: ignore

        query = (
            client.collection(_activity_collection())
            .order_by("ts", direction=fb_firestore.Query.DESCENDING)
            .limit(limit)
        )
        docs = query.stream()
        return [doc.to_dict() for doc in docs]
    except Exception as exc:  # pragma: no cover - network/auth path
        logger.warning(f"[ActivityLog] Firestore read failed, falling back to local log: {exc}")
        return _read_file_entries(limit)


def _write_file(entry: Dict[str, Any]) -> None:
    path = _get_log_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as handle:
        handle.write(json.dumps(entry))
        handle.write("\n")


def _get_log_path() -> Path:
    override = os.getenv("EP_ACTIVITY_LOG")
    if override:
        return Path(override)
    return DEFAULT_LOG_PATH


def _read_file_entries(limit: int) -> list[Dict[str, Any]]:
    path = _get_log_path()
    if not path.exists():
        return []
    lines = path.read_text(encoding="utf-8").splitlines()
    entries: list[Dict[str, Any]] = []
    for line in lines[-limit:]:
        try:
            entries.append(json.loads(line))
        except json.JSONDecodeError:
            continue
    return list(reversed(entries))
