"""Firestore client shared by the event and activity stores.

The client is created lazily on first use and reused afterwards. Set
EP_FIRESTORE_PROJECT to target a project other than the one the ambient
Google credentials point at.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

PROJECT_ENV = "EP_FIRESTORE_PROJECT"

_firestore_client = None


def _app_options() -> Optional[Dict[str, Any]]:
    project = (os.getenv(PROJECT_ENV) or "").strip()
    if not project:
        return None
    return {"projectId": project}


def get_firestore_client():
    """Return the planner's Firestore client, creating it on first call."""
    global _firestore_client
    if _firestore_client is not None:
        return _firestore_client

    try:
        import firebase_admin
        from firebase_admin import firestore
    except ModuleNotFoundError as exc:  # pragma: no cover
        raise RuntimeError(
            "firebase-admin is required for Firestore event storage. "
            "Install dependencies or set EP_EVENTS_FORCE_FILE=1."
        ) from exc

    if not firebase_admin._apps:
        options = _app_options()
        firebase_admin.initialize_app(options=options)
        logger.info(f"Initialized Firestore app (project={(options or {}).get('projectId', 'default')})")
    _firestore_client = firestore.client()
    return _firestore_client


def reset_firestore_client() -> None:
    """Forget the cached client so the next call builds a fresh one."""
    global _firestore_client
    _firestore_client = None
