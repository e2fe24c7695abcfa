"""Resolve the planner owner for an API request.

Events are keyed by the owner's email. In production the email comes from a
verified Google ID token; with EP_DEV_AUTH_BYPASS=1 it is taken from the
X-User-Email header instead. Either way it is normalised (trimmed and
lower-cased) so one person never ends up with two collections.
"""
from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Mapping, Optional

from fastapi import Header, HTTPException, status
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from ..events.errors import OwnerMissing
from ..events.types import normalize_owner

DEV_BYPASS_ENV = "EP_DEV_AUTH_BYPASS"
CLIENT_ID_ENV = "GOOGLE_OAUTH_CLIENT_ID"
ALLOWED_AUDIENCE_ENV = "GOOGLE_OAUTH_AUDIENCE"


class AuthError(HTTPException):
    def __init__(self, detail: str, code: int = status.HTTP_401_UNAUTHORIZED) -> None:
        super().__init__(status_code=code, detail=detail)


@lru_cache
def _audiences() -> list[str]:
    audience = os.getenv(ALLOWED_AUDIENCE_ENV) or os.getenv(CLIENT_ID_ENV)
    if not audience:
        return []
    return [aud.strip() for aud in audience.split(",") if aud.strip()]


def owner_from_email(email: Optional[str]) -> str:
    """Turn an email into an owner id.

    Raises:
        AuthError: if the email is missing or blank.
    """
    owner = normalize_owner(email)
    if owner is None:
        raise AuthError(str(OwnerMissing()))
    return owner.lower()


def _verify_token(token: str) -> Mapping[str, Any]:
    audiences = _audiences()
    if not audiences:
        raise AuthError("Server missing GOOGLE_OAUTH_CLIENT_ID or audience config.")

    request = google_requests.Request()
    validation_error: ValueError | None = None
    for audience in audiences:
        try:
            return id_token.verify_oauth2_token(token, request, audience)
        except ValueError as exc:
            validation_error = exc
    raise AuthError(f"Invalid token: {validation_error}")


def get_current_user(
    authorization: str | None = Header(default=None, alias="Authorization"),
    dev_user: str | None = Header(default=None, alias="X-User-Email"),
) -> str:
    """Return the owner id for the request."""
    if os.getenv(DEV_BYPASS_ENV) == "1":
        return owner_from_email(dev_user)

    if not authorization or not authorization.startswith("Bearer "):
        raise AuthError("Missing Bearer token.")

    claims = _verify_token(authorization.split(" ", 1)[1].strip())
    return owner_from_email(claims.get("email"))
