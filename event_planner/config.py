"""Configuration helpers for the Event Planner."""
from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class ConfigError(RuntimeError):
    """Raised when configuration is missing or invalid."""


@dataclass(slots=True)
class Settings:
    """Runtime configuration shared by the CLI and the API."""

    timezone: ZoneInfo
    environment: str = "local"
    default_owner: Optional[str] = None


def load_settings(
    *,
    timezone_var: str = "EP_TIMEZONE",
    owner_var: str = "EP_OWNER",
) -> Settings:
    """Load settings from environment variables.

    Args:
        timezone_var: Env var holding the IANA zone used for naive event times.
        owner_var: Env var holding the owner used when none is passed explicitly.

    Returns:
        Settings with the resolved values.

    Raises:
        ConfigError: if the configured timezone is unknown.
    """

    zone_name = os.getenv(timezone_var, "UTC").strip() or "UTC"
    try:
        zone = ZoneInfo(zone_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(
            f"Unknown timezone '{zone_name}'. Set {timezone_var} to an IANA zone "
            "name such as 'UTC' or 'Europe/Paris'."
        ) from exc

    owner = (os.getenv(owner_var) or "").strip() or None
    environment = os.getenv("EP_ENV", "local")

    return Settings(timezone=zone, environment=environment, default_owner=owner)
