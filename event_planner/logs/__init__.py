"""Logging utilities for the Event Planner."""

from .activity import fetch_activity_entries, log_planner_event

__all__ = ["log_planner_event", "fetch_activity_entries"]
