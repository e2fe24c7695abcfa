#!/usr/bin/env python3
"""Event Planner CLI."""
from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

from event_planner.config import ConfigError, Settings, load_settings
from event_planner.events import (
    AddEventRequested,
    DEFAULT_EVENT_COLOR,
    EventClicked,
    EventPlanner,
    EventRepository,
    SessionOutcome,
    normalize_owner,
    to_input_value,
)
from event_planner.logs import fetch_activity_entries, log_planner_event


class _ConsoleNotifier:
    def success(self, message: str) -> None:
        print(message)

    def error(self, message: str) -> None:
        print(message, file=sys.stderr)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="event-planner",
        description="Create, edit and review your personal trip events.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )

    owner_parent = argparse.ArgumentParser(add_help=False)
    owner_parent.add_argument(
        "--owner",
        help="User id owning the events (default: EP_OWNER).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "list",
        parents=[owner_parent],
        help="List all events in stored order.",
    )

    upcoming_parser = subparsers.add_parser(
        "upcoming",
        parents=[owner_parent],
        help="Show future events, earliest first.",
    )
    upcoming_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of events to show.",
    )

    add_parser = subparsers.add_parser(
        "add",
        parents=[owner_parent],
        help="Add a new event.",
    )
    add_parser.add_argument("--title", default="", help="Event title.")
    add_parser.add_argument("--start", default="", help="Start (ISO, e.g. 2030-01-01T10:00).")
    add_parser.add_argument("--end", default="", help="End (ISO).")
    add_parser.add_argument("--description", default="", help="Event description.")
    add_parser.add_argument("--color", default=DEFAULT_EVENT_COLOR, help="Hex display color.")

    edit_parser = subparsers.add_parser(
        "edit",
        parents=[owner_parent],
        help="Change fields of an existing event.",
    )
    edit_parser.add_argument("event_id", help="Id of the event to edit.")
    edit_parser.add_argument("--title", help="New title.")
    edit_parser.add_argument("--start", help="New start.")
    edit_parser.add_argument("--end", help="New end.")
    edit_parser.add_argument("--description", help="New description.")
    edit_parser.add_argument("--color", help="New hex color.")

    delete_parser = subparsers.add_parser(
        "delete",
        parents=[owner_parent],
        help="Delete an event.",
    )
    delete_parser.add_argument("event_id", help="Id of the event to delete.")

    activity_parser = subparsers.add_parser(
        "activity",
        help="Show recent planner activity.",
    )
    activity_parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help="How many entries to show.",
    )

    return parser


def _open_planner(settings: Settings, owner: str | None) -> EventPlanner | None:
    def _record(owner: str, outcome: SessionOutcome) -> None:
        log_planner_event(
            owner=owner,
            outcome=outcome,
            environment=settings.environment,
            source="cli",
        )

    planner = EventPlanner(
        EventRepository(),
        normalize_owner(owner) or settings.default_owner,
        notifier=_ConsoleNotifier(),
        default_tz=settings.timezone,
        on_change=_record,
    )
    if not planner.start():
        return None
    return planner


def _cmd_list(settings: Settings, owner: str | None) -> int:
    planner = _open_planner(settings, owner)
    if planner is None:
        return 1

    events = planner.events
    if not events:
        print("No events.")
        return 0
    for event in events:
        print(
            f"{event.id}  {to_input_value(event.start):16}  {to_input_value(event.end):16}  "
            f"{event.color}  {event.title}"
        )
    return 0


def _cmd_upcoming(settings: Settings, owner: str | None, limit: int | None) -> int:
    planner = _open_planner(settings, owner)
    if planner is None:
        return 1

    cards = planner.upcoming_cards(limit)
    if not cards:
        print("No upcoming events.")
        return 0
    print("Upcoming Events")
    for card in cards:
        print(f"- {card.title or '(untitled)'}  {card.date} {card.time}  [{card.id}]")
    return 0


def _cmd_add(settings: Settings, args: argparse.Namespace) -> int:
    planner = _open_planner(settings, args.owner)
    if planner is None:
        return 1

    planner.handle(AddEventRequested())
    planner.edit_draft(
        title=args.title,
        start=args.start,
        end=args.end,
        description=args.description,
        color=args.color,
    )
    outcome = planner.save()
    if outcome is None:
        return 1
    print(f"Event ID: {outcome.event.id}")
    return 0


def _cmd_edit(settings: Settings, args: argparse.Namespace) -> int:
    planner = _open_planner(settings, args.owner)
    if planner is None:
        return 1

    if planner.handle(EventClicked(args.event_id)) is None:
        return 1
    changes = {
        name: getattr(args, name)
        for name in ("title", "start", "end", "description", "color")
        if getattr(args, name) is not None
    }
    if changes:
        planner.edit_draft(**changes)
    return 0 if planner.save() is not None else 1


def _cmd_delete(settings: Settings, args: argparse.Namespace) -> int:
    planner = _open_planner(settings, args.owner)
    if planner is None:
        return 1

    if planner.handle(EventClicked(args.event_id)) is None:
        return 1
    return 0 if planner.delete() is not None else 1


def _cmd_activity(limit: int) -> int:
    entries = fetch_activity_entries(limit)
    if not entries:
        print("No activity recorded.")
        return 0
    for entry in entries:
        print(
            f"{entry.get('ts', '')}  {entry.get('owner', '')}  {entry.get('action', '')}  "
            f"{entry.get('event_id', '')}  {entry.get('event_title', '')}"
        )
    return 0


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    if args.command == "list":
        return _cmd_list(settings, args.owner)
    if args.command == "upcoming":
        return _cmd_upcoming(settings, args.owner, args.limit)
    if args.command == "add":
        return _cmd_add(settings, args)
    if args.command == "edit":
        return _cmd_edit(settings, args)
    if args.command == "delete":
        return _cmd_delete(settings, args)
    if args.command == "activity":
        return _cmd_activity(args.limit)

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
