"""Tests for the command-line front end."""
from __future__ import annotations

import json

import pytest

import cli


@pytest.fixture
def event_dir(tmp_path, monkeypatch):
    """Set up file-based event storage for CLI runs."""
    events_path = tmp_path / "events"
    monkeypatch.setenv("EP_EVENTS_FORCE_FILE", "1")
    monkeypatch.setenv("EP_EVENTS_DIR", str(events_path))
    monkeypatch.setenv("EP_ACTIVITY_FORCE_FILE", "1")
    monkeypatch.setenv("EP_ACTIVITY_LOG", str(tmp_path / "activity.jsonl"))
    monkeypatch.setenv("EP_TIMEZONE", "UTC")
    monkeypatch.delenv("EP_OWNER", raising=False)
    return events_path


def _stored(event_dir, owner="alice"):
    return json.loads((event_dir / f"events_{owner}.json").read_text(encoding="utf-8"))


def test_add_then_list(event_dir, capsys):
    code = cli.main([
        "add", "--owner", "alice", "--title", "Trip",
        "--start", "2030-01-01T10:00", "--end", "2030-01-01T12:00",
    ])

    assert code == 0
    out = capsys.readouterr().out
    assert "Event added successfully" in out
    records = _stored(event_dir)
    assert records[0]["title"] == "Trip"
    assert records[0]["backgroundColor"] == "#3788d8"

    assert cli.main(["list", "--owner", "alice"]) == 0
    assert "Trip" in capsys.readouterr().out


def test_edit_and_delete(event_dir, capsys):
    cli.main(["add", "--owner", "alice", "--title", "Ferry", "--start", "2030-01-01T10:00"])
    event_id = _stored(event_dir)[0]["id"]

    assert cli.main(["edit", event_id, "--owner", "alice", "--title", "Night ferry"]) == 0
    assert _stored(event_dir)[0]["title"] == "Night ferry"
    assert _stored(event_dir)[0]["start"] == "2030-01-01T10:00"

    assert cli.main(["delete", event_id, "--owner", "alice"]) == 0
    assert _stored(event_dir) == []
    assert "Event deleted successfully" in capsys.readouterr().out


def test_edit_unknown_event_fails(event_dir, capsys):
    assert cli.main(["edit", "ghost", "--owner", "alice", "--title", "x"]) == 1
    assert "Event not found: ghost" in capsys.readouterr().err


def test_missing_owner_fails(event_dir, capsys):
    assert cli.main(["add", "--title", "Orphan"]) == 1
    assert "User ID not found" in capsys.readouterr().err
    assert not event_dir.exists()


def test_blank_owner_fails(event_dir, capsys):
    assert cli.main(["add", "--owner", "   ", "--title", "Orphan"]) == 1
    assert "User ID not found" in capsys.readouterr().err
    assert not event_dir.exists()


def test_owner_from_environment(event_dir, monkeypatch):
    monkeypatch.setenv("EP_OWNER", "bob")

    assert cli.main(["add", "--title", "Hike"]) == 0
    assert _stored(event_dir, "bob")[0]["title"] == "Hike"


def test_upcoming_lists_future_events(event_dir, capsys):
    cli.main(["add", "--owner", "alice", "--title", "Later", "--start", "2999-02-01T10:00"])
    cli.main(["add", "--owner", "alice", "--title", "Sooner", "--start", "2999-01-01T10:00"])
    cli.main(["add", "--owner", "alice", "--title", "Past", "--start", "2000-01-01T10:00"])
    capsys.readouterr()

    assert cli.main(["upcoming", "--owner", "alice"]) == 0

    out = capsys.readouterr().out
    assert out.index("Sooner") < out.index("Later")
    assert "Past" not in out


def test_activity_shows_changes(event_dir, capsys):
    cli.main(["add", "--owner", "alice", "--title", "Trip"])
    capsys.readouterr()

    assert cli.main(["activity"]) == 0
    out = capsys.readouterr().out
    assert "alice" in out
    assert "created" in out


def test_bad_timezone(event_dir, monkeypatch, capsys):
    monkeypatch.setenv("EP_TIMEZONE", "Mars/Olympus")

    assert cli.main(["list", "--owner", "alice"]) == 1
    assert "Configuration error" in capsys.readouterr().err
