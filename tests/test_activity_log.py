import json

from event_planner.events import Event, SessionOutcome
from event_planner.logs import activity as activity_log
from event_planner.logs.activity import fetch_activity_entries, log_planner_event


def _sample_outcome() -> SessionOutcome:
    event = Event(id="123", title="Test Trip", start="2030-01-01T10:00", end="2030-01-01T12:00")
    return SessionOutcome("created", event, [event])


def test_log_planner_event_writes_jsonl(tmp_path, monkeypatch):
    log_file = tmp_path / "log.jsonl"
    monkeypatch.setenv("EP_ACTIVITY_LOG", str(log_file))
    monkeypatch.setenv("EP_ACTIVITY_FORCE_FILE", "1")

    log_planner_event(
        owner="user-1",
        outcome=_sample_outcome(),
        environment="local",
        source="cli",
    )

    assert log_file.exists()
    lines = log_file.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["event_id"] == "123"
    assert record["owner"] == "user-1"
    assert record["action"] == "created"
    assert record["collection_size"] == 1
    assert record["source"] == "cli"


def test_fetch_activity_entries_newest_first(tmp_path, monkeypatch):
    log_file = tmp_path / "log.jsonl"
    monkeypatch.setenv("EP_ACTIVITY_LOG", str(log_file))
    monkeypatch.setenv("EP_ACTIVITY_FORCE_FILE", "1")
    for owner in ("a", "b", "c"):
        log_planner_event(owner=owner, outcome=_sample_outcome(), environment="local", source="cli")
    with log_file.open("a", encoding="utf-8") as handle:
        handle.write("not json\n")

    entries = fetch_activity_entries(limit=3)

    assert [e["owner"] for e in entries] == ["c", "b"]


def test_log_planner_event_calls_firestore(monkeypatch):
    captured = {}

    class FakeCollection:
        def add(self, payload):
            captured["payload"] = payload

    class FakeClient:
        def collection(self, name):
            captured["collection"] = name
            return FakeCollection()

    monkeypatch.delenv("EP_ACTIVITY_FORCE_FILE", raising=False)
    monkeypatch.setenv("EP_ACTIVITY_COLLECTION", "planner_activity")
    monkeypatch.setattr(activity_log, "get_firestore_client", lambda: FakeClient())

    log_planner_event(
        owner="user-2",
        outcome=_sample_outcome(),
        environment="prod",
        source="api",
    )

    assert captured["collection"] == "planner_activity"
    assert captured["payload"]["event_id"] == "123"
    assert captured["payload"]["owner"] == "user-2"
