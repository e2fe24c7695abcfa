"""Tests for the event data model."""
from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from event_planner.events import (
    DEFAULT_EVENT_COLOR,
    Event,
    find_event,
    parse_event_time,
    to_input_value,
)


class TestEventRecord:
    """Tests for Event serialization."""

    def test_to_dict_writes_both_colors(self):
        event = Event(id="1", title="Trip", start="2030-01-01T10:00", end="2030-01-01T12:00", color="#ff0000")

        result = event.to_dict()

        assert result == {
            "id": "1",
            "title": "Trip",
            "start": "2030-01-01T10:00",
            "end": "2030-01-01T12:00",
            "description": "",
            "backgroundColor": "#ff0000",
            "borderColor": "#ff0000",
        }

    def test_to_dict_defaults_empty_color(self):
        result = Event(id="1", color="").to_dict()

        assert result["backgroundColor"] == DEFAULT_EVENT_COLOR
        assert result["borderColor"] == DEFAULT_EVENT_COLOR

    def test_from_dict_reads_background_color(self):
        event = Event.from_dict({
            "id": "42",
            "title": "Museum",
            "start": "2030-03-01",
            "end": "2030-03-02",
            "backgroundColor": "#00ff00",
            "borderColor": "#00ff00",
        })

        assert event.id == "42"
        assert event.color == "#00ff00"
        assert event.description == ""

    def test_from_dict_missing_fields_get_defaults(self):
        event = Event.from_dict({"id": 7})

        assert event.id == "7"
        assert event.title == ""
        assert event.color == DEFAULT_EVENT_COLOR

    def test_from_dict_requires_id(self):
        with pytest.raises(KeyError):
            Event.from_dict({"title": "No id"})

    def test_with_id_keeps_other_fields(self):
        event = Event(id="", title="Dinner", start="2030-01-01T19:00")

        renamed = event.with_id("abc")

        assert renamed.id == "abc"
        assert renamed.title == "Dinner"
        assert event.id == ""


class TestParseEventTime:
    """Tests for parse_event_time."""

    def test_minute_precision_is_naive_in_default_zone(self):
        parsed = parse_event_time("2030-01-01T10:00", ZoneInfo("Europe/Paris"))

        assert parsed == datetime(2030, 1, 1, 10, 0, tzinfo=ZoneInfo("Europe/Paris"))

    def test_trailing_z_is_utc(self):
        parsed = parse_event_time("2030-01-01T10:00:00Z", ZoneInfo("Europe/Paris"))

        assert parsed == datetime(2030, 1, 1, 10, 0, tzinfo=timezone.utc)

    def test_offset_is_respected(self):
        parsed = parse_event_time("2030-01-01T10:00:00+02:00", timezone.utc)

        assert parsed == datetime(2030, 1, 1, 8, 0, tzinfo=timezone.utc)

    def test_bare_date_is_midnight(self):
        parsed = parse_event_time("2030-01-01", timezone.utc)

        assert parsed == datetime(2030, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", ["", "   ", "next tuesday", "2030-13-01"])
    def test_unparseable_returns_none(self, value):
        assert parse_event_time(value, timezone.utc) is None


def test_to_input_value_truncates_to_minutes():
    assert to_input_value("2030-01-01T10:00:00+02:00") == "2030-01-01T10:00"
    assert to_input_value("") == ""


def test_find_event():
    events = [Event(id="a"), Event(id="b", title="B")]

    assert find_event(events, "b").title == "B"
    assert find_event(events, "z") is None
