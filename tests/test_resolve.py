"""Unit tests for event instant resolution."""
from datetime import date, datetime, timezone

import pytz

from plugins.calendar_grid.layout.classifier import classify_day, day_bounds
from plugins.calendar_grid.layout.resolve import (
    parse_instant, resolve_draft, resolve_event, resolve_events, resolve_timezone
)
from plugins.calendar_grid.models import CalendarEvent, DiagnosticKind, DraftEvent, EventColor

NOW = datetime(2024, 3, 12, 14, 0, tzinfo=timezone.utc)


class TestParseInstant:
    """Test cases for parse_instant."""

    def test_zulu_string(self):
        parsed = parse_instant("2024-01-01T09:30:00Z")
        assert parsed == datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc)

    def test_date_only_string_is_local_midnight(self):
        parsed = parse_instant("2024-01-01", "America/New_York")
        assert (parsed.year, parsed.month, parsed.day, parsed.hour) == (2024, 1, 1, 0)
        assert parsed.utcoffset().total_seconds() == -5 * 3600

    def test_aware_datetime_is_converted(self):
        parsed = parse_instant(datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc), "Europe/Warsaw")
        assert parsed.hour == 14

    def test_naive_datetime_is_localized(self):
        parsed = parse_instant(datetime(2024, 6, 1, 12, 0), "Europe/Warsaw")
        assert parsed.hour == 12
        assert parsed.utcoffset().total_seconds() == 2 * 3600

    def test_date_object(self):
        assert parse_instant(date(2024, 1, 1)) == datetime(2024, 1, 1, tzinfo=pytz.UTC)

    def test_unparsable_values(self):
        assert parse_instant("yesterday-ish") is None
        assert parse_instant("") is None
        assert parse_instant(None) is None
        assert parse_instant(12345) is None

    def test_timezone_names_resolve(self):
        assert resolve_timezone(None) is pytz.UTC
        assert resolve_timezone("Europe/Warsaw").zone == "Europe/Warsaw"


class TestResolveEvent:
    """Test cases for resolve_event."""

    def test_valid_event(self):
        event = CalendarEvent(id="1", title="Standup", start="2024-03-12T09:00:00Z",
                              end="2024-03-12T09:15:00Z", color="violet")

        resolved = resolve_event(event)

        assert resolved.id == "1"
        assert resolved.duration.total_seconds() == 15 * 60
        assert resolved.color == EventColor.VIOLET
        assert not resolved.is_multi_day

    def test_end_before_start_is_clamped(self):
        diagnostics = []
        event = CalendarEvent(id="1", title="Backwards", start="2024-03-12T10:00:00Z",
                              end="2024-03-12T09:00:00Z")

        resolved = resolve_event(event, diagnostics=diagnostics)

        assert resolved.end == resolved.start
        assert diagnostics[0].kind == DiagnosticKind.END_BEFORE_START
        assert not diagnostics[0].excluded

    def test_invalid_timestamp_anchored_at_now(self):
        diagnostics = []
        event = CalendarEvent(id="1", title="Broken", start="2024-03-12T10:00:00Z", end=None)

        resolved = resolve_event(event, now=NOW, diagnostics=diagnostics)

        assert resolved.start == resolved.end == NOW
        assert diagnostics[0].kind == DiagnosticKind.INVALID_TIMESTAMP
        assert diagnostics[0].event_id == "1"

    def test_missing_id_and_empty_title_are_excluded(self):
        diagnostics = []
        events = [
            CalendarEvent(id=None, title="Nameless", start=NOW, end=NOW),
            CalendarEvent(id="2", title="", start=NOW, end=NOW),
            CalendarEvent(id="3", title="Kept", start=NOW, end=NOW),
        ]

        resolved = resolve_events(events, diagnostics=diagnostics)

        assert [e.id for e in resolved] == ["3"]
        assert [d.kind for d in diagnostics] == [DiagnosticKind.MISSING_ID, DiagnosticKind.EMPTY_TITLE]

    def test_resolved_events_pass_through(self):
        [resolved] = resolve_events([CalendarEvent(id="1", title="A", start=NOW, end=NOW)])
        assert resolve_events([resolved]) == [resolved]

    def test_unknown_color_falls_back_to_sky(self):
        resolved = resolve_event(CalendarEvent(id="1", title="A", start=NOW, end=NOW, color="plaid"))
        assert resolved.color == EventColor.SKY


class TestResolveDraft:
    """Test cases for resolve_draft."""

    def test_draft_is_marked(self):
        preview = resolve_draft(DraftEvent(title="New", start=NOW, end=NOW))
        assert preview.is_draft
        assert preview.id is None

    def test_untitled_or_missing_draft(self):
        assert resolve_draft(None) is None
        assert resolve_draft(DraftEvent(title="  ", start=NOW, end=NOW)) is None


class TestClassifyDay:
    """Test cases for day boundaries and classification."""

    def test_day_bounds_in_view_timezone(self):
        day_start, day_end = day_bounds(date(2024, 3, 31), "Europe/Warsaw")
        # DST starts that night, so the day is 23 hours long
        assert (day_end - day_start).total_seconds() == 23 * 3600

    def test_timed_and_spanning_sets(self):
        events = resolve_events([
            CalendarEvent(id="t", title="Timed", start="2024-03-12T09:00:00Z", end="2024-03-12T10:00:00Z"),
            CalendarEvent(id="a", title="All day", start="2024-03-12", end="2024-03-12", all_day=True),
            CalendarEvent(id="m", title="Trip", start="2024-03-11T09:00:00Z", end="2024-03-13T10:00:00Z"),
        ])

        partition = classify_day(events, date(2024, 3, 12))

        assert [e.id for e in partition.timed] == ["t"]
        assert sorted(e.id for e in partition.spanning) == ["a", "m"]

    def test_timezone_moves_event_to_next_day(self):
        """Test that 23:30 UTC belongs to the next date in Warsaw."""
        events = resolve_events([
            CalendarEvent(id="late", title="Late", start="2024-03-12T23:30:00Z",
                          end="2024-03-12T23:45:00Z"),
        ], tz="Europe/Warsaw")

        assert classify_day(events, date(2024, 3, 12), "Europe/Warsaw").timed == []
        assert len(classify_day(events, date(2024, 3, 13), "Europe/Warsaw").timed) == 1
