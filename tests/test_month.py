"""Unit tests for month cell aggregation."""
import random
from datetime import date, datetime, timedelta, timezone

import pytest

from plugins.calendar_grid.layout.month import (
    expand_month_cell, layout_month_cell, sort_cell_items
)
from plugins.calendar_grid.layout.resolve import resolve_events
from plugins.calendar_grid.models import CalendarEvent, DraftEvent

DAY = date(2024, 3, 12)
ANCHOR = date(2024, 3, 1)


def at(hour, minute=0, day=DAY):
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


def event(event_id, start, end, **kwargs):
    return CalendarEvent(id=event_id, title=f"Event {event_id}", start=start, end=end, **kwargs)


@pytest.fixture
def busy_day():
    """One multi-day event carried into the day plus four timed events."""
    return [
        event("T4", at(16), at(17)),
        event("T2", at(10), at(11)),
        event("M", at(9, day=date(2024, 3, 10)), at(12, day=date(2024, 3, 13))),
        event("T3", at(13), at(14)),
        event("T1", at(8), at(9)),
    ]


class TestLayoutMonthCell:
    """Test cases for layout_month_cell."""

    def test_five_events_capacity_three(self, busy_day):
        """Test that the spanning event leads and two events overflow."""
        cell = layout_month_cell(busy_day, DAY, ANCHOR, capacity=3)

        assert [item.id for item in cell.shown] == ["M", "T1", "T2"]
        assert cell.overflow == 2
        assert cell.total == 5
        assert cell.has_more

    def test_everything_fits(self, busy_day):
        cell = layout_month_cell(busy_day, DAY, ANCHOR, capacity=10)

        assert [item.id for item in cell.shown] == ["M", "T1", "T2", "T3", "T4"]
        assert cell.overflow == 0
        assert not cell.has_more

    def test_zero_capacity_shows_nothing(self, busy_day):
        cell = layout_month_cell(busy_day, DAY, ANCHOR, capacity=0)

        assert cell.shown == []
        assert cell.overflow == cell.total == 5

    def test_negative_capacity_is_treated_as_zero(self, busy_day):
        cell = layout_month_cell(busy_day, DAY, ANCHOR, capacity=-2)

        assert cell.shown == []
        assert cell.overflow == 5

    def test_draft_is_always_first(self, busy_day):
        """Test that the preview event leads even though it starts last."""
        draft = DraftEvent(title="New meeting", start=at(20), end=at(21))

        cell = layout_month_cell(busy_day, DAY, ANCHOR, capacity=2, draft=draft)

        assert cell.shown[0].is_draft
        assert cell.shown[0].title == "New meeting"
        assert cell.shown[1].id == "M"
        assert cell.total == 6
        assert cell.overflow == 4

    def test_draft_without_title_is_not_previewed(self, busy_day):
        draft = DraftEvent(title="", start=at(20), end=at(21))

        cell = layout_month_cell(busy_day, DAY, ANCHOR, capacity=10, draft=draft)

        assert cell.total == 5
        assert not any(item.is_draft for item in cell.shown)

    def test_multi_day_event_starting_today_counts_once(self):
        """Test that a spanning event beginning on the cell's day is not duplicated."""
        events = [event("trip", at(9), at(9, day=date(2024, 3, 14)))]

        cell = layout_month_cell(events, DAY, ANCHOR, capacity=5)

        assert [item.id for item in cell.shown] == ["trip"]

    def test_events_of_other_days_are_ignored(self):
        events = [
            event("yesterday", at(9, day=date(2024, 3, 11)), at(10, day=date(2024, 3, 11))),
            event("today", at(9), at(10)),
        ]

        cell = layout_month_cell(events, DAY, ANCHOR, capacity=5)

        assert [item.id for item in cell.shown] == ["today"]

    def test_in_current_month(self):
        assert layout_month_cell([], DAY, ANCHOR, capacity=3).in_current_month
        assert not layout_month_cell([], date(2024, 2, 28), ANCHOR, capacity=3).in_current_month

    def test_malformed_event_is_reported_not_fatal(self):
        diagnostics = []
        now = at(12)
        events = [event("good", at(9), at(10)), event("bad", "garbage", "garbage")]

        cell = layout_month_cell(events, DAY, ANCHOR, capacity=5, now=now, diagnostics=diagnostics)

        assert {item.id for item in cell.shown} == {"good", "bad"}
        assert len(diagnostics) == 1

    def test_capacity_invariants_hold_for_random_input(self):
        """Test shown <= capacity and overflow == max(0, total - capacity)."""
        rng = random.Random(42)
        for _ in range(50):
            events = []
            for i in range(rng.randrange(0, 12)):
                start = at(0) + timedelta(days=rng.randrange(-3, 2), minutes=rng.randrange(0, 1440, 15))
                end = start + timedelta(minutes=rng.randrange(15, 4000, 15))
                events.append(event(f"e{i}", start, end, all_day=rng.random() < 0.1))
            capacity = rng.randrange(-2, 8)

            cell = layout_month_cell(events, DAY, ANCHOR, capacity)

            assert len(cell.shown) <= max(0, capacity)
            assert cell.overflow == max(0, cell.total - capacity)


class TestExpandMonthCell:
    """Test cases for the unclipped overflow list."""

    def test_expanded_list_is_untruncated_in_cell_order(self, busy_day):
        draft = DraftEvent(title="Draft", start=at(7), end=at(8))

        items = expand_month_cell(busy_day, DAY, draft=draft)
        cell = layout_month_cell(busy_day, DAY, ANCHOR, capacity=3, draft=draft)

        assert len(items) == 6
        assert items[:3] == cell.shown
        assert [item.id for item in items[1:]] == ["M", "T1", "T2", "T3", "T4"]


class TestSortCellItems:
    """Test cases for the cell comparator."""

    def test_multi_day_before_timed_then_by_start(self):
        items = resolve_events([
            event("late", at(18), at(19)),
            event("allday", at(0), at(0), all_day=True),
            event("early", at(7), at(8)),
        ])

        assert [item.id for item in sort_cell_items(items)] == ["allday", "early", "late"]
