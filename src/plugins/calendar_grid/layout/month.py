"""Month cell aggregation: ordering, truncation and overflow."""

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional

from ..models import CalendarEvent, DraftEvent, LayoutDiagnostic, MonthCell, ResolvedEvent
from .classifier import calendar_date, classify_day
from .resolve import TimezoneLike, resolve_draft, resolve_events, resolve_timezone

logger = logging.getLogger(__name__)


def _cell_sort_key(item: ResolvedEvent):
    return (not item.is_draft, not item.is_multi_day, item.start)


def sort_cell_items(items: Iterable[ResolvedEvent]) -> List[ResolvedEvent]:
    """Draft first, then multi-day items, then everything else by start."""
    return sorted(items, key=_cell_sort_key)


def _combined_items(events: Iterable[CalendarEvent], day: date,
                    draft: Optional[DraftEvent], tz, now,
                    diagnostics: Optional[List[LayoutDiagnostic]]) -> List[ResolvedEvent]:
    resolved = resolve_events(events, tz, now, diagnostics)
    partition = classify_day(resolved, day, tz)

    carried = [e for e in partition.spanning if calendar_date(e.start) != day]
    own = [e for e in partition.spanning + partition.timed if calendar_date(e.start) == day]

    items = carried + own
    preview = resolve_draft(draft, tz, now, diagnostics)
    if preview is not None:
        items.insert(0, preview)
    return sort_cell_items(items)


def layout_month_cell(events: Iterable[CalendarEvent], day: date, month_anchor: date,
                      capacity: int,
                      draft: Optional[DraftEvent] = None,
                      tz: TimezoneLike = None,
                      now: Optional[datetime] = None,
                      diagnostics: Optional[List[LayoutDiagnostic]] = None) -> MonthCell:
    """
    Choose the items a month cell shows and count the rest.

    Args:
        events: Calendar events (raw or already resolved)
        day: Day of the cell
        month_anchor: Any date in the month being displayed
        capacity: Rows that fit in the cell, from compute_capacity
        draft: Optional in-progress event previewed in this cell

    Returns:
        MonthCell with at most ``capacity`` shown items and the overflow count
    """
    tz = resolve_timezone(tz)
    items = _combined_items(events, day, draft, tz, now, diagnostics)
    capacity = max(0, capacity)

    total = len(items)
    return MonthCell(
        day=day,
        shown=items[:capacity],
        overflow=max(0, total - capacity),
        total=total,
        in_current_month=(day.year, day.month) == (month_anchor.year, month_anchor.month),
    )


def expand_month_cell(events: Iterable[CalendarEvent], day: date,
                      draft: Optional[DraftEvent] = None,
                      tz: TimezoneLike = None,
                      now: Optional[datetime] = None,
                      diagnostics: Optional[List[LayoutDiagnostic]] = None) -> List[ResolvedEvent]:
    """Full, untruncated list for the overflow popover, in cell order."""
    tz = resolve_timezone(tz)
    items = _combined_items(events, day, draft, tz, now, diagnostics)
    logger.debug(f"Expanded cell {day.isoformat()} with {len(items)} items")
    return items
