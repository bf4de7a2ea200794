"""Per-day segments of multi-day and all-day events."""

from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence, Union

from ..models import CalendarEvent, Corners, DaySegment, LayoutDiagnostic, ResolvedEvent
from .classifier import calendar_date, is_multi_day
from .resolve import TimezoneLike, resolve_event


def corner_rounding(is_first_day: bool, is_last_day: bool) -> Corners:
    if is_first_day and is_last_day:
        return Corners.BOTH
    if is_first_day:
        return Corners.LEFT
    if is_last_day:
        return Corners.RIGHT
    return Corners.NONE


def should_show_title(is_first_day: bool, day: date, window_start: Optional[date],
                      event_start: datetime) -> bool:
    """
    Decide whether a segment carries the event title.

    The title sits on the event's first day, and is repeated on the first
    visible day of the window when the event began before the window.
    """
    if is_first_day:
        return True
    return (
        window_start is not None
        and day == window_start
        and calendar_date(event_start) < window_start
    )


def _segment(event: ResolvedEvent, day: date, window_start: Optional[date]) -> DaySegment:
    first = calendar_date(event.start)
    last = calendar_date(event.end)
    is_first_day = day == first

    return DaySegment(
        event=event,
        day=day,
        is_first_day=is_first_day,
        is_last_day=day == last,
        included=first <= day <= last,
        show_title=should_show_title(is_first_day, day, window_start, event.start),
    )


def segment_span(event: Union[CalendarEvent, ResolvedEvent], day: date,
                 tz: TimezoneLike = None,
                 window_start: Optional[date] = None,
                 now: Optional[datetime] = None,
                 diagnostics: Optional[List[LayoutDiagnostic]] = None) -> Optional[DaySegment]:
    """
    Segment flags of one event on one visible day.

    Args:
        event: The multi-day or all-day event
        day: Visible day being painted
        tz: View timezone
        window_start: First day of the visible window, for title repetition

    Returns:
        DaySegment, or None if the event is excluded from layout
    """
    if not isinstance(event, ResolvedEvent):
        event = resolve_event(event, tz, now, diagnostics)
        if event is None:
            return None
    return _segment(event, day, window_start)


def segment_window(events: Iterable[ResolvedEvent],
                   days: Sequence[date]) -> List[List[DaySegment]]:
    """
    Build the all-day row of a visible window.

    Returns:
        One list per visible day with the segments of every multi-day event
        included on it, earliest and longest first
    """
    spanning = sorted(
        (event for event in events if is_multi_day(event)),
        key=lambda event: (calendar_date(event.start), -event.duration),
    )
    window_start = days[0] if days else None

    row = []
    for day in days:
        segments = [_segment(event, day, window_start) for event in spanning]
        row.append([segment for segment in segments if segment.included])
    return row
