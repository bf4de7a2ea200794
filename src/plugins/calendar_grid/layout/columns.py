"""Column packing and geometry for timed events in day and week views."""

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from ..models import (
    CalendarEvent, LayoutDiagnostic, LayoutGeometry, PositionedEvent, ResolvedEvent, WeekLayout
)
from .classifier import classify_day, day_bounds
from .resolve import TimezoneLike, resolve_events, resolve_timezone
from .spans import segment_window

logger = logging.getLogger(__name__)

COLUMN_OFFSET: float = 0.1
STACKED_WIDTH: float = 0.9
BASE_Z_INDEX: int = 10

PackedEvent = Tuple[ResolvedEvent, int, datetime, datetime]


def sort_timed(events: Iterable[ResolvedEvent]) -> List[ResolvedEvent]:
    """Order by start; among equal starts the longer event comes first."""
    return sorted(events, key=lambda event: (event.start, -event.duration))


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Strict half-open interval overlap."""
    return a_start < b_end and b_start < a_end


def clip_to_day(event: ResolvedEvent, day_start: datetime,
                day_end: datetime) -> Tuple[datetime, datetime]:
    return max(event.start, day_start), min(event.end, day_end)


def pack_columns(events: Iterable[ResolvedEvent], day_start: datetime,
                 day_end: datetime) -> List[PackedEvent]:
    """
    Assign each event to the first column where it overlaps nothing.

    Greedy first-fit colouring of the interval graph, run over the events in
    ``sort_timed`` order on their day-clipped intervals.

    Returns:
        (event, column index, clipped start, clipped end) in placement order
    """
    columns: List[List[Tuple[datetime, datetime]]] = []
    packed: List[PackedEvent] = []

    for event in sort_timed(events):
        start, end = clip_to_day(event, day_start, day_end)

        column_index = 0
        while column_index < len(columns):
            if not any(overlaps(start, end, s, e) for s, e in columns[column_index]):
                break
            column_index += 1
        if column_index == len(columns):
            columns.append([])

        columns[column_index].append((start, end))
        packed.append((event, column_index, start, end))

    return packed


def hour_fraction(instant: datetime, day_end: datetime) -> float:
    """Wall-clock hour of ``instant``; the end-of-day boundary counts as 24."""
    if instant >= day_end:
        return 24.0
    return instant.hour + instant.minute / 60


def position_event(event: ResolvedEvent, column: int, start: datetime, end: datetime,
                   day_end: datetime, geometry: LayoutGeometry) -> PositionedEvent:
    """Compute the rectangle of one packed event."""
    start_hour = hour_fraction(start, day_end)
    end_hour = hour_fraction(end, day_end)

    # Tiles cascade right by a fixed step; width does not depend on how many
    # columns the cluster actually has.
    return PositionedEvent(
        event=event,
        column=column,
        top=(start_hour - geometry.start_hour) * geometry.px_per_hour,
        height=(end_hour - start_hour) * geometry.px_per_hour,
        left=column * COLUMN_OFFSET,
        width=1.0 if column == 0 else STACKED_WIDTH,
        z_index=BASE_Z_INDEX + column,
    )


def layout_day(events: Iterable[CalendarEvent], day: date,
               geometry: Optional[LayoutGeometry] = None,
               tz: TimezoneLike = None,
               now: Optional[datetime] = None,
               diagnostics: Optional[List[LayoutDiagnostic]] = None) -> List[PositionedEvent]:
    """
    Lay out the timed events of one day column.

    Args:
        events: Calendar events (raw or already resolved)
        day: Day the column shows
        geometry: Visible hour range and px-per-hour scale
        tz: View timezone
        now: Anchor for events with unparsable instants
        diagnostics: Optional list that collects per-event problems

    Returns:
        Positioned timed events in placement order
    """
    geometry = geometry or LayoutGeometry()
    tz = resolve_timezone(tz)
    resolved = resolve_events(events, tz, now, diagnostics)

    day_start, day_end = day_bounds(day, tz)
    timed = classify_day(resolved, day, tz).timed

    return [
        position_event(event, column, start, end, day_end, geometry)
        for event, column, start, end in pack_columns(timed, day_start, day_end)
    ]


def layout_week(events: Iterable[CalendarEvent], days: Sequence[date],
                geometry: Optional[LayoutGeometry] = None,
                tz: TimezoneLike = None,
                now: Optional[datetime] = None,
                diagnostics: Optional[List[LayoutDiagnostic]] = None) -> WeekLayout:
    """Lay out the all-day row and every timed column of a visible window."""
    tz = resolve_timezone(tz)
    resolved = resolve_events(events, tz, now, diagnostics)
    days = list(days)

    layout = WeekLayout(days=days)
    layout.all_day = segment_window(resolved, days)
    layout.timed = [layout_day(resolved, day, geometry, tz) for day in days]

    logger.info(
        f"Laid out {len(resolved)} events over {len(days)} days: "
        f"{sum(len(column) for column in layout.timed)} timed tiles, "
        f"{sum(len(row) for row in layout.all_day)} all-day segments"
    )
    return layout
