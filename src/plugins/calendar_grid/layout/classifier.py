"""Partitioning of a day's events into spanning and timed sets."""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Tuple

from ..models import ResolvedEvent
from .resolve import TimezoneLike, localize, resolve_timezone


@dataclass
class DayPartition:
    """Events of one day split into the all-day row and the timed grid."""
    spanning: List[ResolvedEvent] = field(default_factory=list)
    timed: List[ResolvedEvent] = field(default_factory=list)


def calendar_date(instant: datetime) -> date:
    """Calendar date of an already view-localized instant."""
    return instant.date()


def day_bounds(day: date, tz: TimezoneLike = None) -> Tuple[datetime, datetime]:
    """Return local midnight of ``day`` and of the following day."""
    tz = resolve_timezone(tz)
    day_start = localize(datetime.combine(day, time()), tz)
    day_end = localize(datetime.combine(day + timedelta(days=1), time()), tz)
    return day_start, day_end


def is_multi_day(event: ResolvedEvent) -> bool:
    return event.all_day or calendar_date(event.start) != calendar_date(event.end)


def _spans_day(event: ResolvedEvent, day_start: datetime, day_end: datetime) -> bool:
    # A multi-day event whose end lands exactly on midnight still touches that date.
    return event.start < day_end and event.end >= day_start


def classify_day(events: Iterable[ResolvedEvent], day: date,
                 tz: TimezoneLike = None) -> DayPartition:
    """
    Split events into the spanning set and the timed set for ``day``.

    Args:
        events: Resolved events in the view timezone
        day: Target calendar day
        tz: View timezone used for the day boundaries

    Returns:
        DayPartition; the order inside each set is unspecified
    """
    day_start, day_end = day_bounds(day, tz)
    partition = DayPartition()

    for event in events:
        if is_multi_day(event):
            if _spans_day(event, day_start, day_end):
                partition.spanning.append(event)
        elif event.start < day_end and event.end > day_start:
            partition.timed.append(event)

    return partition


def events_starting_on(events: Iterable[ResolvedEvent], day: date) -> List[ResolvedEvent]:
    """Events whose start falls on ``day``, earliest first."""
    return sorted(
        (event for event in events if calendar_date(event.start) == day),
        key=lambda event: event.start,
    )


def spanning_not_starting_on(events: Iterable[ResolvedEvent], day: date) -> List[ResolvedEvent]:
    """Multi-day events that cover ``day`` but began on an earlier date."""
    return [
        event for event in events
        if is_multi_day(event)
        and calendar_date(event.start) < day <= calendar_date(event.end)
    ]


def events_touching(events: Iterable[ResolvedEvent], day: date) -> List[ResolvedEvent]:
    """Every event that starts, ends, or is in progress on ``day``."""
    return [
        event for event in events
        if calendar_date(event.start) <= day <= calendar_date(event.end)
    ]


def agenda_for_day(events: Iterable[ResolvedEvent], day: date) -> List[ResolvedEvent]:
    """Agenda listing for one day: every touching event, earliest first."""
    return sorted(events_touching(events, day), key=lambda event: event.start)
