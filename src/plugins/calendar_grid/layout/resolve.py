"""Parsing and validation of event instants before layout.

Every layout entry point runs its input through here first. Bad event data
never raises: malformed instants become a zero-duration event anchored at
``now``, inverted intervals are clamped, and events without an id or title are
dropped. Each of these is reported as a :class:`LayoutDiagnostic` on the
caller's list and logged.
"""

import logging
from datetime import date, datetime, time, tzinfo
from typing import Iterable, List, Optional, Union

import pytz

from ..models import (
    CalendarEvent, DiagnosticKind, DraftEvent, Instant, LayoutDiagnostic, ResolvedEvent
)

logger = logging.getLogger(__name__)

TimezoneLike = Union[str, tzinfo, None]


def resolve_timezone(tz: TimezoneLike) -> tzinfo:
    """Return a pytz zone for a name, an existing tzinfo, or UTC when missing."""
    if tz is None:
        return pytz.UTC
    if isinstance(tz, str):
        return pytz.timezone(tz)
    return tz


def localize(naive: datetime, tz: tzinfo) -> datetime:
    """Attach ``tz`` to a naive wall-clock datetime."""
    if hasattr(tz, 'localize'):
        return tz.localize(naive)
    return naive.replace(tzinfo=tz)


def parse_instant(value: Union[Instant, date], tz: TimezoneLike = None) -> Optional[datetime]:
    """
    Parse an event instant into an aware datetime in the view timezone.

    Args:
        value: datetime, date, or ISO-8601 string (a trailing 'Z' is accepted)
        tz: View timezone; naive values are taken as wall-clock time in it

    Returns:
        The instant converted to ``tz``, or None if it cannot be parsed
    """
    tz = resolve_timezone(tz)

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time())
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            if 'T' in text or ' ' in text:
                dt = datetime.fromisoformat(text.replace('Z', '+00:00'))
            else:
                dt = datetime.combine(date.fromisoformat(text), time())
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        return localize(dt, tz)
    return dt.astimezone(tz)


def _report(diagnostics: Optional[List[LayoutDiagnostic]], kind: DiagnosticKind,
            event_id: Optional[str], message: str, excluded: bool = False) -> None:
    logger.warning(f"Layout diagnostic [{kind.value}]: {message}")
    if diagnostics is not None:
        diagnostics.append(LayoutDiagnostic(kind, event_id, message, excluded))


def _anchor(now: Optional[datetime], tz: tzinfo) -> datetime:
    if now is None:
        return datetime.now(tz)
    return parse_instant(now, tz)


def _resolve_interval(item: Union[CalendarEvent, DraftEvent], tz: tzinfo,
                      now: Optional[datetime],
                      diagnostics: Optional[List[LayoutDiagnostic]],
                      label: str, event_id: Optional[str]):
    start = parse_instant(item.start, tz)
    end = parse_instant(item.end, tz)

    if start is None or end is None:
        anchor = _anchor(now, tz)
        _report(
            diagnostics, DiagnosticKind.INVALID_TIMESTAMP, event_id,
            f"{label} has unparsable start/end ({item.start!r}, {item.end!r}); "
            f"shown as zero-duration at {anchor.isoformat()}"
        )
        return anchor, anchor

    if end < start:
        _report(
            diagnostics, DiagnosticKind.END_BEFORE_START, event_id,
            f"{label} ends before it starts ({start.isoformat()} > {end.isoformat()}); "
            f"end clamped to start"
        )
        end = start

    return start, end


def resolve_event(event: CalendarEvent, tz: TimezoneLike = None,
                  now: Optional[datetime] = None,
                  diagnostics: Optional[List[LayoutDiagnostic]] = None) -> Optional[ResolvedEvent]:
    """
    Validate one event and resolve its instants.

    Returns:
        The resolved event, or None when it must not be rendered at all
    """
    tz = resolve_timezone(tz)
    title = (event.title or '').strip()

    if not event.id:
        _report(diagnostics, DiagnosticKind.MISSING_ID, None,
                f"Event '{title}' has no id; excluded from layout", excluded=True)
        return None
    if not title:
        _report(diagnostics, DiagnosticKind.EMPTY_TITLE, event.id,
                f"Event {event.id} has an empty title; excluded from layout", excluded=True)
        return None

    start, end = _resolve_interval(event, tz, now, diagnostics, f"Event {event.id}", event.id)
    return ResolvedEvent(event=event, start=start, end=end)


def resolve_events(events: Iterable[Union[CalendarEvent, ResolvedEvent]], tz: TimezoneLike = None,
                   now: Optional[datetime] = None,
                   diagnostics: Optional[List[LayoutDiagnostic]] = None) -> List[ResolvedEvent]:
    """Resolve a batch of events, dropping the ones that cannot be shown."""
    tz = resolve_timezone(tz)
    resolved = []
    for event in events:
        if isinstance(event, ResolvedEvent):
            resolved.append(event)
            continue
        item = resolve_event(event, tz, now, diagnostics)
        if item is not None:
            resolved.append(item)
    return resolved


def resolve_draft(draft: Optional[DraftEvent], tz: TimezoneLike = None,
                  now: Optional[datetime] = None,
                  diagnostics: Optional[List[LayoutDiagnostic]] = None) -> Optional[ResolvedEvent]:
    """Resolve the preview event; drafts without a title are not previewed."""
    if draft is None or not (draft.title or '').strip():
        return None
    tz = resolve_timezone(tz)
    start, end = _resolve_interval(draft, tz, now, diagnostics, "Draft event", None)
    return ResolvedEvent(event=draft, start=start, end=end, is_draft=True)
