import logging
from datetime import date, datetime
from typing import List, Optional, Tuple

from PIL import Image

from plugins.calendar_grid.config import CalendarSettings
from plugins.calendar_grid.layout.classifier import agenda_for_day, day_bounds
from plugins.calendar_grid.layout.columns import layout_week
from plugins.calendar_grid.layout.month import layout_month_cell
from plugins.calendar_grid.layout.resolve import parse_instant, resolve_events
from plugins.calendar_grid.layout.visibility import compute_capacity
from plugins.calendar_grid.layout.windows import (
    MONDAY, agenda_days, month_grid_days, split_weeks, week_days
)
from plugins.calendar_grid.models import (
    CalendarEvent, DraftEvent, LayoutDiagnostic, MonthCell, ResolvedEvent
)
from plugins.calendar_grid.services.events_api import EventsClient
from plugins.calendar_grid.time_cursor import compute_time_cursor
from plugins.calendar_grid.ui.renderer import CalendarRenderer
from plugins.calendar_grid.ui.styles import EVENT_GAP, EVENT_HEIGHT

logger = logging.getLogger(__name__)


class CalendarGrid:
    """
    Fetches events, lays them out and renders the week and month views.

    Holds no per-render state. Each call that lays out events accepts an
    optional ``diagnostics`` list and appends that call's problems to it.
    """

    def __init__(self, settings: Optional[CalendarSettings] = None,
                 client: Optional[EventsClient] = None,
                 renderer: Optional[CalendarRenderer] = None):
        self.settings = settings or CalendarSettings.from_env()
        self.client = client or EventsClient(self.settings)
        self.renderer = renderer or CalendarRenderer()

    def _now(self, now: Optional[datetime]) -> datetime:
        tz = self.settings.timezone
        return parse_instant(now, tz) if now is not None else datetime.now(tz)

    def _fetch(self, first_day: date, last_day: date) -> List[CalendarEvent]:
        tz = self.settings.timezone
        range_start, _ = day_bounds(first_day, tz)
        _, range_end = day_bounds(last_day, tz)
        try:
            return self.client.get_events(range_start, range_end)
        except RuntimeError as e:
            logger.error(f"Error getting events: {e}")
            raise

    def generate_image(self, view: str = 'week', now: Optional[datetime] = None,
                       width: int = 1200, height: int = 800,
                       draft: Optional[DraftEvent] = None,
                       diagnostics: Optional[List[LayoutDiagnostic]] = None) -> Image.Image:
        """Render the requested view and save it to the configured output path."""
        if diagnostics is None:
            diagnostics = []

        if view == 'week':
            image = self.generate_week_image(now, width, diagnostics)
        elif view == 'month':
            image = self.generate_month_image(now, width, height, draft, diagnostics)
        else:
            raise ValueError(f"Unknown calendar view: {view!r}")

        image.save(self.settings.output_path)
        if diagnostics:
            logger.warning(f"{len(diagnostics)} events had layout problems")
        return image

    def generate_week_image(self, now: Optional[datetime] = None, width: int = 1200,
                            diagnostics: Optional[List[LayoutDiagnostic]] = None) -> Image.Image:
        now = self._now(now)
        tz = self.settings.timezone
        geometry = self.settings.geometry
        days = week_days(now, self.settings.week_starts_on)

        events = self._fetch(days[0], days[-1])
        layout = layout_week(events, days, geometry, tz, now, diagnostics)
        cursor = compute_time_cursor(now, geometry.start_hour, geometry.end_hour)

        return self.renderer.render_week(layout, geometry, now, width, cursor)

    def layout_month(self, events: List[CalendarEvent], now: datetime, height: int,
                     draft: Optional[DraftEvent] = None,
                     diagnostics: Optional[List[LayoutDiagnostic]] = None) -> List[List[MonthCell]]:
        """Lay out every cell of the month containing ``now``."""
        tz = self.settings.timezone
        weeks = split_weeks(month_grid_days(now, MONDAY))

        resolved = resolve_events(events, tz, now, diagnostics)

        available_height = self.renderer.measure_month_cell(height, len(weeks))
        capacity = compute_capacity(available_height, EVENT_HEIGHT, EVENT_GAP)
        draft_day = self._draft_day(draft)

        return [
            [
                layout_month_cell(
                    resolved, day, now.date(), capacity,
                    draft=draft if day == draft_day else None,
                    tz=tz, now=now, diagnostics=diagnostics,
                )
                for day in week
            ]
            for week in weeks
        ]

    def generate_month_image(self, now: Optional[datetime] = None, width: int = 1200,
                             height: int = 800,
                             draft: Optional[DraftEvent] = None,
                             diagnostics: Optional[List[LayoutDiagnostic]] = None) -> Image.Image:
        now = self._now(now)
        days = month_grid_days(now, MONDAY)
        events = self._fetch(days[0], days[-1])

        cells = self.layout_month(events, now, height, draft, diagnostics)
        return self.renderer.render_month(cells, now.date(), width, height)

    def get_agenda(self, now: Optional[datetime] = None, count: Optional[int] = None,
                   diagnostics: Optional[List[LayoutDiagnostic]] = None
                   ) -> List[Tuple[date, List[ResolvedEvent]]]:
        """Upcoming days that have events, each with its events in start order."""
        now = self._now(now)
        days = agenda_days(now) if count is None else agenda_days(now, count)
        events = self._fetch(days[0], days[-1])

        resolved = resolve_events(events, self.settings.timezone, now, diagnostics)
        agenda = []
        for day in days:
            day_events = agenda_for_day(resolved, day)
            if day_events:
                agenda.append((day, day_events))
        return agenda

    def _draft_day(self, draft: Optional[DraftEvent]) -> Optional[date]:
        if draft is None:
            return None
        start = parse_instant(draft.start, self.settings.timezone)
        return start.date() if start is not None else None
