"""Visible day windows for the week, month and agenda views."""

import calendar
from datetime import date, datetime, timedelta
from typing import List, Union

from ..ui.styles import AGENDA_DAYS_TO_SHOW

MONDAY = 0
SUNDAY = 6


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def calculate_week_start(day: Union[date, datetime], week_starts_on: int = SUNDAY) -> date:
    """Calculate the first day of the week containing ``day``."""
    day = _as_date(day)
    return day - timedelta(days=(day.weekday() - week_starts_on) % 7)


def calculate_day_index(day: Union[date, datetime], week_start: date) -> int:
    """Calculate the column index (0-6) of ``day`` in the week beginning at ``week_start``."""
    return (_as_date(day) - week_start).days


def week_days(day: Union[date, datetime], week_starts_on: int = SUNDAY) -> List[date]:
    start = calculate_week_start(day, week_starts_on)
    return [start + timedelta(days=i) for i in range(7)]


def month_grid_days(anchor: Union[date, datetime], week_starts_on: int = MONDAY) -> List[date]:
    """
    Days of the month grid: whole weeks covering every day of ``anchor``'s month.

    Args:
        anchor: Any date in the month
        week_starts_on: Weekday of the grid's first column (0 = Monday)

    Returns:
        A list whose length is a multiple of 7
    """
    anchor = _as_date(anchor)
    first = anchor.replace(day=1)
    last = anchor.replace(day=calendar.monthrange(anchor.year, anchor.month)[1])

    start = calculate_week_start(first, week_starts_on)
    end = calculate_week_start(last, week_starts_on) + timedelta(days=6)
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def split_weeks(days: List[date]) -> List[List[date]]:
    return [days[i:i + 7] for i in range(0, len(days), 7)]


def agenda_days(start: Union[date, datetime], count: int = AGENDA_DAYS_TO_SHOW) -> List[date]:
    start = _as_date(start)
    return [start + timedelta(days=i) for i in range(count)]
