"""The live "now" line of the day and week views."""

import logging
import threading
from datetime import date, datetime
from typing import Callable, Optional

from .layout.resolve import TimezoneLike, resolve_timezone
from .models import TimeCursor
from .ui.styles import DEFAULT_END_HOUR, DEFAULT_START_HOUR

logger = logging.getLogger(__name__)

CURSOR_REFRESH_SECONDS: float = 60.0


def hour_of(now: datetime) -> float:
    return now.hour + now.minute / 60 + now.second / 3600


def compute_time_cursor(now: datetime, start_hour: float = DEFAULT_START_HOUR,
                        end_hour: float = DEFAULT_END_HOUR) -> TimeCursor:
    """
    Position of ``now`` within the visible hour range.

    Args:
        now: Current instant, in the view timezone
        start_hour: First visible hour
        end_hour: Last visible hour

    Returns:
        TimeCursor with the fraction clamped to [0, 1]
    """
    if end_hour <= start_hour:
        raise ValueError(f"end_hour ({end_hour}) must be greater than start_hour ({start_hour})")

    hour = hour_of(now)
    fraction = (hour - start_hour) / (end_hour - start_hour)
    return TimeCursor(
        fraction=min(1.0, max(0.0, fraction)),
        visible=start_hour <= hour <= end_hour,
    )


def cursor_applies_to(now: datetime, day: date) -> bool:
    """The cursor is drawn only in the column of today's date."""
    return now.date() == day


class TimeCursorTicker:
    """
    Periodic recomputation of the time cursor, owned by one view.

    The view starts the ticker when it is shown and cancels it when it goes
    away; nothing keeps running after ``cancel``. Usable as a context manager.
    Without an explicit ``clock`` the current time is read in ``tz``.
    """

    def __init__(self, callback: Callable[[TimeCursor], None],
                 start_hour: float = DEFAULT_START_HOUR,
                 end_hour: float = DEFAULT_END_HOUR,
                 interval: float = CURSOR_REFRESH_SECONDS,
                 clock: Optional[Callable[[], datetime]] = None,
                 tz: TimezoneLike = None):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.callback = callback
        self.start_hour = start_hour
        self.end_hour = end_hour
        self.interval = interval
        self.tz = resolve_timezone(tz)
        self._clock = clock or (lambda: datetime.now(self.tz))
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._running = False
        # Bumped by every start and cancel; a tick from an older run never reschedules.
        self._generation = 0

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Emit the cursor immediately, then once per interval."""
        with self._lock:
            if self._running:
                return
            self._running = True
            self._generation += 1
            generation = self._generation
        self._tick(generation)

    def cancel(self) -> None:
        with self._lock:
            self._running = False
            self._generation += 1
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()

    def _is_current(self, generation: int) -> bool:
        return self._running and generation == self._generation

    def _tick(self, generation: int) -> None:
        with self._lock:
            if not self._is_current(generation):
                return

        cursor = compute_time_cursor(self._clock(), self.start_hour, self.end_hour)
        try:
            self.callback(cursor)
        except Exception as e:
            logger.error(f"Time cursor callback failed: {e}", exc_info=True)

        with self._lock:
            if not self._is_current(generation):
                return
            self._timer = threading.Timer(self.interval, self._tick, args=(generation,))
            self._timer.daemon = True
            self._timer.start()

    def __enter__(self) -> 'TimeCursorTicker':
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()
