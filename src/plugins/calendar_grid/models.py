"""Data models shared by the calendar layout engine."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import List, Optional, Union

from .ui.styles import DEFAULT_END_HOUR, DEFAULT_START_HOUR, WEEK_CELLS_HEIGHT

Instant = Union[datetime, str, None]


class EventColor(Enum):
    """Closed set of presentation colors an event can carry."""
    SKY = 'sky'
    AMBER = 'amber'
    VIOLET = 'violet'
    ROSE = 'rose'
    EMERALD = 'emerald'
    ORANGE = 'orange'

    @classmethod
    def parse(cls, value: Optional[str]) -> 'EventColor':
        """Map a raw color name to the enum, falling back to sky."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.SKY


@dataclass
class CalendarEvent:
    """Represents a calendar event as supplied by the event-data source."""
    id: Optional[str]
    title: str
    start: Instant
    end: Instant
    all_day: bool = False
    color: EventColor = EventColor.SKY
    description: Optional[str] = None
    location: Optional[str] = None


@dataclass
class DraftEvent:
    """In-progress event shown inline while it is being created."""
    title: str
    start: Instant
    end: Instant
    all_day: bool = False
    color: EventColor = EventColor.SKY


@dataclass(frozen=True)
class ResolvedEvent:
    """An event with parsed, view-timezone instants and end >= start."""
    event: Union[CalendarEvent, DraftEvent]
    start: datetime
    end: datetime
    is_draft: bool = False

    @property
    def id(self) -> Optional[str]:
        return getattr(self.event, 'id', None)

    @property
    def title(self) -> str:
        return self.event.title

    @property
    def all_day(self) -> bool:
        return bool(self.event.all_day)

    @property
    def color(self) -> EventColor:
        return EventColor.parse(self.event.color)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def is_multi_day(self) -> bool:
        """All-day events and events whose start and end fall on different dates."""
        return self.all_day or self.start.date() != self.end.date()


@dataclass(frozen=True)
class LayoutGeometry:
    """Visible hour range and vertical scale of a day column."""
    start_hour: float = DEFAULT_START_HOUR
    end_hour: float = DEFAULT_END_HOUR
    px_per_hour: float = WEEK_CELLS_HEIGHT

    def __post_init__(self):
        if self.end_hour <= self.start_hour:
            raise ValueError(
                f"end_hour ({self.end_hour}) must be greater than start_hour ({self.start_hour})"
            )
        if self.px_per_hour <= 0:
            raise ValueError(f"px_per_hour must be positive, got {self.px_per_hour}")

    @property
    def visible_hours(self) -> float:
        return self.end_hour - self.start_hour

    @property
    def column_height(self) -> float:
        return self.visible_hours * self.px_per_hour


@dataclass(frozen=True)
class PositionedEvent:
    """A timed event placed in a day column for one layout pass."""
    event: ResolvedEvent
    column: int
    top: float
    height: float
    left: float
    width: float
    z_index: int


class Corners(Enum):
    """Which ends of a spanning bar are rounded."""
    BOTH = 'both'
    LEFT = 'left'
    RIGHT = 'right'
    NONE = 'none'


@dataclass(frozen=True)
class DaySegment:
    """The part of a multi-day event that falls on one visible day."""
    event: ResolvedEvent
    day: date
    is_first_day: bool
    is_last_day: bool
    included: bool
    show_title: bool = True

    @property
    def corners(self) -> Corners:
        from .layout.spans import corner_rounding
        return corner_rounding(self.is_first_day, self.is_last_day)


@dataclass(frozen=True)
class MonthCell:
    """Items shown in one month cell plus how many did not fit."""
    day: date
    shown: List[ResolvedEvent]
    overflow: int
    total: int
    in_current_month: bool = True

    @property
    def has_more(self) -> bool:
        return self.overflow > 0


@dataclass(frozen=True)
class TimeCursor:
    """Vertical position of "now" inside the visible hour range."""
    fraction: float
    visible: bool

    @property
    def percent(self) -> float:
        return self.fraction * 100


class DiagnosticKind(Enum):
    INVALID_TIMESTAMP = 'invalid_timestamp'
    END_BEFORE_START = 'end_before_start'
    MISSING_ID = 'missing_id'
    EMPTY_TITLE = 'empty_title'


@dataclass(frozen=True)
class LayoutDiagnostic:
    """A problem found in one event while laying it out."""
    kind: DiagnosticKind
    event_id: Optional[str]
    message: str
    excluded: bool = False


@dataclass
class WeekLayout:
    """Everything the week view paints for its visible days."""
    days: List[date]
    all_day: List[List[DaySegment]] = field(default_factory=list)
    timed: List[List[PositionedEvent]] = field(default_factory=list)

    @property
    def has_all_day_row(self) -> bool:
        return any(self.all_day)
