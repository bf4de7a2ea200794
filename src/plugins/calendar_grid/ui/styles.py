"""Calendar styling and visual constants."""

from typing import Dict

# Day/week grid
DEFAULT_START_HOUR: int = 0
DEFAULT_END_HOUR: int = 24
WEEK_CELLS_HEIGHT: int = 64    # px per hour

# Month cells
EVENT_HEIGHT: int = 24
EVENT_GAP: int = 4
AGENDA_DAYS_TO_SHOW: int = 30

# Image layout
HEADER_HEIGHT: int = 48
ALL_DAY_ROW_HEIGHT: int = 26
TIME_GUTTER_WIDTH: int = 56
PADDING: int = 6
TASK_PADDING: int = 2
CORNER_RADIUS: int = 4
MONTH_DAY_LABEL_HEIGHT: int = 22

# Fonts
FONT_PATH: str = "DejaVuSans.ttf"
DEFAULT_FONT_SIZE: int = 14
DEFAULT_TASK_FONT_SIZE: int = 11
MAX_TITLE_LENGTH: int = 25

# Grid colors
GRID_COLOR: str = '#e5e5e5'
HEADER_COLOR: str = '#f7f7f7'
TODAY_HEADER_COLOR: str = '#a27b77'
NOW_LINE_COLOR: str = '#a27b77'
MUTED_TEXT_COLOR: str = '#999999'

# Fill colors per EventColor value
EVENT_FILLS: Dict[str, str] = {
    'sky': '#e3cdbf',
    'amber': '#fef3c7',
    'violet': '#ede9fe',
    'rose': '#fce7f3',
    'emerald': '#d1fae5',
    'orange': '#ffedd5',
}
EVENT_TEXT_COLOR: str = '#1e1e1e'
DRAFT_OUTLINE_COLOR: str = '#a27b77'
