"""Calendar rendering and drawing functionality."""

from PIL import Image, ImageDraw, ImageFont
from datetime import date, datetime
from typing import List, Optional, Sequence, Tuple
import logging
import textwrap

from .styles import (
    HEADER_HEIGHT, ALL_DAY_ROW_HEIGHT, TIME_GUTTER_WIDTH, PADDING, TASK_PADDING,
    CORNER_RADIUS, MONTH_DAY_LABEL_HEIGHT, EVENT_HEIGHT, EVENT_GAP,
    DEFAULT_FONT_SIZE, DEFAULT_TASK_FONT_SIZE, MAX_TITLE_LENGTH, FONT_PATH,
    GRID_COLOR, HEADER_COLOR, TODAY_HEADER_COLOR, NOW_LINE_COLOR, MUTED_TEXT_COLOR,
    EVENT_FILLS, EVENT_TEXT_COLOR, DRAFT_OUTLINE_COLOR
)
from ..models import (
    Corners, DaySegment, LayoutGeometry, MonthCell, PositionedEvent, ResolvedEvent,
    TimeCursor, WeekLayout
)
from ..layout.spans import segment_span
from ..time_cursor import cursor_applies_to

logger = logging.getLogger(__name__)

# (top-left, top-right, bottom-right, bottom-left)
CORNER_FLAGS = {
    Corners.BOTH: (True, True, True, True),
    Corners.LEFT: (True, False, False, True),
    Corners.RIGHT: (False, True, True, False),
    Corners.NONE: (False, False, False, False),
}


class CalendarRenderer:
    """Paints laid-out calendar views onto Pillow images."""

    def __init__(self):
        """Initialize the calendar renderer."""
        self.header_font = None
        self.task_font = None
        self._load_fonts()

    def _load_fonts(self) -> None:
        """Load fonts for calendar display with fallback to default."""
        try:
            self.header_font = ImageFont.truetype(FONT_PATH, DEFAULT_FONT_SIZE)
            self.task_font = ImageFont.truetype(FONT_PATH, DEFAULT_TASK_FONT_SIZE)
        except OSError as e:
            logger.warning(f"Failed to load custom fonts: {e}. Using default fonts.")
            self.header_font = ImageFont.load_default()
            self.task_font = ImageFont.load_default()

    @staticmethod
    def measure_month_cell(height: int, week_count: int) -> float:
        """
        Height available for event rows in one month cell.

        This is the value the host hands to compute_capacity; one row is kept
        free for the "+N more" marker.
        """
        cell_height = (height - HEADER_HEIGHT) / max(1, week_count)
        return cell_height - MONTH_DAY_LABEL_HEIGHT - (EVENT_HEIGHT + EVENT_GAP)

    def get_item_color(self, item: ResolvedEvent) -> str:
        return EVENT_FILLS.get(item.color.value, EVENT_FILLS['sky'])

    def _chars_for_width(self, width: float) -> int:
        return max(1, int(width / (DEFAULT_TASK_FONT_SIZE * 0.6)))

    def render_week(self, layout: WeekLayout, geometry: LayoutGeometry, now: datetime,
                    width: int, cursor: Optional[TimeCursor] = None) -> Image.Image:
        """
        Paint a week (or single day) view.

        Args:
            layout: Result of layout_week
            geometry: Geometry the layout was computed with
            now: Current instant, used for the today header and the now line
            width: Image width in px
            cursor: Current time cursor; omitted means no now line

        Returns:
            The rendered image
        """
        day_count = max(1, len(layout.days))
        day_width = (width - TIME_GUTTER_WIDTH) // day_count
        all_day_rows = max((len(segments) for segments in layout.all_day), default=0)
        all_day_height = all_day_rows * ALL_DAY_ROW_HEIGHT + (PADDING if all_day_rows else 0)
        grid_top = HEADER_HEIGHT + all_day_height
        height = int(grid_top + geometry.column_height)

        image = Image.new('RGB', (width, height), 'white')
        draw = ImageDraw.Draw(image)

        self.draw_week_header(draw, layout.days, now.date(), day_width)
        self.draw_hour_lines(draw, geometry, grid_top, width)

        for index, day in enumerate(layout.days):
            x = TIME_GUTTER_WIDTH + index * day_width
            draw.line([x, HEADER_HEIGHT, x, height], fill=GRID_COLOR, width=1)

            if index < len(layout.all_day):
                self.draw_all_day_segments(draw, layout.all_day[index], x, day_width)
            if index < len(layout.timed):
                self.draw_positioned_events(draw, layout.timed[index], x, grid_top, day_width)
            if cursor is not None and cursor.visible and cursor_applies_to(now, day):
                self.draw_time_cursor(draw, cursor, x, grid_top, day_width, geometry.column_height)

        logger.info(f"Rendered week view {width}x{height} for {len(layout.days)} days")
        return image

    def draw_week_header(self, draw: ImageDraw.ImageDraw, days: Sequence[date], today: date,
                         day_width: int) -> None:
        """Draw the day headers, highlighting today."""
        for index, day in enumerate(days):
            x = TIME_GUTTER_WIDTH + index * day_width
            is_today = day == today
            header_color = TODAY_HEADER_COLOR if is_today else HEADER_COLOR
            text_color = 'white' if is_today else 'black'

            draw.rectangle([x, 0, x + day_width, HEADER_HEIGHT], outline=GRID_COLOR, fill=header_color)
            draw.text((x + PADDING, PADDING), day.strftime('%a %d'),
                      fill=text_color, font=self.header_font)

    def draw_hour_lines(self, draw: ImageDraw.ImageDraw, geometry: LayoutGeometry,
                        grid_top: int, width: int) -> None:
        hour = int(geometry.start_hour)
        while hour <= geometry.end_hour:
            y = grid_top + (hour - geometry.start_hour) * geometry.px_per_hour
            draw.line([TIME_GUTTER_WIDTH, y, width, y], fill=GRID_COLOR, width=1)
            if hour > geometry.start_hour and hour < geometry.end_hour:
                label = datetime(2000, 1, 1, hour % 24).strftime('%I %p').lstrip('0')
                draw.text((PADDING, y - DEFAULT_TASK_FONT_SIZE // 2), label,
                          fill=MUTED_TEXT_COLOR, font=self.task_font)
            hour += 1

    def draw_all_day_segments(self, draw: ImageDraw.ImageDraw, segments: List[DaySegment],
                              x: int, day_width: int) -> None:
        """Draw the spanning bars of one day; continuation bars carry no title."""
        y = HEADER_HEIGHT + PADDING // 2
        for segment in segments:
            box = [x, y, x + day_width, y + ALL_DAY_ROW_HEIGHT - TASK_PADDING]
            draw.rounded_rectangle(
                box, radius=CORNER_RADIUS, fill=self.get_item_color(segment.event),
                corners=CORNER_FLAGS[segment.corners]
            )
            if segment.show_title:
                title = segment.event.title[:self._chars_for_width(day_width - 2 * PADDING)]
                draw.text((x + PADDING, y + TASK_PADDING), title,
                          fill=EVENT_TEXT_COLOR, font=self.task_font)
            y += ALL_DAY_ROW_HEIGHT

    def draw_positioned_events(self, draw: ImageDraw.ImageDraw, positioned: List[PositionedEvent],
                               x: int, grid_top: int, day_width: int) -> None:
        """Draw timed tiles, lowest z-index first."""
        for item in sorted(positioned, key=lambda p: p.z_index):
            left = x + item.left * day_width + TASK_PADDING
            right = left + item.width * day_width - 2 * TASK_PADDING
            top = grid_top + item.top
            bottom = top + item.height
            self.draw_item(draw, item.event, (left, top, right, bottom))

    def draw_item(self, draw: ImageDraw.ImageDraw, item: ResolvedEvent,
                  box: Tuple[float, float, float, float], title: Optional[str] = None) -> None:
        """Draw a single event tile with wrapped text."""
        left, top, right, bottom = box
        if title is None:
            title = f"{item.start.strftime('%H:%M')} {item.title[:MAX_TITLE_LENGTH]}"

        outline = DRAFT_OUTLINE_COLOR if item.is_draft else 'white'
        draw.rounded_rectangle([left, top, max(left, right), max(top, bottom)],
                               radius=CORNER_RADIUS, fill=self.get_item_color(item),
                               outline=outline)

        line_height = DEFAULT_TASK_FONT_SIZE + 2
        max_lines = max(1, int((bottom - top - TASK_PADDING) // line_height))
        wrapped = textwrap.wrap(title, width=self._chars_for_width(right - left - 2 * TASK_PADDING))
        current_y = top + TASK_PADDING
        for line in wrapped[:max_lines]:
            draw.text((left + TASK_PADDING, current_y), line,
                      fill=EVENT_TEXT_COLOR, font=self.task_font)
            current_y += line_height

    def draw_time_cursor(self, draw: ImageDraw.ImageDraw, cursor: TimeCursor, x: int,
                         grid_top: int, day_width: int, column_height: float) -> None:
        """Draw the now line across one day column."""
        y = grid_top + cursor.fraction * column_height
        draw.line([x, y, x + day_width, y], fill=NOW_LINE_COLOR, width=2)
        draw.ellipse([x - 3, y - 3, x + 3, y + 3], fill=NOW_LINE_COLOR)

    def render_month(self, weeks: List[List[MonthCell]], today: date, width: int,
                     height: int) -> Image.Image:
        """
        Paint a month grid.

        Args:
            weeks: Rows of laid-out month cells
            today: Highlighted day
            width: Image width in px
            height: Image height in px

        Returns:
            The rendered image
        """
        image = Image.new('RGB', (width, height), 'white')
        draw = ImageDraw.Draw(image)

        week_count = max(1, len(weeks))
        cell_width = width // 7
        cell_height = (height - HEADER_HEIGHT) / week_count

        if weeks and weeks[0]:
            for index, cell in enumerate(weeks[0]):
                x = index * cell_width
                draw.rectangle([x, 0, x + cell_width, HEADER_HEIGHT], outline=GRID_COLOR, fill=HEADER_COLOR)
                draw.text((x + PADDING, PADDING), cell.day.strftime('%a'),
                          fill=MUTED_TEXT_COLOR, font=self.header_font)

        for row, week in enumerate(weeks):
            for column, cell in enumerate(week):
                x = column * cell_width
                y = HEADER_HEIGHT + row * cell_height
                self.draw_month_cell(draw, cell, today, x, y, cell_width, cell_height)

        logger.info(f"Rendered month view {width}x{height} with {len(weeks)} weeks")
        return image

    def draw_month_cell(self, draw: ImageDraw.ImageDraw, cell: MonthCell, today: date,
                        x: float, y: float, cell_width: int, cell_height: float) -> None:
        """Draw one day cell with its shown items and overflow marker."""
        draw.rectangle([x, y, x + cell_width, y + cell_height], outline=GRID_COLOR)

        if cell.day == today:
            label_color = TODAY_HEADER_COLOR
        elif cell.in_current_month:
            label_color = 'black'
        else:
            label_color = MUTED_TEXT_COLOR
        draw.text((x + PADDING, y + TASK_PADDING), cell.day.strftime('%d').lstrip('0'),
                  fill=label_color, font=self.header_font)

        row_y = y + MONTH_DAY_LABEL_HEIGHT
        for item in cell.shown:
            box = (x + TASK_PADDING, row_y, x + cell_width - TASK_PADDING, row_y + EVENT_HEIGHT)
            title = item.title[:self._chars_for_width(cell_width)]
            if item.is_multi_day and not item.is_draft:
                segment = segment_span(item, cell.day)
                draw.rounded_rectangle(list(box), radius=CORNER_RADIUS, fill=self.get_item_color(item),
                                       corners=CORNER_FLAGS[segment.corners])
                if segment.is_first_day:
                    draw.text((box[0] + TASK_PADDING, row_y + TASK_PADDING), title,
                              fill=EVENT_TEXT_COLOR, font=self.task_font)
            else:
                self.draw_item(draw, item, box, title)
            row_y += EVENT_HEIGHT + EVENT_GAP

        if cell.has_more:
            draw.text((x + PADDING, row_y), f"+ {cell.overflow} more",
                      fill=MUTED_TEXT_COLOR, font=self.task_font)
