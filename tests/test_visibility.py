"""Unit tests for month cell row capacity."""
import pytest

from plugins.calendar_grid.layout.visibility import compute_capacity
from plugins.calendar_grid.ui.renderer import CalendarRenderer
from plugins.calendar_grid.ui.styles import EVENT_GAP, EVENT_HEIGHT


class TestComputeCapacity:
    """Test cases for compute_capacity."""

    @pytest.mark.parametrize("available,row,gap,expected", [
        (100, 20, 5, 4),
        (70, 20, 5, 3),
        (20, 20, 5, 1),
        (19, 20, 5, 0),
        (0, 20, 5, 0),
    ])
    def test_rows_that_fit(self, available, row, gap, expected):
        assert compute_capacity(available, row, gap) == expected

    def test_negative_height_gives_zero(self):
        assert compute_capacity(-50, 20, 5) == 0

    def test_zero_row_step_gives_zero(self):
        assert compute_capacity(100, 0, 0) == 0

    def test_measured_cell_height(self):
        """Test capacity of a five-week month at 800px."""
        available = CalendarRenderer.measure_month_cell(800, 5)

        assert available == pytest.approx(100.4)
        assert compute_capacity(available, EVENT_HEIGHT, EVENT_GAP) == 3
