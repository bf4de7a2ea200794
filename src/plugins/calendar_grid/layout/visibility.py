"""Row capacity of a month cell."""

import math


def compute_capacity(available_height: float, row_height: float, gap: float) -> int:
    """
    Number of fixed-height rows that fit in the space a cell offers.

    ``available_height`` is measured by the host on a reference cell and must
    be supplied again whenever layout changes (resize, font load, zoom).

    Args:
        available_height: Height of the cell's event area in px
        row_height: Height of one event row in px
        gap: Vertical gap between rows in px

    Returns:
        max(0, floor((available_height + gap) / (row_height + gap)))
    """
    step = row_height + gap
    if step <= 0:
        return 0
    return max(0, math.floor((available_height + gap) / step))
