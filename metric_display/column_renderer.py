#!/usr/bin/env python3
"""
Column rendering: unit distribution + colors -> bottom-anchored pixel stack
"""

from typing import Iterator, List, Sequence, Tuple

from grid_layout import COLUMN_CAPACITY

from .errors import CapacityExceeded, LengthMismatch
from .metrics import Color, OFF


def render_column(units: Sequence[int], colors: Sequence[Color],
                  capacity: int = COLUMN_CAPACITY) -> List[Color]:
    """
    Stack each category's pixels in input order.

    Args:
        units: Pixel count per category
        colors: Color per category, parallel to `units`
        capacity: Pixels available in the column

    Returns:
        Lit pixels from the bottom up; element 0 is the bottom row
    """
    if len(units) != len(colors):
        raise LengthMismatch(
            f"Number of values ({len(units)}) does not match number of colors ({len(colors)})."
        )

    lit = sum(units)
    if lit > capacity:
        raise CapacityExceeded(f"Number of lit pixels ({lit}) cannot exceed {capacity}.")

    column: List[Color] = []
    for count, color in zip(units, colors):
        column.extend([color] * count)
    return column


def column_rows(column: Sequence[Color], height: int = COLUMN_CAPACITY) -> Iterator[Tuple[int, Color]]:
    """Yield (row, color) for every row of a column, top row is 0, unlit rows OFF."""
    if len(column) > height:
        raise CapacityExceeded(f"Column of {len(column)} pixels does not fit {height} rows.")
    for row in range(height):
        index = height - 1 - row
        yield row, column[index] if index < len(column) else OFF
