#!/usr/bin/env python3
"""
Grid composition

Lays an ordered list of metrics out in consecutive grid columns, writes them
into a display surface and flushes once.
"""

from typing import Iterable, List

from grid_layout import COLUMN_CAPACITY

from .column_renderer import column_rows, render_column
from .errors import GridOverflow, MetricNotImplemented
from .metrics import Color, ColumnCount, ColumnRatio, Metric
from .quantizer import quantize


class GridComposer:
    """Renders metrics onto a display surface it does not own"""

    def __init__(self, display, capacity: int = COLUMN_CAPACITY):
        """
        Args:
            display: Surface exposing width, height, set_pixel(), clear() and flush()
            capacity: Lit pixels available per column
        """
        self.display = display
        self.capacity = min(capacity, display.height)

    def plan(self, metrics: Iterable[Metric]) -> List[List[Color]]:
        """Render every metric into its grid columns without touching the display."""
        columns: List[List[Color]] = []
        for metric in metrics:
            if isinstance(metric, ColumnRatio):
                if len(columns) + metric.width > self.display.width:
                    raise GridOverflow(
                        f"Metrics need {len(columns) + metric.width} columns but the grid is "
                        f"{self.display.width} wide."
                    )
                units = quantize(metric.values, self.capacity)
                column = render_column(units, metric.colors, self.capacity)
                columns.extend([column] * metric.width)
            elif isinstance(metric, ColumnCount):
                raise MetricNotImplemented(
                    f"ColumnCount metrics are not supported yet (width={metric.width}, value={metric.value})"
                )
            else:
                raise TypeError(f"Unknown metric type: {type(metric).__name__}")
        return columns

    def compose(self, metrics: Iterable[Metric]) -> int:
        """
        Run one composition pass.

        Nothing is written to the display unless every metric renders, so a
        failing pass leaves the previous frame on the panel.

        Returns:
            Number of grid columns used
        """
        columns = self.plan(metrics)

        self.display.clear()
        for cursor, column in enumerate(columns):
            for row, color in column_rows(column, self.display.height):
                self.display.set_pixel(cursor, row, color)

        self.display.flush()
        return len(columns)


def display_metrics(display, metrics: Iterable[Metric]) -> int:
    """Compose `metrics` onto `display` in a single pass."""
    return GridComposer(display).compose(metrics)
