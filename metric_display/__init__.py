#!/usr/bin/env python3
"""
LED Grid Metric Display

Turns issue/PR counts into proportional colored bars on a fixed LED grid.
"""

from .errors import (
    MetricDisplayError,
    LengthMismatch,
    CapacityExceeded,
    MetricNotImplemented,
    HardwareError,
    GridOverflow,
)
from .metrics import Color, ColumnRatio, ColumnCount, Metric, OFF
from .quantizer import quantize
from .column_renderer import render_column, column_rows
from .grid_composer import GridComposer, display_metrics

__version__ = "1.0.0"
__all__ = [
    "MetricDisplayError", "LengthMismatch", "CapacityExceeded",
    "MetricNotImplemented", "HardwareError", "GridOverflow",
    "Color", "ColumnRatio", "ColumnCount", "Metric", "OFF",
    "quantize", "render_column", "column_rows",
    "GridComposer", "display_metrics",
]
