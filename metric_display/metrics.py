#!/usr/bin/env python3
"""
Metric model: what gets drawn on the grid.

A metric is one of a closed set of variants. Only ``ColumnRatio`` renders
today; ``ColumnCount`` is reserved for a gauge-style column and fails loudly
when composed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Sequence, Tuple, Union


class Color(NamedTuple):
    """8-bit RGB triple"""
    r: int
    g: int
    b: int

    @classmethod
    def of(cls, value: Sequence[int]) -> "Color":
        """Build a Color from any (r, g, b) sequence, validating each channel."""
        channels = tuple(int(c) for c in value)
        if len(channels) != 3:
            raise ValueError(f"Color needs 3 channels, got {len(channels)}")
        for channel in channels:
            if not 0 <= channel <= 255:
                raise ValueError(f"Color channel {channel} outside 0-255")
        return cls(*channels)


OFF = Color(0, 0, 0)


@dataclass(frozen=True)
class ColumnRatio:
    """One proportional bar repeated across `width` identical columns."""
    width: int
    values: Tuple[int, ...]
    colors: Tuple[Color, ...]

    def __init__(self, width: int, values: Sequence[int], colors: Sequence[Sequence[int]]):
        if width < 1:
            raise ValueError(f"ColumnRatio width must be positive, got {width}")
        values = tuple(int(v) for v in values)
        if any(v < 0 for v in values):
            raise ValueError(f"ColumnRatio values must be non-negative: {values}")
        object.__setattr__(self, 'width', int(width))
        object.__setattr__(self, 'values', values)
        object.__setattr__(self, 'colors', tuple(Color.of(c) for c in colors))


@dataclass(frozen=True)
class ColumnCount:
    """Gauge showing a single count. Reserved; composing it raises."""
    width: int
    value: int


Metric = Union[ColumnRatio, ColumnCount]
