#!/usr/bin/env python3
"""
Proportional quantizer for a single column.

Converts arbitrary integer magnitudes into whole pixel counts whose sum never
exceeds the column capacity.
"""

import math
from typing import List, Sequence

from grid_layout import COLUMN_CAPACITY

# Only shares above this many pixels may give one back when rounding overflows
OVERFLOW_DONOR_THRESHOLD = 1.5


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def quantize(values: Sequence[int], capacity: int = COLUMN_CAPACITY) -> List[int]:
    """
    Distribute `capacity` pixels across `values` proportionally.

    Each share is rounded half away from zero. When rounding overshoots the
    capacity, the smallest share above 1.5 pixels gives one back (earliest
    index wins ties). Should the overshoot be larger than one pixel, every
    remaining such share gives one back in the same order, and after that the
    largest share keeps giving until the column fits.

    Args:
        values: Non-negative magnitudes, in display order
        capacity: Number of pixels available

    Returns:
        Pixel counts, same length as `values`, summing to at most `capacity`
    """
    if any(v < 0 for v in values):
        raise ValueError(f"Cannot quantize negative values: {list(values)}")

    total = sum(values)
    if total == 0:
        return [0] * len(values)

    raw = [capacity * v / total for v in values]
    units = [_round_half_up(share) for share in raw]

    reduced = set()
    while sum(units) > capacity:
        donors = [i for i, share in enumerate(raw)
                  if share > OVERFLOW_DONOR_THRESHOLD and i not in reduced]
        if donors:
            # min() keeps the first index on equal shares
            donor = min(donors, key=lambda i: raw[i])
        else:
            donor = max((i for i, count in enumerate(units) if count > 0),
                        key=lambda i: (raw[i], -i))
        units[donor] -= 1
        reduced.add(donor)

    return units
