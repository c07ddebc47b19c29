"""Temporal arithmetic operations.

This package holds the arithmetic shared by the core types:
    - rounding: the nine rounding modes and increment rounding
    - records: internal duration records and time-duration balancing
    - relative: nudging, bubbling and totals of durations from an anchor
    - difference: differences between dates, date-times, zoned date-times
      and instants

The core classes call these functions; the comparison helpers below are
also part of the public API.

Comparison Operations (from tempyral.arithmetic.comparisons):
    - equal: Test equality
    - compare: Return -1, 0, or 1 for comparison
    - min_value, max_value: Find extremes
    - clamp: Constrain value to range
"""

from __future__ import annotations

from tempyral.arithmetic.comparisons import (
    clamp,
    compare,
    equal,
    max_value,
    min_value,
)

__all__ = [
    "equal",
    "compare",
    "min_value",
    "max_value",
    "clamp",
]
