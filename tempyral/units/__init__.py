"""Temporal units.

This module provides:
    - TemporalUnit: The ten duration units (YEAR through NANOSECOND)
"""

from __future__ import annotations

from tempyral.units.timeunit import TemporalUnit

__all__: list[str] = [
    "TemporalUnit",
]
