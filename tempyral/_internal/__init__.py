"""Internal utilities for Tempyral.

This module contains private implementation details:
    - ISO calendar day arithmetic
    - Constants and limits
    - Field validation and overflow regulation
    - Option enumerations
    - Custom decorators (@memoize)

Note: This module is not part of the public API.
"""

from __future__ import annotations

from tempyral._internal.decorators import memoize
from tempyral._internal.validation import (
    regulate_iso_date,
    regulate_time,
    to_integer,
    validate_range,
)

__all__: list[str] = [
    "memoize",
    "regulate_iso_date",
    "regulate_time",
    "to_integer",
    "validate_range",
]
