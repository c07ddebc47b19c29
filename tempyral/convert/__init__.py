"""Temporal conversion utilities.

This module provides functions for converting temporal objects to and from
other representations:
    - JSON serialization and deserialization
    - Standard library datetime, date, time and timedelta objects

Examples:
    >>> from tempyral import PlainDateTime
    >>> from tempyral.convert import to_json, from_json

    >>> dt = PlainDateTime(2024, 1, 15, 14, 30, 45)
    >>> data = to_json(dt)
    >>> restored = from_json(data)
    >>> restored == dt
    True

    >>> from tempyral.convert import to_py_datetime, from_py_datetime
    >>> from_py_datetime(to_py_datetime(dt)) == dt
    True
"""

from __future__ import annotations

from tempyral.convert.json import from_json, to_json
from tempyral.convert.stdlib import (
    from_py_date,
    from_py_datetime,
    from_py_time,
    from_py_timedelta,
    to_py_date,
    to_py_datetime,
    to_py_time,
    to_py_timedelta,
)

__all__ = [
    # JSON
    "to_json",
    "from_json",
    # Standard library
    "to_py_datetime",
    "from_py_datetime",
    "to_py_date",
    "from_py_date",
    "to_py_time",
    "from_py_time",
    "to_py_timedelta",
    "from_py_timedelta",
]
