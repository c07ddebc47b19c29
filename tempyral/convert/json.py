"""JSON serialization and deserialization for temporal objects.

This module provides functions for converting temporal objects to and from
JSON-serializable dictionaries.

Functions:
    to_json: Convert a temporal object to a JSON-serializable dict.
    from_json: Create a temporal object from a JSON dict.

The JSON format uses RFC 9557 strings with type tags for polymorphic
deserialization:

    {"_type": "ZonedDateTime", "value": "2024-01-15T14:30:00+01:00[Europe/Paris]"}
    {"_type": "Instant", "value": "2024-01-15T13:30:00Z"}
    {"_type": "PlainDate", "value": "2024-01-15"}
    {"_type": "Duration", "value": "P1DT2H30M"}

Non-ISO calendars are kept in the string's u-ca annotation.

Examples:
    >>> from tempyral import PlainDate
    >>> from tempyral.convert import to_json, from_json

    >>> data = to_json(PlainDate(2024, 1, 15))
    >>> data
    {'_type': 'PlainDate', 'value': '2024-01-15'}
    >>> from_json(data) == PlainDate(2024, 1, 15)
    True
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Union

from tempyral.errors import ParseError, TempyralTypeError

if TYPE_CHECKING:
    from tempyral.core.date import PlainDate
    from tempyral.core.datetime import PlainDateTime
    from tempyral.core.duration import Duration
    from tempyral.core.instant import Instant
    from tempyral.core.monthday import PlainMonthDay
    from tempyral.core.time import PlainTime
    from tempyral.core.yearmonth import PlainYearMonth
    from tempyral.core.zoned import ZonedDateTime

# Type alias for temporal objects
TemporalType = Union[
    "Instant",
    "ZonedDateTime",
    "PlainDate",
    "PlainTime",
    "PlainDateTime",
    "PlainYearMonth",
    "PlainMonthDay",
    "Duration",
]


def _temporal_types() -> dict[str, type]:
    # Import here to avoid circular imports
    from tempyral.core.date import PlainDate
    from tempyral.core.datetime import PlainDateTime
    from tempyral.core.duration import Duration
    from tempyral.core.instant import Instant
    from tempyral.core.monthday import PlainMonthDay
    from tempyral.core.time import PlainTime
    from tempyral.core.yearmonth import PlainYearMonth
    from tempyral.core.zoned import ZonedDateTime

    return {
        cls.__name__: cls
        for cls in (
            Instant,
            ZonedDateTime,
            PlainDate,
            PlainTime,
            PlainDateTime,
            PlainYearMonth,
            PlainMonthDay,
            Duration,
        )
    }


def to_json(value: TemporalType) -> dict[str, Any]:
    """Convert a temporal object to a JSON-serializable dictionary.

    The returned dictionary includes a `_type` field for polymorphic
    deserialization and a `value` field containing the RFC 9557 string.

    Raises:
        TempyralTypeError: If value is not a supported temporal type.

    Examples:
        >>> from tempyral import Duration, Instant
        >>> to_json(Instant(0))
        {'_type': 'Instant', 'value': '1970-01-01T00:00:00Z'}
        >>> to_json(Duration(hours=-1, minutes=-30))
        {'_type': 'Duration', 'value': '-PT1H30M'}
    """
    type_name = type(value).__name__
    if _temporal_types().get(type_name) is not type(value):
        raise TempyralTypeError(f"expected a temporal value, got {type_name}")
    return {"_type": type_name, "value": value.to_string()}


def from_json(data: dict[str, Any]) -> TemporalType:
    """Create a temporal object from a JSON dictionary.

    Raises:
        ParseError: If the value is missing or malformed.
        TempyralTypeError: If `_type` is missing or not a temporal type.

    Examples:
        >>> from_json({"_type": "PlainTime", "value": "14:30:45"})
        PlainTime(14, 30, 45)
        >>> from_json({"_type": "PlainMonthDay", "value": "12-25"})
        PlainMonthDay(12, 25)
    """
    if not isinstance(data, dict):
        raise TempyralTypeError(f"expected dict, got {type(data).__name__}")
    type_name = data.get("_type")
    if not type_name:
        raise TempyralTypeError("missing '_type' field in JSON data")
    cls = _temporal_types().get(type_name)
    if cls is None:
        raise TempyralTypeError(f"unknown temporal type: {type_name!r}")
    value = data.get("value")
    if not value:
        raise ParseError(f"missing 'value' field for {type_name}")
    return cls.from_string(value)


__all__ = ["to_json", "from_json", "TemporalType"]
