"""Comparison operations for temporal types.

This module provides explicit comparison functions for temporal types.
They dispatch to each type's own compare() and give one place to order
mixed collections of values of the same type.

Comparison Rules:
    - Instant, ZonedDateTime: by exact time; zones and calendars are ignored
    - PlainDate, PlainDateTime, PlainYearMonth: by ISO fields; calendars
      are ignored
    - PlainTime: by time of day
    - Duration: by length; calendar units need relative_to
    - PlainMonthDay: equality only; ordering raises TempyralTypeError

Supported Operations:
    - equal: Test equality (values of different types are never equal)
    - compare: Return -1, 0 or 1
    - min_value, max_value: Find extremes
    - clamp: Constrain a value to a range
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Union

from tempyral.errors import RangeError, TempyralTypeError

if TYPE_CHECKING:
    from tempyral.core.date import PlainDate
    from tempyral.core.datetime import PlainDateTime
    from tempyral.core.duration import Duration
    from tempyral.core.instant import Instant
    from tempyral.core.time import PlainTime
    from tempyral.core.yearmonth import PlainYearMonth
    from tempyral.core.zoned import ZonedDateTime

# Type alias for orderable temporal types
ComparableType = Union[
    "Instant",
    "ZonedDateTime",
    "PlainDate",
    "PlainDateTime",
    "PlainTime",
    "PlainYearMonth",
    "Duration",
]


def equal(left: object, right: object) -> bool:
    """Test equality between two temporal values.

    Two values are equal when they have the same type and the type's own
    equality holds (which includes the calendar and time zone).

    Examples:
        >>> from tempyral.core.date import PlainDate
        >>> equal(PlainDate(2024, 1, 15), PlainDate(2024, 1, 15))
        True
        >>> equal(PlainDate(2024, 1, 15), PlainDate(2024, 1, 15, calendar="gregory"))
        False
    """
    if type(left) is not type(right):
        return False
    return left == right


def compare(left: ComparableType, right: ComparableType, relative_to: Any = None) -> int:
    """Compare two temporal values of the same type, returning -1, 0, or 1.

    Args:
        left: First temporal value.
        right: Second temporal value.
        relative_to: Anchor for durations with calendar units.

    Raises:
        TempyralTypeError: If the types differ or are not orderable.
        RangeError: If relative_to is given for a non-duration type.

    Examples:
        >>> from tempyral.core.time import PlainTime
        >>> compare(PlainTime(9), PlainTime(17))
        -1
    """
    from tempyral.core.duration import Duration
    from tempyral.core.monthday import PlainMonthDay

    if type(left) is not type(right):
        raise TempyralTypeError(
            f"cannot compare {type(left).__name__} with {type(right).__name__}"
        )
    if isinstance(left, PlainMonthDay):
        raise TempyralTypeError("PlainMonthDay values have no order")
    if isinstance(left, Duration):
        return Duration.compare(left, right, relative_to=relative_to)
    if relative_to is not None:
        raise RangeError("relative_to only applies to Duration comparisons")
    compare_method = getattr(type(left), "compare", None)
    if compare_method is None:
        raise TempyralTypeError(f"{type(left).__name__} values have no order")
    return compare_method(left, right)


def min_value(*values: ComparableType) -> ComparableType:
    """Return the minimum of the given temporal values.

    Raises:
        ValueError: If no values are given.

    Examples:
        >>> from tempyral.core.date import PlainDate
        >>> min_value(PlainDate(2024, 1, 20), PlainDate(2024, 1, 15))
        PlainDate(2024, 1, 15)
    """
    if not values:
        raise ValueError("min_value requires at least one argument")
    result = values[0]
    for value in values[1:]:
        if compare(value, result) < 0:
            result = value
    return result


def max_value(*values: ComparableType) -> ComparableType:
    """Return the maximum of the given temporal values.

    Raises:
        ValueError: If no values are given.
    """
    if not values:
        raise ValueError("max_value requires at least one argument")
    result = values[0]
    for value in values[1:]:
        if compare(value, result) > 0:
            result = value
    return result


def clamp(
    value: ComparableType,
    min_val: ComparableType,
    max_val: ComparableType,
) -> ComparableType:
    """Clamp a value to be within a range.

    Raises:
        ValueError: If min_val > max_val.

    Examples:
        >>> from tempyral.core.date import PlainDate
        >>> low, high = PlainDate(2024, 1, 10), PlainDate(2024, 1, 20)
        >>> clamp(PlainDate(2024, 1, 5), low, high)
        PlainDate(2024, 1, 10)
    """
    if compare(min_val, max_val) > 0:
        raise ValueError("min_val must be less than or equal to max_val")
    if compare(value, min_val) < 0:
        return min_val
    if compare(value, max_val) > 0:
        return max_val
    return value


__all__ = [
    "equal",
    "compare",
    "min_value",
    "max_value",
    "clamp",
]
