"""Validation utilities for Tempyral.

This module provides validation helpers for ensuring temporal values are
integers within valid ranges, and for regulating out-of-range fields
according to an overflow policy.

This module is not part of the public API.
"""

from __future__ import annotations

from numbers import Real

from tempyral._internal.calendar import (
    IsoDate,
    days_in_month,
    iso_date_within_limits,
)
from tempyral._internal.constants import (
    MAX_EPOCH_NANOSECONDS,
    NANOS_PER_DAY,
    NANOS_PER_HOUR,
    NANOS_PER_MICROSECOND,
    NANOS_PER_MILLISECOND,
    NANOS_PER_MINUTE,
    NANOS_PER_SECOND,
)
from tempyral._internal.options import Overflow
from tempyral.errors import RangeError, TempyralTypeError


def to_integer(value: object, name: str) -> int:
    """Convert a numeric field value to an int, rejecting fractions.

    Args:
        value: The value to convert. Integral floats are accepted.
        name: Field name used in error messages.

    Returns:
        The value as an int.

    Raises:
        TempyralTypeError: If value is not a real number.
        RangeError: If value is not finite or has a fractional part.

    Examples:
        >>> to_integer(3, "day")
        3
        >>> to_integer(3.0, "day")
        3
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise TempyralTypeError(
            f"{name} must be a number, got {type(value).__name__}"
        )
    if isinstance(value, int):
        return value
    as_float = float(value)
    if as_float != as_float or as_float in (float("inf"), float("-inf")):
        raise RangeError(f"{name} must be finite, got {value!r}")
    if not as_float.is_integer():
        raise RangeError(f"{name} must be an integer, got {value!r}")
    return int(as_float)


def validate_range(value: int, low: int, high: int, name: str) -> int:
    """Raise RangeError unless low <= value <= high."""
    if value < low or value > high:
        raise RangeError(f"{name} must be between {low} and {high}, got {value}")
    return value


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def regulate_iso_date(year: int, month: int, day: int, overflow: Overflow) -> IsoDate:
    """Apply an overflow policy to ISO date fields.

    Args:
        year: The year.
        month: The month; clamped to 1-12 when constraining.
        day: The day; clamped to the month length when constraining.
        overflow: Overflow.CONSTRAIN or Overflow.REJECT.

    Returns:
        A valid IsoDate.

    Raises:
        RangeError: If overflow is REJECT and any field is out of range.

    Examples:
        >>> regulate_iso_date(2021, 2, 31, Overflow.CONSTRAIN)
        IsoDate(year=2021, month=2, day=28)
    """
    if overflow is Overflow.REJECT:
        validate_range(month, 1, 12, "month")
        validate_range(day, 1, days_in_month(year, month), "day")
        return IsoDate(year, month, day)
    if month < 1 or day < 1:
        raise RangeError(f"month and day must be positive, got {month}, {day}")
    month = min(month, 12)
    day = min(day, days_in_month(year, month))
    return IsoDate(year, month, day)


def regulate_time(
    hour: int,
    minute: int,
    second: int,
    millisecond: int,
    microsecond: int,
    nanosecond: int,
    overflow: Overflow,
) -> int:
    """Apply an overflow policy to time fields and return nanoseconds of day.

    Raises:
        RangeError: If overflow is REJECT and any field is out of range, or
            any field is negative.
    """
    if overflow is Overflow.REJECT:
        validate_range(hour, 0, 23, "hour")
        validate_range(minute, 0, 59, "minute")
        validate_range(second, 0, 59, "second")
        validate_range(millisecond, 0, 999, "millisecond")
        validate_range(microsecond, 0, 999, "microsecond")
        validate_range(nanosecond, 0, 999, "nanosecond")
    else:
        for name, value in (
            ("hour", hour),
            ("minute", minute),
            ("second", second),
            ("millisecond", millisecond),
            ("microsecond", microsecond),
            ("nanosecond", nanosecond),
        ):
            if value < 0:
                raise RangeError(f"{name} must not be negative, got {value}")
        hour = _clamp(hour, 0, 23)
        minute = _clamp(minute, 0, 59)
        # Leap seconds are not modelled; second 60 constrains to 59
        second = _clamp(second, 0, 59)
        millisecond = _clamp(millisecond, 0, 999)
        microsecond = _clamp(microsecond, 0, 999)
        nanosecond = _clamp(nanosecond, 0, 999)
    return (
        hour * NANOS_PER_HOUR
        + minute * NANOS_PER_MINUTE
        + second * NANOS_PER_SECOND
        + millisecond * NANOS_PER_MILLISECOND
        + microsecond * NANOS_PER_MICROSECOND
        + nanosecond
    )


def check_iso_date(date: IsoDate) -> IsoDate:
    """Raise RangeError if the date is outside the supported range."""
    if not iso_date_within_limits(date):
        raise RangeError(f"date {date.year}-{date.month:02d}-{date.day:02d} is out of range")
    return date


def check_epoch_nanoseconds(epoch_ns: int) -> int:
    """Raise RangeError unless |epoch_ns| <= 8.64e21."""
    if not -MAX_EPOCH_NANOSECONDS <= epoch_ns <= MAX_EPOCH_NANOSECONDS:
        raise RangeError(f"epoch nanoseconds {epoch_ns} out of range")
    return epoch_ns


def check_utc_date_time(utc_ns: int) -> int:
    """Raise RangeError unless a date-time read as UTC is within one day of range."""
    if not -MAX_EPOCH_NANOSECONDS - NANOS_PER_DAY < utc_ns < MAX_EPOCH_NANOSECONDS + NANOS_PER_DAY:
        raise RangeError("date-time is out of range")
    return utc_ns


__all__ = [
    "to_integer",
    "validate_range",
    "regulate_iso_date",
    "regulate_time",
    "check_iso_date",
    "check_epoch_nanoseconds",
    "check_utc_date_time",
]
