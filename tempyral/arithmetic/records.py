"""Internal duration records.

Durations are computed on as a date part (years, months, weeks, days) and
a time part held as one int of nanoseconds. Only at the edges is the time
part spread back into hours, minutes and smaller fields.
"""

from __future__ import annotations

from typing import NamedTuple

from tempyral._internal.constants import (
    MAX_DURATION_SECONDS,
    NANOS_PER_DAY,
    NANOS_PER_HOUR,
    NANOS_PER_MICROSECOND,
    NANOS_PER_MILLISECOND,
    NANOS_PER_MINUTE,
    NANOS_PER_SECOND,
)
from tempyral.arithmetic.rounding import sign_of
from tempyral.errors import RangeError
from tempyral.units.timeunit import TemporalUnit

# Exclusive bound on the time part
MAX_TIME_DURATION = MAX_DURATION_SECONDS * NANOS_PER_SECOND

_TIME_UNITS = (
    TemporalUnit.DAY,
    TemporalUnit.HOUR,
    TemporalUnit.MINUTE,
    TemporalUnit.SECOND,
    TemporalUnit.MILLISECOND,
    TemporalUnit.MICROSECOND,
    TemporalUnit.NANOSECOND,
)


class DateDuration(NamedTuple):
    """The calendar part of a duration."""

    years: int = 0
    months: int = 0
    weeks: int = 0
    days: int = 0

    @property
    def sign(self) -> int:
        for value in self:
            if value:
                return sign_of(value)
        return 0


class InternalDuration(NamedTuple):
    """A date part plus a time part in nanoseconds."""

    date: DateDuration
    time: int

    @property
    def sign(self) -> int:
        return self.date.sign or sign_of(self.time)


ZERO_DATE_DURATION = DateDuration()


def check_time_duration(nanoseconds: int) -> int:
    """Raise RangeError unless |nanoseconds| < 2^53 seconds."""
    if abs(nanoseconds) >= MAX_TIME_DURATION:
        raise RangeError("duration time part is out of range")
    return nanoseconds


def time_duration_from_components(
    hours: int,
    minutes: int,
    seconds: int,
    milliseconds: int,
    microseconds: int,
    nanoseconds: int,
) -> int:
    """Sum time fields into nanoseconds."""
    return check_time_duration(
        hours * NANOS_PER_HOUR
        + minutes * NANOS_PER_MINUTE
        + seconds * NANOS_PER_SECOND
        + milliseconds * NANOS_PER_MILLISECOND
        + microseconds * NANOS_PER_MICROSECOND
        + nanoseconds
    )


def add_24_hour_days(time_nanoseconds: int, days: int) -> int:
    """Fold days of exactly 24 hours into a time part."""
    return check_time_duration(time_nanoseconds + days * NANOS_PER_DAY)


def combine_date_and_time_duration(date: DateDuration, time: int) -> InternalDuration:
    """Build an InternalDuration, rejecting parts of opposite sign."""
    date_sign = date.sign
    time_sign = sign_of(time)
    if date_sign and time_sign and date_sign != time_sign:
        raise RangeError("date and time parts of a duration have mixed signs")
    return InternalDuration(date, time)


def balance_time_duration(
    nanoseconds: int, largest_unit: TemporalUnit
) -> dict[TemporalUnit, int]:
    """Spread nanoseconds over days..nanoseconds, starting at largest_unit.

    Date units balance up to days; the top unit absorbs everything above it.

    Examples:
        >>> balance_time_duration(90 * 60 * 10**9, TemporalUnit.HOUR)[TemporalUnit.MINUTE]
        30
        >>> balance_time_duration(90 * 60 * 10**9, TemporalUnit.MINUTE)[TemporalUnit.MINUTE]
        90
    """
    top = TemporalUnit.DAY if largest_unit.is_date_unit else largest_unit
    sign = -1 if nanoseconds < 0 else 1
    remaining = abs(nanoseconds)
    result: dict[TemporalUnit, int] = {}
    for unit in _TIME_UNITS:
        if unit > top:
            result[unit] = 0
            continue
        value, remaining = divmod(remaining, unit.nanoseconds)
        result[unit] = sign * value
    return result


__all__ = [
    "MAX_TIME_DURATION",
    "DateDuration",
    "InternalDuration",
    "ZERO_DATE_DURATION",
    "check_time_duration",
    "time_duration_from_components",
    "add_24_hour_days",
    "combine_date_and_time_duration",
    "balance_time_duration",
]
