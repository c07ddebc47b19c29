"""Conversions between tempyral values and the standard library.

This module converts to and from :mod:`datetime` objects. Named zones map
to :class:`zoneinfo.ZoneInfo` and fixed offsets to :class:`datetime.timezone`.

Functions:
    to_py_datetime: ZonedDateTime, PlainDateTime or Instant to datetime.
    from_py_datetime: Aware datetime to ZonedDateTime, naive to PlainDateTime.
    to_py_date, from_py_date: PlainDate and datetime.date.
    to_py_time, from_py_time: PlainTime and datetime.time.
    to_py_timedelta, from_py_timedelta: Duration and datetime.timedelta.

The standard library stores microseconds, so nanosecond digits are dropped
on the way out; its years run from 1 to 9999.

Examples:
    >>> from datetime import datetime
    >>> from zoneinfo import ZoneInfo
    >>> zdt = from_py_datetime(datetime(2020, 3, 8, 12, tzinfo=ZoneInfo("America/Los_Angeles")))
    >>> str(zdt)
    '2020-03-08T12:00:00-07:00[America/Los_Angeles]'
    >>> to_py_datetime(zdt) == datetime(2020, 3, 8, 19, tzinfo=timezone.utc)
    True
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import TYPE_CHECKING, Union
from zoneinfo import ZoneInfo

from tempyral._internal.constants import NANOS_PER_MICROSECOND
from tempyral.arithmetic.records import ZERO_DATE_DURATION, InternalDuration
from tempyral.arithmetic.rounding import trunc_div
from tempyral.errors import RangeError, TempyralTypeError

if TYPE_CHECKING:
    from tempyral.core.date import PlainDate
    from tempyral.core.datetime import PlainDateTime
    from tempyral.core.duration import Duration
    from tempyral.core.instant import Instant
    from tempyral.core.time import PlainTime
    from tempyral.core.zoned import ZonedDateTime
    from tempyral.zones.timezone import TimeZone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MICROSECOND = timedelta(microseconds=1)

ExactType = Union["ZonedDateTime", "PlainDateTime", "Instant"]


def _check_py_year(year: int) -> None:
    if not 1 <= year <= 9999:
        raise RangeError(f"year {year} is outside the range of datetime")


def _py_tzinfo(time_zone: TimeZone) -> timezone | ZoneInfo:
    if time_zone.is_fixed_offset:
        offset_ns = time_zone.get_offset_nanoseconds_for(0)
        return timezone(timedelta(microseconds=offset_ns // NANOS_PER_MICROSECOND))
    return ZoneInfo(time_zone.id)


def _time_zone_from_tzinfo(dt: datetime) -> TimeZone:
    from tempyral.zones.timezone import TimeZone, format_offset_nanoseconds

    if isinstance(dt.tzinfo, ZoneInfo) and dt.tzinfo.key:
        return TimeZone(dt.tzinfo.key)
    offset = dt.utcoffset()
    if offset.seconds % 60 or offset.microseconds:
        raise RangeError(f"offset {offset} has seconds and cannot name a time zone")
    if offset == timedelta(0) and dt.tzinfo is timezone.utc:
        return TimeZone("UTC")
    return TimeZone(format_offset_nanoseconds((offset // _ONE_MICROSECOND) * NANOS_PER_MICROSECOND))


def to_py_datetime(value: ExactType) -> datetime:
    """Convert to a standard library datetime.

    A ZonedDateTime becomes an aware datetime in its zone, an Instant an
    aware datetime in UTC, and a PlainDateTime a naive datetime.

    Raises:
        RangeError: If the value is outside datetime's range.
        TempyralTypeError: For other types.
    """
    from tempyral.core.datetime import PlainDateTime
    from tempyral.core.instant import Instant
    from tempyral.core.zoned import ZonedDateTime

    if isinstance(value, PlainDateTime):
        _check_py_year(value.iso_date.year)
        year, month, day = value.iso_date
        return datetime(
            year, month, day, value.hour, value.minute, value.second,
            value.millisecond * 1000 + value.microsecond,
        )
    if isinstance(value, ZonedDateTime):
        tzinfo = _py_tzinfo(value.time_zone)
    elif isinstance(value, Instant):
        tzinfo = timezone.utc
    else:
        raise TempyralTypeError(f"cannot convert {type(value).__name__} to datetime")
    micros = value.epoch_nanoseconds // NANOS_PER_MICROSECOND
    try:
        return (_EPOCH + timedelta(microseconds=micros)).astimezone(tzinfo)
    except OverflowError as exc:
        raise RangeError(f"{value} is outside the range of datetime") from exc


def from_py_datetime(dt: datetime) -> ZonedDateTime | PlainDateTime:
    """Convert a datetime.

    Aware datetimes become a ZonedDateTime in the ISO calendar, keeping
    the exact time; naive ones become a PlainDateTime.

    Examples:
        >>> from_py_datetime(datetime(2024, 1, 15, 9, 30, 0, 250))
        PlainDateTime(2024, 1, 15, 9, 30, 0, 0, 250, 0)
    """
    from tempyral.core.datetime import PlainDateTime
    from tempyral.core.zoned import ZonedDateTime

    if not isinstance(dt, datetime):
        raise TempyralTypeError(f"expected datetime, got {type(dt).__name__}")
    if dt.utcoffset() is None:
        return PlainDateTime(
            dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second,
            dt.microsecond // 1000, dt.microsecond % 1000,
        )
    epoch_ns = ((dt - _EPOCH) // _ONE_MICROSECOND) * NANOS_PER_MICROSECOND
    return ZonedDateTime(epoch_ns, _time_zone_from_tzinfo(dt))


def to_py_date(value: PlainDate) -> date:
    """Convert a PlainDate to a datetime.date using its ISO fields."""
    _check_py_year(value.iso_date.year)
    return date(*value.iso_date)


def from_py_date(d: date) -> PlainDate:
    from tempyral.core.date import PlainDate

    if isinstance(d, datetime):
        d = d.date()
    return PlainDate(d.year, d.month, d.day)


def to_py_time(value: PlainTime) -> time:
    return time(
        value.hour, value.minute, value.second, value.millisecond * 1000 + value.microsecond
    )


def from_py_time(t: time) -> PlainTime:
    """Convert a datetime.time; its tzinfo, if any, is ignored."""
    from tempyral.core.time import PlainTime

    return PlainTime(t.hour, t.minute, t.second, t.microsecond // 1000, t.microsecond % 1000)


def to_py_timedelta(duration: Duration) -> timedelta:
    """Convert a Duration of days and time units to a timedelta.

    Days count as 24 hours. Digits below a microsecond are truncated
    toward zero.

    Raises:
        RangeError: If the duration has years, months or weeks, or is too
            large for timedelta.

    Examples:
        >>> from tempyral import Duration
        >>> to_py_timedelta(Duration(days=1, hours=2))
        datetime.timedelta(days=1, seconds=7200)
    """
    if duration.years or duration.months or duration.weeks:
        raise RangeError("only days and time units convert to timedelta")
    nanoseconds = duration._to_internal_with_24_hour_days().time
    try:
        return timedelta(microseconds=trunc_div(nanoseconds, NANOS_PER_MICROSECOND))
    except OverflowError as exc:
        raise RangeError(f"{duration} is too large for timedelta") from exc


def from_py_timedelta(td: timedelta) -> Duration:
    """Convert a timedelta to a Duration balanced from days down.

    Examples:
        >>> from_py_timedelta(timedelta(seconds=-90))
        Duration(minutes=-1, seconds=-30)
    """
    from tempyral.core.duration import Duration
    from tempyral.units.timeunit import TemporalUnit

    micros = td // _ONE_MICROSECOND
    internal = InternalDuration(ZERO_DATE_DURATION, micros * NANOS_PER_MICROSECOND)
    return Duration._from_internal(internal, TemporalUnit.DAY)


__all__ = [
    "to_py_datetime",
    "from_py_datetime",
    "to_py_date",
    "from_py_date",
    "to_py_time",
    "from_py_time",
    "to_py_timedelta",
    "from_py_timedelta",
]
