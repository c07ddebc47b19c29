"""Rounding and totalling durations relative to an anchor.

A duration measured from a starting date-time is rounded by "nudging" its
smallest unit to one of the two neighbouring multiples of the increment and
then "bubbling" any overflow into larger units. Calendar units get their
real length from the calendar (and, for days in a time zone, from the
zone's rules), so one month from January 31 is the span to February 28.

The anchor is passed as an ISO date, nanoseconds of day, an optional
TimeZone (None for plain date-times, which are measured as UTC) and a
Calendar.
"""

from __future__ import annotations

from fractions import Fraction
from typing import TYPE_CHECKING, NamedTuple

from tempyral._internal.calendar import (
    IsoDate,
    add_days_to_iso_date,
    utc_epoch_nanoseconds,
)
from tempyral._internal.constants import NANOS_PER_DAY
from tempyral._internal.options import Disambiguation, Overflow, RoundingMode
from tempyral._internal.validation import check_epoch_nanoseconds, check_utc_date_time
from tempyral.arithmetic.records import (
    DateDuration,
    InternalDuration,
    add_24_hour_days,
    combine_date_and_time_duration,
)
from tempyral.arithmetic.rounding import (
    apply_unsigned_rounding_mode,
    get_unsigned_rounding_mode,
    round_number_to_increment,
    sign_of,
    trunc_div,
)
from tempyral.errors import RangeError
from tempyral.units.timeunit import TemporalUnit, larger_of

if TYPE_CHECKING:
    from tempyral.calendars.base import Calendar
    from tempyral.zones.timezone import TimeZone


class NudgeResult(NamedTuple):
    duration: InternalDuration
    epoch_ns: int
    did_expand: bool


def _epoch_ns_for(
    date: IsoDate, time_nanos: int, time_zone: TimeZone | None
) -> int:
    if time_zone is None:
        return utc_epoch_nanoseconds(date, time_nanos)
    return time_zone.get_epoch_nanoseconds_for(date, time_nanos, Disambiguation.COMPATIBLE)


def _add_date_duration(calendar: Calendar, date: IsoDate, duration: DateDuration) -> IsoDate:
    return calendar.date_add(date, *duration, Overflow.CONSTRAIN)


def round_time_duration(
    nanoseconds: int, increment: int, unit: TemporalUnit, mode: RoundingMode
) -> int:
    """Round a time part to an increment of a time unit (days are 24 hours)."""
    return round_number_to_increment(nanoseconds, increment * unit.nanoseconds, mode)


def total_time_duration(nanoseconds: int, unit: TemporalUnit) -> Fraction:
    """Express a time part in a unit (days are 24 hours)."""
    return Fraction(nanoseconds, unit.nanoseconds)


def nudge_to_calendar_unit(
    sign: int,
    duration: InternalDuration,
    dest_epoch_ns: int,
    date: IsoDate,
    time_nanos: int,
    time_zone: TimeZone | None,
    calendar: Calendar,
    increment: int,
    unit: TemporalUnit,
    mode: RoundingMode,
) -> tuple[NudgeResult, Fraction]:
    """Round the smallest unit when it is a calendar unit (or a zoned day).

    The two candidate endpoints are computed by adding the truncated and the
    expanded duration to the anchor; the fraction of the way dest_epoch_ns
    lies between them decides the rounding.

    Returns:
        The nudge result and the exact total in the unit.
    """
    years, months, weeks, days = duration.date
    if unit is TemporalUnit.YEAR:
        r1 = round_number_to_increment(years, increment, RoundingMode.TRUNC)
        r2 = r1 + increment * sign
        start_duration = DateDuration(r1, 0, 0, 0)
        end_duration = DateDuration(r2, 0, 0, 0)
    elif unit is TemporalUnit.MONTH:
        r1 = round_number_to_increment(months, increment, RoundingMode.TRUNC)
        r2 = r1 + increment * sign
        start_duration = DateDuration(years, r1, 0, 0)
        end_duration = DateDuration(years, r2, 0, 0)
    elif unit is TemporalUnit.WEEK:
        weeks_start = _add_date_duration(calendar, date, DateDuration(years, months, 0, 0))
        weeks_end = add_days_to_iso_date(weeks_start, days)
        extra_weeks = calendar.date_until(weeks_start, weeks_end, TemporalUnit.WEEK)[2]
        r1 = round_number_to_increment(weeks + extra_weeks, increment, RoundingMode.TRUNC)
        r2 = r1 + increment * sign
        start_duration = DateDuration(years, months, r1, 0)
        end_duration = DateDuration(years, months, r2, 0)
    else:
        r1 = round_number_to_increment(days, increment, RoundingMode.TRUNC)
        r2 = r1 + increment * sign
        start_duration = DateDuration(years, months, weeks, r1)
        end_duration = DateDuration(years, months, weeks, r2)

    start_date = date if r1 == 0 else _add_date_duration(calendar, date, start_duration)
    end_date = _add_date_duration(calendar, date, end_duration)
    start_epoch_ns = _epoch_ns_for(start_date, time_nanos, time_zone)
    end_epoch_ns = _epoch_ns_for(end_date, time_nanos, time_zone)
    if end_epoch_ns == start_epoch_ns:
        raise RangeError("cannot round a duration across an empty calendar unit")

    progress = Fraction(dest_epoch_ns - start_epoch_ns, end_epoch_ns - start_epoch_ns)
    total = r1 + progress * increment * sign
    if progress == 1:
        rounded_unit = abs(r2)
    else:
        unsigned_mode = get_unsigned_rounding_mode(mode, sign < 0)
        rounded_unit = apply_unsigned_rounding_mode(abs(total), abs(r1), abs(r2), unsigned_mode)

    if rounded_unit == abs(r2):
        result = NudgeResult(
            combine_date_and_time_duration(end_duration, 0), end_epoch_ns, True
        )
    else:
        result = NudgeResult(
            combine_date_and_time_duration(start_duration, 0), start_epoch_ns, False
        )
    return result, total


def nudge_to_zoned_time(
    sign: int,
    duration: InternalDuration,
    date: IsoDate,
    time_nanos: int,
    time_zone: TimeZone,
    calendar: Calendar,
    increment: int,
    unit: TemporalUnit,
    mode: RoundingMode,
) -> NudgeResult:
    """Round a time unit of a zoned duration, using the real length of the last day."""
    start_date = _add_date_duration(calendar, date, duration.date)
    end_date = add_days_to_iso_date(start_date, sign)
    start_epoch_ns = _epoch_ns_for(start_date, time_nanos, time_zone)
    end_epoch_ns = _epoch_ns_for(end_date, time_nanos, time_zone)
    day_span = end_epoch_ns - start_epoch_ns
    if sign_of(day_span) != sign:
        raise RangeError("time zone day length has an unexpected sign")

    rounded_time = round_time_duration(duration.time, increment, unit, mode)
    beyond_day_span = rounded_time - day_span
    if sign_of(beyond_day_span) != -sign:
        did_round_beyond_day = True
        day_delta = sign
        rounded_time = round_time_duration(beyond_day_span, increment, unit, mode)
        nudged_epoch_ns = end_epoch_ns + rounded_time
    else:
        did_round_beyond_day = False
        day_delta = 0
        nudged_epoch_ns = start_epoch_ns + rounded_time

    years, months, weeks, days = duration.date
    date_duration = DateDuration(years, months, weeks, days + day_delta)
    return NudgeResult(
        combine_date_and_time_duration(date_duration, rounded_time),
        nudged_epoch_ns,
        did_round_beyond_day,
    )


def nudge_to_day_or_time(
    duration: InternalDuration,
    dest_epoch_ns: int,
    largest_unit: TemporalUnit,
    increment: int,
    smallest_unit: TemporalUnit,
    mode: RoundingMode,
) -> NudgeResult:
    """Round days or a time unit, treating days as exactly 24 hours."""
    time = add_24_hour_days(duration.time, duration.date.days)
    rounded_time = round_time_duration(time, increment, smallest_unit, mode)
    diff_time = rounded_time - time
    whole_days = trunc_div(time, NANOS_PER_DAY)
    rounded_whole_days = trunc_div(rounded_time, NANOS_PER_DAY)
    day_delta = rounded_whole_days - whole_days
    did_expand_days = sign_of(day_delta) == sign_of(time)
    nudged_epoch_ns = dest_epoch_ns + diff_time

    days = 0
    remainder = rounded_time
    if largest_unit.is_date_unit:
        days = rounded_whole_days
        remainder = rounded_time - rounded_whole_days * NANOS_PER_DAY

    years, months, weeks, _ = duration.date
    date_duration = DateDuration(years, months, weeks, days)
    return NudgeResult(
        combine_date_and_time_duration(date_duration, remainder),
        nudged_epoch_ns,
        did_expand_days,
    )


def bubble_relative_duration(
    sign: int,
    duration: InternalDuration,
    nudged_epoch_ns: int,
    date: IsoDate,
    time_nanos: int,
    time_zone: TimeZone | None,
    calendar: Calendar,
    largest_unit: TemporalUnit,
    smallest_unit: TemporalUnit,
) -> InternalDuration:
    """Carry a rounded-up unit into the larger units, up to largest_unit."""
    if smallest_unit == largest_unit:
        return duration
    units = list(TemporalUnit)
    for index in range(smallest_unit.rank - 1, largest_unit.rank - 1, -1):
        unit = units[index]
        if unit is TemporalUnit.WEEK and largest_unit is not TemporalUnit.WEEK:
            continue
        years, months, weeks, _ = duration.date
        if unit is TemporalUnit.YEAR:
            end_duration = DateDuration(years + sign, 0, 0, 0)
        elif unit is TemporalUnit.MONTH:
            end_duration = DateDuration(years, months + sign, 0, 0)
        else:
            end_duration = DateDuration(years, months, weeks + sign, 0)
        end_date = _add_date_duration(calendar, date, end_duration)
        end_epoch_ns = _epoch_ns_for(end_date, time_nanos, time_zone)
        beyond_end = nudged_epoch_ns - end_epoch_ns
        if sign_of(beyond_end) == -sign:
            break
        duration = combine_date_and_time_duration(end_duration, 0)
    return duration


def round_relative_duration(
    duration: InternalDuration,
    dest_epoch_ns: int,
    date: IsoDate,
    time_nanos: int,
    time_zone: TimeZone | None,
    calendar: Calendar,
    largest_unit: TemporalUnit,
    increment: int,
    smallest_unit: TemporalUnit,
    mode: RoundingMode,
) -> InternalDuration:
    """Round a duration that ends at dest_epoch_ns when started from the anchor.

    Examples:
        >>> from tempyral.calendars import get_calendar
        >>> from tempyral.arithmetic.records import DateDuration, InternalDuration
        >>> start = IsoDate(2021, 1, 31)
        >>> end = utc_epoch_nanoseconds(IsoDate(2021, 3, 16), 0)
        >>> round_relative_duration(
        ...     InternalDuration(DateDuration(0, 1, 0, 16), 0), end, start, 0, None,
        ...     get_calendar(), TemporalUnit.MONTH, 1, TemporalUnit.MONTH,
        ...     RoundingMode.HALF_EXPAND).date
        DateDuration(years=0, months=2, weeks=0, days=0)
    """
    irregular_length = smallest_unit.is_calendar_unit or (
        time_zone is not None and smallest_unit is TemporalUnit.DAY
    )
    sign = -1 if duration.sign < 0 else 1
    if irregular_length:
        nudge, _ = nudge_to_calendar_unit(
            sign, duration, dest_epoch_ns, date, time_nanos, time_zone, calendar,
            increment, smallest_unit, mode,
        )
    elif time_zone is not None:
        nudge = nudge_to_zoned_time(
            sign, duration, date, time_nanos, time_zone, calendar, increment,
            smallest_unit, mode,
        )
    else:
        nudge = nudge_to_day_or_time(
            duration, dest_epoch_ns, largest_unit, increment, smallest_unit, mode
        )
    duration = nudge.duration
    if nudge.did_expand and smallest_unit is not TemporalUnit.WEEK:
        duration = bubble_relative_duration(
            sign, duration, nudge.epoch_ns, date, time_nanos, time_zone, calendar,
            largest_unit, larger_of(smallest_unit, TemporalUnit.DAY),
        )
    return duration


def total_relative_duration(
    duration: InternalDuration,
    dest_epoch_ns: int,
    date: IsoDate,
    time_nanos: int,
    time_zone: TimeZone | None,
    calendar: Calendar,
    unit: TemporalUnit,
) -> Fraction:
    """Express a duration from the anchor as an exact number of units."""
    if unit.is_calendar_unit or (time_zone is not None and unit is TemporalUnit.DAY):
        sign = -1 if duration.sign < 0 else 1
        _, total = nudge_to_calendar_unit(
            sign, duration, dest_epoch_ns, date, time_nanos, time_zone, calendar,
            1, unit, RoundingMode.TRUNC,
        )
        return total
    time = add_24_hour_days(duration.time, duration.date.days)
    return total_time_duration(time, unit)


def add_date_time(
    date: IsoDate,
    time_nanos: int,
    calendar: Calendar,
    duration: InternalDuration,
    overflow: Overflow,
) -> tuple[IsoDate, int]:
    """Add a duration to a plain date-time.

    The time part is added first; whole days that spill over join the date
    part, which the calendar then adds to the date.

    Raises:
        RangeError: If the result is outside the supported range.
    """
    days, time_nanos = divmod(time_nanos + duration.time, NANOS_PER_DAY)
    years, months, weeks, date_days = duration.date
    new_date = calendar.date_add(date, years, months, weeks, date_days + days, overflow)
    check_utc_date_time(utc_epoch_nanoseconds(new_date, time_nanos))
    return new_date, time_nanos


def add_zoned_date_time(
    epoch_ns: int,
    time_zone: TimeZone,
    calendar: Calendar,
    duration: InternalDuration,
    overflow: Overflow = Overflow.CONSTRAIN,
) -> int:
    """Add a duration to an instant seen in a time zone.

    The date part moves the wall clock (resolved with "compatible"); the
    time part is then added on the exact timeline.

    Examples:
        >>> from tempyral.calendars import get_calendar
        >>> from tempyral.zones import TimeZone
        >>> tz = TimeZone("America/Los_Angeles")
        >>> start = tz.get_epoch_nanoseconds_for(IsoDate(2020, 3, 7), 12 * 3600 * 10**9)
        >>> end = add_zoned_date_time(
        ...     start, tz, get_calendar(), InternalDuration(DateDuration(days=1), 0))
        >>> (end - start) // (3600 * 10**9)
        23
    """
    if duration.date.sign == 0:
        return check_epoch_nanoseconds(epoch_ns + duration.time)
    date, time_nanos = time_zone.get_iso_date_time_for(epoch_ns)
    new_date = calendar.date_add(date, *duration.date, overflow)
    intermediate = time_zone.get_epoch_nanoseconds_for(
        new_date, time_nanos, Disambiguation.COMPATIBLE
    )
    return check_epoch_nanoseconds(intermediate + duration.time)


__all__ = [
    "NudgeResult",
    "round_time_duration",
    "total_time_duration",
    "nudge_to_calendar_unit",
    "nudge_to_zoned_time",
    "nudge_to_day_or_time",
    "bubble_relative_duration",
    "round_relative_duration",
    "total_relative_duration",
    "add_date_time",
    "add_zoned_date_time",
]
