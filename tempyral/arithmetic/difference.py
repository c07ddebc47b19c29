"""Differences between dates, date-times, instants and zoned date-times.

Each difference is computed as an InternalDuration whose largest unit is
the requested one, then optionally rounded relative to the start point.
The public until()/since() methods share the option handling in
get_difference_settings().
"""

from __future__ import annotations

from fractions import Fraction
from typing import TYPE_CHECKING, Any, NamedTuple

from tempyral._internal.calendar import (
    IsoDate,
    add_days_to_iso_date,
    compare_iso_date,
    utc_epoch_nanoseconds,
)
from tempyral._internal.constants import NANOS_PER_DAY
from tempyral._internal.options import (
    Disambiguation,
    RoundingMode,
    get_option,
    get_rounding_increment,
    validate_rounding_increment,
)
from tempyral.arithmetic.records import (
    ZERO_DATE_DURATION,
    DateDuration,
    InternalDuration,
    combine_date_and_time_duration,
)
from tempyral.arithmetic.relative import (
    round_relative_duration,
    round_time_duration,
    total_relative_duration,
    total_time_duration,
)
from tempyral.arithmetic.rounding import sign_of
from tempyral.errors import RangeError, TempyralTypeError
from tempyral.units.timeunit import (
    AUTO,
    TemporalUnit,
    check_unit_allowed,
    get_temporal_unit,
    larger_of,
)

if TYPE_CHECKING:
    from tempyral.calendars.base import Calendar
    from tempyral.zones.timezone import TimeZone


class DifferenceSettings(NamedTuple):
    """Validated options of an until()/since() call."""

    smallest_unit: TemporalUnit
    largest_unit: TemporalUnit
    rounding_mode: RoundingMode
    rounding_increment: int


def get_difference_settings(
    operation: str,
    options: dict[str, Any],
    allowed_units: frozenset[TemporalUnit],
    fallback_smallest_unit: TemporalUnit,
    smallest_largest_default: TemporalUnit,
) -> DifferenceSettings:
    """Validate the options of until() or since().

    Args:
        operation: "until" or "since"; since negates the rounding mode.
        options: The keyword options: largest_unit, smallest_unit,
            rounding_mode and rounding_increment.
        allowed_units: Units valid for this type.
        fallback_smallest_unit: Default smallest unit.
        smallest_largest_default: The largest unit "auto" means, before it
            is widened to fit the smallest unit.

    Raises:
        TempyralTypeError: For unknown unit names or rounding modes.
        RangeError: For units invalid for this type, largest smaller than
            smallest, or an increment that does not divide the unit.
    """
    unknown = set(options) - {
        "largest_unit", "smallest_unit", "rounding_mode", "rounding_increment"
    }
    if unknown:
        raise TempyralTypeError(f"unexpected options: {', '.join(sorted(unknown))}")
    largest = get_temporal_unit(options.get("largest_unit"), "largest_unit", allow_auto=True)
    increment = get_rounding_increment(options.get("rounding_increment"))
    mode = get_option(
        options.get("rounding_mode"), RoundingMode, RoundingMode.TRUNC, "rounding_mode"
    )
    smallest = get_temporal_unit(options.get("smallest_unit"), "smallest_unit")
    check_unit_allowed(largest, allowed_units, "largest_unit")
    check_unit_allowed(smallest, allowed_units, "smallest_unit")
    if operation == "since":
        mode = mode.negate()
    if smallest is None:
        smallest = fallback_smallest_unit
    default_largest = larger_of(smallest_largest_default, smallest)
    if largest is None or largest == AUTO:
        largest = default_largest
    if largest < smallest:
        raise RangeError(
            f"largest_unit {largest.value!r} is smaller than smallest_unit {smallest.value!r}"
        )
    maximum = smallest.maximum_increment
    if maximum is not None:
        validate_rounding_increment(increment, maximum, False)
    return DifferenceSettings(smallest, largest, mode, increment)


def difference_iso_date_time(
    date1: IsoDate,
    time1: int,
    date2: IsoDate,
    time2: int,
    calendar: Calendar,
    largest_unit: TemporalUnit,
) -> InternalDuration:
    """Unrounded difference between two plain date-times.

    When the time of day runs against the dates, one day is borrowed so
    that the date part and the time part share a sign.
    """
    time_difference = time2 - time1
    time_sign = sign_of(time_difference)
    date_sign = compare_iso_date(date1, date2)
    adjusted_date = date2
    if time_sign == date_sign:
        adjusted_date = add_days_to_iso_date(date2, time_sign)
        time_difference -= time_sign * NANOS_PER_DAY
    date_largest = larger_of(TemporalUnit.DAY, largest_unit)
    years, months, weeks, days = calendar.date_until(date1, adjusted_date, date_largest)
    if date_largest is not largest_unit:
        time_difference += days * NANOS_PER_DAY
        days = 0
    return combine_date_and_time_duration(
        DateDuration(years, months, weeks, days), time_difference
    )


def difference_plain_date_time_with_rounding(
    date1: IsoDate,
    time1: int,
    date2: IsoDate,
    time2: int,
    calendar: Calendar,
    settings: DifferenceSettings,
) -> InternalDuration:
    """Difference between two plain date-times, rounded per settings."""
    if date1 == date2 and time1 == time2:
        return InternalDuration(ZERO_DATE_DURATION, 0)
    difference = difference_iso_date_time(
        date1, time1, date2, time2, calendar, settings.largest_unit
    )
    if settings.smallest_unit is TemporalUnit.NANOSECOND and settings.rounding_increment == 1:
        return difference
    dest_epoch_ns = utc_epoch_nanoseconds(date2, time2)
    return round_relative_duration(
        difference,
        dest_epoch_ns,
        date1,
        time1,
        None,
        calendar,
        settings.largest_unit,
        settings.rounding_increment,
        settings.smallest_unit,
        settings.rounding_mode,
    )


def difference_plain_date_time_with_total(
    date1: IsoDate,
    time1: int,
    date2: IsoDate,
    time2: int,
    calendar: Calendar,
    unit: TemporalUnit,
) -> Fraction:
    """Difference between two plain date-times as an exact number of units."""
    if date1 == date2 and time1 == time2:
        return Fraction(0)
    difference = difference_iso_date_time(date1, time1, date2, time2, calendar, unit)
    if unit is TemporalUnit.NANOSECOND:
        return Fraction(difference.time)
    dest_epoch_ns = utc_epoch_nanoseconds(date2, time2)
    return total_relative_duration(
        difference, dest_epoch_ns, date1, time1, None, calendar, unit
    )


def difference_instant(
    epoch_ns1: int,
    epoch_ns2: int,
    increment: int,
    smallest_unit: TemporalUnit,
    mode: RoundingMode,
) -> InternalDuration:
    """Difference between two instants, rounded as a pure time duration."""
    time = round_time_duration(epoch_ns2 - epoch_ns1, increment, smallest_unit, mode)
    return InternalDuration(ZERO_DATE_DURATION, time)


def difference_zoned_date_time(
    epoch_ns1: int,
    epoch_ns2: int,
    time_zone: TimeZone,
    calendar: Calendar,
    largest_unit: TemporalUnit,
) -> InternalDuration:
    """Unrounded difference between two instants seen in a time zone.

    The date part is measured on the wall clock. The time part is exact, so
    days shortened or lengthened by a transition are not 24 hours.
    """
    if epoch_ns1 == epoch_ns2:
        return InternalDuration(ZERO_DATE_DURATION, 0)
    sign = -1 if epoch_ns2 < epoch_ns1 else 1
    start_date, start_time = time_zone.get_iso_date_time_for(epoch_ns1)
    end_date, end_time = time_zone.get_iso_date_time_for(epoch_ns2)
    if start_date == end_date:
        return InternalDuration(ZERO_DATE_DURATION, epoch_ns2 - epoch_ns1)

    day_correction = 1 if sign_of(end_time - start_time) == -sign else 0
    max_day_correction = 1 if sign == -1 else 2
    while day_correction <= max_day_correction:
        intermediate_date = add_days_to_iso_date(end_date, -day_correction * sign)
        intermediate_ns = time_zone.get_epoch_nanoseconds_for(
            intermediate_date, start_time, Disambiguation.COMPATIBLE
        )
        time_difference = epoch_ns2 - intermediate_ns
        if sign_of(time_difference) != -sign:
            break
        day_correction += 1
    else:
        raise RangeError("could not balance zoned difference; the time zone rules are inconsistent")

    date_largest = larger_of(largest_unit, TemporalUnit.DAY)
    date_difference = calendar.date_until(start_date, intermediate_date, date_largest)
    return combine_date_and_time_duration(DateDuration(*date_difference), time_difference)


def difference_zoned_date_time_with_rounding(
    epoch_ns1: int,
    epoch_ns2: int,
    time_zone: TimeZone,
    calendar: Calendar,
    settings: DifferenceSettings,
) -> InternalDuration:
    """Difference between two zoned date-times, rounded per settings."""
    if not settings.largest_unit.is_date_unit:
        return difference_instant(
            epoch_ns1,
            epoch_ns2,
            settings.rounding_increment,
            settings.smallest_unit,
            settings.rounding_mode,
        )
    difference = difference_zoned_date_time(
        epoch_ns1, epoch_ns2, time_zone, calendar, settings.largest_unit
    )
    if settings.smallest_unit is TemporalUnit.NANOSECOND and settings.rounding_increment == 1:
        return difference
    start_date, start_time = time_zone.get_iso_date_time_for(epoch_ns1)
    return round_relative_duration(
        difference,
        epoch_ns2,
        start_date,
        start_time,
        time_zone,
        calendar,
        settings.largest_unit,
        settings.rounding_increment,
        settings.smallest_unit,
        settings.rounding_mode,
    )


def difference_zoned_date_time_with_total(
    epoch_ns1: int,
    epoch_ns2: int,
    time_zone: TimeZone,
    calendar: Calendar,
    unit: TemporalUnit,
) -> Fraction:
    """Difference between two zoned date-times as an exact number of units."""
    if not unit.is_date_unit:
        return total_time_duration(epoch_ns2 - epoch_ns1, unit)
    difference = difference_zoned_date_time(epoch_ns1, epoch_ns2, time_zone, calendar, unit)
    start_date, start_time = time_zone.get_iso_date_time_for(epoch_ns1)
    return total_relative_duration(
        difference, epoch_ns2, start_date, start_time, time_zone, calendar, unit
    )


__all__ = [
    "DifferenceSettings",
    "get_difference_settings",
    "difference_iso_date_time",
    "difference_plain_date_time_with_rounding",
    "difference_plain_date_time_with_total",
    "difference_instant",
    "difference_zoned_date_time",
    "difference_zoned_date_time_with_rounding",
    "difference_zoned_date_time_with_total",
]
