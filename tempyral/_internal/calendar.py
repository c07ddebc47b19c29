"""ISO calendar utilities for Tempyral.

This module provides internal functions for proleptic Gregorian (ISO 8601)
calendar calculations. Dates are converted to and from epoch days, the
number of days since 1970-01-01 (epoch day 0).

Years use astronomical numbering: year 0 is 1 BCE, year -1 is 2 BCE.

This module is not part of the public API.
"""

from __future__ import annotations

from typing import NamedTuple

from tempyral._internal.constants import (
    DAYS_IN_MONTH,
    MAX_EPOCH_DAY,
    MIN_EPOCH_DAY,
    NANOS_PER_DAY,
)


class IsoDate(NamedTuple):
    """A proleptic Gregorian date; the internal currency of all calendars."""

    year: int
    month: int
    day: int


def is_leap_year(year: int) -> bool:
    """Check if a year is a leap year in the proleptic Gregorian calendar.

    A year is a leap year if:
    - Divisible by 4, AND
    - NOT divisible by 100, unless also divisible by 400

    Args:
        year: The year to check (can be negative for BCE).

    Returns:
        True if the year is a leap year.

    Examples:
        >>> is_leap_year(2000)  # Divisible by 400
        True
        >>> is_leap_year(1900)  # Divisible by 100 but not 400
        False
        >>> is_leap_year(2024)
        True
    """
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in a given month.

    Args:
        year: The year (needed for February in leap years).
        month: The month (1-12).

    Returns:
        Number of days in the month.

    Raises:
        ValueError: If month is not in 1-12.
    """
    if month < 1 or month > 12:
        raise ValueError(f"month must be 1-12, got {month}")

    if month == 2 and is_leap_year(year):
        return 29
    return DAYS_IN_MONTH[month]


def days_in_year(year: int) -> int:
    """Return 366 for leap years, 365 otherwise."""
    return 366 if is_leap_year(year) else 365


def epoch_days_from_iso(year: int, month: int, day: int) -> int:
    """Convert an ISO year, month, day to days since 1970-01-01.

    The day may lie outside the month (e.g. day 0 or day 32); the result is
    then the corresponding number of days before or after the month start.
    This makes the function usable for date balancing.

    Args:
        year: The year (astronomical, can be 0 or negative).
        month: The month (1-12).
        day: The day, not necessarily within the month.

    Returns:
        The epoch day number.

    Examples:
        >>> epoch_days_from_iso(1970, 1, 1)
        0
        >>> epoch_days_from_iso(2000, 3, 1)
        11017
    """
    # Shift the year to start in March so the leap day is the last day
    y = year - 1 if month <= 2 else year
    era = y // 400
    yoe = y - era * 400
    mp = (month + 9) % 12
    doy = (153 * mp + 2) // 5
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146097 + doe - 719468 + (day - 1)


def iso_from_epoch_days(epoch_days: int) -> IsoDate:
    """Convert days since 1970-01-01 to an ISO date.

    Args:
        epoch_days: The epoch day number.

    Returns:
        The IsoDate for that day.

    Examples:
        >>> iso_from_epoch_days(0)
        IsoDate(year=1970, month=1, day=1)
        >>> iso_from_epoch_days(-1)
        IsoDate(year=1969, month=12, day=31)
    """
    z = epoch_days + 719468
    era = z // 146097
    doe = z - era * 146097
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return IsoDate(year, month, day)


def balance_iso_year_month(year: int, month: int) -> tuple[int, int]:
    """Carry months outside 1-12 into the year."""
    year_delta, month_index = divmod(month - 1, 12)
    return year + year_delta, month_index + 1


def add_days_to_iso_date(date: IsoDate, days: int) -> IsoDate:
    """Return the ISO date a number of days after (or before) date."""
    if days == 0:
        return date
    return iso_from_epoch_days(epoch_days_from_iso(*date) + days)


def compare_iso_date(one: IsoDate, two: IsoDate) -> int:
    """Return -1, 0 or 1 comparing two ISO dates chronologically."""
    if one == two:
        return 0
    return -1 if one < two else 1


def iso_day_of_week(epoch_days: int) -> int:
    """Return the ISO day of week (Monday=1, Sunday=7).

    1970-01-01 was a Thursday.

    Examples:
        >>> iso_day_of_week(0)
        4
    """
    return (epoch_days + 3) % 7 + 1


def iso_week_of_year(year: int, month: int, day: int) -> tuple[int, int]:
    """Return the ISO 8601 (week, week-year) pair for a date.

    Weeks start on Monday and week 1 contains the year's first Thursday.
    Dates in late December may belong to week 1 of the next year, dates in
    early January to the last week of the previous year.

    Examples:
        >>> iso_week_of_year(2021, 1, 1)
        (53, 2020)
        >>> iso_week_of_year(2019, 12, 30)
        (1, 2020)
    """
    epoch_days = epoch_days_from_iso(year, month, day)
    day_of_week = iso_day_of_week(epoch_days)
    # The Thursday of this week decides the week-year
    thursday = epoch_days + (4 - day_of_week)
    week_year = iso_from_epoch_days(thursday).year
    first_day = epoch_days_from_iso(week_year, 1, 1)
    week = (thursday - first_day) // 7 + 1
    return week, week_year


def iso_date_within_limits(date: IsoDate) -> bool:
    """Return True if the date is within the supported plain date range."""
    return MIN_EPOCH_DAY <= epoch_days_from_iso(*date) <= MAX_EPOCH_DAY


def utc_epoch_nanoseconds(date: IsoDate, time_nanos: int) -> int:
    """Interpret an ISO date and time-of-day as UTC and return epoch ns."""
    return epoch_days_from_iso(*date) * NANOS_PER_DAY + time_nanos


def iso_date_time_from_epoch_nanoseconds(epoch_ns: int) -> tuple[IsoDate, int]:
    """Split epoch nanoseconds into a UTC ISO date and nanoseconds of day."""
    days, time_nanos = divmod(epoch_ns, NANOS_PER_DAY)
    return iso_from_epoch_days(days), time_nanos


__all__ = [
    "IsoDate",
    "is_leap_year",
    "days_in_month",
    "days_in_year",
    "epoch_days_from_iso",
    "iso_from_epoch_days",
    "balance_iso_year_month",
    "add_days_to_iso_date",
    "compare_iso_date",
    "iso_day_of_week",
    "iso_week_of_year",
    "iso_date_within_limits",
    "utc_epoch_nanoseconds",
    "iso_date_time_from_epoch_nanoseconds",
]
