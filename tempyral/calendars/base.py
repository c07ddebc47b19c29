"""Calendar contract and the generic calendar algorithms.

A Calendar maps epoch days to calendar fields and back, and performs
calendar-aware date arithmetic. Concrete calendars provide a handful of
primitives (months per year, days per month, year/month/day <-> epoch day);
the base class builds field resolution, date addition and date difference
on top of them, so calendars with a variable number of months per year plug
in without reimplementing arithmetic.

Dates cross the calendar boundary as IsoDate values; the calendar never
stores state about a particular date.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Mapping

from tempyral._internal.calendar import (
    IsoDate,
    compare_iso_date,
    epoch_days_from_iso,
    iso_day_of_week,
    iso_from_epoch_days,
)
from tempyral._internal.constants import MONTH_DAY_REFERENCE_YEAR
from tempyral._internal.options import Overflow
from tempyral._internal.validation import check_iso_date, to_integer
from tempyral.errors import RangeError, TempyralTypeError
from tempyral.units.timeunit import TemporalUnit

# Larger spans cannot land inside the supported date range.
_MAX_MONTH_SPAN = 13 * 600_000

_MONTH_CODE_RE = re.compile(r"^M(\d{2})(L?)$")

_YEAR_KEYS = ("year", "era", "era_year")
_MONTH_KEYS = ("month", "month_code")


@dataclass(frozen=True)
class CalendarDate:
    """All calendar fields of one day, as computed by a Calendar.

    Attributes:
        calendar_id: Identifier of the calendar that produced the record.
        era: Era code, or None if the calendar has no eras.
        era_year: Year within the era, or None.
        year: Calendar year (may be zero or negative).
        month: 1-based ordinal month within the year.
        month_code: Stable month identifier, e.g. "M01".
        day: Day of the month.
        day_of_week: 1 (Monday) to 7 (Sunday).
        day_of_year: 1-based day of the year.
        week_of_year: Week number, or None for calendars without weeks.
        year_of_week: Year the week belongs to, or None.
        days_in_week: Always 7.
        days_in_month: Length of this month.
        days_in_year: Length of this year.
        months_in_year: Number of months in this year.
        in_leap_year: Whether this year is a leap year.
    """

    calendar_id: str
    era: str | None
    era_year: int | None
    year: int
    month: int
    month_code: str
    day: int
    day_of_week: int
    day_of_year: int
    week_of_year: int | None
    year_of_week: int | None
    days_in_week: int
    days_in_month: int
    days_in_year: int
    months_in_year: int
    in_leap_year: bool


class Calendar(ABC):
    """Base class for calendars.

    Subclasses set ``id`` and implement the primitives. Calendar instances
    are stateless; two calendars are equal when their ids are equal.

    Examples:
        >>> from tempyral.calendars import get_calendar
        >>> cal = get_calendar("gregory")
        >>> cal.from_iso(IsoDate(2024, 1, 15)).era
        'ce'
    """

    __slots__ = ()

    id: ClassVar[str]

    # --- primitives -----------------------------------------------------

    @abstractmethod
    def months_in_year(self, year: int) -> int:
        """Return the number of months in a calendar year."""

    @abstractmethod
    def days_in_month(self, year: int, month: int) -> int:
        """Return the length of an ordinal month."""

    @abstractmethod
    def in_leap_year(self, year: int) -> bool:
        """Return whether a calendar year is a leap year."""

    @abstractmethod
    def epoch_day_from_ymd(self, year: int, month: int, day: int) -> int:
        """Convert valid calendar fields to an epoch day."""

    @abstractmethod
    def ymd_from_epoch_day(self, epoch_day: int) -> tuple[int, int, int]:
        """Convert an epoch day to (year, ordinal month, day)."""

    def days_in_year(self, year: int) -> int:
        """Return the length of a calendar year."""
        return sum(
            self.days_in_month(year, month)
            for month in range(1, self.months_in_year(year) + 1)
        )

    def month_code(self, year: int, month: int) -> str:
        """Return the month code of an ordinal month."""
        return f"M{month:02d}"

    def month_from_code(self, year: int, month_code: str) -> int:
        """Return the ordinal month for a month code in a given year.

        Raises:
            RangeError: If the code is malformed or names a month this
                calendar does not have.
        """
        match = _MONTH_CODE_RE.match(month_code)
        if match is None:
            raise RangeError(f"invalid month code: {month_code!r}")
        number = int(match.group(1))
        if match.group(2) or number < 1 or number > self.months_in_year(year):
            raise RangeError(f"month code {month_code!r} is not valid in {self.id}")
        return number

    def era_for_year(self, year: int) -> tuple[str | None, int | None]:
        """Return (era, era_year) for a calendar year."""
        return None, None

    def year_from_era(self, era: str, era_year: int) -> int:
        """Return the calendar year for an era and year of era."""
        raise RangeError(f"calendar {self.id} has no eras")

    def week_of_year(self, epoch_day: int) -> tuple[int | None, int | None]:
        """Return (week_of_year, year_of_week); None where weeks are undefined."""
        return None, None

    # --- records --------------------------------------------------------

    def from_epoch_day(self, epoch_day: int) -> CalendarDate:
        """Compute the calendar fields of an epoch day.

        Examples:
            >>> from tempyral.calendars import get_calendar
            >>> get_calendar("iso8601").from_epoch_day(0).month_code
            'M01'
        """
        year, month, day = self.ymd_from_epoch_day(epoch_day)
        era, era_year = self.era_for_year(year)
        week, week_year = self.week_of_year(epoch_day)
        return CalendarDate(
            calendar_id=self.id,
            era=era,
            era_year=era_year,
            year=year,
            month=month,
            month_code=self.month_code(year, month),
            day=day,
            day_of_week=iso_day_of_week(epoch_day),
            day_of_year=epoch_day - self.epoch_day_from_ymd(year, 1, 1) + 1,
            week_of_year=week,
            year_of_week=week_year,
            days_in_week=7,
            days_in_month=self.days_in_month(year, month),
            days_in_year=self.days_in_year(year),
            months_in_year=self.months_in_year(year),
            in_leap_year=self.in_leap_year(year),
        )

    def from_iso(self, date: IsoDate) -> CalendarDate:
        """Compute the calendar fields of an ISO date."""
        return self.from_epoch_day(epoch_days_from_iso(*date))

    # --- field resolution -----------------------------------------------

    def _resolve_year(self, fields: Mapping[str, Any], required: bool) -> int | None:
        year = fields.get("year")
        era = fields.get("era")
        era_year = fields.get("era_year")
        if year is not None:
            year = to_integer(year, "year")
        if era is not None or era_year is not None:
            if era is None or era_year is None:
                raise TempyralTypeError("era and era_year must be given together")
            if not isinstance(era, str):
                raise TempyralTypeError(f"era must be a string, got {era!r}")
            from_era = self.year_from_era(era.lower(), to_integer(era_year, "era_year"))
            if year is not None and year != from_era:
                raise RangeError(f"year {year} does not match era {era} {era_year}")
            year = from_era
        if year is None and required:
            raise TempyralTypeError("year is required")
        return year

    def _resolve_month(
        self, fields: Mapping[str, Any], year: int, overflow: Overflow
    ) -> int:
        month = fields.get("month")
        month_code = fields.get("month_code")
        if month is None and month_code is None:
            raise TempyralTypeError("month or month_code is required")
        if month is not None:
            month = to_integer(month, "month")
            if month < 1:
                raise RangeError(f"month must be positive, got {month}")
        if month_code is not None:
            if not isinstance(month_code, str):
                raise TempyralTypeError(f"month_code must be a string, got {month_code!r}")
            from_code = self.month_from_code(year, month_code)
            if month is not None and month != from_code:
                raise RangeError(f"month {month} does not match month_code {month_code}")
            return from_code
        limit = self.months_in_year(year)
        if month > limit:
            if overflow is Overflow.REJECT:
                raise RangeError(f"month must be between 1 and {limit}, got {month}")
            month = limit
        return month

    def _regulate_day(self, year: int, month: int, day: int, overflow: Overflow) -> int:
        if day < 1:
            raise RangeError(f"day must be positive, got {day}")
        limit = self.days_in_month(year, month)
        if day > limit:
            if overflow is Overflow.REJECT:
                raise RangeError(f"day must be between 1 and {limit}, got {day}")
            day = limit
        return day

    @staticmethod
    def _required_day(fields: Mapping[str, Any]) -> int:
        day = fields.get("day")
        if day is None:
            raise TempyralTypeError("day is required")
        return to_integer(day, "day")

    def to_epoch_day(self, fields: Mapping[str, Any], overflow: Overflow) -> int:
        """Resolve calendar fields to an epoch day.

        Args:
            fields: Mapping with year (or era and era_year), month and/or
                month_code, and day.
            overflow: CONSTRAIN clamps month and day, REJECT raises.

        Returns:
            The epoch day.

        Raises:
            TempyralTypeError: If a required field is missing.
            RangeError: If fields conflict or are out of range.
        """
        year = self._resolve_year(fields, required=True)
        month = self._resolve_month(fields, year, overflow)
        day = self._regulate_day(year, month, self._required_day(fields), overflow)
        return self.epoch_day_from_ymd(year, month, day)

    def date_from_fields(self, fields: Mapping[str, Any], overflow: Overflow) -> IsoDate:
        """Resolve calendar fields to an ISO date within the supported range."""
        return check_iso_date(iso_from_epoch_days(self.to_epoch_day(fields, overflow)))

    def year_month_from_fields(
        self, fields: Mapping[str, Any], overflow: Overflow
    ) -> IsoDate:
        """Resolve year and month fields to the ISO date of the month's first day."""
        year = self._resolve_year(fields, required=True)
        month = self._resolve_month(fields, year, overflow)
        return iso_from_epoch_days(self.epoch_day_from_ymd(year, month, 1))

    def month_day_reference_year(self) -> int:
        """The calendar year used to store month-day values."""
        return self.ymd_from_epoch_day(
            epoch_days_from_iso(MONTH_DAY_REFERENCE_YEAR, 12, 31)
        )[0]

    def month_day_from_fields(
        self, fields: Mapping[str, Any], overflow: Overflow
    ) -> IsoDate:
        """Resolve month and day fields to an ISO date in the reference year.

        When a year is supplied the day is regulated against that year first,
        so February 29 constrains to February 28 in a common year.
        """
        year = self._resolve_year(fields, required=False)
        reference = self.month_day_reference_year()
        check_year = reference if year is None else year
        month = self._resolve_month(fields, check_year, overflow)
        day = self._regulate_day(check_year, month, self._required_day(fields), overflow)
        day = min(day, self.days_in_month(reference, month))
        return iso_from_epoch_days(self.epoch_day_from_ymd(reference, month, day))

    def merge_fields(
        self, base: Mapping[str, Any], overlay: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Overlay fields onto base fields.

        month and month_code replace each other, as do year and era/era_year.

        Examples:
            >>> from tempyral.calendars import get_calendar
            >>> get_calendar("iso8601").merge_fields(
            ...     {"year": 2020, "month": 1, "month_code": "M01", "day": 5},
            ...     {"month_code": "M03"},
            ... )
            {'year': 2020, 'day': 5, 'month_code': 'M03'}
        """
        merged = dict(base)
        if any(key in overlay for key in _MONTH_KEYS):
            for key in _MONTH_KEYS:
                merged.pop(key, None)
        if any(key in overlay for key in _YEAR_KEYS):
            for key in _YEAR_KEYS:
                merged.pop(key, None)
        merged.update({key: value for key, value in overlay.items() if value is not None})
        return merged

    # --- arithmetic -----------------------------------------------------

    def _balance_months(self, year: int, month: int) -> tuple[int, int]:
        while month > self.months_in_year(year):
            month -= self.months_in_year(year)
            year += 1
        while month < 1:
            year -= 1
            month += self.months_in_year(year)
        return year, month

    def _add_years(self, year: int, month: int, years: int) -> tuple[int, int]:
        code = self.month_code(year, month)
        year += years
        match = _MONTH_CODE_RE.match(code)
        number = int(match.group(1)) if match else month
        return year, min(number, self.months_in_year(year))

    def _months_between(self, year1: int, month1: int, year2: int, month2: int) -> int:
        if (year1, month1) > (year2, month2):
            return -self._months_between(year2, month2, year1, month1)
        if year1 == year2:
            return month2 - month1
        total = self.months_in_year(year1) - month1
        for year in range(year1 + 1, year2):
            total += self.months_in_year(year)
        return total + month2

    @staticmethod
    def _surpasses(
        sign: int, candidate: tuple[int, int, int], target: tuple[int, int, int]
    ) -> bool:
        if candidate == target:
            return False
        return (candidate > target) == (sign > 0)

    def date_add(
        self,
        date: IsoDate,
        years: int,
        months: int,
        weeks: int,
        days: int,
        overflow: Overflow,
    ) -> IsoDate:
        """Add a date duration to an ISO date.

        Years are added first keeping the month code, then months, then the
        day is constrained or rejected, then weeks and days are added.

        Raises:
            RangeError: If the day is rejected or the result is out of range.
        """
        if abs(months) > _MAX_MONTH_SPAN or abs(years) > _MAX_MONTH_SPAN:
            raise RangeError("date arithmetic result is out of range")
        year, month, day = self.ymd_from_epoch_day(epoch_days_from_iso(*date))
        if years:
            year, month = self._add_years(year, month, years)
        if months:
            year, month = self._balance_months(year, month + months)
        day = self._regulate_day(year, month, day, overflow)
        epoch_day = self.epoch_day_from_ymd(year, month, day) + weeks * 7 + days
        return check_iso_date(iso_from_epoch_days(epoch_day))

    def date_until(
        self, one: IsoDate, two: IsoDate, largest_unit: TemporalUnit
    ) -> tuple[int, int, int, int]:
        """Compute (years, months, weeks, days) from one to two.

        Adding the result to one with constrain reaches two; no unit
        overshoots, so the fields never have mixed signs.
        """
        sign = -compare_iso_date(one, two)
        if sign == 0:
            return 0, 0, 0, 0
        start = epoch_days_from_iso(*one)
        end = epoch_days_from_iso(*two)
        years = months = weeks = 0
        if largest_unit in (TemporalUnit.YEAR, TemporalUnit.MONTH):
            year1, month1, day1 = self.ymd_from_epoch_day(start)
            target = self.ymd_from_epoch_day(end)
            if largest_unit is TemporalUnit.YEAR:
                years = target[0] - year1
                while years and self._surpasses(
                    sign, (*self._add_years(year1, month1, years), day1), target
                ):
                    years -= sign
            base_year, base_month = self._add_years(year1, month1, years)
            months = self._months_between(base_year, base_month, target[0], target[1])
            while months and self._surpasses(
                sign, (*self._balance_months(base_year, base_month + months), day1), target
            ):
                months -= sign
            year, month = self._balance_months(base_year, base_month + months)
            day = min(day1, self.days_in_month(year, month))
            start = self.epoch_day_from_ymd(year, month, day)
        days = end - start
        if largest_unit is TemporalUnit.WEEK:
            weeks = sign * (abs(days) // 7)
            days -= weeks * 7
        return years, months, weeks, days

    # --- identity -------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Calendar):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def __str__(self) -> str:
        return self.id


__all__ = ["Calendar", "CalendarDate"]
