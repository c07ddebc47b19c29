"""The ISO 8601 calendar.

The proleptic Gregorian calendar with ISO week numbering. It is the
calendar every other calendar converts through, so its arithmetic is
written in closed form rather than with the generic month-stepping
algorithms of the base class.
"""

from __future__ import annotations

from tempyral._internal.calendar import (
    IsoDate,
    add_days_to_iso_date,
    balance_iso_year_month,
    compare_iso_date,
    days_in_month,
    days_in_year,
    epoch_days_from_iso,
    is_leap_year,
    iso_from_epoch_days,
    iso_week_of_year,
)
from tempyral._internal.options import Overflow
from tempyral._internal.validation import check_iso_date, regulate_iso_date
from tempyral.calendars.base import Calendar
from tempyral.units.timeunit import TemporalUnit


class ISO8601Calendar(Calendar):
    """The ISO 8601 calendar (id "iso8601").

    Examples:
        >>> cal = ISO8601Calendar()
        >>> cal.date_add(IsoDate(2021, 1, 31), 0, 1, 0, 0, Overflow.CONSTRAIN)
        IsoDate(year=2021, month=2, day=28)
        >>> cal.date_until(IsoDate(2021, 1, 31), IsoDate(2021, 3, 1), TemporalUnit.MONTH)
        (0, 1, 0, 1)
    """

    __slots__ = ()

    id = "iso8601"

    def months_in_year(self, year: int) -> int:
        return 12

    def days_in_month(self, year: int, month: int) -> int:
        return days_in_month(year, month)

    def days_in_year(self, year: int) -> int:
        return days_in_year(year)

    def in_leap_year(self, year: int) -> bool:
        return is_leap_year(year)

    def epoch_day_from_ymd(self, year: int, month: int, day: int) -> int:
        return epoch_days_from_iso(year, month, day)

    def ymd_from_epoch_day(self, epoch_day: int) -> tuple[int, int, int]:
        return tuple(iso_from_epoch_days(epoch_day))

    def week_of_year(self, epoch_day: int) -> tuple[int | None, int | None]:
        return iso_week_of_year(*iso_from_epoch_days(epoch_day))

    def date_add(
        self,
        date: IsoDate,
        years: int,
        months: int,
        weeks: int,
        days: int,
        overflow: Overflow,
    ) -> IsoDate:
        year, month = balance_iso_year_month(date.year + years, date.month + months)
        regulated = regulate_iso_date(year, month, date.day, overflow)
        return check_iso_date(add_days_to_iso_date(regulated, weeks * 7 + days))

    def date_until(
        self, one: IsoDate, two: IsoDate, largest_unit: TemporalUnit
    ) -> tuple[int, int, int, int]:
        sign = -compare_iso_date(one, two)
        if sign == 0:
            return 0, 0, 0, 0
        years = months = weeks = 0
        start = one
        if largest_unit in (TemporalUnit.YEAR, TemporalUnit.MONTH):
            if largest_unit is TemporalUnit.YEAR:
                years = two.year - one.year
                while years and self._surpasses(
                    sign, (one.year + years, one.month, one.day), two
                ):
                    years -= sign
            months = (two.year - one.year - years) * 12 + two.month - one.month
            while months and self._surpasses(
                sign,
                (*balance_iso_year_month(one.year + years, one.month + months), one.day),
                two,
            ):
                months -= sign
            year, month = balance_iso_year_month(one.year + years, one.month + months)
            start = IsoDate(year, month, min(one.day, days_in_month(year, month)))
        days = epoch_days_from_iso(*two) - epoch_days_from_iso(*start)
        if largest_unit is TemporalUnit.WEEK:
            weeks = sign * (abs(days) // 7)
            days -= weeks * 7
        return years, months, weeks, days

    def month_day_reference_year(self) -> int:
        return 1972


__all__ = ["ISO8601Calendar"]
