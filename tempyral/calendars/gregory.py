"""Era-based solar calendars built on the generic calendar algorithms.

GregorianCalendar and BuddhistCalendar share ISO month lengths but number
their years differently. Neither overrides date arithmetic: both go through
the month-stepping algorithms of Calendar, the same path a calendar with a
variable number of months per year takes.
"""

from __future__ import annotations

from tempyral._internal.calendar import (
    days_in_month,
    epoch_days_from_iso,
    is_leap_year,
    iso_from_epoch_days,
)
from tempyral.calendars.base import Calendar
from tempyral.errors import RangeError


class GregorianCalendar(Calendar):
    """The Gregorian calendar with "ce" and "bce" eras (id "gregory").

    Examples:
        >>> cal = GregorianCalendar()
        >>> cal.era_for_year(0)
        ('bce', 1)
        >>> cal.year_from_era("bce", 44)
        -43
    """

    __slots__ = ()

    id = "gregory"

    # Offset between calendar years and ISO years
    year_offset = 0

    def months_in_year(self, year: int) -> int:
        return 12

    def days_in_month(self, year: int, month: int) -> int:
        return days_in_month(year - self.year_offset, month)

    def in_leap_year(self, year: int) -> bool:
        return is_leap_year(year - self.year_offset)

    def epoch_day_from_ymd(self, year: int, month: int, day: int) -> int:
        return epoch_days_from_iso(year - self.year_offset, month, day)

    def ymd_from_epoch_day(self, epoch_day: int) -> tuple[int, int, int]:
        year, month, day = iso_from_epoch_days(epoch_day)
        return year + self.year_offset, month, day

    def era_for_year(self, year: int) -> tuple[str | None, int | None]:
        if year > 0:
            return "ce", year
        return "bce", 1 - year

    def year_from_era(self, era: str, era_year: int) -> int:
        if era in ("ce", "ad"):
            return era_year
        if era in ("bce", "bc"):
            return 1 - era_year
        raise RangeError(f"unknown era {era!r} for calendar {self.id}")


class BuddhistCalendar(GregorianCalendar):
    """The Thai solar Buddhist calendar (id "buddhist"), single era "be".

    Years count from 543 BCE: ISO 2024 is Buddhist year 2567.
    """

    __slots__ = ()

    id = "buddhist"

    year_offset = 543

    def era_for_year(self, year: int) -> tuple[str | None, int | None]:
        return "be", year

    def year_from_era(self, era: str, era_year: int) -> int:
        if era == "be":
            return era_year
        raise RangeError(f"unknown era {era!r} for calendar {self.id}")


__all__ = ["GregorianCalendar", "BuddhistCalendar"]
