"""Calendar field properties shared by the date-bearing types.

PlainDate, PlainDateTime and ZonedDateTime all expose the same calendar
fields (year, month_code, day_of_week, ...). They get them from this mixin,
which reads a CalendarDate produced by the value's calendar.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from tempyral.calendars.base import CalendarDate
from tempyral.errors import TempyralTypeError

DATE_FIELD_NAMES = frozenset({"year", "month", "month_code", "day", "era", "era_year"})
TIME_FIELD_NAMES = frozenset(
    {"hour", "minute", "second", "millisecond", "microsecond", "nanosecond"}
)


def check_field_names(fields: Mapping[str, Any], allowed: Iterable[str]) -> None:
    """Reject empty or unknown field names in a with_fields() call.

    Raises:
        TempyralTypeError: If fields is empty or names an unknown field.
    """
    allowed = frozenset(allowed)
    unknown = sorted(set(fields) - allowed)
    if unknown:
        raise TempyralTypeError(f"unknown fields: {', '.join(unknown)}")
    if not any(value is not None for value in fields.values()):
        raise TempyralTypeError("at least one field is required")


class CalendarFields:
    """Mixin exposing the calendar fields of a value.

    Subclasses implement _calendar_date().
    """

    __slots__ = ()

    def _calendar_date(self) -> CalendarDate:
        raise NotImplementedError

    def _date_fields(self) -> dict[str, Any]:
        """The fields with_fields() merges onto."""
        record = self._calendar_date()
        return {
            "year": record.year,
            "month": record.month,
            "month_code": record.month_code,
            "day": record.day,
        }

    @property
    def calendar_id(self) -> str:
        """Identifier of the calendar, e.g. "iso8601"."""
        return self._calendar_date().calendar_id

    @property
    def era(self) -> str | None:
        """Era code, or None for calendars without eras."""
        return self._calendar_date().era

    @property
    def era_year(self) -> int | None:
        return self._calendar_date().era_year

    @property
    def year(self) -> int:
        """The calendar year.

        Examples:
            >>> from tempyral import PlainDate
            >>> PlainDate(2024, 1, 15, calendar="buddhist").year
            2567
        """
        return self._calendar_date().year

    @property
    def month(self) -> int:
        """The 1-based month within the calendar year."""
        return self._calendar_date().month

    @property
    def month_code(self) -> str:
        """The month code, e.g. "M01"."""
        return self._calendar_date().month_code

    @property
    def day(self) -> int:
        return self._calendar_date().day

    @property
    def day_of_week(self) -> int:
        """1 (Monday) to 7 (Sunday)."""
        return self._calendar_date().day_of_week

    @property
    def day_of_year(self) -> int:
        return self._calendar_date().day_of_year

    @property
    def week_of_year(self) -> int | None:
        """ISO week number, or None for calendars without weeks."""
        return self._calendar_date().week_of_year

    @property
    def year_of_week(self) -> int | None:
        """The year the week_of_year belongs to, or None."""
        return self._calendar_date().year_of_week

    @property
    def days_in_week(self) -> int:
        return self._calendar_date().days_in_week

    @property
    def days_in_month(self) -> int:
        return self._calendar_date().days_in_month

    @property
    def days_in_year(self) -> int:
        return self._calendar_date().days_in_year

    @property
    def months_in_year(self) -> int:
        return self._calendar_date().months_in_year

    @property
    def in_leap_year(self) -> bool:
        return self._calendar_date().in_leap_year


__all__ = [
    "CalendarFields",
    "DATE_FIELD_NAMES",
    "TIME_FIELD_NAMES",
    "check_field_names",
]
