"""PlainMonthDay class representing a recurring day of the year.

This module provides the PlainMonthDay class, e.g. "December 25". It has no
year and so no ordering; it is stored as an ISO date in a reference year
(1972 for the ISO calendar, a leap year so that February 29 is valid).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from tempyral._internal.calendar import IsoDate
from tempyral._internal.constants import MONTH_DAY_REFERENCE_YEAR
from tempyral._internal.options import CalendarName, Overflow, get_option
from tempyral._internal.validation import regulate_iso_date, to_integer
from tempyral.calendars import Calendar, CalendarDate, get_calendar
from tempyral.core.fields import check_field_names
from tempyral.errors import TempyralTypeError
from tempyral.format.iso8601 import (
    format_calendar_annotation,
    format_date,
    format_month_day,
    parse_month_day,
)

if TYPE_CHECKING:
    from tempyral.core.date import PlainDate

MONTH_DAY_FIELD_NAMES = frozenset({"year", "month", "month_code", "day", "era", "era_year"})


class PlainMonthDay:
    """A month and day without a year.

    Examples:
        >>> md = PlainMonthDay(2, 29)
        >>> md.month_code
        'M02'
        >>> md.to_plain_date(2023)
        PlainDate(2023, 2, 28)
        >>> PlainMonthDay.from_fields({"month": 2, "day": 29, "year": 2023})
        PlainMonthDay(2, 28)
    """

    __slots__ = ("_iso", "_calendar")

    def __init__(
        self,
        iso_month: int,
        iso_day: int,
        calendar: Calendar | str | None = None,
        reference_iso_year: int = MONTH_DAY_REFERENCE_YEAR,
    ) -> None:
        """Create a PlainMonthDay.

        Raises:
            RangeError: If the month or day is invalid for the reference year.
        """
        self._iso: IsoDate = regulate_iso_date(
            to_integer(reference_iso_year, "reference_iso_year"),
            to_integer(iso_month, "iso_month"),
            to_integer(iso_day, "iso_day"),
            Overflow.REJECT,
        )
        self._calendar: Calendar = get_calendar(calendar)

    @classmethod
    def _create(cls, iso: IsoDate, calendar: Calendar) -> PlainMonthDay:
        result = cls.__new__(cls)
        result._iso = iso
        result._calendar = calendar
        return result

    @classmethod
    def from_fields(
        cls, fields: Mapping[str, Any], overflow: Overflow | str | None = None
    ) -> PlainMonthDay:
        """Create a PlainMonthDay from month (or month_code) and day.

        A year, when given, is only used to regulate the day.
        """
        calendar = get_calendar(fields.get("calendar"))
        rest = {key: value for key, value in fields.items() if key != "calendar"}
        check_field_names(rest, MONTH_DAY_FIELD_NAMES)
        option = get_option(overflow, Overflow, Overflow.CONSTRAIN, "overflow")
        return cls._create(calendar.month_day_from_fields(rest, option), calendar)

    @classmethod
    def from_string(cls, s: str) -> PlainMonthDay:
        """Parse "MM-DD", "--MM-DD", "MMDD" or a full date string.

        Examples:
            >>> PlainMonthDay.from_string("--12-25")
            PlainMonthDay(12, 25)
        """
        parsed = parse_month_day(s)
        calendar = get_calendar(parsed.calendar)
        if calendar.id == "iso8601":
            iso = IsoDate(MONTH_DAY_REFERENCE_YEAR, parsed.date.month, parsed.date.day)
            return cls._create(iso, calendar)
        record = calendar.from_iso(parsed.date)
        iso = calendar.month_day_from_fields(
            {"month_code": record.month_code, "day": record.day}, Overflow.CONSTRAIN
        )
        return cls._create(iso, calendar)

    @classmethod
    def from_value(cls, value: object, overflow: Overflow | str | None = None) -> PlainMonthDay:
        if isinstance(value, PlainMonthDay):
            return value
        if isinstance(value, str):
            return cls.from_string(value)
        if isinstance(value, Mapping):
            return cls.from_fields(value, overflow)
        raise TempyralTypeError(f"cannot convert {type(value).__name__} to PlainMonthDay")

    def _calendar_date(self) -> CalendarDate:
        return self._calendar.from_iso(self._iso)

    @property
    def calendar_id(self) -> str:
        return self._calendar.id

    @property
    def calendar(self) -> Calendar:
        return self._calendar

    @property
    def iso_date(self) -> IsoDate:
        """The ISO date in the reference year."""
        return self._iso

    @property
    def month_code(self) -> str:
        return self._calendar_date().month_code

    @property
    def day(self) -> int:
        return self._calendar_date().day

    def with_fields(
        self, overflow: Overflow | str | None = None, **fields: Any
    ) -> PlainMonthDay:
        """Return a copy with month_code, month or day replaced.

        Examples:
            >>> PlainMonthDay(1, 31).with_fields(month=4)
            PlainMonthDay(4, 30)
        """
        check_field_names(fields, MONTH_DAY_FIELD_NAMES)
        option = get_option(overflow, Overflow, Overflow.CONSTRAIN, "overflow")
        record = self._calendar_date()
        base = {"month_code": record.month_code, "day": record.day}
        merged = self._calendar.merge_fields(base, fields)
        return PlainMonthDay._create(
            self._calendar.month_day_from_fields(merged, option), self._calendar
        )

    def to_plain_date(self, year: int) -> PlainDate:
        """Combine with a calendar year; February 29 constrains in common years."""
        from tempyral.core.date import PlainDate

        record = self._calendar_date()
        fields = {"year": year, "month_code": record.month_code, "day": record.day}
        return PlainDate._create(
            self._calendar.date_from_fields(fields, Overflow.CONSTRAIN), self._calendar
        )

    def to_string(self, *, calendar_name: CalendarName | str | None = None) -> str:
        """Format as MM-DD, or as the full reference date when a calendar is shown."""
        display = get_option(calendar_name, CalendarName, CalendarName.AUTO, "calendar_name")
        shows_year = self._calendar.id != "iso8601" or display in (
            CalendarName.ALWAYS,
            CalendarName.CRITICAL,
        )
        text = format_date(self._iso) if shows_year else format_month_day(self._iso)
        return text + format_calendar_annotation(self._calendar.id, display)

    def to_json(self) -> str:
        return self.to_string()

    def equals(self, other: object) -> bool:
        other = PlainMonthDay.from_value(other)
        return self._iso == other._iso and self._calendar == other._calendar

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlainMonthDay):
            return NotImplemented
        return self._iso == other._iso and self._calendar == other._calendar

    def __hash__(self) -> int:
        return hash(("PlainMonthDay", self._iso, self._calendar.id))

    def __repr__(self) -> str:
        if self._calendar.id == "iso8601":
            return f"PlainMonthDay({self._iso.month}, {self._iso.day})"
        return (
            f"PlainMonthDay({self._iso.month}, {self._iso.day}, "
            f"{self._calendar.id!r}, {self._iso.year})"
        )

    def __str__(self) -> str:
        return self.to_string()


__all__ = ["PlainMonthDay", "MONTH_DAY_FIELD_NAMES"]
