"""PlainYearMonth class representing a month of a calendar year.

This module provides the PlainYearMonth class, e.g. "October 2024". It is
stored as an ISO date whose day is a reference day (the first of the month
in the ISO calendar).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from tempyral._internal.calendar import (
    IsoDate,
    compare_iso_date,
    utc_epoch_nanoseconds,
)
from tempyral._internal.constants import NANOS_PER_DAY
from tempyral._internal.options import CalendarName, Overflow, get_option
from tempyral._internal.validation import regulate_iso_date, to_integer
from tempyral.arithmetic.difference import get_difference_settings
from tempyral.arithmetic.records import DateDuration, InternalDuration
from tempyral.arithmetic.relative import round_relative_duration
from tempyral.arithmetic.rounding import trunc_div
from tempyral.calendars import Calendar, CalendarDate, get_calendar
from tempyral.core.duration import Duration
from tempyral.core.fields import check_field_names
from tempyral.errors import RangeError, TempyralTypeError
from tempyral.format.iso8601 import (
    format_calendar_annotation,
    format_date,
    format_year_month,
    parse_year_month,
)
from tempyral.units.timeunit import TemporalUnit

if TYPE_CHECKING:
    from tempyral.core.date import PlainDate

YEAR_MONTH_FIELD_NAMES = frozenset({"year", "month", "month_code", "era", "era_year"})
YEAR_MONTH_UNITS = frozenset({TemporalUnit.YEAR, TemporalUnit.MONTH})

# -271821-04 .. +275760-09
_MIN_YEAR_MONTH = (-271821, 4)
_MAX_YEAR_MONTH = (275760, 9)


def check_iso_year_month(iso: IsoDate) -> IsoDate:
    """Raise RangeError if the year-month is outside the supported range."""
    if not _MIN_YEAR_MONTH <= (iso.year, iso.month) <= _MAX_YEAR_MONTH:
        raise RangeError(f"year-month {iso.year}-{iso.month:02d} is out of range")
    return iso


class PlainYearMonth:
    """A month in a calendar year, without a day.

    Examples:
        >>> ym = PlainYearMonth(2024, 2)
        >>> ym.days_in_month
        29
        >>> str(ym.add(Duration(months=11)))
        '2025-01'
        >>> PlainYearMonth(2020, 1).until(PlainYearMonth(2021, 3))
        Duration(years=1, months=2)
    """

    __slots__ = ("_iso", "_calendar")

    def __init__(
        self,
        iso_year: int,
        iso_month: int,
        calendar: Calendar | str | None = None,
        reference_iso_day: int = 1,
    ) -> None:
        """Create a PlainYearMonth.

        Args:
            iso_year: ISO year.
            iso_month: ISO month.
            calendar: Calendar or id; ISO by default.
            reference_iso_day: ISO day that anchors the value in non-ISO
                calendars.

        Raises:
            RangeError: If a field is invalid or out of range.
        """
        iso = regulate_iso_date(
            to_integer(iso_year, "iso_year"),
            to_integer(iso_month, "iso_month"),
            to_integer(reference_iso_day, "reference_iso_day"),
            Overflow.REJECT,
        )
        self._iso: IsoDate = check_iso_year_month(iso)
        self._calendar: Calendar = get_calendar(calendar)

    @classmethod
    def _create(cls, iso: IsoDate, calendar: Calendar) -> PlainYearMonth:
        result = cls.__new__(cls)
        result._iso = check_iso_year_month(iso)
        result._calendar = calendar
        return result

    @classmethod
    def from_fields(
        cls, fields: Mapping[str, Any], overflow: Overflow | str | None = None
    ) -> PlainYearMonth:
        """Create a PlainYearMonth from year (or era) and month (or month_code).

        Examples:
            >>> PlainYearMonth.from_fields({"year": 2024, "month": 13})
            PlainYearMonth(2024, 12)
        """
        calendar = get_calendar(fields.get("calendar"))
        rest = {key: value for key, value in fields.items() if key != "calendar"}
        check_field_names(rest, YEAR_MONTH_FIELD_NAMES)
        option = get_option(overflow, Overflow, Overflow.CONSTRAIN, "overflow")
        return cls._create(calendar.year_month_from_fields(rest, option), calendar)

    @classmethod
    def from_string(cls, s: str) -> PlainYearMonth:
        """Parse "YYYY-MM", "YYYYMM" or a full date string.

        Examples:
            >>> PlainYearMonth.from_string("2024-10-15").to_string()
            '2024-10'
        """
        parsed = parse_year_month(s)
        calendar = get_calendar(parsed.calendar)
        record = calendar.from_iso(parsed.date)
        iso = calendar.year_month_from_fields(
            {"year": record.year, "month": record.month}, Overflow.CONSTRAIN
        )
        return cls._create(iso, calendar)

    @classmethod
    def from_value(cls, value: object, overflow: Overflow | str | None = None) -> PlainYearMonth:
        if isinstance(value, PlainYearMonth):
            return value
        if isinstance(value, str):
            return cls.from_string(value)
        if isinstance(value, Mapping):
            return cls.from_fields(value, overflow)
        raise TempyralTypeError(f"cannot convert {type(value).__name__} to PlainYearMonth")

    def _calendar_date(self) -> CalendarDate:
        return self._calendar.from_iso(self._iso)

    def _fields(self) -> dict[str, Any]:
        record = self._calendar_date()
        return {"year": record.year, "month": record.month, "month_code": record.month_code}

    @property
    def calendar_id(self) -> str:
        return self._calendar.id

    @property
    def calendar(self) -> Calendar:
        return self._calendar

    @property
    def iso_date(self) -> IsoDate:
        """The ISO date of the reference day."""
        return self._iso

    @property
    def era(self) -> str | None:
        return self._calendar_date().era

    @property
    def era_year(self) -> int | None:
        return self._calendar_date().era_year

    @property
    def year(self) -> int:
        return self._calendar_date().year

    @property
    def month(self) -> int:
        return self._calendar_date().month

    @property
    def month_code(self) -> str:
        return self._calendar_date().month_code

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

    def with_fields(
        self, overflow: Overflow | str | None = None, **fields: Any
    ) -> PlainYearMonth:
        check_field_names(fields, YEAR_MONTH_FIELD_NAMES)
        option = get_option(overflow, Overflow, Overflow.CONSTRAIN, "overflow")
        merged = self._calendar.merge_fields(self._fields(), fields)
        return PlainYearMonth._create(
            self._calendar.year_month_from_fields(merged, option), self._calendar
        )

    # --- arithmetic -----------------------------------------------------

    def add(self, duration: object, overflow: Overflow | str | None = None) -> PlainYearMonth:
        """Add years and months.

        Raises:
            RangeError: If the duration has weeks, days or time units.
        """
        return self._add(Duration.from_value(duration), overflow)

    def subtract(
        self, duration: object, overflow: Overflow | str | None = None
    ) -> PlainYearMonth:
        return self._add(Duration.from_value(duration).negated(), overflow)

    def _add(self, duration: Duration, overflow: Overflow | str | None) -> PlainYearMonth:
        option = get_option(overflow, Overflow, Overflow.CONSTRAIN, "overflow")
        internal = duration._to_internal()
        if internal.date.weeks or internal.date.days or trunc_div(internal.time, NANOS_PER_DAY):
            raise RangeError("only years and months can be added to a PlainYearMonth")
        first = self._calendar.year_month_from_fields(self._fields(), Overflow.CONSTRAIN)
        added = self._calendar.date_add(
            first, internal.date.years, internal.date.months, 0, 0, option
        )
        record = self._calendar.from_iso(added)
        iso = self._calendar.year_month_from_fields(
            {"year": record.year, "month": record.month}, option
        )
        return PlainYearMonth._create(iso, self._calendar)

    def until(self, other: object, **options: Any) -> Duration:
        """Return the duration to another year-month in years and months.

        Args:
            other: A PlainYearMonth or anything from_value() accepts.
            **options: largest_unit (default year), smallest_unit (default
                month), rounding_mode (default trunc), rounding_increment.
        """
        return self._difference("until", other, options)

    def since(self, other: object, **options: Any) -> Duration:
        return self._difference("since", other, options)

    def _difference(self, operation: str, other: object, options: dict[str, Any]) -> Duration:
        other = PlainYearMonth.from_value(other)
        if self._calendar != other._calendar:
            raise RangeError(
                f"cannot compute a difference between calendars "
                f"{self._calendar.id!r} and {other._calendar.id!r}"
            )
        settings = get_difference_settings(
            operation, options, YEAR_MONTH_UNITS, TemporalUnit.MONTH, TemporalUnit.YEAR
        )
        first = self._calendar.year_month_from_fields(self._fields(), Overflow.CONSTRAIN)
        other_first = other._calendar.year_month_from_fields(other._fields(), Overflow.CONSTRAIN)
        if first == other_first:
            return Duration()
        years, months, _, _ = self._calendar.date_until(first, other_first, settings.largest_unit)
        internal = InternalDuration(DateDuration(years, months), 0)
        if settings.smallest_unit is not TemporalUnit.MONTH or settings.rounding_increment != 1:
            internal = round_relative_duration(
                internal,
                utc_epoch_nanoseconds(other_first, 0),
                first,
                0,
                None,
                self._calendar,
                settings.largest_unit,
                settings.rounding_increment,
                settings.smallest_unit,
                settings.rounding_mode,
            )
        result = Duration._from_internal(internal, TemporalUnit.DAY)
        return result.negated() if operation == "since" else result

    # --- conversion -----------------------------------------------------

    def to_plain_date(self, day: int) -> PlainDate:
        """Combine with a day of the month (constrained to the month length).

        Examples:
            >>> PlainYearMonth(2023, 2).to_plain_date(30)
            PlainDate(2023, 2, 28)
        """
        from tempyral.core.date import PlainDate

        fields = self._fields()
        fields["day"] = day
        return PlainDate._create(
            self._calendar.date_from_fields(fields, Overflow.CONSTRAIN), self._calendar
        )

    def to_string(self, *, calendar_name: CalendarName | str | None = None) -> str:
        """Format as YYYY-MM, or as the full reference date when a calendar is shown.

        Examples:
            >>> PlainYearMonth(2024, 10).to_string(calendar_name="always")
            '2024-10-01[u-ca=iso8601]'
        """
        display = get_option(calendar_name, CalendarName, CalendarName.AUTO, "calendar_name")
        shows_day = self._calendar.id != "iso8601" or display in (
            CalendarName.ALWAYS,
            CalendarName.CRITICAL,
        )
        text = format_date(self._iso) if shows_day else format_year_month(self._iso)
        return text + format_calendar_annotation(self._calendar.id, display)

    def to_json(self) -> str:
        return self.to_string()

    # --- comparison -----------------------------------------------------

    @staticmethod
    def compare(one: object, two: object) -> int:
        """Compare the reference ISO dates. Returns -1, 0 or 1."""
        return compare_iso_date(
            PlainYearMonth.from_value(one)._iso, PlainYearMonth.from_value(two)._iso
        )

    def equals(self, other: object) -> bool:
        other = PlainYearMonth.from_value(other)
        return self._iso == other._iso and self._calendar == other._calendar

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlainYearMonth):
            return NotImplemented
        return self._iso == other._iso and self._calendar == other._calendar

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PlainYearMonth):
            return NotImplemented
        return self._iso < other._iso

    def __le__(self, other: object) -> bool:
        if not isinstance(other, PlainYearMonth):
            return NotImplemented
        return self._iso <= other._iso

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, PlainYearMonth):
            return NotImplemented
        return self._iso > other._iso

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, PlainYearMonth):
            return NotImplemented
        return self._iso >= other._iso

    def __hash__(self) -> int:
        return hash(("PlainYearMonth", self._iso, self._calendar.id))

    def __repr__(self) -> str:
        if self._calendar.id == "iso8601":
            return f"PlainYearMonth({self._iso.year}, {self._iso.month})"
        return (
            f"PlainYearMonth({self._iso.year}, {self._iso.month}, "
            f"{self._calendar.id!r}, {self._iso.day})"
        )

    def __str__(self) -> str:
        return self.to_string()


__all__ = ["PlainYearMonth", "check_iso_year_month"]
