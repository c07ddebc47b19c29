"""PlainDate class representing a calendar date.

This module provides the PlainDate class. A PlainDate stores an ISO date
and a calendar; the calendar's view of the date (year, month_code, era,
week_of_year, ...) is computed from the ISO date on request.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from tempyral._internal.calendar import (
    IsoDate,
    compare_iso_date,
    epoch_days_from_iso,
    utc_epoch_nanoseconds,
)
from tempyral._internal.constants import NANOS_PER_DAY
from tempyral._internal.options import (
    CalendarName,
    Disambiguation,
    Overflow,
    get_option,
)
from tempyral._internal.validation import (
    check_iso_date,
    regulate_iso_date,
    to_integer,
)
from tempyral.arithmetic.difference import get_difference_settings
from tempyral.arithmetic.records import DateDuration, InternalDuration
from tempyral.arithmetic.relative import round_relative_duration
from tempyral.arithmetic.rounding import trunc_div
from tempyral.calendars import Calendar, CalendarDate, get_calendar
from tempyral.core.duration import Duration
from tempyral.core.fields import DATE_FIELD_NAMES, CalendarFields, check_field_names
from tempyral.core.time import PlainTime
from tempyral.errors import RangeError, TempyralTypeError
from tempyral.format.iso8601 import (
    format_calendar_annotation,
    format_date,
    parse_plain_date_time,
)
from tempyral.units.timeunit import DATE_UNITS, TemporalUnit

if TYPE_CHECKING:
    from tempyral.core.datetime import PlainDateTime
    from tempyral.core.monthday import PlainMonthDay
    from tempyral.core.yearmonth import PlainYearMonth
    from tempyral.core.zoned import ZonedDateTime
    from tempyral.zones.timezone import TimeZone


class PlainDate(CalendarFields):
    """A calendar date without a time or time zone.

    Attributes:
        year, month, month_code, day: The date in its calendar.
        calendar_id: The calendar, "iso8601" by default.

    Examples:
        >>> d = PlainDate(2021, 1, 31)
        >>> d.add(Duration(months=1))
        PlainDate(2021, 2, 28)
        >>> d.add(Duration(months=1), overflow="reject")
        Traceback (most recent call last):
        ...
        tempyral.errors.RangeError: day must be between 1 and 28, got 31
        >>> PlainDate(2024, 1, 15).day_of_week
        1
    """

    __slots__ = ("_iso", "_calendar")

    def __init__(
        self,
        iso_year: int,
        iso_month: int,
        iso_day: int,
        calendar: Calendar | str | None = None,
    ) -> None:
        """Create a PlainDate from ISO year, month and day.

        Raises:
            RangeError: If the date is invalid or out of range.
            TempyralTypeError: If calendar is not a Calendar or id.
        """
        iso = regulate_iso_date(
            to_integer(iso_year, "iso_year"),
            to_integer(iso_month, "iso_month"),
            to_integer(iso_day, "iso_day"),
            Overflow.REJECT,
        )
        self._iso: IsoDate = check_iso_date(iso)
        self._calendar: Calendar = get_calendar(calendar)

    @classmethod
    def _create(cls, iso: IsoDate, calendar: Calendar) -> PlainDate:
        result = cls.__new__(cls)
        result._iso = check_iso_date(iso)
        result._calendar = calendar
        return result

    @classmethod
    def from_fields(
        cls, fields: Mapping[str, Any], overflow: Overflow | str | None = None
    ) -> PlainDate:
        """Create a PlainDate from calendar fields.

        Args:
            fields: year (or era and era_year), month or month_code, day,
                and optionally calendar.
            overflow: "constrain" (default) or "reject".

        Examples:
            >>> PlainDate.from_fields({"year": 2021, "month_code": "M02", "day": 30})
            PlainDate(2021, 2, 28)
            >>> PlainDate.from_fields(
            ...     {"era": "be", "era_year": 2564, "month": 1, "day": 1, "calendar": "buddhist"}
            ... ).iso_year
            2021
        """
        calendar = get_calendar(fields.get("calendar"))
        date_fields = {key: value for key, value in fields.items() if key != "calendar"}
        check_field_names(date_fields, DATE_FIELD_NAMES)
        option = get_option(overflow, Overflow, Overflow.CONSTRAIN, "overflow")
        return cls._create(calendar.date_from_fields(date_fields, option), calendar)

    @classmethod
    def from_string(cls, s: str) -> PlainDate:
        """Parse an RFC 9557 date or date-time string; the time is dropped.

        Raises:
            ParseError: If the string is malformed or has a "Z" designator.

        Examples:
            >>> PlainDate.from_string("2020-01-01T10:00[u-ca=gregory]").calendar_id
            'gregory'
        """
        parsed = parse_plain_date_time(s)
        return cls._create(parsed.date, get_calendar(parsed.calendar))

    @classmethod
    def from_value(cls, value: object, overflow: Overflow | str | None = None) -> PlainDate:
        """Convert a PlainDate, PlainDateTime, ZonedDateTime, string or mapping."""
        from tempyral.core.datetime import PlainDateTime
        from tempyral.core.zoned import ZonedDateTime

        if isinstance(value, PlainDate):
            return value
        if isinstance(value, (PlainDateTime, ZonedDateTime)):
            return value.to_plain_date()
        if isinstance(value, str):
            return cls.from_string(value)
        if isinstance(value, Mapping):
            return cls.from_fields(value, overflow)
        raise TempyralTypeError(f"cannot convert {type(value).__name__} to PlainDate")

    # --- fields ---------------------------------------------------------

    def _calendar_date(self) -> CalendarDate:
        return self._calendar.from_iso(self._iso)

    @property
    def calendar(self) -> Calendar:
        return self._calendar

    @property
    def iso_year(self) -> int:
        return self._iso.year

    @property
    def iso_month(self) -> int:
        return self._iso.month

    @property
    def iso_day(self) -> int:
        return self._iso.day

    @property
    def iso_date(self) -> IsoDate:
        """The ISO (year, month, day) tuple."""
        return self._iso

    def with_fields(self, overflow: Overflow | str | None = None, **fields: Any) -> PlainDate:
        """Return a copy with some calendar fields replaced.

        Examples:
            >>> PlainDate(2021, 3, 31).with_fields(month=2)
            PlainDate(2021, 2, 28)
        """
        check_field_names(fields, DATE_FIELD_NAMES)
        option = get_option(overflow, Overflow, Overflow.CONSTRAIN, "overflow")
        merged = self._calendar.merge_fields(self._date_fields(), fields)
        return PlainDate._create(self._calendar.date_from_fields(merged, option), self._calendar)

    def with_calendar(self, calendar: Calendar | str) -> PlainDate:
        """Return the same ISO date in another calendar."""
        if calendar is None:
            raise TempyralTypeError("calendar is required")
        return PlainDate._create(self._iso, get_calendar(calendar))

    # --- arithmetic -----------------------------------------------------

    def add(self, duration: object, overflow: Overflow | str | None = None) -> PlainDate:
        """Add a duration.

        Years and months are added in the calendar; the day is then
        constrained or rejected; weeks and days are added last. Time units
        are folded into whole days, truncating.
        """
        return self._add(Duration.from_value(duration), overflow)

    def subtract(self, duration: object, overflow: Overflow | str | None = None) -> PlainDate:
        """Subtract a duration; see add()."""
        return self._add(Duration.from_value(duration).negated(), overflow)

    def _add(self, duration: Duration, overflow: Overflow | str | None) -> PlainDate:
        option = get_option(overflow, Overflow, Overflow.CONSTRAIN, "overflow")
        internal = duration._to_internal()
        years, months, weeks, days = internal.date
        days += trunc_div(internal.time, NANOS_PER_DAY)
        date = self._calendar.date_add(self._iso, years, months, weeks, days, option)
        return PlainDate._create(date, self._calendar)

    def until(self, other: object, **options: Any) -> Duration:
        """Return the duration from this date to another.

        Args:
            other: A PlainDate or anything from_value() accepts.
            **options: largest_unit (default day), smallest_unit (default
                day), rounding_mode (default trunc), rounding_increment.

        Raises:
            RangeError: If the calendars differ or a time unit is requested.

        Examples:
            >>> PlainDate(2021, 1, 31).until(PlainDate(2021, 3, 1), largest_unit="month")
            Duration(months=1, days=1)
            >>> PlainDate(2020, 1, 1).until(PlainDate(2020, 12, 25), largest_unit="year",
            ...                             smallest_unit="month", rounding_mode="halfExpand")
            Duration(years=1)
        """
        return self._difference("until", other, options)

    def since(self, other: object, **options: Any) -> Duration:
        """Return the duration from another date to this one."""
        return self._difference("since", other, options)

    def _difference(self, operation: str, other: object, options: dict[str, Any]) -> Duration:
        other = PlainDate.from_value(other)
        if self._calendar != other._calendar:
            raise RangeError(
                f"cannot compute a difference between calendars "
                f"{self._calendar.id!r} and {other._calendar.id!r}"
            )
        settings = get_difference_settings(
            operation, options, DATE_UNITS, TemporalUnit.DAY, TemporalUnit.DAY
        )
        if self._iso == other._iso:
            return Duration()
        date_difference = self._calendar.date_until(self._iso, other._iso, settings.largest_unit)
        internal = InternalDuration(DateDuration(*date_difference), 0)
        if settings.smallest_unit is not TemporalUnit.DAY or settings.rounding_increment != 1:
            internal = round_relative_duration(
                internal,
                utc_epoch_nanoseconds(other._iso, 0),
                self._iso,
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

    def to_plain_date_time(self, time: object = None) -> PlainDateTime:
        """Combine with a time of day (midnight by default)."""
        from tempyral.core.datetime import PlainDateTime

        time_nanos = 0 if time is None else PlainTime.from_value(time)._nanos
        return PlainDateTime._create(self._iso, time_nanos, self._calendar)

    def to_zoned_date_time(
        self, time_zone: TimeZone | str, plain_time: object = None
    ) -> ZonedDateTime:
        """Place the date in a time zone.

        Without plain_time the result is the start of the day, which is not
        always midnight. With a time, it is resolved with "compatible".
        """
        from tempyral.core.zoned import ZonedDateTime
        from tempyral.zones.resolver import get_start_of_day
        from tempyral.zones.timezone import TimeZone

        zone = TimeZone.from_value(time_zone)
        if plain_time is None:
            epoch_ns = get_start_of_day(zone, self._iso)
        else:
            time_nanos = PlainTime.from_value(plain_time)._nanos
            epoch_ns = zone.get_epoch_nanoseconds_for(
                self._iso, time_nanos, Disambiguation.COMPATIBLE
            )
        return ZonedDateTime._create(epoch_ns, zone, self._calendar)

    def to_plain_year_month(self) -> PlainYearMonth:
        from tempyral.core.yearmonth import PlainYearMonth

        iso = self._calendar.year_month_from_fields(self._date_fields(), Overflow.CONSTRAIN)
        return PlainYearMonth._create(iso, self._calendar)

    def to_plain_month_day(self) -> PlainMonthDay:
        from tempyral.core.monthday import PlainMonthDay

        fields = self._date_fields()
        fields.pop("year")
        fields.pop("month")
        iso = self._calendar.month_day_from_fields(fields, Overflow.CONSTRAIN)
        return PlainMonthDay._create(iso, self._calendar)

    def to_string(self, *, calendar_name: CalendarName | str | None = None) -> str:
        """Format as YYYY-MM-DD with an optional calendar annotation.

        Examples:
            >>> PlainDate(2024, 1, 15, "gregory").to_string()
            '2024-01-15[u-ca=gregory]'
            >>> PlainDate(2024, 1, 15).to_string(calendar_name="always")
            '2024-01-15[u-ca=iso8601]'
        """
        display = get_option(calendar_name, CalendarName, CalendarName.AUTO, "calendar_name")
        return format_date(self._iso) + format_calendar_annotation(self._calendar.id, display)

    def to_json(self) -> str:
        return self.to_string()

    @property
    def epoch_day(self) -> int:
        """Days since 1970-01-01."""
        return epoch_days_from_iso(*self._iso)

    # --- comparison -----------------------------------------------------

    @staticmethod
    def compare(one: object, two: object) -> int:
        """Compare ISO dates, ignoring calendars. Returns -1, 0 or 1."""
        return compare_iso_date(PlainDate.from_value(one)._iso, PlainDate.from_value(two)._iso)

    def equals(self, other: object) -> bool:
        """True if the ISO dates and the calendars are equal."""
        other = PlainDate.from_value(other)
        return self._iso == other._iso and self._calendar == other._calendar

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlainDate):
            return NotImplemented
        return self._iso == other._iso and self._calendar == other._calendar

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PlainDate):
            return NotImplemented
        return self._iso < other._iso

    def __le__(self, other: object) -> bool:
        if not isinstance(other, PlainDate):
            return NotImplemented
        return self._iso <= other._iso

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, PlainDate):
            return NotImplemented
        return self._iso > other._iso

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, PlainDate):
            return NotImplemented
        return self._iso >= other._iso

    def __hash__(self) -> int:
        return hash(("PlainDate", self._iso, self._calendar.id))

    def __repr__(self) -> str:
        """Return e.g. 'PlainDate(2024, 1, 15)' or with a calendar argument."""
        year, month, day = self._iso
        if self._calendar.id == "iso8601":
            return f"PlainDate({year}, {month}, {day})"
        return f"PlainDate({year}, {month}, {day}, {self._calendar.id!r})"

    def __str__(self) -> str:
        return self.to_string()


__all__ = ["PlainDate"]
