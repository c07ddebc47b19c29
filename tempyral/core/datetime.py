"""PlainDateTime class combining a calendar date and a wall-clock time.

This module provides the PlainDateTime class: a date and a time of day with
nanosecond precision, in a calendar, without a time zone. It cannot be
placed on the exact timeline until a time zone is supplied with
to_zoned_date_time().
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from tempyral._internal.calendar import (
    IsoDate,
    add_days_to_iso_date,
    utc_epoch_nanoseconds,
)
from tempyral._internal.constants import NANOS_PER_DAY
from tempyral._internal.options import (
    CalendarName,
    Disambiguation,
    Overflow,
    RoundingMode,
    get_fractional_second_digits,
    get_option,
    get_rounding_increment,
    validate_rounding_increment,
)
from tempyral._internal.validation import (
    check_iso_date,
    check_utc_date_time,
    regulate_iso_date,
    regulate_time,
    to_integer,
)
from tempyral.arithmetic.difference import (
    difference_plain_date_time_with_rounding,
    get_difference_settings,
)
from tempyral.arithmetic.relative import add_date_time
from tempyral.arithmetic.rounding import round_number_to_increment
from tempyral.calendars import Calendar, CalendarDate, get_calendar
from tempyral.core.date import PlainDate
from tempyral.core.duration import Duration
from tempyral.core.fields import (
    DATE_FIELD_NAMES,
    TIME_FIELD_NAMES,
    CalendarFields,
    check_field_names,
)
from tempyral.core.time import PlainTime, split_time_nanos, time_nanos_from_fields
from tempyral.errors import RangeError, TempyralTypeError
from tempyral.format.iso8601 import (
    format_calendar_annotation,
    format_date,
    format_time,
    parse_plain_date_time,
    to_seconds_string_precision,
)
from tempyral.units.timeunit import (
    ALL_UNITS,
    TemporalUnit,
    check_unit_allowed,
    get_temporal_unit,
)

if TYPE_CHECKING:
    from tempyral.core.zoned import ZonedDateTime
    from tempyral.zones.timezone import TimeZone

ROUNDABLE_UNITS = frozenset(unit for unit in TemporalUnit if not unit.is_calendar_unit)


def get_round_settings(
    smallest_unit: object,
    rounding_increment: int | None,
    rounding_mode: RoundingMode | str | None,
) -> tuple[TemporalUnit, int, RoundingMode]:
    """Validate the options of round() on a date-time.

    Units from day down to nanosecond are allowed. Day rounding only
    accepts an increment of 1; other units need an increment that divides
    the next larger unit.
    """
    unit = get_temporal_unit(smallest_unit, "smallest_unit", required=True)
    check_unit_allowed(unit, ROUNDABLE_UNITS, "smallest_unit")
    increment = get_rounding_increment(rounding_increment)
    mode = get_option(rounding_mode, RoundingMode, RoundingMode.HALF_EXPAND, "rounding_mode")
    if unit is TemporalUnit.DAY:
        validate_rounding_increment(increment, 1, True)
    else:
        validate_rounding_increment(increment, unit.maximum_increment, False)
    return unit, increment, mode


def round_iso_date_time(
    date: IsoDate,
    time_nanos: int,
    increment: int,
    unit: TemporalUnit,
    mode: RoundingMode,
) -> tuple[IsoDate, int]:
    """Round a date and time of day, carrying into the next day.

    Examples:
        >>> round_iso_date_time(IsoDate(2020, 1, 1), 23 * 3600 * 10**9, 1,
        ...                     TemporalUnit.DAY, RoundingMode.HALF_EXPAND)
        (IsoDate(year=2020, month=1, day=2), 0)
    """
    rounded = round_number_to_increment(time_nanos, increment * unit.nanoseconds, mode)
    days, time_nanos = divmod(rounded, NANOS_PER_DAY)
    return add_days_to_iso_date(date, days), time_nanos


class PlainDateTime(CalendarFields):
    """A calendar date and wall-clock time without a time zone.

    Examples:
        >>> dt = PlainDateTime(2020, 3, 8, 2, 30)
        >>> str(dt)
        '2020-03-08T02:30:00'
        >>> dt.to_zoned_date_time("America/Los_Angeles", disambiguation="earlier").offset
        '-08:00'
        >>> dt.until(PlainDateTime(2020, 3, 9)).hours
        21
    """

    __slots__ = ("_iso", "_time", "_calendar")

    def __init__(
        self,
        iso_year: int,
        iso_month: int,
        iso_day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        millisecond: int = 0,
        microsecond: int = 0,
        nanosecond: int = 0,
        calendar: Calendar | str | None = None,
    ) -> None:
        """Create a PlainDateTime from ISO fields.

        Raises:
            RangeError: If a field is invalid or the value is out of range.
        """
        iso = regulate_iso_date(
            to_integer(iso_year, "iso_year"),
            to_integer(iso_month, "iso_month"),
            to_integer(iso_day, "iso_day"),
            Overflow.REJECT,
        )
        time_nanos = regulate_time(
            to_integer(hour, "hour"),
            to_integer(minute, "minute"),
            to_integer(second, "second"),
            to_integer(millisecond, "millisecond"),
            to_integer(microsecond, "microsecond"),
            to_integer(nanosecond, "nanosecond"),
            Overflow.REJECT,
        )
        check_utc_date_time(utc_epoch_nanoseconds(iso, time_nanos))
        self._iso: IsoDate = iso
        self._time: int = time_nanos
        self._calendar: Calendar = get_calendar(calendar)

    @classmethod
    def _create(cls, iso: IsoDate, time_nanos: int, calendar: Calendar) -> PlainDateTime:
        check_iso_date(iso)
        check_utc_date_time(utc_epoch_nanoseconds(iso, time_nanos))
        result = cls.__new__(cls)
        result._iso = iso
        result._time = time_nanos
        result._calendar = calendar
        return result

    @classmethod
    def from_fields(
        cls, fields: Mapping[str, Any], overflow: Overflow | str | None = None
    ) -> PlainDateTime:
        """Create a PlainDateTime from calendar and time fields.

        Examples:
            >>> PlainDateTime.from_fields({"year": 2021, "month": 2, "day": 31, "hour": 12})
            PlainDateTime(2021, 2, 28, 12, 0, 0)
        """
        calendar = get_calendar(fields.get("calendar"))
        rest = {key: value for key, value in fields.items() if key != "calendar"}
        check_field_names(rest, DATE_FIELD_NAMES | TIME_FIELD_NAMES)
        option = get_option(overflow, Overflow, Overflow.CONSTRAIN, "overflow")
        date_fields = {key: value for key, value in rest.items() if key in DATE_FIELD_NAMES}
        iso = calendar.date_from_fields(date_fields, option)
        return cls._create(iso, time_nanos_from_fields(rest, option), calendar)

    @classmethod
    def from_string(cls, s: str) -> PlainDateTime:
        """Parse an RFC 9557 string; a missing time means midnight.

        Raises:
            ParseError: If the string is malformed or has a "Z" designator.
        """
        parsed = parse_plain_date_time(s)
        return cls._create(parsed.date, parsed.time_nanos or 0, get_calendar(parsed.calendar))

    @classmethod
    def from_value(cls, value: object, overflow: Overflow | str | None = None) -> PlainDateTime:
        """Convert a PlainDateTime, PlainDate, ZonedDateTime, string or mapping."""
        from tempyral.core.zoned import ZonedDateTime

        if isinstance(value, PlainDateTime):
            return value
        if isinstance(value, ZonedDateTime):
            return value.to_plain_date_time()
        if isinstance(value, PlainDate):
            return value.to_plain_date_time()
        if isinstance(value, str):
            return cls.from_string(value)
        if isinstance(value, Mapping):
            return cls.from_fields(value, overflow)
        raise TempyralTypeError(f"cannot convert {type(value).__name__} to PlainDateTime")

    # --- fields ---------------------------------------------------------

    def _calendar_date(self) -> CalendarDate:
        return self._calendar.from_iso(self._iso)

    @property
    def calendar(self) -> Calendar:
        return self._calendar

    @property
    def iso_date(self) -> IsoDate:
        return self._iso

    @property
    def hour(self) -> int:
        return split_time_nanos(self._time)[0]

    @property
    def minute(self) -> int:
        return split_time_nanos(self._time)[1]

    @property
    def second(self) -> int:
        return split_time_nanos(self._time)[2]

    @property
    def millisecond(self) -> int:
        return split_time_nanos(self._time)[3]

    @property
    def microsecond(self) -> int:
        return split_time_nanos(self._time)[4]

    @property
    def nanosecond(self) -> int:
        return split_time_nanos(self._time)[5]

    def with_fields(
        self, overflow: Overflow | str | None = None, **fields: Any
    ) -> PlainDateTime:
        """Return a copy with some date or time fields replaced.

        Examples:
            >>> PlainDateTime(2020, 1, 31, 10).with_fields(month=2, hour=12)
            PlainDateTime(2020, 2, 29, 12, 0, 0)
        """
        check_field_names(fields, DATE_FIELD_NAMES | TIME_FIELD_NAMES)
        option = get_option(overflow, Overflow, Overflow.CONSTRAIN, "overflow")
        date_overlay = {key: value for key, value in fields.items() if key in DATE_FIELD_NAMES}
        merged = self._calendar.merge_fields(self._date_fields(), date_overlay)
        iso = self._calendar.date_from_fields(merged, option)
        return PlainDateTime._create(
            iso, time_nanos_from_fields(fields, option, self._time), self._calendar
        )

    def with_plain_time(self, time: object = None) -> PlainDateTime:
        """Replace the time of day (midnight when omitted)."""
        time_nanos = 0 if time is None else PlainTime.from_value(time)._nanos
        return PlainDateTime._create(self._iso, time_nanos, self._calendar)

    def with_calendar(self, calendar: Calendar | str) -> PlainDateTime:
        if calendar is None:
            raise TempyralTypeError("calendar is required")
        return PlainDateTime._create(self._iso, self._time, get_calendar(calendar))

    # --- arithmetic -----------------------------------------------------

    def add(self, duration: object, overflow: Overflow | str | None = None) -> PlainDateTime:
        """Add a duration.

        The time part is added first; whole days carried out of it are added
        to the date with the calendar part.

        Examples:
            >>> PlainDateTime(2021, 1, 31, 12).add(Duration(months=1, hours=13))
            PlainDateTime(2021, 3, 1, 1, 0, 0)
        """
        return self._add(Duration.from_value(duration), overflow)

    def subtract(self, duration: object, overflow: Overflow | str | None = None) -> PlainDateTime:
        return self._add(Duration.from_value(duration).negated(), overflow)

    def _add(self, duration: Duration, overflow: Overflow | str | None) -> PlainDateTime:
        option = get_option(overflow, Overflow, Overflow.CONSTRAIN, "overflow")
        iso, time_nanos = add_date_time(
            self._iso, self._time, self._calendar, duration._to_internal(), option
        )
        return PlainDateTime._create(iso, time_nanos, self._calendar)

    def until(self, other: object, **options: Any) -> Duration:
        """Return the duration from this date-time to another.

        Args:
            other: A PlainDateTime or anything from_value() accepts.
            **options: largest_unit (default day), smallest_unit,
                rounding_mode (default trunc), rounding_increment.
        """
        return self._difference("until", other, options)

    def since(self, other: object, **options: Any) -> Duration:
        return self._difference("since", other, options)

    def _difference(self, operation: str, other: object, options: dict[str, Any]) -> Duration:
        other = PlainDateTime.from_value(other)
        if self._calendar != other._calendar:
            raise RangeError(
                f"cannot compute a difference between calendars "
                f"{self._calendar.id!r} and {other._calendar.id!r}"
            )
        settings = get_difference_settings(
            operation, options, ALL_UNITS, TemporalUnit.NANOSECOND, TemporalUnit.DAY
        )
        internal = difference_plain_date_time_with_rounding(
            self._iso, self._time, other._iso, other._time, self._calendar, settings
        )
        result = Duration._from_internal(internal, settings.largest_unit)
        return result.negated() if operation == "since" else result

    def round(
        self,
        smallest_unit: object = None,
        *,
        rounding_increment: int | None = None,
        rounding_mode: RoundingMode | str | None = None,
    ) -> PlainDateTime:
        """Round to a unit from day down to nanosecond.

        Examples:
            >>> PlainDateTime(2020, 1, 1, 13, 45).round("hour")
            PlainDateTime(2020, 1, 1, 14, 0, 0)
        """
        unit, increment, mode = get_round_settings(smallest_unit, rounding_increment, rounding_mode)
        iso, time_nanos = round_iso_date_time(self._iso, self._time, increment, unit, mode)
        return PlainDateTime._create(iso, time_nanos, self._calendar)

    # --- conversion -----------------------------------------------------

    def to_plain_date(self) -> PlainDate:
        return PlainDate._create(self._iso, self._calendar)

    def to_plain_time(self) -> PlainTime:
        return PlainTime._from_nanos(self._time)

    def to_zoned_date_time(
        self,
        time_zone: TimeZone | str,
        disambiguation: Disambiguation | str | None = None,
    ) -> ZonedDateTime:
        """Resolve the wall clock in a time zone.

        Args:
            time_zone: A TimeZone or zone id.
            disambiguation: compatible (default), earlier, later or reject.

        Raises:
            RangeError: If the time is skipped or repeated and
                disambiguation is "reject".
        """
        from tempyral.core.zoned import ZonedDateTime
        from tempyral.zones.timezone import TimeZone

        zone = TimeZone.from_value(time_zone)
        option = get_option(
            disambiguation, Disambiguation, Disambiguation.COMPATIBLE, "disambiguation"
        )
        epoch_ns = zone.get_epoch_nanoseconds_for(self._iso, self._time, option)
        return ZonedDateTime._create(epoch_ns, zone, self._calendar)

    def to_string(
        self,
        *,
        calendar_name: CalendarName | str | None = None,
        fractional_second_digits: int | str | None = None,
        smallest_unit: object = None,
        rounding_mode: RoundingMode | str | None = None,
    ) -> str:
        """Format as YYYY-MM-DDTHH:MM:SS with optional fraction and calendar.

        Examples:
            >>> PlainDateTime(2020, 1, 1, 23, 59, 59, 999).to_string(
            ...     smallest_unit="second", rounding_mode="halfExpand")
            '2020-01-02T00:00:00'
        """
        display = get_option(calendar_name, CalendarName, CalendarName.AUTO, "calendar_name")
        mode = get_option(rounding_mode, RoundingMode, RoundingMode.TRUNC, "rounding_mode")
        digits = get_fractional_second_digits(fractional_second_digits)
        precision, unit, increment = to_seconds_string_precision(smallest_unit, digits)
        iso, time_nanos = round_iso_date_time(self._iso, self._time, increment, unit, mode)
        check_utc_date_time(utc_epoch_nanoseconds(iso, time_nanos))
        return (
            format_date(iso)
            + "T"
            + format_time(time_nanos, precision)
            + format_calendar_annotation(self._calendar.id, display)
        )

    def to_json(self) -> str:
        return self.to_string()

    # --- comparison -----------------------------------------------------

    def _key(self) -> tuple[IsoDate, int]:
        return self._iso, self._time

    @staticmethod
    def compare(one: object, two: object) -> int:
        """Compare ISO date-times, ignoring calendars. Returns -1, 0 or 1."""
        key1 = PlainDateTime.from_value(one)._key()
        key2 = PlainDateTime.from_value(two)._key()
        return (key1 > key2) - (key1 < key2)

    def equals(self, other: object) -> bool:
        other = PlainDateTime.from_value(other)
        return self._key() == other._key() and self._calendar == other._calendar

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlainDateTime):
            return NotImplemented
        return self._key() == other._key() and self._calendar == other._calendar

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PlainDateTime):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, PlainDateTime):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, PlainDateTime):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, PlainDateTime):
            return NotImplemented
        return self._key() >= other._key()

    def __hash__(self) -> int:
        return hash(("PlainDateTime", self._iso, self._time, self._calendar.id))

    def __repr__(self) -> str:
        """Return e.g. 'PlainDateTime(2020, 1, 1, 12, 0, 0)'."""
        fields = split_time_nanos(self._time)
        shown = [*self._iso, *fields[:3]]
        if any(fields[3:]):
            shown.extend(fields[3:])
        args = ", ".join(str(value) for value in shown)
        if self._calendar.id != "iso8601":
            args += f", calendar={self._calendar.id!r}"
        return f"PlainDateTime({args})"

    def __str__(self) -> str:
        return self.to_string()


__all__ = ["PlainDateTime", "get_round_settings", "round_iso_date_time"]
