"""Duration class representing a calendar-aware span of time.

This module provides the Duration class. A Duration has ten signed integer
fields, from years down to nanoseconds, which all share one sign. Years,
months and weeks have no fixed length, so operations that need to know the
length of a duration (add, round, total, compare) take a relative_to
anchor when such units are present.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Union

from tempyral._internal.calendar import epoch_days_from_iso
from tempyral._internal.constants import MAX_CALENDAR_DURATION_FIELD
from tempyral._internal.options import (
    Overflow,
    RoundingMode,
    get_fractional_second_digits,
    get_option,
    get_rounding_increment,
    validate_rounding_increment,
)
from tempyral._internal.validation import to_integer
from tempyral.arithmetic.difference import (
    DifferenceSettings,
    difference_iso_date_time,
    difference_plain_date_time_with_rounding,
    difference_plain_date_time_with_total,
    difference_zoned_date_time,
    difference_zoned_date_time_with_rounding,
    difference_zoned_date_time_with_total,
)
from tempyral.arithmetic.records import (
    ZERO_DATE_DURATION,
    DateDuration,
    InternalDuration,
    add_24_hour_days,
    balance_time_duration,
    check_time_duration,
    combine_date_and_time_duration,
    time_duration_from_components,
)
from tempyral.arithmetic.relative import (
    add_date_time,
    add_zoned_date_time,
    round_time_duration,
    total_time_duration,
)
from tempyral.arithmetic.rounding import round_number_to_increment, sign_of
from tempyral.errors import RangeError, TempyralTypeError
from tempyral.format.iso8601 import format_duration, parse_duration, to_seconds_string_precision
from tempyral.units.timeunit import (
    AUTO,
    TemporalUnit,
    get_temporal_unit,
    larger_of,
)

if TYPE_CHECKING:
    from tempyral.core.date import PlainDate
    from tempyral.core.datetime import PlainDateTime
    from tempyral.core.zoned import ZonedDateTime

    RelativeTo = Union[PlainDate, PlainDateTime, ZonedDateTime, str, Mapping[str, Any], None]

FIELD_NAMES = (
    "years",
    "months",
    "weeks",
    "days",
    "hours",
    "minutes",
    "seconds",
    "milliseconds",
    "microseconds",
    "nanoseconds",
)

_UNIT_OF_FIELD = dict(zip(FIELD_NAMES, TemporalUnit))


def _to_relative_to(value: object) -> tuple[PlainDate | None, ZonedDateTime | None]:
    """Resolve a relative_to argument to a plain date or a zoned date-time."""
    from tempyral.core.date import PlainDate
    from tempyral.core.datetime import PlainDateTime
    from tempyral.core.zoned import ZonedDateTime

    if value is None:
        return None, None
    if isinstance(value, ZonedDateTime):
        return None, value
    if isinstance(value, PlainDate):
        return value, None
    if isinstance(value, PlainDateTime):
        return value.to_plain_date(), None
    if isinstance(value, Mapping):
        if value.get("time_zone") is not None:
            return None, ZonedDateTime.from_fields(value)
        from tempyral.core.fields import TIME_FIELD_NAMES

        return PlainDate.from_fields(
            {key: item for key, item in value.items() if key not in TIME_FIELD_NAMES}
        ), None
    if isinstance(value, str):
        from tempyral.format.iso8601 import parse_date_time

        if parse_date_time(value).time_zone is not None:
            return None, ZonedDateTime.from_string(value)
        return PlainDate.from_string(value), None
    raise TempyralTypeError(f"invalid relative_to: {type(value).__name__}")


class Duration:
    """A span of time in calendar and exact units.

    All nonzero fields share one sign. Fields are not balanced on
    construction: Duration(minutes=90) keeps 90 minutes until round()
    is asked to balance it.

    Attributes:
        years, months, weeks, days: Calendar part.
        hours, minutes, seconds, milliseconds, microseconds, nanoseconds:
            Exact part.

    Examples:
        >>> d = Duration(hours=1, minutes=30)
        >>> str(d)
        'PT1H30M'
        >>> Duration.from_string("P1Y2M").months
        2
        >>> Duration(minutes=90).round(largest_unit="hour").hours
        1

        >>> Duration(days=1, hours=-1)
        Traceback (most recent call last):
        ...
        tempyral.errors.RangeError: duration fields must not have mixed signs
    """

    __slots__ = ("_fields",)

    def __init__(
        self,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        milliseconds: int = 0,
        microseconds: int = 0,
        nanoseconds: int = 0,
    ) -> None:
        """Create a Duration from its ten fields.

        Raises:
            TempyralTypeError: If a field is not a number.
            RangeError: If a field has a fractional part, the fields have
                mixed signs, or the duration is too long.
        """
        values = tuple(
            to_integer(value, name)
            for name, value in zip(
                FIELD_NAMES,
                (
                    years, months, weeks, days, hours, minutes, seconds,
                    milliseconds, microseconds, nanoseconds,
                ),
            )
        )
        signs = {sign_of(value) for value in values} - {0}
        if len(signs) > 1:
            raise RangeError("duration fields must not have mixed signs")
        for name, value in zip(FIELD_NAMES[:3], values[:3]):
            if abs(value) >= MAX_CALENDAR_DURATION_FIELD:
                raise RangeError(f"{name} is out of range: {value}")
        add_24_hour_days(time_duration_from_components(*values[4:]), values[3])
        self._fields: tuple[int, ...] = values

    # --- construction ---------------------------------------------------

    @classmethod
    def from_string(cls, s: str) -> Duration:
        """Parse an ISO 8601 duration such as "-P1Y2M3DT4H5M6.5S".

        Raises:
            ParseError: If the string is not a valid duration.

        Examples:
            >>> Duration.from_string("PT1.5H")
            Duration(hours=1, minutes=30)
        """
        return cls(**parse_duration(s))

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> Duration:
        """Create a Duration from a mapping of field names to values.

        Raises:
            TempyralTypeError: If the mapping has no duration fields, or
                unknown ones.
        """
        unknown = sorted(set(fields) - set(FIELD_NAMES))
        if unknown:
            raise TempyralTypeError(f"unknown duration fields: {', '.join(unknown)}")
        if not any(fields.get(name) is not None for name in FIELD_NAMES):
            raise TempyralTypeError("at least one duration field is required")
        return cls(**{name: value for name, value in fields.items() if value is not None})

    @classmethod
    def from_value(cls, value: object) -> Duration:
        """Convert a Duration, ISO string or field mapping to a Duration."""
        if isinstance(value, Duration):
            return value
        if isinstance(value, str):
            return cls.from_string(value)
        if isinstance(value, Mapping):
            return cls.from_fields(value)
        raise TempyralTypeError(f"cannot convert {type(value).__name__} to Duration")

    @classmethod
    def _from_internal(
        cls, internal: InternalDuration, largest_unit: TemporalUnit
    ) -> Duration:
        """Spread an internal duration into fields, balancing time up to largest_unit."""
        balanced = balance_time_duration(internal.time, largest_unit)
        years, months, weeks, days = internal.date
        return cls(
            years,
            months,
            weeks,
            days + balanced[TemporalUnit.DAY],
            balanced[TemporalUnit.HOUR],
            balanced[TemporalUnit.MINUTE],
            balanced[TemporalUnit.SECOND],
            balanced[TemporalUnit.MILLISECOND],
            balanced[TemporalUnit.MICROSECOND],
            balanced[TemporalUnit.NANOSECOND],
        )

    # --- fields ---------------------------------------------------------

    @property
    def years(self) -> int:
        return self._fields[0]

    @property
    def months(self) -> int:
        return self._fields[1]

    @property
    def weeks(self) -> int:
        return self._fields[2]

    @property
    def days(self) -> int:
        return self._fields[3]

    @property
    def hours(self) -> int:
        return self._fields[4]

    @property
    def minutes(self) -> int:
        return self._fields[5]

    @property
    def seconds(self) -> int:
        return self._fields[6]

    @property
    def milliseconds(self) -> int:
        return self._fields[7]

    @property
    def microseconds(self) -> int:
        return self._fields[8]

    @property
    def nanoseconds(self) -> int:
        return self._fields[9]

    @property
    def sign(self) -> int:
        """-1, 0 or 1.

        Examples:
            >>> Duration(hours=-2).sign
            -1
        """
        for value in self._fields:
            if value:
                return sign_of(value)
        return 0

    @property
    def blank(self) -> bool:
        """True when every field is zero."""
        return self.sign == 0

    def as_dict(self) -> dict[str, int]:
        """Return the ten fields as a dict."""
        return dict(zip(FIELD_NAMES, self._fields))

    def _largest_unit(self) -> TemporalUnit:
        """The largest nonzero unit; nanosecond when blank."""
        for name, value in zip(FIELD_NAMES, self._fields):
            if value:
                return _UNIT_OF_FIELD[name]
        return TemporalUnit.NANOSECOND

    def _has_calendar_units(self) -> bool:
        return any(self._fields[:3])

    def _to_internal(self) -> InternalDuration:
        return combine_date_and_time_duration(
            DateDuration(*self._fields[:4]),
            time_duration_from_components(*self._fields[4:]),
        )

    def _to_internal_with_24_hour_days(self) -> InternalDuration:
        time = add_24_hour_days(time_duration_from_components(*self._fields[4:]), self.days)
        return InternalDuration(DateDuration(self.years, self.months, self.weeks, 0), time)

    # --- derived durations ----------------------------------------------

    def negated(self) -> Duration:
        """Return the duration with the opposite sign."""
        return Duration(*(-value for value in self._fields))

    def abs(self) -> Duration:
        """Return the duration with a non-negative sign."""
        return Duration(*(abs(value) for value in self._fields))

    def with_fields(self, **fields: int) -> Duration:
        """Return a copy with some fields replaced.

        Examples:
            >>> Duration(hours=1).with_fields(minutes=5)
            Duration(hours=1, minutes=5)
        """
        unknown = sorted(set(fields) - set(FIELD_NAMES))
        if unknown:
            raise TempyralTypeError(f"unknown duration fields: {', '.join(unknown)}")
        if not fields:
            raise TempyralTypeError("at least one duration field is required")
        merged = self.as_dict()
        merged.update(fields)
        return Duration(**merged)

    # --- arithmetic -----------------------------------------------------

    def add(self, other: object, relative_to: RelativeTo = None) -> Duration:
        """Add another duration.

        Without calendar units the sum is balanced up to the larger of the
        two largest units, with days counted as 24 hours. With calendar
        units both durations are applied to relative_to in turn and the
        total is measured from it.

        Args:
            other: A Duration, ISO string or field mapping.
            relative_to: A PlainDate, PlainDateTime, ZonedDateTime or string.

        Raises:
            RangeError: If either duration has years, months or weeks and no
                relative_to is given.

        Examples:
            >>> Duration(hours=20).add(Duration(hours=5))
            Duration(hours=25)
            >>> Duration(days=1).add(Duration(hours=12))
            Duration(days=1, hours=12)
            >>> Duration(months=1).add("P1M", relative_to="2021-01-01")
            Duration(months=2)
        """
        return self._add(Duration.from_value(other), relative_to)

    def subtract(self, other: object, relative_to: RelativeTo = None) -> Duration:
        """Subtract another duration; see add()."""
        return self._add(Duration.from_value(other).negated(), relative_to)

    def _add(self, other: Duration, relative_to: RelativeTo) -> Duration:
        largest = larger_of(self._largest_unit(), other._largest_unit())
        plain, zoned = _to_relative_to(relative_to)
        if zoned is not None:
            start = zoned._epoch_ns
            time_zone = zoned._time_zone
            calendar = zoned._calendar
            intermediate = add_zoned_date_time(start, time_zone, calendar, self._to_internal())
            end = add_zoned_date_time(intermediate, time_zone, calendar, other._to_internal())
            if not largest.is_date_unit:
                return Duration._from_internal(
                    InternalDuration(ZERO_DATE_DURATION, end - start), largest
                )
            difference = difference_zoned_date_time(start, end, time_zone, calendar, largest)
            return Duration._from_internal(difference, largest)
        if plain is not None:
            calendar = plain._calendar
            date, time = add_date_time(
                plain._iso, 0, calendar, self._to_internal(), Overflow.CONSTRAIN
            )
            date, time = add_date_time(date, time, calendar, other._to_internal(), Overflow.CONSTRAIN)
            difference = difference_iso_date_time(plain._iso, 0, date, time, calendar, largest)
            return Duration._from_internal(difference, largest)
        if largest.is_calendar_unit:
            raise RangeError("relative_to is required for years, months and weeks")
        time = check_time_duration(
            self._to_internal_with_24_hour_days().time
            + other._to_internal_with_24_hour_days().time
        )
        return Duration._from_internal(InternalDuration(ZERO_DATE_DURATION, time), largest)

    def round(
        self,
        smallest_unit: object = None,
        *,
        largest_unit: object = None,
        rounding_increment: int | None = None,
        rounding_mode: RoundingMode | str | None = None,
        relative_to: RelativeTo = None,
    ) -> Duration:
        """Round and balance the duration.

        Args:
            smallest_unit: Unit to round to; nanosecond when omitted.
            largest_unit: Largest unit of the result; "auto" (the default)
                means the larger of the current largest unit and
                smallest_unit.
            rounding_increment: Round to multiples of this many units.
            rounding_mode: One of the nine rounding modes; halfExpand by
                default.
            relative_to: Anchor for calendar units and zoned days.

        Raises:
            RangeError: If neither unit is given, largest_unit is smaller
                than smallest_unit, the increment is invalid, or calendar
                units are involved without relative_to.

        Examples:
            >>> Duration(hours=1, minutes=31).round("hour")
            Duration(hours=2)
            >>> Duration(hours=25).round(largest_unit="day")
            Duration(days=1, hours=1)
            >>> Duration(days=40).round(largest_unit="month", relative_to="2021-01-01")
            Duration(months=1, days=9)
        """
        smallest = get_temporal_unit(smallest_unit, "smallest_unit")
        largest = get_temporal_unit(largest_unit, "largest_unit", allow_auto=True)
        if smallest is None and largest is None:
            raise RangeError("at least one of smallest_unit and largest_unit is required")
        increment = get_rounding_increment(rounding_increment)
        mode = get_option(rounding_mode, RoundingMode, RoundingMode.HALF_EXPAND, "rounding_mode")
        plain, zoned = _to_relative_to(relative_to)

        if smallest is None:
            smallest = TemporalUnit.NANOSECOND
        existing_largest = self._largest_unit()
        if largest is None or largest == AUTO:
            largest = larger_of(existing_largest, smallest)
        if largest < smallest:
            raise RangeError(
                f"largest_unit {largest.value!r} is smaller than smallest_unit {smallest.value!r}"
            )
        maximum = smallest.maximum_increment
        if maximum is not None:
            validate_rounding_increment(increment, maximum, False)
        if increment > 1 and smallest.is_date_unit and largest is not smallest:
            raise RangeError("a rounding_increment above 1 on a date unit needs largest_unit == smallest_unit")
        settings = DifferenceSettings(smallest, largest, mode, increment)

        if zoned is not None:
            start = zoned._epoch_ns
            end = add_zoned_date_time(start, zoned._time_zone, zoned._calendar, self._to_internal())
            internal = difference_zoned_date_time_with_rounding(
                start, end, zoned._time_zone, zoned._calendar, settings
            )
            if largest.is_date_unit:
                largest = TemporalUnit.HOUR
            return Duration._from_internal(internal, largest)

        if plain is not None:
            internal = self._to_internal()
            date, time = add_date_time(
                plain._iso, 0, plain._calendar, internal, Overflow.CONSTRAIN
            )
            internal = difference_plain_date_time_with_rounding(
                plain._iso, 0, date, time, plain._calendar, settings
            )
            return Duration._from_internal(internal, largest)

        if existing_largest.is_calendar_unit or largest.is_calendar_unit:
            raise RangeError("relative_to is required to round years, months and weeks")
        internal = self._to_internal_with_24_hour_days()
        if smallest is TemporalUnit.DAY:
            days = round_number_to_increment(
                total_time_duration(internal.time, TemporalUnit.DAY), increment, mode
            )
            internal = InternalDuration(DateDuration(days=days), 0)
        else:
            time = check_time_duration(
                round_time_duration(internal.time, increment, smallest, mode)
            )
            internal = InternalDuration(ZERO_DATE_DURATION, time)
        return Duration._from_internal(internal, largest)

    def total(self, unit: object, relative_to: RelativeTo = None) -> float:
        """Express the duration as a number of one unit.

        Raises:
            RangeError: If calendar units are involved without relative_to.

        Examples:
            >>> Duration(hours=1, minutes=30).total("hour")
            1.5
            >>> Duration(months=1).total("day", relative_to="2021-02-01")
            28.0
        """
        unit = get_temporal_unit(unit, "unit", required=True)
        plain, zoned = _to_relative_to(relative_to)
        if zoned is not None:
            start = zoned._epoch_ns
            end = add_zoned_date_time(start, zoned._time_zone, zoned._calendar, self._to_internal())
            return float(difference_zoned_date_time_with_total(
                start, end, zoned._time_zone, zoned._calendar, unit
            ))
        if plain is not None:
            date, time = add_date_time(
                plain._iso, 0, plain._calendar, self._to_internal(), Overflow.CONSTRAIN
            )
            return float(difference_plain_date_time_with_total(
                plain._iso, 0, date, time, plain._calendar, unit
            ))
        if self._largest_unit().is_calendar_unit or unit.is_calendar_unit:
            raise RangeError("relative_to is required to total years, months and weeks")
        return float(total_time_duration(self._to_internal_with_24_hour_days().time, unit))

    @staticmethod
    def compare(one: object, two: object, relative_to: RelativeTo = None) -> int:
        """Compare two durations by length.

        Returns:
            -1, 0 or 1.

        Raises:
            RangeError: If either has calendar units, the two are not
                field-identical, and relative_to is not given.

        Examples:
            >>> Duration.compare(Duration(hours=25), Duration(days=1))
            1
        """
        one = Duration.from_value(one)
        two = Duration.from_value(two)
        if one._fields == two._fields:
            return 0
        plain, zoned = _to_relative_to(relative_to)
        calendar_units = one._has_calendar_units() or two._has_calendar_units()
        if zoned is not None and (
            one._largest_unit().is_date_unit or two._largest_unit().is_date_unit
        ):
            after1 = add_zoned_date_time(
                zoned._epoch_ns, zoned._time_zone, zoned._calendar, one._to_internal()
            )
            after2 = add_zoned_date_time(
                zoned._epoch_ns, zoned._time_zone, zoned._calendar, two._to_internal()
            )
            return sign_of(after1 - after2)
        if calendar_units:
            if plain is None:
                raise RangeError("relative_to is required to compare years, months and weeks")
            days1 = one._date_duration_days(plain)
            days2 = two._date_duration_days(plain)
        else:
            days1 = one.days
            days2 = two.days
        time1 = add_24_hour_days(one._to_internal().time, days1)
        time2 = add_24_hour_days(two._to_internal().time, days2)
        return sign_of(time1 - time2)

    def _date_duration_days(self, plain: PlainDate) -> int:
        if not self._has_calendar_units():
            return self.days
        later = plain._calendar.date_add(
            plain._iso, self.years, self.months, self.weeks, 0, Overflow.CONSTRAIN
        )
        return epoch_days_from_iso(*later) - epoch_days_from_iso(*plain._iso) + self.days

    # --- formatting -----------------------------------------------------

    def to_string(
        self,
        *,
        fractional_second_digits: int | str | None = None,
        smallest_unit: object = None,
        rounding_mode: RoundingMode | str | None = None,
    ) -> str:
        """Format as an ISO 8601 duration.

        Args:
            fractional_second_digits: "auto" or 0-9.
            smallest_unit: second, millisecond, microsecond or nanosecond.
            rounding_mode: Applied when precision drops digits; trunc by
                default.

        Examples:
            >>> Duration(seconds=1, milliseconds=500).to_string(fractional_second_digits=0)
            'PT1S'
            >>> Duration(seconds=1, milliseconds=500).to_string(
            ...     fractional_second_digits=0, rounding_mode="halfExpand")
            'PT2S'
        """
        mode = get_option(rounding_mode, RoundingMode, RoundingMode.TRUNC, "rounding_mode")
        digits = get_fractional_second_digits(fractional_second_digits)
        precision, unit, increment = to_seconds_string_precision(smallest_unit, digits)
        if precision == "minute":
            raise RangeError("smallest_unit 'minute' is not allowed for a duration string")
        if unit is TemporalUnit.NANOSECOND and increment == 1:
            return format_duration(self.as_dict(), self.sign, precision)
        internal = self._to_internal()
        time = round_time_duration(internal.time, increment, unit, mode)
        internal = combine_date_and_time_duration(internal.date, time)
        largest = larger_of(self._largest_unit(), TemporalUnit.SECOND)
        rounded = Duration._from_internal(internal, largest)
        return format_duration(rounded.as_dict(), rounded.sign, precision)

    def to_json(self) -> str:
        """Return the ISO string."""
        return self.to_string()

    # --- protocols ------------------------------------------------------

    def __neg__(self) -> Duration:
        return self.negated()

    def __abs__(self) -> Duration:
        return self.abs()

    def __add__(self, other: object) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: object) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return self.subtract(other)

    def __eq__(self, other: object) -> bool:
        """Field-wise equality; PT60M is not equal to PT1H."""
        if not isinstance(other, Duration):
            return NotImplemented
        return self._fields == other._fields

    def __hash__(self) -> int:
        return hash(self._fields)

    def __bool__(self) -> bool:
        return not self.blank

    def __repr__(self) -> str:
        """Return e.g. 'Duration(hours=1, minutes=30)'."""
        parts = [f"{name}={value}" for name, value in zip(FIELD_NAMES, self._fields) if value]
        return f"Duration({', '.join(parts)})"

    def __str__(self) -> str:
        return self.to_string()


__all__ = ["Duration", "FIELD_NAMES"]
