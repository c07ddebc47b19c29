"""PlainTime class representing a wall-clock time of day.

This module provides the PlainTime class, a time of day with nanosecond
precision and no date, time zone or calendar attached.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tempyral._internal.constants import (
    NANOS_PER_DAY,
    NANOS_PER_HOUR,
    NANOS_PER_MICROSECOND,
    NANOS_PER_MILLISECOND,
    NANOS_PER_MINUTE,
    NANOS_PER_SECOND,
)
from tempyral._internal.options import (
    Overflow,
    RoundingMode,
    get_fractional_second_digits,
    get_option,
    get_rounding_increment,
    validate_rounding_increment,
)
from tempyral._internal.validation import regulate_time, to_integer
from tempyral.arithmetic.difference import get_difference_settings
from tempyral.arithmetic.records import ZERO_DATE_DURATION, InternalDuration
from tempyral.arithmetic.relative import round_time_duration
from tempyral.arithmetic.rounding import round_number_to_increment, sign_of
from tempyral.core.duration import Duration
from tempyral.core.fields import TIME_FIELD_NAMES, check_field_names
from tempyral.errors import ParseError, TempyralTypeError
from tempyral.format.iso8601 import format_time, parse_time, to_seconds_string_precision
from tempyral.units.timeunit import TIME_UNITS, TemporalUnit, check_unit_allowed, get_temporal_unit

_TIME_FIELD_ORDER = ("hour", "minute", "second", "millisecond", "microsecond", "nanosecond")


def split_time_nanos(time_nanos: int) -> tuple[int, int, int, int, int, int]:
    """Split nanoseconds of day into hour, minute, second, ms, us, ns."""
    hour, rest = divmod(time_nanos, NANOS_PER_HOUR)
    minute, rest = divmod(rest, NANOS_PER_MINUTE)
    second, rest = divmod(rest, NANOS_PER_SECOND)
    millisecond, rest = divmod(rest, NANOS_PER_MILLISECOND)
    microsecond, nanosecond = divmod(rest, NANOS_PER_MICROSECOND)
    return hour, minute, second, millisecond, microsecond, nanosecond


def time_fields_of(time_nanos: int) -> dict[str, int]:
    """Return the six time fields of nanoseconds of day as a dict."""
    return dict(zip(_TIME_FIELD_ORDER, split_time_nanos(time_nanos)))


def time_nanos_from_fields(
    fields: Mapping[str, Any], overflow: Overflow, base: int = 0
) -> int:
    """Read time fields from a mapping onto a base time of day.

    Missing fields keep the base value.

    Raises:
        RangeError: If overflow is REJECT and a field is out of range.
    """
    values = time_fields_of(base)
    for name in _TIME_FIELD_ORDER:
        value = fields.get(name)
        if value is not None:
            values[name] = to_integer(value, name)
    return regulate_time(*(values[name] for name in _TIME_FIELD_ORDER), overflow)


class PlainTime:
    """A wall-clock time with nanosecond precision.

    Attributes:
        hour: 0-23.
        minute: 0-59.
        second: 0-59.
        millisecond, microsecond, nanosecond: 0-999.

    Examples:
        >>> t = PlainTime(14, 30, 45, 500)
        >>> str(t)
        '14:30:45.5'
        >>> t.add(Duration(hours=10)).hour
        0
        >>> PlainTime.from_string("T1230").minute
        30
    """

    __slots__ = ("_nanos",)

    def __init__(
        self,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        millisecond: int = 0,
        microsecond: int = 0,
        nanosecond: int = 0,
    ) -> None:
        """Create a PlainTime.

        Raises:
            RangeError: If any field is out of range.

        Examples:
            >>> PlainTime(24)
            Traceback (most recent call last):
            ...
            tempyral.errors.RangeError: hour must be between 0 and 23, got 24
        """
        self._nanos = regulate_time(
            to_integer(hour, "hour"),
            to_integer(minute, "minute"),
            to_integer(second, "second"),
            to_integer(millisecond, "millisecond"),
            to_integer(microsecond, "microsecond"),
            to_integer(nanosecond, "nanosecond"),
            Overflow.REJECT,
        )

    @classmethod
    def _from_nanos(cls, time_nanos: int) -> PlainTime:
        result = cls.__new__(cls)
        result._nanos = time_nanos
        return result

    @classmethod
    def from_fields(
        cls, fields: Mapping[str, Any], overflow: Overflow | str | None = None
    ) -> PlainTime:
        """Create a PlainTime from a mapping; missing fields are zero.

        Examples:
            >>> PlainTime.from_fields({"hour": 25}, overflow="constrain")
            PlainTime(23, 0, 0)
        """
        check_field_names(fields, TIME_FIELD_NAMES)
        option = get_option(overflow, Overflow, Overflow.CONSTRAIN, "overflow")
        return cls._from_nanos(time_nanos_from_fields(fields, option))

    @classmethod
    def from_string(cls, s: str) -> PlainTime:
        """Parse "HH:MM[:SS[.fffffffff]]", or the time of a date-time string.

        Raises:
            ParseError: If the string is malformed or has a "Z" designator.
        """
        parsed = parse_time(s)
        if parsed.z:
            raise ParseError(f"Z is invalid for a plain time: {s!r}")
        return cls._from_nanos(parsed.time_nanos)

    @classmethod
    def from_value(cls, value: object, overflow: Overflow | str | None = None) -> PlainTime:
        """Convert a PlainTime, PlainDateTime, ZonedDateTime, string or mapping."""
        from tempyral.core.datetime import PlainDateTime
        from tempyral.core.zoned import ZonedDateTime

        if isinstance(value, PlainTime):
            return value
        if isinstance(value, (PlainDateTime, ZonedDateTime)):
            return value.to_plain_time()
        if isinstance(value, str):
            return cls.from_string(value)
        if isinstance(value, Mapping):
            return cls.from_fields(value, overflow)
        raise TempyralTypeError(f"cannot convert {type(value).__name__} to PlainTime")

    @property
    def hour(self) -> int:
        return self._nanos // NANOS_PER_HOUR

    @property
    def minute(self) -> int:
        return self._nanos // NANOS_PER_MINUTE % 60

    @property
    def second(self) -> int:
        return self._nanos // NANOS_PER_SECOND % 60

    @property
    def millisecond(self) -> int:
        return self._nanos // NANOS_PER_MILLISECOND % 1000

    @property
    def microsecond(self) -> int:
        return self._nanos // NANOS_PER_MICROSECOND % 1000

    @property
    def nanosecond(self) -> int:
        return self._nanos % 1000

    @property
    def nanosecond_of_day(self) -> int:
        """Nanoseconds since midnight."""
        return self._nanos

    def with_fields(self, overflow: Overflow | str | None = None, **fields: int) -> PlainTime:
        """Return a copy with some fields replaced.

        Examples:
            >>> PlainTime(12, 30).with_fields(minute=45)
            PlainTime(12, 45, 0)
        """
        check_field_names(fields, TIME_FIELD_NAMES)
        option = get_option(overflow, Overflow, Overflow.CONSTRAIN, "overflow")
        return PlainTime._from_nanos(time_nanos_from_fields(fields, option, self._nanos))

    def add(self, duration: object) -> PlainTime:
        """Add the time part of a duration, wrapping around midnight.

        Date units of the duration are ignored.
        """
        internal = Duration.from_value(duration)._to_internal()
        return PlainTime._from_nanos((self._nanos + internal.time) % NANOS_PER_DAY)

    def subtract(self, duration: object) -> PlainTime:
        """Subtract the time part of a duration, wrapping around midnight."""
        return self.add(Duration.from_value(duration).negated())

    def until(self, other: object, **options: Any) -> Duration:
        """Return the duration from this time to another.

        Args:
            other: A PlainTime or anything from_value() accepts.
            **options: largest_unit (default hour), smallest_unit,
                rounding_mode (default trunc), rounding_increment.

        Examples:
            >>> PlainTime(9).until(PlainTime(17, 30))
            Duration(hours=8, minutes=30)
        """
        return self._difference("until", other, options)

    def since(self, other: object, **options: Any) -> Duration:
        """Return the duration from another time to this one."""
        return self._difference("since", other, options)

    def _difference(self, operation: str, other: object, options: dict[str, Any]) -> Duration:
        other = PlainTime.from_value(other)
        settings = get_difference_settings(
            operation, options, TIME_UNITS, TemporalUnit.NANOSECOND, TemporalUnit.HOUR
        )
        time = other._nanos - self._nanos
        if settings.smallest_unit is not TemporalUnit.NANOSECOND or settings.rounding_increment != 1:
            time = round_time_duration(
                time, settings.rounding_increment, settings.smallest_unit, settings.rounding_mode
            )
        result = Duration._from_internal(
            InternalDuration(ZERO_DATE_DURATION, time), settings.largest_unit
        )
        return result.negated() if operation == "since" else result

    def round(
        self,
        smallest_unit: object = None,
        *,
        rounding_increment: int | None = None,
        rounding_mode: RoundingMode | str | None = None,
    ) -> PlainTime:
        """Round to a unit, wrapping around midnight.

        Examples:
            >>> PlainTime(23, 59, 31).round("minute")
            PlainTime(0, 0, 0)
            >>> PlainTime(10, 7).round("minute", rounding_increment=15)
            PlainTime(10, 0, 0)
        """
        unit = get_temporal_unit(smallest_unit, "smallest_unit", required=True)
        check_unit_allowed(unit, TIME_UNITS, "smallest_unit")
        increment = get_rounding_increment(rounding_increment)
        mode = get_option(rounding_mode, RoundingMode, RoundingMode.HALF_EXPAND, "rounding_mode")
        validate_rounding_increment(increment, unit.maximum_increment, False)
        rounded = round_number_to_increment(self._nanos, increment * unit.nanoseconds, mode)
        return PlainTime._from_nanos(rounded % NANOS_PER_DAY)

    def to_string(
        self,
        *,
        fractional_second_digits: int | str | None = None,
        smallest_unit: object = None,
        rounding_mode: RoundingMode | str | None = None,
    ) -> str:
        """Format as HH:MM:SS with optional fractional seconds.

        Examples:
            >>> PlainTime(8, 5, 9, 120).to_string(smallest_unit="second")
            '08:05:09'
        """
        mode = get_option(rounding_mode, RoundingMode, RoundingMode.TRUNC, "rounding_mode")
        digits = get_fractional_second_digits(fractional_second_digits)
        precision, unit, increment = to_seconds_string_precision(smallest_unit, digits)
        rounded = round_number_to_increment(self._nanos, increment * unit.nanoseconds, mode)
        return format_time(rounded % NANOS_PER_DAY, precision)

    def to_json(self) -> str:
        return self.to_string()

    @staticmethod
    def compare(one: object, two: object) -> int:
        """Return -1, 0 or 1."""
        return sign_of(PlainTime.from_value(one)._nanos - PlainTime.from_value(two)._nanos)

    def equals(self, other: object) -> bool:
        return self._nanos == PlainTime.from_value(other)._nanos

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlainTime):
            return NotImplemented
        return self._nanos == other._nanos

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PlainTime):
            return NotImplemented
        return self._nanos < other._nanos

    def __le__(self, other: object) -> bool:
        if not isinstance(other, PlainTime):
            return NotImplemented
        return self._nanos <= other._nanos

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, PlainTime):
            return NotImplemented
        return self._nanos > other._nanos

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, PlainTime):
            return NotImplemented
        return self._nanos >= other._nanos

    def __hash__(self) -> int:
        return hash(("PlainTime", self._nanos))

    def __repr__(self) -> str:
        """Return e.g. 'PlainTime(14, 30, 0)', adding sub-second fields when set."""
        fields = split_time_nanos(self._nanos)
        shown = list(fields[:3])
        if any(fields[3:]):
            shown.extend(fields[3:])
        return f"PlainTime({', '.join(str(value) for value in shown)})"

    def __str__(self) -> str:
        return self.to_string()


__all__ = ["PlainTime", "split_time_nanos", "time_fields_of", "time_nanos_from_fields"]
