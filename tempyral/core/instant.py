"""Instant class representing an exact point on the timeline.

This module provides the Instant class: a count of nanoseconds since the
Unix epoch (1970-01-01T00:00Z) with no calendar and no time zone. Two
instants are equal exactly when their nanosecond counts are equal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tempyral._internal.calendar import (
    iso_date_time_from_epoch_nanoseconds,
    utc_epoch_nanoseconds,
)
from tempyral._internal.constants import NANOS_PER_DAY, NANOS_PER_MILLISECOND
from tempyral._internal.options import (
    RoundingMode,
    get_fractional_second_digits,
    get_option,
    get_rounding_increment,
    validate_rounding_increment,
)
from tempyral._internal.validation import check_epoch_nanoseconds, check_utc_date_time
from tempyral.arithmetic.difference import difference_instant, get_difference_settings
from tempyral.arithmetic.rounding import round_number_to_increment
from tempyral.core.duration import Duration
from tempyral.errors import RangeError, TempyralTypeError
from tempyral.format.iso8601 import (
    format_date,
    format_time,
    parse_instant,
    to_seconds_string_precision,
)
from tempyral.units.timeunit import (
    TIME_UNITS,
    TemporalUnit,
    check_unit_allowed,
    get_temporal_unit,
)
from tempyral.zones.timezone import format_offset_rounded, parse_offset_string

if TYPE_CHECKING:
    from tempyral.core.zoned import ZonedDateTime
    from tempyral.zones.timezone import TimeZone


class Instant:
    """An exact point in time with nanosecond precision.

    Attributes:
        epoch_nanoseconds: Nanoseconds since the Unix epoch.
        epoch_milliseconds: Milliseconds since the Unix epoch, floored.

    Examples:
        >>> i = Instant.from_string("2020-01-01T00:00:00+01:00")
        >>> i.epoch_milliseconds
        1577833200000
        >>> str(i)
        '2019-12-31T23:00:00Z'
        >>> i.until("2020-01-01T01:30:00Z")
        Duration(seconds=9000)
    """

    __slots__ = ("_epoch_ns",)

    def __init__(self, epoch_nanoseconds: int) -> None:
        """Create an Instant.

        Raises:
            TempyralTypeError: If epoch_nanoseconds is not an int.
            RangeError: If it is beyond ±8.64e21.
        """
        if isinstance(epoch_nanoseconds, bool) or not isinstance(epoch_nanoseconds, int):
            raise TempyralTypeError(
                f"epoch_nanoseconds must be an int, got {type(epoch_nanoseconds).__name__}"
            )
        self._epoch_ns: int = check_epoch_nanoseconds(epoch_nanoseconds)

    @classmethod
    def from_epoch_nanoseconds(cls, epoch_nanoseconds: int) -> Instant:
        return cls(epoch_nanoseconds)

    @classmethod
    def from_epoch_milliseconds(cls, epoch_milliseconds: int) -> Instant:
        """Create an Instant from whole milliseconds since the epoch.

        Examples:
            >>> Instant.from_epoch_milliseconds(1).epoch_nanoseconds
            1000000
        """
        if isinstance(epoch_milliseconds, bool) or not isinstance(epoch_milliseconds, int):
            raise TempyralTypeError(
                f"epoch_milliseconds must be an int, got {type(epoch_milliseconds).__name__}"
            )
        return cls(epoch_milliseconds * NANOS_PER_MILLISECOND)

    @classmethod
    def from_string(cls, s: str) -> Instant:
        """Parse a date-time with "Z" or a UTC offset.

        A bracketed time zone is allowed but ignored; the offset decides.

        Raises:
            ParseError: If the string is malformed or has no offset.
            RangeError: If the instant is out of range.
        """
        parsed = parse_instant(s)
        utc_ns = check_utc_date_time(utc_epoch_nanoseconds(parsed.date, parsed.time_nanos or 0))
        offset = 0 if parsed.z else parse_offset_string(parsed.offset)
        return cls(check_epoch_nanoseconds(utc_ns - offset))

    @classmethod
    def from_value(cls, value: object) -> Instant:
        """Convert an Instant, ZonedDateTime or string to an Instant."""
        from tempyral.core.zoned import ZonedDateTime

        if isinstance(value, Instant):
            return value
        if isinstance(value, ZonedDateTime):
            return value.to_instant()
        if isinstance(value, str):
            return cls.from_string(value)
        raise TempyralTypeError(f"cannot convert {type(value).__name__} to Instant")

    @property
    def epoch_nanoseconds(self) -> int:
        return self._epoch_ns

    @property
    def epoch_milliseconds(self) -> int:
        return self._epoch_ns // NANOS_PER_MILLISECOND

    # --- arithmetic -----------------------------------------------------

    def add(self, duration: object) -> Instant:
        """Add a duration made only of time units.

        Raises:
            RangeError: If the duration has years, months, weeks or days, or
                the result is out of range.
        """
        return self._add(Duration.from_value(duration))

    def subtract(self, duration: object) -> Instant:
        return self._add(Duration.from_value(duration).negated())

    def _add(self, duration: Duration) -> Instant:
        if duration.years or duration.months or duration.weeks or duration.days:
            raise RangeError("an Instant can only be shifted by hours or smaller units")
        return Instant(check_epoch_nanoseconds(self._epoch_ns + duration._to_internal().time))

    def until(self, other: object, **options: Any) -> Duration:
        """Return the duration from this instant to another.

        Args:
            other: An Instant or anything from_value() accepts.
            **options: largest_unit (default second), smallest_unit (default
                nanosecond), rounding_mode (default trunc), rounding_increment.
        """
        return self._difference("until", other, options)

    def since(self, other: object, **options: Any) -> Duration:
        return self._difference("since", other, options)

    def _difference(self, operation: str, other: object, options: dict[str, Any]) -> Duration:
        other = Instant.from_value(other)
        settings = get_difference_settings(
            operation, options, TIME_UNITS, TemporalUnit.NANOSECOND, TemporalUnit.SECOND
        )
        internal = difference_instant(
            self._epoch_ns,
            other._epoch_ns,
            settings.rounding_increment,
            settings.smallest_unit,
            settings.rounding_mode,
        )
        result = Duration._from_internal(internal, settings.largest_unit)
        return result.negated() if operation == "since" else result

    def round(
        self,
        smallest_unit: object = None,
        *,
        rounding_increment: int | None = None,
        rounding_mode: RoundingMode | str | None = None,
    ) -> Instant:
        """Round to a time unit.

        The increment must evenly divide a 24-hour day in that unit.

        Examples:
            >>> Instant(80 * 60 * 10**9).round("hour", rounding_increment=3).epoch_nanoseconds
            0
        """
        unit = get_temporal_unit(smallest_unit, "smallest_unit", required=True)
        check_unit_allowed(unit, TIME_UNITS, "smallest_unit")
        increment = get_rounding_increment(rounding_increment)
        mode = get_option(rounding_mode, RoundingMode, RoundingMode.HALF_EXPAND, "rounding_mode")
        validate_rounding_increment(increment, NANOS_PER_DAY // unit.nanoseconds, True)
        rounded = round_number_to_increment(self._epoch_ns, increment * unit.nanoseconds, mode)
        return Instant(check_epoch_nanoseconds(rounded))

    # --- conversion -----------------------------------------------------

    def to_zoned_date_time_iso(self, time_zone: TimeZone | str) -> ZonedDateTime:
        """View this instant in a time zone with the ISO calendar."""
        from tempyral.calendars import get_calendar
        from tempyral.core.zoned import ZonedDateTime
        from tempyral.zones.timezone import TimeZone

        return ZonedDateTime._create(self._epoch_ns, TimeZone.from_value(time_zone), get_calendar())

    def to_zoned_date_time(self, time_zone: TimeZone | str, calendar: object) -> ZonedDateTime:
        from tempyral.calendars import get_calendar
        from tempyral.core.zoned import ZonedDateTime
        from tempyral.zones.timezone import TimeZone

        if calendar is None:
            raise TempyralTypeError("calendar is required")
        return ZonedDateTime._create(
            self._epoch_ns, TimeZone.from_value(time_zone), get_calendar(calendar)
        )

    def to_string(
        self,
        *,
        time_zone: TimeZone | str | None = None,
        fractional_second_digits: int | str | None = None,
        smallest_unit: object = None,
        rounding_mode: RoundingMode | str | None = None,
    ) -> str:
        """Format as an RFC 9557 string.

        Without a time zone the result is in UTC with a "Z" suffix; with one
        it shows that zone's wall clock and offset.

        Examples:
            >>> Instant(1_500_000_000).to_string(smallest_unit="second")
            '1970-01-01T00:00:01Z'
            >>> Instant(0).to_string(time_zone="+05:30")
            '1970-01-01T05:30:00+05:30'
        """
        from tempyral.zones.timezone import TimeZone

        mode = get_option(rounding_mode, RoundingMode, RoundingMode.TRUNC, "rounding_mode")
        digits = get_fractional_second_digits(fractional_second_digits)
        precision, unit, increment = to_seconds_string_precision(smallest_unit, digits)
        epoch_ns = check_epoch_nanoseconds(
            round_number_to_increment(self._epoch_ns, increment * unit.nanoseconds, mode)
        )
        if time_zone is None:
            date, time_nanos = iso_date_time_from_epoch_nanoseconds(epoch_ns)
            suffix = "Z"
        else:
            zone = TimeZone.from_value(time_zone)
            date, time_nanos = zone.get_iso_date_time_for(epoch_ns)
            suffix = format_offset_rounded(zone.get_offset_nanoseconds_for(epoch_ns))
        return format_date(date) + "T" + format_time(time_nanos, precision) + suffix

    def to_json(self) -> str:
        return self.to_string()

    # --- comparison -----------------------------------------------------

    @staticmethod
    def compare(one: object, two: object) -> int:
        """Compare two instants. Returns -1, 0 or 1."""
        ns1 = Instant.from_value(one)._epoch_ns
        ns2 = Instant.from_value(two)._epoch_ns
        return (ns1 > ns2) - (ns1 < ns2)

    def equals(self, other: object) -> bool:
        return self._epoch_ns == Instant.from_value(other)._epoch_ns

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._epoch_ns == other._epoch_ns

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._epoch_ns < other._epoch_ns

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._epoch_ns <= other._epoch_ns

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._epoch_ns > other._epoch_ns

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._epoch_ns >= other._epoch_ns

    def __hash__(self) -> int:
        return hash(("Instant", self._epoch_ns))

    def __repr__(self) -> str:
        return f"Instant({self.to_string()!r})"

    def __str__(self) -> str:
        return self.to_string()


__all__ = ["Instant"]
