"""ZonedDateTime class: an exact time viewed in a time zone and calendar.

This module provides the ZonedDateTime class. A ZonedDateTime stores epoch
nanoseconds, a TimeZone and a Calendar; its wall-clock fields and UTC
offset are derived from the zone rules when the value is created.

Arithmetic follows two clocks. Calendar units (years, months, weeks, days)
move the wall clock and are then resolved back to an instant, while time
units move the exact time, so adding 24 hours across a DST change differs
from adding one day.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tempyral._internal.calendar import (
    IsoDate,
    add_days_to_iso_date,
    iso_date_time_from_epoch_nanoseconds,
)
from tempyral._internal.constants import NANOS_PER_HOUR, NANOS_PER_MILLISECOND
from tempyral._internal.options import (
    CalendarName,
    Disambiguation,
    OffsetDisplay,
    OffsetOption,
    Overflow,
    RoundingMode,
    TimeZoneName,
    TransitionDirection,
    get_fractional_second_digits,
    get_option,
)
from tempyral._internal.validation import check_epoch_nanoseconds
from tempyral.arithmetic.difference import (
    difference_instant,
    difference_zoned_date_time_with_rounding,
    get_difference_settings,
)
from tempyral.arithmetic.relative import add_zoned_date_time
from tempyral.arithmetic.rounding import round_number_to_increment
from tempyral.calendars import Calendar, CalendarDate, get_calendar
from tempyral.core.date import PlainDate
from tempyral.core.datetime import PlainDateTime, get_round_settings, round_iso_date_time
from tempyral.core.duration import Duration
from tempyral.core.fields import (
    DATE_FIELD_NAMES,
    TIME_FIELD_NAMES,
    CalendarFields,
    check_field_names,
)
from tempyral.core.instant import Instant
from tempyral.core.time import PlainTime, split_time_nanos, time_nanos_from_fields
from tempyral.errors import RangeError, TempyralTypeError
from tempyral.format.iso8601 import (
    format_calendar_annotation,
    format_date,
    format_time,
    parse_zoned_date_time,
    to_seconds_string_precision,
)
from tempyral.units.timeunit import ALL_UNITS, TemporalUnit
from tempyral.zones.resolver import (
    OffsetBehaviour,
    get_start_of_day,
    interpret_iso_date_time_offset,
)
from tempyral.zones.timezone import (
    TimeZone,
    format_offset_nanoseconds,
    format_offset_rounded,
    offset_has_sub_minute_precision,
    parse_offset_string,
)

ZONED_FIELD_NAMES = DATE_FIELD_NAMES | TIME_FIELD_NAMES | {"offset", "time_zone"}


class ZonedDateTime(CalendarFields):
    """An exact time with a time zone and a calendar.

    Attributes:
        epoch_nanoseconds: The exact time.
        time_zone_id: Canonical id of the zone.
        offset: UTC offset at this instant, e.g. "-07:00".
        hours_in_day: Length of this calendar day in the zone.

    Examples:
        >>> zdt = ZonedDateTime.from_string("2020-03-08T01:30-08:00[America/Los_Angeles]")
        >>> zdt.hours_in_day
        23.0
        >>> str(zdt.add(Duration(hours=1)))
        '2020-03-08T03:30:00-07:00[America/Los_Angeles]'
        >>> str(zdt.add(Duration(days=1)))
        '2020-03-09T01:30:00-07:00[America/Los_Angeles]'
    """

    __slots__ = ("_epoch_ns", "_time_zone", "_calendar", "_iso", "_time", "_offset_ns")

    def __init__(
        self,
        epoch_nanoseconds: int,
        time_zone: TimeZone | str,
        calendar: Calendar | str | None = None,
    ) -> None:
        """Create a ZonedDateTime.

        Args:
            epoch_nanoseconds: Nanoseconds since the Unix epoch.
            time_zone: A TimeZone, IANA zone id or offset such as "+05:30".
            calendar: Calendar or id; ISO by default.

        Raises:
            TempyralTypeError: If epoch_nanoseconds is not an int.
            RangeError: If it is out of range or the zone is unknown.
        """
        if isinstance(epoch_nanoseconds, bool) or not isinstance(epoch_nanoseconds, int):
            raise TempyralTypeError(
                f"epoch_nanoseconds must be an int, got {type(epoch_nanoseconds).__name__}"
            )
        self._init(
            check_epoch_nanoseconds(epoch_nanoseconds),
            TimeZone.from_value(time_zone),
            get_calendar(calendar),
        )

    def _init(self, epoch_ns: int, time_zone: TimeZone, calendar: Calendar) -> None:
        self._epoch_ns: int = epoch_ns
        self._time_zone: TimeZone = time_zone
        self._calendar: Calendar = calendar
        self._offset_ns: int = time_zone.get_offset_nanoseconds_for(epoch_ns)
        iso, time_nanos = iso_date_time_from_epoch_nanoseconds(epoch_ns + self._offset_ns)
        self._iso: IsoDate = iso
        self._time: int = time_nanos

    @classmethod
    def _create(cls, epoch_ns: int, time_zone: TimeZone, calendar: Calendar) -> ZonedDateTime:
        result = cls.__new__(cls)
        result._init(check_epoch_nanoseconds(epoch_ns), time_zone, calendar)
        return result

    @classmethod
    def from_fields(
        cls,
        fields: Mapping[str, Any],
        overflow: Overflow | str | None = None,
        disambiguation: Disambiguation | str | None = None,
        offset: OffsetOption | str | None = None,
    ) -> ZonedDateTime:
        """Create a ZonedDateTime from calendar, time and zone fields.

        Args:
            fields: year (or era/era_year), month or month_code, day, the
                time fields, a required time_zone, an optional offset
                string and an optional calendar.
            overflow: constrain (default) or reject.
            disambiguation: compatible (default), earlier, later or reject.
            offset: How the offset field competes with the zone rules;
                reject by default.

        Examples:
            >>> ZonedDateTime.from_fields({
            ...     "year": 2020, "month": 11, "day": 1, "hour": 1, "minute": 30,
            ...     "time_zone": "America/Los_Angeles", "offset": "-08:00",
            ... }).offset
            '-08:00'
        """
        calendar = get_calendar(fields.get("calendar"))
        rest = {key: value for key, value in fields.items() if key != "calendar"}
        check_field_names(rest, ZONED_FIELD_NAMES)
        if rest.get("time_zone") is None:
            raise TempyralTypeError("time_zone is required")
        time_zone = TimeZone.from_value(rest["time_zone"])
        overflow_option = get_option(overflow, Overflow, Overflow.CONSTRAIN, "overflow")
        disambiguation_option = get_option(
            disambiguation, Disambiguation, Disambiguation.COMPATIBLE, "disambiguation"
        )
        offset_option = get_option(offset, OffsetOption, OffsetOption.REJECT, "offset")
        date_fields = {key: value for key, value in rest.items() if key in DATE_FIELD_NAMES}
        iso = calendar.date_from_fields(date_fields, overflow_option)
        time_nanos = time_nanos_from_fields(rest, overflow_option)
        offset_string = rest.get("offset")
        if offset_string is None:
            behaviour, offset_ns = OffsetBehaviour.WALL, 0
        else:
            behaviour, offset_ns = OffsetBehaviour.OPTION, parse_offset_string(offset_string)
        epoch_ns = interpret_iso_date_time_offset(
            iso, time_nanos, behaviour, offset_ns, time_zone,
            disambiguation_option, offset_option,
        )
        return cls._create(epoch_ns, time_zone, calendar)

    @classmethod
    def from_string(
        cls,
        s: str,
        disambiguation: Disambiguation | str | None = None,
        offset: OffsetOption | str | None = None,
    ) -> ZonedDateTime:
        """Parse an RFC 9557 string with a bracketed time zone.

        "Z" means the string names an exact time. An explicit offset is
        checked against the zone according to the offset option, and an
        offset without seconds matches a zone offset rounded to minutes.
        A date without a time means the start of that day.

        Raises:
            ParseError: If the string is malformed or has no time zone.
            RangeError: If the offset does not match and offset is "reject"
                (the default), or disambiguation is "reject" and the time is
                skipped or repeated.

        Examples:
            >>> str(ZonedDateTime.from_string("2020-11-01T01:30-08:00[America/Los_Angeles]"))
            '2020-11-01T01:30:00-08:00[America/Los_Angeles]'
        """
        disambiguation_option = get_option(
            disambiguation, Disambiguation, Disambiguation.COMPATIBLE, "disambiguation"
        )
        offset_option = get_option(offset, OffsetOption, OffsetOption.REJECT, "offset")
        parsed = parse_zoned_date_time(s)
        time_zone = TimeZone(parsed.time_zone)
        calendar = get_calendar(parsed.calendar)
        match_minutes = False
        if parsed.z:
            behaviour, offset_ns = OffsetBehaviour.EXACT, 0
        elif parsed.offset is not None:
            behaviour = OffsetBehaviour.OPTION
            offset_ns = parse_offset_string(parsed.offset)
            match_minutes = not offset_has_sub_minute_precision(parsed.offset)
        else:
            behaviour, offset_ns = OffsetBehaviour.WALL, 0
        epoch_ns = interpret_iso_date_time_offset(
            parsed.date,
            parsed.time_nanos,
            behaviour,
            offset_ns,
            time_zone,
            disambiguation_option,
            offset_option,
            match_minutes,
        )
        return cls._create(epoch_ns, time_zone, calendar)

    @classmethod
    def from_value(cls, value: object) -> ZonedDateTime:
        """Convert a ZonedDateTime, string or field mapping."""
        if isinstance(value, ZonedDateTime):
            return value
        if isinstance(value, str):
            return cls.from_string(value)
        if isinstance(value, Mapping):
            return cls.from_fields(value)
        raise TempyralTypeError(f"cannot convert {type(value).__name__} to ZonedDateTime")

    # --- fields ---------------------------------------------------------

    def _calendar_date(self) -> CalendarDate:
        return self._calendar.from_iso(self._iso)

    @property
    def calendar(self) -> Calendar:
        return self._calendar

    @property
    def time_zone(self) -> TimeZone:
        return self._time_zone

    @property
    def time_zone_id(self) -> str:
        return self._time_zone.id

    @property
    def iso_date(self) -> IsoDate:
        """The ISO date of the wall clock."""
        return self._iso

    @property
    def epoch_nanoseconds(self) -> int:
        return self._epoch_ns

    @property
    def epoch_milliseconds(self) -> int:
        return self._epoch_ns // NANOS_PER_MILLISECOND

    @property
    def offset_nanoseconds(self) -> int:
        return self._offset_ns

    @property
    def offset(self) -> str:
        """The UTC offset, with seconds only when it has them."""
        return format_offset_nanoseconds(self._offset_ns)

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

    @property
    def hours_in_day(self) -> float:
        """Hours from the start of this day to the start of the next."""
        start = get_start_of_day(self._time_zone, self._iso)
        end = get_start_of_day(self._time_zone, add_days_to_iso_date(self._iso, 1))
        return (end - start) / NANOS_PER_HOUR

    # --- derived values -------------------------------------------------

    def with_fields(
        self,
        overflow: Overflow | str | None = None,
        disambiguation: Disambiguation | str | None = None,
        offset: OffsetOption | str | None = None,
        **fields: Any,
    ) -> ZonedDateTime:
        """Return a copy with some date or time fields replaced.

        The current offset is kept when the zone still allows it ("prefer"),
        so changing a field of a repeated hour stays on the same side.

        Examples:
            >>> zdt = ZonedDateTime.from_string("2020-11-01T01:15-08:00[America/Los_Angeles]")
            >>> zdt.with_fields(minute=45).offset
            '-08:00'
        """
        check_field_names(fields, DATE_FIELD_NAMES | TIME_FIELD_NAMES)
        overflow_option = get_option(overflow, Overflow, Overflow.CONSTRAIN, "overflow")
        disambiguation_option = get_option(
            disambiguation, Disambiguation, Disambiguation.COMPATIBLE, "disambiguation"
        )
        offset_option = get_option(offset, OffsetOption, OffsetOption.PREFER, "offset")
        date_overlay = {key: value for key, value in fields.items() if key in DATE_FIELD_NAMES}
        merged = self._calendar.merge_fields(self._date_fields(), date_overlay)
        iso = self._calendar.date_from_fields(merged, overflow_option)
        time_nanos = time_nanos_from_fields(fields, overflow_option, self._time)
        epoch_ns = interpret_iso_date_time_offset(
            iso, time_nanos, OffsetBehaviour.OPTION, self._offset_ns, self._time_zone,
            disambiguation_option, offset_option,
        )
        return ZonedDateTime._create(epoch_ns, self._time_zone, self._calendar)

    def with_plain_time(self, time: object = None) -> ZonedDateTime:
        """Replace the wall-clock time; without a time, use the start of the day."""
        if time is None:
            epoch_ns = get_start_of_day(self._time_zone, self._iso)
        else:
            epoch_ns = self._time_zone.get_epoch_nanoseconds_for(
                self._iso, PlainTime.from_value(time)._nanos, Disambiguation.COMPATIBLE
            )
        return ZonedDateTime._create(epoch_ns, self._time_zone, self._calendar)

    def with_time_zone(self, time_zone: TimeZone | str) -> ZonedDateTime:
        """The same exact time seen in another zone."""
        return ZonedDateTime._create(self._epoch_ns, TimeZone.from_value(time_zone), self._calendar)

    def with_calendar(self, calendar: Calendar | str) -> ZonedDateTime:
        if calendar is None:
            raise TempyralTypeError("calendar is required")
        return ZonedDateTime._create(self._epoch_ns, self._time_zone, get_calendar(calendar))

    def start_of_day(self) -> ZonedDateTime:
        """The first instant of this calendar day, which may not be midnight."""
        epoch_ns = get_start_of_day(self._time_zone, self._iso)
        return ZonedDateTime._create(epoch_ns, self._time_zone, self._calendar)

    def get_time_zone_transition(
        self, direction: TransitionDirection | str
    ) -> ZonedDateTime | None:
        """Return the next or previous offset change, or None if there is none.

        Examples:
            >>> zdt = ZonedDateTime.from_string("2020-06-01T00:00-07:00[America/Los_Angeles]")
            >>> str(zdt.get_time_zone_transition("next"))
            '2020-11-01T01:00:00-08:00[America/Los_Angeles]'
        """
        epoch_ns = self._time_zone.get_time_zone_transition(self._epoch_ns, direction)
        if epoch_ns is None:
            return None
        return ZonedDateTime._create(epoch_ns, self._time_zone, self._calendar)

    # --- arithmetic -----------------------------------------------------

    def add(self, duration: object, overflow: Overflow | str | None = None) -> ZonedDateTime:
        """Add a duration.

        Years, months, weeks and days are added to the wall-clock date and
        resolved with "compatible"; the time part is then added to the exact
        time.
        """
        return self._add(Duration.from_value(duration), overflow)

    def subtract(self, duration: object, overflow: Overflow | str | None = None) -> ZonedDateTime:
        return self._add(Duration.from_value(duration).negated(), overflow)

    def _add(self, duration: Duration, overflow: Overflow | str | None) -> ZonedDateTime:
        option = get_option(overflow, Overflow, Overflow.CONSTRAIN, "overflow")
        epoch_ns = add_zoned_date_time(
            self._epoch_ns, self._time_zone, self._calendar, duration._to_internal(), option
        )
        return ZonedDateTime._create(epoch_ns, self._time_zone, self._calendar)

    def until(self, other: object, **options: Any) -> Duration:
        """Return the duration from this value to another.

        Args:
            other: A ZonedDateTime or anything from_value() accepts.
            **options: largest_unit (default hour), smallest_unit,
                rounding_mode (default trunc), rounding_increment.

        Raises:
            RangeError: If the calendars differ, or largest_unit is a
                calendar unit or day and the time zones differ.
        """
        return self._difference("until", other, options)

    def since(self, other: object, **options: Any) -> Duration:
        return self._difference("since", other, options)

    def _difference(self, operation: str, other: object, options: dict[str, Any]) -> Duration:
        other = ZonedDateTime.from_value(other)
        if self._calendar != other._calendar:
            raise RangeError(
                f"cannot compute a difference between calendars "
                f"{self._calendar.id!r} and {other._calendar.id!r}"
            )
        settings = get_difference_settings(
            operation, options, ALL_UNITS, TemporalUnit.NANOSECOND, TemporalUnit.HOUR
        )
        if not settings.largest_unit.is_date_unit:
            internal = difference_instant(
                self._epoch_ns,
                other._epoch_ns,
                settings.rounding_increment,
                settings.smallest_unit,
                settings.rounding_mode,
            )
            result = Duration._from_internal(internal, settings.largest_unit)
        else:
            if self._time_zone != other._time_zone:
                raise RangeError(
                    f"cannot compute a difference in {settings.largest_unit.plural} between "
                    f"time zones {self._time_zone.id!r} and {other._time_zone.id!r}"
                )
            if self._epoch_ns == other._epoch_ns:
                return Duration()
            internal = difference_zoned_date_time_with_rounding(
                self._epoch_ns, other._epoch_ns, self._time_zone, self._calendar, settings
            )
            result = Duration._from_internal(internal, TemporalUnit.HOUR)
        return result.negated() if operation == "since" else result

    def round(
        self,
        smallest_unit: object = None,
        *,
        rounding_increment: int | None = None,
        rounding_mode: RoundingMode | str | None = None,
    ) -> ZonedDateTime:
        """Round the wall clock to a unit from day down to nanosecond.

        Day rounding uses the actual length of the day in the zone. Other
        units round the wall clock, then keep the current offset if the zone
        allows it.

        Examples:
            >>> zdt = ZonedDateTime.from_string("2020-03-08T13:00-07:00[America/Los_Angeles]")
            >>> str(zdt.round("day"))
            '2020-03-09T00:00:00-07:00[America/Los_Angeles]'
        """
        unit, increment, mode = get_round_settings(smallest_unit, rounding_increment, rounding_mode)
        if unit is TemporalUnit.NANOSECOND and increment == 1:
            return self
        if unit is TemporalUnit.DAY:
            start = get_start_of_day(self._time_zone, self._iso)
            end = get_start_of_day(self._time_zone, add_days_to_iso_date(self._iso, 1))
            epoch_ns = round_number_to_increment(self._epoch_ns - start, end - start, mode) + start
        else:
            iso, time_nanos = round_iso_date_time(self._iso, self._time, increment, unit, mode)
            epoch_ns = interpret_iso_date_time_offset(
                iso, time_nanos, OffsetBehaviour.OPTION, self._offset_ns, self._time_zone,
                Disambiguation.COMPATIBLE, OffsetOption.PREFER,
            )
        return ZonedDateTime._create(epoch_ns, self._time_zone, self._calendar)

    # --- conversion -----------------------------------------------------

    def to_instant(self) -> Instant:
        return Instant(self._epoch_ns)

    def to_plain_date(self) -> PlainDate:
        return PlainDate._create(self._iso, self._calendar)

    def to_plain_time(self) -> PlainTime:
        return PlainTime._from_nanos(self._time)

    def to_plain_date_time(self) -> PlainDateTime:
        return PlainDateTime._create(self._iso, self._time, self._calendar)

    def to_string(
        self,
        *,
        calendar_name: CalendarName | str | None = None,
        fractional_second_digits: int | str | None = None,
        smallest_unit: object = None,
        rounding_mode: RoundingMode | str | None = None,
        offset: OffsetDisplay | str | None = None,
        time_zone_name: TimeZoneName | str | None = None,
    ) -> str:
        """Format as an RFC 9557 string with offset, zone and calendar.

        Examples:
            >>> zdt = ZonedDateTime(0, "Europe/Paris")
            >>> zdt.to_string()
            '1970-01-01T01:00:00+01:00[Europe/Paris]'
            >>> zdt.to_string(offset="never", time_zone_name="critical")
            '1970-01-01T01:00:00[!Europe/Paris]'
        """
        calendar_display = get_option(
            calendar_name, CalendarName, CalendarName.AUTO, "calendar_name"
        )
        mode = get_option(rounding_mode, RoundingMode, RoundingMode.TRUNC, "rounding_mode")
        offset_display = get_option(offset, OffsetDisplay, OffsetDisplay.AUTO, "offset")
        zone_display = get_option(time_zone_name, TimeZoneName, TimeZoneName.AUTO, "time_zone_name")
        digits = get_fractional_second_digits(fractional_second_digits)
        precision, unit, increment = to_seconds_string_precision(smallest_unit, digits)
        epoch_ns = check_epoch_nanoseconds(
            round_number_to_increment(self._epoch_ns, increment * unit.nanoseconds, mode)
        )
        offset_ns = self._time_zone.get_offset_nanoseconds_for(epoch_ns)
        iso, time_nanos = iso_date_time_from_epoch_nanoseconds(epoch_ns + offset_ns)
        text = format_date(iso) + "T" + format_time(time_nanos, precision)
        if offset_display is OffsetDisplay.AUTO:
            text += format_offset_rounded(offset_ns)
        if zone_display is TimeZoneName.AUTO:
            text += f"[{self._time_zone.id}]"
        elif zone_display is TimeZoneName.CRITICAL:
            text += f"[!{self._time_zone.id}]"
        return text + format_calendar_annotation(self._calendar.id, calendar_display)

    def to_json(self) -> str:
        return self.to_string()

    # --- comparison -----------------------------------------------------

    @staticmethod
    def compare(one: object, two: object) -> int:
        """Compare exact times, ignoring zones and calendars. Returns -1, 0 or 1."""
        ns1 = ZonedDateTime.from_value(one)._epoch_ns
        ns2 = ZonedDateTime.from_value(two)._epoch_ns
        return (ns1 > ns2) - (ns1 < ns2)

    def equals(self, other: object) -> bool:
        """True if the exact time, zone and calendar are all equal."""
        return self == ZonedDateTime.from_value(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ZonedDateTime):
            return NotImplemented
        return (
            self._epoch_ns == other._epoch_ns
            and self._time_zone == other._time_zone
            and self._calendar == other._calendar
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ZonedDateTime):
            return NotImplemented
        return self._epoch_ns < other._epoch_ns

    def __le__(self, other: object) -> bool:
        if not isinstance(other, ZonedDateTime):
            return NotImplemented
        return self._epoch_ns <= other._epoch_ns

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, ZonedDateTime):
            return NotImplemented
        return self._epoch_ns > other._epoch_ns

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, ZonedDateTime):
            return NotImplemented
        return self._epoch_ns >= other._epoch_ns

    def __hash__(self) -> int:
        return hash(("ZonedDateTime", self._epoch_ns, self._time_zone.id, self._calendar.id))

    def __repr__(self) -> str:
        return f"ZonedDateTime({self.to_string()!r})"

    def __str__(self) -> str:
        return self.to_string()


__all__ = ["ZonedDateTime"]
