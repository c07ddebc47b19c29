"""TimeZone value and UTC offset strings.

This module provides the TimeZone class, which names either an IANA time
zone (resolved through a ZoneRuleProvider) or a fixed UTC offset, and the
helpers that parse and format offset strings such as "-07:00".
"""

from __future__ import annotations

import re

from tempyral._internal.calendar import (
    IsoDate,
    iso_date_time_from_epoch_nanoseconds,
    utc_epoch_nanoseconds,
)
from tempyral._internal.constants import (
    NANOS_PER_HOUR,
    NANOS_PER_MINUTE,
    NANOS_PER_SECOND,
)
from tempyral._internal.options import (
    Disambiguation,
    TransitionDirection,
    get_option,
)
from tempyral._internal.validation import check_epoch_nanoseconds
from tempyral.errors import ParseError, RangeError, TempyralTypeError
from tempyral.zones.provider import ZoneRuleProvider, default_provider

# Offset time zone ids carry at most minute precision
_OFFSET_ID_RE = re.compile(r"^([+-])(\d{2})(?::?(\d{2}))?$")

# Offsets in date-time strings may carry seconds and a fraction
_OFFSET_RE = re.compile(
    r"^([+\-−])(\d{2})(?:(:?)(\d{2})(?:\3(\d{2})(?:[.,](\d{1,9}))?)?)?$"
)


def parse_offset_string(s: str) -> int:
    """Parse a UTC offset string to nanoseconds.

    Accepts ±HH, ±HHMM, ±HH:MM, ±HH:MM:SS and ±HH:MM:SS.fffffffff (and the
    matching basic forms without colons).

    Raises:
        ParseError: If the string is not a valid offset.

    Examples:
        >>> parse_offset_string("+05:30")
        19800000000000
        >>> parse_offset_string("-0800")
        -28800000000000
    """
    match = _OFFSET_RE.match(s)
    if match is None:
        raise ParseError(f"invalid UTC offset: {s!r}")
    sign_str, hours_str, _, minutes_str, seconds_str, fraction_str = match.groups()
    hours = int(hours_str)
    minutes = int(minutes_str or 0)
    seconds = int(seconds_str or 0)
    if hours > 23 or minutes > 59 or seconds > 59:
        raise ParseError(f"UTC offset out of range: {s!r}")
    nanoseconds = int((fraction_str or "").ljust(9, "0"))
    total = (
        hours * NANOS_PER_HOUR
        + minutes * NANOS_PER_MINUTE
        + seconds * NANOS_PER_SECOND
        + nanoseconds
    )
    return -total if sign_str != "+" else total


def offset_has_sub_minute_precision(s: str) -> bool:
    """Return True if an offset string includes seconds."""
    match = _OFFSET_RE.match(s)
    return match is not None and match.group(5) is not None


def format_offset_nanoseconds(offset_ns: int) -> str:
    """Format an offset as ±HH:MM, adding :SS and a fraction only when nonzero.

    Examples:
        >>> format_offset_nanoseconds(-25200000000000)
        '-07:00'
        >>> format_offset_nanoseconds(-17762000000000)
        '-04:56:02'
    """
    sign = "-" if offset_ns < 0 else "+"
    remaining = abs(offset_ns)
    hours, remaining = divmod(remaining, NANOS_PER_HOUR)
    minutes, remaining = divmod(remaining, NANOS_PER_MINUTE)
    seconds, fraction = divmod(remaining, NANOS_PER_SECOND)
    result = f"{sign}{hours:02d}:{minutes:02d}"
    if seconds or fraction:
        result += f":{seconds:02d}"
        if fraction:
            result += "." + f"{fraction:09d}".rstrip("0")
    return result


def round_offset_to_minutes(offset_ns: int) -> int:
    """Round an offset to the nearest minute, ties away from zero."""
    sign = -1 if offset_ns < 0 else 1
    minutes, remainder = divmod(abs(offset_ns), NANOS_PER_MINUTE)
    if remainder * 2 >= NANOS_PER_MINUTE:
        minutes += 1
    return sign * minutes * NANOS_PER_MINUTE


def format_offset_rounded(offset_ns: int) -> str:
    """Format an offset rounded to minute precision, as written in date-time strings."""
    return format_offset_nanoseconds(round_offset_to_minutes(offset_ns))


class TimeZone:
    """A time zone: an IANA zone or a fixed UTC offset.

    Named zones are canonicalized case-insensitively against the provider.
    Fixed offsets are written ±HH:MM and never have transitions.

    Attributes:
        id: The canonical identifier, e.g. "America/Los_Angeles" or "+05:30".

    Examples:
        >>> TimeZone("america/los_angeles").id
        'America/Los_Angeles'
        >>> TimeZone("+0530").id
        '+05:30'
        >>> TimeZone("+05:30").get_offset_nanoseconds_for(0)
        19800000000000
    """

    __slots__ = ("_id", "_fixed_offset", "_provider")

    def __init__(self, identifier: str, provider: ZoneRuleProvider | None = None) -> None:
        """Create a TimeZone.

        Args:
            identifier: IANA zone name, "UTC", or an offset ±HH:MM.
            provider: The zone rule provider; defaults to ZoneInfoProvider.

        Raises:
            TempyralTypeError: If identifier is not a string.
            RangeError: If the zone is unknown or the offset out of range.
        """
        if not isinstance(identifier, str):
            raise TempyralTypeError(
                f"time zone must be a string, got {type(identifier).__name__}"
            )
        self._provider: ZoneRuleProvider = provider or default_provider()
        match = _OFFSET_ID_RE.match(identifier)
        if match is not None:
            sign_str, hours_str, minutes_str = match.groups()
            hours = int(hours_str)
            minutes = int(minutes_str or 0)
            if hours > 23 or minutes > 59:
                raise RangeError(f"time zone offset out of range: {identifier!r}")
            offset = hours * NANOS_PER_HOUR + minutes * NANOS_PER_MINUTE
            self._fixed_offset: int | None = -offset if sign_str == "-" else offset
            self._id: str = format_offset_nanoseconds(self._fixed_offset)
        else:
            self._fixed_offset = None
            self._id = self._provider.canonicalize(identifier)

    @classmethod
    def utc(cls) -> TimeZone:
        """Return the UTC time zone."""
        return cls("UTC")

    @classmethod
    def from_value(cls, value: object) -> TimeZone:
        """Convert a TimeZone, zone id or date-time string to a TimeZone.

        A date-time string contributes its bracketed zone annotation, or
        failing that its offset ("Z" meaning UTC).

        Examples:
            >>> TimeZone.from_value("2020-01-01T00:00[Europe/Paris]").id
            'Europe/Paris'
        """
        if isinstance(value, TimeZone):
            return value
        if not isinstance(value, str):
            raise TempyralTypeError(f"time zone must be a string, got {type(value).__name__}")
        try:
            return cls(value)
        except RangeError:
            from tempyral.format.iso8601 import parse_time_zone_from_string

            identifier = parse_time_zone_from_string(value)
            if identifier is None:
                raise
            return cls(identifier)

    @property
    def id(self) -> str:
        """The canonical zone identifier."""
        return self._id

    @property
    def is_fixed_offset(self) -> bool:
        """True for ±HH:MM zones."""
        return self._fixed_offset is not None

    @property
    def provider(self) -> ZoneRuleProvider:
        """The rule provider this zone consults."""
        return self._provider

    def get_offset_nanoseconds_for(self, epoch_ns: int) -> int:
        """Return the UTC offset in effect at an instant."""
        if self._fixed_offset is not None:
            return self._fixed_offset
        return self._provider.offset_at(self._id, epoch_ns) * NANOS_PER_SECOND

    def get_offset_string_for(self, epoch_ns: int) -> str:
        """Return the UTC offset at an instant as a string."""
        return format_offset_nanoseconds(self.get_offset_nanoseconds_for(epoch_ns))

    def get_iso_date_time_for(self, epoch_ns: int) -> tuple[IsoDate, int]:
        """Return the wall-clock (ISO date, nanoseconds of day) at an instant.

        Exact to wall-clock conversion is always unambiguous.
        """
        offset = self.get_offset_nanoseconds_for(epoch_ns)
        return iso_date_time_from_epoch_nanoseconds(epoch_ns + offset)

    def get_possible_epoch_nanoseconds(
        self, date: IsoDate, time_nanos: int
    ) -> tuple[int, ...]:
        """Return every instant that shows a given wall-clock time.

        Returns:
            An empty tuple in a gap, two instants in an overlap, one
            otherwise; ascending.

        Raises:
            RangeError: If a resulting instant is outside the supported range.
        """
        utc_ns = utc_epoch_nanoseconds(date, time_nanos)
        if self._fixed_offset is not None:
            offsets: tuple[int, ...] = (self._fixed_offset,)
        else:
            offsets = tuple(
                offset * NANOS_PER_SECOND
                for offset in self._provider.candidate_offsets(self._id, date, time_nanos)
            )
        return tuple(check_epoch_nanoseconds(utc_ns - offset) for offset in offsets)

    def get_epoch_nanoseconds_for(
        self,
        date: IsoDate,
        time_nanos: int,
        disambiguation: Disambiguation | str = Disambiguation.COMPATIBLE,
    ) -> int:
        """Resolve a wall-clock time to one instant.

        Raises:
            RangeError: If the time is in a gap or overlap and disambiguation
                is "reject".
        """
        from tempyral.zones.resolver import disambiguate_possible_epoch_nanoseconds

        option = get_option(
            disambiguation, Disambiguation, Disambiguation.COMPATIBLE, "disambiguation"
        )
        possible = self.get_possible_epoch_nanoseconds(date, time_nanos)
        return disambiguate_possible_epoch_nanoseconds(
            possible, self, date, time_nanos, option
        )

    def get_time_zone_transition(
        self, epoch_ns: int, direction: TransitionDirection | str
    ) -> int | None:
        """Return the next or previous offset transition, or None.

        Fixed-offset zones never have transitions.
        """
        option = get_option(direction, TransitionDirection, None, "direction")
        if option is None:
            raise TempyralTypeError("direction is required")
        if self._fixed_offset is not None:
            return None
        result = self._provider.next_transition(self._id, epoch_ns, option)
        if result is None:
            return None
        try:
            return check_epoch_nanoseconds(result)
        except RangeError:
            return None

    def equals(self, other: object) -> bool:
        """Return True if both zones have the same canonical id."""
        if not isinstance(other, TimeZone):
            other = TimeZone.from_value(other)
        return self._id == other._id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeZone):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"TimeZone({self._id!r})"

    def __str__(self) -> str:
        return self._id


__all__ = [
    "TimeZone",
    "parse_offset_string",
    "offset_has_sub_minute_precision",
    "format_offset_nanoseconds",
    "format_offset_rounded",
    "round_offset_to_minutes",
]
