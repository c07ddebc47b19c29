"""ISO 8601 / RFC 9557 formatting and parsing.

This module converts between strings and the raw fields of every Tempyral
type. Parsing returns plain records (ISO fields, offset, annotations); the
core classes turn them into values. Formatting works on ISO fields too.

Supported syntax:

Dates:
    - YYYY-MM-DD and YYYYMMDD
    - ±YYYYYY-MM-DD (extended years; -000000 is rejected)

Times:
    - HH:MM:SS.fffffffff and HHMMSS.fffffffff (1-9 fraction digits)
    - HH:MM, HHMM, HH

Date-times:
    - Date, then "T", "t" or a space, then a time
    - Followed by "Z" or a UTC offset, e.g. "-07:00"

Annotations:
    - [Time/Zone] or [+HH:MM]: the time zone
    - [u-ca=calendar]: the calendar
    - [!...]: critical; an unknown critical annotation is an error

Durations:
    - ±PnYnMnWnDTnHnMn.nS, with a fraction only on the smallest time unit

Examples:
    >>> parse_date_time("2020-03-08T02:30-08:00[America/Los_Angeles]").time_zone
    'America/Los_Angeles'
    >>> format_date(IsoDate(-1, 1, 1))
    '-000001-01-01'
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Union

from tempyral._internal.calendar import IsoDate, days_in_month
from tempyral._internal.constants import (
    NANOS_PER_HOUR,
    NANOS_PER_MICROSECOND,
    NANOS_PER_MILLISECOND,
    NANOS_PER_MINUTE,
    NANOS_PER_SECOND,
)
from tempyral._internal.options import CalendarName
from tempyral.errors import ParseError, RangeError, TempyralTypeError
from tempyral.units.timeunit import TemporalUnit, get_temporal_unit

_ANNOTATION_KEY_RE = re.compile(r"^[a-z_][a-z0-9_-]*$")
_ANNOTATION_VALUE_RE = re.compile(r"^[A-Za-z0-9]+(?:-[A-Za-z0-9]+)*$")
_TIME_ZONE_NAME_RE = re.compile(r"^[A-Za-z._][A-Za-z0-9._+\-]*(?:/[A-Za-z0-9._+\-]+)*$")
_TIME_ZONE_OFFSET_RE = re.compile(r"^[+\-−]\d{2}(?::?\d{2})?$")

_DURATION_RE = re.compile(
    r"^(?P<sign>[+\-−])?[Pp]"
    r"(?:(?P<years>\d+)[Yy])?"
    r"(?:(?P<months>\d+)[Mm])?"
    r"(?:(?P<weeks>\d+)[Ww])?"
    r"(?:(?P<days>\d+)[Dd])?"
    r"(?:(?P<time>[Tt])"
    r"(?:(?P<hours>\d+)(?:[.,](?P<hours_fraction>\d{1,9}))?[Hh])?"
    r"(?:(?P<minutes>\d+)(?:[.,](?P<minutes_fraction>\d{1,9}))?[Mm])?"
    r"(?:(?P<seconds>\d+)(?:[.,](?P<seconds_fraction>\d{1,9}))?[Ss])?"
    r")?$"
)


@dataclass
class ParsedDateTime:
    """Raw fields of a parsed date-time string.

    Attributes:
        date: The ISO date, or None for time-only strings.
        time_nanos: Nanoseconds of day, or None when the string has no time.
        z: True if the offset was "Z".
        offset: The offset string, if any.
        time_zone: The bracketed time zone annotation, if any.
        calendar: The u-ca annotation, if any.
    """

    date: IsoDate | None = None
    time_nanos: int | None = None
    z: bool = False
    offset: str | None = None
    time_zone: str | None = None
    calendar: str | None = None


class _Scanner:
    """Cursor over a string being parsed."""

    __slots__ = ("text", "pos")

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def take(self, chars: str) -> str | None:
        """Consume one character if it is in chars."""
        ch = self.peek()
        if ch and ch in chars:
            self.pos += 1
            return ch
        return None

    def digits(self, count: int) -> int:
        end = self.pos + count
        chunk = self.text[self.pos:end]
        if len(chunk) != count or not chunk.isdigit() or not chunk.isascii():
            raise ParseError(f"expected {count} digits at position {self.pos} in {self.text!r}")
        self.pos = end
        return int(chunk)

    def has_digits(self, count: int) -> bool:
        chunk = self.text[self.pos:self.pos + count]
        return len(chunk) == count and chunk.isdigit() and chunk.isascii()

    def fail(self, message: str) -> ParseError:
        return ParseError(f"{message} in {self.text!r}")


def _parse_year(sc: _Scanner) -> int:
    sign = sc.take("+-−")
    if sign is None:
        return sc.digits(4)
    start = sc.pos
    year = sc.digits(6)
    if sign != "+" and year == 0:
        raise ParseError(f"-{sc.text[start:sc.pos]} is not a valid year in {sc.text!r}")
    return year if sign == "+" else -year


def _parse_date(sc: _Scanner) -> tuple[int, int, int]:
    year = _parse_year(sc)
    extended = sc.take("-") is not None
    month = sc.digits(2)
    if extended and sc.take("-") is None:
        raise sc.fail("expected '-' after month")
    day = sc.digits(2)
    return year, month, day


def _parse_fraction(sc: _Scanner) -> int:
    """Parse an optional [.,]fraction into nanoseconds."""
    if sc.take(".,") is None:
        return 0
    start = sc.pos
    while sc.peek().isdigit() and sc.peek().isascii():
        sc.pos += 1
    digits = sc.text[start:sc.pos]
    if not digits:
        raise sc.fail("expected fraction digits")
    if len(digits) > 9:
        raise sc.fail("more than nine fractional second digits")
    return int(digits.ljust(9, "0"))


def _parse_time(sc: _Scanner) -> int:
    hour = sc.digits(2)
    minute = second = fraction = 0
    if sc.take(":") is not None:
        minute = sc.digits(2)
        if sc.take(":") is not None:
            second = sc.digits(2)
            fraction = _parse_fraction(sc)
    elif sc.has_digits(2):
        minute = sc.digits(2)
        if sc.has_digits(2):
            second = sc.digits(2)
            fraction = _parse_fraction(sc)
    if hour > 23 or minute > 59 or second > 60:
        raise sc.fail("time out of range")
    # Leap seconds are read as the last second of the minute
    second = min(second, 59)
    return (
        hour * NANOS_PER_HOUR
        + minute * NANOS_PER_MINUTE
        + second * NANOS_PER_SECOND
        + fraction
    )


def _parse_offset(sc: _Scanner) -> str:
    start = sc.pos
    sc.take("+-−")
    sc.digits(2)
    if sc.take(":") is not None:
        sc.digits(2)
        if sc.take(":") is not None:
            sc.digits(2)
            _parse_fraction(sc)
    elif sc.has_digits(2):
        sc.digits(2)
        if sc.has_digits(2):
            sc.digits(2)
            _parse_fraction(sc)
    text = sc.text[start:sc.pos]
    from tempyral.zones.timezone import parse_offset_string

    parse_offset_string(text)
    return text


def _parse_annotations(sc: _Scanner, result: ParsedDateTime) -> None:
    first = True
    calendar_count = 0
    calendar_critical = False
    while sc.take("[") is not None:
        critical = sc.take("!") is not None
        end = sc.text.find("]", sc.pos)
        if end < 0:
            raise sc.fail("unterminated annotation")
        content = sc.text[sc.pos:end]
        sc.pos = end + 1
        if "=" in content:
            key, value = content.split("=", 1)
            if not _ANNOTATION_KEY_RE.match(key) or not _ANNOTATION_VALUE_RE.match(value):
                raise sc.fail(f"invalid annotation [{content}]")
            if key == "u-ca":
                calendar_count += 1
                if calendar_count == 1:
                    result.calendar = value
                    calendar_critical = critical
                elif critical or calendar_critical:
                    raise sc.fail("conflicting critical calendar annotations")
            elif critical:
                raise sc.fail(f"unknown critical annotation [!{content}]")
        else:
            if not first:
                raise sc.fail("time zone annotation must come first")
            if not (
                _TIME_ZONE_OFFSET_RE.match(content) or _TIME_ZONE_NAME_RE.match(content)
            ):
                raise sc.fail(f"invalid time zone annotation [{content}]")
            result.time_zone = content
        first = False


def _check_date(year: int, month: int, day: int, text: str) -> IsoDate:
    if month < 1 or month > 12 or day < 1 or day > days_in_month(year, month):
        raise ParseError(f"date out of range in {text!r}")
    return IsoDate(year, month, day)


def _finish(sc: _Scanner) -> None:
    if not sc.at_end():
        raise sc.fail(f"unexpected text {sc.text[sc.pos:]!r}")


def _parse_date_time_tail(sc: _Scanner, result: ParsedDateTime) -> None:
    """Parse what follows a date: [sep time] [offset] [annotations]."""
    if sc.take("Tt ") is not None:
        result.time_nanos = _parse_time(sc)
        ch = sc.peek()
        if ch in ("Z", "z"):
            sc.pos += 1
            result.z = True
        elif ch and ch in "+-−":
            result.offset = _parse_offset(sc)
    _parse_annotations(sc, result)
    _finish(sc)


def parse_date_time(text: str, *, require_time: bool = False) -> ParsedDateTime:
    """Parse a string that starts with a full date.

    Args:
        text: The string.
        require_time: Reject strings without a time part.

    Raises:
        ParseError: If the string is malformed.
    """
    if not isinstance(text, str):
        raise TempyralTypeError(f"expected a string, got {type(text).__name__}")
    sc = _Scanner(text)
    year, month, day = _parse_date(sc)
    result = ParsedDateTime(date=_check_date(year, month, day, text))
    _parse_date_time_tail(sc, result)
    if require_time and result.time_nanos is None:
        raise ParseError(f"a time is required in {text!r}")
    return result


def parse_instant(text: str) -> ParsedDateTime:
    """Parse an exact-time string; "Z" or an offset is required."""
    result = parse_date_time(text, require_time=True)
    if not result.z and result.offset is None:
        raise ParseError(f"an offset or Z is required in {text!r}")
    return result


def parse_zoned_date_time(text: str) -> ParsedDateTime:
    """Parse a zoned string; a bracketed time zone is required."""
    result = parse_date_time(text)
    if result.time_zone is None:
        raise ParseError(f"a time zone annotation is required in {text!r}")
    return result


def parse_plain_date_time(text: str) -> ParsedDateTime:
    """Parse a string for a plain type; "Z" is rejected."""
    result = parse_date_time(text)
    if result.z:
        raise ParseError(f"Z designates an exact time and is invalid for plain types: {text!r}")
    return result


def _try(parser: Any, text: str) -> bool:
    try:
        parser(text)
    except (ParseError, RangeError):
        return False
    return True


def parse_time(text: str) -> ParsedDateTime:
    """Parse a time-only string, or a date-time string whose time is used.

    A bare time that could also be read as a year-month or month-day
    (e.g. "1214") must be written with a leading "T".
    """
    if not isinstance(text, str):
        raise TempyralTypeError(f"expected a string, got {type(text).__name__}")
    try:
        result = parse_plain_date_time(text)
    except ParseError:
        pass
    else:
        if result.time_nanos is None:
            raise ParseError(f"a time is required in {text!r}")
        return result
    sc = _Scanner(text)
    designated = sc.take("Tt") is not None
    result = ParsedDateTime(time_nanos=_parse_time(sc))
    ch = sc.peek()
    if ch in ("Z", "z"):
        raise sc.fail("Z is invalid for a plain time")
    if ch and ch in "+-−":
        result.offset = _parse_offset(sc)
    _parse_annotations(sc, result)
    _finish(sc)
    if not designated and (_try(parse_year_month, text) or _try(parse_month_day, text)):
        raise ParseError(f"ambiguous time string {text!r}; prefix it with T")
    return result


def parse_year_month(text: str) -> ParsedDateTime:
    """Parse YYYY-MM or YYYYMM (with annotations), or a full date string."""
    if not isinstance(text, str):
        raise TempyralTypeError(f"expected a string, got {type(text).__name__}")
    try:
        return parse_plain_date_time(text)
    except ParseError:
        pass
    sc = _Scanner(text)
    year = _parse_year(sc)
    sc.take("-")
    month = sc.digits(2)
    result = ParsedDateTime(date=_check_date(year, month, 1, text))
    _parse_annotations(sc, result)
    _finish(sc)
    if result.calendar is not None and result.calendar.lower() != "iso8601":
        raise ParseError(f"a year-month string without a day requires the ISO calendar: {text!r}")
    return result


def parse_month_day(text: str) -> ParsedDateTime:
    """Parse --MM-DD, MM-DD or MMDD (with annotations), or a full date string.

    The returned date has reference year 1972 for the short forms.
    """
    if not isinstance(text, str):
        raise TempyralTypeError(f"expected a string, got {type(text).__name__}")
    try:
        return parse_plain_date_time(text)
    except ParseError:
        pass
    sc = _Scanner(text)
    if sc.text.startswith("--"):
        sc.pos = 2
    month = sc.digits(2)
    sc.take("-")
    day = sc.digits(2)
    result = ParsedDateTime(date=_check_date(1972, month, day, text))
    _parse_annotations(sc, result)
    _finish(sc)
    if result.calendar is not None and result.calendar.lower() != "iso8601":
        raise ParseError(f"a month-day string without a year requires the ISO calendar: {text!r}")
    return result


def parse_time_zone_from_string(text: str) -> str | None:
    """Extract a time zone id from a date-time string.

    Returns the bracketed zone, else "UTC" for Z, else a minute-precision
    offset; None if the string is not a date-time.
    """
    try:
        result = parse_date_time(text)
    except ParseError:
        return None
    if result.time_zone is not None:
        return result.time_zone
    if result.z:
        return "UTC"
    if result.offset is not None:
        from tempyral.zones.timezone import offset_has_sub_minute_precision

        if offset_has_sub_minute_precision(result.offset):
            raise ParseError(f"time zone offsets must be whole minutes: {text!r}")
        return result.offset
    return None


def parse_duration(text: str) -> dict[str, int]:
    """Parse an ISO 8601 duration into its ten integer fields.

    A fraction is only allowed on the smallest time unit present; it is
    spread into the smaller units.

    Raises:
        ParseError: If the string is malformed.

    Examples:
        >>> parse_duration("PT1.5H")["minutes"]
        30
        >>> parse_duration("-P1Y2M")["months"]
        -2
    """
    if not isinstance(text, str):
        raise TempyralTypeError(f"expected a string, got {type(text).__name__}")
    match = _DURATION_RE.match(text)
    if match is None:
        raise ParseError(f"invalid duration: {text!r}")
    groups = match.groupdict()
    date_names = ("years", "months", "weeks", "days")
    time_names = ("hours", "minutes", "seconds")
    has_date = any(groups[name] is not None for name in date_names)
    has_time = any(groups[name] is not None for name in time_names)
    if groups["time"] and not has_time:
        raise ParseError(f"duration has a T with no time fields: {text!r}")
    if not has_date and not has_time:
        raise ParseError(f"duration has no fields: {text!r}")

    fields = {name: int(groups[name] or 0) for name in date_names}
    fraction_unit = None
    fraction_ns = 0
    for name, unit_ns in (
        ("hours", NANOS_PER_HOUR),
        ("minutes", NANOS_PER_MINUTE),
        ("seconds", NANOS_PER_SECOND),
    ):
        fraction_text = groups[f"{name}_fraction"]
        if groups[name] is not None and fraction_unit is not None:
            raise ParseError(f"only the smallest duration unit may have a fraction: {text!r}")
        if fraction_text is not None:
            fraction_unit = name
            fraction_ns = int(fraction_text.ljust(9, "0")) * unit_ns // NANOS_PER_SECOND
    hours = int(groups["hours"] or 0)
    minutes = int(groups["minutes"] or 0)
    seconds = int(groups["seconds"] or 0)
    if fraction_unit == "hours":
        minutes, rest = divmod(fraction_ns, NANOS_PER_MINUTE)
        seconds, rest = divmod(rest, NANOS_PER_SECOND)
    elif fraction_unit == "minutes":
        seconds, rest = divmod(fraction_ns, NANOS_PER_SECOND)
    else:
        rest = fraction_ns
    milliseconds, rest = divmod(rest, NANOS_PER_MILLISECOND)
    microseconds, nanoseconds = divmod(rest, NANOS_PER_MICROSECOND)
    fields.update(
        hours=hours,
        minutes=minutes,
        seconds=seconds,
        milliseconds=milliseconds,
        microseconds=microseconds,
        nanoseconds=nanoseconds,
    )
    if groups["sign"] in ("-", "−"):
        fields = {name: -value for name, value in fields.items()}
    return fields


# --- formatting ----------------------------------------------------------

Precision = Union[str, int, None]


def format_year(year: int) -> str:
    """Years 0-9999 use four digits, others a sign and six digits."""
    if 0 <= year <= 9999:
        return f"{year:04d}"
    sign = "-" if year < 0 else "+"
    return f"{sign}{abs(year):06d}"


def format_date(date: IsoDate) -> str:
    """Format YYYY-MM-DD."""
    return f"{format_year(date.year)}-{date.month:02d}-{date.day:02d}"


def format_year_month(date: IsoDate) -> str:
    return f"{format_year(date.year)}-{date.month:02d}"


def format_month_day(date: IsoDate) -> str:
    return f"{date.month:02d}-{date.day:02d}"


def format_time(time_nanos: int, precision: Precision = None) -> str:
    """Format nanoseconds of day.

    Args:
        time_nanos: Nanoseconds since midnight.
        precision: "minute" for HH:MM, None for automatic fractional digits,
            or an int 0-9 for that many fractional digits.

    Examples:
        >>> format_time(45_045_500_000_000)
        '12:30:45.5'
        >>> format_time(45_045_500_000_000, 3)
        '12:30:45.500'
        >>> format_time(45_045_500_000_000, "minute")
        '12:30'
    """
    hours, rest = divmod(time_nanos, NANOS_PER_HOUR)
    minutes, rest = divmod(rest, NANOS_PER_MINUTE)
    result = f"{hours:02d}:{minutes:02d}"
    if precision == "minute":
        return result
    seconds, fraction = divmod(rest, NANOS_PER_SECOND)
    result += f":{seconds:02d}"
    digits = f"{fraction:09d}"
    if precision is None:
        if fraction:
            result += "." + digits.rstrip("0")
    elif precision:
        result += "." + digits[:precision]
    return result


def format_calendar_annotation(calendar_id: str, display: CalendarName) -> str:
    """Format the [u-ca=...] annotation; "auto" omits the ISO calendar."""
    if display is CalendarName.NEVER:
        return ""
    if display is CalendarName.AUTO and calendar_id == "iso8601":
        return ""
    flag = "!" if display is CalendarName.CRITICAL else ""
    return f"[{flag}u-ca={calendar_id}]"


def to_seconds_string_precision(
    smallest_unit: object, fractional_second_digits: int | None
) -> tuple[Precision, TemporalUnit, int]:
    """Turn to_string() precision options into (precision, unit, increment).

    smallest_unit wins over fractional_second_digits.

    Raises:
        RangeError: If smallest_unit is hour or a date unit.

    Examples:
        >>> to_seconds_string_precision(None, 2)
        (2, <TemporalUnit.MILLISECOND: 'millisecond'>, 10)
    """
    unit = get_temporal_unit(smallest_unit, "smallest_unit")
    if unit is not None:
        if unit is TemporalUnit.MINUTE:
            return "minute", TemporalUnit.MINUTE, 1
        digits = {
            TemporalUnit.SECOND: 0,
            TemporalUnit.MILLISECOND: 3,
            TemporalUnit.MICROSECOND: 6,
            TemporalUnit.NANOSECOND: 9,
        }.get(unit)
        if digits is None:
            raise RangeError(f"smallest_unit {unit.value!r} is not allowed for to_string()")
        return digits, unit, 1
    if fractional_second_digits is None:
        return None, TemporalUnit.NANOSECOND, 1
    if fractional_second_digits == 0:
        return 0, TemporalUnit.SECOND, 1
    if fractional_second_digits <= 3:
        return fractional_second_digits, TemporalUnit.MILLISECOND, 10 ** (3 - fractional_second_digits)
    if fractional_second_digits <= 6:
        return fractional_second_digits, TemporalUnit.MICROSECOND, 10 ** (6 - fractional_second_digits)
    return fractional_second_digits, TemporalUnit.NANOSECOND, 10 ** (9 - fractional_second_digits)


def format_duration(
    fields: dict[str, int], sign: int, precision: Precision = None
) -> str:
    """Format a balanced duration as ISO 8601.

    Args:
        fields: The ten duration fields, all with the same sign.
        sign: The duration's sign.
        precision: Seconds precision as for format_time() ("minute" is not
            accepted here).

    Examples:
        >>> format_duration({"years": 1, "days": 2, "hours": 3}, 1)
        'P1Y2DT3H'
        >>> format_duration({}, 0)
        'PT0S'
    """
    get = lambda name: abs(fields.get(name, 0))  # noqa: E731
    result = ""
    for name, designator in (("years", "Y"), ("months", "M"), ("weeks", "W"), ("days", "D")):
        if get(name):
            result += f"{get(name)}{designator}"
    time = ""
    if get("hours"):
        time += f"{get('hours')}H"
    if get("minutes"):
        time += f"{get('minutes')}M"
    sub_second = (
        get("seconds") * NANOS_PER_SECOND
        + get("milliseconds") * NANOS_PER_MILLISECOND
        + get("microseconds") * NANOS_PER_MICROSECOND
        + get("nanoseconds")
    )
    whole_seconds, fraction = divmod(sub_second, NANOS_PER_SECOND)
    zero_date_and_minutes = not any(
        get(name) for name in ("years", "months", "weeks", "days", "hours", "minutes")
    )
    if sub_second or zero_date_and_minutes or precision is not None:
        digits = f"{fraction:09d}"
        if precision is None:
            fraction_text = digits.rstrip("0")
        else:
            fraction_text = digits[:precision]
        time += f"{whole_seconds}"
        if fraction_text:
            time += f".{fraction_text}"
        time += "S"
    if time:
        result += "T" + time
    return ("-" if sign < 0 else "") + "P" + result


__all__ = [
    "ParsedDateTime",
    "parse_date_time",
    "parse_instant",
    "parse_zoned_date_time",
    "parse_plain_date_time",
    "parse_time",
    "parse_year_month",
    "parse_month_day",
    "parse_time_zone_from_string",
    "parse_duration",
    "format_year",
    "format_date",
    "format_year_month",
    "format_month_day",
    "format_time",
    "format_calendar_annotation",
    "to_seconds_string_precision",
    "format_duration",
]
