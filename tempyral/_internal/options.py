"""Option enumerations and eager option validation.

Every string-keyed option accepted by the public API maps to one of the
closed enumerations below. Values are validated as soon as they are read;
an unknown value raises TempyralTypeError instead of being ignored.

This module is not part of the public API.
"""

from __future__ import annotations

from enum import Enum
from typing import TypeVar

from tempyral.errors import RangeError, TempyralTypeError


class Overflow(Enum):
    """How out-of-range calendar or time fields are handled."""

    CONSTRAIN = "constrain"
    REJECT = "reject"


class Disambiguation(Enum):
    """How a wall-clock time in a gap or overlap maps to an instant."""

    COMPATIBLE = "compatible"
    EARLIER = "earlier"
    LATER = "later"
    REJECT = "reject"


class OffsetOption(Enum):
    """How an explicit UTC offset competes with the time zone rules."""

    USE = "use"
    PREFER = "prefer"
    IGNORE = "ignore"
    REJECT = "reject"


class RoundingMode(Enum):
    """The nine rounding modes.

    ceil/floor round toward positive/negative infinity, expand away from
    zero and trunc toward zero. The half* variants only differ on exact
    ties, which they resolve the same way as their non-half counterpart
    (halfEven picks the even increment).
    """

    CEIL = "ceil"
    FLOOR = "floor"
    EXPAND = "expand"
    TRUNC = "trunc"
    HALF_CEIL = "halfCeil"
    HALF_FLOOR = "halfFloor"
    HALF_EXPAND = "halfExpand"
    HALF_TRUNC = "halfTrunc"
    HALF_EVEN = "halfEven"

    def negate(self) -> RoundingMode:
        """Return the mode to use when the rounded quantity is negated."""
        return _NEGATED_MODES.get(self, self)


_NEGATED_MODES = {
    RoundingMode.CEIL: RoundingMode.FLOOR,
    RoundingMode.FLOOR: RoundingMode.CEIL,
    RoundingMode.HALF_CEIL: RoundingMode.HALF_FLOOR,
    RoundingMode.HALF_FLOOR: RoundingMode.HALF_CEIL,
}


class TransitionDirection(Enum):
    """Search direction for time zone transitions."""

    NEXT = "next"
    PREVIOUS = "previous"


class CalendarName(Enum):
    """Whether a calendar annotation is written by to_string()."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"
    CRITICAL = "critical"


class TimeZoneName(Enum):
    """Whether a time zone annotation is written by to_string()."""

    AUTO = "auto"
    NEVER = "never"
    CRITICAL = "critical"


class OffsetDisplay(Enum):
    """Whether a UTC offset is written by to_string()."""

    AUTO = "auto"
    NEVER = "never"


E = TypeVar("E", bound=Enum)


def get_option(value: object, enum_cls: type[E], default: E, name: str) -> E:
    """Read one option value.

    Args:
        value: None (use the default), an enum member, or its string value.
        enum_cls: The closed enumeration the value belongs to.
        default: Returned when value is None.
        name: Option name used in error messages.

    Returns:
        The enum member.

    Raises:
        TempyralTypeError: If the value is not one of the allowed values.

    Examples:
        >>> get_option("reject", Overflow, Overflow.CONSTRAIN, "overflow")
        <Overflow.REJECT: 'reject'>
        >>> get_option(None, Overflow, Overflow.CONSTRAIN, "overflow")
        <Overflow.CONSTRAIN: 'constrain'>
    """
    if value is None:
        return default
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        for member in enum_cls:
            if member.value == value:
                return member
    allowed = ", ".join(repr(member.value) for member in enum_cls)
    raise TempyralTypeError(f"{name} must be one of {allowed}, got {value!r}")


def get_rounding_increment(value: object) -> int:
    """Read a rounding increment (default 1, range 1..10^9)."""
    if value is None:
        return 1
    from tempyral._internal.validation import to_integer

    increment = to_integer(value, "rounding_increment")
    if increment < 1 or increment > 1_000_000_000:
        raise RangeError(f"rounding_increment must be 1 to 1e9, got {increment}")
    return increment


def validate_rounding_increment(increment: int, dividend: int, inclusive: bool) -> None:
    """Check that increment evenly divides dividend.

    Args:
        increment: The rounding increment.
        dividend: The natural maximum of the unit (e.g. 60 for minutes).
        inclusive: Whether increment may equal dividend.

    Raises:
        RangeError: If increment is too large or does not divide dividend.

    Examples:
        >>> validate_rounding_increment(15, 60, False)
        >>> validate_rounding_increment(7, 60, False)
        Traceback (most recent call last):
        ...
        tempyral.errors.RangeError: rounding_increment 7 does not divide 60
    """
    maximum = dividend if inclusive else dividend - 1
    if increment > maximum:
        raise RangeError(f"rounding_increment {increment} must be at most {maximum}")
    if dividend % increment != 0:
        raise RangeError(f"rounding_increment {increment} does not divide {dividend}")


def get_fractional_second_digits(value: object) -> int | None:
    """Read fractional_second_digits: "auto" (None) or an int 0-9."""
    if value is None or value == "auto":
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        else:
            raise TempyralTypeError(
                f"fractional_second_digits must be 'auto' or 0-9, got {value!r}"
            )
    if value < 0 or value > 9:
        raise RangeError(f"fractional_second_digits must be 0-9, got {value}")
    return value


__all__ = [
    "Overflow",
    "Disambiguation",
    "OffsetOption",
    "RoundingMode",
    "TransitionDirection",
    "CalendarName",
    "TimeZoneName",
    "OffsetDisplay",
    "get_option",
    "get_rounding_increment",
    "validate_rounding_increment",
    "get_fractional_second_digits",
]
