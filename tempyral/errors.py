"""Tempyral exception hierarchy.

All Tempyral-specific exceptions inherit from TempyralError. There are two
kinds of failure:

    RangeError: a value is out of its valid range, an ambiguous wall-clock
        time was rejected by policy, or an option combination is invalid.
    TempyralTypeError: the input has the wrong shape, e.g. an unknown
        option value or unit name, or a missing required field.

Both also inherit from the matching builtin (ValueError / TypeError) so that
callers can catch them generically.
"""

from __future__ import annotations


class TempyralError(Exception):
    """Base exception for all Tempyral errors."""

    pass


class RangeError(TempyralError, ValueError):
    """A value is outside its valid range.

    Examples:
        - Month value outside 1-12 with overflow="reject"
        - Duration fields with mixed signs
        - Wall-clock time inside a DST gap with disambiguation="reject"
        - Calendar units in a duration without a relative_to anchor
        - Instant outside +/- 10^8 days from the epoch
    """

    pass


class ParseError(RangeError):
    """Failed to parse a string representation.

    Examples:
        - Invalid ISO 8601 / RFC 9557 format
        - More than nine fractional-second digits
        - Unknown critical annotation
    """

    pass


class TempyralTypeError(TempyralError, TypeError):
    """Input has the wrong shape.

    Examples:
        - rounding_mode="sideways"
        - Unit name "fortnight"
        - A mapping with none of the required fields
    """

    pass


__all__ = [
    "TempyralError",
    "RangeError",
    "ParseError",
    "TempyralTypeError",
]
