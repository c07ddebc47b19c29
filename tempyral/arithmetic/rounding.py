"""Rounding to increments.

All rounding is exact: quantities are ints or Fractions, never floats. A
signed rounding mode is first reduced to one of five unsigned modes for the
magnitude of the value, so that e.g. "floor" rounds -1.5 away from zero.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Union

from tempyral._internal.options import RoundingMode

Number = Union[int, Fraction]

# Unsigned rounding modes
ZERO = "zero"
INFINITY = "infinity"
HALF_ZERO = "half-zero"
HALF_INFINITY = "half-infinity"
HALF_EVEN = "half-even"

_UNSIGNED_MODES: dict[RoundingMode, tuple[str, str]] = {
    # mode: (for positive values, for negative values)
    RoundingMode.CEIL: (INFINITY, ZERO),
    RoundingMode.FLOOR: (ZERO, INFINITY),
    RoundingMode.EXPAND: (INFINITY, INFINITY),
    RoundingMode.TRUNC: (ZERO, ZERO),
    RoundingMode.HALF_CEIL: (HALF_INFINITY, HALF_ZERO),
    RoundingMode.HALF_FLOOR: (HALF_ZERO, HALF_INFINITY),
    RoundingMode.HALF_EXPAND: (HALF_INFINITY, HALF_INFINITY),
    RoundingMode.HALF_TRUNC: (HALF_ZERO, HALF_ZERO),
    RoundingMode.HALF_EVEN: (HALF_EVEN, HALF_EVEN),
}


def get_unsigned_rounding_mode(mode: RoundingMode, is_negative: bool) -> str:
    """Reduce a rounding mode to an unsigned mode for a value's magnitude."""
    return _UNSIGNED_MODES[mode][1 if is_negative else 0]


def apply_unsigned_rounding_mode(x: Number, r1: int, r2: int, unsigned_mode: str) -> int:
    """Pick r1 or r2 for a non-negative x with r1 <= x <= r2.

    r1 and r2 are consecutive multiples of some increment; half-even picks
    the one whose multiple count is even.

    Examples:
        >>> apply_unsigned_rounding_mode(Fraction(5, 2), 2, 3, HALF_EVEN)
        2
        >>> apply_unsigned_rounding_mode(Fraction(5, 2), 2, 3, HALF_INFINITY)
        3
    """
    if x == r1:
        return r1
    if unsigned_mode == ZERO:
        return r1
    if unsigned_mode == INFINITY:
        return r2
    distance_down = x - r1
    distance_up = r2 - x
    if distance_down < distance_up:
        return r1
    if distance_up < distance_down:
        return r2
    if unsigned_mode == HALF_ZERO:
        return r1
    if unsigned_mode == HALF_INFINITY:
        return r2
    return r1 if (r1 // (r2 - r1)) % 2 == 0 else r2


def round_number_to_increment(x: Number, increment: int, mode: RoundingMode) -> int:
    """Round x to a multiple of increment.

    Args:
        x: The value; an int or a Fraction.
        increment: A positive int.
        mode: The rounding mode.

    Returns:
        The rounded multiple of increment.

    Examples:
        >>> round_number_to_increment(-15, 10, RoundingMode.HALF_EXPAND)
        -20
        >>> round_number_to_increment(-15, 10, RoundingMode.HALF_CEIL)
        -10
        >>> round_number_to_increment(25, 10, RoundingMode.HALF_EVEN)
        20
    """
    quotient = Fraction(x) / increment
    is_negative = quotient < 0
    if is_negative:
        quotient = -quotient
    r1 = quotient.numerator // quotient.denominator
    r2 = r1 + 1
    rounded = apply_unsigned_rounding_mode(
        quotient, r1, r2, get_unsigned_rounding_mode(mode, is_negative)
    )
    if is_negative:
        rounded = -rounded
    return rounded * increment


def trunc_div(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(numerator) // abs(denominator)
    return -quotient if (numerator < 0) != (denominator < 0) else quotient


def sign_of(value: Number) -> int:
    """Return -1, 0 or 1."""
    return (value > 0) - (value < 0)


__all__ = [
    "get_unsigned_rounding_mode",
    "apply_unsigned_rounding_mode",
    "round_number_to_increment",
    "trunc_div",
    "sign_of",
]
