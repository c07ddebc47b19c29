"""TemporalUnit enumeration for the standard time units.

This module provides the TemporalUnit enum representing the ten units a
duration is made of, from years down to nanoseconds, and the helpers that
read unit options.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, Union

from tempyral._internal.constants import (
    NANOS_PER_DAY,
    NANOS_PER_HOUR,
    NANOS_PER_MICROSECOND,
    NANOS_PER_MILLISECOND,
    NANOS_PER_MINUTE,
    NANOS_PER_SECOND,
)
from tempyral.errors import RangeError, TempyralTypeError

AUTO = "auto"


class TemporalUnit(Enum):
    """Units for temporal operations, ordered from largest to smallest.

    Units compare by size, so TemporalUnit.YEAR > TemporalUnit.DAY.

    Note:
        YEAR, MONTH and WEEK are calendar units: their length depends on
        where they are applied. nanoseconds is None for them.

    Examples:
        >>> TemporalUnit.HOUR.nanoseconds
        3600000000000
        >>> TemporalUnit.MONTH.nanoseconds is None
        True
        >>> TemporalUnit.DAY > TemporalUnit.HOUR
        True
    """

    YEAR = "year"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"
    MILLISECOND = "millisecond"
    MICROSECOND = "microsecond"
    NANOSECOND = "nanosecond"

    @property
    def rank(self) -> int:
        """Position from the largest unit; YEAR is 0."""
        return _RANKS[self]

    @property
    def plural(self) -> str:
        """The plural field name, e.g. "hours"."""
        return self.value + "s"

    @property
    def nanoseconds(self) -> int | None:
        """Length in nanoseconds, with 24-hour days; None for calendar units."""
        return _LENGTHS.get(self)

    @property
    def is_calendar_unit(self) -> bool:
        """True for YEAR, MONTH and WEEK."""
        return self.rank <= 2

    @property
    def is_date_unit(self) -> bool:
        """True for YEAR through DAY."""
        return self.rank <= 3

    @property
    def maximum_increment(self) -> int | None:
        """The natural maximum a rounding increment must divide.

        None for date units, which accept any increment.

        Examples:
            >>> TemporalUnit.MINUTE.maximum_increment
            60
        """
        return _MAXIMUM_INCREMENTS.get(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, TemporalUnit):
            return NotImplemented
        return self.rank > other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, TemporalUnit):
            return NotImplemented
        return self.rank >= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, TemporalUnit):
            return NotImplemented
        return self.rank < other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, TemporalUnit):
            return NotImplemented
        return self.rank <= other.rank


_RANKS = {unit: index for index, unit in enumerate(TemporalUnit)}

_LENGTHS = {
    TemporalUnit.DAY: NANOS_PER_DAY,
    TemporalUnit.HOUR: NANOS_PER_HOUR,
    TemporalUnit.MINUTE: NANOS_PER_MINUTE,
    TemporalUnit.SECOND: NANOS_PER_SECOND,
    TemporalUnit.MILLISECOND: NANOS_PER_MILLISECOND,
    TemporalUnit.MICROSECOND: NANOS_PER_MICROSECOND,
    TemporalUnit.NANOSECOND: 1,
}

_MAXIMUM_INCREMENTS = {
    TemporalUnit.HOUR: 24,
    TemporalUnit.MINUTE: 60,
    TemporalUnit.SECOND: 60,
    TemporalUnit.MILLISECOND: 1000,
    TemporalUnit.MICROSECOND: 1000,
    TemporalUnit.NANOSECOND: 1000,
}

_BY_NAME: dict[str, TemporalUnit] = {}
for _unit in TemporalUnit:
    _BY_NAME[_unit.value] = _unit
    _BY_NAME[_unit.plural] = _unit
del _unit

UnitOption = Union[TemporalUnit, Literal["auto"], None]

DATE_UNITS = frozenset(u for u in TemporalUnit if u.is_date_unit)
TIME_UNITS = frozenset(u for u in TemporalUnit if not u.is_date_unit)
ALL_UNITS = frozenset(TemporalUnit)


def larger_of(one: TemporalUnit, two: TemporalUnit) -> TemporalUnit:
    """Return the larger of two units."""
    return one if one >= two else two


def get_temporal_unit(
    value: object,
    name: str,
    *,
    allow_auto: bool = False,
    required: bool = False,
) -> UnitOption:
    """Read a unit option.

    Singular and plural names are accepted ("hour" and "hours").

    Args:
        value: A TemporalUnit, a unit name, "auto" or None.
        name: Option name used in error messages.
        allow_auto: Whether "auto" is a valid value.
        required: Whether None is rejected.

    Returns:
        The unit, the string "auto", or None when not given.

    Raises:
        TempyralTypeError: For an unknown unit name or a missing required unit.

    Examples:
        >>> get_temporal_unit("hours", "smallest_unit")
        <TemporalUnit.HOUR: 'hour'>
    """
    if value is None:
        if required:
            raise TempyralTypeError(f"{name} is required")
        return None
    if isinstance(value, TemporalUnit):
        return value
    if isinstance(value, str):
        if value == AUTO and allow_auto:
            return AUTO
        unit = _BY_NAME.get(value)
        if unit is not None:
            return unit
    raise TempyralTypeError(f"invalid {name}: {value!r}")


def check_unit_allowed(
    unit: UnitOption, allowed: frozenset[TemporalUnit], name: str
) -> None:
    """Raise RangeError if a known unit is not valid for this operation."""
    if isinstance(unit, TemporalUnit) and unit not in allowed:
        raise RangeError(f"{name} {unit.value!r} is not allowed here")


__all__ = [
    "AUTO",
    "TemporalUnit",
    "UnitOption",
    "DATE_UNITS",
    "TIME_UNITS",
    "ALL_UNITS",
    "larger_of",
    "get_temporal_unit",
    "check_unit_allowed",
]
