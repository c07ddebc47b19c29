"""Wall-clock to exact time resolution.

Turning a wall-clock reading into an instant can yield zero instants (the
reading falls into a gap, e.g. a spring-forward transition), one, or two
(the reading repeats during an overlap). This module picks one according to
a disambiguation policy, reconciles an explicit UTC offset with the zone's
rules according to an offset policy, and finds the first instant of a day.
"""

from __future__ import annotations

import logging
from enum import Enum

from tempyral._internal.calendar import (
    IsoDate,
    add_days_to_iso_date,
    utc_epoch_nanoseconds,
)
from tempyral._internal.constants import NANOS_PER_DAY
from tempyral._internal.options import (
    Disambiguation,
    OffsetOption,
    TransitionDirection,
)
from tempyral._internal.validation import (
    check_epoch_nanoseconds,
    check_utc_date_time,
)
from tempyral.errors import RangeError
from tempyral.zones.timezone import (
    TimeZone,
    format_offset_nanoseconds,
    round_offset_to_minutes,
)

logger = logging.getLogger(__name__)


class OffsetBehaviour(Enum):
    """Where the offset accompanying a wall-clock time came from."""

    # An explicit offset, subject to the offset option
    OPTION = "option"
    # "Z": the string denotes an exact time
    EXACT = "exact"
    # No offset: resolve the wall clock in the zone
    WALL = "wall"


def _shift_wall_clock(date: IsoDate, time_nanos: int, nanoseconds: int) -> tuple[IsoDate, int]:
    days, time_nanos = divmod(time_nanos + nanoseconds, NANOS_PER_DAY)
    return add_days_to_iso_date(date, days), time_nanos


def disambiguate_possible_epoch_nanoseconds(
    possible: tuple[int, ...],
    time_zone: TimeZone,
    date: IsoDate,
    time_nanos: int,
    disambiguation: Disambiguation,
) -> int:
    """Choose one instant for a wall-clock time.

    Overlap: EARLIER takes the earlier instant, LATER and COMPATIBLE the
    later one. Gap: the wall clock is moved by the length of the gap,
    backwards for EARLIER and forwards for LATER and COMPATIBLE.
    REJECT raises in both cases.

    Args:
        possible: The instants returned by get_possible_epoch_nanoseconds.
        time_zone: The zone the wall clock belongs to.
        date: Wall-clock date.
        time_nanos: Wall-clock nanoseconds of day.
        disambiguation: The policy.

    Returns:
        The chosen epoch nanoseconds.

    Raises:
        RangeError: If the reading is ambiguous or skipped and the policy
            is REJECT.

    Examples:
        >>> tz = TimeZone("America/Los_Angeles")
        >>> ns = disambiguate_possible_epoch_nanoseconds(
        ...     (), tz, IsoDate(2020, 3, 8), 9_000_000_000_000, Disambiguation.EARLIER)
        >>> tz.get_offset_string_for(ns)
        '-08:00'
    """
    if len(possible) == 1:
        return possible[0]
    if possible:
        logger.debug(
            "%s+%dns is ambiguous in %s, using %s",
            date, time_nanos, time_zone.id, disambiguation.value,
        )
        if disambiguation is Disambiguation.EARLIER:
            return possible[0]
        if disambiguation in (Disambiguation.LATER, Disambiguation.COMPATIBLE):
            return possible[-1]
        raise RangeError(f"wall-clock time is ambiguous in {time_zone.id}")

    if disambiguation is Disambiguation.REJECT:
        raise RangeError(f"wall-clock time does not exist in {time_zone.id}")
    utc_ns = utc_epoch_nanoseconds(date, time_nanos)
    day_before = check_epoch_nanoseconds(utc_ns - NANOS_PER_DAY)
    day_after = check_epoch_nanoseconds(utc_ns + NANOS_PER_DAY)
    offset_before = time_zone.get_offset_nanoseconds_for(day_before)
    offset_after = time_zone.get_offset_nanoseconds_for(day_after)
    gap = offset_after - offset_before
    logger.debug(
        "wall-clock time falls in a %s gap in %s, using %s",
        format_offset_nanoseconds(gap), time_zone.id, disambiguation.value,
    )
    if disambiguation is Disambiguation.EARLIER:
        shifted = _shift_wall_clock(date, time_nanos, -gap)
        return time_zone.get_possible_epoch_nanoseconds(*shifted)[0]
    shifted = _shift_wall_clock(date, time_nanos, gap)
    return time_zone.get_possible_epoch_nanoseconds(*shifted)[-1]


def get_start_of_day(time_zone: TimeZone, date: IsoDate) -> int:
    """Return the first instant of a calendar day in a zone.

    When midnight itself is skipped by a transition the day starts at that
    transition.
    """
    possible = time_zone.get_possible_epoch_nanoseconds(date, 0)
    if possible:
        return possible[0]
    day_before = utc_epoch_nanoseconds(date, 0) - NANOS_PER_DAY
    transition = time_zone.get_time_zone_transition(day_before, TransitionDirection.NEXT)
    if transition is None:
        raise RangeError(f"no start of day for {date} in {time_zone.id}")
    logger.debug("midnight is skipped in %s on %s", time_zone.id, date)
    return transition


def interpret_iso_date_time_offset(
    date: IsoDate,
    time_nanos: int | None,
    offset_behaviour: OffsetBehaviour,
    offset_nanoseconds: int,
    time_zone: TimeZone,
    disambiguation: Disambiguation,
    offset_option: OffsetOption,
    match_minutes: bool = False,
) -> int:
    """Resolve a wall clock plus an optional explicit offset to an instant.

    Args:
        date: Wall-clock date.
        time_nanos: Nanoseconds of day, or None for the start of the day.
        offset_behaviour: Where the offset came from.
        offset_nanoseconds: The explicit offset (ignored for WALL).
        time_zone: The zone.
        disambiguation: Used when the offset does not decide.
        offset_option: USE trusts the offset, IGNORE trusts the zone,
            PREFER uses the offset when the zone allows it, REJECT raises
            when the offset and the zone disagree.
        match_minutes: Accept a candidate whose offset equals the given
            offset after rounding to minutes.

    Raises:
        RangeError: For REJECT conflicts, rejected ambiguity, or results
            outside the supported range.
    """
    if time_nanos is None:
        return get_start_of_day(time_zone, date)
    if offset_behaviour is OffsetBehaviour.WALL or (
        offset_behaviour is OffsetBehaviour.OPTION and offset_option is OffsetOption.IGNORE
    ):
        return time_zone.get_epoch_nanoseconds_for(date, time_nanos, disambiguation)

    utc_ns = check_utc_date_time(utc_epoch_nanoseconds(date, time_nanos))
    if offset_behaviour is OffsetBehaviour.EXACT or offset_option is OffsetOption.USE:
        return check_epoch_nanoseconds(utc_ns - offset_nanoseconds)

    possible = time_zone.get_possible_epoch_nanoseconds(date, time_nanos)
    for candidate in possible:
        candidate_offset = utc_ns - candidate
        if candidate_offset == offset_nanoseconds:
            return candidate
        if match_minutes and round_offset_to_minutes(candidate_offset) == offset_nanoseconds:
            return candidate
    if offset_option is OffsetOption.REJECT:
        raise RangeError(
            f"offset {format_offset_nanoseconds(offset_nanoseconds)} is invalid "
            f"for this wall-clock time in {time_zone.id}"
        )
    logger.debug(
        "offset %s does not match %s, resolving the wall clock instead",
        format_offset_nanoseconds(offset_nanoseconds), time_zone.id,
    )
    return disambiguate_possible_epoch_nanoseconds(
        possible, time_zone, date, time_nanos, disambiguation
    )


__all__ = [
    "OffsetBehaviour",
    "disambiguate_possible_epoch_nanoseconds",
    "get_start_of_day",
    "interpret_iso_date_time_offset",
]
