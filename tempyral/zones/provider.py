"""Zone rule providers.

A ZoneRuleProvider answers three questions about a named time zone: the
offset in effect at an instant, the offsets a wall-clock time can have, and
where the next or previous offset transition lies. ZoneInfoProvider answers
them from the standard zoneinfo module, backed by the tzdata package.

zoneinfo works on datetime objects, which only cover years 1 to 9999.
Instants and wall-clock times outside that window are moved by whole
400-year Gregorian cycles, which keep weekdays and leap years aligned, so
recurring daylight saving rules give the same answer.
"""

from __future__ import annotations

import logging
import zoneinfo
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

from tempyral._internal.calendar import (
    IsoDate,
    epoch_days_from_iso,
    iso_from_epoch_days,
)
from tempyral._internal.constants import (
    DAYS_PER_400_YEARS,
    NANOS_PER_SECOND,
    SECONDS_PER_DAY,
)
from tempyral._internal.decorators import memoize
from tempyral._internal.options import TransitionDirection
from tempyral.errors import RangeError

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_SECOND = timedelta(seconds=1)

_SAFE_MIN_YEAR = 401
_SAFE_MAX_YEAR = 9599
_SECONDS_PER_CYCLE = DAYS_PER_400_YEARS * SECONDS_PER_DAY

# No zone has a recorded transition before 1847.
_FIRST_TRANSITION_YEAR = 1847
_SEARCH_FLOOR = epoch_days_from_iso(_FIRST_TRANSITION_YEAR, 1, 1) * SECONDS_PER_DAY
# Rules after 2037 repeat yearly, so searching one year past it is enough.
_SEARCH_HORIZON = epoch_days_from_iso(2038, 1, 1) * SECONDS_PER_DAY + 367 * SECONDS_PER_DAY
_SEARCH_STEP = 14 * SECONDS_PER_DAY
_ONE_YEAR = 367 * SECONDS_PER_DAY


class ZoneRuleProvider(ABC):
    """Source of UTC offset rules for named time zones.

    All offsets are in seconds east of UTC. Implementations must be pure:
    the same arguments always give the same answer.
    """

    @abstractmethod
    def canonicalize(self, zone_id: str) -> str:
        """Return the canonical spelling of a zone id.

        Raises:
            RangeError: If the zone is unknown.
        """

    @abstractmethod
    def offset_at(self, zone_id: str, epoch_ns: int) -> int:
        """Return the offset in effect at an instant."""

    @abstractmethod
    def candidate_offsets(
        self, zone_id: str, date: IsoDate, time_nanos: int
    ) -> tuple[int, ...]:
        """Return the offsets a wall-clock time can have.

        Returns:
            Zero offsets for a time skipped by a gap, two for a time repeated
            by an overlap, one otherwise. Ordered by resulting instant, so
            the larger offset comes first.
        """

    @abstractmethod
    def next_transition(
        self, zone_id: str, epoch_ns: int, direction: TransitionDirection
    ) -> int | None:
        """Return the nearest offset transition strictly after (NEXT) or
        before (PREVIOUS) an instant, in epoch nanoseconds, or None."""


def _cycle_shift(year: int) -> int:
    """Number of 400-year cycles that move a year into the datetime-safe window."""
    if year < _SAFE_MIN_YEAR:
        return (_SAFE_MIN_YEAR - year + 399) // 400
    if year > _SAFE_MAX_YEAR:
        return -((year - _SAFE_MAX_YEAR + 399) // 400)
    return 0


def _year_of(epoch_seconds: int) -> int:
    return iso_from_epoch_days(epoch_seconds // SECONDS_PER_DAY).year


@memoize
def _zone_ids() -> dict[str, str]:
    ids = {zone_id.lower(): zone_id for zone_id in zoneinfo.available_timezones()}
    ids["utc"] = "UTC"
    return ids


class ZoneInfoProvider(ZoneRuleProvider):
    """ZoneRuleProvider backed by zoneinfo and the tzdata package.

    Examples:
        >>> provider = ZoneInfoProvider()
        >>> provider.canonicalize("america/los_angeles")
        'America/Los_Angeles'
        >>> provider.offset_at("America/Los_Angeles", 0)
        -28800
    """

    def canonicalize(self, zone_id: str) -> str:
        canonical = _zone_ids().get(zone_id.lower())
        if canonical is None:
            raise RangeError(f"unknown time zone: {zone_id!r}")
        return canonical

    def _zone(self, zone_id: str) -> zoneinfo.ZoneInfo:
        # ZoneInfo caches instances per key
        return zoneinfo.ZoneInfo(self.canonicalize(zone_id))

    @staticmethod
    def _offset_seconds(zone: zoneinfo.ZoneInfo, epoch_seconds: int) -> int:
        offset = (_EPOCH + timedelta(seconds=epoch_seconds)).astimezone(zone).utcoffset()
        return offset // _ONE_SECOND

    def offset_at(self, zone_id: str, epoch_ns: int) -> int:
        seconds = epoch_ns // NANOS_PER_SECOND
        seconds += _cycle_shift(_year_of(seconds)) * _SECONDS_PER_CYCLE
        return self._offset_seconds(self._zone(zone_id), seconds)

    def candidate_offsets(
        self, zone_id: str, date: IsoDate, time_nanos: int
    ) -> tuple[int, ...]:
        zone = self._zone(zone_id)
        year = date.year + 400 * _cycle_shift(date.year)
        seconds_of_day = time_nanos // NANOS_PER_SECOND
        naive = datetime(year, date.month, date.day) + timedelta(seconds=seconds_of_day)
        local_seconds = epoch_days_from_iso(year, date.month, date.day) * SECONDS_PER_DAY
        local_seconds += seconds_of_day
        offsets: list[int] = []
        for fold in (0, 1):
            offset = naive.replace(tzinfo=zone, fold=fold).utcoffset() // _ONE_SECOND
            if offset in offsets:
                continue
            # A wall-clock reading is real only if it survives a UTC round trip
            if self._offset_seconds(zone, local_seconds - offset) == offset:
                offsets.append(offset)
        return tuple(sorted(offsets, reverse=True))

    def next_transition(
        self, zone_id: str, epoch_ns: int, direction: TransitionDirection
    ) -> int | None:
        canonical = self.canonicalize(zone_id)
        if canonical == "UTC" or canonical.startswith("Etc/"):
            return None
        zone = zoneinfo.ZoneInfo(canonical)
        if direction is TransitionDirection.NEXT:
            seconds = epoch_ns // NANOS_PER_SECOND
            shift = 0
            if _year_of(seconds) < _FIRST_TRANSITION_YEAR:
                seconds = _SEARCH_FLOOR
            else:
                shift = _cycle_shift(_year_of(seconds))
                seconds += shift * _SECONDS_PER_CYCLE
            found = self._search_forward(zone, seconds)
        else:
            # Largest whole second strictly before epoch_ns
            seconds = -(-epoch_ns // NANOS_PER_SECOND) - 1
            if seconds <= _SEARCH_FLOOR:
                return None
            shift = _cycle_shift(_year_of(seconds))
            seconds += shift * _SECONDS_PER_CYCLE
            found = self._search_backward(zone, seconds)
        logger.debug(
            "transition search in %s %s from %d: %s",
            canonical,
            direction.value,
            epoch_ns,
            found,
        )
        if found is None:
            return None
        return (found - shift * _SECONDS_PER_CYCLE) * NANOS_PER_SECOND

    def _search_forward(self, zone: zoneinfo.ZoneInfo, start: int) -> int | None:
        """First second T > start whose offset differs from T - 1.

        Offsets are sampled at the middle and the end of each step, so a
        change that reverts within half a step can go unnoticed.
        """
        limit = max(start + _ONE_YEAR, _SEARCH_HORIZON)
        low = start
        low_offset = self._offset_seconds(zone, low)
        while low < limit:
            high = min(low + _SEARCH_STEP, limit)
            middle = (low + high) // 2
            if self._offset_seconds(zone, middle) != low_offset:
                return self._bisect(zone, low, middle, low_offset)
            if self._offset_seconds(zone, high) != low_offset:
                return self._bisect(zone, middle, high, low_offset)
            low = high
        return None

    def _search_backward(self, zone: zoneinfo.ZoneInfo, start: int) -> int | None:
        """Last second T <= start whose offset differs from T - 1.

        Sampled like _search_forward.
        """
        high = start
        high_offset = self._offset_seconds(zone, high)
        while high > _SEARCH_FLOOR:
            if high > _SEARCH_HORIZON and start - high > _ONE_YEAR:
                low = _SEARCH_HORIZON
            else:
                low = max(high - _SEARCH_STEP, _SEARCH_FLOOR)
            middle = (low + high) // 2
            middle_offset = self._offset_seconds(zone, middle)
            if middle_offset != high_offset:
                return self._bisect(zone, middle, high, middle_offset)
            low_offset = self._offset_seconds(zone, low)
            if low_offset != high_offset:
                return self._bisect(zone, low, middle, low_offset)
            high = low
        return None

    def _bisect(
        self, zone: zoneinfo.ZoneInfo, low: int, high: int, low_offset: int
    ) -> int:
        while high - low > 1:
            middle = (low + high) // 2
            if self._offset_seconds(zone, middle) == low_offset:
                low = middle
            else:
                high = middle
        return high


@memoize
def default_provider() -> ZoneRuleProvider:
    """Return the shared ZoneInfoProvider."""
    return ZoneInfoProvider()


__all__ = ["ZoneRuleProvider", "ZoneInfoProvider", "default_provider"]
