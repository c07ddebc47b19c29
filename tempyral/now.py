"""Readings of the current time.

Now reads the system clock once per call and views it in a time zone: the
one passed in, or else the zone from TempyralSettings. Every function takes
an optional settings argument so callers can inject a zone.

Examples:
    >>> from tempyral.config import TempyralSettings
    >>> Now.time_zone_id(TempyralSettings(time_zone="Asia/Tokyo"))
    'Asia/Tokyo'
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from tempyral.calendars import get_calendar
from tempyral.config import TempyralSettings, get_settings
from tempyral.core.instant import Instant
from tempyral.core.zoned import ZonedDateTime
from tempyral.zones.timezone import TimeZone

if TYPE_CHECKING:
    from tempyral.calendars import Calendar
    from tempyral.core.date import PlainDate
    from tempyral.core.datetime import PlainDateTime
    from tempyral.core.time import PlainTime

logger = logging.getLogger(__name__)


def _zone(time_zone: TimeZone | str | None, settings: TempyralSettings | None) -> TimeZone:
    if time_zone is not None:
        return TimeZone.from_value(time_zone)
    settings = settings or get_settings()
    logger.debug("using current time zone %s", settings.time_zone)
    return TimeZone.from_value(settings.time_zone)


class Now:
    """Functions returning the current time in various shapes."""

    @staticmethod
    def instant(settings: TempyralSettings | None = None) -> Instant:
        """The current exact time."""
        return Instant(time.time_ns())

    @staticmethod
    def time_zone_id(settings: TempyralSettings | None = None) -> str:
        """Canonical id of the current time zone."""
        return _zone(None, settings).id

    @staticmethod
    def zoned_date_time_iso(
        time_zone: TimeZone | str | None = None,
        settings: TempyralSettings | None = None,
    ) -> ZonedDateTime:
        return ZonedDateTime._create(time.time_ns(), _zone(time_zone, settings), get_calendar())

    @staticmethod
    def zoned_date_time(
        calendar: Calendar | str | None = None,
        time_zone: TimeZone | str | None = None,
        settings: TempyralSettings | None = None,
    ) -> ZonedDateTime:
        """The current time in a zone and calendar.

        The calendar defaults to settings.calendar.
        """
        settings = settings or get_settings()
        zone = _zone(time_zone, settings)
        return ZonedDateTime._create(
            time.time_ns(), zone, get_calendar(calendar or settings.calendar)
        )

    @staticmethod
    def plain_date_time_iso(
        time_zone: TimeZone | str | None = None,
        settings: TempyralSettings | None = None,
    ) -> PlainDateTime:
        return Now.zoned_date_time_iso(time_zone, settings).to_plain_date_time()

    @staticmethod
    def plain_date_time(
        calendar: Calendar | str | None = None,
        time_zone: TimeZone | str | None = None,
        settings: TempyralSettings | None = None,
    ) -> PlainDateTime:
        return Now.zoned_date_time(calendar, time_zone, settings).to_plain_date_time()

    @staticmethod
    def plain_date_iso(
        time_zone: TimeZone | str | None = None,
        settings: TempyralSettings | None = None,
    ) -> PlainDate:
        """Today's date in the zone.

        Examples:
            >>> from tempyral.config import TempyralSettings
            >>> Now.plain_date_iso(settings=TempyralSettings()).calendar_id
            'iso8601'
        """
        return Now.zoned_date_time_iso(time_zone, settings).to_plain_date()

    @staticmethod
    def plain_date(
        calendar: Calendar | str | None = None,
        time_zone: TimeZone | str | None = None,
        settings: TempyralSettings | None = None,
    ) -> PlainDate:
        return Now.zoned_date_time(calendar, time_zone, settings).to_plain_date()

    @staticmethod
    def plain_time_iso(
        time_zone: TimeZone | str | None = None,
        settings: TempyralSettings | None = None,
    ) -> PlainTime:
        return Now.zoned_date_time_iso(time_zone, settings).to_plain_time()


__all__ = ["Now"]
