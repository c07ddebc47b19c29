"""Tempyral: exact times, calendar dates and time zones with nanosecond precision.

Tempyral separates exact time (an Instant on the timeline) from wall-clock
values (dates and times read off a calendar and a clock) and joins the two
through time zones, with explicit rules for skipped and repeated local
times.

Core Types:
    Instant: Exact point in time, in epoch nanoseconds
    ZonedDateTime: Exact time viewed in a time zone and calendar
    PlainDate: Calendar date
    PlainTime: Wall-clock time of day
    PlainDateTime: Calendar date and wall-clock time without a zone
    PlainYearMonth: Month of a calendar year
    PlainMonthDay: Recurring day of the year
    Duration: Signed span of years down to nanoseconds

Support:
    TimeZone: IANA zone or fixed offset
    Calendar: Base class of calendars; get_calendar() looks one up by id
    TemporalUnit: The ten units from YEAR to NANOSECOND
    Now: Readings of the current time
    TempyralSettings: Current time zone and calendar from the environment

Exceptions:
    TempyralError: Base exception
    RangeError: Value out of range or invalid option combination
    ParseError: Failed to parse string
    TempyralTypeError: Wrong input type or unknown option value

Example:
    >>> from tempyral import PlainDateTime, Duration
    >>> meeting = PlainDateTime(2020, 3, 8, 2, 30)
    >>> zdt = meeting.to_zoned_date_time("America/Los_Angeles")
    >>> zdt.offset
    '-07:00'
    >>> str(zdt.add(Duration(days=1)).to_plain_date_time())
    '2020-03-09T03:30:00'
"""

from __future__ import annotations

import logging

__version__ = "0.1.0"

# Core types
from tempyral.core.duration import Duration
from tempyral.core.time import PlainTime
from tempyral.core.date import PlainDate
from tempyral.core.datetime import PlainDateTime
from tempyral.core.instant import Instant
from tempyral.core.zoned import ZonedDateTime
from tempyral.core.yearmonth import PlainYearMonth
from tempyral.core.monthday import PlainMonthDay

# Calendars, zones and units
from tempyral.calendars import Calendar, get_calendar
from tempyral.units.timeunit import TemporalUnit
from tempyral.zones.timezone import TimeZone

# Current time and settings
from tempyral.config import TempyralSettings, get_settings
from tempyral.now import Now

# Exceptions
from tempyral.errors import (
    ParseError,
    RangeError,
    TempyralError,
    TempyralTypeError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__: list[str] = [
    "__version__",
    # Core types
    "Duration",
    "Instant",
    "PlainDate",
    "PlainDateTime",
    "PlainMonthDay",
    "PlainTime",
    "PlainYearMonth",
    "ZonedDateTime",
    # Calendars, zones and units
    "Calendar",
    "get_calendar",
    "TemporalUnit",
    "TimeZone",
    # Current time and settings
    "Now",
    "TempyralSettings",
    "get_settings",
    # Exceptions
    "TempyralError",
    "RangeError",
    "ParseError",
    "TempyralTypeError",
]
