"""Core temporal types.

This module provides the fundamental temporal types:
    - Instant: Exact point on the timeline, in epoch nanoseconds
    - ZonedDateTime: Exact time viewed in a time zone and calendar
    - PlainDate: Calendar date
    - PlainTime: Wall-clock time with nanosecond precision
    - PlainDateTime: Calendar date and wall-clock time without a zone
    - PlainYearMonth: Month of a calendar year
    - PlainMonthDay: Recurring day of the year
    - Duration: Signed span of years down to nanoseconds
"""

from __future__ import annotations

from tempyral.core.duration import Duration
from tempyral.core.time import PlainTime
from tempyral.core.date import PlainDate
from tempyral.core.datetime import PlainDateTime
from tempyral.core.instant import Instant
from tempyral.core.zoned import ZonedDateTime
from tempyral.core.yearmonth import PlainYearMonth
from tempyral.core.monthday import PlainMonthDay

__all__: list[str] = [
    "Duration",
    "Instant",
    "PlainDate",
    "PlainDateTime",
    "PlainMonthDay",
    "PlainTime",
    "PlainYearMonth",
    "ZonedDateTime",
]
