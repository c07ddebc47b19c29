"""Internal constants for Tempyral.

These constants define the limits and magic numbers used throughout
the library. This module is not part of the public API.
"""

from __future__ import annotations

# Time unit conversions
NANOS_PER_MICROSECOND: int = 1_000
NANOS_PER_MILLISECOND: int = 1_000_000
NANOS_PER_SECOND: int = 1_000_000_000
NANOS_PER_MINUTE: int = 60 * NANOS_PER_SECOND
NANOS_PER_HOUR: int = 60 * NANOS_PER_MINUTE
NANOS_PER_DAY: int = 24 * NANOS_PER_HOUR  # 86_400_000_000_000

SECONDS_PER_MINUTE: int = 60
SECONDS_PER_HOUR: int = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY: int = 24 * SECONDS_PER_HOUR  # 86_400

# Exact time limits: +/- 10^8 days around 1970-01-01T00:00Z
MAX_EPOCH_DAYS: int = 100_000_000
MAX_EPOCH_NANOSECONDS: int = MAX_EPOCH_DAYS * NANOS_PER_DAY  # 8.64e21

# Plain dates reach one day further than instants on the negative side so
# that every instant has a local date in every time zone.
MIN_EPOCH_DAY: int = -MAX_EPOCH_DAYS - 1  # -271821-04-19
MAX_EPOCH_DAY: int = MAX_EPOCH_DAYS  # +275760-09-13

# Days in each month (non-leap year)
DAYS_IN_MONTH: tuple[int, ...] = (
    0,   # Placeholder for 1-indexed access
    31,  # January
    28,  # February (non-leap)
    31,  # March
    30,  # April
    31,  # May
    30,  # June
    31,  # July
    31,  # August
    30,  # September
    31,  # October
    30,  # November
    31,  # December
)

# One 400-year Gregorian cycle
DAYS_PER_400_YEARS: int = 146_097

# Duration field limits
MAX_CALENDAR_DURATION_FIELD: int = 2**32  # exclusive, years/months/weeks
MAX_DURATION_SECONDS: int = 2**53  # exclusive, normalized seconds

# Offset limits (nanoseconds), exclusive
MAX_OFFSET_NANOSECONDS: int = NANOS_PER_DAY

# Reference years for partial values
MONTH_DAY_REFERENCE_YEAR: int = 1972


__all__ = [
    "NANOS_PER_MICROSECOND",
    "NANOS_PER_MILLISECOND",
    "NANOS_PER_SECOND",
    "NANOS_PER_MINUTE",
    "NANOS_PER_HOUR",
    "NANOS_PER_DAY",
    "SECONDS_PER_MINUTE",
    "SECONDS_PER_HOUR",
    "SECONDS_PER_DAY",
    "MAX_EPOCH_DAYS",
    "MAX_EPOCH_NANOSECONDS",
    "MIN_EPOCH_DAY",
    "MAX_EPOCH_DAY",
    "DAYS_IN_MONTH",
    "DAYS_PER_400_YEARS",
    "MAX_CALENDAR_DURATION_FIELD",
    "MAX_DURATION_SECONDS",
    "MAX_OFFSET_NANOSECONDS",
    "MONTH_DAY_REFERENCE_YEAR",
]
