"""Time zones and zone rule resolution.

This module provides:
    - TimeZone: An IANA zone or a fixed UTC offset
    - ZoneRuleProvider: The zone rule source contract
    - ZoneInfoProvider: The zoneinfo/tzdata backed provider
"""

from __future__ import annotations

from tempyral.zones.provider import ZoneInfoProvider, ZoneRuleProvider, default_provider
from tempyral.zones.timezone import TimeZone

__all__: list[str] = [
    "TimeZone",
    "ZoneRuleProvider",
    "ZoneInfoProvider",
    "default_provider",
]
