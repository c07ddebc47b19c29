"""Temporal formatting and parsing.

This module provides the RFC 9557 (ISO 8601 with bracketed annotations)
parsers and formatters used by every type's from_string() and to_string().

Functions:
    parse_date_time: Parse a date-time string into its raw fields.
    parse_duration: Parse an ISO 8601 duration into its ten fields.
    format_date: Format an ISO date, with extended years when needed.
    format_time: Format nanoseconds of day at a given precision.
    format_duration: Format balanced duration fields.

Examples:
    >>> from tempyral.format import parse_date_time
    >>> parsed = parse_date_time("2024-01-15T14:30:45+01:00[Europe/Paris]")
    >>> parsed.offset, parsed.time_zone
    ('+01:00', 'Europe/Paris')
"""

from __future__ import annotations

from tempyral.format.iso8601 import (
    ParsedDateTime,
    format_date,
    format_duration,
    format_time,
    parse_date_time,
    parse_duration,
)

__all__: list[str] = [
    "ParsedDateTime",
    "parse_date_time",
    "parse_duration",
    "format_date",
    "format_time",
    "format_duration",
]
