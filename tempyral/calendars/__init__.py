"""Calendars and the calendar registry.

This module provides:
    - Calendar: The calendar contract
    - CalendarDate: The record of calendar fields for one day
    - get_calendar: Look up a calendar by id
    - register_calendar: Add an extension calendar
"""

from __future__ import annotations

from tempyral._internal.decorators import memoize
from tempyral.calendars.base import Calendar, CalendarDate
from tempyral.calendars.gregory import BuddhistCalendar, GregorianCalendar
from tempyral.calendars.iso import ISO8601Calendar
from tempyral.errors import RangeError, TempyralTypeError

_REGISTRY: dict[str, type[Calendar]] = {}


def register_calendar(cls: type[Calendar]) -> type[Calendar]:
    """Register a Calendar subclass under its id.

    Usable as a class decorator.

    Examples:
        >>> @register_calendar
        ... class ProlepticCalendar(GregorianCalendar):
        ...     id = "proleptic-test"
        >>> get_calendar("proleptic-test").id
        'proleptic-test'
    """
    _REGISTRY[cls.id.lower()] = cls
    _calendar_instance._clear_cache()  # type: ignore[attr-defined]
    return cls


@memoize
def _calendar_instance(calendar_id: str) -> Calendar:
    return _REGISTRY[calendar_id]()


def get_calendar(value: object = None) -> Calendar:
    """Return the calendar for an id, or the calendar itself.

    Args:
        value: A Calendar, a calendar id (case-insensitive), or None for
            the ISO 8601 calendar.

    Raises:
        RangeError: If the id is unknown.
        TempyralTypeError: If value is neither a string nor a Calendar.

    Examples:
        >>> get_calendar("ISO8601").id
        'iso8601'
    """
    if value is None:
        return _calendar_instance(ISO8601Calendar.id)
    if isinstance(value, Calendar):
        return value
    if not isinstance(value, str):
        raise TempyralTypeError(f"calendar must be a string, got {type(value).__name__}")
    calendar_id = value.lower()
    if calendar_id not in _REGISTRY:
        raise RangeError(f"unknown calendar: {value!r}")
    return _calendar_instance(calendar_id)


for _cls in (ISO8601Calendar, GregorianCalendar, BuddhistCalendar):
    register_calendar(_cls)
del _cls

__all__: list[str] = [
    "Calendar",
    "CalendarDate",
    "ISO8601Calendar",
    "GregorianCalendar",
    "BuddhistCalendar",
    "get_calendar",
    "register_calendar",
]
