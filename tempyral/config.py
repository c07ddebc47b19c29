"""Configuration management.

Settings come from environment variables through pydantic-settings. They
only affect the "current" values returned by tempyral.now.Now: the zone
that wall-clock readings are taken in and the calendar of the
calendar-aware readings.

Environment:
    TEMPYRAL_TIME_ZONE (or TZ): current time zone id, "UTC" by default.
    TEMPYRAL_CALENDAR: default calendar id, "iso8601" by default.
"""

from __future__ import annotations

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings


class TempyralSettings(BaseSettings):
    """Settings for the current time zone and calendar.

    Examples:
        >>> TempyralSettings(time_zone="Europe/Paris").time_zone
        'Europe/Paris'
    """

    time_zone: str = Field(
        default="UTC",
        validation_alias=AliasChoices("TEMPYRAL_TIME_ZONE", "TZ"),
    )
    calendar: str = "iso8601"

    model_config = {"env_prefix": "TEMPYRAL_", "populate_by_name": True}

    @field_validator("time_zone")
    @classmethod
    def _strip_tz_prefix(cls, value: str) -> str:
        # POSIX allows TZ=":America/New_York"
        value = value.strip().lstrip(":")
        return value or "UTC"


def get_settings() -> TempyralSettings:
    """Build settings from the current environment."""
    return TempyralSettings()


__all__ = ["TempyralSettings", "get_settings"]
