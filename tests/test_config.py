"""Tests for settings and readings of the current time."""

from __future__ import annotations

import time

import pytest

from tempyral import Instant, Now, PlainDate, PlainDateTime, PlainTime, ZonedDateTime
from tempyral.config import TempyralSettings, get_settings
from tempyral.errors import RangeError


class TestTempyralSettings:
    """Tests for TempyralSettings."""

    def test_defaults(self) -> None:
        settings = get_settings()
        assert settings.time_zone == "UTC"
        assert settings.calendar == "iso8601"

    def test_prefixed_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEMPYRAL_TIME_ZONE", "Europe/Paris")
        monkeypatch.setenv("TEMPYRAL_CALENDAR", "gregory")
        settings = get_settings()
        assert settings.time_zone == "Europe/Paris"
        assert settings.calendar == "gregory"

    def test_tz_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TZ", "Asia/Tokyo")
        assert get_settings().time_zone == "Asia/Tokyo"

    def test_tz_variable_colon_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TZ", ":America/New_York")
        assert get_settings().time_zone == "America/New_York"

    def test_prefixed_variable_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TZ", "Asia/Tokyo")
        monkeypatch.setenv("TEMPYRAL_TIME_ZONE", "Europe/Paris")
        assert get_settings().time_zone == "Europe/Paris"

    def test_unprefixed_name_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Only TEMPYRAL_TIME_ZONE and TZ name the current zone."""
        monkeypatch.setenv("TIME_ZONE", "Asia/Tokyo")
        assert get_settings().time_zone == "UTC"

    def test_keyword(self) -> None:
        assert TempyralSettings(time_zone="Europe/Paris").time_zone == "Europe/Paris"

    def test_empty_means_utc(self) -> None:
        assert TempyralSettings(time_zone=" ").time_zone == "UTC"


class TestNow:
    """Tests for Now."""

    def test_instant(self) -> None:
        before = time.time_ns()
        now = Now.instant()
        after = time.time_ns()
        assert isinstance(now, Instant)
        assert before <= now.epoch_nanoseconds <= after

    def test_time_zone_from_settings(self, settings: TempyralSettings) -> None:
        assert Now.time_zone_id(settings) == "America/Los_Angeles"

    def test_time_zone_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TZ", "Europe/Paris")
        assert Now.time_zone_id() == "Europe/Paris"

    def test_zoned_uses_settings(self, settings: TempyralSettings) -> None:
        zdt = Now.zoned_date_time_iso(settings=settings)
        assert isinstance(zdt, ZonedDateTime)
        assert zdt.time_zone_id == "America/Los_Angeles"
        assert zdt.calendar_id == "iso8601"

    def test_explicit_zone_wins(self, settings: TempyralSettings) -> None:
        zdt = Now.zoned_date_time_iso("+05:30", settings=settings)
        assert zdt.offset == "+05:30"

    def test_calendar_from_settings(self) -> None:
        settings = TempyralSettings(calendar="buddhist")
        assert Now.plain_date(settings=settings).calendar_id == "buddhist"
        assert Now.plain_date("gregory", settings=settings).calendar_id == "gregory"
        assert Now.plain_date_time(settings=settings).calendar_id == "buddhist"

    def test_plain_readings_agree(self, settings: TempyralSettings) -> None:
        zdt = Now.zoned_date_time_iso(settings=settings)
        today = Now.plain_date_iso(settings=settings)
        assert isinstance(today, PlainDate)
        assert PlainDate.compare(today, zdt.to_plain_date()) >= 0
        assert isinstance(Now.plain_date_time_iso(settings=settings), PlainDateTime)
        assert isinstance(Now.plain_time_iso(settings=settings), PlainTime)

    def test_unknown_zone(self) -> None:
        with pytest.raises(RangeError):
            Now.time_zone_id(TempyralSettings(time_zone="Mars/Olympus_Mons"))
