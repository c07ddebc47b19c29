"""Tests for conversions to and from the datetime module."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from tempyral import Duration, Instant, PlainDate, PlainDateTime, PlainTime, ZonedDateTime
from tempyral.convert import (
    from_py_date,
    from_py_datetime,
    from_py_time,
    from_py_timedelta,
    to_py_date,
    to_py_datetime,
    to_py_time,
    to_py_timedelta,
)
from tempyral.errors import RangeError, TempyralTypeError

LOS_ANGELES = ZoneInfo("America/Los_Angeles")


class TestAwareDatetime:
    """Tests for aware datetimes and ZonedDateTime."""

    def test_from_zoneinfo(self) -> None:
        zdt = from_py_datetime(datetime(2020, 3, 8, 12, tzinfo=LOS_ANGELES))
        assert isinstance(zdt, ZonedDateTime)
        assert str(zdt) == "2020-03-08T12:00:00-07:00[America/Los_Angeles]"

    def test_to_zoneinfo(self) -> None:
        zdt = ZonedDateTime.from_string("2020-03-08T12:00:00-07:00[America/Los_Angeles]")
        result = to_py_datetime(zdt)
        assert result == datetime(2020, 3, 8, 19, tzinfo=timezone.utc)
        assert result.tzinfo.key == "America/Los_Angeles"
        assert (result.hour, result.utcoffset()) == (12, timedelta(hours=-7))

    def test_fixed_offset(self) -> None:
        tz = timezone(timedelta(hours=5, minutes=30))
        zdt = from_py_datetime(datetime(2024, 1, 15, 10, tzinfo=tz))
        assert zdt.time_zone_id == "+05:30"
        back = to_py_datetime(zdt)
        assert back.utcoffset() == timedelta(hours=5, minutes=30)
        assert back.replace(tzinfo=None) == datetime(2024, 1, 15, 10)

    def test_utc(self) -> None:
        zdt = from_py_datetime(datetime(2024, 1, 15, tzinfo=timezone.utc))
        assert zdt.time_zone_id == "UTC"

    def test_unnamed_zero_offset_is_utc(self) -> None:
        """An unnamed zero offset is the UTC singleton."""
        zdt = from_py_datetime(datetime(2024, 1, 15, tzinfo=timezone(timedelta(0))))
        assert zdt.time_zone_id == "UTC"

    def test_named_zero_offset(self) -> None:
        tz = timezone(timedelta(0), "X")
        zdt = from_py_datetime(datetime(2024, 1, 15, tzinfo=tz))
        assert zdt.time_zone_id == "+00:00"

    def test_offset_with_seconds(self) -> None:
        tz = timezone(timedelta(hours=1, seconds=30))
        with pytest.raises(RangeError):
            from_py_datetime(datetime(2024, 1, 15, tzinfo=tz))

    def test_microseconds_kept(self) -> None:
        zdt = from_py_datetime(datetime(2024, 1, 15, 0, 0, 0, 123456, tzinfo=timezone.utc))
        assert (zdt.millisecond, zdt.microsecond, zdt.nanosecond) == (123, 456, 0)


class TestNaiveDatetime:
    """Tests for naive datetimes and PlainDateTime."""

    def test_from_naive(self) -> None:
        result = from_py_datetime(datetime(2024, 1, 15, 9, 30, 0, 250))
        assert result == PlainDateTime(2024, 1, 15, 9, 30, 0, 0, 250)

    def test_to_naive_drops_nanoseconds(self) -> None:
        result = to_py_datetime(PlainDateTime(2024, 1, 15, 9, 30, 0, 123, 456, 789))
        assert result == datetime(2024, 1, 15, 9, 30, 0, 123456)
        assert result.tzinfo is None

    def test_year_out_of_range(self) -> None:
        with pytest.raises(RangeError):
            to_py_datetime(PlainDateTime(10000, 1, 1))

    def test_not_a_datetime(self) -> None:
        with pytest.raises(TempyralTypeError):
            from_py_datetime(date(2024, 1, 15))

    def test_unsupported_type(self) -> None:
        with pytest.raises(TempyralTypeError):
            to_py_datetime(PlainDate(2024, 1, 15))


class TestInstant:
    """Tests for Instant to datetime."""

    def test_to_utc(self) -> None:
        result = to_py_datetime(Instant(1_500))
        assert result == datetime(1970, 1, 1, 0, 0, 0, 1, tzinfo=timezone.utc)
        assert result.tzinfo is timezone.utc

    def test_out_of_range(self) -> None:
        with pytest.raises(RangeError):
            to_py_datetime(Instant(-8_640_000_000_000_000_000_000))


class TestDateAndTime:
    """Tests for date and time conversions."""

    def test_to_date_uses_iso_fields(self) -> None:
        assert to_py_date(PlainDate(2024, 2, 29, calendar="buddhist")) == date(2024, 2, 29)

    def test_to_date_year_zero(self) -> None:
        with pytest.raises(RangeError):
            to_py_date(PlainDate(0, 1, 1))

    def test_from_date(self) -> None:
        assert from_py_date(date(2024, 1, 15)) == PlainDate(2024, 1, 15)

    def test_from_datetime_takes_date(self) -> None:
        assert from_py_date(datetime(2024, 1, 15, 23, 59)) == PlainDate(2024, 1, 15)

    def test_to_time(self) -> None:
        assert to_py_time(PlainTime(14, 30, 45, 123, 456, 789)) == time(14, 30, 45, 123456)

    def test_from_time_ignores_tzinfo(self) -> None:
        result = from_py_time(time(1, 2, 3, 4005, tzinfo=timezone.utc))
        assert result == PlainTime(1, 2, 3, 4, 5)


class TestTimedelta:
    """Tests for Duration and timedelta."""

    def test_to_timedelta(self) -> None:
        assert to_py_timedelta(Duration(days=1, hours=2)) == timedelta(days=1, seconds=7200)

    def test_to_timedelta_truncates_toward_zero(self) -> None:
        assert to_py_timedelta(Duration(nanoseconds=-1500)) == timedelta(microseconds=-1)

    @pytest.mark.parametrize("field", ["years", "months", "weeks"])
    def test_calendar_units_rejected(self, field: str) -> None:
        with pytest.raises(RangeError):
            to_py_timedelta(Duration(**{field: 1}))

    def test_from_timedelta(self) -> None:
        assert from_py_timedelta(timedelta(days=2, seconds=5)) == Duration(days=2, seconds=5)

    def test_from_negative_timedelta(self) -> None:
        assert from_py_timedelta(timedelta(seconds=-90)) == Duration(minutes=-1, seconds=-30)

    def test_from_timedelta_microseconds(self) -> None:
        result = from_py_timedelta(timedelta(microseconds=1_001_500))
        assert result == Duration(seconds=1, milliseconds=1, microseconds=500)
