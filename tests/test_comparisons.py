"""Tests for the comparison helpers."""

from __future__ import annotations

import pytest

from tempyral import (
    Duration,
    Instant,
    PlainDate,
    PlainDateTime,
    PlainMonthDay,
    PlainTime,
    PlainYearMonth,
    ZonedDateTime,
)
from tempyral.arithmetic import clamp, compare, equal, max_value, min_value
from tempyral.errors import RangeError, TempyralTypeError


class TestEqual:
    """Tests for equal()."""

    def test_same_type(self) -> None:
        assert equal(PlainTime(9, 30), PlainTime(9, 30))
        assert not equal(PlainTime(9, 30), PlainTime(9, 31))

    def test_different_types(self) -> None:
        assert not equal(PlainDate(2024, 1, 15), PlainDateTime(2024, 1, 15))

    def test_calendar_matters(self) -> None:
        assert not equal(PlainDate(2024, 1, 15), PlainDate(2024, 1, 15, calendar="gregory"))

    def test_zone_matters(self) -> None:
        assert not equal(ZonedDateTime(0, "UTC"), ZonedDateTime(0, "+00:00"))

    def test_month_days(self) -> None:
        assert equal(PlainMonthDay(2, 29), PlainMonthDay(2, 29))


class TestCompare:
    """Tests for compare()."""

    def test_times(self) -> None:
        assert compare(PlainTime(9), PlainTime(17)) == -1
        assert compare(PlainTime(17), PlainTime(9)) == 1
        assert compare(PlainTime(9), PlainTime(9)) == 0

    def test_zoned_ignores_zone(self) -> None:
        """Exact time decides; the zone does not."""
        assert compare(ZonedDateTime(0, "UTC"), ZonedDateTime(0, "+05:30")) == 0

    def test_dates_ignore_calendar(self) -> None:
        assert compare(PlainDate(2024, 1, 15), PlainDate(2024, 1, 15, calendar="buddhist")) == 0

    def test_year_months(self) -> None:
        assert compare(PlainYearMonth(2024, 1), PlainYearMonth(2023, 12)) == 1

    def test_instants(self) -> None:
        assert compare(Instant(-1), Instant(0)) == -1

    def test_durations(self) -> None:
        assert compare(Duration(hours=25), Duration(days=1)) == 1

    def test_durations_relative_to(self) -> None:
        one_month, thirty_days = Duration(months=1), Duration(days=30)
        assert compare(one_month, thirty_days, relative_to=PlainDate(2024, 1, 1)) == 1
        assert compare(one_month, thirty_days, relative_to=PlainDate(2024, 2, 1)) == -1

    def test_durations_need_relative_to(self) -> None:
        with pytest.raises(RangeError):
            compare(Duration(months=1), Duration(days=30))

    def test_relative_to_only_for_durations(self) -> None:
        with pytest.raises(RangeError):
            compare(PlainTime(9), PlainTime(10), relative_to=PlainDate(2024, 1, 1))

    def test_mixed_types(self) -> None:
        with pytest.raises(TempyralTypeError):
            compare(PlainDate(2024, 1, 15), PlainDateTime(2024, 1, 15))

    def test_month_days_have_no_order(self) -> None:
        with pytest.raises(TempyralTypeError):
            compare(PlainMonthDay(1, 1), PlainMonthDay(1, 2))


class TestExtremes:
    """Tests for min_value(), max_value() and clamp()."""

    def test_min_and_max(self) -> None:
        dates = [PlainDate(2024, 1, 20), PlainDate(2024, 1, 15), PlainDate(2024, 3, 1)]
        assert min_value(*dates) == PlainDate(2024, 1, 15)
        assert max_value(*dates) == PlainDate(2024, 3, 1)

    def test_min_keeps_first_of_equals(self) -> None:
        first = ZonedDateTime(0, "UTC")
        second = ZonedDateTime(0, "+01:00")
        assert min_value(first, second) is first

    def test_empty(self) -> None:
        with pytest.raises(ValueError):
            min_value()
        with pytest.raises(ValueError):
            max_value()

    def test_clamp(self) -> None:
        low, high = PlainTime(9), PlainTime(17)
        assert clamp(PlainTime(8), low, high) == low
        assert clamp(PlainTime(18), low, high) == high
        assert clamp(PlainTime(12), low, high) == PlainTime(12)

    def test_clamp_inverted_range(self) -> None:
        with pytest.raises(ValueError):
            clamp(PlainTime(12), PlainTime(17), PlainTime(9))
