"""Tests for calendars, the calendar registry and the ISO date helpers."""

from __future__ import annotations

import pytest

from tempyral import Duration, PlainDate
from tempyral._internal.calendar import (
    IsoDate,
    add_days_to_iso_date,
    days_in_month,
    epoch_days_from_iso,
    is_leap_year,
    iso_day_of_week,
    iso_from_epoch_days,
    iso_week_of_year,
)
from tempyral._internal.constants import MAX_EPOCH_DAY, MIN_EPOCH_DAY
from tempyral._internal.options import Overflow
from tempyral.calendars import (
    Calendar,
    GregorianCalendar,
    get_calendar,
    register_calendar,
)
from tempyral.errors import RangeError, TempyralTypeError
from tempyral.units.timeunit import TemporalUnit


@register_calendar
class ThirteenMonthCalendar(Calendar):
    """Twelve months of 28 days and a 29-day thirteenth month, from 1970."""

    __slots__ = ()

    id = "thirteen-test"

    def months_in_year(self, year: int) -> int:
        return 13

    def days_in_month(self, year: int, month: int) -> int:
        return 29 if month == 13 else 28

    def in_leap_year(self, year: int) -> bool:
        return False

    def epoch_day_from_ymd(self, year: int, month: int, day: int) -> int:
        return (year - 1970) * 365 + (month - 1) * 28 + day - 1

    def ymd_from_epoch_day(self, epoch_day: int) -> tuple[int, int, int]:
        years, rest = divmod(epoch_day, 365)
        month = min(rest // 28, 12) + 1
        return 1970 + years, month, rest - (month - 1) * 28 + 1


class TestIsoHelpers:
    """Tests for the proleptic Gregorian helpers."""

    def test_epoch(self) -> None:
        assert epoch_days_from_iso(1970, 1, 1) == 0
        assert iso_from_epoch_days(-1) == IsoDate(1969, 12, 31)

    def test_range_limits(self) -> None:
        assert iso_from_epoch_days(MIN_EPOCH_DAY) == IsoDate(-271821, 4, 19)
        assert iso_from_epoch_days(MAX_EPOCH_DAY) == IsoDate(275760, 9, 13)

    def test_leap_years(self) -> None:
        assert is_leap_year(2000)
        assert not is_leap_year(1900)
        assert is_leap_year(-4)
        assert days_in_month(2023, 2) == 28
        assert days_in_month(2024, 2) == 29

    def test_day_of_week(self) -> None:
        """1970-01-01 was a Thursday."""
        assert iso_day_of_week(0) == 4
        assert iso_day_of_week(epoch_days_from_iso(2024, 1, 1)) == 1

    @pytest.mark.parametrize(
        ("date", "expected"),
        [
            ((2021, 1, 1), (53, 2020)),
            ((2019, 12, 30), (1, 2020)),
            ((2024, 12, 30), (1, 2025)),
            ((2024, 6, 15), (24, 2024)),
        ],
    )
    def test_iso_week(self, date: tuple[int, int, int], expected: tuple[int, int]) -> None:
        assert iso_week_of_year(*date) == expected

    def test_add_days(self) -> None:
        assert add_days_to_iso_date(IsoDate(2024, 2, 28), 2) == IsoDate(2024, 3, 1)


class TestRegistry:
    """Tests for get_calendar() and register_calendar()."""

    def test_default_is_iso(self) -> None:
        assert get_calendar().id == "iso8601"

    def test_case_insensitive(self) -> None:
        assert get_calendar("GREGORY").id == "gregory"

    def test_instances_are_shared(self) -> None:
        assert get_calendar("buddhist") is get_calendar("buddhist")

    def test_calendar_passes_through(self) -> None:
        calendar = GregorianCalendar()
        assert get_calendar(calendar) is calendar

    def test_unknown_id(self) -> None:
        with pytest.raises(RangeError):
            get_calendar("julian")

    def test_non_string(self) -> None:
        with pytest.raises(TempyralTypeError):
            get_calendar(8601)

    def test_equality_by_id(self) -> None:
        assert GregorianCalendar() == get_calendar("gregory")
        assert get_calendar("gregory") != get_calendar("iso8601")

    def test_registered_calendar(self) -> None:
        assert get_calendar("Thirteen-Test").id == "thirteen-test"
        assert str(get_calendar("thirteen-test")) == "thirteen-test"


class TestCalendarFields:
    """Tests for calendar records and field resolution."""

    def test_gregorian_eras(self) -> None:
        record = get_calendar("gregory").from_iso(IsoDate(0, 1, 1))
        assert (record.era, record.era_year) == ("bce", 1)

    def test_era_resolution(self) -> None:
        calendar = get_calendar("gregory")
        date = calendar.date_from_fields(
            {"era": "bce", "era_year": 44, "month": 3, "day": 15}, Overflow.REJECT
        )
        assert date == IsoDate(-43, 3, 15)

    def test_era_needs_era_year(self) -> None:
        with pytest.raises(TempyralTypeError):
            get_calendar("gregory").date_from_fields(
                {"era": "ce", "month": 1, "day": 1}, Overflow.REJECT
            )

    def test_iso_has_no_eras(self) -> None:
        with pytest.raises(RangeError):
            get_calendar().date_from_fields(
                {"era": "ce", "era_year": 1, "month": 1, "day": 1}, Overflow.REJECT
            )

    def test_buddhist_year(self) -> None:
        record = get_calendar("buddhist").from_iso(IsoDate(2024, 1, 1))
        assert (record.era, record.year) == ("be", 2567)

    def test_month_code_conflict(self) -> None:
        with pytest.raises(RangeError):
            get_calendar().date_from_fields(
                {"year": 2024, "month": 3, "month_code": "M04", "day": 1}, Overflow.CONSTRAIN
            )

    def test_invalid_month_code(self) -> None:
        with pytest.raises(RangeError):
            get_calendar().date_from_fields(
                {"year": 2024, "month_code": "M13", "day": 1}, Overflow.CONSTRAIN
            )

    def test_merge_fields_replaces_month_pair(self) -> None:
        merged = get_calendar().merge_fields(
            {"year": 2020, "month": 1, "month_code": "M01", "day": 5},
            {"month_code": "M03"},
        )
        assert merged == {"year": 2020, "day": 5, "month_code": "M03"}

    def test_merge_fields_replaces_era_with_year(self) -> None:
        merged = get_calendar("gregory").merge_fields(
            {"era": "ce", "era_year": 2020, "month": 1, "day": 5}, {"year": 1999}
        )
        assert merged == {"month": 1, "day": 5, "year": 1999}

    def test_iso_week_fields(self) -> None:
        record = get_calendar().from_iso(IsoDate(2021, 1, 1))
        assert (record.week_of_year, record.year_of_week) == (53, 2020)

    def test_gregory_has_no_weeks(self) -> None:
        record = get_calendar("gregory").from_iso(IsoDate(2021, 1, 1))
        assert record.week_of_year is None


class TestCalendarArithmetic:
    """Tests for date_add and date_until."""

    def test_iso_add_constrains(self) -> None:
        calendar = get_calendar()
        assert calendar.date_add(IsoDate(2021, 1, 31), 0, 1, 0, 0, Overflow.CONSTRAIN) == IsoDate(
            2021, 2, 28
        )

    def test_iso_add_rejects(self) -> None:
        with pytest.raises(RangeError):
            get_calendar().date_add(IsoDate(2021, 1, 31), 0, 1, 0, 0, Overflow.REJECT)

    def test_iso_until_month(self) -> None:
        result = get_calendar().date_until(IsoDate(2021, 1, 31), IsoDate(2021, 3, 1), TemporalUnit.MONTH)
        assert result == (0, 1, 0, 1)

    def test_iso_until_weeks(self) -> None:
        result = get_calendar().date_until(IsoDate(2021, 1, 1), IsoDate(2021, 1, 20), TemporalUnit.WEEK)
        assert result == (0, 0, 2, 5)

    def test_iso_until_negative(self) -> None:
        result = get_calendar().date_until(IsoDate(2021, 3, 1), IsoDate(2020, 1, 15), TemporalUnit.YEAR)
        assert result == (-1, -1, 0, -17)

    def test_gregory_matches_iso(self) -> None:
        """The generic algorithms agree with the ISO closed forms."""
        one, two = IsoDate(2019, 8, 31), IsoDate(2024, 2, 29)
        for unit in (TemporalUnit.YEAR, TemporalUnit.MONTH, TemporalUnit.WEEK, TemporalUnit.DAY):
            assert get_calendar("gregory").date_until(one, two, unit) == get_calendar().date_until(
                one, two, unit
            )
        assert get_calendar("gregory").date_add(
            one, 1, 6, 0, 0, Overflow.CONSTRAIN
        ) == get_calendar().date_add(one, 1, 6, 0, 0, Overflow.CONSTRAIN)

    def test_leap_day_plus_year(self) -> None:
        assert get_calendar("buddhist").date_add(
            IsoDate(2024, 2, 29), 1, 0, 0, 0, Overflow.CONSTRAIN
        ) == IsoDate(2025, 2, 28)


class TestThirteenMonthCalendar:
    """Tests for a calendar plugged in through register_calendar()."""

    def test_fields(self) -> None:
        date = PlainDate(1970, 12, 31, calendar="thirteen-test")
        assert (date.year, date.month, date.day) == (1970, 13, 29)
        assert date.month_code == "M13"
        assert date.months_in_year == 13
        assert date.days_in_year == 365

    def test_add_month_constrains(self) -> None:
        """The last day of month 13 becomes the 28th of month 1."""
        date = PlainDate(1970, 12, 31, calendar="thirteen-test").add(Duration(months=1))
        assert (date.year, date.month, date.day) == (1971, 1, 28)
        assert date.to_string(calendar_name="never") == "1971-01-28"

    def test_until(self) -> None:
        one = PlainDate(1970, 1, 1, calendar="thirteen-test")
        two = PlainDate(1971, 2, 2, calendar="thirteen-test")
        assert one.until(two, largest_unit="year") == Duration(years=1, months=1, days=4)

    def test_from_fields(self) -> None:
        date = PlainDate.from_fields(
            {"year": 1970, "month": 13, "day": 30, "calendar": "thirteen-test"}
        )
        assert date.day == 29
