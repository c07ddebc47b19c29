"""Tests for the PlainDate class.

These tests cover construction from ISO fields and calendar fields, the
calendar properties, date arithmetic with overflow handling, differences
and conversions to the other types.
"""

from __future__ import annotations

import pytest

from tempyral import (
    Duration,
    PlainDate,
    PlainDateTime,
    PlainMonthDay,
    PlainTime,
    PlainYearMonth,
)
from tempyral.errors import ParseError, RangeError, TempyralTypeError


class TestPlainDateConstruction:
    """Tests for PlainDate construction."""

    def test_iso_fields(self) -> None:
        d = PlainDate(2024, 1, 15)
        assert (d.year, d.month, d.day) == (2024, 1, 15)
        assert d.calendar_id == "iso8601"

    def test_invalid_day_rejected(self) -> None:
        """The constructor never constrains."""
        with pytest.raises(RangeError):
            PlainDate(2021, 2, 29)

    def test_leap_day(self) -> None:
        assert PlainDate(2020, 2, 29).in_leap_year

    def test_range_limits(self) -> None:
        """The supported range is -271821-04-19 to +275760-09-13."""
        PlainDate(-271821, 4, 19)
        PlainDate(275760, 9, 13)
        with pytest.raises(RangeError):
            PlainDate(-271821, 4, 18)
        with pytest.raises(RangeError):
            PlainDate(275760, 9, 14)

    def test_unknown_calendar(self) -> None:
        with pytest.raises(RangeError):
            PlainDate(2024, 1, 1, "klingon")

    def test_calendar_type_checked(self) -> None:
        with pytest.raises(TempyralTypeError):
            PlainDate(2024, 1, 1, 5)

    def test_from_fields_constrains(self) -> None:
        d = PlainDate.from_fields({"year": 2021, "month_code": "M02", "day": 30})
        assert d == PlainDate(2021, 2, 28)

    def test_from_fields_reject(self) -> None:
        with pytest.raises(RangeError):
            PlainDate.from_fields({"year": 2021, "month": 2, "day": 30}, overflow="reject")

    def test_from_fields_month_conflict(self) -> None:
        """month and month_code must agree."""
        with pytest.raises(RangeError):
            PlainDate.from_fields({"year": 2021, "month": 3, "month_code": "M02", "day": 1})

    def test_from_fields_missing_day(self) -> None:
        with pytest.raises(TempyralTypeError):
            PlainDate.from_fields({"year": 2021, "month": 3})

    def test_from_fields_era(self) -> None:
        d = PlainDate.from_fields(
            {"era": "be", "era_year": 2564, "month": 1, "day": 1, "calendar": "buddhist"}
        )
        assert d.iso_year == 2021
        assert d.calendar_id == "buddhist"

    def test_from_fields_unknown_field(self) -> None:
        with pytest.raises(TempyralTypeError):
            PlainDate.from_fields({"year": 2021, "month": 1, "day": 1, "hour": 3})


class TestPlainDateParsing:
    """Tests for PlainDate.from_string()."""

    def test_date_only(self) -> None:
        assert PlainDate.from_string("2024-01-15") == PlainDate(2024, 1, 15)

    def test_basic_format(self) -> None:
        assert PlainDate.from_string("20240115") == PlainDate(2024, 1, 15)

    def test_extended_year(self) -> None:
        assert PlainDate.from_string("-000001-01-01").iso_year == -1

    def test_minus_zero_year_rejected(self) -> None:
        with pytest.raises(ParseError):
            PlainDate.from_string("-000000-01-01")

    def test_calendar_annotation(self) -> None:
        d = PlainDate.from_string("2020-01-01T10:00[u-ca=gregory]")
        assert d.calendar_id == "gregory"

    def test_z_rejected(self) -> None:
        with pytest.raises(ParseError):
            PlainDate.from_string("2020-01-01T00:00Z")

    def test_unknown_critical_annotation(self) -> None:
        with pytest.raises(ParseError):
            PlainDate.from_string("2020-01-01[!foo=bar]")

    def test_invalid_day(self) -> None:
        with pytest.raises(ParseError):
            PlainDate.from_string("2021-02-30")


class TestPlainDateFields:
    """Tests for the calendar field properties."""

    def test_day_of_week(self) -> None:
        assert PlainDate(2024, 1, 15).day_of_week == 1
        assert PlainDate(2024, 1, 14).day_of_week == 7

    def test_day_of_year(self) -> None:
        assert PlainDate(2020, 12, 31).day_of_year == 366

    def test_iso_week(self) -> None:
        """Early January can belong to the previous ISO week-year."""
        d = PlainDate(2021, 1, 1)
        assert d.week_of_year == 53
        assert d.year_of_week == 2020

    def test_lengths(self) -> None:
        d = PlainDate(2021, 2, 10)
        assert d.days_in_month == 28
        assert d.days_in_year == 365
        assert d.months_in_year == 12
        assert d.days_in_week == 7

    def test_month_code(self) -> None:
        assert PlainDate(2021, 9, 1).month_code == "M09"

    def test_iso_calendar_has_no_era(self) -> None:
        assert PlainDate(2021, 1, 1).era is None

    def test_gregorian_era(self) -> None:
        d = PlainDate(0, 1, 1, "gregory")
        assert d.era == "bce"
        assert d.era_year == 1

    def test_buddhist_year(self) -> None:
        d = PlainDate(2024, 1, 15, calendar="buddhist")
        assert d.year == 2567
        assert d.era == "be"
        assert d.week_of_year is None

    def test_epoch_day(self) -> None:
        assert PlainDate(1970, 1, 2).epoch_day == 1


class TestPlainDateArithmetic:
    """Tests for add and subtract."""

    def test_add_month_constrains(self) -> None:
        assert PlainDate(2021, 1, 31).add(Duration(months=1)) == PlainDate(2021, 2, 28)

    def test_add_month_reject(self) -> None:
        with pytest.raises(RangeError):
            PlainDate(2021, 1, 31).add(Duration(months=1), overflow="reject")

    def test_add_year_from_leap_day(self) -> None:
        assert PlainDate(2020, 2, 29).add(Duration(years=1)) == PlainDate(2021, 2, 28)

    def test_add_weeks_and_days(self) -> None:
        assert PlainDate(2021, 1, 1).add(Duration(weeks=1, days=2)) == PlainDate(2021, 1, 10)

    def test_add_whole_days_of_time(self) -> None:
        """Time units only count in whole days."""
        assert PlainDate(2021, 1, 1).add(Duration(hours=47)) == PlainDate(2021, 1, 2)

    def test_subtract_months(self) -> None:
        assert PlainDate(2021, 3, 31).subtract(Duration(months=1)) == PlainDate(2021, 2, 28)

    def test_add_accepts_strings(self) -> None:
        assert PlainDate(2021, 1, 1).add("P1D") == PlainDate(2021, 1, 2)

    def test_add_out_of_range(self) -> None:
        with pytest.raises(RangeError):
            PlainDate(275760, 9, 13).add(Duration(days=1))

    def test_gregorian_month_arithmetic(self) -> None:
        """Non-ISO calendars step months the same way."""
        d = PlainDate(2021, 1, 31, "gregory").add(Duration(months=1))
        assert d == PlainDate(2021, 2, 28, "gregory")


class TestPlainDateDifference:
    """Tests for until and since."""

    def test_until_days_by_default(self) -> None:
        assert PlainDate(2021, 1, 31).until(PlainDate(2021, 3, 1)) == Duration(days=29)

    def test_until_months(self) -> None:
        d = PlainDate(2021, 1, 31).until(PlainDate(2021, 3, 1), largest_unit="month")
        assert d == Duration(months=1, days=1)

    def test_until_weeks(self) -> None:
        d = PlainDate(2021, 1, 1).until(PlainDate(2021, 1, 20), largest_unit="week")
        assert d == Duration(weeks=2, days=5)

    def test_until_rounded_to_year(self) -> None:
        d = PlainDate(2020, 1, 1).until(
            PlainDate(2020, 12, 25),
            largest_unit="year",
            smallest_unit="month",
            rounding_mode="halfExpand",
        )
        assert d == Duration(years=1)

    def test_since_negates(self) -> None:
        d = PlainDate(2021, 1, 1).since(PlainDate(2021, 1, 11))
        assert d == Duration(days=-10)

    def test_same_date(self) -> None:
        assert PlainDate(2021, 1, 1).until(PlainDate(2021, 1, 1)).blank

    def test_calendar_mismatch(self) -> None:
        with pytest.raises(RangeError):
            PlainDate(2021, 1, 1).until(PlainDate(2021, 2, 1, "gregory"))

    def test_time_units_rejected(self) -> None:
        with pytest.raises(RangeError):
            PlainDate(2021, 1, 1).until(PlainDate(2021, 2, 1), largest_unit="hour")

    def test_add_until_round_trip(self) -> None:
        """Adding the difference to the start reaches the end."""
        start = PlainDate(2020, 1, 31)
        end = PlainDate(2021, 3, 30)
        assert start.add(start.until(end, largest_unit="year")) == end


class TestPlainDateDerived:
    """Tests for with_fields, with_calendar and conversions."""

    def test_with_fields_constrains(self) -> None:
        assert PlainDate(2021, 3, 31).with_fields(month=2) == PlainDate(2021, 2, 28)

    def test_with_fields_month_code(self) -> None:
        assert PlainDate(2021, 3, 15).with_fields(month_code="M06") == PlainDate(2021, 6, 15)

    def test_with_fields_requires_field(self) -> None:
        with pytest.raises(TempyralTypeError):
            PlainDate(2021, 3, 31).with_fields()

    def test_with_calendar(self) -> None:
        d = PlainDate(2021, 5, 1).with_calendar("buddhist")
        assert d.year == 2564
        assert d.iso_date == (2021, 5, 1)

    def test_to_plain_date_time(self) -> None:
        dt = PlainDate(2021, 5, 1).to_plain_date_time(PlainTime(12, 30))
        assert dt == PlainDateTime(2021, 5, 1, 12, 30)

    def test_to_plain_year_month(self) -> None:
        assert PlainDate(2021, 5, 17).to_plain_year_month() == PlainYearMonth(2021, 5)

    def test_to_plain_month_day(self) -> None:
        assert PlainDate(2021, 5, 17).to_plain_month_day() == PlainMonthDay(5, 17)

    def test_to_zoned_start_of_day(self) -> None:
        zdt = PlainDate(2020, 3, 8).to_zoned_date_time("America/Los_Angeles")
        assert str(zdt) == "2020-03-08T00:00:00-08:00[America/Los_Angeles]"

    def test_to_zoned_with_time_in_gap(self) -> None:
        """A skipped time moves forward."""
        zdt = PlainDate(2020, 3, 8).to_zoned_date_time("America/Los_Angeles", "02:30")
        assert zdt.hour == 3
        assert zdt.offset == "-07:00"


class TestPlainDateFormatting:
    """Tests for to_string and repr."""

    def test_iso(self) -> None:
        assert str(PlainDate(2024, 1, 15)) == "2024-01-15"

    def test_non_iso_calendar_annotated(self) -> None:
        assert PlainDate(2024, 1, 15, "gregory").to_string() == "2024-01-15[u-ca=gregory]"

    def test_calendar_name_options(self) -> None:
        d = PlainDate(2024, 1, 15)
        assert d.to_string(calendar_name="always") == "2024-01-15[u-ca=iso8601]"
        assert d.to_string(calendar_name="critical") == "2024-01-15[!u-ca=iso8601]"
        assert PlainDate(2024, 1, 15, "gregory").to_string(calendar_name="never") == "2024-01-15"

    def test_extended_years(self) -> None:
        assert str(PlainDate(-1, 1, 1)) == "-000001-01-01"
        assert str(PlainDate(10000, 1, 1)) == "+010000-01-01"

    def test_repr(self) -> None:
        assert repr(PlainDate(2024, 1, 15)) == "PlainDate(2024, 1, 15)"
        assert repr(PlainDate(2024, 1, 15, "gregory")) == "PlainDate(2024, 1, 15, 'gregory')"


class TestPlainDateComparison:
    """Tests for ordering and equality."""

    def test_ordering(self) -> None:
        assert PlainDate(2024, 1, 15) < PlainDate(2024, 1, 16)
        assert PlainDate.compare(PlainDate(2024, 2, 1), PlainDate(2024, 1, 31)) == 1

    def test_calendar_is_part_of_equality(self) -> None:
        assert PlainDate(2024, 1, 15) != PlainDate(2024, 1, 15, "gregory")

    def test_compare_ignores_calendar(self) -> None:
        assert PlainDate.compare(PlainDate(2024, 1, 15), PlainDate(2024, 1, 15, "gregory")) == 0

    def test_hashable(self) -> None:
        assert len({PlainDate(2024, 1, 15), PlainDate(2024, 1, 15)}) == 1
