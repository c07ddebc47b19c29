"""Tests for the PlainYearMonth class."""

from __future__ import annotations

import pytest

from tempyral import Duration, PlainDate, PlainYearMonth
from tempyral.errors import ParseError, RangeError, TempyralTypeError


class TestPlainYearMonthConstruction:
    """Tests for construction and parsing."""

    def test_fields(self) -> None:
        ym = PlainYearMonth(2024, 2)
        assert (ym.year, ym.month, ym.month_code) == (2024, 2, "M02")
        assert ym.days_in_month == 29
        assert ym.days_in_year == 366
        assert ym.months_in_year == 12
        assert ym.in_leap_year

    def test_invalid_month(self) -> None:
        with pytest.raises(RangeError):
            PlainYearMonth(2024, 13)

    def test_range_limits(self) -> None:
        """The first and last months partially covered by instants are allowed."""
        PlainYearMonth(-271821, 4)
        PlainYearMonth(275760, 9)
        with pytest.raises(RangeError):
            PlainYearMonth(-271821, 3)
        with pytest.raises(RangeError):
            PlainYearMonth(275760, 10)

    def test_from_fields_constrains(self) -> None:
        assert PlainYearMonth.from_fields({"year": 2024, "month": 13}) == PlainYearMonth(2024, 12)

    def test_from_fields_reject(self) -> None:
        with pytest.raises(RangeError):
            PlainYearMonth.from_fields({"year": 2024, "month": 13}, overflow="reject")

    def test_from_fields_month_code(self) -> None:
        assert PlainYearMonth.from_fields({"year": 2024, "month_code": "M07"}).month == 7

    def test_from_fields_requires_year(self) -> None:
        with pytest.raises(TempyralTypeError):
            PlainYearMonth.from_fields({"month": 7})

    @pytest.mark.parametrize("text", ["2024-10", "202410", "2024-10-15", "2024-10-15T12:00"])
    def test_from_string(self, text: str) -> None:
        assert PlainYearMonth.from_string(text) == PlainYearMonth(2024, 10)

    def test_from_string_non_iso_needs_day(self) -> None:
        with pytest.raises(ParseError):
            PlainYearMonth.from_string("2024-10[u-ca=buddhist]")

    def test_from_string_non_iso(self) -> None:
        ym = PlainYearMonth.from_string("2024-10-15[u-ca=buddhist]")
        assert ym.year == 2567
        assert ym.calendar_id == "buddhist"

    def test_from_value_rejects_numbers(self) -> None:
        with pytest.raises(TempyralTypeError):
            PlainYearMonth.from_value(202410)


class TestPlainYearMonthArithmetic:
    """Tests for add, subtract, until and since."""

    def test_add_months(self) -> None:
        assert str(PlainYearMonth(2024, 2).add(Duration(months=11))) == "2025-01"

    def test_subtract_across_year(self) -> None:
        assert PlainYearMonth(2024, 1).subtract("P1M") == PlainYearMonth(2023, 12)

    def test_add_years(self) -> None:
        assert PlainYearMonth(2024, 2).add(Duration(years=1)) == PlainYearMonth(2025, 2)

    def test_add_days_rejected(self) -> None:
        with pytest.raises(RangeError):
            PlainYearMonth(2024, 2).add(Duration(days=1))

    def test_add_whole_day_of_hours_rejected(self) -> None:
        with pytest.raises(RangeError):
            PlainYearMonth(2024, 2).add(Duration(hours=24))

    def test_until(self) -> None:
        assert PlainYearMonth(2020, 1).until(PlainYearMonth(2021, 3)) == Duration(years=1, months=2)

    def test_until_in_months(self) -> None:
        d = PlainYearMonth(2020, 1).until("2021-03", largest_unit="month")
        assert d == Duration(months=14)

    def test_since(self) -> None:
        d = PlainYearMonth(2020, 1).since(PlainYearMonth(2021, 3))
        assert d == Duration(years=-1, months=-2)

    def test_until_same(self) -> None:
        assert PlainYearMonth(2020, 1).until(PlainYearMonth(2020, 1)).blank

    def test_until_rounded_to_year(self) -> None:
        d = PlainYearMonth(2020, 1).until(
            PlainYearMonth(2020, 8), smallest_unit="year", rounding_mode="halfExpand"
        )
        assert d == Duration(years=1)

    def test_until_rejects_days(self) -> None:
        with pytest.raises(RangeError):
            PlainYearMonth(2020, 1).until(PlainYearMonth(2020, 8), smallest_unit="day")


class TestPlainYearMonthDerived:
    """Tests for with_fields, to_plain_date and formatting."""

    def test_with_fields(self) -> None:
        assert PlainYearMonth(2024, 2).with_fields(month=12) == PlainYearMonth(2024, 12)

    def test_with_fields_year(self) -> None:
        assert PlainYearMonth(2024, 2).with_fields(year=2020) == PlainYearMonth(2020, 2)

    def test_with_fields_unknown(self) -> None:
        with pytest.raises(TempyralTypeError):
            PlainYearMonth(2024, 2).with_fields(day=3)

    def test_to_plain_date_constrains(self) -> None:
        assert PlainYearMonth(2023, 2).to_plain_date(30) == PlainDate(2023, 2, 28)

    def test_to_string(self) -> None:
        assert str(PlainYearMonth(2024, 10)) == "2024-10"
        assert PlainYearMonth(-1, 10).to_string() == "-000001-10"

    def test_to_string_with_calendar(self) -> None:
        text = PlainYearMonth(2024, 10).to_string(calendar_name="always")
        assert text == "2024-10-01[u-ca=iso8601]"

    def test_repr(self) -> None:
        assert repr(PlainYearMonth(2024, 10)) == "PlainYearMonth(2024, 10)"


class TestPlainYearMonthComparison:
    """Tests for ordering and equality."""

    def test_ordering(self) -> None:
        assert PlainYearMonth(2024, 1) < PlainYearMonth(2024, 2)
        assert PlainYearMonth.compare("2024-03", PlainYearMonth(2024, 2)) == 1

    def test_equals_accepts_strings(self) -> None:
        assert PlainYearMonth(2024, 10).equals("2024-10")

    def test_calendar_affects_equality(self) -> None:
        assert PlainYearMonth(2024, 10) != PlainYearMonth(2024, 10, "gregory")
