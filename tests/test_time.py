"""Tests for the PlainTime class."""

from __future__ import annotations

import pytest

from tempyral import Duration, PlainDateTime, PlainTime
from tempyral.errors import ParseError, RangeError, TempyralTypeError


class TestPlainTimeConstruction:
    """Tests for PlainTime construction."""

    def test_midnight_default(self) -> None:
        """PlainTime() is midnight."""
        t = PlainTime()
        assert (t.hour, t.minute, t.second) == (0, 0, 0)
        assert t.nanosecond_of_day == 0

    def test_all_fields(self) -> None:
        t = PlainTime(14, 30, 45, 123, 456, 789)
        assert t.hour == 14
        assert t.minute == 30
        assert t.second == 45
        assert t.millisecond == 123
        assert t.microsecond == 456
        assert t.nanosecond == 789

    @pytest.mark.parametrize(
        "fields",
        [(24,), (0, 60), (0, 0, 60), (0, 0, 0, 1000), (-1,)],
    )
    def test_out_of_range_rejected(self, fields: tuple[int, ...]) -> None:
        """The constructor never constrains."""
        with pytest.raises(RangeError):
            PlainTime(*fields)

    def test_from_fields_constrains(self) -> None:
        """from_fields constrains by default."""
        assert PlainTime.from_fields({"hour": 25}) == PlainTime(23)

    def test_from_fields_reject(self) -> None:
        with pytest.raises(RangeError):
            PlainTime.from_fields({"hour": 25}, overflow="reject")

    def test_leap_second_constrains(self) -> None:
        """Second 60 becomes 59."""
        assert PlainTime.from_fields({"hour": 23, "minute": 59, "second": 60}).second == 59

    def test_from_fields_needs_a_field(self) -> None:
        with pytest.raises(TempyralTypeError):
            PlainTime.from_fields({})


class TestPlainTimeParsing:
    """Tests for PlainTime.from_string()."""

    def test_extended(self) -> None:
        assert PlainTime.from_string("12:30:45.5") == PlainTime(12, 30, 45, 500)

    def test_basic_with_designator(self) -> None:
        assert PlainTime.from_string("T1230") == PlainTime(12, 30)

    def test_from_date_time_string(self) -> None:
        """The time of a date-time string is used."""
        assert PlainTime.from_string("2020-01-01T08:15") == PlainTime(8, 15)

    def test_z_rejected(self) -> None:
        with pytest.raises(ParseError):
            PlainTime.from_string("12:00Z")

    def test_ambiguous_needs_designator(self) -> None:
        """'1214' could be a month-day."""
        with pytest.raises(ParseError):
            PlainTime.from_string("1214")

    def test_too_many_fraction_digits(self) -> None:
        with pytest.raises(ParseError):
            PlainTime.from_string("12:00:00.1234567891")


class TestPlainTimeArithmetic:
    """Tests for add, subtract, until and since."""

    def test_add_wraps(self) -> None:
        assert PlainTime(14, 30).add(Duration(hours=10)) == PlainTime(0, 30)

    def test_subtract_wraps(self) -> None:
        assert PlainTime(0, 30).subtract(Duration(hours=1)) == PlainTime(23, 30)

    def test_add_ignores_date_units(self) -> None:
        """Days are ignored by plain time arithmetic."""
        assert PlainTime(12).add(Duration(days=3)) == PlainTime(12)

    def test_until(self) -> None:
        assert PlainTime(9).until(PlainTime(17, 30)) == Duration(hours=8, minutes=30)

    def test_since_is_negated(self) -> None:
        assert PlainTime(9).since(PlainTime(17, 30)) == Duration(hours=-8, minutes=-30)

    def test_until_largest_minute(self) -> None:
        d = PlainTime(9).until(PlainTime(10, 30), largest_unit="minute")
        assert d == Duration(minutes=90)

    def test_until_rounding(self) -> None:
        d = PlainTime(9).until(PlainTime(9, 40), smallest_unit="hour", rounding_mode="halfExpand")
        assert d == Duration(hours=1)

    def test_until_rejects_date_units(self) -> None:
        with pytest.raises(RangeError):
            PlainTime(9).until(PlainTime(10), largest_unit="day")

    def test_until_rejects_unknown_option(self) -> None:
        with pytest.raises(TempyralTypeError):
            PlainTime(9).until(PlainTime(10), largets_unit="hour")


class TestPlainTimeRound:
    """Tests for PlainTime.round()."""

    def test_round_up_wraps(self) -> None:
        assert PlainTime(23, 59, 31).round("minute") == PlainTime(0, 0)

    def test_round_increment(self) -> None:
        assert PlainTime(10, 7).round("minute", rounding_increment=15) == PlainTime(10)
        assert PlainTime(10, 8).round("minute", rounding_increment=15) == PlainTime(10, 15)

    def test_round_requires_unit(self) -> None:
        with pytest.raises(TempyralTypeError):
            PlainTime(10).round()

    def test_round_rejects_day(self) -> None:
        with pytest.raises(RangeError):
            PlainTime(10).round("day")

    def test_increment_may_not_equal_maximum(self) -> None:
        with pytest.raises(RangeError):
            PlainTime(10).round("minute", rounding_increment=60)


class TestPlainTimeFormatting:
    """Tests for to_string()."""

    def test_auto_digits(self) -> None:
        assert str(PlainTime(14, 30, 45, 500)) == "14:30:45.5"

    def test_whole_seconds(self) -> None:
        assert str(PlainTime(8, 5)) == "08:05:00"

    def test_smallest_unit_minute(self) -> None:
        assert PlainTime(8, 5, 9).to_string(smallest_unit="minute") == "08:05"

    def test_fixed_digits(self) -> None:
        assert PlainTime(8, 5, 9, 120).to_string(fractional_second_digits=2) == "08:05:09.12"

    def test_digits_out_of_range(self) -> None:
        with pytest.raises(RangeError):
            PlainTime(8).to_string(fractional_second_digits=10)

    def test_repr(self) -> None:
        assert repr(PlainTime(14, 30)) == "PlainTime(14, 30, 0)"
        assert repr(PlainTime(14, 30, 0, 5)) == "PlainTime(14, 30, 0, 5, 0, 0)"


class TestPlainTimeComparison:
    """Tests for ordering and equality."""

    def test_ordering(self) -> None:
        assert PlainTime(9) < PlainTime(10)
        assert PlainTime(10) >= PlainTime(10)
        assert PlainTime.compare(PlainTime(11), PlainTime(10)) == 1

    def test_equals_accepts_strings(self) -> None:
        assert PlainTime(9).equals("09:00")

    def test_foreign_type_not_equal(self) -> None:
        assert PlainTime(9) != "09:00"
        with pytest.raises(TypeError):
            PlainTime(9) < 9

    def test_from_value_plain_date_time(self) -> None:
        assert PlainTime.from_value(PlainDateTime(2020, 1, 1, 7)) == PlainTime(7)
