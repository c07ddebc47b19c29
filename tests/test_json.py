"""Tests for JSON serialization and deserialization."""

from __future__ import annotations

import json

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
from tempyral.convert import from_json, to_json
from tempyral.errors import ParseError, TempyralTypeError


class TestToJson:
    """Tests for to_json()."""

    def test_instant(self) -> None:
        assert to_json(Instant(0)) == {"_type": "Instant", "value": "1970-01-01T00:00:00Z"}

    def test_plain_date(self) -> None:
        assert to_json(PlainDate(2024, 1, 15)) == {"_type": "PlainDate", "value": "2024-01-15"}

    def test_plain_date_time_with_nanoseconds(self) -> None:
        result = to_json(PlainDateTime(2024, 1, 15, 14, 30, 45, 123, 456, 789))
        assert result["_type"] == "PlainDateTime"
        assert result["value"] == "2024-01-15T14:30:45.123456789"

    def test_non_iso_calendar_kept_in_annotation(self) -> None:
        result = to_json(PlainDate(2024, 1, 15, calendar="buddhist"))
        assert result["value"] == "2024-01-15[u-ca=buddhist]"

    def test_zoned(self) -> None:
        result = to_json(ZonedDateTime(0, "+05:30"))
        assert result == {
            "_type": "ZonedDateTime",
            "value": "1970-01-01T05:30:00+05:30[+05:30]",
        }

    def test_duration(self) -> None:
        assert to_json(Duration(hours=-1, minutes=-30))["value"] == "-PT1H30M"

    def test_result_is_json_serializable(self) -> None:
        text = json.dumps(to_json(PlainTime(14, 30)))
        assert json.loads(text) == {"_type": "PlainTime", "value": "14:30:00"}

    def test_not_temporal(self) -> None:
        with pytest.raises(TempyralTypeError):
            to_json("2024-01-15")


class TestFromJson:
    """Tests for from_json()."""

    @pytest.mark.parametrize(
        "value",
        [
            Instant(1_700_000_000_123_456_789),
            ZonedDateTime(1_700_000_000 * 10**9, "-08:00"),
            PlainDate(2024, 2, 29),
            PlainTime(23, 59, 59, 999, 999, 999),
            PlainDateTime(-1, 1, 1, 0, 0),
            PlainYearMonth(2024, 10),
            PlainMonthDay(12, 25),
            Duration(years=1, months=2, days=3, hours=4, nanoseconds=5),
        ],
    )
    def test_through_json_text(self, value: object) -> None:
        data = json.loads(json.dumps(to_json(value)))
        assert from_json(data) == value

    def test_calendar_is_restored(self) -> None:
        date = from_json({"_type": "PlainDate", "value": "2024-01-15[u-ca=gregory]"})
        assert date.calendar_id == "gregory"

    def test_not_a_dict(self) -> None:
        with pytest.raises(TempyralTypeError):
            from_json(["PlainDate", "2024-01-15"])

    def test_missing_type(self) -> None:
        with pytest.raises(TempyralTypeError):
            from_json({"value": "2024-01-15"})

    def test_unknown_type(self) -> None:
        with pytest.raises(TempyralTypeError, match="unknown temporal type"):
            from_json({"_type": "Date", "value": "2024-01-15"})

    def test_missing_value(self) -> None:
        with pytest.raises(ParseError):
            from_json({"_type": "PlainDate"})

    def test_malformed_value(self) -> None:
        with pytest.raises(ParseError):
            from_json({"_type": "PlainDate", "value": "2024-13-45"})
