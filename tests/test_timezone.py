"""Tests for TimeZone, offset strings, zone providers and the resolver."""

from __future__ import annotations

import logging

import pytest

from conftest import FALL_BACK, SPRING_FORWARD, FakeZoneProvider
from tempyral._internal.calendar import IsoDate, utc_epoch_nanoseconds
from tempyral._internal.options import Disambiguation, OffsetOption, TransitionDirection
from tempyral.errors import ParseError, RangeError, TempyralTypeError
from tempyral.zones import TimeZone, ZoneInfoProvider, default_provider
from tempyral.zones.resolver import (
    OffsetBehaviour,
    disambiguate_possible_epoch_nanoseconds,
    get_start_of_day,
    interpret_iso_date_time_offset,
)
from tempyral.zones.timezone import (
    format_offset_nanoseconds,
    format_offset_rounded,
    offset_has_sub_minute_precision,
    parse_offset_string,
    round_offset_to_minutes,
)

SECOND = 10**9
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE


class TestOffsetStrings:
    """Tests for parsing and formatting UTC offsets."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("+05:30", 5 * HOUR + 30 * MINUTE),
            ("-0800", -8 * HOUR),
            ("+05", 5 * HOUR),
            ("-04:56:02", -(4 * HOUR + 56 * MINUTE + 2 * SECOND)),
            ("+01:00:00.5", HOUR + SECOND // 2),
            ("−05:00", -5 * HOUR),
        ],
    )
    def test_parse(self, text: str, expected: int) -> None:
        assert parse_offset_string(text) == expected

    @pytest.mark.parametrize("text", ["+24:00", "+5:30", "05:30", "+05:60", "+05:30:", "Z"])
    def test_parse_invalid(self, text: str) -> None:
        with pytest.raises(ParseError):
            parse_offset_string(text)

    def test_sub_minute_precision(self) -> None:
        assert offset_has_sub_minute_precision("+01:00:00")
        assert not offset_has_sub_minute_precision("+01:00")

    def test_format(self) -> None:
        assert format_offset_nanoseconds(-7 * HOUR) == "-07:00"
        assert format_offset_nanoseconds(0) == "+00:00"
        assert format_offset_nanoseconds(-17_762 * SECOND) == "-04:56:02"
        assert format_offset_nanoseconds(HOUR + SECOND // 2) == "+01:00:00.5"

    def test_round_to_minutes(self) -> None:
        """Ties round away from zero."""
        assert round_offset_to_minutes(-17_762 * SECOND) == -296 * MINUTE
        assert round_offset_to_minutes(30 * SECOND) == MINUTE
        assert round_offset_to_minutes(-30 * SECOND) == -MINUTE
        assert format_offset_rounded(-17_762 * SECOND) == "-04:56"


class TestTimeZone:
    """Tests for the TimeZone value."""

    def test_named_zone_canonicalized(self) -> None:
        assert TimeZone("america/los_angeles").id == "America/Los_Angeles"
        assert TimeZone("utc").id == "UTC"

    def test_offset_zone(self) -> None:
        tz = TimeZone("+0530")
        assert tz.id == "+05:30"
        assert tz.is_fixed_offset
        assert tz.get_offset_nanoseconds_for(0) == 5 * HOUR + 30 * MINUTE

    def test_offset_zone_seconds_rejected(self) -> None:
        with pytest.raises(RangeError):
            TimeZone("+05:30:00")

    def test_offset_zone_out_of_range(self) -> None:
        with pytest.raises(RangeError):
            TimeZone("+24:00")

    def test_unknown_zone(self) -> None:
        with pytest.raises(RangeError):
            TimeZone("Europe/Atlantis")

    def test_non_string(self) -> None:
        with pytest.raises(TempyralTypeError):
            TimeZone(5)

    def test_utc(self) -> None:
        assert TimeZone.utc() == TimeZone("UTC")
        assert not TimeZone.utc().is_fixed_offset

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("2020-01-01T00:00[Europe/Paris]", "Europe/Paris"),
            ("2020-01-01T00:00Z", "UTC"),
            ("2020-01-01T00:00+05:30", "+05:30"),
        ],
    )
    def test_from_value_date_time_string(self, text: str, expected: str) -> None:
        assert TimeZone.from_value(text).id == expected

    def test_from_value_without_zone(self) -> None:
        with pytest.raises(RangeError):
            TimeZone.from_value("2020-01-01T00:00")

    def test_from_value_sub_minute_offset(self) -> None:
        with pytest.raises(ParseError):
            TimeZone.from_value("2020-01-01T00:00+05:30:15")

    def test_equality(self) -> None:
        assert TimeZone("Europe/Paris") == TimeZone("europe/paris")
        assert TimeZone("Europe/Paris").equals("Europe/Paris")
        assert TimeZone("UTC") != TimeZone("+00:00")
        assert len({TimeZone("UTC"), TimeZone("utc")}) == 1

    def test_repr_and_str(self) -> None:
        assert repr(TimeZone("UTC")) == "TimeZone('UTC')"
        assert str(TimeZone("-0800")) == "-08:00"

    def test_wall_clock_for_instant(self, la: TimeZone) -> None:
        date, time_nanos = la.get_iso_date_time_for(0)
        assert date == IsoDate(1969, 12, 31)
        assert time_nanos == 16 * HOUR
        assert la.get_offset_string_for(0) == "-08:00"

    def test_possible_instants_in_gap(self, la: TimeZone) -> None:
        assert la.get_possible_epoch_nanoseconds(IsoDate(2020, 3, 8), 2 * HOUR + 30 * MINUTE) == ()

    def test_possible_instants_in_overlap(self, la: TimeZone) -> None:
        possible = la.get_possible_epoch_nanoseconds(IsoDate(2020, 11, 1), HOUR + 30 * MINUTE)
        assert len(possible) == 2
        assert possible[1] - possible[0] == HOUR

    def test_epoch_nanoseconds_for_reject(self, la: TimeZone) -> None:
        with pytest.raises(RangeError):
            la.get_epoch_nanoseconds_for(IsoDate(2020, 11, 1), HOUR, "reject")

    def test_transition_direction_validated(self, la: TimeZone) -> None:
        with pytest.raises(TempyralTypeError):
            la.get_time_zone_transition(0, "sideways")


# Four days at +01:00 in an otherwise +00:00 year, shorter than the scan step.
_EXCURSION_START = utc_epoch_nanoseconds(IsoDate(2020, 1, 6), 0) // SECOND
_EXCURSION_END = utc_epoch_nanoseconds(IsoDate(2020, 1, 10), 0) // SECOND


class ShortExcursionProvider(ZoneInfoProvider):
    """ZoneInfoProvider whose zones all leave and regain UTC within days."""

    @staticmethod
    def _offset_seconds(zone: object, epoch_seconds: int) -> int:
        return 3600 if _EXCURSION_START <= epoch_seconds < _EXCURSION_END else 0


class TestZoneInfoProvider:
    """Tests for the zoneinfo-backed provider."""

    def test_default_provider_is_shared(self) -> None:
        assert default_provider() is default_provider()
        assert isinstance(default_provider(), ZoneInfoProvider)

    def test_canonicalize(self) -> None:
        provider = ZoneInfoProvider()
        assert provider.canonicalize("ASIA/TOKYO") == "Asia/Tokyo"
        with pytest.raises(RangeError):
            provider.canonicalize("Nowhere/Special")

    def test_candidate_offsets(self) -> None:
        provider = ZoneInfoProvider()
        zone = "America/Los_Angeles"
        assert provider.candidate_offsets(zone, IsoDate(2020, 11, 1), HOUR + 30 * MINUTE) == (
            -7 * 3600,
            -8 * 3600,
        )
        assert provider.candidate_offsets(zone, IsoDate(2020, 3, 8), 2 * HOUR + 30 * MINUTE) == ()
        assert provider.candidate_offsets(zone, IsoDate(2020, 7, 1), 0) == (-7 * 3600,)

    def test_far_future_repeats_rules(self) -> None:
        """Years beyond datetime's range follow the recurring rules."""
        provider = ZoneInfoProvider()
        summer = utc_epoch_nanoseconds(IsoDate(200_000, 7, 1), 0)
        winter = utc_epoch_nanoseconds(IsoDate(200_000, 1, 1), 0)
        assert provider.offset_at("America/Los_Angeles", summer) == -7 * 3600
        assert provider.offset_at("America/Los_Angeles", winter) == -8 * 3600

    def test_far_past_uses_earliest_offset(self) -> None:
        provider = ZoneInfoProvider()
        ancient = utc_epoch_nanoseconds(IsoDate(-200_000, 1, 1), 0)
        early = utc_epoch_nanoseconds(IsoDate(1800, 1, 1), 0)
        assert provider.offset_at("America/Los_Angeles", ancient) == provider.offset_at(
            "America/Los_Angeles", early
        )

    def test_next_transition(self) -> None:
        provider = ZoneInfoProvider()
        start = utc_epoch_nanoseconds(IsoDate(2020, 6, 1), 0)
        expected = utc_epoch_nanoseconds(IsoDate(2020, 11, 1), 9 * HOUR)
        assert provider.next_transition("America/Los_Angeles", start, TransitionDirection.NEXT) == expected

    def test_previous_transition_is_strict(self) -> None:
        provider = ZoneInfoProvider()
        at = utc_epoch_nanoseconds(IsoDate(2020, 11, 1), 9 * HOUR)
        previous = provider.next_transition("America/Los_Angeles", at, TransitionDirection.PREVIOUS)
        assert previous == utc_epoch_nanoseconds(IsoDate(2020, 3, 8), 10 * HOUR)

    def test_short_excursion_found_forward(self) -> None:
        provider = ShortExcursionProvider()
        start = utc_epoch_nanoseconds(IsoDate(2020, 1, 1), 0)
        found = provider.next_transition("Europe/London", start, TransitionDirection.NEXT)
        assert found == _EXCURSION_START * SECOND

    def test_short_excursion_found_backward(self) -> None:
        provider = ShortExcursionProvider()
        start = utc_epoch_nanoseconds(IsoDate(2020, 1, 15), 0)
        found = provider.next_transition("Europe/London", start, TransitionDirection.PREVIOUS)
        assert found == _EXCURSION_END * SECOND

    def test_utc_has_no_transitions(self) -> None:
        provider = ZoneInfoProvider()
        assert provider.next_transition("UTC", 0, TransitionDirection.NEXT) is None

    def test_no_transition_before_records(self) -> None:
        provider = ZoneInfoProvider()
        early = utc_epoch_nanoseconds(IsoDate(1800, 1, 1), 0)
        assert provider.next_transition("America/Los_Angeles", early, TransitionDirection.PREVIOUS) is None


class TestResolver:
    """Tests for the resolver against the Test/Spring zone."""

    GAP_DATE = IsoDate(1970, 1, 11)
    OVERLAP_DATE = IsoDate(1970, 1, 21)
    HALF_PAST = 30 * MINUTE

    def test_fake_zone_through_time_zone(self, spring_zone: TimeZone, fake_provider: FakeZoneProvider) -> None:
        assert spring_zone.provider is fake_provider
        assert spring_zone.get_offset_string_for(SPRING_FORWARD * SECOND) == "+01:00"
        assert spring_zone.get_offset_string_for(FALL_BACK * SECOND) == "+00:00"

    def test_overlap_choices(self, spring_zone: TimeZone) -> None:
        possible = spring_zone.get_possible_epoch_nanoseconds(self.OVERLAP_DATE, self.HALF_PAST)
        assert possible == (FALL_BACK * SECOND - self.HALF_PAST, FALL_BACK * SECOND + self.HALF_PAST)
        for option, expected in [
            (Disambiguation.COMPATIBLE, possible[1]),
            (Disambiguation.EARLIER, possible[0]),
            (Disambiguation.LATER, possible[1]),
        ]:
            assert (
                disambiguate_possible_epoch_nanoseconds(
                    possible, spring_zone, self.OVERLAP_DATE, self.HALF_PAST, option
                )
                == expected
            )

    def test_gap_choices(self, spring_zone: TimeZone) -> None:
        resolve = spring_zone.get_epoch_nanoseconds_for
        later = SPRING_FORWARD * SECOND + self.HALF_PAST
        assert resolve(self.GAP_DATE, self.HALF_PAST, Disambiguation.COMPATIBLE) == later
        assert resolve(self.GAP_DATE, self.HALF_PAST, Disambiguation.LATER) == later
        assert (
            resolve(self.GAP_DATE, self.HALF_PAST, Disambiguation.EARLIER)
            == SPRING_FORWARD * SECOND - self.HALF_PAST
        )
        with pytest.raises(RangeError):
            resolve(self.GAP_DATE, self.HALF_PAST, Disambiguation.REJECT)

    def test_ambiguity_is_logged(
        self, spring_zone: TimeZone, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="tempyral.zones.resolver"):
            spring_zone.get_epoch_nanoseconds_for(self.OVERLAP_DATE, self.HALF_PAST)
        assert "ambiguous" in caplog.text

    def test_start_of_day(self, spring_zone: TimeZone) -> None:
        assert get_start_of_day(spring_zone, self.GAP_DATE) == SPRING_FORWARD * SECOND
        assert get_start_of_day(spring_zone, self.OVERLAP_DATE) == FALL_BACK * SECOND - HOUR
        assert get_start_of_day(spring_zone, IsoDate(1970, 1, 1)) == 0

    def test_offset_prefer_picks_matching_candidate(self, spring_zone: TimeZone) -> None:
        result = interpret_iso_date_time_offset(
            self.OVERLAP_DATE, self.HALF_PAST, OffsetBehaviour.OPTION, 0, spring_zone,
            Disambiguation.COMPATIBLE, OffsetOption.PREFER,
        )
        assert result == FALL_BACK * SECOND + self.HALF_PAST

    def test_offset_reject_mismatch(self, spring_zone: TimeZone) -> None:
        with pytest.raises(RangeError):
            interpret_iso_date_time_offset(
                IsoDate(1970, 1, 5), 0, OffsetBehaviour.OPTION, HOUR, spring_zone,
                Disambiguation.COMPATIBLE, OffsetOption.REJECT,
            )

    def test_offset_use(self, spring_zone: TimeZone) -> None:
        result = interpret_iso_date_time_offset(
            IsoDate(1970, 1, 5), 0, OffsetBehaviour.OPTION, HOUR, spring_zone,
            Disambiguation.COMPATIBLE, OffsetOption.USE,
        )
        assert result == 4 * 24 * HOUR - HOUR

    def test_exact_ignores_zone(self, spring_zone: TimeZone) -> None:
        result = interpret_iso_date_time_offset(
            self.GAP_DATE, self.HALF_PAST, OffsetBehaviour.EXACT, 0, spring_zone,
            Disambiguation.REJECT, OffsetOption.REJECT,
        )
        assert result == SPRING_FORWARD * SECOND + self.HALF_PAST

    def test_wall_clock(self, spring_zone: TimeZone) -> None:
        result = interpret_iso_date_time_offset(
            self.GAP_DATE, None, OffsetBehaviour.WALL, 0, spring_zone,
            Disambiguation.COMPATIBLE, OffsetOption.REJECT,
        )
        assert result == SPRING_FORWARD * SECOND

