"""Pytest configuration and fixtures for Tempyral tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add the parent directory to sys.path so tempyral can be imported
# without needing to install the package
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from tempyral._internal.calendar import IsoDate, epoch_days_from_iso  # noqa: E402
from tempyral._internal.constants import NANOS_PER_SECOND, SECONDS_PER_DAY  # noqa: E402
from tempyral._internal.options import TransitionDirection  # noqa: E402
from tempyral.config import TempyralSettings  # noqa: E402
from tempyral.errors import RangeError  # noqa: E402
from tempyral.zones.provider import ZoneRuleProvider  # noqa: E402
from tempyral.zones.timezone import TimeZone  # noqa: E402

# Test/Spring: UTC until day 10, then +01:00 until day 20, then UTC again.
# Midnight of 1970-01-11 is skipped and 00:00-01:00 on 1970-01-21 repeats.
SPRING_FORWARD = 10 * SECONDS_PER_DAY
FALL_BACK = 20 * SECONDS_PER_DAY


class FakeZoneProvider(ZoneRuleProvider):
    """A single made-up zone with one gap and one overlap."""

    zone_id = "Test/Spring"
    transitions = ((SPRING_FORWARD, 3600), (FALL_BACK, 0))

    def canonicalize(self, zone_id: str) -> str:
        if zone_id.lower() != self.zone_id.lower():
            raise RangeError(f"unknown time zone: {zone_id!r}")
        return self.zone_id

    def offset_at(self, zone_id: str, epoch_ns: int) -> int:
        seconds = epoch_ns // NANOS_PER_SECOND
        offset = 0
        for at, after in self.transitions:
            if seconds >= at:
                offset = after
        return offset

    def candidate_offsets(
        self, zone_id: str, date: IsoDate, time_nanos: int
    ) -> tuple[int, ...]:
        local = epoch_days_from_iso(*date) * SECONDS_PER_DAY + time_nanos // NANOS_PER_SECOND
        return tuple(
            offset
            for offset in (3600, 0)
            if self.offset_at(zone_id, (local - offset) * NANOS_PER_SECOND) == offset
        )

    def next_transition(
        self, zone_id: str, epoch_ns: int, direction: TransitionDirection
    ) -> int | None:
        instants = [at * NANOS_PER_SECOND for at, _ in self.transitions]
        if direction is TransitionDirection.NEXT:
            later = [ns for ns in instants if ns > epoch_ns]
            return later[0] if later else None
        earlier = [ns for ns in instants if ns < epoch_ns]
        return earlier[-1] if earlier else None


@pytest.fixture
def fake_provider() -> FakeZoneProvider:
    return FakeZoneProvider()


@pytest.fixture
def spring_zone(fake_provider: FakeZoneProvider) -> TimeZone:
    """The Test/Spring zone backed by FakeZoneProvider."""
    return TimeZone("Test/Spring", provider=fake_provider)


@pytest.fixture
def la() -> TimeZone:
    return TimeZone("America/Los_Angeles")


@pytest.fixture
def settings() -> TempyralSettings:
    """Settings pinned to a zone independent of the host machine."""
    return TempyralSettings(time_zone="America/Los_Angeles")


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("TZ", "TEMPYRAL_TIME_ZONE", "TEMPYRAL_CALENDAR"):
        monkeypatch.delenv(name, raising=False)


__all__ = ["FakeZoneProvider", "SPRING_FORWARD", "FALL_BACK"]
