"""Shared pytest fixtures for the departure board test suite."""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta

import pytest

from metro_board.config import BoardConfig
from metro_board.domain.entities import StopGrouping
from metro_board.infrastructure.time_utils import AMSTERDAM_TZ

TEST_API_BASE = "http://ovapi.test"


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current = self.current + timedelta(seconds=seconds)


class FakeTimer:
    """Timer that records arm/disarm calls; tests fire ticks by hand."""

    def __init__(self, events: list[str] | None = None) -> None:
        self.handler: Callable[[], Awaitable[None]] | None = None
        self.delays: list[float] = []
        self.armed = False
        self.events = events if events is not None else []
        self.idle_waits = 0

    def on_tick(self, handler: Callable[[], Awaitable[None]]) -> None:
        self.handler = handler

    def start(self, delay: float) -> None:
        self.delays.append(delay)
        self.armed = True
        self.events.append("arm")

    def stop(self) -> None:
        self.armed = False

    async def wait_idle(self) -> None:
        self.idle_waits += 1
        self.events.append("wait_idle")

    async def fire(self) -> None:
        assert self.handler is not None
        self.armed = False
        await self.handler()


def make_pass_raw(
    line: str = "53",
    destination: str = "Centraal Station",
    expected: str = "2026-10-19T14:30:00",
    transport_type: str = "METRO",
) -> dict:  # type: ignore[type-arg]
    """A raw OVapi pass record, trimmed to the fields the board reads plus some noise."""
    return {
        "TransportType": transport_type,
        "LinePublicNumber": line,
        "DestinationName50": destination,
        "ExpectedDepartureTime": expected,
        "TargetDepartureTime": expected,
        "DataOwnerCode": "GVB",
        "TripStopStatus": "DRIVING",
    }


def make_stop_payload(code: str, passes: dict[str, dict]) -> dict:  # type: ignore[type-arg]
    """Wrap passes the way /tpc/{code} returns them."""
    return {
        code: {
            "Stop": {"TimingPointCode": code, "TimingPointName": "Spaklerweg"},
            "Passes": passes,
            "GeneralMessages": {},
        }
    }


@pytest.fixture
def frozen_now() -> datetime:
    """2026-10-19 14:00:00 in Europe/Amsterdam."""
    return datetime(2026, 10, 19, 14, 0, 0, tzinfo=AMSTERDAM_TZ)


@pytest.fixture
def fake_clock(frozen_now: datetime) -> FakeClock:
    return FakeClock(frozen_now)


@pytest.fixture
def fake_timer() -> FakeTimer:
    return FakeTimer()


@pytest.fixture
def groupings() -> tuple[StopGrouping, ...]:
    return (
        StopGrouping(codes=("30009567", "30009518"), label="Richting Centraal", element_id="rows-30009567"),
        StopGrouping(
            codes=("30009566", "30009519"),
            label="Richting Gein / Gaasperplas",
            element_id="rows-30009566",
        ),
    )


@pytest.fixture
def board_config(groupings: tuple[StopGrouping, ...]) -> BoardConfig:
    return BoardConfig(api_base=TEST_API_BASE, groupings=groupings, timezone=AMSTERDAM_TZ)
