from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class StopGrouping:
    """A set of stop codes whose departures are merged into one rendered table."""

    codes: tuple[str, ...]
    label: str  # Heading shown above the table, e.g. "Richting Centraal"
    element_id: str  # Id of the table element the rows are written into

    def __post_init__(self) -> None:
        if not self.codes:
            raise ValueError(f"Stop grouping {self.label!r} needs at least one stop code")


@dataclass(frozen=True)
class Departure:
    """A single metro departure, normalized from an OVapi pass."""

    line: str  # LinePublicNumber, e.g. "53"
    destination: str  # Whitespace-collapsed DestinationName50
    departure_time: datetime  # ExpectedDepartureTime, timezone-aware


@dataclass
class RefreshStatus:
    """Outcome of the most recent refresh cycle, shown beside the board."""

    last_updated: datetime | None = None
    error_message: str = ""

    def mark_success(self, when: datetime) -> None:
        self.last_updated = when
        self.error_message = ""

    def mark_failure(self, message: str) -> None:
        self.error_message = message
