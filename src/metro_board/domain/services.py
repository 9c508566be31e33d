from __future__ import annotations

import math
import re
from collections.abc import Iterable
from datetime import datetime, tzinfo

from metro_board.domain.entities import Departure

_WHITESPACE_RUN = re.compile(r"\s+")

# Departures further away than this are shown as a wall-clock time instead.
RELATIVE_MINUTES_LIMIT = 20


def normalize_destination(text: str | None) -> str:
    """Collapse runs of whitespace to a single space and trim both ends.

    None and the empty string both yield "".
    """
    if not text:
        return ""
    return _WHITESPACE_RUN.sub(" ", text).strip()


def format_clock(dt: datetime, tz: tzinfo) -> str:
    """Return dt as zero-padded HH:MM in the given display timezone."""
    return dt.astimezone(tz).strftime("%H:%M")


def minutes_until(target: datetime, now: datetime) -> int:
    """Return whole minutes from now until target, rounded half-up, never negative."""
    diff_seconds = max(0.0, (target - now).total_seconds())
    return math.floor(diff_seconds / 60 + 0.5)


def format_relative_time(target: datetime, now: datetime, tz: tzinfo) -> str:
    """Format a departure time for the board.

    "Now" when due, "N min" below RELATIVE_MINUTES_LIMIT minutes,
    otherwise the absolute HH:MM in the display timezone.
    """
    minutes = minutes_until(target, now)
    if minutes <= 0:
        return "Now"
    if minutes == 1:
        return "1 min"
    if minutes < RELATIVE_MINUTES_LIMIT:
        return f"{minutes} min"
    return format_clock(target, tz)


def sort_by_departure(departures: Iterable[Departure]) -> list[Departure]:
    """Return departures ordered by departure_time; equal times keep their order."""
    return sorted(departures, key=lambda d: d.departure_time)
