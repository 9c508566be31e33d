from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

AMSTERDAM_TZ: ZoneInfo = ZoneInfo("Europe/Amsterdam")


def parse_ovapi_datetime(s: object, tz: ZoneInfo = AMSTERDAM_TZ) -> datetime:
    """Parse an ExpectedDepartureTime string from OVapi responses.

    Handles formats:
    - "2026-10-19T14:30:00"         (naive, OVapi's usual form, assumed local time)
    - "2026-10-19T14:30:00+02:00"   (offset-aware)
    - "2026-10-19T12:30:00Z"        (UTC)

    Always returns a timezone-aware datetime in tz.
    Raises ValueError on empty, non-string or unparseable input.
    """
    if s is None:
        raise ValueError("Empty datetime string")
    if not isinstance(s, str):
        raise ValueError(f"Expected a datetime string, got {type(s).__name__}")
    if not s.strip():
        raise ValueError("Empty datetime string")

    s = s.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        raise ValueError(f"Cannot parse datetime string: {s!r}")

    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)
