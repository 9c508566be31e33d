"""Configuration for the metro departure board."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from metro_board.domain.entities import StopGrouping
from metro_board.infrastructure.ovapi_client import DEFAULT_TIMEOUT, resolve_api_base

DEFAULT_GROUPINGS: tuple[StopGrouping, ...] = (
    StopGrouping(
        codes=(
            "30009567",  # Spaklerweg Centraal (53/54)
            "30009518",  # Spaklerweg Centraal (51)
        ),
        label="Richting Centraal",
        element_id="rows-30009567",
    ),
    StopGrouping(
        codes=(
            "30009566",  # Spaklerweg Gein/Gaasperplas (53/54)
            "30009519",  # Spaklerweg Gein (51)
        ),
        label="Richting Gein / Gaasperplas",
        element_id="rows-30009566",
    ),
)

LINE_COLORS: dict[str, str] = {
    "51": "#F2922C",
    "53": "#E20224",
    "54": "#FFEE00",
}
DEFAULT_LINE_COLOR = "#DCDFE1"
WHITE_TEXT_LINE = "53"

LAST_UPDATED_ELEMENT_ID = "last-updated"
REFRESH_STATUS_ELEMENT_ID = "refresh-status"


@dataclass(frozen=True)
class BoardConfig:
    """Everything the board needs at runtime; built once at startup."""

    api_base: str
    groupings: tuple[StopGrouping, ...] = DEFAULT_GROUPINGS
    line_colors: Mapping[str, str] = field(default_factory=lambda: dict(LINE_COLORS))
    default_line_color: str = DEFAULT_LINE_COLOR
    white_text_line: str = WHITE_TEXT_LINE
    timezone: ZoneInfo = field(default_factory=lambda: ZoneInfo("Europe/Amsterdam"))
    refresh_interval_seconds: int = 60
    min_refresh_delay_seconds: int = 5
    max_rows: int = 8
    request_timeout_seconds: float = DEFAULT_TIMEOUT
    last_updated_element_id: str = LAST_UPDATED_ELEMENT_ID
    refresh_status_element_id: str = REFRESH_STATUS_ELEMENT_ID

    def __post_init__(self) -> None:
        # next_delay divides by the interval in whole milliseconds
        interval = self.refresh_interval_seconds
        if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
            raise ValueError(f"refresh_interval_seconds must be an integer >= 1, got {interval!r}")


def _positive_number(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(key)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{key} must be positive, got {raw!r}")
    return value


def _positive_int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be a whole number of seconds, got {raw!r}") from exc
    if value < 1:
        raise ValueError(f"{key} must be at least 1, got {raw!r}")
    return value


def load_config(environ: Mapping[str, str] | None = None) -> BoardConfig:
    """Build a BoardConfig from environment variables.

    The API base is resolved here, once, from BOARD_URL (its ``api`` query
    parameter and scheme) and the OVAPI_BASE override.
    """
    env = os.environ if environ is None else environ

    host = env.get("HOST", "0.0.0.0")
    port = env.get("PORT", "3001")
    page_url = env.get("BOARD_URL") or f"http://{host}:{port}/"
    api_base = resolve_api_base(page_url, env.get("OVAPI_BASE"))

    tz_name = env.get("BOARD_TIMEZONE", "Europe/Amsterdam")
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown BOARD_TIMEZONE: {tz_name!r}") from exc

    return BoardConfig(
        api_base=api_base,
        timezone=tz,
        refresh_interval_seconds=_positive_int(env, "REFRESH_INTERVAL_SECONDS", 60),
        request_timeout_seconds=_positive_number(env, "REQUEST_TIMEOUT_SECONDS", DEFAULT_TIMEOUT),
    )
