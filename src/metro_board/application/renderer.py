from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime

from metro_board.config import BoardConfig
from metro_board.domain.entities import Departure
from metro_board.domain.services import format_clock, format_relative_time
from metro_board.infrastructure.document import BoardDocument, Cell, Row

EVEN_ROW_BACKGROUND = "#f6f7f8"
ODD_ROW_BACKGROUND = "#e9ecef"
WHITE_TEXT = "#fff"
DARK_TEXT = "#0f1012"

PLACEHOLDER_BADGE = "—"
PLACEHOLDER_TEXT = "No departures available"

_BADGE_STYLE = "padding:8px 8px 8px 8px;width:55px;background:{bg};color:{fg};font-weight:800;font-size:18px;"
_PLACEHOLDER_BADGE_STYLE = (
    "padding:8px 10px;width:70px;background:{bg};color:{fg};font-weight:bold;font-size:18px;"
)
_DESTINATION_STYLE = "padding:8px 10px;font-size:19px;white-space:nowrap;overflow:hidden;text-overflow:ellipsis;"
_PLACEHOLDER_CELL_STYLE = "padding:8px 10px;font-size:19px;"
_TIME_STYLE = (
    "padding:8px 8px 8px 10px;font-size:19px;font-variant-numeric:tabular-nums;"
    "text-align:right;width:80px;min-width:76px;"
)


class BoardRenderer:
    """Writes departures and refresh status into a BoardDocument."""

    def __init__(
        self,
        document: BoardDocument,
        config: BoardConfig,
        now: Callable[[], datetime],
    ) -> None:
        self._document = document
        self._config = config
        self._now = now

    def render(self, element_id: str, departures: Sequence[Departure]) -> None:
        """Replace the rows of the named table; no-op when it does not exist.

        ``departures`` must already be sorted; only the first max_rows are shown.
        """
        element = self._document.get_element(element_id)
        if element is None:
            return

        limited = list(departures[: self._config.max_rows])
        if not limited:
            element.replace_rows([self._placeholder_row()])
            return

        now = self._now()
        element.replace_rows(self._departure_row(idx, dep, now) for idx, dep in enumerate(limited))

    def render_last_updated(self, when: datetime) -> None:
        element = self._document.get_element(self._config.last_updated_element_id)
        if element is None:
            return
        element.set_text(f"Updated {format_clock(when, self._config.timezone)}")

    def render_refresh_status(self, text: str) -> None:
        element = self._document.get_element(self._config.refresh_status_element_id)
        if element is None:
            return
        element.set_text(text)

    def badge_colors(self, line: str) -> tuple[str, str]:
        """Return (background, text) colours for a line badge."""
        background = self._config.line_colors.get(line, self._config.default_line_color)
        foreground = WHITE_TEXT if line == self._config.white_text_line else DARK_TEXT
        return background, foreground

    def _departure_row(self, idx: int, departure: Departure, now: datetime) -> Row:
        background, foreground = self.badge_colors(departure.line)
        return Row(
            cells=(
                Cell(f"M{departure.line}", _BADGE_STYLE.format(bg=background, fg=foreground)),
                Cell(departure.destination, _DESTINATION_STYLE),
                Cell(
                    format_relative_time(departure.departure_time, now, self._config.timezone),
                    _TIME_STYLE,
                    align="right",
                ),
            ),
            style=f"background:{EVEN_ROW_BACKGROUND if idx % 2 == 0 else ODD_ROW_BACKGROUND};",
        )

    def _placeholder_row(self) -> Row:
        return Row(
            cells=(
                Cell(
                    PLACEHOLDER_BADGE,
                    _PLACEHOLDER_BADGE_STYLE.format(bg=self._config.default_line_color, fg=DARK_TEXT),
                ),
                Cell(PLACEHOLDER_TEXT, _PLACEHOLDER_CELL_STYLE),
                Cell("", _PLACEHOLDER_CELL_STYLE, align="right"),
            )
        )
