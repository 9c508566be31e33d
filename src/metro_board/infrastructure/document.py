from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Cell:
    """One table cell: its text and inline CSS."""

    text: str
    style: str = ""
    align: str = "left"


@dataclass(frozen=True)
class Row:
    cells: tuple[Cell, ...]
    style: str = ""


@dataclass
class Element:
    """A named render target holding either table rows or plain text."""

    element_id: str
    rows: list[Row] = field(default_factory=list)
    text: str = ""

    def replace_rows(self, rows: Iterable[Row]) -> None:
        self.rows = list(rows)

    def set_text(self, text: str) -> None:
        self.text = text


class BoardDocument:
    """In-memory stand-in for the page: elements addressed by id.

    Only elements created up front exist; lookups for anything else return
    None so renderers can tolerate partial markup.
    """

    def __init__(self, element_ids: Iterable[str] = ()) -> None:
        self._elements: dict[str, Element] = {}
        for element_id in element_ids:
            self.add_element(element_id)

    def add_element(self, element_id: str) -> Element:
        element = self._elements.get(element_id)
        if element is None:
            element = Element(element_id)
            self._elements[element_id] = element
        return element

    def get_element(self, element_id: str) -> Element | None:
        return self._elements.get(element_id)

    def __contains__(self, element_id: object) -> bool:
        return element_id in self._elements

    def text_of(self, element_id: str) -> str:
        element = self._elements.get(element_id)
        return element.text if element is not None else ""

    def rows_of(self, element_id: str) -> list[Row]:
        element = self._elements.get(element_id)
        return list(element.rows) if element is not None else []
