"""Tests for the header factory."""
from __future__ import annotations

from metro_board.infrastructure.headers import make_headers


def test_accepts_json() -> None:
    assert make_headers()["Accept"] == "application/json"


def test_user_agent_names_the_board() -> None:
    assert make_headers()["User-Agent"].startswith("metro-departure-board")


def test_fresh_dict_each_call() -> None:
    h1 = make_headers()
    h1["Accept"] = "text/html"
    assert make_headers()["Accept"] == "application/json"
