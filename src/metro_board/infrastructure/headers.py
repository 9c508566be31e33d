from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

_PRODUCT = "metro-departure-board"


def _user_agent() -> str:
    try:
        return f"{_PRODUCT}/{version(_PRODUCT)}"
    except PackageNotFoundError:
        return _PRODUCT


def make_headers() -> dict[str, str]:
    """Return the request headers sent with every OVapi call.

    OVapi needs no credentials; the User-Agent names the board so the
    operator can identify its traffic.
    """
    return {
        "Accept": "application/json",
        "Cache-Control": "no-cache",
        "User-Agent": _user_agent(),
    }
