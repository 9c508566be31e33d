from __future__ import annotations


class BoardError(Exception):
    """Base exception for all departure board errors."""


class FetchError(BoardError):
    """Raised when the OVapi endpoint answers with a non-2xx HTTP status."""

    def __init__(self, status_code: int, message: str = "") -> None:
        self.status_code = status_code
        super().__init__(message or f"API {status_code}")


class DataError(BoardError):
    """Raised when a response body lacks the entry for the requested stop code."""
