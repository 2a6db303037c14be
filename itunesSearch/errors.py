"""Exception hierarchy for the iTunes Search client."""
from __future__ import annotations


class ITunesError(Exception):
    """Base class for every error raised by the client."""


class InvalidSearchError(ITunesError, ValueError):
    """Raised when a search request is missing or malformed."""


class QueryEncodeError(ITunesError):
    """Raised when a request cannot be turned into query parameters."""


class ITunesTransportError(ITunesError):
    """Raised when the HTTP round trip itself fails."""


class SearchCancelledError(ITunesTransportError):
    """Raised when a deadline expires or is cancelled before the call completes."""


class UnexpectedStatusError(ITunesError):
    """Raised for responses outside the 2xx range."""

    def __init__(self, status_code: int, status: str, url: str = "") -> None:
        super().__init__(f"unexpected status: {status}")
        self.status_code = status_code
        self.status = status
        self.url = url


class ResultDecodeError(ITunesError):
    """Raised when a response body is not a valid result collection."""


__all__ = [
    "ITunesError",
    "InvalidSearchError",
    "QueryEncodeError",
    "ITunesTransportError",
    "SearchCancelledError",
    "UnexpectedStatusError",
    "ResultDecodeError",
]
