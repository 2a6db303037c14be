from __future__ import annotations

"""Package metadata and the public client surface."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("itunesSearch")
except PackageNotFoundError:  # pragma: no cover - package not installed
    __version__ = "0.1.0"

from itunesSearch.api_clients import ITunesClient, search, search_by_id
from itunesSearch.config import ClientConfig, load_config
from itunesSearch.errors import (
    InvalidSearchError,
    ITunesError,
    ITunesTransportError,
    QueryEncodeError,
    ResultDecodeError,
    SearchCancelledError,
    UnexpectedStatusError,
)
from itunesSearch.models import Entity, Result, Search, SearchResult
from itunesSearch.utils.deadline import Deadline

__all__ = [
    "__version__",
    "ClientConfig",
    "Deadline",
    "Entity",
    "ITunesClient",
    "ITunesError",
    "ITunesTransportError",
    "InvalidSearchError",
    "QueryEncodeError",
    "Result",
    "ResultDecodeError",
    "Search",
    "SearchCancelledError",
    "SearchResult",
    "UnexpectedStatusError",
    "load_config",
    "search",
    "search_by_id",
]
