"""HTTP clients for the iTunes Search API."""

from .itunes_client import ITunesClient, search, search_by_id

__all__ = ["ITunesClient", "search", "search_by_id"]
