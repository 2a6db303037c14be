"""Typed request/response models."""

from .search import (
    Attribute,
    Country,
    Entity,
    Language,
    Media,
    Result,
    Search,
    SearchResult,
)

__all__ = [
    "Attribute",
    "Country",
    "Entity",
    "Language",
    "Media",
    "Result",
    "Search",
    "SearchResult",
]
