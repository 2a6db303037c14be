"""Request and result models for the iTunes Search API.

Every field carries the remote key name in its ``json`` metadata entry. The
query encoder reads those names when it builds a query string and
:meth:`Result.from_dict` reads them when it decodes a response.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional

from itunesSearch.errors import InvalidSearchError, ResultDecodeError

# Semi-open categories: the remote service accepts more values than it documents.
Country = str
Language = str
Media = str
Attribute = str


class Entity(str, Enum):
    MOVIE = "movie"
    MOVIE_ARTIST = "movieArtist"
    PODCAST = "podcast"
    PODCAST_AUTHOR = "podcastAuthor"
    MUSIC = "music"
    MUSIC_VIDEO = "musicVideo"
    MUSIC_ARTIST = "musicArtist"
    AUDIOBOOK = "audiobook"
    AUDIOBOOK_AUTHOR = "audiobookAuthor"
    SHORT_FILM = "shortFilm"
    SHORT_FILM_ARTIST = "shortFilmArtist"
    TV_SHOW = "tvShow"
    TV_EPISODE = "tvEpisode"
    TV_SEASON = "tvSeason"
    SOFTWARE = "software"
    IPAD_SOFTWARE = "iPadSoftware"
    MAC_SOFTWARE = "macSoftware"
    EBOOK = "ebook"
    ALL = "all"
    ALL_TRACK = "allTrack"

    def __str__(self) -> str:
        return self.value


def _key(name: str) -> Dict[str, str]:
    return {"json": name}


@dataclass
class Search:
    """What to ask the search endpoint for.

    When ``id`` is set the client performs a lookup and ignores the rest.
    """

    term: str = field(default="", metadata=_key("term"))
    country: Country = field(default="", metadata=_key("country"))
    media: Media = field(default="", metadata=_key("media"))
    entity: Optional[Entity] = field(default=None, metadata=_key("entity"))
    attribute: Attribute = field(default="", metadata=_key("attribute"))
    language: Language = field(default="", metadata=_key("lang"))
    limit: Optional[int] = field(default=None, metadata=_key("limit"))
    version: str = field(default="", metadata=_key("version"))
    explicit: Optional[bool] = field(default=None, metadata=_key("explicit"))
    id: str = field(default="", metadata=_key("id"))

    def __post_init__(self) -> None:
        if isinstance(self.id, str) and not self.id.strip():
            self.id = ""
        if self.entity is not None and not isinstance(self.entity, Entity):
            try:
                self.entity = Entity(self.entity)
            except ValueError as exc:
                raise InvalidSearchError(f"unknown entity: {self.entity!r}") from exc
        if self.limit is not None and (
            not isinstance(self.limit, int) or isinstance(self.limit, bool) or self.limit < 0
        ):
            raise InvalidSearchError(f"limit must be a non-negative integer, got {self.limit!r}")

    @property
    def is_lookup(self) -> bool:
        return bool(self.id and self.id.strip())


# (remote type, default) per decoded field; ``int`` stands for unsigned.
_STR = (str, "")
_UINT = (int, 0)
_FLOAT = (float, 0.0)
_BOOL = (bool, False)


def _decoded(name: str, spec: tuple) -> Any:
    kind, default = spec
    return field(default=default, metadata={"json": name, "kind": kind})


@dataclass
class Result:
    """One catalog entry (track, collection, artist...)."""

    kind: str = _decoded("kind", _STR)
    track_id: int = _decoded("trackId", _UINT)
    collection_id: int = _decoded("collectionId", _UINT)
    artist_name: str = _decoded("artistName", _STR)
    track_price: float = _decoded("trackPrice", _FLOAT)
    country: str = _decoded("country", _STR)
    currency: str = _decoded("currency", _STR)
    collection_name: str = _decoded("collectionName", _STR)
    primary_genre_name: str = _decoded("primaryGenreName", _STR)
    track_name: str = _decoded("trackName", _STR)
    track_censored_name: str = _decoded("trackCensoredName", _STR)
    track_number: int = _decoded("trackNumber", _UINT)
    track_time_millis: int = _decoded("trackTimeMillis", _UINT)
    track_view_url: str = _decoded("trackViewUrl", _STR)
    collection_price: float = _decoded("collectionPrice", _FLOAT)
    collection_view_url: str = _decoded("collectionViewUrl", _STR)
    artist_view_url: str = _decoded("artistViewUrl", _STR)
    preview_url: str = _decoded("previewUrl", _STR)
    streamable: bool = _decoded("isStreamable", _BOOL)
    artwork_url_100: str = _decoded("artworkUrl100", _STR)
    artwork_url_60: str = _decoded("artworkUrl60", _STR)
    artwork_url_30: str = _decoded("artworkUrl30", _STR)

    @classmethod
    def from_dict(cls, data: Any) -> "Result":
        if not isinstance(data, dict):
            raise ResultDecodeError(f"result item must be an object, got {type(data).__name__}")
        values: Dict[str, Any] = {}
        for f in fields(cls):
            key = f.metadata["json"]
            raw = data.get(key)
            if raw is None:
                continue
            values[f.name] = _coerce(key, raw, f.metadata["kind"])
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {f.metadata["json"]: getattr(self, f.name) for f in fields(self)}


def _coerce(key: str, raw: Any, kind: type) -> Any:
    if kind is bool:
        if isinstance(raw, bool):
            return raw
    elif kind is int:
        if isinstance(raw, int) and not isinstance(raw, bool) and raw >= 0:
            return raw
        # JSON has one number type; 12.0 is still an integer value.
        if isinstance(raw, float) and raw.is_integer() and raw >= 0:
            return int(raw)
    elif kind is float:
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return float(raw)
    elif kind is str and isinstance(raw, str):
        return raw
    raise ResultDecodeError(f"field {key!r}: cannot decode {raw!r} as {kind.__name__}")


@dataclass
class SearchResult:
    """Decoded response payload: the count the service reports plus the items."""

    result_count: int = 0
    results: List[Result] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "SearchResult":
        if not isinstance(data, dict):
            raise ResultDecodeError(f"result collection must be an object, got {type(data).__name__}")
        count = data.get("resultCount")
        count = 0 if count is None else _coerce("resultCount", count, int)
        items = data.get("results")
        if items is None:
            items = []
        if not isinstance(items, list):
            raise ResultDecodeError("field 'results': expected a list")
        return cls(result_count=count, results=[Result.from_dict(item) for item in items])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resultCount": self.result_count,
            "results": [item.to_dict() for item in self.results],
        }


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
