from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Iterable, List

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from itunesSearch.config import ClientConfig  # noqa: E402

SEARCH_URL = "https://itunes.apple.com/search"
LOOKUP_URL = "https://itunes.apple.com/lookup"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's ITUNES_* settings out of the tests."""

    for name in (
        "ITUNES_CLIENT_CONFIG",
        "ITUNES_SEARCH_URL",
        "ITUNES_LOOKUP_URL",
        "ITUNES_TIMEOUT_SECONDS",
        "ITUNES_USER_AGENT",
        "ITUNES_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(search_url=SEARCH_URL, lookup_url=LOOKUP_URL, timeout_seconds=5.0)


class StubResponse:
    """Just enough of :class:`requests.Response` for the client."""

    def __init__(
        self,
        body: bytes = b"{}",
        *,
        status_code: int = 200,
        reason: str = "OK",
        chunks: Iterable[bytes] | None = None,
        on_chunk=None,
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        self._chunks = list(chunks) if chunks is not None else [body]
        self._on_chunk = on_chunk
        self.closed = False

    def iter_content(self, chunk_size: int = 1):
        for index, chunk in enumerate(self._chunks):
            if self._on_chunk is not None:
                self._on_chunk(index)
            yield chunk

    def close(self) -> None:
        self.closed = True


class StubSession:
    def __init__(self, responses: List[Any]) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def get(self, url, headers=None, timeout=None, stream=False):  # noqa: D401 - requests compat
        self.calls.append({"url": url, "headers": headers, "timeout": timeout, "stream": stream})
        outcome = self.responses.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def stub_response():
    return StubResponse


@pytest.fixture
def stub_session():
    return StubSession
