"""iTunes Search and Lookup API client."""
from __future__ import annotations

import json
import threading
from typing import Any

import requests

from itunesSearch.config import ClientConfig, load_config
from itunesSearch.errors import (
    InvalidSearchError,
    ITunesTransportError,
    ResultDecodeError,
    SearchCancelledError,
    UnexpectedStatusError,
)
from itunesSearch.models.search import Search, SearchResult
from itunesSearch.query import encode_query
from itunesSearch.utils.deadline import Deadline
from itunesSearch.utils.log_json import JsonLogger

_CHUNK_SIZE = 64 * 1024
# urllib3 rejects a zero timeout.
_MIN_TIMEOUT = 0.001


def _status_ok(code: int) -> bool:
    return 200 <= code <= 299


def _status_line(resp: requests.Response) -> str:
    reason = resp.reason or ""
    return f"{resp.status_code} {reason}".strip()


class ITunesClient:
    """Client for the iTunes Search (``/search``) and Lookup (``/lookup``) endpoints.

    Parameters
    ----------
    session:
        Optional :class:`requests.Session`. A session passed in stays owned by
        the caller; otherwise the client creates one and closes it in
        :meth:`close`.
    config:
        Endpoints, timeout and user agent. Defaults to :func:`load_config`.
    """

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        config: ClientConfig | None = None,
    ) -> None:
        self.config = config or load_config()
        self.session = session if session is not None else requests.Session()
        self._owns_session = session is None
        self._log = JsonLogger("itunes-client", level=self.config.log_level)
        self._log.info(
            "api.client.init",
            search_url=self.config.search_url,
            lookup_url=self.config.lookup_url,
            timeout_seconds=self.config.timeout_seconds,
        )

    # ------------------------------------------------------------------#
    def search(self, request: Search | None, *, deadline: Deadline | None = None) -> SearchResult:
        """Run ``request``: a lookup when it carries an id, a term search otherwise."""
        if request is None:
            raise InvalidSearchError("search request is required")
        if request.is_lookup:
            return self.search_by_id(request.id, deadline=deadline)
        return self.search_by_term(request, deadline=deadline)

    def search_by_term(self, request: Search | None, *, deadline: Deadline | None = None) -> SearchResult:
        """GET the search endpoint with ``request`` encoded as the query string."""
        if request is None:
            raise InvalidSearchError("search request is required")
        query = encode_query(request)
        url = f"{self.config.search_url}?{query}" if query else self.config.search_url
        result = self._decode(self._get(url, deadline=deadline), url)
        missing = sum(1 for item in result.results if not item.track_view_url)
        if missing:
            self._log.warning(
                "api.result.missing_view_url",
                url=url,
                missing=missing,
                result_count=len(result.results),
            )
        return result

    def search_by_id(self, identifier: str, *, deadline: Deadline | None = None) -> SearchResult:
        """GET ``<lookup_url>?id=<identifier>``."""
        identifier = (identifier or "").strip()
        if not identifier:
            raise InvalidSearchError("empty lookup id")
        url = f"{self.config.lookup_url}?id={identifier}"
        body = self._get(url, deadline=deadline).strip()
        return self._decode(body, url)

    # ------------------------------------------------------------------#
    def _get(self, url: str, *, deadline: Deadline | None) -> bytes:
        timeout: float | None = self.config.timeout_seconds
        if deadline is not None:
            self._check(deadline, url)
            timeout = max(_MIN_TIMEOUT, deadline.bound(timeout))
        headers = {"User-Agent": self.config.user_agent, "Accept": "application/json"}
        self._log.info("api.request", url=url, timeout=timeout)
        if deadline is None:
            return self._fetch(url, headers, timeout, None, [])
        return self._fetch_cancellable(url, headers, timeout, deadline)

    def _fetch_cancellable(
        self, url: str, headers: dict[str, str], timeout: float, deadline: Deadline
    ) -> bytes:
        # requests cannot be interrupted from outside, so the round trip runs on a
        # worker thread and the caller waits for either the result or the deadline.
        done = threading.Event()
        outcome: dict[str, Any] = {}
        in_flight: list[requests.Response] = []

        def worker() -> None:
            try:
                outcome["body"] = self._fetch(url, headers, timeout, deadline, in_flight)
            except Exception as exc:
                outcome["error"] = exc
            finally:
                done.set()

        token = deadline.add_callback(done.set)
        try:
            threading.Thread(target=worker, name="itunes-request", daemon=True).start()
            done.wait()
        finally:
            deadline.remove_callback(token)
        if "error" in outcome:
            raise outcome["error"]
        if "body" in outcome:
            return outcome["body"]
        for resp in list(in_flight):
            resp.close()
        self._check(deadline, url)
        self._log.warning("api.cancelled", url=url, reason="deadline exceeded")
        raise SearchCancelledError("deadline exceeded")

    def _fetch(
        self,
        url: str,
        headers: dict[str, str],
        timeout: float | None,
        deadline: Deadline | None,
        in_flight: list[requests.Response],
    ) -> bytes:
        try:
            resp = self.session.get(url, headers=headers, timeout=timeout, stream=True)
        except requests.Timeout as exc:
            self._log.error("api.cancelled", url=url, reason="timeout", error=str(exc))
            raise SearchCancelledError(f"request timed out: {exc}") from exc
        except requests.RequestException as exc:
            self._log.error("api.request_failed", url=url, error=str(exc))
            raise ITunesTransportError(str(exc)) from exc
        in_flight.append(resp)
        try:
            if not _status_ok(resp.status_code):
                status = _status_line(resp)
                self._log.error("api.unexpected_status", url=url, status=resp.status_code)
                raise UnexpectedStatusError(resp.status_code, status, url)
            body = self._read_body(resp, url, deadline)
        finally:
            resp.close()
        self._log.info("api.response", url=url, status=resp.status_code, bytes=len(body))
        return body

    def _read_body(self, resp: requests.Response, url: str, deadline: Deadline | None) -> bytes:
        chunks: list[bytes] = []
        try:
            for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                if deadline is not None:
                    self._check(deadline, url)
                chunks.append(chunk)
        except requests.Timeout as exc:
            self._log.error("api.cancelled", url=url, reason="timeout", error=str(exc))
            raise SearchCancelledError(f"response read timed out: {exc}") from exc
        except requests.RequestException as exc:
            self._log.error("api.request_failed", url=url, error=str(exc))
            raise ITunesTransportError(str(exc)) from exc
        return b"".join(chunks)

    def _check(self, deadline: Deadline, url: str) -> None:
        try:
            deadline.check()
        except SearchCancelledError as exc:
            self._log.warning("api.cancelled", url=url, reason=str(exc))
            raise

    def _decode(self, body: bytes, url: str) -> SearchResult:
        try:
            payload: Any = json.loads(body)
        except ValueError as exc:
            self._log.error("api.invalid_json", url=url, error=str(exc))
            raise ResultDecodeError(f"invalid JSON from iTunes: {exc}") from exc
        try:
            result = SearchResult.from_dict(payload)
        except ResultDecodeError as exc:
            self._log.error("api.invalid_json", url=url, error=str(exc))
            raise
        self._log.info("api.decoded", url=url, result_count=result.result_count)
        return result

    # Resource lifecycle -------------------------------------------------
    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "ITunesClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def search(
    request: Search | None,
    *,
    deadline: Deadline | None = None,
    config: ClientConfig | None = None,
) -> SearchResult:
    """Convenience wrapper mirroring :meth:`ITunesClient.search`."""

    with ITunesClient(config=config) as client:
        return client.search(request, deadline=deadline)


def search_by_id(
    identifier: str,
    *,
    deadline: Deadline | None = None,
    config: ClientConfig | None = None,
) -> SearchResult:
    """Convenience wrapper mirroring :meth:`ITunesClient.search_by_id`."""

    with ITunesClient(config=config) as client:
        return client.search_by_id(identifier, deadline=deadline)


__all__ = ["ITunesClient", "search", "search_by_id"]
