"""Structured JSON logger used by the API client.

Each JsonLogger filters against its own level, so several instances can share
one underlying ``logging.Logger`` without changing each other's threshold.
"""
from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Mapping, MutableMapping

EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
TOKEN_RE = re.compile(r"bearer\s+[A-Za-z0-9\-_=.]{20,}", re.IGNORECASE)
URL_QUERY_RE = re.compile(r"https?://[^\s?]+\?[^\s]+")

_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def level_from_name(name: str | None) -> int:
    """Map a level name to its ``logging`` constant (``INFO`` when unknown)."""
    return _LEVEL_MAP.get((name or "").upper(), logging.INFO)


def _scrub(value: str) -> str:
    # Search terms travel in the query string; log only scheme/host/path.
    value = URL_QUERY_RE.sub(lambda m: m.group(0).split("?")[0], value)
    value = EMAIL_RE.sub("[redacted]", value)
    value = TOKEN_RE.sub("[redacted]", value)
    return value


def _sanitize(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {str(k): _sanitize(v) for k, v in obj.items() if v is not None}
    if isinstance(obj, (list, tuple)):
        return [_sanitize(v) for v in obj]
    if isinstance(obj, (int, float, bool)):
        return obj
    if obj is None:
        return None
    return _scrub(str(obj))


def _truncate(details: Mapping[str, Any], max_bytes: int) -> Any:
    if max_bytes <= 0:
        return details
    serialized = json.dumps(details, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    blob = serialized.encode("utf-8")
    if len(blob) <= max_bytes:
        return details
    preview = blob[:max_bytes].decode("utf-8", errors="ignore")
    return {"note": "truncated", "preview": preview}


class JsonLogger:
    """Emit one JSON line per event with consistent top-level keys."""

    def __init__(
        self,
        service: str,
        *,
        logger: logging.Logger | None = None,
        level: int | str = logging.INFO,
        max_details_bytes: int = 4096,
    ) -> None:
        self._service = service
        self._logger = logger or logging.getLogger(f"itunessearch.{service}.json")
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("%(message)s"))
            self._logger.addHandler(handler)
        self._logger.propagate = False
        if logger is None or self._logger.level == logging.NOTSET:
            self._logger.setLevel(logging.DEBUG)
        self._level = logging.INFO
        self.set_level(level)
        self._max_details_bytes = max(0, int(max_details_bytes))

    @property
    def service(self) -> str:
        return self._service

    def set_level(self, level: int | str) -> None:
        if isinstance(level, str):
            level = level_from_name(level)
        self._level = level

    @property
    def level(self) -> int:
        return self._level

    def debug(self, event: str, **fields: Any) -> dict[str, Any] | None:
        return self._emit("DEBUG", event, fields)

    def info(self, event: str, **fields: Any) -> dict[str, Any] | None:
        return self._emit("INFO", event, fields)

    def warning(self, event: str, **fields: Any) -> dict[str, Any] | None:
        return self._emit("WARNING", event, fields)

    def error(self, event: str, **fields: Any) -> dict[str, Any] | None:
        return self._emit("ERROR", event, fields)

    def _emit(self, level: str, event: str, fields: MutableMapping[str, Any]) -> dict[str, Any] | None:
        numeric = level_from_name(level)
        if numeric < self._level or not self._logger.isEnabledFor(numeric):
            return None
        entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "service": self._service,
            "event": event,
        }
        for key in ("status", "latency_ms"):
            value = fields.pop(key, None)
            if value is not None:
                entry[key] = value
        if fields:
            entry["details"] = _truncate(_sanitize(dict(fields)), self._max_details_bytes)
        payload = json.dumps(entry, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
        self._logger.log(numeric, payload)
        return entry


__all__ = ["JsonLogger", "level_from_name"]
