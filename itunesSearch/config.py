from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any

CONFIG_ENV = "ITUNES_CLIENT_CONFIG"

DEFAULT_SEARCH_URL = "https://itunes.apple.com/search"
DEFAULT_LOOKUP_URL = "https://itunes.apple.com/lookup"

_ENV_OVERRIDES = {
    "search_url": "ITUNES_SEARCH_URL",
    "lookup_url": "ITUNES_LOOKUP_URL",
    "timeout_seconds": "ITUNES_TIMEOUT_SECONDS",
    "user_agent": "ITUNES_USER_AGENT",
    "log_level": "ITUNES_LOG_LEVEL",
}


@dataclass(frozen=True)
class ClientConfig:
    search_url: str = DEFAULT_SEARCH_URL
    lookup_url: str = DEFAULT_LOOKUP_URL
    timeout_seconds: float = 10.0
    user_agent: str = "itunesSearch/0.1"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")


def config_path() -> Path | None:
    env = os.getenv(CONFIG_ENV)
    return Path(env) if env else None


def _read_file(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    known = {f.name for f in fields(ClientConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"{path}: unknown config keys {unknown}")
    return data


def load_config() -> ClientConfig:
    """Build a config from defaults, the optional JSON file, then the environment."""
    values: dict[str, Any] = {}
    path = config_path()
    if path is not None and path.exists():
        values.update(_read_file(path))
    for name, env in _ENV_OVERRIDES.items():
        raw = os.getenv(env)
        if raw:
            values[name] = raw
    if "timeout_seconds" in values:
        values["timeout_seconds"] = float(values["timeout_seconds"])
    return replace(ClientConfig(), **values)


def as_dict(cfg: ClientConfig) -> dict[str, Any]:
    return asdict(cfg)


__all__ = ["ClientConfig", "CONFIG_ENV", "load_config", "as_dict"]
