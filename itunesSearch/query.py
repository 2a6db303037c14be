"""Turn a structured request into URL query parameters.

``value_to_url_values`` accepts a dataclass (key names come from each
field's ``json`` metadata, falling back to the attribute name) or a plain
mapping. The value is pushed through a JSON round trip so every field ends
up as a str/number/bool, a list of those, or ``None``::

    Search(term="Change", limit=12)  ->  {"term": ["Change"], "limit": ["12"]}
    {"tags": ["a", "", "b"]}          ->  {"tags": ["a", "b"]}
"""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Dict, List, Mapping
from urllib.parse import urlencode

from itunesSearch.errors import QueryEncodeError


def _shadow_map(value: Any) -> Dict[str, Any]:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        raw = {
            f.metadata.get("json", f.name): getattr(value, f.name)
            for f in dataclasses.fields(value)
        }
    elif isinstance(value, Mapping):
        raw = dict(value)
    else:
        raise QueryEncodeError(f"cannot encode {type(value).__name__} as query parameters")
    try:
        shadow = json.loads(json.dumps(raw))
    except (TypeError, ValueError) as exc:
        raise QueryEncodeError(f"cannot serialize request: {exc}") from exc
    return shadow


def _format(item: Any) -> str:
    if isinstance(item, bool):
        return "true" if item else "false"
    return str(item)


def value_to_url_values(value: Any) -> Dict[str, List[str]]:
    """Return ``{key: [values...]}`` for every non-empty field of ``value``."""
    out: Dict[str, List[str]] = {}
    for key, item in _shadow_map(value).items():
        if item is None:
            continue
        if isinstance(item, dict):
            raise QueryEncodeError(f"field {key!r}: nested objects are not supported")
        if isinstance(item, list):
            values = []
            for element in item:
                if element is None:
                    continue
                if isinstance(element, (dict, list)):
                    raise QueryEncodeError(f"field {key!r}: nested values are not supported")
                text = _format(element)
                if text:
                    values.append(text)
            if values:
                out[key] = values
            continue
        text = _format(item)
        if text:
            out[key] = [text]
    return out


def encode_query(value: Any) -> str:
    """Percent-encoded ``key=value&key=value`` string for ``value``."""
    return urlencode(value_to_url_values(value), doseq=True)


__all__ = ["encode_query", "value_to_url_values"]
