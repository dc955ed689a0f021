"""Serialize request params into a query string.

Handles:
- Flat values (``page=1``)
- Booleans as ``true``/``false`` and ``None`` as an empty value
- Sequences as repeated bracketed keys (``skills[]=a&skills[]=b``)
- One level of nested mappings (``filter[name]=Bob``)

Anything nested deeper is passed through ``str()`` rather than flattened.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode


def _scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def to_pairs(params: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Flatten params into ordered ``(key, value)`` pairs."""
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        if _is_sequence(value):
            pairs.extend((f"{key}[]", _scalar(v)) for v in value)
        elif isinstance(value, Mapping):
            pairs.extend((f"{key}[{sub}]", _scalar(v)) for sub, v in value.items())
        else:
            pairs.append((key, _scalar(value)))
    return pairs


def encode(params: Mapping[str, Any] | None) -> str:
    """Encode params as a query string without the leading ``?``."""
    if not params:
        return ""
    return urlencode(to_pairs(params))
