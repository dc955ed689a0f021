"""Naming conventions shared by descriptors, the pipeline and stub rendering.

Pattern for the parent id key of a nested resource:
  - rooms       -> roomId
  - categories  -> categoryId
  - chat-rooms  -> chatRoomId
  - addresses   -> addressId
  - buses       -> busId

Singularization is a suffix rule (-ies -> -y, -sses/-shes/-ches/-xes drop
"es", otherwise drop a trailing "s") plus the irregular table below.
Words the rules get wrong and the table does not list (e.g. "quizzes" ->
"quizzeId", "heroes" -> "heroeId") need an explicit
``parent_id_key``.

URL segments are percent-encoded one at a time so ids containing ``/``,
spaces, or consisting of ``.``/``..`` never change the shape of the path.
"""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import quote

# Irregular plural/singular pairs the suffix rules below get wrong
_PLURALS: dict[str, str] = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
    "index": "indices",
    "status": "statuses",
    "address": "addresses",
    "analysis": "analyses",
    "medium": "media",
    "cache": "caches",
    "niche": "niches",
    "bus": "buses",
    "alias": "aliases",
    "movie": "movies",
    "cookie": "cookies",
    "series": "series",
    "species": "species",
}

_SINGULARS: dict[str, str] = {v: k for k, v in _PLURALS.items()}

_DOT_SEGMENTS = {".": "%2E", "..": "%2E%2E"}


def singularize(word: str) -> str:
    """Return the singular form of a resource name."""
    lower = word.lower()
    if lower in _SINGULARS:
        return _SINGULARS[lower]
    if lower in _PLURALS:
        return word
    if lower.endswith("ies") and len(word) > 3:
        return word[:-3] + "y"
    if lower.endswith(("sses", "shes", "ches", "xes")):
        return word[:-2]
    if lower.endswith("s") and not lower.endswith("ss"):
        return word[:-1]
    return word


def _split_words(name: str) -> list[str]:
    """Split snake_case, kebab-case or camelCase names into words."""
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    s2 = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s1)
    return [w for w in re.split(r"[_\-\s.]+", s2) if w]


def camelize(words: list[str]) -> str:
    if not words:
        return ""
    head, *rest = words
    return head.lower() + "".join(w[:1].upper() + w[1:].lower() for w in rest)


def parent_id_key(parent_name: str) -> str:
    """Build the conventional params key holding a parent resource's id.

    The last word of the parent name is singularized, the words are joined
    in camelCase and ``Id`` is appended.
    """
    words = _split_words(parent_name)
    if not words:
        raise ValueError(f"Cannot derive a parent id key from {parent_name!r}")
    words[-1] = singularize(words[-1])
    return camelize(words) + "Id"


def class_name(name: str) -> str:
    """Convert a resource name to a PascalCase class name prefix."""
    words = _split_words(name)
    joined = "".join(w[:1].upper() + w[1:] for w in words)
    joined = re.sub(r"[^A-Za-z0-9_]", "", joined)
    if not joined or joined[0].isdigit():
        joined = f"R{joined}"
    return joined


def encode_segment(value: Any) -> str:
    """Percent-encode a single URL path segment.

    ``.`` and ``..`` are escaped too, otherwise they would be resolved as
    relative path steps and move the request off its resource.
    """
    segment = quote(str(value), safe="")
    return _DOT_SEGMENTS.get(segment, segment)
