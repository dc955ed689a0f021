"""Action kinds.

Every generated method is one of two kinds:

  - StandardAction: get_collection, get, create, update, destroy, with
    fixed verbs and URL shapes
  - CustomAction: declared by the caller with an explicit verb, name and
    collection/member scope

Both expose the same three facts the pipeline needs: ``method`` (HTTP
verb), ``on_member`` (whether the URL carries the instance id) and
``params_to`` (which bucket the non-path params travel in).
"""

from __future__ import annotations

import enum
import keyword
from dataclasses import dataclass
from typing import Any, Mapping, Union

from .errors import ConfigurationError

COLLECTION = "collection"
MEMBER = "member"

QUERY = "query"
BODY = "body"
NOWHERE = "none"

# Verbs whose non-path params travel in the query string
_QUERY_VERBS = {"GET", "DELETE"}
_BODY_VERBS = {"POST", "PUT", "PATCH"}
SUPPORTED_VERBS = _QUERY_VERBS | _BODY_VERBS


class StandardAction(enum.Enum):
    GET_COLLECTION = ("get_collection", "GET", COLLECTION, QUERY)
    GET = ("get", "GET", MEMBER, QUERY)
    CREATE = ("create", "POST", COLLECTION, BODY)
    UPDATE = ("update", "PATCH", MEMBER, BODY)
    DESTROY = ("destroy", "DELETE", MEMBER, NOWHERE)

    def __init__(self, method_name: str, method: str, on: str, params_to: str):
        self.method_name = method_name
        self.method = method
        self.on = on
        self.params_to = params_to

    @property
    def name_segment(self) -> str | None:
        return None

    @property
    def on_member(self) -> bool:
        return self.on == MEMBER


STANDARD_NAMES = frozenset(action.method_name for action in StandardAction)


@dataclass(frozen=True)
class CustomAction:
    method: str
    name: str
    on: str

    @property
    def method_name(self) -> str:
        return self.name

    @property
    def name_segment(self) -> str | None:
        return self.name

    @property
    def on_member(self) -> bool:
        return self.on == MEMBER

    @property
    def params_to(self) -> str:
        return QUERY if self.method in _QUERY_VERBS else BODY

    @classmethod
    def from_mapping(cls, entry: Any) -> "CustomAction":
        """Validate a ``{method, name, on}`` declaration."""
        if isinstance(entry, CustomAction):
            return entry
        if not isinstance(entry, Mapping):
            raise ConfigurationError(
                f"Custom action must be a mapping with method, name and on; got {entry!r}"
            )

        missing = [key for key in ("method", "name", "on") if not entry.get(key)]
        if missing:
            raise ConfigurationError(
                f"Custom action {entry!r} is missing {', '.join(missing)}"
            )

        method = str(entry["method"]).upper()
        if method not in SUPPORTED_VERBS:
            raise ConfigurationError(
                f"Custom action {entry['name']!r} has unsupported method {entry['method']!r}"
                f" (expected one of {', '.join(sorted(SUPPORTED_VERBS))})"
            )

        on = str(entry["on"]).lower()
        if on not in (COLLECTION, MEMBER):
            raise ConfigurationError(
                f"Custom action {entry['name']!r} has on={entry['on']!r};"
                f" expected {COLLECTION!r} or {MEMBER!r}"
            )

        name = entry["name"]
        if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name):
            raise ConfigurationError(
                f"Custom action name {name!r} is not a valid Python identifier"
            )

        return cls(method=method, name=name, on=on)


Action = Union[StandardAction, CustomAction]


def parse_custom_actions(
    entries: Any, reserved: frozenset[str] = frozenset()
) -> tuple[CustomAction, ...]:
    """Validate a list of custom action declarations, keeping their order.

    ``reserved`` names attributes the generated resource already uses.
    """
    if not entries:
        return ()
    if isinstance(entries, (str, bytes)) or isinstance(entries, Mapping):
        raise ConfigurationError("Custom actions must be a list of {method, name, on} entries")

    actions: list[CustomAction] = []
    seen: set[str] = set()
    for entry in entries:
        action = CustomAction.from_mapping(entry)
        if action.name in STANDARD_NAMES or action.name in reserved:
            raise ConfigurationError(
                f"Custom action {action.name!r} clashes with an existing resource method"
            )
        if action.name.startswith("_"):
            raise ConfigurationError(
                f"Custom action {action.name!r} must not start with an underscore"
            )
        if action.name in seen:
            raise ConfigurationError(f"Custom action {action.name!r} is declared twice")
        seen.add(action.name)
        actions.append(action)
    return tuple(actions)
