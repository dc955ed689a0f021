"""Resource descriptors: the immutable description of one REST resource."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

from .actions import Action, CustomAction, StandardAction, parse_custom_actions
from .errors import ConfigurationError
from .naming import parent_id_key

# Attributes of a generated Resource that custom actions may not shadow
RESOURCE_ATTRIBUTES = frozenset(
    {
        "actions",
        "config",
        "custom_actions",
        "descriptor",
        "id_attribute",
        "invoke",
        "name",
        "nest_under",
        "parent_key",
        "url",
    }
)


@dataclass(frozen=True)
class ResourceDescriptor:
    """Name, identifier field, optional parent and custom actions of a resource.

    ``nest_under`` is a reference to the parent's descriptor, never a copy.
    Nesting is single-level: a parent may not itself be nested.
    """

    name: str
    id_attribute: str = "id"
    nest_under: ResourceDescriptor | None = None
    parent_id_key: str | None = None
    custom_actions: tuple[CustomAction, ...] = ()

    @classmethod
    def build(
        cls,
        name: str,
        *,
        id_attribute: str | None = None,
        nest_under: Any = None,
        parent_id_key: str | None = None,
        custom_actions: Any = None,
    ) -> ResourceDescriptor:
        """Validate raw options and return a descriptor.

        ``nest_under`` may be a descriptor or anything exposing one as
        ``.descriptor`` (a generated resource).
        """
        if not isinstance(name, str) or not name.strip("/"):
            raise ConfigurationError(f"Resource name must be a non-empty string, got {name!r}")
        name = name.strip("/")

        if id_attribute is None:
            id_attribute = "id"
        if not isinstance(id_attribute, str) or not id_attribute:
            raise ConfigurationError(f"id_attribute must be a non-empty string, got {id_attribute!r}")

        parent = getattr(nest_under, "descriptor", nest_under)
        if parent is not None:
            if not isinstance(parent, ResourceDescriptor):
                raise ConfigurationError(
                    f"nest_under must be a generated resource, got {nest_under!r}"
                )
            if parent.nest_under is not None:
                raise ConfigurationError(
                    f"Cannot nest {name!r} under {parent.name!r}:"
                    f" {parent.name!r} is already nested under {parent.nest_under.name!r}"
                )
        elif parent_id_key is not None:
            raise ConfigurationError("parent_id_key requires nest_under")

        if parent_id_key is not None and (not isinstance(parent_id_key, str) or not parent_id_key):
            raise ConfigurationError(f"parent_id_key must be a non-empty string, got {parent_id_key!r}")

        descriptor = cls(
            name=name,
            id_attribute=id_attribute,
            nest_under=parent,
            parent_id_key=parent_id_key,
            custom_actions=parse_custom_actions(custom_actions, reserved=RESOURCE_ATTRIBUTES),
        )
        if descriptor.parent_key == id_attribute:
            raise ConfigurationError(
                f"Parent id key {descriptor.parent_key!r} collides with id_attribute of {name!r}"
            )
        return descriptor

    @property
    def parent_key(self) -> str | None:
        """Params key holding the parent id, or None for top-level resources."""
        if self.nest_under is None:
            return None
        return self.parent_id_key or parent_id_key(self.nest_under.name)

    def actions(self) -> Iterator[Action]:
        """Yield every action of this resource, standard ones first."""
        yield from StandardAction
        yield from self.custom_actions

    def find_action(self, name: str) -> Action | None:
        for action in self.actions():
            if action.method_name == name:
                return action
        return None
