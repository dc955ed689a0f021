"""Load resource declarations from a JSON manifest.

Manifest shape::

    {
      "resources": [
        {"name": "rooms"},
        {"name": "users", "nest_under": "rooms",
         "custom_actions": [{"method": "post", "name": "login", "on": "collection"}]}
      ]
    }

Parents must be declared before the resources nested under them.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .descriptor import ResourceDescriptor
from .errors import ConfigurationError

if TYPE_CHECKING:
    from .client import Client, Resource

_ENTRY_KEYS = {"name", "key", "id_attribute", "nest_under", "parent_id_key", "custom_actions"}


def load_manifest(path: Path | str) -> dict[str, Any]:
    """Load a manifest from disk."""
    with open(path) as f:
        manifest = json.load(f)
    if not isinstance(manifest, dict):
        raise ConfigurationError(f"{path}: manifest must be a JSON object")
    return manifest


def get_resources(manifest: dict[str, Any]) -> list[dict[str, Any]]:
    """Extract the resource entries from a manifest."""
    resources = manifest.get("resources", [])
    if not isinstance(resources, list):
        raise ConfigurationError("manifest 'resources' must be a list")
    return resources


def build_descriptors(manifest: dict[str, Any]) -> dict[str, ResourceDescriptor]:
    """Build descriptors keyed by each entry's ``key`` (its name by default)."""
    descriptors: dict[str, ResourceDescriptor] = {}

    for index, entry in enumerate(get_resources(manifest)):
        if not isinstance(entry, dict) or not entry.get("name"):
            raise ConfigurationError(f"resources[{index}] needs a 'name'")

        unknown = set(entry) - _ENTRY_KEYS
        if unknown:
            raise ConfigurationError(
                f"resources[{index}] has unknown key(s): {', '.join(sorted(unknown))}"
            )

        key = entry.get("key", entry["name"])
        if key in descriptors:
            raise ConfigurationError(f"resources[{index}]: duplicate resource key {key!r}")

        parent = None
        parent_key = entry.get("nest_under")
        if parent_key is not None:
            parent = descriptors.get(parent_key)
            if parent is None:
                raise ConfigurationError(
                    f"resources[{index}]: nest_under {parent_key!r} must name a resource"
                    " declared earlier in the manifest"
                )

        descriptors[key] = ResourceDescriptor.build(
            entry["name"],
            id_attribute=entry.get("id_attribute"),
            nest_under=parent,
            parent_id_key=entry.get("parent_id_key"),
            custom_actions=entry.get("custom_actions"),
        )

    return descriptors


def load_resources(client: Client, path: Path | str) -> dict[str, Resource]:
    """Load a manifest and bind each of its resources to ``client``."""
    descriptors = build_descriptors(load_manifest(path))
    return {key: client.bind(descriptor) for key, descriptor in descriptors.items()}
