"""Render type stubs for generated resources.

Generated methods are resolved at runtime, so type checkers and editors
cannot see custom actions. The stub declares one Resource subclass per
descriptor listing every method with its verb and URL template.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import jinja2

from .descriptor import ResourceDescriptor
from .naming import class_name

TEMPLATE_DIR = Path(__file__).parent / "templates"


def _path_template(descriptor: ResourceDescriptor, action: Any) -> str:
    segments = []
    if descriptor.nest_under is not None:
        segments += [descriptor.nest_under.name, "{%s}" % descriptor.parent_key]
    segments.append(descriptor.name)
    if action.on_member:
        segments.append("{%s}" % descriptor.id_attribute)
    if action.name_segment:
        segments.append(action.name_segment)
    return "/" + "/".join(segments)


def _describe(descriptor: ResourceDescriptor) -> str:
    if descriptor.nest_under is None:
        return f"Methods of the {descriptor.name!r} resource."
    return (
        f"Methods of the {descriptor.name!r} resource, nested under"
        f" {descriptor.nest_under.name!r} by {descriptor.parent_key!r}."
    )


def build_context(descriptors: Mapping[str, ResourceDescriptor]) -> dict[str, Any]:
    """Build the template context from descriptors keyed by resource key."""
    resources: list[dict[str, Any]] = []
    seen: dict[str, int] = {}

    for key, descriptor in descriptors.items():
        name = f"{class_name(key)}Resource"
        if name in seen:
            seen[name] += 1
            name = f"{name}{seen[name]}"
        else:
            seen[name] = 1

        actions = [
            {
                "name": action.method_name,
                "method": action.method,
                "path": _path_template(descriptor, action),
            }
            for action in descriptor.actions()
        ]
        resources.append(
            {
                "key": key,
                "class_name": name,
                "summary": _describe(descriptor),
                "actions": actions,
            }
        )

    return {"resources": resources, "resource_count": len(resources)}


def render_stubs(descriptors: Mapping[str, ResourceDescriptor]) -> str:
    """Render the stub module source for ``descriptors``."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    template = env.get_template("resources.pyi.j2")
    return template.render(**build_context(descriptors))


def write_stubs(descriptors: Mapping[str, ResourceDescriptor], output_path: Path | str) -> Path:
    """Render stubs and write them to ``output_path``."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_stubs(descriptors))
    return output_path
