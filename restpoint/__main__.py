"""Entry point: python -m restpoint MANIFEST

Reads a JSON resource manifest and writes type stubs for its resources.
"""

from __future__ import annotations

import argparse

from .codegen import write_stubs
from .loader import build_descriptors, load_manifest


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="python -m restpoint",
        description="Render type stubs for the resources declared in a manifest.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("manifest", help="Path to the JSON resource manifest.")
    parser.add_argument(
        "-o", "--output", default="resources.pyi", help="Where to write the stub file."
    )
    args = parser.parse_args(argv)

    descriptors = build_descriptors(load_manifest(args.manifest))
    output_path = write_stubs(descriptors, args.output)

    print(f"Generated {output_path} ({len(descriptors)} resources)")


if __name__ == "__main__":
    main()
