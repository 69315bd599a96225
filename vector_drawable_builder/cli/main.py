from __future__ import annotations
import argparse
import sys

from ..core.binxml.schema import SchemaVersion
from .commands import encode as cmd_encode, inspect as cmd_inspect


def entrypoint():
    sys.exit(main())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Binary XML vector drawable builder")
    sub = parser.add_subparsers(dest="command", required=True)

    e = sub.add_parser("encode", help="Encode a drawable spec (.json) or SVG into binary XML")
    e.add_argument("source", type=str, help="Drawable spec JSON file or SVG file")
    e.add_argument(
        "--out",
        type=str,
        default=None,
        help="Output file (defaults to <source>.bin next to the source)",
    )
    e.add_argument(
        "--schema",
        type=str,
        default=None,
        choices=[v.value for v in SchemaVersion],
        help="Schema version (overrides the spec file; default for SVG: modern)",
    )
    e.add_argument("--width", type=int, default=24, help="SVG only: drawable width in dp")
    e.add_argument("--height", type=int, default=24, help="SVG only: drawable height in dp")
    e.add_argument(
        "--color",
        type=str,
        default="#FF000000",
        help="SVG only: fill for shapes without a hex fill",
    )
    e.add_argument("--stroke", action="store_true", help="SVG only: stroke every path")
    e.add_argument(
        "--stroke-width", type=float, default=None, help="SVG only: stroke width"
    )
    e.add_argument(
        "--dump", action="store_true", help="Print the decoded element tree after encoding"
    )
    e.add_argument(
        "--dry-run", action="store_true", help="Encode and report without writing files"
    )

    i = sub.add_parser("inspect", help="Print the element tree of a binary XML document")
    i.add_argument("document", type=str, help="Binary XML file")
    i.add_argument(
        "--strings", action="store_true", help="Also list the string pool with offsets"
    )

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "encode":
        return cmd_encode.run(args)
    elif args.command == "inspect":
        return cmd_inspect.run(args)
    return 2


if __name__ == "__main__":
    entrypoint()
