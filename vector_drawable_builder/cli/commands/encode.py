"""Encode a drawable spec or SVG file into a binary XML document"""
from __future__ import annotations
from pathlib import Path

from pydantic import ValidationError

from ...core.binxml.errors import BinaryXmlError
from ...core.binxml.reader import format_document, parse_document
from ...core.binxml.schema import SchemaVersion
from ...core.config import DrawableSpecModel, load_drawable_spec, parse_color
from ...core.logger import get_logger
from ...core.svg_import import read_svg_canvas, read_svg_paths

log = get_logger(__name__)


def _spec_from_svg(args, svg_path: Path) -> DrawableSpecModel:
    canvas = read_svg_canvas(svg_path)
    if canvas is None:
        log.warning(f"No viewBox or size in {svg_path.name}; using {args.width}x{args.height}")
        canvas = (float(args.width), float(args.height))

    paths = read_svg_paths(svg_path, default_color=parse_color(args.color))
    data = {
        "width": args.width,
        "height": args.height,
        "viewport_width": canvas[0],
        "viewport_height": canvas[1],
        "stroke": args.stroke,
        "paths": [
            {"path_data": p.path_data, "fill_color": p.fill_color, "stroke_color": p.stroke_color}
            for p in paths
        ],
    }
    if args.stroke_width is not None:
        data["stroke_width"] = args.stroke_width
    return DrawableSpecModel.model_validate(data)


def run(args) -> int:
    """
    Encode a drawable.

    Args:
        args: Command-line arguments with:
            - source: .json drawable spec or .svg file
            - out: Output path (optional)
            - schema: Schema version override (optional)
            - dump: Print the decoded tree
            - dry_run: Do not write the output file
    """
    source = Path(args.source).resolve()
    if not source.exists():
        log.error(f"Source not found: {source}")
        return 1

    try:
        if source.suffix.lower() == ".svg":
            spec = _spec_from_svg(args, source)
        else:
            spec = load_drawable_spec(source)
    except (ValidationError, ValueError) as e:
        log.error(f"Invalid drawable spec {source.name}: {e}")
        return 1

    if args.schema:
        spec = spec.model_copy(update={"schema_version": SchemaVersion(args.schema)})

    if not spec.paths:
        log.warning(f"{source.name} has no paths; encoding an empty vector")

    try:
        data = spec.encode()
    except BinaryXmlError as e:
        log.error(f"Failed to encode {source.name}: {e}")
        return 1

    log.info(
        f"Encoded {source.name}: {len(spec.paths)} path(s), "
        f"schema {spec.schema_version.value}, {len(data)} bytes"
    )

    if args.dump:
        print(format_document(parse_document(data)))

    out = Path(args.out) if args.out else source.with_suffix(".bin")
    if args.dry_run:
        log.info(f"[DRY-RUN] Would write {out}")
        return 0

    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(data)
    log.info(f"Wrote {out}")
    return 0
