#!/usr/bin/env python3
"""
Encode a small two-path icon and print its element tree.

Usage:
    python encode_icon.py --out check.bin --schema legacy
"""
import argparse
from pathlib import Path

from vector_drawable_builder import PathSpec, encode_vector_document
from vector_drawable_builder.core.binxml.reader import format_document, parse_document
from vector_drawable_builder.core.logger import get_logger

log = get_logger(__name__)

CHECK_MARK = PathSpec("M9 16.2L4.8 12l-1.4 1.4L9 19 21 7l-1.4-1.4L9 16.2z", 0xFF2E7D32)
FRAME = PathSpec("M3 3h18v18H3z", 0x332E7D32, stroke_color=0xFF1B5E20)


def main() -> None:
    parser = argparse.ArgumentParser(description="Encode a sample check-mark icon")
    parser.add_argument("--out", type=str, default="check.bin")
    parser.add_argument("--schema", type=str, default="modern")
    parser.add_argument("--stroke", action="store_true")
    args = parser.parse_args()

    data = encode_vector_document(
        24, 24, 24.0, 24.0, args.stroke, 0.0, 0.0, [FRAME, CHECK_MARK], args.schema
    )
    out = Path(args.out)
    out.write_bytes(data)
    log.info(f"Wrote {len(data)} bytes to {out}")
    print(format_document(parse_document(data)))


if __name__ == "__main__":
    main()
