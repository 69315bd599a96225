"""Print the contents of a binary XML document"""
from __future__ import annotations
from pathlib import Path

from ...core.binxml.errors import DocumentFormatError
from ...core.binxml.reader import format_document, parse_document
from ...core.logger import get_logger

log = get_logger(__name__)


def run(args) -> int:
    path = Path(args.document)
    if not path.exists():
        log.error(f"Document not found: {path}")
        return 1

    try:
        doc = parse_document(path.read_bytes())
    except DocumentFormatError as e:
        log.error(f"{path.name} is not a valid binary XML document: {e}")
        return 1

    if args.strings:
        print(f"String pool ({len(doc.strings)} strings, {doc.pool_size} bytes):")
        for i, (value, offset) in enumerate(zip(doc.strings, doc.string_offsets)):
            print(f"  [{i}] @{offset}: {value}")
        print(f"Resource map: {', '.join(f'0x{r:08x}' for r in doc.resource_ids)}")

    print(format_document(doc))
    return 0
