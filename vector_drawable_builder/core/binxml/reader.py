"""
Binary XML reader.

Decodes documents produced by DocumentBuilder back into strings, resource
ids and a flat list of element events, checking every chunk size on the
way. Used by the inspect command and to verify encoder output.
"""

from __future__ import annotations
import struct
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .constants import (
    ATTRIBUTE_STRIDE,
    CHUNK_TYPE_END_NAMESPACE,
    CHUNK_TYPE_END_TAG,
    CHUNK_TYPE_RES_MAP,
    CHUNK_TYPE_START_NAMESPACE,
    CHUNK_TYPE_START_TAG,
    CHUNK_TYPE_STR_POOL,
    CHUNK_TYPE_XML,
    DIMENSION_UNIT_NAMES,
    END_TAG_CHUNK_SIZE,
    NAMESPACE_CHUNK_SIZE,
    NO_INDEX,
    START_TAG_MIN_SIZE,
    STR_POOL_HEADER_SIZE,
    STR_POOL_UTF8_FLAG,
    VALUE_TYPE_COLOR_ARGB8,
    VALUE_TYPE_COLOR_RGB4,
    VALUE_TYPE_COLOR_RGB8,
    VALUE_TYPE_DIMENSION,
    VALUE_TYPE_FLOAT,
    VALUE_TYPE_STRING,
)
from .errors import DocumentFormatError
from .values import bits_to_float, unpack_dimension

COLOR_VALUE_TYPES = {VALUE_TYPE_COLOR_ARGB8, VALUE_TYPE_COLOR_RGB8, VALUE_TYPE_COLOR_RGB4}

START_NAMESPACE = "start_namespace"
END_NAMESPACE = "end_namespace"
START_TAG = "start_tag"
END_TAG = "end_tag"


@dataclass
class XmlAttribute:
    namespace: Optional[str]
    name: str
    raw_value: Optional[str]
    raw_value_index: int
    value_type: int
    data: int

    @property
    def value(self) -> Any:
        """Decoded value: (magnitude, unit) for dimensions, float, int color or str."""
        if self.value_type == VALUE_TYPE_DIMENSION:
            return unpack_dimension(self.data)
        if self.value_type == VALUE_TYPE_FLOAT:
            return bits_to_float(self.data)
        if self.value_type == VALUE_TYPE_STRING:
            return self.raw_value
        return self.data

    def format_value(self) -> str:
        """Render the value the way the platform parser prints attribute values."""
        if self.value_type == VALUE_TYPE_DIMENSION:
            magnitude, unit = unpack_dimension(self.data)
            return f"{float(magnitude)}{DIMENSION_UNIT_NAMES.get(unit, '')}"
        if self.value_type == VALUE_TYPE_FLOAT:
            return repr(bits_to_float(self.data))
        if self.value_type in COLOR_VALUE_TYPES:
            return f"#{self.data:08x}"
        if self.value_type == VALUE_TYPE_STRING:
            return self.raw_value or ""
        return f"0x{self.data:08x}"


@dataclass
class XmlEvent:
    kind: str
    name: Optional[str]
    line: int
    offset: int
    size: int
    attributes: List[XmlAttribute] = field(default_factory=list)
    prefix: Optional[str] = None
    uri: Optional[str] = None

    def attribute(self, name: str) -> Optional[XmlAttribute]:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None


@dataclass
class BinaryXmlDocument:
    size: int
    strings: List[str]
    string_offsets: List[int]
    strings_start: int
    pool_size: int
    resource_ids: List[int]
    events: List[XmlEvent]

    @property
    def tag_sequence(self) -> List[str]:
        """Tag names in document order, end tags prefixed with '/'."""
        result = []
        for event in self.events:
            if event.kind == START_TAG:
                result.append(event.name)
            elif event.kind == END_TAG:
                result.append(f"/{event.name}")
        return result

    def start_tags(self, name: Optional[str] = None) -> List[XmlEvent]:
        return [
            e for e in self.events
            if e.kind == START_TAG and (name is None or e.name == name)
        ]


def _read_pool_length(data: bytes, pos: int, utf8: bool):
    if utf8:
        first = data[pos]
        if first & 0x80:
            return ((first & 0x7F) << 8) | data[pos + 1], pos + 2
        return first, pos + 1
    first = struct.unpack_from("<H", data, pos)[0]
    if first & 0x8000:
        second = struct.unpack_from("<H", data, pos + 2)[0]
        return ((first & 0x7FFF) << 16) | second, pos + 4
    return first, pos + 2


def _parse_string_pool(data: bytes, start: int, header_size: int, size: int):
    count, style_count, flags, strings_start, _styles_start = struct.unpack_from(
        "<IIIII", data, start + 8
    )
    if style_count:
        raise DocumentFormatError("Styled string pools are not supported")
    if header_size + 4 * count > strings_start or strings_start > size:
        raise DocumentFormatError(
            f"String pool strings start {strings_start} is inconsistent with "
            f"{count} offsets and chunk size {size}"
        )
    offsets = list(struct.unpack_from(f"<{count}I", data, start + header_size))
    utf8 = bool(flags & STR_POOL_UTF8_FLAG)

    strings = []
    for i, offset in enumerate(offsets):
        pos = start + strings_start + offset
        try:
            if utf8:
                _chars, pos = _read_pool_length(data, pos, True)
                length, pos = _read_pool_length(data, pos, True)
                end = pos + length
                raw = data[pos:end]
                terminator = data[end:end + 1]
            else:
                length, pos = _read_pool_length(data, pos, False)
                end = pos + 2 * length
                raw = data[pos:end]
                terminator = data[end:end + 2]
        except (IndexError, struct.error) as e:
            raise DocumentFormatError(f"String {i} runs past the end of the data") from e
        if end >= start + size or terminator.strip(b"\x00"):
            raise DocumentFormatError(f"String {i} at offset {offset} is not terminated")
        try:
            strings.append(raw.decode("utf-8" if utf8 else "utf-16-le"))
        except UnicodeDecodeError as e:
            raise DocumentFormatError(f"String {i} at offset {offset} does not decode: {e}") from e
    return strings, offsets, strings_start


def _require_size(chunk_type: int, pos: int, size: int, minimum: int) -> None:
    if size < minimum:
        raise DocumentFormatError(
            f"Chunk 0x{chunk_type:04x} at offset {pos} is {size} bytes, "
            f"shorter than its {minimum}-byte fixed layout"
        )


def parse_document(data: bytes) -> BinaryXmlDocument:
    """
    Decode a binary XML document.

    Args:
        data: Complete document bytes

    Returns:
        Decoded document

    Raises:
        DocumentFormatError: on truncated data, bad chunk sizes, unknown
            chunk types or unbalanced tags
    """
    if len(data) < 8:
        raise DocumentFormatError(f"Document too short: {len(data)} bytes")
    doc_type, doc_header_size, doc_size = struct.unpack_from("<HHI", data, 0)
    if doc_type != CHUNK_TYPE_XML:
        raise DocumentFormatError(f"Not an XML chunk: type 0x{doc_type:04x}")
    if doc_size != len(data):
        raise DocumentFormatError(
            f"Document size field {doc_size} does not match data length {len(data)}"
        )

    strings: List[str] = []
    offsets: List[int] = []
    strings_start = 0
    pool_size = 0
    resource_ids: List[int] = []
    events: List[XmlEvent] = []
    stack: List[str] = []

    def string_at(index: int) -> Optional[str]:
        if index == NO_INDEX:
            return None
        if not 0 <= index < len(strings):
            raise DocumentFormatError(
                f"String index {index} outside pool of {len(strings)} strings"
            )
        return strings[index]

    pos = doc_header_size
    while pos < doc_size:
        if pos + 8 > doc_size:
            raise DocumentFormatError(f"Truncated chunk header at offset {pos}")
        chunk_type, header_size, size = struct.unpack_from("<HHI", data, pos)
        if size < header_size or size < 8 or pos + size > doc_size:
            raise DocumentFormatError(
                f"Chunk 0x{chunk_type:04x} at offset {pos} has invalid size {size}"
            )

        if chunk_type == CHUNK_TYPE_STR_POOL:
            _require_size(chunk_type, pos, size, STR_POOL_HEADER_SIZE)
            strings, offsets, strings_start = _parse_string_pool(data, pos, header_size, size)
            pool_size = size

        elif chunk_type == CHUNK_TYPE_RES_MAP:
            count = (size - header_size) // 4
            resource_ids = list(struct.unpack_from(f"<{count}I", data, pos + header_size))

        elif chunk_type in (CHUNK_TYPE_START_NAMESPACE, CHUNK_TYPE_END_NAMESPACE):
            _require_size(chunk_type, pos, size, NAMESPACE_CHUNK_SIZE)
            line, _comment, prefix, uri = struct.unpack_from("<IiiI", data, pos + 8)
            kind = START_NAMESPACE if chunk_type == CHUNK_TYPE_START_NAMESPACE else END_NAMESPACE
            events.append(
                XmlEvent(
                    kind=kind, name=None, line=line, offset=pos, size=size,
                    prefix=string_at(prefix), uri=string_at(uri),
                )
            )

        elif chunk_type == CHUNK_TYPE_START_TAG:
            _require_size(chunk_type, pos, size, START_TAG_MIN_SIZE)
            line, _comment, _ns, name = struct.unpack_from("<IiiI", data, pos + 8)
            attr_start, attr_size, attr_count = struct.unpack_from("<HHH", data, pos + 24)
            expected = header_size + attr_start + attr_count * attr_size
            if attr_count and attr_size < ATTRIBUTE_STRIDE:
                raise DocumentFormatError(
                    f"Start tag at offset {pos}: attribute records of {attr_size} bytes "
                    f"cannot hold a {ATTRIBUTE_STRIDE}-byte attribute"
                )
            if expected != size:
                raise DocumentFormatError(
                    f"Start tag at offset {pos}: size {size} but {attr_count} "
                    f"attribute(s) need {expected}"
                )
            attributes = []
            attr_pos = pos + header_size + attr_start
            for _ in range(attr_count):
                ns, attr_name, raw, _vsize, value_type, value_data = struct.unpack_from(
                    "<iIiHHI", data, attr_pos
                )
                attributes.append(
                    XmlAttribute(
                        namespace=string_at(ns),
                        name=string_at(attr_name),
                        raw_value=string_at(raw),
                        raw_value_index=raw,
                        value_type=value_type,
                        data=value_data,
                    )
                )
                attr_pos += attr_size
            tag_name = string_at(name)
            stack.append(tag_name)
            events.append(
                XmlEvent(
                    kind=START_TAG, name=tag_name, line=line, offset=pos, size=size,
                    attributes=attributes,
                )
            )

        elif chunk_type == CHUNK_TYPE_END_TAG:
            _require_size(chunk_type, pos, size, END_TAG_CHUNK_SIZE)
            line, _comment, _ns, name = struct.unpack_from("<IiiI", data, pos + 8)
            tag_name = string_at(name)
            if not stack or stack[-1] != tag_name:
                raise DocumentFormatError(
                    f"End tag {tag_name!r} at offset {pos} does not match open tag "
                    f"{stack[-1] if stack else None!r}"
                )
            stack.pop()
            events.append(XmlEvent(kind=END_TAG, name=tag_name, line=line, offset=pos, size=size))

        else:
            raise DocumentFormatError(f"Unknown chunk type 0x{chunk_type:04x} at offset {pos}")

        pos += size

    if stack:
        raise DocumentFormatError(f"Unclosed tags at end of document: {stack}")

    return BinaryXmlDocument(
        size=doc_size,
        strings=strings,
        string_offsets=offsets,
        strings_start=strings_start,
        pool_size=pool_size,
        resource_ids=resource_ids,
        events=events,
    )


def format_document(doc: BinaryXmlDocument, indent: str = "  ") -> str:
    """Render the element tree as readable text, one event per line."""
    lines = ["Start document"]
    depth = 0
    for event in doc.events:
        pad = indent * depth
        if event.kind == START_NAMESPACE:
            lines.append(f"{pad}Start namespace {event.prefix}={event.uri}")
            depth += 1
        elif event.kind == END_NAMESPACE:
            depth -= 1
            lines.append(f"{indent * depth}End namespace {event.prefix}")
        elif event.kind == START_TAG:
            lines.append(f"{pad}Start tag {event.name}")
            for attr in event.attributes:
                lines.append(f"{pad}{indent}{attr.name} : {attr.format_value()}")
            depth += 1
        elif event.kind == END_TAG:
            depth -= 1
            lines.append(f"{indent * depth}End tag {event.name}")
    lines.append("End document")
    return "\n".join(lines)
