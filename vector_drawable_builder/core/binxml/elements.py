"""
Element Encoder - Writes the element chunks of a binary XML tree

Start tag chunk (36 bytes + 20 per attribute):
  type, header size (16), chunk size (patched on close)
  line number, comment (-1)
  namespace (-1), name
  attribute start (0x14), attribute size (0x14), attribute count
  id / class / style attribute indices (0)
  attribute records

Namespace and end tag chunks have a fixed size of 24 bytes.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .byte_sink import ByteSink, Reservation
from .constants import (
    ATTRIBUTE_START,
    ATTRIBUTE_STRIDE,
    CHUNK_TYPE_END_NAMESPACE,
    CHUNK_TYPE_END_TAG,
    CHUNK_TYPE_START_NAMESPACE,
    CHUNK_TYPE_START_TAG,
    END_TAG_CHUNK_SIZE,
    NAMESPACE_CHUNK_SIZE,
    NODE_HEADER_SIZE,
    NO_INDEX,
    VALUE_TYPE_STRING,
)
from .errors import AttributeCountMismatch, EncoderStateError, EncodingOverflow
from .string_pool import StringPool
from .values import TypedValue, ValueEncoder


@dataclass
class TagHandle:
    """An open start tag waiting for its attributes and size patch."""

    name_index: int
    chunk_start: int
    size_field: Reservation
    attribute_count: int
    attributes_written: int = 0

    @property
    def remaining(self) -> int:
        return self.attribute_count - self.attributes_written


class ElementEncoder:
    """Streams element chunks into a sink.

    Only one start tag may be open at a time: its attributes sit directly
    after its header, so nothing else can be written until it is closed.
    """

    def __init__(self, sink: ByteSink, pool: StringPool):
        self.sink = sink
        self.pool = pool
        self._open: Optional[TagHandle] = None

    @property
    def open_tag_handle(self) -> Optional[TagHandle]:
        return self._open

    def _ensure_idle(self, action: str) -> None:
        if self._open is not None:
            raise EncoderStateError(
                f"Cannot {action} while start tag {self._open.name_index} is open "
                f"({self._open.remaining} attribute(s) remaining)"
            )

    def _string_index(self, index: int) -> int:
        return self.pool.check_index(index)

    def _optional_index(self, index: int) -> int:
        if index == NO_INDEX:
            return NO_INDEX
        return self.pool.check_index(index)

    def _write_namespace(self, chunk_type: int, prefix_index: int, uri_index: int, line_number: int) -> None:
        self._ensure_idle("write a namespace chunk")
        prefix_index = self._string_index(prefix_index)
        uri_index = self._string_index(uri_index)
        sink = self.sink
        sink.put_u16(chunk_type)
        sink.put_u16(NODE_HEADER_SIZE)
        sink.put_u32(NAMESPACE_CHUNK_SIZE)
        sink.put_u32(line_number)
        sink.put_i32(NO_INDEX)  # Comment: none
        sink.put_u32(prefix_index)
        sink.put_u32(uri_index)

    def open_namespace(self, prefix_index: int, uri_index: int, line_number: int = 0) -> None:
        self._write_namespace(CHUNK_TYPE_START_NAMESPACE, prefix_index, uri_index, line_number)

    def close_namespace(self, prefix_index: int, uri_index: int, line_number: int = 0) -> None:
        self._write_namespace(CHUNK_TYPE_END_NAMESPACE, prefix_index, uri_index, line_number)

    def open_tag(self, name_index: int, attribute_count: int, line_number: int = 0) -> TagHandle:
        """
        Write a start tag header and reserve its size field.

        Args:
            name_index: Pool index of the tag name
            attribute_count: Number of write_attribute() calls that must follow
            line_number: Source line number recorded in the chunk

        Returns:
            Handle to pass to close_tag()
        """
        self._ensure_idle("open a start tag")
        name_index = self._string_index(name_index)
        if not 0 <= attribute_count <= 0xFFFF:
            raise EncodingOverflow(f"Attribute count {attribute_count} does not fit in u16")

        sink = self.sink
        chunk_start = sink.current_offset()
        sink.put_u16(CHUNK_TYPE_START_TAG)
        sink.put_u16(NODE_HEADER_SIZE)
        size_field = sink.reserve_u32()
        sink.put_u32(line_number)
        sink.put_i32(NO_INDEX)  # Comment: none

        sink.put_i32(NO_INDEX)  # Namespace: none
        sink.put_u32(name_index)
        sink.put_u16(ATTRIBUTE_START)
        sink.put_u16(ATTRIBUTE_STRIDE)
        sink.put_u16(attribute_count)
        sink.put_u16(0)  # ID attr: none
        sink.put_u16(0)  # Class attr: none
        sink.put_u16(0)  # Style attr: none

        self._open = TagHandle(
            name_index=name_index,
            chunk_start=chunk_start,
            size_field=size_field,
            attribute_count=attribute_count,
        )
        return self._open

    def write_attribute(
        self,
        namespace_index: int,
        name_index: int,
        raw_value_index: int,
        value: TypedValue,
    ) -> None:
        handle = self._open
        if handle is None:
            raise AttributeCountMismatch("Attribute written with no open start tag")
        if handle.remaining <= 0:
            raise AttributeCountMismatch(
                f"Start tag {handle.name_index} declared {handle.attribute_count} "
                f"attribute(s) but another was written",
                declared=handle.attribute_count,
                written=handle.attributes_written + 1,
            )

        namespace_index = self._optional_index(namespace_index)
        name_index = self._string_index(name_index)
        raw_value_index = self._optional_index(raw_value_index)
        if value.value_type == VALUE_TYPE_STRING:
            self._string_index(value.data)

        sink = self.sink
        sink.put_i32(namespace_index)
        sink.put_u32(name_index)
        sink.put_i32(raw_value_index)
        ValueEncoder.write(sink, value)
        handle.attributes_written += 1

    def close_tag(self, handle: TagHandle) -> int:
        """Patch the start tag's size field. Returns the chunk size."""
        if handle is not self._open:
            raise EncoderStateError(f"Start tag {handle.name_index} is not the open tag")
        if handle.remaining != 0:
            raise AttributeCountMismatch(
                f"Start tag {handle.name_index} declared {handle.attribute_count} "
                f"attribute(s) but {handle.attributes_written} were written",
                declared=handle.attribute_count,
                written=handle.attributes_written,
            )
        size = self.sink.current_offset() - handle.chunk_start
        self.sink.patch_u32(handle.size_field, size)
        self._open = None
        return size

    def end_tag(self, name_index: int, line_number: int = 0) -> None:
        self._ensure_idle("write an end tag")
        name_index = self._string_index(name_index)
        sink = self.sink
        sink.put_u16(CHUNK_TYPE_END_TAG)
        sink.put_u16(NODE_HEADER_SIZE)
        sink.put_u32(END_TAG_CHUNK_SIZE)
        sink.put_u32(line_number)
        sink.put_i32(NO_INDEX)  # Comment: none
        sink.put_i32(NO_INDEX)  # Namespace: none
        sink.put_u32(name_index)
