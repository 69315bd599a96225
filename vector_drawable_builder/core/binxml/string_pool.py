"""
String Pool - Ordered UTF-8 string table for binary XML documents

Layout (all little-endian):
  chunk header (28 bytes): type, header size, chunk size, string count,
                           style count, flags, strings start, styles start
  offsets table (4 bytes per string)
  strings: length prefix, UTF-8 bytes, null terminator
  zero padding to a 4-byte boundary

Reference:
  https://justanapplication.wordpress.com/2011/09/15/android-internals-resources-part-four-the-stringpool-chunk/
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Union

from ..logger import get_logger
from .byte_sink import ByteSink
from .constants import (
    CHUNK_TYPE_STR_POOL,
    LONG_LENGTH_FLAG,
    LONG_LENGTH_MAX,
    SHORT_LENGTH_MAX,
    STR_POOL_HEADER_SIZE,
    STR_POOL_UTF8_FLAG,
)
from .errors import EncodingOverflow, InvalidStringEncoding, UnresolvedStringIndex

log = get_logger(__name__)

StringLike = Union[str, bytes]


def _to_bytes(value: StringLike) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def length_prefix(length: int) -> bytes:
    """
    Encode a string length the way UTF-8 pools store it.

    The length is written twice. Lengths up to 127 take one byte each;
    longer ones take two bytes each, big-endian, with the top bit of the
    first byte set.

    Args:
        length: Content length in bytes

    Returns:
        2 or 4 byte prefix
    """
    if length < 0:
        raise EncodingOverflow(f"Negative string length {length}")
    if length <= SHORT_LENGTH_MAX:
        return bytes((length, length))
    if length > LONG_LENGTH_MAX:
        raise EncodingOverflow(
            f"String of {length} bytes exceeds the pool limit of {LONG_LENGTH_MAX}"
        )
    high = ((length & 0xFF00) | LONG_LENGTH_FLAG) >> 8
    low = length & 0xFF
    return bytes((high, low, high, low))


def encoded_length(length: int) -> int:
    """Bytes an entry of the given content length occupies in the strings region."""
    prefix = 2 if length <= SHORT_LENGTH_MAX else 4
    return length + prefix + 1


@dataclass(frozen=True)
class StringPoolEntry:
    index: int
    data: bytes

    @property
    def length(self) -> int:
        return len(self.data)

    @property
    def encoded_length(self) -> int:
        return encoded_length(len(self.data))


class StringPool:
    """Fixed vocabulary followed by one entry per path, in path order.

    Path strings are never deduplicated: two paths with identical data
    still get two entries, so path i always lives at vocabulary_size + i.
    """

    def __init__(self, entries: Sequence[StringPoolEntry], vocabulary_size: int):
        self.entries: List[StringPoolEntry] = list(entries)
        self.vocabulary_size = vocabulary_size

    @classmethod
    def build(
        cls,
        fixed_vocabulary: Iterable[StringLike],
        per_path_strings: Iterable[StringLike] = (),
    ) -> "StringPool":
        vocabulary = [_to_bytes(s) for s in fixed_vocabulary]
        paths = [_to_bytes(s) for s in per_path_strings]
        entries = [
            StringPoolEntry(index=i, data=data)
            for i, data in enumerate(vocabulary + paths)
        ]
        # Fail before anything is emitted if an entry cannot be stored
        for entry in entries:
            try:
                entry.data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise InvalidStringEncoding(entry.index, str(e)) from e
            length_prefix(entry.length)
        return cls(entries, vocabulary_size=len(vocabulary))

    @property
    def count(self) -> int:
        return len(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> bytes:
        return self.entries[self.check_index(index)].data

    def check_index(self, index: int) -> int:
        if not 0 <= index < len(self.entries):
            raise UnresolvedStringIndex(index, len(self.entries))
        return index

    def index_of(self, value: StringLike) -> int:
        """Index of a vocabulary string (path entries are not searched)."""
        data = _to_bytes(value)
        for entry in self.entries[: self.vocabulary_size]:
            if entry.data == data:
                return entry.index
        raise KeyError(f"{data!r} is not in the pool vocabulary")

    def path_index(self, path_number: int) -> int:
        """Pool index assigned to the path-data string of path number path_number."""
        index = self.vocabulary_size + path_number
        if path_number < 0 or index >= len(self.entries):
            raise UnresolvedStringIndex(index, len(self.entries))
        return index

    def encoded_length(self, index: int) -> int:
        return self.entries[self.check_index(index)].encoded_length

    @property
    def offsets(self) -> List[int]:
        """Offset of each entry relative to the start of the strings region."""
        result = []
        offset = 0
        for entry in self.entries:
            result.append(offset)
            offset += entry.encoded_length
        return result

    @property
    def strings_start(self) -> int:
        return STR_POOL_HEADER_SIZE + 4 * len(self.entries)

    @property
    def strings_size(self) -> int:
        return sum(entry.encoded_length for entry in self.entries)

    @property
    def chunk_size(self) -> int:
        """Total chunk size including trailing alignment padding."""
        size = self.strings_start + self.strings_size
        return size + (-size) % 4

    def emit(self, sink: ByteSink) -> int:
        """
        Write the string pool chunk.

        Args:
            sink: Destination buffer

        Returns:
            Number of bytes written
        """
        chunk_start = sink.current_offset()

        # 1. Header
        sink.put_u16(CHUNK_TYPE_STR_POOL)
        sink.put_u16(STR_POOL_HEADER_SIZE)
        size_field = sink.reserve_u32()
        sink.put_u32(len(self.entries))  # String count
        sink.put_u32(0)  # Style count
        sink.put_u32(STR_POOL_UTF8_FLAG)
        strings_start_field = sink.reserve_u32()
        sink.put_u32(0)  # Styles start

        # 2. Offsets table
        for offset in self.offsets:
            sink.put_u32(offset)

        sink.patch_u32(strings_start_field, sink.current_offset() - chunk_start)

        # 3. Strings
        for entry in self.entries:
            sink.put_bytes(length_prefix(entry.length))
            sink.put_bytes(entry.data)
            sink.put_u8(0)

        # 4. Align on 32-bit
        padding = sink.pad_to(4)

        written = sink.current_offset() - chunk_start
        sink.patch_u32(size_field, written)
        log.debug(
            f"String pool: {len(self.entries)} strings, {written} bytes "
            f"({padding} padding)"
        )
        return written
