"""
Typed attribute values (Res_value).

Each value is 8 bytes: size (u16, always 8), value type (u16: a zero
reserved byte then the data type byte) and 32 bits of data.

Reference:
  https://justanapplication.wordpress.com/2011/09/19/android-internals-resources-part-eight-resource-entries-and-values/#struct_Res_value
"""

from __future__ import annotations
import struct
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from .byte_sink import ByteSink
from .constants import (
    COMPLEX_UNIT_DIP,
    DIMENSION_MAX,
    DIMENSION_MIN,
    VALUE_SIZE,
    VALUE_TYPE_DIMENSION,
    VALUE_TYPE_FLOAT,
    VALUE_TYPE_STRING,
)
from .errors import EncodingOverflow
from .schema import SchemaProfile, SchemaVersion, get_schema


def float_bits(value: float) -> int:
    """Raw IEEE-754 single precision bit pattern of value."""
    try:
        return struct.unpack("<I", struct.pack("<f", value))[0]
    except OverflowError as e:
        raise EncodingOverflow(f"{value} does not fit in a 32-bit float") from e


def bits_to_float(bits: int) -> float:
    return struct.unpack("<f", struct.pack("<I", bits & 0xFFFFFFFF))[0]


def pack_dimension(magnitude: int, unit: int = COMPLEX_UNIT_DIP) -> int:
    """Pack an integer dimension as (magnitude << 8) | unit, as an unsigned 32-bit value."""
    if not DIMENSION_MIN <= magnitude <= DIMENSION_MAX:
        raise EncodingOverflow(
            f"Dimension {magnitude} is outside the 24-bit range "
            f"[{DIMENSION_MIN}, {DIMENSION_MAX}]"
        )
    if not 0 <= unit <= 0xFF:
        raise EncodingOverflow(f"Dimension unit {unit} does not fit in a byte")
    return ((magnitude << 8) | unit) & 0xFFFFFFFF


def unpack_dimension(data: int) -> tuple:
    """Split dimension data back into (magnitude, unit)."""
    signed = data - 0x100000000 if data & 0x80000000 else data
    return signed >> 8, data & 0xFF


@dataclass(frozen=True)
class TypedValue:
    value_type: int
    data: int

    def to_bytes(self) -> bytes:
        return struct.pack("<HHI", VALUE_SIZE, self.value_type, self.data & 0xFFFFFFFF)

    @classmethod
    def dimension(cls, magnitude: int, unit: int = COMPLEX_UNIT_DIP) -> "TypedValue":
        return cls(VALUE_TYPE_DIMENSION, pack_dimension(int(magnitude), unit))

    @classmethod
    def float32(cls, value: float) -> "TypedValue":
        return cls(VALUE_TYPE_FLOAT, float_bits(value))

    @classmethod
    def color(cls, argb: int, value_type: int) -> "TypedValue":
        if not 0 <= argb <= 0xFFFFFFFF:
            raise EncodingOverflow(f"Color {argb:#x} is not a 32-bit ARGB value")
        return cls(value_type, argb)

    @classmethod
    def string_ref(cls, pool_index: int) -> "TypedValue":
        if not 0 <= pool_index <= 0xFFFFFFFF:
            raise EncodingOverflow(f"String index {pool_index} does not fit in u32")
        return cls(VALUE_TYPE_STRING, pool_index)


class ValueKind(str, Enum):
    DIMENSION = "dimension"
    FLOAT = "float"
    FILL_COLOR = "fill_color"
    STROKE_COLOR = "stroke_color"
    STRING = "string"


class ValueEncoder:
    """Builds typed values; color tags come from the schema profile."""

    def __init__(self, schema: Union[SchemaProfile, SchemaVersion, str] = SchemaVersion.MODERN):
        self.schema = get_schema(schema)

    def fill_color(self, argb: int) -> TypedValue:
        return TypedValue.color(argb, self.schema.fill_color_type)

    def stroke_color(self, argb: int) -> TypedValue:
        return TypedValue.color(argb, self.schema.stroke_color_type)

    def value(self, kind: Union[ValueKind, str], payload: Any) -> TypedValue:
        kind = ValueKind(kind)
        if kind is ValueKind.DIMENSION:
            return TypedValue.dimension(payload)
        if kind is ValueKind.FLOAT:
            return TypedValue.float32(payload)
        if kind is ValueKind.FILL_COLOR:
            return self.fill_color(payload)
        if kind is ValueKind.STROKE_COLOR:
            return self.stroke_color(payload)
        return TypedValue.string_ref(payload)

    def encode(self, kind: Union[ValueKind, str], payload: Any) -> bytes:
        """Encode payload as an 8-byte typed value of the given kind."""
        return self.value(kind, payload).to_bytes()

    @staticmethod
    def write(sink: ByteSink, value: TypedValue) -> None:
        sink.put_u16(VALUE_SIZE)
        sink.put_u16(value.value_type)
        sink.put_u32(value.data & 0xFFFFFFFF)
