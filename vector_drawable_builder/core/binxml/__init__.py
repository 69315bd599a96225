"""
Binary XML vector drawable encoding.

Builds the compact chunked document format the Android resource parser
reads: a string pool, a resource map and a vector/group/path element tree.
"""

from .byte_sink import ByteSink, Reservation
from .document import DocumentBuilder, PathSpec, encode_vector_document
from .elements import ElementEncoder, TagHandle
from .errors import (
    AttributeCountMismatch,
    BinaryXmlError,
    DocumentFormatError,
    EncoderStateError,
    EncodingOverflow,
    InvalidStringEncoding,
    MaterializationFailed,
    ReservationError,
    UnknownSchemaVariant,
    UnresolvedStringIndex,
)
from .reader import BinaryXmlDocument, XmlAttribute, XmlEvent, format_document, parse_document
from .schema import SchemaProfile, SchemaVersion, get_schema
from .string_pool import StringPool, StringPoolEntry
from .values import TypedValue, ValueEncoder, ValueKind

__all__ = [
    "AttributeCountMismatch",
    "BinaryXmlDocument",
    "BinaryXmlError",
    "ByteSink",
    "DocumentBuilder",
    "DocumentFormatError",
    "ElementEncoder",
    "EncoderStateError",
    "EncodingOverflow",
    "InvalidStringEncoding",
    "MaterializationFailed",
    "PathSpec",
    "Reservation",
    "ReservationError",
    "SchemaProfile",
    "SchemaVersion",
    "StringPool",
    "StringPoolEntry",
    "TagHandle",
    "TypedValue",
    "UnknownSchemaVariant",
    "UnresolvedStringIndex",
    "ValueEncoder",
    "ValueKind",
    "XmlAttribute",
    "XmlEvent",
    "encode_vector_document",
    "format_document",
    "get_schema",
    "parse_document",
]
