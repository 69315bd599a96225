"""Exceptions raised while building or reading binary XML documents.

Every error here is detected while the document is being assembled, before
any bytes are handed back. None of them are worth retrying: the encoder is
deterministic, so the same input fails the same way.
"""

from __future__ import annotations


class BinaryXmlError(Exception):
    """Base class for all binary XML errors."""


class EncodingOverflow(BinaryXmlError):
    """A value does not fit the field it is written to, or the buffer could not grow."""


class AttributeCountMismatch(BinaryXmlError):
    """A start tag received a different number of attributes than it declared."""

    def __init__(self, msg: str, declared: int = 0, written: int = 0) -> None:
        super().__init__(msg)
        self.declared = declared
        self.written = written


class UnresolvedStringIndex(BinaryXmlError):
    """An attribute or tag references an index outside the string pool."""

    def __init__(self, index: int, pool_size: int) -> None:
        super().__init__(
            f"String index {index} is outside the pool (size {pool_size})"
        )
        self.index = index
        self.pool_size = pool_size


class InvalidStringEncoding(BinaryXmlError):
    """A string pool entry is not valid UTF-8."""

    def __init__(self, index: int, reason: str) -> None:
        super().__init__(f"String {index} is not valid UTF-8: {reason}")
        self.index = index


class UnknownSchemaVariant(BinaryXmlError, ValueError):
    """The requested schema version is not one we can encode."""


class EncoderStateError(BinaryXmlError):
    """A chunk was started while a start tag was still collecting attributes."""


class ReservationError(BinaryXmlError):
    """A reserved size field was patched twice, never, or was never reserved."""


class DocumentFormatError(BinaryXmlError):
    """Binary data does not decode as a well-formed document."""


class MaterializationFailed(BinaryXmlError):
    """The platform collaborator could not turn the document into a drawable."""
