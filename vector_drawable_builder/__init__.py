"""Build Android binary-XML vector drawables from path data."""

from .core.binxml import (
    PathSpec,
    SchemaVersion,
    encode_vector_document,
)

__version__ = "0.1.0"

__all__ = [
    "PathSpec",
    "SchemaVersion",
    "encode_vector_document",
    "__version__",
]
