"""Hand encoded documents to the platform that turns them into drawables.

The platform side (loading its binary XML parser and inflating a drawable
from it) is not implemented here. Callers supply a Materializer.
"""

from __future__ import annotations
from typing import Any, Iterable, Protocol, Union

from .binxml.constants import DEFAULT_STROKE_WIDTH
from .binxml.document import PathSpec, encode_vector_document
from .binxml.errors import MaterializationFailed
from .binxml.schema import SchemaProfile, SchemaVersion
from .logger import get_logger

log = get_logger(__name__)


class Materializer(Protocol):
    def parse_and_materialize(self, data: bytes) -> Any:
        """Parse a binary XML document and return a drawable handle."""


def materialize(materializer: Materializer, data: bytes) -> Any:
    """
    Pass a document to the materializer.

    Any failure on the platform side is reported as MaterializationFailed
    with the original exception chained, without interpretation.
    """
    try:
        return materializer.parse_and_materialize(data)
    except Exception as e:
        log.error(f"Vector creation failed: {e}")
        raise MaterializationFailed(f"Vector creation failed: {e}") from e


def create_drawable(
    materializer: Materializer,
    width: int,
    height: int,
    viewport_width: float,
    viewport_height: float,
    paths: Iterable[PathSpec],
    *,
    stroke_enabled: bool = False,
    translate_x: float = 0.0,
    translate_y: float = 0.0,
    schema_version: Union[SchemaVersion, str, SchemaProfile] = SchemaVersion.MODERN,
    stroke_width: float = DEFAULT_STROKE_WIDTH,
) -> Any:
    """
    Encode a vector drawable and materialize it.

    Encoding errors propagate unchanged; only the materializer's own
    failures are wrapped in MaterializationFailed.
    """
    data = encode_vector_document(
        width,
        height,
        viewport_width,
        viewport_height,
        stroke_enabled,
        translate_x,
        translate_y,
        paths,
        schema_version,
        stroke_width=stroke_width,
    )
    log.debug(f"Materializing {len(data)} byte vector document")
    return materialize(materializer, data)
