"""
Document Builder - Assembles a complete binary XML vector drawable

Document layout:
  XML chunk header (size patched last)
  String pool chunk
  Resource map chunk
  [namespace start]
  vector start tag
    [group start tag]
      path start tag + path end tag, once per path
    [group end tag]
  vector end tag
  [namespace end]

Reference:
  https://justanapplication.wordpress.com/2011/09/22/android-internals-binary-xml-part-two-the-xml-chunk/
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Union

from ..logger import get_logger
from .byte_sink import ByteSink
from .constants import (
    CHUNK_TYPE_RES_MAP,
    CHUNK_TYPE_XML,
    DEFAULT_STROKE_WIDTH,
    NO_INDEX,
    RES_MAP_HEADER_SIZE,
    XML_HEADER_SIZE,
)
from .elements import ElementEncoder
from .errors import EncodingOverflow
from .schema import SchemaProfile, SchemaVersion, get_schema
from .string_pool import StringPool
from .values import TypedValue, ValueEncoder

log = get_logger(__name__)


def _as_argb(value: int, field: str) -> int:
    # Accept signed 32-bit colors as well (0xFF00FF00 == -16711936)
    if -0x80000000 <= value < 0:
        return value & 0xFFFFFFFF
    if not 0 <= value <= 0xFFFFFFFF:
        raise EncodingOverflow(f"{field} {value:#x} is not a 32-bit ARGB color")
    return value


@dataclass(frozen=True)
class PathSpec:
    """One path of the drawable: path data plus its colors (0xAARRGGBB)."""

    path_data: Union[str, bytes]
    fill_color: int
    stroke_color: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fill_color", _as_argb(int(self.fill_color), "fill_color"))
        if self.stroke_color is not None:
            object.__setattr__(
                self, "stroke_color", _as_argb(int(self.stroke_color), "stroke_color")
            )

    @property
    def data(self) -> bytes:
        if isinstance(self.path_data, str):
            return self.path_data.encode("utf-8")
        return bytes(self.path_data)

    @property
    def effective_stroke_color(self) -> int:
        return self.fill_color if self.stroke_color is None else self.stroke_color


class _LineNumbers:
    """Source-like line numbers, or all zeros when the schema does not record them."""

    def __init__(self, enabled: bool):
        self.enabled = enabled
        self.line = 0

    def next(self) -> int:
        if not self.enabled:
            return 0
        self.line += 1
        return self.line


class DocumentBuilder:
    """Builds vector drawable documents for one schema version."""

    def __init__(self, schema_version: Union[SchemaVersion, str, SchemaProfile]):
        self.schema = get_schema(schema_version)

    def _write_resource_map(self, sink: ByteSink) -> None:
        # https://justanapplication.wordpress.com/2011/09/23/android-internals-binary-xml-part-four-the-xml-resource-map-chunk/
        resource_ids = self.schema.resource_ids
        sink.put_u16(CHUNK_TYPE_RES_MAP)
        sink.put_u16(RES_MAP_HEADER_SIZE)
        sink.put_u32(RES_MAP_HEADER_SIZE + 4 * len(resource_ids))
        for attr_id in resource_ids:
            sink.put_u32(attr_id)

    def _write_attributes(
        self,
        elements: ElementEncoder,
        order: Iterable[str],
        values: Dict[str, TypedValue],
    ) -> None:
        namespace = self.schema.namespace_uri_index
        for name in order:
            elements.write_attribute(namespace, self.schema.index(name), NO_INDEX, values[name])

    def build(
        self,
        width: int,
        height: int,
        viewport_width: float,
        viewport_height: float,
        paths: Iterable[PathSpec],
        stroke_enabled: bool = False,
        translate_x: float = 0.0,
        translate_y: float = 0.0,
        stroke_width: float = DEFAULT_STROKE_WIDTH,
    ) -> bytes:
        """
        Build a complete binary XML document.

        Args:
            width: Drawable width in dp
            height: Drawable height in dp
            viewport_width: Viewport width in path coordinates
            viewport_height: Viewport height in path coordinates
            paths: Path specs, emitted in order
            stroke_enabled: Add strokeColor and strokeWidth to every path
            translate_x: Group translation (schemas with a group only)
            translate_y: Group translation (schemas with a group only)
            stroke_width: Stroke width used when stroke_enabled

        Returns:
            The serialized document
        """
        schema = self.schema
        path_list: List[PathSpec] = list(paths)
        pool = StringPool.build(schema.vocabulary, [p.data for p in path_list])

        sink = ByteSink()
        values = ValueEncoder(schema)
        elements = ElementEncoder(sink, pool)
        lines = _LineNumbers(schema.line_numbers)
        namespace = schema.namespace_uri_index

        # 1. XML chunk header
        document_start = sink.current_offset()
        sink.put_u16(CHUNK_TYPE_XML)
        sink.put_u16(XML_HEADER_SIZE)
        document_size = sink.reserve_u32()

        # 2. String pool, 3. resource map
        pool.emit(sink)
        self._write_resource_map(sink)

        # 4. Namespace + vector start
        vector_line = lines.next()
        if schema.namespace_wrapper:
            elements.open_namespace(schema.namespace_prefix_index, namespace, vector_line)

        vector_name = schema.index("vector")
        handle = elements.open_tag(vector_name, len(schema.vector_attributes), vector_line)
        self._write_attributes(
            elements,
            schema.vector_attributes,
            {
                "width": TypedValue.dimension(width),
                "height": TypedValue.dimension(height),
                "viewportWidth": TypedValue.float32(viewport_width),
                "viewportHeight": TypedValue.float32(viewport_height),
            },
        )
        elements.close_tag(handle)

        # 5. Group start
        if schema.group:
            group_name = schema.index("group")
            handle = elements.open_tag(group_name, 2, lines.next())
            self._write_attributes(
                elements,
                ("translateX", "translateY"),
                {
                    "translateX": TypedValue.float32(translate_x),
                    "translateY": TypedValue.float32(translate_y),
                },
            )
            elements.close_tag(handle)
        elif translate_x or translate_y:
            log.debug(
                f"Schema {schema.version.value} has no group; "
                f"ignoring translate ({translate_x}, {translate_y})"
            )

        # 6. Paths
        path_name = schema.index("path")
        path_data_name = schema.index("pathData")
        for i, path in enumerate(path_list):
            path_line = lines.next()
            handle = elements.open_tag(path_name, 4 if stroke_enabled else 2, path_line)

            self._write_attributes(
                elements, ("fillColor",), {"fillColor": values.fill_color(path.fill_color)}
            )

            # Raw value and reference data must both be this path's pool entry
            data_index = pool.path_index(i)
            elements.write_attribute(
                namespace, path_data_name, data_index, TypedValue.string_ref(data_index)
            )

            if stroke_enabled:
                self._write_attributes(
                    elements,
                    schema.stroke_attributes,
                    {
                        "strokeWidth": TypedValue.float32(stroke_width),
                        "strokeColor": values.stroke_color(path.effective_stroke_color),
                    },
                )

            elements.close_tag(handle)
            elements.end_tag(path_name, path_line)

        # 7. Closing tags
        if schema.group:
            elements.end_tag(schema.index("group"), lines.next())
        end_line = lines.next()
        elements.end_tag(vector_name, end_line)
        if schema.namespace_wrapper:
            elements.close_namespace(schema.namespace_prefix_index, namespace, end_line)

        total = sink.current_offset() - document_start
        sink.patch_u32(document_size, total)
        log.debug(
            f"Encoded {schema.version.value} vector document: {len(path_list)} path(s), "
            f"{pool.count} strings, {total} bytes"
        )
        return sink.finish()


def encode_vector_document(
    width: int,
    height: int,
    viewport_width: float,
    viewport_height: float,
    stroke_enabled: bool,
    translate_x: float,
    translate_y: float,
    paths: Iterable[PathSpec],
    schema_version: Union[SchemaVersion, str, SchemaProfile],
    stroke_width: float = DEFAULT_STROKE_WIDTH,
) -> bytes:
    """Encode a vector drawable as a binary XML document."""
    return DocumentBuilder(schema_version).build(
        width,
        height,
        viewport_width,
        viewport_height,
        paths,
        stroke_enabled=stroke_enabled,
        translate_x=translate_x,
        translate_y=translate_y,
        stroke_width=stroke_width,
    )
