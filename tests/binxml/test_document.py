"""Tests for whole-document assembly."""

import struct

import pytest

from vector_drawable_builder.core.binxml.document import (
    DocumentBuilder,
    PathSpec,
    encode_vector_document,
)
from vector_drawable_builder.core.binxml.errors import (
    BinaryXmlError,
    EncodingOverflow,
    InvalidStringEncoding,
    UnknownSchemaVariant,
)
from vector_drawable_builder.core.binxml.reader import parse_document
from vector_drawable_builder.core.binxml.schema import LEGACY, MODERN, SchemaVersion, get_schema

SCHEMAS = [SchemaVersion.LEGACY, SchemaVersion.MODERN]

ANDROID_URI = b"http://schemas.android.com/apk/res/android"


def _encode(schema, paths, stroke=False, translate=(0.0, 0.0), **kwargs):
    return encode_vector_document(
        24, 24, 24.0, 24.0, stroke, translate[0], translate[1], paths, schema, **kwargs
    )


def _float_bits(value):
    return struct.unpack("<I", struct.pack("<f", value))[0]


def _reference_legacy_document(width, height, viewport_width, viewport_height, stroke, paths):
    """Field-by-field layout of the legacy document, written out longhand."""
    strings = [
        b"width", b"height", b"viewportWidth", b"viewportHeight", b"fillColor",
        b"pathData", b"strokeWidth", b"strokeColor", b"path", b"vector", ANDROID_URI,
    ] + [data for data, _ in paths]

    out = bytearray(struct.pack("<HHI", 0x0003, 8, 0))

    sp_start = len(out)
    out += struct.pack("<HHIIIIII", 0x0001, 28, 0, len(strings), 0, 0x100, 0, 0)
    offset = 0
    for s in strings:
        out += struct.pack("<I", offset)
        offset += len(s) + (5 if len(s) > 127 else 3)
    struct.pack_into("<I", out, sp_start + 20, len(out) - sp_start)
    for s in strings:
        if len(s) > 127:
            high = ((len(s) & 0xFF00) | 0x8000) >> 8
            out += bytes((high, len(s) & 0xFF, high, len(s) & 0xFF))
        else:
            out += bytes((len(s), len(s)))
        out += s + b"\x00"
    while len(out) % 4:
        out += b"\x00"
    struct.pack_into("<I", out, sp_start + 4, len(out) - sp_start)

    attrs = [0x01010155, 0x01010159, 0x01010402, 0x01010403,
             0x01010404, 0x01010405, 0x01010407, 0x01010406]
    out += struct.pack("<HHI", 0x0180, 8, 8 + 4 * len(attrs))
    out += struct.pack(f"<{len(attrs)}I", *attrs)

    def start_tag(name, count):
        return struct.pack(
            "<HHIIiiIHHHHHH", 0x0102, 16, 36 + 20 * count, 0, -1, -1, name,
            0x14, 0x14, count, 0, 0, 0,
        )

    def attribute(name, raw, value_type, data):
        return struct.pack("<iIiHHI", 10, name, raw, 8, value_type, data)

    def end_tag(name):
        return struct.pack("<HHIIiiI", 0x0103, 16, 24, 0, -1, -1, name)

    out += start_tag(9, 4)
    out += attribute(0, -1, 0x0500, (width << 8) + 1)
    out += attribute(1, -1, 0x0500, (height << 8) + 1)
    out += attribute(2, -1, 0x0400, _float_bits(viewport_width))
    out += attribute(3, -1, 0x0400, _float_bits(viewport_height))

    for i, (_, color) in enumerate(paths):
        out += start_tag(8, 4 if stroke else 2)
        out += attribute(4, -1, 0x1C00, color)
        out += attribute(5, 11 + i, 0x0300, 11 + i)
        if stroke:
            out += attribute(6, -1, 0x0400, _float_bits(3.0))
            out += attribute(7, -1, 0x1C00, color)
        out += end_tag(8)

    out += end_tag(9)
    struct.pack_into("<I", out, 4, len(out))
    return bytes(out)


class TestLegacyLayout:
    def test_minimal_document_is_byte_exact(self):
        data = _encode(SchemaVersion.LEGACY, [PathSpec("M0 0L10 10", 0xFF00FF00)])
        expected = _reference_legacy_document(
            24, 24, 24.0, 24.0, False, [(b"M0 0L10 10", 0xFF00FF00)]
        )
        assert data == expected

    def test_stroked_multi_path_document_is_byte_exact(self):
        paths = [
            (b"M0 0L10 10", 0xFF00FF00),
            (b"M1 1" + b" L2 2" * 40, 0x80123456),
            (b"M0 0L10 10", 0xFFFF0000),
        ]
        data = encode_vector_document(
            48, 32, 12.5, 8.0, True, 0.0, 0.0,
            [PathSpec(d, c) for d, c in paths], "legacy",
        )
        assert data == _reference_legacy_document(48, 32, 12.5, 8.0, True, paths)


@pytest.mark.parametrize("schema", SCHEMAS)
class TestSizeInvariants:
    PATHS = [
        PathSpec("M0 0L10 10", 0xFF00FF00),
        PathSpec("M2 2" + " L3 3" * 30, 0xFF0000FF, 0xFFFFFFFF),
        PathSpec("M0 0L10 10", 0x80808080),
    ]

    def test_document_size_field_equals_length(self, schema):
        for stroke in (False, True):
            data = _encode(schema, self.PATHS, stroke=stroke)
            assert struct.unpack_from("<I", data, 4)[0] == len(data)

    def test_chunks_tile_the_document(self, schema):
        data = _encode(schema, self.PATHS, stroke=True)
        doc = parse_document(data)
        events = doc.events
        for current, following in zip(events, events[1:]):
            assert current.offset + current.size == following.offset
        assert events[-1].offset + events[-1].size == len(data)

    def test_start_tag_sizes_match_attribute_counts(self, schema):
        doc = parse_document(_encode(schema, self.PATHS, stroke=True))
        for tag in doc.start_tags():
            assert tag.size == 36 + 20 * len(tag.attributes)

    def test_pool_size_is_strings_start_plus_entries_plus_padding(self, schema):
        doc = parse_document(_encode(schema, self.PATHS))
        encoded = [
            len(s.encode("utf-8")) + (4 if len(s.encode("utf-8")) > 127 else 2) + 1
            for s in doc.strings
        ]
        body = doc.strings_start + sum(encoded)
        assert doc.pool_size == body + (-body) % 4
        for i, offset in enumerate(doc.string_offsets):
            assert offset == sum(encoded[:i])

    def test_encoding_is_idempotent(self, schema):
        first = _encode(schema, self.PATHS, stroke=True, translate=(1.5, -2.0))
        second = _encode(schema, list(self.PATHS), stroke=True, translate=(1.5, -2.0))
        assert first == second

    def test_empty_path_list(self, schema):
        doc = parse_document(_encode(schema, []))
        assert "path" not in doc.tag_sequence


class TestRoundTrip:
    def test_legacy_minimal_tree(self):
        doc = parse_document(_encode(SchemaVersion.LEGACY, [PathSpec("M0 0L10 10", 0xFF00FF00)]))
        assert doc.tag_sequence == ["vector", "path", "/path", "/vector"]
        assert [e.kind for e in doc.events][0] == "start_tag"

        vector = doc.start_tags("vector")[0]
        assert [a.name for a in vector.attributes] == [
            "width", "height", "viewportWidth", "viewportHeight"
        ]
        assert vector.attribute("width").data == (24 << 8) | 1
        assert vector.attribute("width").value == (24, 1)
        assert vector.attribute("viewportHeight").value == 24.0
        assert all(a.namespace == ANDROID_URI.decode() for a in vector.attributes)

    def test_modern_minimal_tree(self):
        doc = parse_document(_encode(SchemaVersion.MODERN, [PathSpec("M0 0L10 10", 0xFF00FF00)]))
        assert doc.tag_sequence == ["vector", "group", "path", "/path", "/group", "/vector"]
        assert doc.events[0].kind == "start_namespace"
        assert doc.events[0].prefix == "android"
        assert doc.events[0].uri == ANDROID_URI.decode()
        assert doc.events[-1].kind == "end_namespace"

        vector = doc.start_tags("vector")[0]
        assert [a.name for a in vector.attributes] == [
            "height", "width", "viewportWidth", "viewportHeight"
        ]
        assert vector.attribute("width").data == (24 << 8) | 1

    def test_one_path_scenario(self):
        for schema in SCHEMAS:
            doc = parse_document(
                encode_vector_document(
                    24, 24, 24.0, 24.0, False, 0, 0,
                    [PathSpec("M0 0L10 10", 0xFF00FF00)], schema,
                )
            )
            path = doc.start_tags("path")[0]
            assert len(path.attributes) == 2
            assert [a.name for a in path.attributes] == ["fillColor", "pathData"]
            assert path.attribute("fillColor").data == 0xFF00FF00
            assert path.attribute("pathData").value == "M0 0L10 10"

    def test_modern_group_translation(self):
        doc = parse_document(
            _encode(SchemaVersion.MODERN, [PathSpec("M0 0", 0xFF000000)], translate=(2.5, -4.0))
        )
        group = doc.start_tags("group")[0]
        assert group.attribute("translateX").value == 2.5
        assert group.attribute("translateY").value == -4.0

    def test_legacy_ignores_translation(self):
        with_translate = _encode(SchemaVersion.LEGACY, [PathSpec("M0 0", 0xFF000000)], translate=(5, 5))
        without = _encode(SchemaVersion.LEGACY, [PathSpec("M0 0", 0xFF000000)])
        assert with_translate == without


class TestPathDataIndexPairing:
    @pytest.mark.parametrize("schema", SCHEMAS)
    def test_each_path_references_its_own_pool_entry(self, schema):
        paths = [
            PathSpec("M0 0L1 1", 0xFF000001),
            PathSpec("M0 0L1 1", 0xFF000002),
            PathSpec("x" * 128, 0xFF000003),
            PathSpec("vector", 0xFF000004),
            PathSpec("M5 5", 0xFF000005),
        ]
        vocabulary_size = len(LEGACY.vocabulary if schema is SchemaVersion.LEGACY else MODERN.vocabulary)
        doc = parse_document(_encode(schema, paths, stroke=True))

        assert len(doc.strings) == vocabulary_size + len(paths)
        path_tags = doc.start_tags("path")
        assert len(path_tags) == len(paths)
        for i, (spec, tag) in enumerate(zip(paths, path_tags)):
            attr = tag.attribute("pathData")
            assert attr.raw_value_index == vocabulary_size + i
            assert attr.data == vocabulary_size + i
            assert attr.raw_value == spec.path_data
            assert doc.strings[attr.data] == spec.path_data
            assert tag.attribute("fillColor").data == spec.fill_color

    def test_path_data_given_as_bytes(self):
        doc = parse_document(_encode(SchemaVersion.MODERN, [PathSpec(b"M1 2", 0xFF000000)]))
        assert doc.start_tags("path")[0].attribute("pathData").value == "M1 2"

    @pytest.mark.parametrize("schema", SCHEMAS)
    def test_path_data_must_be_utf8(self, schema):
        paths = [PathSpec("M0 0", 0xFF000000), PathSpec(b"M0 0\xff", 0xFF000000)]
        with pytest.raises(InvalidStringEncoding) as exc_info:
            _encode(schema, paths)
        assert exc_info.value.index == len(get_schema(schema).vocabulary) + 1


class TestStroke:
    def test_legacy_stroke_attributes(self):
        doc = parse_document(_encode(SchemaVersion.LEGACY, [PathSpec("M0 0", 0xFF00FF00)], stroke=True))
        path = doc.start_tags("path")[0]
        assert [a.name for a in path.attributes] == [
            "fillColor", "pathData", "strokeWidth", "strokeColor"
        ]
        assert path.attribute("strokeWidth").value == 3.0
        assert path.attribute("strokeColor").data == 0xFF00FF00
        assert path.attribute("strokeColor").value_type == 0x1C00

    def test_modern_stroke_attributes(self):
        doc = parse_document(
            _encode(
                SchemaVersion.MODERN,
                [PathSpec("M0 0", 0xFF00FF00, stroke_color=0xFF0000FF)],
                stroke=True,
                stroke_width=1.5,
            )
        )
        path = doc.start_tags("path")[0]
        assert [a.name for a in path.attributes] == [
            "fillColor", "pathData", "strokeColor", "strokeWidth"
        ]
        assert path.attribute("fillColor").value_type == 0x1F00
        assert path.attribute("strokeColor").value_type == 0x1D00
        assert path.attribute("strokeColor").data == 0xFF0000FF
        assert path.attribute("strokeWidth").value == 1.5


class TestSchemaSelection:
    @pytest.mark.parametrize("version", ["v3", "", 2, None, object()])
    def test_unknown_schema_variant(self, version):
        with pytest.raises(UnknownSchemaVariant):
            _encode(version, [PathSpec("M0 0", 0xFF000000)])

    def test_unknown_schema_is_a_value_error(self):
        with pytest.raises(ValueError):
            DocumentBuilder("future")

    def test_schema_names_are_case_insensitive(self):
        paths = [PathSpec("M0 0", 0xFF000000)]
        assert _encode("MODERN", paths) == _encode(SchemaVersion.MODERN, paths)

    def test_resource_maps(self):
        legacy = parse_document(_encode(SchemaVersion.LEGACY, []))
        modern = parse_document(_encode(SchemaVersion.MODERN, []))
        assert legacy.resource_ids == [
            0x01010155, 0x01010159, 0x01010402, 0x01010403,
            0x01010404, 0x01010405, 0x01010407, 0x01010406,
        ]
        assert modern.resource_ids == [
            0x01010155, 0x01010159, 0x01010402, 0x01010403, 0x01010404,
            0x01010405, 0x01010406, 0x01010407, 0x0101045A, 0x0101045B,
        ]
        # Modern names line up with their resource ids
        assert modern.strings[:10] == list(MODERN.resource_names)

    def test_line_numbers(self):
        paths = [PathSpec("M0 0", 0xFF000000), PathSpec("M1 1", 0xFF000000)]
        legacy = parse_document(_encode(SchemaVersion.LEGACY, paths))
        assert {e.line for e in legacy.events} == {0}

        modern = parse_document(_encode(SchemaVersion.MODERN, paths))
        assert [e.line for e in modern.events] == [1, 1, 2, 3, 3, 4, 4, 5, 6, 6]


class TestPathSpec:
    def test_signed_colors_are_reinterpreted(self):
        spec = PathSpec("M0 0", -16711936, stroke_color=-1)
        assert spec.fill_color == 0xFF00FF00
        assert spec.stroke_color == 0xFFFFFFFF

    def test_stroke_defaults_to_fill(self):
        assert PathSpec("M0 0", 0xFF123456).effective_stroke_color == 0xFF123456

    def test_color_out_of_range(self):
        with pytest.raises(EncodingOverflow):
            PathSpec("M0 0", 0x1FFFFFFFF)
        with pytest.raises(BinaryXmlError):
            PathSpec("M0 0", 0xFF000000, stroke_color=-0x80000001)
