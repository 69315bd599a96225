"""
Binary XML format constants.

Chunk layout reference:
  https://justanapplication.wordpress.com/2011/09/22/android-internals-binary-xml-part-two-the-xml-chunk/
"""

from __future__ import annotations

# Chunk types
CHUNK_TYPE_STR_POOL = 0x0001
CHUNK_TYPE_XML = 0x0003
CHUNK_TYPE_START_NAMESPACE = 0x0100
CHUNK_TYPE_END_NAMESPACE = 0x0101
CHUNK_TYPE_START_TAG = 0x0102
CHUNK_TYPE_END_TAG = 0x0103
CHUNK_TYPE_RES_MAP = 0x0180

# Header sizes
XML_HEADER_SIZE = 8
STR_POOL_HEADER_SIZE = 28
RES_MAP_HEADER_SIZE = 8
NODE_HEADER_SIZE = 16

# Fixed chunk sizes (header + body)
NAMESPACE_CHUNK_SIZE = 24
END_TAG_CHUNK_SIZE = 24
START_TAG_MIN_SIZE = 36

# Start tag attribute layout: attributes begin 0x14 bytes into the body
# and each record is 0x14 bytes long
ATTRIBUTE_START = 0x14
ATTRIBUTE_STRIDE = 0x14

NO_INDEX = -1

# String pool
STR_POOL_UTF8_FLAG = 1 << 8
SHORT_LENGTH_MAX = 0x7F
LONG_LENGTH_MAX = 0x7FFF
LONG_LENGTH_FLAG = 0x8000

# Typed values (Res_value), written as a u16: res0 byte then dataType byte
VALUE_SIZE = 8
VALUE_TYPE_STRING = 0x0300
VALUE_TYPE_FLOAT = 0x0400
VALUE_TYPE_DIMENSION = 0x0500
VALUE_TYPE_COLOR_ARGB8 = 0x1C00
VALUE_TYPE_COLOR_RGB8 = 0x1D00
VALUE_TYPE_COLOR_RGB4 = 0x1F00

# Dimension units
COMPLEX_UNIT_PX = 0
COMPLEX_UNIT_DIP = 1
COMPLEX_UNIT_SP = 2

DIMENSION_UNIT_NAMES = {
    COMPLEX_UNIT_PX: "px",
    COMPLEX_UNIT_DIP: "dip",
    COMPLEX_UNIT_SP: "sp",
}

# Dimension magnitude is a signed 24-bit value
DIMENSION_MIN = -(1 << 23)
DIMENSION_MAX = (1 << 23) - 1

ANDROID_NS_PREFIX = "android"
ANDROID_NS_URI = "http://schemas.android.com/apk/res/android"

# android.R.attr identifiers
ATTR_HEIGHT = 0x01010155
ATTR_WIDTH = 0x01010159
ATTR_VIEWPORT_WIDTH = 0x01010402
ATTR_VIEWPORT_HEIGHT = 0x01010403
ATTR_FILL_COLOR = 0x01010404
ATTR_PATH_DATA = 0x01010405
ATTR_STROKE_COLOR = 0x01010406
ATTR_STROKE_WIDTH = 0x01010407
ATTR_TRANSLATE_X = 0x0101045A
ATTR_TRANSLATE_Y = 0x0101045B

ATTRIBUTE_IDS = {
    "height": ATTR_HEIGHT,
    "width": ATTR_WIDTH,
    "viewportWidth": ATTR_VIEWPORT_WIDTH,
    "viewportHeight": ATTR_VIEWPORT_HEIGHT,
    "fillColor": ATTR_FILL_COLOR,
    "pathData": ATTR_PATH_DATA,
    "strokeColor": ATTR_STROKE_COLOR,
    "strokeWidth": ATTR_STROKE_WIDTH,
    "translateX": ATTR_TRANSLATE_X,
    "translateY": ATTR_TRANSLATE_Y,
}

DEFAULT_STROKE_WIDTH = 3.0
