"""
Schema variants for the generated vector document.

Two historical layouts are supported:

- legacy: no namespace element, no group, every color tagged ARGB8,
  vocabulary lists width before height (the resource map does not follow
  the vocabulary order for those two names).
- modern: android namespace element wrapping the tree, a translate group
  around the paths, fill and stroke colors tagged separately, vocabulary in
  resource map order.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple, Union

from .constants import (
    ANDROID_NS_PREFIX,
    ANDROID_NS_URI,
    ATTRIBUTE_IDS,
    VALUE_TYPE_COLOR_ARGB8,
    VALUE_TYPE_COLOR_RGB4,
    VALUE_TYPE_COLOR_RGB8,
)
from .errors import UnknownSchemaVariant


class SchemaVersion(str, Enum):
    LEGACY = "legacy"
    MODERN = "modern"


@dataclass(frozen=True)
class SchemaProfile:
    """Everything that differs between schema versions."""

    version: SchemaVersion
    vocabulary: Tuple[str, ...]
    # Vocabulary names mapped, in order, by the resource map
    resource_names: Tuple[str, ...]
    fill_color_type: int
    stroke_color_type: int
    namespace_wrapper: bool
    group: bool
    vector_attributes: Tuple[str, ...]
    stroke_attributes: Tuple[str, ...]
    line_numbers: bool

    def index(self, name: str) -> int:
        return self.vocabulary.index(name)

    @property
    def resource_ids(self) -> Tuple[int, ...]:
        return tuple(ATTRIBUTE_IDS[name] for name in self.resource_names)

    @property
    def namespace_uri_index(self) -> int:
        return self.index(ANDROID_NS_URI)

    @property
    def namespace_prefix_index(self) -> int:
        return self.index(ANDROID_NS_PREFIX)


LEGACY = SchemaProfile(
    version=SchemaVersion.LEGACY,
    vocabulary=(
        "width",
        "height",
        "viewportWidth",
        "viewportHeight",
        "fillColor",
        "pathData",
        "strokeWidth",
        "strokeColor",
        "path",
        "vector",
        ANDROID_NS_URI,
    ),
    resource_names=(
        "height",
        "width",
        "viewportWidth",
        "viewportHeight",
        "fillColor",
        "pathData",
        "strokeWidth",
        "strokeColor",
    ),
    fill_color_type=VALUE_TYPE_COLOR_ARGB8,
    stroke_color_type=VALUE_TYPE_COLOR_ARGB8,
    namespace_wrapper=False,
    group=False,
    vector_attributes=("width", "height", "viewportWidth", "viewportHeight"),
    stroke_attributes=("strokeWidth", "strokeColor"),
    line_numbers=False,
)

MODERN = SchemaProfile(
    version=SchemaVersion.MODERN,
    vocabulary=(
        "height",
        "width",
        "viewportWidth",
        "viewportHeight",
        "fillColor",
        "pathData",
        "strokeColor",
        "strokeWidth",
        "translateX",
        "translateY",
        ANDROID_NS_PREFIX,
        ANDROID_NS_URI,
        "vector",
        "group",
        "path",
    ),
    resource_names=(
        "height",
        "width",
        "viewportWidth",
        "viewportHeight",
        "fillColor",
        "pathData",
        "strokeColor",
        "strokeWidth",
        "translateX",
        "translateY",
    ),
    fill_color_type=VALUE_TYPE_COLOR_RGB4,
    stroke_color_type=VALUE_TYPE_COLOR_RGB8,
    namespace_wrapper=True,
    group=True,
    vector_attributes=("height", "width", "viewportWidth", "viewportHeight"),
    stroke_attributes=("strokeColor", "strokeWidth"),
    line_numbers=True,
)

_PROFILES: Dict[SchemaVersion, SchemaProfile] = {
    SchemaVersion.LEGACY: LEGACY,
    SchemaVersion.MODERN: MODERN,
}


def get_schema(version: Union[SchemaVersion, str, SchemaProfile, Any]) -> SchemaProfile:
    """
    Resolve a schema version to its profile.

    Args:
        version: SchemaVersion member, its string value, or a profile

    Returns:
        The matching SchemaProfile

    Raises:
        UnknownSchemaVariant: if version names no supported schema
    """
    if isinstance(version, SchemaProfile):
        return version
    if isinstance(version, SchemaVersion):
        return _PROFILES[version]
    if isinstance(version, str):
        try:
            version = SchemaVersion(version.strip().lower())
        except ValueError:
            raise UnknownSchemaVariant(f"Unknown schema version: {version!r}") from None
        return _PROFILES[version]
    raise UnknownSchemaVariant(f"Unknown schema version: {version!r}")
