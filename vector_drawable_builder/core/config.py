"""Drawable specs loaded from JSON files."""

from __future__ import annotations
import json
import re
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from .binxml.constants import DEFAULT_STROKE_WIDTH
from .binxml.document import PathSpec, encode_vector_document
from .binxml.schema import SchemaVersion

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


def parse_color(value: Union[int, str]) -> int:
    """
    Convert a color to 0xAARRGGBB.

    Accepts integers (signed 32-bit values are reinterpreted) and Android
    style hex strings: #RGB, #ARGB, #RRGGBB, #AARRGGBB. Colors without an
    alpha channel are opaque.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid color: {value!r}")
    if isinstance(value, int):
        if -0x80000000 <= value < 0:
            return value & 0xFFFFFFFF
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueError(f"Color {value} is not a 32-bit ARGB value")
        return value
    if isinstance(value, str):
        v = value.strip()
        if v.lower().startswith("0x"):
            return parse_color(int(v, 16))
        match = _HEX_COLOR.match(v)
        if match:
            s = match.group(1)
            if len(s) in {3, 4}:
                s = "".join(ch * 2 for ch in s)
            if len(s) == 6:
                s = "ff" + s
            return int(s, 16)
    raise ValueError(f"Invalid color: {value!r}")


class PathSpecModel(BaseModel):
    path_data: str = Field(..., min_length=1, description="SVG-style path commands")
    fill_color: int = Field(..., description="Fill color, #AARRGGBB or integer")
    stroke_color: Optional[int] = Field(
        None, description="Stroke color; defaults to the fill color"
    )

    @field_validator("fill_color", "stroke_color", mode="before")
    @classmethod
    def _coerce_color(cls, value):
        if value is None:
            return None
        return parse_color(value)

    def to_path_spec(self) -> PathSpec:
        return PathSpec(self.path_data, self.fill_color, self.stroke_color)


class DrawableSpecModel(BaseModel):
    schema_version: SchemaVersion = SchemaVersion.MODERN
    width: int = Field(..., ge=0, description="Drawable width in dp")
    height: int = Field(..., ge=0, description="Drawable height in dp")
    viewport_width: float = Field(..., gt=0)
    viewport_height: float = Field(..., gt=0)
    stroke: bool = False
    stroke_width: float = Field(DEFAULT_STROKE_WIDTH, ge=0)
    translate_x: float = 0.0
    translate_y: float = 0.0
    paths: List[PathSpecModel] = Field(default_factory=list)

    def path_specs(self) -> List[PathSpec]:
        return [p.to_path_spec() for p in self.paths]

    def encode(self) -> bytes:
        return encode_vector_document(
            self.width,
            self.height,
            self.viewport_width,
            self.viewport_height,
            self.stroke,
            self.translate_x,
            self.translate_y,
            self.path_specs(),
            self.schema_version,
            stroke_width=self.stroke_width,
        )


def load_drawable_spec(path: Path) -> DrawableSpecModel:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return DrawableSpecModel.model_validate(data)
