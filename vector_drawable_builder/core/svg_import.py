"""
SVG Import - Turn the shapes of an SVG icon into path specs

Walks the SVG tree in document order, carrying the paint and translation a
shape inherits from its enclosing <g> elements. Basic shapes are rewritten
as Android pathData (comma-separated coordinate pairs, H/V for axis-aligned
edges); <path d="..."> strings are passed through untouched.

Paint:
  fill / stroke from attributes or a style="fill:...;stroke:..." declaration,
  hex colors only (#RGB / #RRGGBB). fill="none" with a stroked outline becomes
  a transparent fill; a shape with neither fill nor stroke is dropped.

Transforms:
  Only translate(tx[, ty]) is understood. It is folded into the coordinates
  of generated shapes; path data cannot be rewritten, so a translated <path>
  is kept in place with a warning.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple
import re
import xml.etree.ElementTree as ET

from .binxml.document import PathSpec
from .config import parse_color
from .logger import get_logger

log = get_logger(__name__)

DEFAULT_FILL = 0xFF000000
TRANSPARENT = 0x00000000

_NUMBER = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_TRANSFORM = re.compile(r"(\w+)\s*\(([^)]*)\)")

# Containers whose children are never painted directly
_NOT_RENDERED = {
    "defs", "clippath", "mask", "symbol", "pattern", "marker",
    "lineargradient", "radialgradient", "metadata", "title", "desc",
}


def _num(value: float) -> str:
    text = repr(round(value, 3) + 0.0)
    return text[:-2] if text.endswith(".0") else text


def _length(raw: Optional[str]) -> Optional[float]:
    """Leading number of an SVG length ("12", "12px", "1.5e1"); None for % or garbage."""
    if raw is None or raw.strip().endswith("%"):
        return None
    match = _NUMBER.match(raw.strip())
    return float(match.group(0)) if match else None


class _PathData:
    """Accumulates absolute Android path commands, offset by a translation."""

    def __init__(self, dx: float = 0.0, dy: float = 0.0):
        self.dx = dx
        self.dy = dy
        self.commands: List[str] = []

    def _pt(self, x: float, y: float) -> str:
        return f"{_num(x + self.dx)},{_num(y + self.dy)}"

    def move(self, x: float, y: float) -> "_PathData":
        self.commands.append(f"M{self._pt(x, y)}")
        return self

    def line(self, x: float, y: float) -> "_PathData":
        self.commands.append(f"L{self._pt(x, y)}")
        return self

    def horizontal(self, x: float) -> "_PathData":
        self.commands.append(f"H{_num(x + self.dx)}")
        return self

    def vertical(self, y: float) -> "_PathData":
        self.commands.append(f"V{_num(y + self.dy)}")
        return self

    def arc(self, rx: float, ry: float, sweep: bool, x: float, y: float) -> "_PathData":
        self.commands.append(f"A{_num(rx)},{_num(ry)} 0 0,{int(sweep)} {self._pt(x, y)}")
        return self

    def close(self) -> "_PathData":
        self.commands.append("Z")
        return self

    def __str__(self) -> str:
        return " ".join(self.commands)


def _ellipse(out: _PathData, cx: float, cy: float, rx: float, ry: float) -> Optional[str]:
    if rx <= 0 or ry <= 0:
        return None
    # Two half-ellipse arcs; a single arc cannot end where it starts
    out.move(cx - rx, cy).arc(rx, ry, True, cx + rx, cy).arc(rx, ry, True, cx - rx, cy)
    return str(out.close())


def _circle(elem: ET.Element, out: _PathData) -> Optional[str]:
    r = _length(elem.get("r")) or 0.0
    return _ellipse(out, _length(elem.get("cx")) or 0.0, _length(elem.get("cy")) or 0.0, r, r)


def _ellipse_elem(elem: ET.Element, out: _PathData) -> Optional[str]:
    return _ellipse(
        out,
        _length(elem.get("cx")) or 0.0,
        _length(elem.get("cy")) or 0.0,
        _length(elem.get("rx")) or 0.0,
        _length(elem.get("ry")) or 0.0,
    )


def _rect(elem: ET.Element, out: _PathData) -> Optional[str]:
    x = _length(elem.get("x")) or 0.0
    y = _length(elem.get("y")) or 0.0
    w = _length(elem.get("width")) or 0.0
    h = _length(elem.get("height")) or 0.0
    if w <= 0 or h <= 0:
        return None

    # A missing corner radius takes the other one; both are capped at half the side
    rx = _length(elem.get("rx"))
    ry = _length(elem.get("ry"))
    rx = ry if rx is None else rx
    ry = rx if ry is None else ry
    rx = min(max(rx or 0.0, 0.0), w / 2)
    ry = min(max(ry or 0.0, 0.0), h / 2)

    if rx == 0 or ry == 0:
        out.move(x, y).horizontal(x + w).vertical(y + h).horizontal(x)
        return str(out.close())

    out.move(x + rx, y).horizontal(x + w - rx).arc(rx, ry, True, x + w, y + ry)
    out.vertical(y + h - ry).arc(rx, ry, True, x + w - rx, y + h)
    out.horizontal(x + rx).arc(rx, ry, True, x, y + h - ry)
    out.vertical(y + ry).arc(rx, ry, True, x + rx, y)
    return str(out.close())


def _line(elem: ET.Element, out: _PathData) -> Optional[str]:
    out.move(_length(elem.get("x1")) or 0.0, _length(elem.get("y1")) or 0.0)
    out.line(_length(elem.get("x2")) or 0.0, _length(elem.get("y2")) or 0.0)
    return str(out)


def _poly(elem: ET.Element, out: _PathData, closed: bool) -> Optional[str]:
    coords = [float(n) for n in _NUMBER.findall(elem.get("points") or "")]
    if len(coords) % 2:
        log.debug(f"[SVG] Dropping odd trailing coordinate in points={elem.get('points')!r}")
        coords.pop()
    if len(coords) < 4:
        return None
    out.move(coords[0], coords[1])
    for i in range(2, len(coords), 2):
        out.line(coords[i], coords[i + 1])
    if closed:
        out.close()
    return str(out)


_SHAPES = {
    "circle": _circle,
    "ellipse": _ellipse_elem,
    "rect": _rect,
    "line": _line,
    "polygon": lambda elem, out: _poly(elem, out, closed=True),
    "polyline": lambda elem, out: _poly(elem, out, closed=False),
}


@dataclass(frozen=True)
class _Inherited:
    """Paint and offset in effect for an element. A paint of None means none."""

    fill: Optional[int]
    stroke: Optional[int] = None
    dx: float = 0.0
    dy: float = 0.0


def _declarations(elem: ET.Element) -> Dict[str, str]:
    props = {k: v for k, v in elem.attrib.items() if k in ("fill", "stroke", "transform")}
    for decl in (elem.get("style") or "").split(";"):
        key, sep, value = decl.partition(":")
        if sep and key.strip() in ("fill", "stroke"):
            props[key.strip()] = value.strip()
    return props


def _paint(raw: Optional[str], inherited: Optional[int]) -> Optional[int]:
    if raw is None:
        return inherited
    value = raw.strip()
    if value.lower() == "none":
        return None
    if value.startswith("#") and len(value) in (4, 7):
        try:
            return parse_color(value)
        except ValueError:
            pass
    log.debug(f"[SVG] Unsupported paint {raw!r}, keeping the inherited one")
    return inherited


def _translation(raw: Optional[str]) -> Tuple[float, float]:
    dx = dy = 0.0
    for name, args in _TRANSFORM.findall(raw or ""):
        values = [float(n) for n in _NUMBER.findall(args)]
        if name == "translate" and values:
            dx += values[0]
            dy += values[1] if len(values) > 1 else 0.0
        else:
            log.warning(f"[SVG] Ignoring unsupported transform {name}({args.strip()})")
    return dx, dy


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1].lower()


def _walk(elem: ET.Element, state: _Inherited) -> Iterator[Tuple[ET.Element, _Inherited]]:
    props = _declarations(elem)
    dx, dy = _translation(props.get("transform"))
    state = replace(
        state,
        fill=_paint(props.get("fill"), state.fill),
        stroke=_paint(props.get("stroke"), state.stroke),
        dx=state.dx + dx,
        dy=state.dy + dy,
    )
    yield elem, state
    for child in elem:
        if _local_name(child.tag) not in _NOT_RENDERED:
            yield from _walk(child, state)


def read_svg_paths(svg_file: Path, default_color: int = DEFAULT_FILL) -> List[PathSpec]:
    """
    Collect one path spec per painted SVG shape, in document order.

    Args:
        svg_file: SVG file to read
        default_color: Fill used when neither the shape nor its groups set one

    Returns:
        Path specs (empty when the file cannot be parsed or has no shapes)
    """
    try:
        tree = ET.parse(svg_file)
    except (ET.ParseError, OSError) as exc:
        log.warning(f"[SVG] Failed to parse '{svg_file}': {exc}")
        return []

    specs: List[PathSpec] = []
    for elem, state in _walk(tree.getroot(), _Inherited(fill=default_color)):
        tag = _local_name(elem.tag)
        if tag == "path":
            path_data = (elem.get("d") or "").strip()
            if path_data and (state.dx or state.dy):
                log.warning(
                    f"[SVG] translate({_num(state.dx)}, {_num(state.dy)}) on a <path> "
                    f"cannot be applied to its data; encoding it untranslated"
                )
        elif tag in _SHAPES:
            path_data = _SHAPES[tag](elem, _PathData(state.dx, state.dy))
        else:
            continue

        if not path_data:
            continue
        if state.fill is None and state.stroke is None:
            log.debug(f"[SVG] Skipping unpainted <{tag}>")
            continue
        fill = TRANSPARENT if state.fill is None else state.fill
        specs.append(PathSpec(path_data, fill, state.stroke))

    if not specs:
        log.warning(f"[SVG] No drawable shapes found in '{svg_file}'")
    return specs


def read_svg_canvas(svg_file: Path) -> Optional[Tuple[float, float]]:
    """Viewport size of an SVG: the viewBox size, else its width/height."""
    try:
        root = ET.parse(svg_file).getroot()
    except (ET.ParseError, OSError) as exc:
        log.warning(f"[SVG] Failed to parse '{svg_file}': {exc}")
        return None

    view_box = _NUMBER.findall(root.get("viewBox") or "")
    if len(view_box) == 4:
        return float(view_box[2]), float(view_box[3])

    width = _length(root.get("width"))
    height = _length(root.get("height"))
    if width and height and width > 0 and height > 0:
        return width, height
    return None
