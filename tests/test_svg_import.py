from vector_drawable_builder.core.svg_import import TRANSPARENT, read_svg_canvas, read_svg_paths


def _svg(tmp_path, body, root_attrs="viewBox='0 0 24 12'"):
    svg_file = tmp_path / "icon.svg"
    svg_file.write_text(
        f"<svg xmlns='http://www.w3.org/2000/svg' {root_attrs}>{body}</svg>", encoding="utf-8"
    )
    return svg_file


def test_read_svg_paths_and_shapes(tmp_path):
    svg_file = _svg(
        tmp_path,
        "<path d=' M0 0 L10 0 L0 10 z ' fill='#ff0000'/>"
        "<circle cx='10' cy='5' r='3'/>"
        "<rect x='1' y='2' width='3' height='4' fill='none'/>"
        "<polyline points='0,0 1,1 2,0'/>",
    )
    specs = read_svg_paths(svg_file, default_color=0xFF112233)
    assert [s.path_data for s in specs] == [
        "M0 0 L10 0 L0 10 z",
        "M7,5 A3,3 0 0,1 13,5 A3,3 0 0,1 7,5 Z",
        "M0,0 L1,1 L2,0",
    ]
    assert [s.fill_color for s in specs] == [0xFFFF0000, 0xFF112233, 0xFF112233]
    assert all(s.stroke_color is None for s in specs)
    assert read_svg_canvas(svg_file) == (24.0, 12.0)


def test_group_paint_and_translation_are_inherited(tmp_path):
    svg_file = _svg(
        tmp_path,
        "<g fill='#00f' transform='translate(2, 3)'>"
        "<rect width='4' height='2'/>"
        "<circle r='1' style='fill:none; stroke:#ff0000'/>"
        "<g transform='translate(1)'><line x1='0' y1='0' x2='1' y2='1'/></g>"
        "</g>"
        "<defs><path d='M9 9'/></defs>"
        "<ellipse fill='none' cx='1' cy='1' rx='1' ry='1'/>",
    )
    rect, ring, line = read_svg_paths(svg_file)

    assert rect.path_data == "M2,3 H6 V5 H2 Z"
    assert rect.fill_color == 0xFF0000FF

    assert ring.path_data == "M1,3 A1,1 0 0,1 3,3 A1,1 0 0,1 1,3 Z"
    assert ring.fill_color == TRANSPARENT
    assert ring.stroke_color == 0xFFFF0000

    assert line.path_data == "M3,3 L4,4"
    assert line.fill_color == 0xFF0000FF


def test_rounded_rect_corners(tmp_path):
    svg_file = _svg(
        tmp_path,
        "<rect width='10' height='4' rx='1'/>"
        "<rect width='10' height='4' rx='20'/>",
    )
    rounded, capped = read_svg_paths(svg_file)
    assert rounded.path_data == (
        "M1,0 H9 A1,1 0 0,1 10,1 V3 A1,1 0 0,1 9,4 H1 A1,1 0 0,1 0,3 V1 A1,1 0 0,1 1,0 Z"
    )
    # Radii are capped at half the width and half the height
    assert capped.path_data.startswith("M5,0 H5 A5,2 0 0,1 10,2")


def test_translated_path_is_kept_with_warning(tmp_path, caplog):
    svg_file = _svg(tmp_path, "<path d='M0 0L1 1' transform='translate(4 5) rotate(45)'/>")
    specs = read_svg_paths(svg_file)
    assert [s.path_data for s in specs] == ["M0 0L1 1"]
    assert "unsupported transform rotate" in caplog.text
    assert "cannot be applied" in caplog.text


def test_degenerate_shapes_are_skipped(tmp_path):
    svg_file = _svg(
        tmp_path,
        "<circle r='0'/><rect width='0' height='3'/><polygon points='1,1'/>"
        "<polygon points='0,0 4,0 4,4 9'/>",
    )
    specs = read_svg_paths(svg_file)
    assert [s.path_data for s in specs] == ["M0,0 L4,0 L4,4 Z"]


def test_canvas_from_width_and_height(tmp_path):
    svg_file = _svg(tmp_path, "<path d='M0 0'/>", root_attrs="width='48px' height='32'")
    assert read_svg_canvas(svg_file) == (48.0, 32.0)


def test_unreadable_svg(tmp_path):
    svg_file = tmp_path / "broken.svg"
    svg_file.write_text("<svg><path", encoding="utf-8")
    assert read_svg_paths(svg_file) == []
    assert read_svg_canvas(svg_file) is None
    assert read_svg_paths(tmp_path / "missing.svg") == []


def test_svg_without_shapes(tmp_path):
    svg_file = _svg(tmp_path, "<g/>", root_attrs="")
    assert read_svg_paths(svg_file) == []
    assert read_svg_canvas(svg_file) is None
