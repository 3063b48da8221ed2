"""
Tests for page rendering and SVG output.
"""

import io
import math
import xml.etree.ElementTree as ET

import pytest

from rmnotebook.constants import CANVAS_HEIGHT, CANVAS_WIDTH, MIN_STROKE_WIDTH
from rmnotebook.parser import Color, Layer, Page, PenType, Point, Stroke, decode_notebook
from rmnotebook.renderer import (
    RenderedPage,
    get_stroke_width,
    path_data,
    render_page,
    render_svg,
    render_to_files,
)

SVG_NS = "{http://www.w3.org/2000/svg}"


def make_stroke(width=2.0, color=Color.BLACK, points=((0, 0), (1, 1))):
    return Stroke(
        pen=PenType.BALLPOINT,
        color=color,
        width=width,
        points=tuple(Point(x, y, 0.5, 0.0) for x, y in points),
    )


def test_scenario_a_geometry(scenario_a):
    notebook = decode_notebook(scenario_a)
    page = render_page(notebook.pages[0])

    (path,) = page.paths
    assert path.points == ((0, 0), (10, 0), (10, 10))
    assert path.color is Color.BLACK
    assert path.rgb == (0, 0, 0)
    assert path.width == 2.0
    assert path.line_cap == "round"
    assert path.line_join == "round"


def test_canvas_is_fixed():
    far = make_stroke(points=((5000, 9000), (6000, 9500)))
    page = render_page(Page((Layer((far,)),)))
    assert (page.width, page.height) == (CANVAS_WIDTH, CANVAS_HEIGHT)
    assert page.paths[0].points == ((5000, 9000), (6000, 9500))


def test_empty_page_is_blank():
    page = render_page(Page(), index=3)
    assert page.is_blank
    assert page.index == 3
    assert (page.width, page.height) == (1404, 1872)


def test_zero_point_stroke_is_noop():
    page = render_page(Page((Layer((make_stroke(points=()),)),)))
    assert page.paths == ()


@pytest.mark.parametrize("width", [-1.0, 0.0, -0.0, float("nan"), float("inf")])
def test_corrupt_width_uses_minimum(width):
    assert get_stroke_width(make_stroke(width=width)) == MIN_STROKE_WIDTH
    page = render_page(Page((Layer((make_stroke(width=width),)),)))
    assert page.paths[0].width == 1.0


def test_positive_width_kept():
    assert get_stroke_width(make_stroke(width=0.25)) == 0.25


def test_layer_and_stroke_order():
    bottom = Layer((make_stroke(color=Color.RED), make_stroke(color=Color.BLUE)))
    top = Layer((make_stroke(color=Color.GREEN),))
    page = render_page(Page((bottom, top)))
    assert [p.color for p in page.paths] == [Color.RED, Color.BLUE, Color.GREEN]


def test_gray_overlay_is_translucent():
    page = render_page(Page((Layer((make_stroke(color=Color.GRAY_OVERLAY),)),)))
    assert page.paths[0].opacity == 0.5
    assert render_page(Page((Layer((make_stroke(),)),))).paths[0].opacity == 1.0


def test_rendering_is_deterministic(multi_page):
    first = [render_page(p, i) for i, p in enumerate(decode_notebook(multi_page).pages)]
    second = [render_page(p, i) for i, p in enumerate(decode_notebook(multi_page).pages)]
    assert first == second


class TestPathData:
    def test_polyline(self):
        assert path_data(((0, 0), (10, 0), (10, 10))) == (
            "M 0.00 0.00 L 10.00 0.00 L 10.00 10.00"
        )

    def test_single_point_is_zero_length_segment(self):
        assert path_data(((3, 4),)) == "M 3.00 4.00 L 3.00 4.00"

    def test_empty(self):
        assert path_data(()) == ""


class TestSvg:
    def _parse(self, page: RenderedPage):
        buf = io.StringIO()
        render_svg(page, buf)
        return ET.fromstring(buf.getvalue().split("?>", 1)[1])

    def test_svg_structure(self, scenario_a):
        page = render_page(decode_notebook(scenario_a).pages[0])
        root = self._parse(page)

        assert root.get("viewBox") == "0 0 1404 1872"
        paths = root.findall(f".//{SVG_NS}path")
        assert len(paths) == 1
        assert paths[0].get("d") == "M 0.00 0.00 L 10.00 0.00 L 10.00 10.00"
        assert paths[0].get("stroke") == "#000000"
        assert paths[0].get("stroke-width") == "2.00"
        assert paths[0].get("stroke-linecap") == "round"
        assert paths[0].get("stroke-linejoin") == "round"
        assert paths[0].get("opacity") is None

    def test_blank_page_has_no_paths(self):
        root = self._parse(RenderedPage(index=0))
        assert root.findall(f".//{SVG_NS}path") == []

    def test_render_to_files_names_pages(self, tmp_path, multi_page):
        pages = [render_page(p, i) for i, p in enumerate(decode_notebook(multi_page).pages)]
        written = render_to_files(pages, tmp_path / "out")
        assert [p.name for p in written] == [
            "page-001.svg", "page-002.svg", "page-003.svg", "page-004.svg",
        ]
        assert all(p.exists() for p in written)


def test_nan_coordinates_do_not_raise():
    stroke = make_stroke(points=((math.nan, 1.0), (2.0, 3.0)))
    page = render_page(Page((Layer((stroke,)),)))
    assert len(page.paths) == 1
