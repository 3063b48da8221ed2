"""
Page renderer for decoded notebooks.

Turns a page's strokes into vector paths on the fixed device canvas,
and writes rendered pages out as SVG.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO
import xml.etree.ElementTree as ET

from .parser import Color, Page, PenType, Stroke
from .constants import (
    CANVAS_WIDTH,
    CANVAS_HEIGHT,
    MIN_STROKE_WIDTH,
    COLOR_MAP_RGB,
    COLOR_MAP_HEX,
    COLOR_OPACITY,
)


# =============================================================================
# Geometry
# =============================================================================

@dataclass(frozen=True)
class StrokePath:
    """One continuous path, ready to be drawn."""
    points: tuple[tuple[float, float], ...]
    pen: PenType
    color: Color
    rgb: tuple[int, int, int]
    opacity: float
    width: float
    line_cap: str = "round"
    line_join: str = "round"


@dataclass(frozen=True)
class RenderedPage:
    """Vector geometry for a single page, in canvas units."""
    index: int
    paths: tuple[StrokePath, ...] = ()
    width: float = CANVAS_WIDTH
    height: float = CANVAS_HEIGHT

    @property
    def is_blank(self) -> bool:
        return not self.paths


def get_stroke_width(stroke: Stroke) -> float:
    """Stroke width, with corrupt (non-positive or non-finite) widths clamped."""
    if not math.isfinite(stroke.width) or stroke.width <= 0:
        return MIN_STROKE_WIDTH
    return stroke.width


def stroke_to_path(stroke: Stroke) -> StrokePath | None:
    """Convert a stroke to a path, or None if it has no points."""
    if not stroke.points:
        return None
    return StrokePath(
        points=tuple((p.x, p.y) for p in stroke.points),
        pen=stroke.pen,
        color=stroke.color,
        rgb=COLOR_MAP_RGB[stroke.color],
        opacity=COLOR_OPACITY.get(stroke.color, 1.0),
        width=get_stroke_width(stroke),
    )


def render_page(page: Page, index: int = 0) -> RenderedPage:
    """
    Render one page.

    Layers are drawn in stored order (first layer at the bottom) and
    strokes in stored order within each layer. The canvas is always the
    full device page, whatever the extent of the strokes.
    """
    paths = []
    for layer in page.layers:
        for stroke in layer.strokes:
            path = stroke_to_path(stroke)
            if path is not None:
                paths.append(path)
    return RenderedPage(index=index, paths=tuple(paths))


# =============================================================================
# SVG Output
# =============================================================================

def path_data(points: tuple[tuple[float, float], ...]) -> str:
    """
    Convert points to an SVG path string of straight segments.

    A single point becomes a zero-length segment so round caps draw a dot.
    """
    if not points:
        return ""
    x0, y0 = points[0]
    path = f"M {x0:.2f} {y0:.2f}"
    if len(points) == 1:
        return path + f" L {x0:.2f} {y0:.2f}"
    for x, y in points[1:]:
        path += f" L {x:.2f} {y:.2f}"
    return path


def render_svg(page: RenderedPage, output: TextIO) -> None:
    """
    Write a rendered page to SVG.

    Args:
        page: Rendered page geometry
        output: File-like object to write SVG to
    """
    svg = ET.Element("svg")
    svg.set("xmlns", "http://www.w3.org/2000/svg")
    svg.set("viewBox", f"0 0 {page.width:g} {page.height:g}")
    svg.set("width", f"{page.width:g}")
    svg.set("height", f"{page.height:g}")

    bg = ET.SubElement(svg, "rect")
    bg.set("width", "100%")
    bg.set("height", "100%")
    bg.set("fill", "#ffffff")

    g = ET.SubElement(svg, "g")
    g.set("id", f"page-{page.index + 1}")

    for stroke_path in page.paths:
        path = ET.SubElement(g, "path")
        path.set("d", path_data(stroke_path.points))
        path.set("stroke", COLOR_MAP_HEX[stroke_path.color])
        path.set("stroke-width", f"{stroke_path.width:.2f}")
        path.set("stroke-linecap", stroke_path.line_cap)
        path.set("stroke-linejoin", stroke_path.line_join)
        path.set("fill", "none")
        if stroke_path.opacity < 1.0:
            path.set("opacity", f"{stroke_path.opacity:.2f}")

    tree = ET.ElementTree(svg)
    ET.indent(tree, space="  ")
    tree.write(output, encoding="unicode", xml_declaration=True)
    output.write("\n")


def svg_page_name(index: int) -> str:
    """Output filename for a page (1-indexed for readability)."""
    return f"page-{index + 1:03d}.svg"


def render_to_file(page: RenderedPage, path: Path) -> None:
    """Render a page to an SVG file."""
    with open(path, "w", encoding="utf-8") as f:
        render_svg(page, f)


def render_to_files(pages, output_dir: Path) -> list[Path]:
    """Write one SVG per page into ``output_dir``. Returns the written paths."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for page in pages:
        path = output_dir / svg_page_name(page.index)
        render_to_file(page, path)
        written.append(path)
    return written
