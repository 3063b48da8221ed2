"""
Notebook binary stream parser

Decodes the fixed-layout notebook stream into pages, layers, strokes
and points. Everything is little-endian with fixed-width fields.

Format Overview:
- Preamble: 33 opaque bytes
- u32 page count, then per page:
  - u32 layer count, then per layer:
    - u32 stroke count, then per stroke:
      - pen (u32), color (u32), reserved (u32), width (f32),
        reserved (u32), point count (u32)
      - Points: 24 bytes each (x, y, pressure, tilt, reserved, reserved)

A short read anywhere aborts the whole decode with TruncatedInput.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Iterator, Optional, Protocol

from .errors import ConversionCancelled, TruncatedInput


# =============================================================================
# Constants
# =============================================================================

PREAMBLE_SIZE = 33
POINT_SIZE = 24  # 6 x float32

_UINT32 = struct.Struct("<I")
_FLOAT32 = struct.Struct("<f")
_POINT = struct.Struct("<6f")


class PenType(IntEnum):
    """Pen/tool types."""
    BALLPOINT = 0
    FINELINER = 1
    MARKER = 2
    PENCIL = 3
    BRUSH = 4
    HIGHLIGHTER = 5
    ERASER = 6
    MECHANICAL_PENCIL = 7
    PEN = 8


class Color(IntEnum):
    """Pen colors."""
    BLACK = 0
    GRAY = 1
    WHITE = 2
    YELLOW = 3
    GREEN = 4
    PINK = 5
    BLUE = 6
    RED = 7
    GRAY_OVERLAY = 8


class CancelSignal(Protocol):
    """Anything with an ``is_set()`` method, e.g. ``threading.Event``."""

    def is_set(self) -> bool: ...


# =============================================================================
# Style Resolution
# =============================================================================

_PENS = {pen.value: pen for pen in PenType}
_COLORS = {color.value: color for color in Color}


def resolve_pen(code: int) -> PenType:
    """Map a raw pen code to a PenType, falling back to BALLPOINT."""
    return _PENS.get(code, PenType.BALLPOINT)


def resolve_color(code: int) -> Color:
    """Map a raw color code to a Color, falling back to BLACK."""
    return _COLORS.get(code, Color.BLACK)


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class Point:
    """A single sampled point in a stroke."""
    x: float
    y: float
    pressure: float
    tilt: float


@dataclass(frozen=True)
class Stroke:
    """A stroke (line) with pen settings and points."""
    pen: PenType
    color: Color
    width: float  # raw value, may be zero or negative in corrupt files
    points: tuple[Point, ...] = ()


@dataclass(frozen=True)
class Layer:
    """A layer containing strokes."""
    strokes: tuple[Stroke, ...] = ()


@dataclass(frozen=True)
class Page:
    """A page containing layers, bottom layer first."""
    layers: tuple[Layer, ...] = ()

    def all_strokes(self) -> Iterator[Stroke]:
        for layer in self.layers:
            yield from layer.strokes


@dataclass(frozen=True)
class Notebook:
    """Decoded notebook."""
    pages: tuple[Page, ...] = ()

    def all_strokes(self) -> Iterator[Stroke]:
        """Iterate over all strokes on all pages, in drawing order."""
        for page in self.pages:
            yield from page.all_strokes()

    @property
    def layer_count(self) -> int:
        return sum(len(page.layers) for page in self.pages)

    @property
    def stroke_count(self) -> int:
        return sum(1 for _ in self.all_strokes())

    @property
    def point_count(self) -> int:
        return sum(len(stroke.points) for stroke in self.all_strokes())


# =============================================================================
# Byte Cursor
# =============================================================================

class ByteCursor:
    """Forward-only, bounds-checked reader over a byte buffer."""

    def __init__(self, data: bytes):
        self._data = memoryview(data)
        self._pos = 0

    def tell(self) -> int:
        return self._pos

    def remaining(self) -> int:
        return len(self._data) - self._pos

    def _advance(self, n: int) -> int:
        start = self._pos
        if n < 0 or n > self.remaining():
            raise TruncatedInput(n, start, self.remaining())
        self._pos = start + n
        return start

    def skip(self, n: int) -> None:
        self._advance(n)

    def read_bytes(self, n: int) -> bytes:
        """Read exactly n bytes, raise TruncatedInput if not enough."""
        start = self._advance(n)
        return self._data[start:self._pos].tobytes()

    def read_uint32(self) -> int:
        start = self._advance(_UINT32.size)
        return _UINT32.unpack_from(self._data, start)[0]

    def read_float32(self) -> float:
        start = self._advance(_FLOAT32.size)
        return _FLOAT32.unpack_from(self._data, start)[0]


# =============================================================================
# Notebook Decoder
# =============================================================================

def _check_cancel(cancel: Optional[CancelSignal]) -> None:
    if cancel is not None and cancel.is_set():
        raise ConversionCancelled("Decode cancelled")


def read_points(cursor: ByteCursor, count: int) -> tuple[Point, ...]:
    """Read ``count`` 24-byte point records."""
    # One bounds check for the whole block
    block = cursor.read_bytes(count * POINT_SIZE)
    return tuple(
        Point(x, y, pressure, tilt)
        for x, y, pressure, tilt, _reserved1, _reserved2 in _POINT.iter_unpack(block)
    )


def read_stroke(cursor: ByteCursor) -> Stroke:
    """Read one stroke header and its points."""
    pen_code = cursor.read_uint32()
    color_code = cursor.read_uint32()
    _reserved = cursor.read_uint32()
    width = cursor.read_float32()
    _reserved = cursor.read_uint32()
    point_count = cursor.read_uint32()

    points = read_points(cursor, point_count)

    return Stroke(
        pen=resolve_pen(pen_code),
        color=resolve_color(color_code),
        width=width,
        points=points,
    )


def decode_notebook(data: bytes, cancel: Optional[CancelSignal] = None) -> Notebook:
    """
    Decode a notebook stream.

    Args:
        data: Raw notebook bytes
        cancel: Optional signal checked before each page and stroke

    Returns:
        The fully decoded Notebook

    Raises:
        TruncatedInput: a declared record runs past the end of ``data``
        ConversionCancelled: ``cancel`` was set during the decode
    """
    cursor = ByteCursor(data)
    cursor.skip(PREAMBLE_SIZE)

    pages = []
    page_count = cursor.read_uint32()
    for _ in range(page_count):
        _check_cancel(cancel)
        layers = []
        layer_count = cursor.read_uint32()
        for _ in range(layer_count):
            strokes = []
            stroke_count = cursor.read_uint32()
            for _ in range(stroke_count):
                _check_cancel(cancel)
                strokes.append(read_stroke(cursor))
            layers.append(Layer(tuple(strokes)))
        pages.append(Page(tuple(layers)))

    return Notebook(tuple(pages))


def parse_file(path: Path) -> Notebook:
    """Read and decode a notebook file."""
    return decode_notebook(Path(path).read_bytes())


# =============================================================================
# CLI
# =============================================================================

def analyze_file(path: Path) -> None:
    """Analyze a notebook file and print summary."""
    path = Path(path)
    print(f"File: {path.name}")
    print(f"Size: {path.stat().st_size} bytes")
    print()

    notebook = parse_file(path)

    print(f"Pages: {len(notebook.pages)}")
    print(f"Layers: {notebook.layer_count}")
    print(f"Strokes: {notebook.stroke_count}")
    print(f"Points: {notebook.point_count}")

    if notebook.stroke_count > 0:
        print("\nPen types used:")
        for pen in sorted({stroke.pen for stroke in notebook.all_strokes()}):
            print(f"  - {pen.name}")

        print("\nColors used:")
        for color in sorted({stroke.color for stroke in notebook.all_strokes()}):
            print(f"  - {color.name}")


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2:
        print("Usage: python -m rmnotebook.parser <file.rm>")
        sys.exit(1)

    path = Path(sys.argv[1])
    if not path.exists():
        print(f"File not found: {path}")
        sys.exit(1)

    analyze_file(path)
