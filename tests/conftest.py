"""
Builders for synthetic notebook streams.
"""

import struct

import pytest

PREAMBLE = b"notebook stream preamble 33 bytes"
assert len(PREAMBLE) == 33


def encode_point(x, y, pressure=0.5, tilt=0.0):
    return struct.pack("<6f", x, y, pressure, tilt, 0.0, 0.0)


def encode_stroke(pen=0, color=0, width=2.0, points=()):
    """Encode one stroke; points are (x, y) or (x, y, pressure, tilt) tuples."""
    header = struct.pack("<IIIfII", pen, color, 0xDEAD, width, 0xBEEF, len(points))
    return header + b"".join(encode_point(*p) for p in points)


def encode_notebook(pages):
    """
    Encode a notebook.

    ``pages`` is a list of pages; each page is a list of layers; each
    layer is a list of already-encoded strokes.
    """
    out = bytearray(PREAMBLE)
    out += struct.pack("<I", len(pages))
    for layers in pages:
        out += struct.pack("<I", len(layers))
        for strokes in layers:
            out += struct.pack("<I", len(strokes))
            for stroke in strokes:
                out += stroke
    return bytes(out)


@pytest.fixture
def scenario_a():
    """1 page, 1 layer, 1 black ballpoint stroke through three points."""
    stroke = encode_stroke(pen=0, color=0, width=2.0,
                           points=[(0, 0), (10, 0), (10, 10)])
    return encode_notebook([[[stroke]]])


@pytest.fixture
def multi_page():
    """Four pages whose strokes identify the page they belong to."""
    pages = []
    for i in range(4):
        stroke = encode_stroke(pen=i, color=i, width=float(i + 1),
                               points=[(i, i), (i + 100, i + 100)])
        pages.append([[stroke]])
    return encode_notebook(pages)
