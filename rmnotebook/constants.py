"""
Shared constants for notebook conversion.
"""

from .parser import Color

# Native page resolution of the device, in canvas units
CANVAS_WIDTH = 1404
CANVAS_HEIGHT = 1872

# Non-positive widths are drawn at this width instead
MIN_STROKE_WIDTH = 1.0

# DPI-based scaling
RM_DPI = 227
PDF_DPI = 72.0
RM_TO_PDF_SCALE = RM_DPI / PDF_DPI  # ~3.1528
DEFAULT_PDF_SCALE = 1 / RM_TO_PDF_SCALE

# Color mapping - RGB tuples (0-255)
COLOR_MAP_RGB = {
    Color.BLACK: (0, 0, 0),
    Color.GRAY: (128, 128, 128),
    Color.WHITE: (255, 255, 255),
    Color.YELLOW: (255, 255, 0),
    Color.GREEN: (0, 255, 0),
    Color.PINK: (255, 191, 204),
    Color.BLUE: (0, 0, 255),
    Color.RED: (255, 0, 0),
    Color.GRAY_OVERLAY: (179, 179, 179),
}

# Colors that are drawn semi-transparent
COLOR_OPACITY = {
    Color.GRAY_OVERLAY: 0.5,
}

# Color mapping - hex strings (for SVG)
COLOR_MAP_HEX = {
    color: f"#{r:02x}{g:02x}{b:02x}"
    for color, (r, g, b) in COLOR_MAP_RGB.items()
}
