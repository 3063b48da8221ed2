"""
PDF Export for rendered notebooks.

Writes each rendered page onto its own PDF page with PyMuPDF.
"""

from __future__ import annotations

from pathlib import Path

import fitz  # PyMuPDF

from .assembler import RenderedDocument
from .constants import DEFAULT_PDF_SCALE
from .errors import RenderingFailure
from .renderer import StrokePath


def get_color(stroke_path: StrokePath) -> tuple[float, float, float]:
    """Get RGB color (0-1 range) for a path."""
    r, g, b = stroke_path.rgb
    return (r / 255, g / 255, b / 255)


def draw_path_on_page(shape: fitz.Shape, stroke_path: StrokePath, scale: float) -> None:
    """Draw a path using Shape for batched rendering."""
    pdf_points = [fitz.Point(x * scale, y * scale) for x, y in stroke_path.points]

    if len(pdf_points) == 1:
        # Zero-length segment, round caps turn it into a dot
        shape.draw_line(pdf_points[0], pdf_points[0])
    else:
        # Draw each line segment individually (avoids polyline spaghetti issue)
        for i in range(len(pdf_points) - 1):
            shape.draw_line(pdf_points[i], pdf_points[i + 1])

    # closePath=False prevents extra line back to the start
    shape.finish(color=get_color(stroke_path), width=stroke_path.width * scale,
                 lineCap=1, lineJoin=1, stroke_opacity=stroke_path.opacity,
                 closePath=False)


def _build_pdf(document: RenderedDocument, scale: float) -> fitz.Document:
    if not document.pages:
        raise RenderingFailure("Cannot write a PDF with zero pages")

    pdf = fitz.open()
    try:
        for page in document.pages:
            pdf_page = pdf.new_page(width=page.width * scale, height=page.height * scale)
            if page.is_blank:
                continue
            shape = pdf_page.new_shape()
            for stroke_path in page.paths:
                draw_path_on_page(shape, stroke_path, scale)
            shape.commit()  # Single commit per page for performance
    except Exception:
        pdf.close()
        raise
    return pdf


def write_pdf(document: RenderedDocument, scale: float = DEFAULT_PDF_SCALE) -> bytes:
    """
    Serialize a rendered document to PDF bytes.

    Args:
        document: Rendered pages, in order
        scale: PDF points per canvas unit

    Raises:
        RenderingFailure: PyMuPDF could not produce the document
    """
    try:
        pdf = _build_pdf(document, scale)
        try:
            return pdf.tobytes(garbage=3, deflate=True)
        finally:
            pdf.close()
    except RenderingFailure:
        raise
    except Exception as e:
        raise RenderingFailure(f"PDF serialization failed: {e}") from e


def save_pdf(document: RenderedDocument, output_path: Path,
             scale: float = DEFAULT_PDF_SCALE) -> None:
    """Write a rendered document to a PDF file."""
    output_path = Path(output_path)
    try:
        pdf = _build_pdf(document, scale)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            # Save with ez_save for optimal compression
            pdf.ez_save(output_path)
        finally:
            pdf.close()
    except RenderingFailure:
        raise
    except Exception as e:
        raise RenderingFailure(f"Failed to save {output_path.name}: {e}") from e
