"""
Tablet Notebook Converter

Convert stroke-based notebook files to paginated vector documents.

Usage:
    from rmnotebook import parse_file, assemble_document, save_pdf

    notebook = parse_file("notebook.rm")
    document = assemble_document(notebook)
    save_pdf(document, "notebook.pdf")

CLI:
    python -m rmnotebook <input.rm> -o <output.pdf>
"""

from .errors import (
    ConversionError,
    TruncatedInput,
    UnsupportedDocumentKind,
    RenderingFailure,
    ConversionCancelled,
)
from .parser import (
    ByteCursor,
    Notebook,
    Page,
    Layer,
    Stroke,
    Point,
    PenType,
    Color,
    resolve_pen,
    resolve_color,
    decode_notebook,
    parse_file,
)
from .renderer import (
    StrokePath,
    RenderedPage,
    render_page,
    render_svg,
    render_to_files,
)
from .assembler import (
    RenderedDocument,
    assemble_document,
)
from .pdf_export import (
    write_pdf,
    save_pdf,
)
from .convert import (
    DocumentKind,
    ConversionState,
    NotebookConverter,
    convert_document,
)
from .config import (
    ConvertConfig,
    load_config,
)
from .export import (
    export_all,
)

__all__ = [
    "ConversionError",
    "TruncatedInput",
    "UnsupportedDocumentKind",
    "RenderingFailure",
    "ConversionCancelled",
    "ByteCursor",
    "Notebook",
    "Page",
    "Layer",
    "Stroke",
    "Point",
    "PenType",
    "Color",
    "resolve_pen",
    "resolve_color",
    "decode_notebook",
    "parse_file",
    "StrokePath",
    "RenderedPage",
    "render_page",
    "render_svg",
    "render_to_files",
    "RenderedDocument",
    "assemble_document",
    "write_pdf",
    "save_pdf",
    "DocumentKind",
    "ConversionState",
    "NotebookConverter",
    "convert_document",
    "ConvertConfig",
    "load_config",
    "export_all",
]

__version__ = "0.1.0"
