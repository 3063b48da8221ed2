"""
Top-level conversion: document-kind dispatch and the notebook pipeline.

    bytes -> decode -> Notebook -> render pages -> RenderedDocument -> PDF bytes

Every run ends in exactly one of DECODE_FAILED, RENDER_FAILED or
ASSEMBLED. A failed or cancelled run returns nothing.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from .assembler import RenderedDocument, assemble_document
from .constants import DEFAULT_PDF_SCALE
from .errors import UnsupportedDocumentKind
from .parser import CancelSignal, Notebook, decode_notebook
from .pdf_export import write_pdf

_logger = logging.getLogger(__name__)


class DocumentKind(str, Enum):
    """Kinds of document handed over by the fetch side."""
    NOTEBOOK = "notebook"
    PDF_PASSTHROUGH = "pdf-passthrough"
    OTHER = "other"

    @classmethod
    def from_tag(cls, tag: str | DocumentKind) -> DocumentKind:
        """Parse a kind tag (case-insensitive). Unknown tags map to OTHER."""
        if isinstance(tag, cls):
            return tag
        normalized = str(tag).strip().lower()
        return _KIND_ALIASES.get(normalized, cls.OTHER)


_KIND_ALIASES = {
    "notebook": DocumentKind.NOTEBOOK,
    "rm": DocumentKind.NOTEBOOK,
    "pdf-passthrough": DocumentKind.PDF_PASSTHROUGH,
    "pdf": DocumentKind.PDF_PASSTHROUGH,
}


class ConversionState(Enum):
    START = "start"
    DECODING = "decoding"
    DECODED = "decoded"
    RENDERING = "rendering"
    DECODE_FAILED = "decode_failed"
    RENDER_FAILED = "render_failed"
    ASSEMBLED = "assembled"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = {
    ConversionState.DECODE_FAILED,
    ConversionState.RENDER_FAILED,
    ConversionState.ASSEMBLED,
}

Writer = Callable[[RenderedDocument], bytes]


class NotebookConverter:
    """
    One notebook conversion.

    Owns its own state for its whole lifetime; create a new converter
    for every notebook.
    """

    def __init__(
        self,
        workers: int = 1,
        cancel: Optional[CancelSignal] = None,
        writer: Optional[Writer] = None,
        scale: float = DEFAULT_PDF_SCALE,
    ):
        self.workers = workers
        self.cancel = cancel
        self.writer = writer or (lambda document: write_pdf(document, scale=scale))
        self.state = ConversionState.START

    def _transition(self, state: ConversionState) -> None:
        _logger.debug("Conversion %s -> %s", self.state.value, state.value)
        self.state = state

    def decode(self, data: bytes) -> Notebook:
        self._transition(ConversionState.DECODING)
        try:
            notebook = decode_notebook(data, cancel=self.cancel)
        except Exception:
            self._transition(ConversionState.DECODE_FAILED)
            raise
        self._transition(ConversionState.DECODED)
        _logger.debug(
            "Decoded %d pages, %d strokes", len(notebook.pages), notebook.stroke_count
        )
        return notebook

    def render(self, notebook: Notebook) -> bytes:
        self._transition(ConversionState.RENDERING)
        try:
            document = assemble_document(notebook, workers=self.workers, cancel=self.cancel)
            output = self.writer(document)
        except Exception:
            self._transition(ConversionState.RENDER_FAILED)
            raise
        self._transition(ConversionState.ASSEMBLED)
        return output

    def run(self, data: bytes) -> bytes:
        """Decode and render a notebook, returning the written document."""
        if self.state is not ConversionState.START:
            raise RuntimeError("NotebookConverter instances are single-use")
        return self.render(self.decode(data))


def convert_document(
    data: bytes,
    kind: str | DocumentKind,
    workers: int = 1,
    cancel: Optional[CancelSignal] = None,
    writer: Optional[Writer] = None,
    scale: float = DEFAULT_PDF_SCALE,
) -> bytes:
    """
    Convert fetched document bytes to PDF.

    Args:
        data: Raw document bytes
        kind: Document kind tag ("notebook", "pdf-passthrough", ...)
        workers: Page render threads
        cancel: Optional cooperative cancel signal
        writer: Serializer for the rendered document (default: PDF)
        scale: PDF points per canvas unit for the default writer

    Raises:
        UnsupportedDocumentKind: ``kind`` is neither notebook nor pdf-passthrough
        TruncatedInput: the notebook stream is truncated
        RenderingFailure: the writer failed
        ConversionCancelled: ``cancel`` was set
    """
    resolved = DocumentKind.from_tag(kind)
    if resolved is DocumentKind.PDF_PASSTHROUGH:
        return data
    if resolved is not DocumentKind.NOTEBOOK:
        raise UnsupportedDocumentKind(kind)

    converter = NotebookConverter(workers=workers, cancel=cancel, writer=writer, scale=scale)
    return converter.run(data)
