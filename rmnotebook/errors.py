"""
Exceptions raised while converting notebooks.
"""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for every conversion failure."""


class TruncatedInput(ConversionError, EOFError):
    """A declared record could not be fully read from the remaining buffer."""

    def __init__(self, needed: int, offset: int, available: int):
        self.needed = needed
        self.offset = offset
        self.available = available
        super().__init__(
            f"Expected {needed} bytes at offset {offset}, only {available} left"
        )


class UnsupportedDocumentKind(ConversionError, ValueError):
    """Dispatch received a document kind it cannot convert."""

    def __init__(self, kind: object):
        self.kind = kind
        super().__init__(f"Unsupported document kind: {kind!r}")


class RenderingFailure(ConversionError):
    """The document writer could not serialize the rendered pages."""


class ConversionCancelled(ConversionError):
    """The caller asked for the conversion to stop."""
