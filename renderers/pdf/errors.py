"""Exceptions raised by the PDF layout engine."""


class PdfRenderError(Exception):
    """Base error for PDF rendering; aborts the current document."""


class FontResolutionError(PdfRenderError):
    """A font face could not be located or loaded."""
