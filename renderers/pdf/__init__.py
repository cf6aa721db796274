"""
renderers.pdf - Paginated PDF layout engine.

Modules:
    fonts        - Font-face discovery and registration (FontResolver)
    theme        - Margins, spacing, colours and fonts (PdfTheme)
    text_layout  - Word wrapping, ellipsis and dot leaders
    document     - Recorded pages replayed onto a reportlab canvas
    table        - Column specs and ratio-based column widths
    page_writer  - Cursor writer with automatic pagination
    toc          - Table of contents with deferred page numbers
    type_doc_pdf - Renders a TypeDoc tree to a PDF file
"""

from renderers.pdf.document import PdfDocument, Page, Rect
from renderers.pdf.errors import FontResolutionError, PdfRenderError
from renderers.pdf.fonts import FontResolver
from renderers.pdf.page_writer import PageWriter, RenderContext
from renderers.pdf.table import TableColumnSpec
from renderers.pdf.text_layout import wrap_text
from renderers.pdf.theme import FontSpec, PdfTheme
from renderers.pdf.toc import TocEntry, count_toc_pages, draw_toc
from renderers.pdf.type_doc_pdf import TypeDocPdfRenderer, render_document, render_to_file

__all__ = [
    "PdfDocument",
    "Page",
    "Rect",
    "PdfRenderError",
    "FontResolutionError",
    "FontResolver",
    "PageWriter",
    "RenderContext",
    "TableColumnSpec",
    "wrap_text",
    "FontSpec",
    "PdfTheme",
    "TocEntry",
    "count_toc_pages",
    "draw_toc",
    "TypeDocPdfRenderer",
    "render_document",
    "render_to_file",
]
