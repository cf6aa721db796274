"""
Table of contents with deferred page-number resolution.

During the content pass the assembler records a ``TocEntry`` (page handle
and cursor position) right before each section heading is drawn. Once all
sections are laid out, ``draw_toc`` writes the entries onto the reserved
leading pages and links every line back to its recorded location.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from renderers.pdf.document import Page, PdfDocument, Rect
from renderers.pdf.page_writer import PageWriter, RenderContext
from renderers.pdf.text_layout import first_sentence, snippet
from renderers.pdf.theme import PdfTheme

logger = logging.getLogger("renderers.pdf.toc")

TOC_HEADING = "Table of Contents"
LABEL_SEPARATOR = " — "
SIGNATURE_MAX_CHARS = 60
DESCRIPTION_MAX_CHARS = 90

# Widest page number the fixed page column is sized for
_PLACEHOLDER_PAGE = 9999


def toc_label(title: str, signature: Optional[str] = None, description: Optional[str] = None) -> str:
    """``title — signature — description`` with each optional part capped."""
    parts = [title]
    if signature and signature.strip():
        parts.append(snippet(signature, SIGNATURE_MAX_CHARS))
    if description and description.strip():
        parts.append(snippet(first_sentence(description), DESCRIPTION_MAX_CHARS))
    return LABEL_SEPARATOR.join(parts)


@dataclass(frozen=True)
class TocEntry:
    title: str
    page_number: int
    page: Page
    y: float
    signature: Optional[str] = None
    description: Optional[str] = None
    level: int = 0
    destination: Optional[str] = None

    def label(self) -> str:
        return toc_label(self.title, self.signature, self.description)


def draw_toc(
    writer: PageWriter,
    entries: Iterable[TocEntry],
    heading: str = TOC_HEADING,
    link: bool = True,
) -> List[Rect]:
    """
    Draw *entries* in order from the writer's cursor.

    Each line gets dot leaders and its page number; with *link* set, a
    go-to annotation covering the line points at the entry's recorded page
    and y offset. Returns the line rectangles.
    """
    document = writer.ctx.document
    writer.draw_heading(1, heading)

    rects = []
    for entry in entries:
        rect = writer.draw_toc_line_wrapped(entry.label(), entry.page_number)
        if link:
            key = entry.destination or document.add_destination(entry.page, entry.y)
            writer.page.add_link(rect, key)
        rects.append(rect)
    return rects


def count_toc_pages(theme: PdfTheme, labels: Sequence[str], heading: str = TOC_HEADING) -> int:
    """Number of pages the TOC for *labels* occupies, from a dry run."""
    scratch = PdfDocument(page_size=theme.page_size)
    writer = PageWriter(RenderContext(scratch, theme), scratch.add_page(), draw_header_footer=False)
    writer.draw_heading(1, heading)
    for label in labels:
        writer.draw_toc_line_wrapped(label, _PLACEHOLDER_PAGE)
    logger.debug(f"TOC with {len(labels)} entries needs {scratch.page_count} page(s)")
    return scratch.page_count
