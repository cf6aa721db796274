"""
PDF renderer for a documentation-entry tree.

Produces one PDF per top-level TypeDoc: table of contents on the leading
page(s), then one section per entry (pre-order over nested types) with an
overview, the description and a table per member group.

Usage:
    from renderers.pdf.type_doc_pdf import TypeDocPdfRenderer
    renderer = TypeDocPdfRenderer(type_doc)
    renderer.generate("out/pdf/MyClass.pdf")
"""

import logging
from collections import deque
from pathlib import Path
from typing import List, Optional, Tuple, Union

from models.type_doc import TypeDoc
from renderers.pdf.document import PdfDocument
from renderers.pdf.page_writer import PageWriter, RenderContext
from renderers.pdf.table import TableColumnSpec
from renderers.pdf.theme import PdfTheme
from renderers.pdf.toc import TOC_HEADING, TocEntry, count_toc_pages, draw_toc, toc_label

logger = logging.getLogger("renderers.pdf.type_doc")

MAX_HEADING_LEVEL = 3


def heading_title(entry: TypeDoc) -> str:
    kind = entry.kind.strip()
    return f"{kind} {entry.display_name}" if kind else entry.display_name


# ── Renderer ──────────────────────────────────────────────────────────
class TypeDocPdfRenderer:
    """
    Lays out a TypeDoc tree and writes it as a PDF.

    Args:
        root: Top-level entry; nested types become sub-sections.
        theme: Visual theme. Defaults to ``PdfTheme.create_default()``.
        author: Optional PDF metadata author.
        header_override: Fixed page-header text instead of the section title.
    """

    def __init__(
        self,
        root: TypeDoc,
        theme: Optional[PdfTheme] = None,
        author: Optional[str] = None,
        header_override: Optional[str] = None,
    ):
        self.root = root
        self.theme = theme or PdfTheme.create_default()
        self.author = author
        self.header_override = header_override
        self.toc_entries: List[TocEntry] = []

    # ── Public API ────────────────────────────────────────────────────

    def layout(self) -> PdfDocument:
        """Run the content pass and the TOC pass; return the laid-out document."""
        theme = self.theme
        doc = PdfDocument(title=self.root.display_name, author=self.author, page_size=theme.page_size)
        ctx = RenderContext(doc, theme)
        self.toc_entries = []

        labels = [
            toc_label(heading_title(e), e.signature, e.summary) for e in self.root.flatten_nested()
        ]
        toc_pages = [doc.add_page() for _ in range(count_toc_pages(theme, labels))]

        # Content pass
        ctx.current_section_title = self.root.display_name
        writer = PageWriter(ctx, doc.add_page(), header_override=self.header_override)
        self._render_entry(writer, self.root, level=1, depth=0)

        # TOC pass
        ctx.current_section_title = None
        ctx.reserved_pages = deque(toc_pages[1:])
        writer.bind(toc_pages[0], draw_header_footer=False)
        key = doc.add_destination(toc_pages[0], writer.top)
        toc_pages[0].add_outline(TOC_HEADING, key, level=0)
        draw_toc(writer, self.toc_entries)
        if ctx.reserved_pages or writer.page not in toc_pages:
            logger.warning(
                f"TOC for {self.root.display_name} did not fill its {len(toc_pages)} reserved page(s) exactly"
            )

        logger.debug(
            f"Laid out {self.root.display_name}: {doc.page_count} pages, {len(self.toc_entries)} TOC entries"
        )
        return doc

    def render(self) -> bytes:
        return self.layout().to_bytes()

    def generate(self, output_path: Union[str, Path]) -> str:
        """
        Render the PDF and write it to *output_path*.

        Returns:
            The output path.
        """
        return self.layout().save(output_path)

    # ── Sections ──────────────────────────────────────────────────────

    def _render_entry(self, writer: PageWriter, entry: TypeDoc, level: int, depth: int) -> None:
        ctx = writer.ctx
        ctx.current_section_title = entry.display_name
        title = heading_title(entry)
        heading_level = min(level, MAX_HEADING_LEVEL)

        # Paginate first so the recorded location is where the heading lands
        writer.ensure_space(writer.heading_height(heading_level, title))
        page, y = writer.page, writer.y
        key = ctx.document.add_destination(page, y)
        page.add_outline(entry.display_name, key, level=depth)
        self.toc_entries.append(
            TocEntry(
                title=title,
                page_number=page.number,
                page=page,
                y=y,
                signature=entry.signature,
                description=entry.summary,
                level=depth,
                destination=key,
            )
        )

        writer.draw_heading(heading_level, title)
        writer.draw_definition_list("Overview", self._overview(entry))

        if entry.summary.strip():
            writer.draw_subheading("Description")
            writer.draw_paragraph(entry.summary)

        columns = self._member_columns()
        for group_title, members in entry.member_groups():
            writer.draw_subheading(group_title)
            writer.draw_table(columns, [(m.signature, m.modifiers, m.summary) for m in members])

        for nested in entry.nested_types:
            self._render_entry(writer, nested, level + 1, depth + 1)

    def _member_columns(self) -> List[TableColumnSpec]:
        return [
            TableColumnSpec("Signature", 0.45, self.theme.font_mono),
            TableColumnSpec("Modifiers", 0.2),
            TableColumnSpec("Summary", 0.35),
        ]

    @staticmethod
    def _overview(entry: TypeDoc) -> List[Tuple[str, str]]:
        items = [
            ("Kind", entry.kind or "-"),
            ("Namespace", entry.namespace or "(global)"),
        ]
        if entry.modifiers.strip():
            items.append(("Modifiers", entry.modifiers))
        if entry.attributes:
            items.append(("Attributes", ", ".join(entry.attributes)))
        if entry.base_types:
            items.append(("Base types", ", ".join(entry.base_types)))
        if entry.parent:
            items.append(("Parent", entry.parent))
        if entry.file_path:
            items.append(("Source", entry.file_path))
        return items


# ── Convenience functions ─────────────────────────────────────────────

def render_document(root: TypeDoc, theme: Optional[PdfTheme] = None) -> bytes:
    return TypeDocPdfRenderer(root, theme=theme).render()


def render_to_file(root: TypeDoc, path: Union[str, Path], theme: Optional[PdfTheme] = None) -> str:
    return TypeDocPdfRenderer(root, theme=theme).generate(path)
