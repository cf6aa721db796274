"""
Cursor-based page writer.

The writer owns a vertical cursor on the current page and draws headings,
paragraphs, definition lists, tables and TOC lines top to bottom. Every draw
first calls ``ensure_space`` with the height it needs; when that height would
cross the bottom margin a new page is allocated, the header/footer are
redrawn and the cursor is reset to the top margin.
"""

import logging
from collections import deque
from typing import Callable, Deque, Iterable, List, Optional, Sequence, Tuple

from reportlab.lib import colors

from renderers.pdf.document import ROLE_FOOTER, ROLE_HEADER, PdfDocument, Page, Rect
from renderers.pdf.table import CELL_PADDING, Cell, TableColumnSpec, column_widths
from renderers.pdf.text_layout import dot_leader, ellipsize, wrap_text
from renderers.pdf.theme import FontSpec, PdfTheme

logger = logging.getLogger("renderers.pdf.page_writer")

DEFAULT_HEADER = "xyDoc"
TOC_HANGING_INDENT = 10.0
PAGE_NUMBER_SAMPLE = "9999"
PAGE_NUMBER_PADDING = 6.0
DEFINITION_KEY_GAP = 6.0
ROW_RULE_OFFSET = 4.0


class RenderContext:
    """Per-render state shared by every writer working on one document."""

    def __init__(self, document: PdfDocument, theme: PdfTheme):
        self.document = document
        self.theme = theme
        self.current_section_title: Optional[str] = None
        self.reserved_pages: Deque[Page] = deque()

    @property
    def page_number(self) -> int:
        return self.document.page_count

    def add_page(self) -> Page:
        """Next reserved page if any are left, otherwise a fresh page."""
        if self.reserved_pages:
            return self.reserved_pages.popleft()
        return self.document.add_page()


class PageWriter:
    def __init__(
        self,
        ctx: RenderContext,
        page: Page,
        draw_header_footer: bool = True,
        header_override: Optional[str] = None,
    ):
        self.ctx = ctx
        self.theme = ctx.theme
        self.draw_header_footer = draw_header_footer
        self.header_override = header_override
        self.paginations = 0
        self.page = page
        self.y = 0.0
        self.bind(page)

    # ── Geometry ──────────────────────────────────────────────────────

    @property
    def left(self) -> float:
        return self.theme.margin_left

    @property
    def right(self) -> float:
        return self.page.width - self.theme.margin_right

    @property
    def top(self) -> float:
        return self.theme.margin_top

    @property
    def bottom(self) -> float:
        return self.page.height - self.theme.margin_bottom

    @property
    def content_width(self) -> float:
        return self.right - self.left

    @property
    def capacity(self) -> float:
        """Usable height of an empty page."""
        return self.bottom - self.top

    def line_height(self, font: FontSpec) -> float:
        return self.theme.line_height(font)

    # ── Pagination ────────────────────────────────────────────────────

    def bind(self, page: Page, draw_header_footer: Optional[bool] = None) -> None:
        """Rebind the surface and cursor to *page*."""
        if draw_header_footer is not None:
            self.draw_header_footer = draw_header_footer
        self.page = page
        self.y = self.top
        if self.draw_header_footer:
            self._draw_header_footer()

    def new_page(self) -> Page:
        page = self.ctx.add_page()
        self.paginations += 1
        logger.debug(f"Paginating to page {page.number}")
        self.bind(page)
        return page

    def ensure_space(self, height: float) -> bool:
        """Start a new page unless *height* fits above the bottom margin."""
        if self.y + height <= self.bottom:
            return False
        self.new_page()
        return True

    def spacer(self, height: float) -> None:
        self.y += height

    def _header_text(self) -> str:
        return (
            self.header_override
            or self.ctx.current_section_title
            or self.ctx.document.title
            or DEFAULT_HEADER
        )

    def _draw_header_footer(self) -> None:
        t = self.theme
        font = t.font_small
        header = ellipsize(self._header_text(), font, self.content_width)
        self.page.draw_text(self.left, t.page_header_top, header, font, t.color_muted, role=ROLE_HEADER)
        rule_y = t.page_header_top + self.line_height(font) + 2
        self.page.draw_line(self.left, rule_y, self.right, rule_y, t.color_rule, 0.5)

        footer_y = self.bottom + 6
        self.page.draw_text(
            self.right, footer_y, str(self.page.number), font, t.color_muted, align="right", role=ROLE_FOOTER
        )

    # ── Text blocks ───────────────────────────────────────────────────

    def _heading_style(self, level: int) -> Tuple[FontSpec, object, float]:
        t = self.theme
        if level <= 1:
            return t.font_h1, t.color_primary, 8.0
        if level == 2:
            return t.font_h2, t.color_primary, 6.0
        return t.font_h3, t.color_dark, 4.0

    def _heading_gap(self, level: int) -> float:
        return 8.0 if level <= 1 else 6.0

    def _heading_lines(self, level: int, text: str) -> Tuple[List[str], float]:
        font, _, _ = self._heading_style(level)
        lh = self.line_height(font) * self.theme.line_spacing_heading
        return wrap_text(text, font, self.content_width), lh

    def heading_height(self, level: int, text: str) -> float:
        """Height the heading block needs, including its rule and trailing gap."""
        _, _, spacing = self._heading_style(level)
        lines, lh = self._heading_lines(level, text)
        return len(lines) * lh + spacing + self._heading_gap(level)

    def draw_heading(self, level: int, text: str) -> None:
        font, color, spacing = self._heading_style(level)
        lines, lh = self._heading_lines(level, text)
        self.ensure_space(self.heading_height(level, text))
        for line in lines:
            self.page.draw_text(self.left, self.y, line, font, color)
            self.y += lh
        self.y += spacing
        self.draw_hairline(0.6 if level <= 1 else 0.35)
        self.spacer(self._heading_gap(level))

    def draw_subheading(self, text: str) -> None:
        font = self.theme.font_h4
        lines = wrap_text(text, font, self.content_width)
        lh = self.line_height(font)
        self.ensure_space(len(lines) * lh + 6)
        for line in lines:
            self.page.draw_text(self.left, self.y, line, font, self.theme.color_dark)
            self.y += lh
        self.spacer(2)
        self.draw_hairline(0.25)
        self.spacer(4)

    def _flow_lines(self, lines: Sequence[str], font: FontSpec, color, x: Optional[float] = None) -> None:
        lh = self.line_height(font)
        x = self.left if x is None else x
        if len(lines) * lh <= self.capacity:
            self.ensure_space(len(lines) * lh)
        for line in lines:
            self.ensure_space(lh)
            self.page.draw_text(x, self.y, line, font, color)
            self.y += lh

    def draw_paragraph(self, text: str, font: Optional[FontSpec] = None, color=None) -> None:
        font = font or self.theme.font_normal
        lines = wrap_text(text, font, self.content_width)
        self._flow_lines(lines, font, color or self.theme.color_text)
        self.spacer(self.theme.paragraph_spacing)

    def draw_bullet_line(self, title: str, value: str) -> None:
        font = self.theme.font_normal
        lines = wrap_text(f"{title}: {value}", font, self.content_width)
        self._flow_lines(lines, font, self.theme.color_text)
        self.spacer(4)

    def draw_hairline(self, alpha: float = 0.35) -> None:
        shade = 1.0 - max(0.0, min(1.0, alpha))
        self.page.draw_line(self.left, self.y, self.right, self.y, colors.Color(shade, shade, shade), 0.5)

    # ── Rows ──────────────────────────────────────────────────────────

    def _draw_row(
        self,
        cells: List[Cell],
        padding_after: float = 0.0,
        clip: bool = False,
        separators: Sequence[float] = (),
        on_new_page: Optional[Callable[[], None]] = None,
        reserve: float = 0.0,
    ) -> None:
        """
        Draw one row of side-by-side cells.

        A row that fits on an empty page (below the *reserve* drawn by
        *on_new_page*) is kept whole. A taller row is drawn in chunks of
        whole lines, one chunk per page.
        """
        height = max(c.height for c in cells)
        if height + padding_after + reserve <= self.capacity:
            if self.ensure_space(height + padding_after) and on_new_page:
                on_new_page()
            if self.y + height + padding_after <= self.bottom:
                self._draw_cells(cells, [len(c.lines) for c in cells], clip, separators)
                self.y += height
                return

        logger.debug(f"Row of height {height:.1f} exceeds page capacity, splitting")
        fresh = False
        while any(c.remaining for c in cells):
            available = self.bottom - self.y - padding_after
            counts = [min(c.remaining, int(available // c.line_height)) for c in cells]
            if not any(counts):
                if not fresh:
                    self.new_page()
                    if on_new_page:
                        on_new_page()
                    fresh = True
                    continue
                counts = [min(c.remaining, 1) for c in cells]
            chunk_height = self._draw_cells(cells, counts, clip, separators)
            self.y += chunk_height
            fresh = False

    def _draw_cells(self, cells: List[Cell], counts: List[int], clip: bool, separators: Sequence[float]) -> float:
        chunk_height = max(n * c.line_height for c, n in zip(cells, counts))
        for cell, n in zip(cells, counts):
            lines = cell.lines[cell.cursor:cell.cursor + n]
            if clip:
                self.page.push_clip(Rect(cell.x, self.y, cell.width, chunk_height))
            for i, line in enumerate(lines):
                self.page.draw_text(
                    cell.x + cell.padding,
                    self.y + i * cell.line_height,
                    line,
                    cell.font,
                    cell.color or self.theme.color_text,
                )
            if clip:
                self.page.pop_clip()
            cell.cursor += n

        for x in separators:
            self.page.draw_line(x, self.y, x, self.y + chunk_height, self.theme.color_rule, 0.5, dash=(1, 2))
        return chunk_height

    def draw_definition_list(self, title: str, items: Iterable[Tuple[str, str]]) -> None:
        items = [(str(k), "" if v is None else str(v)) for k, v in items]
        self.draw_subheading(title)
        if not items:
            return

        t = self.theme
        key_font, value_font = t.font_normal_bold, t.font_normal
        widest = max(key_font.width(k) for k, _ in items)
        key_width = min(max(widest, self.content_width * 0.12), self.content_width * 0.35)
        value_width = self.content_width - key_width - DEFINITION_KEY_GAP
        row_lh = max(self.line_height(key_font), self.line_height(value_font))
        value_x = self.left + key_width + DEFINITION_KEY_GAP

        for key, value in items:
            cells = [
                Cell(wrap_text(key, key_font, key_width), key_font, self.left, key_width, row_lh, padding=0,
                     color=t.color_dark),
                Cell(wrap_text(value, value_font, value_width), value_font, value_x, value_width, row_lh, padding=0),
            ]
            self._draw_row(cells, padding_after=2)
            self.spacer(2)
        self.spacer(4)

    # ── Tables ────────────────────────────────────────────────────────

    def draw_table(self, columns: Sequence[TableColumnSpec], rows: Iterable[Sequence[str]]) -> None:
        columns = list(columns)
        if not columns:
            return
        rows = list(rows)

        t = self.theme
        gap = t.table_col_gap
        widths = column_widths([c.width_ratio for c in columns], self.content_width - gap * (len(columns) - 1))
        xs = []
        x = self.left
        for w in widths:
            xs.append(x)
            x += w + gap
        separators = [xs[i] + widths[i] + gap / 2 for i in range(len(columns) - 1)]

        def make_cells(texts: Sequence[str], header: bool) -> List[Cell]:
            cells = []
            for i, col in enumerate(columns):
                font = t.font_small_bold if header else (col.font or t.font_normal)
                text = texts[i] if i < len(texts) and texts[i] is not None else ""
                inner = max(1.0, widths[i] - 2 * CELL_PADDING)
                cells.append(Cell(wrap_text(str(text), font, inner), font, xs[i], widths[i], self.line_height(font),
                                  color=t.color_dark if header else None))
            return cells

        def draw_header() -> None:
            self._draw_row(make_cells([c.header for c in columns], header=True), ROW_RULE_OFFSET, clip=True)
            self.draw_hairline(0.5)
            self.spacer(ROW_RULE_OFFSET)

        header_height = max(c.height for c in make_cells([c.header for c in columns], header=True))
        header_block = header_height + ROW_RULE_OFFSET * 2
        first_height = max(c.height for c in make_cells(rows[0], header=False)) if rows else 0.0
        block = header_block + first_height + ROW_RULE_OFFSET
        if block <= self.capacity:
            # keep the header with the first row
            self.ensure_space(block)
        draw_header()

        for row in rows:
            self._draw_row(make_cells(row, header=False), ROW_RULE_OFFSET + 2, clip=True, separators=separators,
                           on_new_page=draw_header, reserve=header_block)
            self.spacer(ROW_RULE_OFFSET)
            self.draw_hairline(0.1)
            self.spacer(2)
        self.spacer(t.paragraph_spacing)

    # ── TOC lines ─────────────────────────────────────────────────────

    def _page_column_width(self, font: FontSpec, page_number: int) -> float:
        return max(font.width(PAGE_NUMBER_SAMPLE), font.width(str(page_number))) + PAGE_NUMBER_PADDING

    def draw_toc_line(self, title: str, page_number: int) -> Rect:
        """Single-line TOC entry; returns the line's bounding box."""
        font = self.theme.font_normal
        lh = self.line_height(font)
        available = self.content_width - self._page_column_width(font, page_number)
        text = ellipsize(title, font, available)
        text += dot_leader(font, available - font.width(text))

        self.ensure_space(lh + 2)
        rect = Rect(self.left, self.y, self.content_width, lh)
        self.page.draw_text(self.left, self.y, text, font, self.theme.color_text)
        self.page.draw_text(self.right, self.y, str(page_number), font, self.theme.color_text, align="right")
        self.y += lh + 2
        return rect

    def draw_toc_line_wrapped(
        self, text: str, page_number: int, hanging_indent: float = TOC_HANGING_INDENT
    ) -> Rect:
        """
        TOC entry that wraps onto continuation lines.

        Dot leaders and the page number go on the first line only;
        continuation lines are indented by *hanging_indent*. Returns the
        bounding box of the whole entry.
        """
        font = self.theme.font_normal
        lh = self.line_height(font)
        indent = max(0.0, hanging_indent)
        available = self.content_width - self._page_column_width(font, page_number)

        first = wrap_text(text, font, available)[0]
        rest = " ".join((text or "").split())[len(first):].strip()
        continuation = wrap_text(rest, font, max(1.0, available - indent)) if rest else []

        line_count = 1 + len(continuation)
        self.ensure_space(line_count * lh + 2)
        top = self.y
        leader = dot_leader(font, available - font.width(first))
        self.page.draw_text(self.left, top, first + leader, font, self.theme.color_text)
        self.page.draw_text(self.right, top, str(page_number), font, self.theme.color_text, align="right")
        for i, line in enumerate(continuation, start=1):
            self.page.draw_text(self.left + indent, top + i * lh, line, font, self.theme.color_text)

        self.y = top + line_count * lh + 2
        return Rect(self.left, top, self.content_width, line_count * lh)
