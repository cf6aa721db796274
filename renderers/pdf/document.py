"""
Recorded drawing surface for PDF output.

reportlab's canvas writes pages strictly in order, but the table of contents
on the first page can only be drawn once every section has been laid out.
Pages therefore record their drawing operations (in top-left page
coordinates, y growing downward) and the document replays them onto a
reportlab canvas when it is serialized.

Usage:
    doc = PdfDocument(title="MyClass")
    page = doc.add_page()
    page.draw_text(54, 72, "Hello", theme.font_normal, colors.black)
    doc.save("out/pdf/MyClass.pdf")
"""

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas as rl_canvas

from renderers.pdf.errors import PdfRenderError
from renderers.pdf.theme import FontSpec

logger = logging.getLogger("renderers.pdf.document")

# Text roles; header/footer text lives in the page margins
ROLE_CONTENT = "content"
ROLE_HEADER = "header"
ROLE_FOOTER = "footer"


@dataclass(frozen=True)
class Rect:
    """Rectangle in top-left page coordinates."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def to_pdf(self, page_height: float) -> Tuple[float, float, float, float]:
        """Bottom-left ``(x1, y1, x2, y2)`` for reportlab, clamped to the page."""
        width = max(0.0, self.width)
        height = max(0.0, self.height)
        lly = page_height - (self.y + height)
        if lly < 0:
            height += lly
            lly = 0.0
        return (self.x, lly, self.x + width, lly + max(0.0, height))


# ── Drawing operations ────────────────────────────────────────────────

@dataclass(frozen=True)
class TextOp:
    x: float
    y: float  # top of the line box
    text: str
    font: FontSpec
    color: Any
    align: str = "left"  # "left" | "right" (x is then the right edge)
    role: str = ROLE_CONTENT

    def replay(self, c, page_height: float) -> None:
        baseline = page_height - (self.y + self.font.ascent)
        c.setFont(self.font.name, self.font.size)
        c.setFillColor(self.color)
        if self.align == "right":
            c.drawRightString(self.x, baseline, self.text)
        else:
            c.drawString(self.x, baseline, self.text)


@dataclass(frozen=True)
class LineOp:
    x1: float
    y1: float
    x2: float
    y2: float
    color: Any
    width: float = 0.5
    dash: Optional[Tuple[float, ...]] = None

    def replay(self, c, page_height: float) -> None:
        c.saveState()
        c.setStrokeColor(self.color)
        c.setLineWidth(self.width)
        if self.dash:
            c.setDash(list(self.dash))
        c.line(self.x1, page_height - self.y1, self.x2, page_height - self.y2)
        c.restoreState()


@dataclass(frozen=True)
class ClipBeginOp:
    rect: Rect

    def replay(self, c, page_height: float) -> None:
        x1, y1, x2, y2 = self.rect.to_pdf(page_height)
        c.saveState()
        path = c.beginPath()
        path.rect(x1, y1, x2 - x1, y2 - y1)
        c.clipPath(path, stroke=0, fill=0)


@dataclass(frozen=True)
class ClipEndOp:
    def replay(self, c, page_height: float) -> None:
        c.restoreState()


@dataclass(frozen=True)
class DestinationOp:
    key: str
    y: float

    def replay(self, c, page_height: float) -> None:
        c.bookmarkHorizontalAbsolute(self.key, page_height - self.y)


@dataclass(frozen=True)
class OutlineOp:
    title: str
    key: str
    level: int

    def replay(self, c, page_height: float) -> None:
        c.addOutlineEntry(self.title, self.key, level=self.level)


@dataclass(frozen=True)
class LinkOp:
    rect: Rect
    destination: str

    def replay(self, c, page_height: float) -> None:
        c.linkAbsolute("", self.destination, Rect=self.rect.to_pdf(page_height), thickness=0)


# ── Pages ─────────────────────────────────────────────────────────────

class Page:
    """One fixed-size page; an append-only list of drawing operations."""

    def __init__(self, number: int, width: float, height: float):
        self.number = number
        self.width = width
        self.height = height
        self.ops: List[Any] = []
        self._clip_depth = 0

    def __repr__(self) -> str:
        return f"Page(number={self.number}, ops={len(self.ops)})"

    def draw_text(
        self,
        x: float,
        y: float,
        text: str,
        font: FontSpec,
        color: Any,
        align: str = "left",
        role: str = ROLE_CONTENT,
    ) -> None:
        self.ops.append(TextOp(x, y, text, font, color, align, role))

    def draw_line(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        color: Any,
        width: float = 0.5,
        dash: Optional[Tuple[float, ...]] = None,
    ) -> None:
        self.ops.append(LineOp(x1, y1, x2, y2, color, width, dash))

    def push_clip(self, rect: Rect) -> None:
        self._clip_depth += 1
        self.ops.append(ClipBeginOp(rect))

    def pop_clip(self) -> None:
        if self._clip_depth == 0:
            raise PdfRenderError("pop_clip without matching push_clip")
        self._clip_depth -= 1
        self.ops.append(ClipEndOp())

    def add_destination(self, key: str, y: float) -> None:
        self.ops.append(DestinationOp(key, y))

    def add_outline(self, title: str, key: str, level: int = 0) -> None:
        self.ops.append(OutlineOp(title, key, level))

    def add_link(self, rect: Rect, destination: str) -> None:
        self.ops.append(LinkOp(rect, destination))

    def text_ops(self, role: Optional[str] = ROLE_CONTENT) -> List[TextOp]:
        return [op for op in self.ops if isinstance(op, TextOp) and (role is None or op.role == role)]

    def links(self) -> List[LinkOp]:
        return [op for op in self.ops if isinstance(op, LinkOp)]

    def destinations(self) -> List[DestinationOp]:
        return [op for op in self.ops if isinstance(op, DestinationOp)]


# ── Document ──────────────────────────────────────────────────────────

class PdfDocument:
    """Ordered, append-only list of pages plus document metadata."""

    def __init__(
        self,
        title: str = "",
        author: Optional[str] = None,
        page_size: Tuple[float, float] = A4,
    ):
        self.title = title
        self.author = author
        self.page_size = page_size
        self._pages: List[Page] = []
        self._dest_counter = 0

    @property
    def pages(self) -> Tuple[Page, ...]:
        return tuple(self._pages)

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def add_page(self) -> Page:
        width, height = self.page_size
        page = Page(len(self._pages) + 1, width, height)
        self._pages.append(page)
        return page

    def page_number_of(self, page: Page) -> int:
        """1-based position of *page* in this document."""
        for i, candidate in enumerate(self._pages):
            if candidate is page:
                return i + 1
        raise ValueError("Page does not belong to this document")

    def add_destination(self, page: Page, y: float) -> str:
        """Register a named destination at *y* on *page* and return its key."""
        self.page_number_of(page)
        self._dest_counter += 1
        key = f"dest-{self._dest_counter}"
        page.add_destination(key, y)
        return key

    # ── Serialization ─────────────────────────────────────────────────

    def to_bytes(self) -> bytes:
        """Replay all pages onto a reportlab canvas and return the PDF bytes."""
        buffer = io.BytesIO()
        c = rl_canvas.Canvas(buffer, pagesize=self.page_size, invariant=1, pageCompression=0)
        if self.title:
            c.setTitle(self.title)
        if self.author:
            c.setAuthor(self.author)
        c.setCreator("xyDoc")

        try:
            for page in self._pages:
                c.setPageSize((page.width, page.height))
                for op in page.ops:
                    op.replay(c, page.height)
                c.showPage()
            if any(isinstance(op, OutlineOp) for page in self._pages for op in page.ops):
                c.showOutline()
            c.save()
        except Exception as e:
            raise PdfRenderError(f"Failed to serialize '{self.title or 'document'}': {e}") from e

        return buffer.getvalue()

    def save(self, path: Union[str, Path]) -> str:
        """Serialize and write the document to *path*."""
        data = self.to_bytes()
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
        logger.info(f"PDF written to {path} ({self.page_count} pages)")
        return str(path)
