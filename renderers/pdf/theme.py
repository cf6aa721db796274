"""
Visual theme for PDF output: page size, margins, spacing, colours and fonts.

A theme is built once per render and shared read-only by every page of the
document.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Optional, Tuple

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfbase import pdfmetrics

from renderers.pdf.fonts import FAMILY_MONO, FAMILY_SANS, FontResolver

# ── Colour palette ────────────────────────────────────────────────────
PRIMARY = colors.Color(40 / 255, 40 / 255, 40 / 255)
DARK = colors.Color(30 / 255, 30 / 255, 30 / 255)
TEXT = colors.black
MUTED = colors.HexColor("#808080")
RULE = colors.HexColor("#D3D3D3")

LINE_HEIGHT_FACTOR = 1.5


@dataclass(frozen=True)
class FontSpec:
    """A registered reportlab face at a given size."""

    name: str
    size: float

    def width(self, text: str) -> float:
        return pdfmetrics.stringWidth(text, self.name, self.size)

    @property
    def ascent(self) -> float:
        return pdfmetrics.getAscent(self.name, self.size)


@dataclass(frozen=True)
class PdfTheme:
    """Margins, spacing, colours and fonts for one document."""

    page_size: Tuple[float, float] = A4

    # Margins
    margin_left: float = 54  # 0.75"
    margin_right: float = 54
    margin_top: float = 72  # 1.0"
    margin_bottom: float = 72
    page_header_top: float = 36

    # Spacing
    paragraph_spacing: float = 6
    table_col_gap: float = 10
    line_spacing_heading: float = 1.0
    line_height_factor: float = LINE_HEIGHT_FACTOR

    # Colours
    color_primary: Any = PRIMARY
    color_dark: Any = DARK
    color_text: Any = TEXT
    color_muted: Any = MUTED
    color_rule: Any = RULE

    # Fonts
    font_h1: FontSpec = field(default_factory=lambda: FontSpec("Helvetica-Bold", 18))
    font_h2: FontSpec = field(default_factory=lambda: FontSpec("Helvetica-Bold", 14))
    font_h3: FontSpec = field(default_factory=lambda: FontSpec("Helvetica-Bold", 12))
    font_h4: FontSpec = field(default_factory=lambda: FontSpec("Helvetica-Bold", 11))
    font_normal: FontSpec = field(default_factory=lambda: FontSpec("Helvetica", 10))
    font_normal_bold: FontSpec = field(default_factory=lambda: FontSpec("Helvetica-Bold", 10))
    font_small: FontSpec = field(default_factory=lambda: FontSpec("Helvetica", 8))
    font_small_bold: FontSpec = field(default_factory=lambda: FontSpec("Helvetica-Bold", 8))
    font_mono: FontSpec = field(default_factory=lambda: FontSpec("Courier", 9.5))

    def line_height(self, font: FontSpec) -> float:
        """Simple line-height estimate for *font*."""
        return font.size * self.line_height_factor

    @classmethod
    def create_default(cls, resolver: Optional[FontResolver] = None, **overrides: Any) -> "PdfTheme":
        """Build the default theme with faces supplied by *resolver*."""
        resolver = resolver or FontResolver()
        sans = resolver.resolve(FAMILY_SANS)
        sans_bold = resolver.resolve(FAMILY_SANS, bold=True)
        mono = resolver.resolve(FAMILY_MONO)

        return cls(
            font_h1=FontSpec(sans_bold, 18),
            font_h2=FontSpec(sans_bold, 14),
            font_h3=FontSpec(sans_bold, 12),
            font_h4=FontSpec(sans_bold, 11),
            font_normal=FontSpec(sans, 10),
            font_normal_bold=FontSpec(sans_bold, 10),
            font_small=FontSpec(sans, 8),
            font_small_bold=FontSpec(sans_bold, 8),
            font_mono=FontSpec(mono, 9.5),
            **overrides,
        )

    @classmethod
    def from_config(cls, config) -> "PdfTheme":
        """
        Build a theme from the ``pdf`` section of a GlobalConfig.

        Recognised keys: fonts_dir, margin_left, margin_right, margin_top,
        margin_bottom, paragraph_spacing, table_col_gap.
        """
        resolver = FontResolver(fonts_dir=config.get_path("pdf.fonts_dir"))
        theme = cls.create_default(resolver)

        overrides = {}
        for key in (
            "margin_left",
            "margin_right",
            "margin_top",
            "margin_bottom",
            "paragraph_spacing",
            "table_col_gap",
        ):
            if config.has(f"pdf.{key}"):
                overrides[key] = config.get_float(f"pdf.{key}", getattr(theme, key))
        return replace(theme, **overrides) if overrides else theme
