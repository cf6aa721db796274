"""
Font resolution for the PDF renderer.

Maps the logical families used by the theme ("XY Sans", "XY Mono") onto
faces registered with reportlab. Without a fonts directory the PDF standard
fonts are used; with one, the directory is scanned for TrueType/OpenType
files and suitable sans/bold/mono faces are picked by name.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from renderers.pdf.errors import FontResolutionError

logger = logging.getLogger("renderers.pdf.fonts")

FAMILY_SANS = "XY Sans"
FAMILY_MONO = "XY Mono"

# Registered face names for directory-resolved fonts
FACE_SANS_REGULAR = "XY_SANS_REG"
FACE_SANS_BOLD = "XY_SANS_BOLD"
FACE_MONO_REGULAR = "XY_MONO_REG"

# PDF standard fonts (no embedding needed)
STANDARD_SANS = "Helvetica"
STANDARD_SANS_BOLD = "Helvetica-Bold"
STANDARD_MONO = "Courier"

FONT_EXTS = {".ttf", ".otf"}

_SANS_RE = re.compile(
    r"(inter|roboto|open.?sans|noto.?sans(?!.*mono)|dejavu.?sans(?!.*mono)|source.?sans"
    r"|montserrat|lato|arial|helvetica|liberation.?sans)",
    re.IGNORECASE,
)
_MONO_RE = re.compile(
    r"(monospace|cascadia|fira.?mono|dejavu.?sans.?mono|noto.?sans.?mono|inconsolata"
    r"|source.?code|courier|consolas|menlo|mono|code)",
    re.IGNORECASE,
)
_BOLD_RE = re.compile(r"(bold|semi.?bold|demi|black)", re.IGNORECASE)
_STYLE_TOKENS_RE = re.compile(
    r"(regular|bold|italic|oblique|medium|semi.?bold|black|light|thin|extra|ultra)",
    re.IGNORECASE,
)
_MONO_FAMILY_HINTS = ("mono", "courier", "consolas", "cascadia", "code")


def _stem(path: Path) -> str:
    """Family stem of a font file name with style tokens stripped."""
    stem = _STYLE_TOKENS_RE.sub("", path.stem)
    return stem.replace("_", "").replace("-", "").replace(" ", "").lower()


class FontResolver:
    """
    Resolves logical font families to reportlab face names.

    Usage:
        resolver = FontResolver()                         # standard fonts
        resolver = FontResolver(fonts_dir="assets/fonts") # scan TTF/OTF files
        face = resolver.resolve(FAMILY_SANS, bold=True)
    """

    def __init__(self, fonts_dir: Optional[Union[str, Path]] = None):
        self.fonts_dir = Path(fonts_dir) if fonts_dir else None
        self.sans_regular = STANDARD_SANS
        self.sans_bold = STANDARD_SANS_BOLD
        self.mono_regular = STANDARD_MONO

        if self.fonts_dir is not None:
            self._load_directory(self.fonts_dir)

        logger.debug(
            f"Fonts resolved: sans={self.sans_regular}, bold={self.sans_bold}, mono={self.mono_regular}"
        )

    # ── Public API ────────────────────────────────────────────────────

    def resolve(self, family: str, bold: bool = False) -> str:
        """Return the registered face name for *family*."""
        fam = (family or "").strip().lower()
        if any(hint in fam for hint in _MONO_FAMILY_HINTS):
            return self.mono_regular
        return self.sans_bold if bold else self.sans_regular

    # ── Directory scanning ────────────────────────────────────────────

    def _load_directory(self, fonts_dir: Path) -> None:
        if not fonts_dir.is_dir():
            raise FontResolutionError(f"Fonts directory not found: {fonts_dir}")

        candidates: List[Path] = sorted(
            p for p in fonts_dir.rglob("*") if p.is_file() and p.suffix.lower() in FONT_EXTS
        )
        if not candidates:
            raise FontResolutionError(
                f"No .ttf/.otf fonts found in {fonts_dir}"
            )

        regular_pool = [p for p in candidates if not _BOLD_RE.search(p.stem)]
        sans_reg = next((p for p in regular_pool if _SANS_RE.search(p.stem) and not _MONO_RE.search(p.stem)), None)
        if sans_reg is None:
            sans_reg = regular_pool[0] if regular_pool else candidates[0]

        stem = _stem(sans_reg)
        sans_bold = next(
            (p for p in candidates if p != sans_reg and _stem(p) == stem and _BOLD_RE.search(p.stem)),
            None,
        ) or next((p for p in candidates if p != sans_reg and _BOLD_RE.search(p.stem)), None)

        mono_reg = next(
            (p for p in candidates if _MONO_RE.search(p.stem) and not _BOLD_RE.search(p.stem)),
            None,
        )

        self.sans_regular = self._register(FACE_SANS_REGULAR, sans_reg)
        self.sans_bold = self._register(FACE_SANS_BOLD, sans_bold) if sans_bold else self.sans_regular
        self.mono_regular = self._register(FACE_MONO_REGULAR, mono_reg) if mono_reg else self.sans_regular

        logger.info(
            f"Fonts from {fonts_dir}: sans={sans_reg.name}, "
            f"bold={sans_bold.name if sans_bold else '(regular)'}, "
            f"mono={mono_reg.name if mono_reg else '(sans)'}"
        )

    @staticmethod
    def _register(face_name: str, path: Path) -> str:
        """Register *path* with reportlab under a name unique to the file."""
        name = f"{face_name}-{_stem(path) or 'font'}"
        if name in pdfmetrics.getRegisteredFontNames():
            return name
        try:
            pdfmetrics.registerFont(TTFont(name, str(path)))
        except Exception as e:
            raise FontResolutionError(f"Failed to load font face '{path}': {e}") from e
        return name
