"""
Text measurement and wrapping helpers for the PDF writer.
"""

import re
from typing import List

from renderers.pdf.theme import FontSpec

ELLIPSIS = "…"

_SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s")


def wrap_text(text: str, font: FontSpec, max_width: float) -> List[str]:
    """
    Greedy word-wrap of *text* into lines no wider than *max_width*.

    Words are whitespace-delimited. A word that is wider than *max_width* on
    its own is hard-cut into character chunks that each fit; the last chunk
    stays open so following words may join it. Empty input yields ``[""]``.
    """
    words = (text or "").split()
    if not words:
        return [""]

    lines: List[str] = []
    line = ""
    for word in words:
        candidate = f"{line} {word}" if line else word
        if font.width(candidate) <= max_width:
            line = candidate
            continue

        if line:
            lines.append(line)
            line = ""

        if font.width(word) <= max_width:
            line = word
            continue

        chunk = ""
        for ch in word:
            if chunk and font.width(chunk + ch) > max_width:
                lines.append(chunk)
                chunk = ""
            chunk += ch
        line = chunk

    if line:
        lines.append(line)
    return lines


def ellipsize(text: str, font: FontSpec, max_width: float) -> str:
    """Trim *text* from the right and append an ellipsis until it fits."""
    if font.width(text) <= max_width:
        return text
    trimmed = text
    while len(trimmed) > 4 and font.width(trimmed + ELLIPSIS) > max_width:
        trimmed = trimmed[:-1]
    return trimmed.rstrip() + ELLIPSIS


def dot_leader(font: FontSpec, remaining: float) -> str:
    """Dots that fill *remaining* points of horizontal space."""
    dot_width = max(1.0, font.width("."))
    count = int(max(0.0, remaining - 1) // dot_width)
    return "." * count


def snippet(text: str, max_chars: int) -> str:
    """Whitespace-collapse *text* and cap it at *max_chars* with an ellipsis."""
    compact = " ".join((text or "").split())
    if len(compact) <= max_chars:
        return compact
    return compact[: max(1, max_chars - 1)].rstrip() + ELLIPSIS


def first_sentence(text: str) -> str:
    """First sentence of *text*, or all of it when there is no sentence end."""
    compact = " ".join((text or "").split())
    parts = _SENTENCE_END_RE.split(compact, maxsplit=1)
    return parts[0] if parts else ""
