"""
Table layout primitives: column specs, ratio-based widths and laid-out cells.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from renderers.pdf.theme import FontSpec

MIN_COLUMN_WIDTH = 30.0
CELL_PADDING = 2.0


@dataclass(frozen=True)
class TableColumnSpec:
    header: str
    width_ratio: float
    font: Optional[FontSpec] = None


@dataclass
class Cell:
    """Wrapped cell content placed at ``x`` with a column ``width``."""

    lines: List[str]
    font: FontSpec
    x: float
    width: float
    line_height: float
    padding: float = CELL_PADDING
    color: Optional[object] = None
    cursor: int = field(default=0, repr=False)

    @property
    def height(self) -> float:
        return len(self.lines) * self.line_height

    @property
    def remaining(self) -> int:
        return len(self.lines) - self.cursor


def column_widths(ratios: Sequence[float], total_width: float) -> List[float]:
    """
    Split *total_width* across columns by relative *ratios*.

    Every column gets at least MIN_COLUMN_WIDTH; non-positive ratios count as
    zero, and an all-zero set is split evenly.
    """
    if not ratios:
        return []
    cleaned = [max(0.0, float(r)) for r in ratios]
    total = sum(cleaned)
    if total <= 0:
        cleaned = [1.0] * len(cleaned)
        total = float(len(cleaned))
    return [max(MIN_COLUMN_WIDTH, total_width * (r / total)) for r in cleaned]
