from __future__ import annotations

"""
Summaries of a finished bead grid: colour counts, bill of materials,
plain-text id rows and a flat RGBA preview array.
"""

from collections import Counter
from typing import Dict, List

import numpy as np

from .constants import LABEL_BRIGHTNESS_CUTOFF
from .core_types import BeadColor, Grid, RGBTuple, U8Image, UsageRow


def count_colours(grid: Grid) -> Dict[str, int]:
    """Bead count per colour id over assigned cells."""
    counts: Counter = Counter()
    for row in grid:
        for cell in row:
            if not cell.is_empty:
                counts[cell.color_id] += 1
    return dict(counts)


def colour_usage_report(grid: Grid) -> List[UsageRow]:
    """
    Bill of materials for a grid.

    Returns a list of (id, name, hex, count) sorted by count descending,
    then by id.
    """
    counts: Counter = Counter()
    colour_of: Dict[str, BeadColor] = {}
    for row in grid:
        for cell in row:
            if cell.is_empty:
                continue
            counts[cell.color_id] += 1
            colour_of.setdefault(cell.color_id, cell.color)

    report: List[UsageRow] = []
    for cid, n in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])):
        colour = colour_of[cid]
        report.append((cid, colour.name, colour.hex, int(n)))
    return report


def grid_to_id_rows(grid: Grid, empty: str = ".", sep: str = " ") -> List[str]:
    """One text line per grid row, ids padded to a common width."""
    width = max(
        [len(empty)]
        + [len(cell.color_id) for row in grid for cell in row if not cell.is_empty]
    )
    lines: List[str] = []
    for row in grid:
        tokens = [(empty if cell.is_empty else cell.color_id).ljust(width) for cell in row]
        lines.append(sep.join(tokens).rstrip())
    return lines


def grid_to_rgba(grid: Grid) -> U8Image:
    """(H,W,4) uint8 array; assigned cells opaque, empty cells fully transparent."""
    H = len(grid)
    W = len(grid[0]) if H else 0
    out = np.zeros((H, W, 4), dtype=np.uint8)
    for y, row in enumerate(grid):
        for x, cell in enumerate(row):
            if cell.is_empty:
                continue
            r, g, b = cell.color.rgb
            out[y, x] = (r, g, b, 255)
    return out


def text_colour_for(rgb: RGBTuple) -> str:
    """Black or white label colour for a bead, by perceived brightness."""
    brightness = (rgb[0] * 299 + rgb[1] * 587 + rgb[2] * 114) / 1000.0
    return "#000000" if brightness > LABEL_BRIGHTNESS_CUTOFF else "#ffffff"


__all__ = [
    "count_colours",
    "colour_usage_report",
    "grid_to_id_rows",
    "grid_to_rgba",
    "text_colour_for",
]
