from __future__ import annotations

"""
Colour distance helpers shared by the segmenter and the quantizer.

Exports:
- weighted_distance_sq(a, b)          # luma-weighted squared RGB distance
- euclidean_rgb_distance(a, b)        # plain RGB distance (background check)
- palette_rgb_matrix(palette)         # (P,3) float64
- nearest_palette_index(rgb, pal_rgb) # first-wins argmin
- blend_on_white(r, g, b, a)          # alpha composite onto the pegboard
"""

import numpy as np

from .constants import BACKING_RGB, LUMA_WEIGHTS
from .core_types import BeadColor, Palette

_W_R, _W_G, _W_B = LUMA_WEIGHTS


def weighted_distance_sq(a, b) -> float:
    """0.30*dr^2 + 0.59*dg^2 + 0.11*db^2 between two RGB triples."""
    dr = float(a[0]) - float(b[0])
    dg = float(a[1]) - float(b[1])
    db = float(a[2]) - float(b[2])
    return dr * dr * _W_R + dg * dg * _W_G + db * db * _W_B


def euclidean_rgb_distance(a, b) -> float:
    """Unweighted Euclidean distance in RGB."""
    dr = float(a[0]) - float(b[0])
    dg = float(a[1]) - float(b[1])
    db = float(a[2]) - float(b[2])
    return float(np.sqrt(dr * dr + dg * dg + db * db))


def palette_rgb_matrix(palette: Palette) -> np.ndarray:
    """Stack palette RGB rows into a float64 [P,3] matrix."""
    return np.array([c.rgb for c in palette], dtype=np.float64).reshape(-1, 3)


def weighted_distances_to_palette(rgb, pal_rgb: np.ndarray) -> np.ndarray:
    """Weighted squared distance from one RGB sample to every palette row."""
    diff = pal_rgb - np.asarray(rgb, dtype=np.float64)
    sq = diff * diff
    return sq[:, 0] * _W_R + sq[:, 1] * _W_G + sq[:, 2] * _W_B


def nearest_palette_index(rgb, pal_rgb: np.ndarray) -> int:
    """
    Index of the closest palette row. np.argmin returns the first minimum,
    so ties resolve to the earliest palette entry.
    """
    return int(np.argmin(weighted_distances_to_palette(rgb, pal_rgb)))


def nearest_colour(rgb, palette: Palette) -> BeadColor:
    """Closest palette colour by weighted distance (first wins on ties)."""
    items = list(palette)
    if not items:
        raise ValueError("palette must contain at least one colour")
    return items[nearest_palette_index(rgb, palette_rgb_matrix(items))]


def blend_on_white(r: float, g: float, b: float, a: float) -> np.ndarray:
    """
    Composite one RGBA sample onto the white backing surface:
      c*a/255 + 255*(1 - a/255)
    Returns float64 [3].
    """
    alpha = float(a) / 255.0
    rest = 1.0 - alpha
    return np.array(
        [
            float(r) * alpha + BACKING_RGB[0] * rest,
            float(g) * alpha + BACKING_RGB[1] * rest,
            float(b) * alpha + BACKING_RGB[2] * rest,
        ],
        dtype=np.float64,
    )


__all__ = [
    "weighted_distance_sq",
    "euclidean_rgb_distance",
    "palette_rgb_matrix",
    "weighted_distances_to_palette",
    "nearest_palette_index",
    "nearest_colour",
    "blend_on_white",
]
