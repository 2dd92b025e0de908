from __future__ import annotations

"""
Background isolation by border-connected flood fill.

Exports:
  solid_background_colour(rgba, tolerance, alpha_threshold) -> RGB or None
  corner_seeds(rgba, reference, tolerance, alpha_threshold) -> list[(y, x)]
  detect_background(buffer, width, height, *, tolerance=45.0, alpha_threshold=50)
    -> bool mask [H,W]

Notes:
  - Pixel (0,0) is the single reference background colour, used only when
    another corner agrees with it. Without a reference (transparent or lone
    (0,0)) only transparent pixels count as background.
  - Each corner seeds the fill only if it is background-like against that
    reference. Interior regions sharing the background hue but not connected
    to a qualifying corner are left alone.
  - The input buffer is never modified.
"""

from collections import deque
from typing import Deque, List, Optional, Tuple

import numpy as np

from .colour_distance import euclidean_rgb_distance
from .constants import BACKGROUND_TOLERANCE, TRANSPARENT_ALPHA
from .core_types import BoolMask, BufferLike, RGBTuple, U8Image, as_rgba_image

_NEIGHBOURS: Tuple[Tuple[int, int], ...] = ((0, -1), (0, 1), (-1, 0), (1, 0))


def _corner_positions(H: int, W: int) -> List[Tuple[int, int]]:
    """Distinct corners as (y, x), starting with (0,0)."""
    out: List[Tuple[int, int]] = []
    for pos in ((0, 0), (0, W - 1), (H - 1, 0), (H - 1, W - 1)):
        if pos not in out:
            out.append(pos)
    return out


def solid_background_colour(
    rgba: U8Image,
    tolerance: float = BACKGROUND_TOLERANCE,
    alpha_threshold: int = TRANSPARENT_ALPHA,
) -> Optional[RGBTuple]:
    """
    RGB of pixel (0,0) when it looks like a solid background, else None.

    (0,0) counts as solid background when it is opaque and at least one other
    corner lies within `tolerance` of it. A 1x1 image is its own background.
    """
    r, g, b, a = (int(v) for v in rgba[0, 0])
    if a < alpha_threshold:
        return None
    reference = (r, g, b)
    others = _corner_positions(rgba.shape[0], rgba.shape[1])[1:]
    if not others:
        return reference
    for y, x in others:
        px = rgba[y, x]
        if int(px[3]) >= alpha_threshold and (
            euclidean_rgb_distance(px, reference) <= tolerance
        ):
            return reference
    return None


def _is_background_like(
    px: np.ndarray,
    reference: Optional[RGBTuple],
    tolerance: float,
    alpha_threshold: int,
) -> bool:
    if int(px[3]) < alpha_threshold:
        return True
    if reference is None:
        return False
    return euclidean_rgb_distance(px, reference) <= tolerance


def corner_seeds(
    rgba: U8Image,
    reference: Optional[RGBTuple],
    tolerance: float = BACKGROUND_TOLERANCE,
    alpha_threshold: int = TRANSPARENT_ALPHA,
) -> List[Tuple[int, int]]:
    """Qualifying corners as (y, x), de-duplicated for 1-pixel-wide images."""
    return [
        (y, x)
        for y, x in _corner_positions(rgba.shape[0], rgba.shape[1])
        if _is_background_like(rgba[y, x], reference, tolerance, alpha_threshold)
    ]


def detect_background(
    buffer: BufferLike,
    width: int,
    height: int,
    *,
    tolerance: float = BACKGROUND_TOLERANCE,
    alpha_threshold: int = TRANSPARENT_ALPHA,
) -> BoolMask:
    """
    Breadth-first flood fill from every qualifying corner across 4-connected
    neighbours. A neighbour joins the background iff it is transparent or
    within `tolerance` (Euclidean RGB) of the reference colour.

    Returns:
      bool [H,W]; True marks background. All-false when no corner qualifies.
    """
    rgba = as_rgba_image(buffer, width, height)
    H, W = rgba.shape[0], rgba.shape[1]
    mask: BoolMask = np.zeros((H, W), dtype=bool)
    visited = np.zeros((H, W), dtype=bool)

    reference = solid_background_colour(rgba, tolerance, alpha_threshold)
    queue: Deque[Tuple[int, int]] = deque()
    for y, x in corner_seeds(rgba, reference, tolerance, alpha_threshold):
        if visited[y, x]:
            continue
        visited[y, x] = True
        mask[y, x] = True
        queue.append((y, x))

        while queue:
            cy, cx = queue.popleft()
            for dy, dx in _NEIGHBOURS:
                ny, nx = cy + dy, cx + dx
                if ny < 0 or ny >= H or nx < 0 or nx >= W or visited[ny, nx]:
                    continue
                visited[ny, nx] = True
                if _is_background_like(
                    rgba[ny, nx], reference, tolerance, alpha_threshold
                ):
                    mask[ny, nx] = True
                    queue.append((ny, nx))

    return mask


__all__ = ["solid_background_colour", "corner_seeds", "detect_background"]
