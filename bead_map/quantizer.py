from __future__ import annotations

"""
Palette quantizer with optional Floyd-Steinberg error diffusion.

- Every visible, non-background pixel is composited onto white and matched
  to the nearest palette colour by luma-weighted squared RGB distance.
- Masked or transparent pixels become EmptyCell and never emit error.
- Diffusion writes into the RGBA buffer ahead of the scan, so the raster
  order (row-major, left to right, top to bottom) is fixed.
"""

from typing import Dict, List, Optional

import numpy as np

from .colour_distance import (
    blend_on_white,
    nearest_palette_index,
    palette_rgb_matrix,
)
from .constants import FS_KERNEL, TRANSPARENT_ALPHA
from .core_types import (
    EMPTY,
    AssignedCell,
    BoolMask,
    BufferLike,
    Cell,
    Grid,
    Palette,
    U8Image,
    as_rgba_image,
    assert_mask_2d,
    assert_palette,
)


def _diffuse_error(
    rgba: U8Image,
    skip: BoolMask,
    x: int,
    y: int,
    err: np.ndarray,
) -> None:
    """Spread `err` (float64 [3]) to the unprocessed FS neighbours of (x, y)."""
    H, W = rgba.shape[0], rgba.shape[1]
    for dx, dy, weight in FS_KERNEL:
        nx, ny = x + dx, y + dy
        if nx < 0 or nx >= W or ny < 0 or ny >= H:
            continue
        if skip[ny, nx]:
            continue
        for ch in range(3):
            v = float(rgba[ny, nx, ch]) + float(err[ch]) * weight
            # clamp then round half to even, as an 8-bit clamped store does
            rgba[ny, nx, ch] = round(min(255.0, max(0.0, v)))


def quantize_buffer(
    buffer: BufferLike,
    width: int,
    height: int,
    palette: Palette,
    *,
    dither: bool = False,
    mask: Optional[np.ndarray] = None,
    alpha_threshold: int = TRANSPARENT_ALPHA,
    in_place: bool = False,
) -> Grid:
    """
    Map an RGBA buffer onto `palette`.

    Args:
      buffer: (H,W,4) uint8 array or W*H*4 bytes, row-major RGBA
      width, height: grid dimensions
      palette: non-empty ordered colours; ties go to the earlier entry
      dither: enable Floyd-Steinberg diffusion (7/16, 3/16, 5/16, 1/16)
      mask: optional bool [H,W]; True pixels are excluded
      alpha_threshold: alpha below this is transparent
      in_place: diffuse into `buffer` itself (arrays only) instead of a copy

    Returns:
      grid[y][x] of EmptyCell / AssignedCell
    """
    items = assert_palette(palette)
    rgba = as_rgba_image(buffer, width, height)
    if not in_place or not rgba.flags.writeable:
        rgba = rgba.copy()

    if mask is None:
        background = np.zeros((height, width), dtype=bool)
    else:
        background = assert_mask_2d(mask, width, height)

    # Pixels that neither get a colour nor receive diffused error.
    skip: BoolMask = background | (rgba[..., 3] < alpha_threshold)

    pal_rgb = palette_rgb_matrix(items)
    assigned: Dict[int, AssignedCell] = {}

    grid: Grid = []
    for y in range(height):
        row: List[Cell] = []
        for x in range(width):
            if skip[y, x]:
                row.append(EMPTY)
                continue

            r, g, b, a = rgba[y, x]
            blended = blend_on_white(r, g, b, a)
            idx = nearest_palette_index(blended, pal_rgb)

            cell = assigned.get(idx)
            if cell is None:
                colour = items[idx]
                cell = AssignedCell(color_id=colour.id, color=colour)
                assigned[idx] = cell
            row.append(cell)

            if dither:
                _diffuse_error(rgba, skip, x, y, blended - pal_rgb[idx])
        grid.append(row)

    return grid


__all__ = ["quantize_buffer"]
