from __future__ import annotations

"""
Conversion entry point: optional background removal, then quantization.
"""

from typing import Optional

import numpy as np

from .background import detect_background
from .constants import BACKGROUND_TOLERANCE, TRANSPARENT_ALPHA
from .core_types import BufferLike, Grid, Palette, as_rgba_image, assert_palette
from .quantizer import quantize_buffer


def quantize(
    buffer: BufferLike,
    width: int,
    height: int,
    palette: Palette,
    dither: bool = False,
    remove_background: bool = False,
    *,
    tolerance: float = BACKGROUND_TOLERANCE,
    alpha_threshold: int = TRANSPARENT_ALPHA,
) -> Grid:
    """
    Convert a W x H RGBA buffer into a grid of bead cells.

    The caller's buffer is left untouched; diffusion runs on a private copy.
    Raises ValueError/TypeError on an empty palette or a buffer that does
    not match width x height x 4.
    """
    items = assert_palette(palette)
    rgba = as_rgba_image(buffer, width, height).copy()

    mask: Optional[np.ndarray] = None
    if remove_background:
        mask = detect_background(
            rgba,
            width,
            height,
            tolerance=tolerance,
            alpha_threshold=alpha_threshold,
        )

    return quantize_buffer(
        rgba,
        width,
        height,
        items,
        dither=dither,
        mask=mask,
        alpha_threshold=alpha_threshold,
        in_place=True,
    )


__all__ = ["quantize"]
