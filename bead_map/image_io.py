from __future__ import annotations

"""
Image loading for the CLI: decode with Pillow, convert to RGBA and resize to
the bead grid. The quantizer itself never touches files.
"""

from pathlib import Path
from typing import Tuple

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError


def load_image(path: Path) -> Image.Image:
    """Open an image, apply EXIF orientation and convert to RGBA."""
    with Image.open(path) as im0:
        im = ImageOps.exif_transpose(im0)
        return im.convert("RGBA")


def image_size(path: Path) -> Tuple[int, int]:
    """(width, height) of an image file without decoding pixel data."""
    with Image.open(path) as im:
        return im.size


def resize_to_grid(
    im: Image.Image, width: int, height: int, resample: Image.Resampling
) -> np.ndarray:
    """Resize an RGBA image to width x height and return (H,W,4) uint8."""
    if im.mode != "RGBA":
        im = im.convert("RGBA")
    if im.size != (width, height):
        im = im.resize((width, height), resample=resample)
    arr = np.array(im, dtype=np.uint8)
    return np.ascontiguousarray(arr)


def load_grid_buffer(
    path: Path, width: int, height: int, resample: Image.Resampling
) -> np.ndarray:
    """Decode `path` and resize it straight to the bead grid."""
    return resize_to_grid(load_image(path), width, height, resample)


def is_image_file(path: Path) -> bool:
    try:
        with Image.open(path) as im:
            im.seek(0)
            im.load()
        return True
    except (UnidentifiedImageError, OSError):
        return False


__all__ = [
    "load_image",
    "image_size",
    "resize_to_grid",
    "load_grid_buffer",
    "is_image_file",
]
