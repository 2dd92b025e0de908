from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str

U8Image = NDArray[np.uint8]  # (H, W, 4) RGBA
BoolMask = NDArray[np.bool_]  # (H, W)
BufferLike = Union[NDArray[np.uint8], bytes, bytearray, memoryview]

# Value objects


@dataclass(frozen=True)
class BeadColor:
    """Palette entry: catalogue id, display name and sRGB triple."""

    id: str
    name: str
    rgb: RGBTuple

    @property
    def hex(self) -> HexStr:
        return rgb_to_hex(self.rgb)


@dataclass(frozen=True)
class EmptyCell:
    """Grid position excluded from quantization (transparent or background)."""

    color_id: Optional[str] = None
    color: Optional[BeadColor] = None

    @property
    def is_empty(self) -> bool:
        return True


@dataclass(frozen=True)
class AssignedCell:
    """Grid position bound to its nearest palette colour."""

    color_id: str
    color: BeadColor

    @property
    def is_empty(self) -> bool:
        return False


Cell = Union[EmptyCell, AssignedCell]
Grid = List[List[Cell]]  # grid[y][x]
Palette = Sequence[BeadColor]
UsageRow = Tuple[str, str, HexStr, int]  # (id, name, hex, count)
ColourCounts = Mapping[str, int]

EMPTY = EmptyCell()

# Small helpers


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse '#rgb' or '#rrggbb' (case-insensitive) into an RGB tuple."""
    s = hex_str.strip().lower()
    if not s.startswith("#"):
        raise ValueError("hex must start with '#'")
    if len(s) == 4:
        r, g, b = s[1], s[2], s[3]
        s = f"#{r}{r}{g}{g}{b}{b}"
    if len(s) != 7:
        raise ValueError("hex must be '#rrggbb' or '#rgb'")
    return (int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))


def coerce_to_rgb_tuple(value: Union[Sequence[int], NDArray[np.generic]]) -> RGBTuple:
    """
    Coerce a 3-length sequence or array to an (int, int, int) RGB tuple,
    rejecting channels outside 0..255.
    """
    if isinstance(value, np.ndarray):
        if value.size < 3:
            raise ValueError("array too small for RGB")
        flat = value.reshape(-1)
        rgb = (int(flat[0]), int(flat[1]), int(flat[2]))
    else:
        if len(value) < 3:
            raise ValueError("sequence too small for RGB")
        rgb = (int(value[0]), int(value[1]), int(value[2]))
    if any(c < 0 or c > 255 for c in rgb):
        raise ValueError(f"RGB channels must be in 0..255, got {rgb}")
    return rgb


def as_rgba_image(buffer: BufferLike, width: int, height: int) -> U8Image:
    """
    Validate a row-major RGBA buffer against width x height and return it
    as a (H, W, 4) uint8 view. No copy is made for contiguous arrays.
    """
    if int(width) <= 0 or int(height) <= 0:
        raise ValueError(f"grid dimensions must be positive, got {width}x{height}")
    expected = int(width) * int(height) * 4

    if isinstance(buffer, (bytes, bytearray, memoryview)):
        arr = np.frombuffer(buffer, dtype=np.uint8)
    elif isinstance(buffer, np.ndarray):
        if buffer.dtype != np.uint8:
            raise TypeError(f"expected uint8 RGBA buffer, got dtype {buffer.dtype}")
        arr = buffer
    else:
        raise TypeError(f"unsupported buffer type {type(buffer).__name__}")

    if arr.size != expected:
        raise ValueError(
            f"buffer holds {arr.size} bytes, expected {expected} for "
            f"{width}x{height} RGBA"
        )
    if arr.ndim == 3 and arr.shape != (height, width, 4):
        raise ValueError(
            f"buffer shape {arr.shape} does not match ({height}, {width}, 4)"
        )
    return arr.reshape(int(height), int(width), 4)


def assert_mask_2d(mask: np.ndarray, width: int, height: int) -> BoolMask:
    """Validate an (H, W) mask and return it as bool."""
    arr = np.asarray(mask)
    if arr.shape != (height, width):
        raise ValueError(f"mask shape {arr.shape} does not match ({height}, {width})")
    return arr.astype(bool, copy=False)


def assert_palette(palette: Palette) -> List[BeadColor]:
    """Reject an empty palette or out-of-range channels; return it as a list."""
    items = list(palette)
    if not items:
        raise ValueError("palette must contain at least one colour")
    for colour in items:
        try:
            coerce_to_rgb_tuple(colour.rgb)
        except ValueError as e:
            raise ValueError(f"palette colour {colour.id!r}: {e}") from e
    return items


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "U8Image",
    "BoolMask",
    "BufferLike",
    "Cell",
    "Grid",
    "Palette",
    "UsageRow",
    "ColourCounts",
    # value objects
    "BeadColor",
    "EmptyCell",
    "AssignedCell",
    "EMPTY",
    # helpers
    "rgb_to_hex",
    "hex_to_rgb",
    "coerce_to_rgb_tuple",
    "as_rgba_image",
    "assert_mask_2d",
    "assert_palette",
]
