# bead_map/__init__.py
"""
bead_map package.

Purpose:
  Convert an image into a grid of fuse-bead colours. See beadify.py for CLI.

Public API:
  quantize         : buffer + palette -> grid of cells (background removal, dithering).
  detect_background: border-connected flood fill mask.
  quantize_buffer  : low-level quantizer over an RGBA buffer and optional mask.
  core_types       : value objects (BeadColor, EmptyCell, AssignedCell) and aliases.
  palette_data     : brand catalogue, presets and palette loaders.
  grid_stats       : colour counts and bill of materials.
  dimensions       : grid size from source aspect ratio.
  utils            : shared helpers (formatting, logging).

Quick start:
  from bead_map import quantize
  from bead_map.palette_data import CATALOG
  grid = quantize(rgba, 50, 50, CATALOG["classic-24"], dither=True)
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import core_types
from . import palette_data
from . import grid_stats
from . import dimensions
from . import utils

from .background import detect_background  # noqa: E402,F401
from .convert import quantize  # noqa: E402,F401
from .core_types import AssignedCell, BeadColor, EmptyCell  # noqa: E402,F401
from .quantizer import quantize_buffer  # noqa: E402,F401
from .settings import ConversionSettings  # noqa: E402,F401

__all__ = [
    "__version__",
    "core_types",
    "palette_data",
    "grid_stats",
    "dimensions",
    "utils",
    "quantize",
    "quantize_buffer",
    "detect_background",
    "BeadColor",
    "EmptyCell",
    "AssignedCell",
    "ConversionSettings",
]
