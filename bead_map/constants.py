"""
Global tunables used across the project.

- Grid defaults
- Transparency and background-removal thresholds
- Colour distance weights and the Floyd-Steinberg kernel
"""
from __future__ import annotations

from typing import Tuple

# =============
# Grid defaults
# =============
DEFAULT_GRID_SIZE: int = 50

# Physical bead pitch, used for the size estimate printed by the CLI.
BEAD_PITCH_CM: float = 0.5

# ====================
# Alpha and background
# ====================

# Pixels with alpha below this are treated as transparent.
TRANSPARENT_ALPHA: int = 50

# Max Euclidean RGB distance for a pixel to join the border background.
BACKGROUND_TOLERANCE: float = 45.0

# Translucent pixels are composited onto a white pegboard before matching.
BACKING_RGB: Tuple[int, int, int] = (255, 255, 255)

# ===============
# Colour matching
# ===============

# Channel weights (R, G, B) approximating luma sensitivity.
LUMA_WEIGHTS: Tuple[float, float, float] = (0.30, 0.59, 0.11)

# (dx, dy, weight); raster order, left to right.
FS_KERNEL: Tuple[Tuple[int, int, float], ...] = (
    (1, 0, 7 / 16),
    (-1, 1, 3 / 16),
    (0, 1, 5 / 16),
    (1, 1, 1 / 16),
)

# Brightness cutoff for choosing a black or white label on a bead.
LABEL_BRIGHTNESS_CUTOFF: float = 128.0
