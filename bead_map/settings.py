"""Conversion settings shared by the CLI and library callers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .constants import BACKGROUND_TOLERANCE, DEFAULT_GRID_SIZE, TRANSPARENT_ALPHA

RESAMPLE_NAMES = ("nearest", "bilinear", "bicubic", "lanczos")


@dataclass(frozen=True)
class ConversionSettings:
    """Options for one conversion request.

    Attributes:
        width: Grid width in beads.
        height: Grid height in beads. None keeps the source aspect ratio.
        size: Fit the longer side to this many beads; overrides width/height.
        dither: Enable Floyd-Steinberg error diffusion.
        remove_background: Flood-fill the border background before matching.
        tolerance: Euclidean RGB distance for background membership.
        alpha_threshold: Alpha below this counts as transparent.
        brand_id: Catalogue brand; None picks the first brand.
        preset_id: Palette preset; None picks the brand's largest preset.
        resample: Pillow filter used when shrinking the source image.
    """

    width: int = DEFAULT_GRID_SIZE
    height: Optional[int] = None
    size: Optional[int] = None
    dither: bool = False
    remove_background: bool = False
    tolerance: float = BACKGROUND_TOLERANCE
    alpha_threshold: int = TRANSPARENT_ALPHA
    brand_id: Optional[str] = None
    preset_id: Optional[str] = None
    resample: str = "bicubic"

    def validate(self) -> "ConversionSettings":
        """Raise ValueError on out-of-range values; return self."""
        if self.width <= 0:
            raise ValueError(f"width must be positive, got {self.width}")
        if self.height is not None and self.height <= 0:
            raise ValueError(f"height must be positive, got {self.height}")
        if self.size is not None and self.size <= 0:
            raise ValueError(f"size must be positive, got {self.size}")
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {self.tolerance}")
        if not 0 <= self.alpha_threshold <= 256:
            raise ValueError(
                f"alpha_threshold must be in 0..256, got {self.alpha_threshold}"
            )
        if self.resample not in RESAMPLE_NAMES:
            raise ValueError(
                f"resample must be one of {', '.join(RESAMPLE_NAMES)}, got {self.resample!r}"
            )
        return self


__all__ = ["ConversionSettings", "RESAMPLE_NAMES"]
