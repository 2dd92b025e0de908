from __future__ import annotations

"""
Grid size helpers.

Exports:
- calculate_dimensions(orig_w, orig_h, target, lock_aspect=True) -> (w, h)
- height_for_width(orig_w, orig_h, width) -> int
"""

from typing import Tuple


def _check_positive(**values: int) -> None:
    for name, v in values.items():
        if int(v) <= 0:
            raise ValueError(f"{name} must be positive, got {v}")


def calculate_dimensions(
    orig_w: int, orig_h: int, target: int, lock_aspect: bool = True
) -> Tuple[int, int]:
    """
    Fit the longer side to `target` beads and scale the other by the source
    aspect ratio. Without aspect lock the grid is target x target.
    """
    _check_positive(orig_w=orig_w, orig_h=orig_h, target=target)
    if not lock_aspect:
        return int(target), int(target)

    aspect = orig_w / float(orig_h)
    if aspect > 1.0:
        return int(target), max(1, int(round(target / aspect)))
    return max(1, int(round(target * aspect))), int(target)


def height_for_width(orig_w: int, orig_h: int, width: int) -> int:
    """Bead rows needed to keep the aspect ratio at a fixed width."""
    _check_positive(orig_w=orig_w, orig_h=orig_h, width=width)
    return max(1, int(round(width / (orig_w / float(orig_h)))))


__all__ = ["calculate_dimensions", "height_for_width"]
