from typing import Sequence, Tuple

import numpy as np
import pytest

from bead_map.core_types import BeadColor

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)


def make_rgba(rows: Sequence[Sequence[Tuple[int, int, int, int]]]) -> np.ndarray:
    """Build an (H,W,4) uint8 buffer from nested RGBA tuples."""
    return np.array(rows, dtype=np.uint8).reshape(len(rows), len(rows[0]), 4)


def filled(width: int, height: int, rgba=WHITE) -> np.ndarray:
    out = np.empty((height, width, 4), dtype=np.uint8)
    out[...] = rgba
    return out


def ids_of(grid):
    return [[None if c.is_empty else c.color_id for c in row] for row in grid]


@pytest.fixture
def bw_palette():
    return [
        BeadColor(id="A", name="White", rgb=(255, 255, 255)),
        BeadColor(id="B", name="Black", rgb=(0, 0, 0)),
    ]


@pytest.fixture
def rgb_palette():
    return [
        BeadColor(id="W", name="White", rgb=(255, 255, 255)),
        BeadColor(id="K", name="Black", rgb=(0, 0, 0)),
        BeadColor(id="R", name="Red", rgb=(255, 0, 0)),
        BeadColor(id="G", name="Green", rgb=(0, 255, 0)),
        BeadColor(id="U", name="Blue", rgb=(0, 0, 255)),
        BeadColor(id="Y", name="Gray", rgb=(128, 128, 128)),
    ]
