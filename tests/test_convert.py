import numpy as np
import pytest

from bead_map import quantize
from bead_map.core_types import BeadColor, EmptyCell

from conftest import BLACK, WHITE, filled, ids_of


def test_white_square_with_background_removal_is_empty(bw_palette):
    rgba = filled(2, 2, WHITE)
    grid = quantize(rgba, 2, 2, bw_palette, dither=False, remove_background=True)
    assert all(isinstance(c, EmptyCell) for row in grid for c in row)


def test_white_square_without_background_removal(bw_palette):
    rgba = filled(2, 2, WHITE)
    grid = quantize(rgba, 2, 2, bw_palette, dither=False, remove_background=False)
    assert ids_of(grid) == [["A", "A"], ["A", "A"]]
    assert grid[0][0].color is bw_palette[0]


def test_dark_centre_keeps_its_colour(bw_palette):
    rgba = filled(3, 3, WHITE)
    rgba[1, 1] = (10, 10, 10, 255)
    grid = quantize(rgba, 3, 3, bw_palette, remove_background=True, tolerance=45)
    assert ids_of(grid) == [
        [None, None, None],
        [None, "B", None],
        [None, None, None],
    ]


def test_enclosed_white_region_stays_assigned(bw_palette):
    rgba = filled(5, 5, WHITE)
    rgba[1:4, 1:4] = BLACK
    rgba[2, 2] = WHITE
    grid = quantize(rgba, 5, 5, bw_palette, remove_background=True)
    ids = ids_of(grid)
    assert ids[2][2] == "A"
    assert ids[1] == [None, "B", "B", "B", None]
    assert ids[0] == [None] * 5


def test_mid_gray_dither_on_tiny_buffers(bw_palette):
    for width, height in ((1, 2), (2, 1)):
        rgba = filled(width, height, (128, 128, 128, 255))
        grid = quantize(rgba, width, height, bw_palette, dither=True)
        assert len(grid) == height
        assert ids_of(grid)[0][0] == "A"


def test_caller_buffer_untouched(bw_palette):
    rgba = filled(4, 4, (128, 128, 128, 255))
    before = rgba.copy()
    quantize(rgba, 4, 4, bw_palette, dither=True, remove_background=True)
    assert np.array_equal(rgba, before)


def test_accepts_bytes_buffer(bw_palette):
    rgba = filled(2, 1, (128, 128, 128, 255))
    grid = quantize(rgba.tobytes(), 2, 1, bw_palette, dither=True)
    assert ids_of(grid) == [["A", "B"]]


def test_repeat_runs_are_identical(rgb_palette):
    rng = np.random.default_rng(11)
    rgba = rng.integers(0, 256, size=(10, 12, 4), dtype=np.uint8)
    a = quantize(rgba.copy(), 12, 10, rgb_palette, True, True)
    b = quantize(rgba.copy(), 12, 10, rgb_palette, True, True)
    assert ids_of(a) == ids_of(b)


@pytest.mark.parametrize(
    "width,height,size",
    [(3, 3, 35), (0, 3, 0), (2, -1, 0)],
)
def test_rejects_bad_dimensions(bw_palette, width, height, size):
    with pytest.raises(ValueError):
        quantize(bytes(size), width, height, bw_palette)


def test_rejects_empty_palette():
    with pytest.raises(ValueError, match="at least one colour"):
        quantize(filled(1, 1), 1, 1, [])


def test_out_of_range_palette_is_rejected_by_public_entry(bw_palette):
    palette = list(bw_palette) + [BeadColor(id="bad", name="", rgb=(0, 256, 0))]
    with pytest.raises(ValueError, match="'bad'"):
        quantize(filled(1, 1), 1, 1, palette)
