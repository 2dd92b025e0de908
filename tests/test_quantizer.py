import numpy as np
import pytest

from bead_map.core_types import AssignedCell, BeadColor, EmptyCell
from bead_map.quantizer import _diffuse_error, quantize_buffer

from conftest import filled, ids_of


def test_exact_matches_without_dither(rgb_palette):
    rgba = np.array(
        [[[255, 0, 0, 255], [0, 255, 0, 255], [0, 0, 255, 255]]], dtype=np.uint8
    )
    grid = quantize_buffer(rgba, 3, 1, rgb_palette)
    assert ids_of(grid) == [["R", "G", "U"]]
    assert all(isinstance(c, AssignedCell) for c in grid[0])


def test_assigned_cells_reference_palette_objects(rgb_palette):
    rgba = filled(2, 2, (120, 130, 125, 255))
    grid = quantize_buffer(rgba, 2, 2, rgb_palette)
    for row in grid:
        for cell in row:
            assert any(cell.color is c for c in rgb_palette)
            assert cell.color_id == cell.color.id


def test_weighted_distance_prefers_green_sensitivity():
    # (0,100,100): green error weighs more than blue error.
    palette = [
        BeadColor(id="cyanish", name="", rgb=(0, 100, 0)),
        BeadColor(id="teal", name="", rgb=(0, 0, 100)),
    ]
    rgba = filled(1, 1, (0, 100, 100, 255))
    # to (0,100,0): 0.11*100^2 = 1100 ; to (0,0,100): 0.59*100^2 = 5900
    assert ids_of(quantize_buffer(rgba, 1, 1, palette)) == [["cyanish"]]


def test_ties_go_to_first_palette_entry():
    palette = [
        BeadColor(id="first", name="", rgb=(100, 100, 100)),
        BeadColor(id="second", name="", rgb=(100, 100, 100)),
    ]
    rgba = filled(2, 1, (100, 100, 100, 255))
    assert ids_of(quantize_buffer(rgba, 2, 1, palette)) == [["first", "first"]]


def test_translucent_pixel_blends_onto_white(bw_palette):
    # black at alpha 60 blends to ~195 per channel, closer to white.
    rgba = filled(1, 1, (0, 0, 0, 60))
    assert ids_of(quantize_buffer(rgba, 1, 1, bw_palette)) == [["A"]]
    # black at alpha 200 blends to ~55, closer to black.
    rgba = filled(1, 1, (0, 0, 0, 200))
    assert ids_of(quantize_buffer(rgba, 1, 1, bw_palette)) == [["B"]]


@pytest.mark.parametrize("dither", [False, True])
def test_transparent_pixels_are_always_empty(rgb_palette, dither):
    rng = np.random.default_rng(7)
    rgba = rng.integers(0, 256, size=(6, 7, 4), dtype=np.uint8)
    rgba[..., 3] = np.where(rgba[..., 3] < 128, rgba[..., 3] % 50, 255)
    grid = quantize_buffer(rgba, 7, 6, rgb_palette, dither=dither)
    palette_ids = {c.id for c in rgb_palette}
    for y in range(6):
        for x in range(7):
            cell = grid[y][x]
            if rgba[y, x, 3] < 50:
                assert isinstance(cell, EmptyCell)
                assert cell.color is None and cell.color_id is None
            else:
                assert cell.color_id in palette_ids


def test_masked_pixels_are_empty(bw_palette):
    rgba = filled(2, 2, (0, 0, 0, 255))
    mask = np.array([[True, False], [False, True]])
    grid = quantize_buffer(rgba, 2, 2, bw_palette, mask=mask)
    assert ids_of(grid) == [[None, "B"], ["B", None]]


def test_dither_changes_following_pixel(bw_palette):
    rgba = filled(2, 1, (128, 128, 128, 255))
    plain = quantize_buffer(rgba, 2, 1, bw_palette, dither=False)
    assert ids_of(plain) == [["A", "A"]]
    # 128 -> white leaves error -127; 7/16 of it drags the next pixel to 72.
    dithered = quantize_buffer(rgba, 2, 1, bw_palette, dither=True)
    assert ids_of(dithered) == [["A", "B"]]


@pytest.mark.parametrize("shape", [(2, 1), (1, 2), (1, 1)])
def test_dither_skips_out_of_bounds_neighbours(bw_palette, shape):
    width, height = shape
    rgba = filled(width, height, (128, 128, 128, 255))
    grid = quantize_buffer(rgba, width, height, bw_palette, dither=True)
    assert len(grid) == height and all(len(r) == width for r in grid)


def test_dither_works_on_copy_by_default(bw_palette):
    rgba = filled(3, 3, (128, 128, 128, 255))
    before = rgba.copy()
    quantize_buffer(rgba, 3, 3, bw_palette, dither=True)
    assert np.array_equal(rgba, before)


def test_in_place_dither_mutates_buffer(bw_palette):
    rgba = filled(2, 1, (128, 128, 128, 255))
    quantize_buffer(rgba, 2, 1, bw_palette, dither=True, in_place=True)
    assert rgba[0, 1, :3].tolist() == [72, 72, 72]
    assert rgba[0, 0, :3].tolist() == [128, 128, 128]


def test_masked_neighbour_receives_no_error(bw_palette):
    rgba = filled(2, 1, (128, 128, 128, 255))
    mask = np.array([[False, True]])
    quantize_buffer(rgba, 2, 1, bw_palette, dither=True, mask=mask, in_place=True)
    assert rgba[0, 1, :3].tolist() == [128, 128, 128]


def test_transparent_neighbour_receives_no_error(bw_palette):
    rgba = filled(2, 1, (128, 128, 128, 255))
    rgba[0, 1, 3] = 10
    quantize_buffer(rgba, 2, 1, bw_palette, dither=True, in_place=True)
    assert rgba[0, 1, :3].tolist() == [128, 128, 128]


def test_diffused_error_sums_to_source_error():
    rgba = filled(3, 2, (100, 100, 100, 255))
    skip = np.zeros((2, 3), dtype=bool)
    err = np.array([100.0, -40.0, 16.0])
    before = rgba[..., :3].astype(np.int64)
    _diffuse_error(rgba, skip, 1, 0, err)
    delta = rgba[..., :3].astype(np.int64) - before
    # Receivers: (2,0), (0,1), (1,1), (2,1); each store rounds by <= 0.5.
    assert delta[0, 0].tolist() == [0, 0, 0]
    assert delta[0, 1].tolist() == [0, 0, 0]
    total = delta.reshape(-1, 3).sum(axis=0)
    assert np.all(np.abs(total - err) <= 2.0)
    assert delta[0, 2].tolist() == [44, -18, 7]


def test_diffusion_clamps_channels():
    rgba = filled(2, 1, (250, 5, 128, 255))
    skip = np.zeros((1, 2), dtype=bool)
    _diffuse_error(rgba, skip, 0, 0, np.array([100.0, -100.0, 0.0]))
    assert rgba[0, 1, :3].tolist() == [255, 0, 128]


def test_output_is_deterministic(rgb_palette):
    rng = np.random.default_rng(3)
    rgba = rng.integers(0, 256, size=(8, 9, 4), dtype=np.uint8)
    first = quantize_buffer(rgba.copy(), 9, 8, rgb_palette, dither=True)
    second = quantize_buffer(rgba.copy(), 9, 8, rgb_palette, dither=True)
    assert ids_of(first) == ids_of(second)


def test_empty_palette_is_rejected():
    with pytest.raises(ValueError, match="at least one colour"):
        quantize_buffer(filled(1, 1), 1, 1, [])


def test_bad_mask_shape_is_rejected(bw_palette):
    with pytest.raises(ValueError, match="mask shape"):
        quantize_buffer(filled(2, 2), 2, 2, bw_palette, mask=np.zeros((3, 3), bool))


def test_wrong_dtype_is_rejected(bw_palette):
    with pytest.raises(TypeError, match="uint8"):
        quantize_buffer(np.zeros((1, 1, 4), dtype=np.float32), 1, 1, bw_palette)


def test_out_of_range_palette_channels_are_rejected():
    bad = [BeadColor(id="bad", name="", rgb=(300, -5, 0))]
    with pytest.raises(ValueError, match="0..255"):
        quantize_buffer(filled(1, 1), 1, 1, bad)
