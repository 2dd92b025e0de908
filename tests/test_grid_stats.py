import numpy as np

from bead_map import quantize
from bead_map.grid_stats import (
    colour_usage_report,
    count_colours,
    grid_to_id_rows,
    grid_to_rgba,
    text_colour_for,
)

from conftest import filled


def _sample_grid(bw_palette):
    rgba = filled(3, 2, (255, 255, 255, 255))
    rgba[0, 0] = (0, 0, 0, 255)
    rgba[1, 2] = (0, 0, 0, 0)
    return quantize(rgba, 3, 2, bw_palette)


def test_count_colours_skips_empty(bw_palette):
    assert count_colours(_sample_grid(bw_palette)) == {"A": 4, "B": 1}


def test_usage_report_sorted_by_count(bw_palette):
    assert colour_usage_report(_sample_grid(bw_palette)) == [
        ("A", "White", "#ffffff", 4),
        ("B", "Black", "#000000", 1),
    ]


def test_id_rows(bw_palette):
    assert grid_to_id_rows(_sample_grid(bw_palette)) == ["B A A", "A A ."]


def test_rgba_preview(bw_palette):
    out = grid_to_rgba(_sample_grid(bw_palette))
    assert out.shape == (2, 3, 4)
    assert out[0, 0].tolist() == [0, 0, 0, 255]
    assert out[0, 1].tolist() == [255, 255, 255, 255]
    assert out[1, 2].tolist() == [0, 0, 0, 0]
    assert out.dtype == np.uint8


def test_text_colour_for():
    assert text_colour_for((255, 255, 255)) == "#000000"
    assert text_colour_for((20, 20, 120)) == "#ffffff"
