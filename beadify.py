#!/usr/bin/env python3
"""
beadify.py
Turn images into fuse-bead patterns using a brand palette.

Usage:
  python beadify.py INPUT --width W [--height H] --brand ID --preset ID
                    [--dither] [--remove-background] [--tolerance T] --debug

Input:
  Any Pillow-readable image, or a folder of images. The image is resized to
  the bead grid before matching. Transparent pixels stay empty.

Output:
  <stem>_beads.txt next to INPUT (or in --outdir): one line per bead row,
  colour ids separated by spaces, '.' for empty cells. The colour usage
  list is printed after each file.

Notes:
  Palette data comes from bead_map.palette_data, or --palette-file JSON.
  Folder mode runs files in parallel with --jobs; each file owns its buffer.
"""

from __future__ import annotations

import argparse
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from PIL import UnidentifiedImageError

from bead_map.background import detect_background
from bead_map.constants import BEAD_PITCH_CM, DEFAULT_GRID_SIZE
from bead_map.core_types import BeadColor, Grid, UsageRow
from bead_map.dimensions import calculate_dimensions, height_for_width
from bead_map.grid_stats import colour_usage_report, grid_to_id_rows
from bead_map.image_io import image_size, is_image_file, load_grid_buffer
from bead_map.palette_data import (
    BRANDS,
    find_brand,
    find_preset,
    load_palette_file,
)
from bead_map.quantizer import quantize_buffer
from bead_map.settings import RESAMPLE_NAMES, ConversionSettings
from bead_map.utils import (
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    pillow_resample_from_name,
    print_banner,
    print_config_line,
    warn,
)

OUTPUT_SUFFIX = "_beads"
IMAGE_EXTS = {".png", ".jpg", ".jpeg", ".webp"}


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments for bead conversion.

    Returns:
      argparse.Namespace with:
        src: Path to image or folder
        outdir: optional Path for outputs
        width / height / size: grid dimensions in beads
        brand / preset / palette_file: palette selection
        dither, remove_background, tolerance: conversion options
        resample: resize filter name
        jobs: parallel file workers
        list_palettes: print the catalogue and exit
        debug: bool for verbose details
    """
    parser = argparse.ArgumentParser(
        prog="beadify",
        description="Convert image(s) into fuse-bead patterns.",
    )
    parser.add_argument("src", type=Path, nargs="?", help="Input image or folder")
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (optional)"
    )
    parser.add_argument(
        "--width",
        type=int,
        default=DEFAULT_GRID_SIZE,
        help="Grid width in beads.",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Grid height in beads. Omit to keep the aspect ratio.",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=None,
        help="Fit the longer side to N beads (overrides --width/--height).",
    )
    parser.add_argument("--brand", default=None, help="Brand id from the catalogue")
    parser.add_argument(
        "--preset", default=None, help="Preset id. Omit for the brand's largest set."
    )
    parser.add_argument(
        "--palette-file", type=Path, default=None, help="Custom palette JSON"
    )
    parser.add_argument(
        "--dither", action="store_true", help="Floyd-Steinberg error diffusion"
    )
    parser.add_argument(
        "--remove-background",
        action="store_true",
        help="Drop the border-connected background colour",
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=ConversionSettings.tolerance,
        help="RGB distance for background membership.",
    )
    parser.add_argument(
        "--resample",
        choices=list(RESAMPLE_NAMES),
        default=ConversionSettings.resample,
        help="Scaling filter.",
    )
    parser.add_argument(
        "--jobs", type=int, default=1, help="Files processed in parallel"
    )
    parser.add_argument(
        "--list-palettes", action="store_true", help="List brands and presets"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    args = parser.parse_args(argv)
    if args.src is None and not args.list_palettes:
        parser.error("src is required unless --list-palettes is given")
    return args


def settings_from_args(args: argparse.Namespace) -> ConversionSettings:
    return ConversionSettings(
        width=args.width,
        height=args.height,
        size=args.size,
        dither=args.dither,
        remove_background=args.remove_background,
        tolerance=args.tolerance,
        brand_id=args.brand,
        preset_id=args.preset,
        resample=args.resample,
    ).validate()


def select_palette(
    settings: ConversionSettings, palette_file: Optional[Path]
) -> List[BeadColor]:
    """Custom palette file if given, else brand preset from the catalogue."""
    if palette_file is not None:
        colours = load_palette_file(palette_file)
    else:
        brand = find_brand(settings.brand_id)
        colours = list(find_preset(brand, settings.preset_id).colors)
    if not colours:
        raise ValueError("selected palette is empty")
    return colours


def print_catalogue() -> None:
    for brand in BRANDS:
        print_banner(f"{brand.id}  {brand.name}")
        for preset in brand.presets:
            log(f"  {preset.id:<16} {len(preset.colors):>4} colours  {preset.name}")


def _grid_size_for(
    src_path: Path, settings: ConversionSettings, size: Optional[int]
) -> Tuple[int, int]:
    w0, h0 = image_size(src_path)
    if size is not None:
        return calculate_dimensions(w0, h0, size, lock_aspect=True)
    if settings.height is not None:
        return settings.width, settings.height
    return settings.width, height_for_width(w0, h0, settings.width)


def write_pattern(out_path: Path, grid: Grid) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text("\n".join(grid_to_id_rows(grid)) + "\n", encoding="utf-8")
    return out_path


# Per-file processing


@dataclass
class FileResult:
    """Outcome of one file conversion, reported by the main thread."""

    src_path: Path
    out_path: Optional[Path] = None
    width: int = 0
    height: int = 0
    palette_size: int = 0
    background_px: int = 0
    report: List[UsageRow] = field(default_factory=list)
    timings: Dict[str, float] = field(default_factory=dict)
    failure: Optional[str] = None


def _convert_single_image(
    src_path: Path,
    out_path: Optional[Path],
    settings: ConversionSettings,
    size: Optional[int],
    palette: List[BeadColor],
) -> FileResult:
    """
    Convert a single image path end-to-end without printing:
      size -> load+resize -> mask -> quantize -> write.
    Decode failures are returned in `failure`.
    """
    result = FileResult(src_path=src_path, palette_size=len(palette))
    if out_path is None:
        out_path = src_path.with_name(f"{src_path.stem}{OUTPUT_SUFFIX}.txt")

    t_start = time.perf_counter()
    try:
        width, height = _grid_size_for(src_path, settings, size)
        rgba = load_grid_buffer(
            src_path, width, height, pillow_resample_from_name(settings.resample)
        )
    except (UnidentifiedImageError, OSError, ValueError) as e:
        result.failure = f"could not read image ({e})"
        return result
    t_loaded = time.perf_counter()

    mask = None
    if settings.remove_background:
        mask = detect_background(
            rgba,
            width,
            height,
            tolerance=settings.tolerance,
            alpha_threshold=settings.alpha_threshold,
        )
        result.background_px = int(np.count_nonzero(mask))
    t_masked = time.perf_counter()

    grid = quantize_buffer(
        rgba,
        width,
        height,
        palette,
        dither=settings.dither,
        mask=mask,
        alpha_threshold=settings.alpha_threshold,
        in_place=True,
    )
    t_mapped = time.perf_counter()

    write_pattern(out_path, grid)
    t_saved = time.perf_counter()

    result.out_path = out_path
    result.width, result.height = width, height
    result.report = colour_usage_report(grid)
    result.timings = {
        "total": t_saved - t_start,
        "load": t_loaded - t_start,
        "mask": t_masked - t_loaded,
        "map": t_mapped - t_masked,
        "save": t_saved - t_mapped,
    }
    return result


def _report_result(result: FileResult, settings: ConversionSettings, debug: bool) -> bool:
    """Print the banner, bill of materials and timings. Returns success."""
    print_banner(result.src_path.name)
    if result.failure is not None:
        error(f"{result.src_path.name}: {result.failure}")
        return False

    print_config_line(
        "convert",
        [
            ("Grid", f"{result.width}x{result.height}"),
            ("Dither", settings.dither),
            ("Background", settings.remove_background),
            ("Palette", result.palette_size),
        ],
        debug=debug,
    )
    if debug and settings.remove_background:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Background px", result.background_px),
                    ("Tolerance", float(settings.tolerance)),
                ]
            )
        )

    total_beads = sum(row[3] for row in result.report)
    log(
        f"Wrote {result.out_path.name} | size={result.width}x{result.height} | "
        f"approx {result.width * BEAD_PITCH_CM:.1f}cm x "
        f"{result.height * BEAD_PITCH_CM:.1f}cm"
    )
    log("Colours used:")
    for cid, name, hex_code, count in result.report:
        log(f"  {cid:<6} {hex_code}  {name}: {count:,}")
    log(f"Total beads: {total_beads:,}  Colours: {len(result.report)}")

    t = result.timings
    if debug:
        debug_log(
            f"Total {format_total_duration_compact(t['total'])}  "
            f"(load={format_seconds_compact(t['load'])}, "
            f"mask={format_seconds_compact(t['mask'])}, "
            f"map={format_seconds_compact(t['map'])}, "
            f"save={format_seconds_compact(t['save'])})"
        )
    else:
        log(f"Total time {format_total_duration_compact(t['total'])}")
    return True


def _process_one(
    path: Path,
    settings: ConversionSettings,
    size: Optional[int],
    palette: List[BeadColor],
    outdir: Optional[Path],
) -> FileResult:
    dst = (outdir / f"{path.stem}{OUTPUT_SUFFIX}.txt") if outdir else None
    return _convert_single_image(path, dst, settings, size, palette)


def _collect_folder(src: Path, debug: bool) -> List[Path]:
    all_entries = list(src.iterdir())
    files = [
        p
        for p in all_entries
        if p.is_file()
        and p.suffix.lower() in IMAGE_EXTS
        and not p.stem.endswith(OUTPUT_SUFFIX)
        and is_image_file(p)
    ]
    files.sort(key=lambda p: p.name.lower())
    if debug:
        debug_log(
            key_value_pairs_to_string(
                [("Folder entries", len(all_entries)), ("Images", len(files))]
            )
        )
    return files


# Entry point


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    CLI entry point.

    Handles single file or folder. In folder mode supports --jobs parallelism
    while preserving readable output ordering.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    if args.list_palettes:
        print_catalogue()
        return 0

    try:
        settings = settings_from_args(args)
        palette = select_palette(settings, args.palette_file)
    except (ValueError, OSError) as e:
        error(str(e))
        return 2

    src: Path = args.src
    if not src.exists():
        error(f"not found: {src}")
        return 2

    if args.debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Width", settings.width),
                    ("Height", settings.height or "-"),
                    ("Size", settings.size or "-"),
                    ("Resample", settings.resample),
                    ("Jobs", args.jobs),
                ]
            )
        )

    if not src.is_dir():
        result = _process_one(src, settings, settings.size, palette, args.outdir)
        return 0 if _report_result(result, settings, args.debug) else 1

    files = _collect_folder(src, args.debug)
    failures = 0
    if args.jobs <= 1:
        for p in files:
            result = _process_one(p, settings, settings.size, palette, args.outdir)
            failures += not _report_result(result, settings, args.debug)
    else:
        # Each worker owns its buffer; output is printed here in file order.
        with ThreadPoolExecutor(max_workers=args.jobs) as ex:
            futures = [
                ex.submit(
                    _process_one, p, settings, settings.size, palette, args.outdir
                )
                for p in files
            ]
            for fu in futures:
                failures += not _report_result(fu.result(), settings, args.debug)
    if failures:
        warn(f"{failures} of {len(files)} file(s) failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
