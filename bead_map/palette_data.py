from __future__ import annotations

"""
Bead brand catalogue: colours, boxes and palette presets.

Exports:
  Brand, PalettePreset
  build_palette(rows) -> list[BeadColor]       # [(id, hex, name), ...]
  ids_to_colors(ids, colour_map) -> list[BeadColor]
  merge_ids(boxes, *keys) -> list[str]
  BRANDS, CATALOG
  find_brand(brand_id), find_preset(brand, preset_id), default_preset(brand)
  load_palette_file(path) -> list[BeadColor]
"""

import json
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .core_types import BeadColor, hex_to_rgb
from .utils import warn


@dataclass(frozen=True)
class PalettePreset:
    """A named subset of a brand's colours (usually a retail box set)."""

    id: str
    name: str
    colors: Tuple[BeadColor, ...]
    description: str = ""


@dataclass(frozen=True)
class Brand:
    """Bead manufacturer with its full colour list and box presets."""

    id: str
    name: str
    colors: Tuple[BeadColor, ...]
    presets: Tuple[PalettePreset, ...]
    description: str = ""


def build_palette(rows: Iterable[Tuple[str, str, str]]) -> List[BeadColor]:
    """Convert [(id, hex, name), ...] into BeadColor entries, keeping order."""
    return [BeadColor(id=cid, name=name, rgb=hex_to_rgb(hx)) for cid, hx, name in rows]


def ids_to_colors(
    ids: Iterable[str], colour_map: Mapping[str, BeadColor]
) -> List[BeadColor]:
    """
    Resolve colour ids in order, dropping duplicates. Unknown ids are skipped
    with a warning.
    """
    colors: List[BeadColor] = []
    seen = set()
    for cid in ids:
        if cid in seen:
            continue
        colour = colour_map.get(cid)
        if colour is None:
            warn(f"colour id not found: {cid}")
            continue
        colors.append(colour)
        seen.add(cid)
    return colors


def merge_ids(boxes: Mapping[str, Sequence[str]], *keys: str) -> List[str]:
    """Concatenate the id lists of several boxes; missing boxes are ignored."""
    merged: List[str] = []
    for key in keys:
        merged.extend(boxes.get(key, ()))
    return merged


# Artkal S series (base colours)

ARTKAL_S_ROWS: List[Tuple[str, str, str]] = [
    ("S01", "#ffffff", "White"),
    ("S02", "#000000", "Black"),
    ("S03", "#c0c0c0", "Light Gray"),
    ("S04", "#808080", "Dark Gray"),
    ("S05", "#ff0000", "Red"),
    ("S06", "#ff007f", "Rose"),
    ("S07", "#ffc0cb", "Pink"),
    ("S08", "#ffa500", "Orange"),
    ("S09", "#ffff00", "Yellow"),
    ("S10", "#ffffe0", "Light Yellow"),
    ("S11", "#008000", "Green"),
    ("S12", "#90ee90", "Light Green"),
]

# Classic midi beads, sold as 12-colour boxes

CLASSIC_ROWS: List[Tuple[str, str, str]] = [
    ("C01", "#ffffff", "White"),
    ("C02", "#f0e6c8", "Cream"),
    ("C03", "#f5e400", "Yellow"),
    ("C04", "#ff8c00", "Orange"),
    ("C05", "#d40000", "Red"),
    ("C06", "#f59ab5", "Pink"),
    ("C07", "#7b2f8f", "Purple"),
    ("C08", "#1f3fa6", "Dark Blue"),
    ("C09", "#3f8fd9", "Light Blue"),
    ("C10", "#1a8f3a", "Green"),
    ("C11", "#7a4a21", "Brown"),
    ("C12", "#000000", "Black"),
    ("C13", "#9e9e9e", "Gray"),
    ("C14", "#5c5c5c", "Dark Gray"),
    ("C15", "#d2b48c", "Tan"),
    ("C16", "#ffdab9", "Peach"),
    ("C17", "#8fd14f", "Lime"),
    ("C18", "#00a6a6", "Teal"),
    ("C19", "#b3d9ff", "Pastel Blue"),
    ("C20", "#c8a2c8", "Lilac"),
    ("C21", "#8b0000", "Maroon"),
    ("C22", "#ffd700", "Gold"),
    ("C23", "#c0c0c0", "Silver"),
    ("C24", "#f2c6a0", "Skin"),
    ("C25", "#e8e8e8", "Pearl White"),
    ("C26", "#2b2b2b", "Charcoal"),
    ("C27", "#556b2f", "Olive"),
    ("C28", "#ff6f61", "Coral"),
]

CLASSIC_BOXES: Dict[str, List[str]] = {
    "BOX_1": [f"C{i:02d}" for i in range(1, 13)],
    "BOX_2": [f"C{i:02d}" for i in range(13, 25)],
    # Specials box; C25 is a pearl finish and is kept out of the solid preset.
    "BOX_3": ["C25", "C26", "C27", "C28"],
}

CLASSIC_EXCLUDE_SOLID = frozenset({"C25"})


def _build_brands() -> Tuple[Brand, ...]:
    artkal = tuple(build_palette(ARTKAL_S_ROWS))
    artkal_brand = Brand(
        id="artkal_s",
        name="Artkal (S series)",
        description="Base colours only.",
        colors=artkal,
        presets=(PalettePreset(id="ak-12", name="Basic 12", colors=artkal),),
    )

    classic = build_palette(CLASSIC_ROWS)
    classic_map = {c.id: c for c in classic}
    solid_ids = [
        cid
        for cid in merge_ids(CLASSIC_BOXES, "BOX_1", "BOX_2", "BOX_3")
        if cid not in CLASSIC_EXCLUDE_SOLID
    ]
    classic_brand = Brand(
        id="classic",
        name="Classic midi",
        description="Box sets of 12; the full list includes specials.",
        colors=tuple(classic),
        presets=(
            PalettePreset(
                id="classic-12",
                name="Basic 12",
                description="Box 1",
                colors=tuple(ids_to_colors(CLASSIC_BOXES["BOX_1"], classic_map)),
            ),
            PalettePreset(
                id="classic-24",
                name="Advanced 24",
                description="Box 1+2",
                colors=tuple(
                    ids_to_colors(
                        merge_ids(CLASSIC_BOXES, "BOX_1", "BOX_2"), classic_map
                    )
                ),
            ),
            PalettePreset(
                id="classic-solid",
                name="All solids",
                description="Box 1+2+3 without pearl",
                colors=tuple(ids_to_colors(solid_ids, classic_map)),
            ),
            PalettePreset(
                id="classic-full",
                name="Full set",
                description="Every colour",
                colors=tuple(classic),
            ),
        ),
    )
    return (classic_brand, artkal_brand)


BRANDS: Tuple[Brand, ...] = _build_brands()

CATALOG: Mapping[str, Tuple[BeadColor, ...]] = MappingProxyType(
    {preset.id: preset.colors for brand in BRANDS for preset in brand.presets}
)


def find_brand(brand_id: Optional[str]) -> Brand:
    """Brand by id; falls back to the first brand."""
    for brand in BRANDS:
        if brand.id == brand_id:
            return brand
    return BRANDS[0]


def default_preset(brand: Brand) -> PalettePreset:
    """Largest preset of a brand (the last one listed)."""
    return brand.presets[-1]


def find_preset(brand: Brand, preset_id: Optional[str]) -> PalettePreset:
    """
    Preset by id within `brand`. None picks the largest preset; an unknown
    id falls back to the brand's first preset.
    """
    if preset_id is None:
        return default_preset(brand)
    for preset in brand.presets:
        if preset.id == preset_id:
            return preset
    return brand.presets[0]


def load_palette_file(path: Path) -> List[BeadColor]:
    """
    Load a custom palette from JSON: [{"id": "...", "hex": "#rrggbb",
    "name": "..."}, ...]. "name" defaults to the id.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of colours")
    rows: List[Tuple[str, str, str]] = []
    for i, entry in enumerate(data):
        if not isinstance(entry, dict) or "id" not in entry or "hex" not in entry:
            raise ValueError(f"{path}: entry {i} needs 'id' and 'hex'")
        cid = str(entry["id"])
        rows.append((cid, str(entry["hex"]), str(entry.get("name", cid))))
    return build_palette(rows)


__all__ = [
    "Brand",
    "PalettePreset",
    "build_palette",
    "ids_to_colors",
    "merge_ids",
    "BRANDS",
    "CATALOG",
    "find_brand",
    "find_preset",
    "default_preset",
    "load_palette_file",
]
