#!/usr/bin/env python3
"""
Palette normalization for Commander X16 colors

Runs in a fixed order: quantize every color to 4 bits per channel,
detect colors that became identical, point pixels at the first copy of
each color, then drop palette slots no pixel references.
"""

from __future__ import annotations

from dataclasses import dataclass

from cx16_exporter.exceptions import MissingPaletteError
from cx16_exporter.logging_config import get_logger
from cx16_exporter.models import ImageSource, Palette, PaletteSource, Sprite
from cx16_exporter.palette_utils import rgb444_to_rgb888, rgb888_to_rgb444

logger = get_logger(__name__)


@dataclass
class PaletteConversionReport:
    """Summary of one palette normalization run"""

    original_size: int
    duplicates_merged: int
    final_size: int


def quantize_palette(palette: PaletteSource) -> None:
    """Round every color to 4-bit channels and re-expand, in place."""
    for i in range(len(palette)):
        color = palette.get_color(i)
        palette.set_color(i, rgb444_to_rgb888(*rgb888_to_rgb444(*color)))


def make_palette_cx16_compatible(sprite: Sprite) -> None:
    """
    Quantize the sprite's palette to colors the X16 can display.

    Raises:
        MissingPaletteError: If the sprite has no palette
    """
    palette = _require_palette(sprite)
    quantize_palette(palette)
    logger.debug(f"Quantized {len(palette)} palette colors to 12-bit")


def find_duplicate_colors(palette: PaletteSource) -> dict[int, list[int]]:
    """
    Group identical palette colors.

    The first occurrence of a color is its representative; each later copy
    is listed once, under the first index it matched.

    Args:
        palette: Palette to scan

    Returns:
        Mapping of representative index to the indices it absorbs
    """
    duplicates: dict[int, list[int]] = {}
    processed: set[int] = set()

    for i in range(len(palette)):
        if i in processed:
            continue
        color1 = palette.get_color(i)
        for j in range(i + 1, len(palette)):
            if j in processed:
                continue
            if palette.get_color(j) == color1:
                duplicates.setdefault(i, []).append(j)
                processed.add(j)

    return duplicates


def detect_duplicate_colors(sprite: Sprite) -> dict[int, list[int]]:
    """
    Group identical colors of the sprite's palette.

    Raises:
        MissingPaletteError: If the sprite has no palette
    """
    duplicates = find_duplicate_colors(_require_palette(sprite))
    logger.debug(
        f"Found {sum(len(d) for d in duplicates.values())} duplicate colors "
        f"in {len(duplicates)} groups"
    )
    return duplicates


def build_remap_table(duplicates: dict[int, list[int]]) -> dict[int, int]:
    """Flatten a duplicate map into duplicate index -> representative index."""
    remap = {}
    for index, dupes in duplicates.items():
        for duplicate_index in dupes:
            remap[duplicate_index] = index
    return remap


def remap_image_indexes(image: ImageSource, remap: dict[int, int]) -> int:
    """
    Rewrite pixel indices through ``remap``; unmapped indices are kept.

    Returns:
        Number of pixels changed
    """
    changed = 0
    for y in range(image.height):
        for x in range(image.width):
            pixel_index = image.get_index(x, y)
            new_index = remap.get(pixel_index, pixel_index)
            if new_index != pixel_index:
                image.set_index(x, y, new_index)
                changed += 1
    return changed


def reassign_palette_indexes(sprite: Sprite, duplicates: dict[int, list[int]]) -> None:
    """
    Point every pixel that uses a duplicate color at its representative.

    Palette entries are left in place; the now-unused slots are removed by
    compact_palette(). A transparent color that was a duplicate follows its
    pixels to the representative.
    """
    remap = build_remap_table(duplicates)
    changed = remap_image_indexes(sprite.cel.image, remap)
    if sprite.transparent_color in remap:
        sprite.transparent_color = remap[sprite.transparent_color]
    logger.debug(f"Reassigned {changed} pixels to representative colors")


def used_indices(image: ImageSource) -> set[int]:
    """Distinct palette indices referenced by the image."""
    used = set()
    for y in range(image.height):
        for x in range(image.width):
            used.add(image.get_index(x, y))
    return used


def build_compaction_map(used: set[int], palette_size: int) -> dict[int, int]:
    """
    Assign dense indices to used palette slots, keeping their order.

    Args:
        used: Referenced palette indices
        palette_size: Number of slots in the palette

    Returns:
        Mapping of old index to new index for every used slot
    """
    new_index_map = {}
    next_free_index = 0
    for i in range(palette_size):
        if i in used:
            new_index_map[i] = next_free_index
            next_free_index += 1
    return new_index_map


def compact_palette(sprite: Sprite) -> Palette:
    """
    Remove palette entries no pixel references and renumber the pixels.

    Must run after reassign_palette_indexes(); until then duplicate slots
    are still referenced and survive compaction. The transparent color is
    renumbered with the pixels.

    Returns:
        The sprite's palette, whose entries are replaced by the compacted ones

    Raises:
        MissingPaletteError: If the sprite has no palette
    """
    palette = _require_palette(sprite)
    image = sprite.cel.image

    new_index_map = build_compaction_map(used_indices(image), len(palette))

    for y in range(image.height):
        for x in range(image.width):
            old_index = image.get_index(x, y)
            new_index = new_index_map.get(old_index)
            if new_index is not None:
                image.set_index(x, y, new_index)

    new_palette = Palette.of_size(len(new_index_map))
    for old_index, new_index in new_index_map.items():
        new_palette.set_color(new_index, palette.get_color(old_index))

    if sprite.transparent_color is not None:
        # An unused transparent slot has no mapping and is cleared
        sprite.transparent_color = new_index_map.get(sprite.transparent_color)

    old_size = len(palette)
    palette.replace(new_palette)
    logger.debug(f"Compacted palette from {old_size} to {len(palette)} colors")
    return palette


def convert_palette_to_cx16(sprite: Sprite) -> PaletteConversionReport:
    """
    Quantize, merge duplicate colors and compact the sprite's palette.

    The sprite's pixels and palette are modified in place. Nothing is
    rolled back if a step fails; copy the sprite first if that matters.

    Returns:
        PaletteConversionReport describing the run

    Raises:
        MissingPaletteError: If the sprite has no palette
    """
    original_size = len(_require_palette(sprite))

    make_palette_cx16_compatible(sprite)
    duplicates = detect_duplicate_colors(sprite)
    reassign_palette_indexes(sprite, duplicates)
    new_palette = compact_palette(sprite)

    report = PaletteConversionReport(
        original_size=original_size,
        duplicates_merged=sum(len(d) for d in duplicates.values()),
        final_size=len(new_palette),
    )
    logger.info(
        f"Palette converted to CX16 colors: {report.original_size} -> "
        f"{report.final_size} colors ({report.duplicates_merged} duplicates merged)"
    )
    return report


def _require_palette(sprite: Sprite) -> Palette:
    palette = sprite.palette
    if palette is None:
        raise MissingPaletteError("No palette found.")
    return palette
