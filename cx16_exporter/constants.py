#!/usr/bin/env python3
"""
Constants for the Commander X16 exporter
Tile geometries, color depths and palette format constants
"""

from __future__ import annotations

# Color depths (maximum palette size per bits-per-pixel setting)
COLOR_DEPTH_1BPP = 2
COLOR_DEPTH_2BPP = 4
COLOR_DEPTH_4BPP = 16
COLOR_DEPTH_8BPP = 256

COLOR_DEPTH_MAP = {
    "1bpp": COLOR_DEPTH_1BPP,
    "2bpp": COLOR_DEPTH_2BPP,
    "4bpp": COLOR_DEPTH_4BPP,
    "8bpp": COLOR_DEPTH_8BPP,
}

BITS_PER_PIXEL = {
    COLOR_DEPTH_1BPP: 1,
    COLOR_DEPTH_2BPP: 2,
    COLOR_DEPTH_4BPP: 4,
    COLOR_DEPTH_8BPP: 8,
}

# Tile geometries as (width, height) in pixels
TILE_SIZE_MAP = {
    "8x8": (8, 8),
    "16x16": (16, 16),
    "8x16": (8, 16),
    "16x8": (16, 8),
}

DEFAULT_TILE_SIZE = "8x8"
DEFAULT_COLOR_DEPTH = "1bpp"

BITS_PER_BYTE = 8

# Color conversion (VERA palette: 4 bits per channel)
RGB444_MAX_VALUE = 15
RGB888_MAX_VALUE = 255
RGB444_EXPAND_FACTOR = 17  # 0x0 -> 0x00, 0xF -> 0xFF

BYTES_PER_COLOR = 2  # GB byte followed by 0R byte
CHANNEL_4BIT_MASK = 0x0F
GREEN_SHIFT = 4

MAX_PALETTE_ENTRIES = 256

# Output naming
TILESET_EXTENSION = ".cx16.bin"
PALETTE_EXTENSION = ".pal"

# File size limits for input files
MAX_PNG_FILE_SIZE = 5 * 1024 * 1024  # 5MB
MAX_TILESET_FILE_SIZE = 2 * 1024 * 1024  # 2MB
MAX_PALETTE_FILE_SIZE = MAX_PALETTE_ENTRIES * BYTES_PER_COLOR

DEFAULT_TILES_PER_ROW = 16


def parse_tile_size(name: str) -> tuple[int, int]:
    """
    Parse a tile size option such as "8x16".

    Args:
        name: One of the keys of TILE_SIZE_MAP

    Returns:
        Tuple of (tile_width, tile_height)

    Raises:
        ValueError: If the name is not a supported geometry
    """
    try:
        return TILE_SIZE_MAP[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unsupported tile size '{name}' (expected one of {', '.join(TILE_SIZE_MAP)})"
        ) from None


def parse_color_depth(name: str) -> int:
    """
    Parse a color depth option such as "4bpp" into its maximum color count.

    Raises:
        ValueError: If the name is not a supported depth
    """
    try:
        return COLOR_DEPTH_MAP[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unsupported color depth '{name}' (expected one of {', '.join(COLOR_DEPTH_MAP)})"
        ) from None


def bits_per_pixel(color_depth: int) -> int:
    """Bits used per pixel for a maximum color count (2, 4, 16 or 256)."""
    try:
        return BITS_PER_PIXEL[color_depth]
    except KeyError:
        raise ValueError(f"Unsupported color depth: {color_depth} colors") from None
