#!/usr/bin/env python3
"""
Commander X16 palette utilities
Color conversion and the two-byte VERA palette format
"""

from __future__ import annotations

import os

from cx16_exporter.constants import (
    BYTES_PER_COLOR,
    CHANNEL_4BIT_MASK,
    GREEN_SHIFT,
    MAX_PALETTE_FILE_SIZE,
    RGB444_EXPAND_FACTOR,
    RGB444_MAX_VALUE,
    RGB888_MAX_VALUE,
)
from cx16_exporter.logging_config import get_logger
from cx16_exporter.models import Color, Palette, PaletteSource
from cx16_exporter.security_utils import validate_file_path

logger = get_logger(__name__)


def rgb888_to_rgb444(r: int, g: int, b: int) -> tuple[int, int, int]:
    """
    Convert an 8-bit per channel color to 4-bit channels.

    Args:
        r: Red component (0-255)
        g: Green component (0-255)
        b: Blue component (0-255)

    Returns:
        Tuple of (r, g, b) values in 0-15 range (rounded down)
    """
    return (
        (r * RGB444_MAX_VALUE) // RGB888_MAX_VALUE,
        (g * RGB444_MAX_VALUE) // RGB888_MAX_VALUE,
        (b * RGB444_MAX_VALUE) // RGB888_MAX_VALUE,
    )


def rgb444_to_rgb888(r: int, g: int, b: int) -> tuple[int, int, int]:
    """Expand 4-bit channels to 8 bits (0 -> 0, 15 -> 255)."""
    return (
        r * RGB444_EXPAND_FACTOR,
        g * RGB444_EXPAND_FACTOR,
        b * RGB444_EXPAND_FACTOR,
    )


def encode_color(color: Color | tuple[int, int, int]) -> bytes:
    """
    Encode one color as two bytes: (green << 4 | blue), then red.

    Args:
        color: (r, g, b) in 0-255 range

    Returns:
        2 bytes of palette data
    """
    red, green, blue = rgb888_to_rgb444(*color)
    return bytes(((green << GREEN_SHIFT) | blue, red))


def encode_palette(palette: PaletteSource, color_depth: int) -> bytes:
    """
    Encode the first colors of a palette for the selected color depth.

    Args:
        palette: Palette to export
        color_depth: Maximum number of colors (2, 4, 16 or 256)

    Returns:
        2 * min(color_depth, len(palette)) bytes
    """
    ncolors = min(color_depth, len(palette))

    output = bytearray()
    for i in range(ncolors):
        output.extend(encode_color(palette.get_color(i)))

    logger.debug(f"Encoded {ncolors} of {len(palette)} palette colors")
    return bytes(output)


def decode_palette(data: bytes) -> Palette:
    """
    Decode palette data back into 8-bit colors.

    Args:
        data: Palette bytes (2 bytes per color)

    Returns:
        Palette with channels expanded to 0-255

    Raises:
        ValueError: If data length is odd
    """
    if len(data) % BYTES_PER_COLOR:
        raise ValueError(
            f"Palette data must be a multiple of {BYTES_PER_COLOR} bytes, got {len(data)}"
        )

    colors = []
    for i in range(0, len(data), BYTES_PER_COLOR):
        gb, r = data[i], data[i + 1]
        colors.append(rgb444_to_rgb888(
            r & CHANNEL_4BIT_MASK,
            (gb >> GREEN_SHIFT) & CHANNEL_4BIT_MASK,
            gb & CHANNEL_4BIT_MASK,
        ))
    return Palette(colors)


def read_palette_file(palette_file: str | os.PathLike) -> Palette:
    """
    Read an exported palette file.

    Raises:
        SecurityError: If the path is rejected or the file is too large
        ValueError: If the file length is odd
    """
    palette_file = validate_file_path(palette_file, max_size=MAX_PALETTE_FILE_SIZE)
    with open(palette_file, "rb") as f:
        data = f.read()
    palette = decode_palette(data)
    logger.debug(f"Read {len(palette)} colors from {palette_file}")
    return palette


def get_grayscale_palette(color_depth: int) -> Palette:
    """
    Grayscale ramp with ``color_depth`` entries, for previews without a palette.

    Returns:
        Palette running from black to white
    """
    if color_depth < 2:
        return Palette([(0, 0, 0)] * color_depth)
    step = RGB888_MAX_VALUE / (color_depth - 1)
    return Palette((round(i * step),) * 3 for i in range(color_depth))
