#!/usr/bin/env python3
"""
Writing tilesets and palettes to disk
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from cx16_exporter.constants import PALETTE_EXTENSION, TILESET_EXTENSION
from cx16_exporter.exceptions import MissingPaletteError, OutputWriteError
from cx16_exporter.logging_config import get_logger
from cx16_exporter.models import Sprite
from cx16_exporter.palette_utils import encode_palette
from cx16_exporter.security_utils import validate_output_path
from cx16_exporter.tile_utils import export_tileset
from cx16_exporter.validation import validate_sprite

logger = get_logger(__name__)


def file_path_and_title(filename: str | os.PathLike) -> str:
    """Path without its extension ("dir/hero.png" -> "dir/hero")."""
    path = Path(filename)
    return str(path.with_suffix("")) if path.suffix else str(path)


def default_tileset_path(sprite: Sprite) -> str:
    if not sprite.filename:
        raise ValueError("Sprite has no filename; an output path is required")
    return file_path_and_title(sprite.filename) + TILESET_EXTENSION


def default_palette_path(sprite: Sprite) -> str:
    if not sprite.filename:
        raise ValueError("Sprite has no filename; an output path is required")
    return file_path_and_title(sprite.filename) + PALETTE_EXTENSION


def save_binary_file(filename: str | os.PathLike, data: Iterable[bytes]) -> int:
    """
    Write chunks of bytes to a new binary file.

    A file left behind by a failed write is deleted before the error
    propagates.

    Args:
        filename: Output path
        data: Chunks written in order (e.g. encoded tiles)

    Returns:
        Number of bytes written

    Raises:
        SecurityError: If the path is rejected
        OutputWriteError: If the file cannot be opened or written
    """
    filename = validate_output_path(filename)
    written = 0
    try:
        f = open(filename, "wb")
    except OSError as e:
        raise OutputWriteError(f"Failed to open file: {e}", filename) from e

    try:
        with f:
            for chunk in data:
                f.write(chunk)
                written += len(chunk)
    except OSError as e:
        _discard_partial(filename)
        raise OutputWriteError(f"Failed to write file {filename}: {e}", filename) from e

    logger.debug(f"Wrote {written} bytes to {filename}")
    return written


def _discard_partial(filename: str) -> None:
    try:
        os.remove(filename)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove partial output {filename}: {e}")


def export_tileset_file(sprite: Sprite, tile_size: tuple[int, int], color_depth: int,
                        filename: str | os.PathLike | None = None) -> str:
    """
    Validate a sprite and write its tileset.

    Args:
        sprite: Sprite to export
        tile_size: (tile_width, tile_height)
        color_depth: Maximum number of colors (2, 4, 16 or 256)
        filename: Output path (defaults to "<image>.cx16.bin")

    Returns:
        Path of the written file

    Raises:
        ExportError: The validation error, if the sprite is not exportable;
            nothing is written in that case
        OutputWriteError: If the file cannot be written
    """
    validate_sprite(sprite, tile_size, color_depth).raise_if_invalid()

    if filename is None:
        filename = default_tileset_path(sprite)

    tileset = export_tileset(sprite, tile_size, color_depth)
    size = save_binary_file(filename, tileset)
    logger.info(f"Tileset exported successfully to {filename} ({len(tileset)} tiles, {size} bytes)")
    return str(filename)


def export_palette_file(sprite: Sprite, color_depth: int,
                        filename: str | os.PathLike | None = None) -> str:
    """
    Write the first colors of the sprite's palette.

    Args:
        sprite: Sprite whose palette is exported
        color_depth: Maximum number of colors (2, 4, 16 or 256)
        filename: Output path (defaults to "<image>.pal")

    Returns:
        Path of the written file

    Raises:
        MissingPaletteError: If the sprite has no palette
        OutputWriteError: If the file cannot be written
    """
    palette = sprite.palette
    if palette is None:
        raise MissingPaletteError("No palette found.")

    if filename is None:
        filename = default_palette_path(sprite)

    size = save_binary_file(filename, [encode_palette(palette, color_depth)])
    logger.info(f"Palette exported successfully to {filename} ({size} bytes)")
    return str(filename)
