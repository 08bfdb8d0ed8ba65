#!/usr/bin/env python3
"""
PNG adapter: load indexed PNGs as sprites and write them back
"""

from __future__ import annotations

import os

import numpy as np
from PIL import Image

from cx16_exporter.constants import DEFAULT_TILES_PER_ROW, MAX_PALETTE_ENTRIES, MAX_PNG_FILE_SIZE
from cx16_exporter.logging_config import get_logger
from cx16_exporter.models import Cel, ColorMode, IndexedImage, Palette, Region, Sprite
from cx16_exporter.palette_utils import get_grayscale_palette
from cx16_exporter.security_utils import validate_file_path, validate_output_path
from cx16_exporter.tile_utils import decode_tileset

logger = get_logger(__name__)

_COLOR_MODES = {
    "P": ColorMode.INDEXED,
    "L": ColorMode.GRAYSCALE,
    "1": ColorMode.GRAYSCALE,
}


def _transparent_index(img: Image.Image) -> int | None:
    """Palette index marked transparent by the PNG's tRNS chunk, if any."""
    transparency = img.info.get("transparency")
    if transparency is None or isinstance(transparency, int):
        return transparency

    # Per-index alpha table: only a fully transparent entry can be kept
    index = bytes(transparency).find(b"\0")
    if index < 0:
        logger.warning("Partial palette alpha is not supported; transparency ignored")
        return None
    return index


def sprite_from_image(img: Image.Image, filename: str | None = None) -> Sprite:
    """
    Wrap a Pillow image as a single-layer, single-cel sprite.

    Indexed images keep their pixel indices and palette. Other modes are
    carried as RGB/grayscale sprites without pixel data so validation can
    report the color mode.
    """
    width, height = img.size
    color_mode = _COLOR_MODES.get(img.mode, ColorMode.RGB)

    if color_mode is not ColorMode.INDEXED:
        logger.debug(f"Image mode {img.mode} is not indexed")
        image = IndexedImage(width, height)
        return Sprite(width, height, color_mode=color_mode,
                      cels=[Cel.at(image)], filename=filename)

    image = IndexedImage.from_array(np.asarray(img))
    flat_palette = img.getpalette()
    palettes = [Palette.from_flat(flat_palette)] if flat_palette else []

    logger.debug(
        f"Loaded {width}x{height} indexed image with "
        f"{len(palettes[0]) if palettes else 0} palette colors"
    )
    return Sprite(width, height, cels=[Cel.at(image)], palettes=palettes,
                  filename=filename, transparent_color=_transparent_index(img))


def load_sprite(png_file: str | os.PathLike) -> Sprite:
    """
    Load a PNG file as a sprite.

    Args:
        png_file: Path to the PNG

    Returns:
        Sprite with the image's pixels and palette

    Raises:
        SecurityError: If the path is rejected
        OSError: If Pillow cannot read the file
    """
    png_file = validate_file_path(png_file, max_size=MAX_PNG_FILE_SIZE)
    with Image.open(png_file) as img:
        img.load()
        return sprite_from_image(img, filename=png_file)


def image_to_pil(image: IndexedImage, palette: Palette | None = None,
                 bounds: Region | None = None,
                 size: tuple[int, int] | None = None) -> Image.Image:
    """
    Convert an indexed image to a Pillow "P" image.

    Args:
        image: Pixel indices
        palette: Optional palette to attach
        bounds: Where to place ``image`` on the canvas (defaults to origin)
        size: Canvas size (defaults to the image size)

    Raises:
        ValueError: If an index does not fit in a PNG palette
    """
    pixels = image.to_array()
    if pixels.size and int(pixels.max()) >= MAX_PALETTE_ENTRIES:
        raise ValueError(f"Pixel index {int(pixels.max())} cannot be stored in an indexed PNG")

    width, height = size or (image.width, image.height)
    canvas = np.zeros((height, width), dtype=np.uint8)
    x, y = (bounds.x, bounds.y) if bounds else (0, 0)
    # Clip the cel to the canvas
    x0, y0 = max(x, 0), max(y, 0)
    x1, y1 = min(x + image.width, width), min(y + image.height, height)
    if x0 < x1 and y0 < y1:
        canvas[y0:y1, x0:x1] = pixels[y0 - y:y1 - y, x0 - x:x1 - x]

    img = Image.new("P", (width, height))
    img.putdata(canvas.flatten().tolist())
    if palette is not None and len(palette):
        img.putpalette(palette.to_flat())
    return img


def sprite_to_image(sprite: Sprite) -> Image.Image:
    """Render the sprite's cel onto a "P" image with its palette."""
    cel = sprite.cel
    img = image_to_pil(cel.image, sprite.palette, cel.bounds,
                       (sprite.width, sprite.height))
    if sprite.transparent_color is not None:
        img.info["transparency"] = sprite.transparent_color
    return img


def save_sprite(sprite: Sprite, png_file: str | os.PathLike) -> str:
    """
    Write a sprite to an indexed PNG, keeping its transparent color.

    Returns:
        Absolute path written
    """
    png_file = validate_output_path(png_file)
    save_options = {}
    if sprite.transparent_color is not None:
        save_options["transparency"] = sprite.transparent_color
    sprite_to_image(sprite).save(png_file, "PNG", **save_options)
    logger.info(f"Saved sprite to {png_file}")
    return png_file


def render_tileset(data: bytes, tile_size: tuple[int, int], color_depth: int,
                   tiles_per_row: int = DEFAULT_TILES_PER_ROW,
                   palette: Palette | None = None) -> Image.Image:
    """
    Render an encoded tileset as a "P" image for previewing.

    Args:
        data: Encoded tileset
        tile_size: (tile_width, tile_height)
        color_depth: Maximum number of colors (2, 4, 16 or 256)
        tiles_per_row: Tile columns in the preview
        palette: Colors to use (defaults to a grayscale ramp)

    Returns:
        Pillow image of the decoded tiles
    """
    image = decode_tileset(data, tile_size, color_depth, tiles_per_row)
    if palette is None:
        palette = get_grayscale_palette(color_depth)
    return image_to_pil(image, palette)
