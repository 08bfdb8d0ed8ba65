#!/usr/bin/env python3
"""
Commander X16 tile encoding/decoding utilities
Packed, most-significant-pixel-first tiles at 1, 2, 4 or 8 bits per pixel
"""

from __future__ import annotations

from math import ceil

from cx16_exporter.constants import BITS_PER_BYTE, bits_per_pixel
from cx16_exporter.logging_config import get_logger
from cx16_exporter.models import ImageSource, IndexedImage, Region, Sprite

logger = get_logger(__name__)


def bytes_per_tile_row(tile_width: int, color_depth: int) -> int:
    """Bytes emitted for one row of a tile; rows never share a byte."""
    return ceil(tile_width * bits_per_pixel(color_depth) / BITS_PER_BYTE)


def expected_tileset_size(width: int, height: int, tile_size: tuple[int, int],
                          color_depth: int) -> int:
    """
    Total size in bytes of an encoded tileset.

    Args:
        width: Sprite width in pixels
        height: Sprite height in pixels
        tile_size: (tile_width, tile_height)
        color_depth: Maximum number of colors (2, 4, 16 or 256)

    Returns:
        tiles_per_row * tiles_per_column * tile_height * bytes_per_tile_row
    """
    tile_width, tile_height = tile_size
    tiles = (width // tile_width) * (height // tile_height)
    return tiles * tile_height * bytes_per_tile_row(tile_width, color_depth)


def encode_tile(image: ImageSource, bounds: Region, tile_x: int, tile_y: int,
                tile_size: tuple[int, int], color_depth: int) -> bytes:
    """
    Encode a single tile of a cel image.

    Pixels outside ``bounds`` encode as index 0. Indices are reduced modulo
    ``color_depth``; validation rejects such images before export, so this
    only matters when the encoder is called directly.

    Args:
        image: Cel image; its (0, 0) sits at (bounds.x, bounds.y)
        bounds: Cel bounds in sprite coordinates
        tile_x: Tile column
        tile_y: Tile row
        tile_size: (tile_width, tile_height)
        color_depth: Maximum number of colors (2, 4, 16 or 256)

    Returns:
        tile_height * bytes_per_tile_row bytes
    """
    tile_width, tile_height = tile_size
    bpp = bits_per_pixel(color_depth)
    output = bytearray()

    for ty in range(tile_height):
        byte = 0
        bits_filled = 0
        for tx in range(tile_width):
            pixel_x = tile_x * tile_width + tx
            pixel_y = tile_y * tile_height + ty
            pixel_value = 0

            if bounds.contains(pixel_x, pixel_y):
                pixel_value = image.get_index(pixel_x - bounds.x,
                                              pixel_y - bounds.y) % color_depth

            byte = (byte << bpp) | pixel_value
            bits_filled += bpp

            # Flush full bytes, and always at the end of the tile row
            if bits_filled >= BITS_PER_BYTE or tx == tile_width - 1:
                output.append(byte & 0xFF)
                byte = 0
                bits_filled %= BITS_PER_BYTE

    return bytes(output)


def export_tileset(sprite: Sprite, tile_size: tuple[int, int],
                   color_depth: int) -> list[bytes]:
    """
    Encode a validated sprite as a list of tiles.

    Tiles are produced row-major over the tile grid: tile rows top to
    bottom, tiles within a row left to right.

    Args:
        sprite: Sprite that passed SpriteValidator
        tile_size: (tile_width, tile_height)
        color_depth: Maximum number of colors (2, 4, 16 or 256)

    Returns:
        List of encoded tiles, one bytes object per tile
    """
    tile_width, tile_height = tile_size
    tiles_per_row = sprite.width // tile_width
    tiles_per_column = sprite.height // tile_height
    cel = sprite.cel

    tiles = []
    for y in range(tiles_per_column):
        for x in range(tiles_per_row):
            tiles.append(encode_tile(cel.image, cel.bounds, x, y, tile_size, color_depth))

    logger.debug(
        f"Encoded {tiles_per_row}x{tiles_per_column} tiles "
        f"({len(tiles)} total) at {bits_per_pixel(color_depth)}bpp"
    )
    return tiles


def flatten_tiles(tiles: list[bytes]) -> bytes:
    """Concatenate encoded tiles into a single stream."""
    output = bytearray()
    for tile in tiles:
        output.extend(tile)
    return bytes(output)


def decode_tile(data: bytes, offset: int, tile_size: tuple[int, int],
                color_depth: int) -> list[list[int]]:
    """
    Decode one packed tile.

    Args:
        data: Encoded tileset
        offset: Starting offset of the tile in ``data``
        tile_size: (tile_width, tile_height)
        color_depth: Maximum number of colors (2, 4, 16 or 256)

    Returns:
        tile_height rows of tile_width palette indices

    Raises:
        IndexError: If the tile extends past the end of ``data``
    """
    tile_width, tile_height = tile_size
    bpp = bits_per_pixel(color_depth)
    row_bytes = bytes_per_tile_row(tile_width, color_depth)
    if offset + row_bytes * tile_height > len(data):
        raise IndexError(f"Tile data out of bounds at offset {offset}")

    mask = color_depth - 1
    pixels_per_byte = BITS_PER_BYTE // bpp
    rows = []
    for ty in range(tile_height):
        row_start = offset + ty * row_bytes
        row = []
        for tx in range(tile_width):
            byte = data[row_start + tx // pixels_per_byte]
            # Last pixel of a byte sits in the low bits
            shift = (pixels_per_byte - 1 - tx % pixels_per_byte) * bpp
            row.append((byte >> shift) & mask)
        rows.append(row)
    return rows


def decode_tileset(data: bytes, tile_size: tuple[int, int], color_depth: int,
                   tiles_per_row: int) -> IndexedImage:
    """
    Lay out an encoded tileset as an image for previewing.

    Trailing bytes that do not form a complete tile are ignored; missing
    tiles in the last tile row stay at index 0.

    Args:
        data: Encoded tileset
        tile_size: (tile_width, tile_height)
        color_depth: Maximum number of colors (2, 4, 16 or 256)
        tiles_per_row: Number of tile columns in the output image

    Returns:
        IndexedImage holding the decoded indices
    """
    if tiles_per_row <= 0:
        raise ValueError("tiles_per_row must be greater than 0")

    tile_width, tile_height = tile_size
    tile_bytes = bytes_per_tile_row(tile_width, color_depth) * tile_height
    num_tiles = len(data) // tile_bytes
    tiles_per_column = ceil(num_tiles / tiles_per_row)

    image = IndexedImage(tiles_per_row * tile_width, tiles_per_column * tile_height)
    for tile_idx in range(num_tiles):
        rows = decode_tile(data, tile_idx * tile_bytes, tile_size, color_depth)
        base_x = (tile_idx % tiles_per_row) * tile_width
        base_y = (tile_idx // tiles_per_row) * tile_height
        for ty, row in enumerate(rows):
            for tx, value in enumerate(row):
                image.set_index(base_x + tx, base_y + ty, value)

    logger.debug(f"Decoded {num_tiles} tiles into {image.width}x{image.height} image")
    return image
