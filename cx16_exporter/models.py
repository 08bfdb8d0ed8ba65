"""
Sprite, image and palette models consumed by the exporter.

The exporter only talks to images and palettes through the small
``ImageSource`` and ``PaletteSource`` protocols below, so any host
representation can be adapted. ``IndexedImage`` and ``Palette`` are the
in-memory implementations used by the PNG adapter and the tests.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Protocol

import numpy as np

from cx16_exporter.constants import RGB888_MAX_VALUE


class ColorMode(Enum):
    """Pixel storage of a sprite."""

    INDEXED = "indexed"
    RGB = "rgb"
    GRAYSCALE = "grayscale"


class Color(NamedTuple):
    """8-bit per channel RGB color."""

    red: int
    green: int
    blue: int


class Region(NamedTuple):
    """Axis-aligned rectangle (cel bounds) in sprite coordinates."""

    x: int
    y: int
    width: int
    height: int

    def contains(self, px: int, py: int) -> bool:
        return (self.x <= px < self.x + self.width
                and self.y <= py < self.y + self.height)


class ImageSource(Protocol):
    """Read/write access to per-pixel palette indices."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def get_index(self, x: int, y: int) -> int: ...

    def set_index(self, x: int, y: int, index: int) -> None: ...


class PaletteSource(Protocol):
    """Read/write access to an ordered list of colors."""

    def __len__(self) -> int: ...

    def get_color(self, index: int) -> Color: ...

    def set_color(self, index: int, color: Color | tuple[int, int, int]) -> None: ...

    def replace(self, other: Palette) -> None: ...


class IndexedImage:
    """Palette-index image backed by a 2-D numpy array (rows, columns)."""

    def __init__(self, width: int, height: int, fill: int = 0):
        if width < 0 or height < 0:
            raise ValueError(f"Invalid image dimensions: {width}x{height}")
        self._pixels = np.full((height, width), fill, dtype=np.uint16)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> IndexedImage:
        """Build an image from a list of pixel rows (top to bottom)."""
        height = len(rows)
        width = len(rows[0]) if height else 0
        if any(len(row) != width for row in rows):
            raise ValueError("All rows must have the same length")
        image = cls(width, height)
        if height:
            image._pixels[:, :] = np.asarray(rows, dtype=np.uint16)
        return image

    @classmethod
    def from_array(cls, array: np.ndarray) -> IndexedImage:
        """Wrap a copy of a 2-D integer array."""
        if array.ndim != 2:
            raise ValueError(f"Expected a 2-D array, got {array.ndim} dimensions")
        height, width = array.shape
        image = cls(width, height)
        image._pixels[:, :] = array
        return image

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    def get_index(self, x: int, y: int) -> int:
        return int(self._pixels[y, x])

    def set_index(self, x: int, y: int, index: int) -> None:
        if index < 0:
            raise ValueError(f"Palette index cannot be negative: {index}")
        self._pixels[y, x] = index

    def iter_indices(self) -> Iterator[int]:
        """Yield every pixel index in row-major order."""
        for value in self._pixels.flat:
            yield int(value)

    def to_rows(self) -> list[list[int]]:
        return [[int(v) for v in row] for row in self._pixels]

    def to_array(self) -> np.ndarray:
        return self._pixels.copy()

    def copy(self) -> IndexedImage:
        return IndexedImage.from_array(self._pixels)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndexedImage):
            return NotImplemented
        return np.array_equal(self._pixels, other._pixels)

    def __repr__(self) -> str:
        return f"IndexedImage({self.width}x{self.height})"


def _check_color(color: Iterable[int]) -> Color:
    red, green, blue = color
    for channel in (red, green, blue):
        if not 0 <= channel <= RGB888_MAX_VALUE:
            raise ValueError(f"Color channel out of range: {channel}")
    return Color(int(red), int(green), int(blue))


class Palette:
    """Ordered list of colors; position is the palette index."""

    def __init__(self, colors: Iterable[Iterable[int]] = ()):
        self._colors: list[Color] = [_check_color(c) for c in colors]

    @classmethod
    def of_size(cls, size: int) -> Palette:
        """Create a palette of ``size`` black entries."""
        return cls([(0, 0, 0)] * size)

    @classmethod
    def from_flat(cls, values: Sequence[int]) -> Palette:
        """Create a palette from a flat [r, g, b, r, g, b, ...] list."""
        if len(values) % 3:
            raise ValueError("Flat palette length must be a multiple of 3")
        return cls(values[i:i + 3] for i in range(0, len(values), 3))

    def __len__(self) -> int:
        return len(self._colors)

    def __iter__(self) -> Iterator[Color]:
        return iter(self._colors)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Palette):
            return NotImplemented
        return self._colors == other._colors

    def __repr__(self) -> str:
        return f"Palette({len(self._colors)} colors)"

    def get_color(self, index: int) -> Color:
        return self._colors[index]

    def set_color(self, index: int, color: Color | tuple[int, int, int]) -> None:
        self._colors[index] = _check_color(color)

    def replace(self, other: Palette) -> None:
        """Replace all entries with those of ``other``."""
        self._colors = list(other)

    def to_flat(self) -> list[int]:
        flat: list[int] = []
        for color in self._colors:
            flat.extend(color)
        return flat

    def copy(self) -> Palette:
        return Palette(self._colors)


@dataclass
class Cel:
    """Pixel data of one layer/frame, placed in the sprite by ``bounds``."""

    image: IndexedImage
    bounds: Region

    @classmethod
    def at(cls, image: IndexedImage, x: int = 0, y: int = 0) -> Cel:
        return cls(image, Region(x, y, image.width, image.height))

@dataclass
class Sprite:
    """Host sprite: canvas size, color mode, layers, cels and palettes.

    ``transparent_color`` is the palette index drawn as transparent, or
    None when the sprite has no transparent color.
    """

    width: int
    height: int
    color_mode: ColorMode = ColorMode.INDEXED
    layers: list[str] = field(default_factory=lambda: ["Layer 1"])
    cels: list[Cel] = field(default_factory=list)
    palettes: list[Palette] = field(default_factory=list)
    filename: str | None = None
    transparent_color: int | None = None

    @classmethod
    def from_image(cls, image: IndexedImage, palette: Palette | None = None,
                   filename: str | None = None,
                   transparent_color: int | None = None) -> Sprite:
        """Single-layer, single-cel indexed sprite covering ``image``."""
        return cls(
            width=image.width,
            height=image.height,
            cels=[Cel.at(image)],
            palettes=[palette] if palette is not None else [],
            filename=filename,
            transparent_color=transparent_color,
        )

    @property
    def cel(self) -> Cel:
        """The first cel (the only one for exportable sprites)."""
        if not self.cels:
            raise IndexError("Sprite has no cels")
        return self.cels[0]

    @property
    def palette(self) -> Palette | None:
        return self.palettes[0] if self.palettes else None
