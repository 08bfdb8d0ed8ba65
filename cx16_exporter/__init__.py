"""
Commander X16 Exporter
Converts indexed sprites into packed CX16 tilesets and 12-bit palettes
"""

__version__ = "1.0.0"

from .exceptions import (
    ColorModeError,
    ExportError,
    GeometryError,
    MissingPaletteError,
    OutputWriteError,
    RangeError,
    StructureError,
)
from .models import Cel, Color, ColorMode, IndexedImage, Palette, Region, Sprite
from .palette_reduction import convert_palette_to_cx16
from .palette_utils import encode_palette
from .tile_utils import export_tileset
from .validation import SpriteValidator, ValidationResult, validate_sprite

__all__ = [
    "Cel",
    "Color",
    "ColorMode",
    "ColorModeError",
    "ExportError",
    "GeometryError",
    "IndexedImage",
    "MissingPaletteError",
    "OutputWriteError",
    "Palette",
    "RangeError",
    "Region",
    "Sprite",
    "SpriteValidator",
    "StructureError",
    "ValidationResult",
    "convert_palette_to_cx16",
    "encode_palette",
    "export_tileset",
    "validate_sprite",
]
