#!/usr/bin/env python3
"""
Sprite validation before tileset export
Checks the structural preconditions of the tile encoder
"""

from __future__ import annotations

from typing import NamedTuple, Optional

from cx16_exporter.constants import COLOR_DEPTH_MAP
from cx16_exporter.exceptions import (
    ColorModeError,
    ExportError,
    GeometryError,
    RangeError,
    StructureError,
)
from cx16_exporter.logging_config import get_logger
from cx16_exporter.models import ColorMode, ImageSource, Sprite

logger = get_logger(__name__)


class ValidationResult(NamedTuple):
    """Outcome of a validation run; ``error`` holds the first violation"""

    is_valid: bool
    error: Optional[ExportError] = None

    @property
    def message(self) -> str:
        return str(self.error) if self.error else ""

    def raise_if_invalid(self) -> None:
        """Raise the recorded error, if any"""
        if self.error is not None:
            raise self.error


VALID = ValidationResult(True)


class SpriteValidator:
    """Structural checks applied before a sprite is encoded as tiles"""

    @staticmethod
    def validate_structure(sprite: Sprite) -> Optional[ExportError]:
        """Sprite must have exactly one layer and one cel"""
        if len(sprite.layers) != 1 or len(sprite.cels) != 1:
            return StructureError("Sprite must have only one layer and one cel.")
        return None

    @staticmethod
    def validate_color_mode(sprite: Sprite) -> Optional[ExportError]:
        if sprite.color_mode is not ColorMode.INDEXED:
            return ColorModeError("Sprite must be in INDEXED color mode.")
        return None

    @staticmethod
    def validate_dimensions(width: int, height: int,
                            tile_size: tuple[int, int]) -> Optional[ExportError]:
        """
        Check that the canvas is an exact multiple of the tile size.

        Args:
            width: Sprite width in pixels
            height: Sprite height in pixels
            tile_size: (tile_width, tile_height)

        Returns:
            GeometryError instance or None
        """
        tile_width, tile_height = tile_size
        if width % tile_width != 0 or height % tile_height != 0:
            return GeometryError("Sprite dimensions must be divisible by the tile size.")
        return None

    @staticmethod
    def validate_color_range(image: ImageSource, color_depth: int) -> Optional[ExportError]:
        """
        Check that every pixel index fits the selected color depth.

        Args:
            image: Image to scan (all pixels)
            color_depth: Maximum number of colors (2, 4, 16 or 256)

        Returns:
            RangeError instance for the first offending pixel, or None
        """
        for x in range(image.width):
            for y in range(image.height):
                if image.get_index(x, y) >= color_depth:
                    return RangeError("Color count exceeds the selected color depth.")
        return None

    @classmethod
    def validate(cls, sprite: Sprite, tile_size: tuple[int, int],
                 color_depth: int) -> ValidationResult:
        """
        Run all checks in order and stop at the first failure.

        Args:
            sprite: Sprite to check
            tile_size: (tile_width, tile_height)
            color_depth: Maximum number of colors for the selected depth

        Returns:
            ValidationResult; never raises for an invalid sprite
        """
        error = cls.validate_structure(sprite)
        if error is None:
            error = cls.validate_color_mode(sprite)
        if error is None:
            error = cls.validate_dimensions(sprite.width, sprite.height, tile_size)
        if error is None:
            error = cls.validate_color_range(sprite.cel.image, color_depth)

        if error is not None:
            logger.debug(f"Validation failed ({type(error).__name__}): {error}")
            return ValidationResult(False, error)
        return VALID


def validate_sprite(sprite: Sprite, tile_size: tuple[int, int],
                    color_depth: int) -> ValidationResult:
    """Module-level shortcut for SpriteValidator.validate"""
    if color_depth not in COLOR_DEPTH_MAP.values():
        raise ValueError(f"Unsupported color depth: {color_depth} colors")
    return SpriteValidator.validate(sprite, tile_size, color_depth)
