#!/usr/bin/env python3
"""
Unit tests for the sprite, image and palette models
"""

import numpy as np
import pytest

from cx16_exporter.models import (
    Cel,
    Color,
    ColorMode,
    IndexedImage,
    Palette,
    Region,
    Sprite,
)


@pytest.mark.unit
class TestIndexedImage:
    """Pixel index storage"""

    def test_new_image_is_filled(self):
        image = IndexedImage(3, 2, fill=4)

        assert (image.width, image.height) == (3, 2)
        assert image.to_rows() == [[4, 4, 4], [4, 4, 4]]

    def test_get_set(self):
        image = IndexedImage(4, 4)
        image.set_index(3, 1, 200)

        assert image.get_index(3, 1) == 200
        assert image.get_index(1, 3) == 0

    def test_from_rows_is_row_major(self):
        image = IndexedImage.from_rows([[1, 2, 3], [4, 5, 6]])

        assert image.width == 3
        assert image.get_index(2, 0) == 3
        assert image.get_index(0, 1) == 4
        assert list(image.iter_indices()) == [1, 2, 3, 4, 5, 6]

    def test_from_rows_ragged(self):
        with pytest.raises(ValueError, match="same length"):
            IndexedImage.from_rows([[1, 2], [3]])

    def test_negative_index_rejected(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            IndexedImage(1, 1).set_index(0, 0, -1)

    def test_invalid_dimensions(self):
        with pytest.raises(ValueError):
            IndexedImage(-1, 4)

    def test_from_array_copies(self):
        array = np.array([[1, 2], [3, 4]], dtype=np.uint8)
        image = IndexedImage.from_array(array)
        array[0, 0] = 9

        assert image.get_index(0, 0) == 1

    def test_from_array_requires_2d(self):
        with pytest.raises(ValueError, match="2-D"):
            IndexedImage.from_array(np.zeros((2, 2, 3)))

    def test_copy_and_equality(self):
        image = IndexedImage.from_rows([[1, 2]])
        clone = image.copy()

        assert clone == image
        clone.set_index(0, 0, 5)
        assert clone != image


@pytest.mark.unit
class TestPalette:
    """Ordered color list"""

    def test_get_set(self):
        palette = Palette.of_size(2)
        palette.set_color(1, (1, 2, 3))

        assert palette.get_color(1) == Color(1, 2, 3)
        assert palette.get_color(1).green == 2
        assert len(palette) == 2

    def test_channel_range_checked(self):
        with pytest.raises(ValueError, match="out of range"):
            Palette([(0, 256, 0)])
        with pytest.raises(ValueError):
            Palette.of_size(1).set_color(0, (-1, 0, 0))

    def test_flat_round_trip(self):
        palette = Palette.from_flat([1, 2, 3, 4, 5, 6])

        assert list(palette) == [(1, 2, 3), (4, 5, 6)]
        assert palette.to_flat() == [1, 2, 3, 4, 5, 6]

    def test_from_flat_length(self):
        with pytest.raises(ValueError):
            Palette.from_flat([1, 2])

    def test_replace(self):
        palette = Palette([(1, 1, 1)])
        palette.replace(Palette([(2, 2, 2), (3, 3, 3)]))

        assert list(palette) == [(2, 2, 2), (3, 3, 3)]

    def test_copy_is_independent(self):
        palette = Palette([(1, 1, 1)])
        clone = palette.copy()
        clone.set_color(0, (0, 0, 0))

        assert palette.get_color(0) == (1, 1, 1)


@pytest.mark.unit
class TestSprite:
    """Sprite container"""

    def test_region_contains(self):
        region = Region(2, 3, 4, 5)

        assert region.contains(2, 3)
        assert region.contains(5, 7)
        assert not region.contains(6, 3)
        assert not region.contains(2, 8)

    def test_from_image(self):
        image = IndexedImage(8, 16)
        sprite = Sprite.from_image(image, Palette.of_size(2), filename="a.png")

        assert (sprite.width, sprite.height) == (8, 16)
        assert sprite.color_mode is ColorMode.INDEXED
        assert sprite.layers == ["Layer 1"]
        assert sprite.cel.bounds == Region(0, 0, 8, 16)
        assert sprite.cel.image is image
        assert len(sprite.palette) == 2

    def test_cel_at(self):
        cel = Cel.at(IndexedImage(2, 3), 4, 5)

        assert cel.bounds == Region(4, 5, 2, 3)

    def test_no_palette(self):
        assert Sprite.from_image(IndexedImage(1, 1)).palette is None

    def test_transparent_color(self):
        image = IndexedImage(1, 1)

        assert Sprite.from_image(image).transparent_color is None
        assert Sprite.from_image(image, transparent_color=3).transparent_color == 3

    def test_cel_of_empty_sprite(self):
        with pytest.raises(IndexError):
            Sprite(8, 8).cel
