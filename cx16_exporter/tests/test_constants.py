"""
Tests for option parsing in constants.py
"""

import pytest

from cx16_exporter.constants import bits_per_pixel, parse_color_depth, parse_tile_size


@pytest.mark.unit
class TestOptionParsing:
    """Tile size and color depth names"""

    @pytest.mark.parametrize("name,expected", [
        ("8x8", (8, 8)),
        ("16x16", (16, 16)),
        ("8x16", (8, 16)),
        ("16x8", (16, 8)),
        (" 16X8 ", (16, 8)),
    ])
    def test_tile_sizes(self, name, expected):
        assert parse_tile_size(name) == expected

    @pytest.mark.parametrize("name,expected", [
        ("1bpp", 2),
        ("2bpp", 4),
        ("4bpp", 16),
        ("8BPP", 256),
    ])
    def test_color_depths(self, name, expected):
        assert parse_color_depth(name) == expected

    def test_unknown_tile_size(self):
        with pytest.raises(ValueError, match="Unsupported tile size '32x32'"):
            parse_tile_size("32x32")

    def test_unknown_color_depth(self):
        with pytest.raises(ValueError, match="Unsupported color depth"):
            parse_color_depth("16bpp")

    @pytest.mark.parametrize("depth,bits", [(2, 1), (4, 2), (16, 4), (256, 8)])
    def test_bits_per_pixel(self, depth, bits):
        assert bits_per_pixel(depth) == bits

    def test_bits_per_pixel_unsupported(self):
        with pytest.raises(ValueError):
            bits_per_pixel(8)
