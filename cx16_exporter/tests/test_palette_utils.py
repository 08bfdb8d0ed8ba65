#!/usr/bin/env python3
"""
Tests for palette_utils.py
Color conversion and the two-byte palette format
"""

import pytest

from cx16_exporter.models import Palette
from cx16_exporter.palette_utils import (
    decode_palette,
    encode_color,
    encode_palette,
    get_grayscale_palette,
    read_palette_file,
    rgb444_to_rgb888,
    rgb888_to_rgb444,
)
from cx16_exporter.security_utils import SecurityError


@pytest.mark.unit
class TestColorConversion:
    """8-bit <-> 4-bit channel conversion"""

    def test_black_and_white(self):
        assert rgb888_to_rgb444(0, 0, 0) == (0, 0, 0)
        assert rgb888_to_rgb444(255, 255, 255) == (15, 15, 15)

    def test_rounds_down(self):
        # 128 * 15 / 255 = 7.53
        assert rgb888_to_rgb444(128, 128, 128) == (7, 7, 7)
        # 16 * 15 / 255 = 0.94
        assert rgb888_to_rgb444(16, 17, 254) == (0, 1, 14)

    def test_expand(self):
        assert rgb444_to_rgb888(0, 15, 7) == (0, 255, 119)

    def test_expanded_values_are_stable(self):
        for value in range(16):
            expanded = rgb444_to_rgb888(value, value, value)
            assert rgb888_to_rgb444(*expanded) == (value, value, value)


@pytest.mark.unit
class TestPaletteEncoding:
    """Green/blue byte followed by red byte"""

    def test_pure_red(self):
        assert encode_color((255, 0, 0)) == b"\x00\x0F"

    def test_pure_green(self):
        assert encode_color((0, 255, 0)) == b"\xF0\x00"

    def test_pure_blue(self):
        assert encode_color((0, 0, 255)) == b"\x0F\x00"

    def test_mixed(self):
        # (100, 150, 200) -> (5, 8, 11)
        assert encode_color((100, 150, 200)) == bytes([0x8B, 0x05])

    def test_length_limited_by_depth(self, sample_palette):
        assert len(encode_palette(sample_palette, 2)) == 4
        assert len(encode_palette(sample_palette, 4)) == 8
        assert len(encode_palette(sample_palette, 16)) == 32

    def test_length_limited_by_palette(self, sample_palette):
        assert len(encode_palette(sample_palette, 256)) == 32

    def test_empty_palette(self):
        assert encode_palette(Palette(), 16) == b""

    def test_first_colors_exported(self):
        palette = Palette([(255, 0, 0), (0, 0, 255), (255, 255, 255)])

        assert encode_palette(palette, 2) == b"\x00\x0F\x0F\x00"


@pytest.mark.unit
class TestPaletteDecoding:
    """Reading palette data back"""

    def test_decode(self):
        palette = decode_palette(b"\x00\x0F\x8B\x05")

        assert list(palette) == [(255, 0, 0), (85, 136, 187)]

    def test_decode_ignores_high_nibble_of_red_byte(self):
        assert list(decode_palette(b"\x00\xF1")) == [(17, 0, 0)]

    def test_decode_odd_length(self):
        with pytest.raises(ValueError, match="multiple of 2 bytes"):
            decode_palette(b"\x00\x0F\x00")

    def test_decode_of_encoded_is_quantized(self):
        palette = Palette([(100, 150, 200)])

        assert list(decode_palette(encode_palette(palette, 16))) == [(85, 136, 187)]

    def test_read_palette_file(self, tmp_path):
        pal_file = tmp_path / "sprite.pal"
        pal_file.write_bytes(b"\x00\x0F\xFF\x0F")

        palette = read_palette_file(pal_file)

        assert list(palette) == [(255, 0, 0), (255, 255, 255)]

    def test_read_palette_file_too_large(self, tmp_path):
        pal_file = tmp_path / "big.pal"
        pal_file.write_bytes(b"\x00" * 1024)

        with pytest.raises(SecurityError, match="File too large"):
            read_palette_file(pal_file)


@pytest.mark.unit
class TestGrayscalePalette:
    """Preview palette"""

    def test_two_colors(self):
        assert list(get_grayscale_palette(2)) == [(0, 0, 0), (255, 255, 255)]

    def test_four_colors(self):
        palette = get_grayscale_palette(4)

        assert [c.red for c in palette] == [0, 85, 170, 255]

    def test_size(self):
        assert len(get_grayscale_palette(256)) == 256
