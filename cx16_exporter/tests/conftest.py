"""
Shared pytest fixtures and configuration for exporter tests
"""

import logging

import pytest
from PIL import Image

from cx16_exporter.logging_config import LOGGER_NAME
from cx16_exporter.models import IndexedImage, Palette, Sprite
from cx16_exporter.settings_manager import SettingsManager


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() so caplog keeps working across tests"""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def make_sprite():
    """Factory for single-cel indexed sprites from pixel rows"""

    def _make(rows, palette=None, filename=None):
        image = IndexedImage.from_rows(rows)
        return Sprite.from_image(image, palette, filename=filename)

    return _make


@pytest.fixture
def sample_palette():
    """16 distinct colors"""
    return Palette((i * 16, 255 - i * 16, (i * 37) % 256) for i in range(16))


@pytest.fixture
def checker_rows():
    """16x16 rows of 4bpp data, a different value in each pixel column"""
    return [[(x + y) % 16 for x in range(16)] for y in range(16)]


def _write_indexed_png(path, rows, colors, transparency=None):
    """Save pixel rows and a color list as an indexed PNG"""
    height = len(rows)
    width = len(rows[0])
    img = Image.new("P", (width, height))
    img.putdata([value for row in rows for value in row])
    flat = []
    for color in colors:
        flat.extend(color)
    img.putpalette(flat)
    if transparency is None:
        img.save(path)
    else:
        img.save(path, transparency=transparency)
    return path


@pytest.fixture
def indexed_png(tmp_path, checker_rows, sample_palette):
    """16x16 indexed PNG using all 16 palette colors"""
    return _write_indexed_png(tmp_path / "sprite.png", checker_rows, list(sample_palette))


@pytest.fixture
def rgb_png(tmp_path):
    """16x16 RGB PNG"""
    path = tmp_path / "rgb.png"
    img = Image.new("RGB", (16, 16), (255, 0, 0))
    img.save(path)
    return path


@pytest.fixture
def settings_manager(tmp_path, monkeypatch):
    """Settings manager storing its file in a temporary directory"""
    settings_file = tmp_path / "settings" / "settings.json"
    monkeypatch.setattr(SettingsManager, "_get_settings_path", lambda self: settings_file)
    return SettingsManager("test_app")


@pytest.fixture
def write_png():
    """Helper writing (path, rows, colors[, transparency]) as an indexed PNG"""
    return _write_indexed_png
