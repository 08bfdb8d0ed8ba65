"""
Settings manager for the exporter
Remembers the last used export options between runs
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from cx16_exporter.constants import (
    DEFAULT_COLOR_DEPTH,
    DEFAULT_TILE_SIZE,
    DEFAULT_TILES_PER_ROW,
    parse_color_depth,
    parse_tile_size,
)
from cx16_exporter.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ExportSettings:
    """Tile geometry and color depth, as option strings ("8x8", "4bpp")"""

    tile_size: str = DEFAULT_TILE_SIZE
    color_depth: str = DEFAULT_COLOR_DEPTH

    def __post_init__(self) -> None:
        # Fail early on unknown option names
        parse_tile_size(self.tile_size)
        parse_color_depth(self.color_depth)

    @property
    def tile_dimensions(self) -> tuple[int, int]:
        return parse_tile_size(self.tile_size)

    @property
    def max_colors(self) -> int:
        return parse_color_depth(self.color_depth)


class SettingsManager:
    """Manages application settings with persistence"""

    def __init__(self, app_name: str = "cx16_exporter"):
        self.app_name = app_name
        self.settings_file = self._get_settings_path()
        self.settings = self._load_settings()

    def _get_settings_path(self) -> Path:
        """Get the appropriate settings directory for the platform"""
        if os.name == "nt":  # Windows
            base = Path(os.environ.get("APPDATA", os.path.expanduser("~")))
            settings_dir = base / self.app_name
        else:  # Linux/Mac
            settings_dir = Path(os.path.expanduser("~")) / f".{self.app_name}"
        return settings_dir / "settings.json"

    def _load_settings(self) -> dict[str, Any]:
        """Load settings from file"""
        if self.settings_file.exists():
            try:
                with open(self.settings_file) as f:
                    loaded = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Ignoring unreadable settings file {self.settings_file}: {e}")
                return self._get_default_settings()
            if isinstance(loaded, dict):
                settings = self._get_default_settings()
                settings.update(loaded)
                return settings
        return self._get_default_settings()

    def _get_default_settings(self) -> dict[str, Any]:
        """Get default settings"""
        return {
            "export": asdict(ExportSettings()),
            "tiles_per_row": DEFAULT_TILES_PER_ROW,
        }

    def save_settings(self) -> bool:
        """Save current settings to file; returns False if it could not be written"""
        try:
            self.settings_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.settings_file, "w") as f:
                json.dump(self.settings, f, indent=2)
        except OSError as e:
            logger.warning(f"Could not save settings to {self.settings_file}: {e}")
            return False
        return True

    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting value using a dotted key ("export.tile_size")"""
        value = self.settings
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a setting value using a dotted key and save"""
        keys = key.split(".")
        target = self.settings
        for k in keys[:-1]:
            if not isinstance(target.get(k), dict):
                target[k] = {}
            target = target[k]
        target[keys[-1]] = value
        self.save_settings()

    def get_export_settings(self) -> ExportSettings:
        """Last used export options, falling back to defaults if invalid"""
        try:
            return ExportSettings(
                tile_size=self.get("export.tile_size", DEFAULT_TILE_SIZE),
                color_depth=self.get("export.color_depth", DEFAULT_COLOR_DEPTH),
            )
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Invalid export settings, using defaults: {e}")
            return ExportSettings()

    def update_export_settings(self, export_settings: ExportSettings) -> None:
        self.set("export", asdict(export_settings))

    def reset_settings(self) -> None:
        """Reset all settings to defaults"""
        self.settings = self._get_default_settings()
        self.save_settings()
