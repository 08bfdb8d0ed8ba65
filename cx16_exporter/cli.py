#!/usr/bin/env python3
"""
Command-line interface for the Commander X16 exporter

    cx16-export convert sprite.png            # 12-bit palette, duplicates merged
    cx16-export export sprite.png --tile-size 16x16 --color-depth 4bpp
    cx16-export palette sprite.png --color-depth 4bpp
    cx16-export preview sprite.cx16.bin preview.png --palette sprite.pal
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from cx16_exporter import __version__
from cx16_exporter.constants import (
    COLOR_DEPTH_MAP,
    MAX_TILESET_FILE_SIZE,
    TILE_SIZE_MAP,
)
from cx16_exporter.exceptions import ExportError, OutputWriteError
from cx16_exporter.file_output import export_palette_file, export_tileset_file
from cx16_exporter.logging_config import get_logger, setup_logging
from cx16_exporter.palette_reduction import convert_palette_to_cx16
from cx16_exporter.palette_utils import read_palette_file
from cx16_exporter.png_io import load_sprite, render_tileset, save_sprite
from cx16_exporter.security_utils import (
    SecurityError,
    validate_file_path,
    validate_output_path,
)
from cx16_exporter.settings_manager import ExportSettings, SettingsManager

logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cx16-export",
        description="Export indexed sprites as Commander X16 tiles and palettes.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    parser.add_argument("--log-file", default=None, help="Also write log messages to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser(
        "convert", help="Convert the palette to CX16 colors and remove duplicates")
    convert.add_argument("image", help="Indexed PNG")
    convert.add_argument("-o", "--output", help="Output PNG (default: overwrite input)")
    convert.set_defaults(func=cmd_convert)

    export = subparsers.add_parser("export", help="Export the tileset")
    export.add_argument("image", help="Indexed PNG")
    _add_tile_size(export)
    _add_color_depth(export)
    export.add_argument("-o", "--output", help="Output file (default: <image>.cx16.bin)")
    export.set_defaults(func=cmd_export)

    palette = subparsers.add_parser("palette", help="Export the palette")
    palette.add_argument("image", help="Indexed PNG")
    _add_color_depth(palette)
    palette.add_argument("-o", "--output", help="Output file (default: <image>.pal)")
    palette.set_defaults(func=cmd_palette)

    preview = subparsers.add_parser("preview", help="Render an exported tileset as PNG")
    preview.add_argument("tileset", help="Exported .cx16.bin file")
    preview.add_argument("output", help="Output PNG")
    preview.add_argument("--palette", help="Exported .pal file (default: grayscale)")
    _add_tile_size(preview)
    _add_color_depth(preview)
    preview.add_argument("--tiles-per-row", type=_positive_int, default=None)
    preview.set_defaults(func=cmd_preview)

    return parser


def _add_tile_size(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--tile-size", choices=list(TILE_SIZE_MAP), default=None,
                        help="Tile size (default: last used, initially 8x8)")


def _add_color_depth(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--color-depth", choices=list(COLOR_DEPTH_MAP), default=None,
                        help="Color depth (default: last used, initially 1bpp)")


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError("must be greater than 0")
    return number


def resolve_export_settings(args: argparse.Namespace,
                            settings: SettingsManager) -> ExportSettings:
    """Command-line options override the remembered ones"""
    remembered = settings.get_export_settings()
    return ExportSettings(
        tile_size=getattr(args, "tile_size", None) or remembered.tile_size,
        color_depth=getattr(args, "color_depth", None) or remembered.color_depth,
    )


def cmd_convert(args: argparse.Namespace, settings: SettingsManager) -> int:
    sprite = load_sprite(args.image)
    report = convert_palette_to_cx16(sprite)
    save_sprite(sprite, args.output or args.image)
    print(f"Palette has been updated to Commander X16 compatible format "
          f"({report.original_size} -> {report.final_size} colors).")
    return 0


def cmd_export(args: argparse.Namespace, settings: SettingsManager) -> int:
    options = resolve_export_settings(args, settings)
    sprite = load_sprite(args.image)
    filename = export_tileset_file(sprite, options.tile_dimensions, options.max_colors,
                                   args.output)
    settings.update_export_settings(options)
    print(f"Tileset exported successfully to {filename}")
    return 0


def cmd_palette(args: argparse.Namespace, settings: SettingsManager) -> int:
    options = resolve_export_settings(args, settings)
    sprite = load_sprite(args.image)
    filename = export_palette_file(sprite, options.max_colors, args.output)
    settings.set("export.color_depth", options.color_depth)
    print(f"Palette exported successfully to {filename}")
    return 0


def cmd_preview(args: argparse.Namespace, settings: SettingsManager) -> int:
    options = resolve_export_settings(args, settings)
    tiles_per_row = args.tiles_per_row or settings.get("tiles_per_row")

    tileset_file = validate_file_path(args.tileset, max_size=MAX_TILESET_FILE_SIZE)
    with open(tileset_file, "rb") as f:
        data = f.read()
    palette = read_palette_file(args.palette) if args.palette else None

    img = render_tileset(data, options.tile_dimensions, options.max_colors,
                         tiles_per_row, palette)
    output = validate_output_path(args.output)
    img.save(output, "PNG")
    print(f"Rendered {img.width}x{img.height} preview to {output}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level, args.log_file)
    settings = SettingsManager()

    try:
        return args.func(args, settings)
    except (OutputWriteError, SecurityError) as e:
        logger.error(str(e))
    except ExportError as e:
        logger.warning(str(e))
    except (OSError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
