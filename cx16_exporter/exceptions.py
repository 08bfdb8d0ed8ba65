"""
Custom exceptions for the exporter
"""


class ExportError(Exception):
    """Base exception for all exporter errors"""


class StructureError(ExportError):
    """Raised when a sprite does not have exactly one layer and one cel"""


class ColorModeError(ExportError):
    """Raised when a sprite is not in indexed color mode"""


class GeometryError(ExportError):
    """Raised when sprite dimensions are not multiples of the tile size"""


class RangeError(ExportError):
    """Raised when a pixel index does not fit the selected color depth"""


class MissingPaletteError(ExportError):
    """Raised when a palette operation is attempted on a sprite without one"""


class OutputWriteError(ExportError):
    """Raised when an output file cannot be written"""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path
