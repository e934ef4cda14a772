"""
Exception hierarchy for the pixel editor.
"""


class PixelEditorError(Exception):
    """Base class for editor errors."""


class StorageShapeError(PixelEditorError):
    """Cell storages disagree with each other or with the grid geometry."""


class ConfigError(PixelEditorError):
    """Configuration file could not be read or parsed."""
