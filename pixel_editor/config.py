"""
Configuration settings for the pixel editor.
"""

import os
import sys
from typing import Any, Dict, List, Optional, Union

import toml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .colors import make_color
from .errors import ConfigError
from .models import Color, Grid, Point

ColorSpec = Union[str, Dict[str, Any]]

DEFAULT_PALETTE: List[ColorSpec] = [
    "white",
    "red",
    "lime",
    "blue",
    "yellow",
    "fuchsia",
    "aqua",
    "gray",
]


class EditorConfig(BaseModel):
    """Configuration settings for the editor."""

    # Initial grid
    grid_width: int = Field(10, ge=0)
    grid_height: int = Field(5, ge=0)
    grid_start_x: int = 0
    grid_start_y: int = 0

    # Pixels per cell for raster front ends. The terminal front end ignores
    # these and draws each cell as two columns.
    cell_width: int = Field(80, gt=0)
    cell_height: int = Field(80, gt=0)

    # Colors
    draw_color: ColorSpec = "white"
    background_color: str = "black"
    palette: List[ColorSpec] = Field(default_factory=lambda: list(DEFAULT_PALETTE))

    # Logging
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    @field_validator("draw_color")
    @classmethod
    def _check_color(cls, value: ColorSpec) -> ColorSpec:
        make_color(value)
        return value

    @field_validator("palette")
    @classmethod
    def _check_palette(cls, value: List[ColorSpec]) -> List[ColorSpec]:
        for spec in value:
            make_color(spec)
        return value

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def grid(self) -> Grid:
        return Grid(
            Point(self.grid_start_x, self.grid_start_y),
            self.grid_width,
            self.grid_height,
        )

    @property
    def cell_size(self):
        return self.cell_width, self.cell_height

    def color(self) -> Color:
        return make_color(self.draw_color)

    def palette_colors(self) -> List[Color]:
        return [make_color(spec) for spec in self.palette]

    @classmethod
    def load_from_toml(cls, path: str = "pixel_editor.toml") -> "EditorConfig":
        """Load configuration from a TOML file."""
        if not os.path.exists(path):
            print(f"Warning: Config file {path} not found. Using defaults.", file=sys.stderr)
            return cls()

        try:
            with open(path, "r") as f:
                data = toml.load(f)
        except (OSError, toml.TomlDecodeError) as e:
            raise ConfigError(f"Error loading config {path}: {e}") from e

        settings = dict(data.get("editor", {}))
        logging_settings = data.get("logging", {})
        if "level" in logging_settings:
            settings.setdefault("log_level", logging_settings["level"])
        if "file" in logging_settings:
            settings.setdefault("log_file", logging_settings["file"])

        try:
            return cls(**settings)
        except ValueError as e:
            raise ConfigError(f"Invalid config {path}: {e}") from e
