"""
Core models and data structures for the pixel editor.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

import numpy as np


@dataclass(frozen=True)
class Point:
    x: int
    y: int

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Grid:
    """Logical coordinate frame: origin plus extent in cells."""

    start: Point = Point(0, 0)
    width: int = 0
    height: int = 0

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Grid size must be non-negative, got {self.width}x{self.height}"
            )

    @property
    def end(self) -> Point:
        """First logical coordinate past the grid on each axis."""
        return Point(self.start.x + self.width, self.start.y + self.height)

    def moved(self, dx: int = 0, dy: int = 0) -> "Grid":
        return Grid(Point(self.start.x + dx, self.start.y + dy), self.width, self.height)


@dataclass(frozen=True)
class GridChanges:
    add_top: int = 0
    add_bottom: int = 0
    add_left: int = 0
    add_right: int = 0


@dataclass(frozen=True)
class Rect:
    """Two corners, in any order."""

    start: Point
    end: Point

    def normalized(self) -> "Rect":
        return Rect(
            Point(min(self.start.x, self.end.x), min(self.start.y, self.end.y)),
            Point(max(self.start.x, self.end.x), max(self.start.y, self.end.y)),
        )

    def cells(self):
        """Yield every cell of the normalized rectangle, row by row."""
        r = self.normalized()
        for y in range(r.start.y, r.end.y + 1):
            for x in range(r.start.x, r.end.x + 1):
                yield Point(x, y)


@dataclass(frozen=True)
class NamedColor:
    value: str


@dataclass(frozen=True)
class ComponentColor:
    red: int = 0
    green: int = 0
    blue: int = 0
    opacity: float = 1.0

    def __post_init__(self):
        for name in ("red", "green", "blue"):
            component = getattr(self, name)
            if not 0 <= component <= 255:
                raise ValueError(f"{name} must be within 0..255, got {component}")
        if not 0.0 <= self.opacity <= 1.0:
            raise ValueError(f"opacity must be within 0..1, got {self.opacity}")


Color = Union[NamedColor, ComponentColor]
CellValue = Optional[Color]


class EditorMode(Enum):
    DRAW = "DRAW"
    SELECT = "SELECT"


class Cursor(Enum):
    DEFAULT = "default"
    CROSSHAIR = "crosshair"
    GRAB = "grab"
    GRABBING = "grabbing"
    COPY = "copy"


class Key(str, Enum):
    SHIFT = "Shift"
    CONTROL = "Control"
    LEFT = "ArrowLeft"
    UP = "ArrowUp"
    RIGHT = "ArrowRight"
    DOWN = "ArrowDown"
    DELETE = "Delete"


ARROW_STEPS = {
    Key.LEFT: Point(-1, 0),
    Key.UP: Point(0, -1),
    Key.RIGHT: Point(1, 0),
    Key.DOWN: Point(0, 1),
}


class Transformations(Enum):
    ROTATION = "ROTATION"
    FLIP_X = "FLIP_X"
    FLIP_Y = "FLIP_Y"
    TRANSLATE_X = "TRANSLATE_X"
    TRANSLATE_Y = "TRANSLATE_Y"


@dataclass(frozen=True)
class Transformation:
    type: Transformations
    value: float = 0

    @classmethod
    def rotate(cls, angle: float = math.pi / 2) -> "Transformation":
        return cls(Transformations.ROTATION, angle)

    @classmethod
    def flip_x(cls) -> "Transformation":
        return cls(Transformations.FLIP_X)

    @classmethod
    def flip_y(cls) -> "Transformation":
        return cls(Transformations.FLIP_Y)

    @classmethod
    def translate_x(cls, value: int) -> "Transformation":
        return cls(Transformations.TRANSLATE_X, value)

    @classmethod
    def translate_y(cls, value: int) -> "Transformation":
        return cls(Transformations.TRANSLATE_Y, value)


@dataclass
class Layer:
    """Snapshot of one layer as handed to consumers."""

    name: str
    grid: Grid
    cells: Optional[np.ndarray] = field(default=None, repr=False)
    selected: bool = False


class ChangeEvent(Enum):
    CELLS = "cells"
    SELECTION = "selection"
    GRID = "grid"
    MODE = "mode"
    CURSOR = "cursor"
