"""
Pytest configuration and shared fixtures for pixel editor tests.
"""

import pytest

from pixel_editor.cell_grid import CellGrid
from pixel_editor.coordinates import GridCoordinates
from pixel_editor.editor import PixelEditor
from pixel_editor.models import ComponentColor, Grid, NamedColor, Point
from pixel_editor.selection import Selection

CELL = 10


def px(x: int, y: int) -> Point:
    """Pixel position in the middle of cell (x, y) for a 10x10 cell size."""
    return Point(x * CELL + CELL // 2, y * CELL + CELL // 2)


@pytest.fixture
def red():
    return NamedColor("red")


@pytest.fixture
def blue():
    return NamedColor("blue")


@pytest.fixture
def teal():
    return ComponentColor(red=0, green=128, blue=128)


@pytest.fixture
def grid():
    """A 4x4 grid at the origin."""
    return Grid(Point(0, 0), 4, 4)


@pytest.fixture
def coords(grid):
    return GridCoordinates(grid)


@pytest.fixture
def cells(grid):
    return CellGrid(grid.width, grid.height)


@pytest.fixture
def selected(grid):
    return CellGrid(grid.width, grid.height)


@pytest.fixture
def selection(coords, cells, selected):
    return Selection(coords, cells, selected)


@pytest.fixture
def editor(grid, red):
    """Editor over a 4x4 grid with 10x10 pixel cells, drawing in red."""
    return PixelEditor(grid, red, cell_size=(CELL, CELL))
