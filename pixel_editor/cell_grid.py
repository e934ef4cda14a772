"""
Dense cell storage for painted content.
Each cell is either None (empty) or a Color. Uses a numpy object array so
rows and columns can be grown and sliced cheaply.
"""

import logging
from typing import Iterator, Optional, Tuple

import numpy as np

from .errors import StorageShapeError
from .models import CellValue, Point

logger = logging.getLogger(__name__)

_is_filled = np.frompyfunc(lambda value: value is not None, 1, 1)


def _empty(height: int, width: int) -> np.ndarray:
    return np.full((height, width), None, dtype=object)


class CellGrid:
    """A height x width array of optional colors, indexed from its own origin."""

    def __init__(self, width: int = 0, height: int = 0):
        self.cells = _empty(height, width)

    @classmethod
    def from_array(cls, cells: np.ndarray) -> "CellGrid":
        grid = cls()
        grid.cells = np.array(cells, dtype=object)
        return grid

    @property
    def width(self) -> int:
        return self.cells.shape[1]

    @property
    def height(self) -> int:
        return self.cells.shape[0]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.cells.shape

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> CellValue:
        if self.in_bounds(x, y):
            return self.cells[y, x]
        return None

    def set(self, x: int, y: int, value: CellValue = None):
        if self.in_bounds(x, y):
            self.cells[y, x] = value

    def mask(self) -> np.ndarray:
        """Boolean array, True where a cell holds a color."""
        if self.cells.size == 0:
            return np.zeros(self.cells.shape, dtype=bool)
        return _is_filled(self.cells).astype(bool)

    def is_empty(self) -> bool:
        return not self.mask().any()

    def filled(self) -> Iterator[Tuple[Point, CellValue]]:
        """Yield (position, color) for every non-empty cell, row by row."""
        ys, xs = np.nonzero(self.mask())
        for y, x in zip(ys.tolist(), xs.tolist()):
            yield Point(x, y), self.cells[y, x]

    def clear(self):
        self.cells.fill(None)

    def copy(self) -> "CellGrid":
        return CellGrid.from_array(self.cells.copy())

    def empty_like(self) -> "CellGrid":
        return CellGrid(self.width, self.height)

    def replace(self, other: "CellGrid"):
        """Take over another storage's content in place; shapes must match."""
        if other.shape != self.shape:
            raise StorageShapeError(
                f"Cannot replace storage of shape {self.shape} with {other.shape}"
            )
        self.cells[...] = other.cells

    def grow(self, top: int = 0, bottom: int = 0, left: int = 0, right: int = 0):
        """Pad with empty rows/columns. Negative amounts are ignored."""
        top, bottom, left, right = (max(0, n) for n in (top, bottom, left, right))
        if not (top or bottom or left or right):
            return
        grown = _empty(self.height + top + bottom, self.width + left + right)
        grown[top : top + self.height, left : left + self.width] = self.cells
        self.cells = grown

    def window(self, x: int, y: int, width: int, height: int) -> np.ndarray:
        """Copy of the width x height block whose top-left corner is (x, y)."""
        if x < 0 or y < 0 or x + width > self.width or y + height > self.height:
            raise StorageShapeError(
                f"Window {width}x{height} at ({x}, {y}) exceeds storage "
                f"{self.width}x{self.height}"
            )
        return self.cells[y : y + height, x : x + width].copy()


def merge_grids(
    destination: CellGrid, *sources: CellGrid, clear_sources: bool = False
) -> CellGrid:
    """
    Copy every non-empty source cell into destination, optionally emptying
    the source cell. Later sources win where they overlap.
    """
    for source in sources:
        h = min(destination.height, source.height)
        w = min(destination.width, source.width)
        if h == 0 or w == 0:
            continue
        region = source.cells[:h, :w]
        mask = _is_filled(region).astype(bool)
        destination.cells[:h, :w][mask] = region[mask]
        if clear_sources:
            region[mask] = None
        logger.debug("Merged %d cells", int(mask.sum()))
    return destination


def find_bounds(grid: CellGrid) -> Optional[Tuple[Point, Point]]:
    """Inclusive (start, end) corners around the non-empty cells, or None."""
    ys, xs = np.nonzero(grid.mask())
    if ys.size == 0:
        return None
    return Point(int(xs.min()), int(ys.min())), Point(int(xs.max()), int(ys.max()))
