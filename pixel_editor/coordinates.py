"""
Grid coordinate model.

The logical grid (start, width, height) can move and grow in any direction
while the painted content stays where it was drawn. Storage is only ever
padded, never truncated: shrinking the grid hides cells, and growing it back
shows them again. `origin` is the logical coordinate of storage index (0, 0).
"""

import logging
from typing import Optional

import numpy as np

from .cell_grid import CellGrid
from .errors import StorageShapeError
from .models import CellValue, Grid, GridChanges, Point

logger = logging.getLogger(__name__)


def find_grid_changes(grid: Grid, next_grid: Grid) -> GridChanges:
    """Rows/columns to add on each edge to go from grid to next_grid."""
    return GridChanges(
        add_top=grid.start.y - next_grid.start.y,
        add_bottom=(next_grid.height - grid.height)
        + (next_grid.start.y - grid.start.y),
        add_left=grid.start.x - next_grid.start.x,
        add_right=(next_grid.width - grid.width) + (next_grid.start.x - grid.start.x),
    )


class GridCoordinates:
    def __init__(self, grid: Grid):
        self.grid = grid
        self.origin = grid.start

    def to_storage(self, point: Point, offset: Optional[Point] = None) -> Point:
        """
        Translate a cell position to a storage index.

        `point` is relative to `offset`, which defaults to the grid start, so
        (0, 0) is the top-left visible cell.
        """
        if offset is None:
            offset = self.grid.start
        return Point(
            point.x + offset.x - self.origin.x, point.y + offset.y - self.origin.y
        )

    def get_cell(
        self, storage: CellGrid, point: Point, offset: Optional[Point] = None
    ) -> CellValue:
        index = self.to_storage(point, offset)
        return storage.get(index.x, index.y)

    def set_cell(
        self,
        storage: CellGrid,
        point: Point,
        value: CellValue = None,
        offset: Optional[Point] = None,
    ):
        index = self.to_storage(point, offset)
        storage.set(index.x, index.y, value)

    def resize(self, next_grid: Grid, *storages: CellGrid) -> GridChanges:
        """
        Move the grid to next_grid and pad every storage in lockstep.

        All storages must share a shape; they are checked before anything is
        changed so a failed resize leaves the model untouched.
        """
        check_same_shape(*storages)
        changes = find_grid_changes(self.grid, next_grid)
        if storages:
            rows, cols = storages[0].shape
        else:
            rows, cols = self.grid.height, self.grid.width

        top = left = bottom = right = 0
        if changes.add_top > 0:
            top = self.origin.y - next_grid.start.y
        if changes.add_left > 0:
            left = self.origin.x - next_grid.start.x
        new_origin = Point(
            self.origin.x - max(0, left), self.origin.y - max(0, top)
        )
        if changes.add_bottom > 0:
            bottom = next_grid.end.y - (self.origin.y + rows)
        if changes.add_right > 0:
            right = next_grid.end.x - (self.origin.x + cols)

        for storage in storages:
            storage.grow(top=top, bottom=bottom, left=left, right=right)

        logger.debug(
            "Resize %s -> %s: %s, padded top=%d bottom=%d left=%d right=%d",
            self.grid,
            next_grid,
            changes,
            max(0, top),
            max(0, bottom),
            max(0, left),
            max(0, right),
        )
        self.grid = next_grid
        self.origin = new_origin
        return changes

    def visible(self, storage: CellGrid) -> np.ndarray:
        """Copy of the height x width block of storage under the grid."""
        return storage.window(
            self.grid.start.x - self.origin.x,
            self.grid.start.y - self.origin.y,
            self.grid.width,
            self.grid.height,
        )


def check_same_shape(*storages: CellGrid):
    shapes = {storage.shape for storage in storages}
    if len(shapes) > 1:
        raise StorageShapeError(f"Storages out of step: {sorted(shapes)}")
