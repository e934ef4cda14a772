"""
Single-cell painting for DRAW mode.
"""

import logging
from typing import TYPE_CHECKING

from .models import CellValue, Color, Point

if TYPE_CHECKING:
    from .cell_grid import CellGrid
    from .coordinates import GridCoordinates

logger = logging.getLogger(__name__)


class PaintTool:
    """
    Paints or erases cells of one storage.

    A press decides between painting and erasing by what is under the
    pointer; the rest of the drag repeats that decision on every cell it
    crosses.
    """

    def __init__(self, coords: "GridCoordinates", cells: "CellGrid", color: Color):
        self.coords = coords
        self.cells = cells
        self.drag_color: CellValue = color

    def press(self, cell: Point, color: Color) -> CellValue:
        if self.coords.get_cell(self.cells, cell) == color:
            self.drag_color = None
        else:
            self.drag_color = color
        self.coords.set_cell(self.cells, cell, self.drag_color)
        logger.debug("Press at %s locked drag color %s", cell, self.drag_color)
        return self.drag_color

    def drag(self, cell: Point):
        self.coords.set_cell(self.cells, cell, self.drag_color)
