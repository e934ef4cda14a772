"""
Rectangular selection for SELECT mode.

Selected cells are lifted out of the main storage into a second storage of
the same shape, where they can be moved and transformed before being put
back. The rubber-band rectangle only exists while the button is held; what
is selected is whatever the selection storage holds.
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .cell_grid import merge_grids
from .models import Point, Rect, Transformation
from .transform import transform_in_place

if TYPE_CHECKING:
    from .cell_grid import CellGrid
    from .coordinates import GridCoordinates

logger = logging.getLogger(__name__)


class SelectionState(Enum):
    IDLE = "idle"
    RUBBER_BANDING = "rubber-banding"
    DRAGGING = "dragging-selection"


class Selection:
    def __init__(
        self, coords: "GridCoordinates", cells: "CellGrid", selected: "CellGrid"
    ):
        self.coords = coords
        self.cells = cells
        self.selected = selected
        self.state = SelectionState.IDLE
        self.rect: Optional[Rect] = None
        self.anchor: Optional[Point] = None

    @property
    def is_selected(self) -> bool:
        return not self.selected.is_empty()

    @property
    def dragging(self) -> bool:
        return self.state == SelectionState.DRAGGING

    def lifted_at(self, cell: Point) -> bool:
        return self.coords.get_cell(self.selected, cell) is not None

    def press(self, cell: Point, additive: bool = False):
        """
        Start dragging the selection when pressing on a lifted cell, otherwise
        start a new rectangle. Unless additive, anything previously lifted is
        put back first.
        """
        if not additive and self.lifted_at(cell):
            self.state = SelectionState.DRAGGING
            self.anchor = cell
            self.rect = None
            return
        if not additive:
            self.commit()
        self.state = SelectionState.RUBBER_BANDING
        self.rect = Rect(cell, cell)

    def drag(self, cell: Point, additive: bool = False):
        if self.state == SelectionState.RUBBER_BANDING and self.rect is not None:
            self.rect = Rect(self.rect.start, cell)
        elif self.state == SelectionState.DRAGGING and not additive:
            step = cell - self.anchor
            self.move(step.x, step.y)
            self.anchor = cell

    def release(self, cell: Point):
        if self.state == SelectionState.RUBBER_BANDING and self.rect is not None:
            self.extract(Rect(self.rect.start, cell))
        self.rect = None
        self.anchor = None
        self.state = SelectionState.IDLE

    def extract(self, rect: Rect) -> int:
        """
        Lift the cells of rect into the selection, or put them back if the
        rectangle was started on a lifted cell. Only the starting corner is
        consulted. Returns the number of cells moved.
        """
        putting_back = self.lifted_at(rect.start)
        source, target = (
            (self.selected, self.cells) if putting_back else (self.cells, self.selected)
        )
        moved = 0
        for cell in rect.cells():
            value = self.coords.get_cell(source, cell)
            if value is not None:
                self.coords.set_cell(target, cell, value)
                self.coords.set_cell(source, cell, None)
                moved += 1
        logger.debug(
            "%s %d cells in %s", "Put back" if putting_back else "Lifted", moved, rect
        )
        return moved

    def commit(self):
        """Put every lifted cell back into the main storage."""
        merge_grids(self.cells, self.selected, clear_sources=True)

    def move(self, dx: int, dy: int):
        if dx:
            transform_in_place(self.selected, Transformation.translate_x(dx))
        if dy:
            transform_in_place(self.selected, Transformation.translate_y(dy))

    def transform(self, *operations: Transformation):
        transform_in_place(self.selected, *operations)

    def delete(self):
        """Discard the lifted cells; the main storage is untouched."""
        self.selected.clear()
