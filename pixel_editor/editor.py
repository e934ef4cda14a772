"""
Pixel editor engine.
Owns the grid geometry and both cell storages, and turns pointer, key and
command input into edits. Front ends read state through snapshots and
change notifications.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import numpy as np

from .cell_grid import CellGrid
from .colors import make_color
from .coordinates import GridCoordinates, check_same_shape
from .models import (
    ARROW_STEPS,
    ChangeEvent,
    Color,
    Cursor,
    EditorMode,
    Grid,
    Key,
    Layer,
    Point,
    Rect,
    Transformation,
)
from .paint import PaintTool
from .selection import Selection

logger = logging.getLogger(__name__)

PRIMARY_BUTTON = 0
BACKGROUND_LAYER_NAME = "Background layer"

Listener = Callable[[ChangeEvent], None]


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of what is visible, for renderers."""

    grid: Grid
    cells: np.ndarray
    selected: np.ndarray
    selection_rect: Optional[Rect]
    pointer: Optional[Point]
    cursor: Cursor
    mode: EditorMode


class PixelEditor:
    def __init__(
        self,
        grid: Grid,
        color: Color,
        cell_size: Tuple[int, int] = (80, 80),
    ):
        self.coords = GridCoordinates(grid)
        self.cells = CellGrid(grid.width, grid.height)
        self.selected = CellGrid(grid.width, grid.height)
        self.cell_width, self.cell_height = cell_size

        self.mode = EditorMode.DRAW
        self.color = make_color(color)
        self.cursor = Cursor.DEFAULT
        self.ctrl_down = False
        self.shift_down = False

        self.paint = PaintTool(self.coords, self.cells, self.color)
        self.selection = Selection(self.coords, self.cells, self.selected)

        self.mouse_down = False
        self.mouse_hover = False
        self.mouse_position: Optional[Point] = None
        self.mouse_down_position: Optional[Point] = None
        self.mouse_up_position: Optional[Point] = None

        self._listeners: List[Listener] = []

    # --- Geometry -----------------------------------------------------------

    @property
    def grid(self) -> Grid:
        return self.coords.grid

    @property
    def pixel_size(self) -> Tuple[int, int]:
        return self.cell_width * self.grid.width, self.cell_height * self.grid.height

    def pixel_to_cell(
        self, pixel: Point, origin: Point = Point(0, 0)
    ) -> Optional[Point]:
        """
        Cell under a pixel position, clamped into the visible grid. None when
        the grid has no cells.
        """
        if self.grid.width == 0 or self.grid.height == 0:
            return None
        x = math.floor((pixel.x - origin.x) / self.cell_width)
        y = math.floor((pixel.y - origin.y) / self.cell_height)
        return Point(
            min(max(x, 0), self.grid.width - 1), min(max(y, 0), self.grid.height - 1)
        )

    def resize_grid(self, grid: Grid):
        """Move/resize the grid; both storages are padded in the same step."""
        if grid == self.grid:
            return
        self.coords.resize(grid, self.cells, self.selected)
        self._notify(ChangeEvent.GRID)

    def extend_left(self):
        g = self.grid
        self.resize_grid(Grid(Point(g.start.x - 1, g.start.y), g.width + 1, g.height))

    def extend_right(self):
        g = self.grid
        self.resize_grid(Grid(g.start, g.width + 1, g.height))

    def extend_top(self):
        g = self.grid
        self.resize_grid(Grid(Point(g.start.x, g.start.y - 1), g.width, g.height + 1))

    def extend_bottom(self):
        g = self.grid
        self.resize_grid(Grid(g.start, g.width, g.height + 1))

    # --- Commands -------------------------------------------------------------

    def set_mode(self, mode: EditorMode):
        if mode == self.mode:
            return
        self.mode = mode
        logger.debug("Mode -> %s", mode.name)
        self._set_cursor(Cursor.CROSSHAIR if mode == EditorMode.SELECT else Cursor.DEFAULT)
        self._notify(ChangeEvent.MODE)

    def set_draw_color(self, color: Color):
        self.color = make_color(color)

    def apply_transform(self, *operations: Transformation):
        self.selection.transform(*operations)
        self._notify(ChangeEvent.SELECTION)

    def move_selection(self, dx: int, dy: int):
        self.selection.move(dx, dy)
        self._notify(ChangeEvent.SELECTION)

    def delete_selection(self):
        self.selection.delete()
        self._notify(ChangeEvent.SELECTION)

    def commit_selection(self):
        self.selection.commit()
        self._notify(ChangeEvent.CELLS)
        self._notify(ChangeEvent.SELECTION)

    # --- Pointer ------------------------------------------------------------

    def pointer_down(self, pixel: Point, button: int = PRIMARY_BUTTON):
        if button != PRIMARY_BUTTON:
            return
        cell = self.pixel_to_cell(pixel)
        if cell is None:
            return
        if self.mode == EditorMode.DRAW:
            self.paint.press(cell, self.color)
            self._notify(ChangeEvent.CELLS)
        else:
            if self.ctrl_down:
                self._set_cursor(Cursor.COPY)
            self.selection.press(cell, additive=self.ctrl_down)
            if self.selection.dragging:
                self._set_cursor(Cursor.GRABBING)
            elif not self.ctrl_down:
                self._set_cursor(Cursor.CROSSHAIR)
                self._notify(ChangeEvent.CELLS)
            self._notify(ChangeEvent.SELECTION)
        self.mouse_down = True
        self.mouse_down_position = cell

    def pointer_move(self, pixel: Point):
        cell = self.pixel_to_cell(pixel)
        if cell is None:
            return
        self.mouse_hover = True
        if cell == self.mouse_position:
            return
        self.mouse_position = cell

        if self.mode == EditorMode.DRAW:
            if self.mouse_down:
                self.paint.drag(cell)
                self._notify(ChangeEvent.CELLS)
            return

        if self.mouse_down:
            self.selection.drag(cell, additive=self.ctrl_down)
            self._notify(ChangeEvent.SELECTION)
        if self.ctrl_down:
            self._set_cursor(Cursor.COPY)
        elif not self.selection.dragging:
            self._set_cursor(self._hover_cursor(cell))

    def pointer_up(self, pixel: Point, button: int = PRIMARY_BUTTON):
        if button != PRIMARY_BUTTON:
            return
        cell = self.pixel_to_cell(pixel)
        if cell is None:
            self.mouse_down = False
            return
        if self.mode == EditorMode.SELECT:
            self.selection.release(cell)
            if self.ctrl_down:
                self._set_cursor(Cursor.COPY)
            else:
                self._set_cursor(self._hover_cursor(cell))
            self._notify(ChangeEvent.CELLS)
            self._notify(ChangeEvent.SELECTION)
        self.mouse_down = False
        self.mouse_up_position = cell

    def pointer_enter(self):
        self.mouse_hover = True

    def pointer_leave(self):
        self.mouse_hover = False

    # --- Keyboard -------------------------------------------------------------

    def key_down(self, key: str):
        key = _as_key(key)
        if key == Key.SHIFT:
            if self.mode == EditorMode.SELECT:
                self.shift_down = True
        elif key == Key.CONTROL:
            if self.mode == EditorMode.SELECT:
                self.ctrl_down = True
                self._set_cursor(Cursor.COPY)
        elif key in ARROW_STEPS:
            step = ARROW_STEPS[key]
            if self.selection.is_selected:
                self.move_selection(step.x, step.y)
            else:
                self.resize_grid(self.grid.moved(step.x, step.y))
        elif key == Key.DELETE:
            if self.mode == EditorMode.SELECT:
                self.delete_selection()

    def key_up(self, key: str):
        key = _as_key(key)
        if key == Key.SHIFT:
            if self.mode == EditorMode.SELECT:
                self.shift_down = False
        elif key == Key.CONTROL:
            if self.mode == EditorMode.SELECT:
                self.ctrl_down = False
                if self.selection.dragging:
                    self._set_cursor(Cursor.GRAB)
                elif self.mouse_position is not None:
                    self._set_cursor(self._hover_cursor(self.mouse_position))
                else:
                    self._set_cursor(Cursor.CROSSHAIR)

    # --- Observation ----------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> Snapshot:
        check_same_shape(self.cells, self.selected)
        return Snapshot(
            grid=self.grid,
            cells=self.coords.visible(self.cells),
            selected=self.coords.visible(self.selected),
            selection_rect=self.selection.rect,
            pointer=self.mouse_position if self.mouse_hover else None,
            cursor=self.cursor,
            mode=self.mode,
        )

    def layers(self) -> List[Layer]:
        """Layer list; the background layer always comes first."""
        return [
            Layer(
                name=BACKGROUND_LAYER_NAME,
                grid=self.grid,
                cells=self.coords.visible(self.cells),
                selected=True,
            )
        ]

    def _hover_cursor(self, cell: Point) -> Cursor:
        return Cursor.GRAB if self.selection.lifted_at(cell) else Cursor.CROSSHAIR

    def _set_cursor(self, cursor: Cursor):
        if cursor != self.cursor:
            self.cursor = cursor
            self._notify(ChangeEvent.CURSOR)

    def _notify(self, event: ChangeEvent):
        for listener in list(self._listeners):
            listener(event)


def _as_key(key: str) -> Optional[Key]:
    try:
        return Key(key)
    except ValueError:
        return None
