"""
Geometric transforms applied to the filled part of a cell storage.

Transforms work around the bounding box of the non-empty cells rather than
the whole storage, so a flipped or rotated selection stays where it was.
Destinations that fall outside the storage are dropped.
"""

import logging
import math
from typing import Callable, Dict

from .cell_grid import CellGrid, find_bounds
from .models import Point, Transformation, Transformations

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class _Frame:
    """Bounding box, rounded center and parity corrections of a storage."""

    def __init__(self, start: Point, end: Point):
        self.start = start
        self.end = end
        self.center = Point(
            _round_half_up((start.x + end.x) / 2),
            _round_half_up((start.y + end.y) / 2),
        )
        # Even-sized extents have a center between two cells; shift back by one.
        self.even_x = (start.x - end.x) % 2 != 0
        self.even_y = (start.y - end.y) % 2 != 0

    @property
    def shift_x(self) -> int:
        return -1 if self.even_x else 0

    @property
    def shift_y(self) -> int:
        return -1 if self.even_y else 0


def _rotate(frame: _Frame, value: float) -> Callable[[Point], Point]:
    cos, sin = math.cos(value), math.sin(value)
    cx, cy = frame.center.x, frame.center.y

    def destination(p: Point) -> Point:
        dx, dy = p.x - cx, p.y - cy
        return Point(
            cx + _round_half_up(cos * dx - sin * dy) + frame.shift_x,
            cy + _round_half_up(sin * dx + cos * dy),
        )

    return destination


def _translate_x(frame: _Frame, value: float) -> Callable[[Point], Point]:
    step = int(value)
    return lambda p: Point(p.x + step, p.y)


def _translate_y(frame: _Frame, value: float) -> Callable[[Point], Point]:
    step = int(value)
    return lambda p: Point(p.x, p.y + step)


def _flip_x(frame: _Frame, value: float) -> Callable[[Point], Point]:
    cx = frame.center.x
    return lambda p: Point(cx - (p.x - cx) + frame.shift_x, p.y)


def _flip_y(frame: _Frame, value: float) -> Callable[[Point], Point]:
    cy = frame.center.y
    return lambda p: Point(p.x, cy - (p.y - cy) + frame.shift_y)


_OPERATIONS: Dict[Transformations, Callable[[_Frame, float], Callable[[Point], Point]]] = {
    Transformations.ROTATION: _rotate,
    Transformations.TRANSLATE_X: _translate_x,
    Transformations.TRANSLATE_Y: _translate_y,
    Transformations.FLIP_X: _flip_x,
    Transformations.FLIP_Y: _flip_y,
}


def transform_grid(grid: CellGrid, *operations: Transformation) -> CellGrid:
    """
    Return a new storage holding grid's cells relocated by operations.

    Every operation reads from the original grid and writes into the same
    result, so a batch composes by independent relocation, not by chaining.
    Chain calls to compose transforms.
    """
    result = grid.empty_like()
    bounds = find_bounds(grid)
    if bounds is None:
        return result

    frame = _Frame(*bounds)
    cells = list(grid.filled())
    for operation in operations:
        try:
            build = _OPERATIONS[operation.type]
        except KeyError:
            raise ValueError(f"Unknown transformation: {operation.type!r}") from None
        destination = build(frame, operation.value)
        for point, value in cells:
            target = destination(point)
            result.set(target.x, target.y, value)

    logger.debug(
        "Transformed %d cells in box %s-%s with %s",
        len(cells),
        frame.start,
        frame.end,
        [op.type.name for op in operations],
    )
    return result


def transform_in_place(grid: CellGrid, *operations: Transformation) -> CellGrid:
    """Apply operations and store the result back into grid."""
    grid.replace(transform_grid(grid, *operations))
    return grid
