"""
Render adapter contract.

Turns an editor snapshot into a list of pixel rectangles, one per contiguous
same-color run of cells in a row, so any raster surface with a
"fill rectangle" primitive can draw it. Also builds a rich Text preview for
terminals.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Protocol, Tuple

import numpy as np
from rich.text import Text

from .colors import BACKGROUND_COLOR, resolve_color, to_rgb
from .editor import Snapshot
from .models import CellValue, Point, Rect

POINTER_COLOR = "#fff2"


@dataclass(frozen=True)
class PixelRect:
    x: float
    y: float
    width: float
    height: float
    color: str = ""


@dataclass
class Frame:
    width: float
    height: float
    background: str
    fills: List[PixelRect] = field(default_factory=list)
    selection_fills: List[PixelRect] = field(default_factory=list)
    selection_outline: List[PixelRect] = field(default_factory=list)
    rubber_band: Optional[PixelRect] = None
    pointer: Optional[PixelRect] = None


class Surface(Protocol):
    def fill_rect(self, rect: PixelRect, color: str) -> None: ...

    def stroke_rect(self, rect: PixelRect) -> None: ...


def row_runs(cells: np.ndarray) -> Iterator[Tuple[int, int, int, CellValue]]:
    """Yield (row, first column, length, value) for each run of equal non-empty cells."""
    height, width = cells.shape
    for y in range(height):
        x = 0
        while x < width:
            value = cells[y, x]
            if value is None:
                x += 1
                continue
            end = x + 1
            while end < width and cells[y, end] == value:
                end += 1
            yield y, x, end - x, value
            x = end


def _runs_to_rects(cells, step_x, step_y, background) -> List[PixelRect]:
    return [
        PixelRect(x * step_x, y * step_y, length * step_x, step_y, resolve_color(value, background))
        for y, x, length, value in row_runs(cells)
    ]


def _cell_rect(start: Point, end: Point, step_x: float, step_y: float) -> PixelRect:
    return PixelRect(
        start.x * step_x,
        start.y * step_y,
        (end.x - start.x + 1) * step_x,
        (end.y - start.y + 1) * step_y,
    )


def plan_frame(
    snapshot: Snapshot,
    pixel_width: float,
    pixel_height: float,
    background: str = BACKGROUND_COLOR,
) -> Frame:
    grid = snapshot.grid
    frame = Frame(pixel_width, pixel_height, background)
    if grid.width == 0 or grid.height == 0:
        return frame

    step_x = pixel_width / grid.width
    step_y = pixel_height / grid.height
    frame.fills = _runs_to_rects(snapshot.cells, step_x, step_y, background)
    frame.selection_fills = _runs_to_rects(snapshot.selected, step_x, step_y, background)
    frame.selection_outline = [
        PixelRect(r.x, r.y, r.width, r.height) for r in frame.selection_fills
    ]
    if snapshot.selection_rect is not None:
        rect: Rect = snapshot.selection_rect.normalized()
        frame.rubber_band = _cell_rect(rect.start, rect.end, step_x, step_y)
    if snapshot.pointer is not None:
        frame.pointer = _cell_rect(snapshot.pointer, snapshot.pointer, step_x, step_y)
    return frame


def draw_frame(frame: Frame, surface: Surface):
    """Paint a frame: background, content, selection, then overlays."""
    surface.fill_rect(PixelRect(0, 0, frame.width, frame.height), frame.background)
    for rect in frame.fills:
        surface.fill_rect(rect, rect.color)
    for rect in frame.selection_fills:
        surface.fill_rect(rect, rect.color)
    for rect in frame.selection_outline:
        surface.stroke_rect(rect)
    if frame.rubber_band is not None:
        surface.stroke_rect(frame.rubber_band)
    if frame.pointer is not None:
        surface.fill_rect(frame.pointer, POINTER_COLOR)


def to_rich_text(cells: np.ndarray, background: str = BACKGROUND_COLOR) -> Text:
    """Two terminal columns per cell, painted with the cell's color."""
    text = Text()
    height, width = cells.shape
    for y in range(height):
        for x in range(width):
            r, g, b = to_rgb(cells[y, x], background)
            text.append("  ", style=f"on rgb({r},{g},{b})")
        if y < height - 1:
            text.append("\n")
    return text
