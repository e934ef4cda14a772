"""
Pixel-grid drawing editor: resizable sparse grid, rectangular selection and
selection transforms.
"""

from .cell_grid import CellGrid, merge_grids
from .coordinates import GridCoordinates, find_grid_changes
from .editor import PixelEditor, Snapshot
from .models import (
    ChangeEvent,
    ComponentColor,
    Cursor,
    EditorMode,
    Grid,
    Key,
    NamedColor,
    Point,
    Rect,
    Transformation,
    Transformations,
)
from .transform import transform_grid

__version__ = "0.1.0"
