"""
Tests for the editor engine: pointer and key handling, commands and
observation.
"""

import pytest

from pixel_editor.editor import BACKGROUND_LAYER_NAME, PixelEditor
from pixel_editor.models import (
    ChangeEvent,
    ComponentColor,
    Cursor,
    EditorMode,
    Grid,
    NamedColor,
    Point,
    Transformation,
)

from conftest import px


def click(editor, x, y):
    editor.pointer_down(px(x, y))
    editor.pointer_up(px(x, y))


def select(editor, start, end):
    editor.pointer_down(px(*start))
    editor.pointer_move(px(*end))
    editor.pointer_up(px(*end))


def visible(array):
    height, width = array.shape
    return {(x, y) for y in range(height) for x in range(width) if array[y, x] is not None}


class TestGeometry:
    """Test pixel addressing and grid extension."""

    def test_pixel_size(self, editor):
        assert editor.pixel_size == (40, 40)

    @pytest.mark.parametrize(
        "pixel, cell",
        [
            (Point(0, 0), Point(0, 0)),
            (Point(9, 9), Point(0, 0)),
            (Point(10, 25), Point(1, 2)),
            (Point(39, 39), Point(3, 3)),
            (Point(-5, 999), Point(0, 3)),
            (Point(500, -1), Point(3, 0)),
        ],
    )
    def test_pixel_to_cell_clamps(self, editor, pixel, cell):
        assert editor.pixel_to_cell(pixel) == cell

    def test_pixel_to_cell_with_origin(self, editor):
        assert editor.pixel_to_cell(Point(25, 15), origin=Point(5, 5)) == Point(2, 1)

    def test_empty_grid_ignores_pointer(self, editor):
        """Test a grid with no columns has no cell to paint."""
        editor.resize_grid(Grid(Point(1, 0), 0, 4))
        assert editor.pixel_to_cell(Point(5, 5)) is None

        editor.pointer_down(Point(5, 5))
        editor.pointer_move(Point(15, 5))
        editor.pointer_up(Point(15, 5))

        assert editor.cells.is_empty()
        assert not editor.mouse_down
        assert editor.snapshot().cells.shape == (4, 0)

    def test_extend_left_keeps_content(self, editor, red):
        click(editor, 0, 0)
        editor.extend_left()
        snapshot = editor.snapshot()
        assert editor.grid == Grid(Point(-1, 0), 5, 4)
        assert snapshot.cells.shape == (4, 5)
        assert visible(snapshot.cells) == {(1, 0)}

    def test_extend_each_edge(self, editor):
        editor.extend_right()
        editor.extend_bottom()
        editor.extend_top()
        assert editor.grid == Grid(Point(0, -1), 5, 6)
        assert editor.cells.shape == editor.selected.shape == (6, 5)

    def test_resize_to_same_grid_is_silent(self, editor, grid):
        events = []
        editor.subscribe(events.append)
        editor.resize_grid(grid)
        assert events == []


class TestDrawing:
    """Test DRAW mode pointer handling."""

    def test_click_paints_and_toggles(self, editor, red):
        """Test clicking a cell twice with the same color erases it."""
        click(editor, 1, 1)
        assert editor.snapshot().cells[1, 1] == red
        click(editor, 1, 1)
        assert editor.snapshot().cells[1, 1] is None

    def test_click_with_new_color_overwrites(self, editor, blue):
        click(editor, 2, 2)
        editor.set_draw_color("blue")
        click(editor, 2, 2)
        assert editor.snapshot().cells[2, 2] == blue

    def test_drag_paints_row(self, editor, red):
        editor.pointer_down(px(0, 0))
        editor.pointer_move(px(1, 0))
        editor.pointer_move(px(2, 0))
        editor.pointer_up(px(2, 0))
        assert visible(editor.snapshot().cells) == {(0, 0), (1, 0), (2, 0)}

    def test_drag_erases_when_started_on_same_color(self, editor):
        for x in range(3):
            click(editor, x, 3)
        editor.pointer_down(px(0, 3))
        editor.pointer_move(px(1, 3))
        editor.pointer_up(px(1, 3))
        assert visible(editor.snapshot().cells) == {(2, 3)}

    def test_move_without_button_does_not_paint(self, editor):
        editor.pointer_move(px(1, 1))
        editor.pointer_move(px(2, 1))
        assert editor.cells.is_empty()

    def test_secondary_button_ignored(self, editor):
        editor.pointer_down(px(1, 1), button=2)
        editor.pointer_up(px(1, 1), button=2)
        assert editor.cells.is_empty()
        assert not editor.mouse_down

    def test_click_outside_clamps_to_edge(self, editor, red):
        editor.pointer_down(Point(1000, 1000))
        assert editor.snapshot().cells[3, 3] == red

    def test_component_color(self, grid):
        teal = ComponentColor(red=0, green=128, blue=128)
        editor = PixelEditor(grid, {"green": 128, "blue": 128}, cell_size=(10, 10))
        click(editor, 0, 0)
        assert editor.snapshot().cells[0, 0] == teal


class TestSelecting:
    """Test SELECT mode pointer handling."""

    def test_select_mode_cursor(self, editor):
        editor.set_mode(EditorMode.SELECT)
        assert editor.cursor == Cursor.CROSSHAIR
        editor.set_mode(EditorMode.DRAW)
        assert editor.cursor == Cursor.DEFAULT

    def test_rectangle_lifts(self, editor, red):
        click(editor, 1, 1)
        click(editor, 2, 2)
        editor.set_mode(EditorMode.SELECT)

        editor.pointer_down(px(0, 0))
        editor.pointer_move(px(1, 1))
        assert editor.snapshot().selection_rect is not None
        editor.pointer_up(px(1, 1))

        snapshot = editor.snapshot()
        assert snapshot.selection_rect is None
        assert visible(snapshot.selected) == {(1, 1)}
        assert visible(snapshot.cells) == {(2, 2)}
        assert editor.cursor == Cursor.GRAB

    def test_drag_selection(self, editor, red):
        click(editor, 0, 0)
        editor.set_mode(EditorMode.SELECT)
        click(editor, 0, 0)

        editor.pointer_down(px(0, 0))
        assert editor.cursor == Cursor.GRABBING
        editor.pointer_move(px(2, 1))
        assert editor.cursor == Cursor.GRABBING
        editor.pointer_up(px(2, 1))

        assert editor.cursor == Cursor.GRAB
        assert visible(editor.snapshot().selected) == {(2, 1)}
        editor.commit_selection()
        snapshot = editor.snapshot()
        assert visible(snapshot.cells) == {(2, 1)}
        assert visible(snapshot.selected) == set()

    def test_click_elsewhere_puts_back(self, editor, red):
        click(editor, 0, 0)
        editor.set_mode(EditorMode.SELECT)
        click(editor, 0, 0)
        click(editor, 3, 3)
        assert editor.selected.is_empty()
        assert editor.snapshot().cells[0, 0] == red

    def test_transform_selection(self, editor, red, blue):
        click(editor, 1, 1)
        editor.set_draw_color(blue)
        click(editor, 2, 1)
        editor.set_mode(EditorMode.SELECT)
        select(editor, (1, 1), (2, 1))

        editor.apply_transform(Transformation.flip_x())

        snapshot = editor.snapshot()
        assert snapshot.selected[1, 1] == blue
        assert snapshot.selected[1, 2] == red

    def test_delete_key_in_select_mode(self, editor, red):
        click(editor, 0, 0)
        click(editor, 3, 0)
        editor.set_mode(EditorMode.SELECT)
        select(editor, (0, 0), (1, 1))

        editor.key_down("Delete")

        assert editor.selected.is_empty()
        assert visible(editor.snapshot().cells) == {(3, 0)}

    def test_delete_key_ignored_in_draw_mode(self, editor):
        editor.selected.set(0, 0, NamedColor("red"))
        editor.key_down("Delete")
        assert not editor.selected.is_empty()


class TestModifiers:
    """Test Control and Shift tracking."""

    def test_control_sets_copy_cursor(self, editor):
        editor.set_mode(EditorMode.SELECT)
        editor.key_down("Control")
        assert editor.ctrl_down
        assert editor.cursor == Cursor.COPY
        editor.key_up("Control")
        assert not editor.ctrl_down
        assert editor.cursor == Cursor.CROSSHAIR

    def test_control_ignored_in_draw_mode(self, editor):
        editor.key_down("Control")
        assert not editor.ctrl_down
        assert editor.cursor == Cursor.DEFAULT

    def test_shift_tracked_in_select_mode_only(self, editor):
        editor.key_down("Shift")
        assert not editor.shift_down
        editor.set_mode(EditorMode.SELECT)
        editor.key_down("Shift")
        assert editor.shift_down
        editor.key_up("Shift")
        assert not editor.shift_down

    def test_additive_selection(self, editor, red):
        click(editor, 0, 0)
        click(editor, 3, 3)
        editor.set_mode(EditorMode.SELECT)
        click(editor, 0, 0)

        editor.key_down("Control")
        click(editor, 3, 3)
        editor.key_up("Control")

        assert visible(editor.snapshot().selected) == {(0, 0), (3, 3)}
        assert editor.cells.is_empty()

    def test_unknown_key_ignored(self, editor, grid):
        editor.key_down("q")
        editor.key_up("q")
        assert editor.grid == grid


class TestArrowKeys:
    """Test arrow keys moving the selection or the grid."""

    def test_arrow_shifts_grid_without_selection(self, editor, red):
        click(editor, 1, 0)
        editor.key_down("ArrowRight")
        assert editor.grid.start == Point(1, 0)
        assert visible(editor.snapshot().cells) == {(0, 0)}
        editor.key_down("ArrowLeft")
        assert editor.grid.start == Point(0, 0)
        assert visible(editor.snapshot().cells) == {(1, 0)}

    def test_arrow_up_shifts_grid(self, editor):
        editor.key_down("ArrowUp")
        assert editor.grid == Grid(Point(0, -1), 4, 4)
        assert editor.snapshot().cells.shape == (4, 4)

    def test_arrow_moves_selection(self, editor, grid):
        click(editor, 1, 1)
        editor.set_mode(EditorMode.SELECT)
        click(editor, 1, 1)

        editor.key_down("ArrowDown")
        editor.key_down("ArrowRight")

        assert editor.grid == grid
        assert visible(editor.snapshot().selected) == {(2, 2)}


class TestObservation:
    """Test change notification and snapshots."""

    def test_notifications(self, editor):
        events = []
        editor.subscribe(events.append)
        editor.set_mode(EditorMode.SELECT)
        assert events == [ChangeEvent.CURSOR, ChangeEvent.MODE]

    def test_paint_notifies_cells(self, editor):
        events = []
        editor.subscribe(events.append)
        click(editor, 0, 0)
        assert events == [ChangeEvent.CELLS]

    def test_unsubscribe(self, editor):
        events = []
        unsubscribe = editor.subscribe(events.append)
        unsubscribe()
        click(editor, 0, 0)
        assert events == []

    def test_unsubscribe_twice(self, editor):
        events = []
        unsubscribe = editor.subscribe(events.append)
        unsubscribe()
        unsubscribe()
        editor.extend_right()
        assert events == []

    def test_grid_change_notifies(self, editor):
        events = []
        editor.subscribe(events.append)
        editor.extend_right()
        assert events == [ChangeEvent.GRID]

    def test_snapshot_is_a_copy(self, editor):
        snapshot = editor.snapshot()
        snapshot.cells[0, 0] = NamedColor("red")
        assert editor.cells.is_empty()

    def test_snapshot_pointer_follows_hover(self, editor):
        editor.pointer_move(px(2, 3))
        assert editor.snapshot().pointer == Point(2, 3)
        editor.pointer_leave()
        assert editor.snapshot().pointer is None
        editor.pointer_enter()
        assert editor.snapshot().pointer == Point(2, 3)

    def test_snapshot_mode(self, editor):
        assert editor.snapshot().mode == EditorMode.DRAW

    def test_layers(self, editor, red):
        click(editor, 1, 2)
        layers = editor.layers()
        assert len(layers) == 1
        assert layers[0].name == BACKGROUND_LAYER_NAME
        assert layers[0].selected
        assert layers[0].cells[2, 1] == red
