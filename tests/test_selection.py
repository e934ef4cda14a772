"""
Tests for rectangular selection: lift, put-back, move and delete.
"""

from pixel_editor.models import Point, Rect, Transformation
from pixel_editor.selection import SelectionState


def paint(coords, storage, color, *points):
    for x, y in points:
        coords.set_cell(storage, Point(x, y), color)


def filled(storage):
    return {(p.x, p.y) for p, _ in storage.filled()}


class TestLift:
    """Test lifting cells out of the main storage."""

    def test_rectangle_lifts_cells(self, selection, coords, cells, selected, red):
        paint(coords, cells, red, (1, 1), (2, 2), (3, 3))

        selection.press(Point(1, 1))
        selection.drag(Point(2, 2))
        selection.release(Point(2, 2))

        assert filled(selected) == {(1, 1), (2, 2)}
        assert filled(cells) == {(3, 3)}
        assert selection.is_selected

    def test_rectangle_is_transient(self, selection):
        selection.press(Point(0, 0))
        assert selection.rect == Rect(Point(0, 0), Point(0, 0))
        assert selection.state == SelectionState.RUBBER_BANDING
        selection.drag(Point(2, 1))
        assert selection.rect == Rect(Point(0, 0), Point(2, 1))
        selection.release(Point(2, 1))
        assert selection.rect is None
        assert selection.state == SelectionState.IDLE

    def test_reversed_rectangle(self, selection, coords, cells, selected, red):
        """Test dragging up-left selects the same cells as down-right."""
        paint(coords, cells, red, (1, 1), (2, 1))

        selection.press(Point(3, 2))
        selection.release(Point(0, 0))

        assert filled(selected) == {(1, 1), (2, 1)}
        assert cells.is_empty()

    def test_empty_rectangle_lifts_nothing(self, selection, selected):
        selection.press(Point(0, 0))
        selection.release(Point(3, 3))
        assert selected.is_empty()
        assert not selection.is_selected


class TestPutBack:
    """Test returning lifted cells to the main storage."""

    def test_lift_then_put_back_restores(self, selection, coords, cells, selected, red, blue):
        """Test lift then release over the same cells is a no-op overall."""
        paint(coords, cells, red, (1, 1))
        paint(coords, cells, blue, (2, 1))
        before = cells.cells.copy()

        selection.press(Point(1, 1))
        selection.release(Point(2, 1))
        assert not filled(cells)

        selection.press(Point(1, 1), additive=True)
        selection.release(Point(2, 1))

        assert (cells.cells == before).all()
        assert selected.is_empty()

    def test_put_back_decided_by_start_corner(self, selection, coords, cells, selected, red, blue):
        """Test a rectangle started on an empty cell lifts even over lifted cells."""
        paint(coords, selected, red, (2, 2))
        paint(coords, cells, blue, (1, 1))

        selection.press(Point(0, 0), additive=True)
        selection.release(Point(2, 2))

        assert filled(selected) == {(1, 1), (2, 2)}
        assert cells.is_empty()

    def test_press_on_empty_commits_previous_selection(self, selection, coords, cells, selected, red):
        paint(coords, selected, red, (3, 0))

        selection.press(Point(0, 3))

        assert coords.get_cell(cells, Point(3, 0)) == red
        assert selected.is_empty()

    def test_additive_press_keeps_previous_selection(self, selection, coords, cells, selected, red):
        """Test additive selection accumulates disjoint lifted regions."""
        paint(coords, cells, red, (0, 0), (3, 3))

        selection.press(Point(0, 0))
        selection.release(Point(0, 0))
        selection.press(Point(3, 3), additive=True)
        selection.release(Point(3, 3))

        assert filled(selected) == {(0, 0), (3, 3)}
        assert cells.is_empty()


class TestMove:
    """Test moving the lifted cells."""

    def test_drag_on_lifted_cell_moves_selection(self, selection, coords, cells, selected, red):
        paint(coords, selected, red, (1, 1), (1, 2))

        selection.press(Point(1, 1))
        assert selection.dragging
        assert selection.rect is None

        selection.drag(Point(2, 1))
        selection.drag(Point(2, 2))
        selection.release(Point(2, 2))

        assert filled(selected) == {(2, 2), (2, 3)}
        assert cells.is_empty()
        assert selection.state == SelectionState.IDLE

    def test_additive_drag_does_not_move(self, selection, coords, selected, red):
        paint(coords, selected, red, (1, 1))
        selection.state = SelectionState.DRAGGING
        selection.anchor = Point(1, 1)

        selection.drag(Point(2, 1), additive=True)

        assert filled(selected) == {(1, 1)}

    def test_move(self, selection, coords, selected, red):
        paint(coords, selected, red, (0, 0))
        selection.move(1, 2)
        assert filled(selected) == {(1, 2)}

    def test_translate_then_put_back(self, selection, coords, cells, selected, red):
        """Test a lifted cell moved right lands one column over on commit."""
        paint(coords, cells, red, (2, 2))

        selection.press(Point(2, 2))
        selection.release(Point(2, 2))
        selection.transform(Transformation.translate_x(1))
        selection.extract(Rect(Point(3, 2), Point(3, 2)))

        assert coords.get_cell(cells, Point(3, 2)) == red
        assert coords.get_cell(cells, Point(2, 2)) is None
        assert selected.is_empty()

    def test_transform_only_touches_selection(self, selection, coords, cells, selected, red, blue):
        paint(coords, cells, blue, (0, 0))
        paint(coords, selected, red, (1, 1), (2, 1))

        selection.transform(Transformation.flip_x())

        assert filled(cells) == {(0, 0)}
        assert filled(selected) == {(1, 1), (2, 1)}


class TestDelete:
    def test_delete_clears_only_selection(self, selection, coords, cells, selected, red, blue):
        paint(coords, cells, blue, (0, 0))
        paint(coords, selected, red, (1, 1))

        selection.delete()

        assert selected.is_empty()
        assert filled(cells) == {(0, 0)}
