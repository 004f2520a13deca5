"""Tests for the ANSI terminal renderer."""

import re
from io import StringIO
from unittest.mock import Mock

import pytest

from lifeterm.core.grid import Grid
from lifeterm.core.game import advance
from lifeterm.frontends.terminal import (
    CLEAR_SCREEN,
    HIDE_CURSOR,
    LIVE_COLOR,
    RESET,
    SHOW_CURSOR,
    RenderError,
    TerminalRenderer,
    move_to,
)


CONTROL = re.compile(r"\x1b\[([0-9;?]*)([A-Za-z])")


class VirtualScreen:
    """Minimal ANSI screen: tracks cursor moves, clears and glyph writes."""

    def __init__(self, rows, cols):
        self.rows = rows
        self.cols = cols
        self.cells = {}
        self.row = 0
        self.col = 0

    def feed(self, data):
        pos = 0
        for match in CONTROL.finditer(data):
            self._text(data[pos:match.start()])
            params, command = match.groups()
            if command == "H":
                if params:
                    row, col = params.split(";")
                    self.row, self.col = int(row) - 1, int(col) - 1
                else:
                    self.row, self.col = 0, 0
            elif command == "J":
                self.cells.clear()
            pos = match.end()
        self._text(data[pos:])

    def _text(self, text):
        for char in text:
            self.cells[(self.row, self.col)] = char
            self.col += 1

    def lines(self):
        return [
            "".join(self.cells.get((row, col), " ") for col in range(self.cols))
            for row in range(self.rows)
        ]


def make_grid(rows, cols, live):
    grid = Grid(rows, cols)
    for row, col in live:
        grid.set_cell(row, col, True)
    return grid


class TestMoveTo:
    """Test cursor positioning sequences."""

    def test_one_based(self):
        """Test zero-based (row, col) maps to 1-based CUP."""
        assert move_to(0, 0) == "\033[1;1H"
        assert move_to(4, 9) == "\033[5;10H"


class TestPaintFull:
    """Test full repaints."""

    def test_draws_every_cell(self):
        """Test every cell is written with the right glyph."""
        stream = StringIO()
        renderer = TerminalRenderer(stream)
        grid = make_grid(2, 3, [(0, 0), (1, 2)])

        draws = renderer.paint_full(grid)
        assert draws == 6

        screen = VirtualScreen(2, 3)
        screen.feed(stream.getvalue())
        assert screen.lines() == ["#  ", "  #"]

    def test_top_left_origin(self):
        """Test painting starts at the top-left corner."""
        stream = StringIO()
        TerminalRenderer(stream).paint_full(Grid(2, 2))
        assert stream.getvalue().startswith(move_to(0, 0))

    def test_flushes_once_per_frame(self):
        """Test a frame is flushed exactly once after its draws."""
        stream = Mock()
        renderer = TerminalRenderer(stream)
        renderer.paint_full(make_grid(3, 3, [(1, 1)]))

        assert stream.flush.call_count == 1
        assert stream.method_calls[-1][0] == "flush"
        assert renderer.frames == 1

    def test_custom_glyphs(self):
        """Test configurable live and dead glyphs."""
        stream = StringIO()
        renderer = TerminalRenderer(stream, live_glyph="@", dead_glyph=".")
        renderer.paint_full(make_grid(1, 3, [(0, 1)]))
        assert stream.getvalue() == move_to(0, 0) + ".@."


class TestPaintDiff:
    """Test differential repaints."""

    def test_identical_grids_draw_nothing(self):
        """Test no draw operations happen when nothing changed."""
        stream = StringIO()
        renderer = TerminalRenderer(stream)
        grid = make_grid(4, 4, [(1, 1), (2, 2)])

        assert renderer.paint_diff(grid, grid) == 0
        assert stream.getvalue() == ""
        assert renderer.draws == 0

    def test_only_changed_cells(self):
        """Test exactly the changed positions are redrawn."""
        stream = StringIO()
        renderer = TerminalRenderer(stream)
        previous = make_grid(5, 5, [(2, 1), (2, 2), (2, 3)])
        current = advance(previous)

        draws = renderer.paint_diff(current, previous)
        assert draws == 4
        assert stream.getvalue() == (
            move_to(1, 2) + "#" + move_to(2, 1) + " " + move_to(2, 3) + " " + move_to(3, 2) + "#"
        )

    def test_still_flushes(self):
        """Test an empty frame is still flushed."""
        stream = Mock()
        TerminalRenderer(stream).paint_diff(Grid(2, 2), Grid(2, 2))
        stream.write.assert_not_called()
        stream.flush.assert_called_once()

    def test_full_then_diff_matches_full_twice(self):
        """Test full+diff on the same grid leaves the screen as full+full does."""
        grid = make_grid(4, 6, [(0, 0), (1, 3), (3, 5), (2, 2)])

        stream_a = StringIO()
        renderer_a = TerminalRenderer(stream_a)
        renderer_a.paint_full(grid)
        renderer_a.paint_diff(grid, grid)

        stream_b = StringIO()
        renderer_b = TerminalRenderer(stream_b)
        renderer_b.paint_full(grid)
        renderer_b.paint_full(grid)

        screen_a = VirtualScreen(4, 6)
        screen_a.feed(stream_a.getvalue())
        screen_b = VirtualScreen(4, 6)
        screen_b.feed(stream_b.getvalue())
        assert screen_a.lines() == screen_b.lines()

    def test_diff_tracks_generations(self):
        """Test a chain of diffs matches a fresh full paint of the last generation."""
        grid = make_grid(6, 6, [(1, 2), (2, 3), (3, 1), (3, 2), (3, 3)])

        stream = StringIO()
        renderer = TerminalRenderer(stream)
        renderer.paint_full(grid)
        for _ in range(5):
            nxt = advance(grid)
            renderer.paint_diff(nxt, grid)
            grid = nxt

        fresh = StringIO()
        TerminalRenderer(fresh).paint_full(grid)

        screen = VirtualScreen(6, 6)
        screen.feed(stream.getvalue())
        expected = VirtualScreen(6, 6)
        expected.feed(fresh.getvalue())
        assert screen.lines() == expected.lines()


class TestPaintModes:
    """Test render mode dispatch."""

    def test_diff_mode_without_previous_paints_full(self):
        """Test diff mode repaints everything when no previous frame exists."""
        renderer = TerminalRenderer(StringIO(), render_mode="diff")
        assert renderer.paint(Grid(3, 4)) == 12

    def test_diff_mode_with_previous(self):
        """Test diff mode only draws changes when a previous frame exists."""
        renderer = TerminalRenderer(StringIO(), render_mode="diff")
        grid = Grid(3, 4)
        assert renderer.paint(grid, grid) == 0

    def test_full_mode_always_repaints(self):
        """Test full mode ignores the previous frame."""
        renderer = TerminalRenderer(StringIO(), render_mode="full")
        grid = Grid(3, 4)
        assert renderer.paint(grid, grid) == 12

    def test_unknown_mode(self):
        """Test an unknown render mode is rejected."""
        with pytest.raises(ValueError):
            TerminalRenderer(StringIO(), render_mode="sideways")


class TestColor:
    """Test colorized output."""

    def test_live_cells_colored(self):
        """Test live glyphs get the live color and the frame ends with a reset."""
        stream = StringIO()
        renderer = TerminalRenderer(stream, color=True)
        renderer.paint_diff(make_grid(2, 2, [(0, 1)]), Grid(2, 2))

        output = stream.getvalue()
        assert output == move_to(0, 1) + LIVE_COLOR + "#" + RESET

    def test_colored_frame_renders_same_glyphs(self):
        """Test color codes do not change what lands on screen."""
        grid = make_grid(3, 3, [(0, 0), (1, 1), (2, 2)])

        plain = StringIO()
        TerminalRenderer(plain).paint_full(grid)
        colored = StringIO()
        TerminalRenderer(colored, color=True).paint_full(grid)

        a = VirtualScreen(3, 3)
        a.feed(plain.getvalue())
        b = VirtualScreen(3, 3)
        b.feed(colored.getvalue())
        assert a.lines() == b.lines()


class TestScreenControl:
    """Test clear and cursor control."""

    def test_clear(self):
        """Test clearing the screen."""
        stream = StringIO()
        renderer = TerminalRenderer(stream)
        renderer.paint_full(make_grid(2, 2, [(0, 0)]))
        renderer.clear()

        assert CLEAR_SCREEN in stream.getvalue()
        screen = VirtualScreen(2, 2)
        screen.feed(stream.getvalue())
        assert screen.lines() == ["  ", "  "]

    def test_cursor_visibility(self):
        """Test hiding and showing the cursor."""
        stream = StringIO()
        renderer = TerminalRenderer(stream)
        renderer.hide_cursor()
        renderer.show_cursor()
        assert stream.getvalue() == HIDE_CURSOR + SHOW_CURSOR


class TestRenderErrors:
    """Test terminal I/O failures."""

    def test_write_failure(self):
        """Test a failing write raises RenderError."""
        stream = Mock()
        stream.write.side_effect = BrokenPipeError("pipe closed")
        renderer = TerminalRenderer(stream)

        with pytest.raises(RenderError) as excinfo:
            renderer.paint_full(Grid(2, 2))
        assert isinstance(excinfo.value.__cause__, BrokenPipeError)

    def test_closed_stream(self):
        """Test writing to a closed stream raises RenderError."""
        stream = StringIO()
        stream.close()
        renderer = TerminalRenderer(stream)

        with pytest.raises(RenderError):
            renderer.paint_diff(make_grid(2, 2, [(1, 1)]), Grid(2, 2))

    def test_flush_failure(self):
        """Test a failing flush raises RenderError."""
        stream = Mock()
        stream.flush.side_effect = OSError("terminal gone")

        with pytest.raises(RenderError):
            TerminalRenderer(stream).clear()

    def test_render_error_is_io_error(self):
        """Test RenderError belongs to the I/O error family."""
        assert issubclass(RenderError, OSError)
