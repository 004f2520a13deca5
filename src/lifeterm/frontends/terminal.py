"""ANSI terminal renderer for the Game of Life."""

import sys
from typing import Optional, TextIO

from ..core.grid import Grid


ESC = "\033["
CLEAR_SCREEN = ESC + "2J"
CURSOR_HOME = ESC + "H"
HIDE_CURSOR = ESC + "?25l"
SHOW_CURSOR = ESC + "?25h"
RESET = ESC + "0m"

LIVE_COLOR = ESC + "92m"  # Bright green
DEAD_COLOR = ESC + "39m"  # Default foreground

LIVE_GLYPH = "#"
DEAD_GLYPH = " "

RENDER_MODES = ("diff", "full")


class RenderError(IOError):
    """Writing to the terminal failed."""


def move_to(row: int, col: int) -> str:
    """Cursor position sequence for a zero-based (row, col)."""
    return f"{ESC}{row + 1};{col + 1}H"


class TerminalRenderer:
    """Paints grids onto a text console with ANSI control sequences.

    Each paint call buffers its draws in the stream and flushes exactly once
    at the end, so a frame is presented in one piece.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        render_mode: str = "diff",
        color: bool = False,
        live_glyph: str = LIVE_GLYPH,
        dead_glyph: str = DEAD_GLYPH,
    ) -> None:
        """Initialize the renderer.

        Args:
            stream: Text stream to draw on (standard output if omitted)
            render_mode: "diff" to redraw only changed cells, "full" to repaint every frame
            color: Whether to color live and dead glyphs
            live_glyph: Character drawn for a live cell
            dead_glyph: Character drawn for a dead cell
        """
        if render_mode not in RENDER_MODES:
            raise ValueError(f"Unknown render mode '{render_mode}', expected one of {', '.join(RENDER_MODES)}")

        self.stream = stream if stream is not None else sys.stdout
        self.render_mode = render_mode
        self.color = color
        self.live_glyph = live_glyph
        self.dead_glyph = dead_glyph
        self.frames = 0
        self.draws = 0

    def _write(self, text: str) -> None:
        try:
            self.stream.write(text)
        except (OSError, ValueError) as e:
            raise RenderError(f"Terminal write failed: {e}") from e

    def _flush(self) -> None:
        try:
            self.stream.flush()
        except (OSError, ValueError) as e:
            raise RenderError(f"Terminal flush failed: {e}") from e

    def _glyph(self, alive: bool) -> str:
        glyph = self.live_glyph if alive else self.dead_glyph
        if self.color:
            return (LIVE_COLOR if alive else DEAD_COLOR) + glyph
        return glyph

    def _draw(self, row: int, col: int, alive: bool) -> None:
        self._write(move_to(row, col) + self._glyph(alive))
        self.draws += 1

    def _end_frame(self) -> None:
        if self.color:
            self._write(RESET)
        self._flush()
        self.frames += 1

    def paint_full(self, grid: Grid) -> int:
        """Draw every cell of the grid, row by row from the top-left corner.

        Returns:
            Number of draw operations issued
        """
        draws = 0
        for row in range(grid.rows):
            # One cursor move per row, then the glyphs run left to right
            line = "".join(self._glyph(bool(cell)) for cell in grid.cells[row])
            self._write(move_to(row, 0) + line)
            draws += grid.cols
        self.draws += draws
        self._end_frame()
        return draws

    def paint_diff(self, grid: Grid, previous_grid: Grid) -> int:
        """Redraw only the cells whose state differs from the previous frame.

        Args:
            grid: Generation to show
            previous_grid: Generation currently on screen

        Returns:
            Number of draw operations issued (0 when nothing changed)
        """
        draws = 0
        for row, col in grid.changed_cells(previous_grid):
            self._draw(row, col, bool(grid.cells[row, col]))
            draws += 1
        self._end_frame()
        return draws

    def paint(self, grid: Grid, previous_grid: Optional[Grid] = None) -> int:
        """Paint a frame according to the render mode.

        Diff mode falls back to a full repaint when no previous frame is known.
        """
        if self.render_mode == "full" or previous_grid is None:
            return self.paint_full(grid)
        return self.paint_diff(grid, previous_grid)

    def clear(self) -> None:
        """Clear the screen and home the cursor."""
        self._write(RESET + CLEAR_SCREEN + CURSOR_HOME)
        self._flush()

    def hide_cursor(self) -> None:
        self._write(HIDE_CURSOR)
        self._flush()

    def show_cursor(self) -> None:
        self._write(SHOW_CURSOR)
        self._flush()
