"""Curses output with double-buffering.

This module manages:
- A 2D cell buffer (front buffer + back buffer) for double-buffering
- Copying a rendered character grid into the back buffer
- Dirty-region tracking: comparing buffers to find changed cells
- Flushing only changed characters to the terminal via curses
"""

from __future__ import annotations

import curses
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Cell:
    """A single terminal cell.

    Attributes:
        char: The character to display (single character string).
        attrs: Extra curses attributes (e.g. ``curses.A_BOLD``).
    """
    char: str = " "
    attrs: int = 0


# Maps a character to curses attributes for it.
AttrsFunc = Callable[[str], int]


# ---------------------------------------------------------------------------
# Buffer helpers
# ---------------------------------------------------------------------------

def diff_buffers(
    front: List[List[Cell]],
    back: List[List[Cell]],
) -> List[Tuple[int, int, Cell]]:
    """Compare *front* and *back* buffers and return a list of changed cells.

    Each entry in the result is ``(row, col, new_cell)`` where *new_cell*
    comes from the *back* buffer.

    If the buffers have different dimensions the comparison is performed over
    the overlapping region.
    """
    changes: List[Tuple[int, int, Cell]] = []
    rows = min(len(front), len(back))
    for r in range(rows):
        cols = min(len(front[r]), len(back[r]))
        for c in range(cols):
            if front[r][c] != back[r][c]:
                changes.append((r, c, back[r][c]))
    return changes


def make_buffer(rows: int, cols: int, fill: Cell | None = None) -> List[List[Cell]]:
    """Create a 2D buffer of *rows* x *cols* filled with *fill* (default blank)."""
    if fill is None:
        fill = Cell()
    return [[fill for _ in range(cols)] for _ in range(rows)]


def grid_to_text(grid: Sequence[Sequence[str]]) -> str:
    """Join a character grid into newline-separated lines."""
    return "\n".join("".join(row) for row in grid)


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------

# Minimum terminal size to render a useful globe.
MIN_TERM_COLS = 20
MIN_TERM_ROWS = 10
SIZE_WARNING = "Terminal too small!"


class Renderer:
    """Curses-based output with double-buffering.

    The renderer manages two equally-sized cell buffers (*front* and
    *back*).  Each frame is copied into the back buffer, then diffed
    against the front buffer; only the changed cells are flushed to the
    curses window.  After the flush the buffers are swapped.

    Usage (inside a curses wrapper)::

        def main(stdscr):
            renderer = Renderer(stdscr)
            while True:
                renderer.render_frame(globe.render(renderer.cols, renderer.rows))
    """

    def __init__(self, stdscr: Any) -> None:
        self._stdscr = stdscr
        self._setup_curses()

        # Buffer dimensions match the current terminal size.
        self._rows: int = 0
        self._cols: int = 0
        self._front: List[List[Cell]] = []
        self._back: List[List[Cell]] = []
        self._resize_buffers()

    # -- Initialization helpers ------------------------------------------------

    def _setup_curses(self) -> None:
        """Configure the curses screen for rendering."""
        try:
            curses.curs_set(0)  # hide cursor
        except curses.error:
            pass  # some terminals don't support cursor visibility

        self._stdscr.nodelay(True)   # non-blocking getch
        self._stdscr.keypad(True)

    def _resize_buffers(self) -> None:
        """Re-create buffers to match the current terminal size."""
        try:
            max_y, max_x = self._stdscr.getmaxyx()
        except curses.error:
            max_y, max_x = 24, 80

        self._rows = max_y
        self._cols = max_x
        self._front = make_buffer(self._rows, self._cols)
        self._back = make_buffer(self._rows, self._cols)

    # -- Properties ------------------------------------------------------------

    @property
    def rows(self) -> int:
        """Number of rows in the current terminal."""
        return self._rows

    @property
    def cols(self) -> int:
        """Number of columns in the current terminal."""
        return self._cols

    # -- Frame rendering -------------------------------------------------------

    def render_frame(
        self,
        grid: Sequence[Sequence[str]],
        attrs_for: Optional[AttrsFunc] = None,
    ) -> int:
        """Render a full frame from a character grid.

        The *grid* is a sequence of rows of single characters, anchored at
        the top-left corner.  Characters outside the terminal are ignored
        and cells the grid does not reach are blank.  *attrs_for* can map
        a character to curses attributes.

        Returns:
            The number of cells flushed (changed) in this frame.
        """
        # Check for terminal resize
        try:
            max_y, max_x = self._stdscr.getmaxyx()
        except curses.error:
            max_y, max_x = self._rows, self._cols

        if max_y != self._rows or max_x != self._cols:
            self._resize_buffers()

        # Handle very small terminal
        if self.is_terminal_too_small():
            return self._render_size_warning()

        blank = Cell()
        for r in range(self._rows):
            line = grid[r] if r < len(grid) else ()
            back_row = self._back[r]
            for c in range(self._cols):
                if c < len(line):
                    ch = line[c]
                    back_row[c] = Cell(ch, attrs_for(ch) if attrs_for else 0)
                else:
                    back_row[c] = blank

        return self._present()

    def _render_size_warning(self) -> int:
        """Display a size warning when the terminal is too small."""
        blank = Cell()
        for r in range(self._rows):
            for c in range(self._cols):
                self._back[r][c] = blank

        msg = SIZE_WARNING
        if self._cols < len(msg):
            msg = msg[:self._cols]

        row = self._rows // 2
        col = max(0, (self._cols - len(msg)) // 2)
        for i, ch in enumerate(msg):
            if col + i < self._cols:
                self._back[row][col + i] = Cell(char=ch)

        return self._present()

    def _present(self) -> int:
        """Diff, flush and swap buffers."""
        changes = diff_buffers(self._front, self._back)
        self._flush_changes(changes)
        self._front, self._back = self._back, self._front
        return len(changes)

    # -- Terminal output -------------------------------------------------------

    def _flush_changes(self, changes: List[Tuple[int, int, Cell]]) -> None:
        """Write only the changed cells to the curses window."""
        for row, col, cell in changes:
            if row >= self._rows or col >= self._cols:
                continue
            try:
                self._stdscr.addstr(row, col, cell.char, cell.attrs)
            except curses.error:
                # curses refuses the bottom-right corner; skip it.
                pass

        try:
            self._stdscr.noutrefresh()
            curses.doupdate()
        except curses.error:
            pass

    # -- Public helpers -------------------------------------------------------

    def clear(self) -> None:
        """Clear both buffers and the screen."""
        self._front = make_buffer(self._rows, self._cols)
        self._back = make_buffer(self._rows, self._cols)
        try:
            self._stdscr.clear()
            self._stdscr.noutrefresh()
            curses.doupdate()
        except curses.error:
            pass

    def handle_resize(self) -> None:
        """Call after receiving a ``curses.KEY_RESIZE`` event."""
        try:
            curses.update_lines_cols()
        except (curses.error, AttributeError):
            pass
        self._resize_buffers()
        self.clear()

    def is_terminal_too_small(self) -> bool:
        """Return ``True`` when the terminal is below minimum usable size."""
        return self._rows < MIN_TERM_ROWS or self._cols < MIN_TERM_COLS
