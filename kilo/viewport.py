"""
Viewport and cursor movement for the kilo text editor.

The viewport is the window onto the buffer: which rows and which render
columns are on screen. It only ever changes in scroll(), which pulls the
offsets along so the cursor stays visible.
"""
import curses

from kilo.buffer import TAB_STOP

def cursor_to_render_col(row, col: int, tab_stop: int = TAB_STOP) -> int:
    """Map raw column `col` in `row` to its column after tab expansion."""
    if row is None:
        return 0
    rx = 0
    for ch in row.chars[:col]:
        if ch == "\t":
            rx += (tab_stop - 1) - (rx % tab_stop)
        rx += 1
    return rx

class Viewport:
    """Scroll offsets plus the size of the text area."""
    def __init__(self, screen_rows: int, screen_cols: int):
        self.row_offset = 0
        self.col_offset = 0
        self.screen_rows = screen_rows
        self.screen_cols = screen_cols
        # Render column of the cursor, refreshed by scroll()
        self.render_col = 0

    def scroll(self, buffer) -> int:
        """
        Recompute the render column of the cursor and move the offsets so
        the cursor is inside the viewport. Returns the render column.
        """
        self.render_col = cursor_to_render_col(
            buffer.current_row(), buffer.cursor_col, buffer.tab_stop)

        if buffer.cursor_line < self.row_offset:
            self.row_offset = buffer.cursor_line
        if buffer.cursor_line >= self.row_offset + self.screen_rows:
            self.row_offset = buffer.cursor_line - self.screen_rows + 1
        if self.render_col < self.col_offset:
            self.col_offset = self.render_col
        if self.render_col >= self.col_offset + self.screen_cols:
            self.col_offset = self.render_col - self.screen_cols + 1
        return self.render_col

    def screen_position(self, buffer):
        """Return the 0-based (y, x) of the cursor on screen."""
        return buffer.cursor_line - self.row_offset, self.render_col - self.col_offset

def move_cursor(buffer, viewport, key: int):
    """Move the cursor for an arrow, Home/End or PageUp/PageDown key."""
    if key in (curses.KEY_PPAGE, curses.KEY_NPAGE):
        if key == curses.KEY_PPAGE:
            buffer.cursor_line = viewport.row_offset
            step = curses.KEY_UP
        else:
            buffer.cursor_line = min(viewport.row_offset + viewport.screen_rows - 1,
                                     max(len(buffer.rows) - 1, 0))
            step = curses.KEY_DOWN
        _clamp_col(buffer)
        for _ in range(viewport.screen_rows):
            move_cursor(buffer, viewport, step)
        return

    row = buffer.current_row()
    if key == curses.KEY_LEFT:
        if buffer.cursor_col > 0:
            buffer.cursor_col -= 1
        elif buffer.cursor_line > 0:
            buffer.cursor_line -= 1
            buffer.cursor_col = len(buffer.rows[buffer.cursor_line])
    elif key == curses.KEY_RIGHT:
        if row is not None and buffer.cursor_col < len(row):
            buffer.cursor_col += 1
        elif row is not None and buffer.cursor_line < len(buffer.rows) - 1:
            buffer.cursor_line += 1
            buffer.cursor_col = 0
    elif key == curses.KEY_UP:
        if buffer.cursor_line > 0:
            buffer.cursor_line -= 1
    elif key == curses.KEY_DOWN:
        if buffer.cursor_line < len(buffer.rows) - 1:
            buffer.cursor_line += 1
    elif key == curses.KEY_HOME:
        buffer.cursor_col = 0
    elif key == curses.KEY_END:
        if row is not None:
            buffer.cursor_col = len(row)

    _clamp_col(buffer)

def _clamp_col(buffer):
    row = buffer.current_row()
    length = len(row) if row is not None else 0
    if buffer.cursor_col > length:
        buffer.cursor_col = length
