"""
Input handling for the kilo text editor.

Maps each decoded key to an editor action and updates the context
accordingly.
"""
import curses
import curses.ascii

from kilo import logger, viewport
from kilo.ui import screen
from kilo.ui.keys import ENTER, ESC, key_to_text

CTRL_Q = curses.ascii.ctrl(ord("q"))
CTRL_S = curses.ascii.ctrl(ord("s"))
CTRL_H = curses.ascii.ctrl(ord("h"))
CTRL_L = curses.ascii.ctrl(ord("l"))
TAB = curses.ascii.TAB

MOVE_KEYS = (
    curses.KEY_UP, curses.KEY_DOWN, curses.KEY_LEFT, curses.KEY_RIGHT,
    curses.KEY_HOME, curses.KEY_END, curses.KEY_PPAGE, curses.KEY_NPAGE,
)

def process_keypress(context, key: int):
    """Handle one key press."""
    buf = context.buffer

    if key == CTRL_Q:
        if buf.modified and context.quit_times > 0:
            context.set_status_message(
                "WARNING!!! File has unsaved changes. "
                f"Press Ctrl-Q {context.quit_times} more times to quit.")
            context.quit_times -= 1
            return
        context.graceful_exit()
        return

    if key == CTRL_S:
        save(context)
    elif key == ENTER:
        buf.insert_newline()
    elif key in (curses.KEY_BACKSPACE, CTRL_H):
        buf.delete_char()
    elif key == curses.KEY_DC:
        # Delete removes the character under the cursor; nothing at end of file
        before = (buf.cursor_line, buf.cursor_col)
        viewport.move_cursor(buf, context.viewport, curses.KEY_RIGHT)
        if (buf.cursor_line, buf.cursor_col) != before:
            buf.delete_char()
    elif key in MOVE_KEYS:
        viewport.move_cursor(buf, context.viewport, key)
    elif key in (CTRL_L, ESC):
        pass
    elif key == TAB:
        buf.insert_char("\t")
    elif key_to_text(key) is not None:
        buf.insert_char(key_to_text(key))

    # Any key other than Ctrl-Q resets the quit confirmation
    context.quit_times = context.config.quit_times

def save(context):
    """Write the buffer to disk, asking for a file name if it has none."""
    buf = context.buffer
    if buf.filename is None:
        name = screen.prompt_input(context, "Save as: {} (ESC to cancel)")
        if name is None:
            context.set_status_message("Save aborted")
            return
        buf.filename = name
    try:
        written = buf.save_to_file()
    except OSError as e:
        context.set_status_message(f"Can't save! I/O error: {e.strerror or e}")
        logger.log_error(f"saving {buf.filename}", e)
        return
    context.set_status_message(f"{written} bytes written to disk")
    logger.log(f"saved {buf.filename} ({written} bytes)")
