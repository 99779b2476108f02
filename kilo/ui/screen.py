"""
kilo/ui/screen.py

Implements the screen drawing for the kilo text editor. Each refresh builds
the whole frame (text rows, status bar, message bar and cursor placement) in
memory and hands it to the terminal in a single write so the user never sees
a half-drawn screen.
"""
import time

from wcwidth import wcswidth

from kilo.ui.keys import DELETE_KEYS, ENTER, ESC, key_to_text

KILO_VERSION = "0.0.1"

# Escape sequences
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CURSOR_HOME = "\x1b[H"
CLEAR_LINE  = "\x1b[K"
CLEAR_SCREEN = "\x1b[2J"
INVERT      = "\x1b[7m"
RESET_ATTRS = "\x1b[m"
NEWLINE     = "\r\n"

EMPTY_ROW = "~"
WELCOME = f"Kilo editor -- version {KILO_VERSION}"
FILENAME_WIDTH = 20

def text_width(text: str) -> int:
    """Columns `text` takes on screen; unprintable characters count as one."""
    width = wcswidth(text)
    return width if width >= 0 else len(text)

def fit(text: str, width: int) -> str:
    """Trim `text` so it takes at most `width` columns."""
    if text_width(text) <= width:
        return text
    out = []
    used = 0
    for ch in text:
        w = text_width(ch)
        if used + w > width:
            break
        out.append(ch)
        used += w
    return "".join(out)

def cursor_to(y: int, x: int) -> str:
    """Sequence moving the cursor to 0-based screen cell (y, x)."""
    return f"\x1b[{y + 1};{x + 1}H"

###############################################################################
# FRAME PIECES
###############################################################################

def draw_welcome(screen_cols: int) -> str:
    welcome = fit(WELCOME, screen_cols)
    padding = (screen_cols - text_width(welcome)) // 2
    if padding:
        return EMPTY_ROW + " " * (padding - 1) + welcome
    return welcome

def draw_rows(context, frame: list):
    """
    Append one line per text row of the viewport. Rows past the end of the
    buffer show a tilde; an empty buffer gets the welcome banner a third of
    the way down. Lines are separated by newlines, not terminated.
    """
    buf = context.buffer
    view = context.viewport
    for y in range(view.screen_rows):
        if y:
            frame.append(NEWLINE)
        filerow = y + view.row_offset
        if filerow >= len(buf.rows):
            if not buf.rows and y == view.screen_rows // 3:
                frame.append(draw_welcome(view.screen_cols))
            else:
                frame.append(EMPTY_ROW)
        else:
            render = buf.rows[filerow].render
            frame.append(render[view.col_offset:view.col_offset + view.screen_cols])
        frame.append(CLEAR_LINE)

def draw_status_bar(context, frame: list):
    """
    Inverse-video bar: file name, line count and modified marker on the
    left, cursor line / total lines flush right.
    """
    buf = context.buffer
    cols = context.viewport.screen_cols
    fname = fit(buf.filename or "[No Name]", FILENAME_WIDTH)
    dirty_mark = " (modified)" if buf.modified else ""
    left = fit(f"{fname} - {len(buf.rows)} lines{dirty_mark}", cols)
    right = f"{buf.cursor_line + 1}/{len(buf.rows)}"

    used = text_width(left)
    filler = cols - used - text_width(right)
    if filler >= 0:
        line = left + " " * filler + right
    else:
        line = left + " " * (cols - used)
    frame.append(INVERT)
    frame.append(line)
    frame.append(RESET_ATTRS)

def draw_message_bar(context, frame: list, now: float = None):
    """Show the status message until it is older than the message timeout."""
    frame.append(CLEAR_LINE)
    if not context.status_message:
        return
    now = time.time() if now is None else now
    if now - context.status_time < context.config.message_timeout:
        frame.append(fit(context.status_message, context.viewport.screen_cols))

def compose(context, now: float = None) -> bytes:
    """Build the complete frame for the current editor state."""
    context.viewport.scroll(context.buffer)

    frame = [HIDE_CURSOR, CURSOR_HOME]
    draw_rows(context, frame)
    if context.bar_lines >= 1:
        frame.append(NEWLINE)
        draw_status_bar(context, frame)
    if context.bar_lines >= 2:
        frame.append(NEWLINE)
        draw_message_bar(context, frame, now)
    y, x = context.viewport.screen_position(context.buffer)
    frame.append(cursor_to(y, x))
    frame.append(SHOW_CURSOR)
    return "".join(frame).encode('utf-8', errors='surrogateescape')

def refresh_screen(context):
    """Draw the editor state with one write to the terminal."""
    context.terminal.write(compose(context))

def clear_screen(terminal):
    """Wipe the screen and home the cursor, as done on the way out."""
    terminal.write((CLEAR_SCREEN + CURSOR_HOME).encode())

###############################################################################
# PROMPT
###############################################################################

def prompt_input(context, prompt: str) -> str:
    """
    Ask for a line of input in the message bar. `prompt` must contain one
    ``{}`` where the typed text goes. Returns the entered string, or None if
    the user pressed Escape.
    """
    typed = ""
    while True:
        context.set_status_message(prompt.format(typed))
        refresh_screen(context)
        key = context.read_key()
        if key in DELETE_KEYS:
            typed = typed[:-1]
        elif key == ESC:
            context.set_status_message("")
            return None
        elif key == ENTER:
            if typed:
                context.set_status_message("")
                return typed
        elif key_to_text(key) is not None:
            typed += key_to_text(key)
