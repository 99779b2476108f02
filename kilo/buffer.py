"""
Buffer module for the kilo text editor.

Defines the Row class (one line of text plus its tab-expanded render form)
and the Buffer class that owns the rows, the cursor position and the
modification state, together with the editing operations on them.
"""

TAB_STOP = 8

class Row:
    """One line of text. `render` is `chars` with tabs expanded to spaces."""
    def __init__(self, chars: str = "", tab_stop: int = TAB_STOP):
        self.chars = chars
        self.tab_stop = tab_stop
        self.render = ""
        self.update()

    def __len__(self):
        return len(self.chars)

    def __repr__(self):
        return f"Row({self.chars!r})"

    def update(self):
        """Re-derive `render` from `chars`. Must follow every change to `chars`."""
        self.render = expand_tabs(self.chars, self.tab_stop)

    def insert_char(self, at: int, ch: str):
        """Insert `ch` at index `at`, clamping out-of-range positions to the end."""
        if at < 0 or at > len(self.chars):
            at = len(self.chars)
        self.chars = self.chars[:at] + ch + self.chars[at:]
        self.update()

    def delete_char(self, at: int) -> bool:
        """Remove the character at index `at`. Returns False if there is none."""
        if at < 0 or at >= len(self.chars):
            return False
        self.chars = self.chars[:at] + self.chars[at + 1:]
        self.update()
        return True

    def append_string(self, text: str):
        self.chars += text
        self.update()

def expand_tabs(chars: str, tab_stop: int = TAB_STOP) -> str:
    """Expand each tab to spaces up to the next multiple of `tab_stop`."""
    out = []
    col = 0
    for ch in chars:
        if ch == "\t":
            out.append(" ")
            col += 1
            while col % tab_stop != 0:
                out.append(" ")
                col += 1
        else:
            out.append(ch)
            col += 1
    return "".join(out)

class Buffer:
    """Represents the text being edited, with its cursor and dirty flag."""
    def __init__(self, filename: str = None, tab_stop: int = TAB_STOP):
        self.filename = filename  # Path to file or None for new/unsaved
        self.tab_stop = tab_stop
        self.rows = []
        self.modified = False
        # Cursor position: row index and raw (un-expanded) column
        self.cursor_line = 0
        self.cursor_col = 0

    def __len__(self):
        return len(self.rows)

    def current_row(self):
        """Return the row under the cursor, or None past the last row."""
        if 0 <= self.cursor_line < len(self.rows):
            return self.rows[self.cursor_line]
        return None

    ##########################################
    # ROW OPERATIONS
    ##########################################
    def insert_row(self, at: int, text: str):
        """Insert a new row built from `text` before index `at`."""
        if at < 0 or at > len(self.rows):
            return
        self.rows.insert(at, Row(text, self.tab_stop))
        self.modified = True

    def append_row(self, text: str):
        """Add a new row at the end of the buffer."""
        self.insert_row(len(self.rows), text)

    def delete_row(self, at: int):
        if at < 0 or at >= len(self.rows):
            return
        del self.rows[at]
        self.modified = True

    ##########################################
    # EDITING AT THE CURSOR
    ##########################################
    def insert_char(self, ch: str):
        """Insert `ch` at the cursor, creating a row first if the cursor is past the end."""
        if self.cursor_line == len(self.rows):
            self.append_row("")
        self.rows[self.cursor_line].insert_char(self.cursor_col, ch)
        self.cursor_col += 1
        self.modified = True

    def insert_newline(self):
        """Split the current row at the cursor, moving the remainder to a new row below."""
        if self.cursor_col == 0:
            self.insert_row(self.cursor_line, "")
        else:
            row = self.rows[self.cursor_line]
            self.insert_row(self.cursor_line + 1, row.chars[self.cursor_col:])
            row.chars = row.chars[:self.cursor_col]
            row.update()
        self.cursor_line += 1
        self.cursor_col = 0

    def delete_char(self):
        """
        Delete the character left of the cursor. At column 0 the current row
        is joined onto the end of the previous one.
        """
        if self.cursor_line == len(self.rows):
            return
        if self.cursor_col == 0 and self.cursor_line == 0:
            return
        row = self.rows[self.cursor_line]
        if self.cursor_col > 0:
            row.delete_char(self.cursor_col - 1)
            self.cursor_col -= 1
            self.modified = True
        else:
            previous = self.rows[self.cursor_line - 1]
            self.cursor_col = len(previous)
            previous.append_string(row.chars)
            self.delete_row(self.cursor_line)
            self.cursor_line -= 1

    ##########################################
    # FILE I/O
    ##########################################
    def open(self, filename: str):
        """
        Load `filename` into the buffer, one row per line with the line
        terminator stripped. Raises OSError if the file cannot be read.
        """
        self.filename = filename
        with open(filename, 'r', encoding='utf-8', errors='surrogateescape', newline='') as f:
            for line in f:
                self.append_row(line.rstrip("\r\n"))
        self.modified = False

    def to_string(self) -> str:
        """Return the buffer contents, every row terminated by a newline."""
        return "".join(row.chars + "\n" for row in self.rows)

    def save_to_file(self) -> int:
        """
        Write the buffer to self.filename. Returns the number of bytes written.
        Raises OSError on failure and ValueError if no filename is set.
        """
        if not self.filename:
            raise ValueError("buffer has no filename")
        data = self.to_string().encode('utf-8', errors='surrogateescape')
        with open(self.filename, 'wb') as f:
            f.write(data)
        self.modified = False
        return len(data)
