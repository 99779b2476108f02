"""
Tests for frame composition.
"""
import pytest

from kilo.__main__ import EditorContext
from kilo.ui import screen
from conftest import FakeTerminal


def text_lines(frame: bytes):
    """The text-row part of a frame, split into lines."""
    text = frame.decode()
    body = text[len(screen.HIDE_CURSOR + screen.CURSOR_HOME):text.index(screen.INVERT)]
    assert body.endswith(screen.NEWLINE)
    return body[:-len(screen.NEWLINE)].split(screen.NEWLINE)


def status_line(frame: bytes):
    text = frame.decode()
    start = text.index(screen.INVERT) + len(screen.INVERT)
    return text[start:text.index(screen.RESET_ATTRS, start)]


class TestRows:
    """Tests for the text area."""

    def test_one_line_per_screen_row(self, context):
        """Every screen row is drawn and cleared, with tildes past the end."""
        for line in ["first", "second", "third"]:
            context.buffer.append_row(line)
        lines = text_lines(screen.compose(context))
        assert len(lines) == context.viewport.screen_rows == 8
        assert all(line.endswith(screen.CLEAR_LINE) for line in lines)
        assert lines[:3] == [s + screen.CLEAR_LINE for s in ["first", "second", "third"]]
        assert lines[3:] == [screen.EMPTY_ROW + screen.CLEAR_LINE] * 5

    def test_rows_are_rendered_with_tabs(self, context):
        context.buffer.append_row("a\tb")
        assert text_lines(screen.compose(context))[0] == "a   b" + screen.CLEAR_LINE

    def test_long_rows_are_cut_to_width(self, context):
        context.buffer.append_row("x" * 100)
        assert text_lines(screen.compose(context))[0] == "x" * 40 + screen.CLEAR_LINE

    def test_horizontal_scroll_slices_render(self, context):
        context.buffer.append_row("".join(chr(ord("a") + i % 26) for i in range(60)))
        context.buffer.cursor_col = 50
        frame = screen.compose(context)
        assert context.viewport.col_offset == 11
        expected = context.buffer.rows[0].render[11:51]
        assert text_lines(frame)[0] == expected + screen.CLEAR_LINE

    def test_vertical_scroll(self, context):
        for i in range(20):
            context.buffer.append_row(f"row {i}")
        context.buffer.cursor_line = 15
        lines = text_lines(screen.compose(context))
        assert lines[0] == "row 8" + screen.CLEAR_LINE
        assert lines[-1] == "row 15" + screen.CLEAR_LINE

    def test_welcome_on_empty_buffer(self, context):
        lines = text_lines(screen.compose(context))
        welcome_row = context.viewport.screen_rows // 3
        assert screen.WELCOME in lines[welcome_row]
        assert lines[welcome_row].startswith(screen.EMPTY_ROW)
        assert all(screen.WELCOME not in line for i, line in enumerate(lines) if i != welcome_row)

    def test_no_welcome_once_there_is_text(self, context):
        context.buffer.append_row("hi")
        assert screen.WELCOME.encode() not in screen.compose(context)


class TestFrame:
    """Tests for the frame as a whole."""

    def test_frame_bracketed_by_cursor_hide_and_show(self, context):
        frame = screen.compose(context).decode()
        assert frame.startswith(screen.HIDE_CURSOR + screen.CURSOR_HOME)
        assert frame.endswith(screen.SHOW_CURSOR)

    def test_cursor_placed_at_render_position(self, context):
        context.buffer.append_row("\tabc")
        context.buffer.cursor_col = 2
        frame = screen.compose(context).decode()
        assert frame.endswith("\x1b[1;6H" + screen.SHOW_CURSOR)

    def test_cursor_position_is_relative_to_offsets(self, context):
        for i in range(30):
            context.buffer.append_row("y" * 60)
        context.buffer.cursor_line = 20
        context.buffer.cursor_col = 55
        frame = screen.compose(context).decode()
        assert frame.endswith("\x1b[8;40H" + screen.SHOW_CURSOR)

    def test_refresh_is_a_single_write(self, context, term):
        for i in range(5):
            context.buffer.append_row(f"line {i}")
        screen.refresh_screen(context)
        assert len(term.output) == 1
        assert term.output[0] == screen.compose(context)


class TestStatusBar:
    """Tests for the inverse-video status bar."""

    def test_unnamed_buffer(self, context):
        status = status_line(screen.compose(context))
        assert status.startswith("[No Name] - 0 lines")
        assert status.endswith("1/0")
        assert len(status) == 40

    def test_modified_marker_and_position(self, context):
        context.buffer.filename = "notes.txt"
        context.buffer.append_row("a")
        context.buffer.append_row("b")
        context.buffer.cursor_line = 1
        status = status_line(screen.compose(context))
        assert status.startswith("notes.txt - 2 lines (modified)")
        assert status.endswith("2/2")
        assert len(status) == 40

    def test_long_filename_is_cut(self, context):
        context.buffer.filename = "a_really_long_file_name_indeed.txt"
        status = status_line(screen.compose(context))
        assert status.startswith("a_really_long_file_n - 0 lines")

    def test_wide_characters_keep_bar_width(self, context):
        context.buffer.filename = "日本語.txt"
        status = status_line(screen.compose(context))
        assert screen.text_width(status) == 40


class TestMessageBar:
    """Tests for the transient message line."""

    def test_fresh_message_is_shown(self, context):
        context.set_status_message("hello there")
        frame = screen.compose(context, now=context.status_time + 1)
        assert b"\x1b[Khello there\x1b[" in frame

    def test_old_message_is_hidden(self, context):
        context.set_status_message("hello there")
        frame = screen.compose(context, now=context.status_time + 6)
        assert b"hello there" not in frame

    def test_message_cut_to_width(self, context):
        context.set_status_message("m" * 100)
        frame = screen.compose(context, now=context.status_time)
        assert b"m" * 40 in frame
        assert b"m" * 41 not in frame


class TestShortTerminal:
    """Frames for terminals too short for both bars."""

    def make_context(self, rows):
        return EditorContext(FakeTerminal(size=(rows, 40)), size=(rows, 40))

    @pytest.mark.parametrize("rows", [1, 2, 3, 10])
    def test_frame_fits_the_terminal(self, rows):
        frame = screen.compose(self.make_context(rows)).decode()
        assert frame.count(screen.NEWLINE) == rows - 1

    def test_one_row_has_no_status_bar(self):
        context = self.make_context(1)
        context.buffer.append_row("text")
        frame = screen.compose(context).decode()
        assert screen.INVERT not in frame
        assert "text" in frame

    def test_two_rows_have_no_message_bar(self):
        context = self.make_context(2)
        context.set_status_message("hello there")
        frame = screen.compose(context, now=context.status_time)
        assert screen.INVERT.encode() in frame
        assert b"hello there" not in frame

    def test_cursor_stays_on_the_text_row(self):
        context = self.make_context(2)
        for line in ["one", "two", "three"]:
            context.buffer.append_row(line)
        context.buffer.cursor_line = 2
        frame = screen.compose(context)
        assert frame.endswith((screen.cursor_to(0, 0) + screen.SHOW_CURSOR).encode())
