"""
Terminal handling for the kilo text editor.

Puts the controlling terminal into raw mode (and always puts it back), reads
single bytes with a bounded timeout, writes output, and works out the window
size. All failures are reported through the TerminalError hierarchy so the
main loop can clean up the screen and exit with a useful message.
"""
import os
import re
import sys
import termios

from kilo import logger

# Read granularity in tenths of a second (VTIME); reads return after ~100ms
READ_TIMEOUT = 1

CURSOR_REPORT = re.compile(rb"\x1b\[(\d+);(\d+)R?$")

class TerminalError(Exception):
    """Base class for terminal failures. Carries the failing operation."""
    def __init__(self, op: str, strerror: str = ""):
        super().__init__(f"{op}: {strerror}" if strerror else op)
        self.op = op
        self.strerror = strerror

class TerminalConfigError(TerminalError):
    """Getting or setting terminal attributes failed."""

class SizeUnavailable(TerminalError):
    """Neither the size query nor the cursor report gave a window size."""

class InputFailure(TerminalError):
    """Reading from the terminal failed for a reason other than a timeout."""

class ParseError(TerminalError):
    """The terminal answered a cursor-position request with garbage."""

def make_raw(attrs: list) -> list:
    """
    Return a copy of termios attributes `attrs` switched to raw mode.

    Input: no CR->NL translation, no software flow control, no break
    signal, no parity check, no 8th-bit stripping. Output: no
    post-processing. 8-bit characters. Local: no echo, no canonical mode,
    no extended input processing, no signal keys. Reads return as soon as
    any byte is available or after READ_TIMEOUT tenths of a second.
    """
    iflag, oflag, cflag, lflag, ispeed, ospeed, cc = attrs
    iflag &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK |
               termios.ISTRIP | termios.IXON)
    oflag &= ~termios.OPOST
    cflag |= termios.CS8
    lflag &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    cc = list(cc)
    cc[termios.VMIN] = 0
    cc[termios.VTIME] = READ_TIMEOUT
    return [iflag, oflag, cflag, lflag, ispeed, ospeed, cc]

class RawMode:
    """
    Raw mode as a scoped resource.

        with RawMode(fd):
            ...  # terminal is raw here, restored on any way out

    The original attributes are captured once on entry and restored exactly
    once, whether the block returns normally or raises.
    """
    def __init__(self, fd: int):
        self.fd = fd
        self.original = None
        self.active = False

    def enter(self):
        try:
            self.original = termios.tcgetattr(self.fd)
        except termios.error as e:
            raise TerminalConfigError("tcgetattr", _strerror(e)) from e
        raw = make_raw(self.original)
        try:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, raw)
        except termios.error as e:
            raise TerminalConfigError("tcsetattr", _strerror(e)) from e
        self.active = True
        return self

    def restore(self):
        """Put the original attributes back. Safe to call more than once."""
        if not self.active:
            return
        self.active = False
        try:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, self.original)
        except termios.error as e:
            raise TerminalConfigError("tcsetattr", _strerror(e)) from e

    def __enter__(self):
        return self.enter()

    def __exit__(self, exc_type, exc, tb):
        self.restore()
        return False

class Terminal:
    """Byte-level access to the controlling terminal."""
    def __init__(self, fd_in: int = None, fd_out: int = None):
        self.fd_in = sys.stdin.fileno() if fd_in is None else fd_in
        self.fd_out = sys.stdout.fileno() if fd_out is None else fd_out

    def raw_mode(self) -> RawMode:
        return RawMode(self.fd_in)

    def read_byte(self):
        """
        Read one byte. Returns the byte as an int, or None when the read
        timed out with nothing available.
        """
        try:
            data = os.read(self.fd_in, 1)
        except BlockingIOError:
            return None
        except OSError as e:
            raise InputFailure("read", e.strerror or str(e)) from e
        if not data:
            return None
        return data[0]

    def write(self, data: bytes) -> int:
        """Write `data` in a single call."""
        return os.write(self.fd_out, data)

    def get_cursor_position(self):
        """
        Ask the terminal where the cursor is. Returns (row, col), or None if
        the request could not be sent or the reply did not parse.
        """
        try:
            if self.write(b"\x1b[6n") != 4:
                return None
        except OSError as e:
            logger.log_error("cursor position request", e)
            return None
        reply = bytearray()
        while len(reply) < 31:
            byte = self.read_byte()
            if byte is None:
                break
            reply.append(byte)
            if byte == ord("R"):
                break
        try:
            return parse_cursor_report(bytes(reply))
        except ParseError as e:
            logger.log(f"bad cursor report {bytes(reply)!r}: {e}")
            return None

    def get_window_size(self):
        """
        Return (rows, cols). Tries the ioctl size query first and falls back
        to pushing the cursor to the bottom-right corner and reading its
        position back.
        """
        try:
            size = os.get_terminal_size(self.fd_out)
        except OSError:
            size = None
        if size is not None and size.columns > 0:
            return size.lines, size.columns

        try:
            written = self.write(b"\x1b[999C\x1b[999B")
        except OSError as e:
            raise SizeUnavailable("getWindowSize", e.strerror or str(e)) from e
        if written != 12:
            raise SizeUnavailable("getWindowSize", "short write")
        position = self.get_cursor_position()
        if position is None:
            raise SizeUnavailable("getWindowSize", "no cursor position report")
        return position

def parse_cursor_report(reply: bytes):
    """Parse a ``ESC[{rows};{cols}R`` reply into (rows, cols)."""
    match = CURSOR_REPORT.match(reply)
    if not match:
        raise ParseError("getCursorPosition", f"unexpected reply {reply!r}")
    return int(match.group(1)), int(match.group(2))

def _strerror(err) -> str:
    """Pull the human-readable part out of a termios.error."""
    if len(err.args) > 1:
        return str(err.args[1])
    return str(err)
