"""
Key decoding for the kilo text editor.

Turns the raw byte stream from the terminal into key codes. Plain bytes come
through unchanged; escape sequences for the navigation keys are folded into
the matching curses key constants so the rest of the editor can compare
against curses.KEY_UP and friends.

Decoding is a small state machine. Each state waits for one more byte with
the terminal's read timeout; running out of time, or seeing a byte no
sequence expects, gives up and reports a plain Escape.
"""
import curses
import curses.ascii
import enum

ESC = curses.ascii.ESC
BACKSPACE = curses.ascii.DEL
ENTER = curses.ascii.CR

# Keys that delete a character in prompts and in the text
DELETE_KEYS = (curses.KEY_BACKSPACE, curses.KEY_DC, curses.ascii.ctrl(ord("h")))

def key_to_text(key: int):
    """
    Text a typed byte stands for, or None for control and named keys.
    Bytes above 0x7f map to surrogate escapes so they reach the file unchanged.
    """
    if 32 <= key <= 126:
        return chr(key)
    if 0x80 <= key <= 0xff:
        return bytes([key]).decode("utf-8", "surrogateescape")
    return None

class State(enum.Enum):
    IDLE = "idle"
    ESCAPE = "escape"                # saw ESC
    BRACKET = "bracket"              # saw ESC [
    BRACKET_DIGIT = "bracket_digit"  # saw ESC [ <digit>
    SAW_O = "saw_o"                  # saw ESC O

# ESC [ <letter>
BRACKET_KEYS = {
    ord("A"): curses.KEY_UP,
    ord("B"): curses.KEY_DOWN,
    ord("C"): curses.KEY_RIGHT,
    ord("D"): curses.KEY_LEFT,
    ord("H"): curses.KEY_HOME,
    ord("F"): curses.KEY_END,
}

# ESC [ <digit> ~   (1/7 and 4/8 are the rxvt and xterm spellings of Home/End)
TILDE_KEYS = {
    ord("1"): curses.KEY_HOME,
    ord("3"): curses.KEY_DC,
    ord("4"): curses.KEY_END,
    ord("5"): curses.KEY_PPAGE,
    ord("6"): curses.KEY_NPAGE,
    ord("7"): curses.KEY_HOME,
    ord("8"): curses.KEY_END,
}

# ESC O <letter>
SS3_KEYS = {
    ord("H"): curses.KEY_HOME,
    ord("F"): curses.KEY_END,
}

def transition(state: State, byte: int, digit: int = None):
    """
    Feed one byte to the decoder in `state`.

    Returns (next_state, digit, key). `key` is None while a sequence is
    still in progress; once it is set the decoder is back in IDLE. `digit`
    carries the number seen in ESC [ <digit> until the closing ~ arrives.
    """
    if state is State.IDLE:
        if byte == ESC:
            return State.ESCAPE, None, None
        if byte == BACKSPACE:
            return State.IDLE, None, curses.KEY_BACKSPACE
        return State.IDLE, None, byte

    if state is State.ESCAPE:
        if byte == ord("["):
            return State.BRACKET, None, None
        if byte == ord("O"):
            return State.SAW_O, None, None

    elif state is State.BRACKET:
        if ord("0") <= byte <= ord("9"):
            return State.BRACKET_DIGIT, byte, None
        if byte in BRACKET_KEYS:
            return State.IDLE, None, BRACKET_KEYS[byte]

    elif state is State.BRACKET_DIGIT:
        if byte == ord("~") and digit in TILDE_KEYS:
            return State.IDLE, None, TILDE_KEYS[digit]

    elif state is State.SAW_O:
        if byte in SS3_KEYS:
            return State.IDLE, None, SS3_KEYS[byte]

    return State.IDLE, None, ESC

class KeyDecoder:
    """Reads whole keys from `read_byte`, a callable returning an int or None on timeout."""
    def __init__(self, read_byte):
        self.read_byte = read_byte

    def read_key(self) -> int:
        """Block until a key arrives and return its code."""
        byte = self.read_byte()
        while byte is None:
            byte = self.read_byte()

        state, digit, key = transition(State.IDLE, byte)
        while key is None:
            byte = self.read_byte()
            if byte is None:
                return ESC
            state, digit, key = transition(state, byte, digit)
        return key
