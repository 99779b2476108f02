"""
Shared fixtures: a scripted stand-in for the terminal and a ready editor
context on top of it.
"""
import contextlib

import pytest

from kilo import config, logger
from kilo.__main__ import EditorContext
from kilo.terminal import Terminal


class FakeTerminal(Terminal):
    """Terminal fed from a byte string, recording every write."""

    def __init__(self, data=b"", size=(10, 40)):
        super().__init__(fd_in=-1, fd_out=-1)
        self.input = bytearray(data)
        self.output = []
        self.size = size

    def feed(self, data):
        self.input.extend(data)

    def read_byte(self):
        if not self.input:
            return None
        return self.input.pop(0)

    def write(self, data):
        self.output.append(bytes(data))
        return len(data)

    def raw_mode(self):
        return contextlib.nullcontext()

    def get_window_size(self):
        if self.size is None:
            return super().get_window_size()
        return self.size


@pytest.fixture(autouse=True)
def log_to_tmp(tmp_path, monkeypatch):
    """Keep the debug log out of the working directory."""
    monkeypatch.setattr(logger, "LOG_FILE_PATH", str(tmp_path / "kilo.log"))


@pytest.fixture
def term():
    return FakeTerminal()


@pytest.fixture
def context(term):
    """Editor context on a 10x40 fake terminal (8 text rows), tab stop 4."""
    return EditorContext(term, config.Config(tab_stop=4), size=(10, 40))
