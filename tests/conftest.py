"""Shared fakes for terminal-facing tests."""

from contextlib import contextmanager

import pytest


class RecordingSink:
    """Sink that records calls and keeps a virtual screen of glyphs and colors."""

    def __init__(self, width, height):
        self.width = width
        self.height = height
        self.calls = []
        self.screen_cells = {}
        self._pos = (0, 0)
        self._colors = None
        self.flushes = 0

    def clear(self):
        self.calls.append(('clear',))
        self.screen_cells = {}
        self._pos = (0, 0)

    def move(self, x, y):
        self.calls.append(('move', x, y))
        self._pos = (x, y)

    def set_colors(self, fg, bg):
        self.calls.append(('set_colors', fg, bg))
        self._colors = (fg, bg)

    def write(self, text):
        self.calls.append(('write', text))
        x, y = self._pos
        for ch in text:
            self.screen_cells[(x, y)] = (ch,) + self._colors
            x += 1
        self._pos = (x, y)

    def flush(self):
        self.flushes += 1

    def count(self, name):
        return sum(1 for call in self.calls if call[0] == name)

    def row_text(self, y):
        return ''.join(self.screen_cells.get((x, y), (' ',))[0] for x in range(self.width))


class FakeTerminal(RecordingSink):
    """Terminal stand-in for Editor tests: fixed size, scripted key tokens."""

    def __init__(self, width=80, height=24, keys=None):
        super().__init__(width, height)
        self.keys = list(keys or [])
        self.entered = False
        self.restored = False

    def get_key(self, timeout=None):
        if self.keys:
            return self.keys.pop(0)
        return None

    @contextmanager
    def screen(self):
        try:
            self.entered = True
            yield self
        finally:
            self.restored = True


@pytest.fixture
def sink():
    return RecordingSink(10, 3)


@pytest.fixture
def make_terminal():
    def factory(width=80, height=24, keys=None):
        return FakeTerminal(width, height, keys)
    return factory
