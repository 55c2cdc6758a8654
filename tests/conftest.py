import threading
import time
from collections import defaultdict
from contextlib import contextmanager

import pytest

from mtprogress.terminal import DEFAULT_COLOR, WHITE
from mtprogress.utils.gate import TerminalGate


class ScreenDriver:
    """Terminal driver writing into an in-memory grid of characters."""

    def __init__(self):
        self.cells: dict[int, list[str]] = defaultdict(list)
        self.colors: dict[tuple[int, int], str] = {}
        self.column = 0
        self.row = 0
        self.foreground = WHITE
        self.background = DEFAULT_COLOR
        self.writes: list[tuple[int, int, str]] = []
        self.flushes = 0
        self.clears = 0
        self.cursor_visible = True

    def move_cursor(self, column, row):
        self.column, self.row = column, row

    def set_color(self, foreground, background=DEFAULT_COLOR):
        self.foreground, self.background = foreground, background

    def write(self, text):
        self.writes.append((threading.get_ident(), self.row, text))
        for ch in text:
            if ch == "\n":
                self.row += 1
                self.column = 0
                continue
            line = self.cells[self.row]
            if len(line) <= self.column:
                line.extend(" " * (self.column + 1 - len(line)))
            line[self.column] = ch
            self.colors[(self.row, self.column)] = self.foreground
            self.column += 1

    def flush(self):
        self.flushes += 1

    def clear(self):
        self.clears += 1
        self.cells.clear()
        self.colors.clear()

    def show_cursor(self, show=True):
        self.cursor_visible = show

    def line(self, row):
        return "".join(self.cells.get(row, []))


class RecordingGate(TerminalGate):
    """Gate remembering which thread held it and for how long."""

    def __init__(self, driver):
        super().__init__(driver)
        self.frames: list[tuple[int, float, float]] = []

    @contextmanager
    def hold(self):
        with super().hold() as driver:
            start = time.perf_counter()
            yield driver
            self.frames.append((threading.get_ident(), start, time.perf_counter()))


class ScriptedRandom:
    """Random source failing exactly on the given 1-based steps."""

    def __init__(self, failing_steps=()):
        self.failing_steps = set(failing_steps)
        self.calls: list[str] = []
        self._steps = 0

    def randint(self, a, b):
        self.calls.append("randint")
        self._steps += 1
        return a if self._steps in self.failing_steps else b

    def randrange(self, stop):
        self.calls.append("randrange")
        return 0


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def no_sleep(seconds):
    pass


@pytest.fixture
def screen():
    return ScreenDriver()


@pytest.fixture
def gate(screen):
    return RecordingGate(screen)
