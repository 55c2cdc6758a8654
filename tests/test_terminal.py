import io
import re
import threading

import pytest
from rich.console import Console

from conftest import ScreenDriver
from mtprogress.terminal import BRIGHT_GREEN, ConsoleDriver
from mtprogress.utils.gate import TerminalGate


@pytest.fixture
def console(monkeypatch):
    monkeypatch.setenv("TERM", "xterm-256color")
    monkeypatch.delenv("NO_COLOR", raising=False)
    return Console(
        file=io.StringIO(), force_terminal=True, color_system="standard", width=200
    )


def test_move_cursor_is_absolute_and_zero_based(console):
    driver = ConsoleDriver(console)

    driver.move_cursor(0, 3)
    driver.move_cursor(18, 7)

    output = console.file.getvalue()
    assert "\x1b[4;1H" in output
    assert "\x1b[8;19H" in output


def test_color_applies_to_following_text(console):
    driver = ConsoleDriver(console)

    driver.set_color(BRIGHT_GREEN)
    driver.write("#")

    assert re.search(r"\x1b\[92(;49)?m#", console.file.getvalue())


def test_brackets_written_verbatim(console):
    driver = ConsoleDriver(console)

    driver.write("Worker  1 (ID: 7): [   ]   0%")

    assert "Worker  1 (ID: 7): [   ]   0%" in console.file.getvalue()


def test_gate_releases_and_flushes_on_failure():
    screen = ScreenDriver()
    gate = TerminalGate(screen)

    def broken(driver):
        driver.write("partial")
        raise RuntimeError("terminal gone")

    with pytest.raises(RuntimeError):
        gate.with_terminal(broken)

    assert screen.flushes == 1
    gate.with_terminal(lambda driver: driver.write("next"))
    assert screen.flushes == 2


def test_gate_is_exclusive():
    screen = ScreenDriver()
    gate = TerminalGate(screen)
    entered = threading.Event()
    release = threading.Event()
    order = []

    def slow_frame(driver):
        entered.set()
        release.wait(timeout=5)
        order.append("first")

    def fast_frame(driver):
        order.append("second")

    first = threading.Thread(target=gate.with_terminal, args=(slow_frame,))
    first.start()
    entered.wait(timeout=5)
    second = threading.Thread(target=gate.with_terminal, args=(fast_frame,))
    second.start()
    second.join(timeout=0.1)
    assert second.is_alive()

    release.set()
    first.join(timeout=5)
    second.join(timeout=5)
    assert order == ["first", "second"]
