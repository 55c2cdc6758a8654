from collections.abc import Callable, Iterator
from contextlib import contextmanager
from threading import Lock

from mtprogress.terminal import TerminalDriver


class TerminalGate:
    """Serializes every frame drawn on the shared terminal.

    Cursor position is global terminal state, so a move and the writes that
    follow it must happen under one acquisition.
    """

    def __init__(self, driver: TerminalDriver):
        self._driver: TerminalDriver = driver
        self._lock: Lock = Lock()

    @contextmanager
    def hold(self) -> Iterator[TerminalDriver]:
        with self._lock:
            try:
                yield self._driver
            finally:
                self._driver.flush()

    def with_terminal(self, action: Callable[[TerminalDriver], None]) -> None:
        with self.hold() as driver:
            action(driver)
