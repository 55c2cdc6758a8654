from typing import Protocol

from rich.console import Console
from rich.control import Control
from rich.style import Style

DEFAULT_COLOR = "default"
WHITE = "white"
BRIGHT_GREEN = "bright_green"
BRIGHT_RED = "bright_red"


class TerminalDriver(Protocol):
    """Absolute cursor positioning and color selection on a terminal.

    Every call mutates shared terminal state, so callers must hold the
    `TerminalGate` while using a driver.
    """

    def move_cursor(self, column: int, row: int) -> None: ...

    def set_color(self, foreground: str, background: str = DEFAULT_COLOR) -> None: ...

    def write(self, text: str) -> None: ...

    def flush(self) -> None: ...

    def clear(self) -> None: ...

    def show_cursor(self, show: bool = True) -> None: ...


class ConsoleDriver:
    def __init__(self, console: Console | None = None):
        self.console: Console = console or Console(highlight=False)
        self._style: Style = Style(color=WHITE, bgcolor=DEFAULT_COLOR)

    def move_cursor(self, column: int, row: int) -> None:
        # rich coordinates are 0-based
        self.console.control(Control.move_to(column, row))

    def set_color(self, foreground: str, background: str = DEFAULT_COLOR) -> None:
        self._style = Style(color=foreground, bgcolor=background)

    def write(self, text: str) -> None:
        self.console.out(text, style=self._style, highlight=False, end="")

    def flush(self) -> None:
        self.console.file.flush()

    def clear(self) -> None:
        self.console.clear()

    def show_cursor(self, show: bool = True) -> None:
        self.console.show_cursor(show)
