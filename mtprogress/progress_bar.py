import random
import time
from collections.abc import Callable

from mtprogress.schemas import ProgressState, StepOutcome, WorkerReport
from mtprogress.terminal import BRIGHT_GREEN, BRIGHT_RED, WHITE, TerminalDriver
from mtprogress.utils.gate import TerminalGate

SUCCESS_GLYPH = "#"
FAILURE_GLYPH = "!"
EMPTY_GLYPH = " "

# 1 out of FAILURE_OUTCOMES draws is a failed step
FAILURE_OUTCOMES = 10
MIN_STEP_MS = 50
STEP_SPREAD_MS = 150


def format_label(worker_id: int, display_id: int) -> str:
    return f"Worker {worker_id:2d} (ID: {display_id}): ["


def format_percent(percent: int) -> str:
    return f"] {percent:3d}%"


class ProgressBar:
    def __init__(
        self,
        worker_id: int,
        display_id: int,
        length: int,
        row: int,
        gate: TerminalGate,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self._gate: TerminalGate = gate
        self._sleep: Callable[[float], None] = sleep
        self._clock: Callable[[], float] = clock
        self._label: str = format_label(worker_id, display_id)

        self.length: int = length
        self.state: ProgressState = ProgressState(
            worker_id=worker_id,
            row=row,
            total_steps=length,
            started_at=clock(),
            rng=rng if rng is not None else random.Random(worker_id),
        )
        self.render_initial()

    @property
    def bar_column(self) -> int:
        return len(self._label)

    @property
    def summary_column(self) -> int:
        # one blank column after "] 100%"
        return self.bar_column + self.length + len(format_percent(100)) + 1

    def is_complete(self) -> bool:
        return self.state.is_complete

    def render_initial(self) -> None:
        def draw(driver: TerminalDriver) -> None:
            driver.move_cursor(0, self.state.row)
            driver.set_color(WHITE)
            driver.write(self._label)
            driver.write(EMPTY_GLYPH * self.length)
            driver.write(format_percent(0))

        self._gate.with_terminal(draw)

    def perform_step(self) -> StepOutcome:
        """Simulate one unit of work.

        The failure draw comes before the duration draw; both use the
        worker's own generator, so a given seed always yields the same
        sequence of outcomes.
        """
        rng = self.state.rng
        failed = rng.randint(1, FAILURE_OUTCOMES) == 1
        duration_ms = MIN_STEP_MS + rng.randrange(STEP_SPREAD_MS)
        self._sleep(duration_ms / 1000)
        return StepOutcome.FAILURE if failed else StepOutcome.SUCCESS

    def advance_one_step(self) -> StepOutcome | None:
        if self.state.is_complete:
            return None

        outcome = self.perform_step()
        self.state.record(outcome)
        self._gate.with_terminal(self._draw_bar)
        return outcome

    def _draw_bar(self, driver: TerminalDriver) -> None:
        driver.move_cursor(self.bar_column, self.state.row)
        for i, failed in enumerate(self.state.step_outcomes):
            if i >= self.state.completed_steps:
                driver.set_color(WHITE)
                driver.write(EMPTY_GLYPH)
            elif failed:
                driver.set_color(BRIGHT_RED)
                driver.write(FAILURE_GLYPH)
            else:
                driver.set_color(BRIGHT_GREEN)
                driver.write(SUCCESS_GLYPH)

        driver.set_color(WHITE)
        driver.write(format_percent(self.state.percent))

    def render_final(self) -> WorkerReport:
        elapsed_ms = int((self._clock() - self.state.started_at) * 1000)
        error_count = self.state.error_count

        def draw(driver: TerminalDriver) -> None:
            driver.move_cursor(self.summary_column, self.state.row)
            if error_count > 0:
                driver.set_color(BRIGHT_RED)
                driver.write(f" Errors: {error_count} ")
            driver.set_color(WHITE)
            driver.write(f" Time: {elapsed_ms} ms")

        self._gate.with_terminal(draw)

        return WorkerReport(
            worker_id=self.state.worker_id,
            row=self.state.row,
            error_count=error_count,
            elapsed_ms=elapsed_ms,
        )
