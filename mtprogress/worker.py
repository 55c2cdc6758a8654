import logging
import random
import threading
import time
import traceback
from collections.abc import Callable

from mtprogress.progress_bar import ProgressBar
from mtprogress.schemas import StepOutcome, WorkerReport
from mtprogress.utils.gate import TerminalGate

logger = logging.getLogger("CalculationTask")


def row_for(worker_id: int, base_row: int) -> int:
    return base_row + worker_id


class CalculationTask:
    def __init__(
        self,
        worker_id: int,
        bar_length: int,
        row: int,
        gate: TerminalGate,
        rng: random.Random | None = None,
        display_id: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.worker_id: int = worker_id
        self.bar_length: int = bar_length
        self.row: int = row

        self._gate: TerminalGate = gate
        self._rng: random.Random | None = rng
        self._display_id: int | None = display_id
        self._sleep: Callable[[float], None] = sleep
        self._clock: Callable[[], float] = clock

        self.logger: logging.LoggerAdapter[logging.Logger] = logging.LoggerAdapter(
            logger, {"worker_id": str(self.worker_id)}
        )
        self.report: WorkerReport | None = None
        self.error: Exception | None = None

    def __call__(self) -> None:
        """Run the simulated calculation to the last step.

        A failed step is recorded on the bar and the loop goes on, so the
        task always performs exactly `bar_length` steps. Any other exception
        (a broken terminal) ends the task and is kept in `error`.
        """
        self.logger.info(f"Task started on row {self.row}")
        try:
            self.report = self._calculate()
        except Exception as e:
            self.error = e
            self.logger.error(traceback.format_exc())
            return

        self.logger.info(
            f"Task finished: errors {self.report.error_count}, "
            f"time {self.report.elapsed_ms} ms"
        )

    def _calculate(self) -> WorkerReport:
        display_id = self._display_id
        if display_id is None:
            display_id = threading.get_native_id()

        bar = ProgressBar(
            worker_id=self.worker_id,
            display_id=display_id,
            length=self.bar_length,
            row=self.row,
            gate=self._gate,
            rng=self._rng,
            sleep=self._sleep,
            clock=self._clock,
        )

        while not bar.is_complete():
            outcome = bar.advance_one_step()
            if outcome is StepOutcome.FAILURE:
                self.logger.debug(
                    f"step {bar.state.completed_steps}/{self.bar_length} failed"
                )

        return bar.render_final()
