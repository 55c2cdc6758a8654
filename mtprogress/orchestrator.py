import logging
import threading
import time
from collections.abc import Callable

from mtprogress.config import DemoSettings
from mtprogress.schemas import WorkerReport
from mtprogress.terminal import WHITE, TerminalDriver
from mtprogress.utils.gate import TerminalGate
from mtprogress.worker import CalculationTask, row_for

logger = logging.getLogger(__name__)

BANNER = "Multi-threaded calculation with progress bars (errors are marked in red):\n\n"
COMPLETION_BANNER = "\nAll workers finished.\n"


class WorkersFailedError(RuntimeError):
    def __init__(self, failed: dict[int, Exception]):
        self.failed: dict[int, Exception] = failed
        ids = ", ".join(str(worker_id) for worker_id in failed)
        super().__init__(f"workers crashed: {ids}")


def _print_banner(driver: TerminalDriver) -> None:
    driver.clear()
    driver.show_cursor(False)
    driver.move_cursor(0, 0)
    driver.set_color(WHITE)
    driver.write(BANNER)


def _finish(driver: TerminalDriver, row: int, text: str) -> None:
    driver.move_cursor(0, row)
    driver.set_color(WHITE)
    driver.write(text)
    driver.show_cursor(True)


def run(
    settings: DemoSettings,
    gate: TerminalGate,
    display_id: int | None = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.perf_counter,
) -> list[WorkerReport]:
    """Draw one progress bar per worker and wait for all of them.

    Raises `WorkersFailedError` when any worker thread died before drawing
    its summary; the completion banner is not printed in that case.
    """
    gate.with_terminal(_print_banner)

    tasks: list[CalculationTask] = []
    threads: list[threading.Thread] = []
    for worker_id in range(1, settings.worker_count + 1):
        task = CalculationTask(
            worker_id=worker_id,
            bar_length=settings.bar_length,
            row=row_for(worker_id, settings.base_row),
            gate=gate,
            rng=settings.rng_for(worker_id),
            display_id=display_id,
            sleep=sleep,
            clock=clock,
        )
        thread = threading.Thread(
            target=task, name=f"worker-{worker_id}", daemon=True
        )
        tasks.append(task)
        threads.append(thread)

    for thread in threads:
        thread.start()
    logger.info(f"started {len(threads)} workers")

    below_rows = settings.base_row + settings.worker_count + 1
    try:
        for thread in threads:
            thread.join()
    except KeyboardInterrupt:
        logger.error("program killed")
        with gate.hold() as held:
            _finish(held, below_rows, "\n")
        raise

    failed = {
        task.worker_id: task.error or RuntimeError("no report")
        for task in tasks
        if task.report is None
    }
    if failed:
        for worker_id, error in failed.items():
            logger.error(f"worker {worker_id} crashed: {error!r}")
        with gate.hold() as held:
            _finish(held, below_rows, "\n")
        raise WorkersFailedError(failed)

    gate.with_terminal(lambda held: _finish(held, below_rows, COMPLETION_BANNER))

    reports = [task.report for task in tasks if task.report is not None]
    logger.info(
        f"all workers finished, total errors: {sum(r.error_count for r in reports)}"
    )
    return reports
