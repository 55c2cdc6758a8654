import random
from dataclasses import dataclass, field
from enum import Enum


class StepOutcome(Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class ProgressState:
    worker_id: int
    row: int
    total_steps: int
    started_at: float
    rng: random.Random
    completed_steps: int = 0
    step_outcomes: list[bool] = field(default_factory=list)

    def __post_init__(self):
        if not self.step_outcomes:
            self.step_outcomes = [False] * self.total_steps

    @property
    def is_complete(self) -> bool:
        return self.completed_steps >= self.total_steps

    @property
    def percent(self) -> int:
        return 100 * self.completed_steps // self.total_steps

    @property
    def error_count(self) -> int:
        return sum(self.step_outcomes[: self.completed_steps])

    def record(self, outcome: StepOutcome) -> None:
        if self.is_complete:
            raise ValueError(f"worker {self.worker_id}: all steps already recorded")
        # slot of the step being completed
        self.step_outcomes[self.completed_steps] = outcome is StepOutcome.FAILURE
        self.completed_steps += 1


@dataclass
class WorkerReport:
    worker_id: int
    row: int
    error_count: int
    elapsed_ms: int
