from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List


Clock = Callable[[], float]


@dataclass(frozen=True)
class StepTiming:
    name: str
    started_at: float
    finished_at: float

    @property
    def duration_s(self) -> float:
        return self.finished_at - self.started_at


class StepTimer:
    """Records how long each named stage of a session load takes."""

    def __init__(self, *, clock: Clock = time.perf_counter) -> None:
        self._clock = clock
        self.steps: List[StepTiming] = []

    @property
    def clock(self) -> Clock:
        return self._clock

    @contextmanager
    def step(self, name: str) -> Iterator[None]:
        started_at = self._clock()
        try:
            yield
        finally:
            finished_at = self._clock()
            self.steps.append(
                StepTiming(
                    name=name,
                    started_at=started_at,
                    finished_at=finished_at,
                )
            )

    def as_dict(self) -> dict[str, float]:
        return {step.name: step.duration_s for step in self.steps}
