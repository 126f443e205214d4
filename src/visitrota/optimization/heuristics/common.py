"""Shared state helpers for the rotation heuristics (run deadline, pairing table)."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field

from visitrota.core.errors import GenerationTimeoutError

DEFAULT_TIME_BUDGET_SECONDS = 240.0

Clock = Callable[[], float]


@dataclass(slots=True)
class RunDeadline:
    """Cooperative wall-clock budget for a single generation run."""

    budget: float = DEFAULT_TIME_BUDGET_SECONDS
    clock: Clock = time.perf_counter
    _start: float = field(default=0.0, init=False)

    def __post_init__(self) -> None:
        if self.budget <= 0:
            raise ValueError(f"time budget must be positive, got {self.budget}")
        self._start = self.clock()

    def elapsed(self) -> float:
        return self.clock() - self._start

    def check(self, *, position: int, week: int) -> None:
        """Raise :class:`GenerationTimeoutError` once the budget is spent."""
        elapsed = self.elapsed()
        if elapsed > self.budget:
            raise GenerationTimeoutError(
                position=position, week=week, elapsed=elapsed, budget=self.budget
            )


class PairTable:
    """Dense ``deacon x household`` visit counter."""

    __slots__ = ("_rows",)

    def __init__(self, deacon_count: int, household_count: int) -> None:
        self._rows = [[0] * household_count for _ in range(deacon_count)]

    def get(self, deacon_index: int, household_index: int) -> int:
        return self._rows[deacon_index][household_index]

    def increment(self, deacon_index: int, household_index: int) -> None:
        self._rows[deacon_index][household_index] += 1

    def as_lists(self) -> list[list[int]]:
        return [row.copy() for row in self._rows]


__all__ = ["DEFAULT_TIME_BUDGET_SECONDS", "Clock", "RunDeadline", "PairTable"]
