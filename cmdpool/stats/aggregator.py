from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from .types import DurationStats, FinalReport

if TYPE_CHECKING:
    from cmdpool.executor.types import Outcome


class StatsAggregator:
    """Thread-safe tally of completed tasks and their durations.

    Each ``record`` call bumps the counters and appends to the matching
    duration log under one lock, so the counts always agree with the log
    lengths.
    """

    def __init__(self, total_tasks: int):
        self.total_tasks = total_tasks
        self._lock = threading.Lock()
        self._completed = 0
        self._successful = 0
        self._failed = 0
        self._success_durations: list[float] = []
        self._failure_durations: list[float] = []

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    def record(self, outcome: Outcome, duration_s: float) -> None:
        with self._lock:
            self._completed += 1
            if outcome.is_success:
                self._successful += 1
                self._success_durations.append(duration_s)
            else:
                self._failed += 1
                self._failure_durations.append(duration_s)

    def snapshot(self, elapsed_s: float = 0.0) -> FinalReport:
        with self._lock:
            completed = self._completed
            successful = self._successful
            failed = self._failed
            success_durations = list(self._success_durations)
            failure_durations = list(self._failure_durations)

        if self.total_tasks > 0:
            success_rate = successful / self.total_tasks * 100.0
        else:
            success_rate = 0.0

        return FinalReport(
            total_tasks=self.total_tasks,
            completed=completed,
            successful=successful,
            failed=failed,
            success_rate=success_rate,
            success_stats=DurationStats.from_samples(success_durations),
            failure_stats=DurationStats.from_samples(failure_durations),
            elapsed_s=elapsed_s,
        )
