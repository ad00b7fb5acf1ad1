from __future__ import annotations

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class DurationStats:
    count: int
    average_s: float
    min_s: float
    max_s: float

    @classmethod
    def from_samples(cls, samples: list[float]) -> DurationStats | None:
        if not samples:
            return None
        return cls(
            count=len(samples),
            average_s=sum(samples) / len(samples),
            min_s=min(samples),
            max_s=max(samples),
        )


@dataclass(frozen=True)
class FinalReport:
    total_tasks: int
    completed: int
    successful: int
    failed: int
    success_rate: float
    success_stats: DurationStats | None
    failure_stats: DurationStats | None
    elapsed_s: float = 0.0


class PoolState:
    """Live launch/running counters shared by the scheduler and its workers.

    ``launched`` is only ever advanced by the scheduler thread. ``running`` is
    touched from worker threads, so it sits behind a lock; the value returned
    by ``task_started``/``task_finished`` is the count right after the change.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._launched = 0
        self._running = 0
        self._peak_running = 0

    @property
    def launched(self) -> int:
        return self._launched

    @property
    def running(self) -> int:
        with self._lock:
            return self._running

    @property
    def peak_running(self) -> int:
        with self._lock:
            return self._peak_running

    def next_task_id(self) -> int:
        self._launched += 1
        return self._launched

    def task_started(self) -> int:
        with self._lock:
            self._running += 1
            if self._running > self._peak_running:
                self._peak_running = self._running
            return self._running

    def task_finished(self) -> int:
        with self._lock:
            self._running -= 1
            return self._running
