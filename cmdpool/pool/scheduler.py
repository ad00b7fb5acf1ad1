from __future__ import annotations

import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Callable, Sequence, TextIO

from cmdpool._logging import get_logger
from cmdpool.executor import TaskExecutor, TaskRecord
from cmdpool.stats import FinalReport, PoolState, StatsAggregator

from .types import EmptyCommandError, PoolError, TaskCrashedError

_log = get_logger("pool")


class PoolScheduler:
    """Runs ``total_tasks`` invocations of one command, at most ``concurrency`` at a time.

    The first ``min(concurrency, total_tasks)`` tasks are launched with
    ``launch_delay`` seconds between them. After that every completion
    launches one replacement, without delay, until all task ids are handed
    out. Task ids are assigned on the calling thread, so they follow launch
    order; completions arrive in whatever order the commands finish.
    """

    def __init__(
        self,
        *,
        quiet: bool = False,
        env: dict[str, str] | None = None,
        working_dir: str | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.quiet = quiet
        self.env = env
        self.working_dir = working_dir
        self.stdout = stdout
        self.stderr = stderr
        self._sleep = sleep
        self.state = PoolState()
        self.records: list[TaskRecord] = []

    def run(
        self,
        total_tasks: int,
        concurrency: int,
        launch_delay: float,
        command: str,
        args: Sequence[str] = (),
    ) -> FinalReport:
        if not command:
            raise EmptyCommandError()
        if concurrency < 1:
            raise PoolError(f"concurrency must be >= 1, got {concurrency}")
        if total_tasks < 0:
            raise PoolError(f"total_tasks must be >= 0, got {total_tasks}")
        if launch_delay < 0:
            raise PoolError(f"launch_delay must be >= 0, got {launch_delay}")

        self.state = PoolState()
        self.records = []
        stats = StatsAggregator(total_tasks)

        if total_tasks == 0:
            _log.info("nothing to run: total_tasks=0")
            return stats.snapshot()

        executor = TaskExecutor(
            self.state,
            quiet=self.quiet,
            env=self.env,
            working_dir=self.working_dir,
            stdout=self.stdout,
            stderr=self.stderr,
        )
        args = list(args)
        initial = min(concurrency, total_tasks)
        _log.info(
            "run start total_tasks=%d concurrency=%d launch_delay=%.3f command=%s",
            total_tasks,
            concurrency,
            launch_delay,
            command,
        )

        start = time.monotonic()
        in_flight: dict[Future[TaskRecord], int] = {}
        with ThreadPoolExecutor(max_workers=initial, thread_name_prefix="cmdpool") as workers:

            def launch() -> None:
                task_id = self.state.next_task_id()
                _log.debug("launching task %d", task_id)
                future = workers.submit(_run_task, executor, stats, task_id, command, args)
                in_flight[future] = task_id

            for n in range(initial):
                launch()
                if launch_delay > 0 and n < initial - 1:
                    self._sleep(launch_delay)

            # stays non-empty until the last task id has been handed out
            while in_flight:
                done, _ = wait(in_flight, return_when=FIRST_COMPLETED)
                for future in done:
                    task_id = in_flight.pop(future)
                    self.records.append(self._collect(future, task_id))
                    if self.state.launched < total_tasks:
                        launch()

        if stats.completed != total_tasks:
            raise PoolError(
                f"pool drained with {stats.completed}/{total_tasks} tasks completed"
            )

        elapsed = time.monotonic() - start
        report = stats.snapshot(elapsed_s=elapsed)
        _log.info(
            "run end completed=%d successful=%d failed=%d elapsed_s=%.3f",
            report.completed,
            report.successful,
            report.failed,
            elapsed,
        )
        return report

    def _collect(self, future: Future[TaskRecord], task_id: int) -> TaskRecord:
        exc = future.exception()
        if exc is not None:
            _log.error("task %d crashed: %s", task_id, exc)
            raise TaskCrashedError(task_id, exc) from exc
        return future.result()


def _run_task(
    executor: TaskExecutor,
    stats: StatsAggregator,
    task_id: int,
    command: str,
    args: list[str],
) -> TaskRecord:
    record = executor.execute(task_id, command, args)
    stats.record(record.outcome, record.duration_s)
    return record
