import datetime as dt
import os
import subprocess
import sys
import threading
import time
from typing import Sequence, TextIO

from cmdpool._logging import get_logger
from cmdpool.stats import PoolState

from .types import ExitFailure, Outcome, SpawnError, Success, TaskRecord

_log = get_logger("executor")


def _now_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat().replace("+00:00", "Z")


class TaskExecutor:
    def __init__(
        self,
        state: PoolState,
        *,
        quiet: bool = False,
        env: dict[str, str] | None = None,
        working_dir: str | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ):
        self.state = state
        self.quiet = quiet
        self.env = env or {}
        self.working_dir = working_dir
        self._stdout = stdout
        self._stderr = stderr
        self._output_lock = threading.Lock()

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr if self._stderr is not None else sys.stderr

    def execute(self, task_id: int, command: str, args: Sequence[str] = ()) -> TaskRecord:
        running = self.state.task_started()
        self._emit(f"[Task {task_id}] Starting... (Running: {running})")

        start_time = _now_iso()
        start = time.monotonic()
        try:
            result = subprocess.run(
                [command, *args],
                cwd=self.working_dir or None,
                env={**os.environ, **self.env} if self.env else None,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
            )
        except (OSError, ValueError, subprocess.SubprocessError) as exc:
            duration = time.monotonic() - start
            _log.warning("task %d could not be spawned: %s", task_id, exc)
            record = TaskRecord(task_id, start_time, duration, SpawnError(str(exc)))
        else:
            duration = time.monotonic() - start
            record = TaskRecord(
                task_id,
                start_time,
                duration,
                _classify(result.returncode),
                result.stdout or "",
                result.stderr or "",
            )

        running = self.state.task_finished()
        self._report_finish(record, running)
        return record

    def _report_finish(self, record: TaskRecord, running: int) -> None:
        tid = record.task_id
        _log.debug(
            "task %d finished outcome=%s duration_s=%.3f",
            tid,
            type(record.outcome).__name__,
            record.duration_s,
        )
        with self._output_lock:
            print(
                f"[Task {tid}] Finished: {record.outcome.summary()} (Running: {running})",
                file=self.stdout,
            )
            if not self.quiet and record.stdout:
                print(f"[Task {tid}] Stdout:\n{record.stdout}", file=self.stdout)
            if record.stderr:
                print(f"[Task {tid}] Stderr:\n{record.stderr}", file=self.stderr)

    def _emit(self, line: str) -> None:
        with self._output_lock:
            print(line, file=self.stdout)


def _classify(returncode: int) -> Outcome:
    if returncode == 0:
        return Success(returncode)
    if returncode < 0:
        return ExitFailure(exit_code=None, signal=-returncode)
    return ExitFailure(returncode)
