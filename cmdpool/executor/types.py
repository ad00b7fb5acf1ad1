from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Success:
    exit_code: int = 0

    @property
    def is_success(self) -> bool:
        return True

    def summary(self) -> str:
        return f"Success (Exit Code: {self.exit_code})"


@dataclass(frozen=True)
class ExitFailure:
    # exit_code is None when the process was killed by a signal
    exit_code: int | None
    signal: int | None = None

    @property
    def is_success(self) -> bool:
        return False

    def summary(self) -> str:
        if self.exit_code is None and self.signal is not None:
            return f"Failed (Terminated by signal {self.signal})"
        return f"Failed (Exit Code: {self.exit_code if self.exit_code is not None else 0})"


@dataclass(frozen=True)
class SpawnError:
    message: str

    @property
    def exit_code(self) -> None:
        return None

    @property
    def is_success(self) -> bool:
        return False

    def summary(self) -> str:
        return f"Error: {self.message}"


Outcome = Success | ExitFailure | SpawnError


@dataclass(frozen=True)
class TaskRecord:
    task_id: int
    start_time: str
    duration_s: float
    outcome: Outcome
    stdout: str = ""
    stderr: str = ""
