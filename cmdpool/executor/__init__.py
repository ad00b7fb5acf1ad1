from .executor import TaskExecutor
from .types import ExitFailure, Outcome, SpawnError, Success, TaskRecord

__all__ = [
    "TaskExecutor",
    "TaskRecord",
    "Outcome",
    "Success",
    "ExitFailure",
    "SpawnError",
]
