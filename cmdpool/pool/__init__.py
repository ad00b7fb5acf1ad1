from .scheduler import PoolScheduler
from .types import EmptyCommandError, PoolError, TaskCrashedError

__all__ = ["PoolScheduler", "PoolError", "EmptyCommandError", "TaskCrashedError"]
