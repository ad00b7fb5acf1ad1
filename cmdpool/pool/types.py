class PoolError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class EmptyCommandError(PoolError):
    def __init__(self) -> None:
        super().__init__("No command provided to execute.")


class TaskCrashedError(PoolError):
    def __init__(self, task_id: int, cause: BaseException):
        super().__init__(f"Task {task_id} crashed: {type(cause).__name__}: {cause}")
        self.task_id = task_id
