"""Domain exceptions raised by task repositories."""


class TaskServiceError(Exception):
    """Base class for task service errors; raised directly for unclassified failures (500)."""

    status_code = 500
    message = "Internal server error"


class TaskNotFoundError(TaskServiceError):
    """No task exists with the requested id."""

    status_code = 404
    message = "Task not found"

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class DuplicateTitleError(TaskServiceError):
    """Another task already uses the title."""

    status_code = 409
    message = "Task with the same title already exists"

    def __init__(self, title: str) -> None:
        super().__init__(f"Task with title {title!r} already exists")
        self.title = title
