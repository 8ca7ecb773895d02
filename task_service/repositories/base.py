"""Repository interface for task persistence."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable

from task_service.models import Task, utcnow


Clock = Callable[[], datetime]

# Fields a full update may replace; anything else in the payload is ignored.
UPDATABLE_FIELDS = ("title", "description", "due_date", "status")


class TaskRepository(ABC):
    """CRUD operations on tasks.

    Implementations assign ids and timestamps and raise
    ``TaskNotFoundError`` / ``DuplicateTitleError`` from
    ``task_service.exceptions``.
    """

    def __init__(self, clock: Clock = utcnow) -> None:
        self._clock = clock

    def _now(self) -> datetime:
        return self._clock()

    @abstractmethod
    def create(self, data: dict[str, Any]) -> Task:
        """Persist a new task and return it with id and timestamps set."""

    @abstractmethod
    def list(self) -> list[Task]:
        """Return all tasks, oldest first."""

    @abstractmethod
    def get_by_id(self, task_id: str) -> Task:
        """Return the task with ``task_id``."""

    @abstractmethod
    def update(self, task_id: str, data: dict[str, Any]) -> Task:
        """Replace the task's fields, keeping its id and created_at."""

    @abstractmethod
    def update_status(self, task_id: str, status: str) -> Task:
        """Change only the status (and updated_at) of a task."""

    @abstractmethod
    def delete(self, task_id: str) -> None:
        """Remove the task with ``task_id``."""
