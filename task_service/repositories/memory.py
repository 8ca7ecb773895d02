"""Dict-backed task repository for tests and local experiments."""

import uuid
from typing import Any

from task_service.exceptions import DuplicateTitleError, TaskNotFoundError
from task_service.models import Task, utcnow
from task_service.repositories.base import UPDATABLE_FIELDS, Clock, TaskRepository


class InMemoryTaskRepository(TaskRepository):
    """Keeps tasks in a dict keyed by id. Nothing is shared between instances."""

    def __init__(self, clock: Clock = utcnow) -> None:
        super().__init__(clock)
        self._tasks: dict[str, Task] = {}

    def create(self, data: dict[str, Any]) -> Task:
        self._ensure_title_available(data["title"])

        now = self._now()
        task = Task(
            id=str(uuid.uuid4()),
            title=data["title"],
            description=data.get("description", ""),
            due_date=data["due_date"],
            status=data.get("status", ""),
            created_at=now,
            updated_at=now,
        )
        self._tasks[task.id] = task
        return task

    def list(self) -> list[Task]:
        return sorted(self._tasks.values(), key=lambda t: (t.created_at, t.id))

    def get_by_id(self, task_id: str) -> Task:
        try:
            return self._tasks[task_id]
        except KeyError:
            raise TaskNotFoundError(task_id) from None

    def update(self, task_id: str, data: dict[str, Any]) -> Task:
        task = self.get_by_id(task_id)
        if data["title"] != task.title:
            self._ensure_title_available(data["title"])

        for field in UPDATABLE_FIELDS:
            if field in data:
                setattr(task, field, data[field])
        task.updated_at = self._now()
        return task

    def update_status(self, task_id: str, status: str) -> Task:
        task = self.get_by_id(task_id)
        task.status = status
        task.updated_at = self._now()
        return task

    def delete(self, task_id: str) -> None:
        self.get_by_id(task_id)
        del self._tasks[task_id]

    def _ensure_title_available(self, title: str) -> None:
        if any(t.title == title for t in self._tasks.values()):
            raise DuplicateTitleError(title)
