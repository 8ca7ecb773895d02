"""SQLAlchemy-backed task repository."""

import logging
import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, scoped_session

from task_service.exceptions import DuplicateTitleError, TaskNotFoundError
from task_service.models import Task, utcnow
from task_service.repositories.base import UPDATABLE_FIELDS, Clock, TaskRepository


logger = logging.getLogger(__name__)


class SQLAlchemyTaskRepository(TaskRepository):
    """Task repository issuing single-row statements through an ORM session.

    The session is injected by the caller. Inside a Flask app this is
    ``db.session``, a scoped session bound to the current app context.
    """

    def __init__(self, session: Session | scoped_session, clock: Clock = utcnow) -> None:
        super().__init__(clock)
        self._session = session

    # ── CREATE ────────────────────────────────────────────

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
        self._session.add(task)
        self._commit(task.title)
        return task

    # ── READ ──────────────────────────────────────────────

    def list(self) -> list[Task]:
        stmt = select(Task).order_by(Task.created_at, Task.id)
        return list(self._session.scalars(stmt))

    def get_by_id(self, task_id: str) -> Task:
        task = self._session.get(Task, task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    # ── UPDATE ────────────────────────────────────────────

    def update(self, task_id: str, data: dict[str, Any]) -> Task:
        task = self.get_by_id(task_id)
        if data["title"] != task.title:
            self._ensure_title_available(data["title"])

        for field in UPDATABLE_FIELDS:
            if field in data:
                setattr(task, field, data[field])
        task.updated_at = self._now()
        self._commit(task.title)
        return task

    def update_status(self, task_id: str, status: str) -> Task:
        task = self.get_by_id(task_id)
        task.status = status
        task.updated_at = self._now()
        self._commit(task.title)
        return task

    # ── DELETE ────────────────────────────────────────────

    def delete(self, task_id: str) -> None:
        task = self.get_by_id(task_id)
        self._session.delete(task)
        self._commit(task.title)

    # ── helpers ───────────────────────────────────────────

    def _ensure_title_available(self, title: str) -> None:
        stmt = select(Task.id).where(Task.title == title)
        if self._session.scalars(stmt).first() is not None:
            raise DuplicateTitleError(title)

    def _commit(self, title: str) -> None:
        try:
            self._session.commit()
        except IntegrityError as e:
            # The only unique constraint on the table is the title.
            self._session.rollback()
            logger.warning(f"Title conflict on commit: {e.orig}")
            raise DuplicateTitleError(title) from e
        except SQLAlchemyError:
            self._session.rollback()
            logger.exception("Failed to commit task changes")
            raise
