"""Database models."""

from task_service.models.task import Task, utcnow


__all__ = ["Task", "utcnow"]
