"""Marshmallow schemas for serialization and validation."""

from task_service.schemas.task import (
    TaskCreateSchema,
    TaskSchema,
    TaskStatusSchema,
    TaskUpdateSchema,
)


__all__ = [
    "TaskSchema",
    "TaskCreateSchema",
    "TaskUpdateSchema",
    "TaskStatusSchema",
]
