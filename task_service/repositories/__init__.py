"""Task persistence behind an explicit repository interface."""

from task_service.repositories.base import TaskRepository
from task_service.repositories.memory import InMemoryTaskRepository
from task_service.repositories.sql import SQLAlchemyTaskRepository


__all__ = ["TaskRepository", "SQLAlchemyTaskRepository", "InMemoryTaskRepository"]
