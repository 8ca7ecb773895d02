"""API route blueprints."""

from task_service.routes.health import health_bp
from task_service.routes.tasks import tasks_bp


__all__ = ["health_bp", "tasks_bp"]
