"""Task CRUD endpoints."""

import logging

from flask import Blueprint, current_app, jsonify, request
from marshmallow import Schema, ValidationError

from task_service.repositories import TaskRepository
from task_service.schemas import (
    TaskCreateSchema,
    TaskSchema,
    TaskStatusSchema,
    TaskUpdateSchema,
)
from task_service.telemetry import get_meter, get_tracer


logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)
meter = get_meter(__name__)

tasks_created = meter.create_counter(
    name="tasks.created",
    description="Tasks created",
    unit="1",
)

tasks_deleted = meter.create_counter(
    name="tasks.deleted",
    description="Tasks deleted",
    unit="1",
)

tasks_bp = Blueprint("tasks", __name__, url_prefix="/tasks")

task_schema = TaskSchema()
tasks_schema = TaskSchema(many=True)


def get_repository() -> TaskRepository:
    """Return the repository the application factory attached to the app."""
    return current_app.extensions["task_repository"]


def _load(schema: Schema) -> dict:
    """Validate the JSON request body against ``schema``.

    Raises:
        ValidationError: If the body is not valid JSON or fails the schema.
    """
    payload = request.get_json(force=True, silent=True)
    if payload is None:
        raise ValidationError({"_schema": ["Request body must be valid JSON."]})
    return schema.load(payload)


@tasks_bp.route("", methods=["POST"])
def create_task():
    """Create a new task.

    Returns:
        JSON response with the created task and 201 status.
    """
    with tracer.start_as_current_span("task.create") as span:
        data = _load(TaskCreateSchema())

        task = get_repository().create(data)

        span.set_attribute("task.id", task.id)
        tasks_created.add(1)
        logger.info(f"Task created: {task.id}", extra={"task_id": task.id})

        return jsonify({"message": "The task has been created", "task": task_schema.dump(task)}), 201


@tasks_bp.route("", methods=["GET"])
def list_tasks():
    """List all tasks.

    Returns:
        JSON array of tasks.
    """
    return jsonify(tasks_schema.dump(get_repository().list()))


@tasks_bp.route("/<task_id>", methods=["GET"])
def get_task(task_id: str):
    """Get a single task by id."""
    return jsonify(task_schema.dump(get_repository().get_by_id(task_id)))


@tasks_bp.route("/<task_id>", methods=["PUT"])
def update_task(task_id: str):
    """Replace a task's fields.

    Args:
        task_id: Task id.

    Returns:
        JSON response with the updated task.
    """
    with tracer.start_as_current_span("task.update") as span:
        span.set_attribute("task.id", task_id)

        repository = get_repository()
        # 404 takes precedence over a bad body
        repository.get_by_id(task_id)
        data = _load(TaskUpdateSchema())

        task = repository.update(task_id, data)
        logger.info(f"Task updated: {task_id}", extra={"task_id": task_id})

        return jsonify(task_schema.dump(task))


@tasks_bp.route("/<task_id>/status", methods=["PUT"])
def update_task_status(task_id: str):
    """Change only the status of a task.

    Args:
        task_id: Task id.

    Returns:
        JSON response with a confirmation message.
    """
    with tracer.start_as_current_span("task.update_status") as span:
        span.set_attribute("task.id", task_id)

        data = _load(TaskStatusSchema())
        get_repository().update_status(task_id, data["status"])

        span.set_attribute("task.status", data["status"])
        logger.info(f"Task status updated: {task_id}", extra={"task_id": task_id})

        return jsonify({"message": "Task status updated successfully"})


@tasks_bp.route("/<task_id>", methods=["DELETE"])
def delete_task(task_id: str):
    """Delete a task.

    Args:
        task_id: Task id.

    Returns:
        JSON response with a confirmation message.
    """
    with tracer.start_as_current_span("task.delete") as span:
        span.set_attribute("task.id", task_id)

        get_repository().delete(task_id)

        tasks_deleted.add(1)
        logger.info(f"Task deleted: {task_id}", extra={"task_id": task_id})

        return jsonify({"message": "Task deleted successfully"})
