"""Error handlers with OpenTelemetry trace context."""

import logging

from flask import Flask, jsonify
from marshmallow import ValidationError
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from task_service.exceptions import TaskServiceError


logger = logging.getLogger(__name__)

_ERROR_TYPES = {
    400: "validation",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
}


def error_response(message: str, status_code: int, **extra) -> tuple:
    """Create error response with trace context.

    Use this function in routes instead of returning jsonify directly.

    Args:
        message: Error message.
        status_code: HTTP status code.
        **extra: Additional fields merged into the body.

    Returns:
        Tuple of (response, status_code).
    """
    response = {"error": message, **extra}

    span = trace.get_current_span()
    span_context = span.get_span_context()
    if span_context.is_valid:
        response["trace_id"] = format(span_context.trace_id, "032x")
        span.set_attribute("error.type", _ERROR_TYPES.get(status_code, "server_error"))

    return jsonify(response), status_code


def register_error_handlers(app: Flask) -> None:
    """Register error handlers on Flask app.

    Args:
        app: Flask application instance.
    """

    @app.errorhandler(ValidationError)
    def validation_error(error: ValidationError):
        return error_response("Validation failed", 400, details=error.messages)

    @app.errorhandler(TaskServiceError)
    def task_service_error(error: TaskServiceError):
        return error_response(error.message, error.status_code)

    @app.errorhandler(SQLAlchemyError)
    def database_error(error: SQLAlchemyError):
        span = trace.get_current_span()
        if span.is_recording():
            span.set_status(Status(StatusCode.ERROR, str(error)))
            span.record_exception(error)
        logger.exception(f"Database error: {error}")
        return error_response("Internal server error", 500)

    @app.errorhandler(HTTPException)
    def http_error(error: HTTPException):
        return error_response(error.name, error.code or 500)

    @app.errorhandler(500)
    def internal_error(error):
        return error_response("Internal server error", 500)
