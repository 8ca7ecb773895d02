"""Flask application factory with OpenTelemetry instrumentation."""

import logging
import os

from flask import Flask

from task_service.extensions import db, ma
from task_service.repositories import SQLAlchemyTaskRepository, TaskRepository


def create_app(
    config_class: type | None = None,
    repository: TaskRepository | None = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        config_class: Configuration class to use. Defaults to Config.
        repository: Task repository to serve requests from. Defaults to a
            SQLAlchemyTaskRepository on the app's database session.

    Returns:
        Configured Flask application instance.
    """
    if config_class is None:
        from task_service.config import Config

        config_class = Config

    # Initialize telemetry BEFORE creating Flask app
    if not os.getenv("OTEL_SDK_DISABLED"):
        from task_service.telemetry import (
            get_otel_log_handler,
            instrument_flask_app,
            setup_telemetry,
        )

        setup_telemetry(config_class)

    app = Flask(__name__)
    app.config.from_object(config_class)

    # Instrument Flask app (needed for WSGI server worker forks)
    if not os.getenv("OTEL_SDK_DISABLED"):
        instrument_flask_app(app)

    # Initialize extensions
    db.init_app(app)
    ma.init_app(app)

    # The database handle reaches request handlers only through the repository
    if repository is None:
        repository = SQLAlchemyTaskRepository(db.session)
    app.extensions["task_repository"] = repository

    # Register blueprints
    from task_service.routes.health import health_bp
    from task_service.routes.tasks import tasks_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(tasks_bp)

    # Register error handlers
    from task_service.errors import register_error_handlers

    register_error_handlers(app)

    # Register metrics middleware
    if not os.getenv("OTEL_SDK_DISABLED"):
        from task_service.middleware.metrics import register_metrics_middleware

        register_metrics_middleware(app)

    # Attach OTel log handler after app setup
    if not os.getenv("OTEL_SDK_DISABLED"):
        handler = get_otel_log_handler()
        if handler:
            root_logger = logging.getLogger()
            if handler not in root_logger.handlers:
                root_logger.addHandler(handler)

    _configure_logging()

    # Create database tables
    with app.app_context():
        db.create_all()

    return app


def _configure_logging() -> None:
    """Configure logging for the application."""
    # App loggers - propagate to root (where OTel handler is)
    logging.getLogger("task_service").setLevel(logging.DEBUG)
    logging.getLogger("task_service").propagate = True

    # Reduce noise from framework loggers
    logging.getLogger("werkzeug").setLevel(logging.WARNING)

    # SQLAlchemy engine logs can be noisy
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
