"""WSGI entry point, e.g. ``gunicorn wsgi:app``."""

from task_service import create_app


app = create_app()
