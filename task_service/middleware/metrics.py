"""HTTP server metrics for Flask, named after the OTel HTTP semantic conventions."""

import time
from typing import Any

from flask import Flask, Response, g, request

from task_service.telemetry import get_meter


UNMETERED_PATHS = frozenset({"/health"})


class RequestMetrics:
    """Counts requests, times them and tracks how many are in flight.

    Requests are labelled by route pattern (``/tasks/<task_id>``), never by
    the concrete path, so task ids do not become metric attributes.
    """

    def __init__(self, app: Flask | None = None) -> None:
        meter = get_meter("http.server")
        self.request_count = meter.create_counter(
            name="http.server.request.count",
            description="Total HTTP requests",
            unit="{request}",
        )
        self.request_duration = meter.create_histogram(
            name="http.server.request.duration",
            description="HTTP request duration",
            unit="s",
        )
        self.active_requests = meter.create_up_down_counter(
            name="http.server.active_requests",
            description="Number of active HTTP requests",
            unit="{request}",
        )
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        app.before_request(self._start)
        app.after_request(self._finish)
        app.teardown_request(self._release)
        app.extensions["request_metrics"] = self

    @staticmethod
    def _attributes() -> dict[str, Any]:
        return {
            "http.request.method": request.method,
            "http.route": request.url_rule.rule if request.url_rule else request.path,
        }

    def _start(self) -> None:
        if request.path in UNMETERED_PATHS:
            return
        g.metrics_started_at = time.perf_counter()
        self.active_requests.add(1, self._attributes())

    def _finish(self, response: Response) -> Response:
        started_at = g.get("metrics_started_at")
        if started_at is None:
            return response

        attributes = self._attributes()
        attributes["http.response.status_code"] = response.status_code
        self.request_count.add(1, attributes)
        self.request_duration.record(time.perf_counter() - started_at, attributes)
        return response

    def _release(self, exc: BaseException | None) -> None:
        if g.pop("metrics_started_at", None) is not None:
            self.active_requests.add(-1, self._attributes())


def register_metrics_middleware(app: Flask) -> RequestMetrics:
    """Attach request metrics to ``app`` and return the collector."""
    return RequestMetrics(app)
