"""Tests for the HTTP metrics middleware."""

from unittest.mock import MagicMock, patch


def _instrumented_app(memory_repository):
    from task_service import create_app
    from task_service.config import TestConfig
    from task_service.middleware.metrics import register_metrics_middleware

    meter = MagicMock()
    app = create_app(TestConfig, repository=memory_repository)
    with patch("task_service.middleware.metrics.get_meter", return_value=meter):
        register_metrics_middleware(app)
    return app, meter


class TestMetricsMiddleware:
    def test_records_route_pattern(self, memory_repository):
        app, meter = _instrumented_app(memory_repository)
        counter = meter.create_counter.return_value
        histogram = meter.create_histogram.return_value

        app.test_client().get("/tasks/unknown-id")

        attributes = {
            "http.request.method": "GET",
            "http.route": "/tasks/<task_id>",
            "http.response.status_code": 404,
        }
        counter.add.assert_called_once_with(1, attributes)
        histogram.record.assert_called_once()
        assert histogram.record.call_args.args[0] >= 0
        assert histogram.record.call_args.args[1] == attributes

    def test_active_requests_balanced(self, memory_repository):
        app, meter = _instrumented_app(memory_repository)
        active = meter.create_up_down_counter.return_value

        app.test_client().get("/tasks")

        deltas = [c.args[0] for c in active.add.call_args_list]
        assert deltas == [1, -1]

    def test_skips_health(self, memory_repository):
        app, meter = _instrumented_app(memory_repository)

        app.test_client().get("/health")

        meter.create_counter.return_value.add.assert_not_called()
        meter.create_up_down_counter.return_value.add.assert_not_called()
