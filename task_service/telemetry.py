"""OpenTelemetry wiring for the task service.

Exports traces, metrics and logs over OTLP/HTTP to the collector named by the
application config, and instruments Flask, SQLAlchemy and stdlib logging.
"""

import atexit
import logging

from opentelemetry import _logs, metrics, trace
from opentelemetry.exporter.otlp.proto.http._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.flask import FlaskInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource, get_aggregated_resources
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor


logger = logging.getLogger(__name__)

METRIC_EXPORT_INTERVAL_MS = 30000

_otel_log_handler: LoggingHandler | None = None
_initialized: bool = False


def _build_resource(config: type) -> Resource:
    # OTEL_RESOURCE_ATTRIBUTES still wins through get_aggregated_resources
    return get_aggregated_resources(
        detectors=[],
        initial_resource=Resource.create(
            {
                "service.name": config.SERVICE_NAME,
                "service.version": config.SERVICE_VERSION,
                "deployment.environment": config.DEPLOYMENT_ENVIRONMENT,
            }
        ),
    )


def _start_tracing(resource: Resource, endpoint: str) -> TracerProvider:
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{endpoint}/v1/traces")))
    trace.set_tracer_provider(provider)
    return provider


def _start_metrics(resource: Resource, endpoint: str) -> MeterProvider:
    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=f"{endpoint}/v1/metrics"),
        export_interval_millis=METRIC_EXPORT_INTERVAL_MS,
    )
    provider = MeterProvider(resource=resource, metric_readers=[reader])
    metrics.set_meter_provider(provider)
    return provider


def _start_log_export(resource: Resource, endpoint: str) -> LoggerProvider:
    provider = LoggerProvider(resource=resource)
    provider.add_log_record_processor(BatchLogRecordProcessor(OTLPLogExporter(endpoint=f"{endpoint}/v1/logs")))
    _logs.set_logger_provider(provider)
    return provider


def setup_telemetry(config: type) -> None:
    """Start trace, metric and log export for the service described by ``config``.

    Safe to call more than once; only the first call has an effect. Must run
    before the Flask app is created so auto-instrumentation sees the providers.

    Args:
        config: Configuration class carrying OTLP_ENDPOINT, SERVICE_NAME,
            SERVICE_VERSION and DEPLOYMENT_ENVIRONMENT.
    """
    global _otel_log_handler, _initialized

    if _initialized:
        return

    resource = _build_resource(config)
    endpoint = config.OTLP_ENDPOINT.rstrip("/")

    providers = (
        _start_tracing(resource, endpoint),
        _start_metrics(resource, endpoint),
        _start_log_export(resource, endpoint),
    )
    # Flush buffered spans, points and records when the process exits
    for provider in providers:
        atexit.register(provider.shutdown)

    _otel_log_handler = LoggingHandler(level=logging.DEBUG, logger_provider=providers[2])

    SQLAlchemyInstrumentor().instrument()
    LoggingInstrumentor().instrument(set_logging_format=True)

    _initialized = True
    logger.info(
        "OpenTelemetry initialized",
        extra={"service": config.SERVICE_NAME, "endpoint": endpoint},
    )


def get_otel_log_handler() -> LoggingHandler | None:
    """Return the OTLP logging handler, or None before setup_telemetry ran."""
    return _otel_log_handler


def instrument_flask_app(app) -> None:
    """Create a server span for every request except the health probe."""
    FlaskInstrumentor().instrument_app(app, excluded_urls="/health")


def get_tracer(name: str) -> trace.Tracer:
    return trace.get_tracer(name)


def get_meter(name: str) -> metrics.Meter:
    return metrics.get_meter(name)
