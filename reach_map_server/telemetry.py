"""OpenTelemetry tracing for the reach map server.

Traces geocoding runs, per-group resolution and provider requests, and sends
them to an OTLP/HTTP collector (Arize Phoenix, Jaeger, ...).

Environment Variables:
    TRACING_ENABLED: Set to 'true' to enable tracing (default: false)
    OTLP_ENDPOINT: Collector base URL (default: http://localhost:6006)
    TRACING_SERVICE_NAME: Service name shown in the collector UI (default: reach-map-server)
"""

import os

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor


def is_tracing_enabled() -> bool:
    """Check if tracing is enabled via environment variable."""
    return os.getenv("TRACING_ENABLED", "false").lower() == "true"


def get_otlp_endpoint() -> str:
    """Get the collector endpoint."""
    return os.getenv("OTLP_ENDPOINT", "http://localhost:6006")


def get_service_name() -> str:
    """Get the service name reported with every span."""
    return os.getenv("TRACING_SERVICE_NAME", "reach-map-server")


_tracer_provider: TracerProvider | None = None


def initialize_tracing() -> TracerProvider | None:
    """Initialize OpenTelemetry tracing.

    Returns:
        TracerProvider if tracing is enabled, None otherwise.
    """
    global _tracer_provider

    if not is_tracing_enabled():
        return None

    if _tracer_provider is not None:
        return _tracer_provider

    exporter = OTLPSpanExporter(endpoint=f"{get_otlp_endpoint()}/v1/traces")

    _tracer_provider = TracerProvider(resource=Resource.create({SERVICE_NAME: get_service_name()}))
    _tracer_provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(_tracer_provider)
    return _tracer_provider


def get_tracer(name: str = "reach-map-server") -> trace.Tracer:
    """Get a tracer instance for manual instrumentation.

    Returns a no-op tracer while tracing is disabled.
    """
    return trace.get_tracer(name)
