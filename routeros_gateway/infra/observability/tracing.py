"""OpenTelemetry distributed tracing for observability.

Provides CLIENT spans around RouterOS dial and command operations with
correlation ID propagation.
"""

import logging
from typing import Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from routeros_gateway import __version__
from routeros_gateway.infra.observability.logging import get_correlation_id

logger = logging.getLogger(__name__)

_tracer_provider: TracerProvider | None = None
_tracer: trace.Tracer | None = None


def setup_tracing(
    service_name: str = "routeros-gateway",
    environment: str = "lab",
    console_export: bool = False,
) -> None:
    """Configure OpenTelemetry tracing.

    Args:
        service_name: Service name for traces
        environment: Environment (lab/staging/prod)
        console_export: Whether to export traces to console (for debugging)
    """
    global _tracer_provider, _tracer

    resource = Resource.create(
        {
            "service.name": service_name,
            "service.version": __version__,
            "deployment.environment": environment,
        }
    )

    _tracer_provider = TracerProvider(resource=resource)

    if console_export:
        _tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(_tracer_provider)
    _tracer = _tracer_provider.get_tracer(__name__)

    logger.info(
        "Tracing configured",
        extra={
            "service_name": service_name,
            "environment": environment,
            "console_export": console_export,
        },
    )


def get_tracer() -> trace.Tracer:
    """Get the configured tracer.

    Falls back to OpenTelemetry's global tracer, which is a no-op until a
    provider is installed.

    Returns:
        OpenTelemetry tracer
    """
    if _tracer is None:
        return trace.get_tracer(__name__)
    return _tracer


def trace_routeros_request(address: str, operation: str) -> trace.Span:
    """Start a CLIENT span for a RouterOS API operation.

    The caller ends the span. The current correlation ID is attached when
    one is bound.

    Args:
        address: Router address (host:port)
        operation: Operation name (dial/command)

    Returns:
        Trace span
    """
    attributes: dict[str, Any] = {
        "routeros.address": address,
        "routeros.operation": operation,
    }
    correlation_id = get_correlation_id()
    if correlation_id:
        attributes["correlation_id"] = correlation_id

    return get_tracer().start_span(
        f"routeros.{operation}", attributes=attributes, kind=trace.SpanKind.CLIENT
    )


def set_span_error(span: trace.Span, error: Exception) -> None:
    """Mark span as error and record exception.

    Args:
        span: Span to mark as error
        error: Exception that occurred
    """
    span.set_status(trace.Status(trace.StatusCode.ERROR, str(error)))
    span.record_exception(error)


__all__ = [
    "setup_tracing",
    "get_tracer",
    "trace_routeros_request",
    "set_span_error",
]
