"""Observability infrastructure for the RouterOS gateway.

Structured logging, Prometheus metrics and OpenTelemetry spans.
"""

from routeros_gateway.infra.observability.logging import setup_logging
from routeros_gateway.infra.observability.metrics import (
    get_metrics_text,
    record_http_request,
    record_routeros_request,
)
from routeros_gateway.infra.observability.tracing import (
    set_span_error,
    setup_tracing,
    trace_routeros_request,
)

__all__ = [
    # Logging
    "setup_logging",
    # Metrics
    "get_metrics_text",
    "record_http_request",
    "record_routeros_request",
    # Tracing
    "setup_tracing",
    "trace_routeros_request",
    "set_span_error",
]
