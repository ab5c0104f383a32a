"""Prometheus metrics for observability.

Counts gateway HTTP responses and times the RouterOS dial and command
operations behind them.
"""

import logging

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

# Global registry for metrics
_registry = CollectorRegistry()


# HTTP Metrics
http_requests_total = Counter(
    "routeros_gateway_http_requests_total",
    "Total number of gateway HTTP responses",
    ["route", "status_code"],
    registry=_registry,
)

# RouterOS Session Metrics
routeros_requests_total = Counter(
    "routeros_gateway_routeros_requests_total",
    "Total number of RouterOS API operations",
    ["operation", "status"],
    registry=_registry,
)

routeros_request_duration_seconds = Histogram(
    "routeros_gateway_routeros_request_duration_seconds",
    "Duration of RouterOS API operations in seconds",
    ["operation"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=_registry,
)


def get_registry() -> CollectorRegistry:
    """Get the metrics registry.

    Returns:
        Prometheus collector registry
    """
    return _registry


def get_metrics_text() -> str:
    """Get metrics in Prometheus text format.

    Returns:
        Metrics in Prometheus exposition format
    """
    return generate_latest(_registry).decode("utf-8")


def record_http_request(route: str, status_code: int) -> None:
    """Record metrics for a gateway HTTP response.

    Args:
        route: Request path
        status_code: Response status code
    """
    http_requests_total.labels(route=route, status_code=str(status_code)).inc()


def record_routeros_request(operation: str, duration: float, success: bool) -> None:
    """Record metrics for a RouterOS API operation.

    Args:
        operation: Operation name (dial/command)
        duration: Operation duration in seconds
        success: Whether the operation succeeded
    """
    status = "success" if success else "error"
    routeros_requests_total.labels(operation=operation, status=status).inc()
    routeros_request_duration_seconds.labels(operation=operation).observe(duration)


__all__ = [
    "get_registry",
    "get_metrics_text",
    "record_http_request",
    "record_routeros_request",
]
