"""Tests for tracing utilities."""

import pytest
from opentelemetry import trace

from routeros_gateway.infra.observability.logging import (
    bind_correlation_id,
    clear_correlation_id,
)
from routeros_gateway.infra.observability.tracing import (
    get_tracer,
    set_span_error,
    setup_tracing,
    trace_routeros_request,
)


def test_setup_and_get_tracer() -> None:
    setup_tracing(service_name="test-service", environment="lab", console_export=False)
    assert get_tracer() is not None


def test_routeros_span() -> None:
    setup_tracing(service_name="test-service", environment="lab", console_export=False)
    bind_correlation_id("cid-span")

    span = trace_routeros_request("10.0.0.1:8728", "dial")

    assert span.attributes["routeros.address"] == "10.0.0.1:8728"
    assert span.attributes["routeros.operation"] == "dial"
    assert span.attributes["correlation_id"] == "cid-span"
    assert span.kind == trace.SpanKind.CLIENT
    span.end()


def test_span_without_correlation_id() -> None:
    setup_tracing(service_name="test-service", environment="lab", console_export=False)
    clear_correlation_id()

    span = trace_routeros_request("10.0.0.1:8728", "command")

    assert "correlation_id" not in span.attributes
    span.end()


def test_set_span_error() -> None:
    setup_tracing(service_name="test-service", environment="lab", console_export=False)
    span = trace_routeros_request("10.0.0.1:8728", "command")

    set_span_error(span, RuntimeError("boom"))
    span.end()

    assert span.status.status_code == trace.StatusCode.ERROR


def test_get_tracer_without_setup_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("routeros_gateway.infra.observability.tracing._tracer", None)
    monkeypatch.setattr("routeros_gateway.infra.observability.tracing._tracer_provider", None)

    span = trace_routeros_request("10.0.0.1:8728", "command")
    span.end()

    assert get_tracer() is not None
