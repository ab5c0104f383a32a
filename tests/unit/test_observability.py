"""Tests for observability logging."""

import json
import logging
import sys

import pytest

from routeros_gateway.infra.observability.logging import (
    CorrelationIDFilter,
    CredentialRedactionFilter,
    JSONFormatter,
    bind_correlation_id,
    clear_correlation_id,
    get_correlation_id,
    setup_logging,
)


def make_record(msg: str = "test message", args: tuple = (), **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="routeros_gateway.test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=args,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestCorrelationID:
    """Tests for correlation ID binding."""

    def test_bind_generates_when_absent(self) -> None:
        correlation_id = bind_correlation_id(None)

        assert correlation_id
        assert get_correlation_id() == correlation_id
        assert bind_correlation_id("") != correlation_id

    def test_bind_keeps_client_value(self) -> None:
        assert bind_correlation_id("test-correlation-id-123") == "test-correlation-id-123"
        assert get_correlation_id() == "test-correlation-id-123"

    def test_get_does_not_generate(self) -> None:
        clear_correlation_id()

        assert get_correlation_id() is None


class TestCorrelationIDFilter:
    """Tests for CorrelationIDFilter."""

    def test_filter_adds_correlation_id(self) -> None:
        bind_correlation_id("test-filter-id")
        record = make_record()

        assert CorrelationIDFilter().filter(record) is True
        assert record.correlation_id == "test-filter-id"  # type: ignore

    def test_filter_uses_default_if_no_correlation_id(self) -> None:
        clear_correlation_id()
        record = make_record()

        CorrelationIDFilter().filter(record)

        assert record.correlation_id == "no-correlation-id"  # type: ignore


class TestCredentialRedactionFilter:
    """Tests for CredentialRedactionFilter."""

    def test_password_word_is_masked(self) -> None:
        record = make_record("<<< %s", args=("=password=hunter2",))

        assert CredentialRedactionFilter().filter(record) is True
        assert record.getMessage() == "<<< =password=***"

    def test_password_inside_word_list(self) -> None:
        record = make_record("words %r", args=(("/login", "=name=admin", "=password=s3cr3t"),))

        CredentialRedactionFilter().filter(record)

        assert "s3cr3t" not in record.getMessage()
        assert "=name=admin" in record.getMessage()

    def test_other_messages_untouched(self) -> None:
        record = make_record("dial %s", args=("10.0.0.1:8728",))

        CredentialRedactionFilter().filter(record)

        assert record.args == ("10.0.0.1:8728",)
        assert record.getMessage() == "dial 10.0.0.1:8728"


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_fields(self) -> None:
        record = make_record(correlation_id="cid-1")

        entry = json.loads(JSONFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["component"] == "routeros_gateway.test"
        assert entry["message"] == "test message"
        assert entry["correlation_id"] == "cid-1"

    def test_gateway_extra_fields(self) -> None:
        record = make_record(
            router="10.0.0.1:8728",
            command="/interface/print",
            payload='{"stats": ""}',
        )

        entry = json.loads(JSONFormatter().format(record))

        assert entry["router"] == "10.0.0.1:8728"
        assert entry["command"] == "/interface/print"
        assert entry["payload"] == '{"stats": ""}'

    def test_unknown_extras_are_not_emitted(self) -> None:
        record = make_record(password="secret")

        entry = json.loads(JSONFormatter().format(record))

        assert "password" not in entry

    def test_exception_info(self) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record()
            record.exc_info = sys.exc_info()

        entry = json.loads(JSONFormatter().format(record))

        assert "RuntimeError: boom" in entry["exception"]


class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.fixture(autouse=True)
    def _restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_json_setup(self) -> None:
        setup_logging(level="INFO", json_format=True)

        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert logging.getLogger("librouteros").level == logging.WARNING

    def test_debug_setup_still_redacts(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="DEBUG", json_format=True)

        assert logging.getLogger("librouteros").level == logging.DEBUG
        logging.getLogger("librouteros.test").debug("<<< %s", "=password=hunter2")

        out = capsys.readouterr().out
        assert "hunter2" not in out
        assert "=password=***" in out

    def test_text_setup_with_file(self, tmp_path) -> None:
        log_file = tmp_path / "gateway.log"

        setup_logging(level="INFO", json_format=False, log_file=str(log_file))

        root = logging.getLogger()
        assert len(root.handlers) == 2
        assert not isinstance(root.handlers[0].formatter, JSONFormatter)
        assert isinstance(root.handlers[1].formatter, JSONFormatter)
        for handler in root.handlers:
            handler.close()
