"""Structured logging with correlation IDs for the gateway.

Every request gets a correlation ID (from the X-Correlation-ID header or
freshly generated) that is stamped on each log record written while the
request is handled. Router passwords never reach a handler: librouteros
logs the raw API words it sends, so "=password=" words are masked.
"""

import contextvars
import json
import logging
import re
import sys
import uuid
from datetime import UTC, datetime
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id",
    default=None,
)

NO_CORRELATION_ID = "no-correlation-id"

# Record attributes copied into JSON log entries when present
EXTRA_FIELDS = (
    "router",
    "command",
    "payload",
    "route",
    "status_code",
    "duration",
    "error",
)

_PASSWORD_WORD = re.compile(r"(=password=)[^\s'\",)]*")


def bind_correlation_id(correlation_id: str | None = None) -> str:
    """Bind a correlation ID to the current request context.

    Args:
        correlation_id: ID supplied by the client; a new one is generated
            when empty

    Returns:
        The bound correlation ID
    """
    correlation_id = correlation_id or str(uuid.uuid4())
    _correlation_id.set(correlation_id)
    return correlation_id


def get_correlation_id() -> str | None:
    """Correlation ID bound to the current context, if any."""
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set(None)


class CorrelationIDFilter(logging.Filter):
    """Stamp the current correlation ID on every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID  # type: ignore
        return True


class CredentialRedactionFilter(logging.Filter):
    """Mask "=password=..." API words in log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if "=password=" in message:
            record.msg = _PASSWORD_WORD.sub(r"\1***", message)
            record.args = None
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, component, message,
    correlation_id, and whichever gateway extras the record carries."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "component": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", NO_CORRELATION_ID),
        }

        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_entry["stack_info"] = record.stack_info

        return json.dumps(log_entry, default=str)


def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: str | None = None,
) -> None:
    """Configure root logging for the gateway process.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: JSON lines on stdout instead of plain text
        log_file: Optional file that also receives JSON lines
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler(sys.stdout)
    if json_format:
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s [%(correlation_id)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JSONFormatter())
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(level)
        handler.addFilter(CredentialRedactionFilter())
        handler.addFilter(CorrelationIDFilter())
        root_logger.addHandler(handler)

    # API word dumps only at DEBUG
    logging.getLogger("librouteros").setLevel(
        logging.DEBUG if level == "DEBUG" else logging.WARNING
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    root_logger.debug("Logging configured at %s", level)


__all__ = [
    "bind_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    "CorrelationIDFilter",
    "CredentialRedactionFilter",
    "JSONFormatter",
    "setup_logging",
]
