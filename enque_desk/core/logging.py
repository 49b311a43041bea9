"""
Structured logging for the Enque Desk service.

Log entries go through structlog; the most recent ones are also kept in an
in-memory buffer so support staff can read them from ``/api/logs``.
"""

import logging
import sys
import threading
import uuid
from collections import deque
from datetime import UTC, datetime
from typing import Any

import structlog

_RESERVED_KEYS = frozenset({"event", "level", "timestamp", "logger", "exc_info"})


class RecentLogBuffer:
    """Bounded, newest-first store of log entries."""

    def __init__(self, max_entries: int = 100) -> None:
        self._entries: deque[dict[str, Any]] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        details = {
            key: value for key, value in event_dict.items() if key not in _RESERVED_KEYS
        }
        entry = {
            "timestamp": event_dict.get("timestamp") or datetime.now(UTC).isoformat(),
            "level": event_dict.get("level", method_name),
            "message": str(event_dict.get("event", "")),
            "details": ", ".join(f"{key}={value}" for key, value in details.items()) or None,
        }
        with self._lock:
            self._entries.appendleft(entry)
        return event_dict

    def entries(self) -> list[dict[str, Any]]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def resize(self, max_entries: int) -> None:
        with self._lock:
            self._entries = deque(self._entries, maxlen=max_entries)


log_buffer = RecentLogBuffer()


def new_correlation_id() -> str:
    return uuid.uuid4().hex[:8]


def bind_request_context(**values: Any) -> None:
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)


def setup_logging(debug: bool = False, json_output: bool = False, buffer_size: int = 100) -> None:
    """
    Configure structlog and the standard library root logger.

    Args:
        debug: Enable debug level logging
        json_output: Render JSON lines instead of the colored console format
        buffer_size: Number of entries kept for the logs endpoint
    """
    level = logging.DEBUG if debug else logging.INFO
    log_buffer.resize(buffer_size)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        log_buffer,
        structlog.dev.set_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def log_upstream_request(method: str, path: str, status_code: int | None, elapsed_ms: int) -> None:
    """Log one call to the REST API, escalating on errors and slow responses."""
    logger = structlog.get_logger("enque_desk.upstream")
    if status_code is None or status_code >= 400:
        log = logger.error
    elif elapsed_ms > 1000:
        log = logger.warning
    else:
        log = logger.info
    log(f"{method} {path} - {status_code}", response_time_ms=elapsed_ms)
