"""JSON-lines logging for a single validation run.

Records pass through a ``QueueHandler`` to a ``QueueListener`` that writes one
JSON object per line to ``<log_dir>/validation.jsonl``. Each event carries the
fields bound with ``correlation_scope`` (the CLI binds ``document`` and
``kind``) and, when the call site passes ``extra={"fields": {...}}``, a
``fields`` object.

Field values stored under secret-like keys (``secret``, ``value``, ``data``
and similar) are replaced with ``***REDACTED***`` unless redaction is turned
off. Raw bytes are never written: they are logged as their length only.
"""

from __future__ import annotations

import atexit
import contextvars
import copy
import json
import logging
import logging.handlers
import math
import queue
import threading
import time
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Final

REDACTED: Final[str] = "***REDACTED***"
LOG_FILENAME: Final[str] = "validation.jsonl"

_SECRET_KEY_TERMS: Final[tuple[str, ...]] = (
    "secret",
    "value",
    "data",
    "token",
    "password",
    "credential",
)

# Event keys written by the formatter; correlation fields may not shadow them.
_EVENT_KEYS: Final[frozenset[str]] = frozenset(
    {"timestamp", "level", "logger", "message", "fields", "exception"}
)

_CORRELATION: contextvars.ContextVar[tuple[tuple[str, str], ...]] = contextvars.ContextVar(
    "cluster_validation_correlation", default=()
)

_TRACEBACK_FORMATTER = logging.Formatter()

_ACTIVE_LOCK = threading.Lock()
_ACTIVE: StructuredLoggingHandle | None = None
_ATEXIT_REGISTERED = False


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Settings for one structured logging setup."""

    log_dir: Path | str = Path("logs")
    logger_name: str = "cluster_validation"
    level: str = "INFO"
    log_to_stdout: bool = False
    redact_secrets: bool = True


def setup_logging(
    logging_section: Mapping[str, object] | None = None,
    *,
    logger_name: str = "cluster_validation",
) -> StructuredLoggingHandle:
    """Configure logging from the validated ``[logging]`` config table."""

    section = dict(logging_section or {})
    return setup_structured_logging(
        LoggingConfig(
            log_dir=str(section.get("log_dir", "logs")),
            logger_name=logger_name,
            level=str(section.get("level", "INFO")),
            log_to_stdout=bool(section.get("log_to_stdout", False)),
            redact_secrets=bool(section.get("redact_secrets", True)),
        )
    )


class _CorrelatingQueueHandler(logging.handlers.QueueHandler):
    """Queue handler that snapshots the correlation context on the emitting thread."""

    def prepare(self, record: logging.LogRecord) -> logging.LogRecord:
        prepared = copy.copy(record)
        prepared.msg = record.getMessage()
        prepared.args = None
        if record.exc_info:
            prepared.exc_text = _TRACEBACK_FORMATTER.formatException(record.exc_info)
        prepared.exc_info = None
        prepared.stack_info = None
        prepared.correlation = get_correlation_context()
        return prepared


class _JsonLineFormatter(logging.Formatter):
    """Formatter that emits one canonical JSON object per log line."""

    def __init__(self, *, redact_secrets: bool) -> None:
        super().__init__()
        self._redact_secrets = redact_secrets

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, object] = {
            "timestamp": _iso8601z(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        event.update(getattr(record, "correlation", {}))

        fields = getattr(record, "fields", None)
        if isinstance(fields, Mapping):
            event["fields"] = self._to_json(fields)

        if record.exc_text:
            event["exception"] = record.exc_text

        return json.dumps(event, sort_keys=True, separators=(",", ":"), ensure_ascii=False)

    def _to_json(self, value: object, key: str | None = None) -> object:
        if self._redact_secrets and key is not None and _is_secret_key(key):
            return REDACTED
        if isinstance(value, bytes):
            return f"<{len(value)} bytes>"
        if isinstance(value, Mapping):
            return {str(k): self._to_json(item, str(k)) for k, item in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._to_json(item) for item in value]
        if isinstance(value, float) and not math.isfinite(value):
            return str(value)
        if value is None or isinstance(value, (bool, int, float, str)):
            return value
        return str(value)


class StructuredLoggingHandle:
    """Runtime handle for an active structured logging setup."""

    def __init__(
        self,
        *,
        logger: logging.Logger,
        log_path: Path,
        log_queue: queue.Queue[logging.LogRecord],
        queue_handler: _CorrelatingQueueHandler,
        listener: logging.handlers.QueueListener,
        sinks: tuple[logging.Handler, ...],
    ) -> None:
        self.logger = logger
        self.log_path = log_path
        self._queue = log_queue
        self._queue_handler = queue_handler
        self._listener = listener
        self._sinks = sinks
        self._lock = threading.Lock()
        self._is_shutdown = False

    @property
    def is_shutdown(self) -> bool:
        return self._is_shutdown

    def flush(self, *, timeout_seconds: float = 2.0) -> None:
        deadline = time.monotonic() + max(timeout_seconds, 0.0)
        while self._queue.unfinished_tasks > 0 and time.monotonic() < deadline:
            time.sleep(0.01)
        for sink in self._sinks:
            sink.flush()

    def shutdown(self, *, timeout_seconds: float = 2.0) -> None:
        with self._lock:
            if self._is_shutdown:
                return
            self.flush(timeout_seconds=timeout_seconds)
            self._listener.stop()
            self.logger.removeHandler(self._queue_handler)
            self._queue_handler.close()
            for sink in self._sinks:
                sink.close()
            self._is_shutdown = True


def setup_structured_logging(config: LoggingConfig) -> StructuredLoggingHandle:
    """Configure queue-backed JSON-lines logging, replacing any active setup."""
    shutdown_logging()

    level = _parse_log_level(config.level)
    log_dir = Path(config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILENAME

    formatter = _JsonLineFormatter(redact_secrets=config.redact_secrets)
    sinks: list[logging.Handler] = [logging.FileHandler(log_path, encoding="utf-8")]
    if config.log_to_stdout:
        sinks.append(logging.StreamHandler())
    for sink in sinks:
        sink.setFormatter(formatter)

    logger = logging.getLogger(config.logger_name)
    logger.setLevel(level)
    logger.propagate = False
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    log_queue: queue.Queue[logging.LogRecord] = queue.Queue()
    queue_handler = _CorrelatingQueueHandler(log_queue)
    listener = logging.handlers.QueueListener(log_queue, *sinks)
    listener.start()
    logger.addHandler(queue_handler)

    handle = StructuredLoggingHandle(
        logger=logger,
        log_path=log_path,
        log_queue=log_queue,
        queue_handler=queue_handler,
        listener=listener,
        sinks=tuple(sinks),
    )

    global _ACTIVE, _ATEXIT_REGISTERED
    with _ACTIVE_LOCK:
        _ACTIVE = handle
    if not _ATEXIT_REGISTERED:
        atexit.register(shutdown_logging)
        _ATEXIT_REGISTERED = True
    return handle


def shutdown_logging(handle: StructuredLoggingHandle | None = None) -> None:
    """Stop the listener and close the sinks of ``handle`` or of the active setup."""
    global _ACTIVE
    with _ACTIVE_LOCK:
        resolved = handle if handle is not None else _ACTIVE
        if resolved is _ACTIVE:
            _ACTIVE = None
    if resolved is not None:
        resolved.shutdown()


def get_correlation_context() -> dict[str, str]:
    """Return the current correlation fields as a plain dictionary."""
    return dict(_CORRELATION.get())


@contextmanager
def correlation_scope(**fields: str | None) -> Iterator[None]:
    """Bind correlation fields for records logged in scope; ``None`` unbinds a field."""
    state = get_correlation_context()
    for key, value in fields.items():
        if key in _EVENT_KEYS:
            raise ValueError(f"correlation field {key!r} is reserved")
        if value is None:
            state.pop(key, None)
            continue
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"correlation value for {key!r} must be a non-empty string")
        state[key] = value.strip()
    token = _CORRELATION.set(tuple(state.items()))
    try:
        yield
    finally:
        _CORRELATION.reset(token)


def _is_secret_key(key: str) -> bool:
    lowered = key.lower()
    return any(term in lowered for term in _SECRET_KEY_TERMS)


def _parse_log_level(value: str) -> int:
    parsed = logging.getLevelName(value.strip().upper())
    if isinstance(parsed, int):
        return parsed
    raise ValueError(f"unsupported logging level {value!r}")


def _iso8601z(epoch_seconds: float) -> str:
    timestamp = datetime.fromtimestamp(epoch_seconds, tz=UTC)
    return timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = [
    "LOG_FILENAME",
    "REDACTED",
    "LoggingConfig",
    "StructuredLoggingHandle",
    "correlation_scope",
    "get_correlation_context",
    "setup_logging",
    "setup_structured_logging",
    "shutdown_logging",
]
