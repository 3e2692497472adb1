"""JSON-lines logging for one CLI run.

Records from every ``shiftwatch.*`` logger go through a queue to the sinks
(stderr, plus ``<log_dir>/<run_id>/shiftwatch.jsonl`` when file logging is on).
Each line carries the run id, whatever correlation fields are bound with
:func:`correlation_scope` at emit time, and any ``extra=`` fields. Session
cookies are masked before a line is written.
"""

from __future__ import annotations

import contextvars
import json
import logging
import logging.handlers
import queue
import re
import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Final, TextIO

REDACTED: Final[str] = "***REDACTED***"
LOG_FILENAME: Final[str] = "shiftwatch.jsonl"
ROOT_LOGGER: Final[str] = "shiftwatch"

_SECRET_KEY_TERMS: Final[tuple[str, ...]] = (
    "auth",
    "cookie",
    "credential",
    "password",
    "secret",
    "session",
    "token",
)
_SECRET_ASSIGNMENT: Final[re.Pattern[str]] = re.compile(
    r"(?i)\b(session|cookie|token|password|secret)(\s*[:=]\s*)[^\s,;]+"
)
# Attributes every LogRecord has; anything else on a record came from ``extra=``.
_RECORD_ATTRS: Final[frozenset[str]] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "correlation"}

_correlation: contextvars.ContextVar[Mapping[str, str]] = contextvars.ContextVar(
    "shiftwatch_correlation", default={}
)


@dataclass(slots=True)
class _Run:
    logger: logging.Logger
    queue_handler: logging.handlers.QueueHandler
    listener: logging.handlers.QueueListener
    sinks: tuple[logging.Handler, ...]


_active: _Run | None = None


def is_secret_key(key: str) -> bool:
    """True for mapping keys whose values must never be logged or echoed.

    ``*_env`` keys name an environment variable and are safe to show.
    """

    lowered = key.strip().lower()
    if lowered.endswith("_env"):
        return False
    return any(term in lowered for term in _SECRET_KEY_TERMS)


def redact(value: object, *, key: str | None = None) -> object:
    """Mask secret-looking keys and ``session=...`` style text, recursively."""

    if key is not None and is_secret_key(key):
        return REDACTED
    if isinstance(value, str):
        return _SECRET_ASSIGNMENT.sub(lambda m: f"{m.group(1)}{m.group(2)}{REDACTED}", value)
    if isinstance(value, Mapping):
        return {str(k): redact(v, key=str(k)) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [redact(item) for item in value]
    return value


def current_correlation() -> dict[str, str]:
    return dict(_correlation.get())


@contextmanager
def correlation_scope(**fields: str | None) -> Iterator[None]:
    """Bind correlation fields for records logged inside the block.

    ``None`` unbinds a field inherited from an outer scope.
    """

    merged = current_correlation()
    for name, value in fields.items():
        if value is None:
            merged.pop(name, None)
        elif not value.strip():
            raise ValueError(f"correlation field {name!r} must not be empty")
        else:
            merged[name] = value.strip()
    token = _correlation.set(merged)
    try:
        yield
    finally:
        _correlation.reset(token)


class _CorrelatingQueueHandler(logging.handlers.QueueHandler):
    # The listener thread has its own context, so capture fields on the caller's side.
    def prepare(self, record: logging.LogRecord) -> logging.LogRecord:
        record.correlation = current_correlation()
        return super().prepare(record)


class JsonLineFormatter(logging.Formatter):
    """One sorted-key JSON object per record."""

    def __init__(self, *, run_id: str, redact_secrets: bool = True) -> None:
        super().__init__()
        self._run_id = run_id
        self._redact_secrets = redact_secrets

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "run_id": self._run_id,
        }
        event.update(getattr(record, "correlation", {}))
        extras = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}
        if extras:
            event["fields"] = extras
        if record.exc_info:
            event["exception"] = self.formatException(record.exc_info)
        if self._redact_secrets:
            event = {key: redact(value) for key, value in event.items()}
        return json.dumps(
            event, sort_keys=True, separators=(",", ":"), default=str, ensure_ascii=False
        )


def setup_logging(
    observability: Mapping[str, object] | None = None,
    *,
    run_id: str,
    level: str | None = None,
    logger_name: str = ROOT_LOGGER,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Start queue-backed JSON logging from an ``[observability]`` section.

    ``level`` overrides ``log_level``. Any run already active is shut down first.
    """

    if not run_id.strip():
        raise ValueError("run_id must not be empty")
    section = dict(observability or {})
    numeric_level = _parse_level(level or str(section.get("log_level", "WARNING")))
    formatter = JsonLineFormatter(
        run_id=run_id, redact_secrets=bool(section.get("redact_secrets", True))
    )

    shutdown_logging()

    sinks: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if section.get("log_to_file", False):
        run_dir = Path(str(section.get("log_dir", "logs"))) / run_id
        run_dir.mkdir(parents=True, exist_ok=True)
        sinks.append(logging.FileHandler(run_dir / LOG_FILENAME, encoding="utf-8"))
    for sink in sinks:
        sink.setFormatter(formatter)

    records: queue.Queue[logging.LogRecord] = queue.Queue()
    queue_handler = _CorrelatingQueueHandler(records)
    listener = logging.handlers.QueueListener(records, *sinks)

    logger = logging.getLogger(logger_name)
    for stale in list(logger.handlers):
        logger.removeHandler(stale)
    logger.setLevel(numeric_level)
    logger.propagate = False
    logger.addHandler(queue_handler)
    listener.start()

    global _active
    _active = _Run(logger, queue_handler, listener, tuple(sinks))
    return logger


def shutdown_logging() -> None:
    """Drain the queue and close sinks. Safe to call when nothing is active."""

    global _active
    run, _active = _active, None
    if run is None:
        return
    run.listener.stop()
    run.logger.removeHandler(run.queue_handler)
    for sink in run.sinks:
        sink.close()


def _parse_level(name: str) -> int:
    value = logging.getLevelName(name.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"unsupported logging level {name!r}")
    return value


__all__ = [
    "JsonLineFormatter",
    "LOG_FILENAME",
    "REDACTED",
    "correlation_scope",
    "current_correlation",
    "is_secret_key",
    "redact",
    "setup_logging",
    "shutdown_logging",
]
