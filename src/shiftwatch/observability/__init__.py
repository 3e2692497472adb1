"""Structured JSON-lines logging and secret redaction."""

from shiftwatch.observability.logging import (
    REDACTED,
    JsonLineFormatter,
    correlation_scope,
    current_correlation,
    is_secret_key,
    redact,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    "JsonLineFormatter",
    "REDACTED",
    "correlation_scope",
    "current_correlation",
    "is_secret_key",
    "redact",
    "setup_logging",
    "shutdown_logging",
]
