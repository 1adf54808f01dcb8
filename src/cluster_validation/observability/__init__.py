"""Public observability primitives: structured JSON-lines logging and correlation."""

from cluster_validation.observability.logging import (
    LOG_FILENAME,
    REDACTED,
    LoggingConfig,
    StructuredLoggingHandle,
    correlation_scope,
    get_correlation_context,
    setup_logging,
    setup_structured_logging,
    shutdown_logging,
)

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
