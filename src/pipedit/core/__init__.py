"""Core infrastructure for pipedit.

Provides:
- Structured logging
"""

from pipedit.core.logging import (
    LogEntry,
    LogLevel,
    StructuredLogger,
    configure_logging,
    create_logger,
    get_logger,
    reset_loggers,
)

__all__ = [
    "LogLevel",
    "LogEntry",
    "StructuredLogger",
    "create_logger",
    "get_logger",
    "reset_loggers",
    "configure_logging",
]
