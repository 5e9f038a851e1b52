"""Structured logging for pipedit.

Provides:
- JSON-formatted log output
- Context-aware logging
- Log level management
- Interaction state transition logging
- Tree mutation logging
- Move refusal logging
"""

from __future__ import annotations

import json
import sys
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TextIO


class LogLevel(Enum):
    """Log levels."""

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    @classmethod
    def from_name(cls, name: str) -> LogLevel:
        """Look up a level by case-insensitive name.

        Raises:
            ValueError: If the name is not a known level.
        """
        try:
            return cls[name.strip().upper()]
        except KeyError as e:
            raise ValueError(f"Unknown log level: {name}") from e


@dataclass
class LogEntry:
    """A structured log entry."""

    timestamp: str
    level: str
    message: str
    component: str
    event_type: str | None = None
    session_id: str | None = None
    selector: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        """Convert to JSON string."""
        data = {k: v for k, v in asdict(self).items() if v is not None}
        if "extra" in data and not data["extra"]:
            del data["extra"]
        return json.dumps(data, default=str)

    def to_human_readable(self) -> str:
        """Convert to human-readable format."""
        parts = [f"[{self.timestamp}]", f"[{self.level}]", f"[{self.component}]"]
        if self.event_type:
            parts.append(f"[{self.event_type}]")
        if self.selector:
            parts.append(f"<{self.selector}>")
        parts.append(self.message)
        return " ".join(parts)


class StructuredLogger:
    """Structured logger for the editor.

    Logs events in JSON format with consistent structure.
    Supports:
    - Interaction state transitions
    - Tree mutations
    - Refused moves
    """

    def __init__(
        self,
        component: str,
        level: LogLevel = LogLevel.INFO,
        output: TextIO | None = None,
        json_format: bool = True,
    ) -> None:
        """Initialize logger.

        Args:
            component: Component name (tree, interaction, editor)
            level: Minimum log level
            output: Output stream (defaults to stderr)
            json_format: Whether to use JSON format
        """
        self.component = component
        self.level = level
        self._output = output
        self.json_format = json_format
        self._context: dict[str, Any] = {}

    @property
    def output(self) -> TextIO:
        """Output stream; stderr is looked up at write time when unset."""
        return self._output if self._output is not None else sys.stderr

    @output.setter
    def output(self, value: TextIO | None) -> None:
        self._output = value

    def set_context(self, **kwargs: Any) -> None:
        """Set persistent context for all log entries."""
        self._context.update(kwargs)

    def clear_context(self) -> None:
        """Clear persistent context."""
        self._context.clear()

    def with_context(self, **kwargs: Any) -> StructuredLogger:
        """Create a new logger with additional context.

        Args:
            **kwargs: Context key-value pairs

        Returns:
            New logger instance with merged context
        """
        new_logger = StructuredLogger(
            component=self.component,
            level=self.level,
            output=self._output,
            json_format=self.json_format,
        )
        new_logger._context = {**self._context, **kwargs}
        return new_logger

    def _log(
        self,
        level: LogLevel,
        message: str,
        event_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Internal log method."""
        if level.value < self.level.value:
            return

        selector = kwargs.pop("selector", None)
        extra = {**self._context, **kwargs}

        entry = LogEntry(
            timestamp=datetime.now(UTC).isoformat(),
            level=level.name,
            message=message,
            component=self.component,
            event_type=event_type,
            session_id=extra.pop("session_id", None),
            selector=str(selector) if selector is not None else None,
            extra=extra,
        )

        if self.json_format:
            self.output.write(entry.to_json() + "\n")
        else:
            self.output.write(entry.to_human_readable() + "\n")
        self.output.flush()

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        self._log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self._log(LogLevel.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        self._log(LogLevel.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        self._log(LogLevel.ERROR, message, **kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        """Log critical message."""
        self._log(LogLevel.CRITICAL, message, **kwargs)

    # Specialized logging methods

    def log_state_transition(
        self,
        from_state: str,
        to_state: str,
        reason: str = "",
    ) -> None:
        """Log a state transition.

        Args:
            from_state: Previous state
            to_state: New state
            reason: Reason for transition
        """
        self._log(
            LogLevel.INFO,
            f"State transition: {from_state} -> {to_state}",
            event_type="state_transition",
            from_state=from_state,
            to_state=to_state,
            reason=reason,
        )

    def log_tree_mutation(
        self,
        operation: str,
        selector: Any,
        **details: Any,
    ) -> None:
        """Log a structural change to the forest.

        Args:
            operation: Mutation name (insert, remove, move, duplicate, update)
            selector: Primary selector the mutation applied to
            **details: Further selectors or identities involved
        """
        self._log(
            LogLevel.DEBUG,
            f"Tree mutation: {operation}",
            event_type="tree_mutation",
            operation=operation,
            selector=selector,
            **{k: str(v) for k, v in details.items()},
        )

    def log_move_rejected(
        self,
        source: Any,
        destination: Any,
        reason: str,
    ) -> None:
        """Log a move the engine refused.

        Args:
            source: Source selector
            destination: Destination selector
            reason: Rejection reason value
        """
        self._log(
            LogLevel.INFO,
            f"Move rejected: {reason}",
            event_type="move_rejected",
            selector=source,
            destination=str(destination),
            reason=reason,
        )


def create_logger(
    component: str,
    level: LogLevel = LogLevel.INFO,
    json_format: bool = True,
    output: TextIO | None = None,
) -> StructuredLogger:
    """Create a structured logger.

    Args:
        component: Component name
        level: Minimum log level
        json_format: Whether to use JSON format
        output: Output stream (defaults to stderr)

    Returns:
        Configured logger
    """
    return StructuredLogger(
        component=component,
        level=level,
        json_format=json_format,
        output=output,
    )


# Global loggers for each component
_loggers: dict[str, StructuredLogger] = {}

# Settings applied to loggers created after configure_logging()
_defaults: dict[str, Any] = {}


def get_logger(component: str) -> StructuredLogger:
    """Get or create a logger for a component.

    Args:
        component: Component name

    Returns:
        Logger instance
    """
    if component not in _loggers:
        _loggers[component] = create_logger(component, **_defaults)
    return _loggers[component]


def reset_loggers() -> None:
    """Reset all global loggers. Useful for testing."""
    _loggers.clear()
    _defaults.clear()


def configure_logging(
    level: LogLevel = LogLevel.INFO,
    json_format: bool = True,
    output: TextIO | None = None,
) -> None:
    """Configure global logging settings.

    Applies to existing loggers and to loggers created afterwards.

    Args:
        level: Minimum log level for all loggers
        json_format: Whether to use JSON format
        output: Output stream
    """
    _defaults.update(level=level, json_format=json_format)
    if output is not None:
        _defaults["output"] = output
    for logger in _loggers.values():
        logger.level = level
        logger.json_format = json_format
        if output is not None:
            logger.output = output
