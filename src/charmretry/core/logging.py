"""Structured logging infrastructure for charmretry.

Provides structured logging using structlog with handler-specific context
such as the triggering event, its category and the agent's lifecycle phase.
Supports console and JSON output, optionally to a rotating log file.

Example usage:
    from charmretry.core.logging import get_logger, configure_logging, with_context

    # Configure once at startup
    configure_logging(level="DEBUG", format="console")

    # Get a component-specific logger
    logger = get_logger("retry")

    # Log with auto-context
    logger.info("attempt_failed_transient", attempt=2)

    # Bind context for a handler invocation
    ctx = HandlerContext(event="config_changed", phase="setup")
    with with_context(ctx):
        logger.info("retry_budget_exhausted")  # Includes event, phase
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Literal

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Sensitive field patterns that should never be logged
SENSITIVE_PATTERNS = frozenset({
    "api_key",
    "apikey",
    "token",
    "secret",
    "password",
    "credential",
    "auth",
    "bearer",
    "authorization",
})


@dataclass(frozen=True)
class HandlerContext:
    """Immutable context for correlating log entries within one event handler.

    Attributes:
        event: Name of the triggering event (e.g. "config_changed").
        event_id: Optional identifier of the event delivery.
        category: Event category value (e.g. "action_request").
        phase: Lifecycle phase value at handler entry (e.g. "setup").
        unit: Optional name of the agent unit handling the event.
    """

    event: str
    event_id: str | None = None
    category: str | None = None
    phase: str | None = None
    unit: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging (excludes None values)."""
        result: dict[str, Any] = {"event_name": self.event}
        for key in ("event_id", "category", "phase", "unit"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        return result


# ContextVar keeps the context scoped to the current handler invocation
_current_context: ContextVar[HandlerContext | None] = ContextVar(
    "charmretry_context", default=None
)


def get_current_context() -> HandlerContext | None:
    """Get the current HandlerContext if set."""
    return _current_context.get()


def clear_context() -> None:
    """Clear the current HandlerContext."""
    _current_context.set(None)


@contextmanager
def with_context(ctx: HandlerContext) -> Iterator[HandlerContext]:
    """Context manager that sets HandlerContext for the duration of a block.

    All log calls within the block automatically include the context fields
    when the _add_context processor is active.

    Args:
        ctx: The HandlerContext to use for the block.

    Yields:
        The HandlerContext that was set.
    """
    token = _current_context.set(ctx)
    try:
        yield ctx
    finally:
        _current_context.reset(token)


def _sanitize_value(key: str, value: Any) -> Any:
    """Return "[REDACTED]" for values whose key looks sensitive."""
    key_lower = key.lower()
    for pattern in SENSITIVE_PATTERNS:
        if pattern in key_lower:
            return "[REDACTED]"
    return value


def _sanitize_event_dict(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that redacts sensitive fields, one level deep."""
    sanitized: EventDict = {}
    for key, value in event_dict.items():
        if isinstance(value, dict):
            sanitized[key] = {k: _sanitize_value(k, v) for k, v in value.items()}
        else:
            sanitized[key] = _sanitize_value(key, value)
    return sanitized


def _add_timestamp(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that adds an ISO8601 UTC timestamp."""
    event_dict["timestamp"] = datetime.now(UTC).isoformat()
    return event_dict


def _add_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that adds HandlerContext fields to log entries.

    Explicitly bound keys take precedence over context fields.
    """
    ctx = get_current_context()
    if ctx is not None:
        for key, value in ctx.to_dict().items():
            if key not in event_dict:
                event_dict[key] = value
    return event_dict


class CharmLogger:
    """Component logger wrapper around structlog.

    Loggers are commonly created at import time, so the underlying structlog
    logger is fetched lazily on every call to respect configuration applied
    later via configure_logging().
    """

    def __init__(self, component: str, **initial_context: Any) -> None:
        self._component = component
        self._context: dict[str, Any] = {"component": component, **initial_context}

    def _get_logger(self) -> structlog.stdlib.BoundLogger:
        logger: structlog.stdlib.BoundLogger = structlog.get_logger().bind(**self._context)
        return logger

    def bind(self, **context: Any) -> CharmLogger:
        """Create a new logger with additional bound context."""
        new_logger = CharmLogger.__new__(CharmLogger)
        new_logger._component = self._component
        new_logger._context = {**self._context, **context}
        return new_logger

    def unbind(self, *keys: str) -> CharmLogger:
        """Create a new logger with the given keys removed."""
        new_logger = CharmLogger.__new__(CharmLogger)
        new_logger._component = self._component
        new_logger._context = {k: v for k, v in self._context.items() if k not in keys}
        return new_logger

    def debug(self, event: str, **kw: Any) -> None:
        self._get_logger().debug(event, **kw)

    def info(self, event: str, **kw: Any) -> None:
        self._get_logger().info(event, **kw)

    def warning(self, event: str, **kw: Any) -> None:
        self._get_logger().warning(event, **kw)

    def error(self, event: str, **kw: Any) -> None:
        self._get_logger().error(event, **kw)

    def critical(self, event: str, **kw: Any) -> None:
        self._get_logger().critical(event, **kw)

    def exception(self, event: str, **kw: Any) -> None:
        """Log an exception with traceback. Call from an exception handler."""
        self._get_logger().exception(event, **kw)


def _get_processors(
    renderer: Processor,
    include_timestamps: bool,
    include_context: bool,
) -> list[Processor]:
    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        _sanitize_event_dict,
    ]

    if include_context:
        processors.append(_add_context)

    if include_timestamps:
        processors.append(_add_timestamp)

    processors.extend([
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ])
    return processors


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO",
    format: Literal["json", "console", "both"] = "console",  # noqa: A002
    file_path: Path | None = None,
    max_file_size_mb: int = 50,
    backup_count: int = 5,
    include_timestamps: bool = True,
    include_context: bool = True,
) -> None:
    """Configure charmretry structured logging.

    Call once at agent startup, before any handler runs.

    Args:
        level: Minimum log level to capture.
        format: "json" for structured, "console" for human-readable,
            "both" for console to stderr and JSON to file (requires file_path).
        file_path: Optional file path for log output. Required if format="both".
        max_file_size_mb: Maximum log file size before rotation (MB).
        backup_count: Number of rotated log files to keep.
        include_timestamps: Whether to include ISO8601 timestamps.
        include_context: Whether to include HandlerContext fields.

    Raises:
        ValueError: If format="both" but file_path is not provided.
    """
    if format == "both" and file_path is None:
        raise ValueError("file_path is required when format='both'")

    log_level = getattr(logging, level)
    handlers: list[logging.Handler] = []

    if format in ("console", "both"):
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        handlers.append(console_handler)

    if format in ("json", "both"):
        if file_path:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                file_path,
                maxBytes=max_file_size_mb * 1024 * 1024,
                backupCount=backup_count,
                encoding="utf-8",
            )
            file_handler.setLevel(log_level)
            handlers.append(file_handler)
        elif format == "json":
            json_handler = logging.StreamHandler(sys.stdout)
            json_handler.setLevel(log_level)
            handlers.append(json_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)

    renderer: Processor
    if format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    # cache_logger_on_first_use=False so import-time loggers see later config
    structlog.configure(
        processors=_get_processors(renderer, include_timestamps, include_context),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(component: str, **initial_context: Any) -> CharmLogger:
    """Get a logger for a component.

    The returned logger automatically includes HandlerContext fields when
    logging inside a `with_context()` block.

    Args:
        component: The component name (e.g., "retry", "escalation").
        **initial_context: Additional context to bind.

    Returns:
        A CharmLogger bound to the component.
    """
    return CharmLogger(component, **initial_context)


__all__ = [
    "CharmLogger",
    "HandlerContext",
    "SENSITIVE_PATTERNS",
    "clear_context",
    "configure_logging",
    "get_current_context",
    "get_logger",
    "with_context",
]
