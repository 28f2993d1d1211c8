"""
NexaValidate Logger
===================

Structured logging for validation runs.

Records carry key/value context (field, validator, scene) so a
failing run can be traced rule by rule.
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, List, Optional, TextIO, Union


class LogLevel(IntEnum):
    """Log levels."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def parse(cls, value: Union[str, int, "LogLevel"]) -> "LogLevel":
        """Parse level from name or number."""
        if isinstance(value, str):
            return cls[value.strip().upper()]
        return cls(value)


@dataclass
class LogRecord:
    """
    Structured log record.

    Attributes:
        level: Log level
        message: Log message
        timestamp: Record timestamp
        context: Additional context
        exception: Exception info
    """

    level: LogLevel
    message: str
    timestamp: datetime = field(default_factory=datetime.now)
    context: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[BaseException] = None
    logger_name: str = "nexavalidate"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.name,
            "message": self.message,
            "logger": self.logger_name,
        }

        if self.context:
            data["context"] = self.context

        if self.exception:
            data["exception"] = {
                "type": type(self.exception).__name__,
                "message": str(self.exception),
            }

        return data

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), default=repr)


class LogFormatter:
    """Base log formatter."""

    def format(self, record: LogRecord) -> str:
        """Format log record."""
        raise NotImplementedError


class TextFormatter(LogFormatter):
    """
    Plain text formatter.

    Example output:
        2024-01-15 10:30:45 [DEBUG] rule skipped field=age validator=min
    """

    def __init__(
        self,
        format_string: Optional[str] = None,
        date_format: str = "%Y-%m-%d %H:%M:%S",
    ):
        self.format_string = format_string or "{timestamp} [{level}] {message}"
        self.date_format = date_format

    def format(self, record: LogRecord) -> str:
        """Format as text."""
        message = record.message

        # Add context as key=value pairs
        if record.context:
            context_str = " ".join(
                f"{k}={v}" for k, v in record.context.items()
            )
            message = f"{message} {context_str}"

        output = self.format_string.format(
            timestamp=record.timestamp.strftime(self.date_format),
            level=record.level.name,
            message=message,
            logger=record.logger_name,
        )

        if record.exception:
            output += "\n" + "".join(
                traceback.format_exception(
                    type(record.exception),
                    record.exception,
                    record.exception.__traceback__,
                )
            )

        return output


class JsonFormatter(LogFormatter):
    """JSON formatter for structured logging."""

    def format(self, record: LogRecord) -> str:
        return record.to_json()


class StreamHandler:
    """Stream output handler."""

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        formatter: Optional[LogFormatter] = None,
        level: LogLevel = LogLevel.DEBUG,
    ):
        self.stream = stream or sys.stderr
        self.formatter = formatter or TextFormatter()
        self.level = level

    def handle(self, record: LogRecord) -> None:
        """Write record if it passes the handler level."""
        if record.level >= self.level:
            self.stream.write(self.formatter.format(record) + "\n")
            self.stream.flush()


class Logger:
    """
    Structured logger.

    Example:
        logger = get_logger("nexavalidate.validation")

        logger.debug("rule skipped", field="age", validator="min")

        # With context
        run_logger = logger.with_context(scene="create")
        run_logger.info("validation finished", passed=False)
    """

    def __init__(
        self,
        name: str = "nexavalidate",
        level: LogLevel = LogLevel.WARNING,
        handlers: Optional[List[StreamHandler]] = None,
    ):
        self.name = name
        self.level = level
        self._handlers = handlers if handlers is not None else []
        self._context: Dict[str, Any] = {}

    def add_handler(self, handler: StreamHandler) -> "Logger":
        """Add log handler."""
        self._handlers.append(handler)
        return self

    def set_level(self, level: Union[str, int, LogLevel]) -> "Logger":
        """Change minimum level."""
        self.level = LogLevel.parse(level)
        return self

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= self.level

    def with_context(self, **context: Any) -> "Logger":
        """
        Create logger with additional context.

        The new logger shares handlers and level with this one.
        """
        new_logger = Logger(
            name=self.name,
            level=self.level,
            handlers=self._handlers,
        )
        new_logger._context = {**self._context, **context}
        return new_logger

    def _log(
        self,
        level: LogLevel,
        message: str,
        exception: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        if level < self.level:
            return

        record = LogRecord(
            level=level,
            message=message,
            context={**self._context, **context},
            exception=exception,
            logger_name=self.name,
        )

        for handler in self._handlers:
            try:
                handler.handle(record)
            except Exception:
                pass  # Don't let logging errors break validation

    def debug(self, message: str, **context: Any) -> None:
        self._log(LogLevel.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self._log(LogLevel.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self._log(LogLevel.WARNING, message, **context)

    def error(
        self,
        message: str,
        exception: Optional[BaseException] = None,
        **context: Any,
    ) -> None:
        self._log(LogLevel.ERROR, message, exception, **context)


# Global logger registry
_loggers: Dict[str, Logger] = {}
_default_level = LogLevel.WARNING


def get_logger(
    name: str = "nexavalidate",
    level: Optional[Union[str, int, LogLevel]] = None,
) -> Logger:
    """
    Get or create logger.

    Args:
        name: Logger name
        level: Log level, applied when given

    Returns:
        Logger instance
    """
    if name not in _loggers:
        _loggers[name] = Logger(
            name=name,
            level=_default_level,
            handlers=[StreamHandler()],
        )

    logger = _loggers[name]
    if level is not None:
        logger.set_level(level)

    return logger


def set_log_level(level: Union[str, int, LogLevel]) -> None:
    """Set the level of existing and future loggers."""
    global _default_level

    _default_level = LogLevel.parse(level)
    for logger in _loggers.values():
        logger.level = _default_level


def configure_logging(
    level: Union[str, int, LogLevel] = LogLevel.INFO,
    format: str = "text",
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure every nexavalidate logger.

    Args:
        level: Log level
        format: Output format ("text" or "json")
        stream: Output stream, stderr by default
    """
    formatter = JsonFormatter() if format == "json" else TextFormatter()
    handler = StreamHandler(stream=stream, formatter=formatter)

    get_logger("nexavalidate")
    for logger in _loggers.values():
        logger._handlers[:] = [handler]

    set_log_level(level)
