"""Structured logging configuration for whatschanging using structlog.

Provides structured key/value logging on top of the standard library
``logging`` module, with lazy initialisation from the settings.
"""

import logging
import os
import sys
from collections import deque
from pathlib import Path
from typing import Any, cast

import structlog

from ..config import get_settings


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    structured: bool = True,
    console: bool = True,
    add_timestamp: bool = True,
    add_caller_info: bool = False,
    colorize: bool = True,
    force: bool = True,
) -> None:
    """Configure structured logging for whatschanging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        structured: Use JSON structured output
        console: Enable console output (overridden by WHATSCHANGING_DISABLE_CONSOLE_LOGGING)
        add_timestamp: Add timestamps to logs
        add_caller_info: Add caller information
        colorize: Colorize console output (only for non-structured)
        force: Replace handlers already installed on the root logger
    """
    if os.getenv("WHATSCHANGING_DISABLE_CONSOLE_LOGGING") == "1":
        console = False

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
    ]

    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if add_caller_info:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            )
        )

    processors.extend(
        [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]
    )

    if structured:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colorize and console))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = []

    if console:
        # stdout is reserved for command output
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(file_handler)

    if not handlers:
        handlers.append(logging.NullHandler())
        level = "CRITICAL"

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
        handlers=handlers,
        force=force,
    )

    global _logging_initialized
    _logging_initialized = True


# Global state for lazy initialization
_logging_initialized = False


def _ensure_logging_initialized() -> None:
    """Ensure logging is initialized (called on the first log call, not at import time).

    Handlers the host program already put on the root logger are left alone.
    """
    if _logging_initialized:
        return

    try:
        settings = get_settings()
        setup_logging(
            level="DEBUG" if settings.debug_mode else "WARNING",
            log_file=settings.log_file,
            structured=settings.structured_logs,
            colorize=settings.debug_mode,
            force=False,
        )
    except (OSError, ValueError):
        # Unreadable settings or log path, fall back to plain console logging
        setup_logging(level="WARNING", structured=False, force=False)


class _LazyLogger:
    """Stand-in for a structlog logger that sets logging up on first use."""

    def __init__(self, name: str) -> None:
        self._name = name

    def __getattr__(self, attr: str) -> Any:
        _ensure_logging_initialized()
        return getattr(structlog.get_logger(self._name), attr)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Safe to call at module level: logging is configured on the first log
    call, not here.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    return cast(structlog.BoundLogger, _LazyLogger(name))


class LogContext:
    """Context manager for temporary log context."""

    def __init__(self, logger: structlog.BoundLogger, **kwargs) -> None:
        """Initialize with logger and context.

        Args:
            logger: Logger instance
            **kwargs: Context key-value pairs
        """
        self.logger = logger
        self.context = kwargs

    def __enter__(self) -> structlog.types.BindableLogger:
        """Enter context and bind values."""
        self.bound_logger = self.logger.bind(**self.context)
        return self.bound_logger

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit context; the bound logger is simply dropped."""
        pass


class PerformanceLogger:
    """Logger for performance metrics.

    Only the most recent ``max_samples`` timings of each operation are kept.
    """

    def __init__(
        self, base_logger: structlog.BoundLogger | None = None, max_samples: int = 1000
    ) -> None:
        """Initialize performance logger.

        Args:
            base_logger: Base logger to use
            max_samples: Timings kept per operation
        """
        self.logger = base_logger or get_logger(__name__)
        self.max_samples = max_samples
        self.metrics: dict[str, deque[float]] = {}

    def log_timing(self, operation: str, duration: float, **kwargs) -> None:
        """Log operation timing.

        Args:
            operation: Operation name
            duration: Duration in seconds
            **kwargs: Additional context
        """
        if operation not in self.metrics:
            self.metrics[operation] = deque(maxlen=self.max_samples)
        self.metrics[operation].append(duration)

        self.logger.debug(
            "performance_timing", operation=operation, duration=duration, **kwargs
        )

    def get_stats(self, operation: str | None = None) -> dict[str, Any]:
        """Get performance statistics.

        Args:
            operation: Optional specific operation

        Returns:
            Statistics dict
        """
        if operation:
            if operation not in self.metrics:
                return {}
            return _summarize(self.metrics[operation])

        return {op: _summarize(values) for op, values in self.metrics.items() if values}


def _summarize(values: deque[float]) -> dict[str, Any]:
    return {
        "count": len(values),
        "mean": sum(values) / len(values),
        "min": min(values),
        "max": max(values),
        "total": sum(values),
    }
