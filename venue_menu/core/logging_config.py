"""
Central logging configuration.
Creates console and optional file handlers with support for
TRACE/INFO/WARNING/ERROR levels, plus a timing decorator for repositories.
"""
from __future__ import annotations

import functools
import logging
import os
import time
from typing import Any, Callable, Optional, TypeVar

from venue_menu.core.config import settings

F = TypeVar("F", bound=Callable[..., Any])

TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

_LEVEL_NAMES = {
    "TRACE": TRACE_LEVEL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
}


def trace(self: logging.Logger, message: str, *args, **kwargs) -> None:
    """Emit a TRACE-level message on the logger instance."""
    if self.isEnabledFor(TRACE_LEVEL):
        self._log(TRACE_LEVEL, message, args, **kwargs)


logging.Logger.trace = trace  # type: ignore[attr-defined]


class LogLevelFilter(logging.Filter):
    """Filter log records to an allowed set of levels."""

    def __init__(self, allowed_levels: set[int]) -> None:
        super().__init__()
        self._allowed_levels = allowed_levels

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno in self._allowed_levels


def _parse_allowed_levels(raw: Optional[str]) -> set[int]:
    """Parse a comma separated level list ("TRACE,INFO") into level numbers."""
    default_levels = set(_LEVEL_NAMES.values())
    if not raw:
        return default_levels

    levels = {
        _LEVEL_NAMES[name.strip().upper()]
        for name in raw.split(",")
        if name.strip().upper() in _LEVEL_NAMES
    }
    return levels or default_levels


def _resolve_level(level_name: Optional[str]) -> int:
    """Resolve the configured log level string to its numeric value."""
    if not level_name:
        return logging.INFO
    normalized = level_name.strip().upper()
    if normalized == "TRACE":
        return TRACE_LEVEL
    return getattr(logging, normalized, logging.INFO)


def configure_logging() -> None:
    """Configure the root logger with a console handler and, if set, a file handler."""
    root_logger = logging.getLogger()
    root_logger.setLevel(_resolve_level(settings.LOG_LEVEL))
    root_logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    )
    level_filter = LogLevelFilter(_parse_allowed_levels(settings.LOG_LEVELS))

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.LOG_FILE_PATH:
        log_dir = os.path.dirname(settings.LOG_FILE_PATH)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(settings.LOG_FILE_PATH))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(level_filter)
        root_logger.addHandler(handler)


def log_db_timing(func: F) -> F:
    """
    Decorator to log the execution time of repository methods.
    Logs the qualified name, the positional arguments after 'self'
    and the keyword arguments, and the duration in milliseconds.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__)

        arg_parts = [str(arg) for arg in args[1:]]
        arg_parts.extend(f"{key}={value}" for key, value in kwargs.items())
        args_str = ", ".join(arg_parts)

        start_time = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "DB_OP | %s | duration=%.3fms | args=(%s) | error=%s",
                func.__qualname__,
                elapsed_ms,
                args_str,
                str(e),
            )
            raise
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "DB_OP | %s | duration=%.3fms | args=(%s)",
            func.__qualname__,
            elapsed_ms,
            args_str,
        )
        return result
    return wrapper  # type: ignore[return-value]
