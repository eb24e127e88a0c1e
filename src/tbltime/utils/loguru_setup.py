#!/usr/bin/env python3
"""Loguru-based logging for tbltime.

The library logs through a single module-global ``logger`` so applications can
turn on tracing of formula resolution and filtering without touching the
standard ``logging`` tree.

Basic Usage Examples:
    from tbltime.utils.loguru_setup import logger

    logger.configure_level("DEBUG")
    logger.debug("Resolved range")

    # Or use environment variable
    # export TBLTIME_LOG_LEVEL=DEBUG

Environment Variables:
    TBLTIME_LOG_LEVEL: Set the global log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    TBLTIME_LOG_FILE: Optional log file path for file output
    TBLTIME_DISABLE_COLORS: Set to "true" to disable colored output
"""

import os
import sys
from pathlib import Path

from loguru import logger as _loguru_logger

# The library owns the handler set; drop loguru's default stderr sink
_loguru_logger.remove()

# Environment overrides
DEFAULT_LOG_LEVEL = os.getenv("TBLTIME_LOG_LEVEL", "ERROR").upper()
LOG_FILE = os.getenv("TBLTIME_LOG_FILE")
DISABLE_COLORS = os.getenv("TBLTIME_DISABLE_COLORS", "false").lower() == "true"

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

SIMPLE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"

LEVEL_HIERARCHY = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]

FILE_ROTATION = "10 MB"
FILE_RETENTION = "1 week"


class TbltimeLogger:
    """Thin wrapper around loguru with environment-driven configuration."""

    def __init__(self) -> None:
        self._level = DEFAULT_LOG_LEVEL
        self._log_file = LOG_FILE
        self._disable_colors = DISABLE_COLORS
        self._install_handlers()

    def _install_handlers(self) -> None:
        """Replace every loguru handler with the configured stderr and file sinks."""
        _loguru_logger.remove()

        format_template = SIMPLE_FORMAT if self._disable_colors else LOG_FORMAT

        _loguru_logger.add(
            sys.stderr,
            level=self._level,
            format=format_template,
            colorize=not self._disable_colors,
            backtrace=True,
            diagnose=False,
        )

        if self._log_file:
            log_path = Path(self._log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            _loguru_logger.add(
                str(log_path),
                level=self._level,
                format=SIMPLE_FORMAT,
                rotation=FILE_ROTATION,
                retention=FILE_RETENTION,
                backtrace=True,
                diagnose=False,
            )

    def configure_level(self, level: str) -> "TbltimeLogger":
        """Configure the log level.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

        Returns:
            Self for method chaining
        """
        self._level = level.upper()
        self._install_handlers()
        return self

    def configure_file(self, log_file: str | Path | None) -> "TbltimeLogger":
        """Configure file logging, or disable it with ``None``."""
        self._log_file = str(log_file) if log_file else None
        self._install_handlers()
        return self

    def disable_colors(self, disable: bool = True) -> "TbltimeLogger":
        """Enable or disable colored output."""
        self._disable_colors = disable
        self._install_handlers()
        return self

    # depth=1 so records point at the caller, not this wrapper
    def debug(self, message: str, *args, **kwargs):
        _loguru_logger.opt(depth=1).debug(message, *args, **kwargs)
        return self

    def info(self, message: str, *args, **kwargs):
        _loguru_logger.opt(depth=1).info(message, *args, **kwargs)
        return self

    def warning(self, message: str, *args, **kwargs):
        _loguru_logger.opt(depth=1).warning(message, *args, **kwargs)
        return self

    def error(self, message: str, *args, **kwargs):
        _loguru_logger.opt(depth=1).error(message, *args, **kwargs)
        return self

    def getEffectiveLevel(self) -> str:
        """Name of the level handlers currently accept."""
        return self._level

    def isEnabledFor(self, level: str) -> bool:
        """Whether a record at ``level`` would reach the handlers."""
        current_index = LEVEL_HIERARCHY.index(self._level)
        check_index = LEVEL_HIERARCHY.index(level.upper())
        return check_index >= current_index

    def bind(self, **kwargs):
        """Return a loguru logger carrying extra context (e.g. ``column=...``)."""
        return _loguru_logger.bind(**kwargs)

    def add_sink(self, sink, **kwargs) -> int:
        """Attach an extra loguru sink and return its handler id.

        The next ``configure_*`` call reinstalls the handler set and drops it.
        """
        kwargs.setdefault("level", self._level)
        return _loguru_logger.add(sink, **kwargs)

    def remove_sink(self, handler_id: int) -> None:
        _loguru_logger.remove(handler_id)


# Module-global instance used by every tbltime module
logger = TbltimeLogger()


def configure_level(level: str):
    """Configure the global logger level.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logger.configure_level(level)


def configure_file(log_file: str | Path | None):
    """Configure global file logging."""
    logger.configure_file(log_file)


def disable_colors(disable: bool = True):
    """Enable or disable colored output globally."""
    logger.disable_colors(disable)
