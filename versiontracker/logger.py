"""
Structured logging for versiontracker.

Provides centralized logging with console and file outputs,
log levels, and session counters for the version merges performed.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json

from .env import Settings


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Counts merges and corrupt records seen during the session.
    """

    def __init__(
        self,
        name: str = "versiontracker",
        level: str = "WARNING",
        log_dir: Optional[Path] = None,
        enable_file: bool = False,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()  # Remove existing handlers

        self.metrics = {
            "merges_performed": 0,
            "merges_skipped": 0,
            "versions_recorded": 0,
            "corrupt_records": 0,
            "merges_by_scope": {},
        }

        # Console handler
        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        # File handler
        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"versiontracker_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Session counters

    def record_merge(self, scope: str, new_version: bool):
        """Record a completed merge for a scope."""
        self.metrics["merges_performed"] += 1
        if new_version:
            self.metrics["versions_recorded"] += 1
        by_scope = self.metrics["merges_by_scope"]
        by_scope[scope] = by_scope.get(scope, 0) + 1

    def record_skipped_merge(self):
        """Record a merge request that was ignored because it already ran."""
        self.metrics["merges_skipped"] += 1

    def record_corrupt_record(self):
        self.metrics["corrupt_records"] += 1

    def get_metrics(self) -> dict:
        """Return a copy of the current counters."""
        metrics_copy = self.metrics.copy()
        metrics_copy["merges_by_scope"] = dict(self.metrics["merges_by_scope"])
        return metrics_copy


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "versiontracker",
    level: Optional[str] = None,
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    The level and log directory default to VERSIONTRACKER_LOG_LEVEL and
    VERSIONTRACKER_LOG_DIR when not given.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        settings = Settings.from_env()
        if level is None:
            level = settings.log_level
        if settings.log_dir is not None and "log_dir" not in kwargs:
            kwargs["log_dir"] = settings.log_dir
            kwargs.setdefault("enable_file", True)
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
