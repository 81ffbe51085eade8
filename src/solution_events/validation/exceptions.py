"""
Exception types and error handling helpers.

This module defines the error taxonomy used across the package and the
small set of helpers that log an error consistently before deciding
whether to re-raise it.
"""

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class SolutionEventsError(Exception):
    """Base class for all errors raised by this package."""


class ValidationError(SolutionEventsError):
    """
    Exception raised when extension settings fail validation.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class ConfigNotFoundError(SolutionEventsError, FileNotFoundError):
    """Raised when a command document is requested but does not exist."""

    def __init__(self, path: Path):
        super().__init__(f"Command document not found: {path}")
        self.path = path


class MalformedConfigError(SolutionEventsError):
    """Raised when a command document cannot be parsed into the expected shape."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class PersistenceError(SolutionEventsError, OSError):
    """Raised when a command document cannot be written to disk."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_file_error(error: Exception, context: str, **kwargs) -> None:
    """Handle file-related errors."""
    handle_error(error, f"file {context}", **kwargs)


def handle_subprocess_error(error: Exception, command: str, **kwargs) -> None:
    """Handle subprocess-related errors."""
    handle_error(error, f"subprocess command '{command}'", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Handle CLI-related errors and exit."""
    exit_code = kwargs.pop('exit_code', 1)
    include_traceback = kwargs.pop('include_traceback', False)

    severity = kwargs.pop('severity', ErrorSeverity.CRITICAL if include_traceback else ErrorSeverity.ERROR)
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)

    sys.exit(exit_code)
