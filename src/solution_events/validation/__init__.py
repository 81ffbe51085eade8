"""
Validation and error handling for the solution_events package.

This module provides input validation and error handling with consistent
error reporting across the application.
"""

from .exceptions import (
    ConfigNotFoundError,
    ErrorSeverity,
    MalformedConfigError,
    PersistenceError,
    SolutionEventsError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_file_error,
    handle_subprocess_error,
)

from .validators import (
    validate_boolean,
    validate_command_list,
    validate_encoding,
    validate_file_name,
    validate_non_empty_string,
    validate_optional_string,
)

__all__ = [
    # Exceptions
    "SolutionEventsError",
    "ValidationError",
    "ConfigNotFoundError",
    "MalformedConfigError",
    "PersistenceError",
    # Error handling
    "ErrorSeverity",
    "handle_error",
    "handle_config_error",
    "handle_file_error",
    "handle_subprocess_error",
    "handle_cli_error",
    # Validators
    "validate_boolean",
    "validate_command_list",
    "validate_encoding",
    "validate_file_name",
    "validate_non_empty_string",
    "validate_optional_string",
]
