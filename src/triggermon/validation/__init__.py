"""
Validation and error handling for the triggermon package.

This module provides input validation, the exception hierarchy of the monitor
and consistent error reporting across the application.
"""

from .exceptions import (
    CaptureError,
    CollectorError,
    CustomCommandError,
    ErrorSeverity,
    MonitorError,
    RecorderError,
    TriggerExpressionError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_file_error,
    handle_subprocess_error,
)

from .validators import (
    validate_boolean,
    validate_capture_window,
    validate_enum_choice,
    validate_non_empty_string,
    validate_positive_float,
    validate_positive_integer,
)

__all__ = [
    # Exceptions
    "ErrorSeverity",
    "ValidationError",
    "MonitorError",
    "CollectorError",
    "TriggerExpressionError",
    "CustomCommandError",
    "CaptureError",
    "RecorderError",
    # Error handling
    "handle_error",
    "handle_config_error",
    "handle_file_error",
    "handle_subprocess_error",
    "handle_cli_error",
    # Validators
    "validate_boolean",
    "validate_capture_window",
    "validate_enum_choice",
    "validate_non_empty_string",
    "validate_positive_float",
    "validate_positive_integer",
]
