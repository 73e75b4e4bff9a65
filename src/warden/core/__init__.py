"""Warden core primitives: errors, logging, settings and timestamps."""

from warden.core.errors import (
    ConfigError,
    ErrorCategory,
    ErrorContext,
    InvalidConfigError,
    IterationError,
    MissingConfigError,
    OrchestrationError,
    WardenError,
    categorize_error,
)
from warden.core.logging import LogContext, configure_logging, get_logger

__all__ = [
    "ConfigError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidConfigError",
    "IterationError",
    "MissingConfigError",
    "OrchestrationError",
    "WardenError",
    "categorize_error",
    "LogContext",
    "configure_logging",
    "get_logger",
]
