"""
Structured error types for Warden.

Warden separates failures by where they happen, because the scheduler treats
them differently:

- **Construction errors** (``ConfigError`` family) are raised synchronously
  while building a configuration or a Warden and are never recovered.
- **Iteration errors** are anything raised by the iteration processor or by a
  phase hook while the loop is running. The loop contains them and hands them
  to the ``on_error`` hooks; they are plain exceptions, optionally wrapped in
  ``IterationError`` by processors that want to attach context.
- **Lifecycle-hook errors** (start/pause/stop hooks) propagate unchanged to
  the caller of ``start()``/``pause()``/``stop()``.

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                        WardenError                          │
        │              (category, context, cause)                     │
        ├─────────────────────────────────────────────────────────────┤
        │                                                             │
        │  ConfigError              OrchestrationError                │
        │  (CONFIG)                 (ORCHESTRATION)                   │
        │     │                          │                            │
        │  MissingConfigError       IterationError                    │
        │  InvalidConfigError       (ITERATION)                       │
        │  (+ ValueError)                                             │
        └─────────────────────────────────────────────────────────────┘

Examples:
    >>> error = InvalidConfigError("name", "  ", "Warden name can not be empty.")
    >>> isinstance(error, ValueError)
    True
    >>> error.to_dict()["category"]
    'CONFIG'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories used for classification in logs and hooks."""

    CONFIG = "CONFIG"  # Missing or invalid settings
    ORCHESTRATION = "ORCHESTRATION"  # Lifecycle / state machine misuse
    ITERATION = "ITERATION"  # Failure inside one loop pass
    WATCHER = "WATCHER"  # Failure inside a single watcher check
    INTERNAL = "INTERNAL"  # Bugs, unexpected state
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """Structured metadata attached to a ``WardenError``.

    Only non-None fields are serialized by ``to_dict()``; anything that does
    not have a dedicated field goes into ``metadata``.
    """

    warden: str | None = None
    ordinal: int | None = None
    watcher: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result: dict[str, Any] = {}
        for key in ("warden", "ordinal", "watcher"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class WardenError(Exception):
    """
    Base exception for all Warden errors.

    Every instance carries a ``category``, an ``ErrorContext`` and an optional
    ``cause``. Subclasses set ``default_category`` to give sensible defaults.

    Examples:
        >>> error = WardenError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(warden="api", ordinal=3).context.ordinal
        3
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> WardenError:
        """
        Add context to this error (fluent API).

        Usage:
            raise IterationError("Check failed").with_context(
                warden="api-monitor",
                ordinal=12,
            )
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(WardenError):
    """
    Configuration error.

    Raised at construction time; configuration must be fixed by the caller.
    """

    default_category = ErrorCategory.CONFIG


class MissingConfigError(ConfigError):
    """Required configuration is missing."""

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(message or f"Missing required configuration: {key}")


class InvalidConfigError(ConfigError, ValueError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


# =============================================================================
# ORCHESTRATION ERRORS
# =============================================================================


class OrchestrationError(WardenError):
    """Scheduler lifecycle error."""

    default_category = ErrorCategory.ORCHESTRATION


class IterationError(OrchestrationError):
    """Failure of a single iteration, raised by processors that want context."""

    default_category = ErrorCategory.ITERATION

    def __init__(
        self,
        message: str,
        *,
        warden: str | None = None,
        ordinal: int | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        if warden is not None:
            self.context.warden = warden
        if ordinal is not None:
            self.context.ordinal = ordinal


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def categorize_error(error: BaseException) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, WardenError):
        return error.category
    if isinstance(error, TimeoutError):
        return ErrorCategory.WATCHER
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "WardenError",
    "ConfigError",
    "MissingConfigError",
    "InvalidConfigError",
    "OrchestrationError",
    "IterationError",
    "categorize_error",
]
