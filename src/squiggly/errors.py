"""Custom exception hierarchy for squiggly.

All exceptions inherit from SquigglyError so callers can catch broadly
or narrowly as needed.
"""

from __future__ import annotations


class SquigglyError(Exception):
    """Base for all squiggly errors."""


class InvalidNameError(SquigglyError):
    """A filter name could not be constructed from the given text."""


class ExpressionError(SquigglyError):
    """JSONata evaluation of a variable reference failed."""


class FunctionResolutionError(SquigglyError):
    """A function name or alias is unknown, or not allowed by the active policy."""

    def __init__(self, function_name: str, message: str) -> None:
        self.function_name = function_name
        super().__init__(f"Function '{function_name}': {message}")


class FunctionInvocationError(SquigglyError):
    """A function call failed (bad arguments, conversion, or runtime error)."""

    def __init__(
        self,
        function_name: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        self.function_name = function_name
        self.cause = cause
        super().__init__(f"Function '{function_name}' failed: {message}")


class FilterLoadError(SquigglyError):
    """Filter document parsing or structure validation failed."""


class ConfigLoadError(SquigglyError):
    """Configuration file parsing or validation failed."""
