"""Exception hierarchy for bloomkit.

Configuration problems are reported at the offending call, before any filter
is constructed. Merging structurally different filters is a programming error
and is reported with IncompatibleFilterError.
"""

from __future__ import annotations

from typing import Any


class BloomKitError(Exception):
    """Base exception for all bloomkit errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize bloomkit error."""
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ValidationError(BloomKitError):
    """Data validation errors."""


class ConfigurationError(ValidationError):
    """Configuration validation errors (values out of range, bad config files)."""


class ConfigurationConflictError(ConfigurationError):
    """A configuration value was set twice, or sizing modes were mixed."""


class IncompleteConfigurationError(ConfigurationError):
    """A filter was requested without exactly one complete sizing group."""


class IncompatibleFilterError(BloomKitError):
    """Filters with different length or hash strategy cannot be merged."""
