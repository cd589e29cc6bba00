"""Shared utilities and infrastructure.

This module contains the exception hierarchy and logging setup used
throughout bloomkit.
"""

from __future__ import annotations

from bloomkit.utils.exceptions import (
    BloomKitError,
    ConfigurationConflictError,
    ConfigurationError,
    IncompatibleFilterError,
    IncompleteConfigurationError,
    ValidationError,
)
from bloomkit.utils.logging_config import get_logger, setup_logging

__all__ = [
    # Exceptions
    "BloomKitError",
    "ConfigurationConflictError",
    "ConfigurationError",
    "IncompatibleFilterError",
    "IncompleteConfigurationError",
    "ValidationError",
    # Logging
    "get_logger",
    "setup_logging",
]
