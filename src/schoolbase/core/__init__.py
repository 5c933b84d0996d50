"""Core SchoolBase utilities: settings, structured logging and errors."""

from schoolbase.core.config import Settings, get_settings
from schoolbase.core.exceptions import SchoolBaseError
from schoolbase.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
    new_correlation_id,
)

__all__ = [
    "SchoolBaseError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "bind_correlation_id",
    "clear_context",
    "new_correlation_id",
]
