"""Core kvgraph utilities.

This module exports core utilities for use throughout the application.
"""

from kvgraph.core.config import Settings, get_settings
from kvgraph.core.exceptions import (
    HookAbortedError,
    KvGraphError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from kvgraph.core.logging import (
    LoggingContext,
    configure_logging,
    get_logger,
)

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "LoggingContext",
    "KvGraphError",
    "ValidationError",
    "NotFoundError",
    "StoreError",
    "HookAbortedError",
]
