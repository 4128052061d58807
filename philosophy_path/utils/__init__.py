"""
Shared utility functions.

This package contains utility code used by the engine, the batch
tester and the HTTP server.
"""

from .logging import (
    JsonlFormatter,
    get_logger,
    log_event,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "log_event",
    "JsonlFormatter",
]
