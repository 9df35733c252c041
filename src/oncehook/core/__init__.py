"""Core oncehook utilities.

This module exports configuration and logging helpers used throughout
the package.
"""

from oncehook.core.config import Settings, get_settings
from oncehook.core.logging import configure_logging, get_logger

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
]
