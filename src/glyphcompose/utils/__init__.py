"""Utility functions for glyphcompose.

This module provides utility functions including:

- Logging setup and configuration
- Accept-run statistics
"""

from glyphcompose.utils.logging import (
    AcceptLogger,
    AcceptStats,
    configure_logging,
)

__all__ = [
    "AcceptLogger",
    "AcceptStats",
    "configure_logging",
]
