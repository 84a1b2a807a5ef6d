"""Utility functions for infiller.

This module provides utility functions including:

- Logging setup and configuration
- Processing statistics and progress logging
"""

from infiller.utils.logging import (
    ProcessingLogger,
    ProcessingStats,
    configure_logging,
)

__all__ = [
    "ProcessingLogger",
    "ProcessingStats",
    "configure_logging",
]
