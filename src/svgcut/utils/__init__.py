"""Utility functions for svgcut.

This module provides utility functions including:

- Logging setup and configuration
- Conversion statistics tracking
"""

from svgcut.utils.logging import (
    ConversionLogger,
    ConversionStats,
    configure_logging,
)

__all__ = [
    "ConversionLogger",
    "ConversionStats",
    "configure_logging",
]
