"""Configuration management for svgcut.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- GeometryConfig: Curve flattening and pattern tiling limits
- DocumentConfig: Length conversion and fallback viewport size
- OutputConfig: Styling of written cut paths
- LoggingConfig: Logging settings
- SvgCutSettings: Main application settings
"""

from svgcut.config.settings import (
    DocumentConfig,
    GeometryConfig,
    LoggingConfig,
    OutputConfig,
    SvgCutSettings,
    get_default_settings,
)

__all__ = [
    "DocumentConfig",
    "GeometryConfig",
    "LoggingConfig",
    "OutputConfig",
    "SvgCutSettings",
    "get_default_settings",
]
