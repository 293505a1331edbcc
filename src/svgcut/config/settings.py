"""Configuration settings for svgcut."""

from pathlib import Path

from pydantic import BaseModel, Field


class GeometryConfig(BaseModel):
    """Configuration for geometry operations.

    Tolerances are in root user units (CSS pixels for documents without a
    viewBox).
    """

    flatten_tolerance: float = Field(
        default=0.05,
        gt=0.0,
        le=10.0,
        description="Maximum deviation when flattening curves for pattern clipping",
    )
    max_pattern_tiles: int = Field(
        default=10_000,
        ge=1,
        description="Upper bound on pattern tiles per filled shape",
    )


class DocumentConfig(BaseModel):
    """Configuration for reading documents."""

    dpi: float = Field(
        default=96.0,
        gt=0.0,
        description="User units per inch, used to convert absolute length units",
    )
    default_width: float = Field(
        default=300.0,
        gt=0.0,
        description="Root viewport width when the document declares none",
    )
    default_height: float = Field(
        default=150.0,
        gt=0.0,
        description="Root viewport height when the document declares none",
    )


class OutputConfig(BaseModel):
    """Configuration for the SVG exporter."""

    stroke_width: float = Field(
        default=0.5,
        gt=0.0,
        description="Stroke width of written cut paths, in root user units",
    )
    stroke_color: str = Field(
        default="black",
        description="Stroke color of written cut paths",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class SvgCutSettings(BaseModel):
    """Main application settings."""

    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    document: DocumentConfig = Field(default_factory=DocumentConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> SvgCutSettings:
    """Get default application settings."""
    return SvgCutSettings()
