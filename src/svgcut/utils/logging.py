"""Logging utilities for svgcut."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog


@dataclass
class ConversionStats:
    """Statistics from a conversion run."""

    elements_processed: int = 0
    shapes_processed: int = 0
    paths_plotted: int = 0
    pattern_fills: int = 0
    reference_errors: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate conversion duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    logger = structlog.get_logger("svgcut")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class ConversionLogger:
    """Logger for tracking conversion progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ConversionStats()

    def log_document_start(self, source: str) -> None:
        """Log start of document conversion."""
        self._logger.info("Converting document", source=source)

    def log_element(self, element: str) -> None:
        """Log an element entering the traversal."""
        self._logger.debug("Processing element", element=element)
        self._stats.elements_processed += 1
        if element not in ("svg", "g", "pattern"):
            self._stats.shapes_processed += 1

    def log_pattern_fill(self, fragment_id: str) -> None:
        """Log a successfully loaded pattern reference."""
        self._logger.debug("Pattern fill loaded", fragment=fragment_id)
        self._stats.pattern_fills += 1

    def log_reference_error(self, fragment_id: str, error: Exception) -> None:
        """Log a failed reference load."""
        self._logger.warning(
            "Referenced element load failed",
            fragment=fragment_id,
            error=str(error),
            error_type=type(error).__name__,
        )
        self._stats.reference_errors += 1
        self._stats.errors.append((fragment_id, str(error)))

    def log_document_complete(self, paths_plotted: int, duration_ms: float) -> None:
        """Log successful document conversion."""
        self._stats.paths_plotted = paths_plotted
        self._logger.info(
            "Document converted",
            elements=self._stats.elements_processed,
            shapes=self._stats.shapes_processed,
            paths=paths_plotted,
            duration_ms=round(duration_ms, 2),
        )

    @property
    def stats(self) -> ConversionStats:
        """Get current conversion statistics."""
        return self._stats
