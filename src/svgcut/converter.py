"""Conversion orchestration.

This module ties the pieces together: load a document, walk it with a
DocumentTraversal into an exporter, and write the result.

Key components:
- SvgConverter: Main orchestrator class for document conversion
"""

import time
from pathlib import Path as FilePath

import structlog
from fontTools.misc.transform import Transform

from svgcut.config import SvgCutSettings
from svgcut.core.exporter import Exporter
from svgcut.domain import Path
from svgcut.io import DocumentTraversal, SvgDocument, SvgExporter
from svgcut.utils import ConversionLogger, ConversionStats


class _CountingExporter:
    """Forwards plot calls, counting them."""

    def __init__(self, target: Exporter) -> None:
        self._target = target
        self.count = 0

    def plot(self, path: Path, dasharray: list[float], inverse_transform: Transform) -> None:
        self.count += 1
        self._target.plot(path, dasharray, inverse_transform)


class SvgConverter:
    """Orchestrates the conversion of SVG documents to cut paths.

    Example:
        settings = SvgCutSettings()
        converter = SvgConverter(settings)
        stats = converter.convert_file(
            input_path=FilePath("drawing.svg"),
            output_path=FilePath("drawing-cut.svg"),
        )
    """

    def __init__(self, settings: SvgCutSettings | None = None) -> None:
        """Initialize the converter.

        Args:
            settings: Conversion settings (defaults if None)
        """
        self.settings = settings or SvgCutSettings()
        self.logger = structlog.get_logger(__name__)

    def create_exporter(self, document: SvgDocument) -> SvgExporter:
        """Create an SVG exporter sized to the document's root viewport."""
        viewport = DocumentTraversal(document, self.settings).root_viewport()
        return SvgExporter(viewport, self.settings.output)

    def convert(self, document: SvgDocument, exporter: Exporter) -> ConversionStats:
        """Plot every path of a document into an exporter.

        Args:
            document: The parsed document
            exporter: Sink receiving one plot call per emitted path

        Returns:
            ConversionStats with element, shape and path counts
        """
        conversion_logger = ConversionLogger(self.logger)
        stats = conversion_logger.stats
        stats.start_time = time.time()
        conversion_logger.log_document_start(document.source)

        counter = _CountingExporter(exporter)
        DocumentTraversal(document, self.settings, conversion_logger).traverse(counter)

        stats.end_time = time.time()
        conversion_logger.log_document_complete(counter.count, stats.duration_seconds * 1000)
        return stats

    def convert_file(self, input_path: FilePath, output_path: FilePath) -> ConversionStats:
        """Convert an SVG file and write the cut paths.

        Raises:
            DocumentLoadError: If the input cannot be read or parsed
            DocumentFormatError: If the input is not an SVG document
            ExportWriteError: If the output cannot be written
        """
        return self.convert_document(SvgDocument.from_file(input_path), output_path)

    def convert_document(self, document: SvgDocument, output_path: FilePath) -> ConversionStats:
        """Convert an already loaded document and write the cut paths.

        Raises:
            ExportWriteError: If the output cannot be written
        """
        exporter = self.create_exporter(document)
        stats = self.convert(document, exporter)
        exporter.write(output_path)
        self.logger.info("Output written", path=str(output_path), paths=len(exporter))
        return stats
