"""SVG writer for plotted cut paths.

This module provides the SvgExporter, which records plot calls like the
RecordingExporter and serializes them into a plain SVG document.
"""

from pathlib import Path as FilePath

from fontTools.pens.svgPathPen import SVGPathPen
from lxml import etree

from svgcut.config import OutputConfig
from svgcut.core.exporter import RecordingExporter
from svgcut.domain import Viewport
from svgcut.exceptions import ExportWriteError
from svgcut.io.reader import SVG_NAMESPACE


def _format_number(value: float) -> str:
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


class SvgExporter(RecordingExporter):
    """Writes plotted paths as an SVG document of unfilled strokes.

    The output uses root coordinates directly, so its viewBox is the root
    viewport of the source document.

    Example:
        exporter = SvgExporter(Viewport(0, 0, 210, 297))
        convert(document, exporter)
        exporter.write(FilePath("out.svg"))
    """

    def __init__(self, viewport: Viewport, config: OutputConfig | None = None) -> None:
        """Initialize the exporter.

        Args:
            viewport: Root viewport of the converted document
            config: Stroke styling of the written paths
        """
        super().__init__()
        self._viewport = viewport
        self._config = config or OutputConfig()

    def to_element(self) -> etree._Element:
        """Build the output document tree."""
        width = _format_number(self._viewport.width)
        height = _format_number(self._viewport.height)
        root = etree.Element(
            f"{{{SVG_NAMESPACE}}}svg",
            nsmap={None: SVG_NAMESPACE},
            attrib={
                "version": "1.1",
                "width": width,
                "height": height,
                "viewBox": f"0 0 {width} {height}",
            },
        )

        for record in self.records:
            pen = SVGPathPen(None, ntos=_format_number)
            record.path.draw(pen)
            commands = pen.getCommands()
            if not commands:
                continue

            attrib = {
                "d": commands,
                "fill": "none",
                "stroke": self._config.stroke_color,
                "stroke-width": _format_number(self._config.stroke_width),
            }
            if record.dasharray:
                attrib["stroke-dasharray"] = " ".join(
                    _format_number(length) for length in record.root_dasharray()
                )
            etree.SubElement(root, f"{{{SVG_NAMESPACE}}}path", attrib=attrib)

        return root

    def to_string(self) -> str:
        """Serialize the output document."""
        return etree.tostring(self.to_element(), pretty_print=True, encoding="unicode")

    def write(self, output_path: FilePath) -> None:
        """Write the output document.

        Raises:
            ExportWriteError: If the file cannot be written
        """
        tree = etree.ElementTree(self.to_element())
        try:
            with open(output_path, "wb") as output_file:
                tree.write(
                    output_file,
                    xml_declaration=True,
                    encoding="utf-8",
                    pretty_print=True,
                )
        except OSError as e:
            raise ExportWriteError(str(output_path), str(e)) from e


def get_output_path(input_path: FilePath, suffix: str = "-cut") -> FilePath:
    """Generate the default output path.

    Args:
        input_path: Path to the source document
        suffix: Suffix to add before the extension

    Returns:
        Path like "drawing-cut.svg" next to the input
    """
    return input_path.with_name(f"{input_path.stem}{suffix}.svg")
