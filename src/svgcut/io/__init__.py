"""SVG I/O layer for svgcut.

This module handles reading SVG documents with lxml, walking them through
the element contexts, and writing the plotted cut paths back out as SVG.

Key responsibilities:
- Parse documents and index elements by id
- Decode attribute values (lengths, transforms, paints, dash arrays)
- Reduce shape elements to path commands
- Serialize plotted paths with the configured stroke style

Key classes:
- SvgDocument: Parsed document and id lookup
- DocumentTraversal: Drives contexts over the element tree
- SvgExporter: Writes plotted paths
"""

from svgcut.io.reader import SvgDocument
from svgcut.io.traversal import DocumentTraversal
from svgcut.io.writer import SvgExporter, get_output_path

__all__ = [
    "DocumentTraversal",
    "SvgDocument",
    "SvgExporter",
    "get_output_path",
]
