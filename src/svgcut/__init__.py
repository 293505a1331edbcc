"""svgcut - Convert SVG drawings to cut paths.

svgcut is a CLI tool that turns an SVG drawing into the outlines a cutting
plotter or laser should follow. Every shape becomes a stroke in document
root coordinates; shapes filled with a pattern additionally get the
pattern's strokes, tiled and clipped to the shape.

Example:
    $ svgcut drawing.svg

This will create drawing-cut.svg next to the input.
"""

__version__ = "0.1.0"
__author__ = "svgcut contributors"

__all__ = ["__author__", "__version__"]
