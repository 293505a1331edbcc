"""Domain models for svgcut.

This module contains the geometric value types shared by the traversal,
the element contexts and the exporters. They carry no knowledge of the
XML document they came from.

Key classes:
- Point: A 2D point
- Path: An ordered list of move/line/bezier/close commands
- Viewport: Reference rectangle of a coordinate system
- CoordinateSystem: Cumulative local-to-root transform
"""

from svgcut.domain.coordinates import CoordinateSystem, Viewport
from svgcut.domain.path import (
    BezierCommand,
    CloseSubpathCommand,
    Command,
    LineCommand,
    MoveCommand,
    Path,
    Point,
)

__all__: list[str] = [
    # Commands
    "BezierCommand",
    "CloseSubpathCommand",
    "Command",
    "LineCommand",
    "MoveCommand",
    # Core types
    "CoordinateSystem",
    "Path",
    "Point",
    "Viewport",
]
