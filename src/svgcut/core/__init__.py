"""Core element context state machine for svgcut.

This module contains the contexts the traversal drives while walking a
document, and the helpers they rely on:

- Element contexts (root, group, svg, shape, pattern)
- Typed attribute values (paint, units, viewBox)
- Geometry operations (viewBox mapping, flattening, clipping)
- The exporter protocol finished paths are handed to

Contexts form an implicit stack following the document nesting: each is
created when its element is entered and dropped when it is exited.

Key classes:
- BaseContext: Shared context state; the root context
- GroupContext, SvgContext: Structural elements
- ShapeContext: Shape elements, path accumulation and paint state
- PatternPseudoContext: Pattern fill of a shape, tiled and clipped
- RecordingExporter: Exporter keeping every plot call
"""

from svgcut.core.context import BaseContext, GroupContext, SvgContext
from svgcut.core.exporter import Exporter, PlotRecord, RecordingExporter
from svgcut.core.geometry import (
    clip_polyline,
    outline_to_polygon,
    path_to_polylines,
    viewbox_transform,
)
from svgcut.core.pattern import PatternPseudoContext
from svgcut.core.shape import PATTERN_ELEMENTS, ShapeContext

__all__ = [
    # Contexts
    "BaseContext",
    "GroupContext",
    "PatternPseudoContext",
    "ShapeContext",
    "SvgContext",
    # Exporter classes
    "Exporter",
    "PlotRecord",
    "RecordingExporter",
    # Geometry functions
    "clip_polyline",
    "outline_to_polygon",
    "path_to_polylines",
    "viewbox_transform",
    # Constants
    "PATTERN_ELEMENTS",
]
