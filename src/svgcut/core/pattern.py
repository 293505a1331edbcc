"""Pseudo-context for <pattern> elements loaded through a fill reference.

A pattern is never drawn where it is defined. When a shape references it,
the shape builds a PatternPseudoContext around its finished outline and
loads the pattern element into it. The pattern's children plot into a
private recorder in pattern content space; when the pattern element is
finished the recorded paths are repeated over the tiles covering the
outline and clipped to it before reaching the real exporter.
"""

from __future__ import annotations

import math

import structlog
from fontTools.misc.transform import Identity, Transform
from shapely.geometry import box

from svgcut.core.context import BaseContext
from svgcut.core.exporter import PlotRecord, RecordingExporter
from svgcut.core.geometry import (
    clip_polyline,
    outline_to_polygon,
    path_to_polylines,
    polyline_to_path,
    transform_geometry,
    viewbox_transform,
)
from svgcut.core.values import PreserveAspectRatio, Units, ViewBox
from svgcut.domain import CoordinateSystem, Path, Viewport

logger = structlog.get_logger(__name__)


class PatternPseudoContext(BaseContext):
    """Context for a <pattern> element filling a shape.

    Example:
        context = PatternPseudoContext(shape_context, outline)
        traversal.load_referenced_element(node, context, {"pattern"})
    """

    def __init__(self, shape: BaseContext, outline: Path) -> None:
        """Initialize the pattern context.

        Args:
            shape: Context of the shape being filled
            outline: The shape's path, already in root coordinates
        """
        self._recorder = RecordingExporter()
        super().__init__(
            shape.document,
            shape.traversal,
            self._recorder,
            shape.viewport,
            CoordinateSystem(),
            shape.settings,
        )
        self._target_exporter = shape.exporter
        self._shape_transform = shape.coordinate_system.transform
        self._outline = outline

        self._units = Units.OBJECT_BOUNDING_BOX
        self._content_units = Units.USER_SPACE_ON_USE
        self._tile = (0.0, 0.0, 0.0, 0.0)
        self._pattern_transform: Transform = Identity
        self._viewbox: ViewBox | None = None
        self._preserve_aspect_ratio: PreserveAspectRatio | None = None

    @property
    def outline(self) -> Path:
        return self._outline

    @property
    def records(self) -> list[PlotRecord]:
        """Paths plotted by the pattern's content so far."""
        return self._recorder.records

    def set_pattern_units(self, units: Units) -> None:
        self._units = units

    def set_pattern_content_units(self, units: Units) -> None:
        self._content_units = units

    def set_tile(self, x: float, y: float, width: float, height: float) -> None:
        """Set the tile rectangle.

        Values are fractions of the outline's bounding box for
        objectBoundingBox pattern units, user units otherwise.
        """
        self._tile = (x, y, width, height)

    def set_pattern_transform(self, transform: Transform) -> None:
        self._pattern_transform = transform

    def set_viewbox(
        self, viewbox: ViewBox, preserve_aspect_ratio: PreserveAspectRatio | None = None
    ) -> None:
        self._viewbox = viewbox
        self._preserve_aspect_ratio = preserve_aspect_ratio

    def on_exit_element(self) -> None:
        if not self.records:
            logger.debug("Pattern has no content")
            return

        bbox = self._outline.transformed(self._shape_transform.inverse()).bounding_box()
        if bbox is None:
            return
        min_x, min_y, max_x, max_y = bbox
        bbox_width, bbox_height = max_x - min_x, max_y - min_y

        x, y, width, height = self._tile
        if self._units is Units.OBJECT_BOUNDING_BOX:
            x, y = min_x + x * bbox_width, min_y + y * bbox_height
            width, height = width * bbox_width, height * bbox_height
        if width <= 0 or height <= 0:
            logger.debug("Pattern tile has no area", width=width, height=height)
            return

        content = self._content_transform(width, height, bbox_width, bbox_height)
        if content is None or not CoordinateSystem(content).is_invertible():
            return

        pattern_space = CoordinateSystem(self._shape_transform).compose(self._pattern_transform)
        if not pattern_space.is_invertible():
            logger.debug("Skipping pattern with singular patternTransform")
            return

        self._plot_tiles(pattern_space.transform, content, (x, y, width, height))

    def _content_transform(
        self, width: float, height: float, bbox_width: float, bbox_height: float
    ) -> Transform | None:
        """Map pattern content coordinates into a tile at the origin."""
        if self._viewbox is not None:
            if self._viewbox.width <= 0 or self._viewbox.height <= 0:
                logger.debug("Pattern viewBox has no area")
                return None
            return viewbox_transform(
                self._viewbox, Viewport(0.0, 0.0, width, height), self._preserve_aspect_ratio
            )
        if self._content_units is Units.OBJECT_BOUNDING_BOX:
            return Identity.scale(bbox_width, bbox_height)
        return Identity

    def _plot_tiles(
        self,
        pattern_space: Transform,
        content: Transform,
        tile: tuple[float, float, float, float],
    ) -> None:
        x, y, width, height = tile
        tolerance = self.settings.geometry.flatten_tolerance

        covered = self._outline.transformed(pattern_space.inverse()).bounding_box()
        if covered is None:
            return
        first_column = math.floor((covered[0] - x) / width)
        last_column = math.ceil((covered[2] - x) / width)
        first_row = math.floor((covered[1] - y) / height)
        last_row = math.ceil((covered[3] - y) / height)

        tile_count = (last_column - first_column) * (last_row - first_row)
        max_tiles = self.settings.geometry.max_pattern_tiles
        if tile_count > max_tiles:
            logger.warning(
                "Too many pattern tiles, skipping fill",
                tiles=tile_count,
                max_tiles=max_tiles,
            )
            return

        region = outline_to_polygon(self._outline, tolerance)
        if region.is_empty:
            return

        tile_shape = box(0.0, 0.0, width, height)
        for row in range(first_row, last_row):
            for column in range(first_column, last_column):
                tile_to_root = pattern_space.translate(x + column * width, y + row * height)
                tile_region = region.intersection(transform_geometry(tile_shape, tile_to_root))
                if tile_region.is_empty:
                    continue

                placement = tile_to_root.transform(content)
                placement_inverse = placement.inverse()
                for record in self.records:
                    root_path = record.path.transformed(placement)
                    for points, _ in path_to_polylines(root_path, tolerance):
                        for piece in clip_polyline(points, tile_region):
                            self._target_exporter.plot(
                                polyline_to_path(piece),
                                list(record.dasharray),
                                record.inverse_transform.transform(placement_inverse),
                            )
