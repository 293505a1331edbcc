"""Geometric operations for viewports and pattern clipping.

This module provides:
- viewBox to viewport mapping (preserveAspectRatio)
- Path flattening into polylines
- Conversion of closed outlines to shapely polygons
- Clipping of polylines against a region

All functions are pure and stateless.
"""

from fontTools.misc.transform import Identity, Transform
from shapely import affinity
from shapely.geometry import LineString, MultiLineString, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import linemerge, polygonize, unary_union

from svgcut.core._bezier import flatten_cubic as _flatten_cubic
from svgcut.core.values import PreserveAspectRatio, ViewBox
from svgcut.domain import (
    BezierCommand,
    CloseSubpathCommand,
    LineCommand,
    MoveCommand,
    Path,
    Point,
    Viewport,
)

Polyline = list[Point]


def viewbox_transform(
    viewbox: ViewBox,
    viewport: Viewport,
    preserve_aspect_ratio: PreserveAspectRatio | None = None,
) -> Transform:
    """Calculate the transform mapping a viewBox onto a viewport.

    Args:
        viewbox: Rectangle in the element's own user space
        viewport: Rectangle in the parent's user space
        preserve_aspect_ratio: Alignment and meet/slice (default xMidYMid meet)

    Returns:
        Transform from viewBox space to the parent's user space

    Examples:
        >>> t = viewbox_transform(ViewBox(0, 0, 10, 10), Viewport(0, 0, 100, 50))
        >>> t.transformPoint((10, 10))
        (75.0, 50.0)
    """
    par = preserve_aspect_ratio or PreserveAspectRatio()

    scale_x = viewport.width / viewbox.width
    scale_y = viewport.height / viewbox.height
    if par.align_x is not None:
        scale_x = scale_y = max(scale_x, scale_y) if par.slice else min(scale_x, scale_y)

    translate_x = viewport.x - viewbox.x * scale_x
    translate_y = viewport.y - viewbox.y * scale_y

    extra_x = viewport.width - viewbox.width * scale_x
    extra_y = viewport.height - viewbox.height * scale_y
    if par.align_x == "mid":
        translate_x += extra_x / 2
    elif par.align_x == "max":
        translate_x += extra_x
    if par.align_y == "mid":
        translate_y += extra_y / 2
    elif par.align_y == "max":
        translate_y += extra_y

    return Identity.translate(translate_x, translate_y).scale(scale_x, scale_y)


def path_to_polylines(path: Path, tolerance: float) -> list[tuple[Polyline, bool]]:
    """Flatten a path into one polyline per subpath.

    Args:
        path: Path to flatten
        tolerance: Maximum distance between curves and their approximation

    Returns:
        List of (points, closed) tuples. Closed polylines end with a copy of
        their first point.
    """
    polylines: list[tuple[Polyline, bool]] = []
    current: Polyline = []
    start: Point | None = None

    def finish(closed: bool) -> None:
        nonlocal current
        if len(current) > 1:
            polylines.append((current, closed))
        current = []

    for command in path:
        if isinstance(command, MoveCommand):
            finish(False)
            start = command.point
            current = [command.point]
            continue

        if not current and start is not None:
            # Drawing continues after a close from the subpath start
            current = [start]

        if isinstance(command, LineCommand):
            current.append(command.point)
        elif isinstance(command, BezierCommand):
            curve = _flatten_cubic(
                [current[-1], command.control1, command.control2, command.point],
                tolerance,
            )
            current.extend(curve[1:])
        elif isinstance(command, CloseSubpathCommand):
            if current and current[-1] != current[0]:
                current.append(current[0])
            finish(True)

    finish(False)
    return polylines


def point_in_polygon(point: Point, polygon: Polyline) -> bool:
    """Determine if a point is inside a polygon using ray casting.

    Casts a horizontal ray from the point to the right and counts crossings
    with the polygon's edges. Self-intersecting polygons follow the even-odd
    rule.

    Args:
        point: The point to test
        polygon: Polygon boundary, implicitly closed

    Returns:
        True if the point is inside the polygon

    Examples:
        >>> square = [Point(0, 0), Point(2, 0), Point(2, 2), Point(0, 2)]
        >>> point_in_polygon(Point(1, 1), square)
        True
        >>> point_in_polygon(Point(3, 3), square)
        False
    """
    n = len(polygon)
    if n < 3:
        return False

    inside = False
    x, y = point.x, point.y
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y
        if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
            inside = not inside
        j = i
    return inside


def outline_to_polygon(path: Path, tolerance: float) -> BaseGeometry:
    """Convert a filled outline to a polygonal region.

    Every subpath is implicitly closed, as for filling. The subpaths are
    noded against each other and against themselves, and each resulting
    face is kept when the even-odd rule fills it. Nested subpaths thus
    become holes, and every lobe of a self-intersecting subpath is kept.

    Args:
        path: Outline in any coordinate system
        tolerance: Flattening tolerance for curves

    Returns:
        Shapely geometry of the filled region (possibly empty)
    """
    rings = [points for points, _ in path_to_polylines(path, tolerance) if len(points) >= 3]
    if not rings:
        return Polygon()

    linework = unary_union(
        [LineString([point.to_tuple() for point in ring + [ring[0]]]) for ring in rings]
    )
    faces = []
    for face in polygonize(linework):
        sample = face.representative_point()
        inside = False
        for ring in rings:
            if point_in_polygon(Point(sample.x, sample.y), ring):
                inside = not inside
        if inside:
            faces.append(face)
    return unary_union(faces) if faces else Polygon()


def transform_geometry(geometry: BaseGeometry, transform: Transform) -> BaseGeometry:
    """Map a shapely geometry through an affine transform."""
    xx, xy, yx, yy, dx, dy = transform
    return affinity.affine_transform(geometry, [xx, yx, xy, yy, dx, dy])


def clip_polyline(points: Polyline, region: BaseGeometry) -> list[Polyline]:
    """Clip a polyline to a region.

    Args:
        points: Polyline to clip
        region: Area to keep

    Returns:
        Pieces of the polyline inside the region, joined where they touch
    """
    if len(points) < 2 or region.is_empty:
        return []

    clipped = LineString([point.to_tuple() for point in points]).intersection(region)
    if clipped.is_empty:
        return []

    lines = [geom for geom in getattr(clipped, "geoms", [clipped]) if isinstance(geom, LineString)]
    if not lines:
        return []
    if len(lines) > 1:
        merged = linemerge(MultiLineString(lines))
        lines = list(getattr(merged, "geoms", [merged]))

    return [
        [Point(x, y) for x, y in line.coords]
        for line in lines
        if not line.is_empty and line.length > 0
    ]


def polyline_to_path(points: Polyline) -> Path:
    """Build a path of straight lines through the given points."""
    path = Path()
    path.push_command(MoveCommand(points[0]))
    for point in points[1:]:
        path.push_command(LineCommand(point))
    return path
