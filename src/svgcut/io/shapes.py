"""Conversion of SVG shape elements to path commands.

Every shape element is reduced to move/line/cubic curve/close commands
drawn onto a fontTools pen. Path data goes through fontTools' SVG path
parser, which already turns arcs and quadratic curves into cubics; basic
shapes are drawn directly.
"""

from collections.abc import Callable

from fontTools.pens.basePen import BasePen
from fontTools.svgLib.path import parse_path
from lxml import etree

from svgcut.core.shape import ShapeContext
from svgcut.domain import Point, Viewport
from svgcut.exceptions import AttributeValueError
from svgcut.io.attributes import Axis, LengthResolver, parse_numbers

# Control point distance for approximating a quarter ellipse with a cubic
KAPPA = 0.5522847498307936

SHAPE_ELEMENTS = frozenset({"path", "rect", "circle", "ellipse", "line", "polyline", "polygon"})


class ContextPen(BasePen):
    """fontTools pen forwarding segments to a shape context.

    Quadratic segments are converted to cubics by BasePen.
    """

    def __init__(self, context: ShapeContext) -> None:
        super().__init__(None)
        self._context = context

    def _moveTo(self, pt: tuple[float, float]) -> None:
        self._context.move_to(Point(*pt))

    def _lineTo(self, pt: tuple[float, float]) -> None:
        self._context.line_to(Point(*pt))

    def _curveToOne(
        self,
        pt1: tuple[float, float],
        pt2: tuple[float, float],
        pt3: tuple[float, float],
    ) -> None:
        self._context.curve_to(Point(*pt3), Point(*pt1), Point(*pt2))

    def _closePath(self) -> None:
        self._context.close_subpath()

    def _endPath(self) -> None:
        pass


class ShapeDrawer:
    """Draws shape elements onto a pen.

    Lengths are resolved against the viewport of the element being drawn.
    Shapes with a zero dimension draw nothing; negative dimensions raise.

    Example:
        drawer = ShapeDrawer(LengthResolver())
        drawer.draw("rect", element, ContextPen(context), context.viewport)
    """

    def __init__(self, resolver: LengthResolver) -> None:
        self._resolver = resolver
        self._drawers: dict[str, Callable[[etree._Element, BasePen, Viewport], None]] = {
            "path": self._draw_path,
            "rect": self._draw_rect,
            "circle": self._draw_circle,
            "ellipse": self._draw_ellipse,
            "line": self._draw_line,
            "polyline": self._draw_polyline,
            "polygon": self._draw_polygon,
        }

    def draw(self, kind: str, element: etree._Element, pen: BasePen, viewport: Viewport) -> None:
        """Draw a shape element.

        Args:
            kind: Element name, one of SHAPE_ELEMENTS
            element: The shape element
            pen: Pen receiving the segments
            viewport: Reference rectangle for percentage lengths

        Raises:
            AttributeValueError: If a geometry attribute is invalid
        """
        self._drawers[kind](element, pen, viewport)

    def _length(
        self,
        element: etree._Element,
        name: str,
        viewport: Viewport,
        axis: Axis,
        default: str | None = "0",
    ) -> float | None:
        value = element.get(name, default)
        if value is None or value.strip() == "auto":
            return None
        return self._resolver.resolve(value, viewport, axis, name)

    def _non_negative(
        self,
        element: etree._Element,
        name: str,
        viewport: Viewport,
        axis: Axis,
        default: str | None = "0",
    ) -> float | None:
        value = self._length(element, name, viewport, axis, default)
        if value is not None and value < 0:
            raise AttributeValueError(name, element.get(name, ""), "negative value")
        return value

    def _draw_path(self, element: etree._Element, pen: BasePen, viewport: Viewport) -> None:  # noqa: ARG002
        data = element.get("d", "")
        try:
            parse_path(data, pen)
        except (ValueError, IndexError) as e:
            # Truncated path data surfaces as IndexError from the tokenizer
            raise AttributeValueError("d", data, str(e) or "truncated path data") from e

    def _draw_rect(self, element: etree._Element, pen: BasePen, viewport: Viewport) -> None:
        x = self._length(element, "x", viewport, Axis.X) or 0.0
        y = self._length(element, "y", viewport, Axis.Y) or 0.0
        width = self._non_negative(element, "width", viewport, Axis.X) or 0.0
        height = self._non_negative(element, "height", viewport, Axis.Y) or 0.0
        rx = self._non_negative(element, "rx", viewport, Axis.X, default=None)
        ry = self._non_negative(element, "ry", viewport, Axis.Y, default=None)
        if width == 0 or height == 0:
            return

        if rx is None:
            rx = ry if ry is not None else 0.0
        if ry is None:
            ry = rx
        rx = min(rx, width / 2)
        ry = min(ry, height / 2)

        right, bottom = x + width, y + height
        if rx == 0 or ry == 0:
            pen.moveTo((x, y))
            pen.lineTo((right, y))
            pen.lineTo((right, bottom))
            pen.lineTo((x, bottom))
            pen.closePath()
            return

        kx, ky = KAPPA * rx, KAPPA * ry
        pen.moveTo((x + rx, y))
        pen.lineTo((right - rx, y))
        pen.curveTo((right - rx + kx, y), (right, y + ry - ky), (right, y + ry))
        pen.lineTo((right, bottom - ry))
        pen.curveTo((right, bottom - ry + ky), (right - rx + kx, bottom), (right - rx, bottom))
        pen.lineTo((x + rx, bottom))
        pen.curveTo((x + rx - kx, bottom), (x, bottom - ry + ky), (x, bottom - ry))
        pen.lineTo((x, y + ry))
        pen.curveTo((x, y + ry - ky), (x + rx - kx, y), (x + rx, y))
        pen.closePath()

    def _draw_circle(self, element: etree._Element, pen: BasePen, viewport: Viewport) -> None:
        cx = self._length(element, "cx", viewport, Axis.X) or 0.0
        cy = self._length(element, "cy", viewport, Axis.Y) or 0.0
        r = self._non_negative(element, "r", viewport, Axis.DIAGONAL) or 0.0
        _draw_ellipse(pen, cx, cy, r, r)

    def _draw_ellipse(self, element: etree._Element, pen: BasePen, viewport: Viewport) -> None:
        cx = self._length(element, "cx", viewport, Axis.X) or 0.0
        cy = self._length(element, "cy", viewport, Axis.Y) or 0.0
        rx = self._non_negative(element, "rx", viewport, Axis.X, default=None)
        ry = self._non_negative(element, "ry", viewport, Axis.Y, default=None)
        if rx is None:
            rx = ry if ry is not None else 0.0
        if ry is None:
            ry = rx
        _draw_ellipse(pen, cx, cy, rx, ry)

    def _draw_line(self, element: etree._Element, pen: BasePen, viewport: Viewport) -> None:
        x1 = self._length(element, "x1", viewport, Axis.X) or 0.0
        y1 = self._length(element, "y1", viewport, Axis.Y) or 0.0
        x2 = self._length(element, "x2", viewport, Axis.X) or 0.0
        y2 = self._length(element, "y2", viewport, Axis.Y) or 0.0
        pen.moveTo((x1, y1))
        pen.lineTo((x2, y2))
        pen.endPath()

    def _draw_polyline(self, element: etree._Element, pen: BasePen, viewport: Viewport) -> None:  # noqa: ARG002
        _draw_points(element, pen, close=False)

    def _draw_polygon(self, element: etree._Element, pen: BasePen, viewport: Viewport) -> None:  # noqa: ARG002
        _draw_points(element, pen, close=True)


def _draw_ellipse(pen: BasePen, cx: float, cy: float, rx: float, ry: float) -> None:
    if rx == 0 or ry == 0:
        return
    kx, ky = KAPPA * rx, KAPPA * ry
    pen.moveTo((cx + rx, cy))
    pen.curveTo((cx + rx, cy + ky), (cx + kx, cy + ry), (cx, cy + ry))
    pen.curveTo((cx - kx, cy + ry), (cx - rx, cy + ky), (cx - rx, cy))
    pen.curveTo((cx - rx, cy - ky), (cx - kx, cy - ry), (cx, cy - ry))
    pen.curveTo((cx + kx, cy - ry), (cx + rx, cy - ky), (cx + rx, cy))
    pen.closePath()


def _draw_points(element: etree._Element, pen: BasePen, close: bool) -> None:
    numbers = parse_numbers(element.get("points", ""), "points")
    # An odd trailing coordinate is an error; the points before it still render
    points = list(zip(numbers[0::2], numbers[1::2]))
    if not points:
        return
    pen.moveTo(points[0])
    for point in points[1:]:
        pen.lineTo(point)
    if close:
        pen.closePath()
    else:
        pen.endPath()
