"""Context for shape elements, like <path> or <rect>.

The traversal converts every shape to the minimal path command set (move,
line, cubic curve, close), so a shape context only needs four geometry
events besides the paint attributes.
"""

from __future__ import annotations

import structlog
from fontTools.misc.transform import Transform

from svgcut.core.context import BaseContext
from svgcut.core.pattern import PatternPseudoContext
from svgcut.core.values import NONE, Color, IriFragment, Keyword, Paint
from svgcut.domain import (
    BezierCommand,
    CloseSubpathCommand,
    LineCommand,
    MoveCommand,
    Path,
    Point,
)
from svgcut.exceptions import ReferenceLoadError

logger = structlog.get_logger(__name__)

# Only <pattern> may be loaded through a fill reference
PATTERN_ELEMENTS = frozenset({"pattern"})


def warn_unsupported_paint(attribute: str, value: Paint) -> None:
    """Log a paint value that cannot be used for an attribute.

    Plain colors are only logged at debug level: they are sometimes set on
    purpose, to make an element clickable or visible while debugging.
    """
    if isinstance(value, Color) and value.icc is None:
        logger.debug("Ignoring color value for attribute", attribute=attribute, value=value.value)
    else:
        logger.warning("Unsupported value type for attribute", attribute=attribute, value=repr(value))


class ShapeContext(BaseContext):
    """Context for shape elements.

    Accumulates the element's path in local coordinates and, once the
    element is finished, hands it to the pattern fill and to the exporter.
    """

    def __init__(self, parent: BaseContext) -> None:
        super().__init__(
            parent.document,
            parent.traversal,
            parent.exporter,
            parent.viewport,
            parent.coordinate_system,
            parent.settings,
        )
        self._path = Path()
        # Pattern of the stroke, set by `stroke-dasharray`
        self._dasharray: list[float] = []
        # Empty if the element should not be filled, which is the default
        # here even though SVG defaults `fill` to black.
        self._fill_fragment_iri = ""
        self._stroke = True

    @property
    def path(self) -> Path:
        return self._path

    @property
    def dasharray(self) -> list[float]:
        return self._dasharray

    @property
    def fill_fragment_iri(self) -> str:
        return self._fill_fragment_iri

    @property
    def stroke(self) -> bool:
        return self._stroke

    def move_to(self, point: Point) -> None:
        """Start a new subpath without drawing."""
        self._path.push_command(MoveCommand(point))

    def line_to(self, point: Point) -> None:
        """Draw a straight line."""
        self._path.push_command(LineCommand(point))

    def curve_to(self, point: Point, control1: Point, control2: Point) -> None:
        """Draw a cubic Bezier curve ending at `point`."""
        self._path.push_command(BezierCommand(point, control1, control2))

    def close_subpath(self) -> None:
        """Draw a straight line back to the start of the current subpath."""
        self._path.push_command(CloseSubpathCommand())

    def set_transform(self, transform: Transform) -> None:
        """Apply the element's own `transform` attribute."""
        self._coordinate_system = self._coordinate_system.compose(transform)

    def set_dasharray(self, value: list[float] | Keyword) -> None:
        """Replace the dash pattern; `none` makes the stroke solid."""
        if value is NONE:
            self._dasharray = []
        else:
            self._dasharray = list(value)

    def set_fill(self, value: Paint) -> None:
        """Handle the `fill` attribute.

        Only references to patterns can be used; every other kind of paint
        is logged and leaves the fill unchanged.
        """
        if value is NONE:
            self._fill_fragment_iri = ""
        elif isinstance(value, IriFragment):
            self._fill_fragment_iri = value.id
        else:
            warn_unsupported_paint("fill", value)

    def set_stroke(self, value: Paint) -> None:
        """Handle the `stroke` attribute.

        Strokes are plotted by default; only `none` disables them.
        """
        if value is NONE:
            self._stroke = False
        else:
            warn_unsupported_paint("stroke", value)

    def on_exit_element(self) -> None:
        coordinate_system = self.coordinate_system
        if not coordinate_system.is_invertible():
            logger.debug("Skipping shape with singular transform")
            return

        self._path.transform(coordinate_system.transform)

        if self._fill_fragment_iri:
            self._load_fill_pattern()

        if self._stroke:
            # The path and dasharray are handed over, not copied; this
            # context must not touch them afterwards.
            self.exporter.plot(self._path, self._dasharray, coordinate_system.inverse())

    def _load_fill_pattern(self) -> None:
        fragment_id = self._fill_fragment_iri
        referenced_node = self.document.find_by_id(fragment_id)
        if referenced_node is None:
            logger.debug("Fill reference not found", fragment=fragment_id)
            return

        context = PatternPseudoContext(self, self._path)
        try:
            self.traversal.load_referenced_element(
                referenced_node, context, expected_elements=PATTERN_ELEMENTS
            )
        except ReferenceLoadError as e:
            self.traversal.record_reference_error(fragment_id, e)
