"""Document traversal driving the element contexts.

The traversal walks the element tree depth first. For every element it
creates a context from the parent's context, hands the decoded attributes
to the context's setters, draws shape geometry, descends into the children
and finally tells the context the element is finished.

Elements without a context kind (`<defs>`, gradients, `<pattern>` where it
is defined, text, foreign elements) are skipped together with their
subtree. Patterns are only loaded through references, see
`load_referenced_element`.
"""

from collections.abc import Callable, Collection

import structlog
from fontTools.misc.transform import Identity
from lxml import etree

from svgcut.config import SvgCutSettings
from svgcut.core.context import BaseContext, GroupContext, SvgContext
from svgcut.core.exporter import Exporter
from svgcut.core.geometry import viewbox_transform
from svgcut.core.pattern import PatternPseudoContext
from svgcut.core.shape import ShapeContext
from svgcut.core.values import Units
from svgcut.domain import CoordinateSystem, Viewport
from svgcut.exceptions import (
    AttributeValueError,
    ReferenceCycleError,
    ReferenceLoadError,
    UnexpectedElementError,
)
from svgcut.io.attributes import (
    Axis,
    LengthResolver,
    parse_dasharray,
    parse_paint,
    parse_preserve_aspect_ratio,
    parse_style,
    parse_transform,
    parse_units,
    parse_viewbox,
)
from svgcut.io.reader import SvgDocument, element_kind
from svgcut.io.shapes import SHAPE_ELEMENTS, ContextPen, ShapeDrawer
from svgcut.utils.logging import ConversionLogger, ConversionStats

logger = structlog.get_logger(__name__)

ELEMENT_CONTEXTS: dict[str, Callable[[BaseContext], BaseContext]] = {
    "svg": SvgContext,
    "g": GroupContext,
    **{kind: ShapeContext for kind in SHAPE_ELEMENTS},
}

# Properties that may be given as attributes or in `style`, mapped to setters
PRESENTATION_SETTERS = {
    "fill": "set_fill",
    "stroke": "set_stroke",
    "stroke-dasharray": "set_dasharray",
}


class DocumentTraversal:
    """Walks an SVG document and feeds its elements to contexts.

    Example:
        traversal = DocumentTraversal(document, settings)
        exporter = RecordingExporter()
        traversal.traverse(exporter)
        print(traversal.stats.shapes_processed)
    """

    def __init__(
        self,
        document: SvgDocument,
        settings: SvgCutSettings | None = None,
        conversion_logger: ConversionLogger | None = None,
    ) -> None:
        """Initialize the traversal.

        Args:
            document: The parsed document
            settings: Conversion settings (defaults if None)
            conversion_logger: Statistics collector (a new one if None)
        """
        self._document = document
        self._settings = settings or SvgCutSettings()
        self._conversion_logger = conversion_logger or ConversionLogger(logger)
        self._resolver = LengthResolver(dpi=self._settings.document.dpi)
        self._drawer = ShapeDrawer(self._resolver)
        self._active_references: set[str] = set()

    @property
    def document(self) -> SvgDocument:
        return self._document

    @property
    def settings(self) -> SvgCutSettings:
        return self._settings

    @property
    def stats(self) -> ConversionStats:
        """Statistics collected so far."""
        return self._conversion_logger.stats

    def root_viewport(self) -> Viewport:
        """Determine the viewport of the outermost <svg> element.

        Width and height come from the root's attributes, then from its
        viewBox, then from the configured defaults.
        """
        root = self._document.root
        config = self._settings.document
        fallback = Viewport(0.0, 0.0, config.default_width, config.default_height)

        viewbox = None
        if root.get("viewBox") is not None:
            try:
                viewbox = parse_viewbox(root.get("viewBox", ""))
            except AttributeValueError as e:
                self._warn_attribute("svg", e)

        width = self._root_length(root, "width", fallback, Axis.X)
        if width is None:
            width = viewbox.width if viewbox else fallback.width
        height = self._root_length(root, "height", fallback, Axis.Y)
        if height is None:
            height = viewbox.height if viewbox else fallback.height
        return Viewport(0.0, 0.0, width, height)

    def _root_length(
        self, root: etree._Element, name: str, fallback: Viewport, axis: Axis
    ) -> float | None:
        value = root.get(name)
        if value is None or value.strip() == "auto":
            return None
        try:
            length = self._resolver.resolve(value, fallback, axis, name)
        except AttributeValueError as e:
            self._warn_attribute("svg", e)
            return None
        if length <= 0:
            logger.warning("Ignoring non-positive root dimension", attribute=name, value=value)
            return None
        return length

    def traverse(self, exporter: Exporter) -> None:
        """Process the whole document, plotting into `exporter`."""
        root_context = BaseContext(
            self._document,
            self,
            exporter,
            self.root_viewport(),
            CoordinateSystem(),
            self._settings,
        )
        self.load_element(self._document.root, root_context)

    def load_element(self, element: etree._Element, parent: BaseContext) -> None:
        """Process an element and its subtree within a parent context."""
        kind = element_kind(element)
        if kind is None:
            return
        factory = ELEMENT_CONTEXTS.get(kind)
        if factory is None:
            logger.debug("Skipping element", element=kind)
            return
        self._load(element, kind, factory(parent))

    def load_referenced_element(
        self,
        element: etree._Element,
        context: BaseContext,
        expected_elements: Collection[str],
    ) -> None:
        """Process an element reached through a reference.

        The caller supplies the context, which receives the element's
        attributes and children like any other.

        Args:
            element: The referenced element
            context: Context built by the referencing element
            expected_elements: Element names the reference may point to

        Raises:
            UnexpectedElementError: If the element is of another kind
            ReferenceCycleError: If the element is already being loaded
        """
        fragment_id = element.get("id", "")
        kind = element_kind(element)
        if kind not in expected_elements:
            raise UnexpectedElementError(fragment_id, kind or str(element.tag))
        if fragment_id in self._active_references:
            raise ReferenceCycleError(fragment_id)

        self._active_references.add(fragment_id)
        try:
            self._load(element, kind, context)
        finally:
            self._active_references.discard(fragment_id)
        self._conversion_logger.log_pattern_fill(fragment_id)

    def record_reference_error(self, fragment_id: str, error: ReferenceLoadError) -> None:
        """Log a failed reference load; the traversal carries on."""
        self._conversion_logger.log_reference_error(fragment_id, error)

    def _load(self, element: etree._Element, kind: str, context: BaseContext) -> None:
        self._conversion_logger.log_element(kind)

        if isinstance(context, PatternPseudoContext):
            self._apply_pattern_attributes(element, context)
        else:
            if element.get("transform") is not None:
                self._apply(kind, context.set_transform, parse_transform, element.get("transform", ""))
            if isinstance(context, SvgContext) and not self._apply_viewport(element, context):
                logger.debug("Skipping svg element with empty viewport")
                return
            self._apply_presentation(element, kind, context)

        if isinstance(context, ShapeContext):
            try:
                self._drawer.draw(kind, element, ContextPen(context), context.viewport)
            except AttributeValueError as e:
                self._warn_attribute(kind, e)

        for child in element:
            self.load_element(child, context)

        context.on_exit_element()

    def _apply(self, kind: str, setter: Callable, decode: Callable, value: str) -> None:
        try:
            decoded = decode(value)
        except AttributeValueError as e:
            self._warn_attribute(kind, e)
            return
        setter(decoded)

    def _warn_attribute(self, kind: str, error: AttributeValueError) -> None:
        logger.warning(
            "Ignoring invalid attribute",
            element=kind,
            attribute=error.attribute,
            value=error.value,
            reason=error.reason,
        )

    def _apply_presentation(self, element: etree._Element, kind: str, context: BaseContext) -> None:
        properties = {
            name: element.get(name) for name in PRESENTATION_SETTERS if element.get(name) is not None
        }
        style = element.get("style")
        if style:
            properties.update(
                (name, value)
                for name, value in parse_style(style).items()
                if name in PRESENTATION_SETTERS
            )

        for name, value in properties.items():
            setter = getattr(context, PRESENTATION_SETTERS[name], None)
            if setter is None:
                continue
            if name == "stroke-dasharray":
                self._apply(
                    kind,
                    setter,
                    lambda text: parse_dasharray(text, self._resolver, context.viewport),
                    value,
                )
            else:
                setter(parse_paint(value))

    def _apply_viewport(self, element: etree._Element, context: SvgContext) -> bool:
        """Establish the viewport of an <svg> element.

        Returns:
            False if the element renders nothing
        """
        parent_viewport = context.viewport

        if element.getparent() is None:
            x = y = 0.0
            width, height = parent_viewport.width, parent_viewport.height
        else:
            x = self._length(element, "x", parent_viewport, Axis.X, "0")
            y = self._length(element, "y", parent_viewport, Axis.Y, "0")
            width = self._length(element, "width", parent_viewport, Axis.X, "100%")
            height = self._length(element, "height", parent_viewport, Axis.Y, "100%")
            if width <= 0 or height <= 0:
                return False
        viewport = Viewport(x, y, width, height)

        if element.get("viewBox") is None:
            context.set_viewbox_transform(Identity.translate(x, y))
            context.set_viewport(Viewport(0.0, 0.0, width, height))
            return True

        try:
            viewbox = parse_viewbox(element.get("viewBox", ""))
        except AttributeValueError as e:
            self._warn_attribute("svg", e)
            context.set_viewbox_transform(Identity.translate(x, y))
            context.set_viewport(Viewport(0.0, 0.0, width, height))
            return True
        if viewbox.width == 0 or viewbox.height == 0:
            return False

        par = None
        if element.get("preserveAspectRatio") is not None:
            try:
                par = parse_preserve_aspect_ratio(element.get("preserveAspectRatio", ""))
            except AttributeValueError as e:
                self._warn_attribute("svg", e)

        context.set_viewbox_transform(viewbox_transform(viewbox, viewport, par))
        context.set_viewport(Viewport(viewbox.x, viewbox.y, viewbox.width, viewbox.height))
        return True

    def _length(
        self, element: etree._Element, name: str, viewport: Viewport, axis: Axis, default: str
    ) -> float:
        """Resolve a length attribute, falling back to `default` when invalid."""
        value = element.get(name, default)
        try:
            return self._resolver.resolve(value, viewport, axis, name)
        except AttributeValueError as e:
            self._warn_attribute(element_kind(element) or "", e)
            return self._resolver.resolve(default, viewport, axis, name)

    def _apply_pattern_attributes(self, element: etree._Element, context: PatternPseudoContext) -> None:
        units = Units.OBJECT_BOUNDING_BOX
        if element.get("patternUnits") is not None:
            try:
                units = parse_units(element.get("patternUnits", ""), "patternUnits")
            except AttributeValueError as e:
                self._warn_attribute("pattern", e)
            else:
                context.set_pattern_units(units)
        if element.get("patternContentUnits") is not None:
            self._apply(
                "pattern",
                context.set_pattern_content_units,
                lambda text: parse_units(text, "patternContentUnits"),
                element.get("patternContentUnits", ""),
            )

        try:
            tile = [
                self._tile_length(element, name, units, context.viewport, axis)
                for name, axis in (
                    ("x", Axis.X),
                    ("y", Axis.Y),
                    ("width", Axis.X),
                    ("height", Axis.Y),
                )
            ]
        except AttributeValueError as e:
            self._warn_attribute("pattern", e)
        else:
            if tile[2] < 0 or tile[3] < 0:
                logger.warning("Ignoring negative pattern size", width=tile[2], height=tile[3])
            else:
                context.set_tile(*tile)

        if element.get("patternTransform") is not None:
            self._apply(
                "pattern",
                context.set_pattern_transform,
                lambda text: parse_transform(text, "patternTransform"),
                element.get("patternTransform", ""),
            )

        if element.get("viewBox") is not None:
            try:
                viewbox = parse_viewbox(element.get("viewBox", ""))
                par = None
                if element.get("preserveAspectRatio") is not None:
                    par = parse_preserve_aspect_ratio(element.get("preserveAspectRatio", ""))
            except AttributeValueError as e:
                self._warn_attribute("pattern", e)
            else:
                context.set_viewbox(viewbox, par)

    def _tile_length(
        self,
        element: etree._Element,
        name: str,
        units: Units,
        viewport: Viewport,
        axis: Axis,
    ) -> float:
        value = element.get(name, "0")
        if units is Units.OBJECT_BOUNDING_BOX:
            return self._resolver.resolve_fraction(value, name)
        return self._resolver.resolve(value, viewport, axis, name)
