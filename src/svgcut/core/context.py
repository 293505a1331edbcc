"""Element contexts for structural elements.

One context object exists per element currently being processed. A context
takes its document, traversal, exporter, viewport and coordinate system from
its parent when it is created, and only ever replaces its own copies of
them, so siblings and ancestors are never affected.

Key classes:
- BaseContext: State shared by every context; used directly as the root
- GroupContext: Context for <g> elements
- SvgContext: Context for <svg> elements, which may declare a viewport
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fontTools.misc.transform import Transform

from svgcut.config import SvgCutSettings
from svgcut.domain import CoordinateSystem, Viewport

if TYPE_CHECKING:
    from svgcut.io.reader import SvgDocument
    from svgcut.io.traversal import DocumentTraversal
    from svgcut.core.exporter import Exporter


class BaseContext:
    """State shared by all element contexts.

    Instantiated directly, it is the root context the document's outermost
    <svg> element is loaded into: identity transform, the root viewport,
    no output of its own.
    """

    def __init__(
        self,
        document: SvgDocument,
        traversal: DocumentTraversal,
        exporter: Exporter,
        viewport: Viewport,
        coordinate_system: CoordinateSystem | None = None,
        settings: SvgCutSettings | None = None,
    ) -> None:
        self.document = document
        self.traversal = traversal
        self.settings = settings or SvgCutSettings()
        self._exporter = exporter
        self._viewport = viewport
        self._coordinate_system = coordinate_system or CoordinateSystem()

    @property
    def exporter(self) -> Exporter:
        """Sink for paths finished inside this context."""
        return self._exporter

    @property
    def viewport(self) -> Viewport:
        """Reference rectangle for percentage lengths, in local user units."""
        return self._viewport

    @property
    def coordinate_system(self) -> CoordinateSystem:
        """Cumulative transform from this context to the document root."""
        return self._coordinate_system

    def on_exit_element(self) -> None:
        """Called once after the element and all its children were processed."""
        pass


class GroupContext(BaseContext):
    """Context for <g> elements.

    Produces no output; it only contributes its transform to descendants.
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

    def set_transform(self, transform: Transform) -> None:
        """Apply the element's `transform` attribute."""
        self._coordinate_system = self._coordinate_system.compose(transform)


class SvgContext(GroupContext):
    """Context for <svg> elements, the root one included."""

    def set_viewport(self, viewport: Viewport) -> None:
        """Replace the viewport for this element's subtree.

        Args:
            viewport: The new reference rectangle, in the user space
                established by this element (after its viewBox transform)
        """
        self._viewport = viewport

    def set_viewbox_transform(self, transform: Transform) -> None:
        """Apply the mapping from the element's viewBox onto its viewport."""
        self._coordinate_system = self._coordinate_system.compose(transform)
