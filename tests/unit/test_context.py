"""Unit tests for the element context state machine."""

from unittest.mock import Mock

import pytest
from fontTools.misc.transform import Identity
from structlog.testing import capture_logs

from svgcut.core import (
    PATTERN_ELEMENTS,
    BaseContext,
    GroupContext,
    PatternPseudoContext,
    RecordingExporter,
    ShapeContext,
    SvgContext,
)
from svgcut.core.values import NONE, Color, IriFragment, UnsupportedPaint
from svgcut.domain import BezierCommand, CloseSubpathCommand, LineCommand, MoveCommand, Point, Viewport
from svgcut.exceptions import ReferenceCycleError, UnexpectedElementError


@pytest.fixture
def exporter() -> RecordingExporter:
    """Create a recording exporter."""
    return RecordingExporter()


@pytest.fixture
def document() -> Mock:
    """Create a document without any ids."""
    document = Mock()
    document.find_by_id.return_value = None
    return document


@pytest.fixture
def traversal() -> Mock:
    """Create a traversal double."""
    return Mock()


@pytest.fixture
def root(document: Mock, traversal: Mock, exporter: RecordingExporter) -> BaseContext:
    """Create a root context with a 100x100 viewport."""
    return BaseContext(document, traversal, exporter, Viewport(0, 0, 100, 100))


def _draw_square(shape: ShapeContext, size: float = 10.0) -> None:
    shape.move_to(Point(0, 0))
    shape.line_to(Point(size, 0))
    shape.line_to(Point(size, size))
    shape.line_to(Point(0, size))
    shape.close_subpath()


class TestBaseContext:
    """Tests for the root context."""

    def test_root_state(self, root: BaseContext, exporter: RecordingExporter):
        """Test identity transform and initial viewport."""
        assert root.coordinate_system.transform == Identity
        assert root.viewport == Viewport(0, 0, 100, 100)
        assert root.exporter is exporter

    def test_exit_produces_nothing(self, root: BaseContext, exporter: RecordingExporter):
        """Test the root context emits no output."""
        root.on_exit_element()
        assert len(exporter) == 0


class TestGroupContext:
    """Tests for GroupContext class."""

    def test_inherits_parent_state(self, root: BaseContext):
        """Test a group starts with its parent's state."""
        group = GroupContext(root)
        assert group.exporter is root.exporter
        assert group.viewport == root.viewport
        assert group.coordinate_system == root.coordinate_system

    def test_transform_composes(self, root: BaseContext):
        """Test child = parent ∘ local."""
        outer = GroupContext(root)
        outer.set_transform(Identity.translate(10, 0))
        inner = GroupContext(outer)
        inner.set_transform(Identity.scale(2))
        assert inner.coordinate_system.transform.transformPoint((1, 1)) == (12, 2)

    def test_transform_does_not_leak_to_parent(self, root: BaseContext):
        """Test a child's transform leaves ancestors untouched."""
        outer = GroupContext(root)
        outer.set_transform(Identity.translate(10, 0))
        inner = GroupContext(outer)
        inner.set_transform(Identity.scale(2))
        assert outer.coordinate_system.transform == Identity.translate(10, 0)
        assert root.coordinate_system.transform == Identity


class TestSvgContext:
    """Tests for SvgContext class."""

    def test_viewport_replaced_for_subtree(self, root: BaseContext):
        """Test a nested viewport does not affect the parent."""
        svg = SvgContext(root)
        svg.set_viewport(Viewport(0, 0, 10, 10))
        assert svg.viewport == Viewport(0, 0, 10, 10)
        assert root.viewport == Viewport(0, 0, 100, 100)
        assert GroupContext(svg).viewport == Viewport(0, 0, 10, 10)

    def test_viewbox_transform_composes(self, root: BaseContext):
        """Test the viewBox mapping applies after the element's transform."""
        svg = SvgContext(root)
        svg.set_transform(Identity.translate(5, 5))
        svg.set_viewbox_transform(Identity.scale(10))
        assert svg.coordinate_system.transform.transformPoint((1, 1)) == (15, 15)


class TestShapeContext:
    """Tests for ShapeContext class."""

    def test_defaults(self, root: BaseContext):
        """Test stroke on, no fill, solid line."""
        shape = ShapeContext(root)
        assert shape.stroke is True
        assert shape.fill_fragment_iri == ""
        assert shape.dasharray == []
        assert shape.path.is_empty()

    def test_commands_accumulate_in_order(self, root: BaseContext):
        """Test path commands are appended as issued."""
        shape = ShapeContext(root)
        shape.move_to(Point(0, 0))
        shape.line_to(Point(1, 0))
        shape.curve_to(Point(2, 2), Point(1, 1), Point(2, 1))
        shape.close_subpath()
        assert shape.path.commands == [
            MoveCommand(Point(0, 0)),
            LineCommand(Point(1, 0)),
            BezierCommand(Point(2, 2), Point(1, 1), Point(2, 1)),
            CloseSubpathCommand(),
        ]

    def test_plain_shape_plots_once(self, root: BaseContext, exporter: RecordingExporter):
        """Test a shape without paint attributes emits one solid stroke."""
        shape = ShapeContext(root)
        _draw_square(shape)
        shape.on_exit_element()

        assert len(exporter) == 1
        record = exporter.records[0]
        assert record.dasharray == []
        assert record.path is shape.path
        assert record.path.bounding_box() == (0, 0, 10, 10)

    def test_dangling_fill_reference(
        self, root: BaseContext, exporter: RecordingExporter, traversal: Mock
    ):
        """Test a missing fill target still strokes and loads nothing."""
        shape = ShapeContext(root)
        shape.set_fill(IriFragment("missing"))
        _draw_square(shape)

        with capture_logs() as logs:
            shape.on_exit_element()

        assert len(exporter) == 1
        traversal.load_referenced_element.assert_not_called()
        assert any(
            log["event"] == "Fill reference not found" and log["log_level"] == "debug"
            for log in logs
        )

    def test_fill_reference_loads_pattern(
        self, root: BaseContext, document: Mock, traversal: Mock
    ):
        """Test a found fill target is loaded into a pattern context."""
        node = object()
        document.find_by_id.return_value = node
        shape = ShapeContext(root)
        shape.set_fill(IriFragment("hatch"))
        _draw_square(shape)
        shape.on_exit_element()

        document.find_by_id.assert_called_once_with("hatch")
        traversal.load_referenced_element.assert_called_once()
        args, kwargs = traversal.load_referenced_element.call_args
        assert args[0] is node
        assert isinstance(args[1], PatternPseudoContext)
        assert args[1].outline is shape.path
        assert kwargs["expected_elements"] == PATTERN_ELEMENTS

    @pytest.mark.parametrize(
        "error",
        [UnexpectedElementError("grad", "linearGradient"), ReferenceCycleError("hatch")],
    )
    def test_reference_error_is_recorded(
        self,
        root: BaseContext,
        exporter: RecordingExporter,
        document: Mock,
        traversal: Mock,
        error: Exception,
    ):
        """Test a failed reference load is reported and the stroke kept."""
        document.find_by_id.return_value = object()
        traversal.load_referenced_element.side_effect = error
        shape = ShapeContext(root)
        shape.set_fill(IriFragment(error.fragment_id))
        _draw_square(shape)
        shape.on_exit_element()

        traversal.record_reference_error.assert_called_once_with(error.fragment_id, error)
        assert len(exporter) == 1

    def test_stroke_none(self, root: BaseContext, exporter: RecordingExporter):
        """Test stroke none suppresses the plot."""
        shape = ShapeContext(root)
        shape.set_stroke(NONE)
        _draw_square(shape)
        shape.on_exit_element()
        assert shape.stroke is False
        assert len(exporter) == 0

    def test_fill_last_write_wins(self, root: BaseContext):
        """Test repeated fill settings replace each other."""
        shape = ShapeContext(root)
        shape.set_fill(IriFragment("a"))
        shape.set_fill(IriFragment("b"))
        assert shape.fill_fragment_iri == "b"
        shape.set_fill(NONE)
        assert shape.fill_fragment_iri == ""

    def test_fill_color_is_ignored_at_debug(self, root: BaseContext):
        """Test plain colors keep the fill and only log at debug."""
        shape = ShapeContext(root)
        shape.set_fill(IriFragment("a"))
        with capture_logs() as logs:
            shape.set_fill(Color("red"))
        assert shape.fill_fragment_iri == "a"
        assert logs == [
            {
                "event": "Ignoring color value for attribute",
                "log_level": "debug",
                "attribute": "fill",
                "value": "red",
            }
        ]

    @pytest.mark.parametrize(
        "paint", [UnsupportedPaint("currentColor"), Color("#abc", "icc-color(p, 0.5)")]
    )
    def test_fill_unsupported_logs_warning(self, root: BaseContext, paint):
        """Test other paint kinds log a warning and keep the fill."""
        shape = ShapeContext(root)
        with capture_logs() as logs:
            shape.set_fill(paint)
        assert shape.fill_fragment_iri == ""
        assert len(logs) == 1
        assert logs[0]["log_level"] == "warning"
        assert logs[0]["event"] == "Unsupported value type for attribute"
        assert logs[0]["attribute"] == "fill"

    def test_stroke_color_keeps_stroke(self, root: BaseContext):
        """Test a stroke color neither disables the stroke nor warns."""
        shape = ShapeContext(root)
        with capture_logs() as logs:
            shape.set_stroke(Color("blue"))
        assert shape.stroke is True
        assert [log["log_level"] for log in logs] == ["debug"]

    def test_stroke_reference_warns(self, root: BaseContext):
        """Test a pattern reference as stroke is unsupported."""
        shape = ShapeContext(root)
        with capture_logs() as logs:
            shape.set_stroke(IriFragment("hatch"))
        assert shape.stroke is True
        assert [log["log_level"] for log in logs] == ["warning"]

    def test_dasharray_replaced(self, root: BaseContext):
        """Test each dasharray setting replaces the previous one."""
        shape = ShapeContext(root)
        shape.set_dasharray([5.0, 3.0])
        shape.set_dasharray([1.0])
        assert shape.dasharray == [1.0]
        shape.set_dasharray(NONE)
        assert shape.dasharray == []

    def test_dasharray_is_copied(self, root: BaseContext):
        """Test the context keeps its own copy of the lengths."""
        lengths = [5.0, 3.0]
        shape = ShapeContext(root)
        shape.set_dasharray(lengths)
        lengths.append(1.0)
        assert shape.dasharray == [5.0, 3.0]

    def test_dasharray_plotted(self, root: BaseContext, exporter: RecordingExporter):
        """Test the dash pattern is handed to the exporter."""
        shape = ShapeContext(root)
        shape.set_dasharray([4.0, 2.0])
        _draw_square(shape)
        shape.on_exit_element()
        assert exporter.records[0].dasharray == [4.0, 2.0]

    def test_path_transformed_to_root(self, root: BaseContext, exporter: RecordingExporter):
        """Test the cumulative transform is applied at exit."""
        group = GroupContext(root)
        group.set_transform(Identity.translate(10, 0))
        shape = ShapeContext(group)
        shape.set_transform(Identity.scale(2))
        _draw_square(shape, 5)
        shape.on_exit_element()

        record = exporter.records[0]
        assert record.path.bounding_box() == (10, 0, 20, 10)
        assert record.inverse_transform.transformPoint((20, 10)) == pytest.approx((5, 5))
        assert record.root_dasharray() == []
        assert record.dash_scale == pytest.approx(2.0)

    def test_singular_transform_skips_shape(
        self, root: BaseContext, exporter: RecordingExporter, document: Mock
    ):
        """Test a zero scale renders nothing, not even the fill."""
        shape = ShapeContext(root)
        shape.set_transform(Identity.scale(0))
        shape.set_fill(IriFragment("hatch"))
        _draw_square(shape)
        shape.on_exit_element()
        assert len(exporter) == 0
        document.find_by_id.assert_not_called()

    def test_empty_path_still_plotted(self, root: BaseContext, exporter: RecordingExporter):
        """Test a stroked shape without geometry still produces its plot call."""
        shape = ShapeContext(root)
        shape.on_exit_element()
        assert len(exporter) == 1
        assert exporter.records[0].path.is_empty()
        assert exporter.records[0].dasharray == []

    def test_empty_path_without_stroke(self, root: BaseContext, exporter: RecordingExporter):
        """Test stroke none still suppresses the plot of an empty shape."""
        shape = ShapeContext(root)
        shape.set_stroke(NONE)
        shape.on_exit_element()
        assert len(exporter) == 0

    def test_siblings_are_independent(self, root: BaseContext, exporter: RecordingExporter):
        """Test one shape's state does not affect the next."""
        first = ShapeContext(root)
        first.set_transform(Identity.translate(50, 50))
        first.set_dasharray([1.0, 1.0])
        _draw_square(first)
        first.on_exit_element()

        second = ShapeContext(root)
        _draw_square(second)
        second.on_exit_element()

        assert exporter.records[1].dasharray == []
        assert exporter.records[1].path.bounding_box() == (0, 0, 10, 10)
