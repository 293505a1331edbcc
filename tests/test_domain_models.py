"""Tests for domain models to verify they work correctly."""

import math

import pytest
from fontTools.misc.transform import Identity
from fontTools.pens.recordingPen import RecordingPen

from svgcut.domain import (
    BezierCommand,
    CloseSubpathCommand,
    CoordinateSystem,
    LineCommand,
    MoveCommand,
    Path,
    Point,
    Viewport,
)


def _square(size: float = 10.0) -> Path:
    path = Path()
    path.push_command(MoveCommand(Point(0, 0)))
    path.push_command(LineCommand(Point(size, 0)))
    path.push_command(LineCommand(Point(size, size)))
    path.push_command(LineCommand(Point(0, size)))
    path.push_command(CloseSubpathCommand())
    return path


class TestPoint:
    """Tests for Point class."""

    def test_point_creation(self) -> None:
        """Test basic point creation."""
        p = Point(100.0, 200.0)
        assert p.x == 100.0
        assert p.y == 200.0

    def test_point_to_tuple(self) -> None:
        """Test point to tuple conversion."""
        assert Point(100.0, 200.0).to_tuple() == (100.0, 200.0)

    def test_point_transformed(self) -> None:
        """Test mapping a point through a transform."""
        p = Point(1.0, 2.0).transformed(Identity.translate(10, 20).scale(2))
        assert p == Point(12.0, 24.0)

    def test_point_immutable(self) -> None:
        """Test that point is immutable."""
        p = Point(100.0, 200.0)
        with pytest.raises(AttributeError):
            p.x = 5.0  # type: ignore[misc]


class TestCommands:
    """Tests for path command types."""

    def test_bezier_transforms_all_points(self) -> None:
        """Test that curves map their end and control points."""
        command = BezierCommand(Point(3, 3), Point(1, 1), Point(2, 2))
        moved = command.transformed(Identity.translate(10, 0))
        assert moved.point == Point(13, 3)
        assert moved.control1 == Point(11, 1)
        assert moved.control2 == Point(12, 2)

    def test_close_is_unchanged(self) -> None:
        """Test that close commands carry no coordinates."""
        close = CloseSubpathCommand()
        assert close.transformed(Identity.scale(5)) == close


class TestPath:
    """Tests for Path class."""

    def test_empty_path(self) -> None:
        """Test a new path has no commands."""
        path = Path()
        assert path.is_empty()
        assert len(path) == 0
        assert path.bounding_box() is None

    def test_commands_kept_in_push_order(self) -> None:
        """Test accumulation order is preserved."""
        path = Path()
        commands = [
            MoveCommand(Point(0, 0)),
            LineCommand(Point(1, 0)),
            BezierCommand(Point(2, 2), Point(1, 1), Point(2, 1)),
            CloseSubpathCommand(),
        ]
        for command in commands:
            path.push_command(command)
        assert list(path) == commands

    def test_transform_in_place(self) -> None:
        """Test transform replaces the commands."""
        path = _square()
        path.transform(Identity.translate(5, 5))
        assert path.commands[0] == MoveCommand(Point(5, 5))
        assert path.commands[2] == LineCommand(Point(15, 15))

    def test_transformed_leaves_original(self) -> None:
        """Test transformed returns a copy."""
        path = _square()
        moved = path.transformed(Identity.translate(5, 5))
        assert path.commands[0] == MoveCommand(Point(0, 0))
        assert moved.commands[0] == MoveCommand(Point(5, 5))

    def test_transform_round_trip(self) -> None:
        """Test that applying T then T inverse restores the coordinates."""
        transform = Identity.translate(3, -7).rotate(math.radians(30)).scale(2, 0.5)
        path = _square()
        path.transform(transform)
        path.transform(transform.inverse())
        for command, original in zip(path.commands[:4], _square().commands[:4]):
            assert command.point.x == pytest.approx(original.point.x)
            assert command.point.y == pytest.approx(original.point.y)

    def test_subpaths(self) -> None:
        """Test splitting at move commands."""
        path = _square()
        path.push_command(MoveCommand(Point(20, 20)))
        path.push_command(LineCommand(Point(30, 20)))
        subpaths = list(path.subpaths())
        assert len(subpaths) == 2
        assert len(subpaths[0]) == 5
        assert subpaths[1][0] == MoveCommand(Point(20, 20))

    def test_draw_replays_onto_pen(self) -> None:
        """Test drawing onto a fontTools pen."""
        pen = RecordingPen()
        path = Path()
        path.push_command(MoveCommand(Point(0, 0)))
        path.push_command(BezierCommand(Point(10, 0), Point(3, 5), Point(7, 5)))
        path.draw(pen)
        assert pen.value == [
            ("moveTo", ((0, 0),)),
            ("curveTo", ((3, 5), (7, 5), (10, 0))),
            ("endPath", ()),
        ]

    def test_draw_after_close_restarts_at_subpath_start(self) -> None:
        """Test a line after a close starts from the closed subpath's start."""
        pen = RecordingPen()
        path = Path()
        path.push_command(MoveCommand(Point(0, 0)))
        path.push_command(LineCommand(Point(10, 0)))
        path.push_command(CloseSubpathCommand())
        path.push_command(LineCommand(Point(5, 5)))
        path.draw(pen)
        assert pen.value == [
            ("moveTo", ((0, 0),)),
            ("lineTo", ((10, 0),)),
            ("closePath", ()),
            ("moveTo", ((0, 0),)),
            ("lineTo", ((5, 5),)),
            ("endPath", ()),
        ]

    def test_bounding_box(self) -> None:
        """Test bounds of a closed square."""
        assert _square(10).bounding_box() == (0, 0, 10, 10)

    def test_bounding_box_of_curve_is_tight(self) -> None:
        """Test that curve bounds use the curve, not its control points."""
        path = Path()
        path.push_command(MoveCommand(Point(0, 0)))
        path.push_command(BezierCommand(Point(10, 0), Point(0, 10), Point(10, 10)))
        _, _, _, max_y = path.bounding_box()
        assert max_y == pytest.approx(7.5)


class TestViewport:
    """Tests for Viewport class."""

    def test_to_tuple(self) -> None:
        """Test viewport tuple conversion."""
        assert Viewport(1, 2, 3, 4).to_tuple() == (1, 2, 3, 4)

    def test_diagonal(self) -> None:
        """Test the normalized diagonal for a square equals its side."""
        assert Viewport(0, 0, 100, 100).diagonal == pytest.approx(100.0)


class TestCoordinateSystem:
    """Tests for CoordinateSystem class."""

    def test_default_is_identity(self) -> None:
        """Test a new coordinate system has the identity transform."""
        assert CoordinateSystem().transform == Identity

    def test_compose_applies_local_first(self) -> None:
        """Test child = parent ∘ local."""
        cs = CoordinateSystem().compose(Identity.translate(10, 5)).compose(Identity.scale(2))
        assert cs.transform.transformPoint((3, 4)) == (16, 13)

    def test_compose_is_associative(self) -> None:
        """Test composing step by step equals composing the product."""
        a = Identity.translate(1, 2)
        b = Identity.rotate(0.3)
        c = Identity.scale(2, 3)

        stepwise = CoordinateSystem(a).compose(b).compose(c)
        combined = CoordinateSystem(a).compose(b.transform(c))
        assert tuple(stepwise.transform) == pytest.approx(tuple(combined.transform))

    def test_compose_does_not_modify_parent(self) -> None:
        """Test immutability of the inherited coordinate system."""
        parent = CoordinateSystem(Identity.translate(1, 1))
        parent.compose(Identity.scale(3))
        assert parent.transform == Identity.translate(1, 1)

    def test_inverse_round_trip(self) -> None:
        """Test the inverse maps root points back to local ones."""
        cs = CoordinateSystem(Identity.translate(10, 5).scale(2))
        x, y = cs.inverse().transformPoint(cs.transform.transformPoint((3, 4)))
        assert (x, y) == pytest.approx((3, 4))

    def test_singular_transform(self) -> None:
        """Test a zero scale is not invertible."""
        assert not CoordinateSystem(Identity.scale(0)).is_invertible()
        assert CoordinateSystem(Identity.scale(0.001)).is_invertible()
