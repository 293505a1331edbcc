"""Path model for flattened SVG geometry.

This module defines the geometric command types produced by the traversal:
- Point: An immutable 2D point
- MoveCommand, LineCommand, BezierCommand, CloseSubpathCommand: Path commands
- Path: An ordered, append-only sequence of commands
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Union

from fontTools.misc.transform import Transform
from fontTools.pens.boundsPen import BoundsPen


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Attributes:
        x: X coordinate in user units
        y: Y coordinate in user units
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)

    def transformed(self, transform: Transform) -> Point:
        """Return this point mapped through an affine transform."""
        x, y = transform.transformPoint((self.x, self.y))
        return Point(x, y)


@dataclass(frozen=True, slots=True)
class MoveCommand:
    """Start a new subpath at `point` without drawing."""

    point: Point

    def transformed(self, transform: Transform) -> MoveCommand:
        return MoveCommand(self.point.transformed(transform))


@dataclass(frozen=True, slots=True)
class LineCommand:
    """Straight line from the current point to `point`."""

    point: Point

    def transformed(self, transform: Transform) -> LineCommand:
        return LineCommand(self.point.transformed(transform))


@dataclass(frozen=True, slots=True)
class BezierCommand:
    """Cubic Bezier curve from the current point to `point`."""

    point: Point
    control1: Point
    control2: Point

    def transformed(self, transform: Transform) -> BezierCommand:
        return BezierCommand(
            self.point.transformed(transform),
            self.control1.transformed(transform),
            self.control2.transformed(transform),
        )


@dataclass(frozen=True, slots=True)
class CloseSubpathCommand:
    """Straight line back to the start of the current subpath."""

    def transformed(self, transform: Transform) -> CloseSubpathCommand:  # noqa: ARG002
        return self


Command = Union[MoveCommand, LineCommand, BezierCommand, CloseSubpathCommand]


@dataclass
class Path:
    """An ordered sequence of path commands.

    Commands are only ever appended while an element is being processed.
    The path is mapped from local to root coordinates exactly once, when
    its element is finished, and then handed off without copying.

    Attributes:
        commands: Commands in the order they were pushed
    """

    commands: list[Command] = field(default_factory=list)

    def push_command(self, command: Command) -> None:
        """Append a command to the end of the path."""
        self.commands.append(command)

    def transform(self, transform: Transform) -> None:
        """Map every command through `transform`, in place."""
        self.commands = [command.transformed(transform) for command in self.commands]

    def transformed(self, transform: Transform) -> Path:
        """Return a transformed copy, leaving this path untouched."""
        return Path([command.transformed(transform) for command in self.commands])

    def is_empty(self) -> bool:
        """Check if the path has no commands."""
        return not self.commands

    def subpaths(self) -> Iterator[list[Command]]:
        """Split the path at every move command.

        Yields:
            Lists of commands, each starting with a MoveCommand
        """
        current: list[Command] = []
        for command in self.commands:
            if isinstance(command, MoveCommand) and current:
                yield current
                current = []
            current.append(command)
        if current:
            yield current

    def draw(self, pen: Any) -> None:
        """Replay the path onto a fontTools-style pen.

        Subpaths that are not explicitly closed are finished with endPath().
        Drawing after a close continues from the closed subpath's start,
        as SVG does.

        Args:
            pen: Any object implementing the fontTools pen protocol
        """
        open_subpath = False
        start: Point | None = None
        for command in self.commands:
            if isinstance(command, MoveCommand):
                if open_subpath:
                    pen.endPath()
                pen.moveTo(command.point.to_tuple())
                start = command.point
                open_subpath = True
                continue

            if not open_subpath and start is not None and not isinstance(
                command, CloseSubpathCommand
            ):
                pen.moveTo(start.to_tuple())
                open_subpath = True

            if isinstance(command, LineCommand):
                pen.lineTo(command.point.to_tuple())
            elif isinstance(command, BezierCommand):
                pen.curveTo(
                    command.control1.to_tuple(),
                    command.control2.to_tuple(),
                    command.point.to_tuple(),
                )
            elif isinstance(command, CloseSubpathCommand):
                pen.closePath()
                open_subpath = False
        if open_subpath:
            pen.endPath()

    def bounding_box(self) -> tuple[float, float, float, float] | None:
        """Calculate the exact bounding box of the path.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y), or None for an empty path
        """
        pen = BoundsPen(None)
        self.draw(pen)
        return pen.bounds

    def __len__(self) -> int:
        return len(self.commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(self.commands)
