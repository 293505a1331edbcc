"""Coordinate system and viewport state.

A coordinate system wraps the cumulative transform from an element's local
user space to the document root. Both types are immutable: nested elements
derive new instances and never modify the ones they inherited.

Affine maps are fontTools `Transform` objects. `a.transform(b)` is the
composition a ∘ b, i.e. `b` is applied to points first.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from fontTools.misc.transform import Identity, Transform


@dataclass(frozen=True, slots=True)
class Viewport:
    """An axis-aligned rectangle in user units.

    Used as the reference box for percentage lengths and as the visible
    region of the current coordinate system.

    Attributes:
        x: Left edge
        y: Top edge
        width: Rectangle width
        height: Rectangle height
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def diagonal(self) -> float:
        """Normalized diagonal used for percentages of non-directional lengths."""
        return math.hypot(self.width, self.height) / math.sqrt(2.0)

    def to_tuple(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)


@dataclass(frozen=True, slots=True)
class CoordinateSystem:
    """Cumulative local-to-root transform of a context.

    Attributes:
        transform: Affine map from local user space to root space
    """

    transform: Transform = Identity

    def compose(self, local: Transform) -> CoordinateSystem:
        """Derive the coordinate system of a nested element.

        Args:
            local: Transform mapping the nested element's space into this one

        Returns:
            New coordinate system whose transform is self ∘ local
        """
        return CoordinateSystem(self.transform.transform(local))

    def is_invertible(self) -> bool:
        """Check whether the transform can be inverted."""
        xx, xy, yx, yy, _, _ = self.transform
        return not math.isclose(xx * yy - xy * yx, 0.0, abs_tol=1e-12)

    def inverse(self) -> Transform:
        """Return the root-to-local transform.

        Raises:
            ZeroDivisionError: If the transform is singular
        """
        return self.transform.inverse()
