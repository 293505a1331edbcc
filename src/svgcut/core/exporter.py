"""Output sink interface of the element contexts.

This module defines the Exporter protocol the element contexts hand their
finished paths to, the PlotRecord describing one plot call, and the
RecordingExporter that simply keeps them.
"""

import math
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol

from fontTools.misc.transform import Transform

from svgcut.domain import Path


class Exporter(Protocol):
    """Output sink for finished paths."""

    def plot(self, path: Path, dasharray: list[float], inverse_transform: Transform) -> None:
        """Take ownership of a root-space path.

        Args:
            path: Path in root coordinates
            dasharray: Dash/gap lengths in the path's local units, empty for solid
            inverse_transform: Map from root coordinates back to local ones
        """
        ...


@dataclass
class PlotRecord:
    """A single plot call."""

    path: Path
    dasharray: list[float]
    inverse_transform: Transform

    @property
    def dash_scale(self) -> float:
        """Factor converting local dash lengths to root units.

        Uses the mean scale of the local-to-root transform, which for
        non-uniform scaling is an approximation.
        """
        xx, xy, yx, yy, _, _ = self.inverse_transform
        return 1.0 / math.sqrt(abs(xx * yy - xy * yx))

    def root_dasharray(self) -> list[float]:
        """Dash lengths in root units."""
        scale = self.dash_scale
        return [length * scale for length in self.dasharray]


class RecordingExporter:
    """Exporter that records every plot call, in order.

    Example:
        exporter = RecordingExporter()
        converter.convert(document, exporter)
        for record in exporter:
            print(record.path.bounding_box())
    """

    def __init__(self) -> None:
        self.records: list[PlotRecord] = []

    def plot(self, path: Path, dasharray: list[float], inverse_transform: Transform) -> None:
        self.records.append(PlotRecord(path, dasharray, inverse_transform))

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[PlotRecord]:
        return iter(self.records)
