"""Typed attribute values delivered to element contexts.

The traversal decodes raw attribute strings into these types so that
contexts can dispatch on the kind of value instead of re-parsing text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Keyword(Enum):
    """Keyword values shared by several attributes."""

    NONE = "none"


NONE = Keyword.NONE


class Units(str, Enum):
    """Coordinate system selector for pattern attributes."""

    USER_SPACE_ON_USE = "userSpaceOnUse"
    OBJECT_BOUNDING_BOX = "objectBoundingBox"


@dataclass(frozen=True, slots=True)
class IriFragment:
    """Reference to another element of the same document, `url(#id)`.

    Attributes:
        id: Identifier of the referenced element
        fallback: Raw fallback paint given after the reference, if any
    """

    id: str
    fallback: str | None = None


@dataclass(frozen=True, slots=True)
class Color:
    """A plain color paint.

    Attributes:
        value: Color as written (named color, hex or functional notation)
        icc: ICC color specification following the color, if any
    """

    value: str
    icc: str | None = None


@dataclass(frozen=True, slots=True)
class UnsupportedPaint:
    """Any paint syntax without a model, e.g. `currentColor`."""

    raw: str


Paint = Union[Keyword, IriFragment, Color, UnsupportedPaint]


@dataclass(frozen=True, slots=True)
class ViewBox:
    """The `viewBox` rectangle of an element."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class PreserveAspectRatio:
    """Decoded `preserveAspectRatio`.

    Attributes:
        align_x: "min", "mid" or "max"; None for `none` (non-uniform scaling)
        align_y: "min", "mid" or "max"; None for `none`
        slice: True for `slice`, False for `meet`
    """

    align_x: str | None = "mid"
    align_y: str | None = "mid"
    slice: bool = False
