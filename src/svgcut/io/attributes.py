"""Decoders for SVG attribute values.

Each decoder turns the raw attribute text into the typed value handed to
an element context, raising AttributeValueError when the text cannot be
decoded. Only the attributes the converter models are covered.
"""

import math
import re
from enum import Enum, auto

from fontTools.misc.transform import Identity, Transform

from svgcut.core.values import (
    NONE,
    Color,
    IriFragment,
    Keyword,
    Paint,
    PreserveAspectRatio,
    Units,
    UnsupportedPaint,
    ViewBox,
)
from svgcut.domain import Viewport
from svgcut.exceptions import AttributeValueError

_NUMBER = r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
_NUMBER_RE = re.compile(_NUMBER)
_SEPARATORS_RE = re.compile(r"[\s,]*")
_TRANSFORM_RE = re.compile(
    r"\s*(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^)]*)\)\s*,?"
)
_LENGTH_RE = re.compile(rf"\s*({_NUMBER})\s*(px|mm|cm|in|pt|pc|em|ex|%)?\s*")
_IRI_PAINT_RE = re.compile(r"url\(\s*(['\"]?)#([^)'\"]+)\1\s*\)\s*(.*)", re.DOTALL)
_ICC_RE = re.compile(r"(\S.*?)\s+(icc-color\(.*\))", re.DOTALL)
_HEX_COLOR_RE = re.compile(r"#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})")
_FUNCTIONAL_COLOR_RE = re.compile(r"(?:rgba?|hsla?)\([^)]*\)", re.IGNORECASE)
_NAMED_COLOR_RE = re.compile(r"[a-zA-Z]+")

# Paint keywords that look like color names but are not plain colors
_SPECIAL_PAINTS = frozenset({"currentColor", "inherit", "context-fill", "context-stroke"})

_ALIGN_RE = re.compile(r"x(Min|Mid|Max)Y(Min|Mid|Max)")


class Axis(Enum):
    """Reference dimension for percentage lengths."""

    X = auto()
    Y = auto()
    DIAGONAL = auto()


def parse_numbers(text: str, attribute: str) -> list[float]:
    """Parse a comma/whitespace separated list of numbers.

    Args:
        text: Number list, e.g. "10,20 -5e1"
        attribute: Attribute name for error reporting

    Returns:
        List of parsed floats

    Raises:
        AttributeValueError: If the text contains anything but numbers
    """
    if _SEPARATORS_RE.fullmatch(_NUMBER_RE.sub(" ", text)) is None:
        raise AttributeValueError(attribute, text, "expected a list of numbers")
    return [float(token) for token in _NUMBER_RE.findall(text)]


def parse_transform(value: str, attribute: str = "transform") -> Transform:
    """Parse an SVG transform list.

    Transforms are composed left to right, so the rightmost transform is
    applied to points first.

    Args:
        value: Transform list, e.g. "translate(10) rotate(45 5 5)"
        attribute: Attribute name for error reporting

    Returns:
        Composed affine transform

    Raises:
        AttributeValueError: On syntax errors or wrong argument counts

    Examples:
        >>> parse_transform("translate(10, 20)").transformPoint((0, 0))
        (10.0, 20.0)
    """
    text = value.strip()
    result: Transform = Identity
    pos = 0
    while pos < len(text):
        match = _TRANSFORM_RE.match(text, pos)
        if match is None:
            raise AttributeValueError(attribute, value, f"syntax error at offset {pos}")
        name, arguments = match.groups()
        args = parse_numbers(arguments, attribute)
        result = result.transform(_transform_function(name, args, attribute, value))
        pos = match.end()
    return result


def _transform_function(
    name: str, args: list[float], attribute: str, value: str
) -> Transform:
    count = len(args)
    if name == "matrix" and count == 6:
        return Transform(*args)
    if name == "translate" and count in (1, 2):
        return Identity.translate(args[0], args[1] if count == 2 else 0.0)
    if name == "scale" and count in (1, 2):
        return Identity.scale(args[0], args[1] if count == 2 else args[0])
    if name == "rotate" and count in (1, 3):
        angle = math.radians(args[0])
        if count == 1:
            return Identity.rotate(angle)
        cx, cy = args[1], args[2]
        return Identity.translate(cx, cy).rotate(angle).translate(-cx, -cy)
    if name == "skewX" and count == 1:
        return Identity.skew(math.radians(args[0]), 0)
    if name == "skewY" and count == 1:
        return Identity.skew(0, math.radians(args[0]))
    raise AttributeValueError(attribute, value, f"{name}() does not take {count} arguments")


def parse_paint(value: str) -> Paint:
    """Parse a `fill` or `stroke` paint value.

    Args:
        value: Raw paint text

    Returns:
        NONE, IriFragment, Color or UnsupportedPaint. Never raises: syntax
        the converter cannot model is reported as UnsupportedPaint.
    """
    text = value.strip()
    if text == "none":
        return NONE

    iri = _IRI_PAINT_RE.fullmatch(text)
    if iri is not None:
        fallback = iri.group(3).strip() or None
        return IriFragment(iri.group(2).strip(), fallback)

    if text in _SPECIAL_PAINTS:
        return UnsupportedPaint(text)

    icc: str | None = None
    icc_match = _ICC_RE.fullmatch(text)
    if icc_match is not None:
        text, icc = icc_match.group(1).strip(), icc_match.group(2)

    if _is_color(text):
        return Color(text, icc)
    return UnsupportedPaint(value.strip())


def _is_color(text: str) -> bool:
    return bool(
        _HEX_COLOR_RE.fullmatch(text)
        or _FUNCTIONAL_COLOR_RE.fullmatch(text)
        or (_NAMED_COLOR_RE.fullmatch(text) and text not in _SPECIAL_PAINTS)
    )


class LengthResolver:
    """Converts SVG lengths to user units.

    Absolute units are converted at a fixed resolution. Percentages are
    resolved against the viewport of the element being processed. Font
    relative units use a fixed font size since text styling is not modeled.

    Example:
        resolver = LengthResolver(dpi=96.0)
        resolver.resolve("25.4mm", viewport)  # 96.0
    """

    def __init__(self, dpi: float = 96.0, font_size: float = 16.0) -> None:
        """Initialize the resolver.

        Args:
            dpi: User units per inch
            font_size: Font size in user units for em/ex lengths
        """
        self._units_per_unit = {
            None: 1.0,
            "px": 1.0,
            "in": dpi,
            "cm": dpi / 2.54,
            "mm": dpi / 25.4,
            "pt": dpi / 72.0,
            "pc": dpi / 6.0,
            "em": font_size,
            "ex": font_size / 2.0,
        }

    def resolve(
        self,
        value: str,
        viewport: Viewport,
        axis: Axis = Axis.DIAGONAL,
        attribute: str = "length",
    ) -> float:
        """Convert a length to user units.

        Args:
            value: Length text, e.g. "10", "2.5mm", "50%"
            viewport: Reference rectangle for percentages
            axis: Which viewport dimension percentages refer to
            attribute: Attribute name for error reporting

        Returns:
            Length in user units

        Raises:
            AttributeValueError: If the text is not a length
        """
        match = _LENGTH_RE.fullmatch(value)
        if match is None:
            raise AttributeValueError(attribute, value, "expected a length")
        number, unit = float(match.group(1)), match.group(2)
        if unit == "%":
            if axis is Axis.X:
                reference = viewport.width
            elif axis is Axis.Y:
                reference = viewport.height
            else:
                reference = viewport.diagonal
            return number / 100.0 * reference
        return number * self._units_per_unit[unit]

    def resolve_fraction(self, value: str, attribute: str = "length") -> float:
        """Convert a bounding box relative length to a fraction.

        Used for `objectBoundingBox` units, where "50%" and "0.5" mean the
        same thing.

        Raises:
            AttributeValueError: If the text is not a number or percentage
        """
        match = _LENGTH_RE.fullmatch(value)
        if match is None or match.group(2) not in (None, "%"):
            raise AttributeValueError(attribute, value, "expected a number or percentage")
        number = float(match.group(1))
        return number / 100.0 if match.group(2) == "%" else number


def parse_dasharray(
    value: str, resolver: LengthResolver, viewport: Viewport
) -> list[float] | Keyword:
    """Parse `stroke-dasharray`.

    Args:
        value: Raw attribute text
        resolver: Length resolver for units and percentages
        viewport: Reference rectangle for percentages

    Returns:
        NONE, or the list of dash/gap lengths. An array summing to zero
        renders solid and is returned empty.

    Raises:
        AttributeValueError: On malformed or negative lengths
    """
    text = value.strip()
    if text == "none":
        return NONE

    tokens = [token for token in re.split(r"[\s,]+", text) if token]
    if not tokens:
        raise AttributeValueError("stroke-dasharray", value, "empty dash array")

    lengths = [
        resolver.resolve(token, viewport, Axis.DIAGONAL, "stroke-dasharray")
        for token in tokens
    ]
    if any(length < 0 for length in lengths):
        raise AttributeValueError("stroke-dasharray", value, "negative dash length")
    if sum(lengths) == 0:
        return []
    return lengths


def parse_viewbox(value: str) -> ViewBox:
    """Parse a `viewBox` attribute.

    Raises:
        AttributeValueError: Unless exactly four numbers with non-negative size
    """
    numbers = parse_numbers(value, "viewBox")
    if len(numbers) != 4:
        raise AttributeValueError("viewBox", value, "expected four numbers")
    if numbers[2] < 0 or numbers[3] < 0:
        raise AttributeValueError("viewBox", value, "negative width or height")
    return ViewBox(*numbers)


def parse_preserve_aspect_ratio(value: str) -> PreserveAspectRatio:
    """Parse `preserveAspectRatio`.

    The optional leading `defer` keyword is accepted and ignored.

    Raises:
        AttributeValueError: On unknown keywords
    """
    tokens = value.split()
    if tokens and tokens[0] == "defer":
        tokens = tokens[1:]
    if not tokens or len(tokens) > 2:
        raise AttributeValueError("preserveAspectRatio", value, "expected align [meetOrSlice]")

    align, *rest = tokens
    meet_or_slice = rest[0] if rest else "meet"
    if meet_or_slice not in ("meet", "slice"):
        raise AttributeValueError("preserveAspectRatio", value, f"unknown keyword {meet_or_slice!r}")

    if align == "none":
        return PreserveAspectRatio(None, None, meet_or_slice == "slice")

    match = _ALIGN_RE.fullmatch(align)
    if match is None:
        raise AttributeValueError("preserveAspectRatio", value, f"unknown alignment {align!r}")
    return PreserveAspectRatio(
        match.group(1).lower(), match.group(2).lower(), meet_or_slice == "slice"
    )


def parse_units(value: str, attribute: str) -> Units:
    """Parse `patternUnits` / `patternContentUnits`.

    Raises:
        AttributeValueError: Unless `userSpaceOnUse` or `objectBoundingBox`
    """
    try:
        return Units(value.strip())
    except ValueError:
        raise AttributeValueError(attribute, value, "unknown units") from None


def parse_style(value: str) -> dict[str, str]:
    """Split an inline `style` attribute into property declarations.

    Declarations without a colon are dropped.

    Examples:
        >>> parse_style("fill: none; stroke-dasharray:4 2")
        {'fill': 'none', 'stroke-dasharray': '4 2'}
    """
    declarations: dict[str, str] = {}
    for declaration in value.split(";"):
        name, colon, text = declaration.partition(":")
        if colon and name.strip():
            declarations[name.strip()] = text.strip()
    return declarations
