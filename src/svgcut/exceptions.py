"""Exception hierarchy for svgcut."""


class SvgCutError(Exception):
    """Base exception for all svgcut errors."""

    pass


class DocumentError(SvgCutError):
    """Errors related to loading an SVG document."""

    pass


class DocumentLoadError(DocumentError):
    """Error loading or parsing a document."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load document '{path}': {reason}")


class DocumentFormatError(DocumentError):
    """Document is well-formed XML but not an SVG document."""

    def __init__(self, path: str, details: str) -> None:
        self.path = path
        self.details = details
        super().__init__(f"Invalid SVG document '{path}': {details}")


class AttributeValueError(SvgCutError):
    """An attribute value could not be decoded."""

    def __init__(self, attribute: str, value: str, reason: str) -> None:
        self.attribute = attribute
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value {value!r} for attribute '{attribute}': {reason}")


class ReferenceLoadError(SvgCutError):
    """A referenced element could not be loaded.

    Fatal for the single reference load only; the enclosing traversal
    continues.
    """

    def __init__(self, fragment_id: str, reason: str) -> None:
        self.fragment_id = fragment_id
        self.reason = reason
        super().__init__(f"Cannot load referenced element '#{fragment_id}': {reason}")


class UnexpectedElementError(ReferenceLoadError):
    """Referenced element is not of an expected kind."""

    def __init__(self, fragment_id: str, element: str) -> None:
        self.element = element
        super().__init__(fragment_id, f"unexpected element <{element}>")


class ReferenceCycleError(ReferenceLoadError):
    """Referenced element is already being loaded higher up the stack."""

    def __init__(self, fragment_id: str) -> None:
        super().__init__(fragment_id, "circular reference")


class ExportError(SvgCutError):
    """Errors related to writing plotted paths."""

    pass


class ExportWriteError(ExportError):
    """Error writing the output file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write output '{path}': {reason}")
