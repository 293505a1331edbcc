"""SVG document loading.

This module provides the SvgDocument class wrapping a parsed lxml tree and
its element-by-id index.
"""

from pathlib import Path

from lxml import etree

from svgcut.exceptions import DocumentFormatError, DocumentLoadError

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


def element_kind(element: etree._Element) -> str | None:
    """Return the SVG element name of a node.

    Returns:
        Local tag name for elements in the SVG namespace (or without a
        namespace), None for foreign elements, comments and processing
        instructions
    """
    if not isinstance(element.tag, str):
        return None
    qname = etree.QName(element)
    if qname.namespace not in (SVG_NAMESPACE, None):
        return None
    return qname.localname


def _parser() -> etree.XMLParser:
    return etree.XMLParser(
        remove_comments=True,
        remove_pis=True,
        resolve_entities=False,
        no_network=True,
        huge_tree=True,
    )


class SvgDocument:
    """A parsed SVG document.

    Example:
        document = SvgDocument.from_file(Path("drawing.svg"))
        pattern = document.find_by_id("hatch")
    """

    def __init__(self, root: etree._Element, source: str = "<memory>") -> None:
        """Wrap an already parsed tree.

        Args:
            root: The outermost <svg> element
            source: Description of where the document came from, for messages

        Raises:
            DocumentFormatError: If the root is not an SVG <svg> element
        """
        if element_kind(root) != "svg":
            raise DocumentFormatError(source, f"root element is <{etree.QName(root).localname}>, not <svg>")
        self._root = root
        self._source = source
        self._ids: dict[str, etree._Element] = {}
        for element in root.iter():
            element_id = element.get("id") if isinstance(element.tag, str) else None
            if element_id:
                self._ids.setdefault(element_id, element)

    @classmethod
    def from_file(cls, path: Path) -> "SvgDocument":
        """Load a document from disk.

        Raises:
            DocumentLoadError: If the file is missing or not well-formed XML
            DocumentFormatError: If the file is not an SVG document
        """
        if not path.exists():
            raise DocumentLoadError(str(path), "file not found")
        try:
            tree = etree.parse(str(path), _parser())
        except (etree.XMLSyntaxError, OSError) as e:
            raise DocumentLoadError(str(path), str(e)) from e
        return cls(tree.getroot(), str(path))

    @classmethod
    def from_string(cls, data: str | bytes, source: str = "<memory>") -> "SvgDocument":
        """Parse a document from text.

        Raises:
            DocumentLoadError: If the text is not well-formed XML
            DocumentFormatError: If the text is not an SVG document
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        try:
            root = etree.fromstring(data, _parser())
        except etree.XMLSyntaxError as e:
            raise DocumentLoadError(source, str(e)) from e
        return cls(root, source)

    @property
    def root(self) -> etree._Element:
        """The outermost <svg> element."""
        return self._root

    @property
    def source(self) -> str:
        return self._source

    def find_by_id(self, fragment_id: str) -> etree._Element | None:
        """Look up an element by its `id` attribute.

        References may point forward or backward in the document; when
        several elements share an id, the first one wins.

        Args:
            fragment_id: Identifier without the leading '#'

        Returns:
            The element, or None if no element has that id
        """
        return self._ids.get(fragment_id)
