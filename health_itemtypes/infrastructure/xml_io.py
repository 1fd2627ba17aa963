"""XML Fragment Reading and Writing.

Provides the two XML collaborators the records depend on: a secure loader that
turns fragment text into a navigable element tree, and a streaming-style
writer that records call to emit their elements.

Security Impact:
    - Fragments are parsed with defusedxml, which refuses entity expansion
      (Billion Laughs), external entities and DTD retrieval
    - The writer builds an lxml tree, so element text and attribute values are
      always escaped; no markup is ever concatenated by hand

Architecture:
    - XmlWriter mirrors a forward-only writer (start element, attribute,
      text element, end element) on top of lxml.etree
    - load_fragment returns a standard ElementTree element
"""

import logging
from typing import Any, List, Optional

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as SafeET
from defusedxml.ElementTree import ParseError as SafeParseError
from lxml import etree

from health_itemtypes.domain.ports import ParseFault

logger = logging.getLogger(__name__)


def load_fragment(text: str) -> Any:
    """Parse an XML fragment safely.

    Parameters:
        text: XML text holding a single root element

    Returns:
        Element: Root element of the fragment

    Raises:
        ParseFault: If the text is not well-formed XML or uses forbidden
            constructs (entity declarations, external references)
    """
    try:
        return SafeET.fromstring(text)
    except SafeParseError as e:
        raise ParseFault(f"Malformed XML fragment: {e}")
    except DefusedXmlException as e:
        logger.warning(f"Rejected XML fragment with forbidden construct: {type(e).__name__}")
        raise ParseFault(f"Forbidden XML construct: {e}")


class XmlWriter:
    """Forward-only XML writer backed by an lxml element tree.

    Example:
        ```python
        writer = XmlWriter()
        writer.write_start_element("when")
        writer.write_element_string("h", "7")
        writer.write_end_element()
        writer.to_string()  # '<when><h>7</h></when>'
        ```
    """

    def __init__(self):
        self._root: Optional[Any] = None
        self._stack: List[Any] = []

    def _new_element(self, name: str) -> Any:
        if self._stack:
            return etree.SubElement(self._stack[-1], name)
        if self._root is not None:
            raise ValueError(f"Cannot start '{name}': the document already has a root element")
        self._root = etree.Element(name)
        return self._root

    def write_start_element(self, name: str) -> None:
        self._stack.append(self._new_element(name))

    def write_attribute_string(self, name: str, value: str) -> None:
        if not self._stack:
            raise ValueError(f"Cannot write attribute '{name}' outside an element")
        self._stack[-1].set(name, value)

    def write_value(self, text: str) -> None:
        """Append text content to the element currently open."""
        if not self._stack:
            raise ValueError("Cannot write text outside an element")
        current = self._stack[-1]
        current.text = (current.text or "") + text

    def write_element_string(self, name: str, text: str) -> None:
        element = self._new_element(name)
        element.text = text

    def write_end_element(self) -> None:
        if not self._stack:
            raise ValueError("No open element to close")
        self._stack.pop()

    @property
    def root(self) -> Optional[Any]:
        """Root lxml element written so far (None before the first element)."""
        return self._root

    def to_string(self, pretty_print: bool = False) -> str:
        if self._root is None:
            return ""
        if self._stack:
            raise ValueError(f"Element '{self._stack[-1].tag}' is still open")
        return etree.tostring(self._root, encoding="unicode", pretty_print=pretty_print)
