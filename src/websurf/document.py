"""
websurf - Document Store

Thin wrapper over BeautifulSoup: parse raw bytes into a queryable
document, select elements with CSS selectors (soupsieve), read
attributes and text.

The browser only relies on parse(), Document.query(), Element.attr()
and Element.text(); everything else is convenience for callers.
"""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup
from bs4.element import Tag
from soupsieve import SelectorSyntaxError

from websurf.errors import DocumentParseError, ElementNotFound

logger = logging.getLogger("websurf.document")

DEFAULT_PARSER = "html.parser"


def _select(tag: Tag, selector: str, limit: int = 0) -> list[Tag]:
    try:
        return tag.select(selector, limit=limit)
    except SelectorSyntaxError as e:
        raise ElementNotFound(selector, f"Invalid selector '{selector}': {e}") from e


class Element:
    """A single element matched by a selector."""

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag):
        self._tag = tag

    @property
    def name(self) -> str:
        return self._tag.name or ""

    def is_(self, name: str) -> bool:
        """True when the element is a <name> tag."""
        return self.name.lower() == name.lower()

    def attr(self, name: str) -> str | None:
        """Attribute value, or None when the attribute is absent.

        Multi-valued attributes (class, rel) are joined with spaces.
        """
        value = self._tag.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return value

    def attr_or(self, name: str, default: str) -> str:
        value = self.attr(name)
        return default if value is None else value

    def text(self) -> str:
        return self._tag.get_text()

    def html(self) -> str:
        """Inner HTML."""
        return self._tag.decode_contents()

    def outer_html(self) -> str:
        return str(self._tag)

    def query(self, selector: str) -> list[Element]:
        """Descendants of this element matching selector."""
        return [Element(t) for t in _select(self._tag, selector)]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Element) and other._tag is self._tag

    def __hash__(self) -> int:
        return id(self._tag)

    def __repr__(self) -> str:
        return f"<Element {self.name}>"


class Document:
    """A parsed HTML document."""

    def __init__(self, soup: BeautifulSoup, url: str | None = None):
        self._soup = soup
        self.url = url

    def query(self, selector: str) -> list[Element]:
        """All elements matching selector, in document order."""
        return [Element(t) for t in _select(self._soup, selector)]

    def first(self, selector: str) -> Element | None:
        tags = _select(self._soup, selector, limit=1)
        return Element(tags[0]) if tags else None

    @property
    def title(self) -> str:
        tag = self._soup.find("title")
        return tag.get_text() if tag is not None else ""

    def body_html(self) -> str:
        """Inner HTML of <body>, empty when the document has none."""
        body = self._soup.find("body")
        return body.decode_contents() if body is not None else ""

    @property
    def html(self) -> str:
        return str(self._soup)

    def __repr__(self) -> str:
        return f"<Document url={self.url!r}>"


def parse(data: bytes | str, url: str | None = None, parser: str = DEFAULT_PARSER) -> Document:
    """Parse raw bytes (or text) into a Document.

    Raises:
        DocumentParseError: the parser rejected the input.
    """
    try:
        soup = BeautifulSoup(data, parser)
    except Exception as e:
        logger.debug(f"Parse failed for {url}: {e}")
        raise DocumentParseError(f"Could not parse document from {url or 'input'}: {e}") from e
    return Document(soup, url=url)
