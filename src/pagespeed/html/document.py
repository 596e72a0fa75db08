"""Minimal mutable HTML tree.

Wraps BeautifulSoup (``html.parser`` builder) behind the handful of
operations the rewriter needs: lenient parsing, selection by tag name,
case-insensitive attribute access, class handling, child replacement
and serialization.

Serialization keeps attributes in source order, writes void elements
as ``<img ...>`` and escapes only ``&``, ``<`` and ``>``, so unchanged
parts of a document come back close to how they went in.
"""

import warnings
from collections.abc import Iterator

from bs4 import BeautifulSoup, Doctype, MarkupResemblesLocatorWarning, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

_PARSER = "html.parser"


class _SourceOrderFormatter(HTMLFormatter):
    """HTML formatter that leaves attribute order alone.

    The stock formatters sort attributes alphabetically.
    """

    def attributes(self, tag: Tag) -> list[tuple[str, object]]:  # type: ignore[override]
        if tag.attrs is None:
            return []
        return list(tag.attrs.items())


FORMATTER = _SourceOrderFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
)


class _Doctype(Doctype):
    """A doctype that serializes without the trailing newline bs4 adds."""

    SUFFIX = ">"


class Element:
    """A single element in a ``Document``.

    Attribute names are matched case-insensitively. ``class`` is
    exposed through ``classes`` / ``add_class`` / ``has_class``.
    """

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def __repr__(self) -> str:
        return f"<Element {self.tag} {dict(self.attributes)!r}>"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Element) and other._tag is self._tag

    def __hash__(self) -> int:
        return id(self._tag)

    @property
    def tag(self) -> str:
        return self._tag.name.lower()

    @property
    def parent(self) -> "Element | None":
        """The parent element, or ``None`` at the top of the document."""
        parent = self._tag.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        return Element(parent)

    @property
    def children(self) -> list["Element"]:
        return [Element(child) for child in self._tag.children if isinstance(child, Tag)]

    def has_ancestor(self, *tags: str) -> bool:
        """True if any enclosing element has one of *tags*."""
        names = {t.lower() for t in tags}
        return any(
            parent.name.lower() in names
            for parent in self._tag.parents
            if not isinstance(parent, BeautifulSoup)
        )

    # -- Attributes --

    @property
    def attributes(self) -> Iterator[tuple[str, str]]:
        """``(name, value)`` pairs in source order."""
        for name, value in self._tag.attrs.items():
            if isinstance(value, (list, tuple)):
                value = " ".join(value)
            yield name, value

    def _resolve(self, name: str) -> str | None:
        lowered = name.lower()
        for existing in self._tag.attrs:
            if existing.lower() == lowered:
                return existing
        return None

    def has(self, name: str) -> bool:
        return self._resolve(name) is not None

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the attribute value, or *default* if absent."""
        existing = self._resolve(name)
        if existing is None:
            return default
        value = self._tag.attrs[existing]
        if isinstance(value, (list, tuple)):
            return " ".join(value)
        return value

    def set(self, name: str, value: str) -> None:
        """Set an attribute, replacing any existing one regardless of case."""
        existing = self._resolve(name)
        if existing is not None and existing != name.lower():
            del self._tag.attrs[existing]
        self._tag[name.lower()] = value

    def remove(self, name: str) -> None:
        existing = self._resolve(name)
        if existing is not None:
            del self._tag.attrs[existing]

    # -- Classes --

    @property
    def classes(self) -> list[str]:
        value = self.get("class") or ""
        return value.split()

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def add_class(self, name: str) -> None:
        classes = self.classes
        if name not in classes:
            classes.append(name)
            self.set("class", " ".join(classes))

    # -- Tree mutation --

    def append(self, child: "Element") -> None:
        self._tag.append(child._tag)

    def replace_with(self, other: "Element") -> None:
        """Put *other* where this element is. This element is detached."""
        self._tag.replace_with(other._tag)

    def serialize(self) -> str:
        return self._tag.decode(eventual_encoding=None, formatter=FORMATTER)


class Document:
    """A parsed HTML document or fragment.

    Usage::

        doc = Document.parse('<p><img src="/a.png"></p>')
        for img in doc.select("img"):
            img.add_class("lazyload")
        html = doc.serialize()
    """

    __slots__ = ("_soup",)

    def __init__(self, soup: BeautifulSoup) -> None:
        self._soup = soup

    @classmethod
    def parse(cls, markup: str) -> "Document":
        """Parse *markup* leniently. Malformed input yields a best-effort tree.

        Downlevel conditional comments (``<![if !IE]>``) come back as
        processing instructions (``<?if !IE?>``). Browsers treat both
        as bogus comments.
        """
        with warnings.catch_warnings():
            # Short fragments such as "/media/a.png" look like file names to bs4.
            warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
            soup = BeautifulSoup(markup, _PARSER)
        for node in [n for n in soup.descendants if type(n) is Doctype]:
            node.replace_with(_Doctype(node))
        return cls(soup)

    def select(self, *tags: str) -> list[Element]:
        """All elements with one of *tags*, in document order.

        The result is a snapshot; mutating the tree does not change it.
        """
        names = [t.lower() for t in tags]
        return [Element(tag) for tag in self._soup.find_all(names)]

    def create_element(self, tag: str) -> Element:
        return Element(self._soup.new_tag(tag.lower()))

    def serialize(self) -> str:
        return self._soup.decode(eventual_encoding=None, formatter=FORMATTER)
