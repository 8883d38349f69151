"""Recursive-descent scanner for pipeline markup.

This is NOT a general-purpose XML parser. It recognizes nested tagged
elements with quoted attributes, skips comments, processing instructions,
CDATA sections and declarations, and records exact source offsets for
every element and attribute so edits can be mapped back onto the text.

The scanner is strict about structure: an opening tag without a matching
closing tag, a stray closing tag, or an unterminated attribute value all
raise MalformedElementError instead of being skipped.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from xml.sax.saxutils import unescape

from flowedit.contracts.errors import MalformedElementError
from flowedit.core.markup.lines import LineIndex

_ENTITIES = {"&quot;": '"', "&apos;": "'"}
_NAME_TERMINATORS = frozenset(" \t\r\n/>=<\"'")
_WHITESPACE = frozenset(" \t\r\n")


@dataclass(frozen=True, slots=True)
class ScannedAttribute:
    """One attribute of an opening tag, with exact offsets.

    ``start``/``end`` span the whole ``name="value"`` text; ``value_start``
    and ``value_end`` span the characters between the quotes.
    """

    name: str
    raw_value: str
    start: int
    end: int
    value_start: int
    value_end: int
    quote: str

    @property
    def value(self) -> str:
        """Attribute value with XML entities decoded."""
        return unescape(self.raw_value, _ENTITIES)


@dataclass(frozen=True, slots=True)
class Element:
    """One scanned element.

    Offsets:
        start: the ``<`` of the opening tag
        open_end: just past the ``>`` of the opening tag
        close_start: the ``<`` of the closing tag (None when self-closing)
        end: just past the last ``>`` of the element
    """

    tag: str
    start: int
    open_end: int
    end: int
    close_start: int | None
    attributes: tuple[ScannedAttribute, ...]
    children: tuple[Element, ...]

    @property
    def self_closing(self) -> bool:
        return self.close_start is None

    @property
    def attributes_end(self) -> int:
        """Offset just past the last attribute, or past the tag name."""
        if self.attributes:
            return self.attributes[-1].end
        return self.start + 1 + len(self.tag)

    def attribute(self, name: str) -> ScannedAttribute | None:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None

    def get(self, name: str, default: str | None = None) -> str | None:
        attribute = self.attribute(name)
        return attribute.value if attribute is not None else default

    def iter(self) -> Iterator[Element]:
        """Depth-first iteration over this element and its descendants."""
        yield self
        for child in self.children:
            yield from child.iter()

    def find_all(self, predicate: Callable[[Element], bool]) -> list[Element]:
        return [element for element in self.iter() if predicate(element)]

    def child_elements(self, tag: str) -> list[Element]:
        return [child for child in self.children if child.tag == tag]


@dataclass(frozen=True, slots=True)
class ScannedDocument:
    """All top-level elements of a text snapshot plus its line index."""

    text: str
    roots: tuple[Element, ...]
    lines: LineIndex

    def iter(self) -> Iterator[Element]:
        for root in self.roots:
            yield from root.iter()

    def find_all(self, predicate: Callable[[Element], bool]) -> list[Element]:
        return [element for element in self.iter() if predicate(element)]


def scan(text: str) -> ScannedDocument:
    """Scan a markup text into an element tree.

    Raises:
        MalformedElementError: If the text is not balanced markup.
    """
    scanner = _Scanner(text)
    roots = scanner.scan_content(parent=None)
    return ScannedDocument(text=text, roots=tuple(roots), lines=scanner.lines)


class _Scanner:
    """Single-use cursor over one text snapshot."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.lines = LineIndex(text)

    def _fail(self, message: str, offset: int) -> MalformedElementError:
        line, column = self.lines.position(min(offset, len(self.text)))
        return MalformedElementError(message, offset=offset, line=line, column=column)

    def _skip_past(self, terminator: str, what: str) -> None:
        index = self.text.find(terminator, self.pos)
        if index == -1:
            raise self._fail(f"Unterminated {what}", self.pos)
        self.pos = index + len(terminator)

    def _skip_whitespace(self) -> None:
        text = self.text
        while self.pos < len(text) and text[self.pos] in _WHITESPACE:
            self.pos += 1

    def _read_name(self) -> str:
        start = self.pos
        text = self.text
        while self.pos < len(text) and text[self.pos] not in _NAME_TERMINATORS:
            self.pos += 1
        return text[start : self.pos]

    def scan_content(self, parent: _OpenTag | None) -> list[Element]:
        """Scan sibling elements until the parent's closing tag (or EOF at top level)."""
        children: list[Element] = []
        text = self.text
        while True:
            index = text.find("<", self.pos)
            if index == -1:
                self.pos = len(text)
                if parent is not None:
                    raise self._fail(f"Element <{parent.tag}> is never closed", parent.start)
                return children
            self.pos = index
            if text.startswith("<!--", index):
                self._skip_past("-->", "comment")
            elif text.startswith("<![CDATA[", index):
                self._skip_past("]]>", "CDATA section")
            elif text.startswith("<?", index):
                self._skip_past("?>", "processing instruction")
            elif text.startswith("<!", index):
                self._skip_past(">", "declaration")
            elif text.startswith("</", index):
                self._scan_closing_tag(parent)
                return children
            else:
                children.append(self._scan_element())

    def _scan_closing_tag(self, parent: _OpenTag | None) -> None:
        start = self.pos
        self.pos += 2
        tag = self._read_name()
        self._skip_whitespace()
        if self.pos >= len(self.text) or self.text[self.pos] != ">":
            raise self._fail(f"Unterminated closing tag </{tag}>", start)
        self.pos += 1
        if parent is None:
            raise self._fail(f"Closing tag </{tag}> has no matching opening tag", start)
        if tag != parent.tag:
            raise self._fail(f"Closing tag </{tag}> does not match <{parent.tag}>", start)
        parent.close_start = start

    def _scan_element(self) -> Element:
        start = self.pos
        self.pos += 1
        tag = self._read_name()
        if not tag:
            raise self._fail("Expected element name after '<'", start)
        attributes = self._scan_attributes(tag, start)
        text = self.text
        if text.startswith("/>", self.pos):
            self.pos += 2
            return Element(
                tag=tag,
                start=start,
                open_end=self.pos,
                end=self.pos,
                close_start=None,
                attributes=attributes,
                children=(),
            )
        # _scan_attributes guarantees the next character is '>'
        self.pos += 1
        open_tag = _OpenTag(tag=tag, start=start)
        open_end = self.pos
        children = self.scan_content(parent=open_tag)
        return Element(
            tag=tag,
            start=start,
            open_end=open_end,
            end=self.pos,
            close_start=open_tag.close_start,
            attributes=attributes,
            children=tuple(children),
        )

    def _scan_attributes(self, tag: str, element_start: int) -> tuple[ScannedAttribute, ...]:
        attributes: list[ScannedAttribute] = []
        seen: set[str] = set()
        text = self.text
        while True:
            self._skip_whitespace()
            if self.pos >= len(text):
                raise self._fail(f"Unterminated opening tag <{tag}>", element_start)
            if text[self.pos] == ">" or text.startswith("/>", self.pos):
                return tuple(attributes)
            attribute_start = self.pos
            name = self._read_name()
            if not name:
                raise self._fail(f"Unexpected character {text[self.pos]!r} in <{tag}>", self.pos)
            self._skip_whitespace()
            if self.pos >= len(text) or text[self.pos] != "=":
                raise self._fail(f"Attribute '{name}' of <{tag}> has no value", attribute_start)
            self.pos += 1
            self._skip_whitespace()
            if self.pos >= len(text) or text[self.pos] not in "\"'":
                raise self._fail(f"Attribute '{name}' of <{tag}> has an unquoted value", attribute_start)
            quote = text[self.pos]
            value_start = self.pos + 1
            value_end = text.find(quote, value_start)
            if value_end == -1:
                raise self._fail(f"Unterminated value for attribute '{name}' of <{tag}>", attribute_start)
            if name in seen:
                raise self._fail(f"Duplicate attribute '{name}' in <{tag}>", attribute_start)
            seen.add(name)
            self.pos = value_end + 1
            attributes.append(
                ScannedAttribute(
                    name=name,
                    raw_value=text[value_start:value_end],
                    start=attribute_start,
                    end=self.pos,
                    value_start=value_start,
                    value_end=value_end,
                    quote=quote,
                )
            )


class _OpenTag:
    """Mutable bookkeeping for an element whose closing tag is being sought."""

    __slots__ = ("close_start", "start", "tag")

    def __init__(self, tag: str, start: int) -> None:
        self.tag = tag
        self.start = start
        self.close_start: int | None = None
