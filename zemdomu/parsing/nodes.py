"""Markup tree shared by the HTML and JSX backends.

Both backends build the same node types so every rule is written once
against element open, text and close events. Trees are built once per parse
call and not modified afterwards.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Final


class _Dynamic(Enum):
    """Marker for an attribute whose value is a non-literal expression."""

    DYNAMIC = auto()

    def __repr__(self) -> str:
        return "DYNAMIC"


DYNAMIC: Final = _Dynamic.DYNAMIC

AttrValue = str | _Dynamic


class AttrState(Enum):
    """What a rule can know about one attribute of an element."""

    MISSING = auto()
    EMPTY = auto()
    PRESENT = auto()
    UNKNOWN = auto()


@dataclass(slots=True)
class Text:
    """Literal character data."""

    text: str
    offset: int

    @property
    def has_content(self) -> bool:
        return bool(self.text.strip())


@dataclass(slots=True)
class Comment:
    """A markup or JSX comment; only directive scanning looks at these."""

    text: str
    offset: int
    end: int


@dataclass(slots=True)
class Expression:
    """A JSX expression container such as ``{props.children}``.

    ``children`` holds JSX elements embedded in the expression so that
    ``<ul>{items.map(i => <li/>)}</ul>`` still nests the ``<li>`` under
    the ``<ul>``. ``empty`` is True for ``{}`` and comment-only containers,
    and for the holder of JSX passed through an attribute prop; an empty
    expression is never treated as text content.
    """

    offset: int
    empty: bool = False
    children: list[Node] = field(default_factory=list)


@dataclass(slots=True)
class Element:
    """An element with ordered attributes and children.

    HTML tag names are lower-cased; JSX names keep their case, so a
    capitalized name is a component reference rather than a host element.
    """

    tag: str
    offset: int
    attrs: dict[str, AttrValue] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)
    self_closing: bool = False
    has_spread: bool = False

    def attr(self, name: str) -> AttrValue | None:
        """Raw attribute value, or None when absent."""
        return self.attrs.get(name)

    def attr_state(self, *names: str) -> AttrState:
        """Classify the first present attribute among ``names``.

        An absent attribute on an element with a spread (``{...props}``)
        is UNKNOWN rather than MISSING.
        """
        for name in names:
            if name in self.attrs:
                value = self.attrs[name]
                if value is DYNAMIC:
                    return AttrState.UNKNOWN
                return AttrState.PRESENT if value.strip() else AttrState.EMPTY
        return AttrState.UNKNOWN if self.has_spread else AttrState.MISSING

    def literal(self, name: str) -> str | None:
        """Attribute value when it is a literal string, else None."""
        value = self.attrs.get(name)
        return value if isinstance(value, str) else None

    @property
    def is_component(self) -> bool:
        return self.tag[:1].isupper()

    @property
    def heading_level(self) -> int | None:
        """N for ``hN`` tags (1-6), else None."""
        if len(self.tag) == 2 and self.tag[0] == "h" and self.tag[1] in "123456":
            return int(self.tag[1])
        return None


Node = Element | Text | Comment | Expression


class SourceText:
    """Maps character offsets of a source string to 0-based (line, column)."""

    __slots__ = ("text", "_line_starts")

    def __init__(self, text: str) -> None:
        self.text = text
        starts = [0]
        for index, char in enumerate(text):
            if char == "\n":
                starts.append(index + 1)
        self._line_starts = starts

    def position(self, offset: int) -> tuple[int, int]:
        """(line, column) for ``offset``."""
        line = bisect_right(self._line_starts, offset) - 1
        return line, offset - self._line_starts[line]

    def offset(self, line: int, column: int) -> int:
        """Inverse of position() for in-range values."""
        line = min(max(line, 0), len(self._line_starts) - 1)
        return self._line_starts[line] + column

    @property
    def line_count(self) -> int:
        return len(self._line_starts)


@dataclass(slots=True)
class Document:
    """Result of one parse call: a synthetic root plus its source map.

    ``imports`` maps capitalized local import bindings to their import
    source string; only the JSX backend fills it.
    """

    root: Element
    source: SourceText
    comments: list[Comment] = field(default_factory=list)
    imports: dict[str, str] = field(default_factory=dict)

    def iter_elements(self) -> list[Element]:
        """All elements in document order, excluding the synthetic root."""
        found: list[Element] = []
        stack: list[Node] = list(reversed(self.root.children))
        while stack:
            node = stack.pop()
            if isinstance(node, Element):
                found.append(node)
            if isinstance(node, Element | Expression):
                stack.extend(reversed(node.children))
        return found
