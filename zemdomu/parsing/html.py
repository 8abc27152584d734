"""Lightweight HTML tokenizer and tree builder.

Best-effort and tolerant: unterminated comments run to the end of input,
unknown close tags are ignored, and a close tag for an element further up
the stack implicitly closes everything opened after it. Nesting legality is
left to the rules.
"""

from __future__ import annotations

import html
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Literal

from zemdomu.parsing.nodes import Comment, Document, Element, SourceText, Text

_TAG_NAME = r"[A-Za-z][\w\-:.]*"

_CLOSE_RE = re.compile(rf"</\s*({_TAG_NAME})\s*>")
_OPEN_RE = re.compile(rf"<\s*({_TAG_NAME})((?:\"[^\"]*\"|'[^']*'|[^'\">])*?)(/)?\s*>")
_ATTR_RE = re.compile(r"([^\s\"'>/=]+)(?:\s*=\s*(\"[^\"]*\"|'[^']*'|[^\s\"'>]+))?")
_DECLARATION_RE = re.compile(r"<[!?][^>]*>")

# Elements that never have content, even when written without "/>"
VOID_ELEMENTS = frozenset({
    "area",
    "base",
    "br",
    "col",
    "embed",
    "hr",
    "img",
    "input",
    "link",
    "meta",
    "param",
    "source",
    "track",
    "wbr",
})

# Elements whose content is raw text and never markup
RAW_TEXT_ELEMENTS = frozenset({"script", "style"})

TokenType = Literal["open", "close", "text", "comment"]


@dataclass(slots=True)
class Token:
    type: TokenType
    index: int
    end: int
    tag: str = ""
    attrs: dict[str, str] = field(default_factory=dict)
    self_closing: bool = False
    text: str = ""


def parse_attributes(source: str) -> dict[str, str]:
    """Parse the attribute part of an open tag.

    Accepts ``name``, ``name=value``, ``name="value"`` and ``name='value'``.
    A name without a value is recorded as present with an empty string.
    Names are lower-cased; the first occurrence of a name wins.

    >>> parse_attributes(' alt="" hidden src=a.png')
    {'alt': '', 'hidden': '', 'src': 'a.png'}
    """
    attrs: dict[str, str] = {}
    for match in _ATTR_RE.finditer(source):
        name = match.group(1).lower()
        raw = match.group(2)
        if raw is None:
            value = ""
        elif raw[:1] in ("'", '"'):
            value = raw[1:-1]
        else:
            value = raw
        attrs.setdefault(name, html.unescape(value))
    return attrs


def tokenize(source: str) -> Iterator[Token]:
    """Split ``source`` into open, close, text and comment tokens."""
    i = 0
    length = len(source)
    while i < length:
        if source.startswith("<!--", i):
            end = source.find("-->", i + 4)
            stop = length if end == -1 else end + 3
            text = source[i + 4 : length if end == -1 else end]
            yield Token("comment", i, stop, text=text)
            i = stop
            continue

        if source[i] == "<":
            close = _CLOSE_RE.match(source, i)
            if close:
                yield Token("close", i, close.end(), tag=close.group(1).lower())
                i = close.end()
                continue

            opened = _OPEN_RE.match(source, i)
            if opened:
                tag = opened.group(1).lower()
                self_closing = bool(opened.group(3)) or tag in VOID_ELEMENTS
                yield Token(
                    "open",
                    i,
                    opened.end(),
                    tag=tag,
                    attrs=parse_attributes(opened.group(2)),
                    self_closing=self_closing,
                )
                i = opened.end()
                if tag in RAW_TEXT_ELEMENTS and not self_closing:
                    i = _skip_raw_text(source, i, tag)
                continue

            declaration = _DECLARATION_RE.match(source, i)
            if declaration:
                i = declaration.end()
                continue

            # A stray "<" is ordinary text up to the next tag start
            next_lt = source.find("<", i + 1)
        else:
            next_lt = source.find("<", i)

        end = length if next_lt == -1 else next_lt
        yield Token("text", i, end, text=source[i:end])
        i = end


def _skip_raw_text(source: str, start: int, tag: str) -> int:
    """Index of the close tag ending a raw-text element, or end of input."""
    close = re.compile(rf"</\s*{tag}\s*>", re.IGNORECASE).search(source, start)
    return close.start() if close else len(source)


def parse(source: str) -> Document:
    """Build a tree from ``source`` rooted at a synthetic ``#root`` element."""
    root = Element(tag="#root", offset=0)
    stack: list[Element] = [root]
    comments: list[Comment] = []

    for token in tokenize(source):
        parent = stack[-1]
        if token.type == "open":
            node = Element(
                tag=token.tag,
                offset=token.index,
                attrs=token.attrs,
                self_closing=token.self_closing,
            )
            parent.children.append(node)
            if not token.self_closing:
                stack.append(node)
        elif token.type == "close":
            for depth in range(len(stack) - 1, 0, -1):
                if stack[depth].tag == token.tag:
                    del stack[depth:]
                    break
        elif token.type == "text":
            parent.children.append(Text(text=html.unescape(token.text), offset=token.index))
        else:
            comment = Comment(text=token.text, offset=token.index, end=token.end)
            parent.children.append(comment)
            comments.append(comment)

    return Document(root=root, source=SourceText(source), comments=comments)
