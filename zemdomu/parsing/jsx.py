"""JSX/TSX backend built on tree-sitter.

tree-sitter produces the full source tree; this module only adapts its JSX
nodes to the shared markup tree so the rules see the same open/text/close
events as for HTML. Attribute values that are not string literals become
DYNAMIC. Imports with capitalized local bindings are collected for the
component graph.
"""

from __future__ import annotations

import html
from bisect import bisect_right
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Parser

from zemdomu.exceptions import MarkupParseError
from zemdomu.parsing.nodes import (
    DYNAMIC,
    AttrValue,
    Comment,
    Document,
    Element,
    Expression,
    Node,
    SourceText,
    Text,
)

if TYPE_CHECKING:
    from tree_sitter import Node as TSNode

Dialect = Literal["jsx", "tsx"]

_ELEMENT_TYPES = frozenset({"jsx_element", "jsx_self_closing_element"})
_STRING_TYPES = frozenset({"string", "template_string"})


@lru_cache(maxsize=4)
def _language(dialect: Dialect) -> Language:
    if dialect == "tsx":
        return Language(tree_sitter_typescript.language_tsx())
    return Language(tree_sitter_javascript.language())


class _ByteOffsets:
    """Converts tree-sitter byte offsets to character offsets."""

    __slots__ = ("_byte_starts",)

    def __init__(self, text: str, data: bytes) -> None:
        if len(text) == len(data):
            self._byte_starts: list[int] | None = None
            return
        starts: list[int] = []
        position = 0
        for char in text:
            starts.append(position)
            position += len(char.encode("utf-8", errors="surrogatepass"))
        self._byte_starts = starts

    def char_offset(self, byte_offset: int) -> int:
        if self._byte_starts is None:
            return byte_offset
        return bisect_right(self._byte_starts, byte_offset) - 1


class _JsxAdapter:
    """Walks one tree-sitter tree and builds the shared markup tree."""

    def __init__(self, text: str, data: bytes) -> None:
        self.data = data
        self.offsets = _ByteOffsets(text, data)

    def offset(self, node: TSNode) -> int:
        return self.offsets.char_offset(node.start_byte)

    def source(self, node: TSNode) -> str:
        return self.data[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def collect_elements(self, start: TSNode) -> list[Node]:
        """Outermost JSX elements inside ``start``, in source order."""
        found: list[Node] = []
        stack = [start]
        while stack:
            node = stack.pop()
            if node.type in _ELEMENT_TYPES:
                found.extend(self.convert(node))
                continue
            stack.extend(reversed(node.children))
        return found

    def convert(self, node: TSNode) -> list[Node]:
        """Convert a JSX element; fragments dissolve into their children."""
        if node.type == "jsx_self_closing_element":
            opening = node
            body: list[TSNode] = []
        else:
            opening = node.child_by_field_name("open_tag") or node.children[0]
            body = [
                child
                for child in node.children
                if child.id != opening.id and child.type != "jsx_closing_element"
            ]

        name_node = opening.child_by_field_name("name")
        children = self.convert_children(body)
        if name_node is None:
            return children

        element = Element(
            tag=self.source(name_node),
            offset=self.offset(node),
            children=children,
            self_closing=node.type == "jsx_self_closing_element",
        )
        props: list[Node] = []
        for attribute in opening.named_children:
            if attribute.type == "jsx_attribute":
                name, value = self.attribute(attribute)
                element.attrs.setdefault(name, value)
                props.extend(self.prop_elements(attribute))
            elif attribute.type == "jsx_expression":
                element.has_spread = True
        # Props render before the body and never count as text content
        element.children[:0] = props
        return [element]

    def convert_children(self, body: list[TSNode]) -> list[Node]:
        children: list[Node] = []
        for child in body:
            if child.type in _ELEMENT_TYPES:
                children.extend(self.convert(child))
            elif child.type in ("jsx_text", "html_character_reference"):
                children.append(Text(text=html.unescape(self.source(child)), offset=self.offset(child)))
            elif child.type == "jsx_expression":
                children.append(self.expression(child))
        return children

    def expression(self, node: TSNode) -> Expression:
        content = [child for child in node.named_children if child.type != "comment"]
        return Expression(
            offset=self.offset(node),
            empty=not content,
            children=[el for child in content for el in self.collect_elements(child)],
        )

    def attribute(self, node: TSNode) -> tuple[str, AttrValue]:
        parts = node.named_children
        name = self.source(parts[0])
        if len(parts) < 2:
            return name, ""
        return name, self.attribute_value(parts[1])

    def prop_elements(self, node: TSNode) -> list[Node]:
        """JSX passed through an attribute, e.g. ``element={<Home />}``."""
        parts = node.named_children
        if len(parts) < 2 or parts[1].type == "string":
            return []
        elements = self.collect_elements(parts[1])
        if not elements:
            return []
        return [Expression(offset=self.offset(parts[1]), empty=True, children=elements)]

    def attribute_value(self, node: TSNode) -> AttrValue:
        if node.type == "string":
            return html.unescape(self.source(node)[1:-1])
        if node.type == "jsx_expression":
            content = [child for child in node.named_children if child.type != "comment"]
            if len(content) == 1 and content[0].type in _STRING_TYPES:
                inner = content[0]
                if inner.type == "template_string" and any(
                    child.type == "template_substitution" for child in inner.named_children
                ):
                    return DYNAMIC
                return self.source(inner)[1:-1]
        return DYNAMIC

    def imports(self, root: TSNode) -> dict[str, str]:
        """Capitalized local import bindings mapped to their source string."""
        found: dict[str, str] = {}
        for statement in root.named_children:
            if statement.type != "import_statement":
                continue
            source_node = statement.child_by_field_name("source")
            if source_node is None:
                continue
            source = self.source(source_node)[1:-1]
            for clause in statement.named_children:
                if clause.type != "import_clause":
                    continue
                for binding in clause.named_children:
                    if binding.type == "identifier":
                        self._add_import(found, self.source(binding), source)
                    elif binding.type == "named_imports":
                        for spec in binding.named_children:
                            if spec.type != "import_specifier":
                                continue
                            local = spec.child_by_field_name("alias") or spec.child_by_field_name(
                                "name"
                            )
                            if local is not None:
                                self._add_import(found, self.source(local), source)
        return found

    @staticmethod
    def _add_import(found: dict[str, str], local: str, source: str) -> None:
        if local[:1].isupper():
            found[local] = source

    def comments(self, root: TSNode) -> list[Comment]:
        found: list[Comment] = []
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == "comment":
                found.append(
                    Comment(
                        text=self.source(node),
                        offset=self.offset(node),
                        end=self.offsets.char_offset(node.end_byte - 1) + 1,
                    )
                )
                continue
            stack.extend(reversed(node.children))
        return found


def _first_error(root: TSNode) -> TSNode | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def parse(source: str, dialect: Dialect = "tsx") -> Document:
    """Parse JSX/TSX ``source`` into the shared markup tree.

    Raises
    ------
    MarkupParseError
        If the source contains a syntax error
    """
    data = source.encode("utf-8", errors="surrogatepass")
    tree = Parser(_language(dialect)).parse(data)
    root = tree.root_node
    adapter = _JsxAdapter(source, data)
    text = SourceText(source)

    if root.has_error:
        error = _first_error(root) or root
        line, column = text.position(adapter.offset(error))
        reason = "Missing token" if error.is_missing else "Unexpected syntax"
        raise MarkupParseError(f"{reason} in {dialect.upper()} source", line, column)

    return Document(
        root=Element(tag="#root", offset=0, children=adapter.collect_elements(root)),
        source=text,
        comments=adapter.comments(root),
        imports=adapter.imports(root),
    )
