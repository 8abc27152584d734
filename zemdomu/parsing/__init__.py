"""Markup parsing backends and the shared tree they produce."""

from zemdomu.parsing.directives import LineRange, disabled_ranges, filter_disabled
from zemdomu.parsing.nodes import (
    DYNAMIC,
    AttrState,
    AttrValue,
    Comment,
    Document,
    Element,
    Expression,
    Node,
    SourceText,
    Text,
)

__all__ = [
    "DYNAMIC",
    "AttrState",
    "AttrValue",
    "Comment",
    "Document",
    "Element",
    "Expression",
    "LineRange",
    "Node",
    "SourceText",
    "Text",
    "disabled_ranges",
    "filter_disabled",
]
