"""Rule context and shared base classes.

Every rule observes the same four events, whichever backend built the tree:

- ``enter(element, ctx)`` when an element opens,
- ``text(ctx)`` when non-whitespace text or a non-empty JSX expression is
  seen,
- ``exit(element, ctx)`` when an element closes (self-closing elements get
  both events back to back),
- ``finish(ctx)`` once after the whole tree was walked.

Rule instances hold per-file state and are created fresh for each file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from zemdomu.linting.models import LintResult
from zemdomu.parsing.nodes import Element, SourceText


@dataclass(slots=True)
class RuleContext:
    """Traversal state shared by all rules during one file's walk.

    ``stack`` holds the open ancestor elements of the current event, outermost
    first. During ``enter`` and ``exit`` it excludes the element itself.
    """

    source: SourceText
    stack: list[Element] = field(default_factory=list)
    results: list[LintResult] = field(default_factory=list)

    @property
    def parent(self) -> Element | None:
        """Nearest open ancestor element, if any."""
        return self.stack[-1] if self.stack else None

    def report(self, rule_id: str, element: Element, message: str) -> None:
        """Record a result positioned at ``element``'s opening tag."""
        line, column = self.source.position(element.offset)
        self.results.append(LintResult(line=line, column=column, message=message, rule=rule_id))


class BaseRule:
    """No-op implementation of every event; rules override what they need."""

    rule_id: ClassVar[str] = ""
    description: ClassVar[str] = ""

    def enter(self, element: Element, ctx: RuleContext) -> None:
        pass

    def text(self, ctx: RuleContext) -> None:
        pass

    def exit(self, element: Element, ctx: RuleContext) -> None:
        pass

    def finish(self, ctx: RuleContext) -> None:
        pass

    def report(self, ctx: RuleContext, element: Element, message: str) -> None:
        ctx.report(self.rule_id, element, message)


@dataclass(slots=True)
class Frame:
    """One open element a scoped rule is watching."""

    element: Element
    found: bool = False


class ScopedRule(BaseRule):
    """Rule that watches elements in ``scope_tags`` from open to close.

    Subclasses mark frames as satisfied while they are open and implement
    ``close_unsatisfied`` for frames that were never marked. A close with no
    matching frame is ignored.
    """

    scope_tags: ClassVar[frozenset[str]] = frozenset()

    def __init__(self) -> None:
        self.frames: list[Frame] = []

    def enter(self, element: Element, ctx: RuleContext) -> None:
        if element.tag in self.scope_tags:
            self.frames.append(Frame(element))
        self.observe(element, ctx)

    def exit(self, element: Element, ctx: RuleContext) -> None:
        if element.tag not in self.scope_tags or not self.frames:
            return
        frame = self.frames.pop()
        if not frame.found:
            self.close_unsatisfied(frame.element, ctx)

    def observe(self, element: Element, ctx: RuleContext) -> None:
        """Called for every element after the scope check."""

    def mark_all(self) -> None:
        for frame in self.frames:
            frame.found = True

    def mark_innermost(self) -> None:
        if self.frames:
            self.frames[-1].found = True

    def close_unsatisfied(self, element: Element, ctx: RuleContext) -> None:
        raise NotImplementedError
