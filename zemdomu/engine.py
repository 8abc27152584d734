"""Rule engine: walks a markup tree and dispatches events to enabled rules."""

from __future__ import annotations

from collections.abc import Iterable

from zemdomu.linting.models import LintResult
from zemdomu.parsing.nodes import Document, Element, Expression, Node, Text
from zemdomu.rules import RULES, BaseRule, RuleContext


class RuleEngine:
    """Runs a fixed set of rules over documents.

    Only the rules named at construction are instantiated; rules that are
    ``off`` never run. Rule state is created fresh for every document.

    Examples
    --------
    >>> from zemdomu.parsing import html
    >>> engine = RuleEngine(["requireAltText"])
    >>> [r.rule for r in engine.run(html.parse("<img>"))]
    ['requireAltText']
    """

    def __init__(self, rule_ids: Iterable[str]) -> None:
        self.rule_ids = tuple(rule_id for rule_id in rule_ids if rule_id in RULES)

    def run(self, document: Document) -> list[LintResult]:
        """Walk ``document`` once and return the raw results of every rule."""
        rules: list[BaseRule] = [RULES[rule_id]() for rule_id in self.rule_ids]
        if not rules:
            return []
        ctx = RuleContext(source=document.source)

        # Pending work: a node to visit, or an element whose close is due
        work: list[tuple[Node, bool]] = [(child, False) for child in reversed(document.root.children)]
        while work:
            node, closing = work.pop()
            if isinstance(node, Element):
                if closing:
                    ctx.stack.pop()
                    for rule in rules:
                        rule.exit(node, ctx)
                    continue
                for rule in rules:
                    rule.enter(node, ctx)
                ctx.stack.append(node)
                work.append((node, True))
                work.extend((child, False) for child in reversed(node.children))
            elif isinstance(node, Text):
                if node.has_content:
                    for rule in rules:
                        rule.text(ctx)
            elif isinstance(node, Expression):
                if not node.empty:
                    for rule in rules:
                        rule.text(ctx)
                work.extend((child, False) for child in reversed(node.children))

        for rule in rules:
            rule.finish(ctx)
        return ctx.results
