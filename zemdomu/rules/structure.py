"""Document structure rules: headings, sections, lists, tables, landmarks."""

from __future__ import annotations

from zemdomu.parsing.nodes import AttrState, Element
from zemdomu.rules.base import BaseRule, RuleContext, ScopedRule

LIST_CONTAINERS = frozenset({"ul", "ol"})


class RequireSectionHeading(ScopedRule):
    rule_id = "requireSectionHeading"
    description = "<section> must contain a heading"
    scope_tags = frozenset({"section"})

    def observe(self, element: Element, ctx: RuleContext) -> None:
        if element.heading_level is not None:
            self.mark_all()

    def close_unsatisfied(self, element: Element, ctx: RuleContext) -> None:
        self.report(ctx, element, "<section> missing heading (<h1>-<h6>)")


class EnforceHeadingOrder(BaseRule):
    rule_id = "enforceHeadingOrder"
    description = "Heading levels must not skip (e.g. <h2> then <h4>)"

    def __init__(self) -> None:
        self.previous: int | None = None

    def enter(self, element: Element, ctx: RuleContext) -> None:
        level = element.heading_level
        if level is None:
            return
        if self.previous is not None and level > self.previous + 1:
            self.report(ctx, element, heading_skip_message(level, self.previous))
        self.previous = level


def heading_skip_message(level: int, previous: int) -> str:
    return f"Heading level skipped: <h{level}> after <h{previous}>"


class SingleH1(BaseRule):
    rule_id = "singleH1"
    description = "Only one <h1> per document"

    def __init__(self) -> None:
        self.count = 0

    def enter(self, element: Element, ctx: RuleContext) -> None:
        if element.tag != "h1":
            return
        self.count += 1
        if self.count > 1:
            self.report(ctx, element, "Only one <h1> allowed per document")


class EnforceListNesting(BaseRule):
    rule_id = "enforceListNesting"
    description = "<li> must be a direct child of <ul> or <ol>"

    def enter(self, element: Element, ctx: RuleContext) -> None:
        if element.tag != "li":
            return
        parent = ctx.parent
        if parent is None or parent.tag not in LIST_CONTAINERS:
            self.report(ctx, element, "<li> must be inside a <ul> or <ol>")


class RequireTableCaption(ScopedRule):
    rule_id = "requireTableCaption"
    description = "<table> must have a <caption>"
    scope_tags = frozenset({"table"})

    def observe(self, element: Element, ctx: RuleContext) -> None:
        if element.tag == "caption":
            self.mark_innermost()

    def close_unsatisfied(self, element: Element, ctx: RuleContext) -> None:
        self.report(ctx, element, "<table> missing <caption>")


class RequireNavLinks(ScopedRule):
    rule_id = "requireNavLinks"
    description = "<nav> must contain at least one link"
    scope_tags = frozenset({"nav"})

    def observe(self, element: Element, ctx: RuleContext) -> None:
        if element.tag == "a":
            self.mark_all()

    def close_unsatisfied(self, element: Element, ctx: RuleContext) -> None:
        self.report(ctx, element, "<nav> contains no links")


class RequireHtmlLang(BaseRule):
    rule_id = "requireHtmlLang"
    description = "<html> must declare a non-empty lang"

    def __init__(self) -> None:
        self.seen = False

    def enter(self, element: Element, ctx: RuleContext) -> None:
        if element.tag != "html" or self.seen:
            return
        self.seen = True
        state = element.attr_state("lang")
        if state is AttrState.MISSING:
            self.report(ctx, element, "<html> element missing lang attribute")
        elif state is AttrState.EMPTY:
            self.report(ctx, element, "<html> lang attribute is empty")
