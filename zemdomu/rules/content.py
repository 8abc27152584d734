"""Rules that require text content between an element's open and close."""

from __future__ import annotations

from zemdomu.parsing.nodes import AttrState, Element
from zemdomu.rules.base import RuleContext, ScopedRule

INLINE_TAGS = frozenset({"strong", "em", "b", "i", "u", "small", "mark", "del", "ins"})


class _TextScopedRule(ScopedRule):
    """Any text or dynamic expression inside the element satisfies it."""

    def text(self, ctx: RuleContext) -> None:
        self.mark_all()


class RequireLinkText(_TextScopedRule):
    rule_id = "requireLinkText"
    description = "<a> must contain link text"
    scope_tags = frozenset({"a"})

    def close_unsatisfied(self, element: Element, ctx: RuleContext) -> None:
        self.report(ctx, element, "<a> tag missing link text")


class PreventEmptyInlineTags(_TextScopedRule):
    rule_id = "preventEmptyInlineTags"
    description = "Inline emphasis tags must not be empty"
    scope_tags = INLINE_TAGS

    def close_unsatisfied(self, element: Element, ctx: RuleContext) -> None:
        self.report(ctx, element, f"<{element.tag}> tag should not be empty")


class RequireButtonText(_TextScopedRule):
    rule_id = "requireButtonText"
    description = "<button> needs text content or a non-empty aria-label"
    scope_tags = frozenset({"button"})

    def close_unsatisfied(self, element: Element, ctx: RuleContext) -> None:
        if element.attr_state("aria-label") in (AttrState.PRESENT, AttrState.UNKNOWN):
            return
        self.report(ctx, element, "<button> missing accessible text")
