"""Rules that check attributes present on an element's opening tag."""

from __future__ import annotations

from zemdomu.parsing.nodes import DYNAMIC, AttrState, Element
from zemdomu.rules.base import BaseRule, RuleContext

FORM_CONTROLS = frozenset({"input", "select", "textarea"})

_NOT_VERIFIABLE = (AttrState.MISSING, AttrState.EMPTY)


class RequireAltText(BaseRule):
    rule_id = "requireAltText"
    description = "<img> must have non-empty alt text"

    def enter(self, element: Element, ctx: RuleContext) -> None:
        if element.tag == "img" and element.attr_state("alt") in _NOT_VERIFIABLE:
            self.report(ctx, element, "<img> tag missing or empty alt attribute")


class RequireLabelForFormControls(BaseRule):
    """Form controls need an aria-label or a ``<label for>`` matching their id.

    Labels are matched against every label in the file once the walk is
    complete, so a label written after its control still counts.
    """

    rule_id = "requireLabelForFormControls"
    description = "Form controls need an aria-label or a matching <label for>"

    def __init__(self) -> None:
        self.label_targets: set[str] = set()
        self.dynamic_label = False
        self.pending: list[tuple[Element, str]] = []

    def enter(self, element: Element, ctx: RuleContext) -> None:
        if element.tag == "label":
            self._register_label(element)
            return
        if element.tag not in FORM_CONTROLS:
            return
        if element.attr_state("aria-label") in (AttrState.PRESENT, AttrState.UNKNOWN):
            return

        id_state = element.attr_state("id")
        if id_state in _NOT_VERIFIABLE:
            self.report(ctx, element, "Form control missing id or aria-label")
        elif id_state is AttrState.PRESENT:
            self.pending.append((element, element.literal("id") or ""))

    def _register_label(self, element: Element) -> None:
        for name in ("for", "htmlFor"):
            value = element.attr(name)
            if value is DYNAMIC:
                self.dynamic_label = True
            elif value:
                self.label_targets.add(value.strip())

    def finish(self, ctx: RuleContext) -> None:
        if self.dynamic_label:
            return
        for element, control_id in self.pending:
            if control_id.strip() not in self.label_targets:
                self.report(
                    ctx,
                    element,
                    f'Form control with id="{control_id}" missing <label for="{control_id}">',
                )


class RequireHrefOnAnchors(BaseRule):
    rule_id = "requireHrefOnAnchors"
    description = "<a> must have a non-empty href"

    def enter(self, element: Element, ctx: RuleContext) -> None:
        if element.tag == "a" and element.attr_state("href") in _NOT_VERIFIABLE:
            self.report(ctx, element, "<a> tag missing non-empty href attribute")


class RequireIframeTitle(BaseRule):
    rule_id = "requireIframeTitle"
    description = "<iframe> must have a non-empty title"

    def enter(self, element: Element, ctx: RuleContext) -> None:
        if element.tag != "iframe":
            return
        state = element.attr_state("title")
        if state is AttrState.MISSING:
            self.report(ctx, element, "<iframe> missing title attribute")
        elif state is AttrState.EMPTY:
            self.report(ctx, element, "<iframe> title attribute is empty")


class RequireImageInputAlt(BaseRule):
    rule_id = "requireImageInputAlt"
    description = '<input type="image"> must have non-empty alt text'

    def enter(self, element: Element, ctx: RuleContext) -> None:
        if element.tag != "input":
            return
        input_type = element.literal("type")
        if input_type is None or input_type.strip().lower() != "image":
            return
        state = element.attr_state("alt")
        if state is AttrState.MISSING:
            self.report(ctx, element, '<input type="image"> missing alt attribute')
        elif state is AttrState.EMPTY:
            self.report(ctx, element, '<input type="image"> alt attribute is empty')


class UniqueIds(BaseRule):
    rule_id = "uniqueIds"
    description = "id values must be unique within a file"

    def __init__(self) -> None:
        self.seen: set[str] = set()

    def enter(self, element: Element, ctx: RuleContext) -> None:
        if element.is_component:
            return
        value = element.literal("id")
        if value is None or not value.strip():
            return
        if value in self.seen:
            self.report(ctx, element, f'Duplicate id "{value}"')
        else:
            self.seen.add(value)
