"""Built-in markup rules, keyed by rule id."""

from zemdomu.rules.attributes import (
    RequireAltText,
    RequireHrefOnAnchors,
    RequireIframeTitle,
    RequireImageInputAlt,
    RequireLabelForFormControls,
    UniqueIds,
)
from zemdomu.rules.base import BaseRule, RuleContext, ScopedRule
from zemdomu.rules.content import PreventEmptyInlineTags, RequireButtonText, RequireLinkText
from zemdomu.rules.structure import (
    EnforceHeadingOrder,
    EnforceListNesting,
    RequireHtmlLang,
    RequireNavLinks,
    RequireSectionHeading,
    RequireTableCaption,
    SingleH1,
    heading_skip_message,
)

RULES: dict[str, type[BaseRule]] = {
    rule.rule_id: rule
    for rule in (
        RequireSectionHeading,
        EnforceHeadingOrder,
        SingleH1,
        RequireAltText,
        RequireLabelForFormControls,
        EnforceListNesting,
        RequireLinkText,
        RequireTableCaption,
        PreventEmptyInlineTags,
        RequireHrefOnAnchors,
        RequireButtonText,
        RequireIframeTitle,
        RequireHtmlLang,
        RequireImageInputAlt,
        RequireNavLinks,
        UniqueIds,
    )
}

__all__ = [
    "RULES",
    "BaseRule",
    "RuleContext",
    "ScopedRule",
    "heading_skip_message",
]
