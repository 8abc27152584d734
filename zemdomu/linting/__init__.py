"""Lint result models."""

from zemdomu.linting.models import (
    PARSE_ERROR_RULE,
    RULE_IDS,
    LintReport,
    LintResult,
    RelatedLocation,
    Severity,
    sort_and_dedupe,
)

__all__ = [
    "PARSE_ERROR_RULE",
    "RULE_IDS",
    "LintReport",
    "LintResult",
    "RelatedLocation",
    "Severity",
    "sort_and_dedupe",
]
