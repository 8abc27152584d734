"""Core models for zemdomu lint results."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Literal

Severity = Literal["error", "warning", "off"]

RULE_IDS: tuple[str, ...] = (
    "requireSectionHeading",
    "enforceHeadingOrder",
    "singleH1",
    "requireAltText",
    "requireLabelForFormControls",
    "enforceListNesting",
    "requireLinkText",
    "requireTableCaption",
    "preventEmptyInlineTags",
    "requireHrefOnAnchors",
    "requireButtonText",
    "requireIframeTitle",
    "requireHtmlLang",
    "requireImageInputAlt",
    "requireNavLinks",
    "uniqueIds",
)

# Synthetic rule id used when a file cannot be parsed at all
PARSE_ERROR_RULE = "parseError"


@dataclass(frozen=True, slots=True)
class RelatedLocation:
    """A position in another file that explains a result."""

    file_path: str
    line: int
    column: int
    message: str


@dataclass(frozen=True, slots=True)
class LintResult:
    """A single diagnostic, positioned with 0-based line and column."""

    line: int
    column: int
    message: str
    rule: str
    file_path: str | None = None
    severity: Severity | None = None
    related: tuple[RelatedLocation, ...] = ()

    def with_severity(self, severity: Severity) -> LintResult:
        """Return a copy carrying ``severity``."""
        return replace(self, severity=severity)

    @property
    def position(self) -> tuple[int, int]:
        """(line, column) pair, handy for sorting."""
        return (self.line, self.column)

    def dedupe_key(self) -> tuple[str, str, int, int]:
        """Identity used when merging result lists from several passes."""
        return (self.rule, self.message, self.line, self.column)

    def to_dict(self) -> dict[str, object]:
        """Plain-dict form used by JSON output."""
        data: dict[str, object] = {
            "line": self.line,
            "column": self.column,
            "message": self.message,
            "rule": self.rule,
            "severity": self.severity,
        }
        if self.file_path is not None:
            data["filePath"] = self.file_path
        if self.related:
            data["related"] = [
                {
                    "filePath": r.file_path,
                    "line": r.line,
                    "column": r.column,
                    "message": r.message,
                }
                for r in self.related
            ]
        return data


def sort_and_dedupe(results: list[LintResult]) -> list[LintResult]:
    """Drop exact duplicates and order results by position, then rule."""
    seen: set[tuple[str, str, int, int]] = set()
    unique: list[LintResult] = []
    for result in results:
        key = result.dedupe_key()
        if key in seen:
            continue
        seen.add(key)
        unique.append(result)
    unique.sort(key=lambda r: (r.line, r.column, r.rule, r.message))
    return unique


@dataclass(slots=True)
class LintReport:
    """Aggregated lint results for a batch, keyed by file path."""

    files: dict[str, list[LintResult]] = field(default_factory=dict)

    def add(self, file_path: str, results: list[LintResult]) -> None:
        """Merge ``results`` into the entry for ``file_path``."""
        merged = self.files.get(file_path, []) + list(results)
        self.files[file_path] = sort_and_dedupe(merged)

    @property
    def results(self) -> list[LintResult]:
        """All results across files."""
        return [r for results in self.files.values() for r in results]

    @property
    def errors(self) -> list[LintResult]:
        """Results with severity 'error'."""
        return [r for r in self.results if r.severity == "error"]

    @property
    def warnings(self) -> list[LintResult]:
        """Results with severity 'warning'."""
        return [r for r in self.results if r.severity == "warning"]

    @property
    def has_errors(self) -> bool:
        """True if any error-level result exists."""
        return any(r.severity == "error" for r in self.results)
