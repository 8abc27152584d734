"""Inline suppression directives.

Recognised comment bodies (HTML ``<!-- ... -->`` or JSX ``{/* ... */}``):

- ``zemdomu-disable-next``: suppress results on the lines of the next
  element's opening position (and the comment's own line).
- ``zemdomu-disable`` ... ``zemdomu-enable``: suppress every line in the
  bracketed range; an unclosed ``zemdomu-disable`` runs to end of file.

Rules never see directives; suppression is applied to the collected
results by start line.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from collections.abc import Iterable
from dataclasses import dataclass

from zemdomu.linting.models import LintResult
from zemdomu.parsing.nodes import Document

_DIRECTIVE_RE = re.compile(r"zemdomu-(disable-next|disable|enable)\b")


@dataclass(frozen=True, slots=True)
class LineRange:
    """Inclusive 0-based line range."""

    start: int
    end: int

    def __contains__(self, line: object) -> bool:
        return isinstance(line, int) and self.start <= line <= self.end


def disabled_ranges(document: Document) -> list[LineRange]:
    """Collect disabled line ranges from the comments of ``document``."""
    if not document.comments:
        return []

    source = document.source
    element_offsets = sorted(element.offset for element in document.iter_elements())
    last_line = source.line_count - 1
    ranges: list[LineRange] = []
    open_start: int | None = None

    for comment in sorted(document.comments, key=lambda c: c.offset):
        match = _DIRECTIVE_RE.search(comment.text)
        if match is None:
            continue
        kind = match.group(1)
        start_line, _ = source.position(comment.offset)
        end_line, _ = source.position(max(comment.end - 1, comment.offset))

        if kind == "disable-next":
            index = bisect_right(element_offsets, comment.end - 1)
            if index < len(element_offsets):
                target_line, _ = source.position(element_offsets[index])
            else:
                target_line = end_line + 1
            ranges.append(LineRange(start_line, max(target_line, end_line)))
        elif kind == "disable":
            if open_start is None:
                open_start = start_line
        elif open_start is not None:
            ranges.append(LineRange(open_start, end_line))
            open_start = None

    if open_start is not None:
        ranges.append(LineRange(open_start, last_line))
    return ranges


def filter_disabled(results: Iterable[LintResult], ranges: list[LineRange]) -> list[LintResult]:
    """Drop results whose start line falls in any of ``ranges``."""
    if not ranges:
        return list(results)
    return [r for r in results if not any(r.line in span for span in ranges)]
