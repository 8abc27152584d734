"""Quick fixes for lint results.

A fix is a title plus text edits against the linted source. Fixes only
insert placeholders (an empty ``alt=""`` and so on) or restructure tags;
they never invent content.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from zemdomu.linting.models import LintResult
from zemdomu.parsing.nodes import SourceText

_ATTRIBUTE_FIXES: dict[str, tuple[str, str]] = {
    "requireAltText": ("Add empty alt attribute", "alt"),
    "requireImageInputAlt": ("Add empty alt attribute", "alt"),
    "requireHrefOnAnchors": ("Add empty href attribute", "href"),
    "requireIframeTitle": ("Add empty title attribute", "title"),
    "requireHtmlLang": ("Add empty lang attribute", "lang"),
    "requireButtonText": ("Add empty aria-label attribute", "aria-label"),
    "requireLabelForFormControls": ("Add empty aria-label attribute", "aria-label"),
}

_HEADING_SKIP_RE = re.compile(r"^Heading level skipped: <h(\d)> after <h(\d)>")


@dataclass(frozen=True, slots=True)
class TextEdit:
    """Replace the text between two 0-based positions with ``new_text``."""

    line: int
    column: int
    end_line: int
    end_column: int
    new_text: str

    @classmethod
    def insert(cls, source: SourceText, offset: int, text: str) -> TextEdit:
        line, column = source.position(offset)
        return cls(line, column, line, column, text)

    @classmethod
    def replace(cls, source: SourceText, start: int, end: int, text: str) -> TextEdit:
        line, column = source.position(start)
        end_line, end_column = source.position(end)
        return cls(line, column, end_line, end_column, text)


@dataclass(frozen=True, slots=True)
class QuickFix:
    """A titled group of edits resolving one result."""

    title: str
    rule: str
    edits: tuple[TextEdit, ...]


def suggest_fixes(result: LintResult, text: str) -> list[QuickFix]:
    """Fixes available for ``result`` in ``text`` (possibly none).

    Cross-component results point at usage sites rather than at the
    offending tag, so they get no fixes.

    Examples
    --------
    >>> from zemdomu.linter import lint_html
    >>> result = lint_html('<img src="a.png">')[0]
    >>> [fix.title for fix in suggest_fixes(result, '<img src="a.png">')]
    ['Add empty alt attribute']
    """
    if result.file_path is not None or result.message.startswith("Cross-component"):
        return []
    source = SourceText(text)
    if result.line >= source.line_count:
        return []
    start = source.offset(result.line, result.column)
    if not text.startswith("<", start):
        return []

    if result.rule in _ATTRIBUTE_FIXES:
        fix = _attribute_fix(result, source, start)
    elif result.rule == "requireTableCaption":
        fix = _caption_fix(result, source, start)
    elif result.rule == "enforceHeadingOrder":
        fix = _heading_fix(result, source, start)
    elif result.rule == "enforceListNesting":
        fix = _list_fix(result, source, start)
    else:
        fix = None
    return [fix] if fix is not None else []


def apply_edits(text: str, edits: list[TextEdit]) -> str:
    """Apply non-overlapping ``edits`` to ``text``, last position first."""
    source = SourceText(text)
    ordered = sorted(edits, key=lambda e: (e.line, e.column), reverse=True)
    for edit in ordered:
        start = source.offset(edit.line, edit.column)
        end = source.offset(edit.end_line, edit.end_column)
        text = text[:start] + edit.new_text + text[end:]
    return text


def open_tag_end(text: str, start: int) -> int | None:
    """Index of the ``>`` closing the tag that opens at ``start``.

    Quoted strings and JSX ``{...}`` expressions are skipped.
    """
    quote: str | None = None
    depth = 0
    for index in range(start + 1, len(text)):
        char = text[index]
        if quote is not None:
            if char == quote:
                quote = None
        elif char in ("'", '"', "`"):
            quote = char
        elif char == "{":
            depth += 1
        elif char == "}":
            depth = max(depth - 1, 0)
        elif char == ">" and depth == 0:
            return index
    return None


def _tag_slice(text: str, start: int) -> tuple[str, int] | None:
    end = open_tag_end(text, start)
    if end is None:
        return None
    return text[start : end + 1], end


def _attribute_fix(result: LintResult, source: SourceText, start: int) -> QuickFix | None:
    title, attribute = _ATTRIBUTE_FIXES[result.rule]
    tag = _tag_slice(source.text, start)
    if tag is None:
        return None
    tag_text, end = tag
    if re.search(rf"\s{re.escape(attribute)}(\s*=|[\s/>])", tag_text):
        return None
    insert_at = end - 1 if source.text[end - 1] == "/" else end
    if source.text[insert_at - 1] == " ":
        insert_at -= 1
    edit = TextEdit.insert(source, insert_at, f' {attribute}=""')
    return QuickFix(title=title, rule=result.rule, edits=(edit,))


def _caption_fix(result: LintResult, source: SourceText, start: int) -> QuickFix | None:
    tag = _tag_slice(source.text, start)
    if tag is None or tag[0].endswith("/>"):
        return None
    edit = TextEdit.insert(source, tag[1] + 1, "\n  <caption></caption>")
    return QuickFix(title="Add empty <caption>", rule=result.rule, edits=(edit,))


def _heading_fix(result: LintResult, source: SourceText, start: int) -> QuickFix | None:
    match = _HEADING_SKIP_RE.match(result.message)
    if match is None:
        return None
    level, previous = int(match.group(1)), int(match.group(2))
    target = previous + 1
    tag = _tag_slice(source.text, start)
    if tag is None or not source.text.startswith(f"<h{level}", start):
        return None

    edits = [TextEdit.replace(source, start + 1, start + 3, f"h{target}")]
    if not tag[0].endswith("/>"):
        close = re.compile(rf"</\s*h{level}\s*>").search(source.text, tag[1] + 1)
        if close is None:
            return None
        name_start = source.text.index(f"h{level}", close.start())
        edits.append(TextEdit.replace(source, name_start, name_start + 2, f"h{target}"))
    return QuickFix(title=f"Change to <h{target}>", rule=result.rule, edits=tuple(edits))


def _list_fix(result: LintResult, source: SourceText, start: int) -> QuickFix | None:
    tag = _tag_slice(source.text, start)
    if tag is None:
        return None
    if tag[0].endswith("/>"):
        end = tag[1] + 1
    else:
        close = _matching_close(source.text, tag[1] + 1, "li")
        if close is None:
            return None
        end = close
    edits = (
        TextEdit.insert(source, start, "<ul>"),
        TextEdit.insert(source, end, "</ul>"),
    )
    return QuickFix(title="Wrap in <ul>", rule=result.rule, edits=edits)


def _matching_close(text: str, start: int, tag: str) -> int | None:
    """End index of the close tag balancing an already opened ``tag``."""
    depth = 1
    for match in re.finditer(rf"<(/?)\s*{tag}\b[^>]*?(/?)>", text[start:]):
        if match.group(1):
            depth -= 1
            if depth == 0:
                return start + match.end()
        elif not match.group(2):
            depth += 1
    return None
