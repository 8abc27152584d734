"""Single-file linter.

Parses one file with the backend its kind calls for, runs every enabled rule
over the tree, drops results inside disabled directive ranges and stamps the
configured severity on what remains. Malformed input never raises: a parse
failure becomes one ``parseError`` result at (0, 0).
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from zemdomu.config.models import LinterOptions
from zemdomu.engine import RuleEngine
from zemdomu.exceptions import MarkupParseError
from zemdomu.linting.models import PARSE_ERROR_RULE, LintResult, sort_and_dedupe
from zemdomu.logging import get_logger
from zemdomu.parsing import html, jsx
from zemdomu.parsing.directives import disabled_ranges, filter_disabled
from zemdomu.parsing.nodes import Document

logger = get_logger(__name__)


class FileKind(StrEnum):
    """Markup flavour of a file, which decides the parser backend."""

    HTML = "html"
    JSX = "jsx"
    TSX = "tsx"

    @classmethod
    def from_path(cls, path: str | Path) -> FileKind | None:
        """Kind for ``path`` by extension, or None for unsupported files.

        >>> FileKind.from_path("src/App.tsx")
        <FileKind.TSX: 'tsx'>
        """
        return _EXTENSIONS.get(Path(path).suffix.lower())

    @property
    def is_component(self) -> bool:
        """True for kinds that take part in the component graph."""
        return self is not FileKind.HTML


_EXTENSIONS: dict[str, FileKind] = {
    ".html": FileKind.HTML,
    ".htm": FileKind.HTML,
    ".jsx": FileKind.JSX,
    ".js": FileKind.JSX,
    ".tsx": FileKind.TSX,
}


def parse_document(content: str, file_kind: FileKind) -> Document:
    """Parse ``content`` with the backend for ``file_kind``.

    Raises
    ------
    MarkupParseError
        If the JSX/TSX backend rejects the source
    """
    if file_kind is FileKind.HTML:
        return html.parse(content)
    return jsx.parse(content, dialect="tsx" if file_kind is FileKind.TSX else "jsx")


def parse_error_result(error: MarkupParseError) -> LintResult:
    """The single result reported for a file that could not be parsed."""
    return LintResult(
        line=0,
        column=0,
        message=f"Parse error: {error}",
        rule=PARSE_ERROR_RULE,
        severity="error",
    )


def lint_document(document: Document, options: LinterOptions) -> list[LintResult]:
    """Run the enabled rules over an already parsed document."""
    raw = RuleEngine(options.enabled_rules()).run(document)
    kept = filter_disabled(raw, disabled_ranges(document))
    return sort_and_dedupe([r.with_severity(options.severity_for(r.rule)) for r in kept])


def lint(
    content: str,
    file_kind: FileKind | str = FileKind.HTML,
    options: LinterOptions | None = None,
) -> list[LintResult]:
    """Lint one file's text and return positioned results.

    Parameters
    ----------
    content : str
        Full source text
    file_kind : FileKind | str
        ``html``, ``jsx`` or ``tsx``
    options : LinterOptions | None
        Rule severities; defaults enable every rule at ``warning``

    Examples
    --------
    >>> [r.rule for r in lint('<img src="a.png">')]
    ['requireAltText']
    """
    options = options or LinterOptions()
    kind = FileKind(file_kind)
    try:
        document = parse_document(content, kind)
    except MarkupParseError as e:
        logger.warning("Could not parse {kind} source: {error}", kind=kind.value, error=e)
        return [parse_error_result(e)]
    return lint_document(document, options)


def lint_html(content: str, options: LinterOptions | None = None) -> list[LintResult]:
    """Lint HTML text."""
    return lint(content, FileKind.HTML, options)


def lint_jsx(
    content: str, options: LinterOptions | None = None, typescript: bool = True
) -> list[LintResult]:
    """Lint JSX text; ``typescript`` selects the TSX grammar."""
    return lint(content, FileKind.TSX if typescript else FileKind.JSX, options)
