"""ZemDomu - semantic and accessibility linter for HTML and JSX/TSX markup.

Lints single files against a set of independent rules and, for component
projects, re-checks heading structure across component boundaries.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("zemdomu")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"  # Fallback for source checkouts

from zemdomu.config import LinterOptions, load_config
from zemdomu.exceptions import (
    ConfigurationError,
    MarkupParseError,
    ScanSupersededError,
    ZemDomuError,
)
from zemdomu.linter import FileKind, lint, lint_html, lint_jsx
from zemdomu.linting.models import RULE_IDS, LintReport, LintResult, RelatedLocation
from zemdomu.project import ProjectLinter

__all__ = [
    "RULE_IDS",
    "ConfigurationError",
    "FileKind",
    "LintReport",
    "LintResult",
    "LinterOptions",
    "MarkupParseError",
    "ProjectLinter",
    "RelatedLocation",
    "ScanSupersededError",
    "ZemDomuError",
    "__version__",
    "lint",
    "lint_html",
    "lint_jsx",
    "load_config",
]
