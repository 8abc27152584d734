"""CLI command modules."""

from . import fix_cmd, lint_cmd, rules_cmd

__all__ = ["fix_cmd", "lint_cmd", "rules_cmd"]
