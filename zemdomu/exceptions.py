"""Exception hierarchy for zemdomu.

All zemdomu exceptions inherit from ZemDomuError. None of them is meant to
escape a lint run: the single-file linter converts parse failures into a
``parseError`` result, and graph analysis treats unknown components as leaves.
"""

from __future__ import annotations

# ============================================================================
# Base Exception
# ============================================================================


class ZemDomuError(Exception):
    """Base exception for all zemdomu errors.

    Catch this to handle every zemdomu-specific failure.
    """

    pass


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(ZemDomuError):
    """Raised when configuration is invalid or missing.

    Examples
    --------
    Example usage::

        raise ConfigurationError("zemdomu.yaml", "spec must be a mapping")
    """

    def __init__(self, component: str, reason: str) -> None:
        """Initialize configuration error.

        Args
        ----
            component: Name of the configuration source or section
            reason: Explanation of what's wrong
        """
        super().__init__(f"Configuration error in '{component}': {reason}")
        self.component = component
        self.reason = reason


# ============================================================================
# Parsing Errors
# ============================================================================


class MarkupParseError(ZemDomuError):
    """Raised by a parser backend when markup cannot be turned into a tree.

    The single-file linter catches it and reports one ``parseError`` result
    at position (0, 0) instead.

    Examples
    --------
    Example usage::

        raise MarkupParseError("Unexpected token", line=3, column=7)
    """

    def __init__(self, reason: str, line: int | None = None, column: int | None = None) -> None:
        """Initialize parse error.

        Args
        ----
            reason: What the parser could not handle
            line: 0-based line of the first problem (optional)
            column: 0-based column of the first problem (optional)
        """
        if line is not None:
            msg = f"{reason} ({line + 1}:{(column or 0) + 1})"
        else:
            msg = reason
        super().__init__(msg)
        self.reason = reason
        self.line = line
        self.column = column


# ============================================================================
# Project Scan Errors
# ============================================================================


class ScanSupersededError(ZemDomuError):
    """Raised when a batch scan was overtaken by a newer one.

    The stale scan's results are discarded; nothing it computed was written
    to shared state after the newer scan began.
    """

    def __init__(self, generation: int, current: int) -> None:
        """Initialize superseded-scan error.

        Args
        ----
            generation: Generation number of the stale scan
            current: Generation number of the newest scan
        """
        super().__init__(f"Scan {generation} superseded by scan {current}")
        self.generation = generation
        self.current = current


__all__ = [
    "ZemDomuError",
    "ConfigurationError",
    "MarkupParseError",
    "ScanSupersededError",
]
