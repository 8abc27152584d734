"""Configuration data models for zemdomu."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from zemdomu.linting.models import RULE_IDS, Severity
from zemdomu.logging import get_logger

logger = get_logger(__name__)

DEFAULT_SEVERITY: Severity = "warning"

DEFAULT_EXCLUDES: tuple[str, ...] = (
    "**/node_modules/**",
    "**/dist/**",
    "**/out/**",
    "**/.git/**",
)

_SEVERITY_ALIASES: dict[str, Severity] = {
    "off": "off",
    "false": "off",
    "disabled": "off",
    "warn": "warning",
    "warning": "warning",
    "true": "warning",
    "on": "warning",
    "error": "error",
}


class LinterOptions(BaseModel):
    """Options consumed by the single-file linter and the project linter.

    Attributes
    ----------
    rules : dict[str, Severity]
        Per-rule severity. Rules not listed run at ``warning``.
    cross_component_analysis : bool
        Run the cross-component heading checks after each batch.
    cross_component_depth : int
        Maximum component nesting followed from an entry point.
    root_dir : Path | None
        Root used to find tsconfig/jsconfig path aliases and for
        workspace-wide filename search.
    max_workers : int
        Thread pool size for batch linting.
    exclude : tuple[str, ...]
        Glob patterns skipped by workspace discovery.

    Examples
    --------
    >>> opts = LinterOptions(rules={"singleH1": "off", "uniqueIds": True})
    >>> opts.severity_for("singleH1")
    'off'
    >>> opts.severity_for("uniqueIds")
    'warning'
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    rules: dict[str, Severity] = Field(default_factory=dict)
    cross_component_analysis: bool = Field(default=True, alias="crossComponentAnalysis")
    cross_component_depth: int = Field(default=50, ge=1, alias="crossComponentDepth")
    root_dir: Path | None = Field(default=None, alias="rootDir")
    max_workers: int = Field(default=4, ge=1, alias="maxWorkers")
    exclude: tuple[str, ...] = DEFAULT_EXCLUDES

    @field_validator("rules", mode="before")
    @classmethod
    def _normalize_rules(cls, value: Any) -> dict[str, Severity]:
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError("rules must be a mapping of rule id to severity")
        normalized: dict[str, Severity] = {}
        for name, raw in value.items():
            if name not in RULE_IDS:
                logger.debug("Ignoring unknown rule {rule}", rule=name)
                continue
            key = str(raw).strip().lower()
            severity = _SEVERITY_ALIASES.get(key)
            if severity is None:
                logger.debug(
                    "Ignoring invalid severity {value!r} for {rule}", value=raw, rule=name
                )
                continue
            normalized[name] = severity
        return normalized

    def severity_for(self, rule: str) -> Severity:
        """Effective severity of ``rule``."""
        return self.rules.get(rule, DEFAULT_SEVERITY)

    def is_enabled(self, rule: str) -> bool:
        """True unless ``rule`` is configured ``off``."""
        return self.severity_for(rule) != "off"

    def enabled_rules(self) -> tuple[str, ...]:
        """Rule ids that must run, in registry order."""
        return tuple(rule for rule in RULE_IDS if self.is_enabled(rule))

    def with_overrides(self, **changes: Any) -> LinterOptions:
        """Return a copy with ``changes`` applied and validated."""
        data = self.model_dump()
        data.update(changes)
        return LinterOptions.model_validate(data)


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging configuration for zemdomu.

    Examples
    --------
    TOML configuration:

    ```toml
    [tool.zemdomu.logging]
    level = "DEBUG"
    format = "rich"
    ```
    """

    level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "structured", "rich"] = "structured"
    output_file: str | None = None
    use_color: bool = True


@dataclass(slots=True)
class ZemDomuConfig:
    """Complete zemdomu configuration.

    Examples
    --------
    TOML configuration in pyproject.toml:

    ```toml
    [tool.zemdomu]
    cross_component_analysis = true
    cross_component_depth = 20

    [tool.zemdomu.rules]
    singleH1 = "error"
    requireNavLinks = "off"
    ```
    """

    linter: LinterOptions = field(default_factory=LinterOptions)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    source: Path | None = None
