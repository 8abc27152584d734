"""Configuration file for pytest containing shared fixtures.

This module provides fixtures that can be used across multiple test files:
- write_files: writes a small project tree under tmp_path
- only_rules: builds LinterOptions with every other rule switched off
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from zemdomu.config import LinterOptions
from zemdomu.linting.models import RULE_IDS


@pytest.fixture
def write_files(tmp_path: Path) -> Callable[[dict[str, str]], dict[str, Path]]:
    """Fixture that writes ``{relative path: content}`` and returns resolved paths."""

    def _write(files: dict[str, str]) -> dict[str, Path]:
        written: dict[str, Path] = {}
        for name, content in files.items():
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            written[name] = path.resolve()
        return written

    return _write


@pytest.fixture
def only_rules() -> Callable[..., LinterOptions]:
    """Fixture that builds options enabling just the given rules."""

    def _only(*rules: str, **changes: object) -> LinterOptions:
        severities = {rule: ("warning" if rule in rules else "off") for rule in RULE_IDS}
        return LinterOptions(rules=severities, **changes)

    return _only


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment variables from leaking into configuration."""
    for name in (
        "ZEMDOMU_CONFIG_PATH",
        "ZEMDOMU_CROSS_COMPONENT",
        "ZEMDOMU_LOG_LEVEL",
        "ZEMDOMU_LOG_FORMAT",
        "ZEMDOMU_LOG_FILE",
        "ZEMDOMU_LOG_COLOR",
    ):
        monkeypatch.delenv(name, raising=False)
