"""Project-level linting: batches of files plus cross-component effects.

A ``ProjectLinter`` owns one component registry and one path resolver.
Each batch lints its files concurrently, publishes the component
definitions of JSX/TSX files, then runs cross-component analysis once over
the whole registry. Results come back keyed by file path and may include
files outside the batch when a cross-component result is attributed there.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path

from zemdomu.components import (
    ComponentDefinition,
    ComponentGraphBuilder,
    ComponentPathResolver,
    ComponentRegistry,
    CrossComponentAnalyzer,
)
from zemdomu.components.graph import unparsable_definition
from zemdomu.config.models import LinterOptions
from zemdomu.exceptions import MarkupParseError, ScanSupersededError
from zemdomu.linter import FileKind, lint_document, parse_document, parse_error_result
from zemdomu.linting.models import PARSE_ERROR_RULE, LintReport, LintResult
from zemdomu.logging import get_logger
from zemdomu.timing import PhaseTimings, Timer

logger = get_logger(__name__)

WORKSPACE_SUFFIXES = frozenset({".html", ".htm", ".jsx", ".tsx"})


def discover_files(root: Path, exclude: Iterable[str]) -> list[Path]:
    """Lintable files under ``root``, skipping paths matching ``exclude``."""
    patterns = tuple(exclude)
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            d for d in dirnames if not _excluded(Path(dirpath, d, "_").as_posix(), patterns)
        )
        for filename in sorted(filenames):
            path = Path(dirpath, filename)
            if path.suffix.lower() in WORKSPACE_SUFFIXES and not _excluded(
                path.as_posix(), patterns
            ):
                found.append(path)
    return found


def _excluded(posix_path: str, patterns: tuple[str, ...]) -> bool:
    return any(fnmatch(posix_path, pattern) for pattern in patterns)


@dataclass(slots=True)
class FileOutcome:
    """What linting one file produced before anything is published."""

    path: str
    results: list[LintResult]
    definition: ComponentDefinition | None = None
    removed: bool = False
    timings: PhaseTimings = field(default_factory=PhaseTimings)


class ProjectLinter:
    """Lints files and keeps the component registry for one session.

    Parameters
    ----------
    options : LinterOptions | None
        Rule severities and cross-component settings
    registry : ComponentRegistry | None
        Registry to populate; a fresh one is created when omitted

    Examples
    --------
    Example usage::

        linter = ProjectLinter(LinterOptions(root_dir=Path("site")))
        results = linter.lint_files(["site/Page.tsx", "site/Button.tsx"])
        for path, found in results.items():
            print(path, [r.rule for r in found])
    """

    def __init__(
        self,
        options: LinterOptions | None = None,
        registry: ComponentRegistry | None = None,
    ) -> None:
        self.options = options or LinterOptions()
        self.root_dir = (self.options.root_dir or Path.cwd()).resolve()
        self.registry = registry if registry is not None else ComponentRegistry()
        self.resolver = ComponentPathResolver(root_dir=self.root_dir, exclude=self.options.exclude)
        self.graph = ComponentGraphBuilder(self.registry, self.resolver, self.options)
        self.analyzer = CrossComponentAnalyzer(self.options)
        self.metrics: dict[str, dict[str, float]] = {}

        self._lock = threading.Lock()
        self._generation = 0
        self._local_results: dict[str, list[LintResult]] = {}
        self._cross_files: set[str] = set()

    @property
    def generation(self) -> int:
        """Number of the most recently started scan."""
        with self._lock:
            return self._generation

    def clear(self) -> None:
        """Forget every registered component, cached result and resolution."""
        with self._lock:
            self.registry.clear()
            self.resolver.clear()
            self._local_results.clear()
            self._cross_files.clear()
            self.metrics.clear()

    def lint_file(self, path: str | Path, text: str | None = None) -> dict[str, list[LintResult]]:
        """Lint one file, using ``text`` instead of the file's content when given."""
        texts = {str(path): text} if text is not None else None
        return self.lint_files([path], texts=texts)

    def lint_workspace(self, root: str | Path | None = None) -> dict[str, list[LintResult]]:
        """Discover every lintable file under ``root`` and lint them as one batch."""
        base = Path(root).resolve() if root is not None else self.root_dir
        files = discover_files(base, self.options.exclude)
        logger.info("Discovered {count} files under {root}", count=len(files), root=base)
        return self.lint_files(files)

    def lint_files(
        self,
        paths: Iterable[str | Path],
        texts: Mapping[str, str] | None = None,
    ) -> dict[str, list[LintResult]]:
        """Lint a batch of files and merge in cross-component results.

        Raises
        ------
        ScanSupersededError
            If a newer scan started before this one could publish its results
        """
        generation = self._start_scan()
        overrides = {_normalize(p): text for p, text in (texts or {}).items()}
        batch = list(dict.fromkeys(_normalize(p) for p in paths))
        batch_timer = Timer()

        with ThreadPoolExecutor(max_workers=self.options.max_workers) as pool:
            outcomes = [
                outcome
                for outcome in pool.map(
                    lambda p: self._lint_one(p, overrides.get(p), generation), batch
                )
                if outcome is not None
            ]

        report = self._publish(outcomes, generation)
        logger.info(
            "Linted {count} files in {ms:.1f}ms ({results} results)",
            count=len(outcomes),
            ms=batch_timer.duration_ms,
            results=len(report.results),
        )
        return report.files

    def _start_scan(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def _ensure_current(self, generation: int) -> None:
        """Raise if a newer scan started; caller holds the lock."""
        if generation != self._generation:
            logger.info(
                "Discarding scan {generation}, superseded by {current}",
                generation=generation,
                current=self._generation,
            )
            raise ScanSupersededError(generation, self._generation)

    def _lint_one(self, path: str, text: str | None, generation: int) -> FileOutcome | None:
        kind = FileKind.from_path(path)
        if kind is None:
            logger.debug("Skipping unsupported file {path}", path=path)
            return None

        outcome = FileOutcome(path=path, results=[])
        with outcome.timings.phase("total"):
            if text is None:
                with outcome.timings.phase("read"):
                    try:
                        text = Path(path).read_text(encoding="utf-8")
                    except FileNotFoundError:
                        logger.debug("File vanished before linting: {path}", path=path)
                        outcome.removed = True
                        return outcome
                    except (OSError, UnicodeDecodeError) as e:
                        logger.warning("Could not read {path}: {error}", path=path, error=e)
                        outcome.results = [_read_error_result(e)]
                        return outcome

            try:
                with outcome.timings.phase("lint"):
                    document = parse_document(text, kind)
                    outcome.results = lint_document(document, self.options)
                if kind.is_component:
                    with outcome.timings.phase("graph"):
                        outcome.definition = self.graph.build_definition(
                            path, document, outcome.results
                        )
            except MarkupParseError as e:
                logger.warning("Could not parse {path}: {error}", path=path, error=e)
                outcome.results = [parse_error_result(e)]
                if kind.is_component:
                    outcome.definition = unparsable_definition(path, e)
                return outcome
            except Exception as e:
                logger.opt(exception=e).error(
                    "Linting {path} failed: {error}", path=path, error=e
                )
                outcome.results = [_failure_result(e)]
                if kind.is_component:
                    outcome.definition = ComponentDefinition.for_path(path)
                return outcome
        logger.debug("Timings for {path}: {timings}", path=path, timings=outcome.timings.as_dict())
        return outcome

    def _publish(self, outcomes: list[FileOutcome], generation: int) -> LintReport:
        """Write the batch into shared state and build the merged report."""
        with self._lock:
            self._ensure_current(generation)
            for outcome in outcomes:
                self.metrics[outcome.path] = outcome.timings.as_dict()
                if outcome.removed:
                    self.registry.remove(outcome.path)
                    self._local_results.pop(outcome.path, None)
                    continue
                self._local_results[outcome.path] = outcome.results
                if outcome.definition is not None:
                    self.registry.replace(outcome.definition, generation)

            timings = PhaseTimings()
            with timings.phase("analyze"):
                cross = self.analyzer.analyze(self.registry, self.options)
            self.metrics["crossComponent"] = timings.as_dict()

            report = LintReport()
            for outcome in outcomes:
                report.add(outcome.path, outcome.results)

            by_file: dict[str, list[LintResult]] = {}
            for result in cross:
                if result.file_path is not None:
                    by_file.setdefault(result.file_path, []).append(result)
            for path in by_file.keys() | self._cross_files:
                if path not in report.files:
                    report.add(path, self._local_results.get(path, []))
                report.add(path, by_file.get(path, []))
            self._cross_files = set(by_file)
        return report


def _normalize(path: str | Path) -> str:
    return str(Path(path).resolve())


def _read_error_result(error: Exception) -> LintResult:
    return LintResult(
        line=0,
        column=0,
        message=f"Could not read file: {error}",
        rule=PARSE_ERROR_RULE,
        severity="error",
    )


def _failure_result(error: Exception) -> LintResult:
    return LintResult(
        line=0,
        column=0,
        message=f"Could not lint file: {error}",
        rule=PARSE_ERROR_RULE,
        severity="error",
    )
