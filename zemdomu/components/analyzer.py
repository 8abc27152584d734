"""Cross-component analysis.

Re-derives the single-``<h1>`` and heading-order checks as if every
component were inlined where it is used, without building the inlined
tree. Entry points (files no other registered file uses) act as document
roots. Unresolved or unregistered components are leaves; a component that
is already being expanded on the current path contributes nothing.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from zemdomu.components.models import ComponentDefinition, HeadingInfo, Location
from zemdomu.components.registry import ComponentRegistry
from zemdomu.config.models import LinterOptions
from zemdomu.linting.models import LintResult, RelatedLocation, sort_and_dedupe
from zemdomu.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class UsageSite:
    """Where a component expansion was used: a file and a position in it."""

    file_path: str
    location: Location


@dataclass(frozen=True, slots=True)
class MergedHeading:
    """A heading in the merged sequence of one entry point.

    ``instance`` identifies the expansion that contributed it; ``site`` is
    the usage site of that expansion, or None for the entry file itself.
    """

    heading: HeadingInfo
    instance: int
    site: UsageSite | None


def find_entry_points(definitions: Mapping[str, ComponentDefinition]) -> list[ComponentDefinition]:
    """Definitions never used by another registered file, sorted by path."""
    used = {
        reference.path
        for definition in definitions.values()
        for reference in definition.uses_components
        if reference.path is not None and reference.path != definition.file_path
    }
    return [definitions[path] for path in sorted(definitions) if path not in used]


class CrossComponentAnalyzer:
    """Runs the cross-component checks over a registry snapshot.

    Examples
    --------
    Example usage::

        analyzer = CrossComponentAnalyzer(options)
        for result in analyzer.analyze(registry):
            print(result.file_path, result.line, result.message)
    """

    def __init__(self, options: LinterOptions | None = None) -> None:
        self.options = options or LinterOptions()

    def analyze(
        self,
        registry: ComponentRegistry | Mapping[str, ComponentDefinition],
        options: LinterOptions | None = None,
    ) -> list[LintResult]:
        """Return cross-component results, each attributed to a file."""
        options = options or self.options
        if not options.cross_component_analysis:
            return []
        definitions = registry.snapshot() if isinstance(registry, ComponentRegistry) else registry
        entries = find_entry_points(definitions)
        logger.debug(
            "Cross-component analysis over {count} components, {entries} entry points",
            count=len(definitions),
            entries=len(entries),
        )

        results: list[LintResult] = []
        for entry in entries:
            if options.is_enabled("singleH1"):
                results.extend(self._check_single_h1(entry, definitions, options))
            if options.is_enabled("enforceHeadingOrder"):
                results.extend(self._check_heading_order(entry, definitions, options))
        return sort_and_dedupe(
            [result.with_severity(options.severity_for(result.rule)) for result in results]
        )

    # ------------------------------------------------------------------
    # single <h1>
    # ------------------------------------------------------------------

    def _components_with_h1(
        self,
        entry: ComponentDefinition,
        definitions: Mapping[str, ComponentDefinition],
        max_depth: int,
    ) -> list[ComponentDefinition]:
        """Reachable components with a local <h1>, in depth-first usage order."""
        found: list[ComponentDefinition] = []
        visited: set[str] = set()

        def visit(definition: ComponentDefinition, depth: int) -> None:
            visited.add(definition.file_path)
            if definition.h1_headings:
                found.append(definition)
            if depth >= max_depth:
                return
            for reference in sorted(definition.uses_components, key=lambda r: r.source_location):
                child = definitions.get(reference.path) if reference.path else None
                if child is not None and child.file_path not in visited:
                    visit(child, depth + 1)

        visit(entry, 0)
        return found

    def _check_single_h1(
        self,
        entry: ComponentDefinition,
        definitions: Mapping[str, ComponentDefinition],
        options: LinterOptions,
    ) -> Iterator[LintResult]:
        holders = self._components_with_h1(entry, definitions, options.cross_component_depth)
        if len(holders) < 2:
            return
        first = holders[0].h1_headings[0]
        kept = RelatedLocation(first.file_path, first.line, first.column, "First <h1> is here")

        for component in holders[1:]:
            h1 = component.h1_headings[0]
            extra = RelatedLocation(h1.file_path, h1.line, h1.column, "Extra <h1> defined here")
            reference = entry.reference_to(component.file_path)
            if reference is not None:
                usage = reference.source_location
                yield LintResult(
                    line=usage.line,
                    column=usage.column,
                    message=(
                        f"Multiple <h1> tags: component '{component.name}' brings an extra "
                        "<h1>. Use a lower-level heading."
                    ),
                    rule="singleH1",
                    file_path=entry.file_path,
                    related=(extra, kept),
                )
            else:
                yield LintResult(
                    line=h1.line,
                    column=h1.column,
                    message="Multiple <h1> across components - consider using lower-level headings.",
                    rule="singleH1",
                    file_path=component.file_path,
                    related=(kept,),
                )

    # ------------------------------------------------------------------
    # heading order
    # ------------------------------------------------------------------

    def merged_headings(
        self,
        entry: ComponentDefinition,
        definitions: Mapping[str, ComponentDefinition],
        max_depth: int | None = None,
    ) -> list[MergedHeading]:
        """Headings of ``entry`` with child components expanded in place."""
        max_depth = self.options.cross_component_depth if max_depth is None else max_depth
        instances = itertools.count()
        expanding: set[str] = set()

        def expand(
            definition: ComponentDefinition, site: UsageSite | None, depth: int
        ) -> list[MergedHeading]:
            instance = next(instances)
            local = [
                MergedHeading(heading, instance, site)
                for heading in sorted(definition.headings, key=lambda h: h.location)
            ]
            if depth >= max_depth:
                return local

            expanding.add(definition.file_path)
            try:
                children: list[tuple[Location, list[MergedHeading]]] = []
                for reference in sorted(definition.uses_components, key=lambda r: r.source_location):
                    child = definitions.get(reference.path) if reference.path else None
                    if child is None or child.file_path in expanding:
                        continue
                    usage = UsageSite(definition.file_path, reference.source_location)
                    children.append((usage.location, expand(child, usage, depth + 1)))
            finally:
                expanding.discard(definition.file_path)

            merged: list[MergedHeading] = []
            local_index = 0
            for usage_location, contributed in children:
                while (
                    local_index < len(local)
                    and local[local_index].heading.location <= usage_location
                ):
                    merged.append(local[local_index])
                    local_index += 1
                merged.extend(contributed)
            merged.extend(local[local_index:])
            return merged

        return expand(entry, None, 0)

    def _check_heading_order(
        self,
        entry: ComponentDefinition,
        definitions: Mapping[str, ComponentDefinition],
        options: LinterOptions,
    ) -> Iterator[LintResult]:
        sequence = self.merged_headings(entry, definitions, options.cross_component_depth)
        for previous, current in itertools.pairwise(sequence):
            # Skips within the entry file itself belong to the single-file rule
            if previous.instance == current.instance and current.site is None:
                continue
            level, before = current.heading.level, previous.heading.level
            if level <= before + 1:
                continue

            heading = current.heading
            related = (
                RelatedLocation(
                    heading.file_path, heading.line, heading.column, f"<h{level}> rendered here"
                ),
                RelatedLocation(
                    previous.heading.file_path,
                    previous.heading.line,
                    previous.heading.column,
                    f"Previous <h{before}> rendered here",
                ),
            )
            if current.site is not None:
                file_path, location = current.site.file_path, current.site.location
            else:
                file_path, location = heading.file_path, heading.location
            yield LintResult(
                line=location.line,
                column=location.column,
                message=f"Cross-component heading level skipped: <h{level}> after <h{before}>",
                rule="enforceHeadingOrder",
                file_path=file_path,
                related=related,
            )
