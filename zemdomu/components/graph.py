"""Component graph builder.

Turns one JSX/TSX file into a ComponentDefinition: the headings it renders
itself, the capitalized components it uses (merged per name, with every
usage position), and local structural issues. The definition replaces any
previous one for the same path in the shared registry.
"""

from __future__ import annotations

from collections import defaultdict

from zemdomu.components.models import (
    ComponentDefinition,
    ComponentReference,
    HeadingInfo,
    Location,
)
from zemdomu.components.registry import ComponentRegistry
from zemdomu.components.resolver import ComponentPathResolver
from zemdomu.config.models import LinterOptions
from zemdomu.exceptions import MarkupParseError
from zemdomu.linter import FileKind, parse_document, parse_error_result
from zemdomu.linting.models import LintResult
from zemdomu.logging import get_logger
from zemdomu.parsing.nodes import Document
from zemdomu.rules import heading_skip_message

logger = get_logger(__name__)


class ComponentGraphBuilder:
    """Builds component definitions and registers them.

    Parameters
    ----------
    registry : ComponentRegistry
        Registry that receives each definition
    resolver : ComponentPathResolver
        Resolves import source strings to file paths
    options : LinterOptions
        Decides which local structural checks are recorded
    """

    def __init__(
        self,
        registry: ComponentRegistry,
        resolver: ComponentPathResolver,
        options: LinterOptions | None = None,
    ) -> None:
        self.registry = registry
        self.resolver = resolver
        self.options = options or LinterOptions()

    def analyze(self, file_path: str, content: str, generation: int = 0) -> ComponentDefinition:
        """Parse ``content`` as JSX/TSX and register its definition.

        A file that does not parse is registered with no headings and no
        component usages, so its stale structure never lingers.
        """
        kind = FileKind.from_path(file_path)
        if kind is None or not kind.is_component:
            kind = FileKind.TSX
        try:
            document = parse_document(content, kind)
        except MarkupParseError as e:
            definition = unparsable_definition(file_path, e)
            self.registry.replace(definition, generation)
            return definition
        return self.analyze_document(file_path, document, generation=generation)

    def analyze_document(
        self,
        file_path: str,
        document: Document,
        local_results: list[LintResult] | None = None,
        generation: int = 0,
    ) -> ComponentDefinition:
        """Build and register the definition of an already parsed file."""
        definition = self.build_definition(file_path, document, local_results)
        if not self.registry.replace(definition, generation):
            logger.debug("Dropped stale definition for {path}", path=file_path)
        return definition

    def build_definition(
        self,
        file_path: str,
        document: Document,
        local_results: list[LintResult] | None = None,
    ) -> ComponentDefinition:
        """Build the definition of a parsed file without registering it.

        ``local_results`` are the single-file lint results for the same file;
        they are stored in ``issues`` by rule id.
        """
        definition = ComponentDefinition.for_path(file_path)
        references: dict[str, ComponentReference] = {}

        for element in document.iter_elements():
            line, column = document.source.position(element.offset)
            level = element.heading_level
            if level is not None:
                definition.headings.append(HeadingInfo(level, line, column, file_path))
            elif element.is_component and "." not in element.tag:
                reference = references.get(element.tag)
                if reference is None:
                    raw_import = document.imports.get(element.tag)
                    reference = ComponentReference(
                        name=element.tag,
                        path=self._resolve(raw_import, file_path),
                        raw_import_path=raw_import,
                    )
                    references[element.tag] = reference
                    definition.uses_components.append(reference)
                reference.usage_locations.append(Location(line, column))

        issues: defaultdict[str, list[LintResult]] = defaultdict(list)
        for result in local_results or ():
            issues[result.rule].append(result)
        if self.options.is_enabled("enforceHeadingOrder"):
            issues["enforceHeadingOrder"] = local_heading_skips(definition.headings)
        if self.options.is_enabled("singleH1"):
            issues["singleH1"] = [
                LintResult(line=h.line, column=h.column, message="<h1>", rule="singleH1")
                for h in definition.h1_headings
            ]
        definition.issues = {rule: found for rule, found in issues.items() if found}
        return definition

    def _resolve(self, raw_import: str | None, file_path: str) -> str | None:
        if raw_import is None:
            return None
        return self.resolver.resolve(raw_import, file_path)


def unparsable_definition(file_path: str, error: MarkupParseError) -> ComponentDefinition:
    """Empty definition recorded for a file that does not parse."""
    definition = ComponentDefinition.for_path(file_path)
    definition.issues["parseError"] = [parse_error_result(error)]
    return definition


def local_heading_skips(headings: list[HeadingInfo]) -> list[LintResult]:
    """Heading-level skips among one file's own headings, in document order."""
    results: list[LintResult] = []
    previous: int | None = None
    for heading in sorted(headings, key=lambda h: (h.line, h.column)):
        if previous is not None and heading.level > previous + 1:
            results.append(
                LintResult(
                    line=heading.line,
                    column=heading.column,
                    message=heading_skip_message(heading.level, previous),
                    rule="enforceHeadingOrder",
                    file_path=heading.file_path,
                )
            )
        previous = heading.level
    return results
