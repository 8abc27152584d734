"""Component graph data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from zemdomu.linting.models import LintResult


@dataclass(frozen=True, slots=True, order=True)
class Location:
    """0-based (line, column) position."""

    line: int
    column: int


@dataclass(frozen=True, slots=True)
class HeadingInfo:
    """A heading element found directly in one component file."""

    level: int
    line: int
    column: int
    file_path: str

    @property
    def location(self) -> Location:
        return Location(self.line, self.column)


@dataclass(slots=True)
class ComponentReference:
    """Every usage of one capitalized JSX tag within a file.

    Attributes
    ----------
    name : str
        Tag identifier as written, e.g. ``Button``
    path : str | None
        Resolved file path, or None when the import could not be resolved
        (or the component was never imported)
    raw_import_path : str | None
        Import source string exactly as written
    usage_locations : list[Location]
        Every JSX usage position, in document order
    """

    name: str
    path: str | None
    raw_import_path: str | None
    usage_locations: list[Location] = field(default_factory=list)

    @property
    def source_location(self) -> Location:
        """First usage position."""
        return self.usage_locations[0]


@dataclass(slots=True)
class ComponentDefinition:
    """Structural analysis of one JSX/TSX file.

    ``issues`` maps rule ids to local results. ``singleH1`` holds one entry per
    local ``<h1>`` as the candidate list for the cross-component check.
    Definitions are replaced wholesale when their file is re-analyzed.
    """

    name: str
    file_path: str
    issues: dict[str, list[LintResult]] = field(default_factory=dict)
    uses_components: list[ComponentReference] = field(default_factory=list)
    headings: list[HeadingInfo] = field(default_factory=list)

    @classmethod
    def for_path(cls, file_path: str) -> ComponentDefinition:
        return cls(name=Path(file_path).stem, file_path=file_path)

    @property
    def h1_headings(self) -> list[HeadingInfo]:
        return [heading for heading in self.headings if heading.level == 1]

    def reference_to(self, path: str) -> ComponentReference | None:
        """The reference whose resolved path is ``path``, if any."""
        for reference in self.uses_components:
            if reference.path == path:
                return reference
        return None
