"""Component graph and cross-component analysis for JSX/TSX projects."""

from zemdomu.components.analyzer import CrossComponentAnalyzer, find_entry_points
from zemdomu.components.graph import ComponentGraphBuilder
from zemdomu.components.models import (
    ComponentDefinition,
    ComponentReference,
    HeadingInfo,
    Location,
)
from zemdomu.components.registry import ComponentRegistry
from zemdomu.components.resolver import ComponentPathResolver

__all__ = [
    "ComponentDefinition",
    "ComponentGraphBuilder",
    "ComponentPathResolver",
    "ComponentReference",
    "ComponentRegistry",
    "CrossComponentAnalyzer",
    "HeadingInfo",
    "Location",
    "find_entry_points",
]
