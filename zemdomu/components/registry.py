"""Shared component registry."""

from __future__ import annotations

import threading

from zemdomu.components.models import ComponentDefinition


class ComponentRegistry:
    """Path -> ComponentDefinition map shared by one project linter.

    Writes replace a file's definition wholesale under a lock, so readers
    never see a half-built entry. A write tagged with a scan generation older
    than the one that last wrote the same path is dropped.

    Examples
    --------
    >>> registry = ComponentRegistry()
    >>> registry.replace(ComponentDefinition.for_path("/src/A.tsx"), generation=2)
    True
    >>> registry.replace(ComponentDefinition.for_path("/src/A.tsx"), generation=1)
    False
    >>> len(registry)
    1
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._definitions: dict[str, ComponentDefinition] = {}
        self._generations: dict[str, int] = {}

    def replace(self, definition: ComponentDefinition, generation: int = 0) -> bool:
        """Store ``definition``; returns False if a newer scan already wrote it."""
        path = definition.file_path
        with self._lock:
            if generation < self._generations.get(path, 0):
                return False
            self._definitions[path] = definition
            self._generations[path] = generation
            return True

    def remove(self, path: str) -> None:
        with self._lock:
            self._definitions.pop(path, None)
            self._generations.pop(path, None)

    def get(self, path: str | None) -> ComponentDefinition | None:
        if path is None:
            return None
        with self._lock:
            return self._definitions.get(path)

    def snapshot(self) -> dict[str, ComponentDefinition]:
        """Consistent copy of the current mapping."""
        with self._lock:
            return dict(self._definitions)

    def clear(self) -> None:
        with self._lock:
            self._definitions.clear()
            self._generations.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._definitions)

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._definitions
