"""Import path resolution for component references.

Resolution order for an import source string:

1. relative imports (``./Button``): extension probing (``.tsx``, ``.jsx``,
   ``.ts``, ``.js``), then ``index.*`` inside the directory, then the path
   itself;
2. ``compilerOptions.paths`` aliases from ``tsconfig.json`` or
   ``jsconfig.json`` in the root directory, relative to ``baseUrl``;
3. a workspace search for a file whose path ends with the import path.

Every lookup is cached on the resolver instance, including misses, so a
large scan never probes the same missing path twice.
"""

from __future__ import annotations

import json
import os
import re
import threading
from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import Path

from zemdomu.config.models import DEFAULT_EXCLUDES
from zemdomu.logging import get_logger

logger = get_logger(__name__)

EXTENSIONS: tuple[str, ...] = (".tsx", ".jsx", ".ts", ".js")
CONFIG_FILES: tuple[str, ...] = ("tsconfig.json", "jsconfig.json")

_EXTENSION_RE = re.compile(r"\.(tsx|ts|jsx|js)$", re.IGNORECASE)
# Strings are matched first so comment markers inside them survive
_JSONC_COMMENT_RE = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/', re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")


@dataclass(frozen=True, slots=True)
class PathAlias:
    """One ``compilerOptions.paths`` entry."""

    prefix: str
    wildcard: bool
    targets: tuple[Path, ...]

    def candidates(self, import_path: str) -> list[Path]:
        """Base paths to probe for ``import_path``, or [] when it does not match."""
        if self.wildcard:
            if not import_path.startswith(self.prefix):
                return []
            rest = import_path[len(self.prefix) :].lstrip("/")
            return [target / rest if rest else target for target in self.targets]
        if import_path == self.prefix:
            return list(self.targets)
        if import_path.startswith(self.prefix + "/"):
            rest = import_path[len(self.prefix) + 1 :]
            return [target / rest for target in self.targets]
        return []


def normalize_key(path: str) -> str:
    """Case- and extension-insensitive cache key for a path or import.

    >>> normalize_key("C:\\\\src\\\\Button.tsx")
    'c:/src/button'
    """
    key = path.replace("\\", "/").rstrip("/")
    return _EXTENSION_RE.sub("", key).lower()


def load_jsonc(text: str) -> object:
    """Parse JSON that may contain comments and trailing commas."""
    stripped = _JSONC_COMMENT_RE.sub(lambda m: m.group(1) or "", text)
    return json.loads(_TRAILING_COMMA_RE.sub(r"\1", stripped))


class ComponentPathResolver:
    """Maps import source strings to component file paths.

    Caches live on the instance; create a new resolver (or call ``clear``)
    to forget what the filesystem looked like.

    Examples
    --------
    Example usage::

        resolver = ComponentPathResolver(root_dir=Path("/repo"))
        resolver.resolve("./Button", "/repo/src/Page.tsx")
        # '/repo/src/Button.tsx'
    """

    def __init__(self, root_dir: Path | None = None, exclude: tuple[str, ...] = DEFAULT_EXCLUDES):
        self.root_dir = root_dir
        self.exclude = exclude
        self._lock = threading.RLock()
        self._resolved: dict[str, str | None] = {}
        self._unresolved: set[str] = set()
        self._exists: dict[Path, bool] = {}
        self._aliases: list[PathAlias] | None = None
        self._workspace_files: list[Path] | None = None

    def clear(self) -> None:
        """Forget every cached lookup."""
        with self._lock:
            self._resolved.clear()
            self._unresolved.clear()
            self._exists.clear()
            self._aliases = None
            self._workspace_files = None

    def resolve(self, import_path: str, current_path: str) -> str | None:
        """Resolve ``import_path`` as imported from ``current_path``.

        Returns None when nothing matches; misses are cached.
        """
        relative = import_path.startswith(".")
        raw_key = (
            os.path.normpath(os.path.join(os.path.dirname(current_path), import_path))
            if relative
            else import_path
        )
        key = normalize_key(raw_key)

        with self._lock:
            if key in self._unresolved:
                return None
            if key in self._resolved:
                return self._resolved[key]

            if relative:
                result = self._try_extensions(Path(raw_key))
            else:
                result = self._resolve_alias(import_path) or self._search_workspace(import_path)

            self._resolved[key] = result
            if result is None:
                self._unresolved.add(key)
                logger.debug(
                    "Unresolved import {import_path} from {current}",
                    import_path=import_path,
                    current=current_path,
                )
            return result

    def _exists_file(self, path: Path) -> bool:
        cached = self._exists.get(path)
        if cached is None:
            cached = path.is_file()
            self._exists[path] = cached
        return cached

    def _try_extensions(self, base: Path) -> str | None:
        if base.suffix.lower() in EXTENSIONS:
            return str(base) if self._exists_file(base) else None
        for ext in EXTENSIONS:
            candidate = base.with_name(base.name + ext)
            if self._exists_file(candidate):
                return str(candidate)
        for ext in EXTENSIONS:
            candidate = base / f"index{ext}"
            if self._exists_file(candidate):
                return str(candidate)
        if self._exists_file(base):
            return str(base)
        return None

    def _resolve_alias(self, import_path: str) -> str | None:
        for alias in self._load_aliases():
            for base in alias.candidates(import_path):
                if result := self._try_extensions(base):
                    return result
        return None

    def _load_aliases(self) -> list[PathAlias]:
        if self._aliases is not None:
            return self._aliases
        self._aliases = []
        if self.root_dir is None:
            return self._aliases

        for name in CONFIG_FILES:
            config_path = self.root_dir / name
            if not config_path.is_file():
                continue
            try:
                data = load_jsonc(config_path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning("Ignoring unreadable {path}: {error}", path=config_path, error=e)
                continue
            self._aliases = self._parse_aliases(data, self.root_dir)
            logger.debug(
                "Loaded {count} path aliases from {path}", count=len(self._aliases), path=config_path
            )
            break
        return self._aliases

    @staticmethod
    def _parse_aliases(data: object, root_dir: Path) -> list[PathAlias]:
        if not isinstance(data, dict):
            return []
        options = data.get("compilerOptions") or {}
        if not isinstance(options, dict):
            return []
        base_url = root_dir / str(options.get("baseUrl", "."))
        paths = options.get("paths") or {}
        if not isinstance(paths, dict):
            return []

        aliases: list[PathAlias] = []
        for alias, targets in paths.items():
            if not isinstance(targets, list):
                continue
            aliases.append(
                PathAlias(
                    prefix=alias.removesuffix("*").rstrip("/"),
                    wildcard="*" in alias,
                    targets=tuple(
                        (base_url / str(target).removesuffix("*").rstrip("/")).resolve()
                        for target in targets
                    ),
                )
            )
        return aliases

    def _search_workspace(self, import_path: str) -> str | None:
        wanted = normalize_key(import_path)
        if not wanted:
            return None
        suffix = "/" + wanted
        index_suffix = suffix + "/index"
        for path in self._list_workspace_files():
            key = normalize_key(path.as_posix())
            if key.endswith(suffix) or key.endswith(index_suffix):
                return str(path)
        return None

    def _list_workspace_files(self) -> list[Path]:
        if self._workspace_files is not None:
            return self._workspace_files
        files: list[Path] = []
        if self.root_dir is not None and self.root_dir.is_dir():
            for dirpath, dirnames, filenames in os.walk(self.root_dir):
                dirnames[:] = sorted(d for d in dirnames if d != "node_modules")
                for filename in sorted(filenames):
                    path = Path(dirpath) / filename
                    if path.suffix.lower() in EXTENSIONS and not self._excluded(path):
                        files.append(path)
        self._workspace_files = files
        return files

    def _excluded(self, path: Path) -> bool:
        posix = path.as_posix()
        return any(fnmatch(posix, pattern) for pattern in self.exclude)
