"""Bounded-depth recursive file discovery with ignore-pattern filtering.

Plain ignore patterns are case-insensitive substrings of the path relative
to the workspace root (``"dist"`` also skips ``src/distance.ts``).  Patterns
containing glob characters are matched with ``pathspec`` using
``.gitignore`` semantics instead.
"""

from __future__ import annotations

import pathlib
from typing import Iterator

import pathspec
import structlog

from atlasic.config import settings

logger = structlog.get_logger(__name__)

_GLOB_CHARS = frozenset("*?[")


class FileDiscoverer:
    """Recursively walks a directory tree, yielding supported source files.

    Files directly under *root* are at depth 0; a file inside ``maxDepth``
    nested directories is still discovered, one level deeper is not.

    Args:
        root: The root directory to scan.
        ignore_patterns: Patterns to exclude.  Falls back to
            :pyattr:`atlasic.config.Settings.ignore_patterns`.
        max_depth: Deepest directory level to descend into.  Falls back to
            :pyattr:`atlasic.config.Settings.max_depth`.
        extensions: Extensions (with dot) to collect.  Falls back to
            :pyattr:`atlasic.config.Settings.supported_extensions`.
    """

    def __init__(
        self,
        root: pathlib.Path,
        ignore_patterns: list[str] | None = None,
        max_depth: int | None = None,
        extensions: list[str] | None = None,
    ) -> None:
        self.root = root
        patterns = settings.ignore_patterns if ignore_patterns is None else ignore_patterns
        self.max_depth = settings.max_depth if max_depth is None else max_depth
        exts = settings.supported_extensions if extensions is None else extensions
        self.extensions = {e.lower() for e in exts}

        self._substrings = [p.lower() for p in patterns if not _GLOB_CHARS & set(p)]
        globs = [p for p in patterns if _GLOB_CHARS & set(p)]
        self._spec = pathspec.PathSpec.from_lines("gitwildmatch", globs) if globs else None

    def is_ignored(self, path: pathlib.Path) -> bool:
        """Check whether *path* matches any ignore pattern.

        Args:
            path: Absolute path to test.

        Returns:
            ``True`` if the path should be skipped.
        """
        try:
            relative = path.relative_to(self.root).as_posix()
        except ValueError:
            relative = path.as_posix()
        lowered = relative.lower()
        if any(pattern in lowered for pattern in self._substrings):
            return True
        if self._spec is not None:
            candidate = relative + "/" if path.is_dir() else relative
            return self._spec.match_file(candidate)
        return False

    def is_supported(self, path: pathlib.Path) -> bool:
        return path.suffix.lower() in self.extensions

    def discover(self) -> list[pathlib.Path]:
        """Return every supported file under :pyattr:`root`, walk order."""
        return list(self.walk())

    def walk(self) -> Iterator[pathlib.Path]:
        """Yield all supported source files under :pyattr:`root`.

        Ignored directories are pruned entirely so their children are never
        visited.

        Yields:
            Absolute ``pathlib.Path`` objects for each source file.
        """
        logger.info("crawl_started", root=str(self.root), max_depth=self.max_depth)
        file_count = 0

        for path in self._walk(self.root, 0):
            file_count += 1
            yield path

        logger.info("crawl_finished", root=str(self.root), files_found=file_count)

    def _walk(self, directory: pathlib.Path, depth: int) -> Iterator[pathlib.Path]:
        if depth > self.max_depth:
            return

        try:
            entries = sorted(directory.iterdir())
        except OSError as exc:
            logger.warning("directory_read_failed", path=str(directory), error=str(exc))
            return

        for entry in entries:
            if self.is_ignored(entry):
                logger.debug("excluded", path=str(entry))
                continue
            if entry.is_symlink():
                continue

            if entry.is_dir():
                yield from self._walk(entry, depth + 1)
            elif entry.is_file() and self.is_supported(entry):
                yield entry
