"""Lexical import scanner for Go sources.

Go imports name packages (directories), not files, so a resolved import
links to the first ``.go`` file in the package directory.
"""

from __future__ import annotations

import pathlib
import re
from typing import Iterator, Optional

import structlog

from atlasic.core.aliases import PathAliasResolver
from atlasic.models.graph import GraphLink
from atlasic.parsers.base import BaseDependencyExtractor

logger = structlog.get_logger(__name__)

IMPORT_RE = re.compile(r'import\s+(?:\(([^)]*)\)|(?:[\w.]+\s+)?"([^"]+)")')
QUOTED_RE = re.compile(r'"([^"]+)"')
MODULE_RE = re.compile(r"^module\s+(\S+)", re.MULTILINE)


class GoDependencyExtractor(BaseDependencyExtractor):
    """Extracts package-level dependencies from ``.go`` files.

    Single-segment imports (``fmt``, ``os``) are standard library.  Other
    paths are looked up below the workspace root, both verbatim and with
    the ``go.mod`` module prefix removed.
    """

    extensions = (".go",)

    def __init__(
        self,
        repo_root: pathlib.Path,
        aliases: PathAliasResolver | None = None,
    ) -> None:
        super().__init__(repo_root, aliases)
        self.module_path = self._read_module_path()

    def _read_module_path(self) -> Optional[str]:
        go_mod = self.repo_root / "go.mod"
        try:
            match = MODULE_RE.search(go_mod.read_text(encoding="utf-8"))
        except OSError:
            return None
        return match.group(1) if match else None

    def extract(self, file_path: pathlib.Path, text: str) -> list[GraphLink]:
        links: list[GraphLink] = []
        for import_path in self.import_paths(text):
            if "/" not in import_path:
                continue
            resolved = self.resolve(import_path)
            if resolved is not None:
                links.append(self._link(file_path, resolved))
        return links

    @staticmethod
    def import_paths(text: str) -> Iterator[str]:
        for match in IMPORT_RE.finditer(text):
            block, single = match.group(1), match.group(2)
            if block is not None:
                for quoted in QUOTED_RE.finditer(block):
                    yield quoted.group(1)
            elif single:
                yield single

    def resolve(self, import_path: str) -> Optional[pathlib.Path]:
        candidates = [import_path]
        prefix = f"{self.module_path}/" if self.module_path else None
        if prefix and import_path.startswith(prefix):
            candidates.append(import_path[len(prefix):])

        for candidate in candidates:
            directory = self._join(self.repo_root, *candidate.split("/"))
            if not directory.is_dir():
                continue
            try:
                entries = sorted(directory.iterdir())
            except OSError as exc:
                logger.warning("package_read_failed", path=str(directory), error=str(exc))
                continue
            for entry in entries:
                if entry.name.endswith(".go") and entry.is_file():
                    return entry
        return None
