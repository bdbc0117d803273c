"""Lexical import scanner for Python sources.

Only ``from X import Y`` statements become links.  A plain ``import X``
is matched but not resolved: without the ``from`` clause the scanner
cannot tell a project module from an installed package cheaply, so those
statements are left out of the graph.
"""

from __future__ import annotations

import pathlib
import re
from typing import Iterator, Optional

import structlog

from atlasic.models.graph import GraphLink
from atlasic.parsers.base import BaseDependencyExtractor

logger = structlog.get_logger(__name__)

IMPORT_RE = re.compile(
    r"^[ \t]*(?:from[ \t]+([\w.]+)[ \t]+)?import[ \t]+(\([^)]*\)|[\w.,* \t]+)",
    re.MULTILINE,
)

# Top-level names never resolved against the workspace.
STDLIB_MODULES: tuple[str, ...] = ("os", "sys", "json", "re", "collections", "itertools", "__future__")


def _imported_names(clause: str) -> list[str]:
    names = []
    for part in clause.strip().strip("()").split(","):
        name = part.split(" as ")[0].strip()
        if name and name != "*":
            names.append(name)
    return names


class PythonDependencyExtractor(BaseDependencyExtractor):
    """Extracts module-level dependencies from ``.py`` files.

    - ``from .mod import x``: leading dots pick the package (one dot is the
      importing file's own package, each extra dot climbs one directory),
      the rest of the dotted path is probed as ``<path>.py`` then
      ``<path>/__init__.py``.
    - ``from . import a, b``: each name is probed as a submodule of the
      package, falling back to the package ``__init__.py``.
    - ``from pkg.mod import x``: unless ``pkg`` is a standard library
      module, probed the same way from the workspace root.
    """

    extensions = (".py",)

    def extract(self, file_path: pathlib.Path, text: str) -> list[GraphLink]:
        links: list[GraphLink] = []
        for match in IMPORT_RE.finditer(text):
            module, names = match.group(1), match.group(2)
            if not module:
                continue
            for target in self._resolve_statement(file_path, module, names):
                links.append(self._link(file_path, target))
        return links

    def _resolve_statement(
        self, file_path: pathlib.Path, module: str, names: str
    ) -> Iterator[pathlib.Path]:
        if module.startswith("."):
            remainder = module.lstrip(".")
            package_dir = file_path.parent
            for _ in range(len(module) - len(remainder) - 1):
                package_dir = package_dir.parent

            if remainder:
                found = self._probe_module(package_dir, remainder)
                if found is not None:
                    yield found
                return

            seen: set[pathlib.Path] = set()
            for name in _imported_names(names):
                found = self._probe_module(package_dir, name)
                if found is None:
                    found = self._first_existing([package_dir / "__init__.py"])
                if found is not None and found not in seen:
                    seen.add(found)
                    yield found
            return

        if module.split(".")[0] in STDLIB_MODULES:
            return
        found = self._probe_module(self.repo_root, module)
        if found is None:
            logger.debug("import_unresolved", file=str(file_path), module=module)
            return
        yield found

    def _probe_module(self, base: pathlib.Path, dotted: str) -> Optional[pathlib.Path]:
        parts = [p for p in dotted.split(".") if p]
        if not parts:
            return None
        target = self._join(base, *parts)
        return self._first_existing(
            [target.with_name(target.name + ".py"), target / "__init__.py"]
        )
