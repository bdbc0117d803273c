"""Lexical import scanner for JavaScript and TypeScript sources.

Recognises three forms:

- ``import x from './x'``, side-effect ``import './x'`` and re-exports
  ``export { x } from './x'``
- ``require('./x')``
- dynamic ``import('./x')``

Only relative (``.``/``..``) and alias-style (``/``, ``@/``) specifiers are
considered; bare package names such as ``react`` live in
``node_modules`` and are not part of the project graph.
"""

from __future__ import annotations

import pathlib
import re
from typing import Iterator, Optional

import structlog

from atlasic.models.graph import GraphLink
from atlasic.parsers.base import BaseDependencyExtractor

logger = structlog.get_logger(__name__)

IMPORT_FROM_RE = re.compile(r"""(?:import|export)\s+(?:[\w\s{},*$]+\s+from\s+)?['"]([^'"]+)['"]""")
REQUIRE_RE = re.compile(r"""require\s*\(\s*['"]([^'"]+)['"]\s*\)""")
DYNAMIC_IMPORT_RE = re.compile(r"""import\s*\(\s*['"]([^'"]+)['"]\s*\)""")

ALIAS_EXTENSIONS: tuple[str, ...] = (".ts", ".tsx", ".js", ".jsx", ".vue")
RELATIVE_EXTENSIONS: tuple[str, ...] = ALIAS_EXTENSIONS + (".py",)


def is_internal_specifier(specifier: str) -> bool:
    """Return ``True`` for specifiers that can point inside the project."""
    return specifier.startswith((".", "/", "@/"))


class JavaScriptDependencyExtractor(BaseDependencyExtractor):
    """Extracts file-level dependencies from JS/TS family files.

    Resolution order for each specifier:

    1. Every alias whose prefix matches, probing ``<base><ext>`` then
       ``<base>/index<ext>`` for each of :data:`ALIAS_EXTENSIONS`.
    2. For ``.``-relative specifiers, the same probe from the importing
       file's directory over :data:`RELATIVE_EXTENSIONS`.

    The first existing file wins; unresolved specifiers are dropped.
    """

    extensions = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")

    def extract(self, file_path: pathlib.Path, text: str) -> list[GraphLink]:
        links: list[GraphLink] = []
        for specifier in self.specifiers(text):
            if not is_internal_specifier(specifier):
                continue
            resolved = self.resolve(file_path, specifier)
            if resolved is not None:
                links.append(self._link(file_path, resolved))
        return links

    @staticmethod
    def specifiers(text: str) -> Iterator[str]:
        """Yield every import specifier, grouped by statement form."""
        for pattern in (IMPORT_FROM_RE, REQUIRE_RE, DYNAMIC_IMPORT_RE):
            for match in pattern.finditer(text):
                yield match.group(1)

    def resolve(self, file_path: pathlib.Path, specifier: str) -> Optional[pathlib.Path]:
        """Resolve *specifier* imported from *file_path* to an existing file."""
        if self.aliases is not None:
            for base in self.aliases.candidates(specifier):
                found = self._first_existing(self._probe(base, ALIAS_EXTENSIONS))
                if found is not None:
                    return found

        if specifier.startswith("."):
            base = self._join(file_path.parent, specifier)
            return self._first_existing(self._probe(base, RELATIVE_EXTENSIONS))

        return None

    @staticmethod
    def _probe(base: pathlib.Path, extensions: tuple[str, ...]) -> Iterator[pathlib.Path]:
        for ext in extensions:
            yield pathlib.Path(f"{base}{ext}")
            yield base / f"index{ext}"
