"""Lexical import scanner for Java sources."""

from __future__ import annotations

import pathlib
import re
from typing import Optional

import structlog

from atlasic.models.graph import GraphLink
from atlasic.parsers.base import BaseDependencyExtractor

logger = structlog.get_logger(__name__)

IMPORT_RE = re.compile(r"import\s+(static\s+)?([A-Za-z0-9_.]+?)(\s*\.\s*\*)?\s*;")

STDLIB_PREFIXES: tuple[str, ...] = ("java.", "javax.")


class JavaDependencyExtractor(BaseDependencyExtractor):
    """Extracts class-level dependencies from ``.java`` files.

    ``import com.acme.util.Strings;`` resolves to
    ``<root>/com/acme/util/Strings.java`` when that file exists.  Static
    imports drop the trailing member name first.  ``java.*`` and
    ``javax.*`` imports are standard library and skipped.
    """

    extensions = (".java",)

    def extract(self, file_path: pathlib.Path, text: str) -> list[GraphLink]:
        links: list[GraphLink] = []
        for match in IMPORT_RE.finditer(text):
            is_static, dotted = match.group(1), match.group(2)
            if dotted.startswith(STDLIB_PREFIXES) or dotted.startswith("."):
                continue
            if is_static and "." in dotted:
                dotted = dotted.rsplit(".", 1)[0]
            resolved = self.resolve(dotted)
            if resolved is None:
                logger.debug("import_unresolved", file=str(file_path), module=dotted)
                continue
            links.append(self._link(file_path, resolved))
        return links

    def resolve(self, dotted: str) -> Optional[pathlib.Path]:
        parts = [p for p in dotted.split(".") if p]
        if not parts:
            return None
        target = self._join(self.repo_root, *parts)
        return self._first_existing([target.with_name(target.name + ".java")])
