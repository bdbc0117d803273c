"""Abstract base class for all language-specific dependency extractors.

Extractors are lexical: they run regular expressions over raw file text
rather than building a syntax tree.  That keeps them fast and tolerant of
broken files at the cost of occasional false positives (imports inside
comments or strings) and misses (imports built from expressions).
"""

from __future__ import annotations

import abc
import os
import pathlib
from typing import Iterable, Optional

from atlasic.core.aliases import PathAliasResolver
from atlasic.models.graph import GraphLink, LinkType


class BaseDependencyExtractor(abc.ABC):
    """Contract that every language extractor must fulfil.

    Subclasses find import specifiers in the file text and resolve them to
    absolute paths of files that exist on disk.  Specifiers that point
    outside the project or cannot be found produce no link.

    Args:
        repo_root: Absolute workspace root; absolute imports are resolved
            below it.
        aliases: Alias table used by languages that support path aliases.
    """

    #: Extensions (lowercase, with dot) this extractor handles.
    extensions: tuple[str, ...] = ()

    def __init__(
        self,
        repo_root: pathlib.Path,
        aliases: PathAliasResolver | None = None,
    ) -> None:
        self.repo_root = repo_root
        self.aliases = aliases

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def extract(self, file_path: pathlib.Path, text: str) -> list[GraphLink]:
        """Return one link per resolvable import statement in *text*.

        Args:
            file_path: Absolute path of the importing file.
            text: Decoded contents of the file.

        Returns:
            Links from *file_path* to each resolved target, in source order.
        """

    # ------------------------------------------------------------------
    # Helpers available to all subclasses
    # ------------------------------------------------------------------

    @staticmethod
    def _link(file_path: pathlib.Path, target: pathlib.Path) -> GraphLink:
        return GraphLink(source=str(file_path), target=str(target), type=LinkType.DEPENDENCY)

    @staticmethod
    def _join(base: str | pathlib.Path, *parts: str) -> pathlib.Path:
        """Join and normalise without touching the filesystem."""
        return pathlib.Path(os.path.normpath(os.path.join(base, *parts)))

    @staticmethod
    def _first_existing(candidates: Iterable[pathlib.Path]) -> Optional[pathlib.Path]:
        """Return the first candidate that is an existing regular file."""
        for candidate in candidates:
            try:
                if candidate.is_file():
                    return candidate
            except OSError:
                continue
        return None
