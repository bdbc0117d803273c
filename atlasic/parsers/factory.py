"""Factory for obtaining the correct dependency extractor at runtime.

Adding support for a new language requires only:

1. Creating a new subclass of :class:`BaseDependencyExtractor`.
2. Registering it via :meth:`ExtractorFactory.register`.
"""

from __future__ import annotations

import pathlib
from typing import Type

import structlog

from atlasic.core.aliases import PathAliasResolver
from atlasic.parsers.base import BaseDependencyExtractor

logger = structlog.get_logger(__name__)


class ExtractorFactory:
    """Registry-based factory that maps file extensions to extractors.

    Usage::

        factory = ExtractorFactory(repo_root, aliases)
        factory.register(PythonDependencyExtractor)
        extractor = factory.for_path(pathlib.Path("app/main.py"))
    """

    def __init__(
        self,
        repo_root: pathlib.Path,
        aliases: PathAliasResolver | None = None,
    ) -> None:
        self._repo_root = repo_root
        self._aliases = aliases
        self._registry: dict[str, Type[BaseDependencyExtractor]] = {}
        self._instances: dict[Type[BaseDependencyExtractor], BaseDependencyExtractor] = {}

    def register(self, extractor_cls: Type[BaseDependencyExtractor]) -> None:
        """Register *extractor_cls* for each of its declared extensions.

        Args:
            extractor_cls: A concrete subclass of :class:`BaseDependencyExtractor`.
        """
        for ext in extractor_cls.extensions:
            self._registry[ext.lower()] = extractor_cls
        logger.debug(
            "extractor_registered",
            cls=extractor_cls.__name__,
            extensions=list(extractor_cls.extensions),
        )

    def get(self, extension: str) -> BaseDependencyExtractor | None:
        """Return a (cached) extractor for *extension*, or ``None``.

        Unsupported extensions are not an error: the file simply has no
        outgoing links.
        """
        cls = self._registry.get(extension.lower())
        if cls is None:
            return None
        if cls not in self._instances:
            self._instances[cls] = cls(self._repo_root, self._aliases)
        return self._instances[cls]

    def for_path(self, file_path: pathlib.Path) -> BaseDependencyExtractor | None:
        return self.get(file_path.suffix)

    @property
    def supported_extensions(self) -> list[str]:
        """Return a sorted list of registered extensions."""
        return sorted(self._registry.keys())
