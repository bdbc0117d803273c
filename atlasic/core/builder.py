"""Graph builder that ties discovery, alias loading and extraction together.

This is the single entry point for producing a :class:`CodebaseGraph`: it
walks the workspace, dispatches each file to the extractor for its
extension, and merges every link into one graph.  There is no incremental
mode; each call is a full rebuild.
"""

from __future__ import annotations

import os
import pathlib

import structlog

from atlasic.core.aliases import PathAliasResolver
from atlasic.core.categories import categorize_file
from atlasic.core.content_reader import read_source
from atlasic.core.crawler import FileDiscoverer
from atlasic.models.graph import CodebaseGraph, GraphLink, GraphNode
from atlasic.parsers import BUILTIN_EXTRACTORS, ExtractorFactory

logger = structlog.get_logger(__name__)


class GraphBuilder:
    """Builds the file dependency graph of one workspace.

    Args:
        workspace_root: Directory to scan.
        ignore_patterns: Override for the crawler's ignore list.
        max_depth: Override for the crawler's depth bound.
        extensions: Override for the set of collected extensions.
        alias_locations: Override for the alias config search list.
    """

    def __init__(
        self,
        workspace_root: str | pathlib.Path,
        ignore_patterns: list[str] | None = None,
        max_depth: int | None = None,
        extensions: list[str] | None = None,
        alias_locations: list[str] | None = None,
    ) -> None:
        self.workspace_root = pathlib.Path(os.path.abspath(workspace_root))
        self.ignore_patterns = ignore_patterns
        self.max_depth = max_depth
        self.extensions = extensions
        self.alias_locations = alias_locations

    def _build_factory(self, aliases: PathAliasResolver) -> ExtractorFactory:
        factory = ExtractorFactory(self.workspace_root, aliases)
        for extractor_cls in BUILTIN_EXTRACTORS:
            factory.register(extractor_cls)
        return factory

    def create_node(self, file_path: str | pathlib.Path) -> GraphNode:
        path = pathlib.Path(file_path)
        return GraphNode(
            id=str(path),
            label=path.name,
            category=categorize_file(path, self.workspace_root),
            language=path.suffix[1:],
        )

    def generate_graph(self) -> CodebaseGraph:
        """Scan the workspace and produce its dependency graph.

        A file that cannot be read or scanned keeps its node but
        contributes no links; the build carries on with the next file.

        Returns:
            A :class:`CodebaseGraph` with nodes in discovery order, one
            link per resolved import, and a fresh timestamp.

        Raises:
            FileNotFoundError: If the workspace root does not exist.
            NotADirectoryError: If the workspace root is not a directory.
        """
        root = self.workspace_root
        if not root.exists():
            raise FileNotFoundError(f"Workspace path does not exist: {root}")
        if not root.is_dir():
            raise NotADirectoryError(f"Workspace path is not a directory: {root}")

        logger.info("graph_generation_started", root=str(root))

        aliases = PathAliasResolver(root, self.alias_locations)
        factory = self._build_factory(aliases)
        discoverer = FileDiscoverer(
            root,
            ignore_patterns=self.ignore_patterns,
            max_depth=self.max_depth,
            extensions=self.extensions,
        )

        nodes: dict[str, GraphNode] = {}
        links: list[GraphLink] = []
        files_scanned = 0
        files_failed = 0

        for file_path in discoverer.walk():
            file_id = str(file_path)
            if file_id not in nodes:
                nodes[file_id] = self.create_node(file_path)

            extractor = factory.for_path(file_path)
            if extractor is None:
                continue

            try:
                text = read_source(file_path)
                file_links = extractor.extract(file_path, text)
            except Exception:
                files_failed += 1
                logger.exception("file_scan_failed", file=file_id)
                continue

            files_scanned += 1
            for link in file_links:
                if link.target not in nodes:
                    nodes[link.target] = self.create_node(link.target)
                links.append(link)

        graph = CodebaseGraph(nodes=list(nodes.values()), links=links)
        logger.info(
            "graph_generated",
            root=str(root),
            files_scanned=files_scanned,
            files_failed=files_failed,
            total_nodes=len(graph.nodes),
            total_links=len(graph.links),
            aliases=len(aliases.aliases),
        )
        return graph


def generate_graph(workspace_root: str | pathlib.Path, **overrides) -> CodebaseGraph:
    """Convenience wrapper around :meth:`GraphBuilder.generate_graph`."""
    return GraphBuilder(workspace_root, **overrides).generate_graph()
