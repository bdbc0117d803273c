"""Workspace-local JSON cache for the last generated graph.

One snapshot is kept at a time; every save overwrites it.  All I/O errors
are logged and turned into cache misses so a broken cache never blocks
opening the visualizer.
"""

from __future__ import annotations

import json
import os
import pathlib
from typing import Any, Optional

import structlog

from atlasic.config import settings
from atlasic.models.graph import CodebaseGraph

logger = structlog.get_logger(__name__)


class CacheManager:
    """Reads and writes JSON documents under ``<root>/.atlasic/``.

    Args:
        workspace_root: Workspace the cache belongs to.
        cache_dir_name: Override for
            :pyattr:`atlasic.config.Settings.cache_dir_name`.
    """

    def __init__(
        self,
        workspace_root: str | pathlib.Path,
        cache_dir_name: str | None = None,
    ) -> None:
        self.cache_dir = pathlib.Path(workspace_root) / (cache_dir_name or settings.cache_dir_name)
        self.graph_path = self.cache_dir / settings.graph_cache_file

    # ------------------------------------------------------------------
    # Graph snapshot
    # ------------------------------------------------------------------

    def save_graph(self, graph: CodebaseGraph) -> bool:
        """Overwrite the graph snapshot.  Returns ``False`` on failure."""
        try:
            self._write(self.graph_path, graph.model_dump_json(indent=2))
        except OSError as exc:
            logger.warning("cache_save_failed", path=str(self.graph_path), error=str(exc))
            return False
        logger.debug("graph_cached", path=str(self.graph_path), nodes=len(graph.nodes))
        return True

    def load_graph(self) -> Optional[CodebaseGraph]:
        """Return the cached graph, or ``None`` when absent or unreadable."""
        if not self.graph_path.is_file():
            return None
        try:
            return CodebaseGraph.model_validate_json(self.graph_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("cache_load_failed", path=str(self.graph_path), error=str(exc))
            return None

    def clear_cache(self) -> None:
        try:
            self.graph_path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("cache_clear_failed", path=str(self.graph_path), error=str(exc))

    # ------------------------------------------------------------------
    # Generic JSON documents (git heat)
    # ------------------------------------------------------------------

    def save_json(self, file_name: str, data: Any) -> bool:
        path = self.cache_dir / file_name
        try:
            self._write(path, json.dumps(data, indent=2))
        except (OSError, TypeError) as exc:
            logger.warning("cache_save_failed", path=str(path), error=str(exc))
            return False
        return True

    def load_json(self, file_name: str) -> Any:
        path = self.cache_dir / file_name
        if not path.is_file():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("cache_load_failed", path=str(path), error=str(exc))
            return None

    def _write(self, path: pathlib.Path, payload: str) -> None:
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(path.name + ".tmp")
        tmp.write_text(payload, encoding="utf-8")
        os.replace(tmp, path)
