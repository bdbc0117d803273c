"""Shared fixtures: on-disk workspaces and small in-memory graphs."""

from __future__ import annotations

import pathlib
from typing import Callable

import pytest

from atlasic.models.graph import CodebaseGraph, GraphLink, GraphNode


@pytest.fixture
def make_tree(tmp_path: pathlib.Path) -> Callable[[dict[str, str]], pathlib.Path]:
    """Write ``{relative_path: content}`` under a fresh workspace root."""

    def _make(files: dict[str, str]) -> pathlib.Path:
        root = tmp_path / "ws"
        root.mkdir(exist_ok=True)
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def ts_workspace(make_tree) -> pathlib.Path:
    return make_tree(
        {
            "a.ts": "import { f } from './b';\nconsole.log(f());\n",
            "b.ts": "export const f = () => 1;\n",
        }
    )


@pytest.fixture
def triangle_graph() -> CodebaseGraph:
    """``/p/a.ts -> /p/b.ts -> /p/c.ts`` plus ``/p/a.ts -> /p/c.ts``."""
    nodes = [GraphNode(id=f"/p/{name}.ts", label=f"{name}.ts", language="ts") for name in "abc"]
    links = [
        GraphLink(source="/p/a.ts", target="/p/b.ts"),
        GraphLink(source="/p/b.ts", target="/p/c.ts"),
        GraphLink(source="/p/a.ts", target="/p/c.ts"),
    ]
    return CodebaseGraph(nodes=nodes, links=links)
