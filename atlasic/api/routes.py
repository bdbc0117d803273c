"""FastAPI route definitions for graph generation, caching and rendering.

- ``POST /graph/generate`` rebuild a workspace graph and cache it.
- ``GET /graph`` cached graph, rebuilt on a cache miss.
- ``DELETE /graph/cache`` drop the cached snapshot.
- ``POST /graph/render`` lay the graph out and return one frame.
- ``POST /graph/heat`` git touch counts for the workspace.
- ``POST /graph/affected`` change-impact rings for a set of paths.

Graph builds and layouts are synchronous and CPU/IO bound, so they run
via ``asyncio.to_thread`` to keep the event loop free.
"""

from __future__ import annotations

import asyncio
import random
from typing import Any, Optional

import structlog
from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from atlasic.core.builder import GraphBuilder
from atlasic.core.cache import CacheManager
from atlasic.core.changes import detect_changed_nodes
from atlasic.core.git_heat import GitHeatService
from atlasic.models.graph import CodebaseGraph, GraphNode, HeatMap
from atlasic.render.colors import ColorMode
from atlasic.render.view import GraphView

logger = structlog.get_logger(__name__)

graph_router = APIRouter(prefix="/graph")


# ------------------------------------------------------------------
# Request / Response schemas
# ------------------------------------------------------------------


class GenerateRequest(BaseModel):
    """Payload for ``POST /graph/generate``.

    Attributes:
        path: Absolute local path of the workspace to scan.
        ignore_patterns: Optional override of the ignore list.
        max_depth: Optional override of the walk depth bound.
        extensions: Optional override of the collected extensions.
    """

    path: str = Field(..., description="Absolute local path to the workspace.")
    ignore_patterns: list[str] | None = Field(None, description="Ignore list override.")
    max_depth: int | None = Field(None, ge=0, description="Walk depth bound override.")
    extensions: list[str] | None = Field(None, description="Extension allow-list override.")


class GraphResponse(BaseModel):
    status: str = Field("success", description="Status message.")
    source: str = Field("build", description="'build' or 'cache'.")
    total_nodes: int = Field(..., description="Number of nodes.")
    total_links: int = Field(..., description="Number of links.")
    graph: CodebaseGraph = Field(..., description="The dependency graph.")


class StatusResponse(BaseModel):
    status: str = Field("success")
    message: str = Field("")


class RenderRequest(BaseModel):
    """Payload for ``POST /graph/render``.

    Attributes:
        path: Workspace whose (cached or freshly built) graph is drawn.
        width: Viewport width in pixels.
        height: Viewport height in pixels.
        ticks: Maximum simulation ticks before the frame is taken.
        color_mode: ``types``, ``indegree`` or ``git``.
        seed: Seed for the initial scatter, for reproducible output.
    """

    path: str = Field(..., description="Absolute local path to the workspace.")
    width: float = Field(800.0, gt=0)
    height: float = Field(600.0, gt=0)
    ticks: int = Field(300, ge=0, le=10_000)
    color_mode: ColorMode = Field(ColorMode.TYPES)
    seed: Optional[int] = Field(None)


class RenderResponse(BaseModel):
    tier: str
    ticks: int
    settled: bool
    frame: dict[str, Any]


class HeatRequest(BaseModel):
    path: str = Field(..., description="Absolute local path to the workspace.")
    window_days: int | None = Field(None, gt=0, description="History window in days.")


class AffectedRequest(BaseModel):
    path: str = Field(..., description="Absolute local path to the workspace.")
    changed_paths: list[str] = Field(..., description="Modified file paths.")


class AffectedNode(BaseModel):
    node: GraphNode
    reason: str
    level: int


class AffectedResponse(BaseModel):
    total: int
    nodes: list[AffectedNode]


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _bad_request(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _server_error(action: str, exc: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"{action} failed: {exc}",
    )


def _build_and_cache(path: str, **overrides: Any) -> CodebaseGraph:
    graph = GraphBuilder(path, **overrides).generate_graph()
    CacheManager(path).save_graph(graph)
    return graph


def _cached_or_built(path: str) -> tuple[CodebaseGraph, str]:
    cached = CacheManager(path).load_graph()
    if cached is not None:
        return cached, "cache"
    return _build_and_cache(path), "build"


async def _load_graph(path: str) -> tuple[CodebaseGraph, str]:
    try:
        return await asyncio.to_thread(_cached_or_built, path)
    except (FileNotFoundError, NotADirectoryError) as exc:
        raise _bad_request(exc)
    except Exception as exc:
        raise _server_error("Graph generation", exc)


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------


@graph_router.post(
    "/generate",
    response_model=GraphResponse,
    status_code=status.HTTP_200_OK,
    summary="Generate a workspace dependency graph",
)
async def generate(request: GenerateRequest) -> GraphResponse:
    """Rebuild the graph from scratch and overwrite the cache.

    Raises:
        HTTPException: 400 if the path is invalid, 500 on unexpected errors.
    """
    overrides = {
        "ignore_patterns": request.ignore_patterns,
        "max_depth": request.max_depth,
        "extensions": request.extensions,
    }
    try:
        graph = await asyncio.to_thread(_build_and_cache, request.path, **overrides)
    except (FileNotFoundError, NotADirectoryError) as exc:
        raise _bad_request(exc)
    except Exception as exc:
        raise _server_error("Graph generation", exc)

    return GraphResponse(
        source="build",
        total_nodes=len(graph.nodes),
        total_links=len(graph.links),
        graph=graph,
    )


@graph_router.get(
    "",
    response_model=GraphResponse,
    status_code=status.HTTP_200_OK,
    summary="Cached graph, rebuilt on a miss",
)
async def get_graph(
    path: str = Query(..., description="Absolute path to the workspace."),
) -> GraphResponse:
    graph, source = await _load_graph(path)
    return GraphResponse(
        source=source,
        total_nodes=len(graph.nodes),
        total_links=len(graph.links),
        graph=graph,
    )


@graph_router.delete(
    "/cache",
    response_model=StatusResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete the cached graph snapshot",
)
async def clear_cache(
    path: str = Query(..., description="Absolute path to the workspace."),
) -> StatusResponse:
    CacheManager(path).clear_cache()
    return StatusResponse(message="Graph cache cleared.")


@graph_router.post(
    "/render",
    response_model=RenderResponse,
    status_code=status.HTTP_200_OK,
    summary="Lay out the graph and return one frame of draw commands",
)
async def render(request: RenderRequest) -> RenderResponse:
    """Run the force layout for up to ``ticks`` ticks and render a frame.

    Links pointing at nodes missing from a cached graph are dropped
    rather than rejected.
    """
    graph, _ = await _load_graph(request.path)

    def _do_render() -> RenderResponse:
        view = GraphView(
            graph,
            request.width,
            request.height,
            rng=random.Random(request.seed),
            strict=False,
        )
        try:
            view.set_color_mode(request.color_mode)
            if request.color_mode is ColorMode.GIT:
                heat = GitHeatService(request.path).collect(CacheManager(request.path))
                if heat is not None:
                    view.apply_heat(heat)
            taken = view.run_until_settled(request.ticks)
            frame = view.render()
            return RenderResponse(
                tier=view.params.tier.value,
                ticks=taken,
                settled=view.simulation.settled,
                frame=frame.to_dict(),
            )
        finally:
            view.close()

    try:
        return await asyncio.to_thread(_do_render)
    except Exception as exc:
        raise _server_error("Render", exc)


@graph_router.post(
    "/heat",
    response_model=HeatMap,
    status_code=status.HTTP_200_OK,
    summary="Git touch counts per file",
)
async def heat(request: HeatRequest) -> HeatMap:
    service = GitHeatService(request.path)
    result = await asyncio.to_thread(
        service.collect, CacheManager(request.path), request.window_days
    )
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No git history available for this path.",
        )
    return result


@graph_router.post(
    "/affected",
    response_model=AffectedResponse,
    status_code=status.HTTP_200_OK,
    summary="Files affected by a set of changed paths",
)
async def affected(request: AffectedRequest) -> AffectedResponse:
    graph, _ = await _load_graph(request.path)
    changed = detect_changed_nodes(graph, request.changed_paths)
    return AffectedResponse(
        total=len(changed),
        nodes=[AffectedNode(node=c.node, reason=c.reason, level=c.level) for c in changed],
    )
