"""FastAPI application factory and lifespan management."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from atlasic import __version__
from atlasic.api.routes import graph_router
from atlasic.config import settings
from atlasic.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging once on startup."""
    setup_logging(settings.log_level, settings.log_json)
    yield


def create_app() -> FastAPI:
    """Build and return the configured FastAPI application.

    Returns:
        A fully wired :class:`FastAPI` instance.
    """
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description=(
            "Atlasic dependency graph service: scans a workspace, resolves "
            "imports across JS/TS, Python, Java and Go, and lays the graph "
            "out for interactive rendering."
        ),
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(graph_router, tags=["Dependency Graph"])
    return app


app = create_app()
