"""Application-wide configuration and settings.

Uses ``pydantic-settings`` so values can be overridden via environment
variables prefixed with ``ATLASIC_``.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Global settings for graph generation and the visualizer.

    Attributes:
        app_name: Display name of the application.
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_json: Emit JSON log lines instead of the console format.
        ignore_patterns: Case-insensitive substrings; any path relative to
            the workspace root containing one of them is skipped.
        supported_extensions: File extensions collected by the crawler.
        max_depth: Deepest directory level the crawler descends into.
        alias_config_locations: Candidate ``tsconfig``-style files, tried
            in order, relative to the workspace root.
        cache_dir_name: Workspace-local directory holding cached JSON.
        graph_cache_file: File name of the graph snapshot.
        heat_window_days: ``git log --since`` window for the heat feed.
        quadtree_capacity: Points per leaf before a hit-test quad splits.
        hit_radius: Pointer hit-test radius in world units.
        double_click_ms: Window in which a second click opens the file.
        search_debounce_ms: Delay between typing and suggestion refresh.
        search_limit: Maximum number of search suggestions.
    """

    app_name: str = "Atlasic"
    log_level: str = "INFO"
    log_json: bool = False
    ignore_patterns: list[str] = [
        "node_modules",
        "dist",
        "build",
        ".git",
        "__pycache__",
        ".venv",
        ".next",
        "out",
        "coverage",
        ".vscode",
        ".idea",
        ".cache",
    ]
    supported_extensions: list[str] = [
        ".ts",
        ".tsx",
        ".js",
        ".jsx",
        ".py",
        ".java",
        ".go",
        ".c",
        ".h",
        ".cpp",
        ".hpp",
        ".rs",
    ]
    max_depth: int = 10
    alias_config_locations: list[str] = [
        "tsconfig.json",
        "frontend/tsconfig.json",
        "src/frontend/tsconfig.json",
    ]

    # Cache
    cache_dir_name: str = ".atlasic"
    graph_cache_file: str = "graph-cache.json"
    heat_window_days: int = 30

    # Visualizer
    quadtree_capacity: int = 8
    hit_radius: float = 12.0
    double_click_ms: float = 350.0
    search_debounce_ms: float = 150.0
    search_limit: int = 10

    model_config = {"env_prefix": "ATLASIC_", "env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
