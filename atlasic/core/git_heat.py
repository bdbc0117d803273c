"""Git "heat" feed: how often each file was touched in recent history.

Streams ``git log --name-only`` line by line and counts one touch per
file per commit.  The result is an input to the visualizer's colour model
and never changes the graph itself.
"""

from __future__ import annotations

import os
import pathlib
import subprocess
from typing import Optional

import structlog

from atlasic.config import settings
from atlasic.core.cache import CacheManager
from atlasic.models.graph import HeatMap

logger = structlog.get_logger(__name__)

METRIC = "touches"


class GitHeatError(RuntimeError):
    """Raised when ``git log`` exits with a non-zero status."""


class GitHeatService:
    """Computes per-file touch counts for a git working tree.

    Args:
        workspace_root: Any directory inside the repository.
    """

    def __init__(self, workspace_root: str | pathlib.Path) -> None:
        self.workspace_root = pathlib.Path(workspace_root)

    def _run_git(self, args: list[str], cwd: pathlib.Path | None = None) -> Optional[str]:
        try:
            proc = subprocess.run(
                ["git", *args],
                cwd=cwd or self.workspace_root,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            logger.warning("git_unavailable", error=str(exc))
            return None
        return proc.stdout.strip() if proc.returncode == 0 else None

    def get_repo_root(self) -> Optional[pathlib.Path]:
        out = self._run_git(["rev-parse", "--show-toplevel"])
        return pathlib.Path(out) if out else None

    def get_head(self, repo_root: pathlib.Path) -> Optional[str]:
        return self._run_git(["rev-parse", "HEAD"], cwd=repo_root) or None

    def compute_touches(self, repo_root: pathlib.Path, window_days: int) -> dict[str, float]:
        """Count commits touching each file within the last *window_days*.

        Returns:
            Absolute path to touch count.

        Raises:
            GitHeatError: If ``git log`` fails.
        """
        args = [
            "git",
            "-c",
            "core.quotepath=false",
            "log",
            "--name-only",
            f"--since={window_days}.days",
            "--pretty=format:COMMIT:%H",
        ]
        counts: dict[str, float] = {}
        with subprocess.Popen(
            args,
            cwd=repo_root,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
        ) as proc:
            for line in proc.stdout:
                relative = line.strip()
                if not relative or relative.startswith("COMMIT:") or relative == ".gitattributes":
                    continue
                counts[relative] = counts.get(relative, 0) + 1
            returncode = proc.wait()

        if returncode != 0:
            raise GitHeatError(f"git log failed with exit code {returncode}")

        return {
            os.path.join(repo_root, *relative.split("/")): score
            for relative, score in counts.items()
        }

    def collect(
        self,
        cache: CacheManager | None = None,
        window_days: int | None = None,
    ) -> Optional[HeatMap]:
        """Build a :class:`HeatMap`, reusing a cached one for the same HEAD.

        Any failure (not a repository, git missing, log error) is logged
        and reported as ``None``.
        """
        window = window_days or settings.heat_window_days
        try:
            repo_root = self.get_repo_root()
            if repo_root is None:
                logger.warning("git_heat_skipped", reason="not a git repository")
                return None
            head = self.get_head(repo_root)
            if head is None:
                return None

            cache_file = f"git-heat-{METRIC}-{window}d-{head}.json"
            if cache is not None:
                cached = cache.load_json(cache_file)
                if cached and cached.get("head") == head and cached.get("window_days") == window:
                    return HeatMap.model_validate(cached)

            scores = self.compute_touches(repo_root, window)
            heat = HeatMap(
                scores=scores,
                max_score=max(scores.values(), default=0),
                head=head,
                window_days=window,
            )
            if cache is not None:
                cache.save_json(cache_file, heat.model_dump(mode="json"))
            return heat
        except Exception:
            logger.exception("git_heat_failed", root=str(self.workspace_root))
            return None
