"""Tests for the git touch-count heat feed."""

import shutil
import subprocess

import pytest

from atlasic.core.cache import CacheManager
from atlasic.core.git_heat import GitHeatError, GitHeatService

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _git(cwd, *args):
    subprocess.run(
        ["git", "-c", "user.name=t", "-c", "user.email=t@example.com", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
    )


@pytest.fixture
def repo(make_tree):
    root = make_tree({"a.ts": "1", "b.ts": "1", ".gitattributes": "* text=auto"})
    _git(root, "init", "-q")
    _git(root, "add", ".")
    _git(root, "commit", "-q", "-m", "one")
    (root / "a.ts").write_text("2")
    _git(root, "commit", "-q", "-am", "two")
    return root


@requires_git
class TestGitHeatService:
    def test_counts_touches_per_file(self, repo):
        service = GitHeatService(repo)
        repo_root = service.get_repo_root()
        scores = service.compute_touches(repo_root, 30)

        by_name = {path.rsplit("/", 1)[-1].rsplit("\\", 1)[-1]: score for path, score in scores.items()}
        assert by_name == {"a.ts": 2, "b.ts": 1}

    def test_collect_builds_and_caches_heat_map(self, repo):
        cache = CacheManager(repo)
        heat = GitHeatService(repo).collect(cache, window_days=30)

        assert heat is not None
        assert heat.max_score == 2
        assert heat.window_days == 30
        assert heat.head and len(heat.head) == 40
        assert cache.load_json(f"git-heat-touches-30d-{heat.head}.json")["max_score"] == 2

        again = GitHeatService(repo).collect(cache, window_days=30)
        assert again == heat

    def test_collect_outside_repository_is_none(self, tmp_path):
        assert GitHeatService(tmp_path).collect() is None

    def test_log_failure_raises(self, tmp_path):
        with pytest.raises(GitHeatError):
            GitHeatService(tmp_path).compute_touches(tmp_path, 30)
