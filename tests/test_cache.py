"""Tests for the workspace-local JSON cache."""

from atlasic.core.builder import generate_graph
from atlasic.core.cache import CacheManager


class TestGraphCache:
    def test_round_trip_preserves_nodes_and_links(self, ts_workspace):
        graph = generate_graph(ts_workspace)
        cache = CacheManager(ts_workspace)

        assert cache.save_graph(graph) is True
        loaded = cache.load_graph()

        assert loaded == graph
        assert [n.id for n in loaded.nodes] == [n.id for n in graph.nodes]
        assert cache.graph_path == ts_workspace / ".atlasic" / "graph-cache.json"

    def test_save_overwrites_previous_snapshot(self, ts_workspace, triangle_graph):
        cache = CacheManager(ts_workspace)
        cache.save_graph(generate_graph(ts_workspace))
        cache.save_graph(triangle_graph)
        assert cache.load_graph() == triangle_graph

    def test_miss_returns_none(self, tmp_path):
        assert CacheManager(tmp_path).load_graph() is None
        assert not (tmp_path / ".atlasic").exists()

    def test_corrupt_snapshot_is_a_miss(self, tmp_path):
        cache = CacheManager(tmp_path)
        cache.cache_dir.mkdir()
        cache.graph_path.write_text("{not json", encoding="utf-8")
        assert cache.load_graph() is None

    def test_undecodable_snapshot_is_a_miss(self, tmp_path):
        cache = CacheManager(tmp_path)
        cache.cache_dir.mkdir()
        cache.graph_path.write_bytes(b"\xff\xfe\x00garbage")
        assert cache.load_graph() is None

    def test_clear_cache(self, tmp_path, triangle_graph):
        cache = CacheManager(tmp_path)
        cache.save_graph(triangle_graph)
        cache.clear_cache()
        assert cache.load_graph() is None
        cache.clear_cache()

    def test_custom_directory_name(self, tmp_path, triangle_graph):
        cache = CacheManager(tmp_path, cache_dir_name=".graphs")
        cache.save_graph(triangle_graph)
        assert (tmp_path / ".graphs" / "graph-cache.json").is_file()


class TestJsonDocuments:
    def test_round_trip(self, tmp_path):
        cache = CacheManager(tmp_path)
        assert cache.save_json("doc.json", {"a": [1, 2]}) is True
        assert cache.load_json("doc.json") == {"a": [1, 2]}

    def test_unserialisable_data_is_not_written(self, tmp_path):
        cache = CacheManager(tmp_path)
        assert cache.save_json("doc.json", {"a": object()}) is False
        assert cache.load_json("doc.json") is None
