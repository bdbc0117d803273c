"""Tests for tsconfig sanitisation and alias resolution."""

import json
import pathlib

from atlasic.core.aliases import PathAliasResolver, strip_json_comments


class TestStripJsonComments:
    def test_glob_inside_string_survives(self):
        text = '{"paths": {"@/*": ["src/**/*"]}}'
        assert json.loads(strip_json_comments(text)) == {"paths": {"@/*": ["src/**/*"]}}

    def test_comments_outside_strings_are_removed(self):
        text = '{\n  // line comment\n  "a": 1, /* block */ "b": "http://x/y"\n}'
        assert json.loads(strip_json_comments(text)) == {"a": 1, "b": "http://x/y"}

    def test_trailing_commas_are_removed(self):
        text = '{"a": [1, 2,], "b": {"c": 3,},}'
        assert json.loads(strip_json_comments(text)) == {"a": [1, 2], "b": {"c": 3}}

    def test_comma_inside_string_is_kept(self):
        text = '{"a": "x,}"}'
        assert json.loads(strip_json_comments(text)) == {"a": "x,}"}

    def test_escaped_quote_does_not_end_string(self):
        text = r'{"a": "say \"//hi\"", "b": 2}'
        assert json.loads(strip_json_comments(text)) == {"a": 'say "//hi"', "b": 2}

    def test_single_quoted_string_is_protected(self):
        assert strip_json_comments("['/* x */']") == "['/* x */']"

    def test_unterminated_block_comment_drops_rest(self):
        assert strip_json_comments('{"a": 1} /* open') == '{"a": 1} '


class TestPathAliasResolver:
    def test_loads_first_existing_location(self, make_tree):
        root = make_tree(
            {
                "frontend/tsconfig.json": """{
                  "compilerOptions": {
                    // aliases
                    "paths": {"@/*": ["src/*"], "~lib": ["../lib"],},
                  },
                }""",
            }
        )
        resolver = PathAliasResolver(root)

        assert resolver.config_path == root / "frontend" / "tsconfig.json"
        assert resolver.aliases == {
            "@": root / "frontend" / "src",
            "~lib": root / "lib",
        }

    def test_missing_config_gives_empty_table(self, tmp_path):
        resolver = PathAliasResolver(tmp_path)
        assert resolver.config_path is None
        assert resolver.aliases == {}

    def test_malformed_config_is_not_fatal(self, make_tree):
        root = make_tree({"tsconfig.json": "{ this is not json"})
        resolver = PathAliasResolver(root)
        assert resolver.aliases == {}

    def test_non_object_paths_are_not_fatal(self, make_tree):
        root = make_tree({"tsconfig.json": '{"compilerOptions": {"paths": [1, 2]}}'})
        assert PathAliasResolver(root).aliases == {}

    def test_absolute_target_is_kept(self, make_tree, tmp_path):
        target = (tmp_path / "shared").as_posix()
        root = make_tree(
            {"tsconfig.json": json.dumps({"compilerOptions": {"paths": {"#s/*": [target + "/*"]}}})}
        )
        assert PathAliasResolver(root).aliases["#s"] == pathlib.Path(target)

    def test_candidates_rewrite_prefix(self, make_tree):
        root = make_tree({"tsconfig.json": '{"compilerOptions": {"paths": {"@/*": ["src/*"]}}}'})
        resolver = PathAliasResolver(root)

        assert list(resolver.candidates("@/utils/helper")) == [root / "src" / "utils" / "helper"]
        assert list(resolver.candidates("./local")) == []

    def test_explicit_locations_override_defaults(self, make_tree):
        root = make_tree(
            {
                "tsconfig.json": '{"compilerOptions": {"paths": {"@/*": ["a/*"]}}}',
                "jsconfig.json": '{"compilerOptions": {"paths": {"@/*": ["b/*"]}}}',
            }
        )
        resolver = PathAliasResolver(root, ["jsconfig.json"])
        assert resolver.aliases == {"@": root / "b"}
