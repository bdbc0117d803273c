"""Tests for the per-language lexical dependency extractors."""

import pathlib

import pytest

from atlasic.core.aliases import PathAliasResolver
from atlasic.parsers import (
    BUILTIN_EXTRACTORS,
    ExtractorFactory,
    GoDependencyExtractor,
    JavaDependencyExtractor,
    JavaScriptDependencyExtractor,
    PythonDependencyExtractor,
)


def _targets(links):
    return [pathlib.Path(link.target) for link in links]


def _extract(extractor_cls, root, relative, aliases=None):
    path = root / relative
    return extractor_cls(root, aliases).extract(path, path.read_text(encoding="utf-8"))


class TestJavaScriptExtractor:
    def test_relative_import_probes_extensions(self, ts_workspace):
        links = _extract(JavaScriptDependencyExtractor, ts_workspace, "a.ts")
        assert _targets(links) == [ts_workspace / "b.ts"]
        assert links[0].source == str(ts_workspace / "a.ts")
        assert links[0].type.value == "dependency"

    def test_all_three_forms_are_found(self, make_tree):
        root = make_tree(
            {
                "main.js": (
                    "import a from './a';\n"
                    "import './side';\n"
                    "const b = require('./b');\n"
                    "const c = await import('./c');\n"
                ),
                "a.js": "",
                "side.jsx": "",
                "b.ts": "",
                "c.tsx": "",
            }
        )
        links = _extract(JavaScriptDependencyExtractor, root, "main.js")
        assert sorted(p.name for p in _targets(links)) == ["a.js", "b.ts", "c.tsx", "side.jsx"]

    def test_index_file_in_directory(self, make_tree):
        root = make_tree({"app.ts": "import x from './lib';", "lib/index.ts": ""})
        links = _extract(JavaScriptDependencyExtractor, root, "app.ts")
        assert _targets(links) == [root / "lib" / "index.ts"]

    def test_parent_relative_import(self, make_tree):
        root = make_tree({"src/deep/a.ts": "import x from '../b';", "src/b.ts": ""})
        links = _extract(JavaScriptDependencyExtractor, root, "src/deep/a.ts")
        assert _targets(links) == [root / "src" / "b.ts"]

    def test_relative_python_target(self, make_tree):
        root = make_tree({"ui.js": "const x = require('./worker');", "worker.py": ""})
        assert _targets(_extract(JavaScriptDependencyExtractor, root, "ui.js")) == [
            root / "worker.py"
        ]

    def test_asset_imports_are_dropped(self, make_tree):
        root = make_tree(
            {
                "a.ts": "import './App.css';\nimport data from './data.json';\n",
                "App.css": "",
                "data.json": "{}",
            }
        )
        assert _extract(JavaScriptDependencyExtractor, root, "a.ts") == []

    def test_re_exports_are_found(self, make_tree):
        root = make_tree(
            {
                "index.ts": "export { a } from './a';\nexport * from './b';\nexport const c = './c';\n",
                "a.ts": "",
                "b.ts": "",
                "c.ts": "",
            }
        )
        links = _extract(JavaScriptDependencyExtractor, root, "index.ts")
        assert sorted(p.name for p in _targets(links)) == ["a.ts", "b.ts"]

    @pytest.mark.parametrize(
        "source",
        [
            "import React from 'react';",
            "const _ = require('lodash');",
            "import('@scope/pkg');",
            "import x from 'react/jsx-runtime';",
        ],
    )
    def test_bare_packages_produce_no_links(self, make_tree, source):
        root = make_tree({"a.ts": source, "react.ts": "", "lodash.ts": ""})
        assert _extract(JavaScriptDependencyExtractor, root, "a.ts") == []

    def test_unresolved_relative_is_dropped(self, make_tree):
        root = make_tree({"a.ts": "import x from './missing';"})
        assert _extract(JavaScriptDependencyExtractor, root, "a.ts") == []

    def test_alias_resolves_to_absolute_path(self, make_tree):
        root = make_tree(
            {
                "tsconfig.json": '{"compilerOptions": {"paths": {"@/*": ["src/*"]}}}',
                "src/utils/helper.ts": "export const h = 1;",
                "src/app.ts": "import { h } from '@/utils/helper';",
            }
        )
        aliases = PathAliasResolver(root)
        links = _extract(JavaScriptDependencyExtractor, root, "src/app.ts", aliases)
        assert _targets(links) == [root / "src" / "utils" / "helper.ts"]

    def test_parallel_imports_are_not_deduplicated(self, make_tree):
        root = make_tree(
            {"a.ts": "import { x } from './b';\nimport { y } from './b';\n", "b.ts": ""}
        )
        assert len(_extract(JavaScriptDependencyExtractor, root, "a.ts")) == 2


class TestPythonExtractor:
    def test_from_dot_import_sibling(self, make_tree):
        root = make_tree({"pkg/x.py": "from . import y\n", "pkg/y.py": ""})
        links = _extract(PythonDependencyExtractor, root, "pkg/x.py")
        assert _targets(links) == [root / "pkg" / "y.py"]

    def test_relative_module_with_parent_dots(self, make_tree):
        root = make_tree(
            {
                "pkg/sub/x.py": "from ..core import thing\n",
                "pkg/core/__init__.py": "",
            }
        )
        links = _extract(PythonDependencyExtractor, root, "pkg/sub/x.py")
        assert _targets(links) == [root / "pkg" / "core" / "__init__.py"]

    def test_from_dot_import_falls_back_to_package_init(self, make_tree):
        root = make_tree({"pkg/x.py": "from . import VERSION\n", "pkg/__init__.py": ""})
        links = _extract(PythonDependencyExtractor, root, "pkg/x.py")
        assert _targets(links) == [root / "pkg" / "__init__.py"]

    def test_absolute_project_import(self, make_tree):
        root = make_tree(
            {
                "app/main.py": "from app.services.users import get_user\n",
                "app/services/users.py": "",
            }
        )
        links = _extract(PythonDependencyExtractor, root, "app/main.py")
        assert _targets(links) == [root / "app" / "services" / "users.py"]

    def test_parenthesized_and_indented_imports(self, make_tree):
        root = make_tree(
            {
                "pkg/x.py": "try:\n    from .a import (\n        one,\n        two,\n    )\nexcept ImportError:\n    pass\n",
                "pkg/a.py": "",
            }
        )
        links = _extract(PythonDependencyExtractor, root, "pkg/x.py")
        assert _targets(links) == [root / "pkg" / "a.py"]

    def test_stdlib_imports_produce_no_links(self, make_tree):
        root = make_tree(
            {
                "x.py": "from os import path\nfrom collections.abc import Mapping\nfrom __future__ import annotations\n",
                "os.py": "",
                "collections/abc.py": "",
            }
        )
        assert _extract(PythonDependencyExtractor, root, "x.py") == []

    def test_project_packages_named_like_stdlib_modules_resolve(self, make_tree):
        root = make_tree(
            {
                "main.py": "from platform.db import connect\nfrom types.user import User\n",
                "platform/db.py": "",
                "types/user.py": "",
            }
        )
        assert _targets(_extract(PythonDependencyExtractor, root, "main.py")) == [
            root / "platform" / "db.py",
            root / "types" / "user.py",
        ]

    def test_bare_import_is_not_resolved(self, make_tree):
        root = make_tree({"x.py": "import y\nimport pkg.z\n", "y.py": "", "pkg/z.py": ""})
        assert _extract(PythonDependencyExtractor, root, "x.py") == []

    def test_third_party_absolute_import_is_dropped(self, make_tree):
        root = make_tree({"x.py": "from fastapi import FastAPI\n"})
        assert _extract(PythonDependencyExtractor, root, "x.py") == []


class TestJavaExtractor:
    def test_project_class_import(self, make_tree):
        root = make_tree(
            {
                "com/acme/App.java": "package com.acme;\nimport com.acme.util.Strings;\n",
                "com/acme/util/Strings.java": "",
            }
        )
        links = _extract(JavaDependencyExtractor, root, "com/acme/App.java")
        assert _targets(links) == [root / "com" / "acme" / "util" / "Strings.java"]

    def test_static_import_drops_member(self, make_tree):
        root = make_tree(
            {
                "App.java": "import static com.acme.Util.helper;\n",
                "com/acme/Util.java": "",
            }
        )
        assert _targets(_extract(JavaDependencyExtractor, root, "App.java")) == [
            root / "com" / "acme" / "Util.java"
        ]

    def test_stdlib_skipped_and_wildcard_probes_package_path(self, make_tree):
        root = make_tree(
            {
                "App.java": "import java.util.List;\nimport javax.inject.Inject;\nimport com.acme.*;\n",
                "java/util/List.java": "",
                "com/acme.java": "",
            }
        )
        links = _extract(JavaDependencyExtractor, root, "App.java")
        assert _targets(links) == [root / "com" / "acme.java"]


class TestGoExtractor:
    def test_single_segment_import_is_stdlib(self, make_tree):
        root = make_tree({"main.go": 'package main\n\nimport "fmt"\n', "fmt/fmt.go": ""})
        assert _extract(GoDependencyExtractor, root, "main.go") == []

    def test_block_import_resolves_first_go_file(self, make_tree):
        root = make_tree(
            {
                "main.go": 'package main\n\nimport (\n\t"fmt"\n\tstore "internal/store"\n)\n',
                "internal/store/b.go": "",
                "internal/store/a.go": "",
                "internal/store/README.md": "",
            }
        )
        links = _extract(GoDependencyExtractor, root, "main.go")
        assert _targets(links) == [root / "internal" / "store" / "a.go"]

    def test_module_prefix_is_stripped(self, make_tree):
        root = make_tree(
            {
                "go.mod": "module github.com/acme/app\n\ngo 1.22\n",
                "cmd/main.go": 'package main\nimport "github.com/acme/app/pkg/db"\n',
                "pkg/db/db.go": "",
            }
        )
        links = _extract(GoDependencyExtractor, root, "cmd/main.go")
        assert _targets(links) == [root / "pkg" / "db" / "db.go"]

    def test_missing_package_is_dropped(self, make_tree):
        root = make_tree({"main.go": 'import "github.com/other/lib"\n'})
        assert _extract(GoDependencyExtractor, root, "main.go") == []


class TestExtractorFactory:
    def test_dispatch_by_extension(self, tmp_path):
        factory = ExtractorFactory(tmp_path)
        for cls in BUILTIN_EXTRACTORS:
            factory.register(cls)

        assert isinstance(factory.for_path(pathlib.Path("a.TSX")), JavaScriptDependencyExtractor)
        assert isinstance(factory.get(".py"), PythonDependencyExtractor)
        assert factory.get(".py") is factory.get(".py")
        assert factory.get(".rs") is None
        assert ".go" in factory.supported_extensions
