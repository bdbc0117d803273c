"""Filename/directory heuristics that assign a :class:`NodeCategory`.

Rules are evaluated top to bottom and the first match wins, so the order
of :data:`CATEGORY_RULES` is part of the contract: a file under
``tests/components/`` is a test, not a component.
"""

from __future__ import annotations

import pathlib
from dataclasses import dataclass
from typing import Callable

from atlasic.models.graph import NodeCategory


@dataclass(frozen=True)
class CategoryRule:
    """A named predicate over ``(file_name, dir_name)``, both lowercased."""

    name: str
    category: NodeCategory
    matches: Callable[[str, str], bool]


CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(
        "test",
        NodeCategory.TEST,
        lambda f, d: ".test." in f or ".spec." in f or "test" in d,
    ),
    CategoryRule("config", NodeCategory.CONFIG, lambda f, d: "config" in f),
    CategoryRule(
        "component",
        NodeCategory.COMPONENT,
        lambda f, d: "component" in d or "component" in f,
    ),
    CategoryRule("api", NodeCategory.API, lambda f, d: "api" in d or "service" in d),
    CategoryRule("utility", NodeCategory.UTILITY, lambda f, d: "util" in d or "helper" in d),
    CategoryRule("model", NodeCategory.MODEL, lambda f, d: "model" in d or "type" in d),
)


def categorize_file(
    file_path: str | pathlib.Path,
    root: str | pathlib.Path | None = None,
) -> NodeCategory:
    """Return the category of the first rule matching *file_path*.

    Directory checks run on the path relative to *root* when the file lives
    under it, so the location of the workspace itself never matters.

    Args:
        file_path: Absolute path of the file.
        root: Workspace root, if known.

    Returns:
        The matching category, or :attr:`NodeCategory.OTHER`.
    """
    path = pathlib.PurePath(file_path)
    file_name = path.name.lower()
    parent = path.parent
    if root is not None:
        try:
            parent = parent.relative_to(root)
        except ValueError:
            pass
    dir_name = parent.as_posix().lower()
    for rule in CATEGORY_RULES:
        if rule.matches(file_name, dir_name):
            return rule.category
    return NodeCategory.OTHER
