"""Debounced node search with keyboard-navigable suggestions."""

from __future__ import annotations

from typing import Optional, Sequence

from atlasic.layout.arena import LayoutNode

DEFAULT_LIMIT = 10
DEFAULT_DEBOUNCE_MS = 150.0


def suggest(nodes: Sequence[LayoutNode], query: str, limit: int = DEFAULT_LIMIT) -> list[LayoutNode]:
    """First *limit* nodes whose label or id contains *query*, ignoring case."""
    needle = query.strip().lower()
    if not needle:
        return []
    matches: list[LayoutNode] = []
    for node in nodes:
        if needle in node.label.lower() or needle in node.id.lower():
            matches.append(node)
            if len(matches) >= limit:
                break
    return matches


class SearchBox:
    """Search input state.

    Typing only records the query; suggestions are recomputed by
    :meth:`poll` once *debounce_ms* has passed without further input.

    Args:
        nodes: Searchable nodes.
        limit: Maximum suggestions.
        debounce_ms: Quiet period before suggestions refresh.
    """

    def __init__(
        self,
        nodes: Sequence[LayoutNode],
        limit: int = DEFAULT_LIMIT,
        debounce_ms: float = DEFAULT_DEBOUNCE_MS,
    ) -> None:
        self.nodes = nodes
        self.limit = limit
        self.debounce_ms = debounce_ms
        self.query = ""
        self.suggestions: list[LayoutNode] = []
        self.selected = -1
        self._due: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self._due is not None

    def set_nodes(self, nodes: Sequence[LayoutNode]) -> None:
        self.nodes = nodes
        self.clear()

    def input(self, text: str, now: float) -> None:
        self.query = text
        self._due = now + self.debounce_ms

    def poll(self, now: float) -> bool:
        """Refresh suggestions if the debounce period is over."""
        if self._due is None or now < self._due:
            return False
        self._due = None
        self.suggestions = suggest(self.nodes, self.query, self.limit)
        self.selected = -1
        return True

    def key_down(self) -> None:
        self.selected = min(self.selected + 1, len(self.suggestions) - 1)

    def key_up(self) -> None:
        self.selected = max(self.selected - 1, -1)

    def enter(self) -> Optional[LayoutNode]:
        """Node chosen by Enter: the selected suggestion, else an exact match."""
        if 0 <= self.selected < len(self.suggestions):
            return self.suggestions[self.selected]
        needle = self.query.strip().lower()
        if not needle:
            return None
        for node in self.nodes:
            if node.label.lower() == needle or node.id.lower() == needle:
                return node
        return None

    def clear(self) -> None:
        self.query = ""
        self.suggestions = []
        self.selected = -1
        self._due = None
