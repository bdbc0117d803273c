"""Atlasic: codebase dependency graphs with an interactive force layout."""

__version__ = "0.3.0"
