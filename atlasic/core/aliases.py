"""Import alias discovery from ``tsconfig``-style configuration files.

``tsconfig.json`` is JSON with comments and trailing commas.  Alias values
are frequently globs such as ``"src/**/*"``, which a regex-based comment
stripper would mangle, so :func:`strip_json_comments` walks the text once
and only recognises comments outside string literals.
"""

from __future__ import annotations

import json
import os
import pathlib
from typing import Iterator, Optional

import structlog

from atlasic.config import settings

logger = structlog.get_logger(__name__)

_QUOTES = ('"', "'")


def strip_json_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments and trailing commas from *text*.

    Quoted strings (single or double, with backslash escapes) are copied
    through untouched.

    Args:
        text: Raw JSON-with-comments document.

    Returns:
        Text that :func:`json.loads` accepts when the input was otherwise
        valid JSON.
    """
    return _drop_trailing_commas(_drop_comments(text))


def _drop_comments(text: str) -> str:
    out: list[str] = []
    quote: Optional[str] = None
    i = 0
    n = len(text)

    while i < n:
        char = text[i]
        nxt = text[i + 1] if i + 1 < n else ""

        if quote is not None:
            out.append(char)
            if char == "\\" and nxt:
                out.append(nxt)
                i += 2
                continue
            if char == quote:
                quote = None
            i += 1
        elif char in _QUOTES:
            quote = char
            out.append(char)
            i += 1
        elif char == "/" and nxt == "/":
            end = text.find("\n", i)
            if end == -1:
                break
            # keep the newline so line structure survives
            i = end
        elif char == "/" and nxt == "*":
            end = text.find("*/", i + 2)
            i = n if end == -1 else end + 2
        else:
            out.append(char)
            i += 1

    return "".join(out)


def _drop_trailing_commas(text: str) -> str:
    out: list[str] = []
    quote: Optional[str] = None
    i = 0
    n = len(text)

    while i < n:
        char = text[i]
        if quote is not None:
            out.append(char)
            if char == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if char == quote:
                quote = None
        elif char in _QUOTES:
            quote = char
            out.append(char)
        elif char == ",":
            j = i + 1
            while j < n and text[j].isspace():
                j += 1
            if j >= n or text[j] not in "}]":
                out.append(char)
        else:
            out.append(char)
        i += 1

    return "".join(out)


def _strip_wildcard(value: str) -> str:
    return value[:-2] if value.endswith("/*") else value


class PathAliasResolver:
    """Maps import alias prefixes (``@/``, ``~lib``) to directories.

    The first existing file in *locations* is read; a missing or broken
    config leaves the alias table empty and is only logged.

    Args:
        workspace_root: Root directory the locations are relative to.
        locations: Candidate config paths, tried in order.  Falls back to
            :pyattr:`atlasic.config.Settings.alias_config_locations`.
    """

    def __init__(
        self,
        workspace_root: pathlib.Path,
        locations: list[str] | None = None,
    ) -> None:
        self.workspace_root = workspace_root
        self.locations = locations if locations is not None else settings.alias_config_locations
        self.config_path: Optional[pathlib.Path] = None
        self.aliases: dict[str, pathlib.Path] = {}
        self.load()

    def find_config(self) -> Optional[pathlib.Path]:
        for location in self.locations:
            candidate = self.workspace_root / location
            if candidate.is_file():
                return candidate
        return None

    def load(self) -> dict[str, pathlib.Path]:
        """(Re)read the alias table from disk.

        Returns:
            The alias table; empty when no usable config exists.
        """
        self.aliases = {}
        self.config_path = self.find_config()
        if self.config_path is None:
            return self.aliases

        try:
            raw = self.config_path.read_text(encoding="utf-8")
            config = json.loads(strip_json_comments(raw))
            paths = (config.get("compilerOptions") or {}).get("paths") or {}
            config_dir = self.config_path.parent
            for alias, targets in paths.items():
                if isinstance(targets, str):
                    targets = [targets]
                if not targets:
                    continue
                target = _strip_wildcard(targets[0])
                resolved = target if os.path.isabs(target) else os.path.join(config_dir, target)
                self.aliases[_strip_wildcard(alias)] = pathlib.Path(os.path.normpath(resolved))
        except (OSError, ValueError, AttributeError, TypeError) as exc:
            self.aliases = {}
            logger.warning("alias_config_invalid", path=str(self.config_path), error=str(exc))
            return self.aliases

        logger.debug("aliases_loaded", path=str(self.config_path), count=len(self.aliases))
        return self.aliases

    def candidates(self, specifier: str) -> Iterator[pathlib.Path]:
        """Yield base paths for every alias that prefixes *specifier*.

        The alias prefix is replaced with its directory and the remainder
        appended, e.g. ``@/utils/helper`` with ``@ -> /ws/src`` gives
        ``/ws/src/utils/helper``.
        """
        for alias, directory in self.aliases.items():
            if not specifier.startswith(alias):
                continue
            remainder = specifier[len(alias):].lstrip("/\\")
            base = os.path.join(directory, remainder) if remainder else str(directory)
            yield pathlib.Path(os.path.normpath(base))
