"""Source file reader with graceful encoding fallback.

Extractors work on decoded text.  Most files are UTF-8, but legacy
sources saved as Latin-1 or cp1252 should still be scanned rather than
dropped from the graph.
"""

from __future__ import annotations

import pathlib

import structlog

logger = structlog.get_logger(__name__)

# Encodings to attempt in order when reading source files.
_ENCODING_CHAIN: tuple[str, ...] = ("utf-8", "cp1252")


def read_source(file_path: pathlib.Path) -> str:
    """Read *file_path* as text, trying several encodings.

    Args:
        file_path: Absolute path to the source file.

    Returns:
        The decoded file contents.

    Raises:
        OSError: If the file cannot be read at all.
    """
    raw = file_path.read_bytes()

    for encoding in _ENCODING_CHAIN:
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError:
            continue

    # Last resort: decode with replacement chars.
    logger.warning("encoding_fallback", file=str(file_path), tried=_ENCODING_CHAIN)
    return raw.decode("utf-8", errors="replace")
