"""Reading source files from disk."""

from __future__ import annotations

from pathlib import Path

from srcmgr.source import SourceBuffer


class FileLoader:
    """Loads a file into a SourceBuffer. Raises OSError on failure."""

    def load(self, path: str) -> SourceBuffer:
        return SourceBuffer(Path(path).read_bytes(), path)
