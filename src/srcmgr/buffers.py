"""Registry of every source buffer known to a front end.

Buffers are referred to by integer ids handed out in registration order,
starting at 1. Id 0 means "no buffer".
"""

from __future__ import annotations

import logging
import os
from bisect import bisect_left, insort
from dataclasses import dataclass, field
from typing import NamedTuple

from srcmgr.errors import InvalidBufferIdError
from srcmgr.filesystem import FileLoader
from srcmgr.line_index import LineIndex
from srcmgr.source import SourceBuffer, SourceLocation

logger = logging.getLogger(__name__)


@dataclass
class BufferRecord:
    buffer: SourceBuffer
    # Points into the buffer whose processing pulled this one in.
    include_location: SourceLocation = field(default_factory=SourceLocation)
    line_index: LineIndex = field(init=False)

    def __post_init__(self) -> None:
        self.line_index = LineIndex(self.buffer)


class IncludeResult(NamedTuple):
    buffer_id: int
    path: str


class BufferRegistry:
    """Owns source buffers and maps locations back to them."""

    def __init__(self, loader: FileLoader | None = None) -> None:
        self.loader = loader or FileLoader()
        self.include_dirs: list[str] = []
        self._records: list[BufferRecord] = []
        # (end address, id) pairs kept sorted by end address.
        self._ends: list[tuple[int, int]] = []
        self._last_found_id = 0

    # ── Registration ──────────────────────────────────────────────

    def add_buffer(
        self, buffer: SourceBuffer, include_location: SourceLocation | None = None,
    ) -> int:
        record = BufferRecord(buffer, include_location or SourceLocation())
        self._records.append(record)
        buffer_id = len(self._records)
        insort(self._ends, (buffer.end, buffer_id))
        logger.debug("registered %s as buffer %d (%d bytes)", buffer.identifier, buffer_id, buffer.size)
        return buffer_id

    def add_content(
        self,
        content: bytes | str,
        identifier: str = "<buffer>",
        include_location: SourceLocation | None = None,
    ) -> int:
        if isinstance(content, str):
            buffer = SourceBuffer.from_text(content, identifier)
        else:
            buffer = SourceBuffer(content, identifier)
        return self.add_buffer(buffer, include_location)

    def add_include_file(
        self, filename: str, include_location: SourceLocation | None = None,
    ) -> IncludeResult:
        """Load ``filename`` directly, then from each include directory in turn.

        Returns buffer id 0 when no candidate could be read.
        """
        candidates = [filename] + [os.path.join(d, filename) for d in self.include_dirs]
        path = filename
        for path in candidates:
            try:
                buffer = self.loader.load(path)
            except OSError as e:
                logger.debug("could not load %s: %s", path, e)
                continue
            return IncludeResult(self.add_buffer(buffer, include_location), path)
        logger.info("include file %s not found in %d location(s)", filename, len(candidates))
        return IncludeResult(0, path)

    # ── Lookup ────────────────────────────────────────────────────

    def find_buffer_containing(self, loc: SourceLocation) -> int:
        """Return the id of the buffer ``loc`` points into, or 0."""
        if not loc.is_valid:
            return 0
        ptr = loc.pointer

        if self._last_found_id:
            buffer = self._records[self._last_found_id - 1].buffer
            if buffer.start <= ptr <= buffer.end:
                return self._last_found_id

        i = bisect_left(self._ends, (ptr, 0))
        if i < len(self._ends):
            buffer_id = self._ends[i][1]
            if ptr >= self._records[buffer_id - 1].buffer.start:
                self._last_found_id = buffer_id
                return buffer_id
        return 0

    def is_valid_buffer_id(self, buffer_id: int) -> bool:
        return 1 <= buffer_id <= len(self._records)

    def get_record(self, buffer_id: int) -> BufferRecord:
        if not self.is_valid_buffer_id(buffer_id):
            raise InvalidBufferIdError(f"no buffer with id {buffer_id}")
        return self._records[buffer_id - 1]

    def get_buffer(self, buffer_id: int) -> SourceBuffer:
        return self.get_record(buffer_id).buffer

    def get_include_location(self, buffer_id: int) -> SourceLocation:
        return self.get_record(buffer_id).include_location

    @property
    def num_buffers(self) -> int:
        return len(self._records)

    @property
    def main_file_id(self) -> int:
        return 1 if self._records else 0
