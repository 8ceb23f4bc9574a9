"""Newline-offset tables for fast line lookups.

Each buffer gets one table holding the byte offset of every ``\\n`` it
contains. The table is stored in the narrowest unsigned integer width able to
address the whole buffer, and is built the first time a line is requested.
"""

from __future__ import annotations

import logging
from array import array
from bisect import bisect_left
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from srcmgr.errors import BufferTooLargeError
from srcmgr.source import SourceBuffer

logger = logging.getLogger(__name__)


def _typecode(nbytes: int) -> str:
    for code in "BHILQ":
        if array(code).itemsize == nbytes:
            return code
    raise RuntimeError(f"no unsigned array typecode is {nbytes} bytes wide")


class OffsetWidth(Enum):
    W8 = 8
    W16 = 16
    W32 = 32
    W64 = 64

    @property
    def max_offset(self) -> int:
        return (1 << self.value) - 1

    @property
    def typecode(self) -> str:
        return _typecode(self.value // 8)

    @classmethod
    def for_size(cls, size: int) -> OffsetWidth:
        """Pick the narrowest width whose maximum value is >= ``size``."""
        for width in cls:
            if size <= width.max_offset:
                return width
        raise BufferTooLargeError(f"buffer of {size} bytes exceeds 64-bit offsets")


@dataclass(frozen=True)
class LineOffsetCache:
    """Offsets of every newline byte, in one fixed integer width."""

    width: OffsetWidth
    offsets: array

    @classmethod
    def build(cls, content: bytes) -> LineOffsetCache:
        width = OffsetWidth.for_size(len(content))
        offsets = array(width.typecode)
        pos = content.find(b"\n")
        while pos != -1:
            offsets.append(pos)
            pos = content.find(b"\n", pos + 1)
        return cls(width, offsets)

    def __len__(self) -> int:
        return len(self.offsets)


class LineRef(NamedTuple):
    start: int   # offset of the first byte of the line
    end: int     # one past the last byte, newline included when present
    number: int  # 1-based


class LineIndex:
    """Line lookups for a single buffer."""

    def __init__(self, buffer: SourceBuffer) -> None:
        self.buffer = buffer
        self._cache: LineOffsetCache | None = None

    @property
    def width(self) -> OffsetWidth:
        return OffsetWidth.for_size(self.buffer.size)

    @property
    def is_built(self) -> bool:
        return self._cache is not None

    def offsets(self) -> LineOffsetCache:
        if self._cache is None:
            self._cache = LineOffsetCache.build(self.buffer.content)
            logger.debug(
                "built %s-bit line table for %s (%d newlines)",
                self._cache.width.value, self.buffer.identifier, len(self._cache),
            )
        return self._cache

    def line_at(self, offset: int) -> LineRef:
        """Resolve the line containing ``offset``.

        An offset pointing at a newline belongs to the line that newline
        terminates.
        """
        if not 0 <= offset <= self.buffer.size:
            raise ValueError(f"offset {offset} is outside {self.buffer.identifier}")
        table = self.offsets().offsets
        eol = bisect_left(table, offset)
        start = table[eol - 1] + 1 if eol > 0 else 0
        end = table[eol] + 1 if eol < len(table) else self.buffer.size
        return LineRef(start, end, eol + 1)

    def line_bounds(self, number: int) -> tuple[int, int]:
        """Return the ``[start, end)`` offsets of 1-based line ``number``.

        Past the last line the result is an empty span at the end of the
        buffer.
        """
        if number < 1:
            raise ValueError("line numbers are 1-based")
        table = self.offsets().offsets
        index = number - 1
        if index < len(table):
            start = table[index - 1] + 1 if index > 0 else 0
            return start, table[index] + 1
        if index == len(table):
            start = table[-1] + 1 if table else 0
            return start, self.buffer.size
        return self.buffer.size, self.buffer.size

    def line_text(self, number: int) -> bytes:
        start, end = self.line_bounds(number)
        return self.buffer.content[start:end]

    @property
    def line_count(self) -> int:
        """Number of lines, counting a trailing partial line."""
        table = self.offsets().offsets
        if table and table[-1] + 1 == self.buffer.size:
            return len(table)
        return len(table) + 1
