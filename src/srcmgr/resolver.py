"""Turning locations into line and column numbers."""

from __future__ import annotations

from srcmgr.buffers import BufferRegistry
from srcmgr.errors import InvalidBufferIdError, InvalidLocationError
from srcmgr.line_index import LineRef
from srcmgr.source import SourceLocation


class LocationResolver:
    def __init__(self, registry: BufferRegistry) -> None:
        self.registry = registry

    def _owning_buffer(self, loc: SourceLocation, buffer_id: int) -> int:
        if not buffer_id:
            buffer_id = self.registry.find_buffer_containing(loc)
        if not buffer_id or not self.registry.get_buffer(buffer_id).contains(loc):
            raise InvalidLocationError(f"{loc} is not inside a registered buffer")
        return buffer_id

    def find_line(self, loc: SourceLocation, buffer_id: int = 0) -> tuple[LineRef, int]:
        """Resolve the line holding ``loc`` through the buffer's line index."""
        buffer_id = self._owning_buffer(loc, buffer_id)
        record = self.registry.get_record(buffer_id)
        return record.line_index.line_at(record.buffer.offset_of(loc)), buffer_id

    def get_line_and_column(self, loc: SourceLocation, buffer_id: int = 0) -> tuple[int, int]:
        """Return the 1-based (line, column) of ``loc``."""
        line, buffer_id = self.find_line(loc, buffer_id)
        offset = self.registry.get_buffer(buffer_id).offset_of(loc)
        return line.number, offset - line.start + 1

    def find_line_number(self, loc: SourceLocation, buffer_id: int = 0) -> int:
        return self.find_line(loc, buffer_id)[0].number

    def get_line_text(self, line: int, buffer_id: int) -> bytes:
        """Return line ``line`` of the buffer, including its newline."""
        if not buffer_id:
            raise InvalidBufferIdError("a buffer id is required")
        return self.registry.get_record(buffer_id).line_index.line_text(line)

    def scan_line(self, loc: SourceLocation, buffer_id: int = 0) -> tuple[int, int]:
        """Find the pointers bounding the line around ``loc`` by scanning bytes.

        Stops at ``\\n`` or ``\\r`` in both directions; the terminator is not
        part of the result. Cheaper than building the line index when only one
        line is needed.
        """
        buffer_id = self._owning_buffer(loc, buffer_id)
        buffer = self.registry.get_buffer(buffer_id)
        content = buffer.content
        offset = buffer.offset_of(loc)

        start = offset
        while start > 0 and content[start - 1] not in b"\n\r":
            start -= 1
        end = offset
        while end < len(content) and content[end] not in b"\n\r":
            end += 1
        return buffer.start + start, buffer.start + end
