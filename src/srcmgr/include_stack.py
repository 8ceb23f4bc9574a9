"""Printing the chain of "Included from" lines above a diagnostic."""

from __future__ import annotations

from srcmgr.buffers import BufferRegistry
from srcmgr.errors import InvalidLocationError
from srcmgr.output import OutputSink
from srcmgr.resolver import LocationResolver
from srcmgr.source import SourceLocation


class IncludeStackPrinter:
    def __init__(self, registry: BufferRegistry, resolver: LocationResolver) -> None:
        self.registry = registry
        self.resolver = resolver

    def print(self, include_location: SourceLocation, sink: OutputSink) -> None:
        """Print one line per include level, outermost file first."""
        stack: list[tuple[int, SourceLocation]] = []
        loc = include_location
        while loc.is_valid:
            buffer_id = self.registry.find_buffer_containing(loc)
            if not buffer_id:
                raise InvalidLocationError(f"include location {loc} is not inside a registered buffer")
            stack.append((buffer_id, loc))
            loc = self.registry.get_include_location(buffer_id)

        for buffer_id, loc in reversed(stack):
            identifier = self.registry.get_buffer(buffer_id).identifier
            line = self.resolver.find_line_number(loc, buffer_id)
            sink.write(f"Included from {identifier}:{line}:\n")
