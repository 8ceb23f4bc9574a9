"""Assembling Diagnostic values from raw locations."""

from __future__ import annotations

from collections.abc import Iterable

from srcmgr.buffers import BufferRegistry
from srcmgr.errors import Diagnostic, DiagnosticKind, FixIt, InvalidLocationError
from srcmgr.resolver import LocationResolver
from srcmgr.source import SourceLocation, SourceRange


class DiagnosticBuilder:
    """Resolves a location, its line and highlight ranges into a Diagnostic."""

    def __init__(self, registry: BufferRegistry, resolver: LocationResolver) -> None:
        self.registry = registry
        self.resolver = resolver

    def build(
        self,
        loc: SourceLocation,
        kind: DiagnosticKind,
        message: str,
        ranges: Iterable[SourceRange] = (),
        fixits: Iterable[FixIt] = (),
    ) -> Diagnostic:
        sorted_fixits = tuple(sorted(fixits, key=lambda f: f.sort_key))

        if not loc.is_valid:
            return Diagnostic(
                location=loc,
                identifier="<unknown>",
                line=-1,
                column=-1,
                kind=kind,
                message=message,
                fixits=sorted_fixits,
            )

        buffer_id = self.registry.find_buffer_containing(loc)
        if not buffer_id:
            raise InvalidLocationError(f"{loc} is not inside a registered buffer")
        buffer = self.registry.get_buffer(buffer_id)

        line_start, line_end = self.resolver.scan_line(loc, buffer_id)
        line_contents = buffer.content[line_start - buffer.start:line_end - buffer.start]

        column_ranges: list[tuple[int, int]] = []
        for r in ranges:
            if not r.is_valid:
                continue
            start, end = r.start.pointer, r.end.pointer
            if start > line_end or end < line_start:
                continue
            start = max(start, line_start)
            end = min(end, line_end)
            column_ranges.append((start - line_start, end - line_start))

        line, column = self.resolver.get_line_and_column(loc, buffer_id)
        return Diagnostic(
            location=loc,
            identifier=buffer.identifier,
            line=line,
            column=column - 1,
            kind=kind,
            message=message,
            line_contents=line_contents,
            ranges=tuple(column_ranges),
            fixits=sorted_fixits,
        )
