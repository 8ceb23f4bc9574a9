"""The SourceManager facade tying buffers, resolution and printing together."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterable
from typing import Any

from srcmgr.buffers import BufferRegistry, IncludeResult
from srcmgr.builder import DiagnosticBuilder
from srcmgr.errors import (
    Diagnostic,
    DiagnosticKind,
    DiagnosticRenderer,
    FixIt,
    InvalidLocationError,
)
from srcmgr.filesystem import FileLoader
from srcmgr.include_stack import IncludeStackPrinter
from srcmgr.output import OutputSink, StreamSink
from srcmgr.resolver import LocationResolver
from srcmgr.source import SourceBuffer, SourceLocation, SourceRange

DiagnosticHandler = Callable[[Diagnostic, Any], None]


class SourceManager:
    """Owns the source buffers of one front-end run and reports diagnostics.

    If ``handler`` is given, ``print_message`` hands every diagnostic to it
    (together with ``handler_context``) instead of printing anything.
    """

    def __init__(
        self,
        loader: FileLoader | None = None,
        handler: DiagnosticHandler | None = None,
        handler_context: Any = None,
    ) -> None:
        self.registry = BufferRegistry(loader)
        self.resolver = LocationResolver(self.registry)
        self.builder = DiagnosticBuilder(self.registry, self.resolver)
        self.renderer = DiagnosticRenderer()
        self.include_printer = IncludeStackPrinter(self.registry, self.resolver)
        self.handler = handler
        self.handler_context = handler_context

    # ── Buffers ───────────────────────────────────────────────────

    @property
    def include_dirs(self) -> list[str]:
        return self.registry.include_dirs

    @include_dirs.setter
    def include_dirs(self, dirs: Iterable[str]) -> None:
        self.registry.include_dirs = list(dirs)

    def add_buffer(
        self, buffer: SourceBuffer, include_location: SourceLocation | None = None,
    ) -> int:
        return self.registry.add_buffer(buffer, include_location)

    def add_content(
        self,
        content: bytes | str,
        identifier: str = "<buffer>",
        include_location: SourceLocation | None = None,
    ) -> int:
        return self.registry.add_content(content, identifier, include_location)

    def add_include_file(
        self, filename: str, include_location: SourceLocation | None = None,
    ) -> IncludeResult:
        return self.registry.add_include_file(filename, include_location)

    def get_buffer(self, buffer_id: int) -> SourceBuffer:
        return self.registry.get_buffer(buffer_id)

    def find_buffer_containing(self, loc: SourceLocation) -> int:
        return self.registry.find_buffer_containing(loc)

    # ── Locations ─────────────────────────────────────────────────

    def get_line_and_column(self, loc: SourceLocation, buffer_id: int = 0) -> tuple[int, int]:
        return self.resolver.get_line_and_column(loc, buffer_id)

    def find_line_number(self, loc: SourceLocation, buffer_id: int = 0) -> int:
        return self.resolver.find_line_number(loc, buffer_id)

    def get_line_text(self, line: int, buffer_id: int) -> bytes:
        return self.resolver.get_line_text(line, buffer_id)

    # ── Diagnostics ───────────────────────────────────────────────

    def get_message(
        self,
        loc: SourceLocation,
        kind: DiagnosticKind,
        message: str,
        ranges: Iterable[SourceRange] = (),
        fixits: Iterable[FixIt] = (),
    ) -> Diagnostic:
        return self.builder.build(loc, kind, message, ranges, fixits)

    def print_include_stack(self, include_location: SourceLocation, sink: OutputSink) -> None:
        self.include_printer.print(include_location, sink)

    def print_message(
        self,
        diagnostic: Diagnostic,
        sink: OutputSink | None = None,
        *,
        show_colors: bool = True,
        program_name: str | None = None,
        show_kind_label: bool = True,
    ) -> None:
        if self.handler is not None:
            self.handler(diagnostic, self.handler_context)
            return

        if sink is None:
            sink = StreamSink(sys.stderr)

        if diagnostic.location.is_valid:
            buffer_id = self.registry.find_buffer_containing(diagnostic.location)
            if not buffer_id:
                raise InvalidLocationError(f"{diagnostic.location} is not inside a registered buffer")
            self.print_include_stack(self.registry.get_include_location(buffer_id), sink)

        self.renderer.print(
            diagnostic,
            sink,
            program_name=program_name,
            show_colors=show_colors,
            show_kind_label=show_kind_label,
        )
        sink.flush()

    def report(
        self,
        loc: SourceLocation,
        kind: DiagnosticKind,
        message: str,
        ranges: Iterable[SourceRange] = (),
        fixits: Iterable[FixIt] = (),
        sink: OutputSink | None = None,
        *,
        show_colors: bool = True,
    ) -> Diagnostic:
        """Build a diagnostic for ``loc`` and print it right away."""
        diagnostic = self.get_message(loc, kind, message, ranges, fixits)
        self.print_message(diagnostic, sink, show_colors=show_colors)
        return diagnostic
