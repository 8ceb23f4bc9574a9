"""Diagnostic values and caret-style text rendering."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from srcmgr.output import Color, OutputSink, StringSink
from srcmgr.source import SourceLocation, SourceRange

TAB_STOP = 8


class SourceManagerError(Exception):
    """Base class for misuse of the source manager."""


class InvalidLocationError(SourceManagerError):
    """A location does not point into any registered buffer."""


class InvalidBufferIdError(SourceManagerError):
    """A buffer id was never handed out by the registry."""


class BufferTooLargeError(SourceManagerError):
    """A buffer cannot be indexed with 64-bit offsets."""


class DiagnosticKind(Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"
    REMARK = "remark"

    @property
    def label(self) -> str:
        return f"{self.value}: "

    @property
    def color(self) -> Color:
        return _KIND_COLORS[self]


_KIND_COLORS = {
    DiagnosticKind.ERROR: Color.RED,
    DiagnosticKind.WARNING: Color.MAGENTA,
    DiagnosticKind.NOTE: Color.BLACK,
    DiagnosticKind.REMARK: Color.BLUE,
}


@dataclass(frozen=True)
class FixIt:
    """Replace the text in ``range`` with ``text``."""

    range: SourceRange
    text: str

    @classmethod
    def insertion(cls, loc: SourceLocation, text: str) -> FixIt:
        return cls(SourceRange(loc, loc), text)

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.range.start.pointer, self.range.end.pointer)


@dataclass(frozen=True)
class Diagnostic:
    """A fully resolved diagnostic, ready to print.

    ``column`` is 0-based; ``line`` is 1-based. Both are -1 when the
    location is unknown. ``ranges`` hold byte columns already clipped to
    ``line_contents``.
    """

    location: SourceLocation
    identifier: str
    line: int
    column: int
    kind: DiagnosticKind
    message: str
    line_contents: bytes = b""
    ranges: tuple[tuple[int, int], ...] = ()
    fixits: tuple[FixIt, ...] = ()

    @classmethod
    def for_file(cls, identifier: str, kind: DiagnosticKind, message: str) -> Diagnostic:
        """A diagnostic about a whole file rather than a position in it."""
        return cls(SourceLocation(), identifier, -1, -1, kind, message)

    @property
    def has_position(self) -> bool:
        return self.line != -1 and self.column != -1


def _is_non_ascii(line: bytes) -> bool:
    return any(b & 0x80 for b in line)


def expand_source_line(line: bytes) -> str:
    """Replace each tab with spaces up to the next tab stop."""
    out = bytearray()
    col = 0
    for b in line:
        if b != 0x09:
            out.append(b)
            col += 1
            continue
        out.append(0x20)
        col += 1
        while col % TAB_STOP:
            out.append(0x20)
            col += 1
    return out.decode("utf-8", errors="replace")


def expand_marker_line(marks: str, line: bytes) -> str:
    """Widen ``marks`` so it stays aligned with the tab-expanded ``line``.

    Whatever character sits under a tab is repeated for every column the
    tab expands to.
    """
    out: list[str] = []
    col = 0
    for i, ch in enumerate(marks):
        out.append(ch)
        col += 1
        if i < len(line) and line[i] == 0x09:
            while col % TAB_STOP:
                out.append(ch)
                col += 1
    return "".join(out)


class DiagnosticRenderer:
    """Prints diagnostics as a message line, source line, caret line and fix-its."""

    def build_caret_line(self, diag: Diagnostic) -> tuple[str, str]:
        """Return the (caret line, fix-it line) pair, before tab expansion."""
        num_columns = len(diag.line_contents)
        caret = [" "] * (num_columns + 1)

        for start, end in diag.ranges:
            for i in range(start, min(end, len(caret))):
                caret[i] = "~"

        line_start = diag.location.pointer - diag.column
        fixit_line = self._build_fixit_line(caret, diag.fixits, line_start, num_columns)

        # The caret goes on last so it wins over any '~' at the same column.
        caret[min(diag.column, num_columns)] = "^"
        return "".join(caret).rstrip(" "), fixit_line

    def _build_fixit_line(
        self, caret: list[str], fixits: tuple[FixIt, ...], line_start: int, num_columns: int,
    ) -> str:
        line_end = line_start + num_columns
        chars: list[str] = []
        prev_end_col = 0

        for fixit in fixits:
            if any(ch in fixit.text for ch in "\n\r\t"):
                continue
            start = fixit.range.start.pointer
            end = fixit.range.end.pointer
            if start > line_end or end < line_start:
                continue

            first_col = max(start - line_start, 0)
            # Keep a visible gap between this hint and the previous one.
            hint_col = first_col
            if prev_end_col and hint_col <= prev_end_col:
                hint_col = prev_end_col + 1

            last_modified = hint_col + len(fixit.text)
            if last_modified > len(chars):
                chars.extend(" " * (last_modified - len(chars)))
            chars[hint_col:last_modified] = fixit.text
            prev_end_col = last_modified

            last_col = min(end, line_end) - line_start
            for i in range(first_col, last_col):
                caret[i] = "~"

        return "".join(chars)

    def print(
        self,
        diag: Diagnostic,
        sink: OutputSink,
        *,
        program_name: str | None = None,
        show_colors: bool = True,
        show_kind_label: bool = True,
    ) -> None:
        show_colors = show_colors and sink.has_colors

        if show_colors:
            sink.change_color(None, bold=True)

        if program_name:
            sink.write(f"{program_name}: ")

        if diag.identifier:
            sink.write("<stdin>" if diag.identifier == "-" else diag.identifier)
            if diag.line != -1:
                sink.write(f":{diag.line}")
                if diag.column != -1:
                    sink.write(f":{diag.column + 1}")
            sink.write(": ")

        if show_kind_label:
            if show_colors:
                sink.change_color(diag.kind.color, bold=True)
            sink.write(diag.kind.label)
            if show_colors:
                sink.reset_color()
                sink.change_color(None, bold=True)

        sink.write(f"{diag.message}\n")

        if show_colors:
            sink.reset_color()

        if not diag.has_position:
            return

        line = diag.line_contents
        # Byte columns are wrong for multi-byte text: show the line, skip the markers.
        if _is_non_ascii(line):
            sink.write(expand_source_line(line) + "\n")
            return

        caret_line, fixit_line = self.build_caret_line(diag)

        sink.write(expand_source_line(line) + "\n")

        if show_colors:
            sink.change_color(Color.GREEN, bold=True)
        sink.write(expand_marker_line(caret_line, line) + "\n")
        if show_colors:
            sink.reset_color()

        if not fixit_line:
            return
        sink.write(expand_marker_line(fixit_line, line) + "\n")

    def render(
        self,
        diag: Diagnostic,
        *,
        program_name: str | None = None,
        show_kind_label: bool = True,
    ) -> str:
        """Render without colors and return the text."""
        sink = StringSink()
        self.print(diag, sink, program_name=program_name, show_kind_label=show_kind_label)
        return sink.getvalue()
