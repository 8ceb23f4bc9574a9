"""Shared test helpers for the srcmgr test suite."""

from __future__ import annotations

from srcmgr.errors import Diagnostic, DiagnosticKind, FixIt
from srcmgr.manager import SourceManager
from srcmgr.source import SourceBuffer, SourceRange


def register(manager: SourceManager, text: str, name: str = "<test>") -> SourceBuffer:
    """Add ``text`` to the manager and return its buffer."""
    return manager.get_buffer(manager.add_content(text, name))


def diagnose(
    text: str,
    offset: int,
    message: str = "m",
    *,
    kind: DiagnosticKind = DiagnosticKind.ERROR,
    ranges: list[tuple[int, int]] | None = None,
    fixits: list[tuple[int, int, str]] | None = None,
    name: str = "t",
) -> Diagnostic:
    """Build a diagnostic at byte ``offset`` of ``text`` using plain offsets."""
    manager = SourceManager()
    buf = register(manager, text, name)
    return manager.get_message(
        buf.location(offset),
        kind,
        message,
        [SourceRange(buf.location(s), buf.location(e)) for s, e in ranges or []],
        [FixIt(SourceRange(buf.location(s), buf.location(e)), t) for s, e, t in fixits or []],
    )
