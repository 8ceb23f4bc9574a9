"""Source buffers, line/column resolution and caret diagnostics for front ends."""

from __future__ import annotations

__version__ = "0.1.0"

from srcmgr.buffers import BufferRegistry, IncludeResult
from srcmgr.errors import (
    BufferTooLargeError,
    Diagnostic,
    DiagnosticKind,
    DiagnosticRenderer,
    FixIt,
    InvalidBufferIdError,
    InvalidLocationError,
    SourceManagerError,
)
from srcmgr.manager import SourceManager
from srcmgr.output import Color, OutputSink, StreamSink, StringSink
from srcmgr.source import SourceBuffer, SourceLocation, SourceRange

__all__ = [
    "BufferRegistry",
    "BufferTooLargeError",
    "Color",
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticRenderer",
    "FixIt",
    "IncludeResult",
    "InvalidBufferIdError",
    "InvalidLocationError",
    "OutputSink",
    "SourceBuffer",
    "SourceLocation",
    "SourceManager",
    "SourceManagerError",
    "SourceRange",
    "StreamSink",
    "StringSink",
]
