"""Text sinks that diagnostics are printed to."""

from __future__ import annotations

import io
from enum import Enum
from typing import TextIO


class Color(Enum):
    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    MAGENTA = 35
    CYAN = 36
    WHITE = 37


_RESET = "\033[0m"
_BOLD = "\033[1m"


class OutputSink:
    """Abstract text sink. Color changes are ignored unless overridden."""

    has_colors = False

    def write(self, text: str) -> None:
        raise NotImplementedError

    def change_color(self, color: Color | None, bold: bool = False) -> None:
        """Switch foreground color; ``None`` keeps the current one."""

    def reset_color(self) -> None:
        pass

    def flush(self) -> None:
        pass


class StreamSink(OutputSink):
    """Writes to a text stream, using ANSI escapes when colors are enabled."""

    def __init__(self, stream: TextIO, *, colors: bool = False) -> None:
        self.stream = stream
        self.has_colors = colors

    def write(self, text: str) -> None:
        self.stream.write(text)

    def change_color(self, color: Color | None, bold: bool = False) -> None:
        if not self.has_colors:
            return
        if color is None:
            if bold:
                self.stream.write(_BOLD)
            return
        prefix = "1;" if bold else ""
        self.stream.write(f"\033[{prefix}{color.value}m")

    def reset_color(self) -> None:
        if self.has_colors:
            self.stream.write(_RESET)

    def flush(self) -> None:
        self.stream.flush()


class StringSink(StreamSink):
    """Collects output in memory."""

    def __init__(self, *, colors: bool = False) -> None:
        super().__init__(io.StringIO(), colors=colors)

    def getvalue(self) -> str:
        return self.stream.getvalue()
