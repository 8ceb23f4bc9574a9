"""Source buffers, locations and ranges.

A location is a byte pointer into the content of exactly one buffer. Pointers
live in a single process-wide address space: every buffer reserves its own
disjoint ``[start, end]`` interval when it is created, so a bare integer is
enough to find the owning buffer later on.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# Space left between two reservations so an inclusive end never touches the
# next buffer's start.
_GUARD = 16


class _AddressSpace:
    """Hands out non-overlapping address intervals for buffer contents."""

    def __init__(self, base: int = 0x1000) -> None:
        self._next = base

    def reserve(self, size: int) -> int:
        start = self._next
        self._next = start + size + 1 + _GUARD
        return start


_ADDRESSES = _AddressSpace()


@dataclass(frozen=True, order=True)
class SourceLocation:
    """A byte pointer into a registered buffer, or the invalid location."""

    pointer: int = 0

    @property
    def is_valid(self) -> bool:
        return self.pointer != 0

    def shifted(self, delta: int) -> SourceLocation:
        return SourceLocation(self.pointer + delta)

    def __str__(self) -> str:
        if not self.is_valid:
            return "<invalid>"
        return f"0x{self.pointer:x}"


@dataclass(frozen=True)
class SourceRange:
    """A pair of locations, possibly spanning several lines."""

    start: SourceLocation = field(default_factory=SourceLocation)
    end: SourceLocation = field(default_factory=SourceLocation)

    def __post_init__(self) -> None:
        if self.start.is_valid != self.end.is_valid:
            raise ValueError("start and end of a range must both be valid or both invalid")

    @property
    def is_valid(self) -> bool:
        return self.start.is_valid


class SourceBuffer:
    """Immutable source bytes plus the name used to identify them."""

    def __init__(self, content: bytes, identifier: str = "<buffer>") -> None:
        self._content = bytes(content)
        self._identifier = identifier
        self._start = _ADDRESSES.reserve(len(self._content))

    @classmethod
    def from_text(
        cls, text: str, identifier: str = "<buffer>", encoding: str = "utf-8",
    ) -> SourceBuffer:
        return cls(text.encode(encoding), identifier)

    @property
    def content(self) -> bytes:
        return self._content

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def size(self) -> int:
        return len(self._content)

    @property
    def start(self) -> int:
        """Address of the first byte."""
        return self._start

    @property
    def end(self) -> int:
        """Address one past the last byte (still a valid location)."""
        return self._start + len(self._content)

    def location(self, offset: int) -> SourceLocation:
        """Return the location ``offset`` bytes into the buffer."""
        if not 0 <= offset <= len(self._content):
            raise ValueError(
                f"offset {offset} is outside {self._identifier} (size {len(self._content)})"
            )
        return SourceLocation(self._start + offset)

    def offset_of(self, loc: SourceLocation) -> int:
        if not self.contains(loc):
            raise ValueError(f"{loc} does not point into {self._identifier}")
        return loc.pointer - self._start

    def contains(self, loc: SourceLocation) -> bool:
        return loc.is_valid and self._start <= loc.pointer <= self.end

    def __repr__(self) -> str:
        return f"SourceBuffer({self._identifier!r}, size={len(self._content)})"
