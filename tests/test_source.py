"""Tests for locations, ranges and source buffers."""

from __future__ import annotations

import pytest

from srcmgr.source import SourceBuffer, SourceLocation, SourceRange


class TestSourceLocation:
    def test_default_is_invalid(self):
        assert not SourceLocation().is_valid
        assert str(SourceLocation()) == "<invalid>"

    def test_pointer_is_valid(self):
        assert SourceLocation(0x2000).is_valid

    def test_shifted(self):
        assert SourceLocation(100).shifted(5) == SourceLocation(105)

    def test_ordering(self):
        assert SourceLocation(10) < SourceLocation(11)


class TestSourceRange:
    def test_default_is_invalid(self):
        assert not SourceRange().is_valid

    def test_valid_range(self):
        r = SourceRange(SourceLocation(10), SourceLocation(20))
        assert r.is_valid

    def test_half_valid_range_rejected(self):
        with pytest.raises(ValueError, match="both be valid"):
            SourceRange(SourceLocation(10), SourceLocation())


class TestSourceBuffer:
    def test_content_and_identifier(self):
        buf = SourceBuffer(b"abc", "a.txt")
        assert buf.content == b"abc"
        assert buf.identifier == "a.txt"
        assert buf.size == 3

    def test_from_text_encodes(self):
        buf = SourceBuffer.from_text("é", "u.txt")
        assert buf.content == "é".encode()
        assert buf.size == 2

    def test_end_is_one_past_last_byte(self):
        buf = SourceBuffer(b"abc")
        assert buf.end == buf.start + 3
        assert buf.location(3).pointer == buf.end

    def test_buffers_do_not_overlap(self):
        first = SourceBuffer(b"x" * 40)
        second = SourceBuffer(b"y" * 10)
        assert first.end < second.start

    def test_empty_buffer_has_one_location(self):
        buf = SourceBuffer(b"")
        assert buf.location(0).pointer == buf.start == buf.end

    def test_location_out_of_range(self):
        buf = SourceBuffer(b"abc", "a.txt")
        with pytest.raises(ValueError, match="outside a.txt"):
            buf.location(4)
        with pytest.raises(ValueError):
            buf.location(-1)

    def test_offset_of(self):
        buf = SourceBuffer(b"hello")
        assert buf.offset_of(buf.location(4)) == 4

    def test_offset_of_foreign_location(self):
        buf = SourceBuffer(b"hello")
        other = SourceBuffer(b"world")
        with pytest.raises(ValueError, match="does not point into"):
            buf.offset_of(other.location(0))

    def test_contains(self):
        buf = SourceBuffer(b"hello")
        assert buf.contains(buf.location(0))
        assert buf.contains(buf.location(5))
        assert not buf.contains(SourceLocation())
        assert not buf.contains(SourceLocation(buf.end + 1))
