"""Tests for newline-offset tables and line lookups."""

from __future__ import annotations

from array import array

import pytest

from srcmgr.errors import BufferTooLargeError
from srcmgr.line_index import LineIndex, LineOffsetCache, LineRef, OffsetWidth
from srcmgr.source import SourceBuffer


def index(content: bytes) -> LineIndex:
    return LineIndex(SourceBuffer(content, "<test>"))


class TestOffsetWidth:
    @pytest.mark.parametrize(
        ("size", "width"),
        [
            (0, OffsetWidth.W8),
            (255, OffsetWidth.W8),
            (256, OffsetWidth.W16),
            (65535, OffsetWidth.W16),
            (65536, OffsetWidth.W32),
            (4294967295, OffsetWidth.W32),
            (4294967296, OffsetWidth.W64),
            (2**64 - 1, OffsetWidth.W64),
        ],
    )
    def test_boundaries(self, size, width):
        assert OffsetWidth.for_size(size) is width

    def test_too_large(self):
        with pytest.raises(BufferTooLargeError):
            OffsetWidth.for_size(2**64)

    def test_typecode_matches_width(self):
        for width in OffsetWidth:
            assert array(width.typecode).itemsize * 8 == width.value


class TestLineOffsetCache:
    def test_build_records_newlines(self):
        cache = LineOffsetCache.build(b"a\nbc\n\nd")
        assert list(cache.offsets) == [1, 4, 5]
        assert len(cache) == 3

    def test_small_buffer_uses_8_bit(self):
        assert index(b"x" * 255).offsets().width is OffsetWidth.W8

    def test_256_bytes_uses_16_bit(self):
        idx = index(b"x" * 256)
        assert idx.width is OffsetWidth.W16
        cache = idx.offsets()
        assert cache.width is OffsetWidth.W16
        assert cache.offsets.typecode == OffsetWidth.W16.typecode

    def test_built_once(self):
        idx = index(b"a\nb\n")
        assert not idx.is_built
        first = idx.offsets()
        assert idx.is_built
        assert idx.offsets() is first


class TestLineAt:
    def test_first_line(self):
        assert index(b"ab\ncd\n").line_at(0) == LineRef(0, 3, 1)

    def test_newline_belongs_to_its_line(self):
        assert index(b"ab\ncd\n").line_at(2) == LineRef(0, 3, 1)

    def test_byte_after_newline_starts_next_line(self):
        assert index(b"ab\ncd\n").line_at(3) == LineRef(3, 6, 2)

    def test_end_of_buffer(self):
        assert index(b"ab\ncd\n").line_at(6) == LineRef(6, 6, 3)

    def test_trailing_partial_line(self):
        assert index(b"ab\ncd").line_at(4) == LineRef(3, 5, 2)

    def test_no_newlines(self):
        assert index(b"abc").line_at(1) == LineRef(0, 3, 1)

    def test_out_of_range(self):
        with pytest.raises(ValueError):
            index(b"abc").line_at(4)


class TestLineText:
    def test_lines_include_newline(self):
        idx = index(b"ab\ncd\n")
        assert idx.line_text(1) == b"ab\n"
        assert idx.line_text(2) == b"cd\n"

    def test_trailing_partial_line(self):
        assert index(b"ab\ncd").line_text(2) == b"cd"

    def test_line_after_final_newline_is_empty(self):
        assert index(b"ab\ncd\n").line_text(3) == b""

    def test_far_past_end_is_empty_at_buffer_end(self):
        idx = index(b"ab\ncd")
        assert idx.line_bounds(10) == (5, 5)
        assert idx.line_text(10) == b""

    def test_zero_is_rejected(self):
        with pytest.raises(ValueError, match="1-based"):
            index(b"ab").line_bounds(0)

    @pytest.mark.parametrize(
        "content",
        [b"", b"\n", b"\n\n", b"abc", b"ab\ncd", b"ab\ncd\n", b"a\r\nb\r\n", b"\tx\n\ny"],
    )
    def test_lines_reconstruct_buffer(self, content):
        idx = index(content)
        joined = b"".join(idx.line_text(n) for n in range(1, idx.line_count + 1))
        assert joined == content

    def test_line_count(self):
        assert index(b"").line_count == 1
        assert index(b"a\nb").line_count == 2
        assert index(b"a\nb\n").line_count == 2
