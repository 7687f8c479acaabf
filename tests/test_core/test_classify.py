"""Tests for payload classification."""

from __future__ import annotations

from heap_builders import HEAP_BASE, RecordingMemory
from heapscope.core.heap.classify import ascii_string, classify, magic_name, utf16_string
from heapscope.core.sources import BufferMemory


def _classify(payload: bytes, min_length: int = 4, length=None) -> str:
    reader = BufferMemory(HEAP_BASE, payload)
    return classify(reader, HEAP_BASE, len(payload) if length is None else length, min_length)


class TestAsciiString:
    def test_nul_terminated(self):
        assert ascii_string(b"abc\x00\xff\xff") == "abc"

    def test_runs_to_end(self):
        assert ascii_string(b"abcd") == "abcd"

    def test_binary_byte_rejects(self):
        assert ascii_string(b"abc\x01def") is None

    def test_whitespace_is_printable(self):
        assert ascii_string(b"a\tb\nc\r\x00") == "a\tb\nc\r"


class TestUtf16String:
    def test_simple(self):
        assert utf16_string("hello".encode("utf-16-le") + b"\x00\x00") == "hello"

    def test_latin1(self):
        assert utf16_string("caf\xe9".encode("utf-16-le")) == "caf\xe9"

    def test_rejects_wide_code_units(self):
        assert utf16_string("中文".encode("utf-16-le")) is None

    def test_ascii_bytes_are_not_utf16(self):
        assert utf16_string(b"abcd") is None


class TestMagicName:
    def test_png(self):
        assert magic_name(b"\x89PNG\r\n\x1a\n") == "PNG IMAGE"

    def test_gzip(self):
        assert magic_name(b"\x1f\x8b\x08\x00") == "GZIP FILE"

    def test_compress(self):
        assert magic_name(b"\x1f\x9d\x90") == "COMPRESS FILE"

    def test_no_match(self):
        assert magic_name(b"\x00\x01\x02\x03") is None


class TestClassify:
    def test_ascii(self):
        assert _classify(b"hello heap world\x00\x00\x00\x00") == 'ASCII "hello heap world"'

    def test_ascii_escapes_control_characters(self):
        assert _classify(b"one\ttwo\n\x00") == 'ASCII "one\\ttwo\\n"'

    def test_repeated_phrase_is_a_single_ascii_string(self):
        payload = b"Hello World! " * 5 + b"\x00" * 3
        result = _classify(payload)
        assert result == 'ASCII "' + "Hello World! " * 5 + '"'
        assert "|" not in result
        assert "ptr" not in result

    def test_utf16(self):
        payload = "wide text".encode("utf-16-le") + b"\x00\x00"
        assert _classify(payload) == 'UTF-16 "wide text"'

    def test_short_string_falls_through(self):
        assert _classify(b"ab\x00\x00\x00\x00\x00\x00") == ""

    def test_min_string_length_threshold(self):
        assert _classify(b"abcd\x00\x00\x00\x00", min_length=4) == 'ASCII "abcd"'
        assert _classify(b"abcd\x00\x00\x00\x00", min_length=5) == ""

    def test_min_string_length_below_one(self):
        assert _classify(b"a\x00\x00\x00", min_length=0) == 'ASCII "a"'

    def test_magic(self):
        assert _classify(b"BZh9\x17\x72\x45\x38\x50\x90") == "BZIP FILE"

    def test_ascii_wins_over_magic(self):
        # "BZ" is both printable text and the bzip signature.
        assert _classify(b"BZIP is a format\x00") == 'ASCII "BZIP is a format"'

    def test_zeros(self):
        assert _classify(b"\x00" * 32) == ""

    def test_binary(self):
        assert _classify(b"\x01\x02\x03\x04" + b"\x00" * 12) == ""

    def test_unreadable_payload(self):
        reader = BufferMemory(HEAP_BASE, b"\x00" * 16)
        assert classify(reader, HEAP_BASE + 0x1000, 16, 4) == ""

    def test_empty_payload(self):
        reader = RecordingMemory(HEAP_BASE, b"abcd")
        assert classify(reader, HEAP_BASE, 0, 4) == ""
        assert reader.reads == []

    def test_reads_only_the_payload(self):
        reader = RecordingMemory(HEAP_BASE, b"abcdefgh" * 4)
        assert classify(reader, HEAP_BASE, 8, 4) == 'ASCII "abcdefgh"'
        assert reader.reads == [(HEAP_BASE, 8)]
