"""Tests for splitting incoming bytes into lines."""

import pytest

from linestream import LineFramer


def test_complete_lines_and_pending_remainder():
    """Complete lines come out immediately, the tail waits for more data."""
    framer = LineFramer()
    assert framer.feed(b"AAA\nBBB\nCC") == ["AAA", "BBB"]
    assert framer.pending == "CC"
    assert framer.feed(b"C\n") == ["CCC"]
    assert framer.pending == ""


def test_whitespace_is_trimmed():
    framer = LineFramer()
    assert framer.feed(b"  hello  \n") == ["hello"]


def test_carriage_return_trimmed_with_newline_separator():
    framer = LineFramer()
    assert framer.feed(b"$GPGGA,1\r\n$GPRMC,2\r\n") == ["$GPGGA,1", "$GPRMC,2"]


def test_empty_lines_are_suppressed():
    framer = LineFramer()
    assert framer.feed(b"\n\n") == []
    assert framer.feed(b"   \n\t\n") == []


def test_line_split_across_feeds():
    framer = LineFramer()
    assert framer.feed(b"AB") == []
    assert framer.feed(b"C\n") == ["ABC"]


def test_multi_character_separator():
    """The buffer advances past the whole separator, not just one character."""
    framer = LineFramer(separator="\r\n")
    assert framer.feed(b"one\r\ntwo\r\nthr") == ["one", "two"]
    assert framer.feed(b"ee\r\n") == ["three"]


def test_separator_split_across_feeds():
    framer = LineFramer(separator="##")
    assert framer.feed(b"alpha#") == []
    assert framer.feed(b"#beta##") == ["alpha", "beta"]


def test_multibyte_character_split_across_feeds():
    framer = LineFramer()
    data = "température 21°C\n".encode("utf-8")
    split = data.index(b"\xc2") + 1  # middle of the degree sign
    assert framer.feed(data[:split]) == []
    assert framer.feed(data[split:]) == ["température 21°C"]


def test_invalid_bytes_are_replaced():
    framer = LineFramer()
    assert framer.feed(b"ok\xff\n") == ["ok\ufffd"]


def test_separator_change_applies_to_next_feed():
    framer = LineFramer()
    assert framer.feed(b"a;b") == []
    framer.separator = ";"
    assert framer.feed(b";c;") == ["a", "b", "c"]


def test_empty_separator_rejected():
    with pytest.raises(ValueError):
        LineFramer(separator="")

    framer = LineFramer()
    with pytest.raises(ValueError):
        framer.separator = ""
    assert framer.separator == "\n"


def test_reset_discards_partial_line():
    framer = LineFramer()
    framer.feed(b"partial")
    framer.reset()
    assert framer.pending == ""
    assert framer.feed(b"fresh\n") == ["fresh"]
