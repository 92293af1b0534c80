from __future__ import annotations

import pytest

from textsynth_client.base.streaming import ByteBuffer, CleanEnd, DanglingData, check_termination


def test_append_and_peek_preserve_order():
    buf = ByteBuffer()
    buf.append(b'{"te')
    buf.append(b'xt"')
    assert buf.peek_all() == b'{"text"'  # nosec B101
    assert len(buf) == 7  # nosec B101


def test_advance_discards_front():
    buf = ByteBuffer(b"abcdef")
    buf.advance(2)
    assert buf.peek_all() == b"cdef"  # nosec B101
    buf.advance(4)
    assert buf.is_empty()  # nosec B101


@pytest.mark.parametrize("n", [-1, 7])
def test_advance_out_of_range_raises(n):
    buf = ByteBuffer(b"abcdef")
    with pytest.raises(ValueError):
        buf.advance(n)
    assert buf.peek_all() == b"abcdef"  # nosec B101


def test_trim_leading_whitespace_counts_bytes():
    buf = ByteBuffer(b" \n\r\t\x0c{}")
    assert buf.trim_leading_whitespace() == 5  # nosec B101
    assert buf.peek_all() == b"{}"  # nosec B101
    assert buf.trim_leading_whitespace() == 0  # nosec B101


def test_vertical_tab_is_not_whitespace():
    buf = ByteBuffer(b"\x0b{}")
    assert buf.trim_leading_whitespace() == 0  # nosec B101
    assert not buf.is_blank()  # nosec B101


def test_is_blank():
    assert ByteBuffer().is_blank()  # nosec B101
    assert ByteBuffer(b"\n\n  ").is_blank()  # nosec B101
    assert not ByteBuffer(b"\n x").is_blank()  # nosec B101


def test_peek_all_is_a_snapshot():
    buf = ByteBuffer(b"ab")
    snap = buf.peek_all()
    buf.append(b"c")
    assert snap == b"ab"  # nosec B101


def test_clear_returns_contents():
    buf = ByteBuffer(b"xyz")
    assert buf.clear() == b"xyz"  # nosec B101
    assert buf.is_empty()  # nosec B101


def test_termination_clean_on_empty_and_blank():
    assert check_termination(ByteBuffer()) == CleanEnd()  # nosec B101
    buf = ByteBuffer(b"\n\n ")
    assert check_termination(buf) == CleanEnd()  # nosec B101
    assert buf.is_empty()  # nosec B101


def test_termination_dangling_keeps_residual():
    buf = ByteBuffer(b'  {"text":"a"')
    result = check_termination(buf)
    assert result == DanglingData(residual=b'  {"text":"a"')  # nosec B101
    assert buf.is_empty()  # nosec B101
