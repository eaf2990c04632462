from __future__ import annotations

import io

import pytest

from huffkit.core.bitio import PAD_BIT, BitReader, BitWriter, iter_bytes_bits, iter_file_symbols


def _write(bits, **kw) -> tuple[bytes, BitWriter]:
    buf = io.BytesIO()
    with BitWriter(buf, **kw) as w:
        w.write_bits(bits)
    return buf.getvalue(), w


def test_msb_first_and_zero_padding() -> None:
    assert PAD_BIT == 0
    out, w = _write([1, 0, 1])
    assert out == b"\xa0"
    assert w.bits_written == 3
    assert w.lastbits == 3


def test_full_bytes_need_no_padding() -> None:
    out, w = _write([1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1])
    assert out == b"\xf0\x01"
    assert w.lastbits == 8


def test_nothing_written() -> None:
    out, w = _write([])
    assert out == b""
    assert w.lastbits == 0


def test_small_buffer_drains_every_byte() -> None:
    buf = io.BytesIO()
    w = BitWriter(buf, buffer_size=1)
    w.write_bits([0, 1, 0, 0, 0, 0, 0, 1])
    assert buf.getvalue() == b"A"
    w.write_bit(1)
    # partial byte is held until close
    assert buf.getvalue() == b"A"
    w.close()
    assert buf.getvalue() == b"A\x80"


def test_close_is_idempotent_and_final() -> None:
    buf = io.BytesIO()
    w = BitWriter(buf)
    w.write_bit(1)
    w.close()
    w.close()
    assert buf.getvalue() == b"\x80"
    with pytest.raises(ValueError):
        w.write_bit(0)


def test_writer_does_not_close_underlying_file() -> None:
    buf = io.BytesIO()
    with BitWriter(buf) as w:
        w.write_bit(1)
    assert not buf.closed


def test_reader_bits_and_eof() -> None:
    r = BitReader(io.BytesIO(b"\xa0\x01"), chunk_size=1)
    bits = [r.read_bit() for _ in range(16)]
    assert bits == [1, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1]
    assert r.read_bit() is None
    assert r.read_bit() is None
    assert r.bits_read == 16


def test_reader_iterates_padding_too() -> None:
    data, _ = _write([1, 1, 0])
    assert list(BitReader(io.BytesIO(data))) == [1, 1, 0, 0, 0, 0, 0, 0]


def test_reader_empty_stream() -> None:
    with BitReader(io.BytesIO(b"")) as r:
        assert r.read_bit() is None
        assert list(r) == []


def test_in_memory_bits_match_reader() -> None:
    data = bytes([0x00, 0xFF, 0x5A])
    assert list(iter_bytes_bits(data)) == list(BitReader(io.BytesIO(data)))


def test_iter_file_symbols_chunks() -> None:
    fp = io.BytesIO(b"hello world")
    assert bytes(iter_file_symbols(fp, chunk_size=4)) == b"hello world"
    assert list(iter_file_symbols(io.BytesIO(b""))) == []
    # non-positive chunk size falls back to the default
    assert bytes(iter_file_symbols(io.BytesIO(b"xy"), chunk_size=0)) == b"xy"
