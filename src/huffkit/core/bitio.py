"""Bit-level sink/source over byte-aligned binary streams.

Bits are packed MSB-first. On close the writer pads the final partial
byte with ``PAD_BIT``; the reader hands padding bits back like any other
bit, so callers need an independent length signal to ignore them.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import BinaryIO

PAD_BIT = 0
CHUNK_SIZE_DEFAULT = 64 * 1024


def iter_file_symbols(fp: BinaryIO, chunk_size: int = CHUNK_SIZE_DEFAULT) -> Iterator[int]:
    """Lazy symbol source: the bytes of ``fp`` read in chunks."""
    if chunk_size <= 0:
        chunk_size = CHUNK_SIZE_DEFAULT
    while True:
        chunk = fp.read(chunk_size)
        if not chunk:
            return
        yield from chunk


class BitWriter:
    def __init__(self, fp: BinaryIO, *, buffer_size: int = CHUNK_SIZE_DEFAULT):
        self._fp = fp
        self._buf = bytearray()
        self._buffer_size = max(1, int(buffer_size))
        self._cur = 0
        self._nbits = 0
        self.bits_written = 0
        self._closed = False

    def write_bit(self, bit: int) -> None:
        if self._closed:
            raise ValueError("BitWriter: write su writer chiuso")
        self._cur = (self._cur << 1) | (1 if bit else 0)
        self._nbits += 1
        self.bits_written += 1
        if self._nbits == 8:
            self._buf.append(self._cur)
            self._cur = 0
            self._nbits = 0
            if len(self._buf) >= self._buffer_size:
                self._drain()

    def write_bits(self, bits: Iterable[int]) -> None:
        for bit in bits:
            self.write_bit(bit)

    @property
    def lastbits(self) -> int:
        """Valid bits in the last byte (1..8), 0 when nothing was written."""
        if self.bits_written == 0:
            return 0
        return self.bits_written % 8 or 8

    def _drain(self) -> None:
        if self._buf:
            self._fp.write(bytes(self._buf))
            self._buf.clear()

    def flush(self) -> None:
        """Write out complete bytes. The partial byte stays buffered."""
        self._drain()

    def close(self) -> None:
        """Pad the partial byte with PAD_BIT and write everything out.

        Idempotent. Does not close the underlying file object: its owner does.
        """
        if self._closed:
            return
        if self._nbits > 0:
            pad = 8 - self._nbits
            cur = self._cur << pad
            if PAD_BIT:
                cur |= (1 << pad) - 1
            self._buf.append(cur)
            self._cur = 0
            self._nbits = 0
        self._drain()
        self._closed = True

    def __enter__(self) -> "BitWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class BitReader:
    def __init__(self, fp: BinaryIO, *, chunk_size: int = CHUNK_SIZE_DEFAULT):
        self._fp = fp
        self._chunk_size = chunk_size if chunk_size > 0 else CHUNK_SIZE_DEFAULT
        self._chunk = b""
        self._pos = 0
        self._cur = 0
        self._left = 0
        self._eof = False
        self.bits_read = 0

    def _next_byte(self) -> int | None:
        if self._pos >= len(self._chunk):
            if self._eof:
                return None
            self._chunk = self._fp.read(self._chunk_size)
            self._pos = 0
            if not self._chunk:
                self._eof = True
                return None
        b = self._chunk[self._pos]
        self._pos += 1
        return b

    def read_bit(self) -> int | None:
        """Next bit, or None at end of stream."""
        if self._left == 0:
            b = self._next_byte()
            if b is None:
                return None
            self._cur = b
            self._left = 8
        self._left -= 1
        self.bits_read += 1
        return (self._cur >> self._left) & 1

    def __iter__(self) -> Iterator[int]:
        while True:
            bit = self.read_bit()
            if bit is None:
                return
            yield bit

    def close(self) -> None:
        self._eof = True
        self._chunk = b""
        self._left = 0

    def __enter__(self) -> "BitReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def iter_bytes_bits(data: bytes) -> Iterator[int]:
    """Bits of an in-memory byte string, MSB-first."""
    for byte in data:
        for i in range(7, -1, -1):
            yield (byte >> i) & 1
