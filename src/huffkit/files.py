"""File-level compress/decompress (HFK container).

Two passes over the input: count (+ sha256), then encode. The output is
written to ``<output>.part`` and moved into place only on success, so a
failed run never leaves an artifact that looks valid.
"""

from __future__ import annotations

import hashlib
import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from huffkit.codec_spec import CodecSpecV1
from huffkit.container import HEADER_MAX, ContainerHeader, pack_header, unpack_header
from huffkit.core.bitio import CHUNK_SIZE_DEFAULT, BitReader, BitWriter, iter_file_symbols
from huffkit.core.code_table import build_code_table, encoded_bit_length
from huffkit.core.codec import decode_bits, encode_symbols, iter_decoded_symbols
from huffkit.core.frequency import count_frequencies
from huffkit.core.tree import build_huffman_tree
from huffkit.errors import HashMismatch, StreamIOError

PART_SUFFIX = ".part"


@dataclass(frozen=True)
class CompressResult:
    input_path: Path
    output_path: Path
    n: int
    distinct: int
    payload_bits: int
    output_size: int
    sha256: str


def _reason(err: OSError) -> str:
    return err.strerror or str(err)


class _InputFile:
    """Read-only view of an open input: tags read errors, optionally hashes."""

    def __init__(self, fp: BinaryIO, path: Path, stage: str, hasher=None):
        self._fp = fp
        self.path = path
        self.stage = stage
        self._hasher = hasher

    def read(self, size: int = -1) -> bytes:
        try:
            chunk = self._fp.read(size)
        except OSError as err:
            raise StreamIOError(f"{self.stage} (read)", self.path, _reason(err)) from err
        if self._hasher is not None and chunk:
            self._hasher.update(chunk)
        return chunk

    def seek(self, offset: int) -> int:
        try:
            return self._fp.seek(offset)
        except OSError as err:
            raise StreamIOError(f"{self.stage} (seek)", self.path, _reason(err)) from err


@contextmanager
def _open_input(path: Path, stage: str, hasher=None) -> Iterator[_InputFile]:
    try:
        fp = path.open("rb")
    except OSError as err:
        raise StreamIOError(f"{stage} (open)", path, _reason(err)) from err
    with fp:
        yield _InputFile(fp, path, stage, hasher)


@contextmanager
def _atomic_output(path: Path, stage: str) -> Iterator[BinaryIO]:
    """Yield a file object on ``<path>.part``; publish on success, remove on failure."""
    tmp = path.with_name(path.name + PART_SUFFIX)
    try:
        fp = tmp.open("wb")
    except OSError as err:
        raise StreamIOError(f"{stage} (open)", tmp, _reason(err)) from err
    ok = False
    try:
        with fp:
            yield fp
        os.replace(tmp, path)
        ok = True
    except OSError as err:
        raise StreamIOError(f"{stage} (write)", path, _reason(err)) from err
    finally:
        if not ok:
            tmp.unlink(missing_ok=True)


def compress_file(
    input_path: str | Path, output_path: str | Path, spec: CodecSpecV1 | None = None
) -> CompressResult:
    if spec is None:
        spec = CodecSpecV1()
    inp = Path(input_path)
    out = Path(output_path)

    # pass 1: frequenze + sha256
    hasher = hashlib.sha256()
    with _open_input(inp, "compress", hasher) as src:
        freq = count_frequencies(iter_file_symbols(src, spec.chunk_size))
    n = sum(freq.values())

    root = build_huffman_tree(freq)
    table = build_code_table(root)
    header = pack_header(n, freq, hasher.digest() if spec.checksum else None)

    # pass 2: bitstream (the input must still be the one counted in pass 1)
    rehash = hashlib.sha256()
    with _atomic_output(out, "compress") as fo:
        fo.write(header)
        with _open_input(inp, "compress", rehash) as src, BitWriter(fo, buffer_size=spec.chunk_size) as w:
            nbits = encode_symbols(iter_file_symbols(src, spec.chunk_size), table, w)
        if nbits != encoded_bit_length(freq, table) or rehash.digest() != hasher.digest():
            raise StreamIOError("compress (read)", inp, "input modificato durante la compressione")
        if spec.verify:
            fo.flush()
            _verify_written(Path(fo.name), hasher.digest())

    return CompressResult(
        input_path=inp,
        output_path=out,
        n=n,
        distinct=len(freq),
        payload_bits=nbits,
        output_size=out.stat().st_size,
        sha256=hasher.hexdigest(),
    )


def _verify_written(tmp: Path, expected_sha: bytes) -> None:
    data = _decode_path(tmp, "compress (verify)")
    if hashlib.sha256(data).digest() != expected_sha:
        raise HashMismatch(f"verifica post-scrittura fallita: {tmp}")


def read_header(fp) -> ContainerHeader:
    """Parse the header and leave ``fp`` positioned on the bitstream."""
    head = fp.read(HEADER_MAX)
    hdr = unpack_header(head)
    fp.seek(hdr.header_len)
    return hdr


def _decode_path(path: Path, stage: str) -> bytes:
    with _open_input(path, stage) as src:
        hdr = read_header(src)
        root = build_huffman_tree(hdr.freq)
        with BitReader(src) as reader:
            data = decode_bits(reader, root, hdr.n)
    if hdr.sha256 is not None and hashlib.sha256(data).digest() != hdr.sha256:
        raise HashMismatch(f"sha256 mismatch: {path}")
    return data


def decompress_bytes_from_file(input_path: str | Path) -> bytes:
    """Decode a container file fully in memory (checks sha256 when stored)."""
    return _decode_path(Path(input_path), "decompress")


def decompress_file(input_path: str | Path, output_path: str | Path) -> int:
    """Decode ``input_path`` into ``output_path``. Return the number of bytes written.

    Streams: symbols are flushed to ``<output>.part`` in chunks and hashed on
    the way, a sha256 mismatch removes the partial output.
    """
    inp = Path(input_path)
    hasher = hashlib.sha256()
    with _open_input(inp, "decompress") as src:
        hdr = read_header(src)
        root = build_huffman_tree(hdr.freq)
        with _atomic_output(Path(output_path), "decompress") as fo, BitReader(src) as reader:
            buf = bytearray()
            for sym in iter_decoded_symbols(reader, root, hdr.n):
                buf.append(sym)
                if len(buf) >= CHUNK_SIZE_DEFAULT:
                    hasher.update(buf)
                    fo.write(buf)
                    buf.clear()
            hasher.update(buf)
            fo.write(buf)
            if hdr.sha256 is not None and hasher.digest() != hdr.sha256:
                raise HashMismatch(f"sha256 mismatch: {inp}")
    return hdr.n
