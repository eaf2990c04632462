"""Verification of HFK container files.

Policy: light by default (header + bitstream size), --full decodes
everything and checks the stored sha256.
"""

from __future__ import annotations

from pathlib import Path

from huffkit.core.code_table import build_code_table, encoded_bit_length
from huffkit.core.tree import build_huffman_tree
from huffkit.errors import CorruptPayload, StreamIOError
from huffkit.files import decompress_bytes_from_file, read_header


def expected_bitstream_len(freq: dict[int, int]) -> int:
    """Bytes of bitstream the encoder produces for ``freq``."""
    nbits = encoded_bit_length(freq, build_code_table(build_huffman_tree(freq)))
    return (nbits + 7) // 8


def verify_container_file(path: Path, *, full: bool = False) -> None:
    p = Path(path)
    if not p.is_file():
        raise StreamIOError("verify (open)", p, "file non trovato")

    try:
        size = p.stat().st_size
        with p.open("rb") as fp:
            hdr = read_header(fp)
    except OSError as err:
        raise StreamIOError("verify (read)", p, err.strerror or str(err)) from err

    got = size - hdr.header_len
    exp = expected_bitstream_len(hdr.freq)
    if got != exp:
        raise CorruptPayload(f"bitstream di {got} byte, attesi {exp}: {p}")

    if full:
        decompress_bytes_from_file(p)
