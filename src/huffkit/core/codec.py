from __future__ import annotations

import io
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from huffkit.core.bitio import BitWriter, iter_bytes_bits
from huffkit.core.code_table import CodeTable, build_code_table
from huffkit.core.frequency import count_frequencies
from huffkit.core.tree import HuffmanNode, Leaf, build_huffman_tree, is_sentinel
from huffkit.errors import CorruptPayload, MissingCode


# -------------------
# Encoder
# -------------------
def encode_symbols(symbols: Iterable[int], table: CodeTable, sink: BitWriter) -> int:
    """Write the code word of each symbol, in order. Return bits written.

    A symbol missing from ``table`` raises MissingCode.
    """
    start = sink.bits_written
    for pos, sym in enumerate(symbols):
        code = table.get(sym)
        if code is None:
            raise MissingCode(sym, pos)
        sink.write_bits(code)
    return sink.bits_written - start


# -------------------
# Decoder
# -------------------
def iter_decoded_symbols(bits: Iterable[int], root: HuffmanNode, n_symbols: int) -> Iterator[int]:
    """Walk the tree bit by bit and yield exactly ``n_symbols`` symbols.

    Stopping on the count (not on the bits) is what keeps padding bits of
    the last byte from turning into spurious trailing symbols.
    """
    if n_symbols < 0:
        raise ValueError("n_symbols < 0")
    if n_symbols == 0:
        return
    if isinstance(root, Leaf):
        raise CorruptPayload(f"albero vuoto ma attesi {n_symbols} simboli")

    done = 0
    node: HuffmanNode = root
    for bit in bits:
        node = node.right if bit else node.left
        if isinstance(node, Leaf):
            if is_sentinel(node):
                raise CorruptPayload("bitstream raggiunge la foglia sentinella")
            yield node.symbol
            done += 1
            if done == n_symbols:
                return
            node = root

    raise CorruptPayload(f"bitstream troncato: attesi {n_symbols} simboli, decodificati {done}")


def decode_bits(bits: Iterable[int], root: HuffmanNode, n_symbols: int) -> bytes:
    """Same as iter_decoded_symbols, collected into bytes."""
    return bytes(iter_decoded_symbols(bits, root, n_symbols))


# -------------------
# In-memory helpers
# -------------------
@dataclass(frozen=True)
class EncodedBytes:
    freq: dict[int, int]
    n: int
    nbits: int
    bitstream: bytes

    @property
    def lastbits(self) -> int:
        """Valid bits in the last byte (1..8), 0 for an empty bitstream."""
        if self.nbits == 0:
            return 0
        return self.nbits % 8 or 8


def encode_bytes(data: bytes) -> EncodedBytes:
    """data -> frequencies, tree, codes, bitstream (all in memory)."""
    freq = count_frequencies(data)
    root = build_huffman_tree(freq)
    table = build_code_table(root)
    buf = io.BytesIO()
    with BitWriter(buf) as w:
        nbits = encode_symbols(data, table, w)
    return EncodedBytes(freq=freq, n=len(data), nbits=nbits, bitstream=buf.getvalue())


def decode_bytes(bitstream: bytes, root: HuffmanNode, n_symbols: int) -> bytes:
    return decode_bits(iter_bytes_bits(bitstream), root, n_symbols)


def decode_encoded(enc: EncodedBytes) -> bytes:
    """Inverse of encode_bytes: the tree is re-derived from the stored frequencies."""
    return decode_bytes(enc.bitstream, build_huffman_tree(enc.freq), enc.n)
