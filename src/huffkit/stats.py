"""Huffman statistics for a raw input file (frequencies, codes, expected size)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path

from huffkit.container import pack_header
from huffkit.core.bitio import iter_file_symbols
from huffkit.core.code_table import CodeTable, build_code_table, encoded_bit_length, format_code
from huffkit.core.frequency import count_frequencies
from huffkit.core.tree import build_huffman_tree, tree_depth
from huffkit.errors import StreamIOError


@dataclass(frozen=True)
class HuffmanStats:
    n: int
    freq: dict[int, int]
    codes: CodeTable
    payload_bits: int
    depth: int
    entropy_bits: float

    @property
    def bits_per_symbol(self) -> float:
        return self.payload_bits / self.n if self.n else 0.0

    def estimated_container_size(self, *, checksum: bool = True) -> int:
        header = pack_header(self.n, self.freq, b"\x00" * 32 if checksum else None)
        return len(header) + (self.payload_bits + 7) // 8


def _entropy(freq: dict[int, int], n: int) -> float:
    if n == 0:
        return 0.0
    h = 0.0
    for f in freq.values():
        p = f / n
        h -= p * math.log2(p)
    return h


def compute_stats(freq: dict[int, int]) -> HuffmanStats:
    n = sum(freq.values())
    root = build_huffman_tree(freq)
    codes = build_code_table(root)
    return HuffmanStats(
        n=n,
        freq=dict(freq),
        codes=codes,
        payload_bits=encoded_bit_length(freq, codes),
        depth=tree_depth(root),
        entropy_bits=_entropy(freq, n),
    )


def stats_for_file(path: Path) -> HuffmanStats:
    p = Path(path)
    try:
        with p.open("rb") as fp:
            freq = count_frequencies(iter_file_symbols(fp))
    except OSError as err:
        raise StreamIOError("stats (read)", p, err.strerror or str(err)) from err
    return compute_stats(freq)


def _sym_label(sym: int) -> str:
    ch = chr(sym)
    if ch.isprintable() and sym < 0x80:
        return repr(ch)
    return f"0x{sym:02x}"


def render_stats(st: HuffmanStats, *, label: str, show_codes: bool = False) -> str:
    lines: list[str] = []
    lines.append(f"=== huffkit stats ({label}) ===")
    lines.append(f"Simboli        : {st.n}")
    lines.append(f"Distinti       : {len(st.freq)}")
    if st.n == 0:
        lines.append("Input vuoto: niente statistiche sensate")
        lines.append("===============================")
        return "\n".join(lines) + "\n"
    lines.append(f"Profondita'    : {st.depth}")
    lines.append(f"Bit/simbolo    : {st.bits_per_symbol:.3f} (entropia {st.entropy_bits:.3f}, 8.0 = non compresso)")
    lines.append(f"Payload        : {st.payload_bits} bit ({(st.payload_bits + 7) // 8} byte)")
    lines.append(f"Container      : ~{st.estimated_container_size()} byte")
    if show_codes:
        lines.append("--- codici ---")
        for sym in sorted(st.codes, key=lambda s: (len(st.codes[s]), s)):
            lines.append(f"{_sym_label(sym):>8} {st.freq[sym]:>10}  {format_code(st.codes[sym])}")
    lines.append("===============================")
    return "\n".join(lines) + "\n"


def format_compress_summary(size_orig: int, size_comp: int, label: str) -> str:
    lines = [f"=== huffkit ({label}) ==="]
    lines.append(f"File originale : {size_orig} byte")
    lines.append(f"File compresso : {size_comp} byte")
    if size_orig == 0:
        lines.append("File originale vuoto: niente statistiche sensate")
    else:
        lines.append(f"Rapporto       : {size_comp / size_orig:.3f} (1.0 = nessuna compressione)")
        lines.append(f"Bit/simbolo    : {(size_comp * 8) / size_orig:.3f} (8.0 = non compresso)")
    lines.append("===============================")
    return "\n".join(lines) + "\n"
