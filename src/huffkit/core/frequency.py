from __future__ import annotations

from collections.abc import Iterable


def count_frequencies(symbols: Iterable[int]) -> dict[int, int]:
    """Count occurrences of each distinct symbol in a single pass.

    Symbols that never occur are absent from the result (no zero entries).
    Errors raised by the iterable (e.g. OSError from a file-backed source)
    propagate as-is: the partial map is never returned.
    """
    freq: dict[int, int] = {}
    for sym in symbols:
        freq[sym] = freq.get(sym, 0) + 1
    return freq


def freq_to_used(freq: dict[int, int]) -> list[tuple[int, int]]:
    """(sym, count) pairs sorted by symbol, zero counts dropped."""
    return [(sym, f) for sym, f in sorted(freq.items()) if f > 0]


def used_to_freq(used: Iterable[tuple[int, int]]) -> dict[int, int]:
    freq: dict[int, int] = {}
    for sym, f in used:
        if sym < 0 or sym > 0xFF:
            raise ValueError(f"freq_used contiene sym fuori range: {sym}")
        if sym in freq:
            raise ValueError(f"freq_used contiene sym duplicato: {sym}")
        freq[sym] = f
    return freq
