from __future__ import annotations

import heapq
import itertools
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Union

# Placeholder symbol for structurally required but empty positions.
# Outside 0..255, so it never collides with a real byte.
SENTINEL_SYMBOL = -1

ALPHABET_SIZE = 256


# -------------------
# Nodi (variante taggata: foglia / interno)
# -------------------
@dataclass(frozen=True, slots=True)
class Leaf:
    symbol: int
    freq: int


@dataclass(frozen=True, slots=True)
class Internal:
    freq: int
    left: "HuffmanNode"
    right: "HuffmanNode"


HuffmanNode = Union[Leaf, Internal]


def node_freq(node: HuffmanNode) -> int:
    """Priority key for the merge heap."""
    return node.freq


def is_sentinel(node: HuffmanNode) -> bool:
    return isinstance(node, Leaf) and node.symbol == SENTINEL_SYMBOL


def _check_freq(freq: Mapping[int, int]) -> list[tuple[int, int]]:
    used: list[tuple[int, int]] = []
    for sym, f in freq.items():
        if not isinstance(sym, int) or sym < 0 or sym >= ALPHABET_SIZE:
            raise ValueError(f"simbolo fuori range: {sym!r}")
        if not isinstance(f, int) or f < 0:
            raise ValueError(f"frequenza non valida per {sym}: {f!r}")
        if f > 0:
            used.append((sym, f))
    # ordine di inserimento = ordine dei simboli -> build deterministico
    used.sort()
    return used


def build_huffman_tree(freq: Mapping[int, int]) -> HuffmanNode:
    """Build the Huffman tree for a frequency map.

    - no symbols: a lone sentinel leaf with frequency 0
    - one symbol: root with the real leaf on the left and a zero-weight
      sentinel leaf on the right, so the symbol gets the 1-bit code ``0``
    - otherwise: greedy merge of the two lightest trees until one is left.
      Ties are broken by insertion order (symbols ascending, then merged
      nodes in creation order), so the same map always gives the same tree.
    """
    used = _check_freq(freq)

    if not used:
        return Leaf(SENTINEL_SYMBOL, 0)

    # Caso speciale: un solo simbolo => aggiungo foglia sentinella
    if len(used) == 1:
        sym, f = used[0]
        return Internal(f, Leaf(sym, f), Leaf(SENTINEL_SYMBOL, 0))

    counter = itertools.count()
    heap: list[tuple[int, int, HuffmanNode]] = []
    for sym, f in used:
        leaf = Leaf(sym, f)
        heapq.heappush(heap, (node_freq(leaf), next(counter), leaf))

    while len(heap) > 1:
        _, _, first = heapq.heappop(heap)
        _, _, second = heapq.heappop(heap)
        parent = Internal(node_freq(first) + node_freq(second), first, second)
        heapq.heappush(heap, (node_freq(parent), next(counter), parent))

    return heap[0][2]


def iter_leaves(root: HuffmanNode) -> Iterator[tuple[Leaf, int]]:
    """Yield (leaf, depth) left to right."""
    stack: list[tuple[HuffmanNode, int]] = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, Leaf):
            yield node, depth
        else:
            stack.append((node.right, depth + 1))
            stack.append((node.left, depth + 1))


def tree_depth(root: HuffmanNode) -> int:
    return max(depth for _, depth in iter_leaves(root))
